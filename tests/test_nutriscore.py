"""Tests for Nutri-Score point calculation."""

from foodscan.domain.nutrition import NutriScoreBreakdown, NutritionFacts
from foodscan.services.nutriscore import (
    compute_nutri_score,
    nutri_score_grade,
    salt_to_sodium_mg,
)


def _points(**values: float) -> NutriScoreBreakdown:
    return compute_nutri_score(NutritionFacts(**values))


def test_missing_facts_return_zero_breakdown() -> None:
    breakdown = compute_nutri_score(None)

    assert breakdown == NutriScoreBreakdown()
    assert breakdown.negative_points == 0
    assert breakdown.positive_points == 0


def test_all_zero_facts_score_zero() -> None:
    breakdown = compute_nutri_score(NutritionFacts())

    assert breakdown.negative_points == 0
    assert breakdown.positive_points == 0
    assert breakdown.score == 0


def test_energy_points_boundaries() -> None:
    assert _points(energy_kj=335).energy_points == 0
    assert _points(energy_kj=336).energy_points == 1
    assert _points(energy_kj=3350).energy_points == 9
    assert _points(energy_kj=3351).energy_points == 10
    assert _points(energy_kj=5000).energy_points == 10


def test_energy_points_monotonic() -> None:
    previous = 0
    for energy_kj in range(0, 4000, 5):
        points = _points(energy_kj=energy_kj).energy_points
        assert points >= previous
        previous = points
    assert previous == 10


def test_energy_derived_from_kcal() -> None:
    assert _points(energy_kcal=80).energy_points == 0
    assert _points(energy_kcal=81).energy_points == 1
    assert _points(energy_kj=300, energy_kcal=1000).energy_points == 0


def test_sugar_points_boundaries() -> None:
    assert _points(sugars=4.5).sugar_points == 0
    assert _points(sugars=4.6).sugar_points == 1
    assert _points(sugars=22.5).sugar_points == 4
    assert _points(sugars=63).sugar_points == 13
    assert _points(sugars=67).sugar_points == 14
    assert _points(sugars=67.1).sugar_points == 15
    assert _points(sugars=100).sugar_points == 15


def test_saturated_fat_points_boundaries() -> None:
    assert _points(saturated_fat=1).saturated_fat_points == 0
    assert _points(saturated_fat=1.1).saturated_fat_points == 1
    assert _points(saturated_fat=8).saturated_fat_points == 7
    assert _points(saturated_fat=10).saturated_fat_points == 9
    assert _points(saturated_fat=10.1).saturated_fat_points == 10


def test_salt_points_use_sodium_milligrams() -> None:
    assert salt_to_sodium_mg(2.5) == 1000
    assert _points(salt=0).salt_points == 0
    assert _points(salt=0.225).salt_points == 0
    assert _points(salt=0.25).salt_points == 1
    assert _points(salt=1.2).salt_points == 5
    # 4.5 g is 1800 mg, the last breakpoint, so it stays at 19; 20 starts above.
    assert _points(salt=4.5).salt_points == 19
    assert _points(salt=5).salt_points == 20
    assert _points(salt=20).salt_points == 20


def test_salt_band_edges_stay_in_lower_band() -> None:
    for step in range(1, 21):
        salt = round(0.225 * step, 3)
        assert _points(salt=salt).salt_points == step - 1, salt


def test_fiber_points_boundaries() -> None:
    assert _points(fiber=0).fiber_points == 0
    assert _points(fiber=0.9).fiber_points == 1
    assert _points(fiber=4.69).fiber_points == 4
    assert _points(fiber=4.7).fiber_points == 5
    assert _points(fiber=12).fiber_points == 5


def test_fiber_points_monotonic() -> None:
    previous = 0
    for tenths in range(0, 80):
        points = _points(fiber=tenths / 10).fiber_points
        assert points >= previous
        previous = points


def test_protein_points_boundaries() -> None:
    assert _points(protein=1.5).protein_points == 0
    assert _points(protein=1.6).protein_points == 1
    assert _points(protein=7.9).protein_points == 4
    assert _points(protein=8.0).protein_points == 5


def test_fruits_vegetables_nuts_points_boundaries() -> None:
    def points(percentage: float) -> int:
        return _points(
            fruits_vegetables_nuts_percentage=percentage
        ).fruits_vegetables_nuts_points

    assert points(9.9) == 0
    assert points(10) == 1
    assert points(59.9) == 3
    assert points(60) == 4
    assert points(80) == 5
    assert points(100) == 5


def test_mixed_product_breakdown() -> None:
    breakdown = _points(
        energy_kcal=250,
        sugars=20,
        saturated_fat=8,
        salt=1.2,
        fiber=2,
        protein=3,
        fruits_vegetables_nuts_percentage=0,
    )

    assert breakdown.energy_points == 3
    assert breakdown.sugar_points == 4
    assert breakdown.saturated_fat_points == 7
    assert breakdown.salt_points == 5
    assert breakdown.fiber_points == 2
    assert breakdown.protein_points == 1
    assert breakdown.fruits_vegetables_nuts_points == 0
    assert breakdown.negative_points == 19
    assert breakdown.positive_points == 3
    assert nutri_score_grade(breakdown) == "D"


def test_grade_bands() -> None:
    def grade(negative: int, positive: int = 0) -> str:
        return nutri_score_grade(
            NutriScoreBreakdown(negative_points=negative, positive_points=positive)
        )

    assert grade(0, 1) == "A"
    assert grade(0) == "B"
    assert grade(2) == "B"
    assert grade(3) == "C"
    assert grade(10) == "C"
    assert grade(11) == "D"
    assert grade(18) == "D"
    assert grade(19) == "E"


def test_from_mapping_zeroes_unusable_values() -> None:
    facts = NutritionFacts.from_mapping(
        {"sugars": "12.5", "salt": None, "fiber": -3, "protein": "n/a", "other": 9}
    )

    assert facts.sugars == 12.5
    assert facts.salt == 0
    assert facts.fiber == 0
    assert facts.protein == 0
    assert NutritionFacts.from_mapping(None) == NutritionFacts()


def test_none_nutrient_values_score_as_zero() -> None:
    facts = NutritionFacts(sugars=None, salt=None)  # type: ignore[arg-type]

    breakdown = compute_nutri_score(facts)

    assert facts.sugars == 0
    assert facts.salt == 0
    assert breakdown.sugar_points == 0
    assert breakdown.salt_points == 0
