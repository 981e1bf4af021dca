"""Nutri-Score point calculation."""

from foodscan.domain.nutrition import NutriScoreBreakdown, NutritionFacts

# Upper bounds (inclusive) for negative components; index is the point value.
_ENERGY_KJ_BOUNDS = (335, 670, 1005, 1340, 1675, 2010, 2345, 2680, 3015, 3350)
_SUGAR_G_BOUNDS = (
    4.5,
    9,
    13.5,
    18,
    22.5,
    27,
    31.5,
    36,
    40.5,
    45,
    50,
    55,
    60,
    63,
    67,
)
_SATURATED_FAT_G_BOUNDS = (1, 2, 3, 4, 5, 6, 7, 8, 9, 10)
_SODIUM_MG_BOUNDS = tuple(90 * step for step in range(1, 21))

# Lower bounds (inclusive) for positive components, highest points first.
_FIBER_G_THRESHOLDS = ((4.7, 5), (3.7, 4), (2.8, 3), (1.9, 2), (0.9, 1))
_PROTEIN_G_THRESHOLDS = ((8.0, 5), (6.4, 4), (4.8, 3), (3.2, 2), (1.6, 1))
_FRUITS_VEGETABLES_NUTS_THRESHOLDS = ((80, 5), (60, 4), (40, 3), (20, 2), (10, 1))

_GRADE_BANDS = ((-1, "A"), (2, "B"), (10, "C"), (18, "D"))


def compute_nutri_score(facts: NutritionFacts | None) -> NutriScoreBreakdown:
    """Compute Nutri-Score points from per-100g nutrient values."""
    if facts is None:
        return NutriScoreBreakdown()

    energy_points = _negative_points(facts.resolved_energy_kj(), _ENERGY_KJ_BOUNDS)
    sugar_points = _negative_points(facts.sugars, _SUGAR_G_BOUNDS)
    saturated_fat_points = _negative_points(
        facts.saturated_fat, _SATURATED_FAT_G_BOUNDS
    )
    salt_points = _negative_points(
        salt_to_sodium_mg(facts.salt), _SODIUM_MG_BOUNDS
    )

    fiber_points = _positive_points(facts.fiber, _FIBER_G_THRESHOLDS)
    protein_points = _positive_points(facts.protein, _PROTEIN_G_THRESHOLDS)
    fruits_vegetables_nuts_points = _positive_points(
        facts.fruits_vegetables_nuts_percentage,
        _FRUITS_VEGETABLES_NUTS_THRESHOLDS,
    )

    return NutriScoreBreakdown(
        negative_points=energy_points
        + sugar_points
        + saturated_fat_points
        + salt_points,
        positive_points=fiber_points + protein_points + fruits_vegetables_nuts_points,
        energy_points=energy_points,
        sugar_points=sugar_points,
        saturated_fat_points=saturated_fat_points,
        salt_points=salt_points,
        fiber_points=fiber_points,
        protein_points=protein_points,
        fruits_vegetables_nuts_points=fruits_vegetables_nuts_points,
    )


def nutri_score_grade(breakdown: NutriScoreBreakdown) -> str:
    """Map a breakdown's score to its A-E letter grade."""
    score = breakdown.score
    for upper_bound, grade in _GRADE_BANDS:
        if score <= upper_bound:
            return grade
    return "E"


def salt_to_sodium_mg(salt_g: float) -> float:
    """Convert grams of salt to milligrams of sodium."""
    # Rounded to drop float noise at band edges.
    return round(salt_g * 1000 / 2.5, 6)


def _negative_points(value: float, bounds: tuple[float, ...]) -> int:
    """Return the index of the first bound the value does not exceed."""
    for points, upper_bound in enumerate(bounds):
        if value <= upper_bound:
            return points
    return len(bounds)


def _positive_points(value: float, thresholds: tuple[tuple[float, int], ...]) -> int:
    for lower_bound, points in thresholds:
        if value >= lower_bound:
            return points
    return 0
