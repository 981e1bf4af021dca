"""Nutrition domain models."""

from collections.abc import Mapping
from dataclasses import dataclass, fields

KCAL_TO_KJ = 4.184


@dataclass(frozen=True)
class NutritionFacts:
    """Nutrient values per 100g of product.

    Every field defaults to 0, and missing, negative or non-numeric values
    are stored as 0. Energy may be given in kJ, kcal or both; the kJ value
    wins when both are set.
    """

    energy_kj: float = 0.0
    energy_kcal: float = 0.0
    fat: float = 0.0
    saturated_fat: float = 0.0
    carbohydrates: float = 0.0
    sugars: float = 0.0
    fiber: float = 0.0
    protein: float = 0.0
    salt: float = 0.0
    sodium: float = 0.0
    fruits_vegetables_nuts_percentage: float = 0.0

    def __post_init__(self) -> None:
        for item in fields(self):
            value = _non_negative(getattr(self, item.name))
            object.__setattr__(self, item.name, value)

    def resolved_energy_kj(self) -> float:
        """Return energy in kJ, deriving it from kcal when needed."""
        if self.energy_kj:
            return self.energy_kj
        if self.energy_kcal:
            return self.energy_kcal * KCAL_TO_KJ
        return 0.0

    def resolved_energy_kcal(self) -> float:
        """Return energy in kcal, deriving it from kJ when needed."""
        if self.energy_kcal:
            return self.energy_kcal
        if self.energy_kj:
            return self.energy_kj / KCAL_TO_KJ
        return 0.0

    @classmethod
    def from_mapping(cls, values: Mapping[str, object] | None) -> "NutritionFacts":
        """Build facts from a loose mapping, zeroing anything unusable."""
        if not values:
            return cls()
        return cls(
            **{
                item.name: values.get(item.name)  # type: ignore[misc]
                for item in fields(cls)
            }
        )


@dataclass(frozen=True)
class NutriScoreBreakdown:
    """Point components of a Nutri-Score calculation."""

    negative_points: int = 0
    positive_points: int = 0
    energy_points: int = 0
    sugar_points: int = 0
    saturated_fat_points: int = 0
    salt_points: int = 0
    fiber_points: int = 0
    protein_points: int = 0
    fruits_vegetables_nuts_points: int = 0

    @property
    def score(self) -> int:
        """Return negative points minus positive points."""
        return self.negative_points - self.positive_points


def _non_negative(value: object) -> float:
    if isinstance(value, bool) or value is None:
        return 0.0
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    if number != number or number < 0:  # NaN or negative
        return 0.0
    return number
