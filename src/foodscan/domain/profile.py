"""Health profile domain models."""

from collections.abc import Iterable
from dataclasses import dataclass, field

DIABETES = "Diabetes"
HYPERTENSION = "Hypertension"
HEART_DISEASE = "Heart Disease"
CELIAC_DISEASE = "Celiac Disease"
HIGH_CHOLESTEROL = "High Cholesterol"

VEGETARIAN = "Vegetarian"
VEGAN = "Vegan"
HALAL = "Halal"
KOSHER = "Kosher"
LOW_SODIUM = "Low Sodium"
LOW_SUGAR = "Low Sugar"

KNOWN_CONDITIONS = (
    DIABETES,
    HYPERTENSION,
    HEART_DISEASE,
    CELIAC_DISEASE,
    HIGH_CHOLESTEROL,
)
KNOWN_DIETARY_RESTRICTIONS = (
    VEGETARIAN,
    VEGAN,
    HALAL,
    KOSHER,
    LOW_SODIUM,
    LOW_SUGAR,
)


@dataclass(frozen=True)
class HealthProfile:
    """A user's allergies, medical conditions and dietary restrictions."""

    allergies: frozenset[str] = field(default_factory=frozenset)
    conditions: frozenset[str] = field(default_factory=frozenset)
    dietary_restrictions: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def create(
        cls,
        allergies: Iterable[str] | None = None,
        conditions: Iterable[str] | None = None,
        dietary_restrictions: Iterable[str] | None = None,
    ) -> "HealthProfile":
        """Build a profile, dropping blank entries."""
        return cls(
            allergies=_clean(allergies),
            conditions=_clean(conditions),
            dietary_restrictions=_clean(dietary_restrictions),
        )

    def has_condition(self, *names: str) -> bool:
        """Return True if any of the named conditions is present."""
        return _contains_any(self.conditions, names)

    def has_restriction(self, *names: str) -> bool:
        """Return True if any of the named dietary restrictions is present."""
        return _contains_any(self.dietary_restrictions, names)


def _clean(values: Iterable[str] | None) -> frozenset[str]:
    if not values:
        return frozenset()
    return frozenset(value.strip() for value in values if value and value.strip())


def _contains_any(values: frozenset[str] | None, names: tuple[str, ...]) -> bool:
    lowered = {value.strip().lower() for value in values or () if value}
    return any(name.lower() in lowered for name in names)
