"""Product domain models."""

from dataclasses import dataclass, field

from foodscan.domain.nutrition import NutritionFacts

UNKNOWN_GRADE = "unknown"


@dataclass(frozen=True)
class ScannedProduct:
    """Snapshot of a product resolved from a barcode."""

    barcode: str = ""
    name: str = ""
    brand: str = ""
    nutri_score: str = UNKNOWN_GRADE
    nova_group: int = 0
    allergens: tuple[str, ...] = ()
    ingredients_text: str = ""
    nutrition: NutritionFacts = field(default_factory=NutritionFacts)
    image_url: str = ""
    eco_score: str = UNKNOWN_GRADE
    categories: str = ""
    labels: tuple[str, ...] = ()
    serving_size: str = ""
    quantity: str = ""
