"""Pydantic models for API request payloads."""

from pydantic import BaseModel, Field

from foodscan.domain.nutrition import NutritionFacts
from foodscan.domain.products import UNKNOWN_GRADE, ScannedProduct
from foodscan.domain.profile import HealthProfile


class NutritionFactsPayload(BaseModel):
    """Per-100g nutrient values; missing values count as 0."""

    energy_kj: float | None = None
    energy_kcal: float | None = None
    fat: float | None = None
    saturated_fat: float | None = None
    carbohydrates: float | None = None
    sugars: float | None = None
    fiber: float | None = None
    protein: float | None = None
    salt: float | None = None
    sodium: float | None = None
    fruits_vegetables_nuts_percentage: float | None = None

    def to_domain(self) -> NutritionFacts:
        return NutritionFacts.from_mapping(self.model_dump())


class HealthProfilePayload(BaseModel):
    """User health profile payload."""

    allergies: list[str] = Field(default_factory=list)
    conditions: list[str] = Field(default_factory=list)
    dietary_restrictions: list[str] = Field(default_factory=list)

    def to_domain(self) -> HealthProfile:
        return HealthProfile.create(
            allergies=self.allergies,
            conditions=self.conditions,
            dietary_restrictions=self.dietary_restrictions,
        )


class ProductPayload(BaseModel):
    """Scanned product payload."""

    barcode: str = ""
    name: str = ""
    brand: str = ""
    nutri_score: str | None = None
    nova_group: int | None = None
    allergens: list[str] = Field(default_factory=list)
    ingredients_text: str | None = None
    nutrition: NutritionFactsPayload = Field(default_factory=NutritionFactsPayload)

    def to_domain(self) -> ScannedProduct:
        return ScannedProduct(
            barcode=self.barcode,
            name=self.name,
            brand=self.brand,
            nutri_score=_grade(self.nutri_score),
            nova_group=self.nova_group or 0,
            allergens=tuple(self.allergens),
            ingredients_text=self.ingredients_text or "",
            nutrition=self.nutrition.to_domain(),
        )


class AssessmentRequest(BaseModel):
    """Request body for assessing a product against a profile."""

    product: ProductPayload
    profile: HealthProfilePayload = Field(default_factory=HealthProfilePayload)


def _grade(raw: str | None) -> str:
    grade = (raw or "").strip().upper()
    return grade if grade in {"A", "B", "C", "D", "E"} else UNKNOWN_GRADE
