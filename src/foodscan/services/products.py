"""Product lookup service backed by Open Food Facts."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from foodscan.adapters.openfoodfacts_client import OpenFoodFactsClient
from foodscan.domain.nutrition import NutritionFacts
from foodscan.domain.products import UNKNOWN_GRADE, ScannedProduct
from foodscan.services.cache import Cache
from foodscan.services.nutriscore import compute_nutri_score, nutri_score_grade

_VALID_GRADES = {"A", "B", "C", "D", "E"}
_VALID_NOVA_GROUPS = {1, 2, 3, 4}

# Field name -> Open Food Facts nutriment keys, in lookup order.
_NUTRIMENT_KEYS = {
    "energy_kj": ("energy-kj_100g", "energy-kj", "energy_100g"),
    "energy_kcal": ("energy-kcal_100g", "energy-kcal"),
    "fat": ("fat_100g", "fat"),
    "saturated_fat": ("saturated-fat_100g", "saturated-fat"),
    "carbohydrates": ("carbohydrates_100g", "carbohydrates"),
    "sugars": ("sugars_100g", "sugars"),
    "fiber": ("fiber_100g", "fiber"),
    "protein": ("proteins_100g", "proteins"),
    "salt": ("salt_100g", "salt"),
    "sodium": ("sodium_100g", "sodium"),
    "fruits_vegetables_nuts_percentage": (
        "fruits-vegetables-nuts_100g",
        "fruits-vegetables-nuts-estimate-from-ingredients_100g",
    ),
}

_logger = logging.getLogger(__name__)


class ProductNotFoundError(Exception):
    """Raised when a barcode is not known to the product database."""

    def __init__(self, barcode: str) -> None:
        super().__init__(f"Product not found: {barcode}")
        self.barcode = barcode


@dataclass
class ProductService:
    """Service for barcode lookups with caching."""

    client: OpenFoodFactsClient
    cache: Cache
    ttl_seconds: int = 3600
    debug: bool = False

    async def get_product(self, barcode: str) -> ScannedProduct | None:
        """Return the product for a barcode, or None if unknown."""
        cache_key = f"off:product:{barcode}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, ScannedProduct):
            return cached

        payload = await self.client.get_product(barcode)
        if payload is None:
            if self.debug:
                _logger.info("Product lookup miss: barcode=%s", barcode)
            return None

        product = map_off_product(payload, barcode)
        self.cache.set(cache_key, product, ttl_seconds=self.ttl_seconds)
        if self.debug:
            _logger.info(
                "Product lookup: barcode=%s grade=%s nova=%s",
                barcode,
                product.nutri_score,
                product.nova_group,
            )
        return product

    async def require_product(self, barcode: str) -> ScannedProduct:
        """Return the product for a barcode or raise ProductNotFoundError."""
        product = await self.get_product(barcode)
        if product is None:
            raise ProductNotFoundError(barcode)
        return product


def map_off_product(payload: Mapping[str, object], barcode: str = "") -> ScannedProduct:
    """Map a raw Open Food Facts product payload to a ScannedProduct."""
    nutriments = payload.get("nutriments")
    nutrition = _extract_nutrition(nutriments if isinstance(nutriments, dict) else {})
    return ScannedProduct(
        barcode=barcode or _text(payload.get("code")),
        name=_text(payload.get("product_name")) or "Unknown Product",
        brand=_text(payload.get("brands")) or "Unknown Brand",
        nutri_score=_resolve_grade(payload.get("nutriscore_grade"), nutrition),
        nova_group=_nova_group(payload.get("nova_group")),
        allergens=_parse_tags(payload.get("allergens_tags"), payload.get("allergens")),
        ingredients_text=_text(payload.get("ingredients_text")),
        nutrition=nutrition,
        image_url=_text(payload.get("image_front_url"))
        or _text(payload.get("image_url")),
        eco_score=_grade(payload.get("ecoscore_grade")) or UNKNOWN_GRADE,
        categories=_text(payload.get("categories")),
        labels=_parse_tags(payload.get("labels_tags"), payload.get("labels")),
        serving_size=_text(payload.get("serving_size")),
        quantity=_text(payload.get("quantity")),
    )


def _extract_nutrition(nutriments: Mapping[str, object]) -> NutritionFacts:
    """Pick per-100g values out of an Open Food Facts nutriments block."""
    values: dict[str, object] = {}
    for field_name, keys in _NUTRIMENT_KEYS.items():
        for key in keys:
            if nutriments.get(key):
                values[field_name] = nutriments[key]
                break
    return NutritionFacts.from_mapping(values)


def _resolve_grade(raw: object, nutrition: NutritionFacts) -> str:
    """Use the published grade, falling back to one computed from nutrition."""
    grade = _grade(raw)
    if grade:
        return grade
    if nutrition == NutritionFacts():
        return UNKNOWN_GRADE
    return nutri_score_grade(compute_nutri_score(nutrition))


def _grade(raw: object) -> str | None:
    grade = _text(raw).upper()
    return grade if grade in _VALID_GRADES else None


def _nova_group(raw: object) -> int:
    try:
        group = int(raw)  # type: ignore[call-overload]
    except (TypeError, ValueError):
        return 0
    return group if group in _VALID_NOVA_GROUPS else 0


def _parse_tags(tags: object, fallback: object) -> tuple[str, ...]:
    """Parse `en:some-tag` lists, or a comma separated fallback string."""
    if isinstance(tags, list) and tags:
        names = []
        for tag in tags:
            name = _text(tag).split(":", 1)[-1].replace("-", " ").strip()
            if name:
                names.append(name[0].upper() + name[1:])
        return tuple(names)
    return tuple(
        chunk.strip() for chunk in _text(fallback).split(",") if chunk.strip()
    )


def _text(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()
