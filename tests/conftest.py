"""Shared test fixtures."""

from dataclasses import dataclass, field

import pytest

from foodscan.adapters.openfoodfacts_client import OpenFoodFactsClient
from foodscan.config import Settings
from foodscan.containers import AppContainer
from foodscan.services.assessment import HealthAssessmentService
from foodscan.services.cache import InMemoryCache
from foodscan.services.products import ProductService

NUTELLA_BARCODE = "3017620422003"


def nutella_payload() -> dict[str, object]:
    return {
        "code": NUTELLA_BARCODE,
        "product_name": "Nutella",
        "brands": "Ferrero",
        "nutriscore_grade": "e",
        "ecoscore_grade": "d",
        "nova_group": 4,
        "categories": "Spreads, Sweet spreads",
        "ingredients_text": (
            "Sugar, palm oil, hazelnuts 13%, skimmed milk powder 8.7%, "
            "fat-reduced cocoa 7.4%, emulsifier: lecithins (soya), vanillin"
        ),
        "allergens_tags": ["en:milk", "en:nuts", "en:soybeans"],
        "labels_tags": ["en:no-gluten"],
        "image_front_url": "https://images.example/nutella.jpg",
        "serving_size": "15 g",
        "quantity": "400 g",
        "nutriments": {
            "energy-kj_100g": 2252,
            "energy-kcal_100g": 539,
            "fat_100g": 30.9,
            "saturated-fat_100g": 10.6,
            "carbohydrates_100g": 57.5,
            "sugars_100g": 56.3,
            "fiber_100g": 0,
            "proteins_100g": 6.3,
            "salt_100g": 0.107,
            "sodium_100g": 0.0428,
        },
    }


@dataclass
class FakeOpenFoodFactsClient(OpenFoodFactsClient):
    """Fake Open Food Facts client with in-memory products."""

    products: dict[str, dict[str, object]] = field(
        default_factory=lambda: {NUTELLA_BARCODE: nutella_payload()}
    )
    calls: list[str] = field(default_factory=list)
    error: Exception | None = None
    closed: bool = False

    async def get_product(self, barcode: str) -> dict[str, object] | None:
        self.calls.append(barcode)
        if self.error is not None:
            raise self.error
        return self.products.get(barcode)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def settings() -> Settings:
    return Settings(
        openfoodfacts_base_url="https://off.example/api/v2",
        openfoodfacts_user_agent="FoodScan/test",
    )


@pytest.fixture
def openfoodfacts_client() -> FakeOpenFoodFactsClient:
    return FakeOpenFoodFactsClient()


@pytest.fixture
def container(
    settings: Settings, openfoodfacts_client: FakeOpenFoodFactsClient
) -> AppContainer:
    product_service = ProductService(
        client=openfoodfacts_client,
        cache=InMemoryCache(),
        ttl_seconds=settings.product_cache_ttl_seconds,
    )

    async def close_resources() -> None:
        await openfoodfacts_client.close()

    return AppContainer(
        settings=settings,
        product_service=product_service,
        assessment_service=HealthAssessmentService(),
        close_resources=close_resources,
    )
