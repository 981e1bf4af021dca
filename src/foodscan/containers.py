"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from foodscan.adapters.openfoodfacts_client import HttpxOpenFoodFactsClient
from foodscan.config import Settings
from foodscan.services.assessment import HealthAssessmentService
from foodscan.services.cache import InMemoryCache
from foodscan.services.products import ProductService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    product_service: ProductService
    assessment_service: HealthAssessmentService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    openfoodfacts_client = HttpxOpenFoodFactsClient.create(
        base_url=resolved_settings.openfoodfacts_base_url,
        user_agent=resolved_settings.openfoodfacts_user_agent,
        timeout_seconds=resolved_settings.openfoodfacts_timeout_seconds,
    )
    product_service = ProductService(
        client=openfoodfacts_client,
        cache=InMemoryCache(max_entries=resolved_settings.product_cache_max_entries),
        ttl_seconds=resolved_settings.product_cache_ttl_seconds,
        debug=resolved_settings.debug,
    )
    assessment_service = HealthAssessmentService(debug=resolved_settings.debug)

    async def close_resources() -> None:
        await openfoodfacts_client.close()

    return AppContainer(
        settings=resolved_settings,
        product_service=product_service,
        assessment_service=assessment_service,
        close_resources=close_resources,
    )
