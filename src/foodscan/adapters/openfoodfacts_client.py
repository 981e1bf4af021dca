"""Open Food Facts product API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class OpenFoodFactsClient(Protocol):
    """Interface for Open Food Facts lookups."""

    async def get_product(self, barcode: str) -> dict[str, object] | None:
        """Return the raw product payload, or None if the barcode is unknown."""


@dataclass
class HttpxOpenFoodFactsClient(OpenFoodFactsClient):
    """HTTPX-backed Open Food Facts client."""

    base_url: str
    user_agent: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 10.0

    @classmethod
    def create(
        cls, base_url: str, user_agent: str, timeout_seconds: float = 10.0
    ) -> "HttpxOpenFoodFactsClient":
        """Create a client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            user_agent=user_agent,
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    async def get_product(self, barcode: str) -> dict[str, object] | None:
        """Fetch a product by barcode."""
        url = f"{self.base_url}/product/{barcode}.json"
        response = await self.http_client.get(
            url,
            headers={"User-Agent": self.user_agent},
            timeout=self.timeout_seconds,
        )
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        response.raise_for_status()
        payload = response.json()
        product = payload.get("product")
        if payload.get("status") != 1 or not isinstance(product, dict):
            return None
        return product

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
