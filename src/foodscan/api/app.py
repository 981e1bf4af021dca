"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict

import httpx
from fastapi import Body, FastAPI, HTTPException, Request, status

from foodscan.api.models import (
    AssessmentRequest,
    HealthProfilePayload,
    NutritionFactsPayload,
)
from foodscan.app_logging import configure_logging
from foodscan.containers import AppContainer, build_container
from foodscan.domain.assessment import AssessmentResult, Finding
from foodscan.domain.nutrition import NutriScoreBreakdown
from foodscan.domain.products import ScannedProduct
from foodscan.services.nutriscore import compute_nutri_score, nutri_score_grade


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.debug)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(title="FoodScan", lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/nutri-score")
    async def nutri_score(facts: NutritionFactsPayload) -> dict[str, object]:
        """Compute Nutri-Score points and grade for raw nutrient values."""
        return _serialize_breakdown(compute_nutri_score(facts.to_domain()))

    @app.post("/assessments")
    async def create_assessment(
        body: AssessmentRequest, request: Request
    ) -> dict[str, object]:
        """Assess a caller-supplied product against a health profile."""
        state_container: AppContainer = request.app.state.container
        result = state_container.assessment_service.assess(
            body.product.to_domain(), body.profile.to_domain()
        )
        return _serialize_assessment(result)

    @app.get("/products/{barcode}")
    async def get_product(barcode: str, request: Request) -> dict[str, object]:
        """Look up a product by barcode."""
        state_container: AppContainer = request.app.state.container
        product = await _lookup_product(state_container, barcode)
        return _serialize_product(product)

    @app.post("/products/{barcode}/assessment")
    async def assess_product(
        barcode: str,
        request: Request,
        profile: HealthProfilePayload | None = Body(default=None),
    ) -> dict[str, object]:
        """Look up a product by barcode and assess it against a profile."""
        state_container: AppContainer = request.app.state.container
        product = await _lookup_product(state_container, barcode)
        resolved_profile = (profile or HealthProfilePayload()).to_domain()
        result = state_container.assessment_service.assess(product, resolved_profile)
        return {
            "product": _serialize_product(product),
            "assessment": _serialize_assessment(result),
        }

    async def _lookup_product(
        state_container: AppContainer, barcode: str
    ) -> ScannedProduct:
        try:
            product = await state_container.product_service.get_product(barcode)
        except httpx.HTTPError as exc:
            logger.exception("Product lookup failed", extra={"barcode": barcode})
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Product database is unavailable.",
            ) from exc
        if product is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"No product found for barcode {barcode}.",
            )
        return product

    return app


def create_default_app() -> FastAPI:
    """Create the app from environment settings, for `uvicorn --factory`."""
    return create_app(build_container())


def _serialize_breakdown(breakdown: NutriScoreBreakdown) -> dict[str, object]:
    return {
        **asdict(breakdown),
        "score": breakdown.score,
        "grade": nutri_score_grade(breakdown),
    }


def _serialize_finding(finding: Finding) -> dict[str, object]:
    return {
        "severity": finding.severity.value,
        "message": finding.message,
        "critical": finding.critical,
    }


def _serialize_assessment(result: AssessmentResult) -> dict[str, object]:
    return {
        "warnings": [_serialize_finding(item) for item in result.warnings],
        "recommendations": [
            _serialize_finding(item) for item in result.recommendations
        ],
        "health_score": result.health_score,
        "verdict": result.verdict.value,
        "verdict_category": result.verdict.category,
        "verdict_message": result.verdict_message,
    }


def _serialize_product(product: ScannedProduct) -> dict[str, object]:
    payload = asdict(product)
    payload["allergens"] = list(product.allergens)
    payload["labels"] = list(product.labels)
    return payload
