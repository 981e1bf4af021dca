"""Personalized health assessment of scanned products."""

import logging
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass

from foodscan.domain.assessment import AssessmentResult, Finding, Severity, Verdict
from foodscan.domain.nutrition import NutritionFacts
from foodscan.domain.products import ScannedProduct
from foodscan.domain.profile import (
    CELIAC_DISEASE,
    DIABETES,
    HALAL,
    HEART_DISEASE,
    HIGH_CHOLESTEROL,
    HYPERTENSION,
    KOSHER,
    LOW_SODIUM,
    LOW_SUGAR,
    VEGAN,
    VEGETARIAN,
    HealthProfile,
)

CRITICAL_PENALTY = -1000

_NUTRI_SCORE_DELTAS = {"A": 35, "B": 20, "C": -10, "D": -25, "E": -40}
_NOVA_DELTAS = {1: 15, 2: 5, 3: -5, 4: -20}

_GLUTEN_TERMS = ("wheat", "barley", "rye", "gluten")
_MEAT_TERMS = ("meat", "fish", "chicken", "poultry", "beef", "pork", "gelatin")
_ANIMAL_PRODUCT_TERMS = (
    "milk",
    "dairy",
    "cheese",
    "whey",
    "egg",
    "honey",
    "gelatin",
)
_ANIMAL_ALLERGEN_TERMS = ("milk", "egg", "dairy")
_NON_HALAL_TERMS = ("pork", "bacon", "lard", "ham")
_NON_KOSHER_TERMS = ("pork", "shellfish", "shrimp", "prawn", "crab", "lobster")

VERDICT_MESSAGES = {
    Verdict.DANGER: (
        "Do not consume. This product conflicts with your allergies or "
        "dietary requirements."
    ),
    Verdict.POOR: "Not recommended. This product is a poor fit for your profile.",
    Verdict.CAUTION_HIGH: (
        "Significant concerns for your health profile. Consider alternatives."
    ),
    Verdict.CAUTION_LOW: "Consume with caution and in moderation.",
    Verdict.SUCCESS_HIGH: "Excellent choice for your health profile.",
    Verdict.SUCCESS_LOW: "Good choice for your health profile.",
    Verdict.NEUTRAL: "Acceptable for your health profile.",
}

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuleOutcome:
    """Score delta and optional message contributed by a rule."""

    delta: int
    finding: Finding | None = None


Rule = Callable[[ScannedProduct, HealthProfile], Iterable[RuleOutcome]]


def assess(
    product: ScannedProduct, profile: HealthProfile | None = None
) -> AssessmentResult:
    """Assess a product against a user's health profile."""
    resolved_profile = profile or HealthProfile()
    health_score = 0
    warnings: list[Finding] = []
    recommendations: list[Finding] = []
    for rule in RULES:
        for outcome in rule(product, resolved_profile):
            health_score += outcome.delta
            if outcome.finding is None:
                continue
            if outcome.finding.severity is Severity.SUCCESS:
                recommendations.append(outcome.finding)
            else:
                warnings.append(outcome.finding)

    verdict = select_verdict(health_score, warnings, recommendations)
    return AssessmentResult(
        warnings=tuple(warnings),
        recommendations=tuple(recommendations),
        health_score=health_score,
        verdict=verdict,
        verdict_message=VERDICT_MESSAGES[verdict],
    )


def select_verdict(
    health_score: int,
    warnings: list[Finding],
    recommendations: list[Finding],
) -> Verdict:
    """Pick the overall verdict; the first matching tier wins."""
    if any(finding.critical for finding in warnings):
        return Verdict.DANGER
    if health_score < -50:
        return Verdict.POOR
    if health_score < -20 or len(warnings) >= 3:
        return Verdict.CAUTION_HIGH
    if health_score < 0 or len(warnings) > len(recommendations):
        return Verdict.CAUTION_LOW
    if health_score >= 30:
        return Verdict.SUCCESS_HIGH
    if health_score >= 10:
        return Verdict.SUCCESS_LOW
    return Verdict.NEUTRAL


def _allergen_conflicts(
    product: ScannedProduct, profile: HealthProfile
) -> Iterator[RuleOutcome]:
    allergies = [allergy.lower() for allergy in profile.allergies or () if allergy]
    conflicts = [
        allergen
        for allergen in product.allergens or ()
        if allergen
        and any(
            allergy in allergen.lower() or allergen.lower() in allergy
            for allergy in allergies
        )
    ]
    if conflicts:
        yield _critical(
            f"Contains {', '.join(conflicts)} which you're allergic to. "
            "Avoid this product."
        )


def _nutri_score_grade(
    product: ScannedProduct, profile: HealthProfile
) -> Iterator[RuleOutcome]:
    grade = (product.nutri_score or "").strip().upper()
    delta = _NUTRI_SCORE_DELTAS.get(grade)
    if delta is None:
        return
    if grade in {"D", "E"}:
        yield _warning(
            delta, f"Nutri-Score {grade}: poor overall nutritional quality."
        )
    elif grade in {"A", "B"}:
        yield _recommendation(
            delta, f"Nutri-Score {grade}: good overall nutritional quality."
        )
    else:
        yield RuleOutcome(delta)


def _nova_group(
    product: ScannedProduct, profile: HealthProfile
) -> Iterator[RuleOutcome]:
    delta = _NOVA_DELTAS.get(product.nova_group or 0)
    if delta is None:
        return
    if product.nova_group == 4:
        yield _warning(delta, "Ultra-processed food (NOVA 4). Limit consumption.")
    elif product.nova_group == 1:
        yield _recommendation(delta, "Unprocessed or minimally processed (NOVA 1).")
    else:
        yield RuleOutcome(delta)


def _sugar_limits(
    product: ScannedProduct, profile: HealthProfile
) -> Iterator[RuleOutcome]:
    if not (profile.has_condition(DIABETES) or profile.has_restriction(LOW_SUGAR)):
        return
    sugars = _nutrition(product).sugars
    if sugars > 15:
        yield _danger(
            -35,
            f"Very high sugar content ({sugars:.1f}g per 100g). "
            "Not suitable for blood sugar management.",
        )
    elif sugars > 10:
        yield _warning(-20, f"High sugar content ({sugars:.1f}g per 100g).")
    elif sugars > 5:
        yield _warning(
            -10, f"Moderate sugar content ({sugars:.1f}g per 100g). Watch portions."
        )
    else:
        yield _recommendation(15, f"Low sugar content ({sugars:.1f}g per 100g).")


def _sodium_limits(
    product: ScannedProduct, profile: HealthProfile
) -> Iterator[RuleOutcome]:
    if not (
        profile.has_condition(HYPERTENSION) or profile.has_restriction(LOW_SODIUM)
    ):
        return
    sodium_mg = _nutrition(product).sodium * 1000
    if sodium_mg > 600:
        yield _danger(
            -30,
            f"Very high sodium content ({sodium_mg:.0f}mg per 100g). "
            "May raise blood pressure.",
        )
    elif sodium_mg > 400:
        yield _warning(-15, f"High sodium content ({sodium_mg:.0f}mg per 100g).")
    elif sodium_mg > 200:
        yield _warning(-5, f"Moderate sodium content ({sodium_mg:.0f}mg per 100g).")
    else:
        yield _recommendation(
            15,
            f"Low sodium content ({sodium_mg:.0f}mg per 100g). "
            "Good for blood pressure management.",
        )


def _saturated_fat_limits(
    product: ScannedProduct, profile: HealthProfile
) -> Iterator[RuleOutcome]:
    if not profile.has_condition(HIGH_CHOLESTEROL, HEART_DISEASE):
        return
    saturated_fat = _nutrition(product).saturated_fat
    if saturated_fat > 10:
        yield _danger(
            -30,
            f"Very high saturated fat ({saturated_fat:.1f}g per 100g). "
            "Not suitable for heart health.",
        )
    elif saturated_fat > 5:
        yield _warning(
            -15,
            f"High saturated fat ({saturated_fat:.1f}g per 100g). Limit consumption.",
        )
    elif saturated_fat > 2:
        yield RuleOutcome(-5)
    else:
        yield _recommendation(
            10, f"Low saturated fat ({saturated_fat:.1f}g per 100g). Heart friendly."
        )


def _gluten(product: ScannedProduct, profile: HealthProfile) -> Iterator[RuleOutcome]:
    gluten_allergy = any(
        "gluten" in allergy.lower() for allergy in profile.allergies or ()
    )
    if not (profile.has_condition(CELIAC_DISEASE) or gluten_allergy):
        return
    if _mentions(product.ingredients_text, _GLUTEN_TERMS) or _allergen_mentions(
        product, ("gluten",)
    ):
        yield _critical("Contains gluten. Not safe for a gluten-free diet.")


def _vegetarian(
    product: ScannedProduct, profile: HealthProfile
) -> Iterator[RuleOutcome]:
    if profile.has_restriction(VEGETARIAN) and _mentions(
        product.ingredients_text, _MEAT_TERMS
    ):
        yield _critical(
            "Contains meat or fish ingredients. Not suitable for a vegetarian diet."
        )


def _vegan(product: ScannedProduct, profile: HealthProfile) -> Iterator[RuleOutcome]:
    if not profile.has_restriction(VEGAN):
        return
    in_ingredients = _mentions(product.ingredients_text, _ANIMAL_PRODUCT_TERMS)
    if in_ingredients or _allergen_mentions(product, _ANIMAL_ALLERGEN_TERMS):
        yield _critical(
            "Contains animal-derived ingredients. Not suitable for a vegan diet."
        )


def _halal(product: ScannedProduct, profile: HealthProfile) -> Iterator[RuleOutcome]:
    if profile.has_restriction(HALAL) and _mentions(
        product.ingredients_text, _NON_HALAL_TERMS
    ):
        yield _critical("Contains pork-derived ingredients. Not halal.")


def _kosher(product: ScannedProduct, profile: HealthProfile) -> Iterator[RuleOutcome]:
    if profile.has_restriction(KOSHER) and _mentions(
        product.ingredients_text, _NON_KOSHER_TERMS
    ):
        yield _critical("Contains pork or shellfish. Not kosher.")


def _fiber_bonus(
    product: ScannedProduct, profile: HealthProfile
) -> Iterator[RuleOutcome]:
    fiber = _nutrition(product).fiber
    if fiber > 6:
        yield _recommendation(
            15, f"High in fiber ({fiber:.1f}g per 100g). Good for digestive health."
        )
    elif fiber > 3:
        yield _recommendation(8, f"Source of fiber ({fiber:.1f}g per 100g).")


def _protein_bonus(
    product: ScannedProduct, profile: HealthProfile
) -> Iterator[RuleOutcome]:
    protein = _nutrition(product).protein
    if protein > 20:
        yield _recommendation(
            15, f"High in protein ({protein:.1f}g per 100g). Supports muscle health."
        )
    elif protein > 10:
        yield _recommendation(8, f"Good protein source ({protein:.1f}g per 100g).")


RULES: tuple[Rule, ...] = (
    _allergen_conflicts,
    _nutri_score_grade,
    _nova_group,
    _sugar_limits,
    _sodium_limits,
    _saturated_fat_limits,
    _gluten,
    _vegetarian,
    _vegan,
    _halal,
    _kosher,
    _fiber_bonus,
    _protein_bonus,
)


def _nutrition(product: ScannedProduct) -> NutritionFacts:
    return product.nutrition or NutritionFacts()


def _mentions(text: str | None, terms: tuple[str, ...]) -> bool:
    lowered = (text or "").lower()
    return any(term in lowered for term in terms)


def _allergen_mentions(product: ScannedProduct, terms: tuple[str, ...]) -> bool:
    return any(
        _mentions(allergen, terms) for allergen in product.allergens or () if allergen
    )


def _critical(message: str) -> RuleOutcome:
    return RuleOutcome(
        CRITICAL_PENALTY, Finding(Severity.DANGER, message, critical=True)
    )


def _danger(delta: int, message: str) -> RuleOutcome:
    return RuleOutcome(delta, Finding(Severity.DANGER, message))


def _warning(delta: int, message: str) -> RuleOutcome:
    return RuleOutcome(delta, Finding(Severity.WARNING, message))


def _recommendation(delta: int, message: str) -> RuleOutcome:
    return RuleOutcome(delta, Finding(Severity.SUCCESS, message))


@dataclass
class HealthAssessmentService:
    """Service wrapper around the assessment rules."""

    debug: bool = False

    def assess(
        self, product: ScannedProduct, profile: HealthProfile | None = None
    ) -> AssessmentResult:
        """Assess a product and log the outcome when debugging."""
        result = assess(product, profile)
        if self.debug:
            _logger.info(
                "Assessment: barcode=%s verdict=%s score=%s warnings=%s",
                product.barcode,
                result.verdict,
                result.health_score,
                len(result.warnings),
            )
        return result
