"""Health assessment domain models."""

from dataclasses import dataclass
from enum import StrEnum


class Severity(StrEnum):
    """Severity of an assessment finding."""

    DANGER = "danger"
    WARNING = "warning"
    SUCCESS = "success"


class Verdict(StrEnum):
    """Overall verdict tiers, listed in precedence order."""

    DANGER = "danger"
    POOR = "poor"
    CAUTION_HIGH = "caution-high"
    CAUTION_LOW = "caution-low"
    SUCCESS_HIGH = "success-high"
    SUCCESS_LOW = "success-low"
    NEUTRAL = "neutral"

    @property
    def category(self) -> str:
        """Coarse class of the verdict: danger, poor, caution or success."""
        if self in {Verdict.CAUTION_HIGH, Verdict.CAUTION_LOW}:
            return "caution"
        if self in {Verdict.SUCCESS_HIGH, Verdict.SUCCESS_LOW, Verdict.NEUTRAL}:
            return "success"
        return self.value


@dataclass(frozen=True)
class Finding:
    """A single warning or recommendation message."""

    severity: Severity
    message: str
    critical: bool = False


@dataclass(frozen=True)
class AssessmentResult:
    """Outcome of assessing a product against a health profile."""

    warnings: tuple[Finding, ...]
    recommendations: tuple[Finding, ...]
    health_score: int
    verdict: Verdict
    verdict_message: str

    @property
    def has_critical(self) -> bool:
        """Return True if any warning is a critical safety violation."""
        return any(finding.critical for finding in self.warnings)
