from dataclasses import dataclass, field
from enum import Enum


class IndicatorType(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"
    METADATA_TAMPERING = "metadata-tampering"
    VISUAL_INCONSISTENCY = "visual-inconsistency"
    TEXT_LAYER_MISMATCH = "text-layer-mismatch"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class Indicator:
    """A single rule finding. Severity runs from 1 (minor) to 10 (severe)."""

    type: IndicatorType
    field: str
    message: str
    severity: int

    def to_dict(self) -> dict[str, object]:
        return {
            "type": self.type.value,
            "field": self.field,
            "message": self.message,
            "severity": self.severity,
        }


@dataclass(frozen=True)
class FraudAssessment:
    """Trust score (0-100, higher is more trustworthy) with its findings."""

    fraud_score: float
    fraud_indicators: list[Indicator] = field(default_factory=list)
    risk_level: RiskLevel = RiskLevel.LOW

    def to_dict(self) -> dict[str, object]:
        return {
            "fraudScore": self.fraud_score,
            "fraudIndicators": [indicator.to_dict() for indicator in self.fraud_indicators],
            "riskLevel": self.risk_level.value,
        }
