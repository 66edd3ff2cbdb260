"""
Metric domain models.
Ratio metrics, their reference ranges and scoring results.
"""

from typing import Optional, List, Dict
from enum import Enum
from pydantic import BaseModel, Field, model_validator


class Range(BaseModel):
    """Reference bounds for a ratio metric."""

    min: float = Field(..., gt=0, description="Lower bound")
    max: float = Field(..., gt=0, description="Upper bound")

    @model_validator(mode="after")
    def _check_order(self) -> "Range":
        if self.min >= self.max:
            raise ValueError(f"Range min ({self.min}) must be below max ({self.max})")
        return self

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max

    def nearest_bound(self, value: float) -> float:
        """Bound closest to an out-of-range value."""
        return self.min if value < self.min else self.max

    class Config:
        frozen = True  # Immutable


class Metric(BaseModel):
    """One computed ratio with its reference range."""

    key: str = Field(..., description="Stable metric identifier")
    label: str = Field(..., description="Human-readable label")
    value: float = Field(..., description="Dimensionless ratio")
    range: Optional[Range] = Field(None, description="Reference range")

    class Config:
        frozen = True


class MetricStatus(str, Enum):
    """Where a value sits relative to its range."""
    WITHIN = "within"
    BELOW = "below"
    ABOVE = "above"
    UNRANGED = "unranged"


class ScoredMetric(Metric):
    """Metric plus deviation and normalized score."""

    deviation_percent: Optional[float] = Field(None, ge=0, description="Distance from nearest bound (%)")
    normalized_score: Optional[float] = Field(None, ge=0, le=1, description="1 = in range, 0 = at/after tolerance")
    status: MetricStatus = Field(MetricStatus.UNRANGED, description="Position relative to range")

    @property
    def in_range(self) -> bool:
        return self.status == MetricStatus.WITHIN

    @property
    def is_scored(self) -> bool:
        return self.normalized_score is not None


class FaceShape(str, Enum):
    """Coarse face-shape categories."""
    LONG = "long"
    HEART = "heart"
    ANGULAR = "angular"
    ROUND = "round"
    OVAL = "oval"


class Prediction(BaseModel):
    """One entry of an external classifier's probability vector."""

    label: str
    probability: float = Field(..., ge=0, le=1, description="Probability as a fraction")

    @property
    def percentage(self) -> float:
        return self.probability * 100


class AnalysisReport(BaseModel):
    """Full result of one proportion analysis."""

    metric_set: str = Field(..., description="Name of the metric selection used")
    metrics: List[ScoredMetric] = Field(default_factory=list)
    match_score: float = Field(0.0, ge=0, le=100, description="Aggregate 0-100 score")
    face_shape: Optional[FaceShape] = Field(None, description="Rule-based shape label")
    summary: List[str] = Field(default_factory=list, description="Human-readable report lines")

    @property
    def out_of_range(self) -> List[ScoredMetric]:
        return [m for m in self.metrics if m.status in (MetricStatus.BELOW, MetricStatus.ABOVE)]

    def values(self) -> Dict[str, float]:
        """Metric values keyed by metric key."""
        return {m.key: m.value for m in self.metrics}
