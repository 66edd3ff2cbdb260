"""
Deviation scoring.
Compares metric values against reference ranges and aggregates a 0-100 match score.
"""

from typing import Iterable, List

import numpy as np

from faceprop.models.domain.metric import Metric, ScoredMetric, MetricStatus

# Deviation (%) at which a metric's normalized score reaches zero
DEFAULT_TOLERANCE = 40.0


def deviation_percent(value: float, low: float, high: float) -> float:
    """
    Relative distance (%) from value to the nearer bound; 0 inside [low, high].
    """
    if low <= value <= high:
        return 0.0
    bound = low if value < low else high
    return abs((value - bound) / bound) * 100.0


def normalized_score(deviation: float, tolerance: float = DEFAULT_TOLERANCE) -> float:
    """Linear falloff: 0% deviation scores 1.0, `tolerance`% or more scores 0.0."""
    return float(np.clip(1.0 - deviation / tolerance, 0.0, 1.0))


class DeviationScorer:
    """Scores metrics against their ranges."""

    def __init__(self, tolerance: float = DEFAULT_TOLERANCE):
        if tolerance <= 0:
            raise ValueError("tolerance must be positive")
        self.tolerance = tolerance

    def score(self, metric: Metric) -> ScoredMetric:
        """Attach deviation, normalized score and status to one metric."""
        if metric.range is None:
            return ScoredMetric(**metric.model_dump(), status=MetricStatus.UNRANGED)

        low, high = metric.range.min, metric.range.max
        deviation = deviation_percent(metric.value, low, high)
        if deviation == 0.0:
            status = MetricStatus.WITHIN
        elif metric.value < low:
            status = MetricStatus.BELOW
        else:
            status = MetricStatus.ABOVE

        return ScoredMetric(
            key=metric.key,
            label=metric.label,
            value=metric.value,
            range=metric.range,
            deviation_percent=deviation,
            normalized_score=normalized_score(deviation, self.tolerance),
            status=status,
        )

    def score_all(self, metrics: Iterable[Metric]) -> List[ScoredMetric]:
        return [self.score(m) for m in metrics]

    @staticmethod
    def match_score(scored: Iterable[ScoredMetric]) -> float:
        """
        Mean normalized score scaled to 0-100.
        Metrics without a range do not participate; no scorable metrics gives 0.
        """
        values = [m.normalized_score for m in scored if m.normalized_score is not None]
        if not values:
            return 0.0
        return min(100.0, float(np.mean(values)) * 100.0)
