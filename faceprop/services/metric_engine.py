"""
Metric engine.
Turns one landmark set into the ordered list of ratio metrics.
"""

from typing import List, Optional, Tuple

import numpy as np

from faceprop.core.logging import get_logger
from faceprop.core.exceptions import DegenerateGeometryError
from faceprop.models.domain.landmarks import LandmarkSet
from faceprop.models.domain.metric import Metric
from faceprop.services.calibration import DEFAULT_CALIBRATION, MetricDefinition, select_metrics
from faceprop.services.metric_formulas import FaceFrame

logger = get_logger(__name__)


class MetricEngine:
    """
    Computes proportion metrics from a LandmarkSet.

    Responsibilities:
        - Resolve the face's reference geometry once per call
        - Evaluate every formula of the selected metric set, in table order
        - Refuse to return undefined (non-finite) ratios

    Scoring and classification live in DeviationScorer and ShapeClassifier.
    """

    def __init__(
        self,
        calibration: Tuple[MetricDefinition, ...] = DEFAULT_CALIBRATION,
        metric_set: str = "full",
    ):
        self.calibration = calibration
        self.metric_set = metric_set
        # Fail fast on a bad default selection
        select_metrics(metric_set, calibration)

    def definitions(self, metric_set: Optional[str] = None) -> List[MetricDefinition]:
        return select_metrics(metric_set or self.metric_set, self.calibration)

    def compute(self, landmarks: LandmarkSet, metric_set: Optional[str] = None) -> List[Metric]:
        """
        Compute all metrics of a metric set.

        Args:
            landmarks: landmark set from the external detector
            metric_set: selection name (defaults to the engine's)

        Returns:
            Metrics in canonical order

        Raises:
            DegenerateGeometryError: zero face width or a non-finite ratio
            LandmarkContractError: a landmark group is shorter than expected
        """
        definitions = self.definitions(metric_set)
        frame = FaceFrame.from_landmarks(landmarks)

        metrics = []
        for definition in definitions:
            value = float(definition.formula(frame))
            if not np.isfinite(value):
                raise DegenerateGeometryError(
                    f"{definition.label} is not finite ({value})",
                    metric=definition.key,
                )
            metrics.append(Metric(
                key=definition.key,
                label=definition.label,
                value=value,
                range=definition.range,
            ))

        logger.debug(f"Computed {len(metrics)} metrics (face width {frame.face_width:.1f}px)")
        return metrics
