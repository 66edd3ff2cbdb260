"""
Rule-based face-shape classification.

The decision list is evaluated top to bottom and the first matching rule
wins. Rules overlap in range; the ordering is what makes them exclusive.
"""

from typing import Iterable, Optional

from pydantic import BaseModel, Field

from faceprop.core.logging import get_logger
from faceprop.models.domain.metric import FaceShape, Metric

logger = get_logger(__name__)

HEIGHT_KEY = "face_height_width"
JAW_KEY = "jaw_width"
FOREHEAD_KEY = "forehead_width"


class ShapeRules(BaseModel):
    """Thresholds of the decision list."""

    long_height: float = Field(1.45, description="H above this -> long")
    heart_margin: float = Field(0.08, description="F above J + margin -> heart")
    angular_jaw: float = Field(0.88, description="J above this -> angular")
    round_height: float = Field(1.15, description="H below this -> round")

    class Config:
        frozen = True


class ShapeClassifier:
    """Classifies a face into one of five coarse shapes from H, J and F ratios."""

    def __init__(self, rules: ShapeRules = None):
        self.rules = rules or ShapeRules()

    def classify(self, height_width: float, jaw_width: float, forehead_width: float) -> FaceShape:
        """
        Args:
            height_width: face height / face width (H)
            jaw_width: jaw width / face width (J)
            forehead_width: forehead width / face width (F)
        """
        r = self.rules
        if height_width > r.long_height:
            return FaceShape.LONG
        if forehead_width > jaw_width + r.heart_margin:
            return FaceShape.HEART
        if jaw_width > r.angular_jaw:
            return FaceShape.ANGULAR
        if height_width < r.round_height:
            return FaceShape.ROUND
        return FaceShape.OVAL

    def classify_metrics(self, metrics: Iterable[Metric]) -> Optional[FaceShape]:
        """Classify from a metric list; None when a required ratio is not in it."""
        values = {m.key: m.value for m in metrics}
        missing = [k for k in (HEIGHT_KEY, JAW_KEY, FOREHEAD_KEY) if k not in values]
        if missing:
            logger.debug(f"Shape classification skipped, missing metrics: {missing}")
            return None
        return self.classify(values[HEIGHT_KEY], values[JAW_KEY], values[FOREHEAD_KEY])
