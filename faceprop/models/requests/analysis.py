"""
Analysis request models.
"""

from typing import Optional, List, Dict, Union
from pydantic import BaseModel, Field, model_validator

from faceprop.models.domain.landmarks import Point, LandmarkSet


class AnalyzeRequest(BaseModel):
    """
    Landmarks for one face, either grouped or as a flat 68-point list.
    """

    landmarks: Optional[LandmarkSet] = Field(None, description="Grouped landmark set")
    points: Optional[List[Union[Point, List[float]]]] = Field(
        None, description="Flat 68-point list ({x, y} or [x, y])"
    )
    metric_set: Optional[str] = Field(None, description="Metric selection (defaults to settings)")

    @model_validator(mode="after")
    def _one_source(self) -> "AnalyzeRequest":
        if (self.landmarks is None) == (self.points is None):
            raise ValueError("Provide exactly one of 'landmarks' or 'points'")
        return self

    def to_landmark_set(self) -> LandmarkSet:
        if self.landmarks is not None:
            return self.landmarks
        return LandmarkSet.from_points(self.points)


class PredictionRequest(BaseModel):
    """Probability vector from an external classifier."""

    probabilities: Dict[str, float] = Field(..., min_length=1, description="Label -> probability")
    top_k: Optional[int] = Field(None, ge=1, description="Keep only the best K entries")
