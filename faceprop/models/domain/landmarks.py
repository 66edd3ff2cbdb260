"""
Landmark domain models.
Points and the 68-point landmark set produced by the external detector.
"""

from typing import List, Sequence, Any
from pydantic import BaseModel, Field

from faceprop.core.exceptions import LandmarkContractError


class Point(BaseModel):
    """2D point in image pixel space."""

    x: float = Field(..., description="X coordinate (pixels)")
    y: float = Field(..., description="Y coordinate (pixels, grows downward)")

    @classmethod
    def coerce(cls, value: Any) -> "Point":
        """Accept a Point, an {x, y} mapping or an (x, y) pair."""
        if isinstance(value, Point):
            return value
        if isinstance(value, dict):
            return cls(x=value["x"], y=value["y"])
        x, y = value[0], value[1]
        return cls(x=x, y=y)

    class Config:
        frozen = True  # Immutable


# Group boundaries of the 68-point model (face-api.js / dlib ordering)
JAW_OUTLINE = slice(0, 17)
LEFT_EYEBROW = slice(17, 22)
RIGHT_EYEBROW = slice(22, 27)
NOSE = slice(27, 36)
LEFT_EYE = slice(36, 42)
RIGHT_EYE = slice(42, 48)
MOUTH = slice(48, 68)

LANDMARK_COUNT = 68


class LandmarkSet(BaseModel):
    """
    Named landmark groups of one detected face.

    Group sizes are fixed by the detector: jaw 17, eyebrows 5, eyes 6,
    nose 9, mouth 20. They are trusted here, not revalidated.
    """

    jaw_outline: List[Point] = Field(..., description="Jaw outline, left to right (17)")
    left_eyebrow: List[Point] = Field(..., description="Left eyebrow (5)")
    right_eyebrow: List[Point] = Field(..., description="Right eyebrow (5)")
    left_eye: List[Point] = Field(..., description="Left eye contour (6)")
    right_eye: List[Point] = Field(..., description="Right eye contour (6)")
    nose: List[Point] = Field(..., description="Nose bridge and base (9)")
    mouth: List[Point] = Field(..., description="Outer and inner lips (20)")

    @classmethod
    def from_points(cls, points: Sequence[Any]) -> "LandmarkSet":
        """
        Split a flat 68-point sequence into named groups.

        Args:
            points: 68 entries, each a Point, {x, y} dict or (x, y) pair

        Returns:
            LandmarkSet
        """
        if len(points) != LANDMARK_COUNT:
            raise LandmarkContractError(f"expected {LANDMARK_COUNT} points, got {len(points)}")
        pts = [Point.coerce(p) for p in points]
        return cls(
            jaw_outline=pts[JAW_OUTLINE],
            left_eyebrow=pts[LEFT_EYEBROW],
            right_eyebrow=pts[RIGHT_EYEBROW],
            nose=pts[NOSE],
            left_eye=pts[LEFT_EYE],
            right_eye=pts[RIGHT_EYE],
            mouth=pts[MOUTH],
        )

    @property
    def eyebrows(self) -> List[Point]:
        """All eyebrow points, left then right."""
        return list(self.left_eyebrow) + list(self.right_eyebrow)

    def to_points(self) -> List[Point]:
        """Flatten back into the 68-point ordering."""
        return (
            list(self.jaw_outline) + list(self.left_eyebrow) + list(self.right_eyebrow)
            + list(self.nose) + list(self.left_eye) + list(self.right_eye)
            + list(self.mouth)
        )
