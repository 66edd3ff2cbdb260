"""
Reference geometry of one face and the ratio formulas built on it.

FaceFrame resolves the handful of anchor points every formula needs
(face width, eye centers, vertical landmarks) once per analysis, so the
calibration table can reference formulas as plain functions.
"""

from dataclasses import dataclass

from faceprop.core.exceptions import DegenerateGeometryError, LandmarkContractError
from faceprop.models.domain.landmarks import Point, LandmarkSet
from faceprop.services.geometry import distance, midpoint, safe_divide, vertical_span

# Highest index read by any formula, plus one
MIN_GROUP_SIZES = {
    "jaw_outline": 17,
    "left_eyebrow": 5,
    "right_eyebrow": 5,
    "nose": 6,
    "left_eye": 4,
    "right_eye": 4,
    "mouth": 10,
}


@dataclass(frozen=True)
class FaceFrame:
    """Anchor points and spans derived from a LandmarkSet."""
    landmarks: LandmarkSet
    face_width: float
    left_eye_center: Point
    right_eye_center: Point
    eye_line_y: float
    nose_tip_y: float
    mouth_center_y: float
    chin: Point
    brow_top: Point
    midline_x: float

    @classmethod
    def from_landmarks(cls, landmarks: LandmarkSet) -> "FaceFrame":
        """
        Resolve anchors. Raises DegenerateGeometryError when the face width
        is zero and LandmarkContractError when a group is too short.
        """
        for group, size in MIN_GROUP_SIZES.items():
            found = len(getattr(landmarks, group))
            if found < size:
                raise LandmarkContractError(f"{group} has {found} points, expected at least {size}")

        try:
            jaw = landmarks.jaw_outline
            face_width = distance(jaw[0], jaw[16])

            left_eye_center = midpoint(landmarks.left_eye[0], landmarks.left_eye[3])
            right_eye_center = midpoint(landmarks.right_eye[0], landmarks.right_eye[3])
            mouth_center = midpoint(landmarks.mouth[3], landmarks.mouth[9])
            nose_tip = landmarks.nose[3]
            chin = jaw[8]
            brow_top = min(landmarks.eyebrows, key=lambda p: p.y)
            midline_x = (jaw[0].x + jaw[16].x) / 2.0
        except (IndexError, ValueError) as e:
            raise LandmarkContractError(str(e)) from e

        if face_width == 0:
            raise DegenerateGeometryError("face width (jaw[0] to jaw[16]) is zero", metric="face_width")

        return cls(
            landmarks=landmarks,
            face_width=face_width,
            left_eye_center=left_eye_center,
            right_eye_center=right_eye_center,
            eye_line_y=(left_eye_center.y + right_eye_center.y) / 2.0,
            nose_tip_y=nose_tip.y,
            mouth_center_y=mouth_center.y,
            chin=chin,
            brow_top=brow_top,
            midline_x=midline_x,
        )

    # Vertical segments (absolute pixel lengths)

    @property
    def eye_to_nose(self) -> float:
        return vertical_span(self.eye_line_y, self.nose_tip_y)

    @property
    def nose_to_mouth(self) -> float:
        return vertical_span(self.nose_tip_y, self.mouth_center_y)

    @property
    def mouth_to_chin(self) -> float:
        return vertical_span(self.mouth_center_y, self.chin.y)

    @property
    def thirds_total(self) -> float:
        return self.eye_to_nose + self.nose_to_mouth + self.mouth_to_chin


# ============================================================
# Ratio formulas
# ============================================================

def eye_distance(frame: FaceFrame) -> float:
    return distance(frame.left_eye_center, frame.right_eye_center) / frame.face_width


def nose_width(frame: FaceFrame) -> float:
    nose = frame.landmarks.nose
    return distance(nose[3], nose[5]) / frame.face_width


def mouth_width(frame: FaceFrame) -> float:
    mouth = frame.landmarks.mouth
    return distance(mouth[0], mouth[6]) / frame.face_width


def eye_nose_to_nose_mouth(frame: FaceFrame) -> float:
    return safe_divide(frame.eye_to_nose, frame.nose_to_mouth)


def eye_nose_to_mouth_chin(frame: FaceFrame) -> float:
    return safe_divide(frame.eye_to_nose, frame.mouth_to_chin)


def upper_third(frame: FaceFrame) -> float:
    return safe_divide(frame.eye_to_nose, frame.thirds_total)


def middle_third(frame: FaceFrame) -> float:
    return safe_divide(frame.nose_to_mouth, frame.thirds_total)


def lower_third(frame: FaceFrame) -> float:
    return safe_divide(frame.mouth_to_chin, frame.thirds_total)


def face_height_width(frame: FaceFrame) -> float:
    return distance(frame.brow_top, frame.chin) / frame.face_width


def jaw_width(frame: FaceFrame) -> float:
    jaw = frame.landmarks.jaw_outline
    return distance(jaw[4], jaw[12]) / frame.face_width


def forehead_width(frame: FaceFrame) -> float:
    return distance(frame.landmarks.left_eyebrow[0], frame.landmarks.right_eyebrow[4]) / frame.face_width


def symmetry(frame: FaceFrame) -> float:
    """Left eye to midline over right eye to midline, measured at each eye's height."""
    left = frame.left_eye_center
    right = frame.right_eye_center
    left_span = distance(left, Point(x=frame.midline_x, y=left.y))
    right_span = distance(right, Point(x=frame.midline_x, y=right.y))
    return safe_divide(left_span, right_span)
