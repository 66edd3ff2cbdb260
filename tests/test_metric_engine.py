"""
Tests for MetricEngine and the calibration table.
"""

import json
import math

import pytest

from faceprop.core.exceptions import (
    DegenerateGeometryError,
    LandmarkContractError,
    ValidationError,
)
from faceprop.models.domain.landmarks import Point
from faceprop.models.domain.metric import Range
from faceprop.services.calibration import (
    DEFAULT_CALIBRATION,
    METRIC_SETS,
    load_calibration,
    select_metrics,
    with_ranges,
)
from faceprop.services.metric_engine import MetricEngine

FULL_ORDER = [
    "eye_distance",
    "nose_width",
    "mouth_width",
    "eye_nose_to_nose_mouth",
    "eye_nose_to_mouth_chin",
    "upper_third",
    "middle_third",
    "lower_third",
    "face_height_width",
    "jaw_width",
    "forehead_width",
    "symmetry",
]


class TestCalibrationTable:
    def test_default_order(self):
        assert [d.key for d in DEFAULT_CALIBRATION] == FULL_ORDER

    def test_every_default_metric_has_range(self):
        for d in DEFAULT_CALIBRATION:
            assert d.range is not None
            assert 0 < d.range.min < d.range.max

    def test_metric_sets(self):
        assert len(select_metrics("full")) == 12
        no_symmetry = [d.key for d in select_metrics("no_symmetry")]
        assert "symmetry" not in no_symmetry
        assert len(no_symmetry) == 11
        no_thirds = [d.key for d in select_metrics("no_thirds")]
        assert not {"upper_third", "middle_third", "lower_third"} & set(no_thirds)
        assert len(select_metrics("core")) == 8
        assert set(METRIC_SETS) == {"full", "no_symmetry", "no_thirds", "core"}

    def test_unknown_metric_set(self):
        with pytest.raises(ValidationError):
            select_metrics("everything")

    def test_with_ranges_replaces_only_named(self):
        table = with_ranges({"symmetry": Range(min=0.5, max=1.5)})
        by_key = {d.key: d for d in table}
        assert by_key["symmetry"].range == Range(min=0.5, max=1.5)
        assert by_key["eye_distance"].range == Range(min=0.36, max=0.48)

    def test_with_ranges_rejects_unknown_keys(self):
        with pytest.raises(ValidationError):
            with_ranges({"ear_size": Range(min=1, max=2)})

    def test_load_calibration_file(self, tmp_path):
        path = tmp_path / "ranges.json"
        path.write_text(json.dumps({
            "eye_distance": [0.30, 0.50],
            "jaw_width": {"min": 0.6, "max": 0.8},
        }))
        by_key = {d.key: d for d in load_calibration(str(path))}
        assert by_key["eye_distance"].range.min == 0.30
        assert by_key["jaw_width"].range.max == 0.8

    def test_load_calibration_none_is_default(self):
        assert load_calibration(None) is DEFAULT_CALIBRATION

    def test_load_calibration_bad_range(self, tmp_path):
        path = tmp_path / "ranges.json"
        path.write_text(json.dumps({"eye_distance": [0.5, 0.3]}))
        with pytest.raises(ValidationError):
            load_calibration(str(path))

    def test_load_calibration_missing_file(self, tmp_path):
        with pytest.raises(ValidationError):
            load_calibration(str(tmp_path / "absent.json"))


class TestMetricEngine:
    def test_full_set_in_order_and_finite(self, face_landmarks):
        metrics = MetricEngine().compute(face_landmarks)
        assert [m.key for m in metrics] == FULL_ORDER
        assert all(math.isfinite(m.value) for m in metrics)

    def test_known_values(self, face_landmarks):
        values = {m.key: m.value for m in MetricEngine().compute(face_landmarks)}
        assert values["eye_distance"] == pytest.approx(0.40)
        assert values["nose_width"] == pytest.approx(0.20)
        assert values["mouth_width"] == pytest.approx(0.40)
        assert values["eye_nose_to_nose_mouth"] == pytest.approx(1.0)
        assert values["eye_nose_to_mouth_chin"] == pytest.approx(1.0)
        assert values["upper_third"] == pytest.approx(1 / 3)
        assert values["middle_third"] == pytest.approx(1 / 3)
        assert values["lower_third"] == pytest.approx(1 / 3)
        assert values["face_height_width"] == pytest.approx(math.sqrt(40 ** 2 + 250 ** 2) / 200)
        assert values["jaw_width"] == pytest.approx(0.80)
        assert values["forehead_width"] == pytest.approx(0.75)
        assert values["symmetry"] == pytest.approx(1.0)

    def test_all_in_range_for_reference_face(self, face_landmarks):
        for m in MetricEngine().compute(face_landmarks):
            assert m.range.contains(m.value), m.key

    def test_thirds_sum_to_one(self, make_landmarks):
        # Move the chin down so the thirds are uneven
        landmarks = make_landmarks({8: (100, 330)})
        values = {m.key: m.value for m in MetricEngine().compute(landmarks)}
        total = values["upper_third"] + values["middle_third"] + values["lower_third"]
        assert total == pytest.approx(1.0)
        assert values["lower_third"] > values["upper_third"]

    def test_scale_invariant(self, face_points):
        from faceprop.models.domain.landmarks import LandmarkSet

        base = MetricEngine().compute(LandmarkSet.from_points(face_points))
        scaled = MetricEngine().compute(
            LandmarkSet.from_points([(x * 2.5 + 40, y * 2.5 + 10) for x, y in face_points])
        )
        for a, b in zip(base, scaled):
            assert a.value == pytest.approx(b.value)

    def test_metric_set_override(self, face_landmarks):
        engine = MetricEngine(metric_set="core")
        assert len(engine.compute(face_landmarks)) == 8
        assert len(engine.compute(face_landmarks, "full")) == 12

    def test_invalid_default_metric_set(self):
        with pytest.raises(ValidationError):
            MetricEngine(metric_set="nope")

    def test_zero_face_width_is_error(self, make_landmarks):
        landmarks = make_landmarks({16: (0, 100)})
        with pytest.raises(DegenerateGeometryError):
            MetricEngine().compute(landmarks)

    def test_zero_vertical_segment_uses_fallback(self, make_landmarks):
        # Mouth center on the nose tip line: nose-mouth span is zero
        landmarks = make_landmarks({51: (100, 180), 57: (100, 180)})
        values = {m.key: m.value for m in MetricEngine().compute(landmarks)}
        assert values["eye_nose_to_nose_mouth"] == pytest.approx(60.0)
        assert values["middle_third"] == pytest.approx(0.0)

    def test_short_group_is_contract_error(self, face_landmarks):
        broken = face_landmarks.model_copy(update={"mouth": face_landmarks.mouth[:5]})
        with pytest.raises(LandmarkContractError):
            MetricEngine().compute(broken)

    def test_short_nose_is_contract_error(self, face_landmarks):
        broken = face_landmarks.model_copy(update={"nose": face_landmarks.nose[:4]})
        with pytest.raises(LandmarkContractError) as exc_info:
            MetricEngine().compute(broken)
        assert "nose" in exc_info.value.message

    def test_short_right_eyebrow_is_contract_error(self, face_landmarks):
        broken = face_landmarks.model_copy(update={"right_eyebrow": face_landmarks.right_eyebrow[:3]})
        with pytest.raises(LandmarkContractError) as exc_info:
            MetricEngine().compute(broken)
        assert "right_eyebrow" in exc_info.value.message

    def test_short_jaw_is_contract_error(self, face_landmarks):
        broken = face_landmarks.model_copy(update={"jaw_outline": face_landmarks.jaw_outline[:12]})
        with pytest.raises(LandmarkContractError):
            MetricEngine().compute(broken)

    def test_engine_usable_after_failure(self, make_landmarks, face_landmarks):
        engine = MetricEngine()
        with pytest.raises(DegenerateGeometryError):
            engine.compute(make_landmarks({16: (0, 100)}))
        assert len(engine.compute(face_landmarks)) == 12

    def test_points_are_immutable(self):
        p = Point(x=1, y=2)
        with pytest.raises(Exception):
            p.x = 5
