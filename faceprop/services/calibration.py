"""
Calibration table for proportion metrics.

Each entry pairs a stable key and label with its formula and reference
range. Table order is the canonical report/export order. Ranges are
heuristic constants; they can be overridden from a JSON file without
touching the engine.
"""

import json
from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Optional, Tuple

from faceprop.core.logging import get_logger
from faceprop.core.exceptions import ValidationError
from faceprop.models.domain.metric import Range
from faceprop.services import metric_formulas as f

logger = get_logger(__name__)


@dataclass(frozen=True)
class MetricDefinition:
    """One row of the calibration table."""
    key: str
    label: str
    formula: Callable[[f.FaceFrame], float]
    range: Optional[Range] = None


DEFAULT_CALIBRATION: Tuple[MetricDefinition, ...] = (
    MetricDefinition("eye_distance", "Eye distance / face width", f.eye_distance, Range(min=0.36, max=0.48)),
    MetricDefinition("nose_width", "Nose width / face width", f.nose_width, Range(min=0.18, max=0.30)),
    MetricDefinition("mouth_width", "Mouth width / face width", f.mouth_width, Range(min=0.30, max=0.46)),
    MetricDefinition("eye_nose_to_nose_mouth", "Eye-nose / nose-mouth height", f.eye_nose_to_nose_mouth, Range(min=0.80, max=1.20)),
    MetricDefinition("eye_nose_to_mouth_chin", "Eye-nose / mouth-chin height", f.eye_nose_to_mouth_chin, Range(min=0.80, max=1.30)),
    MetricDefinition("upper_third", "Upper third (eye-nose)", f.upper_third, Range(min=0.30, max=0.36)),
    MetricDefinition("middle_third", "Middle third (nose-mouth)", f.middle_third, Range(min=0.30, max=0.36)),
    MetricDefinition("lower_third", "Lower third (mouth-chin)", f.lower_third, Range(min=0.30, max=0.36)),
    MetricDefinition("face_height_width", "Face height / width", f.face_height_width, Range(min=1.15, max=1.45)),
    MetricDefinition("jaw_width", "Jaw width / face width", f.jaw_width, Range(min=0.70, max=0.90)),
    MetricDefinition("forehead_width", "Forehead width / face width", f.forehead_width, Range(min=0.70, max=0.95)),
    MetricDefinition("symmetry", "Left / right symmetry", f.symmetry, Range(min=0.92, max=1.08)),
)

THIRDS_KEYS = frozenset({"upper_third", "middle_third", "lower_third"})
SYMMETRY_KEYS = frozenset({"symmetry"})

# Metric selections used by the different front-end variants
METRIC_SETS: Dict[str, frozenset] = {
    "full": frozenset(),
    "no_symmetry": SYMMETRY_KEYS,
    "no_thirds": THIRDS_KEYS,
    "core": THIRDS_KEYS | SYMMETRY_KEYS,
}


def select_metrics(
    metric_set: str,
    calibration: Tuple[MetricDefinition, ...] = DEFAULT_CALIBRATION,
) -> List[MetricDefinition]:
    """
    Filter the calibration table down to a named metric set, keeping order.

    Raises:
        ValidationError: unknown metric set name
    """
    if metric_set not in METRIC_SETS:
        raise ValidationError(
            f"Unknown metric set '{metric_set}' (expected one of {sorted(METRIC_SETS)})",
            field="metric_set",
        )
    excluded = METRIC_SETS[metric_set]
    return [d for d in calibration if d.key not in excluded]


def with_ranges(
    overrides: Dict[str, Range],
    calibration: Tuple[MetricDefinition, ...] = DEFAULT_CALIBRATION,
) -> Tuple[MetricDefinition, ...]:
    """Return a copy of the table with some reference ranges replaced."""
    unknown = set(overrides) - {d.key for d in calibration}
    if unknown:
        raise ValidationError(f"Unknown metric keys in calibration: {sorted(unknown)}", field="calibration")
    return tuple(
        replace(d, range=overrides[d.key]) if d.key in overrides else d
        for d in calibration
    )


def _parse_range(key: str, raw) -> Range:
    try:
        if isinstance(raw, dict):
            return Range(min=raw["min"], max=raw["max"])
        low, high = raw
        return Range(min=low, max=high)
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Invalid range for '{key}': {e}", field="calibration") from e


def load_calibration(path: Optional[str]) -> Tuple[MetricDefinition, ...]:
    """
    Load range overrides from a JSON file of {key: [min, max]} entries.

    Args:
        path: file path, or None for the built-in table

    Returns:
        Calibration table
    """
    if not path:
        return DEFAULT_CALIBRATION

    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, json.JSONDecodeError) as e:
        raise ValidationError(f"Cannot read calibration file {path}: {e}", field="calibration_file") from e

    if not isinstance(data, dict):
        raise ValidationError("Calibration file must hold a JSON object", field="calibration_file")

    overrides = {key: _parse_range(key, raw) for key, raw in data.items()}
    logger.info(f"Loaded {len(overrides)} calibration overrides from {path}")
    return with_ranges(overrides)
