"""
Report export.
CSV/JSON serializations and human-readable lines for a scored metric list.
All functions are pure; delivering the text is the caller's job.
"""

import csv
import io
import json
from decimal import Decimal
from typing import List, Optional, Sequence

from faceprop.models.domain.metric import FaceShape, MetricStatus, ScoredMetric

CSV_HEADER = ["label", "value", "range_min", "range_max", "deviation_percent"]


def _fixed(value: Optional[float], places: int) -> Optional[Decimal]:
    # Decimal keeps the trailing zeros and is written unquoted by QUOTE_NONNUMERIC
    return None if value is None else Decimal(f"{value:.{places}f}")


def to_csv(metrics: Sequence[ScoredMetric]) -> str:
    """
    One row per metric, in the given order. Labels are always quoted;
    value and range use 2 decimals, deviation 1; missing fields are
    written as empty quoted fields.
    """
    output = io.StringIO()
    csv.writer(output, lineterminator="\n").writerow(CSV_HEADER)

    writer = csv.writer(output, lineterminator="\n", quoting=csv.QUOTE_NONNUMERIC)
    for m in metrics:
        low = m.range.min if m.range else None
        high = m.range.max if m.range else None
        writer.writerow([
            m.label,
            _fixed(m.value, 2),
            _fixed(low, 2),
            _fixed(high, 2),
            _fixed(m.deviation_percent, 1),
        ])
    return output.getvalue()


def to_records(metrics: Sequence[ScoredMetric]) -> List[dict]:
    """Flat dicts with the CSV fields, unrounded."""
    return [
        {
            "label": m.label,
            "value": m.value,
            "range_min": m.range.min if m.range else None,
            "range_max": m.range.max if m.range else None,
            "deviation_percent": m.deviation_percent,
        }
        for m in metrics
    ]


def to_json(metrics: Sequence[ScoredMetric]) -> str:
    """Pretty-printed JSON array of the metric records."""
    return json.dumps(to_records(metrics), indent=2)


def describe(metric: ScoredMetric) -> str:
    """Single report line for a metric."""
    if metric.range is None:
        return f"{metric.label}: {metric.value:.2f}"
    bounds = f"{metric.range.min:.2f}-{metric.range.max:.2f}"
    if metric.status == MetricStatus.WITHIN:
        return f"{metric.label}: {metric.value:.2f} (within {bounds})"
    direction = "below" if metric.status == MetricStatus.BELOW else "above"
    return f"{metric.label}: {metric.value:.2f} ({metric.deviation_percent:.1f}% {direction} {bounds})"


def format_report_lines(
    metrics: Sequence[ScoredMetric],
    match_score: float,
    face_shape: Optional[FaceShape] = None,
) -> List[str]:
    """Human-readable deviation report: one line per metric plus a summary."""
    lines = [describe(m) for m in metrics]
    in_range = sum(1 for m in metrics if m.status == MetricStatus.WITHIN)
    scored = sum(1 for m in metrics if m.is_scored)
    lines.append(f"Match score: {match_score:.1f}/100 ({in_range}/{scored} metrics in range)")
    if face_shape is not None:
        lines.append(f"Face shape: {face_shape.value}")
    return lines
