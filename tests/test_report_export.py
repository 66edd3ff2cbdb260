"""
Tests for CSV/JSON export and report lines.
"""

import csv
import io
import json

import pytest

from faceprop.models.domain.metric import FaceShape, MetricStatus, Range, ScoredMetric
from faceprop.services.analysis_service import ProportionAnalysisService
from faceprop.services.report_export import (
    CSV_HEADER,
    describe,
    format_report_lines,
    to_csv,
    to_json,
)


def _within():
    return ScoredMetric(
        key="eye_distance",
        label="Eye distance / face width",
        value=0.4,
        range=Range(min=0.36, max=0.48),
        deviation_percent=0.0,
        normalized_score=1.0,
        status=MetricStatus.WITHIN,
    )


def _above():
    return ScoredMetric(
        key="jaw_width",
        label='Jaw "lower" width',
        value=0.99,
        range=Range(min=0.70, max=0.90),
        deviation_percent=10.0,
        normalized_score=0.75,
        status=MetricStatus.ABOVE,
    )


def _unranged():
    return ScoredMetric(key="extra", label="Extra ratio", value=1.234)


class TestCsv:
    def test_header_and_rows(self):
        lines = to_csv([_within(), _above()]).splitlines()
        assert lines[0] == ",".join(CSV_HEADER)
        assert lines[1] == '"Eye distance / face width",0.40,0.36,0.48,0.0'
        assert lines[2] == '"Jaw ""lower"" width",0.99,0.70,0.90,10.0'

    def test_missing_fields_are_empty(self):
        lines = to_csv([_unranged()]).splitlines()
        assert lines[1] == '"Extra ratio",1.23,"","",""'

    def test_empty_list_is_header_only(self):
        assert to_csv([]) == ",".join(CSV_HEADER) + "\n"


class TestJson:
    def test_records(self):
        data = json.loads(to_json([_within(), _unranged()]))
        assert data[0] == {
            "label": "Eye distance / face width",
            "value": 0.4,
            "range_min": 0.36,
            "range_max": 0.48,
            "deviation_percent": 0.0,
        }
        assert data[1]["range_min"] is None
        assert data[1]["deviation_percent"] is None

    def test_pretty_printed(self):
        assert '\n  {' in to_json([_within()])


class TestReportLines:
    def test_describe(self):
        assert describe(_within()) == "Eye distance / face width: 0.40 (within 0.36-0.48)"
        assert describe(_above()) == 'Jaw "lower" width: 0.99 (10.0% above 0.70-0.90)'
        assert describe(_unranged()) == "Extra ratio: 1.23"

    def test_summary_lines(self):
        lines = format_report_lines([_within(), _above()], 87.5, FaceShape.OVAL)
        assert len(lines) == 4
        assert lines[2] == "Match score: 87.5/100 (1/2 metrics in range)"
        assert lines[3] == "Face shape: oval"

    def test_no_shape_line_without_shape(self):
        lines = format_report_lines([_within()], 100.0)
        assert lines[-1].startswith("Match score")


class TestExportRoundTrip:
    def test_csv_parses_back(self, face_landmarks):
        report = ProportionAnalysisService().analyze(face_landmarks)
        rows = list(csv.DictReader(io.StringIO(to_csv(report.metrics))))

        assert [r["label"] for r in rows] == [m.label for m in report.metrics]
        for row, metric in zip(rows, report.metrics):
            assert float(row["value"]) == pytest.approx(metric.value, abs=0.005)
            assert float(row["range_min"]) == pytest.approx(metric.range.min, abs=0.005)
            assert float(row["range_max"]) == pytest.approx(metric.range.max, abs=0.005)
            assert float(row["deviation_percent"]) == pytest.approx(metric.deviation_percent, abs=0.05)

    def test_csv_missing_fields_parse_as_empty(self):
        rows = list(csv.DictReader(io.StringIO(to_csv([_unranged()]))))
        assert rows == [{
            "label": "Extra ratio",
            "value": "1.23",
            "range_min": "",
            "range_max": "",
            "deviation_percent": "",
        }]

    def test_csv_keeps_embedded_quotes(self):
        rows = list(csv.DictReader(io.StringIO(to_csv([_above()]))))
        assert rows[0]["label"] == 'Jaw "lower" width'

    def test_json_parses_back(self, face_landmarks):
        report = ProportionAnalysisService().analyze(face_landmarks)
        records = json.loads(to_json(report.metrics))

        assert [r["label"] for r in records] == [m.label for m in report.metrics]
        for record, metric in zip(records, report.metrics):
            assert record["value"] == pytest.approx(metric.value, abs=0.005)
            assert record["range_min"] == metric.range.min
            assert record["range_max"] == metric.range.max
