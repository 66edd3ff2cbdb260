"""
Proportion analysis facade.
Runs engine -> scorer -> classifier and assembles one AnalysisReport.
"""

from typing import Optional

from faceprop.core.logging import get_logger
from faceprop.core.config import Settings
from faceprop.models.domain.landmarks import LandmarkSet
from faceprop.models.domain.metric import AnalysisReport
from faceprop.services.calibration import load_calibration
from faceprop.services.metric_engine import MetricEngine
from faceprop.services.report_export import format_report_lines, to_csv, to_json
from faceprop.services.scoring import DeviationScorer
from faceprop.services.shape_classifier import ShapeClassifier

logger = get_logger(__name__)


class ProportionAnalysisService:
    """
    Facade over the analysis components.

    Each call is independent: a degenerate face raises for that call only
    and leaves the service usable for the next one.
    """

    def __init__(
        self,
        engine: MetricEngine = None,
        scorer: DeviationScorer = None,
        classifier: ShapeClassifier = None,
    ):
        self.engine = engine or MetricEngine()
        self.scorer = scorer or DeviationScorer()
        self.classifier = classifier or ShapeClassifier()

    @classmethod
    def from_settings(cls, settings: Settings) -> "ProportionAnalysisService":
        """Build the service from calibration file, metric set and tolerance settings."""
        engine = MetricEngine(
            calibration=load_calibration(settings.calibration_file),
            metric_set=settings.metric_set,
        )
        return cls(engine=engine, scorer=DeviationScorer(tolerance=settings.score_tolerance))

    def analyze(self, landmarks: LandmarkSet, metric_set: Optional[str] = None) -> AnalysisReport:
        """
        Compute, score and classify one face.

        Raises:
            DegenerateGeometryError, LandmarkContractError, ValidationError
        """
        selected = metric_set or self.engine.metric_set
        metrics = self.engine.compute(landmarks, selected)
        scored = self.scorer.score_all(metrics)
        match = self.scorer.match_score(scored)
        shape = self.classifier.classify_metrics(metrics)

        report = AnalysisReport(
            metric_set=selected,
            metrics=scored,
            match_score=match,
            face_shape=shape,
            summary=format_report_lines(scored, match, shape),
        )
        logger.info(
            f"Analysis complete: {len(scored)} metrics, score {match:.1f}, "
            f"shape {shape.value if shape else 'n/a'}"
        )
        return report

    def export(self, landmarks: LandmarkSet, fmt: str = "csv", metric_set: Optional[str] = None) -> str:
        """Analyze and serialize the metric list as csv or json text."""
        report = self.analyze(landmarks, metric_set)
        if fmt == "json":
            return to_json(report.metrics)
        return to_csv(report.metrics)
