"""
Services package.

Main modules:
- analysis_service.py - ProportionAnalysisService facade

Supporting modules (extracted from the facade):
- geometry.py - Point distance/midpoint helpers and safe_divide
- metric_formulas.py - Per-metric ratio formulas over a FaceFrame
- calibration.py - Metric definitions, reference ranges, metric sets
- metric_engine.py - MetricEngine
- scoring.py - DeviationScorer and match score
- shape_classifier.py - Rule-based face shape
- report_export.py - CSV/JSON export and report lines
- predictions.py - Probability vector ranking

Registration subpackage (services/registration/):
- queue.py - RegistrationQueue
- protocols.py - UploadTransport, LocalStore, ClockSource
"""

from faceprop.services.analysis_service import ProportionAnalysisService
from faceprop.services.metric_engine import MetricEngine
from faceprop.services.scoring import DeviationScorer
from faceprop.services.shape_classifier import ShapeClassifier
from faceprop.services.registration import RegistrationQueue

__all__ = [
    'ProportionAnalysisService',
    'MetricEngine',
    'DeviationScorer',
    'ShapeClassifier',
    'RegistrationQueue',
]
