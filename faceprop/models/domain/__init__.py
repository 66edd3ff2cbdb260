"""
Domain models - core business entities.

These are the source of truth for data structures.
All other layers (requests, responses, services) derive from these.
"""

from faceprop.models.domain.landmarks import Point, LandmarkSet
from faceprop.models.domain.metric import (
    Range,
    Metric,
    ScoredMetric,
    MetricStatus,
    FaceShape,
    Prediction,
    AnalysisReport,
)
from faceprop.models.domain.registration import (
    CaptureMethod,
    RegistrationStatus,
    FailureCategory,
    SampleRecord,
    RegistrationResult,
    ClassSummary,
    RetrySummary,
)

__all__ = [
    'Point',
    'LandmarkSet',
    'Range',
    'Metric',
    'ScoredMetric',
    'MetricStatus',
    'FaceShape',
    'Prediction',
    'AnalysisReport',
    'CaptureMethod',
    'RegistrationStatus',
    'FailureCategory',
    'SampleRecord',
    'RegistrationResult',
    'ClassSummary',
    'RetrySummary',
]
