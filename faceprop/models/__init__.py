"""
Models package - data structures for the application.

Subpackages:
- domain/ - Domain models (landmarks, metrics, registration records)
- requests/ - Request DTOs (API input)
"""

from faceprop.models.domain import (
    Point,
    LandmarkSet,
    Metric,
    ScoredMetric,
    AnalysisReport,
    SampleRecord,
)

__all__ = [
    'Point',
    'LandmarkSet',
    'Metric',
    'ScoredMetric',
    'AnalysisReport',
    'SampleRecord',
]
