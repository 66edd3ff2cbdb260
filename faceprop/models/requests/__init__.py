"""
Request DTOs used by the API routers.
"""

from faceprop.models.requests.analysis import AnalyzeRequest, PredictionRequest
from faceprop.models.requests.registration import AddClassRequest

__all__ = [
    'AnalyzeRequest',
    'PredictionRequest',
    'AddClassRequest',
]
