"""
Analysis API Router
Proportion analysis, report export and prediction ranking
"""

from fastapi import APIRouter, Query
from fastapi.responses import Response

from faceprop.core.responses import ApiResponse
from faceprop.core.logging import get_logger
from faceprop.models.requests import AnalyzeRequest, PredictionRequest
from faceprop.services.analysis_service import ProportionAnalysisService
from faceprop.services.predictions import format_predictions, rank_predictions

logger = get_logger(__name__)
router = APIRouter()

analysis_service_instance: ProportionAnalysisService = None

MEDIA_TYPES = {"csv": "text/csv", "json": "application/json"}


def set_services(analysis_service: ProportionAnalysisService):
    global analysis_service_instance
    analysis_service_instance = analysis_service


@router.post("")
async def analyze(request: AnalyzeRequest):
    """Compute, score and classify the proportions of one face."""
    report = analysis_service_instance.analyze(request.to_landmark_set(), request.metric_set)
    return ApiResponse.ok(report.model_dump(mode="json"))


@router.post("/export")
async def export_report(
    request: AnalyzeRequest,
    format: str = Query("csv", pattern="^(csv|json)$"),
):
    """Analyze and return the metric list as a CSV or JSON document."""
    text = analysis_service_instance.export(request.to_landmark_set(), format, request.metric_set)
    return Response(
        content=text,
        media_type=MEDIA_TYPES[format],
        headers={"Content-Disposition": f'attachment; filename="face-metrics.{format}"'},
    )


@router.post("/predictions")
async def rank(request: PredictionRequest):
    """Sort a classifier's probability vector, best first."""
    ranked = rank_predictions(request.probabilities, top_k=request.top_k)
    return ApiResponse.ok(
        [p.model_dump() for p in ranked],
        meta={"lines": format_predictions(ranked)},
    )
