from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from cricket_scores.schemas import AverageResponse, ChartData, FailureDetail, ScoresResponse
from cricket_scores.services import scores as scores_service
from cricket_scores.services.scores import DataMode, ScoresUnavailable

router = APIRouter()

def _resolve_mode(mode: Optional[DataMode]) -> DataMode:
    return mode or scores_service.default_mode()

def _unavailable(exc: ScoresUnavailable) -> HTTPException:
    failure = exc.failure
    detail = FailureDetail(
        reason=failure.reason,
        status_code=failure.status_code,
        attempts=failure.attempts,
        message=failure.summary,
    )
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=detail.model_dump(mode="json"),
    )

@router.get("/scores", response_model=ScoresResponse)
async def list_scores(mode: Optional[DataMode] = None):
    """All score records for the selected data mode."""
    mode = _resolve_mode(mode)
    try:
        outcome = await scores_service.require_scores(mode)
    except ScoresUnavailable as e:
        raise _unavailable(e)
    return ScoresResponse(mode=mode.value, attempts=outcome.attempts, records=list(outcome.records))

@router.get("/scores/average", response_model=AverageResponse)
async def country_average(
    country: str = Query(..., description="Country name, matched case-insensitively"),
    mode: Optional[DataMode] = None,
):
    """
    Average score for one country.

    `average` is null when the country has no scores; `display` carries
    the two-decimal rendering or 'No data available'.
    """
    if not country.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Country is required"
        )

    try:
        average, display = await scores_service.country_average(_resolve_mode(mode), country)
    except ScoresUnavailable as e:
        raise _unavailable(e)
    return AverageResponse(country=country.strip(), average=average, display=display)

@router.get("/scores/chart", response_model=ChartData)
async def chart_data(mode: Optional[DataMode] = None):
    """Per-country averages in first-seen order, shaped for a line chart."""
    try:
        return await scores_service.chart(_resolve_mode(mode))
    except ScoresUnavailable as e:
        raise _unavailable(e)

@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "Cricket Scores"}
