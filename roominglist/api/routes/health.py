"""
Health check and monitoring endpoints.
"""
from datetime import datetime
from fastapi import APIRouter, Depends
from ..config import settings
from ..dependencies import get_roster_service
from ..models import HealthResponse
from ..services.roster_service import RosterService


router = APIRouter(prefix="/health", tags=["health"])


@router.get(
    "",
    response_model=HealthResponse,
    summary="Health check endpoint",
    description="Check if the API is running and report the roster load state",
    responses={
        200: {"description": "Service is healthy"}
    }
)
async def health_check(service: RosterService = Depends(get_roster_service)) -> HealthResponse:
    """
    Health check endpoint for monitoring.

    Returns:
        Health status information
    """
    return HealthResponse(
        status="healthy",
        timestamp=datetime.utcnow(),
        version=settings.app_version,
        roster_state=service.state.value
    )
