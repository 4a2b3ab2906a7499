"""
Health check route for the Doctor Finder backend.

This endpoint is PUBLIC and provides a simple status check for load
balancers, monitoring, and deployment verification. It does not touch
Gemini.
"""

from fastapi import APIRouter

from doctor_finder.schemas.health import HealthResponse
from doctor_finder.utils.logging import get_logger

logger = get_logger(__name__)

# Create router with no prefix (mounted at root level in main.py)
router = APIRouter(tags=["system"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check endpoint",
    description="Returns a simple status indicator for monitoring and load balancing.",
    status_code=200,
)
async def health_check() -> HealthResponse:
    """
    Public health check endpoint.

    Example response:
        {
            "status": "ok",
            "service": "doctor-finder-backend"
        }
    """
    logger.debug("Health check endpoint called")

    return HealthResponse(status="ok")
