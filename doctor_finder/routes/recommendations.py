"""
FastAPI routes for the doctor recommendation endpoint.

Endpoints:
- POST /api/recommend: Doctor recommendations for symptoms + location
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from doctor_finder.agents.doctor.generator import TextGenerator, get_text_generator
from doctor_finder.schemas.recommendations import RecommendationRequest, RecommendationResponse
from doctor_finder.services.recommendation_service import recommend_doctors

logger = logging.getLogger(__name__)

# Create router
router = APIRouter(
    prefix="/api",
    tags=["recommendations"]
)


def _http_status_for(response: RecommendationResponse) -> int:
    """success and warning are both 200; only errors change the status code."""
    if response.status != "error":
        return status.HTTP_200_OK
    if response.error_code == "invalid_request":
        return status.HTTP_400_BAD_REQUEST
    return status.HTTP_500_INTERNAL_SERVER_ERROR


# ============================================================================
# ENDPOINTS
# ============================================================================

@router.post(
    "/recommend",
    response_model=RecommendationResponse,
    status_code=status.HTTP_200_OK,
    summary="Recommend doctors for symptoms near a location",
    description="""
    Asks Gemini for doctor recommendations near the user's location that fit
    the described symptoms.

    **Request body:** `symptoms` and `location` (`userLocation` is accepted too).

    **Responses:**
    - 200 `success`: all records passed validation
    - 200 `warning`: records returned, but some miss required fields or carry
      a broken map iframe (see `debug.validation_results`)
    - 400 `error`: symptoms or location missing
    - 500 `error`: AI service failure or unparseable AI reply

    Recommendations are AI-generated and may be inaccurate; `user_feedback`
    carries the disclaimer to display.
    """,
    responses={
        400: {"model": RecommendationResponse, "description": "Missing symptoms or location"},
        500: {"model": RecommendationResponse, "description": "AI service or parsing failure"},
    },
)
async def recommend_endpoint(
    request: RecommendationRequest,
    generator: Optional[TextGenerator] = Depends(get_text_generator),
) -> JSONResponse:
    """
    Doctor recommendation endpoint.

    - Parse: Pydantic RecommendationRequest (presence checked by the service)
    - Call LLM + normalize: service layer
    - Map output: envelope status/error_code -> HTTP status
    """
    logger.info("POST /api/recommend called")

    response = await recommend_doctors(
        symptoms=request.symptoms,
        location=request.location,
        generator=generator,
    )

    http_status = _http_status_for(response)
    logger.info(f"Returning response with status={response.status}, http_status={http_status}")
    return JSONResponse(status_code=http_status, content=response.model_dump(mode="json"))
