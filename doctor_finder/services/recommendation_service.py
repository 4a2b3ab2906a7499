"""
Recommendation Service - Gemini doctor recommendations

This service turns a symptom description and a location into a response
envelope with doctor recommendations fabricated by Gemini.

Flow:
1. Check that symptoms and location are present (no model call otherwise)
2. Build the prompt (doctor_finder/agents/doctor/prompts.py)
3. Call the injected TextGenerator (Gemini in production)
4. Normalize the raw reply (doctor_finder/services/normalizer.py)
5. Map the outcome to RecommendationResponse with fixed user feedback

Errors never escape: every failure becomes an envelope with status "error"
and an error_code the route maps to an HTTP status. No retries are made
against the model.
"""

import logging
from typing import Any, Dict, Optional

from doctor_finder.agents.doctor.generator import TextGenerator
from doctor_finder.agents.doctor.prompts import build_prompt
from doctor_finder.config import settings
from doctor_finder.schemas.recommendations import RecommendationResponse, UserFeedback
from doctor_finder.services.normalizer import ErrorKind, NormalizationResult, normalize_reply

logger = logging.getLogger(__name__)


# =============================================================================
# USER-FACING COPY
# =============================================================================

_MESSAGES = {
    "success": "Doctor recommendations generated successfully.",
    "warning": (
        "Doctor recommendations generated, but with validation issues. Some information "
        "might be missing or incorrect, especially map iframes might be broken."
    ),
    ErrorKind.INVALID_REQUEST: "Missing symptoms or user location in the request.",
    ErrorKind.UPSTREAM_FAILURE: (
        "An error occurred while processing your request and communicating with the AI service."
    ),
    ErrorKind.MALFORMED_REPLY: (
        "Failed to parse doctor recommendations from AI. The AI might have returned an "
        "unexpected format (possibly not a JSON array or with invalid JSON structure)."
    ),
    ErrorKind.UNEXPECTED_SHAPE: (
        "Failed to parse doctor recommendations from AI. The AI response did not have "
        "the expected list of recommendations."
    ),
}

_PARSE_FAILURE_FEEDBACK = UserFeedback(
    disclaimer=(
        "We encountered an issue understanding the AI's response. It seems the AI might not "
        "be returning valid JSON. Please try again or check your input."
    ),
    next_steps=(
        "If the problem persists, consider simplifying your symptoms description or "
        "contacting support, mentioning potential issues with JSON formatting."
    ),
)

_FEEDBACK = {
    "success": UserFeedback(
        disclaimer=(
            "These are AI-generated doctor recommendations for informational purposes only and "
            "should not replace professional medical advice. Always consult with a qualified "
            "healthcare provider for diagnosis and treatment. Please verify all information, "
            "especially map accuracy."
        ),
        next_steps=(
            "Please verify the doctor information for each recommendation, including map "
            "locations and accuracy. Consider reading reviews from other sources, and schedule "
            "appointments through their websites or phones."
        ),
    ),
    "warning": UserFeedback(
        disclaimer=(
            "The doctor recommendations are generated by AI and might contain inaccuracies or "
            "incomplete information, especially map locations may not work correctly. Please "
            "carefully review each recommendation and verify the information before making "
            "decisions."
        ),
        next_steps=(
            "Please carefully review each doctor's information, especially map locations. If "
            "maps are broken, please use addresses to search manually. Validation issues were "
            "detected - see debug info for details."
        ),
    ),
    ErrorKind.INVALID_REQUEST: UserFeedback(
        disclaimer="Please provide both symptoms and your location for doctor recommendations.",
        next_steps=(
            "Ensure your request includes 'symptoms' and 'location' "
            "(or 'userLocation') fields."
        ),
    ),
    ErrorKind.UPSTREAM_FAILURE: UserFeedback(
        disclaimer="There was a problem processing your request. Please try again later.",
        next_steps=(
            "If the issue persists, please contact support and provide details of the "
            "symptoms and location you entered."
        ),
    ),
    ErrorKind.MALFORMED_REPLY: _PARSE_FAILURE_FEEDBACK,
    ErrorKind.UNEXPECTED_SHAPE: _PARSE_FAILURE_FEEDBACK,
}


# =============================================================================
# HELPERS
# =============================================================================

def _preview(text: str, limit: Optional[int] = None) -> str:
    """Truncate text for the debug payload, marking the cut with '...'."""
    if limit is None:
        limit = settings.DEBUG_PREVIEW_CHARS
    return text[:limit] + ("..." if len(text) > limit else "")


def _error_response(kind: ErrorKind, debug: Dict[str, Any]) -> RecommendationResponse:
    return RecommendationResponse(
        status="error",
        message=_MESSAGES[kind],
        recommendation=None,
        error_code=kind.value,
        debug=debug if settings.include_debug_payload() else {},
        user_feedback=_FEEDBACK[kind],
    )


def _response_from_result(result: NormalizationResult, prompt: str) -> RecommendationResponse:
    if not result.ok:
        kind = result.error_kind or ErrorKind.MALFORMED_REPLY
        return _error_response(kind, {
            "gemini_raw_response": result.cleaned_text,
            "parse_error": result.error_message,
        })

    if result.status == "warning":
        logger.warning(
            f"Validation issues in {len(result.warnings)} of "
            f"{len(result.validation_results)} doctor recommendations"
        )
        debug: Dict[str, Any] = {
            "gemini_raw_response": result.cleaned_text,
            "validation_results": result.validation_results,
            "parsed_json": result.records,
        }
    else:
        debug = {
            "gemini_raw_response": _preview(result.cleaned_text),
            "prompt_used": _preview(prompt),
            "validation_results": result.validation_results,
        }

    return RecommendationResponse(
        status=result.status,
        message=_MESSAGES[result.status],
        recommendation=result.records,
        debug=debug if settings.include_debug_payload() else {},
        user_feedback=_FEEDBACK[result.status],
    )


# =============================================================================
# ENTRY POINT
# =============================================================================

async def recommend_doctors(
    symptoms: Optional[str],
    location: Optional[str],
    generator: Optional[TextGenerator],
) -> RecommendationResponse:
    """
    Produce doctor recommendations for a symptom description and a location.

    Args:
        symptoms: User's symptom description (required, non-blank)
        location: User's location (required, non-blank)
        generator: Text generation capability, None if not configured

    Returns:
        RecommendationResponse with status success, warning or error
    """
    symptoms = (symptoms or "").strip()
    location = (location or "").strip()

    if not symptoms or not location:
        logger.info("Rejected recommendation request with missing symptoms or location")
        return _error_response(ErrorKind.INVALID_REQUEST, {})

    logger.info(f"recommend_doctors called, location='{location[:50]}', symptoms='{symptoms[:30]}...'")

    if generator is None:
        logger.error("Text generator not available")
        return _error_response(ErrorKind.UPSTREAM_FAILURE, {
            "error_details": "Recommendation service is not configured. Please contact support.",
        })

    prompt = build_prompt(symptoms, location)

    try:
        raw_text = await generator.generate(prompt)
    except Exception as e:
        logger.error(f"Error during Gemini API call: {e}", exc_info=True)
        return _error_response(ErrorKind.UPSTREAM_FAILURE, {
            "error_details": str(e),
            "error_type": type(e).__name__,
        })

    expected_count = settings.EXPECTED_RECOMMENDATION_COUNT or None
    result = normalize_reply(raw_text, expected_count=expected_count)

    response = _response_from_result(result, prompt)
    logger.info(f"Returning recommendation response with status={response.status}")
    return response
