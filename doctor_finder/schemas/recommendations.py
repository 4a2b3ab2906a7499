"""
Pydantic schemas for the doctor recommendation endpoint.

These models define the request/response contracts for POST /api/recommend.
Recommendation records are passed through as decoded JSON objects because
the model output is untrusted: a record missing a required key is still
returned (with a warning) rather than rejected by response validation.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import AliasChoices, BaseModel, Field

# ============================================================================
# REQUEST MODELS
# ============================================================================

class RecommendationRequest(BaseModel):
    """
    Request for doctor recommendations.

    Both fields are required, but they are declared optional here so that a
    missing value is reported with the 400 response envelope instead of
    FastAPI's generic 422.
    """
    symptoms: Optional[str] = Field(
        None,
        description="Free-text description of the user's symptoms",
        examples=["fever and cough for three days"]
    )
    location: Optional[str] = Field(
        None,
        description="Where the user is (city, neighbourhood or address)",
        validation_alias=AliasChoices("location", "userLocation"),
        examples=["Mumbai", "Andheri West, Mumbai"]
    )


# ============================================================================
# RESPONSE MODELS
# ============================================================================

class UserFeedback(BaseModel):
    """Fixed, user-facing guidance attached to every response."""
    disclaimer: str = Field(
        ...,
        description="Medical/AI disclaimer shown next to the results"
    )
    next_steps: str = Field(
        ...,
        description="What the user should do with the results"
    )


class RecommendationResponse(BaseModel):
    """
    Envelope returned by POST /api/recommend.

    HTTP status mapping:
    - success / warning: 200
    - error with error_code "invalid_request": 400
    - any other error: 500
    """
    status: Literal["success", "warning", "error"] = Field(
        ...,
        description="success: clean records; warning: records with validation issues; error: no records"
    )
    message: str = Field(
        ...,
        description="Human-readable summary of the outcome"
    )
    recommendation: Optional[List[Dict[str, Any]]] = Field(
        None,
        description=(
            "Doctor records (name, specialty, address, phone, rating, "
            "opening_hours, website, map_iframe, additional_notes). "
            "Null when status is error."
        )
    )
    error_code: Optional[Literal[
        "invalid_request",
        "upstream_failure",
        "malformed_reply",
        "unexpected_shape",
    ]] = Field(
        None,
        description="Machine-readable failure kind, only set when status is error"
    )
    debug: Dict[str, Any] = Field(
        default_factory=dict,
        description=(
            "Diagnostics (raw model reply, prompt preview, validation results). "
            "Empty in production unless INCLUDE_DEBUG_PAYLOAD is enabled."
        )
    )
    user_feedback: UserFeedback
