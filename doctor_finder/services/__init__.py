"""
Service layer for the Doctor Finder backend.

Contains the orchestration that:
- Validates request input before any model call
- Builds the prompt and calls the injected text generator
- Normalizes the untrusted model reply into doctor records
- Maps the outcome into the RecommendationResponse envelope

Services act as the glue between routes (HTTP layer) and the Gemini workflow.
"""

from .normalizer import (
    ErrorKind,
    NormalizationResult,
    normalize_reply,
    sanitize_map_iframe,
)
from .recommendation_service import recommend_doctors

__all__ = [
    "ErrorKind",
    "NormalizationResult",
    "normalize_reply",
    "sanitize_map_iframe",
    "recommend_doctors",
]
