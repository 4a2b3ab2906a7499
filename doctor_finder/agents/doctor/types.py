"""
Doctor recommendation type definitions.

Typed shapes for the records Gemini is asked to produce and for the
per-record validation report. All types are JSON-serializable.
"""

from typing import List, Optional, TypedDict


class DoctorRecommendation(TypedDict, total=False):
    """
    Single doctor recommendation as decoded from the model reply.

    total=False because the model is untrusted: any key may be absent.
    Which keys are required is defined by REQUIRED_RECOMMENDATION_FIELDS.
    """
    name: str
    specialty: str
    address: str
    phone: str
    rating: float  # expected 1-5
    opening_hours: str
    website: Optional[str]
    map_iframe: str  # embeddable Google Maps <iframe> markup
    additional_notes: str


class ValidationResult(TypedDict):
    """Diagnostics for one element of the decoded array."""
    doctor_index: int
    missing_keys: List[str]
    iframe_valid: bool
    iframe_validation_message: str
    iframe_marker_detected: bool
    iframe_street_view_detected: bool
