"""
Response Normalizer - Gemini reply to validated doctor records

Gemini is asked for a bare JSON array but only promises text. This module
turns that text into a list of DoctorRecommendation records plus a
per-record ValidationResult report.

Pipeline (left to right, stops at the first fatal stage):
1. strip_code_fences    - remove ```json fences or a single backtick pair
2. extract_json_array   - slice from the first '[' to the last ']'
3. decode_json_array    - json.loads
4. check_shape          - must be a list (optionally of an exact length)
5. validate_recommendation - missing keys + map iframe cleanup, never fatal

Stages 1-4 raise NormalizationError; normalize_reply converts it into an
"error" NormalizationResult, so nothing escapes this module.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Literal, Optional, Tuple

from doctor_finder.agents.doctor.types import DoctorRecommendation, ValidationResult
from doctor_finder.utils.constants import (
    MAP_EMBED_CLOSING_TAG,
    MAP_EMBED_PREFIX,
    MAP_FIELD,
    MAP_MARKER_PARAMS,
    MAP_STREET_VIEW_PARAMS,
    REQUIRED_RECOMMENDATION_FIELDS,
)

logger = logging.getLogger(__name__)

# Whole reply is one fenced block, optional language tag (```json, ```JSON, ...)
_CODE_FENCE_PATTERN = re.compile(r'^\s*`{3}[\w+-]*\s*([\s\S]*?)`{3}\s*$')


class ErrorKind(str, Enum):
    """Classified failure of a recommendation request."""
    INVALID_REQUEST = "invalid_request"
    UPSTREAM_FAILURE = "upstream_failure"
    MALFORMED_REPLY = "malformed_reply"
    UNEXPECTED_SHAPE = "unexpected_shape"


class NormalizationError(Exception):
    """Fatal defect in stages 1-4 of the pipeline."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message


@dataclass
class MapIframeCheck:
    """Outcome of sanitize_map_iframe."""
    code: Any
    valid: bool
    message: str
    marker_detected: bool = False
    street_view_detected: bool = False


@dataclass
class NormalizationResult:
    """
    Discriminated result of normalize_reply.

    - success: records, no warnings
    - warning: records returned anyway, validation_results explain the defects
    - error:   records is None, error_kind/error_message say why
    """
    status: Literal["success", "warning", "error"]
    records: Optional[List[DoctorRecommendation]] = None
    validation_results: List[ValidationResult] = field(default_factory=list)
    cleaned_text: str = ""
    error_kind: Optional[ErrorKind] = None
    error_message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status != "error"

    @property
    def warnings(self) -> List[ValidationResult]:
        """Validation entries that caused a warning status."""
        return [r for r in self.validation_results if _has_defect(r)]


# =============================================================================
# STAGES
# =============================================================================

def strip_code_fences(text: str) -> str:
    """
    Remove markdown code fences around the reply.

    A reply that is one fenced block yields its interior. Otherwise a single
    leading and trailing backtick are dropped. The result is always trimmed.
    """
    stripped = text.strip()

    match = _CODE_FENCE_PATTERN.match(stripped)
    if match:
        logger.info("Removed code block markers from Gemini reply")
        return match.group(1).strip()

    if len(stripped) >= 2 and stripped.startswith("`") and stripped.endswith("`"):
        logger.info("Removed single backticks from Gemini reply")
        return stripped[1:-1].strip()

    return stripped


def extract_json_array(text: str) -> str:
    """
    Cut the JSON array out of surrounding prose.

    A reply that is a whole JSON object is returned untouched so that
    check_shape reports it, rather than picking an array nested inside it.

    Raises:
        NormalizationError: MALFORMED_REPLY if the text holds no '['.
    """
    if text.startswith("[") or (text.startswith("{") and text.endswith("}")):
        return text

    start = text.find("[")
    if start == -1:
        raise NormalizationError(
            ErrorKind.MALFORMED_REPLY,
            "No JSON array found in the model reply.",
        )

    end = text.rfind("]")
    if end < start:
        # Unterminated array: let the decoder report it
        return text[start:]

    logger.info("Extracted JSON array from surrounding text")
    return text[start:end + 1]


def decode_json_array(text: str) -> Any:
    """
    Decode the sliced reply.

    Raises:
        NormalizationError: MALFORMED_REPLY carrying the decoder's message,
            also when the value holds lone surrogates (e.g. "\\ud800") that
            cannot be encoded back to UTF-8 for the response.
    """
    try:
        value = json.loads(text)
    except (ValueError, RecursionError) as e:
        raise NormalizationError(ErrorKind.MALFORMED_REPLY, str(e)) from e

    try:
        json.dumps(value, ensure_ascii=False).encode("utf-8")
    except UnicodeEncodeError as e:
        raise NormalizationError(
            ErrorKind.MALFORMED_REPLY,
            f"Reply contains text that is not valid UTF-8: {e.reason}",
        ) from e

    return value


def check_shape(value: Any, expected_count: Optional[int] = None) -> List[Any]:
    """
    Ensure the decoded value is a list, optionally of an exact length.

    Raises:
        NormalizationError: UNEXPECTED_SHAPE
    """
    if not isinstance(value, list):
        raise NormalizationError(
            ErrorKind.UNEXPECTED_SHAPE,
            f"Response is not a JSON array as expected (got {type(value).__name__}).",
        )

    if expected_count is not None and len(value) != expected_count:
        raise NormalizationError(
            ErrorKind.UNEXPECTED_SHAPE,
            f"Expected exactly {expected_count} recommendations, got {len(value)}.",
        )

    return value


def sanitize_map_iframe(value: Any) -> MapIframeCheck:
    """
    Clean up possibly-truncated Google Maps embed markup and classify it.

    Given a string, the returned code is trimmed, has one stray trailing
    double quote removed and always ends with </iframe>. It is valid only if
    it starts with MAP_EMBED_PREFIX; marker and Street View detection are
    reported for valid markup only.
    """
    if not isinstance(value, str):
        return MapIframeCheck(
            code=value,
            valid=False,
            message="iFrame code is not a string.",
        )

    code = value.strip()
    if code.endswith('"'):
        code = code[:-1]
    if not code.endswith(MAP_EMBED_CLOSING_TAG):
        code += MAP_EMBED_CLOSING_TAG

    if not code.startswith(MAP_EMBED_PREFIX):
        return MapIframeCheck(
            code=code,
            valid=False,
            message=(
                f"iFrame code does not start with expected '{MAP_EMBED_PREFIX}' "
                "(even after cleanup)"
            ),
        )

    message = "Basic iframe structure detected (after cleanup)."

    marker_detected = False
    for param, description in MAP_MARKER_PARAMS.items():
        if param in code:
            marker_detected = True
            message += f" - {description}"
            break
    if not marker_detected:
        message += " - No marker parameters found."

    street_view_detected = any(param in code for param in MAP_STREET_VIEW_PARAMS)
    if street_view_detected:
        message += " - Street View parameters detected!"
    else:
        message += " - No Street View parameters detected."

    return MapIframeCheck(
        code=code,
        valid=True,
        message=message,
        marker_detected=marker_detected,
        street_view_detected=street_view_detected,
    )


def validate_recommendation(index: int, record: Any) -> ValidationResult:
    """
    Check one decoded element and repair its map iframe in place.

    Missing keys are listed in schema order. A key present with a null value
    counts as present.
    """
    if not isinstance(record, dict):
        return {
            "doctor_index": index,
            "missing_keys": list(REQUIRED_RECOMMENDATION_FIELDS),
            "iframe_valid": False,
            "iframe_validation_message": "Recommendation is not a JSON object.",
            "iframe_marker_detected": False,
            "iframe_street_view_detected": False,
        }

    missing_keys = [key for key in REQUIRED_RECOMMENDATION_FIELDS if key not in record]

    if MAP_FIELD in record:
        check = sanitize_map_iframe(record[MAP_FIELD])
        record[MAP_FIELD] = check.code
    else:
        check = MapIframeCheck(code=None, valid=False, message="iFrame code is missing.")

    return {
        "doctor_index": index,
        "missing_keys": missing_keys,
        "iframe_valid": check.valid,
        "iframe_validation_message": check.message,
        "iframe_marker_detected": check.marker_detected,
        "iframe_street_view_detected": check.street_view_detected,
    }


def _has_defect(result: ValidationResult) -> bool:
    return bool(result["missing_keys"]) or not result["iframe_valid"]


def _validate_all(
    items: List[Any],
) -> Tuple[List[DoctorRecommendation], List[ValidationResult]]:
    records: List[DoctorRecommendation] = []
    validation_results: List[ValidationResult] = []

    for index, item in enumerate(items):
        result = validate_recommendation(index, item)
        validation_results.append(result)
        if isinstance(item, dict):
            records.append(item)  # type: ignore[arg-type]

        if _has_defect(result):
            logger.warning(
                f"Doctor {index}: missing_keys={result['missing_keys']}, "
                f"iframe_valid={result['iframe_valid']}"
            )

    return records, validation_results


# =============================================================================
# ENTRY POINT
# =============================================================================

def normalize_reply(raw: str, expected_count: Optional[int] = None) -> NormalizationResult:
    """
    Normalize a raw Gemini reply into doctor records.

    Args:
        raw: Text returned by the generation service
        expected_count: Exact number of records required, or None

    Returns:
        NormalizationResult; never raises.
    """
    cleaned_text = strip_code_fences(raw or "")

    try:
        array_text = extract_json_array(cleaned_text)
        items = check_shape(decode_json_array(array_text), expected_count)
    except NormalizationError as e:
        logger.error(f"Failed to normalize Gemini reply ({e.kind.value}): {e.message}")
        logger.debug(f"Reply text causing the failure: {cleaned_text}")
        return NormalizationResult(
            status="error",
            cleaned_text=cleaned_text,
            error_kind=e.kind,
            error_message=e.message,
        )

    records, validation_results = _validate_all(items)
    status: Literal["success", "warning"] = (
        "warning" if any(_has_defect(r) for r in validation_results) else "success"
    )

    logger.info(f"Normalized {len(records)} recommendations with status={status}")

    return NormalizationResult(
        status=status,
        records=records,
        validation_results=validation_results,
        cleaned_text=cleaned_text,
    )
