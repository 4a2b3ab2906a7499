"""
Logging utilities for the Doctor Finder backend.

Provides standardized logger configuration following privacy rules.

PRIVACY RULES:
- NEVER log API keys or other secrets
- Symptom text is health data: log at most a short prefix of it
- Raw model replies MAY be logged at DEBUG level for prompt/model drift
  analysis (they contain fabricated, not user-provided, data)

Acceptable logging:
- High-level events (e.g., "Calling Gemini", "Stripped code fences")
- Validation summaries (e.g., "Doctor 1 missing keys: ['phone']")
- Error kinds and sanitized error messages
"""

import logging
from typing import Optional


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Get a configured logger for the specified module.

    Args:
        name: Module name (typically __name__)
        level: Optional logging level (defaults to INFO)

    Returns:
        Configured logger instance

    Usage:
        >>> from doctor_finder.utils.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("High-level event occurred")
    """
    logger = logging.getLogger(name)

    if level is None:
        level = logging.INFO

    logger.setLevel(level)

    # Add handler if not already configured (avoid duplicate handlers)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
