"""
Doctor Recommendation - Single-Shot LLM Architecture

This module contains the prompt templates, record types and the text
generation capability for the Gemini-based doctor recommendations.

Architecture:
- Pattern: Single-shot LLM (one API call, no tools)
- Model: Gemini 2.5 Flash
- Output: JSON array requested in the prompt, normalized afterwards

The service layer is in:
- doctor_finder/services/recommendation_service.py

Reply normalization is in:
- doctor_finder/services/normalizer.py
"""

from doctor_finder.agents.doctor.generator import (
    GeminiTextGenerator,
    TextGenerator,
    UpstreamGenerationError,
    get_text_generator,
)
from doctor_finder.agents.doctor.prompts import DOCTOR_SYSTEM_PROMPT, build_prompt
from doctor_finder.agents.doctor.types import DoctorRecommendation, ValidationResult

__all__ = [
    "DOCTOR_SYSTEM_PROMPT",
    "build_prompt",
    "DoctorRecommendation",
    "ValidationResult",
    "GeminiTextGenerator",
    "TextGenerator",
    "UpstreamGenerationError",
    "get_text_generator",
]
