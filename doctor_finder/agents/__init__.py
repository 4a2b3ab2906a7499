"""
AI Components for the Doctor Finder backend.

Doctor Recommendation (Single-Shot LLM Workflow)
- Uses Gemini through the Google Gen AI SDK to fabricate a JSON array of
  doctor recommendations for a symptom description and a location
- NOT an ADK agent - one prompt, one response, no function calling
- Reply cleanup lives in doctor_finder/services/normalizer.py
"""

from doctor_finder.agents.doctor import (
    GeminiTextGenerator,
    TextGenerator,
    build_prompt,
    get_text_generator,
)

__all__ = [
    "build_prompt",
    "GeminiTextGenerator",
    "TextGenerator",
    "get_text_generator",
]
