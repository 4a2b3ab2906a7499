"""
Doctor Recommendation Prompt Templates

Contains the system prompt and the prompt builder for the doctor
recommendation flow.

Architecture:
- Pattern: Single-shot LLM call, JSON requested in the prompt
- Model: Gemini 2.5 Flash (configurable via GEMINI_MODEL)
- Output: Free text expected to hold a JSON array; it is normalized by
  doctor_finder/services/normalizer.py because the model does not always
  honor the "no code fences" instruction

Symptoms and location are interpolated verbatim. Nothing here escapes them,
so callers that need prompt-injection mitigation must sanitize first.
"""

# =============================================================================
# SYSTEM PROMPT
# =============================================================================

DOCTOR_SYSTEM_PROMPT = """You are a healthcare professional recommendation system.

<role>
You suggest doctors and clinics near a user's location that are suited to the
symptoms they describe. Your answers are rendered directly by an application,
so they must be machine-readable.
</role>

<output_format>
Always return ONLY a JSON array of doctor objects.
No markdown code blocks, no backticks, no explanatory text.
</output_format>"""


# =============================================================================
# PROMPT BUILDER
# =============================================================================

def build_prompt(symptoms: str, location: str) -> str:
    """
    Build the doctor recommendation prompt.

    Args:
        symptoms: Free-text symptom description from the user
        location: Free-text location (city, neighbourhood, address)

    Returns:
        str: Prompt ready to be sent to Gemini
    """
    return f"""You are a healthcare professional recommendation system.
The user is located near: {location}.
Based on the following symptoms: {symptoms}, provide **at least 3 detailed recommendations** for doctors near the user's location.

**IMPORTANT: You MUST return ONLY a VALID JSON array of doctor objects. Do NOT include ANY extra text, explanations, markdown formatting, code blocks, backticks, or any delimiters around the JSON. It MUST be plain, valid JSON that can be directly parsed.**

<record_schema>
Each doctor recommendation must be a JSON object with the following structure:
{{
  "name": "Doctor's name and specialty",
  "specialty": "Doctor's primary specialty",
  "address": "Full address near {location}",
  "phone": "Phone number with country code",
  "rating": A number between 1 and 5 (use 4.0-5.0 if unsure),
  "opening_hours": "Detailed opening hours (e.g., 'Mon-Fri 9:00 AM - 5:00 PM, Sat 10:00 AM - 2:00 PM')",
  "website": "Full URL of the doctor's website, or null if not available",
  "map_iframe": "An embeddable Google Maps iFrame code showing a standard map view (not Street View) of the doctor's location, with a marker pinpointing the doctor's address. If you cannot guarantee a doctor-specific marked location, provide a valid Google Maps iframe for a prominent landmark or hospital in or near: {location} with a marker at that landmark.",
  "additional_notes": "Any extra information, like sub-specialties, languages spoken, or patient reviews (briefly)."
}}
</record_schema>

<map_requirements>
- map_iframe MUST start with <iframe src='https://www.google.com/maps/embed
- Use single quotes for the src attribute and end the markup with </iframe>
- Include a marker (&markers=...) or a place query (&q=...)
- Never use Street View parameters (layer=streetview, cbll=)
</map_requirements>

<example_output>
[
  {{
    "name": "Dr. Rajesh Sharma, Cardiologist",
    "specialty": "Cardiology",
    "address": "123 Medical Road, Jabalpur, MP, India",
    "phone": "+919876543210",
    "rating": 4.8,
    "opening_hours": "Mon-Fri 10:00 AM - 6:00 PM, Sat 10:00 AM - 2:00 PM",
    "website": "http://www.rajeshsharmacardiology.com",
    "map_iframe": "<iframe src='https://www.google.com/maps/embed?pb=...&q=123+Medical+Road+Jabalpur'></iframe>",
    "additional_notes": "Specializes in interventional cardiology, speaks Hindi and English."
  }},
  {{
    "name": "Dr. Priya Patel, General Physician",
    "specialty": "General Medicine",
    "address": "456 Hospital Lane, Bhopal, MP, India",
    "phone": "+919988776655",
    "rating": 4.6,
    "opening_hours": "Mon-Sat 9:00 AM - 7:00 PM",
    "website": null,
    "map_iframe": "<iframe src='https://www.google.com/maps/embed?pb=...&q=456+Hospital+Lane+Bhopal'></iframe>",
    "additional_notes": "Focuses on preventative care and diabetes management."
  }},
  {{
    "name": "Dr. Vikram Singh, Pediatrician",
    "specialty": "Pediatrics",
    "address": "789 Child Care Clinic, Indore, MP, India",
    "phone": "+919765432109",
    "rating": 4.9,
    "opening_hours": "Mon-Fri 10:00 AM - 8:00 PM",
    "website": "http://www.vikramsinghpediatrics.com",
    "map_iframe": "<iframe src='https://www.google.com/maps/embed?pb=...&q=789+Child+Care+Clinic+Indore'></iframe>",
    "additional_notes": "Expert in childhood vaccinations and nutrition."
  }}
]
</example_output>"""
