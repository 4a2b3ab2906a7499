"""
Pytest configuration for Doctor Finder backend tests.

Sets up test environment and global fixtures.
"""
import os
from typing import List, Optional

import pytest

# Disable config validation during tests
# This allows tests to run without requiring real environment variables
os.environ["VALIDATE_CONFIG"] = "false"

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("GOOGLE_API_KEY", "test-google-api-key")


MAP_IFRAME = (
    "<iframe src='https://www.google.com/maps/embed?pb=!1m18&q=Lilavati+Hospital+Mumbai'>"
    "</iframe>"
)


class FakeTextGenerator:
    """
    Stand-in for GeminiTextGenerator.

    Returns a canned reply (or raises a canned error) and records prompts.
    """

    def __init__(self, reply: str = "", error: Optional[Exception] = None):
        self.reply = reply
        self.error = error
        self.prompts: List[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


def make_doctor(index: int = 1, **overrides) -> dict:
    """Complete doctor record; keyword overrides replace individual fields."""
    doctor = {
        "name": f"Dr. Test Doctor {index}, General Physician",
        "specialty": "General Medicine",
        "address": f"{index} Marine Drive, Mumbai, MH, India",
        "phone": f"+91987654321{index}",
        "rating": 4.5,
        "opening_hours": "Mon-Sat 9:00 AM - 7:00 PM",
        "website": None,
        "map_iframe": MAP_IFRAME,
        "additional_notes": "Speaks Hindi, Marathi and English.",
    }
    doctor.update(overrides)
    return doctor


@pytest.fixture
def complete_doctors() -> List[dict]:
    """Three complete, valid doctor records."""
    return [make_doctor(i) for i in range(1, 4)]
