"""
Configuration module for the Doctor Finder backend.

Loads environment variables and validates required settings.
"""
import os
from typing import List
from dotenv import load_dotenv

# Load .env file
load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Google Gemini API
    # GEMINI_API_KEY is accepted for compatibility with older .env files
    GOOGLE_API_KEY: str = os.getenv("GOOGLE_API_KEY") or os.getenv("GEMINI_API_KEY", "")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
    GEMINI_TEMPERATURE: float = float(os.getenv("GEMINI_TEMPERATURE", "0.4"))
    GEMINI_MAX_OUTPUT_TOKENS: int = int(os.getenv("GEMINI_MAX_OUTPUT_TOKENS", "4096"))

    # Response normalization
    # 0 disables the exact-count check
    EXPECTED_RECOMMENDATION_COUNT: int = int(os.getenv("EXPECTED_RECOMMENDATION_COUNT", "0"))
    DEBUG_PREVIEW_CHARS: int = int(os.getenv("DEBUG_PREVIEW_CHARS", "500"))
    # Empty means "decide from ENVIRONMENT"
    INCLUDE_DEBUG_PAYLOAD: str = os.getenv("INCLUDE_DEBUG_PAYLOAD", "")

    # Application Settings
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS Settings (only enforced in production)
    CORS_ORIGINS: List[str] = [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "").split(",")
        if origin.strip()
    ]

    @classmethod
    def validate(cls) -> None:
        """
        Validate that all required settings are configured.

        Raises:
            ValueError: If any required setting is missing.
        """
        required_settings = {
            "GOOGLE_API_KEY": cls.GOOGLE_API_KEY,
        }

        missing = [key for key, value in required_settings.items() if not value]

        if missing:
            raise ValueError(
                f"Missing required environment variables: {', '.join(missing)}. "
                "Please check your .env file."
            )

    @classmethod
    def is_production(cls) -> bool:
        """Check if running in production environment."""
        return cls.ENVIRONMENT.lower() == "production"

    @classmethod
    def is_development(cls) -> bool:
        """Check if running in development environment."""
        return cls.ENVIRONMENT.lower() == "development"

    @classmethod
    def include_debug_payload(cls) -> bool:
        """
        Whether response envelopes may carry the raw model reply and prompt.

        INCLUDE_DEBUG_PAYLOAD wins when set; otherwise debug data is only
        exposed outside production.
        """
        if cls.INCLUDE_DEBUG_PAYLOAD:
            return cls.INCLUDE_DEBUG_PAYLOAD.lower() in ("1", "true", "yes")
        return not cls.is_production()


# Create a singleton instance
settings = Settings()

# Validate settings on module import (will fail fast if misconfigured)
# Skip validation during tests or when importing for introspection
if os.getenv("VALIDATE_CONFIG", "true").lower() == "true":
    try:
        settings.validate()
    except ValueError as e:
        # In development, warn but don't crash
        if settings.is_development():
            print(f"⚠️  Warning: {e}")
            print("   Recommendations will fail until GOOGLE_API_KEY is set in your .env file.")
        else:
            # In production or staging, fail immediately
            raise
