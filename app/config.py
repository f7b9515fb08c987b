"""Configuration settings for the application."""

import os
from typing import Optional, ClassVar


class Config:
    """Application configuration with type hints."""

    # Syndicate transaction API (prize minting)
    SYNDICATE_API_KEY: str = os.getenv("SYNDICATE_API_KEY", "")
    SYNDICATE_PROJECT_ID: str = os.getenv("SYNDICATE_PROJECT_ID", os.getenv("PROJECT_ID", ""))
    SYNDICATE_BASE_URL: str = os.getenv("SYNDICATE_BASE_URL", "https://api.syndicate.io")
    SYNDICATE_TIMEOUT_SECONDS: float = float(os.getenv("SYNDICATE_TIMEOUT_SECONDS", "15"))

    # Prize contract (compiled in)
    CONTRACT_ADDRESS: str = "0xbEc332E1eb3EE582B36F979BF803F98591BB9E24"
    CHAIN_ID: int = 80001
    FUNCTION_SIGNATURE: str = "mint(address account)"
    EXPLORER_TX_URL: str = os.getenv("EXPLORER_TX_URL", "https://mumbai.polygonscan.com/tx/")

    # Transaction confirmation polling
    CONFIRM_POLL_INTERVAL_SECONDS: float = float(os.getenv("CONFIRM_POLL_INTERVAL_SECONDS", "5"))
    CONFIRM_DEADLINE_SECONDS: float = float(os.getenv("CONFIRM_DEADLINE_SECONDS", "120"))
    CONFIRM_MAX_ATTEMPTS: Optional[int] = int(os.getenv("CONFIRM_MAX_ATTEMPTS")) if os.getenv("CONFIRM_MAX_ATTEMPTS") else None

    # Game settings
    MAX_QUESTIONS: int = 20
    DEFAULT_SECRET_WORD: str = "surfboard"
    SESSION_TTL_MINUTES: int = int(os.getenv("SESSION_TTL_MINUTES", "120"))

    # Groq API (question answering and word generation)
    GROQ_API_KEY: str = os.getenv("GROQ_API_KEY", "")
    GROQ_MODEL: str = os.getenv("GROQ_MODEL", "llama-3.1-8b-instant")
    GAME_TEMPERATURE: float = 0.5
    GAME_MAX_TOKENS: int = 25  # Keeps answers terse
    WORD_TEMPERATURE: float = 1.0

    # PostHog Analytics
    POSTHOG_API_KEY: str = os.getenv("POSTHOG_API_KEY", "")
    POSTHOG_HOST: str = os.getenv("POSTHOG_HOST", "https://eu.i.posthog.com")

    # Logging Configuration
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Class-level instance
    _instance: ClassVar[Optional['Config']] = None

    @classmethod
    def validate(cls):
        """Validate required configuration."""
        required = [
            ("SYNDICATE_API_KEY", cls.SYNDICATE_API_KEY),
            ("SYNDICATE_PROJECT_ID", cls.SYNDICATE_PROJECT_ID),
        ]

        optional_but_recommended = [
            ("GROQ_API_KEY", cls.GROQ_API_KEY),
            ("POSTHOG_API_KEY", cls.POSTHOG_API_KEY),
        ]

        missing = [name for name, value in required if not value]
        if missing:
            raise ValueError(f"Missing required configuration: {', '.join(missing)}")

        missing_optional = [name for name, value in optional_but_recommended if not value]
        if missing_optional:
            print(f"Warning: Missing optional configuration: {', '.join(missing_optional)}")

        # Validate numeric values
        if cls.CONFIRM_POLL_INTERVAL_SECONDS <= 0:
            raise ValueError("CONFIRM_POLL_INTERVAL_SECONDS must be positive")

        if cls.CONFIRM_DEADLINE_SECONDS < cls.CONFIRM_POLL_INTERVAL_SECONDS:
            raise ValueError("CONFIRM_DEADLINE_SECONDS must be at least CONFIRM_POLL_INTERVAL_SECONDS")

        if cls.CONFIRM_MAX_ATTEMPTS is not None and cls.CONFIRM_MAX_ATTEMPTS < 1:
            raise ValueError("CONFIRM_MAX_ATTEMPTS must be at least 1")


config = Config()
