"""
Configuration management for the weather bot.

Loads environment variables from .env file and provides typed access to configuration.
"""

import logging
import os
from pathlib import Path
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Load environment variables from .env file
env_path = Path(__file__).parent / ".env"
load_dotenv(env_path)


class Config:
    """Configuration class for the weather bot."""

    # Messenger app / page credentials
    APP_SECRET = os.getenv("MESSENGER_APP_SECRET", "")
    VALIDATION_TOKEN = os.getenv("MESSENGER_VALIDATION_TOKEN", "")
    PAGE_ACCESS_TOKEN = os.getenv("MESSENGER_PAGE_ACCESS_TOKEN", "")
    APP_ID = os.getenv("APP_ID", "")
    PAGE_ID = os.getenv("PAGE_ID", "")

    # Public URL of this server (assets and account-linking callbacks)
    SERVER_URL = os.getenv("SERVER_URL", "")

    # HTTP server
    PORT = int(os.getenv("PORT", "5000"))

    # Conversation
    DEFAULT_USERNAME = os.getenv("DEFAULT_USERNAME", "friend")

    # Environment
    ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    REQUIRED = ["APP_SECRET", "VALIDATION_TOKEN", "PAGE_ACCESS_TOKEN", "SERVER_URL"]

    @classmethod
    def missing(cls) -> list:
        """Names of required settings that are empty."""
        return [key for key in cls.REQUIRED if not getattr(cls, key)]

    @classmethod
    def validate(cls) -> bool:
        """Validate that required configuration is set."""
        missing = cls.missing()
        if missing:
            logger.warning(f"Missing config values: {', '.join(missing)} (set them in .env)")
            return False
        return True


if __name__ == "__main__":
    # Print configuration status without revealing secrets
    print("Configuration loaded:")
    print(f"  App secret: {'set' if Config.APP_SECRET else 'missing'}")
    print(f"  Validation token: {'set' if Config.VALIDATION_TOKEN else 'missing'}")
    print(f"  Page access token: {'set' if Config.PAGE_ACCESS_TOKEN else 'missing'}")
    print(f"  Server URL: {Config.SERVER_URL}")
    print(f"  Environment: {Config.ENVIRONMENT}")
    print(f"\n  Validation: {'PASSED' if Config.validate() else 'FAILED'}")
