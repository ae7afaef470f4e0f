"""
Application configuration from environment variables
"""

import os
from dataclasses import dataclass
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


@dataclass
class Settings:
    """Application settings"""

    # Telegram Bot
    TELEGRAM_BOT_TOKEN: str = os.getenv("TELEGRAM_BOT_TOKEN", "").strip()
    WEBHOOK_HOST: str = os.getenv("WEBHOOK_HOST", "")
    PORT: int = int(os.getenv("PORT", "3000"))

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "")

    # OpenAI
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")

    # Dashboard client
    BACKEND_URL: str = os.getenv("BACKEND_URL", "https://spesesmart.onrender.com")
    CACHE_DIR: str = os.getenv("CACHE_DIR", os.path.expanduser("~/.spesesmart"))

    # Application
    DEBUG: bool = os.getenv("DEBUG", "False").lower() == "true"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE: str = os.getenv("LOG_FILE", "")
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "production")

    # Refresh cycle (seconds)
    POLL_INTERVAL: float = float(os.getenv("POLL_INTERVAL", "10"))
    DEBOUNCE_WINDOW: float = float(os.getenv("DEBOUNCE_WINDOW", "60"))

    # Pending bot transactions expire after this many seconds
    PENDING_TTL: float = float(os.getenv("PENDING_TTL", "600"))

    # Timeouts
    REMOTE_TIMEOUT: float = float(os.getenv("REMOTE_TIMEOUT", "5"))
    AI_TIMEOUT: float = float(os.getenv("AI_TIMEOUT", "30"))

    def validate(self) -> bool:
        """
        Validate required settings

        Returns:
            True if all required settings are present
        """
        required_fields = [
            ("DATABASE_URL", self.DATABASE_URL),
        ]

        missing = [name for name, value in required_fields if not value]

        if missing:
            print(f"❌ Missing required environment variables: {', '.join(missing)}")
            return False

        return True


# Global settings instance
settings = Settings()


def validate_config() -> None:
    """
    Validate configuration and raise error if invalid
    """
    if not settings.validate():
        raise ValueError("Invalid configuration. Check environment variables.")
