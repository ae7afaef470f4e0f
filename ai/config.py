"""
AI module configuration
"""

from dataclasses import dataclass
from shared.config import settings


@dataclass
class AIConfig:
    """Configuration for AI services"""

    # OpenAI settings
    OPENAI_API_KEY: str = settings.OPENAI_API_KEY
    GPT_MODEL: str = settings.OPENAI_MODEL
    MAX_TOKENS: int = 600
    ANALYSIS_MAX_TOKENS: int = 900

    # Number of most recent transactions sent for analysis
    ANALYSIS_SAMPLE_SIZE: int = 40

    # Timeouts
    TIMEOUT: float = settings.AI_TIMEOUT  # seconds

    @property
    def is_configured(self) -> bool:
        return bool(self.OPENAI_API_KEY)


ai_config = AIConfig()
