"""
Configuration settings for the CPM trainer.
Values come from environment variables, optionally seeded from a .env file.
"""
import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file at the project root
env_file = Path(__file__).parent.parent.parent / '.env'
if env_file.exists():
    load_dotenv(env_file)


class Settings:
    """Application settings loaded from environment variables."""

    PROJECT_ROOT = Path(__file__).parent.parent.parent

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # ============================================================================
    # AI evaluation (Anthropic Messages API)
    # ============================================================================
    ANTHROPIC_API_KEY = os.getenv('ANTHROPIC_API_KEY', '')
    ANTHROPIC_BASE_URL = os.getenv('ANTHROPIC_BASE_URL', 'https://api.anthropic.com')
    ANTHROPIC_MODEL = os.getenv('ANTHROPIC_MODEL', 'claude-sonnet-4-20250514')
    ANTHROPIC_VERSION = os.getenv('ANTHROPIC_VERSION', '2023-06-01')
    EVALUATION_MAX_TOKENS = int(os.getenv('EVALUATION_MAX_TOKENS', '500'))
    EVALUATION_TIMEOUT = int(os.getenv('EVALUATION_TIMEOUT', '60'))

    @classmethod
    def validate_required_settings(cls) -> list[str]:
        """
        Validate that all required settings are configured.
        Returns list of missing required settings.
        """
        missing = []
        if not cls.ANTHROPIC_API_KEY:
            missing.append('ANTHROPIC_API_KEY')
        return missing


settings = Settings()
