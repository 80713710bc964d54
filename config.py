"""
Configuration settings for the Product Routine Assistant
"""

import logging
import os

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


class Config:
    """Configuration class for the assistant"""

    # Relay (AI backend) Configuration
    RELAY_URL: str = os.getenv("RELAY_URL", "").strip()
    ROUTINE_MODEL: str = os.getenv("ROUTINE_MODEL", "gpt-4o")
    CHAT_MODEL: str = os.getenv("CHAT_MODEL", "").strip()
    RELAY_TIMEOUT_S: float = float(os.getenv("RELAY_TIMEOUT_S", "45"))
    RELAY_MAX_RETRIES: int = int(os.getenv("RELAY_MAX_RETRIES", "2"))

    # Catalogue and persisted state
    CATALOGUE_PATH: str = os.getenv("CATALOGUE_PATH", os.path.join(os.path.dirname(__file__), "products.json"))
    CATALOGUE_TIMEOUT_S: float = float(os.getenv("CATALOGUE_TIMEOUT_S", "10"))
    STATE_PATH: str = os.getenv("STATE_PATH", ".routine_state.json")

    # Input Validation
    MAX_INPUT_LENGTH: int = int(os.getenv("MAX_INPUT_LENGTH", "400"))

    # Logging Configuration
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def validate(cls) -> bool:
        """Validate configuration"""
        if not cls.RELAY_URL:
            logger.warning("RELAY_URL not set. Chat and routine generation are disabled.")
            return False
        return True


config = Config()
