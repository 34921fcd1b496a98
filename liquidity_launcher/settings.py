"""
Process settings

Loads environment variables (optionally from a .env file).
"""
import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings:
    """Launcher settings"""

    # Logging
    LOG_LEVEL: str = os.getenv("LAUNCHER_LOG_LEVEL", "")

    # Blocks added to the current block when computing an executor deadline
    DEADLINE_BLOCKS: int = int(os.getenv("LAUNCHER_DEADLINE_BLOCKS", 0))

    # Default strategy file used by the CLI
    STRATEGY_PATH: str = os.getenv("LAUNCHER_STRATEGY_PATH", "strategy.yaml")


settings = Settings()
