"""
Configuration settings for the migration preview API

Loads environment variables and provides application configuration.
"""
import os
from typing import List
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings:
    """Application settings"""

    # API Configuration
    API_VERSION: str = "0.1.0"
    API_TITLE: str = "Liquidity Launcher API"
    API_DESCRIPTION: str = "Preview auction-to-AMM liquidity migration plans"

    # Account that receives the final TAKE_PAIR in previewed plans
    PREVIEW_STRATEGY_ADDRESS: str = os.getenv(
        "PREVIEW_STRATEGY_ADDRESS",
        "0x000000000000000000000000000000000057a7e9"
    )

    # CORS Configuration
    CORS_ORIGINS: List[str] = os.getenv(
        "CORS_ORIGINS",
        "http://localhost:3000"
    ).split(",")

    # Server Configuration
    HOST: str = os.getenv("API_HOST", "0.0.0.0")
    PORT: int = int(os.getenv("API_PORT", 8000))
    DEBUG: bool = os.getenv("DEBUG", "False").lower() == "true"


# Create global settings instance
settings = Settings()
