"""
Configuration management for the Product Page Extractor.
Handles environment variables and application settings.
"""
import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Application configuration loaded from environment variables."""

    # Server settings
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv("LOG_FORMAT", "json")  # json or console

    # Request settings
    REQUEST_TIMEOUT: int = int(os.getenv("REQUEST_TIMEOUT", "30"))

    # Target site
    SITE_ORIGIN: str = os.getenv("SITE_ORIGIN", "https://www.aliexpress.com")
    PLACEHOLDER_IMAGE: str = os.getenv(
        "PLACEHOLDER_IMAGE",
        "https://via.placeholder.com/600x600/eeeeee/333333?text=No+Image",
    )

    # Max characters scanned after the embedded state marker
    EMBEDDED_STATE_WINDOW: int = int(os.getenv("EMBEDDED_STATE_WINDOW", "500000"))


config = Config()
