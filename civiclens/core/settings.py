"""
Core settings and environment variables for CivicLens.
Uses pydantic-settings for type-safe environment variable loading.
"""

from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Create a .env file in the root directory to configure these.
    """

    # Application
    APP_NAME: str = "CivicLens"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS - Frontend URLs allowed to access this API (comma separated)
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:5173"

    # Reasoning service (Gemini). Without a key every AI flow returns its fallback.
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_API_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_VISION_MODEL: str = "gemini-3-flash-preview"
    GEMINI_SEARCH_MODEL: str = "gemini-3-flash-preview"
    GEMINI_CHAT_MODEL: str = "gemini-3-pro-preview"
    GEMINI_MAPS_MODEL: str = "gemini-2.5-flash"
    AI_TIMEOUT_SECONDS: float = 30.0

    # Assistant / workspaces
    CHAT_MAX_HISTORY_MESSAGES: int = 20
    MAX_WORKSPACES: int = 500
    MAX_IMAGE_BYTES: int = 10 * 1024 * 1024

    # Outbound alert e-mail (explicitly triggered, never automatic)
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USERNAME: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    SMTP_USE_TLS: bool = True
    ALERT_SENDER: str = '"CivicLens AI" <alerts@civiclens.com>'
    ALERT_RECIPIENT: str = "city-admin@example.gov"
    ALERT_MIN_SEVERITY: str = "High"
    DASHBOARD_URL: str = "https://civiclens.app/dashboard"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "allow"  # Allow extra env vars to prevent crashes

    @property
    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


# Global settings instance
settings = Settings()
