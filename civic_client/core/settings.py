"""
Core settings and environment variables for the Civic Issue Reporter client.
Uses pydantic-settings for type-safe environment variable loading.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Create a .env file in the root directory to configure these.
    """

    # Application
    APP_NAME: str = "Civic Issue Reporter"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Web-view host (civic-webview command)
    HOST: str = "127.0.0.1"
    PORT: int = 8000

    # Backend API (REST + socket.io share the same base URL)
    API_BASE_URL: str = "http://localhost:5000"
    REQUEST_TIMEOUT_SECONDS: float = 15.0

    # Device-local key-value store (user/token written by the login flow)
    STORAGE_PATH: str = "./local_storage.json"

    # Admin search box debounce
    SEARCH_DEBOUNCE_SECONDS: float = 0.5

    # Translation (voice report variant)
    # - TRANSLATION_PROVIDER: "libre" (LibreTranslate) or "passthrough"
    # - LIBRETRANSLATE_API_KEY: optional; public instances may require one
    TRANSLATION_ENABLED: bool = True
    TRANSLATION_PROVIDER: str = "libre"
    LIBRETRANSLATE_URL: str = "https://libretranslate.com"
    LIBRETRANSLATE_API_KEY: Optional[str] = None
    TRANSLATION_TIMEOUT_SECONDS: float = 5.0

    # Map defaults (used when the device location is unknown)
    MAP_DEFAULT_LATITUDE: float = 11.0168
    MAP_DEFAULT_LONGITUDE: float = 76.9558
    MAP_ZOOM: int = 13

    # Static device position for desktop/CLI use (no GPS available)
    DEVICE_LATITUDE: Optional[float] = None
    DEVICE_LONGITUDE: Optional[float] = None
    DEVICE_ACCURACY: float = 0.0

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "allow"


# Global settings instance
settings = Settings()
