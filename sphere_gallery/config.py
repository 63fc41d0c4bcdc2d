"""
Configuration management for the gallery server and viewer.
Uses Pydantic Settings for environment variable management.
"""
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Configuration
    API_TITLE: str = "Sphere Gallery API"
    API_VERSION: str = "0.1.0"
    API_DESCRIPTION: str = "Upload and listing backend for the 3D sphere image gallery"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3001
    LOG_LEVEL: str = "INFO"

    # CORS Configuration
    # The viewer may be hosted anywhere, so every origin is accepted by default
    CORS_ORIGINS: List[str] = ["*"]

    # Storage Configuration
    # Uploaded files live in IMAGES_DIR and are served read-only under IMAGES_URL_PREFIX
    IMAGES_DIR: str = "images"
    IMAGES_URL_PREFIX: str = "/images"

    # Application root (index.html, images.json snapshot, assets) served at "/"
    STATIC_DIR: str = "static"

    # Viewer Configuration
    GALLERY_SERVER_URL: str = "http://localhost:3001"
    REQUEST_TIMEOUT: float = 30.0

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env that aren't defined in Settings


# Global settings instance
settings = Settings()
