"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from photobooth.domain.session import CaptureMode, CollageLayout

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")
_ENV_FILES = (f".env.{_ENVIRONMENT}", ".env")


class Settings(BaseSettings):
    """Server settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    network_ip: str | None = None
    preferred_ip: str | None = None
    port: int = 3000
    public_scheme: str = "http"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(env_file=_ENV_FILES, extra="ignore")


class BoothSettings(BaseSettings):
    """Capture station settings, read from ``BOOTH_*`` variables."""

    server_url: str = "http://localhost:3000"
    camera_index: int = 0
    mode: CaptureMode = CaptureMode.COLLAGE
    layout: CollageLayout = CollageLayout.GRID
    filter: str = "none"
    countdown_seconds: int = 3
    countdown_tick: float = 1.0
    inter_shot_pause: float = 1.0
    jpeg_quality: int = 92
    output_dir: str = "captures"

    model_config = SettingsConfigDict(
        env_prefix="BOOTH_", env_file=_ENV_FILES, extra="ignore"
    )
