"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path


def _load_env_file(path: str = ".env") -> None:
    """Populate os.environ from the provided .env file if it exists."""

    env_path = Path(path)
    if not env_path.exists():
        return

    for line in env_path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        key, value = stripped.split("=", 1)
        os.environ.setdefault(key.strip(), value.strip())


@dataclass(frozen=True, slots=True)
class Settings:
    """Centralised storefront settings based on OS environment variables."""

    environment: str = "dev"
    log_level: str = "INFO"

    catalog_base_url: str = ""
    catalog_api_key: str = ""
    catalog_timeout: float = 15.0

    outfit_size: int = 3
    style_score_min: int = 85
    style_score_max: int = 99
    stylist_delay_seconds: float = 2.0

    tryon_delay_seconds: float = 2.5
    tryon_overlay_opacity: float = 0.8
    tryon_max_upload_mb: int = 10

    analysis_picks: int = 4
    analysis_score_min: int = 80
    analysis_score_max: int = 99
    analysis_delay_seconds: float = 2.0

    admin_token: str = ""


def _build_settings() -> Settings:
    _load_env_file()

    return Settings(
        environment=os.getenv("ENVIRONMENT", "dev"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        catalog_base_url=os.getenv("CATALOG_BASE_URL", ""),
        catalog_api_key=os.getenv("CATALOG_API_KEY", ""),
        catalog_timeout=float(os.getenv("CATALOG_TIMEOUT", "15")),
        outfit_size=int(os.getenv("OUTFIT_SIZE", "3")),
        style_score_min=int(os.getenv("STYLE_SCORE_MIN", "85")),
        style_score_max=int(os.getenv("STYLE_SCORE_MAX", "99")),
        stylist_delay_seconds=float(os.getenv("STYLIST_DELAY_SECONDS", "2.0")),
        tryon_delay_seconds=float(os.getenv("TRYON_DELAY_SECONDS", "2.5")),
        tryon_overlay_opacity=float(os.getenv("TRYON_OVERLAY_OPACITY", "0.8")),
        tryon_max_upload_mb=int(os.getenv("TRYON_MAX_UPLOAD_MB", "10")),
        analysis_picks=int(os.getenv("ANALYSIS_PICKS", "4")),
        analysis_score_min=int(os.getenv("ANALYSIS_SCORE_MIN", "80")),
        analysis_score_max=int(os.getenv("ANALYSIS_SCORE_MAX", "99")),
        analysis_delay_seconds=float(os.getenv("ANALYSIS_DELAY_SECONDS", "2.0")),
        admin_token=os.getenv("ADMIN_TOKEN", ""),
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance to avoid re-reading configuration."""

    return _build_settings()
