from __future__ import annotations

import os
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="ARCHITRACK_", case_sensitive=False, extra="ignore"
    )
    """Application runtime configuration."""

    app_name: str = "ArchiTrack"
    host: str = os.getenv("ARCHITRACK_HOST", "127.0.0.1")
    port: int = int(os.getenv("ARCHITRACK_PORT", "8080"))
    log_level: str = os.getenv("ARCHITRACK_LOG_LEVEL", "INFO")

    supabase_url: Optional[str] = os.getenv("ARCHITRACK_SUPABASE_URL")
    supabase_key: Optional[str] = os.getenv("ARCHITRACK_SUPABASE_KEY")
    request_timeout: float = float(os.getenv("ARCHITRACK_REQUEST_TIMEOUT", "15"))

    local_store_path: Path = Path(os.getenv("ARCHITRACK_LOCAL_STORE_PATH", "./data/architrack.db"))

    @field_validator("supabase_url", "supabase_key", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    @property
    def remote_configured(self) -> bool:
        """True when the remote endpoint is present and looks like an http(s) URL."""
        if not self.supabase_url:
            return False
        parsed = urlparse(self.supabase_url)
        return parsed.scheme in {"http", "https"} and bool(parsed.netloc)


settings = Settings()

# Ensure the local fallback store has somewhere to live
settings.local_store_path.parent.mkdir(parents=True, exist_ok=True)
