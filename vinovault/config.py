"""Application configuration via pydantic-settings."""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Listening port; the bind interface is always all interfaces
    PORT: int = Field(default=8080, ge=0, le=65535)

    # Directory holding the built UI bundle, resolved once at load time
    DOCUMENT_ROOT: str = Field(default=".", validate_default=True)

    # SPA shell, served for "/" and as the deep-link fallback
    ENTRY_DOCUMENT: str = "index.html"

    # Substring of the orchestrator's health-checker User-Agent
    HEALTH_USER_AGENT_TOKEN: str = "GoogleHC"

    LOG_LEVEL: str = "INFO"

    # Seconds to wait for in-flight requests on shutdown (None = no limit)
    SHUTDOWN_TIMEOUT: Optional[float] = None

    @field_validator("DOCUMENT_ROOT")
    @classmethod
    def _resolve_document_root(cls, v: str) -> str:
        """Make the root absolute against the working directory, symlinks resolved."""
        return str(Path(v).resolve())

    @property
    def document_root(self) -> Path:
        return Path(self.DOCUMENT_ROOT)

    @property
    def entry_document_path(self) -> Path:
        return self.document_root / self.ENTRY_DOCUMENT


settings = Settings()
