"""
Application settings for pclconvert.

This module defines all configuration settings for pclconvert using Pydantic BaseSettings.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_DATA_DIR = Path(__file__).resolve().parent.parent / "data"

_NEWLINES = {
    "crlf": "\r\n",
    "lf": "\n",
}


class Settings(BaseSettings):
    """Main application settings using Pydantic BaseSettings."""

    # Definition lists (frameworks.yaml, portable_profiles.yaml)
    definitions_dir: Path = Field(default=PACKAGE_DATA_DIR, alias="PCLCONVERT_DEFINITIONS_DIR")
    # Known framework assemblies used by the filesystem host
    assembly_manifest: Path = Field(
        default=PACKAGE_DATA_DIR / "framework_assemblies.yaml",
        alias="PCLCONVERT_ASSEMBLY_MANIFEST",
    )
    # Line terminator for rewritten project files: crlf|lf, empty means platform default
    newline: str = Field(default="", alias="PCLCONVERT_NEWLINE")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=False, alias="LOG_JSON")
    env: str = Field(default="dev", alias="ENV")  # dev|prod|test

    model_config: SettingsConfigDict = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def line_terminator(self) -> str:
        """Resolved line terminator for serialized project files."""
        return _NEWLINES.get(self.newline.strip().lower(), os.linesep)


def _resolve_env_file() -> str | None:
    # 1) Explicit override
    explicit = os.getenv("PCLCONVERT_ENV_FILE")
    if explicit and Path(explicit).is_file():
        return explicit

    # 2) CWD .env
    cwd_env = Path.cwd() / ".env"
    if cwd_env.is_file():
        return str(cwd_env)

    # 3) Walk up from this file to find nearest .env
    here = Path(__file__).resolve()
    for parent in here.parents:
        candidate = parent / ".env"
        if candidate.is_file():
            return str(candidate)
    return None


# Global settings instance (load from best-effort .env discovery)
_env_file = _resolve_env_file()
settings = Settings(_env_file=_env_file) if _env_file else Settings()  # type: ignore[call-arg]
