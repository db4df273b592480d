"""Настройки приложения.

Переменные окружения (префикс `BGREMOVE_`) и файл `.env` собраны здесь,
чтобы остальной код не читал окружение напрямую.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

THEME_MODES = ("light", "dark")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="BGREMOVE_", env_file=".env", extra="ignore")

    # Window
    window_title: str = "BG Remove"
    toast_duration_ms: int = Field(3000, ge=500)

    # Background removal (rembg)
    rembg_model: str = "u2net"

    # Files
    download_dir: Path = Field(default_factory=lambda: Path.home() / "Downloads")
    theme_file: Path = Field(default_factory=lambda: Path.home() / ".bgremove" / "settings.json")
    default_theme: str = "light"

    log_level: str = "INFO"

    @field_validator("default_theme")
    @classmethod
    def validate_theme(cls, v: str) -> str:
        v = v.lower()
        if v not in THEME_MODES:
            raise ValueError("BGREMOVE_DEFAULT_THEME must be one of light|dark")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in LOG_LEVELS:
            raise ValueError(f"BGREMOVE_LOG_LEVEL must be one of {'|'.join(LOG_LEVELS)}")
        return v


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings to avoid reparsing env on every call."""
    return Settings()
