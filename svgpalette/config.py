import os
from pathlib import Path
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, field_validator


class PaletteVariant(NamedTuple):
    suffix: str
    color: str


def _dotted(ext: str) -> str:
    ext = (ext or "").strip().lower()
    if not ext:
        raise ValueError("extension must not be empty")
    return ext if ext.startswith(".") else f".{ext}"


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Palette
    default_color: str = "#999999"
    active_color: str = "#667eea"
    active_suffix: str = "-active"
    # Output
    png_size: int = 64
    source_ext: str = ".svg"
    raster_ext: str = ".png"
    fallback_marker: str = "_temp"
    # Rasterizer install
    package_name: str = "cairosvg"
    install_timeout_sec: float = 300
    # Logging
    log_file: Path | None = None
    log_level: str = "INFO"
    log_max_bytes: int = 5 * 1024 * 1024
    log_backups: int = 5

    @field_validator("source_ext", "raster_ext", mode="before")
    @classmethod
    def _normalize_ext(cls, v: str) -> str:
        return _dotted(v)

    @field_validator("png_size")
    @classmethod
    def _positive_size(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("png_size must be positive")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return (v or "INFO").upper()

    @field_validator("log_file", mode="before")
    @classmethod
    def _ensure_log_path(cls, v: str | Path | None) -> Path | None:
        if not v:
            return None
        return Path(v).expanduser().resolve()

    @property
    def variants(self) -> tuple[PaletteVariant, PaletteVariant]:
        """Default variant first, then the active one."""
        return (
            PaletteVariant("", self.default_color),
            PaletteVariant(self.active_suffix, self.active_color),
        )


def load_settings() -> Settings:
    # Only logging is tunable from the environment; conversion constants are fixed.
    log_file_raw = os.getenv("LOG_FILE", "").strip()
    log_level = (os.getenv("LOG_LEVEL", "INFO") or "INFO").upper()
    log_max_bytes = int(os.getenv("LOG_MAX_BYTES", str(5 * 1024 * 1024)) or 5 * 1024 * 1024)
    log_backups = int(os.getenv("LOG_BACKUPS", "5") or 5)

    return Settings(
        log_file=log_file_raw or None,
        log_level=log_level,
        log_max_bytes=log_max_bytes,
        log_backups=log_backups,
    )
