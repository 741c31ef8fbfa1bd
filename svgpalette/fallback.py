from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .config import Settings
from .recolor import change_svg_color


@dataclass(frozen=True)
class FallbackResult:
    ok: bool
    path: Path
    detail: str = ""


def fallback_path(raster_path: Path, settings: Settings) -> Path:
    """``icon-active.png`` -> ``icon-active_temp.svg`` in the same directory."""
    return raster_path.with_name(raster_path.stem + settings.fallback_marker + settings.source_ext)


def write_fallback(source_text: str, raster_path: Path, color: str, settings: Settings) -> FallbackResult:
    """Write the recolored SVG next to where the PNG should have been."""
    target = fallback_path(raster_path, settings)
    try:
        target.write_text(change_svg_color(source_text, color), encoding="utf-8")
    except OSError as e:
        logging.error("Fallback write failed for %s: %s", target.name, e)
        return FallbackResult(ok=False, path=target, detail=str(e))
    logging.info("  created temporary SVG: %s", target.name)
    logging.info("  convert %s to %s manually", target.name, raster_path.name)
    return FallbackResult(ok=True, path=target)
