from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from pathlib import Path

from .config import PaletteVariant, Settings
from .fallback import write_fallback
from .raster import Rasterizer
from .recolor import change_svg_color

VARIANTS_PER_FILE = 2


class Method(str, enum.Enum):
    RASTER = "raster"
    FALLBACK = "fallback"
    FAILED = "failed"


@dataclass(frozen=True)
class VariantOutcome:
    variant: PaletteVariant
    method: Method
    path: Path | None = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.method is not Method.FAILED


@dataclass
class FileOutcome:
    source: Path
    variants: list[VariantOutcome] = field(default_factory=list)
    # Set when the file could not be converted at all (e.g. unreadable).
    error: str | None = None

    @property
    def successes(self) -> int:
        return sum(1 for v in self.variants if v.ok)

    @property
    def failures(self) -> int:
        return VARIANTS_PER_FILE - self.successes


def raster_path_for(source: Path, out_dir: Path, variant: PaletteVariant, settings: Settings) -> Path:
    return out_dir / f"{source.stem}{variant.suffix}{settings.raster_ext}"


async def _convert_variant(
    source_text: str,
    raster_path: Path,
    variant: PaletteVariant,
    settings: Settings,
    rasterizer: Rasterizer,
) -> VariantOutcome:
    recolored = change_svg_color(source_text, variant.color)
    rendered = await rasterizer.render(recolored, raster_path)
    if rendered.ok:
        logging.info("  ✓ generated %s", raster_path.name)
        return VariantOutcome(variant, Method.RASTER, rendered.path)

    # The fallback recolors the original text itself.
    written = write_fallback(source_text, raster_path, variant.color, settings)
    if written.ok:
        return VariantOutcome(variant, Method.FALLBACK, written.path, detail=rendered.detail)
    return VariantOutcome(
        variant, Method.FAILED, written.path, detail=f"{rendered.detail}; {written.detail}"
    )


async def convert_file(
    source: Path, out_dir: Path, settings: Settings, rasterizer: Rasterizer
) -> FileOutcome:
    """Produce the default and active PNGs (or fallback SVGs) for one source file.

    Reading the source is not guarded: an unreadable file raises to the caller.
    A failure in one variant is logged and does not stop the other.
    """
    source_text = source.read_text(encoding="utf-8")
    logging.info("Processing: %s", source.name)

    outcome = FileOutcome(source=source)
    for variant in settings.variants:
        raster_path = raster_path_for(source, out_dir, variant, settings)
        try:
            result = await _convert_variant(source_text, raster_path, variant, settings, rasterizer)
        except Exception as e:
            logging.error("  ✗ %s failed for %s: %s", raster_path.name, source.name, e)
            result = VariantOutcome(variant, Method.FAILED, raster_path, detail=str(e))
        else:
            if not result.ok:
                logging.error("  ✗ %s failed for %s: %s", raster_path.name, source.name, result.detail)
        outcome.variants.append(result)
    return outcome
