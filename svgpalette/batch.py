from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .config import Settings
from .converter import FileOutcome, convert_file
from .raster import Capability, CapabilityState, Rasterizer, ensure_rasterizer


@dataclass
class BatchReport:
    capability: Capability
    discovered: int = 0
    successes: int = 0
    failures: int = 0
    files: list[FileOutcome] = field(default_factory=list)

    @property
    def degraded(self) -> bool:
        return self.capability.degraded

    def add(self, outcome: FileOutcome) -> None:
        self.files.append(outcome)
        self.successes += outcome.successes
        self.failures += outcome.failures

    def summary_lines(self, settings: Settings) -> list[str]:
        lines = [
            "",
            "Conversion finished!",
            f"Total {settings.source_ext} files: {self.discovered}",
            f"Converted: {self.successes} {settings.raster_ext} files",
            f"Failed: {self.failures} files",
        ]
        if self.degraded:
            lines += [
                "",
                f"Note: {settings.package_name} could not be installed, "
                f"so *{settings.fallback_marker}{settings.source_ext} files were written instead.",
                f"Convert them to {settings.raster_ext} with an online tool or other software.",
            ]
        return lines


def discover_sources(directory: Path, source_ext: str) -> list[Path]:
    """Entries directly inside ``directory`` ending with ``source_ext``, in listing order.

    Directories are skipped; anything else (including a dangling symlink) is
    kept so that an unreadable source shows up as a failed file.
    """
    return [p for p in directory.iterdir() if p.name.endswith(source_ext) and not p.is_dir()]


async def run_batch(
    directory: Path, settings: Settings, capability: Capability | None = None
) -> BatchReport:
    logging.info("Starting %s to %s batch conversion...", settings.source_ext, settings.raster_ext)
    sources = discover_sources(directory, settings.source_ext)
    logging.info("Found %d %s files", len(sources), settings.source_ext)

    if capability is None:
        capability = await ensure_rasterizer(settings)
    if capability.state is CapabilityState.UNAVAILABLE:
        logging.warning("Degraded mode: writing recolored %s files for manual conversion", settings.source_ext)

    rasterizer = Rasterizer(settings.png_size, capability.backend)
    report = BatchReport(capability=capability, discovered=len(sources))
    for source in sources:
        try:
            outcome = await convert_file(source, directory, settings, rasterizer)
        except Exception as e:
            logging.error("Failed to process %s: %s", source.name, e)
            outcome = FileOutcome(source=source, error=str(e))
        report.add(outcome)
    return report
