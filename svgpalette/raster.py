from __future__ import annotations

import asyncio
import enum
import importlib
import logging
import shutil
import sys
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .config import Settings
from .utils import CmdResult, describe, run_cmd, tail

# Same call signature as cairosvg.svg2png
RenderBackend = Callable[..., Any]
CommandRunner = Callable[[Sequence[str], float], Awaitable[CmdResult]]


class CapabilityState(str, enum.Enum):
    AVAILABLE = "available"
    INSTALLED = "installed"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class Capability:
    state: CapabilityState
    backend: RenderBackend | None = None
    detail: str = ""

    @property
    def degraded(self) -> bool:
        return self.state is CapabilityState.UNAVAILABLE


@dataclass(frozen=True)
class RenderResult:
    ok: bool
    path: Path
    detail: str = ""


class Rasterizer:
    """Renders SVG text to a square PNG of a fixed edge length.

    ``render`` never raises; failures come back as ``RenderResult(ok=False)``.
    """

    def __init__(self, size: int, backend: RenderBackend | None = None):
        self.size = size
        self.backend = backend

    @property
    def available(self) -> bool:
        return self.backend is not None

    async def render(self, svg_text: str, output_path: Path) -> RenderResult:
        if self.backend is None:
            return RenderResult(ok=False, path=output_path, detail="rasterizer unavailable")
        try:
            # cairosvg is synchronous; keep the event loop free while it works.
            await asyncio.to_thread(self._render_sync, svg_text, output_path)
        except Exception as e:
            logging.error("Rasterization failed for %s: %s", output_path.name, e)
            return RenderResult(ok=False, path=output_path, detail=str(e) or type(e).__name__)
        return RenderResult(ok=True, path=output_path)

    def _render_sync(self, svg_text: str, output_path: Path) -> None:
        self.backend(
            bytestring=svg_text.encode("utf-8"),
            write_to=str(output_path),
            output_width=self.size,
            output_height=self.size,
        )


def _load_backend(package_name: str) -> RenderBackend | None:
    importlib.invalidate_caches()
    try:
        module = importlib.import_module(package_name)
    except (ImportError, OSError) as e:
        # OSError: the Python package is there but libcairo is not.
        logging.debug("Cannot import %s: %s", package_name, e)
        return None
    return getattr(module, "svg2png", None)


def install_commands(settings: Settings) -> list[tuple[str, list[str]]]:
    """(scope, argv) pairs, tried in order: running environment first, then PATH's pip."""
    pkg = settings.package_name
    return [
        ("local", [sys.executable, "-m", "pip", "install", pkg]),
        ("global", [shutil.which("pip3") or "pip3", "install", pkg]),
    ]


async def ensure_rasterizer(settings: Settings, runner: CommandRunner = run_cmd) -> Capability:
    """Make the rasterizer importable, installing it if needed.

    Safe to call repeatedly: once the package imports, no install is attempted.
    Never raises; an impossible install yields ``CapabilityState.UNAVAILABLE``.
    """
    pkg = settings.package_name
    backend = _load_backend(pkg)
    if backend is not None:
        logging.info("%s is available", pkg)
        return Capability(CapabilityState.AVAILABLE, backend)

    for scope, args in install_commands(settings):
        logging.info("Installing %s (%s): %s", pkg, scope, describe(args))
        try:
            res = await runner(args, settings.install_timeout_sec)
        except Exception as e:
            logging.error("%s install of %s could not run: %s", scope, pkg, e)
            continue
        if not res.ok:
            logging.error(
                "%s install of %s failed [exit %s]: %s", scope, pkg, res.returncode, tail(res.stderr)
            )
            continue
        backend = _load_backend(pkg)
        if backend is not None:
            logging.info("%s installed (%s)", pkg, scope)
            return Capability(CapabilityState.INSTALLED, backend, detail=f"{scope} install")
        logging.error("%s install of %s succeeded but the package still cannot be imported", scope, pkg)

    logging.warning("Cannot install %s, recolored SVG files will be written instead", pkg)
    return Capability(CapabilityState.UNAVAILABLE, detail=f"{pkg} could not be installed")
