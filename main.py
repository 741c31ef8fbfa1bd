from __future__ import annotations

import asyncio
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from dotenv import load_dotenv

from svgpalette.batch import run_batch
from svgpalette.config import Settings, load_settings

# Sources are read from, and outputs written to, the directory holding this script.
BASE_DIR = Path(__file__).resolve().parent


def setup_logging(settings: Settings) -> None:
    # Console always; optional rotating file
    log_format = "%(asctime)s %(levelname)s %(name)s %(message)s"
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=log_format)
    if settings.log_file:
        try:
            settings.log_file.parent.mkdir(parents=True, exist_ok=True)
            fh = RotatingFileHandler(
                settings.log_file,
                maxBytes=settings.log_max_bytes,
                backupCount=settings.log_backups,
                encoding="utf-8",
            )
            fh.setLevel(level)
            fh.setFormatter(logging.Formatter(log_format))
            root = logging.getLogger()
            root.addHandler(fh)
        except Exception:
            logging.exception("Failed to set up file logging")


async def main() -> None:
    # Load .env if present
    load_dotenv()

    settings = load_settings()
    setup_logging(settings)

    report = await run_batch(BASE_DIR, settings)
    for line in report.summary_lines(settings):
        print(line)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (SystemExit, KeyboardInterrupt):
        pass
    except Exception:
        logging.exception("Batch conversion aborted")
