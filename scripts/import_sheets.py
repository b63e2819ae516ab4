"""Import CSV exports of the facility spreadsheet.

Each sheet is exported to ``<name>.csv`` in one directory: ``courts``,
``teams``, ``contractors``, ``tournaments``, ``closures`` and
``reservations``. Missing files are skipped.
"""

from __future__ import annotations

import argparse
import asyncio
import csv
import logging
from pathlib import Path
from typing import Any

from court_scheduler.core.config import get_settings
from court_scheduler.core.errors import ValidationError
from court_scheduler.db.session import get_sessionmaker
from court_scheduler.services import import_service

LOGGER = logging.getLogger("sheet_import")
SHEETS = ("courts", "teams", "contractors", "tournaments", "closures", "reservations")


def configure_logging(log_path: Path) -> None:
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
    handler.setFormatter(formatter)
    console = logging.StreamHandler()
    console.setFormatter(formatter)
    for logger in (LOGGER, logging.getLogger("court_scheduler")):
        logger.setLevel(logging.INFO)
        logger.addHandler(handler)
        logger.addHandler(console)


def read_sheet(directory: Path, name: str) -> list[dict[str, Any]]:
    path = directory / f"{name}.csv"
    if not path.exists():
        LOGGER.info("No %s found; skipping", path.name)
        return []
    with path.open(newline="", encoding="utf-8-sig") as handle:
        return list(csv.DictReader(handle))


async def run_import(directory: Path, *, dry_run: bool) -> list[import_service.ImportStats]:
    sheets = {name: read_sheet(directory, name) for name in SHEETS}
    settings = get_settings()
    sessionmaker = get_sessionmaker(settings.database_url)
    async with sessionmaker() as session:
        return await import_service.import_sheets(session, dry_run=dry_run, **sheets)


def main() -> None:
    parser = argparse.ArgumentParser(description="Import spreadsheet CSV exports")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--dry-run", action="store_true", help="Validate and count without writing data"
    )
    mode.add_argument("--run", action="store_true", help="Perform the import")
    parser.add_argument("directory", type=Path, help="Directory holding the CSV exports")
    parser.add_argument(
        "--log", type=Path, default=Path("imports/sheet_import.log"), help="Log file path"
    )
    args = parser.parse_args()

    dry_run = args.dry_run or not args.run
    configure_logging(args.log)

    try:
        stats_list = asyncio.run(run_import(args.directory, dry_run=dry_run))
    except ValidationError as exc:
        LOGGER.error("%s", exc)
        raise SystemExit(1) from exc

    LOGGER.info("Import summary:")
    for stat in stats_list:
        LOGGER.info(
            "  %-15s processed=%-5s created=%-5s updated=%-5s",
            stat.name,
            stat.processed,
            stat.created,
            stat.updated,
        )
    LOGGER.info("Import completed (mode=%s)", "dry-run" if dry_run else "run")


if __name__ == "__main__":
    main()
