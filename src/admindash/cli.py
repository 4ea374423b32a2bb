"""Command-line entrypoint.

Responsibilities (and nothing more):
- Configure structlog
- Open a Dashboard from Settings
- Load one section and print the outcome, notifications and statistics as JSON
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

import structlog

from admindash import __version__
from admindash.config import Settings
from admindash.dashboard import open_dashboard
from admindash.notifications import MemoryNotificationSink
from admindash.sections import SECTIONS

log = structlog.get_logger()


def _setup_logging(settings: Settings) -> None:
    """Configure structlog. Called once at startup before any log statements."""
    log_level = logging.getLevelNamesMapping()[settings.logging.level]

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.logging.format == "json":
        processors = [*shared_processors, structlog.processors.JSONRenderer()]
    else:
        processors = [*shared_processors, structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        # Logs go to stderr; stdout carries the JSON report
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="admindash",
        description="Load one admin dashboard section and print what was loaded.",
    )
    parser.add_argument("section", choices=sorted(SECTIONS), help="section to load")
    parser.add_argument(
        "--clear-cache",
        action="store_true",
        help="wipe this tenant's cached collections before loading",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


async def _run(settings: Settings, section: str, clear_cache: bool) -> dict:
    sink = MemoryNotificationSink()
    async with open_dashboard(settings, notifier=sink) as dashboard:
        if clear_cache:
            await dashboard.clear_cache()
        outcome = await dashboard.navigate(section)
        return {
            "outcome": outcome.model_dump(mode="json"),
            "counts": {rid: len(records) for rid, records in dashboard.collections.items()},
            "stats": dashboard.stats.model_dump(mode="json"),
            "notifications": [n.model_dump(mode="json") for n in sink.notifications],
        }


def main(argv: list[str] | None = None) -> None:
    args = _build_parser().parse_args(argv)
    settings = Settings()
    _setup_logging(settings)
    log.info("admindash_starting", version=__version__, section=args.section)

    report = asyncio.run(_run(settings, args.section, args.clear_cache))
    json.dump(report, sys.stdout, indent=2)
    sys.stdout.write("\n")


if __name__ == "__main__":
    main()
