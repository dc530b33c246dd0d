"""Command-line interface for the xoso_digest job."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import pprint
from pathlib import Path
from typing import List, Optional

from .config import (
    DEFAULT_ENV_FILE,
    SCHEDULE_CRON,
    SCHEDULE_TIMEZONE,
    SOURCES,
    ConfigError,
    load_env_file,
    load_settings,
    parse_logging_config,
)
from .runner import JobRunner
from .scheduler import build_scheduler, run_forever

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser."""
    parser = argparse.ArgumentParser(
        description="Send today's lottery results to Telegram on a daily schedule."
    )
    parser.add_argument(
        "--now",
        action="store_true",
        help="Run the job immediately without waiting for schedule.",
    )
    return parser


def configure_logging(level_name: str, log_file: Optional[str] = None) -> None:
    """Initialise logging according to options."""
    log_level = getattr(logging, level_name.upper(), None)
    if not isinstance(log_level, int):
        raise ValueError(f"Unsupported log level: {level_name}")

    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    root_logger.setLevel(log_level)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    root_logger.addHandler(stream_handler)

    if log_file:
        log_path = Path(log_file)
        if log_path.parent and not log_path.parent.exists():
            log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
        logger.debug(
            "Logger initialised with level %s and file output to %s",
            level_name.upper(),
            log_path,
        )
    else:
        logger.debug(
            "Logger initialised with console output at level %s", level_name.upper()
        )


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    env_loaded = load_env_file(DEFAULT_ENV_FILE)
    log_config = parse_logging_config()
    try:
        configure_logging(log_config.level, log_config.file)
    except ValueError as exc:
        parser.error(str(exc))

    if env_loaded:
        logger.info("Loaded environment configuration from %s", DEFAULT_ENV_FILE)
    else:
        logger.warning(
            "%s file not found, using system environment variables", DEFAULT_ENV_FILE
        )

    try:
        settings = load_settings()

        config_dict = dataclasses.asdict(settings)
        config_dict["telegram_token"] = "***MASKED***"
        logger.info("Active Configuration:\n%s", pprint.pformat(config_dict))

        runner = JobRunner(settings, SOURCES)

        if args.now:
            logger.info("Running job immediately (--now)")
            runner.run()
            return 0

        scheduler = build_scheduler(runner.run, SCHEDULE_CRON, SCHEDULE_TIMEZONE)
        logger.info(
            "Scheduler started... waiting for '%s' %s", SCHEDULE_CRON, SCHEDULE_TIMEZONE
        )
        run_forever(scheduler)
    except ConfigError as exc:
        logger.error("%s", exc)
        return 1
    except Exception:  # noqa: BLE001
        logger.exception("Unexpected error during execution.")
        return 1

    return 0
