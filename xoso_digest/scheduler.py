"""Daily scheduling of the digest job."""

from __future__ import annotations

import logging
from typing import Callable
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.cron import CronTrigger

from .config import SCHEDULE_CRON, SCHEDULE_TIMEZONE, ConfigError

logger = logging.getLogger(__name__)

JOB_ID = "daily-digest"


def resolve_timezone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigError(f"Cannot load timezone {name!r}") from exc


def build_trigger(cron: str, timezone: ZoneInfo) -> CronTrigger:
    try:
        return CronTrigger.from_crontab(cron, timezone=timezone)
    except ValueError as exc:
        raise ConfigError(f"Invalid schedule expression {cron!r}: {exc}") from exc


def build_scheduler(
    job: Callable[[], object],
    cron: str = SCHEDULE_CRON,
    timezone: str = SCHEDULE_TIMEZONE,
) -> BlockingScheduler:
    """Return a scheduler that fires ``job`` on ``cron`` in ``timezone``.

    At most one instance of the job runs at a time and missed firings are
    coalesced into one.
    """
    tz = resolve_timezone(timezone)
    trigger = build_trigger(cron, tz)

    scheduler = BlockingScheduler(timezone=tz)
    scheduler.add_job(
        job,
        trigger=trigger,
        id=JOB_ID,
        name="Lottery results digest",
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )
    logger.debug("Registered job %s with trigger %s", JOB_ID, trigger)
    return scheduler


def run_forever(scheduler: BlockingScheduler) -> None:
    """Block on the scheduler until interrupted."""
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Scheduler stopped.")
        if scheduler.running:
            scheduler.shutdown(wait=False)
