"""High-level orchestration for the xoso_digest job."""

from __future__ import annotations

import concurrent.futures
import logging
import threading
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .config import SOURCES, Settings
from .extraction import parse_description
from .feeds import FeedFetchError, fetch_entries
from .models import Source, SourceResult
from .notifier import send_report
from .renderers import build_report, has_content, order_results

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Returned data after a single run."""

    message: str
    results: List[SourceResult]
    delivered: bool
    sent: bool = True


def _process_source(source: Source, timeout: float) -> SourceResult:
    try:
        entries = fetch_entries(source.url, timeout=timeout)
    except FeedFetchError as exc:
        logger.warning("Skipping %s: %s", source.label, exc)
        return SourceResult(source=source, error=str(exc))

    if not entries:
        logger.info("No items found for %s", source.label)
        return SourceResult(source=source, error="no entries")

    entry = entries[0]
    prizes = parse_description(entry.description)

    logger.info("=== %s | %s ===", source.label, entry.title)
    for location, lines in prizes.items():
        if location:
            logger.debug("%s", location)
        for line in lines:
            logger.debug("%s", line)

    return SourceResult(source=source, entry=entry, prizes=prizes)


def collect_results(
    sources: Sequence[Source],
    timeout: float = 10.0,
    concurrency: int = 3,
) -> List[SourceResult]:
    """Fetch and parse every source, returning results in configured order."""
    results: List[SourceResult] = []

    def process(source: Source) -> SourceResult:
        try:
            return _process_source(source, timeout)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Failed to process source %s", source.label)
            return SourceResult(source=source, error=str(exc))

    with concurrent.futures.ThreadPoolExecutor(
        max_workers=max(1, min(concurrency, len(sources) or 1))
    ) as executor:
        future_to_source = {
            executor.submit(process, source): source for source in sources
        }
        for future in concurrent.futures.as_completed(future_to_source):
            results.append(future.result())

    return order_results(results, sources)


def execute(settings: Settings, sources: Sequence[Source] = SOURCES) -> RunResult:
    """Run one pass: fetch all sources, build the report and deliver it."""
    results = collect_results(
        sources, timeout=settings.request_timeout, concurrency=settings.concurrency
    )
    succeeded = sum(1 for result in results if result.ok)
    logger.info("Collected results from %d of %d sources", succeeded, len(sources))

    message = build_report(results, sources)

    if settings.skip_empty_report and not has_content(results):
        logger.warning("No source returned results; skipping empty report.")
        return RunResult(message=message, results=results, delivered=False, sent=False)

    delivered = send_report(
        message,
        token=settings.telegram_token,
        chat_id=settings.telegram_chat_id,
        timeout=settings.request_timeout,
    )
    return RunResult(message=message, results=results, delivered=delivered)


class JobRunner:
    """Callable used by both trigger modes; runs never overlap."""

    def __init__(self, settings: Settings, sources: Sequence[Source] = SOURCES):
        self.settings = settings
        self.sources = tuple(sources)
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._lock.locked()

    def run(self) -> Optional[RunResult]:
        if self._lock.locked():
            logger.info("A run is already in progress; waiting for it to finish.")
        with self._lock:
            logger.info("Starting run over %d sources", len(self.sources))
            try:
                result = execute(self.settings, self.sources)
            except Exception:  # noqa: BLE001
                logger.exception("Run failed unexpectedly.")
                return None
            logger.info("Run finished (delivered=%s)", result.delivered)
            return result

    __call__ = run
