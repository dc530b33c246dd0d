"""Feed retrieval helpers."""

from __future__ import annotations

import logging
from typing import List

import feedparser
import requests

from .models import Entry

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class FeedFetchError(RuntimeError):
    """Raised when a feed cannot be downloaded or decoded."""


def _is_malformed(parsed) -> bool:
    if not getattr(parsed, "bozo", False):
        return False
    exc = getattr(parsed, "bozo_exception", None)
    # A declared/actual charset mismatch still yields a usable document.
    return not isinstance(exc, feedparser.CharacterEncodingOverride)


def _entry_text(item, *names: str) -> str:
    for name in names:
        value = item.get(name)
        if value:
            return value
    return ""


def fetch_entries(url: str, timeout: float = DEFAULT_TIMEOUT) -> List[Entry]:
    """Download ``url`` and return its items in document order.

    Raises ``FeedFetchError`` on network errors, non-2xx responses and
    malformed documents. A well-formed feed without items returns ``[]``.
    """
    logger.info("Fetching feed %s", url)
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
        content = response.content
    except requests.RequestException as exc:
        raise FeedFetchError(f"Failed to fetch feed {url}: {exc}") from exc

    parsed = feedparser.parse(content)
    if _is_malformed(parsed):
        raise FeedFetchError(
            f"Malformed feed document from {url}: {parsed.get('bozo_exception')}"
        )

    entries = [
        Entry(
            title=_entry_text(item, "title"),
            description=_entry_text(item, "description", "summary"),
            published=_entry_text(item, "published"),
        )
        for item in parsed.entries
    ]

    logger.info("Collected %d entries from feed %s", len(entries), url)
    return entries
