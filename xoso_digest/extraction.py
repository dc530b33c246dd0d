"""Prize extraction from feed item descriptions.

Descriptions look roughly like::

    [Hà Nội]<br>G.ĐB: 12345<br />G.1: 67890<BR/>Some remark<br>[Hải Phòng]...

Lines in brackets name the location for the prize lines (``G.`` prefix) that
follow. Everything else is ignored.
"""

from __future__ import annotations

import logging
import re

from .models import PrizeTable

logger = logging.getLogger(__name__)

_BREAK_TAG = re.compile(r"<\s*br\s*/?\s*>", re.IGNORECASE)

LOCATION_OPEN = "["
LOCATION_CLOSE = "]"
PRIZE_PREFIX = "G."


def normalize_breaks(text: str) -> str:
    """Replace every spelling of an inline ``<br>`` tag with a newline."""
    return _BREAK_TAG.sub("\n", text)


def is_location_marker(line: str) -> bool:
    return line.startswith(LOCATION_OPEN) and LOCATION_CLOSE in line


def is_prize_marker(line: str) -> bool:
    return line.startswith(PRIZE_PREFIX)


def parse_description(text: str) -> PrizeTable:
    """Group the prize lines of a description by location label.

    Prize lines seen before any location marker are stored under the empty
    string. A location marker without prize lines maps to an empty list.
    """
    prizes: PrizeTable = {}
    current_location = ""

    for raw_line in normalize_breaks(text or "").splitlines():
        line = raw_line.strip()
        if not line:
            continue

        if is_location_marker(line):
            current_location = line
            prizes.setdefault(current_location, [])
            continue

        if is_prize_marker(line):
            prizes.setdefault(current_location, []).append(line)
            continue

        logger.debug("Ignoring description line: %s", line)

    logger.debug(
        "Extracted %d prize lines across %d locations",
        sum(len(lines) for lines in prizes.values()),
        len(prizes),
    )
    return prizes
