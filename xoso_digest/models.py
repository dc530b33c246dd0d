"""Shared data models for xoso_digest."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

# Location label -> prize lines. Dicts keep insertion order, which is the
# order locations were first seen in the description.
PrizeTable = Dict[str, List[str]]


@dataclass(frozen=True)
class Source:
    """A named lottery feed."""

    label: str
    url: str


@dataclass
class Entry:
    """Simplified RSS feed item used throughout the app."""

    title: str
    description: str
    published: str = ""


@dataclass
class SourceResult:
    """Outcome of fetching and parsing one source during a run."""

    source: Source
    entry: Optional[Entry] = None
    prizes: PrizeTable = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.entry is not None
