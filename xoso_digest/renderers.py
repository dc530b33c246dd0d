"""Rendering helpers for the outgoing report."""

from __future__ import annotations

from typing import Iterable, List, Sequence

from .config import REPORT_HEADING
from .models import Source, SourceResult
from .templating import get_environment


def order_results(
    results: Iterable[SourceResult], sources: Sequence[Source]
) -> List[SourceResult]:
    """Return results sorted into the configured source order."""
    position = {source: index for index, source in enumerate(sources)}
    return sorted(
        results, key=lambda result: position.get(result.source, len(position))
    )


def has_content(results: Iterable[SourceResult]) -> bool:
    """Whether any source contributed an entry to the report."""
    return any(result.ok for result in results)


def build_report(
    results: Iterable[SourceResult],
    sources: Sequence[Source],
    heading: str = REPORT_HEADING,
) -> str:
    """Render the plain-text report using the Jinja2 template.

    Sources that failed or returned no entries are left out.
    """
    ordered = [result for result in order_results(results, sources) if result.ok]
    template = get_environment().get_template("report.txt.j2")
    return template.render(heading=heading, results=ordered)
