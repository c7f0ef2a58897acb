from __future__ import annotations

"""
Status Report Utilities.

Helpers used by the interface layer to filter, order and summarize the
flat reports produced by status and fix passes.
"""

from collections import Counter
from typing import Dict, Iterable, List

from fsreconcile.domain.status_models import Severity, StatusMessage


def filter_by_severity(messages: Iterable[StatusMessage], severity: Severity) -> List[StatusMessage]:
    """Return the messages with exactly the given severity, in report order."""
    return [m for m in messages if m.severity == severity]


def sort_by_severity(messages: Iterable[StatusMessage]) -> List[StatusMessage]:
    """Return the messages ordered from most to least serious (stable)."""
    return sorted(messages, key=lambda m: m.severity, reverse=True)


def highest_severity(messages: Iterable[StatusMessage]) -> Severity:
    """Most serious severity of a report; OK for an empty report."""
    return max((m.severity for m in messages), default=Severity.OK)


def count_by_severity(messages: Iterable[StatusMessage]) -> Dict[str, int]:
    """Number of messages per severity name, including zero counts."""
    counts = Counter(m.severity for m in messages)
    return {s.name: counts.get(s, 0) for s in Severity}


def is_blocking(messages: Iterable[StatusMessage]) -> bool:
    """True if a report contains a WARNING or ERROR."""
    return highest_severity(messages) >= Severity.WARNING
