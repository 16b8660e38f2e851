from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from linkedin_dashboard.core.series import TimePoint


@dataclass(frozen=True)
class DistributionEntry:
    label: str
    value: int
    date: str
    url: str


def aggregate(series: Iterable[TimePoint]) -> tuple[list[DistributionEntry], int]:
    """One pie entry per engagement day (gap-fillers included) plus the overall total."""
    entries = [
        DistributionEntry(label=p.url, value=int(p.value), date=p.date, url=p.url)
        for p in series
    ]
    total = sum(e.value for e in entries)
    return entries, total


def percentage(value: int, total: int) -> Optional[float]:
    if not total:
        return None
    return round(value / total * 100.0, 1)
