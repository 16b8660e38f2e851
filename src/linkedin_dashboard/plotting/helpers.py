from datetime import datetime
from typing import Iterable, List

BAR_COLOR = "#82ca9d"
TRANSPARENT = "rgba(0,0,0,0)"
PIE_COLORS = ["#0088FE", "#00C49F", "#FFBB28", "#FF8042", "#8884D8"]


def month_ticks(series) -> List[str]:
    """First date of each distinct YYYY-MM in `series`, in series order."""
    seen = set()
    ticks: List[str] = []
    for point in series:
        month = point.date[:7]
        if month not in seen:
            seen.add(month)
            ticks.append(point.date)
    return ticks


def month_tick_labels(ticks: Iterable[str]) -> List[str]:
    return [datetime.strptime(t, "%Y-%m-%d").strftime("%b") for t in ticks]


def format_display_date(iso_date: str) -> str:
    """'2023-05-01' -> 'May 1, 2023'."""
    if not iso_date:
        return "N/A"
    d = datetime.strptime(iso_date, "%Y-%m-%d")
    return f"{d.strftime('%b')} {d.day}, {d.year}"


def bar_colors(values: Iterable[int]) -> List[str]:
    return [BAR_COLOR if v > 0 else TRANSPARENT for v in values]


def pie_colors(count: int) -> List[str]:
    return [PIE_COLORS[i % len(PIE_COLORS)] for i in range(count)]
