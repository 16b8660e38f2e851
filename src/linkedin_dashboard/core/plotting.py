from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from linkedin_dashboard.core.distribution import aggregate, percentage
from linkedin_dashboard.core.series import TimePoint
from linkedin_dashboard.core.zoom import ChartView
from linkedin_dashboard.plotting.helpers import (
    bar_colors,
    format_display_date,
    month_tick_labels,
    month_ticks,
    pie_colors,
)


@dataclass
class BarPlotData:
    dates: list[str] = field(default_factory=list)
    values: list[int] = field(default_factory=list)
    urls: list[str] = field(default_factory=list)
    colors: list[str] = field(default_factory=list)
    hover: list[str] = field(default_factory=list)
    hoverinfo: list[str] = field(default_factory=list)
    tickvals: list[str] = field(default_factory=list)
    ticktext: list[str] = field(default_factory=list)
    metric_label: str = ""
    zoom_label: str = ""


@dataclass
class PiePlotData:
    labels: list[str] = field(default_factory=list)
    values: list[int] = field(default_factory=list)
    colors: list[str] = field(default_factory=list)
    hover: list[str] = field(default_factory=list)
    customdata: list[list[Any]] = field(default_factory=list)
    total: int = 0


def zoom_caption(view: ChartView) -> str:
    if view.zoom_range is None:
        return "Showing all dates"
    rng = view.zoom_range
    if rng.start == rng.end:
        return f"Showing {format_display_date(rng.start)}"
    return f"Showing {format_display_date(rng.start)} to {format_display_date(rng.end)}"


def prepare_bar_plot(view: ChartView, metric_label: str) -> BarPlotData:
    """Per-day bar data for the view's current (possibly zoomed) series."""
    points: list[TimePoint] = list(view.zoomed)
    values = [int(p.value) for p in points]
    ticks = month_ticks(points)
    hover = [
        f"Date: {format_display_date(p.date)}<br>{metric_label}: {p.value}" if p.value > 0 else ""
        for p in points
    ]
    return BarPlotData(
        dates=[p.date for p in points],
        values=values,
        urls=[p.url for p in points],
        colors=bar_colors(values),
        hover=hover,
        hoverinfo=["text" if v > 0 else "none" for v in values],
        tickvals=ticks,
        ticktext=month_tick_labels(ticks),
        metric_label=metric_label,
        zoom_label=zoom_caption(view),
    )


def prepare_pie_plot(series: Iterable[TimePoint]) -> PiePlotData:
    """
    Engagement share per day.

    Slices are keyed by date because plotly merges slices with equal labels and
    gap-filled days all share the empty url.
    """
    entries, total = aggregate(series)
    hover: list[str] = []
    customdata: list[list[Any]] = []
    for entry in entries:
        pct = percentage(entry.value, total)
        pct_text = "N/A" if pct is None else f"{pct:.1f}%"
        hover.append(
            f"Date: {format_display_date(entry.date)}<br>"
            f"Engagements: {entry.value}<br>"
            f"Percentage: {pct_text}"
        )
        customdata.append([entry.url, entry.date, pct])
    return PiePlotData(
        labels=[e.date for e in entries],
        values=[e.value for e in entries],
        colors=pie_colors(len(entries)),
        hover=hover,
        customdata=customdata,
        total=total,
    )


def url_from_click(click_data: Optional[dict[str, Any]]) -> Optional[str]:
    """Source url of a clicked bar or slice; None for gap-filled days."""
    if not isinstance(click_data, dict):
        return None
    points = click_data.get("points") or []
    if not points or not isinstance(points[0], dict):
        return None
    custom = points[0].get("customdata")
    # Pie events may wrap the row in a one-element list.
    while isinstance(custom, (list, tuple)) and custom:
        custom = custom[0]
    url = str(custom or "").strip()
    return url or None
