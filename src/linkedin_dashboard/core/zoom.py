from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Union

from linkedin_dashboard.core.series import TimePoint, series_from_records, series_to_records


@dataclass(frozen=True)
class ZoomRange:
    """Inclusive ISO date interval."""

    start: str
    end: str

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"Zoom start {self.start!r} is after end {self.end!r}.")

    def contains(self, date: str) -> bool:
        return self.start <= date <= self.end


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Dragging:
    anchor: str
    chart_id: str


@dataclass(frozen=True)
class Previewing:
    anchor: str
    cursor: str
    chart_id: str


GestureState = Union[Idle, Dragging, Previewing]

IDLE = Idle()


@dataclass
class ChartView:
    """
    Zoom and drag state for one chart.

    `series` is the full gap-filled data and is never modified by zooming;
    `zoomed` is what the chart currently shows.
    """

    chart_id: str
    series: list[TimePoint] = field(default_factory=list)
    zoomed: list[TimePoint] = field(default_factory=list)
    zoom_range: Optional[ZoomRange] = None
    gesture: GestureState = IDLE

    @classmethod
    def for_series(cls, chart_id: str, series: Iterable[TimePoint]) -> "ChartView":
        view = cls(chart_id=chart_id)
        replace_series(view, series)
        return view

    def preview_range(self) -> Optional[tuple[str, str]]:
        if isinstance(self.gesture, Previewing):
            lo, hi = sorted((self.gesture.anchor, self.gesture.cursor))
            return lo, hi
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "chart_id": self.chart_id,
            "series": series_to_records(self.series),
            "zoom_range": (
                None if self.zoom_range is None else [self.zoom_range.start, self.zoom_range.end]
            ),
            "gesture": _gesture_to_dict(self.gesture),
        }

    @classmethod
    def from_dict(cls, chart_id: str, data: dict[str, Any] | None) -> "ChartView":
        data = data if isinstance(data, dict) else {}
        view = cls.for_series(chart_id, series_from_records(data.get("series")))
        rng = data.get("zoom_range")
        if isinstance(rng, (list, tuple)) and len(rng) == 2 and all(rng):
            start, end = sorted(str(x) for x in rng)
            view.zoom_range = ZoomRange(start, end)
            view.zoomed = filter_range(view.series, start, end)
        view.gesture = _gesture_from_dict(data.get("gesture"), chart_id)
        return view


def _gesture_to_dict(gesture: GestureState) -> dict[str, Any]:
    if isinstance(gesture, Dragging):
        return {"state": "dragging", "anchor": gesture.anchor}
    if isinstance(gesture, Previewing):
        return {"state": "previewing", "anchor": gesture.anchor, "cursor": gesture.cursor}
    return {"state": "idle"}


def _gesture_from_dict(data: Any, chart_id: str) -> GestureState:
    if not isinstance(data, dict):
        return IDLE
    state = data.get("state")
    anchor = str(data.get("anchor") or "")
    cursor = str(data.get("cursor") or "")
    if state == "dragging" and anchor:
        return Dragging(anchor, chart_id)
    if state == "previewing" and anchor and cursor:
        return Previewing(anchor, cursor, chart_id)
    return IDLE


def filter_range(series: Iterable[TimePoint], start: str, end: str) -> list[TimePoint]:
    rng = ZoomRange(*sorted((start, end)))
    return [p for p in series if rng.contains(p.date)]


def replace_series(view: ChartView, series: Iterable[TimePoint]) -> None:
    """Install a freshly uploaded series; any zoom or gesture is discarded."""
    view.series = list(series)
    view.zoomed = list(view.series)
    view.zoom_range = None
    view.gesture = IDLE


def pointer_down(view: ChartView, chart_id: str, date: str | None) -> None:
    if chart_id != view.chart_id or not date:
        return
    view.gesture = Dragging(str(date), chart_id)


def pointer_move(view: ChartView, chart_id: str, date: str | None) -> None:
    if chart_id != view.chart_id or not date:
        return
    gesture = view.gesture
    if isinstance(gesture, (Dragging, Previewing)):
        view.gesture = Previewing(gesture.anchor, str(date), chart_id)


def pointer_up(view: ChartView, chart_id: str) -> None:
    if chart_id != view.chart_id:
        return
    gesture = view.gesture
    if isinstance(gesture, Previewing):
        start, end = sorted((gesture.anchor, gesture.cursor))
        view.zoomed = filter_range(view.series, start, end)
        view.zoom_range = ZoomRange(start, end)
    view.gesture = IDLE


def zoom_out(view: ChartView) -> None:
    view.zoom_range = None
    view.zoomed = list(view.series)


def apply_selection(view: ChartView, chart_id: str, dates: list[str]) -> bool:
    """
    Replay a completed box selection as press / move / release.

    A box selection always involves pointer movement, so a single selected day
    still zooms to that day. Returns True when the zoom changed.
    """
    if not dates:
        return False
    before = view.zoom_range
    pointer_down(view, chart_id, dates[0])
    pointer_move(view, chart_id, dates[-1])
    pointer_up(view, chart_id)
    return view.zoom_range != before


def dates_from_selection(selected_data: dict[str, Any] | None, visible_dates: list[str]) -> list[str]:
    """
    Dates covered by a plotly `selectedData` payload on a categorical x axis.

    Uses the selected points when present, else maps the box's x range (category
    indices) back onto `visible_dates`.
    """
    if not isinstance(selected_data, dict):
        return []
    points = selected_data.get("points") or []
    dates = [str(p.get("x")) for p in points if isinstance(p, dict) and p.get("x")]
    if dates:
        return dates

    rng = (selected_data.get("range") or {}).get("x")
    if not isinstance(rng, (list, tuple)) or len(rng) != 2 or not visible_dates:
        return []
    try:
        lo, hi = sorted(float(v) for v in rng)
    except (TypeError, ValueError):
        return []
    i0 = max(0, math.ceil(lo))
    i1 = min(len(visible_dates) - 1, math.floor(hi))
    if i0 > i1:
        return []
    return [visible_dates[i0], visible_dates[i1]]
