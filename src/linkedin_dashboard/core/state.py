from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from linkedin_dashboard.core.series import (
    ENGAGEMENT,
    IMPRESSIONS,
    TimePoint,
    normalize,
    series_from_records,
)
from linkedin_dashboard.core.zoom import ChartView, replace_series, zoom_out
from linkedin_dashboard.data.loaders import SAMPLE_ENGAGEMENT, SAMPLE_IMPRESSIONS
from linkedin_dashboard.utils.log import log_event


@dataclass
class DashboardState:
    """Both charts' data and zoom state. The charts never share a ChartView."""

    impressions: ChartView = field(default_factory=lambda: ChartView(chart_id=IMPRESSIONS))
    engagement: ChartView = field(default_factory=lambda: ChartView(chart_id=ENGAGEMENT))

    @classmethod
    def with_samples(cls) -> "DashboardState":
        return cls(
            impressions=ChartView.for_series(IMPRESSIONS, series_from_records(SAMPLE_IMPRESSIONS)),
            engagement=ChartView.for_series(ENGAGEMENT, series_from_records(SAMPLE_ENGAGEMENT)),
        )

    def view(self, kind: str) -> ChartView:
        if kind == IMPRESSIONS:
            return self.impressions
        if kind == ENGAGEMENT:
            return self.engagement
        raise ValueError(f"Unknown dataset kind: {kind!r}")

    def to_dict(self) -> dict[str, Any]:
        return {
            IMPRESSIONS: self.impressions.to_dict(),
            ENGAGEMENT: self.engagement.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "DashboardState":
        data = data if isinstance(data, dict) else {}
        return cls(
            impressions=ChartView.from_dict(IMPRESSIONS, data.get(IMPRESSIONS)),
            engagement=ChartView.from_dict(ENGAGEMENT, data.get(ENGAGEMENT)),
        )


def load_series(state: DashboardState, kind: str, series: list[TimePoint]) -> bool:
    """Replace one chart's data wholesale. An empty series leaves the state untouched."""
    if not series:
        log_event("load_series", f"{kind}: no valid data found; keeping current series")
        return False
    replace_series(state.view(kind), series)
    return True


def load_csv_text(state: DashboardState, kind: str, text: str) -> int:
    """Normalize uploaded CSV text into the matching chart. Returns the day count loaded."""
    series = normalize(text, kind)
    if not load_series(state, kind, series):
        return 0
    return len(series)


def reset_zoom(state: DashboardState, kind: str) -> None:
    zoom_out(state.view(kind))
