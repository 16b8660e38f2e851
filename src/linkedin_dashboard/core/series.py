from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Literal

import numpy as np
import pandas as pd

from linkedin_dashboard.data.loaders import parse_csv_text
from linkedin_dashboard.utils.log import log_event

SeriesKind = Literal["impressions", "engagement"]

IMPRESSIONS: SeriesKind = "impressions"
ENGAGEMENT: SeriesKind = "engagement"
SERIES_KINDS: tuple[SeriesKind, ...] = (IMPRESSIONS, ENGAGEMENT)

DATE_COLUMN = "Post publish date"
URL_COLUMN = "Post URL"
METRIC_COLUMNS: dict[str, str] = {
    IMPRESSIONS: "Impressions",
    ENGAGEMENT: "Engagements",
}
INPUT_DATE_FORMAT = "%m/%d/%Y"
ISO_DATE_FORMAT = "%Y-%m-%d"
INT64_LIMIT = float(2**63)


@dataclass(frozen=True)
class TimePoint:
    """One calendar day of a metric. `date` is an ISO "YYYY-MM-DD" string."""

    date: str
    value: int
    url: str = ""

    def to_record(self) -> dict[str, Any]:
        return {"date": self.date, "value": int(self.value), "url": self.url}

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "TimePoint":
        return cls(
            date=str(record.get("date") or ""),
            value=int(record.get("value") or 0),
            url=str(record.get("url") or ""),
        )


def series_to_records(series: Iterable[TimePoint]) -> list[dict[str, Any]]:
    return [p.to_record() for p in series]


def series_from_records(records: Iterable[dict[str, Any]] | None) -> list[TimePoint]:
    return [TimePoint.from_record(r) for r in (records or []) if isinstance(r, dict)]


def metric_column(kind: str) -> str:
    try:
        return METRIC_COLUMNS[str(kind)]
    except KeyError:
        raise ValueError(f"Unknown dataset kind: {kind!r}") from None


def _coerce_metric(values: pd.Series) -> pd.Series:
    # Leading integer only ("12abc" -> 12, "12.7" -> 12). Missing, negative and
    # values beyond int64 all collapse to 0.
    leading = values.fillna("").astype(str).str.extract(r"^\s*([+-]?\d+)", expand=False)
    x = pd.to_numeric(leading, errors="coerce").astype("float64")
    x = x.where(x < INT64_LIMIT).replace([np.inf, -np.inf], np.nan).fillna(0)
    return x.clip(lower=0).astype("int64")


def _gap_fill_frame(frame: pd.DataFrame) -> pd.DataFrame:
    """
    frame: sorted, de-duplicated, columns [date (datetime64), value, url].
    Returns a frame indexed by every day between the first and last date.
    """
    full_index = pd.date_range(frame["date"].iloc[0], frame["date"].iloc[-1], freq="D")
    filled = frame.set_index("date").reindex(full_index)
    filled["value"] = filled["value"].fillna(0).astype("int64")
    filled["url"] = filled["url"].fillna("").astype(str)
    return filled


def _frame_to_series(filled: pd.DataFrame) -> list[TimePoint]:
    return [
        TimePoint(date=ts.strftime(ISO_DATE_FORMAT), value=int(v), url=str(u))
        for ts, v, u in zip(filled.index, filled["value"], filled["url"])
    ]


def gap_fill(points: Iterable[TimePoint]) -> list[TimePoint]:
    """Sort by date and insert a zero-value, url-less point for every missing day."""
    points = list(points)
    if not points:
        return []
    frame = pd.DataFrame(
        {
            "date": pd.to_datetime([p.date for p in points], format=ISO_DATE_FORMAT),
            "value": [int(p.value) for p in points],
            "url": [p.url for p in points],
        }
    )
    frame = frame.sort_values("date", kind="stable").drop_duplicates("date", keep="first")
    return _frame_to_series(_gap_fill_frame(frame))


def normalize(raw_text: str, kind: str) -> list[TimePoint]:
    """
    Turn an uploaded LinkedIn export into a gap-free daily series.

    Returns [] when no row survives parsing; callers keep their current data in
    that case.
    """
    metric_col = metric_column(kind)
    rows = parse_csv_text(raw_text)
    log_event("normalize", f"{kind}: parsed {len(rows)} CSV rows")
    if not rows:
        return []

    df = pd.DataFrame(rows)
    for col in (DATE_COLUMN, URL_COLUMN, metric_col):
        if col not in df.columns:
            df[col] = ""

    frame = pd.DataFrame(
        {
            "date": pd.to_datetime(df[DATE_COLUMN], format=INPUT_DATE_FORMAT, errors="coerce"),
            "value": _coerce_metric(df[metric_col]),
            "url": df[URL_COLUMN].fillna("").astype(str),
        }
    )

    bad_dates = frame["date"].isna()
    if bad_dates.any():
        log_event(
            "normalize",
            f"{kind}: dropped {int(bad_dates.sum())} rows with unparseable '{DATE_COLUMN}' "
            f"{df.loc[bad_dates, DATE_COLUMN].tolist()[:5]}",
        )
        frame = frame[~bad_dates]
    if frame.empty:
        return []

    frame = frame.sort_values("date", kind="stable")
    dupes = frame["date"].duplicated(keep="first")
    if dupes.any():
        log_event("normalize", f"{kind}: kept first of {int(dupes.sum())} duplicate dates")
        frame = frame[~dupes]

    series = _frame_to_series(_gap_fill_frame(frame))
    log_event("normalize", f"{kind}: {len(frame)} posts over {len(series)} days")
    return series
