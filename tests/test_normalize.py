from __future__ import annotations

import tempfile
import unittest
from datetime import date
from pathlib import Path
from unittest import mock

from linkedin_dashboard.core.series import (
    ENGAGEMENT,
    IMPRESSIONS,
    TimePoint,
    gap_fill,
    normalize,
    series_from_records,
    series_to_records,
)

SCENARIO_1 = "Post publish date,Impressions,Post URL\n5/1/2023,1000,u1\n5/3/2023,800,u3"


def _days_between(a: str, b: str) -> int:
    return (date.fromisoformat(b) - date.fromisoformat(a)).days


class _QuietLogMixin:
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        patcher = mock.patch("linkedin_dashboard.utils.log.DEFAULT_LOG_PATH", Path(tmp.name) / "test.log")
        patcher.start()
        self.addCleanup(patcher.stop)


class TestNormalize(_QuietLogMixin, unittest.TestCase):
    def test_gap_filled_impressions(self) -> None:
        series = normalize(SCENARIO_1, IMPRESSIONS)
        self.assertEqual(
            series,
            [
                TimePoint("2023-05-01", 1000, "u1"),
                TimePoint("2023-05-02", 0, ""),
                TimePoint("2023-05-03", 800, "u3"),
            ],
        )

    def test_output_is_sorted_gap_free_and_keeps_input_values(self) -> None:
        text = (
            "Post URL,Post publish date,Engagements\n"
            "u3,5/3/2023,12\n"
            "u0,4/28/2023,7\n"
            "u1,05/01/2023,9\n"
        )
        series = normalize(text, ENGAGEMENT)
        dates = [p.date for p in series]
        self.assertEqual(dates[0], "2023-04-28")
        self.assertEqual(dates[-1], "2023-05-03")
        self.assertEqual(len(series), _days_between(dates[0], dates[-1]) + 1)
        for prev, cur in zip(dates, dates[1:]):
            self.assertEqual(_days_between(prev, cur), 1)

        by_date = {p.date: p for p in series}
        self.assertEqual(by_date["2023-04-28"], TimePoint("2023-04-28", 7, "u0"))
        self.assertEqual(by_date["2023-05-01"], TimePoint("2023-05-01", 9, "u1"))
        self.assertEqual(by_date["2023-05-03"], TimePoint("2023-05-03", 12, "u3"))
        self.assertEqual(by_date["2023-04-30"], TimePoint("2023-04-30", 0, ""))

    def test_non_numeric_metric_is_zero_for_both_kinds(self) -> None:
        for kind, column in ((IMPRESSIONS, "Impressions"), (ENGAGEMENT, "Engagements")):
            with self.subTest(kind=kind):
                text = f"Post publish date,{column},Post URL\n5/1/2023,n/a,u1\n5/2/2023,,u2\n"
                series = normalize(text, kind)
                self.assertEqual([p.value for p in series], [0, 0])
                self.assertEqual([p.url for p in series], ["u1", "u2"])

    def test_fractional_and_negative_metrics(self) -> None:
        text = "Post publish date,Impressions,Post URL\n5/1/2023,12.7,u1\n5/2/2023,-5,u2\n"
        self.assertEqual([p.value for p in normalize(text, IMPRESSIONS)], [12, 0])

    def test_metric_reads_leading_integer(self) -> None:
        text = "Post publish date,Engagements,Post URL\n5/1/2023,12abc,u1\n5/2/2023, +7 likes,u2\n5/3/2023,abc12,u3\n"
        self.assertEqual([p.value for p in normalize(text, ENGAGEMENT)], [12, 7, 0])

    def test_metric_beyond_int64_is_zero_not_negative(self) -> None:
        text = (
            "Post publish date,Impressions,Post URL\n"
            "5/1/2023,99999999999999999999,u1\n"
            "5/2/2023,9223372036854775808,u2\n"
            "5/3/2023,42,u3\n"
        )
        series = normalize(text, IMPRESSIONS)
        self.assertTrue(all(p.value >= 0 for p in series))
        self.assertEqual([p.value for p in series], [0, 0, 42])

    def test_rows_with_unparseable_dates_are_dropped(self) -> None:
        text = "Post publish date,Impressions,Post URL\nyesterday,50,bad\n5/2/2023,10,u2\n13/40/2023,5,bad\n"
        self.assertEqual(normalize(text, IMPRESSIONS), [TimePoint("2023-05-02", 10, "u2")])

    def test_duplicate_dates_keep_first_row(self) -> None:
        text = "Post publish date,Impressions,Post URL\n5/1/2023,10,first\n5/1/2023,20,second\n"
        self.assertEqual(normalize(text, IMPRESSIONS), [TimePoint("2023-05-01", 10, "first")])

    def test_header_only_or_empty_input_yields_nothing(self) -> None:
        self.assertEqual(normalize("Post publish date,Impressions,Post URL\n", IMPRESSIONS), [])
        self.assertEqual(normalize("", ENGAGEMENT), [])

    def test_missing_metric_column_defaults_to_zero(self) -> None:
        text = "Post publish date,Post URL\n5/1/2023,u1\n"
        self.assertEqual(normalize(text, ENGAGEMENT), [TimePoint("2023-05-01", 0, "u1")])

    def test_unknown_kind_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            normalize(SCENARIO_1, "followers")


class TestGapFill(unittest.TestCase):
    def test_length_matches_day_span(self) -> None:
        points = [TimePoint("2023-02-27", 1, "a"), TimePoint("2023-03-02", 2, "b")]
        filled = gap_fill(points)
        self.assertEqual(len(filled), _days_between("2023-02-27", "2023-03-02") + 1)
        self.assertEqual([p.date for p in filled], ["2023-02-27", "2023-02-28", "2023-03-01", "2023-03-02"])

    def test_unsorted_input_is_sorted(self) -> None:
        filled = gap_fill([TimePoint("2023-05-02", 2, "b"), TimePoint("2023-05-01", 1, "a")])
        self.assertEqual(filled, [TimePoint("2023-05-01", 1, "a"), TimePoint("2023-05-02", 2, "b")])

    def test_empty(self) -> None:
        self.assertEqual(gap_fill([]), [])

    def test_record_shape(self) -> None:
        series = [TimePoint("2023-05-01", 3, "u")]
        records = series_to_records(series)
        self.assertEqual(records, [{"date": "2023-05-01", "value": 3, "url": "u"}])
        self.assertEqual(series_from_records(records), series)


if __name__ == "__main__":
    unittest.main(verbosity=2)
