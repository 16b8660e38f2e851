from __future__ import annotations

import unittest

from linkedin_dashboard.core.distribution import DistributionEntry, aggregate, percentage
from linkedin_dashboard.core.plotting import prepare_pie_plot
from linkedin_dashboard.core.series import TimePoint, gap_fill
from linkedin_dashboard.plotting.helpers import (
    PIE_COLORS,
    format_display_date,
    month_tick_labels,
    month_ticks,
)

ENGAGEMENT_VALUES = [65, 103, 157, 81, 117]


def _engagement_series() -> list[TimePoint]:
    return [
        TimePoint(f"2023-05-0{i + 1}", v, f"https://example.com/post{i + 1}")
        for i, v in enumerate(ENGAGEMENT_VALUES)
    ]


class TestAggregate(unittest.TestCase):
    def test_total_and_first_share(self) -> None:
        entries, total = aggregate(_engagement_series())
        self.assertEqual(total, 523)
        self.assertEqual(percentage(entries[0].value, total), 12.4)

    def test_entries_sum_to_total(self) -> None:
        entries, total = aggregate(_engagement_series())
        self.assertEqual(sum(e.value for e in entries), total)

    def test_entry_per_point_with_url_label(self) -> None:
        series = gap_fill([TimePoint("2023-05-01", 5, "u1"), TimePoint("2023-05-03", 7, "u3")])
        entries, total = aggregate(series)
        self.assertEqual(len(entries), 3)
        self.assertEqual(entries[1], DistributionEntry(label="", value=0, date="2023-05-02", url=""))
        self.assertEqual(entries[0].label, entries[0].url)
        self.assertEqual(total, 12)

    def test_zero_total_has_no_percentage(self) -> None:
        self.assertIsNone(percentage(0, 0))
        entries, total = aggregate([])
        self.assertEqual((entries, total), ([], 0))

    def test_pie_data_is_keyed_by_date(self) -> None:
        data = prepare_pie_plot(_engagement_series() + [TimePoint("2023-05-06", 0, "")])
        self.assertEqual(len(set(data.labels)), 6)
        self.assertEqual(data.total, 523)
        self.assertEqual(data.colors[5], PIE_COLORS[0])
        self.assertIn("Percentage: 12.4%", data.hover[0])
        self.assertEqual(data.customdata[0][0], "https://example.com/post1")

    def test_pie_hover_without_total(self) -> None:
        data = prepare_pie_plot([TimePoint("2023-05-01", 0, "")])
        self.assertIn("Percentage: N/A", data.hover[0])


class TestMonthTicks(unittest.TestCase):
    def test_first_date_of_each_month_in_order(self) -> None:
        series = gap_fill(
            [TimePoint("2023-04-29", 1, "a"), TimePoint("2023-05-02", 1, "b"), TimePoint("2023-06-01", 1, "c")]
        )
        ticks = month_ticks(series)
        self.assertEqual(ticks, ["2023-04-29", "2023-05-01", "2023-06-01"])
        self.assertEqual(month_tick_labels(ticks), ["Apr", "May", "Jun"])

    def test_same_month_in_different_years(self) -> None:
        series = [TimePoint("2022-05-31", 1, ""), TimePoint("2023-05-01", 1, "")]
        self.assertEqual(month_ticks(series), ["2022-05-31", "2023-05-01"])

    def test_empty_series(self) -> None:
        self.assertEqual(month_ticks([]), [])

    def test_display_date(self) -> None:
        self.assertEqual(format_display_date("2023-05-01"), "May 1, 2023")
        self.assertEqual(format_display_date(""), "N/A")


if __name__ == "__main__":
    unittest.main(verbosity=2)
