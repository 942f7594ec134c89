from __future__ import annotations

import unittest
from datetime import date

from flow_recap.errors import InvalidPeriodInput
from flow_recap.periods import PeriodKind, parse_reference_date, resolve_period


class PeriodTests(unittest.TestCase):
    def test_week_containing_new_year_starts_on_monday(self) -> None:
        period = resolve_period(PeriodKind.WEEK, "2026-01-01")
        self.assertEqual(period.start, date(2025, 12, 29))
        self.assertEqual(period.end, date(2026, 1, 4))
        self.assertEqual(period.days_in_period, 7)

    def test_sunday_belongs_to_preceding_monday(self) -> None:
        period = resolve_period(PeriodKind.WEEK, "2026-01-04")
        self.assertEqual(period.start, date(2025, 12, 29))

    def test_leap_year_february(self) -> None:
        period = resolve_period(PeriodKind.MONTH, "2024-02-15")
        self.assertEqual(period.start, date(2024, 2, 1))
        self.assertEqual(period.end, date(2024, 2, 29))
        self.assertEqual(period.days_in_period, 29)

    def test_month_lengths(self) -> None:
        self.assertEqual(resolve_period("month", "2023-02").days_in_period, 28)
        self.assertEqual(resolve_period("month", "2026-04").days_in_period, 30)
        self.assertEqual(resolve_period("month", "2026-12").end, date(2026, 12, 31))

    def test_day_defaults_to_today(self) -> None:
        period = resolve_period(PeriodKind.DAY, None, today=date(2026, 3, 9))
        self.assertEqual(period.start, date(2026, 3, 9))
        self.assertEqual(period.end, date(2026, 3, 9))

    def test_alternative_date_formats(self) -> None:
        self.assertEqual(parse_reference_date("27.01.2026"), date(2026, 1, 27))
        self.assertEqual(parse_reference_date("27/01/2026"), date(2026, 1, 27))

    def test_rejects_unparseable_reference(self) -> None:
        with self.assertRaises(InvalidPeriodInput):
            resolve_period(PeriodKind.DAY, "yesterday-ish")
        with self.assertRaises(InvalidPeriodInput):
            resolve_period(PeriodKind.WEEK, "2026-02-30")
        with self.assertRaises(InvalidPeriodInput):
            resolve_period(PeriodKind.MONTH, "2026-13")

    def test_labels_and_identifiers(self) -> None:
        day = resolve_period(PeriodKind.DAY, "2026-01-01")
        self.assertEqual(day.label, "Thursday, January 1, 2026")
        self.assertEqual(day.identifier, "2026-01-01")

        week = resolve_period(PeriodKind.WEEK, "2026-01-01")
        self.assertEqual(week.short_label, "Dec 29 – Jan 4, 2026")
        self.assertEqual(week.identifier, "2025-12-29")

        month = resolve_period(PeriodKind.MONTH, "2024-02-15")
        self.assertEqual(month.label, "February 2024")
        self.assertEqual(month.identifier, "2024-02")

    def test_dates_cover_whole_range(self) -> None:
        period = resolve_period(PeriodKind.WEEK, "2026-01-01")
        dates = list(period.dates())
        self.assertEqual(len(dates), 7)
        self.assertEqual(dates[0], period.start)
        self.assertEqual(dates[-1], period.end)


if __name__ == "__main__":
    unittest.main()
