from __future__ import annotations

import os
import sqlite3
import tempfile
import time
import unittest
from contextlib import closing
from pathlib import Path
from unittest import mock

from flow_recap.database import FlowHistoryStore
from flow_recap.errors import StoreUnavailable
from flow_recap.periods import PeriodKind, resolve_period
from flow_recap.recap import build_recap

HISTORY_SCHEMA = """
CREATE TABLE History (
    transcriptEntityId TEXT PRIMARY KEY,
    formattedText TEXT,
    asrText TEXT,
    timestamp TEXT,
    app TEXT,
    url TEXT,
    numWords INTEGER,
    duration REAL,
    language TEXT,
    conversationId TEXT,
    isArchived INTEGER NOT NULL DEFAULT 0
)
"""


def _create_store(db_file: Path, rows: list[tuple]) -> None:
    conn = sqlite3.connect(db_file)
    try:
        conn.execute(HISTORY_SCHEMA)
        conn.executemany(
            """
            INSERT INTO History(
                transcriptEntityId, formattedText, timestamp, app, numWords, duration, isArchived
            )
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            rows,
        )
        conn.commit()
    finally:
        conn.close()


class DatabaseTests(unittest.TestCase):
    def test_load_events_filters_and_orders(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            db_file = Path(tmp_dir) / "flow.sqlite"
            _create_store(
                db_file,
                [
                    ("b", "Second", "2026-01-06 11:00:00.000", "com.apple.mail", 3, 2.0, 0),
                    ("a", "First", "2026-01-05 09:00:00.000", None, None, None, 0),
                    ("archived", "Hidden", "2026-01-05 10:00:00.000", "com.apple.mail", 5, 1.0, 1),
                    ("empty", "", "2026-01-05 10:00:00.000", "com.apple.mail", 0, 1.0, 0),
                    ("null", None, "2026-01-05 10:00:00.000", "com.apple.mail", 0, 1.0, 0),
                    ("before", "Too early", "2026-01-04 23:59:59.000", "com.apple.mail", 1, 1.0, 0),
                    ("after", "Too late", "2026-01-12 00:00:00.000", "com.apple.mail", 1, 1.0, 0),
                    ("sunday", "Last day", "2026-01-11 23:00:00.000", "com.apple.mail", 1, 1.0, 0),
                ],
            )
            store = FlowHistoryStore(db_file)
            period = resolve_period(PeriodKind.WEEK, "2026-01-07")

            events = list(store.load_events(period))
            self.assertEqual([event.id for event in events], ["a", "b", "sunday"])
            self.assertIsNone(events[0].app_id)
            self.assertEqual(events[0].word_count, 0)
            self.assertEqual(events[0].duration_seconds, 0.0)
            self.assertEqual(events[1].app_id, "com.apple.mail")
            self.assertEqual(events[1].word_count, 3)
            self.assertFalse(events[1].archived)

    def test_offset_rows_load_and_aggregate_on_one_day(self) -> None:
        if not hasattr(time, "tzset"):
            self.skipTest("time.tzset is unavailable")
        try:
            with mock.patch.dict(os.environ, {"TZ": "EST5"}):
                time.tzset()
                with tempfile.TemporaryDirectory() as tmp_dir:
                    db_file = Path(tmp_dir) / "flow.sqlite"
                    _create_store(
                        db_file,
                        [
                            ("utc", "Late note", "2026-01-06 03:00:00.000 +00:00", "com.apple.mail", 2, 1.0, 0),
                            ("east", "Later note", "2026-01-05 22:30:00.000 -05:00", "com.apple.mail", 2, 1.0, 0),
                        ],
                    )
                    store = FlowHistoryStore(db_file)
                    totals = {}
                    for day in ("2026-01-05", "2026-01-06"):
                        period = resolve_period(PeriodKind.DAY, day)
                        with closing(store.load_events(period)) as events:
                            stats = build_recap(events, period)
                        self.assertEqual(stats.skipped_events, 0)
                        totals[day] = stats.total_dictations
                    self.assertEqual(totals, {"2026-01-05": 0, "2026-01-06": 2})
        finally:
            time.tzset()

    def test_no_matching_rows_is_not_an_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            db_file = Path(tmp_dir) / "flow.sqlite"
            _create_store(db_file, [])
            store = FlowHistoryStore(db_file)
            period = resolve_period(PeriodKind.DAY, "2026-01-05")
            self.assertEqual(list(store.load_events(period)), [])

    def test_missing_store_fails_before_iteration(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            store = FlowHistoryStore(Path(tmp_dir) / "missing.sqlite")
            period = resolve_period(PeriodKind.DAY, "2026-01-05")
            with self.assertRaises(StoreUnavailable):
                store.load_events(period)
            self.assertFalse((Path(tmp_dir) / "missing.sqlite").exists())

    def test_store_without_history_table(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            db_file = Path(tmp_dir) / "other.sqlite"
            conn = sqlite3.connect(db_file)
            conn.execute("CREATE TABLE Other (id INTEGER)")
            conn.commit()
            conn.close()
            store = FlowHistoryStore(db_file)
            period = resolve_period(PeriodKind.DAY, "2026-01-05")
            with self.assertRaises(StoreUnavailable):
                list(store.load_events(period))

    def test_connection_is_read_only(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            db_file = Path(tmp_dir) / "flow.sqlite"
            _create_store(db_file, [])
            store = FlowHistoryStore(db_file)
            conn = store._connect()
            try:
                with self.assertRaises(sqlite3.OperationalError):
                    conn.execute("DELETE FROM History")
            finally:
                conn.close()


if __name__ == "__main__":
    unittest.main()
