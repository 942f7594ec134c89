from __future__ import annotations

import io
import sqlite3
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

from PIL import Image

from flow_recap.app import main

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

ROWS = [
    ("1", "Morning standup notes for the team", "2024-02-05 09:00:00.000", "com.tinyspeck.slackmacgap", 6, 20.0),
    ("2", "Email to the landlord about the lease", "2024-02-05 11:30:00.000", "com.apple.mail", 7, 25.0),
    ("3", "Ticket triage summary", "2024-02-29 16:00:00.000", "com.linear", 3, 9.0),
]


def _create_store(db_file: Path) -> None:
    conn = sqlite3.connect(db_file)
    try:
        conn.execute(HISTORY_SCHEMA)
        conn.executemany(
            """
            INSERT INTO History(transcriptEntityId, formattedText, timestamp, app, numWords, duration)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            ROWS,
        )
        conn.commit()
    finally:
        conn.close()


def _run(argv: list[str]) -> tuple[int, str, str]:
    out, err = io.StringIO(), io.StringIO()
    with redirect_stdout(out), redirect_stderr(err):
        code = main(argv)
    return code, out.getvalue(), err.getvalue()


class CommandLineTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp_dir = Path(self._tmp.name)
        self.db_file = self.tmp_dir / "flow.sqlite"
        self.output_dir = self.tmp_dir / "out"
        _create_store(self.db_file)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _common(self) -> list[str]:
        return ["--db", str(self.db_file), "--output-dir", str(self.output_dir)]

    def test_month_text_report(self) -> None:
        code, out, _ = _run(["month", "--month=2024-02", *self._common()])
        self.assertEqual(code, 0)
        self.assertIn("# Wispr Flow Monthly Recap — February 2024", out)
        self.assertIn("| Dictations | 3 |", out)
        self.assertIn("Daily average (across 2 active days): 2 dictations · 8 words", out)
        self.assertFalse(self.output_dir.exists())

    def test_week_html_report(self) -> None:
        code, out, _ = _run(["week", "--week-of", "2024-02-07", "--html", *self._common()])
        self.assertEqual(code, 0)
        target = self.output_dir / "wispr-weekly-2024-02-05.html"
        self.assertIn(str(target), out)
        html = target.read_text(encoding="utf-8")
        self.assertIn("Wispr Flow Weekly Recap", html)
        self.assertIn("February 5 – February 11, 2024", html)

    def test_day_share_image(self) -> None:
        code, out, _ = _run(["day", "--date", "2024-02-05", "--share-image", *self._common()])
        self.assertEqual(code, 0)
        self.assertIn("# Wispr Flow Daily Recap", out)
        image_path = self.output_dir / "wispr-recap-2024-02-05.png"
        with Image.open(image_path) as image:
            self.assertEqual(image.size, (1200, 630))

    def test_no_activity_exits_cleanly_without_file(self) -> None:
        code, out, _ = _run(["month", "--month", "2024-03", "--html", *self._common()])
        self.assertEqual(code, 0)
        self.assertIn("No Wispr Flow dictations found for March 2024.", out)
        self.assertFalse((self.output_dir / "wispr-monthly-2024-03.html").exists())

    def test_missing_store(self) -> None:
        code, _, err = _run(["day", "--db", str(self.tmp_dir / "nope.sqlite")])
        self.assertEqual(code, 1)
        self.assertIn("Wispr Flow database not found", err)

    def test_invalid_date(self) -> None:
        code, _, err = _run(["week", "--week-of", "next tuesday", *self._common()])
        self.assertEqual(code, 1)
        self.assertIn("Invalid date 'next tuesday'", err)

    def test_version(self) -> None:
        code, out, _ = _run(["--version"])
        self.assertEqual(code, 0)
        self.assertEqual(out.strip(), "0.1.0")


if __name__ == "__main__":
    unittest.main()
