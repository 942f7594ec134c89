from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Iterator

from .errors import StoreUnavailable
from .models import DictationEvent
from .periods import Period

logger = logging.getLogger(__name__)


class FlowHistoryStore:
    """Read-only view of the Wispr Flow ``History`` table.

    The file belongs to the running Wispr Flow app, so it is never created,
    migrated or opened writable from here.
    """

    def __init__(self, db_file: Path):
        self._db_file = Path(db_file)

    def _connect(self) -> sqlite3.Connection:
        if not self._db_file.is_file():
            raise StoreUnavailable(self._db_file)
        uri = f"{self._db_file.resolve().as_uri()}?mode=ro"
        try:
            conn = sqlite3.connect(uri, uri=True, timeout=30)
        except sqlite3.Error as exc:
            raise StoreUnavailable(self._db_file, str(exc)) from exc
        conn.row_factory = sqlite3.Row
        return conn

    def load_events(self, period: Period) -> Iterator[DictationEvent]:
        """Events of ``period`` in timestamp order.

        The store is opened before this returns, so a missing file fails here
        rather than on first iteration. The connection closes once the returned
        generator is exhausted or closed.
        """
        conn = self._connect()
        logger.debug("Loading %s events %s..%s from %s", period.kind.value, period.start, period.end, self._db_file)
        return self._iter_events(conn, period)

    def _iter_events(self, conn: sqlite3.Connection, period: Period) -> Iterator[DictationEvent]:
        try:
            try:
                cursor = conn.execute(
                    """
                    SELECT
                        transcriptEntityId,
                        formattedText,
                        timestamp,
                        app,
                        url,
                        numWords,
                        duration,
                        language,
                        conversationId,
                        isArchived
                    FROM History
                    WHERE date(timestamp) >= ? AND date(timestamp) <= ?
                      AND isArchived = 0
                      AND (formattedText IS NOT NULL AND formattedText != '')
                    ORDER BY timestamp ASC
                    """,
                    (period.start.isoformat(), period.end.isoformat()),
                )
            except sqlite3.Error as exc:
                raise StoreUnavailable(self._db_file, str(exc)) from exc
            for row in cursor:
                yield self._row_to_event(row)
        finally:
            conn.close()

    @staticmethod
    def _row_to_event(row: sqlite3.Row) -> DictationEvent:
        return DictationEvent(
            id=str(row["transcriptEntityId"]),
            text=str(row["formattedText"]),
            timestamp=str(row["timestamp"] or ""),
            app_id=row["app"] or None,
            word_count=_as_int(row["numWords"]),
            duration_seconds=_as_float(row["duration"]),
            archived=bool(row["isArchived"]),
            url=row["url"] or None,
            language=row["language"] or None,
            conversation_id=row["conversationId"] or None,
        )


def _as_int(value) -> int:
    try:
        return max(0, int(value or 0))
    except (TypeError, ValueError):
        return 0


def _as_float(value) -> float:
    try:
        return max(0.0, float(value or 0.0))
    except (TypeError, ValueError):
        return 0.0
