from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime, timezone

from .errors import MalformedEvent
from .periods import Period

_OFFSET = re.compile(r"\s*([+-]\d{2}):?(\d{2})$")


@dataclass(frozen=True)
class DictationEvent:
    id: str
    text: str
    timestamp: str
    app_id: str | None = None
    word_count: int = 0
    duration_seconds: float = 0.0
    archived: bool = False
    url: str | None = None
    language: str | None = None
    conversation_id: str | None = None

    def occurred_at(self) -> datetime:
        """Event time as a naive local datetime."""
        parsed = self._parse_timestamp()
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone().replace(tzinfo=None)
        return parsed

    def calendar_day(self) -> date:
        """Day the event is filed under, matching SQLite's ``date(timestamp)``.

        Offset-bearing timestamps fall on their UTC date and naive ones on the
        date as written, so the day always agrees with the loader's filter.
        """
        parsed = self._parse_timestamp()
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc)
        return parsed.date()

    def _parse_timestamp(self) -> datetime:
        raw = (self.timestamp or "").strip()
        if not raw:
            raise MalformedEvent(self.id, "missing timestamp")
        normalized = _OFFSET.sub(r"\1:\2", raw)
        if normalized.endswith(("Z", "z")):
            normalized = normalized[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(normalized)
        except ValueError:
            raise MalformedEvent(self.id, f"unparseable timestamp {raw!r}") from None


@dataclass(frozen=True)
class AppBucket:
    name: str
    app_id: str | None
    count: int
    words: int
    duration_seconds: float
    percent: int


@dataclass(frozen=True)
class HourBucket:
    hour: int
    count: int
    words: int


@dataclass(frozen=True)
class DayBucket:
    day: date
    count: int
    words: int
    duration_seconds: float
    app_count: int

    @property
    def day_name(self) -> str:
        return self.day.strftime("%a")


@dataclass(frozen=True)
class WeekdayBucket:
    label: str
    count: int


@dataclass(frozen=True)
class WeekBucket:
    index: int
    start: date
    end: date
    count: int
    words: int
    app_count: int

    @property
    def label(self) -> str:
        return f"Week of {self.start:%b} {self.start.day}"


@dataclass(frozen=True)
class TimelineBlock:
    hour: int
    count: int
    words: int
    apps: tuple[str, ...]
    snippets: tuple[str, ...]


@dataclass(frozen=True)
class RecapStats:
    period: Period
    total_dictations: int
    total_words: int
    total_duration_seconds: float
    unique_apps: int
    apps: tuple[AppBucket, ...]
    hours: tuple[HourBucket, ...]
    peak_hour: HourBucket | None
    days: tuple[DayBucket, ...] = ()
    busiest_day: DayBucket | None = None
    weekdays: tuple[WeekdayBucket, ...] = ()
    weeks: tuple[WeekBucket, ...] = ()
    active_days: int = 0
    avg_dictations_per_day: int = 0
    avg_words_per_day: int = 0
    timeline: tuple[TimelineBlock, ...] = ()
    transcripts_by_app: dict[str, tuple[str, ...]] = field(default_factory=dict)
    skipped_events: int = 0

    @property
    def is_empty(self) -> bool:
        return self.total_dictations == 0
