from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterator

from .errors import InvalidPeriodInput

_DATE_FORMATS = (
    "%Y-%m-%d",  # 2026-01-27
    "%d.%m.%Y",  # 27.01.2026
    "%d/%m/%Y",  # 27/01/2026
)
_DATE_HINT = "2026-01-27, 27.01.2026, 27/01/2026"
_MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{1,2})$")


class PeriodKind(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


@dataclass(frozen=True)
class Period:
    kind: PeriodKind
    start: date
    end: date

    @property
    def days_in_period(self) -> int:
        return (self.end - self.start).days + 1

    def dates(self) -> Iterator[date]:
        for offset in range(self.days_in_period):
            yield self.start + timedelta(days=offset)

    @property
    def identifier(self) -> str:
        if self.kind is PeriodKind.MONTH:
            return self.start.strftime("%Y-%m")
        return self.start.isoformat()

    @property
    def label(self) -> str:
        if self.kind is PeriodKind.DAY:
            return f"{self.start:%A}, {self.start:%B} {self.start.day}, {self.start.year}"
        if self.kind is PeriodKind.WEEK:
            return (
                f"{self.start:%B} {self.start.day} – "
                f"{self.end:%B} {self.end.day}, {self.end.year}"
            )
        return f"{self.start:%B} {self.start.year}"

    @property
    def short_label(self) -> str:
        if self.kind is PeriodKind.WEEK:
            return (
                f"{self.start:%b} {self.start.day} – "
                f"{self.end:%b} {self.end.day}, {self.end.year}"
            )
        return self.label

    @property
    def no_activity_label(self) -> str:
        if self.kind is PeriodKind.WEEK:
            return f"week of {self.start.isoformat()}"
        if self.kind is PeriodKind.DAY:
            return self.start.isoformat()
        return self.label


def resolve_period(
    kind: PeriodKind | str,
    reference: date | str | None = None,
    today: date | None = None,
) -> Period:
    """Resolve the inclusive calendar range of ``kind`` containing ``reference``.

    ``reference`` may be a date, a date string, or ``None`` for the current local
    date. Months also accept ``YYYY-MM``. Raises ``InvalidPeriodInput`` for text
    that does not name a calendar date.
    """
    kind = PeriodKind(kind)
    anchor = _reference_date(kind, reference, today)

    if kind is PeriodKind.DAY:
        return Period(kind, anchor, anchor)
    if kind is PeriodKind.WEEK:
        monday = anchor - timedelta(days=anchor.weekday())
        return Period(kind, monday, monday + timedelta(days=6))

    last_day = calendar.monthrange(anchor.year, anchor.month)[1]
    return Period(
        kind,
        date(anchor.year, anchor.month, 1),
        date(anchor.year, anchor.month, last_day),
    )


def parse_reference_date(text: str) -> date:
    value = (text or "").strip()
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    raise InvalidPeriodInput(text, _DATE_HINT)


def _reference_date(kind: PeriodKind, reference: date | str | None, today: date | None) -> date:
    if reference is None or (isinstance(reference, str) and not reference.strip()):
        return today or date.today()
    if isinstance(reference, datetime):
        return reference.date()
    if isinstance(reference, date):
        return reference

    if kind is PeriodKind.MONTH:
        match = _MONTH_PATTERN.match(reference.strip())
        if match:
            year, month = int(match.group(1)), int(match.group(2))
            if not 1 <= month <= 12:
                raise InvalidPeriodInput(reference, "2026-01, " + _DATE_HINT)
            return date(year, month, 1)
        try:
            return parse_reference_date(reference)
        except InvalidPeriodInput:
            raise InvalidPeriodInput(reference, "2026-01, " + _DATE_HINT) from None
    return parse_reference_date(reference)
