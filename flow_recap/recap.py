from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Iterable

from .apps import resolve_name
from .errors import MalformedEvent
from .formatting import round_half_up, truncate
from .models import (
    AppBucket,
    DayBucket,
    DictationEvent,
    HourBucket,
    RecapStats,
    TimelineBlock,
    WeekBucket,
    WeekdayBucket,
)
from .periods import Period, PeriodKind

logger = logging.getLogger(__name__)

WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
SNIPPET_MIN_CHARS = 20
SNIPPET_MAX_CHARS = 100
SNIPPETS_PER_BLOCK = 2


def percent_of(part: int, total: int) -> int:
    if total <= 0:
        return 0
    return round_half_up(part / total * 100)


def build_recap(events: Iterable[DictationEvent], period: Period) -> RecapStats:
    """Aggregate one period's events into every view the reports need.

    ``events`` are the loader's rows for ``period``, ordered by timestamp. Each
    event is filed under its ``calendar_day`` and its local hour. Rows with an
    unusable timestamp are counted in ``skipped_events`` and otherwise ignored.
    """
    accepted: list[tuple[DictationEvent, datetime, date]] = []
    skipped = 0
    for event in events:
        try:
            occurred_at = event.occurred_at()
            day = event.calendar_day()
        except MalformedEvent as exc:
            logger.debug("Skipping malformed event: %s", exc)
            skipped += 1
            continue
        accepted.append((event, occurred_at, day))

    total_dictations = len(accepted)
    total_words = sum(event.word_count or 0 for event, _, _ in accepted)
    total_duration = sum(event.duration_seconds or 0.0 for event, _, _ in accepted)
    unique_apps = len({event.app_id for event, _, _ in accepted if event.app_id})

    hours = _hour_buckets(accepted)
    days: tuple[DayBucket, ...] = ()
    weekdays: tuple[WeekdayBucket, ...] = ()
    weeks: tuple[WeekBucket, ...] = ()
    timeline: tuple[TimelineBlock, ...] = ()
    busiest_day = None
    active_days = 0
    avg_dictations = 0
    avg_words = 0

    if period.kind is PeriodKind.DAY:
        timeline = _timeline_blocks(accepted)
    else:
        day_apps = _apps_by_day(accepted)
        days = _day_buckets(accepted, period, day_apps)
        if total_dictations:
            busiest_day = _busiest_day(days)
        active_days = sum(1 for bucket in days if bucket.count > 0)
        if active_days:
            avg_dictations = round_half_up(total_dictations / active_days)
            avg_words = round_half_up(total_words / active_days)
        if period.kind is PeriodKind.MONTH:
            weekdays = _weekday_buckets(days)
            weeks = _week_buckets(days, day_apps)

    return RecapStats(
        period=period,
        total_dictations=total_dictations,
        total_words=total_words,
        total_duration_seconds=total_duration,
        unique_apps=unique_apps,
        apps=_app_buckets(accepted, total_dictations),
        hours=hours,
        peak_hour=_peak_hour(hours),
        days=days,
        busiest_day=busiest_day,
        weekdays=weekdays,
        weeks=weeks,
        active_days=active_days,
        avg_dictations_per_day=avg_dictations,
        avg_words_per_day=avg_words,
        timeline=timeline,
        transcripts_by_app=_transcripts_by_app(accepted),
        skipped_events=skipped,
    )


def _app_buckets(accepted, total: int) -> tuple[AppBucket, ...]:
    grouped: dict[str, dict[str, object]] = {}
    for event, _, _ in accepted:
        name = resolve_name(event.app_id)
        group = grouped.get(name)
        if group is None:
            group = {"app_id": event.app_id, "count": 0, "words": 0, "duration": 0.0}
            grouped[name] = group
        group["count"] = int(group["count"]) + 1
        group["words"] = int(group["words"]) + (event.word_count or 0)
        group["duration"] = float(group["duration"]) + (event.duration_seconds or 0.0)

    # sorted() is stable: equal counts keep first-seen order.
    ranked = sorted(grouped.items(), key=lambda item: -int(item[1]["count"]))
    return tuple(
        AppBucket(
            name=name,
            app_id=group["app_id"],
            count=int(group["count"]),
            words=int(group["words"]),
            duration_seconds=float(group["duration"]),
            percent=percent_of(int(group["count"]), total),
        )
        for name, group in ranked
    )


def _hour_buckets(accepted) -> tuple[HourBucket, ...]:
    counts = [0] * 24
    words = [0] * 24
    for event, occurred_at, _ in accepted:
        counts[occurred_at.hour] += 1
        words[occurred_at.hour] += event.word_count or 0
    return tuple(HourBucket(hour=hour, count=counts[hour], words=words[hour]) for hour in range(24))


def _peak_hour(hours: tuple[HourBucket, ...]) -> HourBucket | None:
    active = [bucket for bucket in hours if bucket.count > 0]
    if not active:
        return None
    return sorted(active, key=lambda bucket: -bucket.count)[0]


def _apps_by_day(accepted) -> dict[date, set[str]]:
    apps: dict[date, set[str]] = {}
    for event, _, day in accepted:
        day_apps = apps.setdefault(day, set())
        if event.app_id:
            day_apps.add(event.app_id)
    return apps


def _day_buckets(accepted, period: Period, day_apps: dict[date, set[str]]) -> tuple[DayBucket, ...]:
    totals: dict[date, list] = {}
    for event, _, day in accepted:
        entry = totals.setdefault(day, [0, 0, 0.0])
        entry[0] += 1
        entry[1] += event.word_count or 0
        entry[2] += event.duration_seconds or 0.0

    buckets = []
    for day in period.dates():
        count, words, duration = totals.get(day, (0, 0, 0.0))
        buckets.append(
            DayBucket(
                day=day,
                count=count,
                words=words,
                duration_seconds=duration,
                app_count=len(day_apps.get(day, ())),
            )
        )
    return tuple(buckets)


def _busiest_day(days: tuple[DayBucket, ...]) -> DayBucket | None:
    best = None
    for bucket in days:
        if best is None or bucket.count > best.count:
            best = bucket
    return best


def _weekday_buckets(days: tuple[DayBucket, ...]) -> tuple[WeekdayBucket, ...]:
    counts = [0] * 7
    for bucket in days:
        counts[bucket.day.weekday()] += bucket.count
    return tuple(WeekdayBucket(label=label, count=counts[index]) for index, label in enumerate(WEEKDAY_LABELS))


def week_of_month(day: date) -> int:
    offset_to_monday = day.replace(day=1).weekday()
    return (day.day - 1 + offset_to_monday) // 7


def _week_buckets(days: tuple[DayBucket, ...], day_apps: dict[date, set[str]]) -> tuple[WeekBucket, ...]:
    grouped: dict[int, dict[str, object]] = {}
    for bucket in days:
        index = week_of_month(bucket.day)
        group = grouped.get(index)
        if group is None:
            group = {"start": bucket.day, "end": bucket.day, "count": 0, "words": 0, "apps": set()}
            grouped[index] = group
        group["end"] = bucket.day
        group["count"] = int(group["count"]) + bucket.count
        group["words"] = int(group["words"]) + bucket.words
        group["apps"].update(day_apps.get(bucket.day, ()))

    return tuple(
        WeekBucket(
            index=index,
            start=group["start"],
            end=group["end"],
            count=int(group["count"]),
            words=int(group["words"]),
            app_count=len(group["apps"]),
        )
        for index, group in sorted(grouped.items())
    )


def _timeline_blocks(accepted) -> tuple[TimelineBlock, ...]:
    grouped: dict[int, list[DictationEvent]] = {}
    for event, occurred_at, _ in accepted:
        grouped.setdefault(occurred_at.hour, []).append(event)

    blocks = []
    for hour in sorted(grouped):
        entries = grouped[hour]
        apps: list[str] = []
        for event in entries:
            name = resolve_name(event.app_id)
            if name not in apps:
                apps.append(name)
        snippets = [
            truncate(event.text, SNIPPET_MAX_CHARS)
            for event in entries
            if event.text and len(event.text) > SNIPPET_MIN_CHARS
        ][:SNIPPETS_PER_BLOCK]
        blocks.append(
            TimelineBlock(
                hour=hour,
                count=len(entries),
                words=sum(event.word_count or 0 for event in entries),
                apps=tuple(apps),
                snippets=tuple(snippets),
            )
        )
    return tuple(blocks)


def _transcripts_by_app(accepted) -> dict[str, tuple[str, ...]]:
    grouped: dict[str, list[str]] = {}
    for event, _, _ in accepted:
        grouped.setdefault(resolve_name(event.app_id), []).append(event.text)
    return {name: tuple(texts) for name, texts in grouped.items()}
