from __future__ import annotations

from .formatting import bar_chart, format_duration, format_hour, format_number, truncate
from .models import RecapStats
from .periods import PeriodKind

BAR_WIDTH = 15
DIGEST_SAMPLES = 5
DIGEST_MIN_CHARS = 30
DIGEST_MAX_CHARS = 150

_TITLES = {
    PeriodKind.DAY: "Wispr Flow Daily Recap",
    PeriodKind.WEEK: "Wispr Flow Weekly Recap",
    PeriodKind.MONTH: "Wispr Flow Monthly Recap",
}


def render_text(stats: RecapStats) -> str:
    """Markdown-flavoured report for the terminal."""
    period = stats.period
    lines = ["", f"# {_TITLES[period.kind]} — {period.short_label}", ""]
    lines.extend(_overview(stats))

    if period.kind is PeriodKind.DAY:
        lines.extend(_apps_section(stats))
        lines.extend(_timeline_section(stats))
        lines.extend(_digest_section(stats))
    elif period.kind is PeriodKind.WEEK:
        lines.extend(_days_section(stats))
        lines.extend(_apps_section(stats))
    else:
        lines.extend(_weeks_section(stats))
        lines.extend(_apps_section(stats))
        lines.append(
            f"Daily average (across {stats.active_days} active days): "
            f"{stats.avg_dictations_per_day} dictations · "
            f"{format_number(stats.avg_words_per_day)} words"
        )
        lines.append("")
    return "\n".join(lines) + "\n"


def _overview(stats: RecapStats) -> list[str]:
    kind = stats.period.kind
    with_hours = kind is not PeriodKind.DAY
    rows = [
        ("Dictations", str(stats.total_dictations)),
        ("Total words", format_number(stats.total_words)),
        ("Voice time", format_duration(stats.total_duration_seconds, with_hours=with_hours)),
    ]
    if kind is not PeriodKind.DAY:
        rows.append(("Apps used", str(stats.unique_apps)))
        busiest = stats.busiest_day
        if busiest is None:
            rows.append(("Busiest day", "N/A"))
        elif kind is PeriodKind.WEEK:
            rows.append(("Busiest day", f"{busiest.day_name} ({busiest.count} dictations)"))
        else:
            day = busiest.day
            rows.append(
                ("Busiest day", f"{day:%A}, {day:%B} {day.day}, {day.year} ({busiest.count} dictations)")
            )

    peak = stats.peak_hour
    if peak is None:
        rows.append(("Peak hour", "N/A"))
    else:
        unit = "dictations" if kind is PeriodKind.DAY else "total"
        rows.append(("Peak hour", f"{format_hour(peak.hour)} ({peak.count} {unit})"))

    lines = ["## Overview", "", "| Metric | Value |", "|--------|-------|"]
    lines.extend(f"| {metric} | {value} |" for metric, value in rows)
    lines.append("")
    return lines


def _apps_section(stats: RecapStats) -> list[str]:
    lines = ["## Apps Used", ""]
    max_count = stats.apps[0].count if stats.apps else 1
    for app in stats.apps:
        lines.append(
            f"{bar_chart(app.count, max_count, BAR_WIDTH)} **{app.name}** — "
            f"{app.count} dictations ({app.percent}%) · {app.words} words"
        )
    lines.append("")
    return lines


def _days_section(stats: RecapStats) -> list[str]:
    lines = ["## Day by Day", ""]
    max_count = max([bucket.count for bucket in stats.days] + [1])
    for bucket in stats.days:
        label = f"{bucket.day:%a}, {bucket.day:%b} {bucket.day.day}"
        if bucket.count == 0:
            lines.append(f"{bar_chart(0, max_count, BAR_WIDTH)} {label} — no dictations")
        else:
            lines.append(
                f"{bar_chart(bucket.count, max_count, BAR_WIDTH)} **{label}** — "
                f"{bucket.count} dictations · {bucket.words} words · {bucket.app_count} apps"
            )
    lines.append("")
    return lines


def _weeks_section(stats: RecapStats) -> list[str]:
    lines = ["## Week by Week", ""]
    max_count = max([week.count for week in stats.weeks] + [1])
    for week in stats.weeks:
        if week.count == 0:
            lines.append(f"{bar_chart(0, max_count, BAR_WIDTH)} {week.label} — no dictations")
        else:
            lines.append(
                f"{bar_chart(week.count, max_count, BAR_WIDTH)} **{week.label}** — "
                f"{week.count} dictations · {week.words} words · {week.app_count} apps"
            )
    lines.append("")
    return lines


def _timeline_section(stats: RecapStats) -> list[str]:
    lines = ["## Timeline", ""]
    for block in stats.timeline:
        lines.append(f"### {format_hour(block.hour)} — {block.count} dictations · {block.words} words")
        lines.append(f"Apps: {', '.join(block.apps)}")
        lines.extend(f'> "{snippet}"' for snippet in block.snippets)
        lines.append("")
    return lines


def _digest_section(stats: RecapStats) -> list[str]:
    lines = ["## What You Worked On", ""]
    for name, samples in digest_samples(stats).items():
        lines.append(f"### {name} ({len(stats.transcripts_by_app[name])} dictations)")
        lines.append("")
        if samples:
            lines.extend(f'- "{sample}"' for sample in samples)
        lines.append("")
    return lines


def digest_samples(stats: RecapStats) -> dict[str, list[str]]:
    """Representative transcript excerpts per app, in first-seen app order."""
    return {
        name: [
            truncate(text, DIGEST_MAX_CHARS)
            for text in texts
            if len(text) > DIGEST_MIN_CHARS
        ][:DIGEST_SAMPLES]
        for name, texts in stats.transcripts_by_app.items()
    }
