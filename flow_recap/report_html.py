from __future__ import annotations

from datetime import date, datetime
from html import escape

from .apps import fallback_initial, resolve_icon
from .formatting import format_duration, format_hour, format_number, round_half_up
from .models import RecapStats
from .periods import PeriodKind
from .report_text import digest_samples

HEATMAP_FIRST_HOUR = 6
HEATMAP_LAST_HOUR = 23

_HEADINGS = {
    PeriodKind.DAY: ("Daily Recap", "Wispr Flow Recap", "Your voice, distilled — powered by Wispr Flow"),
    PeriodKind.WEEK: ("Weekly Recap", "Wispr Flow Weekly Recap", "Your week in voice — powered by Wispr Flow"),
    PeriodKind.MONTH: ("Monthly Recap", "Wispr Flow Monthly Recap", "Your month in voice — powered by Wispr Flow"),
}

_FONTS = (
    "https://fonts.googleapis.com/css2?family=Instrument+Serif:ital@0;1"
    "&family=Inter:wght@400;500;600;700&family=JetBrains+Mono:wght@400;500&display=swap"
)

_STYLE = """
  :root {
    --bg: #f5f4ed;
    --surface: rgba(255, 255, 255, 0.6);
    --border: rgba(135, 139, 134, 0.12);
    --text: #0b0d0b;
    --text-muted: #52534e;
    --accent: #f34e3f;
    --accent-light: rgba(243, 78, 63, 0.12);
    --font-sans: "Inter", system-ui, -apple-system, sans-serif;
    --font-serif: "Instrument Serif", "Times New Roman", serif;
    --font-mono: "JetBrains Mono", ui-monospace, SFMono-Regular, Menlo, monospace;
  }
  * { margin: 0; padding: 0; box-sizing: border-box; }
  body {
    font-family: var(--font-sans); background: var(--bg); color: var(--text);
    padding: 48px 24px; max-width: 760px; margin: 0 auto;
    line-height: 1.5; font-size: 1.125rem;
  }
  @media (min-width: 640px) { body { padding: 64px 32px; font-size: 1.25rem; } }
  .label-mono {
    font-family: var(--font-mono); font-size: 0.65rem; font-weight: 500;
    letter-spacing: 0.14em; text-transform: uppercase; color: var(--accent);
    display: inline-flex; padding: 0.25rem 0.6rem; background: var(--accent-light);
    border-radius: 999px; margin-bottom: 16px;
  }
  h1 {
    font-family: var(--font-serif); font-size: 2.5rem; font-weight: 400;
    line-height: 1.15; margin-bottom: 6px; font-style: italic;
  }
  .subtitle { color: var(--text-muted); font-size: 0.95rem; margin-bottom: 40px; }
  .stats-grid { display: grid; grid-template-columns: repeat(2, 1fr); gap: 12px; margin-bottom: 48px; }
  @media (min-width: 640px) { .stats-grid { grid-template-columns: repeat(3, 1fr); } }
  .stat-card {
    background: var(--surface); border: 1px solid var(--border);
    border-radius: 16px; padding: 20px;
  }
  .stat-value { font-family: var(--font-serif); font-size: 2rem; line-height: 1.1; margin-bottom: 4px; }
  .stat-label {
    font-family: var(--font-mono); font-size: 0.6rem; color: var(--text-muted);
    text-transform: uppercase; letter-spacing: 0.14em;
  }
  h2 {
    font-family: var(--font-serif); font-size: 1.75rem; font-weight: 400;
    margin-bottom: 20px; padding-bottom: 12px; border-bottom: 1px solid var(--border);
  }
  h3 { font-size: 1rem; margin-bottom: 8px; }
  h3 .count { font-family: var(--font-mono); font-size: 0.7rem; color: var(--text-muted); }
  .section { margin-bottom: 48px; }
  .bar-chart { display: flex; gap: 12px; align-items: flex-end; height: 200px; padding: 16px 0; }
  .bar-col { flex: 1; display: flex; flex-direction: column; align-items: center; gap: 6px; height: 100%; }
  .bar-value, .bar-sublabel { font-family: var(--font-mono); font-size: 0.6rem; color: var(--text-muted); min-height: 16px; }
  .bar-wrap { flex: 1; width: 100%; display: flex; align-items: flex-end; justify-content: center; }
  .bar { width: 100%; max-width: 80px; background: #2d2d2d; border-radius: 6px 6px 2px 2px; min-height: 2px; }
  .bar-today .bar { background: var(--accent); }
  .bar-label { font-family: var(--font-mono); font-size: 0.6rem; font-weight: 500; text-align: center; line-height: 1.3; }
  .dow-grid { display: grid; grid-template-columns: repeat(7, 1fr); gap: 6px; margin-top: 8px; }
  .hour-grid { display: grid; grid-template-columns: repeat(9, 1fr); gap: 4px; margin-top: 8px; }
  @media (min-width: 640px) { .hour-grid { grid-template-columns: repeat(18, 1fr); } }
  .heat-cell {
    border-radius: 8px; display: flex; flex-direction: column; align-items: center;
    justify-content: center; padding: 8px 4px; min-height: 40px;
  }
  .heat-num { font-family: var(--font-serif); font-size: 0.95rem; font-style: italic; }
  .heat-label { font-family: var(--font-mono); font-size: 0.5rem; letter-spacing: 0.06em; text-transform: uppercase; }
  .app-card {
    background: var(--surface); border: 1px solid var(--border);
    border-radius: 12px; padding: 14px 18px; margin-bottom: 8px;
  }
  .app-header { display: flex; align-items: center; gap: 12px; margin-bottom: 10px; }
  .app-icon { width: 40px; height: 40px; border-radius: 10px; object-fit: cover; flex-shrink: 0; }
  .app-icon-fallback {
    display: flex; align-items: center; justify-content: center;
    background: var(--accent-light); color: var(--accent);
    font-family: var(--font-serif); font-size: 1.2rem;
  }
  .app-header-text { flex: 1; min-width: 0; }
  .app-name { font-weight: 600; font-size: 0.95rem; margin-bottom: 2px; }
  .app-stats { font-family: var(--font-mono); font-size: 0.65rem; color: var(--text-muted); letter-spacing: 0.04em; }
  .app-bar-wrap { height: 4px; background: var(--border); border-radius: 2px; overflow: hidden; }
  .app-bar { height: 100%; background: var(--accent); border-radius: 2px; min-width: 4px; }
  .daily-avg {
    background: var(--surface); border: 1px solid var(--border); border-radius: 12px;
    padding: 16px 20px; font-family: var(--font-mono); font-size: 0.7rem;
    color: var(--text-muted); text-align: center; margin-bottom: 48px;
  }
  .daily-avg strong { color: var(--text); font-weight: 600; }
  .timeline-block { display: flex; gap: 16px; margin-bottom: 18px; }
  .time-label { font-family: var(--font-mono); font-size: 0.7rem; color: var(--accent); min-width: 56px; padding-top: 2px; }
  .time-stats { font-family: var(--font-mono); font-size: 0.65rem; color: var(--text-muted); margin-bottom: 4px; }
  .snippet { font-size: 0.9rem; font-style: italic; color: var(--text-muted); margin-bottom: 4px; }
  .topic-section { margin-bottom: 24px; }
  .topic-section ul { padding-left: 20px; font-size: 0.9rem; color: var(--text-muted); }
  .footer {
    margin-top: 56px; padding-top: 20px; border-top: 1px solid var(--border);
    font-family: var(--font-mono); font-size: 0.6rem; color: var(--text-muted);
    text-align: center; letter-spacing: 0.1em; text-transform: uppercase;
  }
"""


def render_html(stats: RecapStats, generated_at: datetime | None = None, today: date | None = None) -> str:
    """Standalone HTML recap. Only the footer timestamp varies between runs."""
    period = stats.period
    badge, title_prefix, subtitle = _HEADINGS[period.kind]
    generated_at = generated_at or datetime.now().astimezone()

    sections = [_stat_cards(stats)]
    if period.kind is PeriodKind.MONTH:
        sections.append(
            '<div class="daily-avg">'
            f"Daily average across <strong>{stats.active_days}</strong> active days: "
            f"<strong>{stats.avg_dictations_per_day}</strong> dictations · "
            f"<strong>{format_number(stats.avg_words_per_day)}</strong> words"
            "</div>"
        )
        sections.append(_section("Week by Week", _week_chart(stats)))
        sections.append(_section("Day of Week", _weekday_heatmap(stats)))
        sections.append(_section("Hour by Hour", _hour_heatmap(stats)))
        sections.append(_section("Apps", _app_cards(stats)))
    elif period.kind is PeriodKind.WEEK:
        sections.append(_section("Day by Day", _day_chart(stats, today or date.today())))
        sections.append(_section("Hour by Hour", _hour_heatmap(stats)))
        sections.append(_section("Apps", _app_cards(stats)))
    else:
        sections.append(_section("Apps", _app_cards(stats)))
        sections.append(_section("Timeline", _timeline(stats)))
        sections.append(_section("What You Worked On", _digest(stats)))

    body = "\n\n".join(sections)
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>{escape(title_prefix)} — {escape(period.label)}</title>
<link rel="preconnect" href="https://fonts.googleapis.com">
<link rel="preconnect" href="https://fonts.gstatic.com" crossorigin>
<link href="{escape(_FONTS)}" rel="stylesheet">
<style>{_STYLE}</style>
</head>
<body>
  <div class="label-mono">{badge}</div>
  <h1>{escape(period.label)}</h1>
  <div class="subtitle">{escape(subtitle)}</div>

{body}

  <div class="footer">Generated {escape(generated_at.strftime("%Y-%m-%d %H:%M"))} · Wispr Flow {escape(badge)}</div>
</body>
</html>
"""


def _section(title: str, content: str) -> str:
    return f'  <div class="section">\n    <h2>{escape(title)}</h2>\n{content}\n  </div>'


def _stat_cards(stats: RecapStats) -> str:
    kind = stats.period.kind
    with_hours = kind is not PeriodKind.DAY
    cards = [
        (str(stats.total_dictations), "Dictations"),
        (format_number(stats.total_words), "Words"),
        (format_duration(stats.total_duration_seconds, with_hours=with_hours), "Voice Time"),
    ]
    if kind is not PeriodKind.DAY:
        cards.append((str(stats.unique_apps), "Apps"))
        busiest = stats.busiest_day
        if busiest is None:
            cards.append(("N/A", "Busiest Day"))
        elif kind is PeriodKind.WEEK:
            cards.append((busiest.day_name, "Busiest Day"))
        else:
            cards.append((f"{busiest.day:%a}, {busiest.day:%b} {busiest.day.day}", "Best Day"))
    peak = stats.peak_hour
    cards.append((format_hour(peak.hour) if peak else "N/A", "Peak Hour"))

    html = "\n".join(
        '    <div class="stat-card">'
        f'<div class="stat-value">{escape(value)}</div>'
        f'<div class="stat-label">{escape(label)}</div></div>'
        for value, label in cards
    )
    return f'  <div class="stats-grid">\n{html}\n  </div>'


def _bar_column(value: int, maximum: int, label: str, sublabel: str, highlight: bool = False) -> str:
    height = max(round_half_up(value / maximum * 100), 2)
    css = "bar-col bar-today" if highlight else "bar-col"
    return (
        f'    <div class="{css}">'
        f'<div class="bar-value">{value if value > 0 else ""}</div>'
        f'<div class="bar-wrap"><div class="bar" style="height: {height}%"></div></div>'
        f'<div class="bar-label">{escape(label)}</div>'
        f'<div class="bar-sublabel">{escape(sublabel)}</div></div>'
    )


def _day_chart(stats: RecapStats, today: date) -> str:
    maximum = max([bucket.count for bucket in stats.days] + [1])
    columns = [
        _bar_column(
            bucket.count,
            maximum,
            bucket.day_name,
            f"{bucket.words}w" if bucket.words > 0 else "-",
            highlight=bucket.day == today,
        )
        for bucket in stats.days
    ]
    return '    <div class="bar-chart">\n' + "\n".join(columns) + "\n    </div>"


def _week_chart(stats: RecapStats) -> str:
    maximum = max([week.count for week in stats.weeks] + [1])
    columns = [
        _bar_column(
            week.count,
            maximum,
            week.label,
            f"{format_number(week.words)}w" if week.words > 0 else "-",
        )
        for week in stats.weeks
    ]
    return '    <div class="bar-chart">\n' + "\n".join(columns) + "\n    </div>"


def _heat_cell(count: int, maximum: int, label: str, title: str = "") -> str:
    intensity = round_half_up(count / maximum * 100)
    opacity = 0.15 + (intensity / 100) * 0.85 if count > 0 else 0.04
    text_color = "#f5f4ed" if opacity > 0.5 else "var(--text)"
    label_color = "rgba(245,244,237,0.7)" if opacity > 0.5 else "var(--text-muted)"
    title_attr = f' title="{escape(title)}"' if title else ""
    return (
        f'    <div class="heat-cell" style="background: rgba(45, 45, 45, {opacity:.2f})"{title_attr}>'
        f'<div class="heat-num" style="color: {text_color}">{count if count > 0 else ""}</div>'
        f'<div class="heat-label" style="color: {label_color}">{escape(label)}</div></div>'
    )


def _weekday_heatmap(stats: RecapStats) -> str:
    maximum = max([bucket.count for bucket in stats.weekdays] + [1])
    cells = [_heat_cell(bucket.count, maximum, bucket.label) for bucket in stats.weekdays]
    return '    <div class="dow-grid">\n' + "\n".join(cells) + "\n    </div>"


def _hour_heatmap(stats: RecapStats) -> str:
    maximum = max([bucket.count for bucket in stats.hours] + [1])
    cells = []
    for bucket in stats.hours[HEATMAP_FIRST_HOUR:HEATMAP_LAST_HOUR + 1]:
        label = format_hour(bucket.hour) if bucket.hour % 3 == 0 else ""
        title = f"{format_hour(bucket.hour)}: {bucket.count} dictations"
        cells.append(_heat_cell(bucket.count, maximum, label, title))
    return '    <div class="hour-grid">\n' + "\n".join(cells) + "\n    </div>"


def _app_cards(stats: RecapStats) -> str:
    cards = []
    for app in stats.apps:
        icon_url = resolve_icon(app.app_id)
        if icon_url:
            icon = f'<img class="app-icon" src="{escape(icon_url)}" alt="{escape(app.name)}">'
        else:
            icon = f'<div class="app-icon app-icon-fallback">{escape(fallback_initial(app.name))}</div>'
        cards.append(
            '    <div class="app-card">'
            f'<div class="app-header">{icon}<div class="app-header-text">'
            f'<div class="app-name">{escape(app.name)}</div>'
            f'<div class="app-stats">{app.count} dictations · {format_number(app.words)} words · {app.percent}%</div>'
            "</div></div>"
            f'<div class="app-bar-wrap"><div class="app-bar" style="width: {app.percent}%"></div></div>'
            "</div>"
        )
    return "\n".join(cards)


def _timeline(stats: RecapStats) -> str:
    blocks = []
    for block in stats.timeline:
        snippets = "".join(f'<div class="snippet">"{escape(snippet)}"</div>' for snippet in block.snippets)
        blocks.append(
            '    <div class="timeline-block">'
            f'<div class="time-label">{format_hour(block.hour)}</div>'
            '<div class="time-body">'
            f'<div class="time-stats">{block.count} dictations · {block.words} words · {escape(", ".join(block.apps))}</div>'
            f"{snippets}</div></div>"
        )
    return "\n".join(blocks)


def _digest(stats: RecapStats) -> str:
    sections = []
    for name, samples in digest_samples(stats).items():
        items = "".join(f'<li>"{escape(sample)}"</li>' for sample in samples)
        sections.append(
            '    <div class="topic-section">'
            f'<h3>{escape(name)} <span class="count">{len(stats.transcripts_by_app[name])}</span></h3>'
            f"<ul>{items}</ul></div>"
        )
    return "\n".join(sections)
