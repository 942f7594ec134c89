from __future__ import annotations

import math

BAR_FILLED = "█"
BAR_EMPTY = "░"


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_duration(total_seconds: float, with_hours: bool = True) -> str:
    seconds = round_half_up(max(0.0, float(total_seconds or 0)))
    if not with_hours and seconds < 60:
        return f"{seconds}s"
    if not with_hours or seconds < 3600:
        minutes, secs = divmod(seconds, 60)
        return f"{minutes}m {secs}s" if secs > 0 else f"{minutes}m"

    hours, minutes = divmod(round_half_up(seconds / 60), 60)
    return f"{hours}h {minutes}m" if minutes > 0 else f"{hours}h"


def format_hour(hour: int) -> str:
    if hour == 0:
        return "12 AM"
    if hour < 12:
        return f"{hour} AM"
    if hour == 12:
        return "12 PM"
    return f"{hour - 12} PM"


def format_number(value: int) -> str:
    return f"{int(value):,}"


def bar_chart(value: float, maximum: float, width: int = 20) -> str:
    if maximum <= 0:
        filled = 0
    else:
        filled = min(width, max(0, round_half_up(value / maximum * width)))
    return BAR_FILLED * filled + BAR_EMPTY * (width - filled)


def truncate(text: str | None, length: int) -> str:
    if not text:
        return ""
    clean = text.replace("\n", " ").strip()
    return clean[:length] + "..." if len(clean) > length else clean
