from __future__ import annotations

from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

from .formatting import format_duration, format_number
from .models import RecapStats
from .periods import PeriodKind

CARD_SIZE = (1200, 630)
PADDING_X = 64
PADDING_Y = 56

BACKGROUND = (245, 244, 237)
TEXT = (11, 13, 11)
TEXT_MUTED = (82, 83, 78)
ACCENT = (243, 78, 63)
SURFACE = (252, 252, 249)
BORDER = (230, 230, 224)
BAR = (45, 45, 45)
BAR_TRACK = (233, 233, 227)

_REGULAR_FONTS = ("Inter-Regular.ttf", "DejaVuSans.ttf", "Arial.ttf", "Helvetica.ttc")
_BOLD_FONTS = ("Inter-SemiBold.ttf", "DejaVuSans-Bold.ttf", "Arial Bold.ttf", "Helvetica.ttc")
_SERIF_FONTS = ("InstrumentSerif-Italic.ttf", "DejaVuSerif-Italic.ttf", "Times New Roman Italic.ttf", "Times.ttc")

_RECAP_TYPES = {
    PeriodKind.DAY: "Daily Recap",
    PeriodKind.WEEK: "Weekly Recap",
    PeriodKind.MONTH: "Monthly Recap",
}


def render_share_card(stats: RecapStats) -> Image.Image:
    """1200x630 summary card for posting: headline stats and the top three apps."""
    image = Image.new("RGB", CARD_SIZE, BACKGROUND)
    draw = ImageDraw.Draw(image)
    width, height = CARD_SIZE

    brand_font = _font(_BOLD_FONTS, 14)
    draw.text((PADDING_X, PADDING_Y), "WISPR FLOW", font=brand_font, fill=ACCENT)
    recap_type = _RECAP_TYPES[stats.period.kind].upper()
    type_width = draw.textlength(recap_type, font=brand_font)
    draw.text((width - PADDING_X - type_width, PADDING_Y), recap_type, font=brand_font, fill=TEXT_MUTED)

    draw.text((PADDING_X, PADDING_Y + 36), stats.period.label, font=_font(_SERIF_FONTS, 52), fill=TEXT)

    with_hours = stats.period.kind is not PeriodKind.DAY
    headline = [
        (str(stats.total_dictations), "DICTATIONS"),
        (format_number(stats.total_words), "WORDS"),
        (format_duration(stats.total_duration_seconds, with_hours=with_hours), "VOICE TIME"),
    ]
    _draw_stat_boxes(draw, headline, top=220, width=width)
    _draw_top_apps(draw, stats, top=400, width=width, bottom=height - PADDING_Y)
    return image


def save_share_card(stats: RecapStats, target_path: Path) -> Path:
    target_path = Path(target_path)
    target_path.parent.mkdir(parents=True, exist_ok=True)
    image = render_share_card(stats)
    image.save(target_path, format="PNG", optimize=True)
    return target_path


def _draw_stat_boxes(draw: ImageDraw.ImageDraw, headline, top: int, width: int) -> None:
    gap = 24
    box_width = (width - 2 * PADDING_X - gap * (len(headline) - 1)) // len(headline)
    box_height = 130
    number_font = _font(_SERIF_FONTS, 44)
    label_font = _font(_BOLD_FONTS, 11)
    for index, (value, label) in enumerate(headline):
        left = PADDING_X + index * (box_width + gap)
        draw.rounded_rectangle(
            (left, top, left + box_width, top + box_height),
            radius=16,
            fill=SURFACE,
            outline=BORDER,
        )
        center = left + box_width / 2
        value_width = draw.textlength(value, font=number_font)
        draw.text((center - value_width / 2, top + 22), value, font=number_font, fill=TEXT)
        label_width = draw.textlength(label, font=label_font)
        draw.text((center - label_width / 2, top + 88), label, font=label_font, fill=TEXT_MUTED)


def _draw_top_apps(draw: ImageDraw.ImageDraw, stats: RecapStats, top: int, width: int, bottom: int) -> None:
    name_font = _font(_BOLD_FONTS, 16)
    pct_font = _font(_REGULAR_FONTS, 14)
    name_column = 160
    pct_column = 56
    row_height = max(1, (bottom - top) // 3)
    track_left = PADDING_X + name_column + 14
    track_right = width - PADDING_X - pct_column
    for index, app in enumerate(stats.apps[:3]):
        row_top = top + index * row_height
        name_width = draw.textlength(app.name, font=name_font)
        draw.text((PADDING_X + name_column - name_width, row_top), app.name, font=name_font, fill=TEXT)
        bar_top = row_top + 4
        draw.rounded_rectangle((track_left, bar_top, track_right, bar_top + 12), radius=6, fill=BAR_TRACK)
        filled = track_left + (track_right - track_left) * min(app.percent, 100) / 100
        if filled > track_left:
            draw.rounded_rectangle((track_left, bar_top, filled, bar_top + 12), radius=6, fill=BAR)
        draw.text((track_right + 14, row_top), f"{app.percent}%", font=pct_font, fill=TEXT_MUTED)


def _font(candidates, size: int):
    for name in candidates:
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue
    return ImageFont.load_default(size=size)
