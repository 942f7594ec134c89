from __future__ import annotations

import argparse
import logging
import sys
from contextlib import closing
from datetime import date
from typing import TextIO

from . import __version__
from .database import FlowHistoryStore
from .errors import RecapError
from .paths import RecapConfig, report_path, share_image_path
from .periods import PeriodKind, resolve_period
from .recap import build_recap
from .report_html import render_html
from .report_text import render_text
from .share import save_share_card

logger = logging.getLogger(__name__)

_REFERENCE_OPTIONS = {
    PeriodKind.DAY: ("--date", "Day to recap (default: today), e.g. 2026-01-27"),
    PeriodKind.WEEK: ("--week-of", "Any date inside the Monday-Sunday week (default: this week)"),
    PeriodKind.MONTH: ("--month", "Month to recap as YYYY-MM or a date inside it (default: this month)"),
}


def run_recap(
    kind: PeriodKind,
    reference: str | None,
    config: RecapConfig,
    html: bool = False,
    share_image: bool = False,
    out: TextIO | None = None,
    today: date | None = None,
) -> int:
    out = out or sys.stdout
    period = resolve_period(kind, reference, today=today)
    store = FlowHistoryStore(config.db_path)
    with closing(store.load_events(period)) as events:
        stats = build_recap(events, period)

    if stats.skipped_events:
        logger.info("Ignored %d unreadable history rows", stats.skipped_events)

    if stats.is_empty:
        print(f"No Wispr Flow dictations found for {period.no_activity_label}.", file=out)
        return 0

    if html:
        target = report_path(period, config.output_dir)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(render_html(stats, today=today), encoding="utf-8")
        print(f"HTML recap saved to: {target}", file=out)
    else:
        out.write(render_text(stats))

    if share_image:
        image_path = save_share_card(stats, share_image_path(period, config.output_dir))
        print(f"Share image saved to: {image_path}", file=out)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="flow-recap",
        description="Summarize Wispr Flow dictation history for a day, week or month.",
    )
    parser.add_argument("--version", action="store_true", help="Print version and exit")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--html", action="store_true", help="Write a standalone HTML recap instead of text")
    common.add_argument("--share-image", action="store_true", help="Also write a PNG share card")
    common.add_argument("--db", help="Path to flow.sqlite (default: $FLOW_RECAP_DB or the Wispr Flow app folder)")
    common.add_argument("--output-dir", help="Folder for HTML/PNG output (default: $FLOW_RECAP_OUTPUT_DIR or ~/Desktop)")
    common.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    commands = parser.add_subparsers(dest="command", metavar="{day,week,month}")
    for kind in PeriodKind:
        option, help_text = _REFERENCE_OPTIONS[kind]
        command = commands.add_parser(kind.value, parents=[common], help=f"{kind.value.capitalize()} recap")
        command.add_argument(option, dest="reference", help=help_text)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.version:
        print(__version__)
        return 0
    if not args.command:
        parser.print_help()
        return 2

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    config = RecapConfig.from_environment(db_path=args.db, output_dir=args.output_dir)
    try:
        return run_recap(
            PeriodKind(args.command),
            args.reference,
            config,
            html=args.html,
            share_image=args.share_image,
        )
    except RecapError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
