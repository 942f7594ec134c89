from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .periods import Period, PeriodKind

DB_ENV_VAR = "FLOW_RECAP_DB"
OUTPUT_ENV_VAR = "FLOW_RECAP_OUTPUT_DIR"

_REPORT_PREFIXES = {
    PeriodKind.DAY: "wispr-recap",
    PeriodKind.WEEK: "wispr-weekly",
    PeriodKind.MONTH: "wispr-monthly",
}


@dataclass(frozen=True)
class RecapConfig:
    db_path: Path
    output_dir: Path

    @classmethod
    def from_environment(
        cls,
        db_path: str | Path | None = None,
        output_dir: str | Path | None = None,
    ) -> "RecapConfig":
        return cls(
            db_path=Path(db_path).expanduser() if db_path else database_path(),
            output_dir=Path(output_dir).expanduser() if output_dir else output_directory(),
        )


def database_path() -> Path:
    override = os.environ.get(DB_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / "Library" / "Application Support" / "Wispr Flow" / "flow.sqlite"


def output_directory() -> Path:
    override = os.environ.get(OUTPUT_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / "Desktop"


def report_path(period: Period, output_dir: Path) -> Path:
    return Path(output_dir) / f"{_report_stem(period)}.html"


def share_image_path(period: Period, output_dir: Path) -> Path:
    return Path(output_dir) / f"{_report_stem(period)}.png"


def _report_stem(period: Period) -> str:
    return f"{_REPORT_PREFIXES[period.kind]}-{period.identifier}"
