from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

from .commands import doctor as cmd_doctor
from .commands import groups as cmd_groups
from .commands import relationships as cmd_relationships
from .config import Settings, load_settings
from .snapshots import SnapshotError, load_snapshots

LOG_FORMAT = "%(levelname).1s | %(name)s | %(message)s"

WARNING_COLOR = "\033[33m"
ERROR_COLOR = "\033[31m"
RESET = "\033[0m"


class SnapshotLogFormatter(logging.Formatter):
    """Prints snapshot paths relative to the snapshot directory, optionally colored by level."""

    def __init__(self, snapshot_dir: Path, color: bool = False) -> None:
        super().__init__(LOG_FORMAT)
        self.prefix = f"{snapshot_dir}/"
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record).replace(self.prefix, "")
        if not self.color or record.levelno < logging.WARNING:
            return message
        color = ERROR_COLOR if record.levelno >= logging.ERROR else WARNING_COLOR
        return f"{color}{message}{RESET}"


class ProblemCollector(logging.Handler):
    """Keeps warnings and errors so they can be repeated after the command output."""

    def __init__(self) -> None:
        super().__init__(level=logging.WARNING)
        self.lines: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.lines.append(self.format(record))


def configure_logging(level_name: str, snapshot_dir: Path) -> ProblemCollector:
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, level_name.upper(), logging.INFO))

    stream = logging.StreamHandler()
    stream.setFormatter(SnapshotLogFormatter(snapshot_dir, color=True))
    root_logger.addHandler(stream)

    problems = ProblemCollector()
    problems.setFormatter(SnapshotLogFormatter(snapshot_dir))
    root_logger.addHandler(problems)
    return problems


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Group subsidy beneficiaries and detect relationships between organizations"
    )
    parser.add_argument("--config", type=Path, help="Path to config.yaml")
    parser.add_argument("--log-level", default="INFO", help="Python logging level")
    parser.add_argument(
        "--snapshots",
        type=Path,
        help="Directory of yearly JSON snapshots (overrides data.snapshot_dir)",
    )
    parser.add_argument(
        "--year",
        action="append",
        dest="years",
        help="Only load this snapshot year (repeatable)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    groups_parser = subparsers.add_parser(
        "groups", help="List deduplicated beneficiaries by total granted amount"
    )
    groups_parser.add_argument("--limit", type=int, default=20, help="Number of organizations to show (0 = all)")
    groups_parser.add_argument("--json", action="store_true", help="Emit machine-readable JSON to stdout")

    rel_parser = subparsers.add_parser(
        "relationships", help="Detect organizations mentioned in other organizations' grants"
    )
    rel_parser.add_argument(
        "--min-confidence",
        type=float,
        default=None,
        help="Confidence threshold (default from config)",
    )
    rel_parser.add_argument(
        "--organization",
        default=None,
        help="Only show relationships involving this organization",
    )
    rel_parser.add_argument("--json", action="store_true", help="Emit machine-readable JSON to stdout")

    subparsers.add_parser("doctor", help="Validate snapshots and configuration")
    return parser


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    data = settings.data
    updates: dict[str, object] = {}
    if args.snapshots is not None:
        updates["snapshot_dir"] = args.snapshots.expanduser().resolve()
    if args.years:
        updates["years"] = [str(year).strip() for year in args.years]
    if not updates:
        return settings
    return settings.model_copy(update={"data": data.model_copy(update=updates)})


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = apply_overrides(load_settings(args.config), args)
    except FileNotFoundError as exc:
        raise SystemExit(str(exc)) from exc

    problems = configure_logging(args.log_level, settings.data.snapshot_dir)

    try:
        match args.command:
            case "doctor":
                report = cmd_doctor.run(settings)
                for line in report.checks:
                    print(line)
                if not report.ok:
                    raise SystemExit(1)
            case "groups" | "relationships":
                try:
                    records = load_snapshots(settings.data.snapshot_dir, settings.data.years)
                except (SnapshotError, FileNotFoundError) as exc:
                    raise SystemExit(str(exc)) from exc
                if args.command == "groups":
                    cmd_groups.run(records, limit=args.limit, json_output=args.json)
                else:
                    cmd_relationships.run(
                        records,
                        settings.matching,
                        min_confidence=args.min_confidence,
                        organization=args.organization,
                        json_output=args.json,
                    )
    finally:
        if problems.lines:
            print(f"\n{WARNING_COLOR}Warnings/Errors summary:{RESET}")
            for line in problems.lines:
                print(f" - {line}")


if __name__ == "__main__":  # pragma: no cover
    main()
