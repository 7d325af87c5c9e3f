from __future__ import annotations

from dataclasses import dataclass

from ..config import Settings
from ..snapshots import SnapshotError, read_snapshot, snapshot_paths, year_from_path
from ..validation import validate_raw_records
from .output import error, ok as ok_line, warning


@dataclass(slots=True)
class DoctorReport:
    ok: bool
    checks: list[str]


def run(settings: Settings) -> DoctorReport:
    checks: list[str] = []
    ok = True

    directory = settings.data.snapshot_dir
    try:
        paths = snapshot_paths(directory, settings.data.years)
    except FileNotFoundError:
        return DoctorReport(ok=False, checks=[error("Snapshots", f"missing directory {directory}")])

    if not paths:
        return DoctorReport(ok=False, checks=[error("Snapshots", f"no *.json files in {directory}")])
    checks.append(ok_line("Snapshots", f"{len(paths)} file(s) in {directory}"))

    for path in paths:
        year = year_from_path(path)
        label = f"Snapshot {path.name}"
        if year is None:
            ok = False
            checks.append(error(label, "no year in file name"))
            continue
        try:
            items = read_snapshot(path)
        except SnapshotError as exc:
            ok = False
            checks.append(error(label, str(exc)))
            continue

        summary = validate_raw_records(items, year)
        if summary.errors:
            ok = False
            checks.append(error(label, f"{len(summary.errors)} invalid entries, first: {summary.errors[0]}"))
        elif summary.warnings:
            checks.append(
                warning(label, f"{summary.valid}/{summary.total} clean, first: {summary.warnings[0]}")
            )
        else:
            checks.append(ok_line(label, f"{summary.total} entries"))

    matching = settings.matching
    checks.append(
        ok_line(
            "Matching",
            f"min confidence {matching.min_confidence:.2f}, min key length {matching.min_key_length}",
        )
    )
    return DoctorReport(ok=ok, checks=checks)
