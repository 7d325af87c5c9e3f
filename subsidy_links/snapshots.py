"""
Yearly snapshot loading.

The published JSON snapshots changed field names several times between 2019
and 2024. Everything here absorbs that drift so the core only ever sees one
SubsidyRecord shape, with strings defaulted to UNSPECIFIED and amounts
defaulted to 0.
"""
from __future__ import annotations

import json
import logging
import math
import re
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

from .models import UNSPECIFIED, SubsidyRecord

logger = logging.getLogger(__name__)

BENEFICIARY_FIELDS = (
    "beneficiaire_begunstigde",
    "nom_du_beneficiaire_de_la_subvention_naam_begunstigde_van_de_subsidie",
)
PURPOSE_FIELDS = (
    "l_objet_de_la_subvention_doel_van_de_subsidie",
    "objet_du_subside_doel_van_de_subsidie",
)
SUBSIDY_NAME_FIELDS = (
    "nom_de_la_subvention_naam_van_de_subsidie",
    "nom_du_subside_naam_subsidie",
)
ARTICLE_FIELDS = (
    "article_complet_volledig_artikel",
    "article_budgetaire_begrotingsartikel",
)
AMOUNT_FIELDS = (
    "montant_octroye_toegekend_bedrag",
    "budget_2019_begroting_2019",
)
PLANNED_AMOUNT_FIELDS = (
    "montant_prevu_au_budget_2020_bedrag_voorzien_op_begroting_2020",
    "montant_prevu_au_budget_2021_bedrag_voorzien_op_begroting_2021",
    "montant_prevu_au_budget_2022_bedrag_voorzien_op_begroting_2022",
    "montant_prevu_au_budget_2023_bedrag_voorzien_op_begroting_2023",
    "montant_prevu_au_budget_2024_bedrag_voorzien_op_begroting_2024",
    "budget_2019_begroting_2019",
)
START_YEAR_FIELDS = (
    "l_annee_de_debut_d_octroi_de_la_subvention_beginjaar_waarin_de_subsidie_wordt_toegekend",
    "annee_budgetaire_debut_octroi_begroting_jaar_begin_toekenning",
)
END_YEAR_FIELDS = (
    "l_annee_de_fin_d_octroi_de_la_subvention_eindjaar_waarin_de_subsidie_wordt_toegekend",
    "annee_budgetaire_fin_octroi_begroting_jaar_einde_van_toekenning",
)
REGISTRATION_FIELDS = (
    "le_numero_de_bce_du_beneficiaire_de_la_subvention_kbo_nummer_van_de_begunstigde_van_de_subsidie",
    "numero_bce_kbo_nummer",
)

_YEAR_RE = re.compile(r"(?<!\d)(\d{4})(?!\d)")


class SnapshotError(ValueError):
    """A snapshot file could not be read as a JSON array of records."""


def parse_amount(value: Any) -> float:
    """
    Parse an amount in any of the published formats.

    Examples:
        1234.56 → 1234.56
        "1.234,56" → 1234.56
        "1234,56" → 1234.56
        None / "" / "abc" → 0.0
    """
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else 0.0
    if isinstance(value, str):
        # European format: dots group thousands, the comma is the decimal mark
        cleaned = value.strip().replace(".", "").replace(",", ".", 1)
        match = re.match(r"[+-]?\d*\.?\d+", cleaned)
        if not match:
            return 0.0
        parsed = float(match.group(0))
        return parsed if math.isfinite(parsed) else 0.0
    return 0.0


def _first(data: Mapping[str, Any], fields: Iterable[str]) -> Any:
    for name in fields:
        value = data.get(name)
        if value:
            return value
    return None


def _text(data: Mapping[str, Any], fields: Iterable[str], default: str = UNSPECIFIED) -> str:
    value = _first(data, fields)
    if value is None:
        return default
    return str(value)


def normalize_raw_record(item: Mapping[str, Any], year: str) -> SubsidyRecord:
    """
    Map one raw snapshot entry, whatever its vintage, onto a SubsidyRecord.

    Args:
        item: Raw JSON object from a snapshot
        year: Snapshot year, used when the entry carries no start year

    Returns:
        SubsidyRecord with defaults filled in
    """
    registration = _first(item, REGISTRATION_FIELDS)
    try:
        default_end = str(int(year) + 1)
    except (TypeError, ValueError):
        default_end = UNSPECIFIED

    return SubsidyRecord(
        beneficiary_name=_text(item, BENEFICIARY_FIELDS),
        registration_number=str(registration) if registration is not None else None,
        purpose_text=_text(item, PURPOSE_FIELDS),
        amount=parse_amount(_first(item, AMOUNT_FIELDS)),
        grant_year=_text(item, START_YEAR_FIELDS, default=str(year)),
        subsidy_name=_text(item, SUBSIDY_NAME_FIELDS),
        budget_article=_text(item, ARTICLE_FIELDS),
        planned_amount=parse_amount(_first(item, PLANNED_AMOUNT_FIELDS)),
        end_year=_text(item, END_YEAR_FIELDS, default=default_end),
    )


def normalize_raw_records(items: Iterable[Any], year: str) -> list[SubsidyRecord]:
    records: list[SubsidyRecord] = []
    for position, item in enumerate(items):
        if not isinstance(item, Mapping):
            logger.warning("Skipping entry %d of %s snapshot: not an object", position, year)
            continue
        records.append(normalize_raw_record(item, year))
    return records


def year_from_path(path: Path) -> Optional[str]:
    match = _YEAR_RE.search(path.stem)
    return match.group(1) if match else None


def read_snapshot(path: Path) -> list[Any]:
    """Read the raw JSON array of a snapshot file."""
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise SnapshotError(f"{path}: invalid JSON ({exc})") from exc
    except OSError as exc:
        raise SnapshotError(f"{path}: unreadable ({exc})") from exc
    if not isinstance(payload, list):
        raise SnapshotError(f"{path}: expected a JSON array, got {type(payload).__name__}")
    return payload


def load_snapshot(path: Path, year: Optional[str] = None) -> list[SubsidyRecord]:
    """
    Load one yearly snapshot.

    The year defaults to the first four-digit number in the file name
    (e.g. "subsides-2023.json").
    """
    year = year or year_from_path(path)
    if year is None:
        raise SnapshotError(f"{path}: cannot infer snapshot year from file name")
    records = normalize_raw_records(read_snapshot(path), year)
    logger.debug("Loaded %d records from %s", len(records), path)
    return records


def snapshot_paths(directory: Path, years: Optional[Iterable[str]] = None) -> list[Path]:
    if not directory.is_dir():
        raise FileNotFoundError(f"Snapshot directory not found: {directory}")
    wanted = {str(y) for y in years or []}
    paths = []
    for path in sorted(directory.glob("*.json")):
        if wanted and year_from_path(path) not in wanted:
            continue
        paths.append(path)
    return paths


def load_snapshots(directory: Path, years: Optional[Iterable[str]] = None) -> list[SubsidyRecord]:
    """Load every yearly snapshot in a directory, oldest file name first."""
    records: list[SubsidyRecord] = []
    paths = snapshot_paths(directory, years)
    for path in paths:
        records.extend(load_snapshot(path))
    logger.info("Loaded %d records from %d snapshot(s) in %s", len(records), len(paths), directory)
    return records
