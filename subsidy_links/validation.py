"""
Non-blocking validation of raw snapshot entries.

Validation never stops a load: problems are reported as errors/warnings and
logged, and the adapter in snapshots.py still maps whatever it can.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, ValidationError

logger = logging.getLogger(__name__)

MAX_REPORTED = 20

Amount = Optional[Union[float, str]]
Year = Optional[Union[str, int]]
Registration = Optional[Union[str, int]]


class RawSubsidy(BaseModel):
    """Permissive schema accepting every published vintage (2019-2024)."""

    model_config = ConfigDict(extra="allow", strict=True)

    nom_de_la_subvention_naam_van_de_subsidie: Optional[str] = None
    nom_du_subside_naam_subsidie: Optional[str] = None
    article_complet_volledig_artikel: Optional[str] = None
    article_budgetaire_begrotingsartikel: Optional[str] = None
    beneficiaire_begunstigde: Optional[str] = None
    nom_du_beneficiaire_de_la_subvention_naam_begunstigde_van_de_subsidie: Optional[str] = None
    le_numero_de_bce_du_beneficiaire_de_la_subvention_kbo_nummer_van_de_begunstigde_van_de_subsidie: Registration = None
    numero_bce_kbo_nummer: Registration = None
    l_objet_de_la_subvention_doel_van_de_subsidie: Optional[str] = None
    objet_du_subside_doel_van_de_subsidie: Optional[str] = None

    montant_octroye_toegekend_bedrag: Amount = None
    montant_prevu_au_budget_2020_bedrag_voorzien_op_begroting_2020: Amount = None
    montant_prevu_au_budget_2021_bedrag_voorzien_op_begroting_2021: Amount = None
    montant_prevu_au_budget_2022_bedrag_voorzien_op_begroting_2022: Amount = None
    montant_prevu_au_budget_2023_bedrag_voorzien_op_begroting_2023: Amount = None
    montant_prevu_au_budget_2024_bedrag_voorzien_op_begroting_2024: Amount = None
    budget_2019_begroting_2019: Amount = None

    l_annee_de_debut_d_octroi_de_la_subvention_beginjaar_waarin_de_subsidie_wordt_toegekend: Year = None
    l_annee_de_fin_d_octroi_de_la_subvention_eindjaar_waarin_de_subsidie_wordt_toegekend: Year = None
    annee_budgetaire_debut_octroi_begroting_jaar_begin_toekenning: Year = None
    annee_budgetaire_fin_octroi_begroting_jaar_einde_van_toekenning: Year = None


@dataclass
class ValidationResult:
    """Result of validating one raw entry."""
    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass
class ValidationSummary:
    """Aggregate result for a whole snapshot."""
    total: int = 0
    valid: int = 0
    invalid: int = 0
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def validate_raw_record(data: Any, year: str) -> ValidationResult:
    """
    Check one raw entry against the permissive schema.

    Type mismatches are warnings; only a non-object entry is an error.
    """
    if not isinstance(data, dict):
        return ValidationResult(
            valid=False,
            errors=[f"expected an object, got {type(data).__name__}"],
        )

    warnings: list[str] = []
    try:
        RawSubsidy.model_validate(data)
    except ValidationError as exc:
        for issue in exc.errors():
            location = ".".join(str(part) for part in issue["loc"])
            warnings.append(f"{location}: {issue['msg']}")

    if not (data.get("beneficiaire_begunstigde")
            or data.get("nom_du_beneficiaire_de_la_subvention_naam_begunstigde_van_de_subsidie")):
        warnings.append(f"no beneficiary field for year {year}")

    if not (data.get("montant_octroye_toegekend_bedrag") or data.get("budget_2019_begroting_2019")):
        warnings.append(f"no amount field for year {year}")

    return ValidationResult(valid=True, warnings=warnings)


def validate_raw_records(items: Any, year: str) -> ValidationSummary:
    """Validate a snapshot array; reports are capped to keep logs readable."""
    summary = ValidationSummary()
    if not isinstance(items, list):
        summary.errors.append(f"expected an array, got {type(items).__name__}")
        return summary

    summary.total = len(items)
    for position, item in enumerate(items):
        result = validate_raw_record(item, year)
        if result.valid and not result.warnings:
            summary.valid += 1
            continue
        summary.invalid += 1
        if result.errors:
            summary.errors.append(f"item {position}: {', '.join(result.errors)}")
        if result.warnings:
            summary.warnings.append(f"item {position}: {', '.join(result.warnings)}")

    if summary.invalid or summary.warnings:
        logger.warning(
            "[%s] %d/%d entries valid, %d with problems",
            year, summary.valid, summary.total, summary.invalid,
        )
        for line in summary.errors[:5]:
            logger.error("[%s] %s", year, line)
    else:
        logger.info("[%s] all %d entries valid", year, summary.total)

    summary.errors = summary.errors[:MAX_REPORTED]
    summary.warnings = summary.warnings[:MAX_REPORTED]
    return summary
