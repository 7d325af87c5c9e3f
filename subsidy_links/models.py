from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

UNSPECIFIED = "Non spécifié"


@dataclass(frozen=True, slots=True)
class SubsidyRecord:
    """One granted subsidy, in the stable shape the core works on."""

    beneficiary_name: str
    registration_number: Optional[str]
    purpose_text: str
    amount: float
    grant_year: str
    subsidy_name: str = ""
    budget_article: str = ""
    planned_amount: float = 0.0
    end_year: str = ""

    def to_record(self) -> Dict[str, object]:
        return {
            "beneficiary_name": self.beneficiary_name,
            "registration_number": self.registration_number,
            "purpose_text": self.purpose_text,
            "amount": self.amount,
            "grant_year": self.grant_year,
            "subsidy_name": self.subsidy_name,
            "budget_article": self.budget_article,
            "planned_amount": self.planned_amount,
            "end_year": self.end_year,
        }
