"""
Domain models for beneficiary identity and organization relationships.

These are pure data models with no dependencies beyond the record type.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from numbers import Number
from typing import Optional

from ...models import SubsidyRecord


def amount_value(value: object) -> float:
    """Any finite number as a float; everything else (None, NaN, bool, text) counts as 0."""
    if isinstance(value, bool) or not isinstance(value, Number):
        return 0.0
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    return amount if math.isfinite(amount) else 0.0


@dataclass
class OrganizationGroup:
    """
    All records believed to belong to one real-world organization.

    Example:
        Group for Parking Brussels:
        - canonical_key: "norm:parking brussels"
        - display_name: "parking.brussels"
        - original_names: {"parking.brussels", "PARKING.BRUSSELS", "Parking Brussels SA"}
        - record_count: 12
    """
    canonical_key: str
    """Grouping key: "norm:<normalized name>" or "reg:<registration number>"."""

    display_name: str
    """Shortest original name observed in the group"""

    original_names: set[str] = field(default_factory=set)
    """Every raw spelling seen"""

    registration_number: Optional[str] = None
    """First non-empty registration number observed"""

    record_count: int = 0
    total_amount: float = 0.0

    normalized_name: str = ""
    """Normalized name behind a "norm:" key, empty for registration-only groups"""

    def add_record(self, record: SubsidyRecord) -> None:
        name = record.beneficiary_name
        self.original_names.add(name)
        if len(name) < len(self.display_name):
            self.display_name = name
        if not self.registration_number:
            number = (record.registration_number or "").strip()
            if number:
                self.registration_number = number
        self.record_count += 1
        self.total_amount += amount_value(record.amount)


@dataclass
class OrganizationIndex:
    """
    Result of grouping a full record snapshot.

    The caller owns this value and passes it to whatever needs canonical
    organizations, so the grouping work is done once per snapshot.
    """
    groups: dict[str, OrganizationGroup] = field(default_factory=dict)
    """Groups keyed by canonical key, in first-seen order"""

    record_keys: list[Optional[str]] = field(default_factory=list)
    """Group key of each input record by position (None when ungrouped)"""

    ungrouped: int = 0
    """Number of records that did not land in any group"""

    def group_for(self, name: str) -> Optional[OrganizationGroup]:
        """Find the group that has seen this exact original name."""
        for group in self.groups.values():
            if name in group.original_names:
                return group
        return None


@dataclass(frozen=True)
class MentionContext:
    """One grant record that mentions another organization."""
    purpose_text: str
    year: str
    amount: float

    def to_record(self) -> dict[str, object]:
        return {"purpose_text": self.purpose_text, "year": self.year, "amount": self.amount}


@dataclass
class Relationship:
    """
    Directed edge: a grant of `source_org` mentions `target_org` in its purpose.

    Confidence is always derived from mention_count and years; it is never
    set independently of them.
    """
    source_org: str
    target_org: str
    confidence: float
    mention_count: int
    years: list[str] = field(default_factory=list)
    contexts: list[MentionContext] = field(default_factory=list)
    """Bounded sample for display, never used for scoring"""

    def to_record(self) -> dict[str, object]:
        return {
            "source_org": self.source_org,
            "target_org": self.target_org,
            "confidence": round(self.confidence, 4),
            "mention_count": self.mention_count,
            "years": list(self.years),
            "contexts": [context.to_record() for context in self.contexts],
        }


@dataclass
class MentionResult:
    """
    Result of looking for an organization name inside a purpose text.
    """
    matches: bool
    """Whether the text mentions the organization"""

    strategy: Optional[str] = None
    """The detection strategy that succeeded (exact, all_words, quoted)"""

    details: Optional[str] = None
    """Human-readable explanation of the match"""
