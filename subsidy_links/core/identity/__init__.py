"""
Beneficiary identity and organization relationship domain logic.

This module handles:
- Name normalization (grouping key and relaxed detection form)
- Identity grouping (partitioning records into organizations)
- Mention detection (does a purpose text name an organization)
- Relationship scoring (confidence of directed mentions)

All logic is pure business logic with no I/O dependencies.
"""

from __future__ import annotations

from .grouping import (
    IdentityGrouper,
    build_index,
    display_name_for,
    group_beneficiaries,
    top_beneficiaries,
)
from .mentions import MentionDetector, mentions
from .models import (
    MentionContext,
    MentionResult,
    OrganizationGroup,
    OrganizationIndex,
    Relationship,
)
from .normalization import normalize_for_detection, normalize_name
from .relationships import (
    RelationshipScorer,
    calculate_confidence,
    detect_relationships,
    relationships_for_organization,
)

__all__ = [
    "IdentityGrouper",
    "MentionContext",
    "MentionDetector",
    "MentionResult",
    "OrganizationGroup",
    "OrganizationIndex",
    "Relationship",
    "RelationshipScorer",
    "build_index",
    "calculate_confidence",
    "detect_relationships",
    "display_name_for",
    "group_beneficiaries",
    "mentions",
    "normalize_for_detection",
    "normalize_name",
    "relationships_for_organization",
    "top_beneficiaries",
]
