"""
Relationship scoring between organizations.

A relationship M → O means "a grant record of organization M mentions
organization O in its purpose text". Raw mention hits are aggregated per
(M, O) pair across years and turned into a heuristic confidence score.

The work is quadratic in the number of distinct organizations: every
organization's names are searched in every other organization's purpose
texts. Run it as a batch step over a full snapshot and cache the result
rather than calling it per request.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Optional

from ...models import SubsidyRecord
from .grouping import IdentityGrouper
from .mentions import MentionDetector
from .models import (
    MentionContext,
    OrganizationGroup,
    OrganizationIndex,
    Relationship,
    amount_value,
)
from .normalization import normalize_for_detection, significant_words

logger = logging.getLogger(__name__)

DEFAULT_MIN_CONFIDENCE = 0.6
ORGANIZATION_MIN_CONFIDENCE = 0.75
MIN_KEY_LENGTH = 3
MAX_CONTEXTS = 5
CONFIDENCE_FLOOR = 0.6


def calculate_confidence(mention_count: int, years: Iterable[str], target_org: str) -> float:
    """
    Heuristic confidence that a detected mention reflects a real relationship.

    Components:
    - frequency (max 0.5): 1 mention = 0.3, 2+ mentions = 0.5
    - temporal (max 0.3): 1 distinct year = 0.15, 2+ years = 0.3
    - name length (max 0.15): 1 significant word = 0.05, 2+ words = 0.15
    - context (0.05): any mention at all

    The result never drops below 0.6; callers filter with their own threshold.

    Args:
        mention_count: Number of mentioning records
        years: Grant years of those records (duplicates allowed)
        target_org: Name of the mentioned organization

    Returns:
        Confidence in [0.6, 1.0]
    """
    if mention_count == 1:
        frequency_score = 0.3
    else:
        frequency_score = min(mention_count / 2, 1) * 0.5

    distinct_years = len(set(years))
    if distinct_years == 1:
        temporal_score = 0.15
    else:
        temporal_score = min(distinct_years / 2, 1) * 0.3

    word_count = len(significant_words(normalize_for_detection(target_org)))
    if word_count == 1:
        length_score = 0.05
    else:
        length_score = min(word_count / 2, 1) * 0.15

    context_score = 0.05 if mention_count > 0 else 0.0

    total = frequency_score + temporal_score + length_score + context_score
    # The weights top out at exactly 1.0; min() only absorbs float rounding.
    return min(max(total, CONFIDENCE_FLOOR), 1.0)


@dataclass
class _MentionHits:
    mentioning: OrganizationGroup
    count: int = 0
    years: set[str] = field(default_factory=set)
    contexts: list[MentionContext] = field(default_factory=list)


class RelationshipScorer:
    """
    Detects directed "mentions" relationships between organizations.

    Usage:
        scorer = RelationshipScorer()
        for rel in scorer.detect(records, min_confidence=0.7):
            print(f"{rel.source_org} → {rel.target_org} ({rel.confidence:.2f})")
    """

    def __init__(
        self,
        min_key_length: int = MIN_KEY_LENGTH,
        max_contexts: int = MAX_CONTEXTS,
        grouper: Optional[IdentityGrouper] = None,
    ) -> None:
        self.min_key_length = min_key_length
        self.max_contexts = max_contexts
        self.grouper = grouper or IdentityGrouper()

    def detect(
        self,
        records: Optional[Sequence[SubsidyRecord]],
        min_confidence: float = DEFAULT_MIN_CONFIDENCE,
        index: Optional[OrganizationIndex] = None,
    ) -> list[Relationship]:
        """
        Find every relationship whose confidence reaches min_confidence.

        Args:
            records: Complete record snapshot
            min_confidence: Inclusive threshold on the confidence score
            index: Grouping of these same records, when the caller already has one

        Returns:
            Relationships sorted by confidence, highest first (stable)
        """
        if not records:
            return []

        records = list(records)
        if index is None:
            index = self.grouper.build_index(records)

        organizations = self._eligible_organizations(index)
        if len(organizations) < 2:
            return []

        members: dict[str, list[SubsidyRecord]] = {key: [] for key in organizations}
        for record, key in zip(records, index.record_keys):
            if key in members:
                members[key].append(record)

        detector = MentionDetector()
        relationships: list[Relationship] = []

        for target_key, target in organizations.items():
            names = sorted(target.original_names)
            hits: dict[str, _MentionHits] = {}

            for source_key, source in organizations.items():
                if source_key == target_key:
                    continue
                for record in members[source_key]:
                    if not any(detector.mentions(record.purpose_text, name) for name in names):
                        continue
                    entry = hits.get(source_key)
                    if entry is None:
                        entry = _MentionHits(mentioning=source)
                        hits[source_key] = entry
                    entry.count += 1
                    entry.years.add(record.grant_year)
                    if len(entry.contexts) < self.max_contexts:
                        entry.contexts.append(
                            MentionContext(
                                purpose_text=record.purpose_text,
                                year=record.grant_year,
                                amount=amount_value(record.amount),
                            )
                        )

            for entry in hits.values():
                if entry.mentioning.display_name == target.display_name:
                    continue
                confidence = calculate_confidence(entry.count, entry.years, target.display_name)
                if confidence < min_confidence:
                    continue
                relationships.append(
                    Relationship(
                        source_org=entry.mentioning.display_name,
                        target_org=target.display_name,
                        confidence=confidence,
                        mention_count=entry.count,
                        years=sorted(entry.years),
                        contexts=entry.contexts,
                    )
                )

        relationships.sort(key=lambda rel: rel.confidence, reverse=True)
        logger.info(
            "Detected %d relationships among %d organizations (min confidence %.2f)",
            len(relationships),
            len(organizations),
            min_confidence,
        )
        return relationships

    def for_organization(
        self,
        org_name: str,
        records: Optional[Sequence[SubsidyRecord]],
        min_confidence: float = ORGANIZATION_MIN_CONFIDENCE,
        index: Optional[OrganizationIndex] = None,
    ) -> list[Relationship]:
        """
        Relationships in which an organization is either the source or the target.

        org_name may be the display name or any original spelling of the
        organization.
        """
        if not records:
            return []
        records = list(records)
        if index is None:
            index = self.grouper.build_index(records)

        wanted = {org_name}
        group = index.group_for(org_name)
        if group is not None:
            wanted.add(group.display_name)

        return [
            rel
            for rel in self.detect(records, min_confidence=min_confidence, index=index)
            if rel.source_org in wanted or rel.target_org in wanted
        ]

    def _eligible_organizations(self, index: OrganizationIndex) -> dict[str, OrganizationGroup]:
        eligible: dict[str, OrganizationGroup] = {}
        for key, group in index.groups.items():
            if len(group.normalized_name) < self.min_key_length:
                continue
            eligible[key] = group
        skipped = len(index.groups) - len(eligible)
        if skipped:
            logger.debug("Skipping %d organizations with names too short to match reliably", skipped)
        return eligible


def detect_relationships(
    records: Optional[Sequence[SubsidyRecord]],
    min_confidence: float = DEFAULT_MIN_CONFIDENCE,
    index: Optional[OrganizationIndex] = None,
) -> list[Relationship]:
    return RelationshipScorer().detect(records, min_confidence=min_confidence, index=index)


def relationships_for_organization(
    org_name: str,
    records: Optional[Sequence[SubsidyRecord]],
    min_confidence: float = ORGANIZATION_MIN_CONFIDENCE,
    index: Optional[OrganizationIndex] = None,
) -> list[Relationship]:
    return RelationshipScorer().for_organization(
        org_name, records, min_confidence=min_confidence, index=index
    )
