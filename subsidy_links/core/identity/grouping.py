"""
Identity grouper - partitions subsidy records into organizations.

Two independent partitions are computed and merged with a fixed priority:
- by normalized beneficiary name (authoritative)
- by registration number (fallback only)

Registration numbers are unreliable in the source data: the same legal
entity can appear under more than one number. They never override name
evidence and only form a group of their own when none of the names in it
could be normalized.

This module has NO I/O dependencies; the whole record snapshot is passed in.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Optional, Union

from ...models import SubsidyRecord
from .models import OrganizationGroup, OrganizationIndex
from .normalization import normalize_name

logger = logging.getLogger(__name__)

NORM_PREFIX = "norm:"
REG_PREFIX = "reg:"


def _is_usable(record: SubsidyRecord) -> bool:
    # Membership depends on the name only; see OrganizationGroup.add_record for amounts.
    name = getattr(record, "beneficiary_name", None)
    return isinstance(name, str) and bool(name.strip())


def _registration_key(record: SubsidyRecord) -> str:
    number = getattr(record, "registration_number", None)
    if not isinstance(number, str):
        return ""
    return number.strip()


class IdentityGrouper:
    """
    Groups subsidy records by the organization they belong to.

    Usage:
        grouper = IdentityGrouper()
        groups = grouper.group(records)
        for key, group in groups.items():
            print(key, group.display_name, group.record_count)
    """

    def group_by_normalized_name(
        self, records: Iterable[SubsidyRecord]
    ) -> dict[str, OrganizationGroup]:
        """
        Fold every record with a normalizable name into a "norm:" group.

        The first name seen seeds the display name; later names replace it
        only when strictly shorter.
        """
        groups: dict[str, OrganizationGroup] = {}
        for record in records:
            if not _is_usable(record):
                continue
            normalized = normalize_name(record.beneficiary_name)
            if not normalized:
                continue
            key = NORM_PREFIX + normalized
            group = groups.get(key)
            if group is None:
                group = OrganizationGroup(
                    canonical_key=key,
                    display_name=record.beneficiary_name,
                    normalized_name=normalized,
                )
                groups[key] = group
            group.add_record(record)
        return groups

    def group_by_registration_number(
        self, records: Iterable[SubsidyRecord]
    ) -> dict[str, OrganizationGroup]:
        """Fold every record carrying a registration number into a "reg:" group."""
        groups: dict[str, OrganizationGroup] = {}
        for record in records:
            if not _is_usable(record):
                continue
            number = _registration_key(record)
            if not number:
                continue
            key = REG_PREFIX + number
            group = groups.get(key)
            if group is None:
                group = OrganizationGroup(
                    canonical_key=key,
                    display_name=record.beneficiary_name,
                    registration_number=number,
                )
                groups[key] = group
            group.add_record(record)
        return groups

    def group(self, records: Optional[Sequence[SubsidyRecord]]) -> dict[str, OrganizationGroup]:
        """
        Partition records into organizations.

        Name groups always win. A registration group survives only when none
        of its member names already sit in a name group.

        Args:
            records: Complete record snapshot (None or empty gives {})

        Returns:
            Dict mapping canonical key to OrganizationGroup
        """
        if not records:
            return {}

        by_name = self.group_by_normalized_name(records)
        by_registration = self.group_by_registration_number(records)

        named: set[str] = set()
        for group in by_name.values():
            named.update(group.original_names)

        merged = dict(by_name)
        dropped = 0
        for key, group in by_registration.items():
            if named.intersection(group.original_names):
                dropped += 1
                continue
            merged[key] = group

        logger.debug(
            "Grouped %d records: %d name groups, %d registration groups kept, %d superseded by names",
            len(records),
            len(by_name),
            len(merged) - len(by_name),
            dropped,
        )
        return merged

    def build_index(self, records: Optional[Sequence[SubsidyRecord]]) -> OrganizationIndex:
        """
        Group records and remember which group each record landed in.

        The returned index is a plain value: callers keep it for as long as
        the snapshot is unchanged and rebuild it when records change.
        """
        records = list(records or [])
        groups = self.group(records)
        index = OrganizationIndex(groups=groups)

        for record in records:
            key: Optional[str] = None
            if _is_usable(record):
                normalized = normalize_name(record.beneficiary_name)
                if normalized:
                    key = NORM_PREFIX + normalized
                else:
                    number = _registration_key(record)
                    if number and REG_PREFIX + number in groups:
                        key = REG_PREFIX + number
            if key is None:
                index.ungrouped += 1
            index.record_keys.append(key)

        if index.ungrouped:
            logger.debug("%d of %d records left ungrouped", index.ungrouped, len(records))
        return index


def group_beneficiaries(records: Optional[Sequence[SubsidyRecord]]) -> dict[str, OrganizationGroup]:
    return IdentityGrouper().group(records)


def build_index(records: Optional[Sequence[SubsidyRecord]]) -> OrganizationIndex:
    return IdentityGrouper().build_index(records)


def display_name_for(
    name: str, source: Union[OrganizationIndex, Sequence[SubsidyRecord], None]
) -> str:
    """
    Representative name of the organization a raw beneficiary name belongs to.

    Falls back to the name itself when no group has seen it.
    """
    index = source if isinstance(source, OrganizationIndex) else build_index(source)
    group = index.group_for(name)
    return group.display_name if group else name


def top_beneficiaries(index: OrganizationIndex, limit: int = 10) -> list[OrganizationGroup]:
    """Deduplicated organizations ordered by total granted amount."""
    ranked = sorted(index.groups.values(), key=lambda group: group.total_amount, reverse=True)
    if limit <= 0:
        return ranked
    return ranked[:limit]
