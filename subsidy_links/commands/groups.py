from __future__ import annotations

import json
from typing import Sequence

from ..core.identity import build_index, top_beneficiaries
from ..models import SubsidyRecord
from .output import format_amount


def run(records: Sequence[SubsidyRecord], *, limit: int = 20, json_output: bool = False) -> None:
    index = build_index(records)
    ranked = top_beneficiaries(index, limit=limit)

    if json_output:
        payload = [
            {
                "canonical_key": group.canonical_key,
                "display_name": group.display_name,
                "original_names": sorted(group.original_names),
                "registration_number": group.registration_number,
                "record_count": group.record_count,
                "total_amount": group.total_amount,
            }
            for group in ranked
        ]
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    if not ranked:
        print("No beneficiaries found.")
        return

    print(f"{len(index.groups)} organizations from {len(records)} records ({index.ungrouped} ungrouped)\n")
    for position, group in enumerate(ranked, start=1):
        print(f"{position:>3}. {group.display_name}  {format_amount(group.total_amount)} EUR  ({group.record_count} grants)")
        variants = sorted(name for name in group.original_names if name != group.display_name)
        for variant in variants:
            print(f"       - {variant}")
