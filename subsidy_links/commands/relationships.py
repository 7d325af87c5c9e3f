from __future__ import annotations

import json
from typing import Optional, Sequence

from ..config import MatchingSettings
from ..core.identity import RelationshipScorer, build_index
from ..models import SubsidyRecord
from .output import format_amount


def run(
    records: Sequence[SubsidyRecord],
    settings: MatchingSettings,
    *,
    min_confidence: Optional[float] = None,
    organization: Optional[str] = None,
    json_output: bool = False,
) -> None:
    scorer = RelationshipScorer(
        min_key_length=settings.min_key_length,
        max_contexts=settings.max_contexts,
    )
    index = build_index(records)

    if organization:
        threshold = settings.organization_min_confidence if min_confidence is None else min_confidence
        relationships = scorer.for_organization(
            organization, records, min_confidence=threshold, index=index
        )
    else:
        threshold = settings.min_confidence if min_confidence is None else min_confidence
        relationships = scorer.detect(records, min_confidence=threshold, index=index)

    if json_output:
        print(json.dumps([rel.to_record() for rel in relationships], indent=2, ensure_ascii=False))
        return

    if not relationships:
        print("No relationships found.")
        return

    for rel in relationships:
        print(
            f"{rel.source_org} → {rel.target_org}  "
            f"confidence {rel.confidence:.2f} | {rel.mention_count} mention(s) | {', '.join(rel.years)}"
        )
        for context in rel.contexts:
            print(f"    [{context.year}] {format_amount(context.amount)} EUR  {context.purpose_text}")
