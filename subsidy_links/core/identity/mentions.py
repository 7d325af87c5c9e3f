"""
Mention detection: does a grant purpose text name a given organization?

Strategies, tried in order and short-circuiting on the first hit:
1. Exact: the original name as a case-insensitive, word-bounded substring
2. All words: every significant word of the relaxed name appears as a whole word
3. Quoted: the original name wrapped in single or double quotes

Plain substring search gives too many false positives on short or common
names ("Art" inside "Particulier"), hence the word boundaries.

All functions are pure and have no I/O dependencies.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Pattern

from .models import MentionResult
from .normalization import normalize_for_detection, significant_words, strip_diacritics


@dataclass(frozen=True)
class MentionTarget:
    lowered: str
    relaxed: str
    bounded: Pattern[str]
    quoted: Pattern[str]
    words: tuple[Pattern[str], ...]


def compile_target(name: str) -> MentionTarget:
    lowered = name.strip().lower()
    relaxed = normalize_for_detection(name)
    escaped = re.escape(lowered)
    words: tuple[Pattern[str], ...] = ()
    if relaxed and relaxed != lowered:
        words = tuple(
            re.compile(rf"\b{re.escape(word)}\b") for word in significant_words(relaxed)
        )
    return MentionTarget(
        lowered=lowered,
        relaxed=relaxed,
        bounded=re.compile(rf"(?<!\w){escaped}(?!\w)", re.IGNORECASE),
        quoted=re.compile(rf"[\"']{escaped}[\"']", re.IGNORECASE),
        words=words,
    )


def fold_text(text: str) -> str:
    """Lowercase and strip accents from a purpose text for word lookups."""
    return strip_diacritics(text.lower())


def match_exact(text: str, target: MentionTarget) -> MentionResult:
    """
    Case-insensitive substring match, re-validated on word boundaries.

    Examples:
        "Festival d'Art contemporain" / "Art" → True
        "Aide aux particuliers" / "Art" → False
    """
    if target.lowered and target.lowered in text.lower() and target.bounded.search(text):
        return MentionResult(
            matches=True,
            strategy="exact",
            details=f"'{target.lowered}' found as a whole phrase",
        )
    return MentionResult(matches=False)


def match_all_words(folded_text: str, target: MentionTarget) -> MentionResult:
    """
    Every significant word of the relaxed name occurs somewhere in the text.

    Only tried when normalization changed the name (legal form, punctuation,
    accents), since otherwise the exact strategy already covered it. Word
    order and distance are not checked.
    """
    if not target.words:
        return MentionResult(matches=False)
    if all(pattern.search(folded_text) for pattern in target.words):
        return MentionResult(
            matches=True,
            strategy="all_words",
            details=f"All words of '{target.relaxed}' present",
        )
    return MentionResult(matches=False)


def match_quoted(text: str, target: MentionTarget) -> MentionResult:
    """The original name in single or double quotes, e.g. "Hangar Maritime"."""
    if target.lowered and target.quoted.search(text):
        return MentionResult(
            matches=True,
            strategy="quoted",
            details=f"Quoted name '{target.lowered}'",
        )
    return MentionResult(matches=False)


class MentionDetector:
    """
    Looks for organization names inside purpose texts.

    Compiled patterns and folded texts are memoized on the instance, so one
    detector should be reused for a whole batch and dropped afterwards.

    Usage:
        detector = MentionDetector()
        if detector.mentions("Soutien à Hangar Maritime", "Hangar Maritime asbl"):
            ...
    """

    def __init__(self) -> None:
        self._targets: dict[str, MentionTarget] = {}
        self._folded: dict[str, str] = {}

    def _target(self, name: str) -> MentionTarget:
        target = self._targets.get(name)
        if target is None:
            target = compile_target(name)
            self._targets[name] = target
        return target

    def _fold(self, text: str) -> str:
        folded = self._folded.get(text)
        if folded is None:
            folded = fold_text(text)
            self._folded[text] = folded
        return folded

    def detect(self, purpose_text: Optional[str], target_name: Optional[str]) -> MentionResult:
        """
        Decide whether purpose_text mentions the organization called target_name.

        Args:
            purpose_text: Free-text grant purpose
            target_name: Original (raw) spelling of the organization name

        Returns:
            MentionResult with the strategy that matched, if any
        """
        if not purpose_text or not isinstance(purpose_text, str):
            return MentionResult(matches=False, details="Empty text")
        if not target_name or not isinstance(target_name, str):
            return MentionResult(matches=False, details="Empty name")

        target = self._target(target_name)
        if not target.relaxed:
            return MentionResult(matches=False, details="Name normalizes to nothing")

        result = match_exact(purpose_text, target)
        if result.matches:
            return result

        result = match_all_words(self._fold(purpose_text), target)
        if result.matches:
            return result

        result = match_quoted(purpose_text, target)
        if result.matches:
            return result

        return MentionResult(matches=False, details="No detection strategy succeeded")

    def mentions(self, purpose_text: Optional[str], target_name: Optional[str]) -> bool:
        return self.detect(purpose_text, target_name).matches


def mentions(purpose_text: Optional[str], target_name: Optional[str]) -> bool:
    """One-off check; use a MentionDetector instance for batches."""
    return MentionDetector().mentions(purpose_text, target_name)
