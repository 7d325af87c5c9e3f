"""
Beneficiary name normalization.

Two variants share one pipeline:
- normalize_name: the grouping key (legal forms and stopwords folded away)
- normalize_for_detection: the relaxed form used for mention detection,
  which keeps stopwords because they can carry meaning inside a sentence

All functions are pure and total: anything that is not a usable string
normalizes to "".
"""

from __future__ import annotations

import re
import unicodedata

# Legal forms stripped when they are the last word of a name
LEGAL_SUFFIXES = (
    "asbl", "vzw", "scrl", "sprl", "sa", "nv", "bv", "cv", "sc", "srl", "bvba", "cvba",
)

STOPWORDS = frozenset({
    "de", "du", "la", "le", "les", "des", "van", "der", "den", "het", "een", "the", "of", "and",
})

_SEPARATOR_RE = re.compile(r"[.\-/|_]")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9\s]")
_WHITESPACE_RE = re.compile(r"\s+")
_LEGAL_SUFFIX_RE = re.compile(
    r"\s+(?:" + "|".join(LEGAL_SUFFIXES) + r")\s*$",
    re.IGNORECASE,
)


def strip_diacritics(value: str) -> str:
    """Decompose and drop combining marks so "é" and "e" collide."""
    decomposed = unicodedata.normalize("NFD", value)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def _fold(value: str) -> str:
    folded = strip_diacritics(value.strip().lower())
    folded = _SEPARATOR_RE.sub(" ", folded)
    return _NON_ALNUM_RE.sub(" ", folded)


def _strip_legal_suffix(value: str) -> str:
    return _LEGAL_SUFFIX_RE.sub("", value)


def _drop_stopwords(value: str) -> str:
    return " ".join(word for word in value.split() if word not in STOPWORDS)


def _collapse(value: str) -> str:
    return _WHITESPACE_RE.sub(" ", value).strip()


def _normalize(name: object, keep_stopwords: bool) -> str:
    if not name or not isinstance(name, str):
        return ""

    normalized = _fold(name)
    # Stacked forms ("x scrl sa") and stopwords sitting after a legal form
    # only surface one at a time, so repeat until the value is stable.
    while True:
        previous = normalized
        normalized = _strip_legal_suffix(normalized)
        if not keep_stopwords:
            normalized = _drop_stopwords(normalized)
        normalized = _collapse(normalized)
        if normalized == previous:
            return normalized


def normalize_name(name: object) -> str:
    """
    Normalize a beneficiary name to its grouping key.

    Process:
    1. Trim and lowercase
    2. Unicode decomposition, strip accents
    3. Replace . - / | _ with spaces
    4. Replace any other non-alphanumeric character with a space
    5. Strip a trailing legal form (asbl, vzw, sa, ...)
    6. Drop stopwords (de, la, van, the, ...)
    7. Collapse whitespace

    Examples:
        "parking.brussels" → "parking brussels"
        "Café ASBL" → "cafe"
        "Maison de la Culture" → "maison culture"

    Args:
        name: Raw beneficiary name

    Returns:
        Normalized key, or "" when nothing usable remains
    """
    return _normalize(name, keep_stopwords=False)


def normalize_for_detection(name: object) -> str:
    """Relaxed normalization for mention detection: same as normalize_name but keeps stopwords."""
    return _normalize(name, keep_stopwords=True)


def significant_words(normalized: str) -> list[str]:
    """Tokens longer than two characters, the ones worth matching on."""
    return [word for word in normalized.split() if len(word) > 2]
