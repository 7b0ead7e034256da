"""
Keyword coverage verification.

A keyword is present in a document iff its literal text occurs as a whole
word, ignoring case. Multi-word keywords tolerate any whitespace between
their words ("Power   BI" matches "Power BI").

Optional near-literal variants (MS Excel / Microsoft Excel / Excel,
Power BI / PowerBI, AWS / Amazon Web Services, ...) can be enabled per call.
"""

import logging
import re
from functools import lru_cache
from typing import Iterable, Union

from .models import CoverageResult, Document

logger = logging.getLogger(__name__)


# Tool names that recruiters and generators write interchangeably
EQUIVALENT_TERMS = [
    ("aws", "amazon web services"),
    ("gcp", "google cloud platform"),
    ("azure", "microsoft azure"),
    ("excel", "ms excel", "microsoft excel"),
    ("power bi", "powerbi"),
    ("google sheets", "sheets"),
    ("kubernetes", "k8s"),
]

MAX_VARIANTS = 10


def normalize_keyword(keyword: str) -> str:
    """Collapse whitespace and unify dash characters in a keyword."""
    value = re.sub(r"\s+", " ", str(keyword if keyword is not None else "").strip())
    return re.sub(r"[–—]", "-", value)


@lru_cache(maxsize=1024)
def keyword_pattern(keyword: str) -> re.Pattern:
    """
    Build the whole-word, case-insensitive pattern for a keyword.

    Word boundaries are expressed as "not next to a word character" so that
    keywords ending in punctuation (C++, CI/CD, .NET) still match.
    """
    tokens = [re.escape(token) for token in normalize_keyword(keyword).split(" ")]
    return re.compile(r"(?<!\w)" + r"\s+".join(tokens) + r"(?!\w)", re.IGNORECASE)


def keyword_variants(keyword: str) -> list[str]:
    """
    List the spellings accepted for a keyword when variants are enabled.

    Args:
        keyword: Keyword as given by the caller.

    Returns:
        The normalized keyword followed by its equivalents (at most
        MAX_VARIANTS entries). Empty for a blank keyword.
    """
    base = normalize_keyword(keyword)
    if not base:
        return []

    variants = [base]
    lowered = base.lower()

    for prefix in ("ms ", "microsoft "):
        if lowered.startswith(prefix) and len(base) > len(prefix):
            variants.append(base[len(prefix):].strip())

    for group in EQUIVALENT_TERMS:
        if lowered in group:
            variants.extend(term for term in group if term != lowered)

    seen: set[str] = set()
    unique: list[str] = []
    for variant in variants:
        key = variant.lower()
        if key not in seen:
            seen.add(key)
            unique.append(variant)

    return unique[:MAX_VARIANTS]


def includes_keyword(text: str, keyword: str, match_variants: bool = False) -> bool:
    """
    Check whether a keyword occurs in text as a whole word.

    Args:
        text: Text to search.
        keyword: Keyword to look for.
        match_variants: Also accept the keyword's known equivalents.

    Returns:
        True if the keyword (or an accepted variant) is present. A blank
        keyword is never present.
    """
    if not normalize_keyword(keyword):
        return False

    haystack = text or ""
    candidates = keyword_variants(keyword) if match_variants else [normalize_keyword(keyword)]

    return any(keyword_pattern(candidate).search(haystack) for candidate in candidates)


def coverage(
    document: Union[Document, str],
    keywords: Iterable[str],
    match_variants: bool = False,
) -> CoverageResult:
    """
    Partition keywords into those present in the document and those missing.

    Order within each partition mirrors the input; duplicates are kept.

    Args:
        document: Document or plain text to check.
        keywords: Target keywords.
        match_variants: Also accept known equivalents of each keyword.

    Returns:
        CoverageResult with present and missing keywords.
    """
    text = document.text if isinstance(document, Document) else (document or "")

    present: list[str] = []
    missing: list[str] = []
    for keyword in keywords:
        if includes_keyword(text, keyword, match_variants=match_variants):
            present.append(keyword)
        else:
            missing.append(keyword)

    logger.debug("Coverage: %d present, %d missing", len(present), len(missing))
    return CoverageResult(present=tuple(present), missing=tuple(missing))
