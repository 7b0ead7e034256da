"""
Line-level compare engine for auditing optimized resumes.

This module builds the side-by-side comparison shown to a reviewer:
- Classifies every non-blank line as unchanged, removed or added
- Highlights target keyword matches on the optimized side
- Renders lines as HTML with highlight markup

The comparison is set-based rather than a sequence alignment: a line
counts as unchanged if the same line (ignoring case and whitespace)
appears anywhere on the other side. Reordered bullets therefore do not
register as changes, and a modified line shows up as one removal plus
one addition.
"""

import html
import logging
import re
from typing import Iterable, Optional

from .models import Comparison, DiffLine, HighlightSpan, LineTag
from .verifier import normalize_keyword

logger = logging.getLogger(__name__)


DEFAULT_HIGHLIGHT_LIMIT = 30

_LINE_SPLIT_RE = re.compile(r"\r?\n")


def line_signature(line: str) -> str:
    """Normalize a line for comparison: trim, lowercase, collapse whitespace."""
    return re.sub(r"\s+", " ", line.strip().lower())


def _signatures(lines: list[str]) -> set[str]:
    return {sig for sig in (line_signature(line) for line in lines) if sig}


def build_highlight_pattern(keywords: Iterable[str]) -> Optional[re.Pattern]:
    """
    Build one alternation pattern matching any keyword as a whole word.

    Args:
        keywords: Keywords to highlight (blank entries are ignored).

    Returns:
        Compiled case-insensitive pattern, or None if there is nothing to match.
    """
    alternatives = []
    for keyword in keywords:
        norm = normalize_keyword(keyword)
        if not norm:
            continue
        alternatives.append(r"\s+".join(re.escape(token) for token in norm.split(" ")))

    if not alternatives:
        return None

    # Longest first so "Power BI" wins over "Power"
    alternatives.sort(key=len, reverse=True)

    return re.compile(r"(?<!\w)(?:" + "|".join(alternatives) + r")(?!\w)", re.IGNORECASE)


def find_highlights(line: str, pattern: Optional[re.Pattern]) -> tuple[HighlightSpan, ...]:
    """
    Find keyword matches in a line, left to right, without overlaps.

    Args:
        line: Line text.
        pattern: Pattern from build_highlight_pattern (None = no highlights).

    Returns:
        Highlight spans with character offsets into ``line``.
    """
    if pattern is None or not line:
        return ()
    return tuple(
        HighlightSpan(start=m.start(), end=m.end(), text=m.group(0))
        for m in pattern.finditer(line)
        if m.end() > m.start()
    )


def _classify(line: str, other_side: set[str], changed_tag: LineTag) -> LineTag:
    signature = line_signature(line)
    if not signature:
        return LineTag.BLANK
    if signature in other_side:
        return LineTag.UNCHANGED
    return changed_tag


def compare(
    original: Optional[str],
    optimized: Optional[str],
    keywords: Optional[Iterable[str]] = None,
    highlight_limit: int = DEFAULT_HIGHLIGHT_LIMIT,
) -> Comparison:
    """
    Compare an original and an optimized text line by line.

    Args:
        original: Original resume text.
        optimized: Optimized resume text.
        keywords: Keywords to highlight on the optimized side.
        highlight_limit: Maximum number of keywords highlighted.

    Returns:
        Comparison with classified lines for both sides.
    """
    original_lines = _LINE_SPLIT_RE.split(original or "")
    optimized_lines = _LINE_SPLIT_RE.split(optimized or "")

    original_set = _signatures(original_lines)
    optimized_set = _signatures(optimized_lines)

    kept_keywords = tuple(k for k in (keywords or []) if normalize_keyword(k))[:highlight_limit]
    pattern = build_highlight_pattern(kept_keywords)

    left = tuple(
        DiffLine(
            number=idx,
            text=line,
            tag=_classify(line, optimized_set, LineTag.REMOVED),
        )
        for idx, line in enumerate(original_lines, start=1)
    )
    right = tuple(
        DiffLine(
            number=idx,
            text=line,
            tag=_classify(line, original_set, LineTag.ADDED),
            highlights=find_highlights(line, pattern),
        )
        for idx, line in enumerate(optimized_lines, start=1)
    )

    result = Comparison(original_lines=left, optimized_lines=right, keywords=kept_keywords)
    logger.debug("Compare: %d removed, %d added", result.removed_count, result.added_count)
    return result


def render_html(line: DiffLine, highlight_class: str = "kw") -> str:
    """
    Render a line as HTML with keyword highlights wrapped in <mark>.

    Args:
        line: Line to render.
        highlight_class: CSS class for highlight marks.

    Returns:
        A <div> element whose class is the line tag.
    """
    parts = []
    for fragment, is_highlight in line.segments():
        escaped = html.escape(fragment)
        if is_highlight:
            parts.append(f'<mark class="{highlight_class}">{escaped}</mark>')
        else:
            parts.append(escaped)

    return f'<div class="{line.tag.value}">{"".join(parts) or "&nbsp;"}</div>'


def get_changes_summary(comparison: Comparison) -> dict:
    """
    Generate a summary of a comparison.

    Args:
        comparison: Result of compare().

    Returns:
        Dictionary with change counts and the keywords that were highlighted.
    """
    highlighted: list[str] = []
    seen: set[str] = set()
    for line in comparison.optimized_lines:
        for span in line.highlights:
            key = span.text.lower()
            if key not in seen:
                seen.add(key)
                highlighted.append(span.text)

    return {
        "removed_lines": comparison.removed_count,
        "added_lines": comparison.added_count,
        "unchanged_lines": sum(
            1 for line in comparison.optimized_lines if line.tag == LineTag.UNCHANGED
        ),
        "highlighted_terms": highlighted,
        "removed_texts": [l.text for l in comparison.original_lines if l.tag == LineTag.REMOVED],
        "added_texts": [l.text for l in comparison.optimized_lines if l.tag == LineTag.ADDED],
    }
