# -*- coding: utf-8 -*-
"""
Structural normalization for generated resume markdown.

Handles:
- Heading markers glued onto the end of a body line
- A heading and its body emitted on one line as the first line
- Extraneous top-level (#) title headings
- Section label spelling/case (Experiences, EXPERIENCES, experience -> EXPERIENCE)
- Blank-line spacing around headings

Every function here is total: malformed or empty input degrades to
best-effort output and nothing is raised.
"""

import logging
import re
from typing import Optional

from .models import SECTION_LABELS

logger = logging.getLogger(__name__)


# Accepted spellings per canonical section label (case-insensitive)
SECTION_VARIANTS = {
    "SUMMARY": r"summar(?:y|ies)",
    "EXPERIENCE": r"experiences?|experices",
    "SKILLS": r"skills?",
    "EDUCATION": r"educations?",
}

_LABEL_PATTERN = "|".join(SECTION_VARIANTS.values())

_VARIANT_RES = {
    label: re.compile(rf"(?:{pattern})", re.IGNORECASE)
    for label, pattern in SECTION_VARIANTS.items()
}

# "text ## HEADING" -> marker preceded by text on the same line
_INLINE_MARKER_RE = re.compile(r"(\S)[^\S\n]+(?=#{2,3}[^\S\n]+\S)")

# First line that starts with a label, e.g. "Experiences", "## Summary: Engineer..."
_LEADING_LABEL_RE = re.compile(
    rf"^(?P<label>{_LABEL_PATTERN})(?=$|[\s:|\-])[\s:|\-]*(?P<rest>.*)$",
    re.IGNORECASE,
)

_TOP_LEVEL_HEADING_RE = re.compile(r"^#[^\S\n]+\S")

_LEVEL2_LABEL_RE = re.compile(
    rf"^[^\S\n]*##[^\S\n]+({_LABEL_PATTERN})[^\S\n]*:?[^\S\n]*$",
    re.IGNORECASE | re.MULTILINE,
)

_HEADING_RE = re.compile(r"^#{2,3}[^\S\n]+\S")

_CANONICAL_HEADINGS = frozenset(f"## {label}" for label in SECTION_LABELS)


def canonical_label(text: str) -> Optional[str]:
    """
    Map a section label spelling to its canonical form.

    Args:
        text: Label text such as "Experiences" or "skill".

    Returns:
        The canonical label ("EXPERIENCE", "SKILLS", ...) or None if the
        text is not a recognized label.
    """
    candidate = (text or "").strip()
    for label, pattern in _VARIANT_RES.items():
        if pattern.fullmatch(candidate):
            return label
    return None


def split_inline_headings(text: str) -> str:
    """Move ## / ### markers found mid-line onto their own line."""
    return _INLINE_MARKER_RE.sub(lambda m: m.group(1) + "\n\n", text)


def _first_non_empty(lines: list[str]) -> Optional[int]:
    for idx, line in enumerate(lines):
        if line.strip():
            return idx
    return None


def fix_leading_line(lines: list[str]) -> list[str]:
    """
    Repair the first non-empty line of a generated document.

    A leading line that starts with a section label becomes a standalone
    "## LABEL" heading; anything after the label moves to a body line below.
    Extraneous "# Title" lines are dropped, and the line that follows is
    examined again.

    Args:
        lines: Document lines.

    Returns:
        A new list of lines.
    """
    lines = list(lines)

    while True:
        idx = _first_non_empty(lines)
        if idx is None:
            break

        stripped = lines[idx].strip()
        match = _LEADING_LABEL_RE.match(re.sub(r"^#+\s*", "", stripped))
        if match:
            heading = f"## {canonical_label(match.group('label'))}"
            rest = match.group("rest").strip()
            lines[idx:idx + 1] = [heading, "", rest] if rest else [heading]
            break

        if _TOP_LEVEL_HEADING_RE.match(stripped):
            logger.debug("Dropping top-level heading: %s", stripped)
            del lines[idx]
            continue

        break

    return lines


def canonicalize_headings(text: str) -> str:
    """Rewrite every recognized level-2 heading to "## LABEL"."""
    return _LEVEL2_LABEL_RE.sub(
        lambda m: f"## {canonical_label(m.group(1))}",
        text,
    )


def fix_heading_spacing(lines: list[str]) -> list[str]:
    """
    Enforce blank lines around headings.

    Every ## / ### heading gets a blank line before it. Recognized section
    headings get exactly one blank line above and below.
    """
    out: list[str] = []
    after_section_heading = False

    for line in lines:
        if line in _CANONICAL_HEADINGS:
            while out and not out[-1].strip():
                out.pop()
            if out:
                out.append("")
            out.append(line)
            after_section_heading = True
            continue

        if after_section_heading:
            if not line.strip():
                continue
            out.append("")
            after_section_heading = False

        if _HEADING_RE.match(line) and out and out[-1].strip():
            out.append("")
        out.append(line)

    return out


def normalize(markdown: Optional[str]) -> str:
    """
    Normalize generated resume markdown into canonical form.

    Steps (order matters):
    0. Unify line endings and drop trailing whitespace on every line
    1. Split mid-line ## / ### markers onto their own line
    2. Turn a label-led first line into a standalone heading
    3. Drop extraneous top-level title headings
    4. Canonicalize recognized section headings
    5. Fix blank-line spacing around headings

    The result is a fixed point: ``normalize(normalize(x)) == normalize(x)``.

    Args:
        markdown: Raw markdown from the rewriter. None is treated as empty.

    Returns:
        Canonical markdown (may be empty).
    """
    if markdown is None:
        return ""
    if not isinstance(markdown, str):
        markdown = str(markdown)

    text = markdown.replace("\r\n", "\n").replace("\r", "\n")
    if not text.strip():
        return ""

    # Any trailing whitespace, NBSP and \v included
    text = "\n".join(line.rstrip() for line in text.split("\n"))

    text = split_inline_headings(text)
    lines = fix_leading_line(text.split("\n"))
    text = canonicalize_headings("\n".join(lines))
    lines = fix_heading_spacing(text.split("\n"))

    return "\n".join(lines).strip()


def markdown_to_plain_text(markdown: Optional[str]) -> str:
    """
    Convert markdown to plain text, one output line per input line.

    Used to compare a markdown result against a plain-text original:
    links keep their label, heading hashes, emphasis, quote and list
    markers are removed, and runs of blank lines collapse to one.

    Args:
        markdown: Markdown text.

    Returns:
        Plain text.
    """
    text = (markdown or "").replace("\r\n", "\n").replace("\r", "\n")
    text = re.sub(r"\[([^\]]+)\]\(([^)]+)\)", r"\1", text)

    out: list[str] = []
    for line in text.split("\n"):
        line = re.sub(r"^\s*#{1,6}\s*", "", line)
        line = re.sub(r"^\s*>\s?", "", line)
        line = re.sub(r"^\s*[-+*•]\s+", "", line)
        line = re.sub(r"^\s*\d+\.\s+", "", line)
        line = re.sub(r"\*\*|__|\*|`", "", line)
        line = re.sub(r"\s+", " ", line).strip()

        if not line and out and not out[-1]:
            continue
        out.append(line)

    return "\n".join(out).strip()
