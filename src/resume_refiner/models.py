"""
Data models for Resume Refiner.

This module defines the value types that flow between the normalizer,
the coverage verifier, the refinement orchestrator and the compare engine.
All of them are transient: created and discarded within one request.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional


# Canonical labels for the recognized resume sections, in document order.
SECTION_LABELS = ("SUMMARY", "EXPERIENCE", "SKILLS", "EDUCATION")


@dataclass(frozen=True)
class Section:
    """A recognized section of a normalized document."""
    label: str
    heading_index: int  # Line index of the "## LABEL" heading
    body: tuple[str, ...]

    @property
    def text(self) -> str:
        return "\n".join(self.body).strip()


@dataclass(frozen=True)
class Document:
    """
    An ordered sequence of text lines.

    Documents produced by ``from_markdown`` are always in canonical form
    (see ``normalizer.normalize``).
    """
    lines: tuple[str, ...] = ()

    @classmethod
    def from_markdown(cls, markdown: Optional[str]) -> "Document":
        """Normalize raw markdown and wrap it as a Document."""
        from .normalizer import normalize

        return cls.from_text(normalize(markdown))

    @classmethod
    def from_text(cls, text: str) -> "Document":
        """Wrap text as-is, without normalizing it."""
        if not text:
            return cls()
        return cls(tuple(text.split("\n")))

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    @property
    def is_empty(self) -> bool:
        return not self.text.strip()

    def sections(self) -> Iterator[Section]:
        """Yield every recognized level-2 section in order."""
        for idx, line in enumerate(self.lines):
            if not line.startswith("## ") or line[3:].strip() not in SECTION_LABELS:
                continue
            # A section runs until the next level-2 heading of any kind
            end = len(self.lines)
            for j in range(idx + 1, len(self.lines)):
                if self.lines[j].startswith("## "):
                    end = j
                    break
            yield Section(label=line[3:].strip(), heading_index=idx, body=self.lines[idx + 1:end])

    def section(self, label: str) -> Optional[Section]:
        """Return the first section with the given canonical label."""
        wanted = label.strip().upper()
        for section in self.sections():
            if section.label == wanted:
                return section
        return None

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class CoverageResult:
    """Partition of a keyword list into present and missing keywords."""
    present: tuple[str, ...] = ()
    missing: tuple[str, ...] = ()

    @property
    def keywords(self) -> tuple[str, ...]:
        return self.present + self.missing

    @property
    def ratio(self) -> float:
        """Fraction of keywords present (1.0 when there are none)."""
        total = len(self.present) + len(self.missing)
        if total == 0:
            return 1.0
        return len(self.present) / total

    @property
    def is_complete(self) -> bool:
        return not self.missing


class RefinementStage(Enum):
    """States of the refinement loop."""
    BOOSTING = "boosting"
    FOLLOW_UP = "follow_up"
    SKILL_BACKFILL = "skill_backfill"
    DONE = "done"


class StopReason(Enum):
    """Why the refinement loop reached DONE."""
    CONVERGED = "converged"  # Nothing left to fix
    BUDGET_EXHAUSTED = "budget_exhausted"
    COLLABORATOR_FAILURE = "collaborator_failure"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class RefinementPass:
    """One completed request/response cycle with the rewriter."""
    index: int  # 1-based
    stage: RefinementStage
    instruction: str
    document: Document


@dataclass(frozen=True)
class RefinementOutcome:
    """
    Result of a refinement run.

    Attributes:
        document: The latest normalized document.
        passes_completed: Number of rewrite calls that succeeded.
        last_pass: The most recent successful pass, if any.
        coverage: Coverage of the target keywords in ``document``.
        skill_coverage: Coverage of the must-include skills, if any were given.
        stop_reason: Why the loop stopped.
        error: Message of the collaborator failure that stopped the loop.
    """
    document: Document
    passes_completed: int
    coverage: CoverageResult
    stop_reason: StopReason
    last_pass: Optional[RefinementPass] = None
    skill_coverage: Optional[CoverageResult] = None
    error: Optional[str] = None

    @property
    def residual_keywords(self) -> tuple[str, ...]:
        """Target keywords still missing after all passes."""
        return self.coverage.missing


class LineTag(Enum):
    """Classification of a line in a comparison."""
    UNCHANGED = "unchanged"
    REMOVED = "removed"
    ADDED = "added"
    BLANK = "blank"


@dataclass(frozen=True)
class HighlightSpan:
    """A keyword match inside a line (character offsets)."""
    start: int
    end: int
    text: str


@dataclass(frozen=True)
class DiffLine:
    """A line from one side of a comparison."""
    number: int  # 1-based
    text: str
    tag: LineTag
    highlights: tuple[HighlightSpan, ...] = ()

    @property
    def is_changed(self) -> bool:
        return self.tag in (LineTag.ADDED, LineTag.REMOVED)

    def segments(self) -> list[tuple[str, bool]]:
        """Split the line into (fragment, is_highlight) pairs."""
        parts: list[tuple[str, bool]] = []
        last = 0
        for span in self.highlights:
            if span.start > last:
                parts.append((self.text[last:span.start], False))
            parts.append((self.text[span.start:span.end], True))
            last = span.end
        if last < len(self.text):
            parts.append((self.text[last:], False))
        return parts


@dataclass(frozen=True)
class Comparison:
    """Side-by-side comparison of an original and an optimized text."""
    original_lines: tuple[DiffLine, ...] = ()
    optimized_lines: tuple[DiffLine, ...] = ()
    keywords: tuple[str, ...] = field(default=())

    @property
    def removed_count(self) -> int:
        return sum(1 for line in self.original_lines if line.tag == LineTag.REMOVED)

    @property
    def added_count(self) -> int:
        return sum(1 for line in self.optimized_lines if line.tag == LineTag.ADDED)
