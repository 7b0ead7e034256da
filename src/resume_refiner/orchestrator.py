"""
Refinement orchestrator - the bounded multi-pass rewrite loop.

The loop is an explicit state machine driven by keyword coverage:

    BOOSTING -> [FOLLOW_UP] -> [SKILL_BACKFILL] -> DONE

- BOOSTING is mandatory and embeds the prioritized keyword list.
- FOLLOW_UP runs at most once, only while target keywords are missing.
- SKILL_BACKFILL runs at most once, only while must-include skills are
  missing, and only touches the skills section.

Every pass output is normalized before it is stored, so the orchestrator
only ever holds canonical documents. A failing rewrite on the first pass
propagates; on later passes the loop stops and returns the last good
document.

All per-request state lives inside ``refine``; one orchestrator can serve
concurrent requests.
"""

import logging
from typing import Awaitable, Callable, Iterable, Optional, Protocol

from .config import MAX_PASSES, RefinementConfig
from .instructions import (
    build_boost_instruction,
    build_follow_up_instruction,
    build_skill_backfill_instruction,
)
from .models import (
    CoverageResult,
    Document,
    RefinementOutcome,
    RefinementPass,
    RefinementStage,
    StopReason,
)
from .prioritizer import extract_min_years, prioritize_keywords
from .verifier import coverage

logger = logging.getLogger(__name__)


# rewrite(current_text, instruction, job_context) -> rewritten markdown
Rewriter = Callable[[str, str, str], Awaitable[str]]

# Ranks and deduplicates raw keywords before they go into an instruction
Prioritizer = Callable[[list[str]], list[str]]


class CancellationSignal(Protocol):
    """Anything with an ``is_set()`` method, e.g. ``asyncio.Event``."""

    def is_set(self) -> bool:
        ...


_STAGE_ORDER = (
    RefinementStage.BOOSTING,
    RefinementStage.FOLLOW_UP,
    RefinementStage.SKILL_BACKFILL,
)

SKILLS_LABEL = "SKILLS"


class RefinementOrchestrator:
    """
    Drives the rewrite collaborator through the bounded refinement loop.
    """

    def __init__(
        self,
        rewrite: Rewriter,
        config: Optional[RefinementConfig] = None,
        prioritizer: Optional[Prioritizer] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            rewrite: Async rewrite collaborator.
            config: Refinement configuration.
            prioritizer: Keyword prioritizer (defaults to prioritize_keywords).
        """
        self.rewrite = rewrite
        self.config = config or RefinementConfig()
        self.prioritizer = prioritizer or prioritize_keywords

    async def refine(
        self,
        original: str,
        context: str,
        keywords: Iterable[str],
        must_include: Optional[Iterable[str]] = None,
        cancel: Optional[CancellationSignal] = None,
    ) -> RefinementOutcome:
        """
        Run the refinement loop on a draft resume.

        Args:
            original: Draft resume markdown.
            context: Job context (job description) passed to every rewrite.
            keywords: Target keywords.
            must_include: Skills present in both the resume and the job
                that must survive; drives the skills backfill pass.
            cancel: Optional signal checked before every pass after the first.

        Returns:
            RefinementOutcome with the latest normalized document.

        Raises:
            Exception: Whatever the rewriter raised on the boosting pass.
        """
        keywords = list(keywords)
        must_include = list(must_include or [])

        document = Document.from_markdown(original)
        passes = 0
        last_pass: Optional[RefinementPass] = None
        stop_reason: Optional[StopReason] = None
        error: Optional[str] = None

        stage = RefinementStage.BOOSTING
        while stage is not RefinementStage.DONE:
            if stage is RefinementStage.BOOSTING:
                instruction = self._boost_instruction(keywords, must_include, context)
                document = await self._run_pass(stage, document, instruction, context)
            else:
                if cancel is not None and cancel.is_set():
                    logger.info("Refinement cancelled before %s pass", stage.value)
                    stop_reason = StopReason.CANCELLED
                    break
                try:
                    instruction = self._instruction_for(stage, document, keywords, must_include)
                    document = await self._run_pass(stage, document, instruction, context)
                except Exception as e:
                    logger.warning(
                        "Rewrite failed on %s pass %d, keeping previous document: %s",
                        stage.value, passes + 1, e,
                    )
                    stop_reason = StopReason.COLLABORATOR_FAILURE
                    error = str(e)
                    break

            passes += 1
            last_pass = RefinementPass(
                index=passes,
                stage=stage,
                instruction=instruction,
                document=document,
            )
            stage = self._next_stage(stage, document, keywords, must_include, passes)

        final_coverage = self._coverage(document, keywords)
        skill_coverage = self._coverage(document, must_include) if must_include else None

        if stop_reason is None:
            complete = final_coverage.is_complete and (
                skill_coverage is None or skill_coverage.is_complete
            )
            stop_reason = StopReason.CONVERGED if complete else StopReason.BUDGET_EXHAUSTED

        logger.info(
            "Refinement finished after %d pass(es): %s, %d/%d keywords present",
            passes, stop_reason.value,
            len(final_coverage.present), len(final_coverage.keywords),
        )

        return RefinementOutcome(
            document=document,
            passes_completed=passes,
            coverage=final_coverage,
            stop_reason=stop_reason,
            last_pass=last_pass,
            skill_coverage=skill_coverage,
            error=error,
        )

    def _coverage(self, document: Document, keywords: list[str]) -> CoverageResult:
        return coverage(document, keywords, match_variants=self.config.match_variants)

    def _next_stage(
        self,
        current: RefinementStage,
        document: Document,
        keywords: list[str],
        must_include: list[str],
        passes: int,
    ) -> RefinementStage:
        """Pick the next stage after ``current`` based on fresh coverage."""
        if not self.config.allows_pass(passes + 1):
            return RefinementStage.DONE

        for stage in _STAGE_ORDER[_STAGE_ORDER.index(current) + 1:]:
            if stage is RefinementStage.FOLLOW_UP:
                if self.config.enable_follow_up and self._coverage(document, keywords).missing:
                    return stage
            elif stage is RefinementStage.SKILL_BACKFILL:
                if (
                    self.config.enable_skill_backfill
                    and must_include
                    and self._coverage(document, must_include).missing
                ):
                    return stage

        return RefinementStage.DONE

    def _boost_instruction(self, keywords: list[str], must_include: list[str], context: str) -> str:
        min_years = extract_min_years(context) if self.config.include_years_hint else None
        return build_boost_instruction(
            self.prioritizer(keywords)[:self.config.boost_keyword_limit],
            must_include[:self.config.must_include_limit],
            min_years,
        )

    def _instruction_for(
        self,
        stage: RefinementStage,
        document: Document,
        keywords: list[str],
        must_include: list[str],
    ) -> str:
        if stage is RefinementStage.FOLLOW_UP:
            missing = list(self._coverage(document, keywords).missing)
            return build_follow_up_instruction(
                self.prioritizer(missing)[:self.config.follow_up_keyword_limit]
            )

        missing_skills = list(self._coverage(document, must_include).missing)
        return build_skill_backfill_instruction(
            missing_skills[:self.config.must_include_limit],
            section_only=document.section(SKILLS_LABEL) is not None,
        )

    async def _run_pass(
        self,
        stage: RefinementStage,
        document: Document,
        instruction: str,
        context: str,
    ) -> Document:
        """Issue one rewrite call and return the normalized result."""
        logger.info("Starting %s pass", stage.value)

        if stage is RefinementStage.SKILL_BACKFILL:
            section = document.section(SKILLS_LABEL)
            if section is not None:
                text = await self.rewrite(section.text, instruction, context)
                return splice_skills_section(document, text)

        text = await self.rewrite(document.text, instruction, context)
        rewritten = Document.from_markdown(text)
        if rewritten.is_empty:
            logger.warning("Rewrite returned an empty document on %s pass", stage.value)
            return document
        return rewritten


def splice_skills_section(document: Document, rewritten_body: str) -> Document:
    """
    Replace the body of the skills section with rewritten text.

    Only the text up to the next level-2 heading is taken from the rewrite,
    and an echoed "## SKILLS" heading is dropped, so no other section can
    change. A blank rewrite leaves the document unchanged.

    Args:
        document: Normalized document with a SKILLS section.
        rewritten_body: Rewriter output for the section body.

    Returns:
        Normalized document.
    """
    section = document.section(SKILLS_LABEL)
    if section is None:
        return document

    body = list(Document.from_markdown(rewritten_body).lines)
    if body and body[0] == f"## {SKILLS_LABEL}":
        body = body[1:]
    cut = next((i for i, line in enumerate(body) if line.startswith("## ")), len(body))
    body = body[:cut]

    if not "\n".join(body).strip():
        logger.warning("Skills rewrite returned no content, keeping previous section")
        return document

    start = section.heading_index + 1
    end = start + len(section.body)
    lines = list(document.lines[:start]) + [""] + body + [""] + list(document.lines[end:])
    return Document.from_markdown("\n".join(lines))


async def optimize(
    original: str,
    context: str,
    keywords: Iterable[str],
    rewrite: Rewriter,
    max_passes: int = MAX_PASSES,
    must_include: Optional[Iterable[str]] = None,
    cancel: Optional[CancellationSignal] = None,
) -> Document:
    """
    Convenience function running the refinement loop.

    Args:
        original: Draft resume markdown.
        context: Job context passed to every rewrite.
        keywords: Target keywords.
        rewrite: Async rewrite collaborator.
        max_passes: Maximum number of rewrite passes (1-3).
        must_include: Skills that must survive (enables skills backfill).
        cancel: Optional cancellation signal.

    Returns:
        The final normalized Document.
    """
    orchestrator = RefinementOrchestrator(rewrite, RefinementConfig(max_passes=max_passes))
    outcome = await orchestrator.refine(
        original, context, keywords, must_include=must_include, cancel=cancel
    )
    return outcome.document
