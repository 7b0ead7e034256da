# -*- coding: utf-8 -*-
"""
Centralized configuration for Resume Refiner.

This module provides a configuration dataclass that controls the
refinement loop: how many rewrite passes may run, how many keywords each
pass may embed in its instruction, and how keywords are matched.
"""

from dataclasses import dataclass


# Upper bound on passes: Boosting + FollowUp + SkillBackfill
MAX_PASSES = 3


@dataclass(frozen=True)
class RefinementConfig:
    """
    Configuration for the refinement loop.

    Attributes:
        max_passes: Maximum number of rewrite passes (1-3). Pass 1 is the
            mandatory boosting pass; pass 2 is the follow-up for keywords
            still missing; pass 3 is the skills backfill.

        boost_keyword_limit: Maximum keywords embedded in the boosting
            instruction (after prioritization).
        follow_up_keyword_limit: Maximum still-missing keywords embedded in
            the follow-up instruction.
        must_include_limit: Maximum must-include skills embedded in any
            instruction.

        enable_follow_up: Run the follow-up pass when keywords are missing.
        enable_skill_backfill: Run the skills backfill pass when
            must-include skills are missing.

        match_variants: Accept near-literal variants (MS Excel / Excel,
            AWS / Amazon Web Services) when verifying coverage.

        include_years_hint: Tell the rewriter about a minimum-years
            requirement found in the job description.

        highlight_keyword_limit: Maximum keywords highlighted by compare.
    """

    max_passes: int = MAX_PASSES

    # Per-pass truncation bounds
    boost_keyword_limit: int = 18
    follow_up_keyword_limit: int = 18
    must_include_limit: int = 12

    # Stage switches
    enable_follow_up: bool = True
    enable_skill_backfill: bool = True

    # Matching
    match_variants: bool = False

    include_years_hint: bool = True

    highlight_keyword_limit: int = 30

    def __post_init__(self):
        """Validate configuration values."""
        if not 1 <= self.max_passes <= MAX_PASSES:
            raise ValueError(
                f"max_passes must be between 1 and {MAX_PASSES}, got {self.max_passes}"
            )
        for name in (
            "boost_keyword_limit",
            "follow_up_keyword_limit",
            "must_include_limit",
            "highlight_keyword_limit",
        ):
            value = getattr(self, name)
            if value < 1:
                raise ValueError(f"{name} must be >= 1, got {value}")

    def allows_pass(self, index: int) -> bool:
        """Check if a pass with the given 1-based index fits the budget."""
        return index <= self.max_passes

    @classmethod
    def single_pass(cls, **overrides) -> "RefinementConfig":
        """Create config that only runs the mandatory boosting pass.

        Args:
            **overrides: Override any config values.

        Returns:
            RefinementConfig with follow-up and backfill disabled.
        """
        defaults = {
            "max_passes": 1,
            "enable_follow_up": False,
            "enable_skill_backfill": False,
        }
        defaults.update(overrides)
        return cls(**defaults)

    @classmethod
    def thorough(cls, **overrides) -> "RefinementConfig":
        """Create config with every pass enabled and variant matching on.

        Args:
            **overrides: Override any config values.

        Returns:
            RefinementConfig using the full pass budget.
        """
        defaults = {
            "max_passes": MAX_PASSES,
            "enable_follow_up": True,
            "enable_skill_backfill": True,
            "match_variants": True,
        }
        defaults.update(overrides)
        return cls(**defaults)
