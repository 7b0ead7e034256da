"""
Resume Refiner

The content-refinement engine of a resume optimizer that:
- Normalizes generated resume markdown into canonical sections
- Verifies that target keywords are lexically present
- Re-invokes a rewriter in a bounded loop until coverage is adequate
- Builds an original/optimized comparison with keywords highlighted
"""

__version__ = "1.0.0"
__author__ = "Resume Refiner Team"

from .config import RefinementConfig, MAX_PASSES

from .models import (
    Document,
    Section,
    CoverageResult,
    RefinementStage,
    RefinementPass,
    RefinementOutcome,
    StopReason,
    LineTag,
    HighlightSpan,
    DiffLine,
    Comparison,
)

from .normalizer import (
    normalize,
    canonical_label,
    markdown_to_plain_text,
)

from .verifier import (
    coverage,
    includes_keyword,
    keyword_variants,
)

from .prioritizer import (
    prioritize_keywords,
    select_must_include_skills,
    extract_min_years,
)

from .orchestrator import (
    RefinementOrchestrator,
    Rewriter,
    optimize,
    splice_skills_section,
)

from .diff_engine import (
    compare,
    render_html,
    get_changes_summary,
)

__all__ = [
    # Configuration
    "RefinementConfig",
    "MAX_PASSES",
    # Models
    "Document",
    "Section",
    "CoverageResult",
    "RefinementStage",
    "RefinementPass",
    "RefinementOutcome",
    "StopReason",
    "LineTag",
    "HighlightSpan",
    "DiffLine",
    "Comparison",
    # Normalizer
    "normalize",
    "canonical_label",
    "markdown_to_plain_text",
    # Verifier
    "coverage",
    "includes_keyword",
    "keyword_variants",
    # Prioritizer
    "prioritize_keywords",
    "select_must_include_skills",
    "extract_min_years",
    # Orchestrator
    "RefinementOrchestrator",
    "Rewriter",
    "optimize",
    "splice_skills_section",
    # Compare engine
    "compare",
    "render_html",
    "get_changes_summary",
]
