"""
Keyword prioritization module.

This module ranks and selects keywords before they are embedded into a
rewrite instruction:
- Orders target keywords so hard-skill tools come first
- Deduplicates keywords case-insensitively
- Selects "must-include" skills present in both the resume and the job
- Extracts a minimum-years requirement from a job description
"""

import logging
import re
from typing import Iterable, Optional

from .verifier import includes_keyword, normalize_keyword

logger = logging.getLogger(__name__)


# Lower rank = higher priority; anything not listed ranks DEFAULT_PRIORITY
KEYWORD_PRIORITY = {
    "excel": 0,
    "microsoft excel": 0,
    "ms excel": 0,
    "power bi": 1,
    "tableau": 1,
    "sql": 1,
    "ms sql": 1,
    "python": 1,
    "google sheets": 2,
    "sheets": 2,
    "data analysis": 2,
    "data analytics": 2,
    "project management": 3,
    "stakeholder management": 3,
}

DEFAULT_PRIORITY = 10

# Length only breaks ties up to this many characters
MAX_LENGTH_SCORE = 50

# Tools worth carrying over when both the resume and the job mention them
SKILL_CANDIDATES = [
    "Excel",
    "Google Sheets",
    "Power BI",
    "Tableau",
    "SQL",
    "Python",
    "AWS",
    "Amazon Web Services",
    "Azure",
    "Microsoft Azure",
    "GCP",
    "Google Cloud Platform",
    "JavaScript",
    "TypeScript",
    "React",
    "Node",
    "Docker",
    "Kubernetes",
    "Git",
    "Jira",
    "Agile",
    "Scrum",
    "ETL",
    "CI/CD",
]

MAX_MUST_INCLUDE_SKILLS = 12

_MIN_YEARS_PATTERNS = [
    re.compile(r"\bminimum\s+of\s+(\d{1,2})\s*\+?\s*(?:years?|yrs?)\b", re.IGNORECASE),
    re.compile(r"\b(\d{1,2})\s*\+?\s*(?:years?|yrs?)\s+(?:of\s+)?experience\b", re.IGNORECASE),
    re.compile(r"\brequires?\s+(\d{1,2})\s*\+?\s*(?:years?|yrs?)\b", re.IGNORECASE),
]


def prioritize_keywords(keywords: Iterable[str]) -> list[str]:
    """
    Rank keywords for embedding into an instruction.

    Sort order: priority rank, then length (shorter first, capped), then
    input position. Blank entries are dropped and duplicates (after
    normalization, ignoring case) keep their best-ranked occurrence.

    Args:
        keywords: Raw keyword list.

    Returns:
        Ranked, deduplicated keywords (original spelling, trimmed).
    """
    scored = []
    for idx, keyword in enumerate(keywords or []):
        if not keyword:
            continue
        phrase = str(keyword).strip()
        norm = normalize_keyword(phrase).lower()
        if not norm:
            continue
        priority = KEYWORD_PRIORITY.get(norm, DEFAULT_PRIORITY)
        scored.append((priority, min(MAX_LENGTH_SCORE, len(norm)), idx, phrase, norm))

    scored.sort(key=lambda item: item[:3])

    seen: set[str] = set()
    ranked: list[str] = []
    for _, _, _, phrase, norm in scored:
        if norm in seen:
            continue
        seen.add(norm)
        ranked.append(phrase)

    return ranked


def select_must_include_skills(
    resume_text: str,
    job_description: str,
    candidates: Optional[list[str]] = None,
    limit: int = MAX_MUST_INCLUDE_SKILLS,
) -> list[str]:
    """
    Select skills the optimized resume must keep.

    A candidate qualifies when it appears in both the original resume and
    the job description. These are skills the candidate demonstrably has
    and the employer asks for, so dropping them is never acceptable.

    Args:
        resume_text: Original resume text.
        job_description: Job description text.
        candidates: Candidate skill names (defaults to SKILL_CANDIDATES).
        limit: Maximum number of skills returned.

    Returns:
        Qualifying skills in candidate order.
    """
    selected: list[str] = []
    seen: set[str] = set()

    for skill in candidates if candidates is not None else SKILL_CANDIDATES:
        key = skill.lower()
        if key in seen:
            continue
        if not includes_keyword(job_description, skill):
            continue
        if not includes_keyword(resume_text, skill):
            continue
        seen.add(key)
        selected.append(skill)

    logger.debug("Must-include skills: %s", selected[:limit])
    return selected[:limit]


def extract_min_years(job_description: str) -> Optional[int]:
    """
    Extract a minimum years-of-experience requirement.

    Args:
        job_description: Job description text.

    Returns:
        Number of years (1-49) or None if no requirement is stated.
    """
    text = re.sub(r"\s+", " ", job_description or "").strip()
    if not text:
        return None

    for pattern in _MIN_YEARS_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        years = int(match.group(1))
        if 0 < years < 50:
            return years

    return None
