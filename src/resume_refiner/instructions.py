"""
Instruction payloads for each refinement pass.

Each builder returns the plain-text instruction handed to the rewrite
collaborator together with the current document and the job context.
"""

from typing import Optional, Sequence


SECTION_HEADINGS_LINE = (
    "Keep headings as: ## SUMMARY, ## EXPERIENCE, ## SKILLS, ## EDUCATION."
)

HARD_CONSTRAINTS = (
    "Do not add new claims. Do not change employers, titles, or dates. "
    "Do not remove any existing skills, tools, or technologies from the "
    "ORIGINAL resume. Avoid keyword stuffing."
)

BOOST_PROMPT = """You are a senior recruiter and ATS optimization expert.

OBJECTIVE:
Optimize the resume to match the job description while keeping every statement truthful and ATS-readable.

STRICT RULES:
1. Do NOT invent companies, tools, metrics, or experience
2. Do NOT exaggerate numbers or responsibilities
3. Use ONLY information already present in the resume
4. If a job skill is missing, reframe adjacent experience instead of fabricating it
5. Keep formatting plain: no tables, icons, or graphics

PROCESS:
- Rewrite the summary to mirror the role title and seniority (3-4 lines)
- Rewrite experience bullets to lead with outcomes and action verbs
- Keep skills that are present in the resume or strongly implied by it

OUTPUT FORMAT:
- Return ONLY the optimized resume in markdown
- Use the headings ## SUMMARY, ## EXPERIENCE, ## SKILLS, ## EDUCATION
- No explanations, analysis, or commentary"""


def _join(keywords: Sequence[str]) -> str:
    return ", ".join(keywords)


def build_boost_instruction(
    keywords: Sequence[str],
    must_include: Sequence[str] = (),
    min_years: Optional[int] = None,
) -> str:
    """
    Build the instruction for the mandatory boosting pass.

    Args:
        keywords: Prioritized, truncated target keywords.
        must_include: Skills present in both the resume and the job.
        min_years: Minimum years of experience stated by the job, if any.

    Returns:
        Instruction text.
    """
    parts = [BOOST_PROMPT]

    if keywords:
        parts.append(
            "Strategically incorporate these missing keywords where truthful "
            f"and natural: {_join(keywords)}."
        )
    if must_include:
        parts.append(
            "Ensure these skills/tools (already present in the ORIGINAL resume "
            "and mentioned in the job description) appear in the final resume, "
            f"preferably in ## SKILLS: {_join(must_include)}."
        )
    if min_years:
        parts.append(
            f"The job description asks for a minimum of {min_years}+ years of "
            "experience. If (and only if) the ORIGINAL resume dates support it, "
            f'state "{min_years}+ years" in the SUMMARY. Otherwise omit it.'
        )

    parts.append(
        "Lead bullets with outcomes and action verbs, and keep headings and "
        "bullets consistent."
    )
    parts.append(HARD_CONSTRAINTS)

    return "\n".join(parts)


def build_follow_up_instruction(missing: Sequence[str]) -> str:
    """Build the instruction for the single follow-up pass."""
    return "\n".join([
        "Second pass ATS keyword injection.",
        f"Remaining missing keywords: {_join(missing)}.",
        "Add them ONLY where they plausibly match existing experience or skills. "
        "Prefer Skills/Tools lists and existing bullets over new work entries.",
        HARD_CONSTRAINTS,
        f"Return ONLY the resume. {SECTION_HEADINGS_LINE}",
    ])


def build_skill_backfill_instruction(missing_skills: Sequence[str], section_only: bool) -> str:
    """
    Build the instruction for the skills backfill pass.

    Args:
        missing_skills: Must-include skills still absent.
        section_only: True when only the skills section body is sent.

    Returns:
        Instruction text.
    """
    lines = [
        "Final pass: ensure key skills from the ORIGINAL resume that the job asks for are present.",
        f"Missing (present in resume and job description): {_join(missing_skills)}.",
    ]
    if section_only:
        lines.append(
            "The text you receive is the body of the ## SKILLS section only. "
            "Add the missing skills to it without removing any existing entry. "
            "Return ONLY the updated section body, without a heading."
        )
    else:
        lines.append(
            "Add a ## SKILLS section listing these skills. Do not change any "
            f"other section. Return ONLY the resume. {SECTION_HEADINGS_LINE}"
        )
    lines.append("Do not invent any new claims.")
    return "\n".join(lines)
