"""
Pytest fixtures and configuration for Resume Refiner tests.
"""

from pathlib import Path
from typing import Callable, Optional

import pytest

from resume_refiner.llm_client import LLMClientError


class StubRewriter:
    """
    Scripted rewrite collaborator.

    Returns the queued responses in order; once they run out it echoes the
    text it was given. Call numbers listed in ``fail_on`` (1-based) raise
    LLMClientError instead.
    """

    def __init__(
        self,
        responses: Optional[list] = None,
        fail_on: Optional[set[int]] = None,
        on_call: Optional[Callable[[int], None]] = None,
    ):
        self.responses = list(responses or [])
        self.fail_on = set(fail_on or ())
        self.on_call = on_call
        self.calls: list[tuple[str, str, str]] = []

    async def __call__(self, current_text: str, instruction: str, job_context: str) -> str:
        self.calls.append((current_text, instruction, job_context))
        number = len(self.calls)

        if self.on_call is not None:
            self.on_call(number)
        if number in self.fail_on:
            raise LLMClientError(f"boom on call {number}")
        if self.responses:
            return self.responses.pop(0)
        return current_text

    @property
    def instructions(self) -> list[str]:
        return [call[1] for call in self.calls]


@pytest.fixture
def stub_rewriter() -> type:
    """The StubRewriter class, for building scripted collaborators."""
    return StubRewriter


@pytest.fixture
def sample_resume() -> str:
    """A generated draft with typical formatting artifacts."""
    return """# Jane Doe
Summary: Product manager with 8 years in B2B software.
## Experiences
- Managed a team of 5 to build the product.
- Ran weekly stakeholder reviews. ## skills
Python, SQL, Excel
## Education
BSc Computer Science"""


@pytest.fixture
def job_description() -> str:
    """Sample job description."""
    return (
        "Senior Product Manager, SaaS. Requires 5+ years of experience. "
        "You will own retention metrics, work with SQL and Python, "
        "and partner with engineering on Docker-based deployments."
    )


@pytest.fixture
def sample_keywords_csv(tmp_path: Path) -> Path:
    """Create a sample keywords CSV file."""
    csv_path = tmp_path / "keywords.csv"
    csv_path.write_text("keyword,priority\nSaaS,1\nretention,2\nPower BI,3\n")
    return csv_path


@pytest.fixture
def sample_keywords_excel(tmp_path: Path) -> Path:
    """Create a sample keywords Excel file."""
    import pandas as pd

    xlsx_path = tmp_path / "keywords.xlsx"
    df = pd.DataFrame({"Skill": ["Tableau", "SQL", "Stakeholder management"]})
    df.to_excel(xlsx_path, index=False)
    return xlsx_path
