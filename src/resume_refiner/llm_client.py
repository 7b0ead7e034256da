"""
LLM client for resume rewriting.

This module provides the bundled implementation of the rewrite
collaborator: an async callable that sends the current resume, a pass
instruction and the job context to Claude (Anthropic) and returns the
rewritten markdown.
"""

import logging
import os
import re
from typing import Optional

import anthropic
import httpx

logger = logging.getLogger(__name__)


class LLMClientError(Exception):
    """Raised when LLM operations fail."""
    pass


DEFAULT_MODEL = "claude-sonnet-4-20250514"

# Job descriptions beyond this length are truncated in the prompt
DEFAULT_CONTEXT_CHAR_LIMIT = 6000


REWRITE_SYSTEM_PROMPT = """You are a professional resume editor working on ATS-friendly resumes.

CRITICAL RULES - MUST FOLLOW:
1. Follow the USER INSTRUCTION exactly
2. Never invent employers, titles, dates, tools, metrics, or achievements
3. Never delete skills, tools, or technologies that are already in the resume
4. Keep sentences natural and readable - avoid keyword stuffing

OUTPUT FORMAT:
- Return ONLY the updated document in markdown
- Do NOT wrap it in code fences
- Do NOT include any explanation or commentary"""


_FENCE_RE = re.compile(r"^```[\w-]*[ \t]*\n(.*?)\n?```$", re.DOTALL)


def clean_model_output(text: Optional[str]) -> str:
    """
    Strip wrappers the model adds around its answer.

    Args:
        text: Raw model output.

    Returns:
        The document text without surrounding code fences or whitespace.
    """
    result = (text or "").strip()
    match = _FENCE_RE.match(result)
    if match:
        result = match.group(1)
    return result.strip()


def build_rewrite_prompt(
    current_text: str,
    instruction: str,
    job_context: str,
    context_char_limit: int = DEFAULT_CONTEXT_CHAR_LIMIT,
) -> str:
    """
    Build the user prompt for one rewrite call.

    Args:
        current_text: Current document text.
        instruction: Pass instruction.
        job_context: Job description or other job context.
        context_char_limit: Maximum characters of job context included.

    Returns:
        Prompt text.
    """
    context = (job_context or "").strip()
    if len(context) > context_char_limit:
        context = context[:context_char_limit].rstrip() + "..."

    return f"""USER INSTRUCTION:
{instruction.strip()}

JOB DESCRIPTION:
{context or "None provided"}

CURRENT DOCUMENT:
{current_text}

Rewrite the CURRENT DOCUMENT to satisfy the USER INSTRUCTION. Output ONLY the updated document."""


class AnthropicRewriter:
    """
    Rewrite collaborator backed by the Anthropic Messages API.

    Instances are awaitable callables with the signature
    ``rewrite(current_text, instruction, job_context) -> str`` and can be
    passed straight to the refinement orchestrator.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        max_tokens: int = 4096,
        context_char_limit: int = DEFAULT_CONTEXT_CHAR_LIMIT,
        client: Optional["anthropic.AsyncAnthropic"] = None,
    ):
        """
        Initialize the rewriter.

        Args:
            api_key: API key. If None, reads from ANTHROPIC_API_KEY env var.
            model: Model identifier to use.
            max_tokens: Maximum tokens in each response.
            context_char_limit: Maximum characters of job context per prompt.
            client: Pre-configured async client (skips key lookup).
        """
        self.model = model
        self.max_tokens = max_tokens
        self.context_char_limit = context_char_limit

        if client is not None:
            self.client = client
            return

        api_key = api_key or os.environ.get("ANTHROPIC_API_KEY")
        if not api_key:
            raise LLMClientError(
                "No API key provided. Set ANTHROPIC_API_KEY environment variable "
                "or pass api_key parameter."
            )

        http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(60.0, connect=30.0),
            follow_redirects=True,
        )
        self.client = anthropic.AsyncAnthropic(
            api_key=api_key,
            http_client=http_client,
        )

    async def rewrite(self, current_text: str, instruction: str, job_context: str) -> str:
        """
        Rewrite a document according to an instruction.

        Args:
            current_text: Current document text.
            instruction: Pass instruction.
            job_context: Job description.

        Returns:
            Rewritten markdown (unvalidated).

        Raises:
            LLMClientError: If the API call fails or returns no text.
        """
        prompt = build_rewrite_prompt(
            current_text, instruction, job_context, self.context_char_limit
        )

        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                system=REWRITE_SYSTEM_PROMPT,
                messages=[{"role": "user", "content": prompt}],
            )
        except Exception as e:
            raise LLMClientError(f"LLM API call failed: {e}") from e

        if not response.content:
            raise LLMClientError("LLM API returned an empty response")

        text = clean_model_output(response.content[0].text)
        logger.debug("Rewrite returned %d characters", len(text))
        return text

    async def __call__(self, current_text: str, instruction: str, job_context: str) -> str:
        return await self.rewrite(current_text, instruction, job_context)

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.close()


def create_rewriter(
    api_key: Optional[str] = None,
    model: str = DEFAULT_MODEL,
) -> AnthropicRewriter:
    """
    Factory function to create the default rewriter.

    Args:
        api_key: API key (optional, can use env var).
        model: Model identifier.

    Returns:
        Configured AnthropicRewriter.
    """
    return AnthropicRewriter(api_key=api_key, model=model)
