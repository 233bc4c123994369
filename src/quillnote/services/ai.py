"""
AI Service

OpenAI integration for note summaries.
Supports mock mode for local development without API costs.
"""

import logging
import os
import re

from openai import AsyncOpenAI, OpenAIError

from quillnote.core.config import settings
from quillnote.core.exceptions import SummarizationFailed
from quillnote.schemas.notes import SummaryFormat

logger = logging.getLogger(__name__)

SUMMARY_PROMPTS: dict[SummaryFormat, str] = {
    SummaryFormat.EXECUTIVE: (
        "Please provide an executive summary of the following note content. "
        "Focus on the key points and main takeaways in a concise paragraph "
        "format:\n\n{content}"
    ),
    SummaryFormat.BULLET_POINTS: (
        "Please summarize the following note content as bullet points. "
        "Extract the main ideas and present them as a clear, organized "
        "list:\n\n{content}"
    ),
    SummaryFormat.ACTION_ITEMS: (
        "Please extract action items and next steps from the following note "
        "content. Focus on tasks, decisions, and actionable items:\n\n{content}"
    ),
}

_TAG_RE = re.compile(r"<[^>]+>")


def build_prompt(text: str, format_kind: SummaryFormat) -> str:
    """Render the provider prompt for a summary style."""
    return SUMMARY_PROMPTS[SummaryFormat(format_kind)].format(content=text)


def _mock_summary(text: str, format_kind: SummaryFormat) -> str:
    """Deterministic offline summary: the first words of the plain text."""
    plain = " ".join(_TAG_RE.sub(" ", text).split())
    preview = plain[:120] + ("..." if len(plain) > 120 else "")
    if format_kind == SummaryFormat.EXECUTIVE:
        return f"[mock] Summary: {preview}"
    return f"[mock] - {preview}"


async def summarize(text: str, format_kind: SummaryFormat) -> str:
    """
    Summarize note content in the requested style.

    Uses OpenAI chat completions in production.
    Falls back to a local mock when OPENAI_API_KEY is missing or set to 'mock'.

    Args:
        text: Persisted note content (formatted markup).
        format_kind: executive, bullet-points or action-items.

    Returns:
        Summary text as produced by the provider.

    Raises:
        SummarizationFailed: On any provider error. Not retried.
    """
    prompt = build_prompt(text, format_kind)
    api_key = os.getenv("OPENAI_API_KEY")

    # Mock mode: no API costs, no network dependency
    if not api_key or api_key.lower() == "mock":
        return _mock_summary(text, SummaryFormat(format_kind))

    client = AsyncOpenAI(api_key=api_key)
    try:
        response = await client.chat.completions.create(
            model=settings.SUMMARY_MODEL,
            messages=[{"role": "user", "content": prompt}],
        )
    except OpenAIError as e:
        logger.error("OpenAI summary error (format=%s): %s", format_kind, e)
        raise SummarizationFailed(detail=str(e)) from e

    content = response.choices[0].message.content or ""
    logger.info(
        "Summary generated (model=%s, format=%s, length=%d)",
        settings.SUMMARY_MODEL,
        SummaryFormat(format_kind).value,
        len(content),
    )
    return content
