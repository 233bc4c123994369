"""
AI Service Unit Tests

Tests for the summary service with mocked OpenAI client.
No external API calls - runs without network or API keys.
"""

from unittest.mock import AsyncMock, patch

import httpx
import openai
import pytest

from quillnote.core.exceptions import SummarizationFailed
from quillnote.schemas.notes import SummaryFormat
from quillnote.services.ai import build_prompt, summarize


def _chat_response(text: str):
    """Object shaped like an OpenAI chat completion."""
    message = type("Message", (), {"content": text})
    choice = type("Choice", (), {"message": message})
    return type("Response", (), {"choices": [choice]})


@pytest.mark.asyncio
async def test_summarize_calls_openai():
    """Uses the configured model and the format-specific prompt."""
    with patch("quillnote.services.ai.AsyncOpenAI") as MockClient:
        mock_instance = MockClient.return_value
        mock_instance.chat.completions.create = AsyncMock(
            return_value=_chat_response("- buy milk")
        )

        with patch.dict("os.environ", {"OPENAI_API_KEY": "sk-test"}):
            result = await summarize("<p>milk, eggs</p>", SummaryFormat.BULLET_POINTS)

    assert result == "- buy milk"
    mock_instance.chat.completions.create.assert_called_once()
    _, kwargs = mock_instance.chat.completions.create.call_args
    prompt = kwargs["messages"][0]["content"]
    assert "bullet points" in prompt
    assert prompt.endswith("<p>milk, eggs</p>")


@pytest.mark.asyncio
async def test_summarize_provider_error_raises_summarization_failed():
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    with patch("quillnote.services.ai.AsyncOpenAI") as MockClient:
        MockClient.return_value.chat.completions.create = AsyncMock(
            side_effect=openai.APIConnectionError(request=request)
        )
        with patch.dict("os.environ", {"OPENAI_API_KEY": "sk-test"}):
            with pytest.raises(SummarizationFailed):
                await summarize("some text", SummaryFormat.EXECUTIVE)


@pytest.mark.asyncio
async def test_summarize_mock_mode_needs_no_network():
    with patch("quillnote.services.ai.AsyncOpenAI") as MockClient:
        with patch.dict("os.environ", {"OPENAI_API_KEY": "mock"}):
            result = await summarize("<h1>Plan</h1><p>Ship it</p>", "action-items")

    MockClient.assert_not_called()
    assert result.startswith("[mock]")
    assert "Plan Ship it" in result


def test_prompts_differ_per_format():
    prompts = {build_prompt("x", fmt) for fmt in SummaryFormat}
    assert len(prompts) == 3
    assert "action items" in build_prompt("x", SummaryFormat.ACTION_ITEMS)
    assert "executive summary" in build_prompt("x", SummaryFormat.EXECUTIVE)
