"""Tests for the OpenRouter analysis client."""

import asyncio
from types import SimpleNamespace

import pytest

from calorie_tracker.adapters.openrouter_client import OpenRouterAnalysisClient
from calorie_tracker.services.analysis import AnalysisError


class _FakeCompletions:
    def __init__(self, content: str | None) -> None:
        self.content = content
        self.last_payload: dict[str, object] | None = None

    async def create(self, **kwargs):  # type: ignore[no-untyped-def]
        self.last_payload = kwargs
        if self.content is None:
            return SimpleNamespace(choices=[])
        message = SimpleNamespace(role="assistant", content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class _FakeOpenAI:
    def __init__(self, content: str | None) -> None:
        self.chat = SimpleNamespace(completions=_FakeCompletions(content))


def test_openrouter_client_sends_image_and_returns_text() -> None:
    fake = _FakeOpenAI('{"calories": 1}')
    client = OpenRouterAnalysisClient(client=fake)

    result = asyncio.run(
        client.complete(
            model="google/gemini-2.5-flash",
            prompt="Analyze",
            image_data_url="data:image/jpeg;base64,ZmFrZQ==",
            temperature=0,
        )
    )

    payload = fake.chat.completions.last_payload
    assert result == '{"calories": 1}'
    assert payload["temperature"] == 0
    content = payload["messages"][0]["content"]
    assert content[0] == {"type": "text", "text": "Analyze"}
    assert content[1]["image_url"]["url"].startswith("data:image/jpeg")


def test_openrouter_client_text_only_request() -> None:
    fake = _FakeOpenAI("ok")
    client = OpenRouterAnalysisClient(client=fake)

    asyncio.run(
        client.complete(model="m", prompt="Describe", image_data_url=None, temperature=0)
    )

    content = fake.chat.completions.last_payload["messages"][0]["content"]
    assert content == [{"type": "text", "text": "Describe"}]


@pytest.mark.parametrize("content", [None, ""])
def test_openrouter_client_rejects_empty_reply(content: str | None) -> None:
    client = OpenRouterAnalysisClient(client=_FakeOpenAI(content))

    with pytest.raises(AnalysisError):
        asyncio.run(
            client.complete(model="m", prompt="p", image_data_url=None, temperature=0)
        )


def test_create_sets_attribution_headers() -> None:
    client = OpenRouterAnalysisClient.create(
        "key", site_url="https://cal.test", app_title="Calorie Tracker"
    )

    headers = client.client.default_headers
    assert headers["HTTP-Referer"] == "https://cal.test"
    assert headers["X-Title"] == "Calorie Tracker"
    assert str(client.client.base_url).startswith("https://openrouter.ai/api/v1")
