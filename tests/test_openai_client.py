from __future__ import annotations

from typing import Any

import pytest

from reading_scorer.config import OpenAISettings
from reading_scorer.llm import openai_client as oa_client


class DummyResponse:
    def __init__(self, text: str | None) -> None:
        self.output_text = text


class ScriptedOpenAI:
    """Stands in for ``openai.OpenAI``; replays answers and records requests."""

    def __init__(self, answers: list[Any], **kwargs: Any) -> None:
        self.answers = list(answers)
        self.kwargs = kwargs
        self.requests: list[dict[str, Any]] = []
        self.responses = self

    def create(self, **kwargs: Any) -> DummyResponse:
        self.requests.append(kwargs)
        answer = self.answers.pop(0)
        if isinstance(answer, Exception):
            raise answer
        return DummyResponse(answer)


def build_client(answers: list[Any], settings: OpenAISettings | None = None):
    holder: dict[str, ScriptedOpenAI] = {}

    def factory(**kwargs: Any) -> ScriptedOpenAI:
        holder["sdk"] = ScriptedOpenAI(answers, **kwargs)
        return holder["sdk"]

    client = oa_client.OpenAIChatClient(
        settings or OpenAISettings(enabled=True), api_key="token", client_factory=factory
    )
    return client, holder["sdk"]


def test_client_requires_api_key():
    """Client constructor validates that an API key is provided."""
    with pytest.raises(ValueError):
        oa_client.OpenAIChatClient(
            OpenAISettings(enabled=True), api_key="", client_factory=ScriptedOpenAI
        )


def test_client_retries_then_succeeds(monkeypatch):
    """Client retries failed requests and returns the first successful output."""
    monkeypatch.setattr(oa_client.time, "sleep", lambda _: None)
    client, sdk = build_client([RuntimeError("transient error"), "  Seven  "])

    result = client.complete(
        system_prompt="system",
        user_prompt="Rate this",
        metadata=oa_client.RequestMetadata(purpose="difficulty"),
    )
    assert result == "Seven"
    assert len(sdk.requests) == 2


def test_blank_output_counts_as_a_failed_attempt(monkeypatch):
    monkeypatch.setattr(oa_client.time, "sleep", lambda _: None)
    client, sdk = build_client(["   ", None, "Keep going."])

    assert (
        client.complete(
            system_prompt="s",
            user_prompt="u",
            metadata=oa_client.RequestMetadata(purpose="feedback"),
        )
        == "Keep going."
    )
    assert len(sdk.requests) == 3


def test_client_gives_up_after_configured_attempts(monkeypatch):
    delays: list[float] = []
    monkeypatch.setattr(oa_client.time, "sleep", delays.append)
    settings = OpenAISettings(enabled=True, max_attempts=2)
    client, sdk = build_client([RuntimeError("down"), RuntimeError("still down")], settings)

    with pytest.raises(RuntimeError, match="after 2 attempts"):
        client.complete(
            system_prompt="s",
            user_prompt="u",
            metadata=oa_client.RequestMetadata(purpose="feedback"),
        )
    assert len(sdk.requests) == 2
    assert delays == [1]


@pytest.mark.parametrize("purpose", ["difficulty", "feedback", "passage"])
def test_request_uses_purpose_defaults(purpose):
    settings = OpenAISettings(enabled=True, model="test-model", base_url="http://proxy")
    client, sdk = build_client(["ok"], settings)
    client.complete(
        system_prompt="coach",
        user_prompt="u",
        metadata=oa_client.RequestMetadata(purpose=purpose),
    )

    request = sdk.requests[0]
    defaults = oa_client.PURPOSE_DEFAULTS[purpose]
    assert request["model"] == "test-model"
    assert request["instructions"] == "coach"
    assert request["temperature"] == defaults.temperature
    assert request["max_output_tokens"] == defaults.max_output_tokens
    assert sdk.kwargs == {
        "api_key": "token",
        "base_url": "http://proxy",
        "organization": None,
    }


def test_passages_sample_hotter_than_ratings():
    defaults = oa_client.PURPOSE_DEFAULTS
    assert defaults["passage"].temperature > defaults["difficulty"].temperature
    assert defaults["passage"].max_output_tokens > defaults["difficulty"].max_output_tokens


def test_unknown_purpose_is_rejected():
    client, sdk = build_client(["ok"])
    with pytest.raises(ValueError, match="purpose"):
        client.complete(
            system_prompt="s",
            user_prompt="u",
            metadata=oa_client.RequestMetadata(purpose="translation"),
        )
    assert sdk.requests == []
