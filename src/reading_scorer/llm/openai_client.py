from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict

from ..config import OpenAISettings

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class PurposeDefaults:
    """Sampling settings for one kind of request."""

    temperature: float
    max_output_tokens: int


# Ratings want a terse deterministic answer; passages want variety.
PURPOSE_DEFAULTS: Dict[str, PurposeDefaults] = {
    "difficulty": PurposeDefaults(temperature=0.0, max_output_tokens=16),
    "feedback": PurposeDefaults(temperature=0.7, max_output_tokens=150),
    "passage": PurposeDefaults(temperature=1.0, max_output_tokens=300),
}


@dataclass(slots=True)
class RequestMetadata:
    """What a completion is for; selects sampling defaults and labels log lines."""

    purpose: str
    subject: str | None = None
    word_count: int | None = None

    @property
    def defaults(self) -> PurposeDefaults:
        try:
            return PURPOSE_DEFAULTS[self.purpose]
        except KeyError as exc:
            raise ValueError(
                f"Unknown request purpose '{self.purpose}'. "
                f"Expected one of: {', '.join(PURPOSE_DEFAULTS)}."
            ) from exc


class OpenAIChatClient:
    """Sends difficulty, feedback and passage prompts to the OpenAI Responses API."""

    def __init__(
        self,
        settings: OpenAISettings,
        api_key: str,
        *,
        client_factory: Callable[..., Any] | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("OpenAI API key is required when the LLM is enabled.")
        self._settings = settings
        factory = client_factory or _import_openai_class()
        self._client = factory(
            api_key=api_key,
            base_url=settings.base_url,
            organization=settings.organization,
        )

    @property
    def settings(self) -> OpenAISettings:
        return self._settings

    def complete(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        metadata: RequestMetadata,
    ) -> str:
        """Return the model's text, retrying up to ``settings.max_attempts`` times."""
        defaults = metadata.defaults
        attempts = max(1, self._settings.max_attempts)
        last_error: Exception | None = None
        for attempt in range(1, attempts + 1):
            try:
                response = self._client.responses.create(
                    model=self._settings.model,
                    instructions=system_prompt,
                    input=user_prompt,
                    temperature=defaults.temperature,
                    max_output_tokens=defaults.max_output_tokens,
                    timeout=self._settings.request_timeout,
                )
                text = _response_text(response)
            except Exception as exc:  # openai raises several unrelated error types
                last_error = exc
                logger.warning(
                    "OpenAI %s request for %s failed (attempt %s/%s): %s",
                    metadata.purpose,
                    metadata.subject,
                    attempt,
                    attempts,
                    exc,
                )
                if attempt < attempts:
                    time.sleep(min(2 ** (attempt - 1), 5))
                continue
            logger.debug(
                "OpenAI %s request for %s succeeded (%s words in)",
                metadata.purpose,
                metadata.subject,
                metadata.word_count,
            )
            return text
        raise RuntimeError(
            f"OpenAI {metadata.purpose} request failed after {attempts} attempts."
        ) from last_error


def _response_text(response: Any) -> str:
    text = getattr(response, "output_text", None)
    if not isinstance(text, str) or not text.strip():
        raise RuntimeError("OpenAI response contained no text output.")
    return text.strip()


def _import_openai_class() -> Callable[..., Any]:
    try:
        from openai import OpenAI
    except ImportError as exc:
        raise RuntimeError(
            "openai package is not installed. Install extras via 'pip install .[llm-openai]'."
        ) from exc
    return OpenAI
