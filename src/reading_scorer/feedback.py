from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Sequence

from .llm.openai_client import OpenAIChatClient, RequestMetadata

logger = logging.getLogger(__name__)

LEARN_FALLBACK = (
    "Great effort! Keep practicing those tricky words and you'll improve even more."
)
CHALLENGE_FALLBACK = (
    "Good job! Practice reading smoothly while maintaining accuracy for even better results."
)

SYSTEM_PROMPT = (
    "You are a supportive reading coach for children.\n"
    "Provide exactly 2 simple sentences of encouraging feedback.\n"
    "Use plain text only: no formatting, no asterisks, no special characters.\n"
    "Be friendly and specific."
)

LEARN_PROMPT_TEMPLATE = (
    "A student just completed a reading exercise with {accuracy}% accuracy. "
    "They had trouble with these words: {words}.\n"
    "Give feedback that helps them improve."
)

CHALLENGE_PROMPT_TEMPLATE = (
    "A student completed a timed reading challenge with {accuracy}% accuracy "
    "and {wpm} words per minute. They struggled with: {words}.\n"
    "Give feedback about their speed and accuracy."
)


def _format_words(words: Sequence[str]) -> str:
    return ", ".join(words) if words else "none"


class FeedbackGenerator(ABC):
    """Produces short encouragement after an attempt."""

    @abstractmethod
    def learn_feedback(self, accuracy: int, incorrect_words: Sequence[str]) -> str:
        raise NotImplementedError

    @abstractmethod
    def challenge_feedback(
        self, accuracy: int, wpm: int, incorrect_words: Sequence[str]
    ) -> str:
        raise NotImplementedError


class StaticFeedbackGenerator(FeedbackGenerator):
    """Returns the fixed encouragement messages."""

    def learn_feedback(self, accuracy: int, incorrect_words: Sequence[str]) -> str:
        return LEARN_FALLBACK

    def challenge_feedback(
        self, accuracy: int, wpm: int, incorrect_words: Sequence[str]
    ) -> str:
        return CHALLENGE_FALLBACK


class LLMFeedbackGenerator(FeedbackGenerator):
    """Feedback written by the LLM; falls back to the static messages on failure."""

    def __init__(
        self,
        client: OpenAIChatClient,
        *,
        fallback: FeedbackGenerator | None = None,
    ) -> None:
        self._client = client
        self._fallback = fallback or StaticFeedbackGenerator()

    def learn_feedback(self, accuracy: int, incorrect_words: Sequence[str]) -> str:
        prompt = LEARN_PROMPT_TEMPLATE.format(
            accuracy=accuracy, words=_format_words(incorrect_words)
        )
        try:
            return self._ask(prompt, "learn")
        except RuntimeError as exc:
            logger.warning("Learn feedback unavailable, using fallback: %s", exc)
            return self._fallback.learn_feedback(accuracy, incorrect_words)

    def challenge_feedback(
        self, accuracy: int, wpm: int, incorrect_words: Sequence[str]
    ) -> str:
        prompt = CHALLENGE_PROMPT_TEMPLATE.format(
            accuracy=accuracy, wpm=wpm, words=_format_words(incorrect_words)
        )
        try:
            return self._ask(prompt, "challenge")
        except RuntimeError as exc:
            logger.warning("Challenge feedback unavailable, using fallback: %s", exc)
            return self._fallback.challenge_feedback(accuracy, wpm, incorrect_words)

    def _ask(self, prompt: str, mode: str) -> str:
        logger.info("Requesting %s feedback", mode)
        return self._client.complete(
            system_prompt=SYSTEM_PROMPT,
            user_prompt=prompt,
            metadata=RequestMetadata(purpose="feedback", subject=mode),
        ).strip()
