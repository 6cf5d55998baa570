from __future__ import annotations

import logging
import re

from ..llm.openai_client import OpenAIChatClient, RequestMetadata
from ..ranking import clamp_difficulty_rating
from .base import DifficultyEstimator
from .heuristic_estimator import HeuristicDifficultyEstimator

logger = logging.getLogger(__name__)

RATING_RE = re.compile(r"\d+")

SYSTEM_PROMPT = (
    "You rate how hard an English passage is to read aloud for a young reader.\n"
    "Consider vocabulary, sentence length and sentence structure.\n"
    "Answer with a single integer from 1 (very easy) to 10 (very hard) and nothing else."
)

USER_PROMPT_TEMPLATE = (
    "Rate the difficulty of this passage:\n"
    "-----\n"
    "{text}\n"
    "-----\n"
    "Return only the integer rating."
)


class LLMDifficultyEstimator(DifficultyEstimator):
    """Ask the LLM for a rating, deferring to a fallback estimator when that fails."""

    def __init__(
        self,
        client: OpenAIChatClient,
        *,
        fallback: DifficultyEstimator | None = None,
        system_prompt: str = SYSTEM_PROMPT,
        user_prompt_template: str = USER_PROMPT_TEMPLATE,
    ) -> None:
        self._client = client
        self._fallback = fallback or HeuristicDifficultyEstimator()
        self._system_prompt = system_prompt
        self._user_prompt_template = user_prompt_template

    def predict_rating(self, text: str) -> int:
        metadata = RequestMetadata(
            purpose="difficulty", subject=None, word_count=len(text.split())
        )
        try:
            answer = self._client.complete(
                system_prompt=self._system_prompt,
                user_prompt=self._user_prompt_template.format(text=text.strip()),
                metadata=metadata,
            )
        except RuntimeError as exc:
            logger.warning("Difficulty rating unavailable, using fallback: %s", exc)
            return self._fallback.predict_rating(text)

        match = RATING_RE.search(answer)
        if match is None:
            logger.warning(
                "Could not parse difficulty rating from %r, using fallback", answer
            )
            return self._fallback.predict_rating(text)
        return clamp_difficulty_rating(int(match.group()))
