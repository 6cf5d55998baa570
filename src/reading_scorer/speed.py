from __future__ import annotations

from enum import Enum

from .comparison import round_half_up
from .errors import InvalidInputError
from .models import ComparisonResult
from .tokenization import normalize


class WpmCountingPolicy(str, Enum):
    """Which words count towards reading speed."""

    ALL_WORDS = "all_words"
    CORRECT_WORDS = "correct_words"


def words_per_minute(spoken_word_count: int, elapsed_seconds: float) -> int:
    """Return reading speed in whole words per minute."""
    if spoken_word_count < 0:
        raise InvalidInputError("Spoken word count cannot be negative.")
    if elapsed_seconds <= 0:
        raise InvalidInputError(
            f"Elapsed time must be positive, got {elapsed_seconds} seconds."
        )
    return round_half_up(spoken_word_count / (elapsed_seconds / 60))


def count_spoken_words(
    comparison: ComparisonResult,
    transcript: str,
    policy: WpmCountingPolicy | str = WpmCountingPolicy.ALL_WORDS,
) -> int:
    """Count the words that feed words_per_minute under the given policy."""
    policy = WpmCountingPolicy(policy)
    if policy is WpmCountingPolicy.CORRECT_WORDS:
        return comparison.correct_count
    return len(normalize(transcript))
