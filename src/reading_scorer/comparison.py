from __future__ import annotations

from typing import List

from .errors import InvalidInputError
from .models import ComparisonResult, WordState
from .tokenization import normalize, tokenize_words


def compare(target_text: str, transcript: str) -> ComparisonResult:
    """
    Mark each target word correct when it appears anywhere in the transcript.
    Membership rather than positional alignment: reordered words still count,
    and omitted or repeated words are not penalised precisely.
    """
    target_tokens = tokenize_words(target_text)
    if not target_tokens:
        raise InvalidInputError("Target passage has no words to compare against.")

    spoken = set(normalize(transcript))
    states: List[WordState] = [
        WordState(word=token.text, is_correct=token.normalized in spoken, index=token.index)
        for token in target_tokens
    ]
    correct = sum(1 for state in states if state.is_correct)
    total = len(states)
    return ComparisonResult(
        word_states=states,
        correct_count=correct,
        total_count=total,
        accuracy_percent=round_half_up(100 * correct / total),
    )


def round_half_up(value: float) -> int:
    """Round a non-negative value to the nearest integer, halves going up."""
    return int(value + 0.5)
