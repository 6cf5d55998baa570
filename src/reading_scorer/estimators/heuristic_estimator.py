from __future__ import annotations

import re

from .base import DifficultyEstimator

SENTENCE_END_RE = re.compile(r"[.!?]+")


def estimate_difficulty(text: str) -> int:
    """
    Rate difficulty from word length, sentence length and passage length.
    Never raises; empty input rates 1.
    """
    words = text.split()
    if not words:
        return 1

    avg_word_length = sum(len(word) for word in words) / len(words)
    sentence_count = len(SENTENCE_END_RE.findall(text))
    avg_words_per_sentence = len(words) / max(sentence_count, 1)

    difficulty = 1
    if avg_word_length > 6:
        difficulty += 2
    elif avg_word_length > 5:
        difficulty += 1

    if avg_words_per_sentence > 20:
        difficulty += 3
    elif avg_words_per_sentence > 15:
        difficulty += 2
    elif avg_words_per_sentence > 10:
        difficulty += 1

    if len(words) > 80:
        difficulty += 2
    elif len(words) > 50:
        difficulty += 1

    return min(max(difficulty, 1), 10)


class HeuristicDifficultyEstimator(DifficultyEstimator):
    """
    Lexical heuristic used when no external difficulty rating is available.
    Keeps challenge scoring runnable without an LLM.
    """

    def predict_rating(self, text: str) -> int:
        return estimate_difficulty(text)
