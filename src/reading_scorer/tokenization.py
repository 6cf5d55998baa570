from __future__ import annotations

import re
from typing import List

from .models import WordToken

PUNCTUATION_RE = re.compile(r"[.,!?;:]")
WHITESPACE_RE = re.compile(r"\s+")


def normalize(text: str) -> List[str]:
    """Lower-case text, strip sentence punctuation and split into words."""
    stripped = PUNCTUATION_RE.sub("", text.lower())
    return [word for word in WHITESPACE_RE.split(stripped) if word]


def display_words(text: str) -> List[str]:
    """Split text on whitespace, keeping original casing and punctuation."""
    return [word for word in WHITESPACE_RE.split(text) if word]


def tokenize_words(text: str) -> List[WordToken]:
    """
    Pair each displayed word with its normalized form.
    Words that normalize to nothing (a free-standing "..." for instance) are
    skipped so token indices line up with normalize(text).
    """
    tokens: List[WordToken] = []
    for raw in display_words(text):
        parts = normalize(raw)
        if not parts:
            continue
        tokens.append(WordToken(text=raw, normalized=parts[0], index=len(tokens)))
    return tokens
