from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .errors import InvalidInputError


class DifficultyTier(str, Enum):
    """Coarse passage difficulty used for generation parameters and base XP."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @classmethod
    def parse(cls, value: "DifficultyTier | str") -> "DifficultyTier":
        """Accept a tier or its case-insensitive name."""
        if isinstance(value, DifficultyTier):
            return value
        normalized = str(value).lower().strip()
        for tier in cls:
            if tier.value == normalized:
                return tier
        raise InvalidInputError(f"Unknown difficulty tier '{value}'.")


@dataclass(slots=True, frozen=True)
class WordToken:
    """A whitespace-delimited word with its comparable form."""

    text: str
    normalized: str
    index: int


@dataclass(slots=True)
class WordState:
    """Whether a single target word was heard in the transcript."""

    word: str
    is_correct: bool
    index: int


@dataclass(slots=True)
class ComparisonResult:
    """Per-word correctness plus the aggregate accuracy for one attempt."""

    word_states: list[WordState]
    correct_count: int
    total_count: int
    accuracy_percent: int

    @property
    def incorrect_words(self) -> list[str]:
        return [state.word for state in self.word_states if not state.is_correct]


@dataclass(slots=True)
class LevelInfo:
    """Level and in-level progress derived from a total XP value."""

    level: int
    current_level_xp: int
    next_level_xp: int
    xp_to_next_level: int
    progress_percent: float


@dataclass(slots=True)
class LevelUpdate:
    new_total_xp: int
    old_level: int
    new_level: int
    leveled_up: bool


@dataclass(slots=True)
class LevelRewards:
    """Features unlocked at a given level."""

    challenge_mode_unlocked: bool
    hard_difficulty_unlocked: bool
    custom_passages_unlocked: bool


@dataclass(slots=True, frozen=True)
class RankTitle:
    name: str
    emoji: str
    color: str


@dataclass(slots=True)
class RankInfo:
    """Rank and in-rank progress derived from a cumulative challenge score."""

    rank: int
    next_rank: int
    score_to_next_rank: int
    progress_percent: float
    is_max_rank: bool
    title: RankTitle
    next_title: RankTitle


@dataclass(slots=True)
class RankUpdate:
    new_total_score: int
    old_rank: int
    new_rank: int
    ranked_up: bool
    earned_score: int


@dataclass(slots=True)
class ChallengeAttempt:
    """Inputs to the composite challenge score for one timed reading."""

    difficulty_rating: int
    wpm: float
    accuracy_percent: int


@dataclass(slots=True)
class LearnAttemptResult:
    """Everything a Learn-mode caller needs to render and persist an attempt."""

    comparison: ComparisonResult
    tier: DifficultyTier
    earned_xp: int
    level_update: LevelUpdate
    wpm: int | None = None
    feedback: str = ""


@dataclass(slots=True)
class ChallengeAttemptResult:
    """Everything a Challenge-mode caller needs to render and persist an attempt."""

    comparison: ComparisonResult
    attempt: ChallengeAttempt
    challenge_score: int
    rank_update: RankUpdate
    feedback: str = ""


@dataclass(slots=True)
class Passage:
    """A reading passage, usually produced by the passage generator."""

    passage_id: str
    text: str
    difficulty: DifficultyTier
    estimated_seconds: int
    generated_at: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)
