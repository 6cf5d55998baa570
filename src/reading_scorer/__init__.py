"""
reading_scorer package exports convenience helpers for library consumers.
"""

from __future__ import annotations

from .comparison import compare
from .config import ScoringConfig, config_from_dict, config_from_yaml, load_config
from .errors import InvalidInputError
from .estimators import build_estimator_from_config, create_estimator, estimate_difficulty
from .feedback import FeedbackGenerator, LLMFeedbackGenerator, StaticFeedbackGenerator
from .leveling import add_xp, calculate_xp, level_info
from .models import DifficultyTier
from .pipeline import score_challenge_attempt, score_learn_attempt
from .ranking import add_challenge_score, challenge_score, rank_info
from .speed import WpmCountingPolicy, words_per_minute
from .tokenization import normalize

__all__ = [
    "ScoringConfig",
    "config_from_dict",
    "config_from_yaml",
    "load_config",
    "InvalidInputError",
    "DifficultyTier",
    "WpmCountingPolicy",
    "normalize",
    "compare",
    "words_per_minute",
    "calculate_xp",
    "level_info",
    "add_xp",
    "challenge_score",
    "rank_info",
    "add_challenge_score",
    "estimate_difficulty",
    "create_estimator",
    "build_estimator_from_config",
    "FeedbackGenerator",
    "StaticFeedbackGenerator",
    "LLMFeedbackGenerator",
    "score_learn_attempt",
    "score_challenge_attempt",
]

__version__ = "0.1.0"
