from __future__ import annotations

import logging
import math
from typing import Dict

from .comparison import round_half_up
from .errors import InvalidInputError
from .models import RankInfo, RankTitle, RankUpdate

logger = logging.getLogger(__name__)

MIN_DIFFICULTY_RATING = 1
MAX_DIFFICULTY_RATING = 10

ACCURACY_POINTS = 40.0
WPM_POINTS = 30.0
WPM_FOR_FULL_POINTS = 150.0

MAX_RANK = 5

# Cumulative challenge score required to hold each rank.
RANK_THRESHOLDS: Dict[int, int] = {
    0: 0,
    1: 300,
    2: 800,
    3: 1600,
    4: 2800,
    5: 4500,
}

RANK_TITLES: Dict[int, RankTitle] = {
    0: RankTitle("Novice", "🌱", "#94a3b8"),
    1: RankTitle("Reader", "📖", "#60a5fa"),
    2: RankTitle("Scholar", "🎓", "#a78bfa"),
    3: RankTitle("Expert", "🏅", "#f59e0b"),
    4: RankTitle("Master", "💎", "#ec4899"),
    5: RankTitle("Legend", "👑", "#eab308"),
}

RANK_MESSAGES: Dict[int, str] = {
    0: "begin your challenge journey",
    1: "building challenge skills",
    2: "impressive progress",
    3: "exceptional performance",
    4: "mastering the challenges",
    5: "legendary champion",
}


def clamp_difficulty_rating(rating: float) -> int:
    """Round a possibly unreliable 1-10 rating and clamp it into range; NaN becomes the minimum."""
    if math.isnan(rating):
        clamped = MIN_DIFFICULTY_RATING
    else:
        clamped = round_half_up(
            min(max(rating, MIN_DIFFICULTY_RATING), MAX_DIFFICULTY_RATING)
        )
    if not MIN_DIFFICULTY_RATING <= rating <= MAX_DIFFICULTY_RATING:
        logger.warning(
            "Difficulty rating %s outside [%s, %s]; using %s",
            rating,
            MIN_DIFFICULTY_RATING,
            MAX_DIFFICULTY_RATING,
            clamped,
        )
    return clamped


def difficulty_multiplier(rating: int) -> float:
    """Scale from 0.65x at rating 1 to 2.0x at rating 10."""
    return 0.5 + (rating / 10) * 1.5


def challenge_score(difficulty_rating: float, wpm: float, accuracy_percent: float) -> int:
    """
    Composite score for one challenge attempt.

    Accuracy contributes up to 40 points and speed up to 30 (full marks at
    150 WPM); the sum is scaled by the passage difficulty multiplier. The
    result is not capped above, since it accumulates into the rank ladder.
    """
    if not 0 <= accuracy_percent <= 100:
        raise InvalidInputError(
            f"Accuracy must be within [0, 100], got {accuracy_percent}."
        )
    if not wpm >= 0:
        raise InvalidInputError(f"WPM must be a non-negative number, got {wpm}.")
    rating = clamp_difficulty_rating(difficulty_rating)
    accuracy_score = (accuracy_percent / 100) * ACCURACY_POINTS
    wpm_score = min((wpm / WPM_FOR_FULL_POINTS) * WPM_POINTS, WPM_POINTS)
    total = math.floor((accuracy_score + wpm_score) * difficulty_multiplier(rating))
    return max(0, total)


def rank_info(total_score: int) -> RankInfo:
    """Resolve the rank for a cumulative challenge score."""
    if total_score < 0:
        raise InvalidInputError(
            f"Total challenge score cannot be negative, got {total_score}."
        )
    rank = max(r for r, threshold in RANK_THRESHOLDS.items() if total_score >= threshold)
    next_rank = min(rank + 1, MAX_RANK)
    current_threshold = RANK_THRESHOLDS[rank]
    next_threshold = RANK_THRESHOLDS[next_rank]
    span = next_threshold - current_threshold
    progress = (total_score - current_threshold) / span if span > 0 else 1.0
    return RankInfo(
        rank=rank,
        next_rank=next_rank,
        score_to_next_rank=max(next_threshold - total_score, 0),
        progress_percent=min(max(progress, 0.0), 1.0),
        is_max_rank=rank == MAX_RANK,
        title=RANK_TITLES[rank],
        next_title=RANK_TITLES[next_rank],
    )


def add_challenge_score(current_total: int, earned: int) -> RankUpdate:
    """Apply an earned challenge score to a stored total and report rank changes."""
    if earned < 0:
        raise InvalidInputError(f"Earned score cannot be negative, got {earned}.")
    old_rank = rank_info(current_total).rank
    new_total = current_total + earned
    new_rank = rank_info(new_total).rank
    return RankUpdate(
        new_total_score=new_total,
        old_rank=old_rank,
        new_rank=new_rank,
        ranked_up=new_rank > old_rank,
        earned_score=earned,
    )


def rank_threshold(rank: int) -> int:
    return RANK_THRESHOLDS.get(rank, 0)


def rank_message(rank: int) -> str:
    return RANK_MESSAGES.get(rank, RANK_MESSAGES[0])
