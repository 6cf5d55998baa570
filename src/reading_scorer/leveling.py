from __future__ import annotations

import math
from typing import Dict

from .errors import InvalidInputError
from .models import DifficultyTier, LevelInfo, LevelRewards, LevelUpdate

# XP awarded at 100% accuracy.
BASE_XP: Dict[DifficultyTier, int] = {
    DifficultyTier.EASY: 10,
    DifficultyTier.MEDIUM: 25,
    DifficultyTier.HARD: 50,
}

MIN_ACCURACY_MULTIPLIER = 0.2
MAX_LEVEL_TABLE = 100
LEVEL_XP_BASE = 100

LEVEL_TITLES = [
    (5, "🌱 Just Getting Started"),
    (10, "📚 Building Momentum"),
    (15, "🔥 On Fire!"),
    (20, "⭐ Rising Star"),
    (30, "💎 Dedicated Reader"),
    (50, "🏆 Reading Champion"),
]
MASTER_TITLE = "👑 Master Reader"


def _xp_for_level(level: int) -> int:
    return math.floor(LEVEL_XP_BASE * level**1.5)


# XP needed to advance from level n to n + 1.
XP_REQUIREMENTS: Dict[int, int] = {
    level: _xp_for_level(level) for level in range(1, MAX_LEVEL_TABLE + 1)
}


def calculate_xp(tier: DifficultyTier | str, accuracy_percent: float) -> int:
    """
    Award XP for one Learn-mode attempt.
    Accuracy scales the tier's base XP, never below 20% of it.
    """
    if not 0 <= accuracy_percent <= 100:
        raise InvalidInputError(
            f"Accuracy must be within [0, 100], got {accuracy_percent}."
        )
    base = BASE_XP[DifficultyTier.parse(tier)]
    multiplier = max(accuracy_percent / 100, MIN_ACCURACY_MULTIPLIER)
    return math.floor(base * multiplier)


def level_info(total_xp: int) -> LevelInfo:
    """Resolve the level for a total XP value and the progress inside it."""
    if total_xp < 0:
        raise InvalidInputError(f"Total XP cannot be negative, got {total_xp}.")

    level = 1
    consumed = 0
    for threshold_level in range(1, MAX_LEVEL_TABLE + 1):
        threshold = XP_REQUIREMENTS[threshold_level]
        if total_xp < consumed + threshold:
            break
        consumed += threshold
        level = threshold_level + 1

    current_level_xp = total_xp - consumed
    next_level_xp = XP_REQUIREMENTS.get(level, 0)
    progress = current_level_xp / next_level_xp if next_level_xp > 0 else 1.0
    return LevelInfo(
        level=level,
        current_level_xp=current_level_xp,
        next_level_xp=next_level_xp,
        xp_to_next_level=max(next_level_xp - current_level_xp, 0),
        progress_percent=min(progress, 1.0),
    )


def add_xp(current_total_xp: int, earned_xp: int) -> LevelUpdate:
    """Apply earned XP to a stored total and report any level change."""
    if earned_xp < 0:
        raise InvalidInputError(f"Earned XP cannot be negative, got {earned_xp}.")
    old_level = level_info(current_total_xp).level
    new_total = current_total_xp + earned_xp
    new_level = level_info(new_total).level
    return LevelUpdate(
        new_total_xp=new_total,
        old_level=old_level,
        new_level=new_level,
        leveled_up=new_level > old_level,
    )


def xp_requirement(level: int) -> int:
    """XP needed to advance past ``level``; 0 outside the level table."""
    return XP_REQUIREMENTS.get(level, 0)


def level_rewards(level: int) -> LevelRewards:
    return LevelRewards(
        challenge_mode_unlocked=level >= 5,
        hard_difficulty_unlocked=level >= 10,
        custom_passages_unlocked=level >= 15,
    )


def level_title(level: int) -> str:
    for upper_bound, title in LEVEL_TITLES:
        if level < upper_bound:
            return title
    return MASTER_TITLE
