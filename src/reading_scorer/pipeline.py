from __future__ import annotations

import logging

from .comparison import compare
from .config import ScoringConfig
from .estimators import DifficultyEstimator, HeuristicDifficultyEstimator
from .feedback import FeedbackGenerator, StaticFeedbackGenerator
from .leveling import add_xp, calculate_xp
from .models import (
    ChallengeAttempt,
    ChallengeAttemptResult,
    DifficultyTier,
    LearnAttemptResult,
)
from .ranking import add_challenge_score, challenge_score, clamp_difficulty_rating
from .speed import count_spoken_words, words_per_minute

logger = logging.getLogger(__name__)


def score_learn_attempt(
    target_text: str,
    transcript: str,
    tier: DifficultyTier | str,
    current_total_xp: int,
    *,
    elapsed_seconds: float | None = None,
    config: ScoringConfig | None = None,
    feedback: FeedbackGenerator | None = None,
) -> LearnAttemptResult:
    """Compare a Learn-mode reading, award XP and apply it to the stored total."""
    cfg = config or ScoringConfig()
    resolved_tier = DifficultyTier.parse(tier)
    comparison = compare(target_text, transcript)
    earned = calculate_xp(resolved_tier, comparison.accuracy_percent)
    update = add_xp(current_total_xp, earned)

    wpm: int | None = None
    if elapsed_seconds is not None:
        spoken = count_spoken_words(comparison, transcript, cfg.wpm_policy)
        wpm = words_per_minute(spoken, elapsed_seconds)
    message = (feedback or StaticFeedbackGenerator()).learn_feedback(
        comparison.accuracy_percent, comparison.incorrect_words
    )

    logger.debug(
        "Learn attempt tier=%s accuracy=%s xp=%s level %s->%s",
        resolved_tier.value,
        comparison.accuracy_percent,
        earned,
        update.old_level,
        update.new_level,
    )
    return LearnAttemptResult(
        comparison=comparison,
        tier=resolved_tier,
        earned_xp=earned,
        level_update=update,
        wpm=wpm,
        feedback=message,
    )


def score_challenge_attempt(
    target_text: str,
    transcript: str,
    elapsed_seconds: float,
    current_total_score: int,
    *,
    difficulty_rating: int | None = None,
    estimator: DifficultyEstimator | None = None,
    config: ScoringConfig | None = None,
    feedback: FeedbackGenerator | None = None,
) -> ChallengeAttemptResult:
    """Compare a timed reading, compute the composite score and apply it to the rank total."""
    cfg = config or ScoringConfig()
    comparison = compare(target_text, transcript)
    spoken = count_spoken_words(comparison, transcript, cfg.wpm_policy)
    wpm = words_per_minute(spoken, elapsed_seconds)
    rating = resolve_difficulty_rating(
        target_text, difficulty_rating, estimator, cfg
    )
    attempt = ChallengeAttempt(
        difficulty_rating=rating,
        wpm=wpm,
        accuracy_percent=comparison.accuracy_percent,
    )
    score = challenge_score(rating, wpm, comparison.accuracy_percent)
    update = add_challenge_score(current_total_score, score)
    message = (feedback or StaticFeedbackGenerator()).challenge_feedback(
        comparison.accuracy_percent, wpm, comparison.incorrect_words
    )

    logger.debug(
        "Challenge attempt rating=%s wpm=%s accuracy=%s score=%s rank %s->%s",
        rating,
        wpm,
        comparison.accuracy_percent,
        score,
        update.old_rank,
        update.new_rank,
    )
    return ChallengeAttemptResult(
        comparison=comparison,
        attempt=attempt,
        challenge_score=score,
        rank_update=update,
        feedback=message,
    )


def resolve_difficulty_rating(
    text: str,
    explicit: int | None,
    estimator: DifficultyEstimator | None,
    config: ScoringConfig,
) -> int:
    """Use the caller's rating, else the estimator, else the configured default, else the heuristic."""
    if explicit is not None:
        return clamp_difficulty_rating(explicit)
    if estimator is not None:
        return clamp_difficulty_rating(estimator.predict_rating(text))
    if config.default_difficulty_rating is not None:
        return clamp_difficulty_rating(config.default_difficulty_rating)
    return HeuristicDifficultyEstimator().predict_rating(text)
