import logging

import pytest

from reading_scorer.errors import InvalidInputError
from reading_scorer.ranking import (
    RANK_THRESHOLDS,
    add_challenge_score,
    challenge_score,
    clamp_difficulty_rating,
    difficulty_multiplier,
    rank_info,
    rank_message,
    rank_threshold,
)


def test_challenge_score_examples():
    assert challenge_score(10, 150, 100) == 140
    assert challenge_score(5, 0, 50) == 25
    assert challenge_score(1, 0, 0) == 0


def test_wpm_points_are_capped():
    """Reading faster than 150 WPM earns no extra points."""
    assert challenge_score(1, 300, 0) == challenge_score(1, 150, 0) == 19


def test_score_is_uncapped_above_one_hundred():
    assert challenge_score(9, 200, 100) > 100


def test_difficulty_multiplier_range():
    assert difficulty_multiplier(1) == pytest.approx(0.65)
    assert difficulty_multiplier(10) == pytest.approx(2.0)


def test_out_of_range_ratings_are_clamped(caplog):
    with caplog.at_level(logging.WARNING, logger="reading_scorer.ranking"):
        high = challenge_score(15, 150, 100)
        low = challenge_score(0, 150, 100)
    assert high == challenge_score(10, 150, 100)
    assert low == challenge_score(1, 150, 100)
    assert "outside" in caplog.text


def test_clamp_leaves_valid_ratings_alone(caplog):
    with caplog.at_level(logging.WARNING, logger="reading_scorer.ranking"):
        assert clamp_difficulty_rating(7) == 7
    assert caplog.text == ""


def test_clamp_rounds_fractional_ratings(caplog):
    """In-range fractions round half up instead of truncating."""
    with caplog.at_level(logging.WARNING, logger="reading_scorer.ranking"):
        assert clamp_difficulty_rating(5.6) == 6
        assert clamp_difficulty_rating(4.5) == 5
        assert clamp_difficulty_rating(4.4) == 4
    assert caplog.text == ""


def test_clamp_treats_nan_as_lowest_rating(caplog):
    with caplog.at_level(logging.WARNING, logger="reading_scorer.ranking"):
        assert clamp_difficulty_rating(float("nan")) == 1
        assert challenge_score(float("nan"), 150, 100) == challenge_score(1, 150, 100)
    assert "outside" in caplog.text


def test_challenge_score_rejects_nan_wpm():
    with pytest.raises(InvalidInputError):
        challenge_score(5, float("nan"), 100)


def test_challenge_score_rejects_bad_input():
    with pytest.raises(InvalidInputError):
        challenge_score(5, 100, 120)
    with pytest.raises(InvalidInputError):
        challenge_score(5, -1, 50)


def test_rank_info_base_cases():
    start = rank_info(0)
    assert start.rank == 0
    assert start.next_rank == 1
    assert start.score_to_next_rank == 300
    assert start.progress_percent == 0
    assert start.title.name == "Novice"

    top = rank_info(4500)
    assert top.rank == 5
    assert top.is_max_rank is True
    assert top.progress_percent == 1.0
    assert top.score_to_next_rank == 0
    assert top.title.name == "Legend"


def test_rank_boundaries_and_progress():
    assert rank_info(299).rank == 0
    assert rank_info(300).rank == 1
    middle = rank_info(550)
    assert middle.rank == 1
    assert middle.progress_percent == pytest.approx(0.5)
    assert middle.score_to_next_rank == 250
    assert rank_info(800).title.name == "Scholar"
    assert rank_info(100000).rank == 5


def test_ranks_never_decrease_with_more_score():
    previous = 0
    for total in range(0, 6000, 23):
        current = rank_info(total).rank
        assert current >= previous
        previous = current


def test_negative_total_is_rejected():
    with pytest.raises(InvalidInputError):
        rank_info(-10)


def test_add_challenge_score_ranks_up():
    update = add_challenge_score(290, 15)
    assert update.new_total_score == 305
    assert update.old_rank == 0
    assert update.new_rank == 1
    assert update.ranked_up is True
    assert update.earned_score == 15


def test_add_challenge_score_without_rank_change():
    update = add_challenge_score(310, 40)
    assert update.ranked_up is False
    assert update.old_rank == update.new_rank == 1


def test_add_challenge_score_rejects_negative_scores():
    with pytest.raises(InvalidInputError):
        add_challenge_score(10, -1)


def test_thresholds_and_messages():
    assert [rank_threshold(r) for r in range(6)] == list(RANK_THRESHOLDS.values())
    assert rank_threshold(9) == 0
    assert rank_message(5) == "legendary champion"
    assert rank_message(9) == rank_message(0)
