from datetime import date
from fractions import Fraction

import pytest

from utils.promotion import compute_status, progress_percent, round_half_away_from_zero
from utils.ranks import BELT_PROGRESSION, Belt
from utils.thresholds import DEFAULT_THRESHOLDS, ThresholdConfig

BASELINE = date(2026, 1, 1)


def status_for(belt, stripes, classes, thresholds=DEFAULT_THRESHOLDS):
    return compute_status(belt, stripes, classes, 30, BASELINE, thresholds)


@pytest.mark.parametrize("belt", BELT_PROGRESSION)
@pytest.mark.parametrize("stripes", [0, 1, 2, 3])
def test_stripe_due_exactly_at_threshold(belt, stripes):
    threshold = DEFAULT_THRESHOLDS.stripe_threshold(belt)

    assert status_for(belt, stripes, threshold).stripe_due is True
    assert status_for(belt, stripes, threshold - 1).stripe_due is False


@pytest.mark.parametrize("belt", [Belt.WHITE, Belt.BLUE, Belt.PURPLE, Belt.BROWN])
def test_belt_eligible_exactly_at_threshold(belt):
    threshold = DEFAULT_THRESHOLDS.belt_threshold(belt)

    at = status_for(belt, 4, threshold)
    below = status_for(belt, 4, threshold - 1)

    assert at.belt_eligible is True
    assert at.stripe_due is False
    assert below.belt_eligible is False


@pytest.mark.parametrize("classes", [0, 1, 99, 100, 5000])
def test_black_belt_four_stripes_has_no_next_milestone(classes):
    status = status_for("black", 4, classes)

    assert status.belt_eligible is False
    assert status.stripe_due is False
    assert status.progress == 100
    assert status.next_threshold is None
    assert status.has_next_threshold is False
    assert status.classes_remaining is None


def test_black_belt_below_four_stripes_counts_towards_stripe():
    status = status_for("black", 2, 100)
    assert status.is_stripe_promotion is True
    assert status.next_threshold == 100
    assert status.stripe_due is True


@pytest.mark.parametrize("classes", [0, 1, 12, 24, 25, 26, 1000])
def test_progress_stays_within_bounds(classes):
    assert 0 <= status_for("white", 0, classes).progress <= 100


def test_zero_classes():
    status = status_for("blue", 1, 0)
    assert status.progress == 0
    assert status.stripe_due is False
    assert status.belt_eligible is False
    assert status.classes_remaining == 40


def test_compute_status_is_repeatable():
    first = status_for("purple", 3, 17)
    second = status_for("purple", 3, 17)
    assert first == second


def test_fields_are_carried_through():
    status = compute_status("white", 4, 10, 45, BASELINE, DEFAULT_THRESHOLDS)
    assert status.classes_since_promotion == 10
    assert status.days_since_promotion == 45
    assert status.last_promotion_date == BASELINE
    assert status.is_stripe_promotion is False
    assert status.next_threshold == 200
    assert status.progress == 5


def test_progress_rounds_half_away_from_zero():
    # 199 of 200 classes is 99.5%
    status = status_for("white", 4, 199)
    assert status.progress == 100
    assert status.belt_eligible is False

    # 1 of 8 is 12.5%
    assert progress_percent(1, 8) == 13
    # 1 of 3 is 33.3%
    assert progress_percent(1, 3) == 33


def test_round_half_away_from_zero_negative_values():
    assert round_half_away_from_zero(Fraction(-5, 2)) == -3
    assert round_half_away_from_zero(Fraction(5, 2)) == 3
    assert round_half_away_from_zero(Fraction(9, 4)) == 2


def test_zero_threshold_is_trivially_met():
    config = ThresholdConfig(stripe_thresholds={Belt.WHITE: 0}, belt_thresholds={Belt.WHITE: 0})

    stripe = status_for("white", 0, 0, config)
    belt = status_for("white", 4, 0, config)

    assert stripe.stripe_due is True
    assert stripe.progress == 100
    assert belt.belt_eligible is True
    assert belt.progress == 100


def test_negative_threshold_progress_is_clamped_to_zero():
    config = ThresholdConfig(stripe_thresholds={Belt.WHITE: -5}, belt_thresholds={Belt.WHITE: -5})

    stripe = status_for("white", 0, 10, config)
    belt = status_for("white", 4, 10, config)

    # 100 * 10 / -5 is -200
    assert stripe.stripe_due is True
    assert stripe.progress == 0
    assert belt.belt_eligible is True
    assert belt.progress == 0
    assert progress_percent(0, -5) == 0


def test_missing_threshold_key_uses_default_for_that_belt():
    config = ThresholdConfig(stripe_thresholds={Belt.WHITE: 10}, belt_thresholds={})

    assert status_for("white", 0, 10, config).stripe_due is True
    assert status_for("blue", 0, 39, config).stripe_due is False
    assert status_for("blue", 0, 40, config).stripe_due is True
    assert status_for("brown", 4, 150, config).belt_eligible is True


def test_status_to_dict():
    data = status_for("white", 4, 50).to_dict()
    assert data == {
        'classes_since_promotion': 50,
        'days_since_promotion': 30,
        'last_promotion_date': '2026-01-01',
        'stripe_due': False,
        'belt_eligible': False,
        'progress': 25,
        'next_threshold': 200,
        'is_stripe_promotion': False,
    }
