import math

import pytest

from autowin.calculation.probability import (
    FALLBACK_MATCH_SD,
    alliance_total,
    normal_cdf,
    pooled_match_sd,
    sample_std_dev,
    win_probability,
)
from autowin.models.results import RatingRecord


def test_sample_std_dev_uses_bessel_correction():
    assert sample_std_dev([1, 2, 3]) == pytest.approx(1.0)
    assert sample_std_dev([2, 4, 4, 4, 5, 5, 7, 9]) == pytest.approx(math.sqrt(32 / 7))


@pytest.mark.parametrize("scores", [[], [4.0]])
def test_sample_std_dev_needs_two_values(scores):
    with pytest.raises(ValueError):
        sample_std_dev(scores)


def test_normal_cdf_at_zero():
    assert normal_cdf(0) == pytest.approx(0.5, abs=1e-6)


@pytest.mark.parametrize(
    "z, expected",
    [(0.3, 0.6179114), (1.0, 0.8413447), (1.96, 0.9750021), (-2.5, 0.0062097)],
)
def test_normal_cdf_matches_reference_values(z, expected):
    assert normal_cdf(z) == pytest.approx(expected, abs=1e-6)


@pytest.mark.parametrize("z", [0.01, 0.5, 1.3, 2.7, 4.0, 6.5])
def test_normal_cdf_is_symmetric(z):
    assert normal_cdf(-z) == pytest.approx(1 - normal_cdf(z), abs=1e-12)


def test_normal_cdf_is_strictly_increasing():
    grid = [i / 20 for i in range(-100, 101)]
    values = [normal_cdf(z) for z in grid]

    assert all(b > a for a, b in zip(values, values[1:]))


def test_alliance_total_skips_missing_teams():
    records = [
        RatingRecord(team=1, season=2025, auto_rating=4.5),
        None,
        RatingRecord(team=3, season=2024, auto_rating=3.0),
    ]

    assert alliance_total(records) == pytest.approx(7.5)


def test_pooled_sd_scales_mean_by_sqrt_six():
    sd, used_fallback = pooled_match_sd([2.0, None, 4.0, 3.0, None, None])

    assert not used_fallback
    assert sd == pytest.approx(3.0 * math.sqrt(6))


def test_pooled_sd_falls_back_below_three_estimates():
    sd, used_fallback = pooled_match_sd([2.0, None, 4.0, None, None, None])

    assert used_fallback
    assert sd == FALLBACK_MATCH_SD == 10.0


def test_pooled_sd_thresholds_are_overridable():
    assert pooled_match_sd([5.0], min_estimates=1) == (pytest.approx(5.0 * math.sqrt(6)), False)
    assert pooled_match_sd([], fallback_sd=8.0) == (8.0, True)


def test_equal_totals_give_even_odds():
    z, p_a, p_b = win_probability(12.0, 12.0, 7.5)

    assert z == 0
    assert p_a == pytest.approx(0.5, abs=1e-6)
    assert p_b == pytest.approx(0.5, abs=1e-6)


def test_win_probability_from_totals():
    z, p_a, p_b = win_probability(6.0, 3.0, 10.0)

    assert z == pytest.approx(0.3)
    assert p_a == pytest.approx(0.6179, abs=1e-3)
    assert p_b == pytest.approx(0.3821, abs=1e-3)
    assert p_a + p_b == pytest.approx(1.0)


def test_pooled_sd_of_zero_takes_the_fallback():
    sd, used_fallback = pooled_match_sd([0.0, 0.0, 0.0, None, None, None])

    assert used_fallback
    assert sd == FALLBACK_MATCH_SD


@pytest.mark.parametrize(
    "total_a, total_b, expected_a",
    [(6.0, 3.0, 1.0), (3.0, 6.0, 0.0), (4.0, 4.0, 0.5)],
)
def test_zero_match_sd_gives_certain_outcome(total_a, total_b, expected_a):
    _, p_a, p_b = win_probability(total_a, total_b, 0.0)

    assert p_a == expected_a
    assert p_b == 1.0 - expected_a
