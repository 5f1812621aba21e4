# tests/test_glicko2_engine.py

"""Unit tests for the single-player Glicko-2 update."""

import math

import pytest
from padelrank.exceptions import (
    ConvergenceError,
    InvalidRatingStateError,
    RatingEngineError,
)
from padelrank.rating.glicko2_engine import (
    GLICKO2_SCALE,
    MAX_DEVIATION,
    Glicko2Engine,
    RatingState,
)

# =============================================================================
# Reference example from Glickman's paper
# =============================================================================


def test_glickman_paper_example(engine: Glicko2Engine):
    """Reproduce the worked example in the Glicko-2 paper (tau = 0.5)."""
    player = RatingState(rating=1500.0, deviation=200.0, volatility=0.06)
    opponents = [
        (RatingState(rating=1400.0, deviation=30.0), 1.0),
        (RatingState(rating=1550.0, deviation=100.0), 0.0),
        (RatingState(rating=1700.0, deviation=300.0), 0.0),
    ]

    new_rating = engine.rate(player, opponents)

    assert new_rating.rating == pytest.approx(1464.06, abs=0.05)
    assert new_rating.deviation == pytest.approx(151.52, abs=0.05)
    assert new_rating.volatility == pytest.approx(0.05999, abs=0.00001)


# =============================================================================
# Helper functions
# =============================================================================


def test_g_is_one_for_a_certain_opponent(engine: Glicko2Engine):
    assert engine._g(0.0) == 1.0


def test_g_shrinks_as_opponent_uncertainty_grows(engine: Glicko2Engine):
    low_rd = engine._g(50.0 / GLICKO2_SCALE)
    high_rd = engine._g(350.0 / GLICKO2_SCALE)

    assert 0 < high_rd < low_rd < 1


def test_expected_score_between_equals_is_half(engine: Glicko2Engine):
    assert engine._E(0.0, 0.0, 1.0) == pytest.approx(0.5)


def test_expected_score_favours_higher_rating(engine: Glicko2Engine):
    stronger = engine._E(1.0, 0.0, 1.0)
    weaker = engine._E(0.0, 1.0, 1.0)

    assert stronger > 0.5 > weaker
    assert stronger + weaker == pytest.approx(1.0)


def test_expected_score_saturates_for_huge_gaps(engine: Glicko2Engine):
    """A gap far past exp()'s range gives 0 or 1 instead of overflowing."""
    assert engine._E(0.0, 1e6, 0.0) == 0.0
    assert engine._E(1e6, 0.0, 0.0) == 1.0


# =============================================================================
# Rating behaviour
# =============================================================================


def test_basic_win(engine: Glicko2Engine, new_player: RatingState):
    """Winning increases rating."""
    new_rating = engine.rate(new_player, [(new_player, 1.0)])

    assert new_rating.rating > 1500.0


def test_basic_loss(engine: Glicko2Engine, new_player: RatingState):
    """Losing decreases rating."""
    new_rating = engine.rate(new_player, [(new_player, 0.0)])

    assert new_rating.rating < 1500.0


def test_draw_between_equals_keeps_rating(
    engine: Glicko2Engine, new_player: RatingState
):
    """A draw between identical players leaves the rating where it was."""
    new_rating = engine.rate(new_player, [(new_player, 0.5)])

    assert new_rating.rating == pytest.approx(1500.0)


def test_high_rd_larger_changes(engine: Glicko2Engine):
    """Players with high RD have larger rating changes."""
    high_rd_player = RatingState(rating=1500.0, deviation=350.0, volatility=0.06)
    low_rd_player = RatingState(rating=1500.0, deviation=50.0, volatility=0.06)
    opponent = RatingState(rating=1500.0, deviation=200.0, volatility=0.06)

    high_rd_result = engine.rate(high_rd_player, [(opponent, 1.0)])
    low_rd_result = engine.rate(low_rd_player, [(opponent, 1.0)])

    high_rd_change = abs(high_rd_result.rating - high_rd_player.rating)
    low_rd_change = abs(low_rd_result.rating - low_rd_player.rating)
    assert high_rd_change > low_rd_change


def test_rd_decreases_after_play(engine: Glicko2Engine, new_player: RatingState):
    """Playing makes the rating more certain."""
    new_rating = engine.rate(new_player, [(new_player, 1.0)])

    assert new_rating.deviation < new_player.deviation


def test_upset_win_larger_gain(engine: Glicko2Engine):
    """Beating a higher-rated player gives a larger rating increase."""
    underdog = RatingState(rating=1000.0, deviation=200.0, volatility=0.06)
    favorite = RatingState(rating=2000.0, deviation=200.0, volatility=0.06)
    equal = RatingState(rating=1000.0, deviation=200.0, volatility=0.06)

    upset_result = engine.rate(underdog, [(favorite, 1.0)])
    normal_result = engine.rate(underdog, [(equal, 1.0)])

    assert (upset_result.rating - 1000.0) > (normal_result.rating - 1000.0)


def test_fractional_outcome_moves_less_than_full_win(
    engine: Glicko2Engine, new_player: RatingState
):
    """A 2/3 result is rated as a partial win."""
    partial = engine.rate(new_player, [(new_player, 2 / 3)])
    full = engine.rate(new_player, [(new_player, 1.0)])

    assert 1500.0 < partial.rating < full.rating


def test_multiple_opponents(engine: Glicko2Engine, new_player: RatingState):
    """Beat a weaker player and lose to a stronger one."""
    opp1 = RatingState(rating=1400.0, deviation=350.0, volatility=0.06)
    opp2 = RatingState(rating=1600.0, deviation=350.0, volatility=0.06)

    new_rating = engine.rate(new_player, [(opp1, 1.0), (opp2, 0.0)])

    assert abs(new_rating.rating - 1500.0) < 100


def test_high_volatility(engine: Glicko2Engine, new_player: RatingState):
    """Volatile and stable players both gain from a win."""
    volatile_player = RatingState(rating=1500.0, deviation=350.0, volatility=0.10)
    stable_player = RatingState(rating=1500.0, deviation=350.0, volatility=0.03)

    volatile_result = engine.rate(volatile_player, [(new_player, 1.0)])
    stable_result = engine.rate(stable_player, [(new_player, 1.0)])

    assert volatile_result.rating > 1500.0
    assert stable_result.rating > 1500.0
    assert volatile_result.volatility > stable_result.volatility


def test_rate_does_not_mutate_inputs(engine: Glicko2Engine, new_player: RatingState):
    opponent = RatingState(rating=1600.0, deviation=80.0, volatility=0.06)

    engine.rate(new_player, [(opponent, 1.0)])

    assert new_player == RatingState(1500.0, 350.0, 0.06)
    assert opponent == RatingState(1600.0, 80.0, 0.06)


# =============================================================================
# No-opponent period
# =============================================================================


def test_no_opponents_increases_rd(engine: Glicko2Engine):
    """Not playing increases RD (more uncertainty)."""
    player = RatingState(rating=1500.0, deviation=100.0, volatility=0.06)

    new_rating = engine.rate(player, [])

    assert new_rating.deviation > player.deviation
    assert new_rating.rating == player.rating
    assert new_rating.volatility == player.volatility


def test_no_opponents_rd_is_capped(engine: Glicko2Engine, new_player: RatingState):
    new_rating = engine.rate(new_player, [])

    assert new_rating.deviation == MAX_DEVIATION


# =============================================================================
# Validation and failure modes
# =============================================================================


@pytest.mark.parametrize(
    "state, field",
    [
        (RatingState(rating=math.nan), "rating"),
        (RatingState(rating=math.inf), "rating"),
        (RatingState(deviation=0.0), "deviation"),
        (RatingState(deviation=-10.0), "deviation"),
        (RatingState(deviation=math.nan), "deviation"),
        (RatingState(deviation=350.5), "deviation"),
        (RatingState(volatility=0.0), "volatility"),
        (RatingState(volatility=-0.06), "volatility"),
        (RatingState(volatility=math.inf), "volatility"),
    ],
)
def test_invalid_player_state_raises_error(
    engine: Glicko2Engine, new_player: RatingState, state: RatingState, field: str
):
    with pytest.raises(InvalidRatingStateError) as exc_info:
        engine.rate(state, [(new_player, 1.0)])

    assert exc_info.value.details["field"] == field


def test_invalid_opponent_state_raises_error(
    engine: Glicko2Engine, new_player: RatingState
):
    with pytest.raises(InvalidRatingStateError):
        engine.rate(new_player, [(RatingState(deviation=0.0), 1.0)])


def test_solver_iteration_cap_raises_convergence_error(new_player: RatingState):
    """The volatility solver gives up instead of looping forever."""
    engine = Glicko2Engine(max_iterations=1)

    with pytest.raises(ConvergenceError) as exc_info:
        engine.rate(new_player, [(new_player, 1.0)])

    assert exc_info.value.details["stage"] == "secant"
    assert exc_info.value.details["iterations"] == 1


def test_bracket_search_cap_raises_convergence_error():
    """The k search for the lower bracket is capped like the secant loop."""
    # Arrange: f(a - tau) < 0, so the search must step at least once
    engine = Glicko2Engine(tau=10.0, max_iterations=0)

    # Act / Assert
    with pytest.raises(ConvergenceError) as exc_info:
        engine._compute_new_sigma(delta=0.0, phi=1e-5, v=1e-9, sigma=1.0)

    assert exc_info.value.details["stage"] == "bracket"
    assert exc_info.value.details["iterations"] == 1


def test_flat_secant_step_raises_convergence_error():
    """Equal f(A) and f(B) would divide by zero; the solver stops instead."""
    # Arrange: delta^2 - phi^2 - v == sigma^2, so B starts equal to A
    engine = Glicko2Engine(epsilon=-1.0)

    # Act / Assert
    with pytest.raises(ConvergenceError) as exc_info:
        engine._compute_new_sigma(delta=2.0, phi=1.0, v=2.0, sigma=1.0)

    assert exc_info.value.details["stage"] == "secant"
    assert exc_info.value.details["iterations"] == 0
    assert exc_info.value.details["A"] == exc_info.value.details["B"]


def test_secant_loop_stops_when_tolerance_is_unreachable():
    engine = Glicko2Engine(epsilon=-1.0, max_iterations=50)

    with pytest.raises(ConvergenceError) as exc_info:
        engine._compute_new_sigma(delta=-0.4834, phi=1.1513, v=1.7785, sigma=0.06)

    assert exc_info.value.details["stage"] == "secant"


def test_undefined_variance_raises_engine_error(engine: Glicko2Engine):
    """An opponent so far away that E(1 - E) underflows leaves v undefined."""
    with pytest.raises(RatingEngineError) as exc_info:
        engine._compute_v(0.0, [(1e6, 0.0, 1.0)])

    assert not isinstance(exc_info.value, ConvergenceError)
    assert exc_info.value.details == {"mu": 0.0, "opponent_count": 1}
