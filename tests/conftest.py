# tests/conftest.py

"""Pytest configuration and fixtures."""

import pytest
from padelrank.rating.glicko2_engine import Glicko2Engine, RatingState


@pytest.fixture
def engine() -> Glicko2Engine:
    """A Glicko-2 engine with the default system constants."""
    return Glicko2Engine(tau=0.5, epsilon=0.000001, max_iterations=100)


@pytest.fixture
def new_player() -> RatingState:
    """A player with no rating history."""
    return RatingState(rating=1500.0, deviation=350.0, volatility=0.06)


@pytest.fixture
def four_new_players(
    new_player: RatingState,
) -> tuple[RatingState, RatingState, RatingState, RatingState]:
    """Four players with no rating history, in positional order."""
    return (new_player, new_player, new_player, new_player)


@pytest.fixture
def mixed_players() -> tuple[RatingState, RatingState, RatingState, RatingState]:
    """Four established players with different ratings and certainty."""
    return (
        RatingState(rating=1620.0, deviation=120.0, volatility=0.059),
        RatingState(rating=1480.0, deviation=200.0, volatility=0.061),
        RatingState(rating=1550.0, deviation=90.0, volatility=0.06),
        RatingState(rating=1400.0, deviation=300.0, volatility=0.065),
    )
