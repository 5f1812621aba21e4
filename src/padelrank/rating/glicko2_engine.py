# src/padelrank/rating/glicko2_engine.py

"""
A from-scratch implementation of the Glicko-2 rating system for padel doubles.
The formulas and steps are based on the paper by Dr. Mark Glickman:
https://www.glicko.net/glicko/glicko2.pdf
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from padelrank import config
from padelrank.exceptions import (
    ConvergenceError,
    InvalidMatchScoreError,
    InvalidRatingStateError,
    RatingEngineError,
)

logger = logging.getLogger(__name__)

GLICKO2_SCALE = 173.7178
BASE_RATING = 1500.0
MAX_DEVIATION = 350.0

# ===============================================
# == Value Types
# ===============================================


@dataclass(frozen=True)
class RatingState:
    """A player's rating in the standard Glicko scale."""

    rating: float = BASE_RATING
    deviation: float = MAX_DEVIATION
    volatility: float = 0.06


@dataclass(frozen=True)
class MatchRatings:
    """Updated ratings for the four players of a doubles match."""

    team1_player1: RatingState
    team1_player2: RatingState
    team2_player1: RatingState
    team2_player2: RatingState

    @property
    def players(self) -> tuple[RatingState, RatingState, RatingState, RatingState]:
        """The four states in positional order."""
        return (
            self.team1_player1,
            self.team1_player2,
            self.team2_player1,
            self.team2_player2,
        )


def validate_rating_state(state: RatingState) -> None:
    """Raise InvalidRatingStateError unless the state is safe to rate."""
    if not math.isfinite(state.rating):
        raise InvalidRatingStateError("rating", state.rating, "must be finite")
    if not math.isfinite(state.deviation) or state.deviation <= 0:
        raise InvalidRatingStateError(
            "deviation", state.deviation, "must be a positive finite number"
        )
    if state.deviation > MAX_DEVIATION:
        raise InvalidRatingStateError(
            "deviation", state.deviation, f"must not exceed {MAX_DEVIATION}"
        )
    if not math.isfinite(state.volatility) or state.volatility <= 0:
        raise InvalidRatingStateError(
            "volatility", state.volatility, "must be a positive finite number"
        )


def _validate_score(name: str, score: object) -> None:
    if isinstance(score, bool) or not isinstance(score, int):
        raise InvalidMatchScoreError(
            f"{name} must be an integer", {"field": name, "value": score}
        )
    if score < 0:
        raise InvalidMatchScoreError(
            f"{name} must be >= 0", {"field": name, "value": score}
        )


# ===============================================
# == Glicko-2 Core Implementation
# ===============================================


class Glicko2Engine:
    """Encapsulates the Glicko-2 calculation logic."""

    # The system constant, tau, constrains the change in volatility over time.
    def __init__(
        self,
        tau: float = config.TAU,
        epsilon: float = config.EPSILON,
        max_iterations: int = config.MAX_ITERATIONS,
    ):
        self._tau = tau
        self._epsilon = epsilon
        self._max_iterations = max_iterations

    def rate(
        self,
        player_rating: RatingState,
        opponent_ratings_and_outcomes: list[tuple[RatingState, float]],
    ) -> RatingState:
        """
        Calculates a player's new rating based on a series of match outcomes.
        """
        validate_rating_state(player_rating)
        for opponent, _ in opponent_ratings_and_outcomes:
            validate_rating_state(opponent)

        # Step 1 & 2: Convert to Glicko-2 scale
        mu = (player_rating.rating - BASE_RATING) / GLICKO2_SCALE
        phi = player_rating.deviation / GLICKO2_SCALE
        sigma = player_rating.volatility

        if not opponent_ratings_and_outcomes:
            # If the player didn't play, only RD changes
            new_phi = math.sqrt(phi**2 + sigma**2)
            return RatingState(
                rating=player_rating.rating,
                deviation=min(new_phi * GLICKO2_SCALE, MAX_DEVIATION),
                volatility=sigma,
            )

        opponents = [
            (
                (opponent.rating - BASE_RATING) / GLICKO2_SCALE,
                opponent.deviation / GLICKO2_SCALE,
                score,
            )
            for opponent, score in opponent_ratings_and_outcomes
        ]

        # Step 3: Compute the estimated variance of the player's rating
        v = self._compute_v(mu, opponents)

        try:
            # Step 4: Compute the estimated improvement in rating
            delta = self._compute_delta(mu, v, opponents)

            # Step 5: Determine the new volatility
            sigma_prime = self._compute_new_sigma(delta, phi, v, sigma)

            # Step 6: Update the rating deviation to the new pre-rating period value
            phi_star = math.sqrt(phi**2 + sigma_prime**2)

            # Step 7: Update the rating and rating deviation
            phi_prime = 1 / math.sqrt(1 / phi_star**2 + 1 / v)
            mu_prime = mu + phi_prime**2 * delta / v
        except OverflowError as exc:
            raise RatingEngineError(
                "Rating update overflowed",
                details={"mu": mu, "v": v, "error": str(exc)},
            ) from exc

        # Step 8: Convert back to the original Glicko scale
        new_state = RatingState(
            rating=GLICKO2_SCALE * mu_prime + BASE_RATING,
            deviation=min(GLICKO2_SCALE * phi_prime, MAX_DEVIATION),
            volatility=sigma_prime,
        )
        logger.debug(
            "Rated player",
            extra={
                "rating_before": player_rating.rating,
                "rating_after": new_state.rating,
                "v": v,
                "delta": delta,
            },
        )
        return new_state

    def _g(self, phi: float) -> float:
        """The g() function from the Glickman paper."""
        return 1 / math.sqrt(1 + 3 * phi**2 / math.pi**2)

    def _E(self, mu: float, mu_j: float, phi_j: float) -> float:
        """
        The E() function, expected outcome against one opponent.

        Evaluated so that exp() only ever sees a non-positive argument; very
        large rating gaps saturate to 0.0 or 1.0 instead of overflowing.
        """
        x = self._g(phi_j) * (mu - mu_j)
        if x >= 0:
            return 1 / (1 + math.exp(-x))
        ex = math.exp(x)
        return ex / (1 + ex)

    def _compute_v(
        self, mu: float, opponents: list[tuple[float, float, float]]
    ) -> float:
        """Computes the estimated variance `v`."""
        v_inv = 0.0
        for mu_j, phi_j, _ in opponents:
            g_phi_j = self._g(phi_j)
            # 1 - E taken from the mirrored matchup keeps precision when E ~ 1
            E = self._E(mu, mu_j, phi_j)
            v_inv += g_phi_j**2 * E * self._E(mu_j, mu, phi_j)
        if v_inv == 0 or not math.isfinite(1 / v_inv):
            raise RatingEngineError(
                "Rating variance is undefined for these opponents",
                details={"mu": mu, "opponent_count": len(opponents)},
            )
        return 1 / v_inv

    def _compute_delta(
        self,
        mu: float,
        v: float,
        opponents: list[tuple[float, float, float]],
    ) -> float:
        """Computes the estimated improvement `delta`."""
        total = 0.0
        for mu_j, phi_j, score in opponents:
            total += self._g(phi_j) * (score - self._E(mu, mu_j, phi_j))
        return v * total

    def _compute_new_sigma(
        self, delta: float, phi: float, v: float, sigma: float
    ) -> float:
        """
        Determines the new volatility `sigma'` using an iterative algorithm.
        This is the most complex step of the Glicko-2 calculation.
        """
        a = math.log(sigma**2)
        delta_sq = delta**2
        phi_sq = phi**2
        tau_sq = self._tau**2

        def f(x: float) -> float:
            ex = math.exp(x)
            return (
                ex * (delta_sq - phi_sq - v - ex) / (2 * (phi_sq + v + ex) ** 2)
                - (x - a) / tau_sq
            )

        A = a
        if delta_sq > phi_sq + v:
            B = math.log(delta_sq - phi_sq - v)
        else:
            k = 1
            while f(a - k * self._tau) < 0:
                k += 1
                if k > self._max_iterations:
                    raise ConvergenceError(k - 1, details={"stage": "bracket"})
            B = a - k * self._tau

        f_A = f(A)
        f_B = f(B)

        # NOTE: update rule is pinned: strict `< 0` sign test, and f_A is halved
        # when C lands on B's side. Stored volatilities depend on it; do not
        # swap in another root-finder variant without an algorithm review.
        iterations = 0
        while abs(B - A) > self._epsilon:
            iterations += 1
            if iterations > self._max_iterations or f_B == f_A:
                raise ConvergenceError(
                    iterations - 1,
                    details={"stage": "secant", "A": A, "B": B},
                )
            C = A + (A - B) * f_A / (f_B - f_A)
            f_C = f(C)
            if f_C * f_B < 0:
                A = B
                f_A = f_B
            else:
                f_A /= 2
            B = C
            f_B = f_C

        return math.exp(A / 2)


# ===============================================
# == Doubles Match Integration
# ===============================================


def compute_match_ratings(
    team1_player1: RatingState,
    team1_player2: RatingState,
    team2_player1: RatingState,
    team2_player2: RatingState,
    team1_score: int,
    team2_score: int,
    engine: Glicko2Engine | None = None,
) -> MatchRatings:
    """
    Rates all four players of a padel doubles match.

    Each player is treated as having played two games in the period, one
    against each member of the opposing team, both ending with the team's
    normalized result.

    The result is the share of games (or sets) the team won, e.g. 2-1 gives
    0.667 / 0.333 rather than a 1 / 0 win-loss. Glicko-2 normally expects
    outcomes in {0, 0.5, 1}; the fractional form is kept so ratings stay
    comparable with those already stored.

    A 0-0 score is a no-op and returns the four input states unchanged.
    """
    players = (team1_player1, team1_player2, team2_player1, team2_player2)
    for state in players:
        validate_rating_state(state)
    _validate_score("team1_score", team1_score)
    _validate_score("team2_score", team2_score)

    total = team1_score + team2_score
    if total == 0:
        logger.debug("No games recorded, ratings unchanged")
        return MatchRatings(*players)

    engine = engine or Glicko2Engine()
    team1_result = team1_score / total
    team2_result = team2_score / total

    team2 = [team2_player1, team2_player2]
    team1 = [team1_player1, team1_player2]

    return MatchRatings(
        team1_player1=engine.rate(
            team1_player1, [(opponent, team1_result) for opponent in team2]
        ),
        team1_player2=engine.rate(
            team1_player2, [(opponent, team1_result) for opponent in team2]
        ),
        team2_player1=engine.rate(
            team2_player1, [(opponent, team2_result) for opponent in team1]
        ),
        team2_player2=engine.rate(
            team2_player2, [(opponent, team2_result) for opponent in team1]
        ),
    )
