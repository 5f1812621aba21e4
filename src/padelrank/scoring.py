# src/padelrank/scoring.py

"""Padel set-score rules.

Turns the set-by-set score entered for a best-of-three match into the
team score pair the rating engine consumes.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Literal

from padelrank.exceptions import InvalidMatchScoreError
from padelrank.schemas.match import MatchScore, SetScore

logger = logging.getLogger(__name__)

# A set goes to 6 with a two-game lead, or 7-5 / 7-6 (tiebreak).
VALID_SET_SCORES = frozenset(
    {
        (6, 0), (6, 1), (6, 2), (6, 3), (6, 4), (7, 5), (7, 6),
        (0, 6), (1, 6), (2, 6), (3, 6), (4, 6), (5, 7), (6, 7),
    }
)  # fmt: skip

ScoreMode = Literal["winner", "sets"]


def is_valid_set_score(score: SetScore) -> bool:
    """Whether the set is a final score allowed under padel rules."""
    return (score.team1, score.team2) in VALID_SET_SCORES


def sets_won(sets: Sequence[SetScore]) -> tuple[int, int]:
    """Count sets won by each team. Unplayed (0-0) and tied sets count for no one."""
    team1_sets = 0
    team2_sets = 0
    for score in sets:
        if score.team1 > score.team2:
            team1_sets += 1
        elif score.team2 > score.team1:
            team2_sets += 1
    return team1_sets, team2_sets


def determine_winner_team(sets: Sequence[SetScore]) -> int:
    """Returns 1 or 2 for the team with more sets, or 0 if level."""
    team1_sets, team2_sets = sets_won(sets)
    if team1_sets > team2_sets:
        return 1
    if team2_sets > team1_sets:
        return 2
    return 0


def validate_match_score(match_score: MatchScore) -> None:
    """
    Validates a best-of-three match score.

    Raises:
        InvalidMatchScoreError: If set 1 or 2 is missing or not a valid padel
            score, if a third set is present without a 1-1 split, or if a
            third set is required but missing or invalid.
    """
    played = [s for s in match_score.sets if s.is_played]
    if len(played) < 2:
        raise InvalidMatchScoreError(
            "Please enter valid scores for both sets",
            {"sets_played": len(played)},
        )

    for index, score in enumerate(match_score.sets[:2], start=1):
        if not is_valid_set_score(score):
            raise InvalidMatchScoreError(
                f"Set {index} score {score.team1}-{score.team2} is not a valid "
                f"padel set score",
                {"set": index, "team1": score.team1, "team2": score.team2},
            )

    first_two = sets_won(match_score.sets[:2])
    third = match_score.sets[2] if len(match_score.sets) == 3 else None
    needs_third = first_two == (1, 1)

    if third is not None and third.is_played:
        if not needs_third:
            raise InvalidMatchScoreError(
                "A third set is only played when the first two sets are split",
                {"sets_won": first_two},
            )
        if not is_valid_set_score(third):
            raise InvalidMatchScoreError(
                f"Set 3 score {third.team1}-{third.team2} is not a valid "
                f"padel set score",
                {"set": 3, "team1": third.team1, "team2": third.team2},
            )
    elif needs_third:
        raise InvalidMatchScoreError(
            "Please enter a valid score for the third set",
            {"sets_won": first_two},
        )


def team_scores(
    match_score: MatchScore, mode: ScoreMode = "winner"
) -> tuple[int, int]:
    """
    Converts a validated match score into the engine's team score pair.

    - "winner": 1-0 or 0-1 for the winning team, so the engine sees a
      decisive result. This is what stored ratings were computed with.
    - "sets": sets won by each team, e.g. 2-1, giving a fractional result.
    """
    validate_match_score(match_score)

    if mode == "sets":
        scores = sets_won(match_score.sets)
    elif mode == "winner":
        winner = determine_winner_team(match_score.sets)
        scores = (1 if winner == 1 else 0, 1 if winner == 2 else 0)
    else:
        raise InvalidMatchScoreError(f"Unknown score mode {mode!r}", {"mode": mode})

    logger.debug("Derived team scores", extra={"mode": mode, "scores": scores})
    return scores
