# src/padelrank/schemas/match.py

"""Pydantic schemas for padel match scores."""

from pydantic import BaseModel, Field


class SetScore(BaseModel):
    """Games won by each team in a single set.

    Examples:
        {"team1": 6, "team2": 4}
        {"team1": 6, "team2": 7}
    """

    team1: int = Field(..., ge=0, description="Games won by team 1")
    team2: int = Field(..., ge=0, description="Games won by team 2")

    @property
    def is_played(self) -> bool:
        """A 0-0 set is an empty input slot, not a played set."""
        return self.team1 > 0 or self.team2 > 0


class MatchScore(BaseModel):
    """Set-by-set score of a best-of-three padel match.

    The third set is optional and only present when the first two split.
    """

    sets: list[SetScore] = Field(..., min_length=1, max_length=3)
