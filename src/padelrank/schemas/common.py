# src/padelrank/schemas/common.py

"""Common Pydantic schemas used across multiple resources."""

from __future__ import annotations

from pydantic import BaseModel, Field

from padelrank.rating.glicko2_engine import MAX_DEVIATION, RatingState


class RatingInfo(BaseModel):
    """Pydantic model for Glicko-2 rating data with validation.

    This complements the RatingState dataclass used by the engine with
    runtime validation for data crossing the package boundary.

    Attributes:
        rating: The player's skill rating (default: 1500.0)
        rd: Rating deviation / uncertainty (default: 350.0)
        vol: Volatility / consistency (default: 0.06)
    """

    rating: float = Field(1500.0, ge=0, le=4000, description="Skill rating")
    rd: float = Field(
        350.0, gt=0, le=MAX_DEVIATION, description="Rating deviation (uncertainty)"
    )
    vol: float = Field(0.06, gt=0, le=1.0, description="Volatility (consistency)")

    @classmethod
    def from_state(cls, state: RatingState) -> RatingInfo:
        return cls(rating=state.rating, rd=state.deviation, vol=state.volatility)

    def to_state(self) -> RatingState:
        return RatingState(rating=self.rating, deviation=self.rd, volatility=self.vol)
