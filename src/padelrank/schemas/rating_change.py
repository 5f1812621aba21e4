# src/padelrank/schemas/rating_change.py

"""Pydantic schema for the rating change audit trail."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from padelrank.rating.glicko2_engine import RatingState


class RatingChangeRecord(BaseModel):
    """One player's rating before and after a match.

    Records are computed when a match completes and kept until the
    validation window closes, so the change can be applied or reverted.
    """

    player_id: str

    rating_before: float
    rd_before: float
    vol_before: float

    rating_after: float
    rd_after: float
    vol_after: float

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_states(
        cls, player_id: str, before: RatingState, after: RatingState
    ) -> RatingChangeRecord:
        return cls(
            player_id=player_id,
            rating_before=before.rating,
            rd_before=before.deviation,
            vol_before=before.volatility,
            rating_after=after.rating,
            rd_after=after.deviation,
            vol_after=after.volatility,
        )

    @property
    def before(self) -> RatingState:
        return RatingState(self.rating_before, self.rd_before, self.vol_before)

    @property
    def after(self) -> RatingState:
        return RatingState(self.rating_after, self.rd_after, self.vol_after)

    @property
    def rating_change(self) -> float:
        return self.rating_after - self.rating_before

    @property
    def rd_change(self) -> float:
        return self.rd_after - self.rd_before

    @property
    def vol_change(self) -> float:
        return self.vol_after - self.vol_before
