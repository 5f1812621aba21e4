# src/padelrank/schemas/profile.py

"""Pydantic schema for the rating fields stored on a player profile."""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict

from padelrank import config
from padelrank.rating.glicko2_engine import RatingState


def _parse_decimal(value: str | float | None, default: float) -> float:
    """Parse a stored decimal, falling back to `default` when unusable.

    Missing, unparsable, non-finite and zero values all fall back, matching
    how profiles without a rating history have always been read.
    """
    if value is None:
        return default
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(parsed) or parsed == 0:
        return default
    return parsed


class ProfileRating(BaseModel):
    """Rating fields as the profile store keeps them: decimal strings.

    Examples:
        {"glicko_rating": "1523", "glicko_rd": "211.48", "glicko_vol": "0.059998"}
        {"glicko_rating": null, "glicko_rd": null, "glicko_vol": null}
    """

    glicko_rating: str | float | None = None
    glicko_rd: str | float | None = None
    glicko_vol: str | float | None = None

    # Profiles carry plenty of other columns (name, avatar, ...)
    model_config = ConfigDict(extra="ignore")

    def to_rating_state(self) -> RatingState:
        """Decode into an engine-ready RatingState, applying defaults."""
        return RatingState(
            rating=_parse_decimal(self.glicko_rating, config.DEFAULT_RATING),
            deviation=_parse_decimal(self.glicko_rd, config.DEFAULT_RD),
            volatility=_parse_decimal(self.glicko_vol, config.DEFAULT_VOL),
        )

    @classmethod
    def from_rating_state(cls, state: RatingState) -> ProfileRating:
        """Encode a RatingState for writing back to the profile store.

        The rating is rounded half up to an integer, the deviation kept to
        2 decimals and the volatility to 6 decimals.
        """
        return cls(
            glicko_rating=str(math.floor(state.rating + 0.5)),
            glicko_rd=f"{state.deviation:.2f}",
            glicko_vol=f"{state.volatility:.6f}",
        )
