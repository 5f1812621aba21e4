# src/padelrank/display.py

"""Helpers for presenting ratings to players."""

from __future__ import annotations

import math

from padelrank import config

# Upper bounds (exclusive) for each skill tier, lowest first.
RATING_TIERS = (
    (1300.0, "Beginner"),
    (1500.0, "Intermediate"),
    (1700.0, "Advanced"),
    (1900.0, "Expert"),
    (2100.0, "Professional"),
)
TOP_TIER = "Elite"


def _to_float(value: float | str | None) -> float | None:
    try:
        parsed = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    return parsed if math.isfinite(parsed) else None


def format_rating(value: float | str | None) -> str:
    """
    Formats a rating as a whole number, e.g. "1583".

    Anything that does not parse to a finite number (None, garbage, NaN and
    +/-inf alike) is shown as the default rating rather than "NaN" or
    "Infinity".
    """
    parsed = _to_float(value)
    if parsed is None:
        return str(int(config.DEFAULT_RATING))
    return str(math.floor(parsed + 0.5))


def rating_description(value: float | str | None) -> str:
    """Returns the skill tier label for a rating."""
    parsed = _to_float(value)
    if parsed is None:
        parsed = config.DEFAULT_RATING

    for upper_bound, label in RATING_TIERS:
        if parsed < upper_bound:
            return label
    return TOP_TIER
