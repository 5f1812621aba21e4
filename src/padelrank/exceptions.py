# src/padelrank/exceptions.py

"""Custom exception hierarchy for padelrank.

This module provides a structured exception hierarchy that enables:
1. Clear distinction between bad input and failed computation
2. Detailed error context for logging and debugging
"""

from __future__ import annotations


class PadelRankError(Exception):
    """Base exception for all padelrank errors.

    Attributes:
        message: Human-readable error description
        details: Optional dict with additional context for logging/debugging
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(PadelRankError):
    """Base class for validation errors."""

    pass


class InvalidRatingStateError(ValidationError):
    """Raised when a rating triple cannot be fed to the engine.

    Covers non-finite ratings, and deviations or volatilities that are
    non-positive, non-finite or out of range.
    """

    def __init__(self, field: str, value: object, reason: str) -> None:
        super().__init__(
            message=f"Invalid {field} {value!r}: {reason}",
            details={"field": field, "value": value, "reason": reason},
        )


class InvalidTeamAssignmentError(ValidationError):
    """Raised when a match is not exactly two teams of two distinct players."""

    def __init__(self, reason: str, player_ids: list[str]) -> None:
        super().__init__(
            message=f"Invalid team assignment: {reason}",
            details={"reason": reason, "player_ids": player_ids},
        )


class InvalidMatchScoreError(ValidationError):
    """Raised when team or set scores are invalid."""

    def __init__(self, reason: str, details: dict | None = None) -> None:
        super().__init__(
            message=f"Invalid match score: {reason}",
            details={"reason": reason, **(details or {})},
        )


# =============================================================================
# Rating Engine Errors
# =============================================================================


class RatingEngineError(PadelRankError):
    """Base class for rating calculation errors."""

    pass


class ConvergenceError(RatingEngineError):
    """Raised when the volatility solver exceeds its iteration cap."""

    def __init__(self, iterations: int, details: dict | None = None) -> None:
        super().__init__(
            message=f"Volatility solver did not converge after {iterations} "
            f"iterations",
            details={"iterations": iterations, **(details or {})},
        )
