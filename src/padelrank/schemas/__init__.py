# src/padelrank/schemas/__init__.py

"""Pydantic schemas for validation and serialization."""

from .common import RatingInfo
from .match import MatchScore, SetScore
from .profile import ProfileRating
from .rating_change import RatingChangeRecord
from .validation import ConfirmationStatus, MatchValidationState, ValidationStatus

__all__ = [
    # Common
    "RatingInfo",
    # Match
    "MatchScore",
    "SetScore",
    # Profile
    "ProfileRating",
    # Rating change
    "RatingChangeRecord",
    # Validation
    "ConfirmationStatus",
    "MatchValidationState",
    "ValidationStatus",
]
