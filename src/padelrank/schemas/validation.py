# src/padelrank/schemas/validation.py

"""Pydantic schemas describing a match's validation window."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class ValidationStatus(str, Enum):
    """Where a match is in its dispute window."""

    PENDING = "pending"
    VALIDATED = "validated"
    DISPUTED = "disputed"
    CANCELLED = "cancelled"


class ConfirmationStatus(str, Enum):
    """Aggregate of the players' confirm/reject responses."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"


class MatchValidationState(BaseModel):
    """Snapshot of the fields that gate applying a match's rating changes."""

    rating_applied: bool = False
    all_confirmed: bool = False
    confirmation_status: ConfirmationStatus = ConfirmationStatus.PENDING
    validation_status: ValidationStatus = ValidationStatus.PENDING
    validation_deadline: datetime | None = None
    report_count: int = Field(0, ge=0)
