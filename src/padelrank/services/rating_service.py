# src/padelrank/services/rating_service.py

"""Business logic for rating a padel match and applying the result."""

from __future__ import annotations

import enum
import logging
from collections.abc import Sequence
from datetime import datetime, timedelta, timezone

from padelrank import config
from padelrank.exceptions import InvalidTeamAssignmentError
from padelrank.rating.glicko2_engine import (
    Glicko2Engine,
    RatingState,
    compute_match_ratings,
)
from padelrank.schemas.match import MatchScore
from padelrank.schemas.profile import ProfileRating
from padelrank.schemas.rating_change import RatingChangeRecord
from padelrank.schemas.validation import (
    ConfirmationStatus,
    MatchValidationState,
    ValidationStatus,
)
from padelrank.scoring import ScoreMode, team_scores

logger = logging.getLogger(__name__)


class ApplicationDecision(str, enum.Enum):
    """Outcome of checking whether a match's rating changes may be applied."""

    ALREADY_APPLIED = "already_applied"
    WAIT = "wait"
    INVALID_STATUS = "invalid_status"
    DISPUTED = "disputed"
    APPLY_CONFIRMED = "apply_confirmed"
    APPLY_EXPIRED = "apply_expired"

    @property
    def should_apply(self) -> bool:
        return self in (
            ApplicationDecision.APPLY_CONFIRMED,
            ApplicationDecision.APPLY_EXPIRED,
        )


def _validate_players(players: Sequence[tuple[str, RatingState]]) -> None:
    """
    Validates the positional team assignment.

    Raises:
        InvalidTeamAssignmentError: If there are not exactly four players,
            or the same player appears more than once.
    """
    player_ids = [player_id for player_id, _ in players]
    if len(players) != 4:
        raise InvalidTeamAssignmentError(
            f"a doubles match requires 4 players, got {len(players)}", player_ids
        )
    if len(set(player_ids)) != len(player_ids):
        raise InvalidTeamAssignmentError("duplicate player(s) in match", player_ids)


def calculate_rating_changes(
    players: Sequence[tuple[str, RatingState]],
    team1_score: int,
    team2_score: int,
    engine: Glicko2Engine | None = None,
) -> list[RatingChangeRecord]:
    """
    Computes the rating change for every player of a match.

    `players` is four (player_id, RatingState) pairs in positional order:
    team 1 player 1, team 1 player 2, team 2 player 1, team 2 player 2.

    Nothing is applied here. The returned records are held until the
    validation window closes, then passed to apply_rating_changes or
    revert_rating_changes.
    """
    _validate_players(players)

    before = [state for _, state in players]
    updated = compute_match_ratings(*before, team1_score, team2_score, engine=engine)

    records = [
        RatingChangeRecord.from_states(player_id, old, new)
        for (player_id, old), new in zip(players, updated.players)
    ]

    for record in records:
        logger.info(
            "Calculated rating change for player %s: %.1f -> %.1f",
            record.player_id,
            record.rating_before,
            record.rating_after,
            extra={
                "player_id": record.player_id,
                "rating_change": record.rating_change,
                "rd_change": record.rd_change,
                "vol_change": record.vol_change,
            },
        )
    return records


def rate_match(
    players: Sequence[tuple[str, ProfileRating]],
    match_score: MatchScore,
    mode: ScoreMode = "winner",
    engine: Glicko2Engine | None = None,
) -> list[RatingChangeRecord]:
    """
    Rates a completed match straight from stored profile fields.

    This service is responsible for:
    1. Decoding each profile's rating fields, with defaults for new players
    2. Validating the set scores and deriving the team score pair
    3. Computing the rating change records
    """
    states = [(player_id, profile.to_rating_state()) for player_id, profile in players]
    team1_score, team2_score = team_scores(match_score, mode)
    return calculate_rating_changes(states, team1_score, team2_score, engine=engine)


def validation_deadline(
    completed_at: datetime, hours: int = config.DISPUTE_WINDOW_HOURS
) -> datetime:
    """When the dispute window of a match completed at `completed_at` closes."""
    return completed_at + timedelta(hours=hours)


def _as_utc(moment: datetime) -> datetime:
    # Naive timestamps from the store are UTC.
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def evaluate_rating_application(
    state: MatchValidationState, now: datetime | None = None
) -> ApplicationDecision:
    """
    Decides whether a match's pre-computed rating changes may be applied.

    Ratings apply immediately once every player has confirmed, or otherwise
    once the validation deadline has passed. A match with too many reports
    or a rejection is disputed instead.
    """
    if state.rating_applied:
        return ApplicationDecision.ALREADY_APPLIED

    now = _as_utc(now or datetime.now(timezone.utc))

    confirmed = (
        state.all_confirmed
        and state.confirmation_status == ConfirmationStatus.CONFIRMED
    )
    expired = (
        state.validation_deadline is not None
        and _as_utc(state.validation_deadline) <= now
    )

    if not confirmed and not expired:
        logger.debug(
            "Validation conditions not met",
            extra={"all_confirmed": state.all_confirmed, "expired": expired},
        )
        return ApplicationDecision.WAIT

    if state.validation_status not in (
        ValidationStatus.PENDING,
        ValidationStatus.VALIDATED,
    ):
        logger.warning(
            "Match not in a valid status for rating application: %s",
            state.validation_status.value,
        )
        return ApplicationDecision.INVALID_STATUS

    if (
        state.report_count >= config.DISPUTE_THRESHOLD
        or state.confirmation_status == ConfirmationStatus.REJECTED
    ):
        logger.warning(
            "Match has been disputed",
            extra={
                "report_count": state.report_count,
                "confirmation_status": state.confirmation_status.value,
            },
        )
        return ApplicationDecision.DISPUTED

    if confirmed:
        return ApplicationDecision.APPLY_CONFIRMED
    return ApplicationDecision.APPLY_EXPIRED


def apply_rating_changes(
    records: Sequence[RatingChangeRecord],
) -> dict[str, ProfileRating]:
    """Profile fields to write for each player once changes are validated."""
    return {
        record.player_id: ProfileRating.from_rating_state(record.after)
        for record in records
    }


def revert_rating_changes(
    records: Sequence[RatingChangeRecord],
) -> dict[str, ProfileRating]:
    """Profile fields that restore each player to before a disputed match."""
    logger.info("Reverting %d rating change(s)", len(records))
    return {
        record.player_id: ProfileRating.from_rating_state(record.before)
        for record in records
    }
