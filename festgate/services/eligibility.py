"""Food eligibility business logic.

Eligibility is a pure function of attendance: a member may eat at their own
event's canteen once they have checked in at the gate, nothing else
(payment, team completeness) is consulted. Evaluation only reads; the one
write is the food ledger row appended afterwards.
"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy.orm import Session

from festgate.core.cache import invalidate_event_stats
from festgate.core.constants import DEFAULT_MEAL_TYPE, UNKNOWN
from festgate.core.context import RequestContext
from festgate.core.logging_config import get_logger
from festgate.core.sanitization import truncate_qr_token
from festgate.core.utils import utcnow
from festgate.db.models import Event, FoodLog, Member, Team
from festgate.services import ledger
from festgate.services.tokens import resolve_canteen_token, resolve_member_token
from festgate.services.utils import persistence_guard

logger = get_logger(__name__)


class IneligibleReason(str, Enum):
    INVALID_CANTEEN_TOKEN = "INVALID_CANTEEN_TOKEN"
    INVALID_MEMBER_TOKEN = "INVALID_MEMBER_TOKEN"
    WRONG_EVENT = "WRONG_EVENT"
    EVENT_INACTIVE = "EVENT_INACTIVE"
    NOT_CHECKED_IN = "NOT_CHECKED_IN"


INELIGIBLE_MESSAGES = {
    IneligibleReason.INVALID_CANTEEN_TOKEN: "Invalid event canteen QR code",
    IneligibleReason.INVALID_MEMBER_TOKEN: "Member not found with provided QR token",
    IneligibleReason.WRONG_EVENT: "You are not registered for this event",
    IneligibleReason.EVENT_INACTIVE: "Event is not active",
    IneligibleReason.NOT_CHECKED_IN: "You must complete check-in at the gate first",
}

ELIGIBLE_MESSAGE = "You are eligible for food!"


@dataclass
class EligibilityResult:
    eligible: bool
    member: Optional[Member] = None
    team: Optional[Team] = None
    event: Optional[Event] = None
    reason: Optional[IneligibleReason] = None

    @property
    def check_in_time(self) -> Optional[datetime]:
        return self.member.check_in_time if self.member is not None else None

    @property
    def message(self) -> str:
        if self.reason is not None:
            return INELIGIBLE_MESSAGES[self.reason]
        return ELIGIBLE_MESSAGE


def evaluate(db: Session, canteen_token: str, member_token: str) -> EligibilityResult:
    """Decide eligibility without writing anything."""
    station = resolve_canteen_token(db, canteen_token)
    if not station.found:
        return EligibilityResult(False, reason=IneligibleReason.INVALID_CANTEEN_TOKEN)
    event = station.event

    resolution = resolve_member_token(db, member_token)
    if not resolution.found:
        return EligibilityResult(False, event=event, reason=IneligibleReason.INVALID_MEMBER_TOKEN)
    member, team = resolution.member, resolution.team

    if team.event_id != event.id:
        return EligibilityResult(False, member=member, team=team, event=event, reason=IneligibleReason.WRONG_EVENT)
    if not event.is_active:
        return EligibilityResult(False, member=member, team=team, event=event, reason=IneligibleReason.EVENT_INACTIVE)
    if not member.is_checked_in:
        return EligibilityResult(False, member=member, team=team, event=event, reason=IneligibleReason.NOT_CHECKED_IN)

    return EligibilityResult(True, member=member, team=team, event=event)


def _ledger_entry(
    result: EligibilityResult,
    canteen_token: str,
    member_token: str,
    actor: RequestContext,
    meal_type: Optional[str],
) -> FoodLog:
    member, team, event = result.member, result.team, result.event
    return FoodLog(
        event_id=event.id if event else None,
        team_id=team.id if team else None,
        member_id=member.id if member else None,
        team_name=team.team_name if team else None,
        member_name=member.name if member else UNKNOWN,
        member_email=member.email if member else UNKNOWN,
        member_qr_token=truncate_qr_token(member_token),
        event_canteen_qr=truncate_qr_token(canteen_token),
        eligible=result.eligible,
        reason=result.reason.value if result.reason else None,
        meal_type=meal_type,
        scanned_at=utcnow(),
        scanned_by=actor.user_id,
        scanned_by_name=actor.name,
    )


def _evaluate_and_log(
    db: Session,
    canteen_token: str,
    member_token: str,
    actor: RequestContext,
    meal_type: Optional[str],
    operation: str,
) -> EligibilityResult:
    with persistence_guard(db, operation):
        result = evaluate(db, canteen_token, member_token)

    event_id = result.event.id if result.event else None
    member_id = result.member.id if result.member else None

    ledger.append(db, _ledger_entry(result, canteen_token, member_token, actor, meal_type))

    if result.eligible:
        invalidate_event_stats(event_id)
    logger.info(
        operation,
        event_id=event_id,
        member_id=member_id,
        eligible=result.eligible,
        reason=result.reason.value if result.reason else None,
        meal_type=meal_type,
        actor_id=actor.user_id,
    )
    return result


def check_eligibility(
    db: Session,
    canteen_token: str,
    member_token: str,
    actor: RequestContext,
) -> EligibilityResult:
    """
    Participant-side eligibility query.

    Safe to repeat any number of times (e.g. at every meal): Member and
    Event rows are never modified, each call only appends one food ledger
    row.
    """
    return _evaluate_and_log(db, canteen_token, member_token, actor, None, "eligibility_checked")


def record_food_scan(
    db: Session,
    canteen_token: str,
    member_token: str,
    actor: RequestContext,
    meal_type: Optional[str] = None,
) -> EligibilityResult:
    """
    Counter-side scan by canteen staff.

    Same decision rules as check_eligibility; the ledger row additionally
    records the meal, which is what the dashboard counts as food served.
    """
    return _evaluate_and_log(
        db, canteen_token, member_token, actor, meal_type or DEFAULT_MEAL_TYPE, "food_scan_recorded"
    )
