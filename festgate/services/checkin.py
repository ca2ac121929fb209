"""Check-in business logic.

A member moves from not-checked-in to checked-in exactly once. Staff scans
are evaluated against ordered preconditions (first failure wins); the
transition itself is a single conditional UPDATE so two gate devices
scanning the same badge at the same instant produce one Success and one
AlreadyCheckedIn, never two Successes.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from festgate.core.cache import invalidate_event_stats
from festgate.core.constants import UNKNOWN
from festgate.core.context import RequestContext
from festgate.core.exceptions import NotFoundError
from festgate.core.logging_config import get_logger
from festgate.core.sanitization import truncate_qr_token
from festgate.core.utils import utcnow
from festgate.db.models import AttendanceLog, Event, Member, Team
from festgate.services import ledger
from festgate.services.tokens import ResolutionStatus, resolve_member_token
from festgate.services.utils import persistence_guard, retain_loaded_state

logger = get_logger(__name__)


class CheckInOutcome(str, Enum):
    SUCCESS = "success"
    ALREADY_CHECKED_IN = "already_checked_in"
    REJECTED = "rejected"


class RejectReason(str, Enum):
    TOKEN_NOT_FOUND = "TOKEN_NOT_FOUND"
    WRONG_TOKEN_CLASS = "WRONG_TOKEN_CLASS"
    EVENT_MISMATCH = "EVENT_MISMATCH"
    EVENT_INACTIVE = "EVENT_INACTIVE"


REJECT_MESSAGES = {
    RejectReason.TOKEN_NOT_FOUND: "Member not found with provided QR token",
    RejectReason.WRONG_TOKEN_CLASS: "This is a canteen QR code, not a member badge",
    RejectReason.EVENT_MISMATCH: "Member not registered for this event",
    RejectReason.EVENT_INACTIVE: "Event is not active",
}

OUTCOME_MESSAGES = {
    CheckInOutcome.SUCCESS: "Member checked in successfully",
    CheckInOutcome.ALREADY_CHECKED_IN: "Member already checked in",
}


@dataclass
class CheckInResult:
    outcome: CheckInOutcome
    member: Optional[Member] = None
    team: Optional[Team] = None
    event: Optional[Event] = None
    reason: Optional[RejectReason] = None

    @property
    def success(self) -> bool:
        return self.outcome is not CheckInOutcome.REJECTED

    @property
    def already_checked_in(self) -> bool:
        return self.outcome is CheckInOutcome.ALREADY_CHECKED_IN

    @property
    def message(self) -> str:
        if self.reason is not None:
            return REJECT_MESSAGES[self.reason]
        return OUTCOME_MESSAGES[self.outcome]


def _transition(db: Session, member: Member, actor: RequestContext) -> bool:
    """
    Compare-and-set is_checked_in false -> true; True if this call won.

    The member is re-read before the commit and stays loaded after it, so a
    committed check-in never depends on a later round trip to report itself.
    """
    result = db.execute(
        update(Member)
        .where(Member.id == member.id, Member.is_checked_in.is_(False))
        .values(is_checked_in=True, check_in_time=utcnow(), checked_in_by=actor.user_id)
        .execution_options(synchronize_session=False)
    )
    db.refresh(member, ["is_checked_in", "check_in_time", "checked_in_by"])
    with retain_loaded_state(db):
        db.commit()
    return result.rowcount == 1



def _evaluate(db: Session, qr_token: str, event_id: int, actor: RequestContext) -> CheckInResult:
    resolution = resolve_member_token(db, qr_token)

    if resolution.status is ResolutionStatus.WRONG_CLASS:
        return CheckInResult(CheckInOutcome.REJECTED, reason=RejectReason.WRONG_TOKEN_CLASS)
    if not resolution.found:
        return CheckInResult(CheckInOutcome.REJECTED, reason=RejectReason.TOKEN_NOT_FOUND)

    member, team, event = resolution.member, resolution.team, resolution.event

    if team.event_id != event_id:
        return CheckInResult(
            CheckInOutcome.REJECTED, member=member, team=team, event=event,
            reason=RejectReason.EVENT_MISMATCH,
        )
    if not event.is_active:
        return CheckInResult(
            CheckInOutcome.REJECTED, member=member, team=team, event=event,
            reason=RejectReason.EVENT_INACTIVE,
        )

    outcome = CheckInOutcome.SUCCESS if _transition(db, member, actor) else CheckInOutcome.ALREADY_CHECKED_IN
    return CheckInResult(outcome, member=member, team=team, event=event)


def _ledger_entry(result: CheckInResult, qr_token: str, event_id: int, actor: RequestContext) -> AttendanceLog:
    member, team = result.member, result.team
    return AttendanceLog(
        # Rejections are filed under the scanning station's event
        event_id=event_id,
        team_id=team.id if team else None,
        member_id=member.id if member else None,
        team_name=team.team_name if team else None,
        member_name=member.name if member else UNKNOWN,
        member_email=member.email if member else UNKNOWN,
        qr_token=truncate_qr_token(qr_token),
        scanned_at=utcnow(),
        scanned_by=actor.user_id,
        scanned_by_name=actor.name,
        success=result.success,
        already_checked_in=result.already_checked_in,
        reason=result.reason.value if result.reason else None,
        error_message=result.message if result.reason else None,
    )


def check_in(db: Session, qr_token: str, event_id: int, actor: RequestContext) -> CheckInResult:
    """
    Scan a member badge at an event's gate.

    Returns a CheckInResult for every precondition failure instead of
    raising; only PersistenceUnavailable escapes. Exactly one attendance
    ledger row is appended per call, whatever the outcome.
    """
    with persistence_guard(db, "check_in"):
        result = _evaluate(db, qr_token, event_id, actor)

    member_id = result.member.id if result.member else None

    ledger.append(db, _ledger_entry(result, qr_token, event_id, actor))

    if result.outcome is CheckInOutcome.SUCCESS:
        invalidate_event_stats(event_id)
        logger.info("checkin_recorded", event_id=event_id, member_id=member_id, staff_id=actor.user_id)
    elif result.outcome is CheckInOutcome.ALREADY_CHECKED_IN:
        logger.info("checkin_repeated", event_id=event_id, member_id=member_id, staff_id=actor.user_id)
    else:
        logger.info(
            "checkin_rejected",
            event_id=event_id,
            member_id=member_id,
            staff_id=actor.user_id,
            reason=result.reason.value,
        )

    return result


def get_check_in_status(db: Session, qr_token: str) -> dict:
    """Read-only projection of a member's check-in state."""
    with persistence_guard(db, "check_in_status"):
        resolution = resolve_member_token(db, qr_token)
        if not resolution.found:
            raise NotFoundError(REJECT_MESSAGES[RejectReason.TOKEN_NOT_FOUND])

        return {
            "is_checked_in": resolution.member.is_checked_in,
            "check_in_time": resolution.member.check_in_time,
            "member_name": resolution.member.name,
            "team_name": resolution.team.team_name,
            "event_name": resolution.event.name,
        }
