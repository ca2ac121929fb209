"""QR token resolution.

Two token classes share one opaque string space: member tokens (printed on
each participant's badge) and canteen tokens (one per event, posted at the
food counter). Resolution never writes and never tells the caller *why* a
token failed to resolve beyond "not found" or "wrong class".
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from festgate.core.sanitization import MAX_QR_TOKEN_LENGTH
from festgate.db.models import Event, Member, Team


class TokenClass(str, Enum):
    MEMBER = "member"
    CANTEEN = "canteen"


class ResolutionStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    WRONG_CLASS = "wrong_class"


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving one token.

    For member tokens `member`, `team` and `event` are all set; for canteen
    tokens only `event` is.
    """

    status: ResolutionStatus
    token_class: Optional[TokenClass] = None
    member: Optional[Member] = None
    team: Optional[Team] = None
    event: Optional[Event] = None

    @property
    def found(self) -> bool:
        return self.status is ResolutionStatus.FOUND


NOT_FOUND = Resolution(status=ResolutionStatus.NOT_FOUND)


def _find_member(db: Session, token: str) -> Optional[Member]:
    # Members of deactivated teams are invisible to scanning
    return (
        db.query(Member)
        .join(Member.team)
        .options(joinedload(Member.team).joinedload(Team.event))
        .filter(Member.qr_token == token, Team.is_active.is_(True))
        .first()
    )


def _find_canteen_event(db: Session, token: str) -> Optional[Event]:
    return db.query(Event).filter(Event.canteen_token == token).first()


def resolve(db: Session, token: Optional[str]) -> Resolution:
    """Resolve a token of either class."""
    # Nothing longer than a token column can match one
    if not token or len(token) > MAX_QR_TOKEN_LENGTH:
        return NOT_FOUND

    member = _find_member(db, token)
    if member is not None:
        return Resolution(
            status=ResolutionStatus.FOUND,
            token_class=TokenClass.MEMBER,
            member=member,
            team=member.team,
            event=member.team.event,
        )

    event = _find_canteen_event(db, token)
    if event is not None:
        return Resolution(
            status=ResolutionStatus.FOUND,
            token_class=TokenClass.CANTEEN,
            event=event,
        )

    return NOT_FOUND


def resolve_expecting(db: Session, token: Optional[str], expected: TokenClass) -> Resolution:
    """Resolve a token that must be of the `expected` class."""
    resolution = resolve(db, token)
    if resolution.found and resolution.token_class is not expected:
        return Resolution(status=ResolutionStatus.WRONG_CLASS, token_class=resolution.token_class)
    return resolution


def resolve_member_token(db: Session, token: Optional[str]) -> Resolution:
    return resolve_expecting(db, token, TokenClass.MEMBER)


def resolve_canteen_token(db: Session, token: Optional[str]) -> Resolution:
    return resolve_expecting(db, token, TokenClass.CANTEEN)
