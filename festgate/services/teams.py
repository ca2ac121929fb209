"""Team and member business logic.

Team size always stays within the event's [min_team_size, max_team_size]
bounds: creation, additions and removals are all checked against them, and
the team's total amount is recomputed from its member count after each
change.
"""
from decimal import Decimal
from typing import Iterable, List, Mapping, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload, selectinload

from festgate.core.constants import PAYMENT_STATUSES
from festgate.core.context import RequestContext
from festgate.core.exceptions import ConflictError, NotFoundError, PermissionDenied, ValidationError
from festgate.core.logging_config import get_logger
from festgate.core.roles import Role
from festgate.core.security import generate_member_token
from festgate.core.utils import utcnow
from festgate.db.models import Event, Member, Team, User
from festgate.services.events import get_event

logger = get_logger(__name__)

MemberData = Mapping[str, str]


def _check_unique_emails(members: Iterable[MemberData], existing: Iterable[str] = ()) -> None:
    seen = {email.lower() for email in existing}
    for member in members:
        email = member["email"].lower()
        if email in seen:
            raise ValidationError(f"Duplicate member email: {email}")
        seen.add(email)


def _check_registration_open(event: Event) -> None:
    if not event.is_active:
        raise ValidationError("Event is not active")
    if not event.registration_open:
        raise ValidationError("Registration is closed for this event")


def _build_member(event: Event, team: Team, position: int, data: MemberData) -> Member:
    return Member(
        team_id=team.id,
        position=position,
        name=data["name"],
        email=data["email"].lower(),
        college=data["college"],
        roll_number=data["roll_number"],
        qr_token=generate_member_token(event.slug, team.id, position),
    )


def _recompute_total(team: Team, event: Event) -> None:
    team.total_amount = Decimal(len(team.members)) * Decimal(event.registration_fee_per_member or 0)


def _team_query(db: Session):
    return db.query(Team).options(selectinload(Team.members), joinedload(Team.event))


def create_team(
    db: Session,
    actor: RequestContext,
    *,
    event_id: int,
    team_name: str,
    members: List[MemberData],
    lead_phone: Optional[str] = None,
) -> Team:
    """
    Register a team for an event with the acting user as its lead.

    Each member receives a personal QR token; the team's total amount is the
    member count times the event's per-member fee, with payment pending.
    """
    event = get_event(db, event_id)
    _check_registration_open(event)

    if event.max_teams is not None:
        registered = db.query(func.count(Team.id)).filter(
            Team.event_id == event.id, Team.is_active.is_(True)
        ).scalar()
        if registered >= event.max_teams:
            raise ValidationError("Maximum number of teams reached for this event")

    if db.query(Team).filter(Team.event_id == event.id, Team.lead_user_id == actor.user_id).first():
        raise ConflictError("You have already registered a team for this event")
    if db.query(Team).filter(Team.event_id == event.id, Team.team_name == team_name).first():
        raise ConflictError("Team name already taken for this event")

    if not event.min_team_size <= len(members) <= event.max_team_size:
        raise ValidationError(
            f"Team size must be between {event.min_team_size} and {event.max_team_size} members"
        )
    _check_unique_emails(members)

    lead = db.get(User, actor.user_id)
    if lead is None:
        raise NotFoundError("User not found")

    team = Team(
        event_id=event.id,
        team_name=team_name,
        lead_user_id=lead.id,
        lead_email=lead.email,
        lead_name=lead.name,
        lead_phone=lead_phone or lead.phone,
        payment_status="pending",
    )

    try:
        db.add(team)
        db.flush()  # assigns team.id, which is part of every member token
        for position, data in enumerate(members, start=1):
            team.members.append(_build_member(event, team, position, data))
        _recompute_total(team, event)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Team conflicts with an existing registration")

    logger.info(
        "team_created",
        team_id=team.id,
        event_id=event.id,
        member_count=len(members),
        lead_user_id=lead.id,
    )
    return get_team(db, team.id, actor)


def get_team(db: Session, team_id: int, actor: RequestContext) -> Team:
    """A team, visible to its own lead and to organizers."""
    team = _team_query(db).filter(Team.id == team_id).first()
    if team is None:
        raise NotFoundError("Team not found")
    if team.lead_user_id != actor.user_id and not actor.can(Role.ORGANIZER):
        raise PermissionDenied("Not authorized to access this team")
    return team


def list_my_teams(db: Session, actor: RequestContext) -> List[Team]:
    return (
        _team_query(db)
        .filter(Team.lead_user_id == actor.user_id)
        .order_by(Team.created_at.desc(), Team.id.desc())
        .all()
    )


def update_team(
    db: Session,
    team_id: int,
    actor: RequestContext,
    *,
    team_name: Optional[str] = None,
    lead_phone: Optional[str] = None,
    payment_status: Optional[str] = None,
    is_active: Optional[bool] = None,
) -> Team:
    """
    Update team details.

    Leads may rename their team and change the contact phone. Payment status
    and deactivation are organizer decisions; a deactivated team's member
    tokens stop resolving at the gate and the canteen.
    """
    team = get_team(db, team_id, actor)

    if (payment_status is not None or is_active is not None) and not actor.can(Role.ORGANIZER):
        raise PermissionDenied("Only organizers can change payment or active status")

    if team_name is not None and team_name != team.team_name:
        taken = db.query(Team).filter(
            Team.event_id == team.event_id, Team.team_name == team_name, Team.id != team.id
        ).first()
        if taken:
            raise ConflictError("Team name already taken for this event")
        team.team_name = team_name

    if lead_phone is not None:
        team.lead_phone = lead_phone

    if payment_status is not None:
        if payment_status not in PAYMENT_STATUSES:
            raise ValidationError(f"{payment_status} is not a valid payment status")
        team.payment_status = payment_status
        team.paid_at = utcnow() if payment_status == "completed" else None

    if is_active is not None:
        team.is_active = is_active

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Team name already taken for this event")

    logger.info("team_updated", team_id=team.id, actor_id=actor.user_id)
    return get_team(db, team.id, actor)


def add_members(db: Session, team_id: int, actor: RequestContext, members: List[MemberData]) -> Team:
    """Append members to a team while registration is open."""
    team = get_team(db, team_id, actor)
    event = team.event
    _check_registration_open(event)

    if not members:
        raise ValidationError("Provide at least one member to add")
    if len(team.members) + len(members) > event.max_team_size:
        raise ValidationError(f"Team size cannot exceed {event.max_team_size} members")
    _check_unique_emails(members, existing=[m.email for m in team.members])

    next_position = max((m.position for m in team.members), default=0) + 1
    try:
        for offset, data in enumerate(members):
            team.members.append(_build_member(event, team, next_position + offset, data))
        _recompute_total(team, event)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Member conflicts with an existing registration")

    logger.info("team_members_added", team_id=team.id, added=len(members), actor_id=actor.user_id)
    return get_team(db, team.id, actor)


def remove_member(db: Session, team_id: int, member_id: int, actor: RequestContext) -> Team:
    """
    Remove a member who has not checked in yet.

    The member row is deleted, so their token no longer resolves; ledger
    rows keep their own snapshot of the member.
    """
    team = get_team(db, team_id, actor)
    event = team.event
    _check_registration_open(event)

    member = next((m for m in team.members if m.id == member_id), None)
    if member is None:
        raise NotFoundError("Member not found")
    if member.is_checked_in:
        raise ValidationError("Cannot remove a member who has already checked in")
    if len(team.members) - 1 < event.min_team_size:
        raise ValidationError(f"Team must have at least {event.min_team_size} members")

    team.members.remove(member)
    _recompute_total(team, event)
    db.commit()

    logger.info("team_member_removed", team_id=team.id, member_id=member_id, actor_id=actor.user_id)
    return get_team(db, team.id, actor)


def get_member(db: Session, team_id: int, member_id: int, actor: RequestContext) -> Member:
    team = get_team(db, team_id, actor)
    member = next((m for m in team.members if m.id == member_id), None)
    if member is None:
        raise NotFoundError("Member not found")
    return member
