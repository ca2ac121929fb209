"""Event business logic."""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from festgate.core.constants import EVENT_TYPES
from festgate.core.context import RequestContext
from festgate.core.exceptions import ConflictError, NotFoundError, ValidationError
from festgate.core.logging_config import get_logger
from festgate.core.security import generate_canteen_token
from festgate.core.utils import to_utc
from festgate.db.models import Event

logger = get_logger(__name__)


def _check_schedule(start_date: datetime, end_date: datetime) -> None:
    if to_utc(end_date) <= to_utc(start_date):
        raise ValidationError("End date must be after start date")


def _check_team_sizes(min_team_size: int, max_team_size: int) -> None:
    if min_team_size < 1:
        raise ValidationError("Minimum team size must be at least 1")
    if max_team_size < min_team_size:
        raise ValidationError("Maximum team size must be greater than or equal to minimum team size")


def create_event(
    db: Session,
    actor: RequestContext,
    *,
    name: str,
    slug: str,
    description: str,
    start_date: datetime,
    end_date: datetime,
    venue: str,
    type: str = "hackathon",
    registration_fee_per_member: Decimal = Decimal("0"),
    min_team_size: int = 1,
    max_team_size: int = 4,
    max_teams: Optional[int] = None,
    is_active: bool = True,
    registration_open: bool = True,
) -> Event:
    """Create an event and mint its canteen token."""
    if type not in EVENT_TYPES:
        raise ValidationError(f"{type} is not a valid event type")
    if registration_fee_per_member < 0:
        raise ValidationError("Registration fee cannot be negative")
    _check_schedule(start_date, end_date)
    _check_team_sizes(min_team_size, max_team_size)

    if db.query(Event).filter(Event.slug == slug).first():
        raise ConflictError(f"An event with slug '{slug}' already exists")

    event = Event(
        name=name,
        slug=slug,
        description=description,
        type=type,
        start_date=to_utc(start_date),
        end_date=to_utc(end_date),
        venue=venue,
        registration_fee_per_member=registration_fee_per_member,
        min_team_size=min_team_size,
        max_team_size=max_team_size,
        max_teams=max_teams,
        canteen_token=generate_canteen_token(slug),
        is_active=is_active,
        registration_open=registration_open,
        created_by=actor.user_id,
    )

    try:
        db.add(event)
        db.commit()
        db.refresh(event)
    except IntegrityError:
        db.rollback()
        raise ConflictError(f"An event with slug '{slug}' already exists")

    logger.info("event_created", event_id=event.id, slug=event.slug, actor_id=actor.user_id)
    return event


def get_event(db: Session, event_id: int) -> Event:
    event = db.get(Event, event_id)
    if event is None:
        raise NotFoundError("Event not found")
    return event


def list_events(db: Session, active: Optional[bool] = None) -> List[Event]:
    """All events, soonest first; optionally only active (or inactive) ones."""
    query = db.query(Event)
    if active is not None:
        query = query.filter(Event.is_active.is_(active))
    return query.order_by(Event.start_date.asc(), Event.id.asc()).all()


UPDATABLE_FIELDS = (
    "name", "description", "type", "start_date", "end_date", "venue",
    "registration_fee_per_member", "min_team_size", "max_team_size", "max_teams",
    "is_active", "registration_open",
)


def update_event(db: Session, event_id: int, actor: RequestContext, **changes) -> Event:
    """
    Partially update an event.

    The slug and canteen token are fixed at creation: printed canteen posters
    must keep working for the event's whole life.
    """
    event = get_event(db, event_id)
    # max_teams is the only field where an explicit null means something
    changes = {k: v for k, v in changes.items() if v is not None or k == "max_teams"}

    unknown = set(changes) - set(UPDATABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Cannot update field(s): {', '.join(sorted(unknown))}")

    if "type" in changes and changes["type"] not in EVENT_TYPES:
        raise ValidationError(f"{changes['type']} is not a valid event type")
    if changes.get("registration_fee_per_member") is not None and changes["registration_fee_per_member"] < 0:
        raise ValidationError("Registration fee cannot be negative")

    start_date = changes.get("start_date") or event.start_date
    end_date = changes.get("end_date") or event.end_date
    _check_schedule(start_date, end_date)
    _check_team_sizes(
        changes.get("min_team_size", event.min_team_size),
        changes.get("max_team_size", event.max_team_size),
    )

    for field, value in changes.items():
        if field in ("start_date", "end_date"):
            value = to_utc(value)
        setattr(event, field, value)

    db.commit()
    db.refresh(event)

    logger.info("event_updated", event_id=event.id, fields=sorted(changes), actor_id=actor.user_id)
    return event
