"""Organizer dashboard aggregates."""
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from festgate.core.cache import get_or_fetch, global_cache, stats_cache_key
from festgate.core.config import settings
from festgate.core.constants import CHECKIN_FILTERS, PAYMENT_STATUSES
from festgate.core.exceptions import ValidationError
from festgate.core.logging_config import get_logger
from festgate.core.utils import percentage
from festgate.db.models import FoodLog, Member, Team
from festgate.services.events import get_event
from festgate.services.utils import paginate, persistence_guard

logger = get_logger(__name__)


def _event_details(event) -> Dict[str, Any]:
    return {
        "id": event.id,
        "name": event.name,
        "slug": event.slug,
        "start_date": event.start_date,
        "end_date": event.end_date,
        "venue": event.venue,
    }


def _compute_stats(db: Session, event_id: Optional[int]) -> Dict[str, Any]:
    """
    Build one statistics snapshot.

    Checked-in numbers come from member state rather than the attendance
    ledger, so a member scanned twice (or by two gates at once) counts once.
    """
    teams = db.query(func.count(Team.id)).filter(Team.is_active.is_(True))
    members = db.query(func.count(Member.id)).join(Member.team).filter(Team.is_active.is_(True))
    food = db.query(func.count(FoodLog.id)).filter(FoodLog.eligible.is_(True))

    if event_id is not None:
        teams = teams.filter(Team.event_id == event_id)
        members = members.filter(Team.event_id == event_id)
        food = food.filter(FoodLog.event_id == event_id)

    total_teams = teams.scalar()
    total_members = members.scalar()
    total_checked_in = members.filter(Member.is_checked_in.is_(True)).scalar()
    # Counter scans carry a meal type; participant self-checks do not
    food_distributed = food.filter(FoodLog.meal_type.isnot(None)).scalar()
    eligible_checks = food.filter(FoodLog.meal_type.is_(None)).scalar()

    return {
        "total_teams": total_teams,
        "total_members": total_members,
        "total_checked_in": total_checked_in,
        "pending_check_in": total_members - total_checked_in,
        "total_food_distributed": food_distributed,
        "eligible_food_checks": eligible_checks,
        "check_in_percentage": percentage(total_checked_in, total_members),
    }


def get_stats(db: Session, event_id: Optional[int] = None) -> Dict[str, Any]:
    """Per-event (or platform-wide) statistics, cached for STATS_CACHE_TTL seconds."""
    with persistence_guard(db, "dashboard_stats"):
        event = get_event(db, event_id) if event_id is not None else None

        stats = get_or_fetch(
            global_cache,
            stats_cache_key(event_id),
            lambda: _compute_stats(db, event_id),
            ttl_seconds=settings.STATS_CACHE_TTL,
        )

    result = dict(stats)
    if event is not None:
        result["event"] = _event_details(event)
    return result


def list_teams(
    db: Session,
    event_id: int,
    page: int = 1,
    limit: int = 20,
    search: Optional[str] = None,
    payment_status: Optional[str] = None,
    check_in_status: Optional[str] = None,
) -> Tuple[List[Dict[str, Any]], int]:
    """
    One page of an event's teams, newest first, with member counts.

    check_in_status narrows to teams where every member ("completed"), some
    but not all ("partial") or no member ("none") has checked in.
    """
    if payment_status is not None and payment_status not in PAYMENT_STATUSES:
        raise ValidationError(f"{payment_status} is not a valid payment status")
    if check_in_status is not None and check_in_status not in CHECKIN_FILTERS:
        raise ValidationError(f"{check_in_status} is not a valid check-in status")

    get_event(db, event_id)

    member_count = (
        select(func.count(Member.id))
        .where(Member.team_id == Team.id)
        .correlate(Team)
        .scalar_subquery()
    )
    checked_in_count = (
        select(func.count(Member.id))
        .where(Member.team_id == Team.id, Member.is_checked_in.is_(True))
        .correlate(Team)
        .scalar_subquery()
    )

    query = (
        db.query(Team, member_count.label("member_count"), checked_in_count.label("checked_in_count"))
        .options(selectinload(Team.members))
        .filter(Team.event_id == event_id)
    )

    if search:
        query = query.filter(Team.team_name.ilike(f"%{search.strip()}%"))
    if payment_status:
        query = query.filter(Team.payment_status == payment_status)
    if check_in_status == "completed":
        query = query.filter(member_count > 0, checked_in_count == member_count)
    elif check_in_status == "partial":
        query = query.filter(checked_in_count > 0, checked_in_count < member_count)
    elif check_in_status == "none":
        query = query.filter(checked_in_count == 0)

    query = query.order_by(Team.created_at.desc(), Team.id.desc())

    with persistence_guard(db, "dashboard_teams"):
        rows, total = paginate(query, page, limit)

    items = [
        {"team": team, "member_count": members, "checked_in_count": checked_in}
        for team, members, checked_in in rows
    ]
    return items, total
