"""Attendance and food ledger.

Append-only audit trail of scan attempts. Appends are best-effort: by the
time a ledger row is written the scan decision (and any check-in) is already
committed, and a failed append must never undo or fail that decision.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterator, List, Optional, Tuple, Union

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from festgate.core.logging_config import get_logger
from festgate.core.utils import to_utc
from festgate.db.models import AttendanceLog, FoodLog
from festgate.services.utils import paginate

logger = get_logger(__name__)

LedgerEntry = Union[AttendanceLog, FoodLog]


@dataclass
class LedgerFilters:
    """Optional narrowing applied to ledger queries within one event."""

    team_id: Optional[int] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    search: Optional[str] = None
    eligible: Optional[bool] = None  # food ledger only


def _ledger_session(db: Session) -> Session:
    return Session(bind=db.get_bind(), expire_on_commit=False)


def append(db: Session, entry: LedgerEntry) -> Optional[LedgerEntry]:
    """
    Persist one ledger entry; returns None if the write failed.

    The write goes through its own short-lived session, so neither its
    commit nor a rollback after a failure touches the caller's objects.
    """
    session = _ledger_session(db)
    try:
        session.add(entry)
        session.commit()
        return entry
    except SQLAlchemyError as exc:
        session.rollback()
        logger.warning(
            "ledger_append_failed",
            ledger=entry.__tablename__,
            event_id=entry.event_id,
            member_id=entry.member_id,
            error=str(exc),
        )
        return None
    finally:
        session.close()


def _filtered(db: Session, model, event_id: int, filters: Optional[LedgerFilters]) -> Query:
    query = db.query(model).filter(model.event_id == event_id)
    if filters is None:
        return query

    if filters.team_id is not None:
        query = query.filter(model.team_id == filters.team_id)
    if filters.start_date is not None:
        query = query.filter(model.scanned_at >= to_utc(filters.start_date))
    if filters.end_date is not None:
        query = query.filter(model.scanned_at <= to_utc(filters.end_date))
    if filters.search:
        pattern = f"%{filters.search.strip()}%"
        query = query.filter(or_(
            model.member_name.ilike(pattern),
            model.member_email.ilike(pattern),
        ))
    if filters.eligible is not None and model is FoodLog:
        query = query.filter(FoodLog.eligible.is_(filters.eligible))
    return query


def _newest_first(query: Query, model) -> Query:
    # id breaks ties between scans stamped in the same instant
    return query.order_by(model.scanned_at.desc(), model.id.desc())


def query_attendance(
    db: Session,
    event_id: int,
    filters: Optional[LedgerFilters] = None,
    page: int = 1,
    limit: int = 20,
) -> Tuple[List[AttendanceLog], int]:
    """One page of check-in attempts for an event, newest first."""
    query = _newest_first(_filtered(db, AttendanceLog, event_id, filters), AttendanceLog)
    return paginate(query, page, limit)


def query_food(
    db: Session,
    event_id: int,
    filters: Optional[LedgerFilters] = None,
    page: int = 1,
    limit: int = 20,
) -> Tuple[List[FoodLog], int, Dict[str, int]]:
    """One page of food checks for an event plus eligible/ineligible totals."""
    base = _filtered(db, FoodLog, event_id, filters)
    items, total = paginate(_newest_first(base, FoodLog), page, limit)

    counts = dict(
        base.with_entities(FoodLog.eligible, func.count(FoodLog.id))
        .group_by(FoodLog.eligible)
        .all()
    )
    summary = {
        "total_eligible": counts.get(True, 0),
        "total_ineligible": counts.get(False, 0),
    }
    return items, total, summary


def iter_attendance(
    db: Session,
    event_id: int,
    filters: Optional[LedgerFilters] = None,
    batch_size: int = 500,
) -> Iterator[AttendanceLog]:
    """Stream every matching check-in attempt, newest first."""
    query = _newest_first(_filtered(db, AttendanceLog, event_id, filters), AttendanceLog)
    yield from query.yield_per(batch_size)


def iter_food(
    db: Session,
    event_id: int,
    filters: Optional[LedgerFilters] = None,
    batch_size: int = 500,
) -> Iterator[FoodLog]:
    """Stream every matching food check, newest first."""
    query = _newest_first(_filtered(db, FoodLog, event_id, filters), FoodLog)
    yield from query.yield_per(batch_size)
