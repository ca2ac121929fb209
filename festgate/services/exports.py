"""CSV exports of the attendance and food ledgers."""
import csv
import io
from typing import Callable, Iterable, List, Optional

from sqlalchemy.orm import Session

from festgate.core.utils import isoformat
from festgate.db.models import AttendanceLog, FoodLog
from festgate.services import ledger
from festgate.services.events import get_event
from festgate.services.ledger import LedgerFilters
from festgate.services.utils import persistence_guard

ATTENDANCE_FIELDS = [
    "scanned_at",
    "member_name",
    "member_email",
    "team_name",
    "qr_token",
    "result",
    "reason",
    "scanned_by",
]

FOOD_FIELDS = [
    "scanned_at",
    "member_name",
    "member_email",
    "team_name",
    "member_qr_token",
    "eligible",
    "reason",
    "meal_type",
    "scanned_by",
]


def _attendance_result(entry: AttendanceLog) -> str:
    if not entry.success:
        return "rejected"
    return "already_checked_in" if entry.already_checked_in else "checked_in"


def _attendance_row(entry: AttendanceLog) -> dict:
    return {
        "scanned_at": isoformat(entry.scanned_at),
        "member_name": entry.member_name,
        "member_email": entry.member_email,
        "team_name": entry.team_name or "",
        "qr_token": entry.qr_token,
        "result": _attendance_result(entry),
        "reason": entry.reason or "",
        "scanned_by": entry.scanned_by_name or "",
    }


def _food_row(entry: FoodLog) -> dict:
    return {
        "scanned_at": isoformat(entry.scanned_at),
        "member_name": entry.member_name,
        "member_email": entry.member_email,
        "team_name": entry.team_name or "",
        "member_qr_token": entry.member_qr_token,
        "eligible": "yes" if entry.eligible else "no",
        "reason": entry.reason or "",
        "meal_type": entry.meal_type or "",
        "scanned_by": entry.scanned_by_name or "",
    }


def _render(entries: Iterable, to_row: Callable[[object], dict], fieldnames: List[str]) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=fieldnames)
    writer.writeheader()
    for entry in entries:
        writer.writerow(to_row(entry))
    return buffer.getvalue()


def export_filename(kind: str, slug: str) -> str:
    return f"{kind}-{slug}.csv"


def attendance_csv(db: Session, event_id: int, filters: Optional[LedgerFilters] = None) -> str:
    """Every matching check-in attempt for an event as CSV text, newest first."""
    get_event(db, event_id)
    with persistence_guard(db, "export_attendance"):
        return _render(ledger.iter_attendance(db, event_id, filters), _attendance_row, ATTENDANCE_FIELDS)


def food_csv(db: Session, event_id: int, filters: Optional[LedgerFilters] = None) -> str:
    """Every matching food check for an event as CSV text, newest first."""
    get_event(db, event_id)
    with persistence_guard(db, "export_food"):
        return _render(ledger.iter_food(db, event_id, filters), _food_row, FOOD_FIELDS)
