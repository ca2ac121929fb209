"""Organizer dashboard and reporting endpoints."""
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from festgate.api.deps import get_db, require_organizer
from festgate.core.config import settings
from festgate.core.context import RequestContext
from festgate.core.utils import total_pages
from festgate.schemas import AttendancePage, FoodPage, StatsResponse, TeamPage, TeamSummary
from festgate.schemas.dashboard import AttendanceEntry, DashboardStats, FoodEntry
from festgate.services import dashboard, exports, ledger
from festgate.services.events import get_event
from festgate.services.ledger import LedgerFilters
from festgate.services.utils import normalize_paging

router = APIRouter(dependencies=[Depends(require_organizer)])


def _pagination(page: int, limit: int, total: int) -> dict:
    return {"page": page, "limit": limit, "total": total, "total_pages": total_pages(total, limit)}


def _ledger_filters(
    team_id: Optional[int] = Query(None, alias="teamId"),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    search: Optional[str] = Query(None, max_length=200),
) -> LedgerFilters:
    return LedgerFilters(team_id=team_id, start_date=start_date, end_date=end_date, search=search)


@router.get("/stats", response_model=StatsResponse)
def stats_endpoint(
    event_id: Optional[int] = Query(None, alias="eventId"),
    db: Session = Depends(get_db),
):
    """
    Registration and attendance totals, for one event or the whole platform.

    Snapshots are cached for STATS_CACHE_TTL seconds and dropped as soon as
    a check-in or eligible food scan changes them. Checked-in counts come
    from member state, so repeat scans never inflate them.

    Example:
        Response (200):
            {
                "success": true,
                "data": {
                    "totalTeams": 42,
                    "totalMembers": 160,
                    "totalCheckedIn": 121,
                    "pendingCheckIn": 39,
                    "totalFoodDistributed": 230,
                    "eligibleFoodChecks": 97,
                    "checkInPercentage": 75.63,
                    "event": {"id": 3, "name": "HackFest", ...}
                }
            }
    """
    return StatsResponse(data=DashboardStats.model_validate(dashboard.get_stats(db, event_id)))


@router.get("/teams", response_model=TeamPage)
def teams_endpoint(
    event_id: int = Query(..., alias="eventId"),
    page: int = Query(1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE),
    search: Optional[str] = Query(None, max_length=200),
    payment_status: Optional[str] = Query(None, alias="paymentStatus"),
    check_in_status: Optional[str] = Query(None, alias="checkInStatus"),
    db: Session = Depends(get_db),
):
    """Teams of an event, newest first; checkInStatus is completed, partial or none."""
    page, limit = normalize_paging(page, limit)
    rows, total = dashboard.list_teams(
        db,
        event_id,
        page=page,
        limit=limit,
        search=search,
        payment_status=payment_status,
        check_in_status=check_in_status,
    )
    items = [
        TeamSummary(
            id=row["team"].id,
            team_name=row["team"].team_name,
            lead_name=row["team"].lead_name,
            lead_email=row["team"].lead_email,
            lead_phone=row["team"].lead_phone,
            total_amount=row["team"].total_amount,
            payment_status=row["team"].payment_status,
            is_active=row["team"].is_active,
            created_at=row["team"].created_at,
            member_count=row["member_count"],
            checked_in_count=row["checked_in_count"],
        )
        for row in rows
    ]
    return TeamPage(data=items, pagination=_pagination(page, limit, total))


@router.get("/attendance", response_model=AttendancePage)
def attendance_endpoint(
    event_id: int = Query(..., alias="eventId"),
    page: int = Query(1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE),
    filters: LedgerFilters = Depends(_ledger_filters),
    db: Session = Depends(get_db),
):
    """Check-in attempts for an event, newest first, including rejections."""
    page, limit = normalize_paging(page, limit)
    get_event(db, event_id)
    items, total = ledger.query_attendance(db, event_id, filters, page=page, limit=limit)
    return AttendancePage(
        data=[AttendanceEntry.model_validate(item) for item in items],
        pagination=_pagination(page, limit, total),
    )


@router.get("/food", response_model=FoodPage)
def food_endpoint(
    event_id: int = Query(..., alias="eventId"),
    page: int = Query(1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE),
    eligible: Optional[bool] = Query(None),
    filters: LedgerFilters = Depends(_ledger_filters),
    db: Session = Depends(get_db),
):
    """Food eligibility checks and counter scans for an event, newest first, with totals."""
    page, limit = normalize_paging(page, limit)
    get_event(db, event_id)
    filters.eligible = eligible
    items, total, summary = ledger.query_food(db, event_id, filters, page=page, limit=limit)
    return FoodPage(
        data=[FoodEntry.model_validate(item) for item in items],
        pagination=_pagination(page, limit, total),
        summary=summary,
    )


def _csv_response(body: str, filename: str) -> StreamingResponse:
    headers = {"Content-Disposition": f"attachment; filename={filename}"}
    return StreamingResponse(iter([body]), media_type="text/csv", headers=headers)


@router.get("/export/attendance")
def export_attendance_endpoint(
    event_id: int = Query(..., alias="eventId"),
    filters: LedgerFilters = Depends(_ledger_filters),
    db: Session = Depends(get_db),
):
    """Attendance log as CSV (all matching rows, no pagination)."""
    event = get_event(db, event_id)
    body = exports.attendance_csv(db, event_id, filters)
    return _csv_response(body, exports.export_filename("attendance", event.slug))


@router.get("/export/food")
def export_food_endpoint(
    event_id: int = Query(..., alias="eventId"),
    eligible: Optional[bool] = Query(None),
    filters: LedgerFilters = Depends(_ledger_filters),
    db: Session = Depends(get_db),
):
    """Food log as CSV (all matching rows, no pagination)."""
    event = get_event(db, event_id)
    filters.eligible = eligible
    body = exports.food_csv(db, event_id, filters)
    return _csv_response(body, exports.export_filename("food", event.slug))
