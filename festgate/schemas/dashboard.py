"""Dashboard and reporting schemas."""
from datetime import datetime
from typing import List, Optional

from festgate.schemas.common import CamelModel, Pagination
from festgate.schemas.team import TeamSummary


class StatsEvent(CamelModel):
    id: int
    name: str
    slug: str
    start_date: datetime
    end_date: datetime
    venue: str


class DashboardStats(CamelModel):
    total_teams: int
    total_members: int
    total_checked_in: int
    pending_check_in: int
    total_food_distributed: int
    eligible_food_checks: int
    check_in_percentage: float
    event: Optional[StatsEvent] = None


class StatsResponse(CamelModel):
    success: bool = True
    data: DashboardStats


class TeamPage(CamelModel):
    success: bool = True
    data: List[TeamSummary]
    pagination: Pagination


class AttendanceEntry(CamelModel):
    id: int
    event_id: Optional[int] = None
    team_id: Optional[int] = None
    member_id: Optional[int] = None
    team_name: Optional[str] = None
    member_name: str
    member_email: str
    qr_token: str
    scanned_at: datetime
    scanned_by: Optional[int] = None
    scanned_by_name: Optional[str] = None
    success: bool
    already_checked_in: bool
    reason: Optional[str] = None
    error_message: Optional[str] = None


class AttendancePage(CamelModel):
    success: bool = True
    data: List[AttendanceEntry]
    pagination: Pagination


class FoodEntry(CamelModel):
    id: int
    event_id: Optional[int] = None
    team_id: Optional[int] = None
    member_id: Optional[int] = None
    team_name: Optional[str] = None
    member_name: str
    member_email: str
    member_qr_token: str
    eligible: bool
    reason: Optional[str] = None
    meal_type: Optional[str] = None
    scanned_at: datetime
    scanned_by: Optional[int] = None
    scanned_by_name: Optional[str] = None


class FoodSummary(CamelModel):
    total_eligible: int
    total_ineligible: int


class FoodPage(CamelModel):
    success: bool = True
    data: List[FoodEntry]
    pagination: Pagination
    summary: FoodSummary
