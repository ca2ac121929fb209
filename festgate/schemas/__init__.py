"""Pydantic schemas for request/response validation."""
from festgate.schemas.admin import PlatformStatsResponse, RoleUpdate, UserActionResponse, UserPage
from festgate.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserData, UserResponse
from festgate.schemas.checkin import (
    CheckInData,
    CheckInRequest,
    CheckInResponse,
    CheckInStatusData,
    CheckInStatusResponse,
)
from festgate.schemas.common import CamelModel, ErrorResponse, Pagination, SuccessResponse
from festgate.schemas.dashboard import (
    AttendancePage,
    DashboardStats,
    FoodPage,
    FoodSummary,
    StatsResponse,
    TeamPage,
)
from festgate.schemas.event import CanteenQRResponse, EventCreate, EventResponse, EventUpdate
from festgate.schemas.food import EligibilityData, EligibilityRequest, EligibilityResponse, FoodScanRequest
from festgate.schemas.team import (
    AddMembersRequest,
    MemberQRResponse,
    TeamCreate,
    TeamResponse,
    TeamSummary,
    TeamUpdate,
)

__all__ = [
    "PlatformStatsResponse",
    "RoleUpdate",
    "UserActionResponse",
    "UserPage",
    "AuthResponse",
    "LoginRequest",
    "RegisterRequest",
    "UserData",
    "UserResponse",
    "CheckInData",
    "CheckInRequest",
    "CheckInResponse",
    "CheckInStatusData",
    "CheckInStatusResponse",
    "CamelModel",
    "ErrorResponse",
    "Pagination",
    "SuccessResponse",
    "AttendancePage",
    "DashboardStats",
    "FoodPage",
    "FoodSummary",
    "StatsResponse",
    "TeamPage",
    "CanteenQRResponse",
    "EventCreate",
    "EventResponse",
    "EventUpdate",
    "EligibilityData",
    "EligibilityRequest",
    "EligibilityResponse",
    "FoodScanRequest",
    "AddMembersRequest",
    "MemberQRResponse",
    "TeamCreate",
    "TeamResponse",
    "TeamSummary",
    "TeamUpdate",
]
