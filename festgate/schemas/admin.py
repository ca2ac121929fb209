"""Administration schemas."""
from typing import Dict, List

from festgate.core.roles import Role
from festgate.schemas.auth import UserResponse
from festgate.schemas.common import CamelModel, Pagination


class UserPage(CamelModel):
    success: bool = True
    data: List[UserResponse]
    pagination: Pagination


class UserActionResponse(CamelModel):
    success: bool = True
    message: str
    data: UserResponse


class RoleUpdate(CamelModel):
    role: Role


class UserTotals(CamelModel):
    total: int
    active: int
    inactive: int
    by_role: Dict[str, int]
    recent_registrations: int


class EventTotals(CamelModel):
    total: int
    active: int


class TeamTotals(CamelModel):
    total: int
    total_members: int


class PlatformStats(CamelModel):
    users: UserTotals
    events: EventTotals
    teams: TeamTotals


class PlatformStatsResponse(CamelModel):
    success: bool = True
    data: PlatformStats
