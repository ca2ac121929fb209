"""Admin endpoints: account management and platform totals."""
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from festgate.api.deps import get_db, require_admin
from festgate.core.config import settings
from festgate.core.context import RequestContext
from festgate.core.roles import Role
from festgate.core.utils import total_pages
from festgate.schemas import (
    PlatformStatsResponse,
    RoleUpdate,
    SuccessResponse,
    UserActionResponse,
    UserPage,
    UserResponse,
)
from festgate.schemas.admin import PlatformStats
from festgate.services import users
from festgate.services.utils import normalize_paging

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/users", response_model=UserPage)
def list_users_endpoint(
    page: int = Query(1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE),
    search: Optional[str] = Query(None, max_length=200),
    role: Optional[Role] = Query(None),
    is_active: Optional[bool] = Query(None, alias="isActive"),
    db: Session = Depends(get_db),
):
    """All accounts, newest first, filtered by name/email, role and status."""
    page, limit = normalize_paging(page, limit)
    items, total = users.list_users(db, page=page, limit=limit, search=search, role=role, is_active=is_active)
    return UserPage(
        data=[UserResponse.model_validate(user) for user in items],
        pagination={"page": page, "limit": limit, "total": total, "total_pages": total_pages(total, limit)},
    )


@router.patch("/users/{user_id}/activate", response_model=UserActionResponse)
def activate_user_endpoint(
    user_id: int,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_admin),
):
    user = users.set_active(db, user_id, ctx, True)
    return UserActionResponse(message="User activated successfully", data=UserResponse.model_validate(user))


@router.patch("/users/{user_id}/deactivate", response_model=UserActionResponse)
def deactivate_user_endpoint(
    user_id: int,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_admin),
):
    """
    Deactivate an account (admin only).

    The user's current session is refused from its next request onwards,
    including scans from a staff device that is already logged in.
    """
    user = users.set_active(db, user_id, ctx, False)
    return UserActionResponse(message="User deactivated successfully", data=UserResponse.model_validate(user))


@router.patch("/users/{user_id}/role", response_model=UserActionResponse)
def change_role_endpoint(
    user_id: int,
    payload: RoleUpdate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_admin),
):
    """
    Promote or demote an account (admin only).

    Example:
        Request:
            PATCH /api/v1/admin/users/12/role
            {"role": "staff"}

        Response (403):
            {"success": false, "error": "You cannot change the role of your own account"}
    """
    user = users.change_role(db, user_id, ctx, payload.role)
    return UserActionResponse(message="User role updated successfully", data=UserResponse.model_validate(user))


@router.delete("/users/{user_id}", response_model=SuccessResponse)
def delete_user_endpoint(
    user_id: int,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_admin),
):
    users.delete_user(db, user_id, ctx)
    return SuccessResponse(message="User deleted successfully")


@router.get("/stats", response_model=PlatformStatsResponse)
def platform_stats_endpoint(db: Session = Depends(get_db)):
    """Account, event and team totals across the platform."""
    return PlatformStatsResponse(data=PlatformStats.model_validate(users.get_platform_stats(db)))
