"""Shared API dependencies."""
from typing import Callable, Optional

import jwt
from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from festgate.core import config
from festgate.core.context import RequestContext
from festgate.core.roles import Role
from festgate.core.security import decode_access_token
from festgate.db import get_db, get_db_context
from festgate.db.models import User


def _token_from(request: Request) -> Optional[str]:
    """JWT from the auth cookie, or from a Bearer header for scanner devices."""
    token = request.cookies.get(config.settings.AUTH_COOKIE_NAME)
    if token:
        return token

    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return None


def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    """Verify the JWT and return the active user it names."""
    token = _token_from(request)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        payload = decode_access_token(token)
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.PyJWTError:
        raise HTTPException(status_code=401, detail="Invalid token")

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid token")

    user = db.get(User, user_id)
    if user is None or not user.is_active:
        raise HTTPException(status_code=401, detail="User not found or inactive")
    return user


def get_request_context(request: Request, user: User = Depends(get_current_user)) -> RequestContext:
    return RequestContext(
        user_id=user.id,
        name=user.name,
        role=user.role_enum,
        request_id=getattr(request.state, "request_id", None),
    )


def require_role(minimum: Role) -> Callable[..., RequestContext]:
    """Dependency factory gating an endpoint on a minimum role."""

    def dependency(ctx: RequestContext = Depends(get_request_context)) -> RequestContext:
        if not ctx.can(minimum):
            raise HTTPException(status_code=403, detail="Not authorized")
        return ctx

    return dependency


require_staff = require_role(Role.STAFF)
require_organizer = require_role(Role.ORGANIZER)
require_admin = require_role(Role.ADMIN)

__all__ = [
    "get_db",
    "get_db_context",
    "get_current_user",
    "get_request_context",
    "require_role",
    "require_staff",
    "require_organizer",
    "require_admin",
]
