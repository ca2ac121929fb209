"""Authentication endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from festgate.api.deps import get_current_user, get_db
from festgate.core import config
from festgate.core.rate_limit import limiter, RATE_LIMITS
from festgate.core.security import create_access_token
from festgate.db.models import User
from festgate.schemas import AuthResponse, LoginRequest, RegisterRequest, SuccessResponse, UserData, UserResponse
from festgate.services import users

router = APIRouter()


def _set_auth_cookie(response: Response, user: User) -> None:
    access_token = create_access_token(data={"sub": str(user.id), "role": user.role})
    response.set_cookie(
        key=config.settings.AUTH_COOKIE_NAME,
        value=access_token,
        httponly=True,  # Prevents JavaScript access (XSS protection)
        secure=config.settings.ENVIRONMENT == "production",  # Requires HTTPS in production
        samesite="lax",  # CSRF protection
        max_age=config.settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


def _envelope(user: User) -> AuthResponse:
    return AuthResponse(data=UserData(user=UserResponse.model_validate(user)))


@router.post("/register", response_model=AuthResponse, status_code=201)
@limiter.limit(RATE_LIMITS["register"])
def register(
    request: Request,
    payload: RegisterRequest,
    response: Response,
    db: Session = Depends(get_db),
):
    """
    Register a team lead account and log it in.

    Self-registration always yields the teamLead role; staff, organizer and
    admin accounts are created with the create_user.py command.

    Raises:
        409 if the email is already registered
    """
    user = users.register_user(db, **payload.model_dump())
    _set_auth_cookie(response, user)
    return _envelope(user)


@router.post("/login", response_model=AuthResponse)
@limiter.limit(RATE_LIMITS["login"])
def login(
    request: Request,
    payload: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
):
    """
    Authenticate a user and set the JWT in an httpOnly cookie.

    Example:
        Request:
            POST /api/v1/auth/login
            {"email": "lead@college.edu", "password": "secret123"}

        Response (200):
            {"success": true, "data": {"user": {"id": 1, "role": "teamLead", ...}}}
            Set-Cookie: token=eyJhbGc...; HttpOnly; SameSite=Lax

        Response (401):
            {"success": false, "error": "Invalid credentials"}

    Security:
        - Token stored in httpOnly cookie (XSS protection)
        - SameSite=Lax (CSRF protection)
        - Scanner devices may send the same token as a Bearer header
    """
    user = users.authenticate(db, payload.email, payload.password)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid credentials")

    _set_auth_cookie(response, user)
    return _envelope(user)


@router.post("/logout", response_model=SuccessResponse)
def logout(response: Response) -> SuccessResponse:
    """Clear the authentication cookie; safe to call when not logged in."""
    response.delete_cookie(key=config.settings.AUTH_COOKIE_NAME)
    return SuccessResponse(success=True, message="Logged out successfully")


@router.get("/me", response_model=AuthResponse)
def me(user: User = Depends(get_current_user)):
    return _envelope(user)
