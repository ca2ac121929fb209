"""User accounts and authentication."""
from datetime import timedelta
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from festgate.core.context import RequestContext
from festgate.core.exceptions import ConflictError, NotFoundError, PermissionDenied, ValidationError
from festgate.core.logging_config import get_logger
from festgate.core.roles import Role
from festgate.core.security import get_password_hash, verify_password
from festgate.core.utils import utcnow
from festgate.db.models import Event, Member, Team, User
from festgate.services.utils import paginate

logger = get_logger(__name__)


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.lower()).first()


def create_user(
    db: Session,
    *,
    name: str,
    email: str,
    password: str,
    role: Role = Role.TEAM_LEAD,
    phone: Optional[str] = None,
    college: Optional[str] = None,
) -> User:
    """Create a user account with an Argon2 password hash."""
    email = email.lower()
    if get_user_by_email(db, email):
        raise ConflictError("User already exists with this email")

    user = User(
        name=name,
        email=email,
        password_hash=get_password_hash(password),
        phone=phone,
        college=college,
        role=Role(role).value,
    )
    try:
        db.add(user)
        db.commit()
        db.refresh(user)
    except IntegrityError:
        db.rollback()
        raise ConflictError("User already exists with this email")

    logger.info("user_created", user_id=user.id, role=user.role)
    return user


def register_user(db: Session, **fields) -> User:
    """Self-service registration; always creates a team lead."""
    fields.pop("role", None)
    return create_user(db, role=Role.TEAM_LEAD, **fields)


def authenticate(db: Session, email: str, password: str) -> Optional[User]:
    """
    Return the user for valid credentials, otherwise None.

    Unknown email, wrong password and deactivated accounts all look the same
    to the caller.
    """
    user = get_user_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        logger.warning("login_failed", email=email.lower())
        return None
    if not user.is_active:
        logger.warning("login_inactive_user", user_id=user.id)
        return None

    logger.info("login_succeeded", user_id=user.id, role=user.role)
    return user


# Administration

RECENT_REGISTRATION_DAYS = 7


def list_users(
    db: Session,
    *,
    page: int,
    limit: int,
    search: Optional[str] = None,
    role: Optional[Role] = None,
    is_active: Optional[bool] = None,
) -> Tuple[List[User], int]:
    """Users newest first, filtered by name/email substring, role and status."""
    query = db.query(User)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(User.name.ilike(pattern), User.email.ilike(pattern)))
    if role is not None:
        query = query.filter(User.role == Role(role).value)
    if is_active is not None:
        query = query.filter(User.is_active.is_(is_active))
    return paginate(query.order_by(User.created_at.desc(), User.id.desc()), page, limit)


def _other_user(db: Session, user_id: int, actor: RequestContext, action: str) -> User:
    if user_id == actor.user_id:
        raise PermissionDenied(f"You cannot {action} your own account")
    return get_user(db, user_id)


def set_active(db: Session, user_id: int, actor: RequestContext, active: bool) -> User:
    """
    Activate or deactivate an account.

    A deactivated user's existing tokens stop working on their next request,
    since every request re-reads the account.
    """
    if active:
        user = get_user(db, user_id)
    else:
        user = _other_user(db, user_id, actor, "deactivate")

    user.is_active = active
    db.commit()
    db.refresh(user)

    logger.info(
        "user_activated" if active else "user_deactivated",
        user_id=user.id,
        actor_id=actor.user_id,
    )
    return user


def change_role(db: Session, user_id: int, actor: RequestContext, role: Role) -> User:
    user = _other_user(db, user_id, actor, "change the role of")
    previous = user.role
    user.role = Role(role).value
    db.commit()
    db.refresh(user)

    logger.info("user_role_changed", user_id=user.id, previous=previous, role=user.role, actor_id=actor.user_id)
    return user


def delete_user(db: Session, user_id: int, actor: RequestContext) -> None:
    """Delete an account that leads no teams."""
    user = _other_user(db, user_id, actor, "delete")

    led = db.query(func.count(Team.id)).filter(Team.lead_user_id == user.id).scalar()
    if led:
        raise ValidationError(
            f"Cannot delete user. They are leading {led} team(s). Please reassign teams first."
        )

    db.delete(user)
    db.commit()
    logger.info("user_deleted", user_id=user_id, actor_id=actor.user_id)


def get_platform_stats(db: Session) -> Dict[str, Any]:
    """Account, event and team totals across the whole platform."""
    by_role = dict(db.query(User.role, func.count(User.id)).group_by(User.role).all())
    active = db.query(func.count(User.id)).filter(User.is_active.is_(True)).scalar()
    inactive = db.query(func.count(User.id)).filter(User.is_active.is_(False)).scalar()
    recent = (
        db.query(func.count(User.id))
        .filter(User.created_at >= utcnow() - timedelta(days=RECENT_REGISTRATION_DAYS))
        .scalar()
    )

    return {
        "users": {
            "total": active + inactive,
            "active": active,
            "inactive": inactive,
            "by_role": {role.value: by_role.get(role.value, 0) for role in Role},
            "recent_registrations": recent,
        },
        "events": {
            "total": db.query(func.count(Event.id)).scalar(),
            "active": db.query(func.count(Event.id)).filter(Event.is_active.is_(True)).scalar(),
        },
        "teams": {
            "total": db.query(func.count(Team.id)).scalar(),
            "total_members": db.query(func.count(Member.id)).scalar(),
        },
    }
