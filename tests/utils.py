"""Helpers shared by test modules (fixtures live in conftest.py)."""
from festgate.core.context import RequestContext
from festgate.core.security import create_access_token
from festgate.db.models import User


def context_for(user: User) -> RequestContext:
    """RequestContext as the API layer would build it for this user."""
    return RequestContext(user_id=user.id, name=user.name, role=user.role_enum)


def auth_headers(user: User) -> dict:
    """Bearer header for a user, as sent by scanner devices."""
    return {"Authorization": f"Bearer {create_access_token({'sub': str(user.id)})}"}


def member_data(n: int, prefix: str = "member") -> dict:
    return {
        "name": f"Member {n}",
        "email": f"{prefix}{n}@college.edu",
        "college": "State College",
        "roll_number": f"R{n:03d}",
    }
