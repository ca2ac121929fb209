"""Shared test fixtures and configuration."""
import itertools
import os
from datetime import datetime, timedelta, timezone
from decimal import Decimal

# The application engine is built at import time; keep it off Postgres
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "testing"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from festgate.main import app  # noqa: E402
from festgate.db.base import Base  # noqa: E402
from festgate.db.models import Event, User  # noqa: E402
from festgate.api.deps import get_db  # noqa: E402
from festgate.core.cache import global_cache  # noqa: E402
from festgate.core.roles import Role  # noqa: E402
from festgate.core.security import create_access_token, generate_canteen_token, get_password_hash  # noqa: E402
from festgate.services import teams as team_service  # noqa: E402
from tests.utils import context_for, member_data  # noqa: E402


# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

DEFAULT_PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def disable_rate_limiting_for_tests(request):
    """Disable rate limiting for all tests except rate limiting tests."""
    from festgate.core.rate_limit import limiter

    limiter.reset()
    if "rate_limit" in request.keywords:
        yield
        limiter.reset()
    else:
        limiter.enabled = False
        yield
        limiter.enabled = True


@pytest.fixture(autouse=True)
def clear_stats_cache():
    """Dashboard snapshots must not leak between tests."""
    global_cache.clear()
    yield
    global_cache.clear()


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh database for each test."""
    engine = create_engine(
        SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Create a new database session for a test."""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with a test database."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    """Factory creating users; emails are unique per call."""
    counter = itertools.count(1)

    def _make(role=Role.TEAM_LEAD, name=None, email=None, password=DEFAULT_PASSWORD, is_active=True):
        n = next(counter)
        user = User(
            name=name or f"User {n}",
            email=email or f"user{n}@example.com",
            password_hash=get_password_hash(password),
            role=Role(role).value,
            is_active=is_active,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def lead_user(make_user):
    return make_user(Role.TEAM_LEAD, name="Team Lead", email="lead@example.com")


@pytest.fixture
def staff_user(make_user):
    return make_user(Role.STAFF, name="Gate Staff", email="staff@example.com")


@pytest.fixture
def organizer_user(make_user):
    return make_user(Role.ORGANIZER, name="Organizer", email="organizer@example.com")


@pytest.fixture
def staff_ctx(staff_user):
    return context_for(staff_user)


@pytest.fixture
def organizer_ctx(organizer_user):
    return context_for(organizer_user)


@pytest.fixture
def make_event(db_session):
    """Factory creating events directly, bypassing the organizer API."""

    def _make(slug="hackfest", name=None, is_active=True, registration_open=True,
              min_team_size=1, max_team_size=4, max_teams=None, fee=Decimal("100")):
        now = datetime.now(timezone.utc)
        event = Event(
            name=name or slug.title(),
            slug=slug,
            description=f"{slug} description",
            type="hackathon",
            start_date=now - timedelta(hours=1),
            end_date=now + timedelta(days=1),
            venue="Main Hall",
            registration_fee_per_member=fee,
            min_team_size=min_team_size,
            max_team_size=max_team_size,
            max_teams=max_teams,
            canteen_token=generate_canteen_token(slug),
            is_active=is_active,
            registration_open=registration_open,
        )
        db_session.add(event)
        db_session.commit()
        db_session.refresh(event)
        return event

    return _make


@pytest.fixture
def make_team(db_session, make_user):
    """Factory registering a team through the team service with a fresh lead."""
    counter = itertools.count(1)

    def _make(event, members=2, lead=None, team_name=None):
        n = next(counter)
        lead = lead or make_user(Role.TEAM_LEAD)
        return team_service.create_team(
            db_session,
            context_for(lead),
            event_id=event.id,
            team_name=team_name or f"Team {n}",
            members=[member_data(i, prefix=f"t{n}m") for i in range(1, members + 1)],
        )

    return _make


@pytest.fixture
def event(make_event):
    return make_event()


@pytest.fixture
def team(event, make_team, lead_user):
    return make_team(event, members=2, lead=lead_user, team_name="Byte Me")


@pytest.fixture
def member(team):
    return team.members[0]


@pytest.fixture
def staff_client(client, staff_user):
    """Test client authenticated as gate staff via the auth cookie."""
    client.cookies.set("token", create_access_token({"sub": str(staff_user.id)}))
    return client


@pytest.fixture
def organizer_client(client, organizer_user):
    """Test client authenticated as an organizer via the auth cookie."""
    client.cookies.set("token", create_access_token({"sub": str(organizer_user.id)}))
    return client


@pytest.fixture
def lead_client(client, lead_user):
    """Test client authenticated as a team lead via the auth cookie."""
    client.cookies.set("token", create_access_token({"sub": str(lead_user.id)}))
    return client
