"""Shared utilities for service layer."""
from contextlib import contextmanager
from typing import Iterator, Tuple

from sqlalchemy.exc import InterfaceError, OperationalError, TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Query, Session

from festgate.core.config import settings
from festgate.core.exceptions import PersistenceUnavailable, ValidationError
from festgate.core.logging_config import get_logger

logger = get_logger(__name__)


@contextmanager
def persistence_guard(db: Session, operation: str) -> Iterator[None]:
    """
    Translate storage outages into PersistenceUnavailable.

    Only connectivity-class failures are translated (lost connection, pool
    exhausted, database down); programming errors still propagate as-is.
    The session is rolled back so the caller can retry on a clean state.
    """
    try:
        yield
    except (OperationalError, InterfaceError, PoolTimeoutError) as exc:
        db.rollback()
        logger.error(
            "persistence_unavailable",
            operation=operation,
            error=str(exc),
            exception_type=type(exc).__name__,
        )
        raise PersistenceUnavailable("Storage is temporarily unavailable, please retry") from exc


@contextmanager
def retain_loaded_state(db: Session) -> Iterator[None]:
    """Commit inside this block without expiring instances the session already holds."""
    previous = db.expire_on_commit
    db.expire_on_commit = False
    try:
        yield
    finally:
        db.expire_on_commit = previous


def normalize_paging(page: int, limit: int) -> Tuple[int, int]:
    """Validate page/limit query values against the configured maximum."""
    if page < 1:
        raise ValidationError("Page must be at least 1")
    if limit < 1:
        raise ValidationError("Limit must be at least 1")
    return page, min(limit, settings.MAX_PAGE_SIZE)


def paginate(query: Query, page: int, limit: int) -> Tuple[list, int]:
    """Run a count and a page fetch for the same query."""
    total = query.order_by(None).count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    return items, total
