import os
from pathlib import Path
import nox

# Reuse existing virtualenvs for faster runs
nox.options.reuse_existing_virtualenvs = True
# Default sessions when running "nox"
nox.options.sessions = ["lint", "tests"]

# Environment variables to propagate
PASSED_ENV_VARS = [
    "DATABASE_URL",
    "SECRET_KEY",
    "ENVIRONMENT",
    "LOG_LEVEL",
    "REDIS_URL",
]


def _set_env(session):
    """
    Propagate database and test-related environment variables into the session.
    Also ensure the project root is on PYTHONPATH.
    """
    session.env["PYTHONPATH"] = str(Path.cwd())
    for var in PASSED_ENV_VARS:
        if var in os.environ:
            session.env[var] = os.environ[var]


@nox.session(name="lint")
def lint(session):
    """
    Code formatting, linting, and type-checks:
      - isort
      - black
      - flake8
      - mypy
    """
    _set_env(session)
    session.install("isort", "black", "flake8", "mypy")
    session.run("isort", "--check", "festgate/", "tests/")
    session.run("black", "--check", "festgate/", "tests/")
    session.run("flake8", "--max-line-length=120", "festgate/", "tests/")
    session.run("mypy", "--ignore-missing-imports", "festgate/")


@nox.session(name="tests")
def tests(session):
    """
    Run the pytest suite (unit + integration) against in-memory SQLite.
    Pass positional args to target specific tests.
    Usage:
      nox -s tests                                   # whole suite
      nox -s tests -- -m unit                        # unit tests only
      nox -s tests -- tests/unit/test_services/test_checkin_service.py
    """
    _set_env(session)
    session.install("-e", ".[test]")
    args = session.posargs or ["tests"]
    htmlcov_path = ".nox/htmlcov"
    session.run(
        "pytest",
        *args,
        "-vv",
        "--tb=short",
        "--cov=festgate",
        "--cov-report=term-missing",
        "--cov-report=html:" + htmlcov_path,
        "--cov-fail-under=80",
    )
