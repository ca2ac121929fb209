#!/usr/bin/env python3
"""Create a staff, organizer or admin account.

Self-registration through the API only ever creates team leads; gate staff
and organizers are provisioned with this script.
"""
import sys

from dotenv import load_dotenv, find_dotenv

env_path = find_dotenv()
if env_path:
    load_dotenv(env_path, override=False)

from festgate.core.exceptions import ConflictError  # noqa: E402
from festgate.core.roles import Role  # noqa: E402
from festgate.core.sanitization import normalize_email, sanitize_name  # noqa: E402
from festgate.db import get_db_context  # noqa: E402
from festgate.services.users import create_user  # noqa: E402

ROLES = [role.value for role in Role]

if len(sys.argv) != 5:
    print("Usage: python create_user.py <role> <name> <email> <password>")
    print()
    print(f"Roles: {', '.join(ROLES)}")
    print()
    print("Example:")
    print("  python create_user.py staff 'Gate One' gate1@fest.example 'MySecurePassword'")
    sys.exit(1)

role, name, email, password = sys.argv[1:]

if role not in ROLES:
    print(f"Error: role must be one of {', '.join(ROLES)}")
    sys.exit(1)

if len(password) < 6:
    print("Error: Password must be at least 6 characters long")
    sys.exit(1)

try:
    name = sanitize_name(name)
    email = normalize_email(email)
except ValueError as e:
    print(f"Error: {e}")
    sys.exit(1)

with get_db_context() as db:
    try:
        user = create_user(db, name=name, email=email, password=password, role=Role(role))
    except ConflictError as e:
        print(f"Error: {e.message}")
        sys.exit(1)

print(f"Created {user.role} account #{user.id} for {user.email}")
