"""User roles and their ordering."""
from enum import Enum


class Role(str, Enum):
    """Closed set of roles, ordered from least to most privileged."""

    TEAM_LEAD = "teamLead"
    STAFF = "staff"
    ORGANIZER = "organizer"
    ADMIN = "admin"

    @property
    def level(self) -> int:
        return ROLE_LEVELS[self]

    def at_least(self, minimum: "Role") -> bool:
        """True when this role is `minimum` or outranks it."""
        return self.level >= minimum.level


ROLE_LEVELS = {
    Role.TEAM_LEAD: 1,
    Role.STAFF: 2,
    Role.ORGANIZER: 3,
    Role.ADMIN: 4,
}
