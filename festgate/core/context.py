"""Per-request caller context."""
from dataclasses import dataclass
from typing import Optional

from festgate.core.roles import Role


@dataclass(frozen=True)
class RequestContext:
    """Who is acting on this request.

    Built once per request by the API layer from the authenticated user and
    passed explicitly into services, so nothing below the endpoints reads
    process-wide session state.
    """

    user_id: int
    name: str
    role: Role
    request_id: Optional[str] = None

    def can(self, minimum: Role) -> bool:
        return self.role.at_least(minimum)
