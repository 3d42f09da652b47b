from dataclasses import dataclass
from enum import Enum

from shared.errors import Forbidden


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"


@dataclass(frozen=True)
class SessionContext:
    """The authenticated caller of one request, as carried by its token."""

    user_id: int
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


def require_role(ctx: SessionContext, role: Role) -> None:
    """Authorization gate used by every mutating operation."""
    if ctx.role is not role:
        if role is Role.ADMIN:
            raise Forbidden("Admin access required")
        raise Forbidden("Only regular users can perform this action")
