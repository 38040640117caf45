"""Viewer capability: who is asking, and what they may do over a resource.

Services never compare role strings. They build a ``Viewer`` from the
authenticated user and ask it questions:

    viewer = Viewer.from_user(current_user)
    if viewer.capability_over(startup.user_id) is Capability.OWNER: ...
"""

import enum
import uuid
from dataclasses import dataclass

from growth_catalyst.core.errors import ForbiddenError
from growth_catalyst.models.enums import UserRole
from growth_catalyst.schemas.auth import CurrentUser


class Capability(str, enum.Enum):
    ADMIN = "admin"
    OWNER = "owner"
    INVESTOR = "investor"
    FOUNDER = "founder"


# Capability held over resources the viewer does not own
_ROLE_CAPABILITY: dict[UserRole, Capability] = {
    UserRole.ADMIN: Capability.ADMIN,
    UserRole.INVESTOR: Capability.INVESTOR,
    UserRole.FOUNDER: Capability.FOUNDER,
}


@dataclass(frozen=True)
class Viewer:
    user_id: uuid.UUID
    role: UserRole

    @classmethod
    def from_user(cls, user: CurrentUser) -> "Viewer":
        return cls(user_id=user.user_id, role=user.role)

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN

    @property
    def is_investor(self) -> bool:
        return self.role is UserRole.INVESTOR

    @property
    def is_founder(self) -> bool:
        return self.role is UserRole.FOUNDER

    def owns(self, owner_id: uuid.UUID | None) -> bool:
        return owner_id is not None and owner_id == self.user_id

    def capability_over(self, owner_id: uuid.UUID | None) -> Capability:
        """Admin wins over ownership; otherwise the role's base capability."""
        if self.is_admin:
            return Capability.ADMIN
        if self.owns(owner_id):
            return Capability.OWNER
        return _ROLE_CAPABILITY[self.role]

    def can_manage(self, owner_id: uuid.UUID | None) -> bool:
        return self.capability_over(owner_id) in (Capability.ADMIN, Capability.OWNER)

    def require_manage(self, owner_id: uuid.UUID | None, message: str) -> None:
        if not self.can_manage(owner_id):
            raise ForbiddenError(message)
