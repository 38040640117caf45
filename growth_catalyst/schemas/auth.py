"""Auth schemas: CurrentUser."""

import uuid

from pydantic import BaseModel

from growth_catalyst.models.enums import UserRole


class CurrentUser(BaseModel):
    """Lightweight user context extracted from the bearer token + DB lookup."""

    user_id: uuid.UUID
    role: UserRole
    email: str
