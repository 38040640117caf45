"""Bearer token verification (HS256 JWT signed with SECRET_KEY).

Issuing tokens is the job of the identity service; this module only checks
signature and expiry and hands back the claims.
"""

from typing import Any

from jose import JWTError, jwt

from growth_catalyst.core.config import settings


def verify_token(token: str) -> dict[str, Any]:
    """Decode and verify a JWT. Raises ``JWTError`` on any failure."""
    payload = jwt.decode(
        token,
        settings.SECRET_KEY,
        algorithms=[settings.JWT_ALGORITHM],
        options={"require_sub": True, "require_exp": True},
    )
    if not isinstance(payload.get("sub"), str):
        raise JWTError("Token subject must be a string")
    return payload
