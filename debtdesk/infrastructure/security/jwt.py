"""Bearer JWT verification for identity-provider tokens.

Tokens are issued by the external identity provider; this module only verifies
them and extracts the identity id (sub). Uses debtdesk.core.config for secret
and algorithm.
"""

from typing import Any

from jose import JWTError, jwt

from debtdesk.core.config import get_settings


def verify_token(token: str) -> dict[str, Any]:
    """Verify and decode a bearer JWT. Returns the payload.

    Enforces presence of exp and sub.

    Args:
        token: JWT string from the Authorization header.

    Returns:
        Decoded payload dict.

    Raises:
        ValueError: If token is invalid, expired, or missing required claims.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except JWTError as e:
        raise ValueError(f"Invalid token: {e!s}") from e
    if not payload.get("sub"):
        raise ValueError("Token missing required claim: sub")
    return payload
