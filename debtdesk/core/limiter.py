"""Rate limiter instance for SlowAPI.

Shared so both main (app.state.limiter) and route modules can use the same
instance without circular imports. Limit strings live here.

Role switching and role listing are limited per identity (the bearer token's
subject) so callers behind one proxy address do not share a bucket; requests
without a valid bearer token fall back to the remote address.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from debtdesk.infrastructure.security.jwt import verify_token

limiter = Limiter(key_func=get_remote_address)

ROLE_SWITCH_LIMIT = "5/minute"
ROLE_LIST_LIMIT = "10/minute"
GRANT_ADMIN_LIMIT = "120/minute"


def identity_or_remote_address(request: Request) -> str:
    """Rate-limit key: identity:<sub> for a valid bearer token, else the client address."""
    scheme, _, token = request.headers.get("authorization", "").partition(" ")
    if scheme.lower() != "bearer" or not token:
        return get_remote_address(request)
    try:
        payload = verify_token(token.strip())
    except ValueError:
        return get_remote_address(request)
    return f"identity:{payload['sub']}"


limit_role_switch = limiter.limit(ROLE_SWITCH_LIMIT, key_func=identity_or_remote_address)
limit_role_list = limiter.limit(ROLE_LIST_LIMIT, key_func=identity_or_remote_address)
limit_grant_admin = limiter.limit(GRANT_ADMIN_LIMIT)
