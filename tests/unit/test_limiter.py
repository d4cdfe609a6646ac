"""Rate-limit keys: per identity for valid bearer tokens, per address otherwise."""

from datetime import timedelta

from jose import jwt
from starlette.requests import Request

from debtdesk.core.config import get_settings
from debtdesk.core.limiter import identity_or_remote_address
from debtdesk.shared.utils.datetime import utc_now


def _request(authorization: str | None = None, host: str = "10.0.0.7") -> Request:
    headers = []
    if authorization is not None:
        headers.append((b"authorization", authorization.encode()))
    return Request({"type": "http", "headers": headers, "client": (host, 5000)})


def _token(sub: str, secret: str | None = None) -> str:
    settings = get_settings()
    return jwt.encode(
        {"sub": sub, "exp": utc_now() + timedelta(minutes=5)},
        secret or settings.secret_key.get_secret_value(),
        algorithm=settings.algorithm,
    )


def test_callers_behind_one_address_get_separate_buckets() -> None:
    first = identity_or_remote_address(_request(f"Bearer {_token('u-1')}"))
    second = identity_or_remote_address(_request(f"Bearer {_token('u-2')}"))

    assert first == "identity:u-1"
    assert second == "identity:u-2"


def test_missing_or_invalid_token_uses_remote_address() -> None:
    assert identity_or_remote_address(_request()) == "10.0.0.7"
    assert identity_or_remote_address(_request("Basic abc")) == "10.0.0.7"
    forged = _token("u-1", secret="not-the-server-secret")
    assert identity_or_remote_address(_request(f"Bearer {forged}")) == "10.0.0.7"
