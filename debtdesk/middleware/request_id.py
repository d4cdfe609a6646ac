"""Request ID middleware.

Forwards a caller-supplied X-Request-ID (or mints one) and echoes it on the
response so role switches and access denials can be traced across services.
Client values are length- and charset-checked before they reach logs.
Raw ASGI (no BaseHTTPMiddleware).
"""

import re
import uuid
from typing import Callable

REQUEST_ID_MAX_LENGTH = 64
_REQUEST_ID_RE = re.compile(r"^[A-Za-z0-9_-]{1,%d}$" % REQUEST_ID_MAX_LENGTH)


def _header_value(scope: dict, name: bytes) -> str | None:
    """First value of a request header (name must be lower-case bytes)."""
    for key, value in scope.get("headers", []):
        if key.lower() == name:
            return value.decode("latin-1")
    return None


def resolve_request_id(raw: str | None) -> str:
    """Return the client's id when it is safe to log, else a fresh UUID4."""
    candidate = (raw or "").strip()
    if _REQUEST_ID_RE.fullmatch(candidate):
        return candidate
    return str(uuid.uuid4())


def RequestIDMiddleware(app: Callable, header_name: str = "X-Request-ID") -> Callable:
    """Wrap an ASGI app so every HTTP response carries a request id header."""
    header_key = header_name.lower().encode()

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        request_id = resolve_request_id(_header_value(scope, header_key))
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_with_request_id(message: dict) -> None:
            if message["type"] == "http.response.start":
                message["headers"] = [
                    *message.get("headers", []),
                    (header_key, request_id.encode()),
                ]
            await send(message)

        await app(scope, receive, send_with_request_id)

    return asgi_app
