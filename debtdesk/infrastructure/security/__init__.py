"""Security adapters: bearer credential verification."""

from debtdesk.infrastructure.security.jwt import verify_token

__all__ = ["verify_token"]
