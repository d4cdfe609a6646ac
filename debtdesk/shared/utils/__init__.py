"""Shared utilities (datetime, generators)."""

from debtdesk.shared.utils.datetime import ensure_utc, utc_now
from debtdesk.shared.utils.generators import generate_cuid, generate_session_token

__all__ = ["ensure_utc", "generate_cuid", "generate_session_token", "utc_now"]
