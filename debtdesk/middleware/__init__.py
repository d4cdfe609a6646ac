"""HTTP middleware. Applied in debtdesk.main (first added = outermost)."""

from debtdesk.middleware.request_id import RequestIDMiddleware

__all__ = ["RequestIDMiddleware"]
