"""Infrastructure services (implementations of application interfaces)."""

from debtdesk.infrastructure.services.trusted_evaluator import TrustedEvaluator

__all__ = ["TrustedEvaluator"]
