"""Infrastructure layer: persistence, trusted evaluator, cache, and security adapters."""
