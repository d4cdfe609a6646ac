"""Core constants: cache key prefixes and shared literal values."""

# Cache key prefixes
CACHE_PREFIX_PERMISSION = "permission"

# Delimiter for composite keys
CACHE_KEY_SEP = ":"
