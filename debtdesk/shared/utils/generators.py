"""ID and token generators (CUID for row ids, random hex for role-session tokens)."""

import secrets

from cuid2 import cuid_wrapper

cuid_generator = cuid_wrapper()

# 32 random bytes -> 64 hex characters.
DEFAULT_SESSION_TOKEN_BYTES = 32


def generate_cuid() -> str:
    """Generate a collision-resistant unique identifier (CUID2).

    Returns:
        A new CUID string.
    """
    result = cuid_generator()
    if not isinstance(result, str):
        raise TypeError(
            f"Expected str from cuid_generator, got {type(result).__name__}"
        )
    return result


def generate_session_token(nbytes: int = DEFAULT_SESSION_TOKEN_BYTES) -> str:
    """Mint an opaque, fixed-length role-session bearer token.

    Args:
        nbytes: Number of random bytes; the token is their hex encoding
            (always 2 * nbytes characters).

    Returns:
        Hex-encoded token from the OS CSPRNG.
    """
    if nbytes < 16:
        raise ValueError("Session tokens need at least 16 random bytes")
    return secrets.token_hex(nbytes)
