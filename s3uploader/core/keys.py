"""Object key generation."""

import secrets

from ..errors import KeyGenerationError

# 6 bytes -> 12 hex characters of prefix
DEFAULT_PREFIX_BYTES = 6


def generate_key(identifier: str, num_bytes: int = DEFAULT_PREFIX_BYTES) -> str:
    """
    Build an object key as <random hex><identifier>.

    The prefix comes from the `secrets` module so two uploads with the same
    identifier land on different keys. If the OS can't provide secure
    randomness we fail rather than fall back to a weaker source.
    """
    if num_bytes < DEFAULT_PREFIX_BYTES:
        raise ValueError(
            f"Key prefix needs at least {DEFAULT_PREFIX_BYTES} random bytes"
        )

    try:
        prefix = secrets.token_hex(num_bytes)
    except (OSError, NotImplementedError) as e:
        raise KeyGenerationError(f"Secure random source unavailable: {e}") from e

    return prefix + identifier
