"""
Character pools and secret generation.

A pool is any sequence of characters; duplicates are dropped (first occurrence
wins) and whitespace, control, surrogate and unassigned code points are
rejected. Secrets are drawn from the pool with replacement, so a secret may
repeat symbols.
"""

import logging
import unicodedata

from .exceptions import InvalidProperty
from .random_client import RandomSource, SystemRandomSource
from .types import MAX_POOL_LENGTH, Code, Pool

logger = logging.getLogger(__name__)

POOL_PROPERTY = "pool"
INVALID_CHARACTER_MESSAGE = "must not contain whitespace, control, or undefined characters"
EMPTY_POOL_MESSAGE = "must not be empty"
POOL_TOO_LONG_MESSAGE = f"must not contain more than {MAX_POOL_LENGTH} distinct characters"

# Cc = control, Cs = surrogate, Cn = not assigned in the Unicode database
_INVALID_CATEGORIES = {"Cc", "Cs", "Cn"}


def is_invalid_code_point(ch: str) -> bool:
    return ch.isspace() or unicodedata.category(ch) in _INVALID_CATEGORIES


def validate_pool(pool: str) -> Pool:
    """
    Example:
      validate_pool("AAABBC") -> "ABC"
      validate_pool("AB C")   -> InvalidProperty("pool", ...)
    """
    normalized = "".join(dict.fromkeys(pool))
    if not normalized:
        raise InvalidProperty(POOL_PROPERTY, EMPTY_POOL_MESSAGE)
    if len(normalized) > MAX_POOL_LENGTH:
        raise InvalidProperty(POOL_PROPERTY, POOL_TOO_LONG_MESSAGE)
    if any(is_invalid_code_point(ch) for ch in normalized):
        raise InvalidProperty(POOL_PROPERTY, INVALID_CHARACTER_MESSAGE)
    return normalized


def generate_secret(pool: Pool, length: int, rng: RandomSource | None = None) -> Code:
    if not pool:
        raise ValueError("Cannot generate a secret from an empty pool.")
    rng = rng or SystemRandomSource()
    indices = rng.draw(len(pool), length)
    logger.debug("generated secret of length %d from a pool of %d", length, len(pool))
    return "".join(pool[i] for i in indices)
