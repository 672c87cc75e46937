"""
Pure scoring logic (no HTTP, no storage).
We compute two feedback numbers for each guess:
- exact_matches: how many positions hold the same symbol in guess and secret
- near_matches: how many of the remaining guess symbols also appear among the
  remaining secret symbols, each secret occurrence used at most once

Symbols may repeat in both the secret and the guess.
"""

import logging
from collections import Counter
from typing import Tuple

from .types import Code

logger = logging.getLogger(__name__)


def _check_lengths(secret: Code, guess: Code) -> None:
    if len(guess) != len(secret):
        raise ValueError("Secret and guess must be the same length.")


def score_guess(secret: Code, guess: Code) -> Tuple[int, int]:
    """
    Example:
      secret = "AABB"
      guess  = "AAAA"
      exact_matches = 2  (the first two A's)
      near_matches  = 0  (the secret has no A's left over)
      Returns a tuple: (exact_matches, near_matches)

    Symbols that don't match in place are tallied per side; the near matches
    are the overlap of those two tallies.
    """
    _check_lengths(secret, guess)

    exact_matches = 0
    secret_left = Counter()
    guess_left = Counter()
    for secret_symbol, guess_symbol in zip(secret, guess):
        if secret_symbol == guess_symbol:
            exact_matches += 1
        else:
            secret_left[secret_symbol] += 1
            guess_left[guess_symbol] += 1

    near_matches = sum(min(count, secret_left[symbol]) for symbol, count in guess_left.items())

    logger.debug("scored guess: exact=%d near=%d", exact_matches, near_matches)
    return (exact_matches, near_matches)


def score_guess_by_consumption(secret: Code, guess: Code) -> Tuple[int, int]:
    """
    Same result as score_guess, computed by crossing off symbols.

    Exact matches are consumed on both sides first; then every leftover guess
    symbol crosses off the first leftover secret occurrence of the same symbol.
    """
    _check_lengths(secret, guess)

    secret_left = list(secret)
    guess_left = list(guess)

    exact_matches = 0
    i = 0
    while i < len(secret_left):
        if secret_left[i] == guess_left[i]:
            exact_matches += 1
            secret_left[i] = None
            guess_left[i] = None
        i += 1

    near_matches = 0
    for symbol in guess_left:
        if symbol is None:
            continue
        j = 0
        while j < len(secret_left):
            if secret_left[j] == symbol:
                near_matches += 1
                secret_left[j] = None
                break
            j += 1

    return (exact_matches, near_matches)

