"""
Sources of randomness for secret generation.

- SystemRandomSource: the OS CSPRNG via `secrets`; safe to share across threads.
- RandomOrgSource: asks random.org for a batch of integers over HTTPS. If anything
  goes wrong (no internet, timeout, bad response), we fall back to the local
  CSPRNG so the game still works.
"""

import logging
from secrets import randbelow
from typing import List

import requests

logger = logging.getLogger(__name__)

RANDOM_URL = "https://www.random.org/integers/"
RANDOM_ORG_MAX = 1_000_000_000  # random.org rejects bounds above 1e9


class RandomSource:
    """Supplies uniformly distributed integers in [0, n)."""

    def randbelow(self, n: int) -> int:
        raise NotImplementedError

    def draw(self, n: int, count: int) -> List[int]:
        return [self.randbelow(n) for _ in range(count)]


class SystemRandomSource(RandomSource):
    def randbelow(self, n: int) -> int:
        return randbelow(n)


class RandomOrgSource(RandomSource):
    def __init__(self, timeout_seconds: float = 3.0, fallback: RandomSource | None = None) -> None:
        # keep network quick; if it takes too long, we will just fall back
        self.timeout_seconds = timeout_seconds
        self.fallback = fallback or SystemRandomSource()

    def randbelow(self, n: int) -> int:
        return self.draw(n, 1)[0]

    def draw(self, n: int, count: int) -> List[int]:
        if n < 1:
            raise ValueError("Upper bound must be positive.")
        if count == 0:
            return []
        try:
            return self._fetch(n, count)
        except (requests.RequestException, ValueError) as e:
            logger.warning("random.org unavailable, using local CSPRNG: %s", e)
            return self.fallback.draw(n, count)

    def _fetch(self, n: int, count: int) -> List[int]:
        if n > RANDOM_ORG_MAX:
            raise ValueError(f"random.org cannot draw below {n}.")
        params = {
            "num": count,       # how many numbers we want
            "min": 0,           # smallest allowed number
            "max": n - 1,       # largest allowed number
            "col": 1,           # one number per line
            "base": 10,         # normal decimal numbers
            "format": "plain",  # plain text response
            "rnd": "new",       # always generate new numbers
        }
        response = requests.get(RANDOM_URL, params=params, timeout=self.timeout_seconds)
        response.raise_for_status()

        # The body looks like:
        #   0\n3\n1\n2\n
        values = [int(line) for line in response.text.splitlines() if line.strip()]
        if len(values) != count:
            raise ValueError(f"random.org returned {len(values)} values, expected {count}.")
        if any(value < 0 or value >= n for value in values):
            raise ValueError(f"random.org number out of range 0..{n - 1}.")
        return values


SOURCES = {
    "system": SystemRandomSource,
    "random_org": RandomOrgSource,
}


def build_random_source(name: str = "system") -> RandomSource:
    try:
        return SOURCES[name]()
    except KeyError:
        raise ValueError(f"Unknown random source {name!r}; expected one of {sorted(SOURCES)}.") from None
