"""
The game aggregate: one secret, its pool, and the append-only list of guesses
scored against it.

States:
- active: zero or more guesses, none of them a full match
- solved: some guess matched every position; terminal, further guesses are refused

Persistence, key encoding and response shaping happen outside this module; the
aggregate only ever sees internal UUIDs.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID, uuid4

from .codes import generate_secret, validate_pool
from .engine import score_guess
from .exceptions import AlreadySolved, InvalidProperty
from .random_client import RandomSource
from .types import MAX_CODE_LENGTH, Clock, Code, GameStatus, Pool

logger = logging.getLogger(__name__)

TEXT_PROPERTY = "text"
LENGTH_PROPERTY = "length"
INVALID_CHARACTER_FORMAT = 'must contain no characters other than "{}"'
INVALID_LENGTH_FORMAT = "must have a length exactly equal to the code length ({} characters)"
INVALID_CODE_LENGTH_MESSAGE = f"must be between 1 and {MAX_CODE_LENGTH} (inclusive)"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Guess:
    id: UUID
    external_key: UUID
    created: datetime
    text: Code
    exact_matches: int
    near_matches: int

    @property
    def is_solution(self) -> bool:
        # text always has the owning game's length
        return self.exact_matches == len(self.text)


@dataclass(frozen=True, eq=False)
class Game:
    id: UUID
    external_key: UUID
    created: datetime
    pool: Pool
    secret: Code
    length: int
    guesses: List[Guess] = field(default_factory=list)

    @property
    def is_solved(self) -> bool:
        """True once any recorded guess matched the secret exactly."""
        return any(guess.is_solution for guess in self.guesses)

    @property
    def status(self) -> GameStatus:
        return "solved" if self.is_solved else "active"

    @property
    def guess_count(self) -> int:
        return len(self.guesses)

    def reveal_secret(self) -> Optional[Code]:
        """Return the secret ONLY for solved games; else None."""
        return self.secret if self.is_solved else None

    def find_guess(self, external_key: UUID) -> Optional[Guess]:
        for guess in self.guesses:
            if guess.external_key == external_key:
                return guess
        return None

    def validate_guess(self, text: str) -> None:
        if self.is_solved:
            raise AlreadySolved()
        if any(ch not in self.pool for ch in text):
            raise InvalidProperty(TEXT_PROPERTY, INVALID_CHARACTER_FORMAT.format(self.pool))
        if len(text) != self.length:
            raise InvalidProperty(TEXT_PROPERTY, INVALID_LENGTH_FORMAT.format(self.length))

    def submit_guess(self, text: str, clock: Clock = utc_now) -> Guess:
        """
        Validate, score and record a guess. Nothing is appended when
        validation fails.
        """
        self.validate_guess(text)
        exact_matches, near_matches = score_guess(self.secret, text)
        guess = Guess(
            id=uuid4(),
            external_key=uuid4(),
            created=clock(),
            text=text,
            exact_matches=exact_matches,
            near_matches=near_matches,
        )
        self.guesses.append(guess)
        if guess.is_solution:
            logger.info("game %s solved after %d guess(es)", self.id, self.guess_count)
        return guess


def create_game(
    pool: str,
    length: int,
    secret: Optional[str] = None,
    rng: Optional[RandomSource] = None,
    clock: Clock = utc_now,
) -> Game:
    """
    Build a new, unsaved game. The pool is normalized first; when no secret is
    given one is drawn from the pool.
    """
    if not 1 <= length <= MAX_CODE_LENGTH:
        raise InvalidProperty(LENGTH_PROPERTY, INVALID_CODE_LENGTH_MESSAGE)
    pool = validate_pool(pool)
    if secret is None:
        secret = generate_secret(pool, length, rng)
    else:
        if any(ch not in pool for ch in secret):
            raise InvalidProperty(TEXT_PROPERTY, INVALID_CHARACTER_FORMAT.format(pool))
        if len(secret) != length:
            raise InvalidProperty(TEXT_PROPERTY, INVALID_LENGTH_FORMAT.format(length))

    game = Game(
        id=uuid4(),
        external_key=uuid4(),
        created=clock(),
        pool=pool,
        secret=secret,
        length=length,
    )
    logger.info("created game %s (length=%d, pool size=%d)", game.id, length, len(pool))
    return game
