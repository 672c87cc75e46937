"""
DB-backed repository with the same public API as the in-memory store.

Public methods:
- save(game) -> Game                      insert a new game, or append its new guesses
- find_by_external_key(key) -> Game | None
- for_update(key) -> context manager      row-locked read for guess submission
- delete(game) -> None
- clear() -> None
- list_by_created_desc(status) -> list[Game]
- find_stale(cutoff) -> list[Game]

Rows are mapped to plain Game/Guess objects on the way out, so the domain
code never touches the ORM.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, Optional
from uuid import UUID

from sqlalchemy import and_, delete, exists, select
from sqlalchemy.orm import Session

from .game import Game, Guess
from .models import GameRow, GuessRow
from .types import StatusFilter

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything we store is UTC
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _to_guess(row: GuessRow) -> Guess:
    return Guess(
        id=row.id,
        external_key=row.external_key,
        created=_as_utc(row.created),
        text=row.text,
        exact_matches=row.exact_matches,
        near_matches=row.near_matches,
    )


def _to_game(row: GameRow) -> Game:
    return Game(
        id=row.id,
        external_key=row.external_key,
        created=_as_utc(row.created),
        pool=row.pool,
        secret=row.secret,
        length=row.length,
        guesses=[_to_guess(g) for g in row.guesses],
    )


def _solved_clause():
    return exists().where(
        and_(GuessRow.game_id == GameRow.id, GuessRow.exact_matches == GameRow.length)
    )


class DBGameStore:
    """SQLAlchemy-backed game repository bound to one session."""

    def __init__(self, db: Session):
        self.db = db

    def save(self, game: Game) -> Game:
        row = self.db.get(GameRow, game.id)
        if row is None:
            row = GameRow(
                id=game.id,
                external_key=game.external_key,
                created=game.created,
                pool=game.pool,
                secret=game.secret,
                length=game.length,
            )
            self.db.add(row)

        # Append-only: existing guess rows are never rewritten
        known = {g.id for g in row.guesses}
        for sequence, guess in enumerate(game.guesses):
            if guess.id in known:
                continue
            row.guesses.append(
                GuessRow(
                    id=guess.id,
                    external_key=guess.external_key,
                    created=guess.created,
                    sequence=sequence,
                    text=guess.text,
                    exact_matches=guess.exact_matches,
                    near_matches=guess.near_matches,
                )
            )

        self.db.commit()
        return game

    def find_by_external_key(self, external_key: UUID) -> Optional[Game]:
        row = self.db.execute(
            select(GameRow).where(GameRow.external_key == external_key)
        ).scalar_one_or_none()
        return _to_game(row) if row else None

    @contextmanager
    def for_update(self, external_key: UUID) -> Iterator[Optional[Game]]:
        """
        Lock the game row (SELECT ... FOR UPDATE where the backend supports it)
        until save() commits; any error inside the block rolls back instead.
        """
        row = self.db.execute(
            select(GameRow).where(GameRow.external_key == external_key).with_for_update()
        ).scalar_one_or_none()
        try:
            yield _to_game(row) if row else None
        except BaseException:
            self.db.rollback()
            raise

    def delete(self, game: Game) -> None:
        row = self.db.get(GameRow, game.id)
        if row is not None:
            self.db.delete(row)
            self.db.commit()

    def clear(self) -> None:
        self.db.execute(delete(GuessRow))
        self.db.execute(delete(GameRow))
        self.db.commit()

    def list_by_created_desc(self, status: StatusFilter = StatusFilter.ALL) -> list[Game]:
        stmt = select(GameRow)
        if status == StatusFilter.SOLVED:
            stmt = stmt.where(_solved_clause())
        elif status == StatusFilter.UNSOLVED:
            stmt = stmt.where(~_solved_clause())
        rows = self.db.execute(stmt.order_by(GameRow.created.desc())).scalars().all()
        return [_to_game(row) for row in rows]

    def find_stale(self, cutoff: datetime) -> list[Game]:
        """Games created before cutoff with no guesses after it."""
        recent_guess = exists().where(
            and_(GuessRow.game_id == GameRow.id, GuessRow.created > cutoff)
        )
        rows = (
            self.db.execute(select(GameRow).where(GameRow.created < cutoff, ~recent_guess))
            .scalars()
            .all()
        )
        return [_to_game(row) for row in rows]
