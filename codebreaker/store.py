"""
In-memory store
Holds games in memory, keyed by internal id. Same public API as DBGameStore,
so the routes don't care which one they get.
"""

from contextlib import contextmanager
from datetime import datetime
from threading import RLock
from typing import Dict, Iterator, List, Optional
from uuid import UUID

from .game import Game
from .types import StatusFilter


class InMemoryGameStore:
    def __init__(self) -> None:
        self._games: Dict[UUID, Game] = {}
        self._lock = RLock()

    def save(self, game: Game) -> Game:
        with self._lock:
            self._games[game.id] = game
        return game

    def find_by_external_key(self, external_key: UUID) -> Optional[Game]:
        with self._lock:
            for game in self._games.values():
                if game.external_key == external_key:
                    return game
            return None

    @contextmanager
    def for_update(self, external_key: UUID) -> Iterator[Optional[Game]]:
        # one writer at a time; RLock so save() can be called inside the block
        with self._lock:
            yield self.find_by_external_key(external_key)

    def delete(self, game: Game) -> None:
        with self._lock:
            self._games.pop(game.id, None)

    def clear(self) -> None:
        with self._lock:
            self._games.clear()

    def list_by_created_desc(self, status: StatusFilter = StatusFilter.ALL) -> List[Game]:
        with self._lock:
            games = list(self._games.values())
        if status == StatusFilter.SOLVED:
            games = [game for game in games if game.is_solved]
        elif status == StatusFilter.UNSOLVED:
            games = [game for game in games if not game.is_solved]
        return sorted(games, key=lambda game: game.created, reverse=True)

    def find_stale(self, cutoff: datetime) -> List[Game]:
        """Games created before cutoff with no guesses after it."""
        with self._lock:
            return [
                game
                for game in self._games.values()
                if game.created < cutoff and not any(g.created > cutoff for g in game.guesses)
            ]
