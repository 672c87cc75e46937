"""
Testing the stale-game purge against both stores.
"""

from datetime import datetime, timedelta, timezone

from codebreaker.game import create_game
from codebreaker.maintenance import purge_stale_games
from codebreaker.repository import DBGameStore
from codebreaker.store import InMemoryGameStore

NOW = datetime(2024, 3, 1, tzinfo=timezone.utc)


def days_ago(days: int):
    return lambda: NOW - timedelta(days=days)


def fill(store):
    idle = store.save(create_game("AB", 2, secret="AB", clock=days_ago(30)))
    active = create_game("AB", 2, secret="AB", clock=days_ago(30))
    active.submit_guess("BA", clock=days_ago(1))
    store.save(active)
    recent = store.save(create_game("AB", 2, secret="AB", clock=days_ago(2)))
    return idle, active, recent


def test_purge_in_memory_store():
    store = InMemoryGameStore()
    idle, active, recent = fill(store)

    assert purge_stale_games(store, stale_days=14, now=NOW) == 1
    assert store.find_by_external_key(idle.external_key) is None
    assert store.find_by_external_key(active.external_key) is not None
    assert store.find_by_external_key(recent.external_key) is not None


def test_purge_db_store(db_session):
    store = DBGameStore(db_session)
    idle, active, recent = fill(store)

    assert purge_stale_games(store, stale_days=14, now=NOW) == 1
    assert store.find_by_external_key(idle.external_key) is None
    assert len(store.list_by_created_desc()) == 2

    # nothing left to purge
    assert purge_stale_games(store, stale_days=14, now=NOW) == 0
