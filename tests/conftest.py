"""
- Spins up a temp SQLite test DB shared across threads (StaticPool)
- Create tables before tests run
- Provide a db_session fixture and override FastAPI's get_db so routes use the test session.
- Provide a use_secret fixture that pins the secret of the next games started through the API.
- Provide a client fixture (TestClient(app)) that already has the overrides applied.
"""
import os
import pytest
from typing import Generator

# Ensure the app does NOT run dev-only startup hooks and never touches a real DB
os.environ.setdefault("APP_ENV", "test")
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["CODEBREAKER_STORE"] = "db"
os.environ["CODEBREAKER_KEY_FORMAT"] = "base36"
os.environ["CODEBREAKER_RANDOM_SOURCE"] = "system"

from fastapi.testclient import TestClient
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from codebreaker.db import Base, get_db
from codebreaker.main import app, get_rng
from codebreaker import models  # noqa: F401  (registers tables)
from codebreaker.random_client import RandomSource

TEST_DATABASE_URL = "sqlite+pysqlite:///:memory:"


class ScriptedSource(RandomSource):
    """Hands out the given indices in order, cycling when it runs out."""

    def __init__(self, indices):
        self.indices = list(indices)
        self.calls = 0

    def randbelow(self, n: int) -> int:
        value = self.indices[self.calls % len(self.indices)] % n
        self.calls += 1
        return value


@pytest.fixture
def scripted_source():
    return ScriptedSource


@pytest.fixture(scope="session")
def engine():
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,  # <-- share one connection across threads
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session(engine) -> Generator:
    """Provide a clean session per test with rollback."""
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    db = TestingSessionLocal()
    try:
        yield db
        db.rollback()
    finally:
        db.close()


@pytest.fixture(autouse=True)
def _clean_db(engine):
    """The repository commits inside requests, so wipe rows before each test."""
    with engine.begin() as conn:
        conn.execute(text("DELETE FROM guesses"))
        conn.execute(text("DELETE FROM games"))
    yield


@pytest.fixture(autouse=True)
def override_dep(db_session):
    """Force the app to use our test session for every request."""
    def _get_db_for_tests():
        yield db_session

    app.dependency_overrides[get_db] = _get_db_for_tests
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def use_secret():
    """
    use_secret("ABCDEF", "ABACAB") makes the next game started with that pool
    get that secret.
    """
    def _use(pool: str, secret: str) -> None:
        source = ScriptedSource([pool.index(ch) for ch in secret])
        app.dependency_overrides[get_rng] = lambda: source

    return _use


@pytest.fixture
def client():
    return TestClient(app)
