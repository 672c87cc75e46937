"""
Single place to:
- Read DATABASE_URL from settings
- Create a SQLAlchemy Engine
- Create a Session factory (SessionLocal) for per-request DB sessions
- Provide get_db() dependency for FastAPI routes
- Create tables in dev (create_all)
"""

from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from .config import load_settings

DATABASE_URL = load_settings().database_url

# SQLite connections are used from FastAPI's worker threads
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

# pool_pre_ping=True = auto-detect dead connections (helps with long-lived processes).
engine = create_engine(
    DATABASE_URL,
    pool_pre_ping=True,
    echo=False,
    connect_args=connect_args,
)

# Each request gets its own session from this factory.
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def enforce_sqlite_write_locks(engine) -> None:
    """
    Make every SQLite transaction take the write lock up front (BEGIN IMMEDIATE),
    so a read-then-write like guess submission has one writer at a time.
    pysqlite otherwise defers BEGIN until the first write.
    """
    @event.listens_for(engine, "connect")
    def _no_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


if DATABASE_URL.startswith("sqlite"):
    enforce_sqlite_write_locks(engine)


class Base(DeclarativeBase):
    pass


def get_db() -> Generator:
    """Yield a DB session for the duration of a request; always closed afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_all() -> None:
    """Dev convenience: create tables if they don't exist."""
    from . import models  # noqa: F401  (registers the tables on Base.metadata)

    Base.metadata.create_all(bind=engine)
