"""
SQLAlchemy ORM models.

Tables:
- games: one row per game (pool, secret, length; internal id plus a unique external key)
- guesses: one row per guess, append-only, ordered within its game by `sequence`

Both tables index `created` for newest-first listing and stale-game sweeps.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .db import Base
from .types import MAX_CODE_LENGTH, MAX_POOL_LENGTH


class GameRow(Base):
    __tablename__ = "games"

    id: Mapped[UUID] = mapped_column(primary_key=True)
    external_key: Mapped[UUID] = mapped_column(unique=True, nullable=False)
    created: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)

    pool: Mapped[str] = mapped_column(String(MAX_POOL_LENGTH), nullable=False)
    secret: Mapped[str] = mapped_column(String(MAX_CODE_LENGTH), nullable=False)
    length: Mapped[int] = mapped_column(Integer, nullable=False)

    # Relationship: a game has many guesses (history)
    guesses: Mapped[list["GuessRow"]] = relationship(
        back_populates="game",
        cascade="all, delete-orphan",
        order_by="GuessRow.sequence.asc()",
        lazy="selectin",
    )


class GuessRow(Base):
    __tablename__ = "guesses"
    # a second writer that read a stale history collides here instead of forking it
    __table_args__ = (UniqueConstraint("game_id", "sequence"),)

    id: Mapped[UUID] = mapped_column(primary_key=True)
    external_key: Mapped[UUID] = mapped_column(unique=True, nullable=False)
    created: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)

    # Foreign key to games.id
    game_id: Mapped[UUID] = mapped_column(ForeignKey("games.id", ondelete="CASCADE"), index=True)
    game: Mapped[GameRow] = relationship(back_populates="guesses")

    # 0-based submission order within the game
    sequence: Mapped[int] = mapped_column(Integer, nullable=False)

    text: Mapped[str] = mapped_column(String(MAX_CODE_LENGTH), nullable=False)

    # Engine output
    exact_matches: Mapped[int] = mapped_column(Integer, nullable=False)
    near_matches: Mapped[int] = mapped_column(Integer, nullable=False)
