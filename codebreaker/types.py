"""
Labels for clarity.
"""

from datetime import datetime
from enum import StrEnum
from typing import Callable, Literal

from .exceptions import InvalidProperty

Code = str  # one symbol per code point
Pool = str  # distinct legal symbols, first-occurrence order
GameStatus = Literal["active", "solved"]
Clock = Callable[[], datetime]

MAX_CODE_LENGTH = 20
MAX_POOL_LENGTH = 255


class StatusFilter(StrEnum):
    ALL = "all"
    UNSOLVED = "unsolved"
    SOLVED = "solved"

    @classmethod
    def parse(cls, value: str) -> "StatusFilter":
        """Case-insensitive lookup; anything unknown is a validation error on `status`."""
        try:
            return cls(value.lower())
        except ValueError:
            names = ", ".join(member.name for member in cls)
            raise InvalidProperty("status", f"must be one of [{names}] (case-insensitive).") from None
