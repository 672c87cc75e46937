"""
Explicit validation & Pydantic models
- Define the structure of API requests and responses.
- Bounds here are a first line of defence; the game core re-checks everything.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from .types import MAX_CODE_LENGTH, MAX_POOL_LENGTH


# 1. Request body for starting a game; the secret itself is never accepted from clients
class GameCreate(BaseModel):
    pool: str = Field(
        ...,
        min_length=1,
        max_length=MAX_POOL_LENGTH,
        description="Characters the secret is drawn from; duplicates are removed",
    )
    length: int = Field(..., ge=1, le=MAX_CODE_LENGTH, description="Number of symbols in the secret")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"pool": "ABCDEF", "length": 4},
                {"pool": "0123456789", "length": 6},
                {"pool": "🍎🍌🍒🍇", "length": 3},
            ]
        }
    }


# 2. Request body for a guess; pool membership and length are checked against the game
class GuessCreate(BaseModel):
    text: str = Field(..., max_length=MAX_POOL_LENGTH, description="Guess, one symbol per character")


# 3. Describes a single scored guess
class GuessOut(BaseModel):
    id: str = Field(..., description="External key of the guess")
    created: datetime = Field(..., description="When the guess was submitted")
    text: str = Field(..., description="The guess as submitted")
    exact_matches: int = Field(..., description="Right symbol, right position")
    near_matches: int = Field(..., description="Right symbol, wrong position")
    solution: bool = Field(..., description="Whether this guess matched the secret exactly")
    href: Optional[str] = Field(None, description="Link to this guess")


# 4. Represents a game; `text` appears only once the game is solved
class GameOut(BaseModel):
    id: str = Field(..., description="External key of the game")
    created: datetime = Field(..., description="When the game was started")
    pool: str = Field(..., description="Legal symbols for this game")
    length: int = Field(..., description="Number of symbols in the secret")
    guess_count: int = Field(..., description="Guesses submitted so far")
    solved: bool = Field(..., description="Whether any guess matched the secret")
    text: Optional[str] = Field(None, description="The secret (only revealed once solved)")
    href: Optional[str] = Field(None, description="Link to this game")
    guesses: Optional[List[GuessOut]] = Field(None, description="All guesses, oldest first")
