"""
Projection from domain objects to response schemas.

Runs in the HTTP layer right before a response is returned; this is the only
place internal keys are turned into their external string form.
"""

from typing import Callable, Optional

from .game import Game, Guess
from .ids import IdentifierCodec
from .schemas import GameOut, GuessOut

# url_for(route_name, **path_params) -> absolute URL
LinkBuilder = Callable[..., str]


def guess_view(
    game: Game, guess: Guess, codec: IdentifierCodec, url_for: Optional[LinkBuilder] = None
) -> GuessOut:
    key = codec.encode(guess.external_key)
    href = None
    if url_for is not None:
        href = url_for("get_guess", game_key=codec.encode(game.external_key), guess_key=key)
    return GuessOut(
        id=key,
        created=guess.created,
        text=guess.text,
        exact_matches=guess.exact_matches,
        near_matches=guess.near_matches,
        solution=guess.is_solution,
        href=href,
    )


def game_view(
    game: Game,
    codec: IdentifierCodec,
    url_for: Optional[LinkBuilder] = None,
    detailed: bool = False,
) -> GameOut:
    key = codec.encode(game.external_key)
    return GameOut(
        id=key,
        created=game.created,
        pool=game.pool,
        length=game.length,
        guess_count=game.guess_count,
        solved=game.is_solved,
        text=game.reveal_secret(),
        href=url_for("get_game", game_key=key) if url_for is not None else None,
        guesses=[guess_view(game, g, codec, url_for) for g in game.guesses] if detailed else None,
    )
