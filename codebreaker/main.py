'''
Codebreaker API

Endpoints:
POST   /games                                -> start a game from a pool and a length
GET    /games?status=all|solved|unsolved     -> list games, newest first
GET    /games/{game_key}                     -> read a game & its guesses
DELETE /games/{game_key}                     -> remove a game
GET    /games/{game_key}/guesses             -> list guesses, oldest first
POST   /games/{game_key}/guesses             -> submit a guess
GET    /games/{game_key}/guesses/{guess_key} -> read one guess

Keys in URLs are encoded external keys (see ids.py); anything that doesn't
decode is simply "not found".
'''

import logging
from typing import List
from uuid import UUID

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import IntegrityError

from .config import load_settings
from .db import create_all, get_db
from .exceptions import AlreadySolved, DecodeError, InvalidProperty
from .game import Game, create_game
from .ids import IdentifierCodec, build_codec
from .random_client import RandomSource, build_random_source
from .repository import DBGameStore
from .schemas import GameCreate, GameOut, GuessCreate, GuessOut
from .store import InMemoryGameStore
from .types import StatusFilter
from .views import LinkBuilder, game_view, guess_view

settings = load_settings()
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Codebreaker API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Dev convenience: auto-create tables locally ---
if settings.app_env == "local" and settings.store == "db":
    @app.on_event("startup")
    def _dev_create_tables():
        create_all()

_memory_store = InMemoryGameStore()
_codec = build_codec(settings.key_format)
_rng = build_random_source(settings.random_source)


# ---------------- Dependencies ----------------

def get_store(session=Depends(get_db)):
    if settings.store == "memory":
        return _memory_store
    return DBGameStore(session)


def get_codec() -> IdentifierCodec:
    return _codec


def get_rng() -> RandomSource:
    return _rng


def _links(request: Request) -> LinkBuilder:
    return lambda name, **params: str(request.url_for(name, **params))


def _decode(codec: IdentifierCodec, key: str, what: str) -> UUID:
    try:
        return codec.decode(key)
    except DecodeError:
        # an unparsable key can't refer to anything that exists
        raise HTTPException(status_code=404, detail=f"{what} not found")


def _bad_request(e: InvalidProperty) -> HTTPException:
    return HTTPException(status_code=400, detail={e.property: e.message})


def _load_game(store, codec: IdentifierCodec, game_key: str) -> Game:
    game = store.find_by_external_key(_decode(codec, game_key, "Game"))
    if game is None:
        raise HTTPException(status_code=404, detail="Game not found")
    return game


# ---------------- Routes ----------------

@app.post(
    "/games",
    response_model=GameOut,
    response_model_exclude_none=True,
    status_code=201,
    summary="Start a new game",
)
def start_game(
    payload: GameCreate,
    request: Request,
    response: Response,
    store=Depends(get_store),
    codec: IdentifierCodec = Depends(get_codec),
    rng: RandomSource = Depends(get_rng),
) -> GameOut:
    try:
        game = create_game(payload.pool, payload.length, rng=rng)
    except InvalidProperty as e:
        raise _bad_request(e)
    store.save(game)

    view = game_view(game, codec, _links(request))
    response.headers["Location"] = view.href
    return view


@app.get("/games", response_model=List[GameOut], response_model_exclude_none=True, summary="List games")
def list_games(
    request: Request,
    status: str = "all",
    store=Depends(get_store),
    codec: IdentifierCodec = Depends(get_codec),
) -> List[GameOut]:
    try:
        status_filter = StatusFilter.parse(status)
    except InvalidProperty as e:
        raise _bad_request(e)
    url_for = _links(request)
    return [game_view(game, codec, url_for) for game in store.list_by_created_desc(status_filter)]


@app.get(
    "/games/{game_key}",
    response_model=GameOut,
    response_model_exclude_none=True,
    summary="Get a game and its guesses",
)
def get_game(
    game_key: str,
    request: Request,
    store=Depends(get_store),
    codec: IdentifierCodec = Depends(get_codec),
) -> GameOut:
    game = _load_game(store, codec, game_key)
    return game_view(game, codec, _links(request), detailed=True)


@app.delete("/games/{game_key}", status_code=204, summary="Delete a game")
def delete_game(
    game_key: str,
    store=Depends(get_store),
    codec: IdentifierCodec = Depends(get_codec),
) -> Response:
    game = _load_game(store, codec, game_key)
    store.delete(game)
    logger.info("deleted game %s", game.id)
    return Response(status_code=204)


@app.get(
    "/games/{game_key}/guesses",
    response_model=List[GuessOut],
    response_model_exclude_none=True,
    summary="List the guesses of a game",
)
def list_guesses(
    game_key: str,
    request: Request,
    store=Depends(get_store),
    codec: IdentifierCodec = Depends(get_codec),
) -> List[GuessOut]:
    game = _load_game(store, codec, game_key)
    url_for = _links(request)
    return [guess_view(game, guess, codec, url_for) for guess in game.guesses]


@app.post(
    "/games/{game_key}/guesses",
    response_model=GuessOut,
    response_model_exclude_none=True,
    status_code=201,
    summary="Submit a guess",
)
def submit_guess(
    game_key: str,
    payload: GuessCreate,
    request: Request,
    response: Response,
    store=Depends(get_store),
    codec: IdentifierCodec = Depends(get_codec),
) -> GuessOut:
    # one writer per game: AlreadySolved and the history only mean something
    # against a consistent snapshot
    with store.for_update(_decode(codec, game_key, "Game")) as game:
        if game is None:
            raise HTTPException(status_code=404, detail="Game not found")
        try:
            guess = game.submit_guess(payload.text)
        except AlreadySolved:
            raise HTTPException(status_code=409, detail="Game already solved. No more guesses allowed.")
        except InvalidProperty as e:
            raise _bad_request(e)
        try:
            store.save(game)
        except IntegrityError:
            # another submission for this game committed first
            raise HTTPException(status_code=409, detail="Guess conflicts with a concurrent submission. Reload the game.")

    view = guess_view(game, guess, codec, _links(request))
    response.headers["Location"] = view.href
    return view


@app.get(
    "/games/{game_key}/guesses/{guess_key}",
    response_model=GuessOut,
    response_model_exclude_none=True,
    summary="Get one guess",
)
def get_guess(
    game_key: str,
    guess_key: str,
    request: Request,
    store=Depends(get_store),
    codec: IdentifierCodec = Depends(get_codec),
) -> GuessOut:
    game = _load_game(store, codec, game_key)
    guess = game.find_guess(_decode(codec, guess_key, "Guess"))
    if guess is None:
        raise HTTPException(status_code=404, detail="Guess not found")
    return guess_view(game, guess, codec, _links(request))
