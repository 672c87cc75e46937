"""
Housekeeping: purge games nobody has touched for a while.

A game is stale when it was created before the cutoff and has no guess
submitted after it. Run once from cron with:

    python -m codebreaker.maintenance
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from .game import utc_now

logger = logging.getLogger(__name__)


def purge_stale_games(store, stale_days: int, now: Optional[datetime] = None) -> int:
    cutoff = (now or utc_now()) - timedelta(days=stale_days)
    stale = store.find_stale(cutoff)
    for game in stale:
        store.delete(game)
    logger.info("purged %d stale game(s) idle since %s", len(stale), cutoff.isoformat())
    return len(stale)


def main() -> None:
    from .config import load_settings
    from .db import SessionLocal
    from .repository import DBGameStore

    settings = load_settings()
    logging.basicConfig(level=settings.log_level)
    with SessionLocal() as session:
        purge_stale_games(DBGameStore(session), settings.stale_game_days)


if __name__ == "__main__":
    main()
