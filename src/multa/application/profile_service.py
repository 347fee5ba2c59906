"""
Profile service: loads a session from, and saves it to, a stored profile.

The profile path is always passed in by the caller; resolving it is the
job of AppConfig.profile_path().
"""

import logging
import random
import time
from collections.abc import Callable
from pathlib import Path

from multa.application.factory import get_profile_repository
from multa.application.session import Session
from multa.domain.constants import MAX_FACTOR, MIN_FACTOR
from multa.domain.errors import CorruptProfileError
from multa.domain.ladder import IntervalLadder
from multa.domain.models import Card
from multa.domain.ports import ProfileRepository

logger = logging.getLogger(__name__)


def load(
    profile_path: Path,
    *,
    repository: ProfileRepository | None = None,
    rng: random.Random | None = None,
    ladder: IntervalLadder | None = None,
    min_factor: int = MIN_FACTOR,
    max_factor: int = MAX_FACTOR,
    strict: bool = False,
    quarantine: bool = True,
    clock: Callable[[], float] = time.time,
) -> Session:
    """
    Build a session over a fresh universe and overlay the stored profile.

    A missing profile yields a fresh session. A corrupt profile is moved
    aside and also yields a fresh session, unless `strict` is set, in which
    case CorruptProfileError propagates. With `quarantine` off the corrupt
    file is left where it is. Read failures always propagate.
    """
    repo = repository or get_profile_repository()
    session = Session.new(
        rng, min_factor=min_factor, max_factor=max_factor, ladder=ladder, clock=clock
    )

    try:
        cards = repo.read(profile_path)
    except CorruptProfileError as e:
        if strict:
            raise
        if not quarantine:
            logger.warning(
                f"Profile {profile_path} is corrupt ({e.reason}); left it in place."
            )
            return session
        backup = repo.quarantine(profile_path)
        logger.warning(
            f"Profile {profile_path} is corrupt ({e.reason}); "
            f"moved it to {backup} and started from a fresh deck."
        )
        return session

    if cards is None:
        logger.info(f"No profile at {profile_path}; starting from a fresh deck.")
        return session

    session.apply_changes(cards)
    logger.info(f"Loaded {len(cards)} cards from {profile_path}")
    return session


def save(
    session: Session,
    profile_path: Path,
    *,
    repository: ProfileRepository | None = None,
) -> list[Card]:
    """
    Persist the session's reviewed cards with normalized due values.

    Returns the cards that were written.
    """
    repo = repository or get_profile_repository()
    cards = session.get_cards_to_save()
    repo.write(profile_path, cards)
    logger.info(f"Saved {len(cards)} cards to {profile_path}")
    return cards
