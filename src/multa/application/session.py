"""
Practice session: the scheduling core.

A session owns the full universe of cards, ordered by presentation
priority, and a logical clock (`tick`) that advances by one per review.
After every mutation the order is rebuilt:

1. Learning cards that are due (soonest first)
2. Unseen cards, in the order they were shuffled
3. Learned cards (soonest first)
4. Learning cards that are not due yet (soonest first)

The last group is only reached once everything else is exhausted, so
`peek()` always has something to present.
"""

import logging
import random
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from typing import assert_never

from multa.domain.constants import MAX_FACTOR, MIN_FACTOR
from multa.domain.ladder import IntervalLadder
from multa.domain.models import (
    Card,
    Factors,
    Learned,
    Learning,
    Rating,
    Unseen,
    map_due,
    status_kind,
)

logger = logging.getLogger(__name__)


def generate_universe(
    rng: random.Random | None = None,
    *,
    min_factor: int = MIN_FACTOR,
    max_factor: int = MAX_FACTOR,
    ladder: IntervalLadder | None = None,
) -> list[Card]:
    """Every ordered factor pair in range as an unseen card, shuffled."""
    cards = [
        Card.new(x, y, ladder)
        for x in range(min_factor, max_factor + 1)
        for y in range(min_factor, max_factor + 1)
    ]
    (rng or random.Random()).shuffle(cards)
    return cards


def wall_clock_seconds(clock: Callable[[], float] = time.time) -> int | None:
    """Best-effort epoch seconds; None when the clock cannot be read."""
    try:
        return int(clock())
    except (OSError, OverflowError, ValueError) as e:
        logger.debug(f"Could not read wall clock: {e}")
        return None


def _copy_cards(cards: Iterable[Card]) -> list[Card]:
    return [replace(card) for card in cards]


@dataclass
class Snapshot:
    """State right before a review; enough to undo it."""

    cards: list[Card]
    tick: int


class Session:
    """
    Ordered card universe plus logical clock.

    Args:
        cards: Initial cards. Their relative order is kept for unseen cards.
        tick: Starting value of the logical clock.
        ladder: Interval ladder used for transitions.
        clock: Wall clock used to stamp `last_seen`.
    """

    def __init__(
        self,
        cards: Iterable[Card] = (),
        *,
        tick: int = 0,
        ladder: IntervalLadder | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.cards: list[Card] = list(cards)
        self.tick = tick
        self.ladder = ladder or IntervalLadder()
        self._clock = clock
        self._snapshot: Snapshot | None = None
        self.rebuild()

    @classmethod
    def new(
        cls,
        rng: random.Random | None = None,
        *,
        min_factor: int = MIN_FACTOR,
        max_factor: int = MAX_FACTOR,
        ladder: IntervalLadder | None = None,
        clock: Callable[[], float] = time.time,
    ) -> "Session":
        """A session over a freshly shuffled universe of unseen cards."""
        ladder = ladder or IntervalLadder()
        cards = generate_universe(
            rng, min_factor=min_factor, max_factor=max_factor, ladder=ladder
        )
        return cls(cards, ladder=ladder, clock=clock)

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    def peek(self) -> Card | None:
        """The card to present next, as a copy. None only if there are no cards."""
        if not self.cards:
            return None
        return replace(self.cards[0])

    def review(self, rating: Rating) -> Card | None:
        """
        Apply `rating` to the card returned by `peek()`.

        Saves a snapshot first so the review can be undone with `rollback()`.
        Returns the updated card, or None if there was nothing to review.
        """
        card = self.peek()
        if card is None:
            return None

        self._snapshot = Snapshot(cards=_copy_cards(self.cards), tick=self.tick)

        updated = card.reviewed(
            rating,
            tick=self.tick,
            ladder=self.ladder,
            seen_at=wall_clock_seconds(self._clock),
        )
        # Position is not stable across rebuilds; match on identity.
        target = self._find(updated.value)
        target.interval = updated.interval
        target.status = updated.status
        target.last_result = updated.last_result
        target.last_seen = updated.last_seen

        self.tick += 1
        self.rebuild()
        logger.debug(
            f"Reviewed {updated.value} as {rating.value}: interval={updated.interval} "
            f"status={updated.status} tick={self.tick}"
        )
        return replace(target)

    def rollback(self) -> bool:
        """
        Undo the most recent review. Only one level is kept.

        Returns True if a review was undone, False if there was nothing to undo.
        """
        if self._snapshot is None:
            return False
        self.cards = self._snapshot.cards
        self.tick = self._snapshot.tick
        self._snapshot = None
        logger.debug(f"Rolled back to tick={self.tick}")
        return True

    @property
    def can_rollback(self) -> bool:
        return self._snapshot is not None

    def rebuild(self) -> None:
        """Recompute presentation order over every card."""
        # Stable sort keeps unseen cards in shuffle order.
        self.cards.sort(key=self._rank)

    def _rank(self, card: Card) -> tuple[int, int]:
        match card.status:
            case Learning(due=due) if due <= self.tick:
                return (0, due)
            case Unseen():
                return (1, 0)
            case Learned(due=due):
                return (2, due)
            case Learning(due=due):
                return (3, due)
            case _:
                assert_never(card.status)

    def _find(self, value: Factors) -> Card:
        for card in self.cards:
            if card.value == value:
                return card
        raise LookupError(f"No card {value} in session")

    # ------------------------------------------------------------------
    # Persistence support
    # ------------------------------------------------------------------

    def apply_changes(self, changes: Iterable[Card]) -> None:
        """
        Overlay previously saved cards onto this session's universe.

        Matching cards are replaced wholesale. Saved cards that are not part
        of the universe are dropped; the rest of the universe stays unseen.
        """
        by_value = {card.value: card for card in changes}
        applied = 0

        for i, card in enumerate(self.cards):
            changed = by_value.pop(card.value, None)
            if changed is not None:
                self.cards[i] = replace(changed)
                applied += 1

        if by_value:
            logger.debug(
                f"Dropped {len(by_value)} saved cards outside the universe: "
                f"{sorted(str(v) for v in by_value)}"
            )
        logger.debug(f"Applied {applied} saved cards")
        self.rebuild()

    def get_cards_to_save(self) -> list[Card]:
        """
        Cards worth persisting, with due values re-based.

        Unseen cards are skipped. Due values are shifted down by
        min(tick, lowest due) so a session restarting at tick 0 sees the same
        relative schedule.
        """
        retained = [card for card in self.cards if not isinstance(card.status, Unseen)]
        if not retained:
            return []

        offset = min(self.tick, min(card.due for card in retained))
        return [
            replace(card, status=map_due(card.status, lambda due: due - offset))
            for card in retained
        ]

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def counts(self) -> dict[str, int]:
        """Number of cards per status kind."""
        counts = {"unseen": 0, "learning": 0, "learned": 0}
        for card in self.cards:
            counts[status_kind(card.status)] += 1
        return counts

    def __len__(self) -> int:
        return len(self.cards)

    def __repr__(self) -> str:
        return f"Session(tick={self.tick}, cards={len(self.cards)}, counts={self.counts()})"
