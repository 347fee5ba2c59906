"""
Domain models for drill cards.

These are pure data structures with no I/O or external dependencies.
"""

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TypeAlias, assert_never

from multa.domain.ladder import IntervalLadder


@dataclass(frozen=True, order=True)
class Factors:
    """
    Identity of a drill item: an ordered pair of factors.

    `3 x 7` and `7 x 3` are distinct items.
    """

    x: int
    y: int

    def compute(self) -> int:
        return self.x * self.y

    def __str__(self) -> str:
        return f"{self.x} x {self.y}"


class Rating(str, Enum):
    """Outcome of a single review."""

    GOOD = "good"
    BAD = "bad"


@dataclass(frozen=True)
class Unseen:
    """Never reviewed; carries no schedule."""


@dataclass(frozen=True)
class Learning:
    """Scheduled, below the top rung of the ladder."""

    due: int


@dataclass(frozen=True)
class Learned:
    """Scheduled, at the top rung of the ladder."""

    due: int


Status: TypeAlias = Unseen | Learning | Learned


def status_kind(status: Status) -> str:
    match status:
        case Unseen():
            return "unseen"
        case Learning():
            return "learning"
        case Learned():
            return "learned"
        case _:
            assert_never(status)


def map_due(status: Status, f: Callable[[int], int]) -> Status:
    """Return the same variant with `f` applied to its due tick."""
    match status:
        case Unseen():
            return status
        case Learning(due=due):
            return Learning(f(due))
        case Learned(due=due):
            return Learned(f(due))
        case _:
            assert_never(status)


@dataclass
class Card:
    """
    A drill card and its schedule.

    Attributes:
        value: Stable identity, used to match cards across sessions.
        interval: Current rung of the interval ladder.
        status: Lifecycle status, see Status.
        last_result: Rating of the most recent review.
        last_seen: Epoch seconds of the most recent review.
    """

    value: Factors
    interval: int
    status: Status = field(default_factory=Unseen)
    last_result: Rating | None = None
    last_seen: int | None = None

    @classmethod
    def new(cls, x: int, y: int, ladder: IntervalLadder | None = None) -> "Card":
        """Create an unseen card sitting on the bottom rung."""
        ladder = ladder or IntervalLadder()
        return cls(value=Factors(x, y), interval=ladder.first())

    @property
    def due(self) -> int | None:
        match self.status:
            case Unseen():
                return None
            case Learning(due=due) | Learned(due=due):
                return due
            case _:
                assert_never(self.status)

    def reviewed(
        self,
        rating: Rating,
        *,
        tick: int,
        ladder: IntervalLadder,
        seen_at: int | None = None,
    ) -> "Card":
        """
        Return this card after a review made at logical time `tick`.

        A bad answer drops the card to the bottom rung. A good answer climbs
        one rung; reaching the top rung marks the card learned. Either way the
        card is due `interval` ticks after the one this review consumes.
        """
        status: Status
        match rating:
            case Rating.BAD:
                interval = ladder.first()
                status = Learning(tick + 1 + interval)
            case Rating.GOOD:
                interval = ladder.next(self.interval)
                due = tick + 1 + interval
                status = Learned(due) if interval == ladder.last() else Learning(due)
            case _:
                assert_never(rating)

        return replace(
            self,
            interval=interval,
            status=status,
            last_result=rating,
            last_seen=seen_at,
        )
