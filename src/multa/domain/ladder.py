"""
Interval ladder for the scheduler.

The ladder is the fixed, ascending sequence of spacings (in ticks) a card
climbs while it is answered correctly.
"""

from collections.abc import Iterable

from multa.domain.constants import DEFAULT_INTERVALS


class IntervalLadder:
    """
    Stateless policy over a fixed sequence of rungs.

    Args:
        rungs: Strictly ascending positive integers. Defaults to
            DEFAULT_INTERVALS.

    Raises:
        ValueError: If the rungs are empty, not positive or not ascending.
    """

    def __init__(self, rungs: Iterable[int] = DEFAULT_INTERVALS):
        rungs = tuple(rungs)
        if not rungs:
            raise ValueError("An interval ladder needs at least one rung.")
        if any(rung <= 0 for rung in rungs):
            raise ValueError(f"Rungs must be positive, got {list(rungs)}.")
        if any(lower >= upper for lower, upper in zip(rungs, rungs[1:])):
            raise ValueError(f"Rungs must be strictly ascending, got {list(rungs)}.")
        self._rungs = rungs

    @property
    def rungs(self) -> tuple[int, ...]:
        return self._rungs

    def first(self) -> int:
        """Bottom rung; where a card lands after a bad answer."""
        return self._rungs[0]

    def last(self) -> int:
        """Top rung; a card that reaches it is learned."""
        return self._rungs[-1]

    def next(self, current: int) -> int:
        """
        Return the rung after `current`, saturating at the top rung.

        A value that is not on the ladder falls back to the bottom rung so
        that a stale interval can never stall progression.
        """
        try:
            position = self._rungs.index(current)
        except ValueError:
            return self.first()
        return self._rungs[min(position + 1, len(self._rungs) - 1)]

    def __contains__(self, interval: object) -> bool:
        return interval in self._rungs

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IntervalLadder):
            return NotImplemented
        return self._rungs == other._rungs

    def __hash__(self) -> int:
        return hash(self._rungs)

    def __repr__(self) -> str:
        return f"IntervalLadder({list(self._rungs)})"
