# Domain Package
from .errors import (
    CorruptProfileError,
    MultaError,
    ProfileError,
    ProfileReadError,
    ProfileWriteError,
)
from .ladder import IntervalLadder
from .models import Card, Factors, Learned, Learning, Rating, Status, Unseen, map_due
from .ports import ProfileRepository

__all__ = [
    "Card",
    "CorruptProfileError",
    "Factors",
    "IntervalLadder",
    "Learned",
    "Learning",
    "MultaError",
    "ProfileError",
    "ProfileReadError",
    "ProfileRepository",
    "ProfileWriteError",
    "Rating",
    "Status",
    "Unseen",
    "map_due",
]
