"""
JSON Profile Repository — Infrastructure adapter for profile files.

Implements ProfileRepository with one JSON document per profile:

    {"version": 1,
     "cards": [{"value": [7, 8], "interval": 3,
                "status": {"kind": "learning", "due": 3},
                "last_result": "good", "last_seen": 1700000000}]}
"""

import contextlib
import logging
import os
import tempfile
from pathlib import Path
from typing import Literal, assert_never

from pydantic import (
    BaseModel,
    ConfigDict,
    NonNegativeInt,
    PositiveInt,
    ValidationError,
    model_validator,
)

from multa.domain.constants import CORRUPT_SUFFIX, PROFILE_FORMAT_VERSION
from multa.domain.errors import CorruptProfileError, ProfileReadError, ProfileWriteError
from multa.domain.models import Card, Factors, Learned, Learning, Rating, Status, Unseen
from multa.domain.ports import ProfileRepository

logger = logging.getLogger(__name__)


class StoredStatus(BaseModel):
    model_config = ConfigDict(extra="ignore")

    kind: Literal["unseen", "learning", "learned"]
    due: NonNegativeInt | None = None

    @model_validator(mode="after")
    def check_due(self) -> "StoredStatus":
        if self.kind == "unseen" and self.due is not None:
            raise ValueError("unseen status must not carry a due tick")
        if self.kind != "unseen" and self.due is None:
            raise ValueError(f"{self.kind} status requires a due tick")
        return self

    def to_status(self) -> Status:
        if self.kind == "unseen":
            return Unseen()
        if self.kind == "learning":
            return Learning(self.due)
        return Learned(self.due)

    @classmethod
    def from_status(cls, status: Status) -> "StoredStatus":
        match status:
            case Unseen():
                return cls(kind="unseen")
            case Learning(due=due):
                return cls(kind="learning", due=due)
            case Learned(due=due):
                return cls(kind="learned", due=due)
            case _:
                assert_never(status)


class StoredCard(BaseModel):
    model_config = ConfigDict(extra="ignore")

    value: tuple[int, int]
    interval: PositiveInt
    status: StoredStatus
    last_result: Rating | None = None
    last_seen: int | None = None

    def to_card(self) -> Card:
        x, y = self.value
        return Card(
            value=Factors(x, y),
            interval=self.interval,
            status=self.status.to_status(),
            last_result=self.last_result,
            last_seen=self.last_seen,
        )

    @classmethod
    def from_card(cls, card: Card) -> "StoredCard":
        return cls(
            value=(card.value.x, card.value.y),
            interval=card.interval,
            status=StoredStatus.from_status(card.status),
            last_result=card.last_result,
            last_seen=card.last_seen,
        )


class StoredSession(BaseModel):
    model_config = ConfigDict(extra="ignore")

    version: int = PROFILE_FORMAT_VERSION
    cards: list[StoredCard] = []


class JsonProfileRepository(ProfileRepository):
    """
    Stores each profile as a JSON file.

    Writes go to a temporary file in the same directory which then replaces
    the profile, so an interrupted save never leaves a truncated file.
    """

    def read(self, path: Path) -> list[Card] | None:
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as e:
            raise CorruptProfileError(path, f"not valid UTF-8: {e}") from e
        except OSError as e:
            raise ProfileReadError(path, str(e)) from e

        try:
            stored = StoredSession.model_validate_json(text)
        except ValidationError as e:
            raise CorruptProfileError(path, f"{e.error_count()} validation error(s): {e}") from e

        if stored.version != PROFILE_FORMAT_VERSION:
            raise CorruptProfileError(
                path,
                f"unsupported profile version {stored.version}, expected {PROFILE_FORMAT_VERSION}",
            )

        logger.debug(f"Read {len(stored.cards)} cards from {path}")
        return [card.to_card() for card in stored.cards]

    def write(self, path: Path, cards: list[Card]) -> None:
        payload = StoredSession(cards=[StoredCard.from_card(c) for c in cards])
        text = payload.model_dump_json(indent=2)

        tmp_path: Path | None = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=path.parent,
                prefix=f".{path.name}.",
                suffix=".tmp",
                delete=False,
            ) as fh:
                tmp_path = Path(fh.name)
                fh.write(text)
            os.replace(tmp_path, path)
        except OSError as e:
            if tmp_path is not None:
                with contextlib.suppress(OSError):
                    tmp_path.unlink(missing_ok=True)
            raise ProfileWriteError(path, str(e)) from e

        logger.debug(f"Wrote {len(cards)} cards to {path}")

    def delete(self, path: Path) -> bool:
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise ProfileWriteError(path, str(e)) from e
        return True

    def quarantine(self, path: Path) -> Path:
        target = path.with_name(path.name + CORRUPT_SUFFIX)
        try:
            os.replace(path, target)
        except OSError as e:
            raise ProfileWriteError(path, f"could not move corrupt profile aside: {e}") from e
        return target
