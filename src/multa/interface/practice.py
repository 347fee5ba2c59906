"""Interactive practice loop driving a Session from the terminal."""

import logging
from dataclasses import dataclass

import typer

from multa.application.session import Session
from multa.domain.constants import QUIT_COMMANDS, UNDO_COMMANDS
from multa.domain.models import Card, Rating

logger = logging.getLogger(__name__)


def _plural(n: int) -> str:
    return "(s)" if n > 1 else ""


@dataclass
class Summary:
    """Running tally of answers for one practice run."""

    ok: int = 0
    ko: int = 0

    def record(self, rating: Rating) -> None:
        if rating is Rating.GOOD:
            self.ok += 1
        else:
            self.ko += 1

    def forget(self, rating: Rating) -> None:
        if rating is Rating.GOOD:
            self.ok -= 1
        else:
            self.ko -= 1

    @property
    def total(self) -> int:
        return self.ok + self.ko

    def __str__(self) -> str:
        return f"Summary: {self.ok} OK{_plural(self.ok)}; {self.ko} KO{_plural(self.ko)}"


def rate_answer(card: Card, answer: str) -> Rating:
    """GOOD if `answer` parses to the card's product, BAD otherwise."""
    try:
        value = int(answer)
    except ValueError:
        return Rating.BAD
    return Rating.GOOD if value == card.value.compute() else Rating.BAD


def _read_answer(card: Card) -> str | None:
    try:
        answer = typer.prompt(
            f"{card.value} =", default="", show_default=False, prompt_suffix=" "
        )
    except typer.Abort:
        # Ctrl-C or end of input
        return None
    return answer.strip()


def _print_ok(card: Card, answer: str) -> None:
    typer.echo(f"{card.value} = {answer}" + typer.style(" OK", fg="green"))


def _print_ko(card: Card, answer: str) -> None:
    typer.echo(
        f"{card.value} != {answer}"
        + typer.style(" KO!!!", fg="red")
        + f" => {card.value.compute()}"
    )


def run_practice(session: Session, limit: int | None = None) -> Summary:
    """
    Present cards until the learner quits, input ends or `limit` reviews.

    Typing one of UNDO_COMMANDS undoes the previous review (once).
    """
    summary = Summary()
    last_rating: Rating | None = None

    while (card := session.peek()) is not None:
        if limit is not None and summary.total >= limit:
            break

        answer = _read_answer(card)
        if answer is None or answer.lower() in QUIT_COMMANDS:
            break

        if answer.lower() in UNDO_COMMANDS:
            if last_rating is not None and session.rollback():
                summary.forget(last_rating)
                last_rating = None
                typer.secho("Undid the last answer.", fg="yellow")
            else:
                typer.secho("Nothing to undo.", fg="yellow")
            continue

        rating = rate_answer(card, answer)
        if rating is Rating.GOOD:
            _print_ok(card, answer)
        else:
            _print_ko(card, answer)
        session.review(rating)
        summary.record(rating)
        last_rating = rating

    logger.debug(f"Practice ended: {summary} {session!r}")
    return summary
