"""Tests for the interactive practice command."""

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from multa.application.session import Session
from multa.domain.errors import ProfileReadError, ProfileWriteError
from multa.domain.models import Card, Factors, Learning, Rating
from multa.interface.cli import app
from multa.interface.practice import Summary, rate_answer

runner = CliRunner()


def small_session() -> Session:
    return Session([Card.new(3, 4), Card.new(6, 7)], clock=lambda: 1_700_000_000.0)


def saved_cards(data_dir) -> list[dict]:
    return json.loads((data_dir / "default.json").read_text(encoding="utf-8"))["cards"]


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "data"


def test_practice_good_and_bad(data_dir):
    with patch("multa.interface.cli.load", return_value=small_session()):
        result = runner.invoke(
            app, ["practice", "--data-dir", str(data_dir)], input="12\n41\nq\n"
        )

    assert result.exit_code == 0, result.output
    assert "3 x 4 = 12 OK" in result.output
    assert "6 x 7 != 41 KO!!! => 42" in result.output
    assert "Summary: 1 OK; 1 KO" in result.output

    cards = {tuple(c["value"]): c for c in saved_cards(data_dir)}
    assert cards[(3, 4)]["status"] == {"kind": "learning", "due": 2}
    assert cards[(3, 4)]["last_result"] == "good"
    assert cards[(6, 7)]["status"] == {"kind": "learning", "due": 2}
    assert cards[(6, 7)]["interval"] == 2
    assert cards[(6, 7)]["last_seen"] == 1_700_000_000


def test_practice_non_numeric_is_wrong(data_dir):
    with patch("multa.interface.cli.load", return_value=small_session()):
        result = runner.invoke(app, ["practice", "--data-dir", str(data_dir)], input="twelve\n")

    assert result.exit_code == 0, result.output
    assert "3 x 4 != twelve KO!!! => 12" in result.output
    assert "Summary: 0 OK; 1 KO" in result.output


def test_practice_end_of_input_still_saves(data_dir):
    with patch("multa.interface.cli.load", return_value=small_session()):
        result = runner.invoke(app, ["practice", "--data-dir", str(data_dir)], input="12\n")

    assert result.exit_code == 0, result.output
    assert len(saved_cards(data_dir)) == 1


def test_practice_undo(data_dir):
    with patch("multa.interface.cli.load", return_value=small_session()):
        result = runner.invoke(
            app, ["practice", "--data-dir", str(data_dir)], input="12\nu\nu\n5\nq\n"
        )

    assert result.exit_code == 0, result.output
    assert "Undid the last answer." in result.output
    assert "Nothing to undo." in result.output
    assert "3 x 4 != 5 KO!!! => 12" in result.output
    assert "Summary: 0 OK; 1 KO" in result.output

    cards = saved_cards(data_dir)
    assert len(cards) == 1
    assert cards[0]["value"] == [3, 4]
    assert cards[0]["last_result"] == "bad"


def test_practice_limit(data_dir):
    with patch("multa.interface.cli.load", return_value=small_session()):
        result = runner.invoke(
            app, ["practice", "--data-dir", str(data_dir), "--limit", "1"], input="12\n42\n"
        )

    assert result.exit_code == 0, result.output
    assert "Summary: 1 OK; 0 KO" in result.output
    assert "6 x 7" not in result.output


def test_practice_examination_does_not_save(data_dir):
    with patch("multa.interface.cli.load", return_value=small_session()):
        result = runner.invoke(
            app, ["practice", "--data-dir", str(data_dir), "--examination"], input="12\n42\n"
        )

    assert result.exit_code == 0, result.output
    assert "Summary: 2 OK(s); 0 KO" in result.output
    assert not (data_dir / "default.json").exists()


def test_practice_round_trip_through_real_profile(data_dir):
    result = runner.invoke(app, ["practice", "--data-dir", str(data_dir)], input="0\n0\nq\n")
    assert result.exit_code == 0, result.output
    assert "Summary: 0 OK; 2 KO(s)" in result.output
    assert len(saved_cards(data_dir)) == 2

    status = runner.invoke(app, ["status", "--data-dir", str(data_dir), "--json"])
    assert status.exit_code == 0, status.output
    assert json.loads(status.stdout)["learning"] == 2


def test_practice_load_failure(data_dir):
    error = ProfileReadError(data_dir / "default.json", "permission denied")
    with patch("multa.interface.cli.load", side_effect=error):
        result = runner.invoke(app, ["practice", "--data-dir", str(data_dir)], input="q\n")

    assert result.exit_code == 1
    assert "Could not read profile" in result.output


def test_practice_save_failure(data_dir):
    error = ProfileWriteError(data_dir / "default.json", "disk full")
    with (
        patch("multa.interface.cli.load", return_value=small_session()),
        patch("multa.interface.cli.save", side_effect=error),
    ):
        result = runner.invoke(app, ["practice", "--data-dir", str(data_dir)], input="12\nq\n")

    assert result.exit_code == 1
    assert "Summary: 1 OK; 0 KO" in result.output
    assert "Could not save profile" in result.output


def test_practice_strict_corrupt_profile(data_dir, monkeypatch):
    data_dir.mkdir()
    (data_dir / "default.json").write_text("{oops", encoding="utf-8")
    monkeypatch.setenv("MULTA_STRICT_LOAD", "1")

    result = runner.invoke(app, ["practice", "--data-dir", str(data_dir)], input="q\n")

    assert result.exit_code == 1
    assert "is corrupt" in result.output
    assert (data_dir / "default.json").exists()


def test_practice_corrupt_profile_recovers(data_dir):
    data_dir.mkdir()
    (data_dir / "default.json").write_text("{oops", encoding="utf-8")

    result = runner.invoke(app, ["practice", "--data-dir", str(data_dir)], input="q\n")

    assert result.exit_code == 0, result.output
    assert (data_dir / "default.json.corrupt").read_text(encoding="utf-8") == "{oops"
    assert saved_cards(data_dir) == []


# --- Helpers ---


def test_rate_answer():
    card = Card.new(7, 8)
    assert rate_answer(card, "56") is Rating.GOOD
    assert rate_answer(card, "57") is Rating.BAD
    assert rate_answer(card, "") is Rating.BAD
    assert rate_answer(card, "fifty-six") is Rating.BAD


def test_summary_text():
    assert str(Summary()) == "Summary: 0 OK; 0 KO"
    assert str(Summary(ok=1, ko=2)) == "Summary: 1 OK; 2 KO(s)"
    summary = Summary(ok=3, ko=1)
    summary.forget(Rating.GOOD)
    summary.record(Rating.BAD)
    assert (summary.ok, summary.ko, summary.total) == (2, 2, 4)


def test_session_card_left_learning_after_bad():
    session = small_session()
    session.review(Rating.BAD)
    assert session.cards[-1].status == Learning(3)
    assert session.cards[-1].value == Factors(3, 4)
