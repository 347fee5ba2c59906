import random

import pytest


@pytest.fixture(autouse=True)
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir and clears multa env vars."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config and profiles
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("XDG_DATA_HOME", raising=False)
    for name in (
        "DATA_DIR",
        "PROFILE",
        "INTERVALS",
        "MIN_FACTOR",
        "MAX_FACTOR",
        "STRICT_LOAD",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(f"MULTA_{name}", raising=False)
    return home


@pytest.fixture
def profile_path(tmp_path):
    return tmp_path / "profiles" / "default.json"


@pytest.fixture
def rng():
    return random.Random(1234)
