import os
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from multa.domain.constants import (
    DEFAULT_INTERVALS,
    DEFAULT_PROFILE,
    MAX_FACTOR,
    MIN_FACTOR,
    PROFILE_SUFFIX,
)
from multa.domain.ladder import IntervalLadder


def _default_data_dir() -> Path:
    xdg = os.environ.get("XDG_DATA_HOME")
    base = Path(xdg) if xdg else Path.home() / ".local/share"
    return base / "multa"


def _config_files() -> list[Path]:
    return [
        Path.home() / ".config/multa/config.toml",
        Path.home() / ".multa.toml",
    ]


def validate_profile_name(name: str) -> str:
    name = name.strip()
    if not name or name in (".", ".."):
        raise ValueError("Profile name must not be empty.")
    if "/" in name or "\\" in name or os.sep in name:
        raise ValueError(f"Profile name must not contain path separators: {name!r}")
    return name


class AppConfig(BaseSettings):
    """
    Configuration model for multa.
    Supports loading from:
    1. Manual overrides (CLI)
    2. Environment variables (MULTA_*)
    3. Config file (~/.config/multa/config.toml)
    """

    model_config = SettingsConfigDict(
        env_prefix="MULTA_",
        extra="ignore",
    )

    # Paths
    data_dir: Path = Field(default_factory=_default_data_dir, validate_default=True)
    profile: str = DEFAULT_PROFILE

    # Scheduling
    intervals: list[int] = Field(default_factory=lambda: list(DEFAULT_INTERVALS))
    min_factor: int = MIN_FACTOR
    max_factor: int = MAX_FACTOR

    # Behaviour
    strict_load: bool = False
    log_level: str = "WARNING"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        # First existing file wins
        toml_file = next((f for f in _config_files() if f.exists()), None)

        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("data_dir", mode="before")
    @classmethod
    def resolve_data_dir(cls, v: Any) -> Path:
        return Path(v).expanduser().resolve()

    @field_validator("profile")
    @classmethod
    def check_profile(cls, v: str) -> str:
        return validate_profile_name(v)

    @field_validator("intervals")
    @classmethod
    def check_intervals(cls, v: list[int]) -> list[int]:
        IntervalLadder(v)  # raises ValueError on a malformed ladder
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @model_validator(mode="after")
    def check_factor_range(self) -> "AppConfig":
        if self.min_factor < 1 or self.min_factor > self.max_factor:
            raise ValueError(
                f"Factor range must satisfy 1 <= min_factor <= max_factor, "
                f"got {self.min_factor}..{self.max_factor}"
            )
        return self

    def ladder(self) -> IntervalLadder:
        return IntervalLadder(self.intervals)

    def profile_path(self, name: str | None = None) -> Path:
        """Location of the stored history for profile `name` (default: configured)."""
        name = validate_profile_name(name) if name is not None else self.profile
        return self.data_dir / f"{name}{PROFILE_SUFFIX}"


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/multa/config.toml (if exists)
    3. Environment variables (MULTA_*)
    4. cli_overrides (passed from Typer)
    """
    # Typer passes every option; only explicit values override.
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
