"""multa CLI — practice, status, reset and config commands."""

import json
import logging
import sys
from pathlib import Path
from typing import Annotated

import typer

from multa.application.config import AppConfig, resolve_config
from multa.application.factory import get_profile_repository
from multa.application.profile_service import load, save
from multa.domain.errors import (
    CorruptProfileError,
    MultaError,
    ProfileReadError,
    ProfileWriteError,
)
from multa.interface.practice import run_practice

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="multa: spaced-repetition drills for the multiplication tables.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Inspect multa configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


def _apply_log_level(config: AppConfig, verbose: int) -> None:
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.getLevelName(config.log_level)
    logging.getLogger().setLevel(level)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def humanize_error(exc: Exception) -> str:
    """Turn a multa error into a one-line message for the terminal."""
    if isinstance(exc, CorruptProfileError):
        return (
            f"Profile {exc.path} is corrupt: {exc.reason}. "
            "Move it aside or run 'multa reset' to start over."
        )
    if isinstance(exc, ProfileReadError):
        return f"Could not read profile {exc.path}: {exc.reason}"
    if isinstance(exc, ProfileWriteError):
        return f"Could not save profile {exc.path}: {exc.reason}"
    return str(exc)


def _resolve_with_overrides(ctx: typer.Context, **overrides) -> AppConfig:
    try:
        config = resolve_config(overrides)
    except ValueError as e:
        # pydantic.ValidationError is a ValueError
        typer.secho(f"Invalid configuration: {e}", fg="red", err=True)
        raise typer.Exit(2) from e
    _apply_log_level(config, ctx.obj.get("verbose", 0) if ctx.obj else 0)
    return config


def _load_session(config: AppConfig, *, quarantine: bool = True):
    return load(
        config.profile_path(),
        ladder=config.ladder(),
        min_factor=config.min_factor,
        max_factor=config.max_factor,
        strict=config.strict_load,
        quarantine=quarantine,
    )


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
):
    """Global settings for multa."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


# ---------------------------------------------------------------------------
# Root commands
# ---------------------------------------------------------------------------


@app.command()
def practice(
    ctx: typer.Context,
    profile: Annotated[
        str | None, typer.Option("--profile", "-p", help="Profile to practice with.")
    ] = None,
    data_dir: Annotated[
        Path | None, typer.Option(help="Directory holding profile files.")
    ] = None,
    limit: Annotated[
        int | None, typer.Option(min=1, help="Stop after this many answers.")
    ] = None,
    examination: Annotated[
        bool,
        typer.Option(
            "--examination", "-e", help="Score answers without saving the schedule."
        ),
    ] = False,
):
    """[bold green]Practice[/bold green] the tables. Type 'u' to undo, 'q' to quit."""
    config = _resolve_with_overrides(ctx, profile=profile, data_dir=data_dir)
    path = config.profile_path()

    try:
        session = _load_session(config)
    except MultaError as e:
        typer.secho(humanize_error(e), fg="red", err=True)
        raise typer.Exit(1) from e

    summary = run_practice(session, limit=limit)
    typer.echo(str(summary))

    if examination:
        logger.info("Examination mode: schedule not saved.")
        return

    try:
        save(session, path)
    except MultaError as e:
        typer.secho(humanize_error(e), fg="red", err=True)
        raise typer.Exit(1) from e


@app.command()
def status(
    ctx: typer.Context,
    profile: Annotated[
        str | None, typer.Option("--profile", "-p", help="Profile to inspect.")
    ] = None,
    data_dir: Annotated[
        Path | None, typer.Option(help="Directory holding profile files.")
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show how far a profile has progressed."""
    config = _resolve_with_overrides(ctx, profile=profile, data_dir=data_dir)

    try:
        session = _load_session(config, quarantine=False)
    except MultaError as e:
        typer.secho(humanize_error(e), fg="red", err=True)
        raise typer.Exit(1) from e

    counts = session.counts()
    head = session.peek()

    if json_output:
        typer.echo(
            json.dumps(
                {
                    "profile": config.profile,
                    "path": str(config.profile_path()),
                    "total": len(session),
                    **counts,
                    "next": str(head.value) if head else None,
                },
                indent=2,
            )
        )
        return

    typer.echo(f"Profile: {config.profile}  ({config.profile_path()})")
    typer.echo(
        f"Cards: {len(session)}  Unseen: {counts['unseen']}"
        f"  Learning: {counts['learning']}  Learned: {counts['learned']}"
    )
    if head:
        typer.echo(f"Next: {head.value}")


@app.command()
def reset(
    ctx: typer.Context,
    profile: Annotated[
        str | None, typer.Option("--profile", "-p", help="Profile to erase.")
    ] = None,
    data_dir: Annotated[
        Path | None, typer.Option(help="Directory holding profile files.")
    ] = None,
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Bypass confirmation.")
    ] = False,
):
    """Erase the saved history of a profile."""
    config = _resolve_with_overrides(ctx, profile=profile, data_dir=data_dir)
    path = config.profile_path()

    if not force:
        typer.confirm(f"Erase all progress stored in {path}?", abort=True)

    try:
        removed = get_profile_repository().delete(path)
    except MultaError as e:
        typer.secho(humanize_error(e), fg="red", err=True)
        raise typer.Exit(1) from e

    if removed:
        typer.secho(f"Erased profile '{config.profile}'.", fg="green")
    else:
        typer.secho(f"No saved progress for profile '{config.profile}'.", fg="yellow")


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Display final resolved configuration."""
    config = _resolve_with_overrides(ctx)
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    d["profile_path"] = str(config.profile_path())
    typer.echo(json.dumps(d, indent=2))
