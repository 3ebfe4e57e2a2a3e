"""Typer CLI for bc_utils."""

from __future__ import annotations

import json
import platform
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import typer

from bc_utils import __version__, bit_flags, telemetry
from bc_utils.config import BCUtilsSettings, load_flag_map, load_settings, parse_int
from bc_utils.errors import ConfigurationError, FlagLookupError, InvalidArgument, format_error
from bc_utils.logging import configure_logging, get_logger

app = typer.Typer(no_args_is_help=True)

logger = get_logger("cli")

MAP_OPTION = typer.Option(None, "--map", "-m", help="JSON flag map file.")


def _ints(values: list[str]) -> list[int]:
    try:
        return [parse_int(value) for value in values]
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from None


def _load_settings() -> BCUtilsSettings:
    try:
        return load_settings()
    except ConfigurationError as exc:
        typer.echo(format_error(exc), err=True)
        raise typer.Exit(2) from None


def _flag_map(map_file: Path | None, settings: BCUtilsSettings) -> dict[int, str]:
    path = map_file or settings.flags.map_file
    if path is None:
        raise ConfigurationError(
            "no flag map given", config_key="BC_UTILS_FLAG_MAP", expected="path to a JSON flag map"
        )
    return load_flag_map(path)


@contextmanager
def _command(name: str, **metadata: object) -> Iterator[BCUtilsSettings]:
    """Load settings and run a command body inside a telemetry span."""
    try:
        settings = load_settings()
        configure_logging(settings)
        with telemetry.span(("bc_utils", "cli", name), metadata):
            yield settings
    except FlagLookupError as exc:
        logger.debug("{} failed: {}", name, exc.message)
        typer.echo(format_error(exc), err=True)
        raise typer.Exit(1) from None
    except (InvalidArgument, ConfigurationError) as exc:
        logger.warning("{} rejected: {}", name, exc.message)
        typer.echo(format_error(exc), err=True)
        raise typer.Exit(2) from None


@app.command()
def decompose(target: str) -> None:
    """Print the powers of two that make up TARGET."""

    (value,) = _ints([target])
    with _command("decompose", target=value):
        typer.echo(json.dumps(bit_flags.decompose(value)))


@app.command("set")
def set_flags(target: str, flags: list[str]) -> None:
    """Set FLAGS on TARGET and print the result."""

    value, *values = _ints([target, *flags])
    with _command("set", target=value, flags=values):
        typer.echo(bit_flags.set_all(value, values))


@app.command("unset")
def unset_flags(target: str, flags: list[str]) -> None:
    """Clear FLAGS from TARGET and print the result."""

    value, *values = _ints([target, *flags])
    with _command("unset", target=value, flags=values):
        typer.echo(bit_flags.unset_all(value, values))


@app.command()
def has(
    target: str,
    flags: list[str],
    any_: bool = typer.Option(False, "--any", help="Succeed if any flag is set."),
) -> None:
    """Check whether TARGET has all (or any) of FLAGS; exits 1 when it does not."""

    value, *values = _ints([target, *flags])
    with _command("has", target=value, flags=values, any=any_):
        check = bit_flags.has_any if any_ else bit_flags.has_all
        result = check(value, values)
        typer.echo("true" if result else "false")
    if not result:
        raise typer.Exit(1)


@app.command()
def render(target: str, map_file: Path | None = MAP_OPTION) -> None:
    """Print the labels of TARGET, lowest bit first."""

    (value,) = _ints([target])
    with _command("render", target=value) as settings:
        typer.echo(bit_flags.to_string(value, _flag_map(map_file, settings)))


@app.command()
def highest(target: str, map_file: Path | None = MAP_OPTION) -> None:
    """Print the label of the highest bit of TARGET."""

    (value,) = _ints([target])
    with _command("highest", target=value) as settings:
        typer.echo(bit_flags.highest(value, _flag_map(map_file, settings)))


@app.command()
def lowest(target: str, map_file: Path | None = MAP_OPTION) -> None:
    """Print the label of the lowest bit of TARGET."""

    (value,) = _ints([target])
    with _command("lowest", target=value) as settings:
        typer.echo(bit_flags.lowest(value, _flag_map(map_file, settings)))


@app.command()
def doctor() -> None:
    """Print environment diagnostics."""

    settings = _load_settings()
    configure_logging(settings)
    info = {
        "bc_utils": __version__,
        "python": platform.python_version(),
        "platform": platform.platform(),
        "paths": {
            "home": str(settings.paths.base_dir),
            "logs": str(settings.paths.logs_dir),
        },
        "flag_map": str(settings.flags.map_file) if settings.flags.map_file else None,
    }
    typer.echo(json.dumps(info, indent=2))


@app.command()
def settings(key: str | None = typer.Argument(None)) -> None:
    """Display current settings or a specific section."""

    data = _load_settings().model_dump()
    if key:
        data = data.get(key, {})
    typer.echo(json.dumps(data, indent=2, default=str))


def main() -> None:
    app()
