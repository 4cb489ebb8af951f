"""Command line interface for typeport.

This module provides a command-line interface for transpiling a snapshot of type
definitions to one or more target languages.
"""

import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any, Optional, TypeVar, cast

import typer
from loguru import logger

from typeport.config import load_config
from typeport.transpiler import transpile
from typeport.transpiler.collector import load_parsed_data
from typeport.transpiler.core.dependency import sort_items
from typeport.transpiler.core.interfaces import TargetLanguage
from typeport.transpiler.errors import SinkWriteError, TranspilerError

# Define type variables for TypedCallable
F = TypeVar("F", bound=Callable[..., Any])


# TypedCommand decorator helper
def typed_command(app_command: Any) -> Callable[[F], F]:
    """Wrap typer command with proper typing for mypy."""

    def decorator(func: F) -> F:
        return cast(F, app_command(func))

    return decorator


app = typer.Typer(
    name="typeport",
    help=(
        "Transpile type definitions into other languages. "
        "Commands: generate, order."
    ),
    add_completion=False,
)


def _configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO")


def _map_languages(names: list[str]) -> list[TargetLanguage]:
    """Map language names from the command line to target languages.

    Args:
        names: Language names, e.g. ``["python", "go"]``

    Returns:
        Target languages without duplicates, in the given order
    """
    languages: list[TargetLanguage] = []
    for name in names:
        try:
            language = TargetLanguage.from_name(name)
        except ValueError as e:
            raise typer.BadParameter(str(e), param_hint="--lang")
        if language not in languages:
            languages.append(language)
    return languages


def _write_output(path: Path, code: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(code)
    except OSError as e:
        raise SinkWriteError(f"Failed to write {path}: {e}") from e


SNAPSHOT_ARG = typer.Argument(
    ..., help="Snapshot file (YAML or JSON) produced by the type parser"
)


@typed_command(app.command("generate"))
def generate_types(
    snapshot: Path = SNAPSHOT_ARG,
    lang: list[str] = typer.Option(
        ["python"], "--lang", "-l", help="Target language (python, go); repeatable"
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="YAML configuration file"
    ),
    out_dir: Optional[Path] = typer.Option(
        None, "--out-dir", "-o", help="Output directory (prints to stdout if omitted)"
    ),
    name: str = typer.Option("types", "--name", "-n", help="Output file base name"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Generate type declarations for each target language.

    Every language is generated independently; a failure in one is reported and
    the others are still written.

    Example: typeport generate snapshot.yaml --lang python --lang go -o generated
    """
    _configure_logging(verbose)
    languages = _map_languages(lang)

    try:
        data = load_parsed_data(snapshot)
        configs = load_config(config)
        report = transpile(data, languages, configs)
    except TranspilerError as e:
        logger.error(str(e))
        raise typer.Exit(code=1)

    failed = False
    for language in languages:
        if language in report.errors:
            logger.error(f"{language.value}: {report.errors[language]}")
            failed = True
            continue

        code = report.outputs[language]
        if out_dir is None:
            typer.echo(code, nl=False)
            continue

        path = out_dir / f"{name}{configs[language].file_extension}"
        try:
            _write_output(path, code)
        except SinkWriteError as e:
            logger.error(str(e))
            failed = True
            continue
        logger.info(f"Wrote {language.value} types to {path}")

    if failed:
        raise typer.Exit(code=1)


@typed_command(app.command("order"))
def show_order(
    snapshot: Path = SNAPSHOT_ARG,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Print the emission order of all types, one name per line."""
    _configure_logging(verbose)
    try:
        data = load_parsed_data(snapshot)
        ordered = sort_items(data.items())
    except TranspilerError as e:
        logger.error(str(e))
        raise typer.Exit(code=1)

    for item in ordered:
        typer.echo(item.id.original)


if __name__ == "__main__":
    app()
