"""Commands that show what would be checked without checking it."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from orthotypo.cli.options import (
    ConfigOption,
    ExcludeOption,
    HiddenOption,
    NoIgnoreOption,
    PathsArgument,
    err_console,
    resolve_config,
    resolve_paths,
)
from orthotypo.core.config import Config
from orthotypo.core.errors import ParseFailureError
from orthotypo.core.languages import Language, detect_language_from_path, language_patterns
from orthotypo.core.pipeline import iter_prose
from orthotypo.core.walker import iter_files

console = Console()


def files(
    paths: PathsArgument = None,
    exclude: ExcludeOption = None,
    hidden: HiddenOption = False,
    no_ignore: NoIgnoreOption = False,
    config_path: ConfigOption = None,
) -> None:
    """Print each file that would be checked."""
    config = resolve_config(config_path, exclude, hidden, no_ignore)
    for path in iter_files(resolve_paths(paths), config.files):
        language = detect_language_from_path(path)
        if language is not None and config.engine_for(language).enabled():
            typer.echo(str(path))


def strings(
    paths: PathsArgument = None,
    exclude: ExcludeOption = None,
    hidden: HiddenOption = False,
    no_ignore: NoIgnoreOption = False,
    config_path: ConfigOption = None,
) -> None:
    """Print each string that would be checked."""
    config = resolve_config(config_path, exclude, hidden, no_ignore)
    for path in iter_files(resolve_paths(paths), config.files):
        language = detect_language_from_path(path)
        if language is None or not config.engine_for(language).enabled():
            continue
        try:
            for _, text in iter_prose(path.read_bytes(), language):
                typer.echo(text)
        except (OSError, ParseFailureError) as exc:
            err_console.print(f"{path}: {exc}", style="red", markup=False, highlight=False)


def types() -> None:
    """Show all supported file types."""
    table = Table(show_lines=False)
    table.add_column("type")
    table.add_column("patterns")
    for language in Language:
        table.add_row(language.value, ", ".join(language_patterns(language)))
    console.print(table)


def dump_config(
    output: Annotated[str, typer.Argument(help="File to write, `-` for stdout.")] = "-",
    config_path: ConfigOption = None,
) -> None:
    """Write the effective configuration as JSON."""
    config = Config.from_defaults().merge(resolve_config(config_path))
    rendered = config.model_dump_json(by_alias=True, indent=2)
    if output == "-":
        typer.echo(rendered)
    else:
        Path(output).write_text(rendered + "\n", encoding="utf-8")
