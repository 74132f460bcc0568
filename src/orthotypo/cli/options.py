from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from orthotypo.core.config import Config, WalkConfig, find_config, load_config
from orthotypo.core.errors import ConfigError

err_console = Console(stderr=True)

PathsArgument = Annotated[list[Path] | None, typer.Argument(help="Files or directories to check.", show_default=".")]
ExcludeOption = Annotated[
    list[str] | None, typer.Option("--exclude", metavar="GLOB", help="Ignore files and directories matching the glob.")
]
HiddenOption = Annotated[bool, typer.Option("--hidden", "-H", help="Search hidden files and directories.")]
NoIgnoreOption = Annotated[bool, typer.Option("--no-ignore", "-I", help="Don't respect .gitignore and .ignore files.")]
ConfigOption = Annotated[
    Path | None, typer.Option("--config", "-c", help="Config file to use instead of searching for one.")
]


def resolve_config(
    config_path: Path | None = None,
    exclude: list[str] | None = None,
    hidden: bool = False,
    no_ignore: bool = False,
) -> Config:
    """Load the config file and layer command line flags on top of it."""
    try:
        loaded = load_config(config_path) if config_path else find_config(Path.cwd())
    except ConfigError as exc:
        err_console.print(str(exc), style="red", markup=False, highlight=False)
        raise typer.Exit(2) from exc

    from_flags = Config(
        files=WalkConfig(
            ignore_hidden=False if hidden else None,
            ignore_files=False if no_ignore else None,
            extend_exclude=exclude or [],
        )
    )
    return (loaded or Config()).merge(from_flags)


def resolve_paths(paths: list[Path] | None) -> list[Path]:
    return paths or [Path(".")]
