from enum import Enum
from typing import Annotated

import typer

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
from orthotypo.cli.render import render_json, render_long
from orthotypo.core.driver import run_checks
from orthotypo.core.walker import iter_files
from orthotypo.models import FileResult


class OutputFormat(str, Enum):
    long = "long"
    json = "json"


def check(
    paths: PathsArgument = None,
    write_changes: Annotated[bool, typer.Option("--write-changes", "-w", help="Write fixes out.")] = False,
    output_format: Annotated[
        OutputFormat, typer.Option("--format", case_sensitive=False, help="Render style for messages.")
    ] = OutputFormat.long,
    sort: Annotated[bool, typer.Option(help="Report files sorted by path.")] = False,
    jobs: Annotated[int | None, typer.Option("--jobs", "-j", min=1, help="Number of files checked in parallel.")] = None,
    exclude: ExcludeOption = None,
    hidden: HiddenOption = False,
    no_ignore: NoIgnoreOption = False,
    config_path: ConfigOption = None,
) -> None:
    """Check files for spaces before punctuation marks."""
    config = resolve_config(config_path, exclude, hidden, no_ignore)
    files = list(iter_files(resolve_paths(paths), config.files))
    render = render_json if output_format is OutputFormat.json else render_long

    def on_result(result: FileResult) -> None:
        if not sort:
            render(result)

    report = run_checks(files, config, write=write_changes, jobs=jobs, sort=sort, on_result=on_result)
    if sort:
        for result in report.results:
            render(result)

    if write_changes and report.fixed_count:
        err_console.print(f"Fixed {report.fixed_count} typo(s)", style="green", highlight=False)
    if report.failed:
        raise typer.Exit(1)
