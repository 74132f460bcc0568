import json

import typer
from rich.console import Console
from rich.text import Text

from orthotypo.models import Diagnostic, FileResult

console = Console()


def render_long(result: FileResult) -> None:
    for error in result.errors:
        console.print(
            Text.assemble((f"{result.path}: ", "bold"), (f"{error.kind.value} error: ", "red"), error.message),
            soft_wrap=True,
        )
    for diagnostic in result.diagnostics:
        _render_diagnostic(result, diagnostic)


def _render_diagnostic(result: FileResult, diagnostic: Diagnostic) -> None:
    position = result.position(diagnostic.span.start)
    line = result.line(position.row)
    gutter = f"{position.row + 1} | "
    console.print(
        Text.assemble(
            (f"{result.path}:{position.row + 1}:{position.column + 1}: ", "bold"),
            (diagnostic.message, "yellow"),
            (f" [{diagnostic.code}]", "dim"),
        ),
        soft_wrap=True,
    )
    console.print(Text.assemble((gutter, "blue"), line), soft_wrap=True)
    console.print(
        Text.assemble(
            (" " * (len(gutter) + position.column), ""),
            ("^", "bold red"),
            (f" {diagnostic.help}" if diagnostic.help else "", "cyan"),
        ),
        soft_wrap=True,
    )


def render_json(result: FileResult) -> None:
    for error in result.errors:
        typer.echo(json.dumps({"path": result.path, "error": error.kind.value, "message": error.message}))
    for diagnostic in result.diagnostics:
        position = result.position(diagnostic.span.start)
        record = {
            "path": result.path,
            "line": position.row + 1,
            "column": position.column + 1,
            **diagnostic.model_dump(mode="json"),
        }
        typer.echo(json.dumps(record))
