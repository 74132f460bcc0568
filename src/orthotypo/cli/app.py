import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from orthotypo.cli.check import check
from orthotypo.cli.inspect import dump_config, files, strings, types

app = typer.Typer(
    name="orthotypo",
    help="Find spaces before punctuation marks in strings and prose.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def configure(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log progress and debug details.")] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


app.command("check")(check)
app.command("files")(files)
app.command("strings")(strings)
app.command("types")(types)
app.command("dump-config")(dump_config)


def main() -> None:
    app()
