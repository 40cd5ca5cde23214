from __future__ import annotations

import typer

from mr import __version__
from mr.cli.commands.init import init
from mr.cli.commands.show import show
from mr.output.log import resolve_log_level, setup_logging


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


app.command(help="Create or update configuration.")(init)
app.command(help="Show currently deployed releases. Run [grey50]show --help[/] for details.")(show)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit.",
        callback=_print_version,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    setup_logging(resolve_log_level(verbose))


def main() -> None:
    app()
