"""CLI entry point: registers all subcommands."""

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="graphkeeper",
    help="graphkeeper - incremental call graph store with render virtualization",
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"graphkeeper {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log errors"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version"
    ),
):
    """Keep a codebase graph current and inspect it."""
    # Logging is configured once the command has loaded its settings
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


# Import subcommands to register them
from .analyze import analyze as _analyze, callers as _callers  # noqa: F401, E402
from .fingerprints import changes as _changes, fingerprints_clear as _fp_clear  # noqa: F401, E402
from .render import viewport as _viewport  # noqa: F401, E402
from .watch import watch as _watch  # noqa: F401, E402
