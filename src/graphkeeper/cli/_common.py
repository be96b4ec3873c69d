"""Shared CLI helpers."""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from ..analysis.workspace import graph_file_analyzer
from ..config import load_config
from ..context import WorkspaceContext
from ..exceptions import GraphKeeperError
from ..logging_config import setup_logging

console = Console()


def build_context(
    ctx: typer.Context,
    root: Path,
    config: Optional[Path] = None,
    graph: Optional[Path] = None,
) -> WorkspaceContext:
    """Create the workspace context for a CLI run.

    The global --verbose/--quiet flags are applied as config overrides, so
    the resulting ``verbosity`` also honours config files and
    GRAPHKEEPER_VERBOSITY.
    """
    flags = ctx.obj or {}
    try:
        settings = load_config(
            config_file=config,
            verbose=flags.get("verbose", False),
            quiet=flags.get("quiet", False),
        )
        setup_logging(verbosity=settings.verbosity)
        analyzer = graph_file_analyzer(graph) if graph is not None else None
        return WorkspaceContext.create(root, settings, analyzer=analyzer)
    except GraphKeeperError as e:
        fail(e)


def run(coro):
    """Run a coroutine, mapping library errors to exit code 1."""
    try:
        return asyncio.run(coro)
    except GraphKeeperError as e:
        fail(e)


def fail(error: Exception) -> None:
    console.print(f"[red]Error:[/red] {error}")
    hint = getattr(error, "hint", None)
    if hint:
        console.print(f"[dim]{hint}[/dim]")
    raise typer.Exit(1)


ROOT_ARGUMENT = typer.Argument(
    Path("."),
    help="Workspace root",
    exists=True,
    file_okay=False,
    resolve_path=True,
)
CONFIG_OPTION = typer.Option(None, "--config", "-c", help="Explicit graphkeeper.toml")
GRAPH_OPTION = typer.Option(
    None,
    "--graph",
    "-g",
    help="Graph JSON exported by an external analyzer (nodes/edges/stats)",
    exists=True,
    dir_okay=False,
)
