"""Analysis commands: build the graph and query callers/callees."""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from ..cache import estimate_memory_usage, optimize_graph_data
from ..watcher import ANALYSIS_METRIC, ChangeWatcher
from . import app
from ._common import CONFIG_OPTION, GRAPH_OPTION, ROOT_ARGUMENT, build_context, console, run


@app.command()
def analyze(
    cli: typer.Context,
    root: Path = ROOT_ARGUMENT,
    graph: Optional[Path] = GRAPH_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
    json_output: bool = typer.Option(False, "--json", help="Print the snapshot as JSON"),
):
    """
    Analyze a workspace and record file fingerprints.

    [bold cyan]Examples:[/bold cyan]

      graphkeeper analyze .

      graphkeeper analyze . --graph callgraph.json
    """
    with build_context(cli, root, config, graph) as ctx:
        snapshot = run(ChangeWatcher(ctx).initial_run())

        if json_output:
            print(json.dumps(snapshot.to_dict(), indent=2, default=str))
            return

        optimized = optimize_graph_data(snapshot.nodes, snapshot.edges)
        memory = estimate_memory_usage(snapshot.nodes, optimized.edges)
        stats = ctx.monitor.get_stats(ANALYSIS_METRIC)

        table = Table(title=f"Analysis of {ctx.root}", show_header=False)
        table.add_column("Metric", style="cyan")
        table.add_column("Value", justify="right")
        table.add_row("Nodes", str(len(snapshot.nodes)))
        table.add_row("Edges", str(len(optimized.edges)))
        table.add_row(
            "Duplicate edges removed", str(optimized.savings["duplicate_edges_removed"])
        )
        table.add_row("Estimated size", memory["total"])
        table.add_row("Tracked files", str(len(ctx.fingerprints)))
        table.add_row("Duration", f"{stats.average:.1f} ms")
        for key, value in snapshot.stats.items():
            if not isinstance(value, dict):
                table.add_row(key.replace("_", " ").capitalize(), str(value))
        console.print(table)


@app.command()
def callers(
    cli: typer.Context,
    file: str = typer.Argument(..., help="File that defines the symbol"),
    symbol: str = typer.Argument(..., help="Qualified symbol name, e.g. Parser.parse"),
    root: Path = typer.Option(Path("."), "--root", "-r", help="Workspace root", resolve_path=True),
    graph: Optional[Path] = GRAPH_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
):
    """
    Show incoming and outgoing calls of a symbol.

    [bold cyan]Examples:[/bold cyan]

      graphkeeper callers src/app.py main --graph callgraph.json
    """
    with build_context(cli, root, config, graph) as ctx:
        run(ctx.analysis.analyze(str(ctx.root)))
        file_path = str((ctx.root / file).resolve()) if not Path(file).is_absolute() else file

        if not ctx.analysis.has_symbol(file_path, symbol):
            console.print(f"[yellow]Unknown symbol:[/yellow] {file_path}#{symbol}")
            raise typer.Exit(1)

        incoming = ctx.analysis.get_callers(file_path, symbol)
        outgoing = ctx.analysis.get_calls(file_path, symbol)

        console.print(f"[bold cyan]{symbol}[/bold cyan] ({file_path})")
        console.print(f"\n[bold]{len(incoming)} caller(s)[/bold]")
        for edge in incoming:
            console.print(f"  ← {edge.source}")
        console.print(f"\n[bold]{len(outgoing)} call(s)[/bold]")
        for edge in outgoing:
            console.print(f"  → {edge.target}")
