"""Render planning command: what a viewport would draw."""

from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from ..performance import profile
from ..render import Viewport, select_level_of_detail, virtualize
from . import app
from ._common import CONFIG_OPTION, GRAPH_OPTION, ROOT_ARGUMENT, build_context, console, run


@app.command()
def viewport(
    cli: typer.Context,
    root: Path = ROOT_ARGUMENT,
    x: float = typer.Option(0.0, "--x", help="Horizontal pan offset (screen pixels)"),
    y: float = typer.Option(0.0, "--y", help="Vertical pan offset (screen pixels)"),
    zoom: float = typer.Option(1.0, "--zoom", "-z", min=0.01, help="Zoom factor"),
    graph: Optional[Path] = GRAPH_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
):
    """
    Show how many nodes and edges a viewport renders, and at which detail.

    [bold cyan]Examples:[/bold cyan]

      graphkeeper viewport . --graph layout.json --zoom 0.4
    """
    with build_context(cli, root, config, graph) as ctx:
        snapshot = run(ctx.analysis.analyze(str(ctx.root)))
        cull = profile(virtualize, "render.cull_ms", ctx.monitor)
        result = cull(
            snapshot.nodes,
            snapshot.edges,
            Viewport(x, y, zoom),
            ctx.virtualization_options,
            ctx.config.screen_width,
            ctx.config.screen_height,
        )
        lod = select_level_of_detail(zoom, ctx.lod_thresholds)
        loader = ctx.progressive_loader(result.visible_nodes, result.visible_edges)
        batches = 0
        while loader.is_loading:
            loader.advance()
            batches += 1

        table = Table(title="Viewport", show_header=False)
        table.add_column("Metric", style="cyan")
        table.add_column("Value", justify="right")
        table.add_row("Virtualized", "yes" if result.is_virtualized else "no")
        table.add_row("Rendered nodes", f"{result.stats.rendered_nodes} / {result.total_nodes}")
        table.add_row("Rendered edges", f"{result.stats.rendered_edges} / {result.total_edges}")
        table.add_row("Detail level", lod.detail_level.value)
        table.add_row("Labels", "yes" if lod.should_render_labels else "no")
        table.add_row("Icons", "yes" if lod.should_render_icons else "no")
        table.add_row("Load batches", str(batches))
        table.add_row("Cull time", f"{ctx.monitor.get_average('render.cull_ms'):.2f} ms")
        console.print(table)
