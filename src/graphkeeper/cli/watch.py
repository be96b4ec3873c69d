"""Watch command: keep the graph current while files change."""

from pathlib import Path
from typing import Optional

import typer

from ..graph.models import AnalysisSnapshot
from ..watcher import ChangeWatcher
from . import app
from ._common import CONFIG_OPTION, GRAPH_OPTION, ROOT_ARGUMENT, build_context, console, run


@app.command()
def watch(
    cli: typer.Context,
    root: Path = ROOT_ARGUMENT,
    graph: Optional[Path] = GRAPH_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
):
    """
    Re-analyze on every real content change until interrupted.

    Saves that leave a file's content unchanged do not trigger analysis.
    """
    with build_context(cli, root, config, graph) as ctx:
        watcher = ChangeWatcher(ctx)

        def report(snapshot: AnalysisSnapshot) -> None:
            console.print(
                f"[green]Graph updated:[/green] {len(snapshot.nodes)} nodes, "
                f"{len(snapshot.edges)} edges"
            )

        subscription = ctx.analysis.on_did_analysis_change.subscribe(report)

        async def _main() -> None:
            await watcher.initial_run()
            await watcher.run()

        try:
            run(_main())
        except KeyboardInterrupt:
            watcher.stop()
            console.print("[yellow]Stopped[/yellow]")
        finally:
            subscription.dispose()
