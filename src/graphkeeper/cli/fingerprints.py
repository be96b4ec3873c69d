"""Fingerprint commands: show content changes since the last analysis."""

from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from ..analysis.workspace import scan_workspace
from ..fingerprint import ChangeKind, detect_changes, refresh_fingerprints
from ..graph.models import NodeKind
from . import app
from ._common import CONFIG_OPTION, ROOT_ARGUMENT, build_context, console, run

_STYLES = {
    ChangeKind.ADDED: "green",
    ChangeKind.MODIFIED: "yellow",
    ChangeKind.DELETED: "red",
}


@app.command()
def changes(
    cli: typer.Context,
    root: Path = ROOT_ARGUMENT,
    config: Optional[Path] = CONFIG_OPTION,
    update: bool = typer.Option(
        False, "--update", "-u", help="Record the current content as the new baseline"
    ),
):
    """
    List files whose content changed since they were last fingerprinted.

    Touched-but-unchanged files are not reported.
    """
    with build_context(cli, root, config) as ctx:
        result = scan_workspace(str(ctx.root))
        files = [n.id for n in result.nodes if n.kind == NodeKind.FILE]
        found = run(detect_changes(ctx.fingerprints, files))
        changed = [c for c in found if c.is_change]

        if not changed:
            console.print("[green]No changes[/green]")
            return

        table = Table(title="Changed files")
        table.add_column("Status")
        table.add_column("Path")
        for change in sorted(changed, key=lambda c: c.path):
            style = _STYLES[change.kind]
            table.add_row(f"[{style}]{change.kind.value}[/{style}]", change.path)
        console.print(table)

        if update:
            written = refresh_fingerprints(ctx.fingerprints, changed)
            console.print(f"Updated {written} fingerprint(s)")


@app.command()
def fingerprints_clear(
    cli: typer.Context,
    root: Path = ROOT_ARGUMENT,
    config: Optional[Path] = CONFIG_OPTION,
):
    """Forget every recorded fingerprint for a workspace."""
    with build_context(cli, root, config) as ctx:
        count = len(ctx.fingerprints)
        ctx.fingerprints.save_snapshots({})
        console.print(f"[green]Cleared {count} fingerprint(s)[/green]")
