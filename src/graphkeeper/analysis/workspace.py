"""Bundled workspace analyzer: the directory/file containment graph.

Produces ``directory`` and ``file`` nodes keyed by absolute path and
``contains`` edges from each directory to its entries. Symbol-level call
edges come from external analyzers plugged into the AnalysisStore.
"""

from __future__ import annotations

import asyncio
import json
import os
from pathlib import Path
from typing import Any

from ..graph.models import AnalysisResult, EdgeType, GraphEdge, GraphNode, NodeKind
from ..logging_config import get_logger

logger = get_logger(__name__)

# Extension -> language, for per-language stats and node styling
FILE_LANGUAGES = {
    ".ts": "typescript",
    ".tsx": "typescript",
    ".js": "javascript",
    ".jsx": "javascript",
    ".json": "json",
    ".md": "markdown",
    ".css": "css",
    ".scss": "css",
    ".html": "html",
    ".py": "python",
    ".rs": "rust",
    ".go": "go",
}

IGNORED_DIRECTORIES = frozenset(
    {
        "node_modules",
        "__pycache__",
        "venv",
        "env",
        "out",
        "dist",
        "build",
        "coverage",
        "target",
        "vendor",
    }
)


def should_ignore(name: str) -> bool:
    """Hidden entries and common build/dependency directories are skipped."""
    return name.startswith(".") or name in IGNORED_DIRECTORIES


def file_metadata(filename: str) -> dict[str, Any]:
    ext = os.path.splitext(filename)[1].lower()
    if not ext:
        return {}
    meta: dict[str, Any] = {"extension": ext[1:]}
    language = FILE_LANGUAGES.get(ext)
    if language:
        meta["language"] = language
    return meta


def scan_workspace(root_path: str) -> AnalysisResult:
    """Walk ``root_path`` and build the containment graph.

    Entries are visited directories first, then files, each group sorted
    by name. Unreadable directories are skipped with a warning.
    """
    root = str(Path(root_path).resolve())
    nodes: list[GraphNode] = [
        GraphNode(
            id=root,
            kind=NodeKind.DIRECTORY,
            label=os.path.basename(root) or root,
            data={"depth": 0},
        )
    ]
    edges: list[GraphEdge] = []
    stats: dict[str, Any] = {
        "total_files": 0,
        "total_directories": 1,
        "files_by_language": {},
    }

    def traverse(current: str, depth: int, parent_id: str) -> None:
        try:
            with os.scandir(current) as it:
                entries = list(it)
        except OSError as e:
            logger.warning("Unable to read directory %s: %s", current, e)
            return

        entries.sort(key=lambda e: (not _is_dir(e), e.name))

        for entry in entries:
            if should_ignore(entry.name):
                continue
            node_id = entry.path
            is_directory = _is_dir(entry)

            if is_directory:
                stats["total_directories"] += 1
                data: dict[str, Any] = {"depth": depth, "parent_id": parent_id}
            else:
                stats["total_files"] += 1
                meta = file_metadata(entry.name)
                language = meta.get("language")
                if language:
                    by_lang = stats["files_by_language"]
                    by_lang[language] = by_lang.get(language, 0) + 1
                data = {"depth": depth, "parent_id": parent_id, **meta}

            nodes.append(
                GraphNode(
                    id=node_id,
                    kind=NodeKind.DIRECTORY if is_directory else NodeKind.FILE,
                    label=entry.name,
                    data=data,
                )
            )
            edges.append(
                GraphEdge(
                    source=parent_id,
                    target=node_id,
                    type=EdgeType.CONTAINS,
                    id=f"e-{parent_id}-{node_id}",
                )
            )

            if is_directory:
                traverse(node_id, depth + 1, node_id)

    traverse(root, 1, root)
    logger.debug(
        "Scanned %s: %d files, %d directories",
        root,
        stats["total_files"],
        stats["total_directories"],
    )
    return AnalysisResult(nodes=tuple(nodes), edges=tuple(edges), stats=stats)


def _is_dir(entry: os.DirEntry) -> bool:
    try:
        return entry.is_dir(follow_symlinks=False)
    except OSError:
        return False


async def analyze_workspace(root_path: str) -> AnalysisResult:
    """Async entry point used by the AnalysisStore; the walk runs off-loop."""
    return await asyncio.to_thread(scan_workspace, root_path)


def graph_file_analyzer(graph_file: str | Path):
    """Analyzer that serves a graph exported by an external tool.

    The file holds ``{"nodes": [...], "edges": [...], "stats": {...}}`` in
    the dict shape of :func:`~graphkeeper.graph.models.node_from_dict`.
    It is re-read on every analysis so a fresh export is picked up.
    """
    path = Path(graph_file)

    def _load(_root_path: str) -> AnalysisResult:
        raw = json.loads(path.read_text(encoding="utf-8"))
        return AnalysisResult.build(raw.get("nodes", ()), raw.get("edges", ()), raw.get("stats"))

    async def analyze(root_path: str) -> AnalysisResult:
        return await asyncio.to_thread(_load, root_path)

    return analyze
