"""Caller/callee annotations for functions in an open document.

The parser collaborator turns a document into a tree of :class:`Symbol`;
:class:`LensProvider` walks it and asks the AnalysisStore for the callers
and callees of every function and method. The editor layer turns the
resulting :class:`CodeLens` records into UI objects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from .analysis.events import EventEmitter, Subscription
from .analysis.store import AnalysisStore
from .graph.models import GraphEdge, qualified_name

SUPPORTED_LANGUAGES = frozenset({"typescript", "javascript", "python", "rust", "go"})

CALLABLE_KINDS = frozenset({"function", "method"})
CONTAINER_KINDS = frozenset({"class"})

HIGH_COUPLING_CALLERS = 5
HIGH_COUPLING_CALLS = 10


@dataclass
class Symbol:
    """One entry of the parser's symbol tree. ``start_line`` is 1-based."""

    name: str
    kind: str
    start_line: int
    children: list["Symbol"] = field(default_factory=list)


@dataclass(frozen=True)
class CodeLens:
    line: int  # 0-based, the definition line
    title: str
    tooltip: str
    command: str
    arguments: tuple[Any, ...] = ()


def _plural(count: int, noun: str) -> str:
    return f"1 {noun}" if count == 1 else f"{count} {noun}s"


class LensProvider:
    """Builds lenses from the current analysis snapshot.

    ``on_did_change_code_lenses`` fires (without payload) every time the
    store publishes a new snapshot.
    """

    def __init__(self, store: AnalysisStore) -> None:
        self._store = store
        self.on_did_change_code_lenses: EventEmitter[None] = EventEmitter("code-lenses")
        self._subscription: Subscription = store.on_did_analysis_change.subscribe(
            lambda _snapshot: self.on_did_change_code_lenses.fire()
        )

    def dispose(self) -> None:
        self._subscription.dispose()

    def provide_code_lenses(
        self,
        file_path: str,
        symbols: Iterable[Symbol],
        language_id: Optional[str] = None,
    ) -> list[CodeLens]:
        if language_id is not None and language_id not in SUPPORTED_LANGUAGES:
            return []
        lenses: list[CodeLens] = []
        self._traverse(symbols, file_path, None, lenses)
        return lenses

    def _traverse(
        self,
        symbols: Iterable[Symbol],
        file_path: str,
        parent: Optional[str],
        lenses: list[CodeLens],
    ) -> None:
        for symbol in symbols:
            # Only methods carry the enclosing class name; nested functions do not
            name = qualified_name(symbol.name, parent) if symbol.kind == "method" else symbol.name
            if symbol.kind in CALLABLE_KINDS:
                lenses.extend(self._lenses_for_function(symbol, name, file_path))
            if symbol.children:
                # A class names its members by its own short name
                child_parent = symbol.name if symbol.kind in CONTAINER_KINDS else parent
                self._traverse(symbol.children, file_path, child_parent, lenses)

    def _lenses_for_function(self, symbol: Symbol, name: str, file_path: str) -> list[CodeLens]:
        line = max(symbol.start_line - 1, 0)
        callers: list[GraphEdge] = self._store.get_callers(file_path, name)
        calls: list[GraphEdge] = self._store.get_calls(file_path, name)

        lenses = [
            CodeLens(
                line=line,
                title=_plural(len(callers), "caller"),
                tooltip="Show incoming calls",
                command="graphkeeper.showCallers",
                arguments=(file_path, name, tuple(callers)),
            ),
            CodeLens(
                line=line,
                title=_plural(len(calls), "call"),
                tooltip="Show outgoing calls",
                command="graphkeeper.showCalls",
                arguments=(file_path, name, tuple(calls)),
            ),
        ]
        if len(callers) > HIGH_COUPLING_CALLERS or len(calls) > HIGH_COUPLING_CALLS:
            lenses.append(
                CodeLens(
                    line=line,
                    title="High Coupling",
                    tooltip="This function has high coupling",
                    command="",
                )
            )
        return lenses
