"""Tests for graph data models."""

import pytest

from graphkeeper.graph import (
    AnalysisResult,
    AnalysisSnapshot,
    EdgeType,
    GraphEdge,
    GraphNode,
    NodeKind,
    Position,
    edge_from_dict,
    node_from_dict,
    qualified_name,
    split_symbol_id,
    symbol_id,
)


class TestSymbolIds:
    def test_symbol_id(self):
        assert symbol_id("/src/a.py", "main") == "/src/a.py#main"

    def test_method_ids_use_qualified_name(self):
        assert symbol_id("/a.py", qualified_name("run", "Server")) == "/a.py#Server.run"

    def test_qualified_name_without_parent(self):
        assert qualified_name("main") == "main"

    def test_split(self):
        assert split_symbol_id("/a.py#Server.run") == ("/a.py", "Server.run")
        assert split_symbol_id("/a.py") == ("/a.py", None)


class TestGraphEdge:
    def test_key_ignores_id(self):
        assert GraphEdge("a", "b", id="x").key == GraphEdge("a", "b", id="y").key

    def test_missing_type_keys_as_default(self):
        assert GraphEdge("a", "b", None).key == ("a", "b", "default")

    def test_is_call(self):
        assert GraphEdge("a", "b").is_call
        assert GraphEdge("a", "b", "calls").is_call
        assert not GraphEdge("a", "b", EdgeType.IMPORTS).is_call
        assert not GraphEdge("a", "b", None).is_call

    def test_to_dict(self):
        assert GraphEdge("a", "b", EdgeType.CONTAINS, id="e1").to_dict() == {
            "source": "a",
            "target": "b",
            "type": "contains",
            "id": "e1",
        }


class TestGraphNode:
    def test_to_dict_merges_data(self):
        node = GraphNode("/a.py", NodeKind.FILE, "a.py", data={"language": "python"})
        assert node.to_dict() == {
            "id": "/a.py",
            "type": "file",
            "label": "a.py",
            "language": "python",
        }

    def test_from_dict(self):
        node = node_from_dict(
            {"id": "n", "type": "function", "position": {"x": 3, "y": 4}, "width": 10, "extra": 1}
        )
        assert node.kind == NodeKind.FUNCTION
        assert node.position == Position(3.0, 4.0)
        assert node.width == 10
        assert node.data == {"extra": 1}

    def test_edge_from_dict(self):
        edge = edge_from_dict({"source": "a", "target": "b"})
        assert edge.type is None
        assert edge.key == ("a", "b", "default")

    def test_frozen(self):
        node = GraphNode("n")
        with pytest.raises(AttributeError):
            node.id = "m"


class TestSnapshot:
    def test_from_result(self):
        result = AnalysisResult.build(
            [{"id": "a"}, GraphNode("b")],
            [{"source": "a", "target": "b", "type": "calls"}],
            {"files": 2},
        )
        snapshot = AnalysisSnapshot.from_result(result, 1234)

        assert snapshot.node_ids() == frozenset({"a", "b"})
        assert snapshot.find_node("b") == GraphNode("b")
        assert snapshot.find_node("c") is None
        assert snapshot.to_dict()["timestamp"] == 1234
        assert snapshot.to_dict()["edges"] == [{"source": "a", "target": "b", "type": "calls"}]

    def test_stats_are_read_only(self):
        stats = {"files": 2}
        snapshot = AnalysisSnapshot((), (), stats, 1)

        with pytest.raises(TypeError):
            snapshot.stats["files"] = 3
        stats["files"] = 5

        assert snapshot.stats == {"files": 2}
        assert snapshot.to_dict()["stats"] == {"files": 2}
