"""Tests for graph, coupling report and target list readers."""
from __future__ import annotations

import json
from pathlib import Path

import pytest

from TargetSelection.graph.loader import load_coupling_csv, load_graph, load_targets
from TargetSelection.pipeline.errors import ConfigurationError, GraphError


def _write_graph(path: Path, data: object) -> Path:
    path.write_text(json.dumps(data))
    return path


class TestLoadGraph:
    def test_dict_and_list_edges(self, tmp_path: Path) -> None:
        path = _write_graph(tmp_path / "graph.json", {
            "nodes": ["A", "B", "C"],
            "edges": [
                {"source": "A", "sink": "B", "weight": 2},
                ["B", "C", 5],
                ["A", "C"],
            ],
        })
        document = load_graph(path)

        assert document.graph.nodes == ("A", "B", "C")
        assert document.graph.weight("A", "B") == 2
        assert document.graph.weight("B", "C") == 5
        assert document.graph.weight("A", "C") == 1
        assert document.sources == {}

    def test_sources_mapping(self, tmp_path: Path) -> None:
        path = _write_graph(tmp_path / "graph.json", {
            "nodes": ["A"],
            "edges": [],
            "sources": {"A": "src/pkg/A.java"},
        })
        assert load_graph(path).sources == {"A": "src/pkg/A.java"}

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(GraphError, match="not found"):
            load_graph(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "graph.json"
        path.write_text("{not json")
        with pytest.raises(GraphError, match="not valid JSON"):
            load_graph(path)

    def test_missing_nodes(self, tmp_path: Path) -> None:
        path = _write_graph(tmp_path / "graph.json", {"edges": []})
        with pytest.raises(GraphError, match="nodes"):
            load_graph(path)

    def test_dangling_edge_is_fatal(self, tmp_path: Path) -> None:
        path = _write_graph(tmp_path / "graph.json", {
            "nodes": ["A"], "edges": [["A", "Missing", 1]],
        })
        with pytest.raises(GraphError, match="Missing"):
            load_graph(path)

    def test_malformed_edge(self, tmp_path: Path) -> None:
        path = _write_graph(tmp_path / "graph.json", {
            "nodes": ["A", "B"], "edges": ["A->B"],
        })
        with pytest.raises(GraphError, match="Malformed"):
            load_graph(path)

    def test_edge_missing_sink(self, tmp_path: Path) -> None:
        path = _write_graph(tmp_path / "graph.json", {
            "nodes": ["A", "B"], "edges": [{"source": "A"}],
        })
        with pytest.raises(GraphError, match="sink"):
            load_graph(path)

    @pytest.mark.parametrize("edge", [
        ["A", "B", "heavy"],
        {"source": "A", "sink": "B", "weight": None},
    ])
    def test_non_integer_weight(self, tmp_path: Path, edge: object) -> None:
        path = _write_graph(tmp_path / "graph.json", {"nodes": ["A", "B"], "edges": [edge]})
        with pytest.raises(GraphError, match="non-integer weight"):
            load_graph(path)

    def test_sources_must_be_a_mapping(self, tmp_path: Path) -> None:
        path = _write_graph(tmp_path / "graph.json", {
            "nodes": ["A"], "edges": [], "sources": ["src/pkg/A.java"],
        })
        with pytest.raises(GraphError, match="sources"):
            load_graph(path)


class TestLoadCouplingCsv:
    def test_rows_accumulate_into_weights(self, tmp_path: Path) -> None:
        path = tmp_path / "couplings.csv"
        path.write_text(
            "# Class, Method, Coupling\n"
            "src/Order.java,Order.total,Invoice.amount\n"
            "src/Order.java,Order.total,Invoice.tax\n"
            "src/Order.java,Order.ship,Customer.address\n"
            "src/Invoice.java,Invoice.owner,Customer\n"
        )
        graph = load_coupling_csv(path).graph

        assert graph.nodes == ("Order", "Invoice", "Customer")
        assert graph.weight("Order", "Invoice") == 2
        assert graph.weight("Order", "Customer") == 1
        assert graph.weight("Invoice", "Customer") == 1
        assert graph.edge_count == 3

    def test_class_seen_only_as_sink_is_a_node(self, tmp_path: Path) -> None:
        path = tmp_path / "couplings.csv"
        path.write_text(
            "src/shop/Order.java,Order.total,Price.amount\n"
            "src/shop/Cart.java,Cart.checkout,Order.total\n"
        )
        graph = load_coupling_csv(path).graph

        assert "Price" in graph
        assert graph.weight("Order", "Price") == 1
        assert graph.weight("Cart", "Order") == 1
        assert graph.edge_count == 2

    def test_file_column_maps_row_owners(self, tmp_path: Path) -> None:
        path = tmp_path / "couplings.csv"
        path.write_text(
            "src/shop/Order.java,Order.total,Price.amount\n"
            "src/shop/Order.java,Order$Line.qty,Price.amount\n"
            "src/shop/Price.java,Price.amount,Currency.code\n"
        )
        sources = load_coupling_csv(path).sources

        assert sources == {
            "Order": "src/shop/Order.java",
            "Order$Line": "src/shop/Order.java",
            "Price": "src/shop/Price.java",
        }

    def test_self_coupling_keeps_class_without_edge(self, tmp_path: Path) -> None:
        path = tmp_path / "couplings.csv"
        path.write_text("src/Order.java,Order.total,Order.id\n")
        graph = load_coupling_csv(path).graph

        assert graph.nodes == ("Order",)
        assert graph.edge_count == 0

    def test_explicit_class_list_skips_other_classes(self, tmp_path: Path) -> None:
        path = tmp_path / "couplings.csv"
        path.write_text(
            "src/Order.java,Order.total,Invoice.amount\n"
            "src/Order.java,Order.log,Logger.info\n"
        )
        document = load_coupling_csv(path, classes=["Order", "Invoice", "Extra"])

        assert document.graph.nodes == ("Order", "Invoice", "Extra")
        assert document.graph.weight("Order", "Invoice") == 1
        assert document.graph.edge_count == 1
        assert "Logger" not in document.sources

    def test_short_row_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "couplings.csv"
        path.write_text("f,Order.total\n")
        with pytest.raises(GraphError, match="Malformed"):
            load_coupling_csv(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(GraphError, match="not found"):
            load_coupling_csv(tmp_path / "couplings.csv")


class TestLoadTargets:
    def test_strips_packages_comments_and_blanks(self, tmp_path: Path) -> None:
        path = tmp_path / "targets.txt"
        path.write_text("org.shop.Order\n\n# changed last sprint\n  Invoice  \n")
        assert load_targets(path) == ["Order", "Invoice"]

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="not found"):
            load_targets(tmp_path / "targets.txt")
