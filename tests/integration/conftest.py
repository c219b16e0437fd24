from __future__ import annotations

import json
from pathlib import Path

import pytest

# Price and Address own no rows: they only appear as coupled classes.
COUPLING_ROWS = [
    "src/shop/Order.java,Order.total,Price.amount",
    "src/shop/Order.java,Order.add,Item.price",
    "src/shop/Item.java,Item.price,Price.amount",
    "src/shop/Cart.java,Cart.checkout,Order.add",
    "src/shop/Cart.java,Cart.checkout,Order.add",
    "src/shop/Report.java,Report.render,Order.total",
    "src/shop/Report.java,Report.render,Customer.name",
    "src/shop/Customer.java,Customer.name,Address.line",
    "src/shop/Invoice.java,Invoice.issue,Customer.name",
    "src/shop/Logger.java,Logger.log,Clock.now",
]


@pytest.fixture
def coupling_csv(tmp_path: Path) -> Path:
    path = tmp_path / "coupling.csv"
    path.write_text("# file,member,coupled member\n" + "\n".join(COUPLING_ROWS) + "\n")
    return path


@pytest.fixture
def graph_json(tmp_path: Path) -> Path:
    nodes = ["Order", "Item", "Cart", "Report", "Customer", "Invoice", "Price", "Address", "Logger"]
    edges = [
        {"source": "Order", "sink": "Price", "weight": 1},
        {"source": "Order", "sink": "Item", "weight": 1},
        {"source": "Item", "sink": "Price", "weight": 1},
        {"source": "Cart", "sink": "Order", "weight": 2},
        ["Report", "Order", 1],
        ["Report", "Customer", 1],
        ["Customer", "Address"],
        ["Invoice", "Customer", 1],
    ]
    sources = {name: f"/work/app/src/main/java/shop/{name}.java" for name in nodes}
    path = tmp_path / "graph.json"
    path.write_text(json.dumps({"nodes": nodes, "edges": edges, "sources": sources}))
    return path


@pytest.fixture
def targets_file(tmp_path: Path) -> Path:
    path = tmp_path / "targets.txt"
    path.write_text("# classes under test\nshop.Price\nshop.Address\n")
    return path
