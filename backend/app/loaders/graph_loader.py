from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional

import pandas as pd

from credgraph.graph.declarations import PluginDeclaration, weights_from_declarations
from credgraph.graph.graph_schema import Edge, Node
from credgraph.graph.weighted_graph import WeightedGraph
from credgraph.graph.weights import Weights


@dataclass
class LoadedGraph:
    graph: WeightedGraph
    declarations: List[PluginDeclaration] = field(default_factory=list)


def _read_json_records(path: Path) -> pd.DataFrame:
    # timestamp_ms would otherwise be parsed as a date column
    return pd.read_json(path, orient="records", convert_dates=False, keep_default_dates=False)


def _read_table(processed_dir: Path, stem: str) -> Optional[pd.DataFrame]:
    parquet = processed_dir / f"{stem}.parquet"
    if parquet.exists():
        return pd.read_parquet(parquet)
    records = processed_dir / f"{stem}.json"
    if records.exists():
        return _read_json_records(records)
    return None


def _address(value: Any) -> tuple:
    return tuple(str(part) for part in value)


def _timestamp(value: Any) -> Optional[int]:
    if value is None or pd.isna(value):
        return None
    return int(value)


def load_graph_from_processed(*, processed_dir: Path) -> LoadedGraph:
    """
    Load a contribution graph from ``processed_dir``.

    Expects ``nodes`` and ``edges`` tables (parquet or JSON records),
    and optionally ``declarations.json`` (plugin declarations supplying
    default weights) and ``weights.json`` (overrides on top of them).
    A missing nodes table yields an empty graph.
    """
    logger = logging.getLogger("credgraph.load_graph")
    t0 = time.perf_counter()

    declarations: List[PluginDeclaration] = []
    declarations_path = processed_dir / "declarations.json"
    if declarations_path.exists():
        raw = json.loads(declarations_path.read_text())
        declarations = [PluginDeclaration.from_dict(entry) for entry in raw]

    weights = weights_from_declarations(declarations)
    weights_path = processed_dir / "weights.json"
    if weights_path.exists():
        weights = weights.merged(Weights.from_dict(json.loads(weights_path.read_text())))

    graph = WeightedGraph(weights)

    nodes_df = _read_table(processed_dir, "nodes")
    if nodes_df is None:
        logger.warning("no nodes table under %s; starting with an empty graph", processed_dir)
        return LoadedGraph(graph=graph, declarations=declarations)

    for row in nodes_df.to_dict(orient="records"):
        graph.add_node(
            Node.create(
                address=_address(row["address"]),
                timestamp_ms=_timestamp(row.get("timestamp_ms")),
                description=str(row.get("description") or ""),
            )
        )
    t_nodes = time.perf_counter()

    edges_df = _read_table(processed_dir, "edges")
    if edges_df is not None:
        for row in edges_df.to_dict(orient="records"):
            graph.add_edge(
                Edge.create(
                    address=_address(row["address"]),
                    src=_address(row["src"]),
                    dst=_address(row["dst"]),
                    timestamp_ms=_timestamp(row.get("timestamp_ms")),
                )
            )
    t_edges = time.perf_counter()

    logger.info(
        "read nodes=%s in %.3fs; read edges=%s in %.3fs; plugins=%s",
        graph.node_count(),
        t_nodes - t0,
        graph.edge_count(),
        t_edges - t_nodes,
        [d.name for d in declarations],
    )
    graph.metadata["source"] = str(processed_dir)
    return LoadedGraph(graph=graph, declarations=declarations)
