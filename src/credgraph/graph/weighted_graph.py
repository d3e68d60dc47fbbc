from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

import networkx as nx

from credgraph.errors import DanglingReferenceError, DuplicateAddressError
from credgraph.graph.graph_schema import (
    Edge,
    EdgeAddress,
    Node,
    NodeAddress,
    has_prefix,
)
from credgraph.graph.weights import (
    DEFAULT_EDGE_WEIGHT,
    DEFAULT_NODE_WEIGHT,
    EdgeWeight,
    PrefixTable,
    Weights,
)


class WeightedGraph:
    """
    Authoritative in-memory contribution graph plus its weight table.

    Topology is a networkx MultiDiGraph keyed by node address, with one
    multi-edge per edge address. Node and edge iteration follows
    insertion order so numeric results are reproducible.

    The graph is written once by ingestion code and is read-only to the
    cred engine. ``with_weights`` shares the topology and swaps only the
    weight table, so scoring under a new table never touches this
    instance.
    """

    def __init__(self, weights: Optional[Weights] = None) -> None:
        self._graph = nx.MultiDiGraph()
        self._edges: Dict[EdgeAddress, Edge] = {}
        self._weights = (weights or Weights()).copy()
        self._node_table: Optional[PrefixTable[float]] = None
        self._edge_table: Optional[PrefixTable[EdgeWeight]] = None
        self.metadata: Dict[str, Any] = {}

    # -------------------- Nodes --------------------

    def add_node(self, node: Node) -> None:
        if node.address in self._graph:
            raise DuplicateAddressError("node", node.address)
        self._graph.add_node(node.address, data=node)

    def has_node(self, address: NodeAddress) -> bool:
        return address in self._graph

    def node(self, address: NodeAddress) -> Node:
        try:
            return self._graph.nodes[address]["data"]
        except KeyError:
            raise KeyError(f"no such node: {address!r}") from None

    def nodes(self, prefix: Tuple[str, ...] = ()) -> Iterator[Node]:
        for _, data in self._graph.nodes(data=True):
            node: Node = data["data"]
            if has_prefix(node.address, prefix):
                yield node

    def get_nodes(self) -> List[Node]:
        return list(self.nodes())

    # -------------------- Edges --------------------

    def add_edge(self, edge: Edge) -> None:
        if edge.address in self._edges:
            raise DuplicateAddressError("edge", edge.address)
        for endpoint in (edge.src, edge.dst):
            if endpoint not in self._graph:
                raise DanglingReferenceError(edge.address, endpoint)
        self._graph.add_edge(edge.src, edge.dst, key=edge.address, data=edge)
        self._edges[edge.address] = edge

    def has_edge(self, address: EdgeAddress) -> bool:
        return address in self._edges

    def edge(self, address: EdgeAddress) -> Edge:
        try:
            return self._edges[address]
        except KeyError:
            raise KeyError(f"no such edge: {address!r}") from None

    def edges(self, prefix: Tuple[str, ...] = ()) -> Iterator[Edge]:
        for edge in self._edges.values():
            if has_prefix(edge.address, prefix):
                yield edge

    def get_edges(self) -> List[Edge]:
        return list(self._edges.values())

    # -------------------- Traversal --------------------

    def out_edges(self, address: NodeAddress) -> List[Edge]:
        if address not in self._graph:
            return []
        return [data for _, _, data in self._graph.out_edges(address, data="data")]

    def in_edges(self, address: NodeAddress) -> List[Edge]:
        if address not in self._graph:
            return []
        return [data for _, _, data in self._graph.in_edges(address, data="data")]

    def neighbors(self, address: NodeAddress) -> List[NodeAddress]:
        if address not in self._graph:
            return []
        seen = dict.fromkeys(self._graph.successors(address))
        seen.update(dict.fromkeys(self._graph.predecessors(address)))
        return list(seen)

    def isolated_nodes(self) -> List[NodeAddress]:
        return list(nx.isolates(self._graph))

    # -------------------- Analytics --------------------

    def node_count(self) -> int:
        return self._graph.number_of_nodes()

    def edge_count(self) -> int:
        return self._graph.number_of_edges()

    def timestamps(self) -> List[int]:
        return [
            node.timestamp_ms
            for node in self.nodes()
            if node.timestamp_ms is not None
        ]

    # -------------------- Weights --------------------

    @property
    def weights(self) -> Weights:
        return self._weights.copy()

    def resolve_node_weight(self, address: NodeAddress) -> float:
        if self._node_table is None:
            self._node_table = PrefixTable(self._weights.node_weights.items())
        return self._node_table.resolve(address, DEFAULT_NODE_WEIGHT)

    def resolve_edge_weight(self, address: EdgeAddress) -> EdgeWeight:
        if self._edge_table is None:
            self._edge_table = PrefixTable(self._weights.edge_weights.items())
        return self._edge_table.resolve(address, DEFAULT_EDGE_WEIGHT)

    def with_weights(self, weights: Weights) -> "WeightedGraph":
        """
        Same topology, different weight table.

        The returned graph shares node and edge storage with this one;
        both are expected to be treated as read-only from here on.
        """
        g = WeightedGraph(weights)
        g._graph = self._graph
        g._edges = self._edges
        g.metadata = dict(self.metadata)
        return g

    # -------------------- Cloning --------------------

    def clone(self) -> "WeightedGraph":
        g = WeightedGraph(self._weights)
        g._graph = self._graph.copy()
        g._edges = dict(self._edges)
        g.metadata = dict(self.metadata)
        return g

    @staticmethod
    def build(
        nodes: Iterable[Node],
        edges: Iterable[Edge],
        weights: Optional[Weights] = None,
    ) -> "WeightedGraph":
        g = WeightedGraph(weights)
        for node in nodes:
            g.add_node(node)
        for edge in edges:
            g.add_edge(edge)
        logging.getLogger("credgraph.graph").debug(
            "built graph: nodes=%s edges=%s", g.node_count(), g.edge_count()
        )
        return g
