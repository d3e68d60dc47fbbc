from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Iterable, Mapping, Optional, Tuple, TypeVar

from credgraph.errors import InvalidParameterError
from credgraph.graph.graph_schema import address_prefix

T = TypeVar("T")

Prefix = Tuple[str, ...]


def check_weight(value: Any, what: str) -> float:
    try:
        weight = float(value)
    except (TypeError, ValueError):
        raise InvalidParameterError(f"{what} must be a number, got {value!r}") from None
    if not math.isfinite(weight) or weight < 0.0:
        raise InvalidParameterError(
            f"{what} must be finite and non-negative, got {value!r}"
        )
    return weight


@dataclass(frozen=True)
class EdgeWeight:
    """
    Multipliers for the two random-walk directions of an edge.
    """

    forward: float = 1.0
    backward: float = 1.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "forward", check_weight(self.forward, "forward weight"))
        object.__setattr__(self, "backward", check_weight(self.backward, "backward weight"))


DEFAULT_NODE_WEIGHT = 1.0
DEFAULT_EDGE_WEIGHT = EdgeWeight(1.0, 1.0)


@dataclass(frozen=True)
class Weights:
    """
    Prefix-keyed weight table.

    Equality is structural, which is what callers use to decide
    whether a recomputation is needed. The mappings are plain dicts;
    anything that stores a ``Weights`` takes a ``copy()`` first.
    """

    node_weights: Dict[Prefix, float] = field(default_factory=dict)
    edge_weights: Dict[Prefix, EdgeWeight] = field(default_factory=dict)

    def __post_init__(self) -> None:
        nodes = {
            address_prefix(prefix): check_weight(weight, f"node weight for {prefix!r}")
            for prefix, weight in self.node_weights.items()
        }
        edges: Dict[Prefix, EdgeWeight] = {}
        for prefix, weight in self.edge_weights.items():
            if not isinstance(weight, EdgeWeight):
                forward, backward = weight
                weight = EdgeWeight(forward, backward)
            edges[address_prefix(prefix)] = weight
        object.__setattr__(self, "node_weights", nodes)
        object.__setattr__(self, "edge_weights", edges)

    def copy(self) -> "Weights":
        return Weights(
            node_weights=dict(self.node_weights),
            edge_weights=dict(self.edge_weights),
        )

    def merged(self, other: "Weights") -> "Weights":
        """
        Return a new table where entries from ``other`` override ours.
        """
        nodes = dict(self.node_weights)
        nodes.update(other.node_weights)
        edges = dict(self.edge_weights)
        edges.update(other.edge_weights)
        return Weights(node_weights=nodes, edge_weights=edges)

    # ------------------------------------------------------------------
    # Plain document form
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            "node_weights": [
                {"prefix": list(prefix), "weight": weight}
                for prefix, weight in self.node_weights.items()
            ],
            "edge_weights": [
                {
                    "prefix": list(prefix),
                    "forward": weight.forward,
                    "backward": weight.backward,
                }
                for prefix, weight in self.edge_weights.items()
            ],
        }

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "Weights":
        node_weights: Dict[Prefix, float] = {}
        for entry in data.get("node_weights", []):
            try:
                prefix = address_prefix(entry["prefix"])
                weight = entry["weight"]
            except (KeyError, TypeError):
                raise InvalidParameterError(f"malformed node weight entry: {entry!r}") from None
            if prefix in node_weights:
                raise InvalidParameterError(f"node weight prefix repeated: {prefix!r}")
            node_weights[prefix] = weight

        edge_weights: Dict[Prefix, EdgeWeight] = {}
        for entry in data.get("edge_weights", []):
            try:
                prefix = address_prefix(entry["prefix"])
            except (KeyError, TypeError):
                raise InvalidParameterError(f"malformed edge weight entry: {entry!r}") from None
            if prefix in edge_weights:
                raise InvalidParameterError(f"edge weight prefix repeated: {prefix!r}")
            edge_weights[prefix] = EdgeWeight(
                entry.get("forward", 1.0),
                entry.get("backward", 1.0),
            )

        return Weights(node_weights=node_weights, edge_weights=edge_weights)


class _TrieNode(Generic[T]):
    __slots__ = ("children", "value", "has_value")

    def __init__(self) -> None:
        self.children: Dict[str, "_TrieNode[T]"] = {}
        self.value: Optional[T] = None
        self.has_value = False


class PrefixTable(Generic[T]):
    """
    Longest-prefix lookup over address parts.

    Resolution walks the address once, so the cost is bounded by the
    address length rather than the number of registered prefixes.
    Prefixes are unique keys, so the deepest match is unambiguous.
    """

    def __init__(self, entries: Iterable[Tuple[Prefix, T]] = ()) -> None:
        self._root: _TrieNode[T] = _TrieNode()
        self._size = 0
        for prefix, value in entries:
            self.insert(prefix, value)

    def insert(self, prefix: Prefix, value: T) -> None:
        node = self._root
        for part in prefix:
            child = node.children.get(part)
            if child is None:
                child = _TrieNode()
                node.children[part] = child
            node = child
        if not node.has_value:
            self._size += 1
        node.value = value
        node.has_value = True

    def match(self, address: Tuple[str, ...]) -> Optional[Prefix]:
        """
        Return the longest registered prefix of ``address``, if any.
        """
        node = self._root
        best: Optional[Prefix] = () if node.has_value else None
        for depth, part in enumerate(address, start=1):
            node = node.children.get(part)
            if node is None:
                break
            if node.has_value:
                best = address[:depth]
        return best

    def resolve(self, address: Tuple[str, ...], default: T) -> T:
        node = self._root
        found = node.value if node.has_value else default
        for part in address:
            node = node.children.get(part)
            if node is None:
                break
            if node.has_value:
                found = node.value
        return found

    def __len__(self) -> int:
        return self._size
