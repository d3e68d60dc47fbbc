from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Tuple

from credgraph.graph.graph_schema import address_prefix, has_prefix
from credgraph.graph.weights import EdgeWeight, Weights, check_weight

Prefix = Tuple[str, ...]


@dataclass(frozen=True)
class NodeType:
    """
    A kind of node a plugin emits, with its default weight.
    """

    name: str
    plural_name: str
    prefix: Prefix
    default_weight: float
    description: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "prefix", address_prefix(self.prefix))
        object.__setattr__(
            self,
            "default_weight",
            check_weight(self.default_weight, f"default weight of {self.name}"),
        )


@dataclass(frozen=True)
class EdgeType:
    """
    A kind of edge a plugin emits, with default forward/backward weights.
    """

    forward_name: str
    backward_name: str
    prefix: Prefix
    default_weight: EdgeWeight = field(default_factory=EdgeWeight)
    description: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "prefix", address_prefix(self.prefix))


@dataclass(frozen=True)
class PluginDeclaration:
    """
    Closed description of what a plugin contributes to the graph.

    Validated at construction: every type prefix must live under the
    plugin's own node or edge prefix, and user types must be among the
    declared node types.
    """

    name: str
    node_prefix: Prefix
    edge_prefix: Prefix
    node_types: Tuple[NodeType, ...] = ()
    edge_types: Tuple[EdgeType, ...] = ()
    user_types: Tuple[NodeType, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "node_prefix", address_prefix(self.node_prefix))
        object.__setattr__(self, "edge_prefix", address_prefix(self.edge_prefix))
        object.__setattr__(self, "node_types", tuple(self.node_types))
        object.__setattr__(self, "edge_types", tuple(self.edge_types))
        object.__setattr__(self, "user_types", tuple(self.user_types))

        for node_type in self.node_types:
            if not has_prefix(node_type.prefix, self.node_prefix):
                raise ValueError(
                    f"{self.name}: node type {node_type.name!r} prefix "
                    f"{node_type.prefix!r} is outside {self.node_prefix!r}"
                )
        for edge_type in self.edge_types:
            if not has_prefix(edge_type.prefix, self.edge_prefix):
                raise ValueError(
                    f"{self.name}: edge type {edge_type.forward_name!r} prefix "
                    f"{edge_type.prefix!r} is outside {self.edge_prefix!r}"
                )
        for user_type in self.user_types:
            if user_type not in self.node_types:
                raise ValueError(
                    f"{self.name}: user type {user_type.name!r} is not a declared node type"
                )

    # ------------------------------------------------------------------
    # Plain document form
    # ------------------------------------------------------------------

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "PluginDeclaration":
        node_types: Dict[str, NodeType] = {}
        for entry in data.get("node_types", []):
            node_type = NodeType(
                name=entry["name"],
                plural_name=entry.get("plural_name", entry["name"] + "s"),
                prefix=tuple(entry["prefix"]),
                default_weight=entry.get("default_weight", 1.0),
                description=entry.get("description", ""),
            )
            node_types[node_type.name] = node_type

        edge_types: List[EdgeType] = []
        for entry in data.get("edge_types", []):
            default = entry.get("default_weight", {})
            edge_types.append(
                EdgeType(
                    forward_name=entry["forward_name"],
                    backward_name=entry.get("backward_name", entry["forward_name"]),
                    prefix=tuple(entry["prefix"]),
                    default_weight=EdgeWeight(
                        default.get("forward", 1.0),
                        default.get("backward", 1.0),
                    ),
                    description=entry.get("description", ""),
                )
            )

        try:
            user_types = tuple(node_types[name] for name in data.get("user_types", []))
        except KeyError as exc:
            raise ValueError(f"unknown user type: {exc.args[0]!r}") from None

        return PluginDeclaration(
            name=data["name"],
            node_prefix=tuple(data["node_prefix"]),
            edge_prefix=tuple(data["edge_prefix"]),
            node_types=tuple(node_types.values()),
            edge_types=tuple(edge_types),
            user_types=user_types,
        )


def weights_from_declarations(declarations: Iterable[PluginDeclaration]) -> Weights:
    """
    Build the default weight table for a set of plugins.
    """
    node_weights: Dict[Prefix, float] = {}
    edge_weights: Dict[Prefix, EdgeWeight] = {}
    for declaration in declarations:
        for node_type in declaration.node_types:
            node_weights[node_type.prefix] = node_type.default_weight
        for edge_type in declaration.edge_types:
            edge_weights[edge_type.prefix] = edge_type.default_weight
    return Weights(node_weights=node_weights, edge_weights=edge_weights)


def user_prefixes(declarations: Iterable[PluginDeclaration]) -> List[Prefix]:
    return [
        user_type.prefix
        for declaration in declarations
        for user_type in declaration.user_types
    ]
