from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

NodeAddress = Tuple[str, ...]
EdgeAddress = Tuple[str, ...]


def _coerce_address(parts: Iterable[str], *, allow_empty: bool = False) -> Tuple[str, ...]:
    address = tuple(parts)
    if not allow_empty and not address:
        raise ValueError("address must have at least one part")
    for part in address:
        if not isinstance(part, str):
            raise TypeError(f"address parts must be strings, got {part!r}")
    return address


def node_address(*parts: str) -> NodeAddress:
    return _coerce_address(parts)


def edge_address(*parts: str) -> EdgeAddress:
    return _coerce_address(parts)


def address_prefix(parts: Iterable[str]) -> Tuple[str, ...]:
    """
    Weight prefixes may be empty; the empty prefix matches every address.
    """
    return _coerce_address(parts, allow_empty=True)


def has_prefix(address: Tuple[str, ...], prefix: Tuple[str, ...]) -> bool:
    return address[: len(prefix)] == prefix


def format_address(address: Tuple[str, ...]) -> str:
    """
    Human-readable rendering for logs. Not a serialization format.
    """
    return "/".join(address)


@dataclass(frozen=True)
class Node:
    """
    A contribution or identity in the graph.

    ``timestamp_ms`` is None for timeless nodes such as accounts.
    """

    address: NodeAddress
    timestamp_ms: Optional[int]
    description: str = ""

    @staticmethod
    def create(
        address: Iterable[str],
        timestamp_ms: Optional[int] = None,
        description: str = "",
    ) -> "Node":
        return Node(
            address=_coerce_address(address),
            timestamp_ms=None if timestamp_ms is None else int(timestamp_ms),
            description=description,
        )


@dataclass(frozen=True)
class Edge:
    """
    Directed relationship between two nodes.

    Each edge yields two random-walk transitions, one per direction,
    with independently configurable weights.
    """

    address: EdgeAddress
    src: NodeAddress
    dst: NodeAddress
    timestamp_ms: Optional[int] = None

    @staticmethod
    def create(
        address: Iterable[str],
        src: Iterable[str],
        dst: Iterable[str],
        timestamp_ms: Optional[int] = None,
    ) -> "Edge":
        return Edge(
            address=_coerce_address(address),
            src=_coerce_address(src),
            dst=_coerce_address(dst),
            timestamp_ms=None if timestamp_ms is None else int(timestamp_ms),
        )
