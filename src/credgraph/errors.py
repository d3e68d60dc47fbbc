from __future__ import annotations

from typing import Optional


class CredGraphError(Exception):
    """
    Base class for all errors raised by credgraph.
    """


class DuplicateAddressError(CredGraphError, ValueError):
    """
    Raised when a node or edge address is added to a graph twice.
    """

    def __init__(self, kind: str, address: tuple) -> None:
        super().__init__(f"duplicate {kind} address: {address!r}")
        self.kind = kind
        self.address = address


class DanglingReferenceError(CredGraphError, ValueError):
    """
    Raised when an edge references a node that is not in the graph.
    """

    def __init__(self, edge: tuple, missing: tuple) -> None:
        super().__init__(
            f"edge {edge!r} references missing node {missing!r}"
        )
        self.edge = edge
        self.missing = missing


class InvalidParameterError(CredGraphError, ValueError):
    """
    Raised for out-of-range parameters or weights, before any computation.
    """


class ConvergenceWarning(UserWarning):
    """
    Diagnostic for an interval whose solve hit the iteration cap.

    Attached to results, never raised.
    """

    def __init__(
        self,
        interval_index: int,
        iterations: int,
        delta: float,
        tolerance: Optional[float] = None,
    ) -> None:
        super().__init__(
            f"interval {interval_index} did not converge after "
            f"{iterations} iterations (delta={delta:.3e})"
        )
        self.interval_index = interval_index
        self.iterations = iterations
        self.delta = delta
        self.tolerance = tolerance
