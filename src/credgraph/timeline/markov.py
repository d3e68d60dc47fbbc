from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

import numpy as np
from scipy import sparse

from credgraph.graph.graph_schema import NodeAddress
from credgraph.graph.weighted_graph import WeightedGraph
from credgraph.timeline.interval import Interval, IntervalPartition
from credgraph.timeline.params import TimelineCredParameters

TIMELESS = -1


@dataclass(frozen=True)
class IntervalChain:
    """
    Random-walk structure for one interval.

    All vectors are indexed by the global node order of the builder, so
    consecutive chains line up without remapping. Rows of ``transition``
    sum to one for nodes with outgoing weight; ``dangling`` rows have no
    outgoing weight and route their whole mass to the root, which
    redistributes it according to ``seed``.
    """

    index: int
    interval: Interval
    transition: sparse.csr_matrix
    dangling: np.ndarray
    alive: np.ndarray
    seed: np.ndarray
    mass: float

    @property
    def size(self) -> int:
        return self.transition.shape[0]

    def row_sums(self) -> np.ndarray:
        """
        Outgoing probability per row, counting root-bound transitions.
        """
        sums = np.asarray(self.transition.sum(axis=1)).reshape(-1)
        return sums + self.dangling.astype(np.float64)


class MarkovChainBuilder:
    """
    Turns a weighted graph and an interval partition into one
    ``IntervalChain`` per interval.

    Weight resolution happens once up front; each interval then only
    masks and rescales precomputed arrays. Chains are yielded lazily and
    in ascending order, since the seed weights of interval ``i + 1``
    build on those of interval ``i``.
    """

    def __init__(
        self,
        graph: WeightedGraph,
        partition: IntervalPartition,
        params: TimelineCredParameters,
    ) -> None:
        self.graph = graph
        self.partition = partition
        self.params = params

        nodes = graph.get_nodes()
        self._addresses: List[NodeAddress] = [node.address for node in nodes]
        self._index: Dict[NodeAddress, int] = {
            address: i for i, address in enumerate(self._addresses)
        }

        self._node_weight = np.array(
            [graph.resolve_node_weight(address) for address in self._addresses],
            dtype=np.float64,
        )
        self._node_interval = np.array(
            [self._interval_of(node.timestamp_ms) for node in nodes],
            dtype=np.int64,
        )

        edges = graph.get_edges()
        self._src = np.array([self._index[e.src] for e in edges], dtype=np.int64)
        self._dst = np.array([self._index[e.dst] for e in edges], dtype=np.int64)

        resolved = [graph.resolve_edge_weight(e.address) for e in edges]
        self._forward = np.array([w.forward for w in resolved], dtype=np.float64)
        self._backward = np.array([w.backward for w in resolved], dtype=np.float64)

        own = np.array([self._interval_of(e.timestamp_ms) for e in edges], dtype=np.int64)
        if len(edges):
            self._edge_interval = np.maximum.reduce(
                [own, self._node_interval[self._src], self._node_interval[self._dst]]
            )
        else:
            self._edge_interval = own

        logging.getLogger("credgraph.timeline").debug(
            "markov builder ready: nodes=%s edges=%s intervals=%s",
            len(self._addresses),
            len(edges),
            len(partition),
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def addresses(self) -> List[NodeAddress]:
        return list(self._addresses)

    @property
    def node_weights(self) -> np.ndarray:
        return self._node_weight.copy()

    def index_of(self, address: NodeAddress) -> int:
        return self._index[address]

    def chains(self) -> Iterator[IntervalChain]:
        seed_weights = np.zeros(len(self._addresses), dtype=np.float64)
        decay = self.params.interval_decay

        for index, interval in enumerate(self.partition):
            minted = np.where(self._node_interval == index, self._node_weight, 0.0)
            seed_weights = decay * seed_weights + minted
            yield self._build(index, interval, seed_weights)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _interval_of(self, timestamp_ms: Optional[int]) -> int:
        if timestamp_ms is None:
            return TIMELESS
        return self.partition.index_of(timestamp_ms)

    def _build(
        self,
        index: int,
        interval: Interval,
        seed_weights: np.ndarray,
    ) -> IntervalChain:
        n = len(self._addresses)
        decay = self.params.interval_decay

        alive = self._node_interval <= index
        active = self._edge_interval <= index

        src = self._src[active]
        dst = self._dst[active]
        edge_interval = self._edge_interval[active]
        age = np.where(edge_interval == TIMELESS, 0, index - edge_interval)
        factor = np.power(decay, age.astype(np.float64))

        forward = self._forward[active] * self._node_weight[dst] * factor
        backward = self._backward[active] * self._node_weight[src] * factor

        rows = np.concatenate([src, dst])
        cols = np.concatenate([dst, src])
        weights = np.concatenate([forward, backward])

        keep = weights > 0.0
        rows, cols, weights = rows[keep], cols[keep], weights[keep]

        out_weight = np.bincount(rows, weights=weights, minlength=n)
        dangling = out_weight <= 0.0
        probabilities = weights / out_weight[rows] if len(weights) else weights

        transition = sparse.csr_matrix(
            (probabilities, (rows, cols)),
            shape=(n, n),
            dtype=np.float64,
        )

        mass = float(seed_weights.sum())
        if mass > 0.0:
            seed = seed_weights / mass
        else:
            seed = alive.astype(np.float64) / max(int(alive.sum()), 1)

        return IntervalChain(
            index=index,
            interval=interval,
            transition=transition,
            dangling=dangling,
            alive=alive,
            seed=seed,
            mass=mass,
        )


def carryover(
    previous: Optional[np.ndarray],
    chain: IntervalChain,
    interval_decay: float,
) -> np.ndarray:
    """
    Pre-solve distribution for ``chain``.

    The first interval starts uniform over alive nodes. Later intervals
    start from the previous converged distribution, retained at
    ``interval_decay`` and topped up from this interval's seed. Both
    inputs sum to one, so the mix does too.
    """
    if previous is None:
        alive = chain.alive.astype(np.float64)
        return alive / max(alive.sum(), 1.0)
    return interval_decay * previous + (1.0 - interval_decay) * chain.seed
