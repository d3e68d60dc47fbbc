from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from credgraph.config.settings import CredConfig
from credgraph.errors import ConvergenceWarning, InvalidParameterError
from credgraph.graph.graph_schema import NodeAddress, has_prefix
from credgraph.graph.weighted_graph import WeightedGraph
from credgraph.graph.weights import Weights
from credgraph.timeline.interval import Interval, IntervalPartition, partition_graph
from credgraph.timeline.markov import MarkovChainBuilder, carryover
from credgraph.timeline.pagerank import PageRankSolver
from credgraph.timeline.params import ParamsLike, TimelineCredParameters, coerce_params

WeightsLike = Union[Weights, Mapping[str, Any]]


@dataclass(frozen=True)
class NodeCred:
    """
    Cred series of one node across all intervals.
    """

    address: NodeAddress
    description: str
    cred: Tuple[float, ...]
    total: float


@dataclass(frozen=True)
class SolveReport:
    interval_index: int
    iterations: int
    delta: float
    converged: bool


def _readonly(array: np.ndarray) -> np.ndarray:
    array.flags.writeable = False
    return array


def coerce_weights(weights: WeightsLike) -> Weights:
    """
    Copy-on-entry for caller-owned weights.
    """
    if isinstance(weights, Weights):
        return weights.copy()
    if isinstance(weights, Mapping):
        return Weights.from_dict(weights)
    raise InvalidParameterError(f"unsupported weights object: {weights!r}")


class TimelineCred:
    """
    Immutable result of a timeline cred computation.

    Holds the graph and weights it was computed from, the parameters,
    and a ``(node, interval)`` score table. Every interval's column sums
    to that interval's total mass. ``reanalyze`` returns a new object;
    nothing here changes after construction.
    """

    def __init__(
        self,
        *,
        graph: WeightedGraph,
        params: TimelineCredParameters,
        config: CredConfig,
        partition: IntervalPartition,
        addresses: Sequence[NodeAddress],
        scores: np.ndarray,
        totals: np.ndarray,
        reports: Sequence[SolveReport] = (),
        warnings: Sequence[ConvergenceWarning] = (),
    ) -> None:
        self._graph = graph
        self._params = params
        self._config = config
        self._partition = partition
        self._addresses: Tuple[NodeAddress, ...] = tuple(addresses)
        self._row: Dict[NodeAddress, int] = {
            address: i for i, address in enumerate(self._addresses)
        }
        self._scores = _readonly(np.array(scores, dtype=np.float64))
        self._totals = _readonly(np.array(totals, dtype=np.float64))
        self._reports = tuple(reports)
        self._warnings = tuple(warnings)

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def weighted_graph(self) -> WeightedGraph:
        return self._graph

    def weights(self) -> Weights:
        return self._graph.weights

    def params(self) -> TimelineCredParameters:
        return self._params

    def config(self) -> CredConfig:
        return self._config

    def params_up_to_date(
        self,
        weights: WeightsLike,
        params: ParamsLike,
    ) -> bool:
        """
        True when recomputing with these inputs would change nothing.
        """
        return (
            coerce_params(params) == self._params
            and coerce_weights(weights) == self.weights()
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def intervals(self) -> Tuple[Interval, ...]:
        return self._partition.intervals

    def addresses(self) -> List[NodeAddress]:
        return list(self._addresses)

    @property
    def scores(self) -> np.ndarray:
        return self._scores

    def interval_totals(self) -> np.ndarray:
        return self._totals

    def total_cred(self) -> float:
        return float(self._totals.sum())

    def cred_for(self, address: NodeAddress) -> NodeCred:
        try:
            row = self._row[tuple(address)]
        except KeyError:
            raise KeyError(f"no cred for node {address!r}") from None
        return self._node_cred(row)

    def filter(
        self,
        prefix: Optional[Iterable[str]] = None,
        limit: Optional[int] = None,
    ) -> List[NodeCred]:
        """
        Nodes under ``prefix`` sorted by total cred, highest first.

        Pure read-only filtering; ties keep graph insertion order.
        """
        rows = self._rows_under(tuple(prefix) if prefix is not None else ())
        totals = self._scores.sum(axis=1) if len(self._addresses) else np.zeros(0)
        rows.sort(key=lambda row: -totals[row])
        if limit is not None:
            rows = rows[:limit]
        return [self._node_cred(row) for row in rows]

    def reduce_size(
        self,
        type_prefixes: Iterable[Iterable[str]],
        limit: int,
        node_overrides: Iterable[Iterable[str]] = (),
    ) -> "TimelineCred":
        """
        Keep the top ``limit`` nodes under each prefix plus any overrides.

        Interval totals still describe the full computation.
        """
        keep: Dict[NodeAddress, None] = {}
        for prefix in type_prefixes:
            for node_cred in self.filter(prefix, limit):
                keep[node_cred.address] = None
        for address in node_overrides:
            address = tuple(address)
            if address in self._row:
                keep[address] = None

        rows = sorted(self._row[address] for address in keep)
        return TimelineCred(
            graph=self._graph,
            params=self._params,
            config=self._config,
            partition=self._partition,
            addresses=[self._addresses[row] for row in rows],
            scores=self._scores[rows, :] if rows else np.zeros((0, len(self._partition))),
            totals=self._totals,
            reports=self._reports,
            warnings=self._warnings,
        )

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    @property
    def reports(self) -> Tuple[SolveReport, ...]:
        return self._reports

    @property
    def warnings(self) -> Tuple[ConvergenceWarning, ...]:
        return self._warnings

    @property
    def converged(self) -> bool:
        return not self._warnings

    def allclose(self, other: "TimelineCred", tolerance: float = 1e-6) -> bool:
        return (
            self._addresses == other._addresses
            and self.intervals() == other.intervals()
            and np.allclose(self._scores, other._scores, rtol=0.0, atol=tolerance)
            and np.allclose(self._totals, other._totals, rtol=0.0, atol=tolerance)
        )

    # ------------------------------------------------------------------
    # Recomputation
    # ------------------------------------------------------------------

    def reanalyze(
        self,
        weights: Optional[WeightsLike] = None,
        params: Optional[ParamsLike] = None,
    ) -> "TimelineCred":
        return reanalyze(self, weights, params)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _rows_under(self, prefix: Tuple[str, ...]) -> List[int]:
        return [
            row
            for row, address in enumerate(self._addresses)
            if has_prefix(address, prefix)
        ]

    def _node_cred(self, row: int) -> NodeCred:
        address = self._addresses[row]
        series = self._scores[row]
        return NodeCred(
            address=address,
            description=self._graph.node(address).description,
            cred=tuple(float(x) for x in series),
            total=float(series.sum()),
        )

    def __repr__(self) -> str:
        return (
            f"TimelineCred(nodes={len(self._addresses)}, "
            f"intervals={len(self._partition)}, params={self._params})"
        )


# ---------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------


def compute(
    graph: WeightedGraph,
    weights: Optional[WeightsLike] = None,
    params: Optional[ParamsLike] = None,
    *,
    config: Optional[CredConfig] = None,
) -> TimelineCred:
    """
    Compute timeline cred for ``graph``.

    ``weights`` defaults to the graph's own table and ``params`` to the
    library defaults. Both are validated and copied before any work
    starts; the input graph is never mutated.
    """
    params = coerce_params(params)
    weights = coerce_weights(weights) if weights is not None else graph.weights
    config = config or CredConfig()

    logger = logging.getLogger("credgraph.timeline")
    t0 = time.perf_counter()

    weighted = graph.with_weights(weights)

    if weighted.node_count() == 0:
        return TimelineCred(
            graph=weighted,
            params=params,
            config=config,
            partition=IntervalPartition(()),
            addresses=(),
            scores=np.zeros((0, 0)),
            totals=np.zeros(0),
        )

    partition = partition_graph(weighted, config.intervals)
    builder = MarkovChainBuilder(weighted, partition, params)
    solver = PageRankSolver(config.solver)

    scores = np.zeros((weighted.node_count(), len(partition)), dtype=np.float64)
    totals = np.zeros(len(partition), dtype=np.float64)
    reports: List[SolveReport] = []
    warnings: List[ConvergenceWarning] = []

    state: Optional[np.ndarray] = None
    for chain in builder.chains():
        initial = carryover(state, chain, params.interval_decay)
        result = solver.solve(chain, alpha=params.alpha, initial=initial)

        scores[:, chain.index] = result.distribution * chain.mass
        totals[chain.index] = chain.mass
        reports.append(
            SolveReport(
                interval_index=chain.index,
                iterations=result.iterations,
                delta=result.delta,
                converged=result.converged,
            )
        )
        warning = result.warning(chain.index, config.solver.tolerance)
        if warning is not None:
            warnings.append(warning)

        state = result.distribution

    logger.info(
        "timeline cred: nodes=%s edges=%s intervals=%s unconverged=%s in %.3fs",
        weighted.node_count(),
        weighted.edge_count(),
        len(partition),
        len(warnings),
        time.perf_counter() - t0,
    )

    return TimelineCred(
        graph=weighted,
        params=params,
        config=config,
        partition=partition,
        addresses=builder.addresses,
        scores=scores,
        totals=totals,
        reports=reports,
        warnings=warnings,
    )


def reanalyze(
    previous: TimelineCred,
    weights: Optional[WeightsLike] = None,
    params: Optional[ParamsLike] = None,
) -> TimelineCred:
    """
    Recompute from the same graph with new weights and/or parameters.

    Omitted inputs are taken from ``previous``. ``previous`` is left
    untouched.
    """
    return compute(
        previous.weighted_graph(),
        weights if weights is not None else previous.weights(),
        params if params is not None else previous.params(),
        config=previous.config(),
    )
