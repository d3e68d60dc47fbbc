from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from credgraph.config.settings import CredConfig
from credgraph.evaluation.metrics import CredComparison
from credgraph.graph.declarations import PluginDeclaration, user_prefixes
from credgraph.graph.weighted_graph import WeightedGraph
from credgraph.graph.weights import Weights
from credgraph.timeline.params import TimelineCredParameters
from credgraph.timeline.session import CredSession
from credgraph.timeline.timeline_cred import NodeCred, TimelineCred, compute
from credgraph.utils.time import iso_timestamp


class CredService:
    """
    Wires the loaded graph, the cred engine and the session together.

    This is the only place where app config is interpreted.
    """

    def __init__(
        self,
        *,
        graph: WeightedGraph,
        declarations: Sequence[PluginDeclaration] = (),
        params: TimelineCredParameters = TimelineCredParameters(),
        config: CredConfig = CredConfig(),
        node_list_limit: int = 100,
        comparison_top_movers: int = 5,
    ) -> None:
        self.graph = graph
        self.declarations = list(declarations)
        self.node_list_limit = node_list_limit
        self.comparison_top_movers = comparison_top_movers

        initial = compute(graph, params=params, config=config)
        self.session = CredSession(initial)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def summary(self, cred: Optional[TimelineCred] = None) -> Dict[str, Any]:
        cred = cred or self.session.current
        return {
            "intervals": [
                {
                    "start_ms": interval.start_ms,
                    "end_ms": interval.end_ms,
                    "start": iso_timestamp(interval.start_ms),
                }
                for interval in cred.intervals()
            ],
            "interval_totals": [float(x) for x in cred.interval_totals()],
            "params": cred.params().to_dict(),
            "weights": cred.weights().to_dict(),
            "converged": cred.converged,
            "warnings": [str(w) for w in cred.warnings],
            "generation": self.session.generation,
        }

    def nodes(
        self,
        prefix: Optional[Sequence[str]] = None,
        limit: Optional[int] = None,
    ) -> List[NodeCred]:
        """
        Node cred under ``prefix``; with no prefix, all declared user
        types (or every node when no plugin declares users).
        """
        cred = self.session.current
        limit = limit or self.node_list_limit
        if prefix is not None:
            return cred.filter(tuple(prefix), limit)

        prefixes = user_prefixes(self.declarations)
        if not prefixes:
            return cred.filter(None, limit)

        merged: Dict[tuple, NodeCred] = {}
        for user_prefix in prefixes:
            for node_cred in cred.filter(user_prefix):
                merged[node_cred.address] = node_cred
        ranked = sorted(merged.values(), key=lambda c: -c.total)
        return ranked[:limit]

    def weights(self) -> Weights:
        return self.session.current.weights()

    def status(self, weights: Optional[Weights], params: Optional[Dict[str, float]]) -> Dict[str, Any]:
        current = self.session.current
        return {
            "up_to_date": current.params_up_to_date(
                weights if weights is not None else current.weights(),
                params if params is not None else current.params(),
            ),
            "loading": self.session.loading,
            "generation": self.session.generation,
        }

    def graph_stats(self) -> Dict[str, Any]:
        return {
            "nodes": self.graph.node_count(),
            "edges": self.graph.edge_count(),
            "plugins": [d.name for d in self.declarations],
            "metadata": self.graph.metadata,
        }

    # ------------------------------------------------------------------
    # Recomputation
    # ------------------------------------------------------------------

    def reanalyze(
        self,
        weights: Optional[Weights],
        params: Optional[Dict[str, float]],
    ) -> Dict[str, Any]:
        before = self.session.current
        after = self.session.reanalyze(weights, params)
        comparison = CredComparison(before, after)
        return {
            "summary": self.summary(after),
            "comparison": comparison.summary(self.comparison_top_movers),
        }
