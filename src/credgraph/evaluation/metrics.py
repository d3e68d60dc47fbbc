from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

import numpy as np

from credgraph.graph.graph_schema import NodeAddress
from credgraph.timeline.timeline_cred import TimelineCred


@dataclass(frozen=True)
class Mover:
    address: NodeAddress
    before: float
    after: float

    @property
    def change(self) -> float:
        return self.after - self.before


class CredComparison:
    """
    Compares two results over the same graph, typically a baseline and
    a reanalysis under new weights or parameters.

    Nodes are matched by address; a node missing on one side counts as
    zero cred there.
    """

    def __init__(self, before: TimelineCred, after: TimelineCred) -> None:
        self.before = before
        self.after = after
        self._addresses = list(
            dict.fromkeys(before.addresses() + after.addresses())
        )

    def interval_l1_distance(self) -> List[float]:
        """
        L1 distance between the two score columns of each shared interval.
        """
        count = min(len(self.before.intervals()), len(self.after.intervals()))
        a = self._aligned(self.before)[:, :count]
        b = self._aligned(self.after)[:, :count]
        return [float(x) for x in np.abs(a - b).sum(axis=0)]

    def max_total_change(self) -> float:
        diff = self._totals(self.after) - self._totals(self.before)
        if diff.size == 0:
            return 0.0
        return float(np.abs(diff).max())

    def total_correlation(self) -> float:
        """
        Pearson correlation of per-node total cred.
        """
        a = self._totals(self.before)
        b = self._totals(self.after)
        if a.size < 2 or np.std(a) == 0.0 or np.std(b) == 0.0:
            return 1.0 if np.allclose(a, b) else 0.0
        return float(np.corrcoef(a, b)[0, 1])

    def top_movers(self, limit: int = 10) -> List[Mover]:
        a = self._totals(self.before)
        b = self._totals(self.after)
        order = np.argsort(-np.abs(b - a), kind="stable")[:limit]
        return [
            Mover(address=self._addresses[i], before=float(a[i]), after=float(b[i]))
            for i in order
        ]

    def summary(self, limit: int = 5) -> Dict[str, object]:
        return {
            "interval_l1_distance": self.interval_l1_distance(),
            "max_total_change": self.max_total_change(),
            "total_correlation": self.total_correlation(),
            "top_movers": [
                {"address": list(m.address), "before": m.before, "after": m.after}
                for m in self.top_movers(limit)
            ],
        }

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _aligned(self, result: TimelineCred) -> np.ndarray:
        intervals = len(result.intervals())
        out = np.zeros((len(self._addresses), intervals), dtype=np.float64)
        rows: Dict[Tuple[str, ...], int] = {
            address: i for i, address in enumerate(result.addresses())
        }
        for i, address in enumerate(self._addresses):
            row = rows.get(address)
            if row is not None:
                out[i] = result.scores[row]
        return out

    def _totals(self, result: TimelineCred) -> np.ndarray:
        return self._aligned(result).sum(axis=1)
