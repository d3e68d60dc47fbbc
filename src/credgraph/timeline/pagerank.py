from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from credgraph.config.settings import SolverConfig
from credgraph.errors import ConvergenceWarning
from credgraph.timeline.markov import IntervalChain
from credgraph.timeline.params import check_alpha


@dataclass(frozen=True)
class PageRankResult:
    """
    Outcome of one power-iteration solve.

    ``distribution`` sums to one. ``delta`` is the L1 distance between
    the last two iterates.
    """

    distribution: np.ndarray
    iterations: int
    delta: float
    converged: bool

    def warning(self, interval_index: int, tolerance: float) -> Optional[ConvergenceWarning]:
        if self.converged:
            return None
        return ConvergenceWarning(
            interval_index=interval_index,
            iterations=self.iterations,
            delta=self.delta,
            tolerance=tolerance,
        )


class PageRankSolver:
    """
    Personalized PageRank by power iteration.

    Each step sends ``alpha`` of the mass to the root, which spreads it
    according to the chain's seed; the rest follows the transition
    matrix, with dangling rows also routed through the root:

        v' = alpha * seed + (1 - alpha) * (v P + dangling(v) * seed)

    Hitting the iteration cap is not an error. The last iterate is
    returned with ``converged=False`` and the caller decides how loudly
    to report it.
    """

    def __init__(self, config: SolverConfig = SolverConfig()) -> None:
        self.config = config

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def solve(
        self,
        chain: IntervalChain,
        *,
        alpha: float,
        initial: Optional[np.ndarray] = None,
    ) -> PageRankResult:
        alpha = check_alpha(alpha)
        n = chain.size

        if n == 0:
            return PageRankResult(
                distribution=np.zeros(0, dtype=np.float64),
                iterations=0,
                delta=0.0,
                converged=True,
            )

        v = self._initial_vector(chain, initial)
        transposed = chain.transition.T.tocsr()
        seed = chain.seed
        dangling = chain.dangling

        delta = float("inf")
        iterations = 0
        converged = False

        for iterations in range(1, self.config.max_iterations + 1):
            dangling_mass = float(v[dangling].sum())
            nxt = alpha * seed + (1.0 - alpha) * (transposed @ v + dangling_mass * seed)

            total = nxt.sum()
            if total > 0.0:
                nxt /= total

            delta = float(np.abs(nxt - v).sum())
            v = nxt

            if delta < self.config.tolerance:
                converged = True
                break

        if not converged:
            logging.getLogger("credgraph.pagerank").warning(
                "interval %s: no convergence after %s iterations (delta=%.3e, tol=%.1e)",
                chain.index,
                iterations,
                delta,
                self.config.tolerance,
            )

        return PageRankResult(
            distribution=v,
            iterations=iterations,
            delta=delta,
            converged=converged,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _initial_vector(
        self,
        chain: IntervalChain,
        initial: Optional[np.ndarray],
    ) -> np.ndarray:
        if initial is None:
            alive = chain.alive.astype(np.float64)
            return alive / max(alive.sum(), 1.0)

        v = np.array(initial, dtype=np.float64)
        if v.shape != (chain.size,):
            raise ValueError(
                f"initial vector has shape {v.shape}, expected ({chain.size},)"
            )
        if (v < 0).any():
            raise ValueError("initial vector must be non-negative")
        total = v.sum()
        if total <= 0.0:
            raise ValueError("initial vector must have positive mass")
        return v / total
