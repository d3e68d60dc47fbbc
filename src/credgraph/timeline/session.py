from __future__ import annotations

import asyncio
import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Optional

from credgraph.timeline.params import ParamsLike, coerce_params
from credgraph.timeline.timeline_cred import (
    TimelineCred,
    WeightsLike,
    coerce_weights,
    reanalyze,
)


class CredSession:
    """
    Holds the latest ``TimelineCred`` for an interactive caller.

    Each reanalysis request takes a generation number. When a request
    finishes, its result replaces the held one only if no newer request
    has been made since; a superseded result is dropped. Requests may
    therefore finish in any order and the newest one still wins.
    """

    def __init__(
        self,
        initial: TimelineCred,
        *,
        executor: Optional[Executor] = None,
    ) -> None:
        self._current = initial
        self._lock = threading.Lock()
        self._generation = 0
        self._completed = 0
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1,
            thread_name_prefix="credgraph-reanalyze",
        )

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def current(self) -> TimelineCred:
        with self._lock:
            return self._current

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    @property
    def loading(self) -> bool:
        with self._lock:
            return self._completed < self._generation

    def params_up_to_date(self, weights: WeightsLike, params: ParamsLike) -> bool:
        return self.current.params_up_to_date(weights, params)

    # ------------------------------------------------------------------
    # Reanalysis
    # ------------------------------------------------------------------

    def submit(
        self,
        weights: Optional[WeightsLike] = None,
        params: Optional[ParamsLike] = None,
    ) -> "Future[TimelineCred]":
        """
        Schedule a reanalysis and return its future.

        Inputs are validated and copied here, so bad parameters fail in
        the caller's thread and later caller-side mutation cannot leak
        into the computation.
        """
        base = self.current
        weights = coerce_weights(weights) if weights is not None else base.weights()
        params = coerce_params(params) if params is not None else base.params()

        generation = self._begin()
        return self._executor.submit(self._run, generation, base, weights, params)

    def reanalyze(
        self,
        weights: Optional[WeightsLike] = None,
        params: Optional[ParamsLike] = None,
    ) -> TimelineCred:
        return self.submit(weights, params).result()

    async def reanalyze_async(
        self,
        weights: Optional[WeightsLike] = None,
        params: Optional[ParamsLike] = None,
    ) -> TimelineCred:
        return await asyncio.wrap_future(self.submit(weights, params))

    def shutdown(self) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=True)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _begin(self) -> int:
        with self._lock:
            self._generation += 1
            return self._generation

    def _run(
        self,
        generation: int,
        base: TimelineCred,
        weights: WeightsLike,
        params: ParamsLike,
    ) -> TimelineCred:
        try:
            result = reanalyze(base, weights, params)
        except Exception:
            self._finish(generation, None)
            raise
        self._finish(generation, result)
        return result

    def _finish(self, generation: int, result: Optional[TimelineCred]) -> bool:
        logger = logging.getLogger("credgraph.session")
        with self._lock:
            if generation == self._generation:
                self._completed = generation
                if result is not None:
                    self._current = result
                    logger.info("generation %s committed", generation)
                    return True
                return False
            logger.info(
                "generation %s superseded by %s; result discarded",
                generation,
                self._generation,
            )
            return False
