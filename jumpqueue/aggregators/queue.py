"""The Queue Method. This method handles conditional intensity rates.

Every jump keeps its own next fire time in an indexed priority queue. Fire
times are sampled by thinning (see ``kernel.next_time``) so rates may be
time-varying, state-dependent and history-dependent. After a jump fires only
the jumps in its dependency set are resampled.

Example:
    >>> jump = ConditionalRateJump(hawkes_rate_factory(1.0, 0.5, 1.0), affect)
    >>> agg = QueueMethodAggregator([jump], dep_graph=[[0]], rng=NumpyRandomSource(7))
    >>> agg.initialize(u, None, 0.0, 20.0)
    >>> while not agg.terminated:
    ...     t, index = agg.peek_next()
    ...     agg.fire(u, None, t)
"""

from __future__ import annotations

import logging
import math
from typing import Any, List, Optional, Sequence, Tuple

import jax.numpy as jnp

from ..depgraph import DependencyInput, build_dependency_graph
from ..errors import ConfigurationError, TimeReversalError
from ..jumps import ConditionalRateJump
from ..massaction import num_mass_action_jumps
from ..pqueue import JumpQueue
from ..records import EMPTY, RateRecord
from ..rng import NumpyRandomSource, RandomSource
from ..runtime import QueueMethodState
from .base import AggregatorStatus, JumpAggregator
from .kernel import NEVER, next_time

logger = logging.getLogger(__name__)


class QueueMethodAggregator(JumpAggregator):
    """Queue Method jump aggregator.

    Args:
        jumps: Conditional rate jumps; a jump's index is its position here
        mass_action_jumps: Must be empty; mass-action jumps are unsupported
        dep_graph: Jumps to resample after each jump fires (itself included
            automatically). Required whenever ``jumps`` is non-empty.
        rng: Random source; a fresh NumpyRandomSource when None
        save_positions: Whether the driver saves the state before/after jumps

    Raises:
        ConfigurationError: If mass-action jumps are present or the
            dependency graph is missing or malformed

    Attributes:
        next_jump: Index of the next jump to execute
        prev_jump: Index of the previously executed jump (-1 before any)
        next_jump_time: Time of the next jump
        end_time: Time to stop the simulation
        records: Rate-state record of every jump
        dep_gr: Normalized dependency graph
        pq: Priority queue of fire times (None before initialize)
    """

    def __init__(
        self,
        jumps: Sequence[ConditionalRateJump],
        *,
        mass_action_jumps=None,
        dep_graph: Optional[DependencyInput] = None,
        rng: Optional[RandomSource] = None,
        save_positions: Tuple[bool, bool] = (True, True),
    ):
        if num_mass_action_jumps(mass_action_jumps) > 0:
            raise ConfigurationError(
                "Mass-action jumps are not supported with the Queue Method."
            )

        self.jumps: List[ConditionalRateJump] = list(jumps)
        self.dep_gr = build_dependency_graph(
            len(self.jumps), dep_graph, has_conditional=bool(self.jumps)
        )
        self.rng = rng if rng is not None else NumpyRandomSource()
        self.save_positions = tuple(save_positions)

        self.next_jump = 0
        self.prev_jump = -1
        self.next_jump_time = NEVER
        self.end_time = NEVER
        self.records: List[RateRecord] = [EMPTY] * len(self.jumps)
        self.pq: Optional[JumpQueue] = None
        self.status = AggregatorStatus.UNINITIALIZED
        self._last_time = -math.inf

    @property
    def num_jumps(self) -> int:
        return len(self.jumps)

    def initialize(self, u: Any, params: Any, t0: float, end_time: float) -> None:
        """Sample every jump from ``t0`` and seed the priority queue.

        Any previous run is discarded: all rate-state records restart empty.
        """
        t0 = float(t0)
        self.end_time = float(end_time)
        self.prev_jump = -1
        self._last_time = t0
        self.records = [EMPTY] * self.num_jumps

        self.fill_rates_and_get_times(u, params, t0)
        self.generate_jumps()
        logger.debug(
            "Initialized Queue Method with %d jumps on [%s, %s]; first jump %d at %s",
            self.num_jumps, t0, self.end_time, self.next_jump, self.next_jump_time,
        )

    def peek_next(self) -> Tuple[float, int]:
        """Return (time, index) of the next jump."""
        self._require_initialized()
        return self.next_jump_time, self.next_jump

    def fire(self, u: Any, params: Any, t: float) -> None:
        """Execute the next jump at ``t`` and resample its dependents.

        Raises:
            RuntimeError: If the aggregator is not ready
            TimeReversalError: If ``t`` precedes the last observed time
        """
        self._require_initialized()
        if self.status is AggregatorStatus.TERMINATED:
            raise RuntimeError(
                f"Cannot fire: no jump is scheduled before end time {self.end_time}"
            )
        t = float(t)
        if t < self._last_time:
            raise TimeReversalError(t, self._last_time, what="fire time")
        self._last_time = t

        self.update_state(u)
        self.update_dependent_rates(u, params, t)
        self.generate_jumps()

    def update_state(self, u: Any) -> None:
        """Apply the effect of the next jump to ``u``."""
        self.jumps[self.next_jump].affect(u)
        self.prev_jump = self.next_jump

    def update_dependent_rates(self, u: Any, params: Any, t: float) -> None:
        """Resample every jump that depends on the one that just fired."""
        dep_rxs = self.dep_gr[self.next_jump]
        for rx in sorted(dep_rxs):
            trx, self.records[rx] = next_time(
                self.jumps[rx].rate_factory, self.records[rx], u, params, t,
                self.end_time, self.rng, jump_index=rx,
            )
            self.pq.update(rx, trx)
        logger.debug(
            "Fired jump %d at %s; resampled %d dependents",
            self.next_jump, t, len(dep_rxs),
        )

    def generate_jumps(self) -> None:
        """Read the next jump and its time off the priority queue."""
        if len(self.pq) == 0:
            self.next_jump_time, self.next_jump = NEVER, 0
        else:
            self.next_jump_time, self.next_jump = self.pq.peek_min()

        if self.next_jump_time > self.end_time:
            self.status = AggregatorStatus.TERMINATED
            logger.debug("No jump scheduled before end time %s", self.end_time)
        else:
            self.status = AggregatorStatus.READY

    def fill_rates_and_get_times(self, u: Any, params: Any, t: float) -> None:
        """Sample every jump from ``t`` and rebuild the priority queue."""
        times = []
        for rx, jump in enumerate(self.jumps):
            trx, self.records[rx] = next_time(
                jump.rate_factory, self.records[rx], u, params, t,
                self.end_time, self.rng, jump_index=rx,
            )
            times.append(trx)
        self.pq = JumpQueue(times)

    def snapshot(self) -> QueueMethodState:
        """Current aggregator state as a Penzai struct."""
        self._require_initialized()
        return QueueMethodState(
            next_jump=jnp.asarray(self.next_jump),
            prev_jump=jnp.asarray(self.prev_jump),
            next_jump_time=jnp.asarray(self.next_jump_time),
            end_time=jnp.asarray(self.end_time),
            fire_times=jnp.asarray(self.pq.times()),
            status=self.status.value,
        )

    def get_state(self) -> dict:
        """Current aggregator state as a dictionary of Python types."""
        return {
            'status': self.status.value,
            'next_jump': self.next_jump,
            'prev_jump': self.prev_jump,
            'next_jump_time': self.next_jump_time,
            'end_time': self.end_time,
            'fire_times': self.pq.times() if self.pq is not None else [],
            'records': list(self.records),
        }

    def _require_initialized(self) -> None:
        if self.status is AggregatorStatus.UNINITIALIZED:
            raise RuntimeError("Aggregator not initialized. Call initialize() first.")
