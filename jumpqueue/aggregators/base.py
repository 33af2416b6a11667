"""Interface shared by jump aggregators.

An aggregator decides which jump fires next and when. The driver owns
simulated time and the state vector; it calls ``initialize`` once, then
alternates ``peek_next`` and ``fire`` until the aggregator reports that it
has terminated.
"""

from __future__ import annotations

import abc
import enum
from typing import Any, Tuple


class AggregatorStatus(enum.Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    TERMINATED = "terminated"


class JumpAggregator(abc.ABC):
    """Abstract base class for jump aggregators."""

    status: AggregatorStatus = AggregatorStatus.UNINITIALIZED

    @abc.abstractmethod
    def initialize(self, u: Any, params: Any, t0: float, end_time: float) -> None:
        """Set up a new simulation and compute the first jump."""

    @abc.abstractmethod
    def peek_next(self) -> Tuple[float, int]:
        """Return (time, index) of the next jump without mutating state."""

    @abc.abstractmethod
    def fire(self, u: Any, params: Any, t: float) -> None:
        """Execute the next jump at time ``t`` and schedule the following one."""

    @property
    def terminated(self) -> bool:
        return self.status is AggregatorStatus.TERMINATED
