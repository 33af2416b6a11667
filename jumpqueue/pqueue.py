"""Indexed priority queue of next fire times.

JumpQueue holds exactly one entry per jump index, keyed by that jump's
next fire time. The index set is fixed when the queue is built; only the
times change afterwards. See the documentation of pqdict for the
properties of the underlying indexed binary heap.
"""

from __future__ import annotations

from typing import Iterator, List, Sequence, Tuple

from pqdict import pqdict


class JumpQueue:
    """Min-heap of (time, jump index) addressable by jump index.

    peek_min is O(1), update is O(log N) and construction heapifies the
    N initial times in O(N).

    Args:
        times: Initial fire time of every jump, ordered by jump index
    """

    def __init__(self, times: Sequence[float]):
        self._queue = pqdict({index: float(t) for index, t in enumerate(times)})

    def __len__(self) -> int:
        return len(self._queue)

    def __iter__(self) -> Iterator[int]:
        return iter(range(len(self._queue)))

    def __contains__(self, index) -> bool:
        return index in self._queue

    def peek_min(self) -> Tuple[float, int]:
        """Return (time, index) of the earliest entry without removing it."""
        index, t = self._queue.topitem()
        return t, index

    def update(self, index: int, t: float) -> None:
        """Replace the time of ``index`` and restore the heap invariant.

        Raises:
            KeyError: If ``index`` was not part of the queue at construction
        """
        self._queue.updateitem(index, float(t))

    def time_of(self, index: int) -> float:
        """Current time stored for ``index``."""
        return self._queue[index]

    def times(self) -> List[float]:
        """Current times ordered by jump index."""
        return [self._queue[index] for index in range(len(self._queue))]

    def __repr__(self) -> str:
        if not self._queue:
            return "JumpQueue([])"
        t, index = self.peek_min()
        return f"JumpQueue(n={len(self)}, next=({t}, {index}))"
