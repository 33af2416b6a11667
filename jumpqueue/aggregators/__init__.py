"""Jump aggregators.

The Queue Method aggregator and the thinning sampler it uses to draw
next fire times.
"""

from .base import AggregatorStatus, JumpAggregator
from .kernel import NEVER, next_time, propose
from .queue import QueueMethodAggregator

__all__ = [
    'AggregatorStatus',
    'JumpAggregator',
    'NEVER',
    'next_time',
    'propose',
    'QueueMethodAggregator',
]
