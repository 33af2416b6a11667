"""jumpqueue: Queue Method simulation of conditional-intensity jump processes."""

from .units import UnitManager, UnitSpec, QuantityInput
from .fields import quantity_field, time_field, rate_field
from .errors import (
    JumpQueueError,
    ConfigurationError,
    InvariantViolation,
    BoundInversionError,
    TimeReversalError,
)
from .records import (
    RateRecord,
    EMPTY,
    StatelessRate,
    ConstantRate,
    ExcitedRate,
    OpaqueRate,
)
from .rng import RandomSource, NumpyRandomSource, JaxRandomSource, make_random_source
from .jumps import (
    RateBounds,
    ConditionalRateJump,
    constant_rate_factory,
    bounded_rate_factory,
)
from .massaction import MassActionJump
from .depgraph import build_dependency_graph, add_self_dependencies
from .pqueue import JumpQueue
from .runtime import QuantityNode, QueueMethodState
from .aggregators import (
    AggregatorStatus,
    NEVER,
    next_time,
    QueueMethodAggregator,
)
from .hawkes import (
    HawkesConfig,
    HawkesRuntime,
    hawkes_rate_factory,
)
from .config import QueueMethodConfig
from .adapters import JumpTrajectory, QueueMethodAdapter

__all__ = [
    # Units
    'UnitManager',
    'UnitSpec',
    'QuantityInput',
    'quantity_field',
    'time_field',
    'rate_field',
    # Errors
    'JumpQueueError',
    'ConfigurationError',
    'InvariantViolation',
    'BoundInversionError',
    'TimeReversalError',
    # Rate-state records
    'RateRecord',
    'EMPTY',
    'StatelessRate',
    'ConstantRate',
    'ExcitedRate',
    'OpaqueRate',
    # Random sources
    'RandomSource',
    'NumpyRandomSource',
    'JaxRandomSource',
    'make_random_source',
    # Jumps
    'RateBounds',
    'ConditionalRateJump',
    'constant_rate_factory',
    'bounded_rate_factory',
    'MassActionJump',
    # Core
    'build_dependency_graph',
    'add_self_dependencies',
    'JumpQueue',
    'AggregatorStatus',
    'NEVER',
    'next_time',
    'QueueMethodAggregator',
    # Runtime structures
    'QuantityNode',
    'QueueMethodState',
    # Hawkes
    'HawkesConfig',
    'HawkesRuntime',
    'hawkes_rate_factory',
    # High-level API
    'QueueMethodConfig',
    'JumpTrajectory',
    'QueueMethodAdapter',
]
