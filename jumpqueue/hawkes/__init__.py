"""Exponential-kernel Hawkes processes as Queue Method jumps."""

from .config import HawkesConfig
from .runtime import HawkesRuntime
from .kernel import (
    hawkes_rate_factory,
    intensity,
    get_branching_ratio,
    get_stationary_intensity,
)

__all__ = [
    'HawkesConfig',
    'HawkesRuntime',
    'hawkes_rate_factory',
    'intensity',
    'get_branching_ratio',
    'get_stationary_intensity',
]
