"""Jump definitions handled by the Queue Method.

A conditional rate jump pairs a rate factory with an effect. The factory is
called as ``factory(record, t0, u, params, t)`` and returns a RateBounds:
the rate-state record installed for ``[t, t + window)``, a lower and an
upper bound on the intensity over that window, and the window length.
The effect is called as ``affect(u)`` and mutates the state in place.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, NamedTuple

from .records import ConstantRate, RateRecord, as_record


class RateBounds(NamedTuple):
    """What a rate factory returns for one proposal window.

    Attributes:
        rate: Record holding the intensity valid on the window
        lower: Lower bound on the intensity over the window
        upper: Upper bound on the intensity over the window
        window: Length of the window; ``math.inf`` when the rate is constant
    """
    rate: RateRecord
    lower: float
    upper: float
    window: float


RateFactory = Callable[[RateRecord, float, Any, Any, float], RateBounds]
Affect = Callable[[Any], None]


@dataclass(frozen=True)
class ConditionalRateJump:
    """A jump with a history-, state- or time-dependent intensity.

    Attributes:
        rate_factory: ``(record, t0, u, params, t) -> RateBounds``
        affect: ``(u) -> None``, mutates the state when the jump fires
    """
    rate_factory: RateFactory
    affect: Affect


def constant_rate_factory(value: float) -> RateFactory:
    """Rate factory for a homogeneous Poisson clock with intensity ``value``."""
    record = ConstantRate(float(value))

    def factory(prev, t0, u, params, t):
        return RateBounds(record, record.value, record.value, math.inf)

    return factory


def bounded_rate_factory(
    rate: Callable[[Any, Any, float], float],
    lower: Callable[[Any, Any, float], float],
    upper: Callable[[Any, Any, float], float],
    window: float,
) -> RateFactory:
    """Rate factory for a Markovian intensity with user-supplied bounds.

    ``lower(u, params, t)`` and ``upper(u, params, t)`` must bound
    ``rate`` on ``[t, t + window)``.
    """
    record = as_record(rate)

    def factory(prev, t0, u, params, t):
        lo = lower(u, params, t)
        hi = upper(u, params, t)
        return RateBounds(record, lo, hi, math.inf if lo == hi else window)

    return factory
