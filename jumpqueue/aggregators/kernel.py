"""Thinning sampler for conditional rate jumps.

Implements Ogata-style thinning with refreshing bounds: the rate factory
supplies an upper bound valid over a finite window, candidate gaps are drawn
against that bound and accepted with probability ``rate / upper``. When a
candidate overshoots the window the bounds are refreshed at the window end.
"""

from __future__ import annotations

import math
from typing import Any, Optional, Tuple

from ..errors import BoundInversionError, InvariantViolation, TimeReversalError
from ..jumps import RateBounds, RateFactory
from ..records import RateRecord, as_record
from ..rng import RandomSource

NEVER = math.inf


def propose(
    rate_factory: RateFactory,
    record: RateRecord,
    t0: float,
    u: Any,
    params: Any,
    t: float,
    jump_index: Optional[int] = None,
) -> RateBounds:
    """Call a rate factory and check the bounds it returns.

    Args:
        rate_factory: Factory of the jump being sampled
        record: Record installed by the previous proposal
        t0: Time the current sampling call started from
        u: System state
        params: Model parameters
        t: Current working time
        jump_index: Index reported in errors

    Returns:
        RateBounds with the installed rate wrapped as a record

    Raises:
        BoundInversionError: If the upper bound is below the lower bound
        InvariantViolation: If the window is not positive
    """
    rate, lower, upper, window = rate_factory(record, t0, u, params, t)
    if upper < lower:
        raise BoundInversionError(lower, upper, t, jump_index)
    if not window > 0:
        raise InvariantViolation(
            f"Rate factory returned a non-positive bound window {window} at t={t}"
            + (f" for jump {jump_index}" if jump_index is not None else "")
        )
    return RateBounds(as_record(rate), lower, upper, window)


def next_time(
    rate_factory: RateFactory,
    record: RateRecord,
    u: Any,
    params: Any,
    t: float,
    end_time: float,
    rng: RandomSource,
    jump_index: Optional[int] = None,
) -> Tuple[float, RateRecord]:
    """Sample the next fire time of one jump from time ``t``.

    Draw order per proposal is one exponential, then one uniform only when
    the bounds differ and the gap stays inside the window.

    Args:
        rate_factory: Factory of the jump being sampled
        record: Record stored for the jump by its previous sample
        u: System state
        params: Model parameters
        t: Time to sample from
        end_time: Simulation horizon
        rng: Random source
        jump_index: Index reported in errors

    Returns:
        (fire_time, record) where fire_time is NEVER when no event is
        accepted before the horizon

    Raises:
        BoundInversionError: If the factory returns upper < lower
        TimeReversalError: If the accepted time precedes ``t``
    """
    t0 = t
    while t < end_time:
        rate, lower, upper, window = propose(
            rate_factory, record, t0, u, params, t, jump_index
        )
        # Later refreshes within this call continue from the installed rate
        record = rate

        e = rng.exponential()
        s = e / upper if upper > 0 else math.inf
        if s > window:
            t = t + window
            continue

        if upper > lower:
            v = rng.uniform()
            if (v > lower / upper) and (v > rate(u, params, t + s) / upper):
                t = t + s
                continue

        t = t + s
        if t < t0:
            raise TimeReversalError(t, t0, what="sampled fire time")
        return t, rate

    return NEVER, record
