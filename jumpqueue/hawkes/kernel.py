"""Hawkes process rate factories for the Queue Method.

The intensity of a univariate Hawkes process with exponential kernel is

    λ(t) = λ₀ + Σ α * exp(-β (t - tᵢ))

over past event times tᵢ. Because the kernel is non-increasing between
events, the intensity at the start of a window bounds it from above for the
whole window, and λ₀ bounds it from below.
"""

from __future__ import annotations

import math

from ..errors import TimeReversalError
from ..jumps import RateBounds, RateFactory
from ..records import ConstantRate, ExcitedRate
from .runtime import HawkesRuntime

# Relative tolerance below which a decayed excitation counts as gone
DECAY_RTOL = 1.5e-8


def hawkes_rate_factory(
    baseline: float,
    excitation: float,
    decay: float,
    window_scale: float = 0.5,
) -> RateFactory:
    """Build the rate factory of an exponential-kernel Hawkes process.

    A call with ``t == t0`` and a non-empty record is a resample right after
    the jump fired: the installed intensity is the previous one plus
    ``excitation``. A call with ``t > t0`` refreshes the bounds of the
    already installed intensity.

    Args:
        baseline: Background intensity λ₀
        excitation: Intensity jump α added by each event
        decay: Decay rate β of the excitation
        window_scale: Bound windows last ``window_scale / upper``

    Returns:
        Rate factory ``(record, t0, u, params, t) -> RateBounds``

    Example:
        >>> factory = hawkes_rate_factory(1.0, 0.5, 1.0)
        >>> jump = ConditionalRateJump(factory, lambda u: u.__setitem__(0, u[0] + 1))
    """
    baseline = float(baseline)
    excitation = float(excitation)
    decay = float(decay)
    base_rate = ConstantRate(baseline)

    def factory(prev, t0, u, params, t):
        if t < t0:
            raise TimeReversalError(t, t0, what="proposal time")

        if prev.is_empty:
            rate = base_rate
        else:
            lt = prev(u, params, t)
            decayed = math.isclose(lt, baseline, rel_tol=DECAY_RTOL)
            if t == t0:
                # The jump just fired
                if decayed:
                    rate = ExcitedRate(baseline, excitation, decay, t)
                elif isinstance(prev, ExcitedRate):
                    rate = prev.excite(t, excitation)
                else:
                    rate = ExcitedRate(baseline, lt - baseline + excitation, decay, t)
            elif decayed:
                rate = base_rate
            else:
                rate = prev

        lrate = baseline
        urate = rate(u, params, t)
        window = math.inf if urate == lrate else window_scale / urate
        return RateBounds(rate, lrate, urate, window)

    return factory


def intensity(runtime: HawkesRuntime, event_times, t: float) -> float:
    """Exact intensity at ``t`` given all event times before it.

    Args:
        runtime: Hawkes parameters
        event_times: Past event times
        t: Evaluation time

    Returns:
        λ(t), counting only events strictly before ``t``
    """
    baseline, excitation, decay = runtime.values()
    return baseline + sum(
        excitation * math.exp(-decay * (t - ti)) for ti in event_times if ti < t
    )


def get_branching_ratio(runtime: HawkesRuntime) -> float:
    """Average number of events directly triggered by one event.

    For an exponential kernel this is α / β. The process is stable
    (subcritical) when it is below 1.
    """
    _, excitation, decay = runtime.values()
    return excitation / decay


def get_stationary_intensity(runtime: HawkesRuntime) -> float:
    """Long-run average intensity λ₀ / (1 - α/β).

    Raises:
        ValueError: If the process is unstable (α/β >= 1)
    """
    ratio = get_branching_ratio(runtime)
    if ratio >= 1.0:
        raise ValueError(
            f"Process is unstable (branching ratio {ratio} >= 1). "
            "Stationary intensity is undefined."
        )
    return runtime.baseline.to_float() / (1.0 - ratio)
