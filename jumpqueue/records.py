"""Rate-state records.

A rate-state record is everything a rate factory needs to rebuild a jump's
intensity at a later proposal time. Records are immutable; the sampler
hands the previous record to the factory and stores whatever record the
factory installs, replacing the old one.

Every record is callable as ``record(u, params, t) -> float``.

Kinds:
    empty:     nothing installed yet (before the first sample)
    stateless: a Markovian intensity ``fn(u, params, t)``
    excited:   an exponential self-exciting kernel,
               ``baseline + excitation * exp(-decay * (t - event_time))``
    opaque:    arbitrary user state plus the intensity built from it
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, ClassVar

RateFunction = Callable[[Any, Any, float], float]


class RateRecord:
    """Base class of the rate-state record variants."""

    kind: ClassVar[str] = "abstract"

    @property
    def is_empty(self) -> bool:
        return self.kind == "empty"

    def __call__(self, u, params, t: float) -> float:
        raise NotImplementedError


@dataclass(frozen=True)
class EmptyRecord(RateRecord):
    """Record of a jump that has never been sampled."""

    kind: ClassVar[str] = "empty"

    def __call__(self, u, params, t: float) -> float:
        raise TypeError("An empty rate record has no intensity installed")


EMPTY = EmptyRecord()


@dataclass(frozen=True)
class StatelessRate(RateRecord):
    """Markovian intensity that depends only on (u, params, t)."""

    kind: ClassVar[str] = "stateless"

    fn: RateFunction

    def __call__(self, u, params, t: float) -> float:
        return self.fn(u, params, t)


@dataclass(frozen=True)
class ConstantRate(RateRecord):
    """Time- and state-independent intensity."""

    kind: ClassVar[str] = "stateless"

    value: float

    def __call__(self, u, params, t: float) -> float:
        return self.value


@dataclass(frozen=True)
class ExcitedRate(RateRecord):
    """Exponential-kernel excitation remembered from the last event.

    Successive events collapse into one term: the excess intensity over
    ``baseline`` at ``event_time`` is ``excitation``, decaying at ``decay``.
    """

    kind: ClassVar[str] = "excited"

    baseline: float
    excitation: float
    decay: float
    event_time: float

    def excess(self, t: float) -> float:
        return self.excitation * math.exp(-self.decay * (t - self.event_time))

    def __call__(self, u, params, t: float) -> float:
        return self.baseline + self.excess(t)

    def excite(self, t: float, jump: float) -> ExcitedRate:
        """Record a new event at ``t`` adding ``jump`` to the intensity."""
        return ExcitedRate(
            baseline=self.baseline,
            excitation=self.excess(t) + jump,
            decay=self.decay,
            event_time=t,
        )


@dataclass(frozen=True)
class OpaqueRate(RateRecord):
    """Arbitrary user state with the intensity built from it."""

    kind: ClassVar[str] = "opaque"

    state: Any
    fn: RateFunction

    def __call__(self, u, params, t: float) -> float:
        return self.fn(u, params, t)


def as_record(rate) -> RateRecord:
    """Wrap a bare intensity callable in a StatelessRate."""
    if isinstance(rate, RateRecord):
        return rate
    if callable(rate):
        return StatelessRate(rate)
    raise TypeError(f"Expected a RateRecord or callable, got {type(rate).__name__}")
