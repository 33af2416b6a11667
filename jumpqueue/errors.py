"""Exception types raised by jumpqueue.

Configuration errors are raised while an aggregator is being set up;
invariant violations are raised mid-run when a user-supplied rate factory
breaks its contract. Each also derives from the builtin it resembles so
callers may catch ``ValueError`` / ``RuntimeError`` directly.
"""

from __future__ import annotations

from typing import Optional


class JumpQueueError(Exception):
    """Base class for all jumpqueue errors."""


class ConfigurationError(JumpQueueError, ValueError):
    """The model and method combination is unsupported or malformed."""


class InvariantViolation(JumpQueueError, RuntimeError):
    """A runtime invariant of the sampler or controller failed."""


class BoundInversionError(InvariantViolation):
    """A rate factory returned an upper bound below its lower bound."""

    def __init__(
        self,
        lower: float,
        upper: float,
        t: float,
        jump_index: Optional[int] = None,
    ):
        self.lower = lower
        self.upper = upper
        self.t = t
        self.jump_index = jump_index
        where = f" for jump {jump_index}" if jump_index is not None else ""
        super().__init__(
            f"The upper bound rate should not be lower than the lower bound{where}: "
            f"upper={upper}, lower={lower} at t={t}"
        )


class TimeReversalError(InvariantViolation):
    """A computed or observed time is earlier than its reference time."""

    def __init__(self, t: float, reference: float, what: str = "time"):
        self.t = t
        self.reference = reference
        super().__init__(
            f"{what} went backward: got {t}, which is earlier than {reference}"
        )
