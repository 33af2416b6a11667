"""Penzai struct holding validated Hawkes parameters."""

from __future__ import annotations
from penzai.core import struct

from ..runtime import QuantityNode


@struct.pytree_dataclass
class HawkesRuntime(struct.Struct):
    """Runtime Hawkes process parameters.

    All fields are QuantityNodes in events per second.

    Attributes:
        baseline: Background intensity λ₀
        excitation: Intensity added by each event α
        decay: Exponential decay rate of the excitation β
    """

    baseline: QuantityNode
    excitation: QuantityNode
    decay: QuantityNode

    def values(self) -> tuple[float, float, float]:
        """(λ₀, α, β) as Python floats."""
        return (
            self.baseline.to_float(),
            self.excitation.to_float(),
            self.decay.to_float(),
        )
