"""Hawkes process configuration with unit-aware Pydantic models.

This module provides configuration for self-exciting Hawkes processes,
which model clustered event arrivals where each event increases the
intensity of future events.
"""

from __future__ import annotations
from typing import Tuple
import warnings
from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator

from ..fields import rate_field
from ..jumps import RateFactory
from ..runtime import UnitSpec, QuantityNode
from .runtime import HawkesRuntime
from .kernel import hawkes_rate_factory


class HawkesConfig(BaseModel):
    """Configuration for an exponential-kernel Hawkes process.

    The intensity is:
        λ(t) = λ₀ + Σ α * exp(-β (t - tᵢ))

    Where:
        - λ₀ is the baseline intensity
        - α is the intensity added by each event
        - β is the decay rate of the excitation
        - tᵢ are past event times

    Example:
        >>> config = HawkesConfig(
        ...     baseline="1 / second",
        ...     excitation="0.5 / second",
        ...     decay="1 / second",
        ... )
        >>> jump = ConditionalRateJump(config.rate_factory(), affect)
    """

    baseline: Tuple[float, UnitSpec] = Field(
        description="Background event rate λ₀ (events/time)"
    )

    excitation: Tuple[float, UnitSpec] = Field(
        description="Intensity added by each event α (events/time)"
    )

    decay: Tuple[float, UnitSpec] = Field(
        description="Decay rate of the excitation β (1/time)"
    )

    window_scale: float = Field(
        default=0.5,
        gt=0.0,
        description="Bound refresh windows last window_scale / upper bound"
    )

    model_config = ConfigDict(arbitrary_types_allowed=True)

    _validate_rates = field_validator("baseline", "excitation", "decay", mode="before")(
        rate_field()
    )

    @field_validator("baseline", "decay", mode="after")
    def _validate_positive(cls, value: Tuple[float, UnitSpec]) -> Tuple[float, UnitSpec]:
        """Ensure the baseline and decay rate are positive."""
        if value[0] <= 0:
            raise ValueError(f"Value must be positive, got {value[0]}")
        return value

    @field_validator("excitation", mode="after")
    def _validate_excitation_sign(cls, value: Tuple[float, UnitSpec]) -> Tuple[float, UnitSpec]:
        if value[0] < 0:
            raise ValueError(f"Excitation must be >= 0, got {value[0]}")
        return value

    @model_validator(mode="after")
    def _warn_unstable(self):
        """Warn when the branching ratio α/β reaches 1."""
        ratio = self.excitation[0] / self.decay[0]
        if ratio >= 1.0:
            warnings.warn(
                f"Hawkes branching ratio α/β = {ratio:.3f} >= 1: the event rate "
                "can grow without bound and simulations may not terminate.",
                UserWarning,
                stacklevel=2,
            )
        return self

    def to_runtime(self) -> HawkesRuntime:
        """Convert to runtime structure for JAX.

        Returns:
            HawkesRuntime structure with QuantityNodes
        """
        return HawkesRuntime(
            baseline=QuantityNode.from_float(*self.baseline),
            excitation=QuantityNode.from_float(*self.excitation),
            decay=QuantityNode.from_float(*self.decay),
        )

    def rate_factory(self) -> RateFactory:
        """Rate factory for a Queue Method jump following this process."""
        return hawkes_rate_factory(
            self.baseline[0],
            self.excitation[0],
            self.decay[0],
            window_scale=self.window_scale,
        )

    def summary(self) -> str:
        """Plain-text summary of the configuration in canonical units."""
        ratio = self.excitation[0] / self.decay[0]
        stability = "STABLE" if ratio < 1 else "UNSTABLE"
        return "\n".join([
            "Hawkes Process Configuration",
            "-" * 40,
            f"  Baseline: {self.baseline[0]:.4g} 1/s",
            f"  Excitation: {self.excitation[0]:.4g} 1/s",
            f"  Decay: {self.decay[0]:.4g} 1/s",
            "",
            f"Stability: {stability} (α/β = {ratio:.3f})",
        ])
