"""Configuration for Queue Method simulations.

This module provides the Pydantic configuration class for running a set of
conditional rate jumps with the Queue Method.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator, model_validator, ConfigDict
from typing import Literal, Optional, Tuple

from .fields import time_field
from .rng import RandomSource, make_random_source
from .units import UnitSpec


class QueueMethodConfig(BaseModel):
    """Configuration for a Queue Method simulation run.

    Example:
        >>> config = QueueMethodConfig(
        ...     end_time="20 second",
        ...     seed=42,
        ... )
        >>> adapter = QueueMethodAdapter(config, jumps, dep_graph=[[0]])

    Attributes:
        t0: Initial time (time quantity; bare numbers are seconds)
        end_time: Simulation horizon (time quantity; bare numbers are seconds)
        seed: Random seed for reproducibility
        rng_backend: Random stream implementation ('numpy' or 'jax')
        save_positions: Save the state (before, after) each jump
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    t0: Tuple[float, UnitSpec] = Field(
        default=(0.0, UnitSpec("time", "second")),
        description="Initial simulation time"
    )

    end_time: Tuple[float, UnitSpec] = Field(
        description="Time to stop the simulation"
    )

    seed: Optional[int] = Field(
        default=None,
        description="Random seed for the sampler"
    )

    rng_backend: Literal['numpy', 'jax'] = Field(
        default='numpy',
        description="Random stream implementation"
    )

    save_positions: Tuple[bool, bool] = Field(
        default=(True, True),
        description="Whether to save the state before and after each jump"
    )

    _validate_t0 = field_validator("t0", mode="before")(
        time_field()
    )

    _validate_end_time = field_validator("end_time", mode="before")(
        time_field()
    )

    @model_validator(mode="after")
    def _validate_span(self):
        """Ensure the horizon lies after the initial time."""
        if self.end_time[0] <= self.t0[0]:
            raise ValueError(
                f"end_time ({self.end_time[0]} s) must be later than t0 ({self.t0[0]} s)"
            )
        return self

    @property
    def t_span(self) -> Tuple[float, float]:
        """(t0, end_time) in seconds."""
        return self.t0[0], self.end_time[0]

    def make_rng(self, seed: Optional[int] = None) -> RandomSource:
        """Build the random source for a run.

        Args:
            seed: Overrides the configured seed when given
        """
        return make_random_source(
            seed if seed is not None else self.seed,
            backend=self.rng_backend,
        )
