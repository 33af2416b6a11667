"""Penzai structs for inspecting configurations and aggregator state.

Values live in JAX arrays and unit metadata rides along as static pytree
data, so these structs can be passed through ``jax.tree_util``, jitted
analysis functions and treescope without losing track of units.
"""

from __future__ import annotations

import dataclasses

import jax
import jax.numpy as jnp
import pint
from penzai.core import struct

from .units import UnitManager, UnitSpec


jax.tree_util.register_static(UnitSpec)


@struct.pytree_dataclass
class QuantityNode(struct.Struct):
    """A canonical value with the unit it was configured in.

    Attributes:
        value: Scalar array in canonical units (seconds, events per second)
        units: Static UnitSpec of the configured unit
    """
    value: jax.Array
    units: UnitSpec = dataclasses.field(metadata={'pytree_node': False})

    @classmethod
    def from_float(cls, value: float, units: UnitSpec) -> QuantityNode:
        return cls(value=jnp.asarray(float(value)), units=units)

    def to_float(self) -> float:
        return float(self.value)

    def to_quantity(self) -> pint.Quantity:
        """The value in the unit it was configured in."""
        return UnitManager.instance().from_canonical(self.to_float(), self.units)

    def __repr__(self) -> str:
        return f"QuantityNode({self.value}, {self.units.symbol})"


@struct.pytree_dataclass
class QueueMethodState(struct.Struct):
    """Snapshot of a Queue Method aggregator.

    Attributes:
        next_jump: Index of the jump that fires next
        prev_jump: Index of the jump that fired last (-1 before any fire)
        next_jump_time: Time of the next jump (inf when none is scheduled)
        end_time: Simulation horizon
        fire_times: Queued fire time of every jump, ordered by index
        status: Aggregator lifecycle status (static)
    """
    next_jump: jax.Array
    prev_jump: jax.Array
    next_jump_time: jax.Array
    end_time: jax.Array
    fire_times: jax.Array
    status: str = dataclasses.field(default="uninitialized", metadata={'pytree_node': False})


def tree_info(pytree) -> str:
    """One-line-per-aspect description of a pytree's leaves and structure."""
    flat, treedef = jax.tree_util.tree_flatten(pytree)
    shapes = [getattr(x, 'shape', type(x).__name__) for x in flat]
    return (
        f"PyTree with {len(flat)} leaves:\n"
        f"  Structure: {treedef}\n"
        f"  Leaf shapes: {shapes}"
    )
