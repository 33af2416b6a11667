"""Pydantic validators for time- and intensity-valued config fields.

A validated field holds ``(canonical_value, UnitSpec)``. Attach a validator
in ``mode="before"`` so it sees the raw user input:

    class RunConfig(BaseModel):
        end_time: Tuple[float, UnitSpec]

        _validate_end_time = field_validator("end_time", mode="before")(
            time_field()
        )
"""

from __future__ import annotations

from typing import Any, Callable, Optional, Tuple

from .units import UnitManager, UnitSpec

Validator = Callable[..., Tuple[float, UnitSpec]]


def _is_validated(value: Any) -> bool:
    return isinstance(value, tuple) and len(value) == 2 and isinstance(value[1], UnitSpec)


def quantity_field(
    dimension: str,
    default_unit: Optional[str] = None,
    min_value: Optional[float] = None,
    max_value: Optional[float] = None,
) -> Validator:
    """Build a validator parsing input into ``dimension``'s canonical unit.

    Args:
        dimension: Expected dimension, e.g. "time" or "1/time"
        default_unit: Unit given to bare numbers
        min_value: Inclusive lower limit, canonical units
        max_value: Inclusive upper limit, canonical units

    Already validated ``(float, UnitSpec)`` tuples are accepted unchanged
    apart from the range check, so a config can be rebuilt from another
    config's fields.
    """
    def validator(value: Any, info: Optional[Any] = None) -> Tuple[float, UnitSpec]:
        if _is_validated(value):
            canonical, spec = float(value[0]), value[1]
        else:
            try:
                canonical, spec = UnitManager.instance().parse(value, dimension, default_unit)
            except (ValueError, TypeError) as e:
                raise ValueError(f"Invalid {dimension} quantity {value!r}: {e}") from e

        if min_value is not None and canonical < min_value:
            raise ValueError(
                f"Value {canonical} below minimum {min_value} "
                f"(in canonical {dimension} units)"
            )
        if max_value is not None and canonical > max_value:
            raise ValueError(
                f"Value {canonical} above maximum {max_value} "
                f"(in canonical {dimension} units)"
            )
        return canonical, spec

    return validator


def time_field(**limits) -> Validator:
    """Validator for a time; bare numbers are seconds."""
    return quantity_field("time", "second", **limits)


def rate_field(**limits) -> Validator:
    """Validator for an intensity; bare numbers are events per second."""
    return quantity_field("1/time", "1 / second", **limits)
