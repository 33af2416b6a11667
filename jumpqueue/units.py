"""Time and intensity units backed by pint.

Simulation code works with plain floats: times in seconds and intensities
in events per second. Configuration accepts anything pint can parse
("3 minute", "120 / hour", a pint Quantity, or a bare number in the
default unit) and records the unit the user wrote in a UnitSpec.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Dict, Optional, Tuple, Union

import pint

# Inputs accepted wherever a time or an intensity is configured
QuantityInput = Union[str, float, int, pint.Quantity]

CANONICAL_UNITS: Dict[str, str] = {
    "time": "second",
    "1/time": "1 / second",
    "dimensionless": "dimensionless",
}


@dataclass(frozen=True)
class UnitSpec:
    """The unit a value was given in.

    Attributes:
        dimension: Dimension name, a key of CANONICAL_UNITS or a free label
        symbol: Unit as the user wrote it, e.g. "minute" or "1 / hour"
        to_canonical: Multiply a value in ``symbol`` by this to get the
            canonical value
    """
    dimension: str
    symbol: str
    to_canonical: float = 1.0


class UnitManager:
    """Shared pint registry with the conversions jumpqueue needs."""

    _instance: ClassVar[Optional[UnitManager]] = None

    def __init__(self, registry: Optional[pint.UnitRegistry] = None):
        self.registry = registry or pint.UnitRegistry()
        self._define_units()

    @classmethod
    def instance(cls) -> UnitManager:
        """The process-wide manager, created on first use."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def _define_units(self) -> None:
        for name, definition in (
            ("day", "day = 24 * hour"),
            ("week", "week = 7 * day"),
            ("year", "year = 365.25 * day"),
        ):
            if not hasattr(self.registry, name):
                self.registry.define(definition)
        # Event counts carry no dimension
        if "event" not in self.registry:
            self.registry.define("event = 1 = events")

    def ensure_quantity(
        self,
        value: QuantityInput,
        default_unit: Optional[str] = None,
    ) -> pint.Quantity:
        """Turn user input into a pint Quantity.

        Bare numbers, and strings that parse to a bare number, take
        ``default_unit`` (dimensionless when None).

        Raises:
            ValueError: If a string cannot be parsed
        """
        if isinstance(value, pint.Quantity):
            return value
        unit = default_unit or "dimensionless"
        if isinstance(value, str):
            try:
                parsed = self.registry(value)
            except Exception as e:
                raise ValueError(f"Cannot parse '{value}' as quantity: {e}") from e
            if isinstance(parsed, pint.Quantity):
                return parsed
            value = parsed
        return self.registry.Quantity(value, unit)

    def to_canonical(
        self,
        quantity: pint.Quantity,
        dimension: str,
    ) -> Tuple[float, UnitSpec]:
        """Convert ``quantity`` to the canonical unit of ``dimension``.

        Dimensions without a canonical unit keep their magnitude as is.

        Raises:
            ValueError: If the quantity has the wrong dimensionality
        """
        units = quantity.units
        if dimension not in CANONICAL_UNITS:
            return float(quantity.magnitude), UnitSpec(dimension, str(units))

        target = self.registry.Unit(CANONICAL_UNITS[dimension])
        try:
            # Factor taken from one unit so zero magnitudes convert cleanly
            factor = float(self.registry.Quantity(1.0, units).to(target).magnitude)
        except pint.DimensionalityError as e:
            raise ValueError(
                f"Cannot convert {quantity} to dimension '{dimension}': {e}"
            ) from e

        return float(quantity.to(target).magnitude), UnitSpec(dimension, str(units), factor)

    def from_canonical(self, value: float, spec: UnitSpec) -> pint.Quantity:
        """Express a canonical value in the unit recorded by ``spec``."""
        if spec.to_canonical == 0:
            return self.registry.Quantity(value, spec.symbol)
        return self.registry.Quantity(value / spec.to_canonical, spec.symbol)

    def parse(
        self,
        value: QuantityInput,
        dimension: str,
        default_unit: Optional[str] = None,
    ) -> Tuple[float, UnitSpec]:
        """Parse user input straight to ``(canonical_value, UnitSpec)``."""
        return self.to_canonical(self.ensure_quantity(value, default_unit), dimension)
