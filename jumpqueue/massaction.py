"""Mass-action jumps and their propensity helpers.

Stoichiometry for a reaction is a sequence of (species index, coefficient)
pairs. Reactant stoichiometry drives the propensity; net stoichiometry is
the change applied to the state when the reaction fires.

The Queue Method rejects mass-action jumps; these helpers exist for models
that are converted into conditional rate jumps by hand, and for the
construction-time check.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

Stoichiometry = Sequence[Tuple[int, int]]


def scale_rate(unscaled_rate: float, reactant_stoich: Stoichiometry) -> float:
    """Divide a rate constant by the product of coefficient factorials."""
    coef = 1
    for _, count in reactant_stoich:
        coef *= math.factorial(count)
    return unscaled_rate / coef


@dataclass
class MassActionJump:
    """A set of mass-action reactions.

    Attributes:
        rates: Rate constant of each reaction
        reactant_stoich: Reactant stoichiometry of each reaction
        net_stoich: Net state change of each reaction
        scale_rates: Whether ``rates`` are divided by coefficient factorials
    """
    rates: List[float]
    reactant_stoich: List[Stoichiometry]
    net_stoich: List[Stoichiometry]
    scale_rates: bool = True
    scaled_rates: List[float] = field(init=False)

    def __post_init__(self):
        if not (len(self.rates) == len(self.reactant_stoich) == len(self.net_stoich)):
            raise ValueError(
                "rates, reactant_stoich and net_stoich must have one entry per reaction, "
                f"got {len(self.rates)}, {len(self.reactant_stoich)}, {len(self.net_stoich)}"
            )
        if self.scale_rates:
            self.scaled_rates = [
                scale_rate(k, stoich) for k, stoich in zip(self.rates, self.reactant_stoich)
            ]
        else:
            self.scaled_rates = [float(k) for k in self.rates]

    @property
    def num_jumps(self) -> int:
        return len(self.rates)


def num_mass_action_jumps(jumps) -> int:
    """Total number of reactions in ``jumps`` (None, one jump, or a sequence)."""
    if jumps is None:
        return 0
    if isinstance(jumps, MassActionJump):
        return jumps.num_jumps
    return sum(j.num_jumps for j in jumps)


def eval_rate(u, k: int, jump: MassActionJump) -> float:
    """Propensity of reaction ``k`` at state ``u``.

    Uses falling factorials of the species counts, so a reaction needing
    two copies of a species with one copy present has propensity zero.
    """
    val = 1.0
    for species, count in jump.reactant_stoich[k]:
        pop = u[species]
        val *= pop
        for _ in range(1, count):
            pop -= 1
            val *= pop
    return jump.scaled_rates[k] * val


def execute_reaction(u, k: int, jump: MassActionJump) -> None:
    """Apply the net stoichiometry of reaction ``k`` to ``u`` in place."""
    for species, change in jump.net_stoich[k]:
        u[species] += change
