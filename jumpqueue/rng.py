"""Random sources consumed by the thinning sampler.

The sampler draws from one ordered stream: one standard exponential per
proposal, followed by at most one uniform. Any object with ``exponential()``
and ``uniform()`` methods can be used; two implementations are provided.
"""

from __future__ import annotations

from typing import Literal, Optional, Protocol, Union

import numpy as np
import jax
import jax.random as jrandom


class RandomSource(Protocol):
    """Protocol for the random stream used by the sampler."""

    def exponential(self) -> float:
        """Draw from Exp(1)."""
        ...

    def uniform(self) -> float:
        """Draw from U[0, 1)."""
        ...


class NumpyRandomSource:
    """Random source backed by a ``numpy.random.Generator``.

    Args:
        seed: Seed or an existing Generator to draw from
    """

    def __init__(self, seed: Union[int, np.random.Generator, None] = None):
        if isinstance(seed, np.random.Generator):
            self.generator = seed
        else:
            self.generator = np.random.default_rng(seed)

    def exponential(self) -> float:
        return float(self.generator.standard_exponential())

    def uniform(self) -> float:
        return float(self.generator.random())


class JaxRandomSource:
    """Random source backed by JAX PRNG keys.

    Every draw splits the carried key, so the stream is reproducible from
    the seed alone and independent of how draws are interleaved with
    other JAX work.

    Args:
        seed: Integer seed for ``jax.random.PRNGKey``
        key: Existing PRNG key (takes precedence over seed)
    """

    def __init__(self, seed: int = 0, key: Optional[jax.Array] = None):
        self.key = key if key is not None else jrandom.PRNGKey(seed)

    def _subkey(self) -> jax.Array:
        self.key, subkey = jrandom.split(self.key)
        return subkey

    def exponential(self) -> float:
        return float(jrandom.exponential(self._subkey()))

    def uniform(self) -> float:
        return float(jrandom.uniform(self._subkey()))


def make_random_source(
    seed: Optional[int] = None,
    backend: Literal['numpy', 'jax'] = 'numpy',
) -> RandomSource:
    """Build a random source for the given backend.

    Args:
        seed: Random seed (the JAX backend uses 0 when None)
        backend: 'numpy' or 'jax'

    Returns:
        A RandomSource instance
    """
    if backend == 'numpy':
        return NumpyRandomSource(seed)
    if backend == 'jax':
        return JaxRandomSource(seed if seed is not None else 0)
    raise ValueError(f"Unknown random backend '{backend}', expected 'numpy' or 'jax'")
