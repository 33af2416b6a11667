"""Pytest configuration and shared test utilities."""

import pytest
import numpy as np
import jax.numpy as jnp
from typing import List, Sequence, Union

from jumpqueue import ConditionalRateJump, constant_rate_factory


# Default tolerances for float comparisons
RTOL_DEFAULT = 1e-9
ATOL_DEFAULT = 1e-12


def assert_close(
    actual: Union[float, jnp.ndarray, np.ndarray],
    expected: Union[float, jnp.ndarray, np.ndarray],
    rtol: float = RTOL_DEFAULT,
    atol: float = ATOL_DEFAULT,
    msg: str = ""
):
    """Assert that two values are close within tolerance.

    Handles JAX arrays, NumPy arrays, and Python floats uniformly.

    Args:
        actual: Actual value
        expected: Expected value
        rtol: Relative tolerance (default: 1e-9)
        atol: Absolute tolerance (default: 1e-12)
        msg: Optional message for assertion failure
    """
    actual_val = float(actual) if hasattr(actual, '__float__') else actual
    expected_val = float(expected) if hasattr(expected, '__float__') else expected

    assert actual_val == pytest.approx(expected_val, rel=rtol, abs=atol), (
        f"{msg}\nExpected: {expected_val}\nActual: {actual_val}\n"
        f"Diff: {abs(actual_val - expected_val)}"
    )


class ScriptedRandomSource:
    """Random source replaying fixed draws and logging their order.

    Raises AssertionError when a stream runs dry so tests fail loudly on
    unexpected draws.
    """

    def __init__(self, exponentials: Sequence[float] = (), uniforms: Sequence[float] = ()):
        self.exponentials: List[float] = list(exponentials)
        self.uniforms: List[float] = list(uniforms)
        self.calls: List[str] = []

    def exponential(self) -> float:
        assert self.exponentials, "unexpected exponential draw"
        self.calls.append('exp')
        return self.exponentials.pop(0)

    def uniform(self) -> float:
        assert self.uniforms, "unexpected uniform draw"
        self.calls.append('uni')
        return self.uniforms.pop(0)


def counter_jump(rate: float, species: int = 0) -> ConditionalRateJump:
    """Constant-rate jump that increments ``u[species]``."""
    def affect(u):
        u[species] += 1
    return ConditionalRateJump(constant_rate_factory(rate), affect)


@pytest.fixture
def close():
    """Fixture providing assert_close function.

    Usage:
        def test_something(close):
            close(actual, expected)
    """
    return assert_close


@pytest.fixture
def scripted():
    """Fixture providing the ScriptedRandomSource class."""
    return ScriptedRandomSource


@pytest.fixture
def make_counter_jump():
    """Fixture providing counter_jump."""
    return counter_jump
