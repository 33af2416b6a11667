"""Tests for Hawkes rate factories, configuration and simulation."""

import math
import warnings

import jax
import numpy as np
import pytest
from pydantic import ValidationError

from jumpqueue import (
    EMPTY,
    ConditionalRateJump,
    ConstantRate,
    ExcitedRate,
    HawkesConfig,
    HawkesRuntime,
    NumpyRandomSource,
    QueueMethodAggregator,
    TimeReversalError,
    hawkes_rate_factory,
)
from jumpqueue.hawkes import get_branching_ratio, get_stationary_intensity, intensity


def simulate_hawkes(factory, end_time, rng, inspect=None):
    """Run a single Hawkes jump to ``end_time`` and return its event times."""
    events = []
    jump = ConditionalRateJump(factory, lambda u: None)
    agg = QueueMethodAggregator([jump], dep_graph=[[0]], rng=rng)
    agg.initialize(None, None, 0.0, end_time)
    while not agg.terminated:
        t, _ = agg.peek_next()
        agg.fire(None, None, t)
        events.append(t)
        if inspect is not None:
            inspect(agg, events)
    return events


class TestRateFactory:

    def test_empty_record_installs_baseline(self):
        factory = hawkes_rate_factory(1.0, 0.5, 1.0)
        rate, lower, upper, window = factory(EMPTY, 0.0, None, None, 0.0)

        assert isinstance(rate, ConstantRate)
        assert rate.value == 1.0
        assert lower == upper == 1.0
        assert window == math.inf

    def test_bounds_right_after_fire(self, close):
        factory = hawkes_rate_factory(1.0, 0.5, 1.0)
        rate, lower, upper, window = factory(ConstantRate(1.0), 3.0, None, None, 3.0)

        assert isinstance(rate, ExcitedRate)
        close(lower, 1.0)
        close(upper, 1.5)
        close(window, 0.5 / 1.5)
        close(rate(None, None, 4.0), 1.0 + 0.5 * math.exp(-1.0))

    def test_successive_fires_accumulate(self, close):
        factory = hawkes_rate_factory(1.0, 0.5, 2.0)
        first, _, _, _ = factory(ConstantRate(1.0), 1.0, None, None, 1.0)
        second, _, upper, _ = factory(first, 1.5, None, None, 1.5)

        expected = 1.0 + 0.5 * math.exp(-2.0 * 0.5) + 0.5
        close(upper, expected)
        close(second(None, None, 1.5), expected)
        assert second.event_time == 1.5

    def test_refresh_keeps_installed_rate(self, close):
        factory = hawkes_rate_factory(1.0, 0.5, 1.0)
        excited, _, _, _ = factory(ConstantRate(1.0), 0.0, None, None, 0.0)

        rate, lower, upper, window = factory(excited, 0.0, None, None, 1.0)

        assert rate is excited
        close(upper, 1.0 + 0.5 * math.exp(-1.0))
        close(window, 0.5 / upper)
        assert lower == 1.0

    def test_refresh_collapses_decayed_excitation(self):
        factory = hawkes_rate_factory(1.0, 0.5, 1.0)
        excited, _, _, _ = factory(ConstantRate(1.0), 0.0, None, None, 0.0)

        rate, lower, upper, window = factory(excited, 0.0, None, None, 50.0)

        assert isinstance(rate, ConstantRate)
        assert lower == upper == 1.0
        assert window == math.inf

    def test_non_excited_previous_record(self, close):
        factory = hawkes_rate_factory(1.0, 0.5, 1.0)
        prev = ConstantRate(3.0)

        rate, _, upper, _ = factory(prev, 2.0, None, None, 2.0)

        close(upper, 3.5)
        assert isinstance(rate, ExcitedRate)
        assert rate.baseline == 1.0

    def test_window_scale(self, close):
        factory = hawkes_rate_factory(1.0, 1.0, 1.0, window_scale=0.25)
        _, _, upper, window = factory(ConstantRate(1.0), 0.0, None, None, 0.0)
        close(window, 0.25 / upper)

    def test_zero_excitation_never_thins(self):
        factory = hawkes_rate_factory(2.0, 0.0, 1.0)
        _, lower, upper, window = factory(ConstantRate(2.0), 1.0, None, None, 1.0)
        assert lower == upper
        assert window == math.inf

    def test_time_before_reference_raises(self):
        factory = hawkes_rate_factory(1.0, 0.5, 1.0)
        with pytest.raises(TimeReversalError):
            factory(ConstantRate(1.0), 2.0, None, None, 1.0)


class TestHawkesConfig:

    def test_parses_units(self, close):
        config = HawkesConfig(
            baseline="120 / hour",
            excitation="0.5 / second",
            decay="60 / minute",
        )

        close(config.baseline[0], 120 / 3600)
        close(config.excitation[0], 0.5)
        close(config.decay[0], 1.0)
        assert config.baseline[1].dimension == "1/time"
        close(config.baseline[1].to_canonical, 1 / 3600)

    def test_bare_numbers_are_per_second(self):
        config = HawkesConfig(baseline=1.0, excitation=0.5, decay=2)
        assert config.baseline[0] == 1.0
        assert config.decay[0] == 2.0
        assert config.window_scale == 0.5

    def test_rejects_wrong_dimension(self):
        with pytest.raises(ValidationError):
            HawkesConfig(baseline="1 second", excitation=0.5, decay=1.0)

    def test_rejects_non_positive_baseline(self):
        with pytest.raises(ValidationError, match="positive"):
            HawkesConfig(baseline=0.0, excitation=0.5, decay=1.0)

    def test_rejects_negative_excitation(self):
        with pytest.raises(ValidationError):
            HawkesConfig(baseline=1.0, excitation=-0.1, decay=1.0)

    def test_rejects_non_positive_window_scale(self):
        with pytest.raises(ValidationError):
            HawkesConfig(baseline=1.0, excitation=0.5, decay=1.0, window_scale=0.0)

    def test_warns_when_unstable(self):
        with pytest.warns(UserWarning, match="branching ratio"):
            HawkesConfig(baseline=1.0, excitation=2.0, decay=1.0)

    def test_no_warning_when_stable(self):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            HawkesConfig(baseline=1.0, excitation=0.5, decay=1.0)
        assert not [w for w in caught if "branching ratio" in str(w.message)]

    def test_to_runtime(self):
        config = HawkesConfig(baseline=1.0, excitation=0.5, decay=2.0)
        runtime = config.to_runtime()

        assert isinstance(runtime, HawkesRuntime)
        assert runtime.values() == (1.0, 0.5, 2.0)
        assert len(jax.tree_util.tree_leaves(runtime)) == 3

    def test_rate_factory_uses_canonical_values(self, close):
        config = HawkesConfig(
            baseline="60 / minute",
            excitation="30 / minute",
            decay="1 / second",
            window_scale=0.2,
        )
        _, lower, upper, window = config.rate_factory()(ConstantRate(1.0), 0.0, None, None, 0.0)

        close(lower, 1.0)
        close(upper, 1.5)
        close(window, 0.2 / 1.5)

    def test_summary(self):
        config = HawkesConfig(baseline=1.0, excitation=0.5, decay=1.0)
        text = config.summary()
        assert "STABLE" in text
        assert "0.500" in text


class TestHawkesHelpers:

    def test_branching_ratio(self):
        runtime = HawkesConfig(baseline=1.0, excitation=0.5, decay=2.0).to_runtime()
        assert get_branching_ratio(runtime) == pytest.approx(0.25)

    def test_stationary_intensity(self):
        runtime = HawkesConfig(baseline=1.0, excitation=0.5, decay=1.0).to_runtime()
        assert get_stationary_intensity(runtime) == pytest.approx(2.0)

    def test_stationary_intensity_unstable(self):
        with pytest.warns(UserWarning):
            runtime = HawkesConfig(baseline=1.0, excitation=1.0, decay=1.0).to_runtime()
        with pytest.raises(ValueError, match="unstable"):
            get_stationary_intensity(runtime)

    def test_intensity_counts_strictly_earlier_events(self, close):
        runtime = HawkesConfig(baseline=1.0, excitation=0.5, decay=1.0).to_runtime()
        close(intensity(runtime, [1.0, 2.0], 2.0), 1.0 + 0.5 * math.exp(-1.0))
        close(intensity(runtime, [], 5.0), 1.0)


class TestSimulation:

    def test_installed_record_tracks_exact_intensity(self):
        config = HawkesConfig(baseline=1.0, excitation=0.8, decay=2.0)
        runtime = config.to_runtime()
        checked = []

        def inspect(agg, events):
            # The installed record is valid from its last refresh onward
            s = agg.next_jump_time
            if math.isinf(s):
                return
            record = agg.records[0]
            assert record(None, None, s) == pytest.approx(
                intensity(runtime, events, s), rel=1e-6
            )
            checked.append(s)

        simulate_hawkes(config.rate_factory(), 20.0, NumpyRandomSource(3), inspect)
        assert len(checked) > 10

    def test_excitation_raises_event_count(self):
        excited = [
            len(simulate_hawkes(hawkes_rate_factory(1.0, 0.5, 1.0), 20.0, NumpyRandomSource(s)))
            for s in range(40)
        ]
        plain = [
            len(simulate_hawkes(hawkes_rate_factory(1.0, 0.0, 1.0), 20.0, NumpyRandomSource(s)))
            for s in range(40)
        ]
        assert np.mean(excited) > np.mean(plain)

    @pytest.mark.slow
    def test_mean_event_count(self):
        """E[N(T)] = λ∞ T - (λ∞ - λ₀)(1 - exp(-(β - α) T)) / (β - α) from an empty history."""
        baseline, excitation, decay, horizon = 1.0, 0.5, 1.0, 20.0
        kappa = decay - excitation
        stationary = baseline * decay / kappa
        expected = stationary * horizon - (stationary - baseline) * (1 - math.exp(-kappa * horizon)) / kappa

        counts = [
            len(simulate_hawkes(
                hawkes_rate_factory(baseline, excitation, decay), horizon, NumpyRandomSource(seed)
            ))
            for seed in range(200)
        ]

        assert abs(np.mean(counts) - expected) < 4.0
