"""Tests for chaosstream.integrate.stream."""

import logging

import numpy as np
import pytest

from chaosstream.errors import ConfigError
from chaosstream.integrate.rk4 import RungeKutta4
from chaosstream.integrate.stream import (
    Sample,
    collect_states,
    take,
    trajectory_stream,
    until_non_finite,
)
from chaosstream.systems.fields import Lorenz96Field, LorenzField


def _lorenz_integrator():
    return RungeKutta4(0.0, [1.0, 1.0, 1.0], 0.01)


def _diverging_field(t, y):
    """Finite until t passes 0.0275, NaN afterwards."""
    if t > 0.0275:
        return np.array([np.nan])
    return np.array([1.0])


class TestTrajectoryStream:
    """Lazy, unbounded sample production."""

    def test_is_lazy(self):
        rk = _lorenz_integrator()
        stream = trajectory_stream(rk, LorenzField())
        assert rk.t == 0.0
        next(stream)
        assert rk.t == pytest.approx(0.01)

    def test_first_sample_is_state_after_one_step(self):
        field = LorenzField()
        reference = _lorenz_integrator()
        expected = reference.step(field)

        sample = next(trajectory_stream(_lorenz_integrator(), field))
        assert sample.index == 0
        assert sample.t == pytest.approx(0.01)
        np.testing.assert_array_equal(sample.state, expected)

    def test_derivative_is_field_at_sample_state(self):
        field = LorenzField()
        for sample in take(trajectory_stream(_lorenz_integrator(), field), 5):
            np.testing.assert_array_equal(sample.derivative, field(sample.t, sample.state))

    def test_indices_are_consecutive(self):
        samples = take(trajectory_stream(_lorenz_integrator(), LorenzField()), 25)
        assert [s.index for s in samples] == list(range(25))

    def test_no_internal_length_limit(self):
        stream = trajectory_stream(RungeKutta4(0.0, [0.0], 0.001), lambda t, y: np.array([1.0]))
        for _ in range(5000):
            last = next(stream)
        assert last.index == 4999

    def test_warmup_steps_are_discarded(self):
        field = LorenzField()
        reference = _lorenz_integrator()
        reference.step(field)
        expected = reference.step(field)

        sample = next(trajectory_stream(_lorenz_integrator(), field, warmup_steps=1))
        assert sample.index == 0
        np.testing.assert_array_equal(sample.state, expected)

    def test_negative_warmup_raises_on_construction(self):
        with pytest.raises(ConfigError, match="warmup_steps"):
            trajectory_stream(_lorenz_integrator(), LorenzField(), warmup_steps=-1)

    def test_dimension_mismatch_raises_on_construction(self):
        rk = _lorenz_integrator()
        with pytest.raises(ConfigError, match="dimension"):
            trajectory_stream(rk, Lorenz96Field(dimension=5))
        assert rk.t == 0.0

    def test_samples_are_read_only(self):
        sample = next(trajectory_stream(_lorenz_integrator(), LorenzField()))
        with pytest.raises(ValueError):
            sample.state[0] = 0.0
        with pytest.raises(ValueError):
            sample.derivative[0] = 0.0

    def test_samples_are_independent_snapshots(self):
        stream = trajectory_stream(_lorenz_integrator(), LorenzField())
        first = next(stream)
        snapshot = first.state.copy()
        take(stream, 10)
        np.testing.assert_array_equal(first.state, snapshot)

    def test_fresh_integrator_restarts_identically(self):
        a = collect_states(trajectory_stream(_lorenz_integrator(), LorenzField()), 30)
        b = collect_states(trajectory_stream(_lorenz_integrator(), LorenzField()), 30)
        np.testing.assert_array_equal(a, b)

    def test_non_finite_samples_propagate(self):
        stream = trajectory_stream(RungeKutta4(0.0, [0.0], 0.01), _diverging_field)
        samples = take(stream, 4)
        assert len(samples) == 4
        assert [s.is_finite for s in samples] == [True, True, False, False]


class TestBoundedPulls:
    """take / collect_states / until_non_finite."""

    def test_take_exact_count(self):
        assert len(take(trajectory_stream(_lorenz_integrator(), LorenzField()), 17)) == 17

    def test_take_zero(self):
        rk = _lorenz_integrator()
        assert take(trajectory_stream(rk, LorenzField()), 0) == []
        assert rk.t == 0.0

    def test_take_negative_raises(self):
        with pytest.raises(ConfigError):
            take(iter([]), -1)

    def test_collect_states_shape(self):
        states = collect_states(
            trajectory_stream(RungeKutta4(0.0, Lorenz96Field().default_state(), 0.01), Lorenz96Field()),
            12,
        )
        assert states.shape == (12, 5)

    def test_until_non_finite_stops_at_divergence(self, caplog):
        stream = trajectory_stream(RungeKutta4(0.0, [0.0], 0.01), _diverging_field)
        with caplog.at_level(logging.WARNING):
            kept = list(until_non_finite(stream))
        assert [s.index for s in kept] == [0, 1]
        assert "diverged at sample 2" in caplog.text

    def test_until_non_finite_passes_finite_samples(self):
        samples = [
            Sample(index=i, t=0.1 * i, state=np.array([float(i)]), derivative=np.array([1.0]))
            for i in range(3)
        ]
        kept = list(until_non_finite(iter(samples)))
        assert len(kept) == 3
        assert all(a is b for a, b in zip(kept, samples))
