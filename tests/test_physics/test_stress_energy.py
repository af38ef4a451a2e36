"""Event-based stress-energy proxy."""

import jax
import jax.numpy as jnp
import numpy as np
import pytest

from lorentzkit.config import StressEnergyParams
from lorentzkit.physics import (
    Event,
    EventBatch,
    kernel_exp,
    stack_events,
    stress_energy_at,
    stress_energy_from_metric,
)


@pytest.fixture
def rest_event() -> Event:
    return Event(position=jnp.zeros(4), velocity=jnp.array([1.0, 0.0, 0.0, 0.0]), energy=2.0, mass=1.0)


class TestStackEvents:
    def test_shapes(self, rest_event):
        batch = stack_events([rest_event, rest_event._replace(energy=3.0)])
        assert isinstance(batch, EventBatch)
        assert batch.positions.shape == (2, 4)
        np.testing.assert_array_equal(batch.energies, [2.0, 3.0])

    def test_empty(self):
        batch = stack_events([])
        assert batch.positions.shape == (0, 4)
        assert batch.masses.shape == (0,)

    def test_rejects_bad_shape(self):
        with pytest.raises(ValueError, match=r"shape \(4,\)"):
            stack_events([Event(position=jnp.zeros(3), velocity=jnp.zeros(4))])


class TestKernel:
    def test_values(self):
        assert float(kernel_exp(jnp.asarray(0.0), 1.0)) == 1.0
        assert float(kernel_exp(jnp.asarray(2.0), 1.0)) == pytest.approx(np.exp(-1.0))
        assert float(kernel_exp(jnp.asarray(8.0), 2.0)) == pytest.approx(np.exp(-1.0))


class TestStressEnergy:
    def test_no_events_gives_zero(self, minkowski, sample_coords):
        T = stress_energy_at(minkowski, [], sample_coords)
        np.testing.assert_array_equal(T, np.zeros((4, 4)))

    def test_single_event_at_query_point(self, minkowski, rest_event, eta):
        params = StressEnergyParams(eta=0.5, c2=1.0)
        T = stress_energy_at(minkowski, [rest_event], jnp.zeros(4), params)
        # Kernel weight 1; u_low = (-1, 0, 0, 0).
        expected = 2.0 * np.outer([-1.0, 0, 0, 0], [-1.0, 0, 0, 0]) + 0.5 * np.asarray(eta)
        np.testing.assert_allclose(T, expected, atol=1e-15)

    def test_distance_uses_pd_proxy(self, eta, rest_event):
        # Displacement purely in time still reduces the weight because g~ = g^2 = I.
        params = StressEnergyParams(sigma=1.0, eta=0.0)
        batch = stack_events([rest_event])
        T = stress_energy_from_metric(eta, batch, jnp.array([1.0, 0.0, 0.0, 0.0]), params)
        assert float(T[0, 0]) == pytest.approx(2.0 * np.exp(-0.5))

    def test_symmetric_and_additive(self, bump, sample_coords, rest_event):
        moving = Event(
            position=jnp.array([0.0, 0.5, 0.0, 0.0]),
            velocity=jnp.array([1.25, 0.75, 0.0, 0.0]),
        )
        T1 = stress_energy_at(bump, [rest_event], sample_coords)
        T2 = stress_energy_at(bump, [moving], sample_coords)
        T12 = stress_energy_at(bump, [rest_event, moving], sample_coords)
        np.testing.assert_allclose(T12, T1 + T2, atol=1e-14)
        np.testing.assert_allclose(T12, T12.T, atol=1e-15)

    def test_accepts_batch(self, bump, sample_coords, rest_event):
        batch = stack_events([rest_event])
        np.testing.assert_allclose(
            stress_energy_at(bump, batch, sample_coords),
            stress_energy_at(bump, [rest_event], sample_coords),
        )

    def test_jit(self, bump, sample_coords, rest_event):
        batch = stack_events([rest_event])
        T = jax.jit(lambda b, x: stress_energy_at(bump, b, x))(batch, sample_coords)
        np.testing.assert_allclose(T, stress_energy_at(bump, batch, sample_coords), atol=1e-14)
