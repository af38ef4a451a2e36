"""Tests for metric signature validation, repair and construction."""

import jax
import jax.numpy as jnp
import numpy as np
import pytest
import sympy as sp

from lorentzkit.geometry import (
    DegenerateMetricError,
    SymbolicMetric,
    from_frame,
    project_signature,
    validate_signature,
)
from lorentzkit.telemetry import Level


def _inertia_tuple(inertia):
    return int(inertia.negative), int(inertia.positive), int(inertia.zero)


class TestValidateSignature:
    def test_minkowski(self, eta):
        assert _inertia_tuple(validate_signature(eta)) == (1, 3, 0)
        assert bool(validate_signature(eta).is_lorentzian)

    def test_zero_eigenvalue_counted(self):
        inertia = validate_signature(jnp.diag(jnp.array([-1.0, 1.0, 1.0, 0.0])))
        assert _inertia_tuple(inertia) == (1, 2, 1)
        assert not bool(inertia.is_lorentzian)

    def test_riemannian(self):
        assert _inertia_tuple(validate_signature(jnp.eye(4))) == (0, 4, 0)


class TestProjectSignature:
    def test_lorentzian_input_is_unchanged(self, perturbed_metric):
        proj = project_signature(perturbed_metric)
        np.testing.assert_allclose(proj.metric, perturbed_metric, atol=1e-12)
        assert float(proj.repair_magnitude) < 1e-12
        assert not bool(proj.degenerate)

    def test_riemannian_gets_one_timelike_axis(self):
        proj = project_signature(jnp.eye(4))
        assert _inertia_tuple(proj.inertia) == (1, 3, 0)
        assert float(proj.repair_magnitude) == pytest.approx(2.0)
        assert not bool(proj.degenerate)

    def test_extra_negative_axes_are_flipped(self):
        g = jnp.diag(jnp.array([-0.5, -2.0, 1.0, -1.0]))
        proj = project_signature(g)
        assert _inertia_tuple(proj.inertia) == (1, 3, 0)
        # The largest-magnitude negative eigenvalue stays timelike.
        np.testing.assert_allclose(jnp.diag(proj.metric), [0.5, -2.0, 1.0, 1.0], atol=1e-12)

    @pytest.mark.parametrize("seed", range(8))
    def test_any_symmetric_matrix_becomes_lorentzian(self, seed):
        a = np.random.default_rng(seed).normal(size=(4, 4))
        proj = project_signature(jnp.asarray(a + a.T))
        assert _inertia_tuple(validate_signature(proj.metric)) == (1, 3, 0)
        np.testing.assert_array_equal(proj.metric, proj.metric.T)

    def test_zero_matrix_is_degenerate(self, recorder):
        proj = project_signature(jnp.zeros((4, 4)), sink=recorder)
        jax.effects_barrier()
        assert bool(proj.degenerate)
        assert _inertia_tuple(proj.inertia) == (1, 3, 0)
        events = recorder.find("metric", "project_signature_degenerate")
        assert len(events) == 1
        assert events[0].level == Level.WARN

    def test_healthy_repair_emits_nothing(self, recorder, eta):
        project_signature(eta, sink=recorder)
        jax.effects_barrier()
        assert recorder.events == []

    def test_strict_raises_on_degenerate(self):
        with pytest.raises(DegenerateMetricError):
            project_signature(jnp.zeros((4, 4)), strict=True)

    def test_strict_passes_healthy_metric(self, eta):
        proj = project_signature(eta, strict=True)
        np.testing.assert_allclose(proj.metric, eta, atol=1e-15)

    def test_degenerate_error_is_value_error(self):
        assert issubclass(DegenerateMetricError, ValueError)

    def test_jit_compatible(self):
        proj = jax.jit(project_signature)(jnp.eye(4))
        assert bool(proj.inertia.is_lorentzian)


class TestFromFrame:
    @pytest.mark.parametrize("seed", range(4))
    def test_invertible_frame_gives_lorentzian_metric(self, seed):
        a = np.random.default_rng(seed).normal(size=(4, 4)) + 2.0 * np.eye(4)
        g = from_frame(jnp.asarray(a))
        assert _inertia_tuple(validate_signature(g)) == (1, 3, 0)
        np.testing.assert_array_equal(g, g.T)


class TestSymbolicMetric:
    def test_rejects_wrong_coordinate_count(self):
        t, x, y = sp.symbols("t x y")
        with pytest.raises(ValueError, match="4 coordinate symbols"):
            SymbolicMetric([t, x, y], sp.eye(4))

    def test_rejects_wrong_matrix_shape(self):
        coords = list(sp.symbols("t x y z"))
        with pytest.raises(ValueError, match=r"\(4, 4\)"):
            SymbolicMetric(coords, sp.eye(3))

    def test_christoffel_of_flat_metric_is_zero(self):
        coords = list(sp.symbols("t x y z"))
        gamma = SymbolicMetric(coords, sp.diag(-1, 1, 1, 1)).christoffel()
        assert all(c == 0 for c in gamma)
