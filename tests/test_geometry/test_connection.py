"""Finite-difference derivatives and Christoffel symbols.

The bump and Schwarzschild fields are cross-checked against exact SymPy
Christoffel symbols lambdified at the test point.
"""

import jax
import jax.numpy as jnp
import numpy as np
import pytest
import sympy as sp

from lorentzkit.fields import GaussianBumpField, RadialPotential
from lorentzkit.geometry import (
    christoffel,
    christoffel_at,
    dmetric,
    dmetric4,
    grad_potential,
    prepare_metric,
)


def _exact_christoffel(sm, coords, subs):
    gamma = sm.christoffel().subs(subs)
    fn = sp.lambdify(sm.coords, gamma.tolist(), modules="numpy")
    return np.asarray(fn(*np.asarray(coords)), dtype=np.float64)


class TestDerivatives:
    def test_dmetric4_axis_layout(self, bump, sample_coords):
        dg = dmetric4(bump, sample_coords)
        assert dg.shape == (4, 4, 4)
        for axis in range(4):
            np.testing.assert_allclose(dg[axis], dmetric(bump, sample_coords, axis), atol=1e-14)

    def test_bump_derivative_matches_analytic(self, sample_coords):
        a = 1e-2
        field = GaussianBumpField(amplitude=a)
        dg = dmetric4(field, sample_coords)
        s = float(jnp.exp(-jnp.sum(sample_coords**2)))
        signs = np.array([-1.0, 1.0, 1.0, 1.0])
        for axis in range(4):
            expected = np.diag(signs * a * s * (-2.0 * float(sample_coords[axis])))
            np.testing.assert_allclose(dg[axis], expected, atol=1e-10)

    def test_grad_potential(self, sample_coords):
        grad = grad_potential(RadialPotential(k=2.0), sample_coords)
        expected = np.concatenate([[0.0], 2.0 * np.asarray(sample_coords[1:])])
        np.testing.assert_allclose(grad, expected, atol=1e-9)


class TestMetricPack:
    def test_pack_contents(self, bump, sample_coords):
        pack = prepare_metric(bump, sample_coords)
        assert bool(pack.inv_ok)
        np.testing.assert_allclose(pack.metric @ pack.metric_inv, np.eye(4), atol=1e-12)
        assert float(pack.det) < 0.0
        assert pack.dmetric.shape == (4, 4, 4)

    def test_singular_metric_flagged(self, sample_coords):
        pack = prepare_metric(lambda x: jnp.zeros((4, 4)), sample_coords)
        assert not bool(pack.inv_ok)


class TestChristoffel:
    def test_flat_is_zero(self, minkowski, sample_coords):
        gamma = christoffel_at(minkowski, sample_coords, h=1e-4)
        assert float(jnp.max(jnp.abs(gamma))) < 1e-6

    def test_lower_pair_symmetry(self, bump, sample_coords):
        gamma = christoffel(prepare_metric(bump, sample_coords))
        np.testing.assert_allclose(gamma, jnp.swapaxes(gamma, 1, 2), atol=1e-15)

    def test_bump_matches_sympy(self, bump, sample_coords):
        a = sp.Symbol("a", real=True)
        exact = _exact_christoffel(bump.symbolic(), sample_coords, {a: 1e-2})
        gamma = christoffel_at(bump, sample_coords)
        np.testing.assert_allclose(gamma, exact, atol=1e-8)

    def test_schwarzschild_matches_sympy(self, schwarzschild):
        coords = jnp.array([0.0, 3.0, 1.0, 2.0])
        M = sp.Symbol("M", positive=True)
        exact = _exact_christoffel(schwarzschild.symbolic(), coords, {M: 1.0})
        gamma = christoffel_at(schwarzschild, coords)
        np.testing.assert_allclose(gamma, exact, atol=1e-7)

    def test_jit_and_vmap_over_points(self, bump):
        pts = jnp.array([[0.0, 0.1, 0.2, 0.3], [0.5, -0.1, 0.0, 0.2]])
        batched = jax.jit(jax.vmap(lambda p: christoffel_at(bump, p)))(pts)
        np.testing.assert_allclose(batched[1], christoffel_at(bump, pts[1]), atol=1e-12)
