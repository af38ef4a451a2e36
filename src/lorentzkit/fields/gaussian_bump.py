"""Smooth Gaussian curvature bump on flat spacetime.

    g(x) = P( eta + a e^{-|x|^2} diag(-1, 1, 1, 1) ),   |x|^2 = t^2 + x^2 + y^2 + z^2

where P is :func:`~lorentzkit.geometry.metric.project_signature`.  For
``|a| < 1`` the bracket is already diagonal and Lorentzian, so P leaves it
unchanged and the symbolic form below is exact; P only matters when an
oversized amplitude would flip a sign.

The field is weakly curved everywhere and decays to Minkowski, which makes
it the standard non-trivial test case for the finite-difference pipeline.
"""

from __future__ import annotations

import jax.numpy as jnp
import sympy as sp
from beartype import beartype
from jaxtyping import Array, Float, jaxtyped

from ..geometry.metric import SymbolicMetric, project_signature
from .base import MetricField


class GaussianBumpField(MetricField):
    """Minkowski plus a signature-preserving Gaussian bump.

    Parameters
    ----------
    amplitude : float
        Bump strength ``a``.  Dynamic field (no recompilation on change).
    """

    amplitude: float = 1e-2

    @jaxtyped(typechecker=beartype)
    def __call__(self, coords: Float[Array, "4"]) -> Float[Array, "4 4"]:
        s = jnp.exp(-jnp.sum(coords**2))
        tweak = self.amplitude * s * jnp.array([-1.0, 1.0, 1.0, 1.0])
        g = jnp.diag(jnp.array([-1.0, 1.0, 1.0, 1.0]) + tweak)
        return project_signature(g).metric

    def symbolic(self) -> SymbolicMetric:
        """Return SymPy symbolic form for inspection and cross-validation."""
        t, x, y, z = sp.symbols("t x y z")
        a = sp.Symbol("a", real=True)
        s = sp.exp(-(t**2 + x**2 + y**2 + z**2))
        g = sp.diag(-(1 + a * s), 1 + a * s, 1 + a * s, 1 + a * s)
        return SymbolicMetric([t, x, y, z], g)

    def name(self) -> str:
        return "GaussianBump"
