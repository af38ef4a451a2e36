"""Schwarzschild black hole in isotropic Cartesian coordinates.

Isotropic form:
    ds^2 = -((1 - M/(2r_iso))/(1 + M/(2r_iso)))^2 dt^2
           + (1 + M/(2r_iso))^4 (dx^2 + dy^2 + dz^2)

where r_iso = sqrt(x^2 + y^2 + z^2) is the isotropic radial coordinate.

Ground truth:
- Vacuum solution: Ricci = 0, Einstein = 0
- Kretschmann scalar: K = 48 M^2 / r^6 with the Schwarzschild radius
  r = r_iso * (1 + M/(2*r_iso))^2
"""

from __future__ import annotations

import jax.numpy as jnp
import sympy as sp
from beartype import beartype
from jaxtyping import Array, Float, jaxtyped

from ..geometry.metric import SymbolicMetric
from .base import MetricField


class SchwarzschildField(MetricField):
    """Schwarzschild metric in isotropic Cartesian coordinates.

    Parameters
    ----------
    M : float
        Mass parameter.  Dynamic field (no recompilation on change).
    """

    M: float = 1.0

    @jaxtyped(typechecker=beartype)
    def __call__(self, coords: Float[Array, "4"]) -> Float[Array, "4 4"]:
        t, x, y, z = coords
        r_iso = jnp.sqrt(x**2 + y**2 + z**2)
        r_iso = jnp.maximum(r_iso, 1e-10)
        ratio = self.M / (2.0 * r_iso)
        alpha = (1.0 - ratio) / (1.0 + ratio)
        psi4 = (1.0 + ratio) ** 4
        return jnp.diag(jnp.stack([-alpha**2, psi4, psi4, psi4]))

    def symbolic(self) -> SymbolicMetric:
        """Return SymPy symbolic form for inspection and cross-validation."""
        t, x, y, z = sp.symbols("t x y z")
        M = sp.Symbol("M", positive=True)

        r_iso = sp.sqrt(x**2 + y**2 + z**2)
        ratio = M / (2 * r_iso)
        alpha = (1 - ratio) / (1 + ratio)
        psi4 = (1 + ratio) ** 4
        return SymbolicMetric([t, x, y, z], sp.diag(-alpha**2, psi4, psi4, psi4))

    def name(self) -> str:
        return "Schwarzschild"


def kretschmann_isotropic(
    x: Float[Array, "..."],
    y: Float[Array, "..."],
    z: Float[Array, "..."],
    M: float = 1.0,
) -> Float[Array, "..."]:
    """Analytical Kretschmann scalar in isotropic coordinates.

    K = 48 M^2 / r_schw^6  where  r_schw = r_iso * (1 + M / (2 * r_iso))^2
    """
    r_iso = jnp.sqrt(x**2 + y**2 + z**2)
    r_iso = jnp.maximum(r_iso, 1e-10)
    r_schw = r_iso * (1 + M / (2 * r_iso)) ** 2
    return 48 * M**2 / r_schw**6
