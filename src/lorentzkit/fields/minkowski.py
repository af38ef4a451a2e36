"""Minkowski (flat) spacetime.

The simplest spacetime: ds^2 = -dt^2 + dx^2 + dy^2 + dz^2

Ground truth:
- Christoffel symbols and all curvature tensors = 0
- Kretschmann scalar = 0
"""

from __future__ import annotations

import jax.numpy as jnp
import sympy as sp
from beartype import beartype
from jaxtyping import Array, Float, jaxtyped

from ..geometry.metric import SymbolicMetric
from .base import MetricField


class MinkowskiField(MetricField):
    """Flat Minkowski spacetime in Cartesian coordinates.

    No parameters (empty pytree leaf set).  The metric is simply
    ``diag(-1, 1, 1, 1)`` everywhere.
    """

    @jaxtyped(typechecker=beartype)
    def __call__(self, coords: Float[Array, "4"]) -> Float[Array, "4 4"]:
        return jnp.diag(jnp.array([-1.0, 1.0, 1.0, 1.0]))

    def symbolic(self) -> SymbolicMetric:
        """Return SymPy symbolic form for inspection and cross-validation."""
        t, x, y, z = sp.symbols("t x y z")
        return SymbolicMetric([t, x, y, z], sp.diag(-1, 1, 1, 1))

    def name(self) -> str:
        return "Minkowski"
