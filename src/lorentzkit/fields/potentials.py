"""Scalar potentials for the geodesic forcing term f^mu = -g^{mu nu} d_nu V."""

from __future__ import annotations

import jax.numpy as jnp
from beartype import beartype
from jaxtyping import Array, Float, jaxtyped

from .base import Potential


class ZeroPotential(Potential):
    """V = 0 (pure geodesic motion)."""

    @jaxtyped(typechecker=beartype)
    def __call__(self, coords: Float[Array, "4"]) -> Float[Array, ""]:
        return jnp.zeros((), dtype=jnp.float64)


class RadialPotential(Potential):
    """Spatial harmonic well V = k/2 (x^2 + y^2 + z^2); ignores t.

    Parameters
    ----------
    k : float
        Spring constant.  Dynamic field.
    """

    k: float = 1.0

    @jaxtyped(typechecker=beartype)
    def __call__(self, coords: Float[Array, "4"]) -> Float[Array, ""]:
        return 0.5 * self.k * jnp.sum(coords[1:] ** 2)
