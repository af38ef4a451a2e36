"""Initial 4-velocities on the timelike unit shell.

The norm constraint g_ab u^a u^b = -1 with prescribed spatial components
u^i is a quadratic in u^0:

    g_00 (u^0)^2 + 2 g_0i u^i u^0 + (g_ij u^i u^j + 1) = 0
"""
from __future__ import annotations

from typing import Callable

import jax.numpy as jnp
from jaxtyping import Array, Float


def timelike_ic(
    field: Callable[[Float[Array, "4"]], Float[Array, "4 4"]],
    x0: Float[Array, "4"],
    v_spatial: Float[Array, "3"],
) -> tuple[Float[Array, "4"], Float[Array, "4"]]:
    """Future-directed u0 = (u^0, v_spatial) with g(u0, u0) = -1 at x0.

    Parameters
    ----------
    field : MetricField
        Metric callable coords (4,) -> g_ab (4,4).
    x0 : Float[Array, "4"]
        Initial spacetime position.
    v_spatial : Float[Array, "3"]
        Spatial components (u^x, u^y, u^z), kept as given.

    Returns
    -------
    tuple
        ``(x0, u0)``.  ``u0[0]`` is NaN when no real root exists, i.e. the
        requested spatial velocity cannot be completed to a timelike vector.
    """
    x0 = jnp.asarray(x0, dtype=jnp.float64)
    v_spatial = jnp.asarray(v_spatial, dtype=jnp.float64)
    g = field(x0)

    a = g[0, 0]
    b = 2.0 * jnp.dot(g[0, 1:], v_spatial)
    c = jnp.einsum("ij,i,j->", g[1:, 1:], v_spatial, v_spatial) + 1.0
    disc = b**2 - 4.0 * a * c

    # g_00 < 0: the larger root is (-b - sqrt(disc)) / (2 a)
    u_t = (-b - jnp.sqrt(jnp.maximum(disc, 0.0))) / (2.0 * a)
    u_t = jnp.where(disc >= 0.0, u_t, jnp.nan)

    return x0, jnp.concatenate([u_t[None], v_spatial])
