"""Central finite differences of metric fields and scalar potentials.

    d_a f(x) ~ (f(x + h e_a) - f(x - h e_a)) / (2h)

Second-order accurate: truncation error O(h^2), round-off O(eps / h).  The
step ``h`` is a trade-off left to the caller.  All four axes are evaluated
in one ``jax.vmap`` over the shifted points.
"""
from __future__ import annotations

from typing import Callable

import jax
import jax.numpy as jnp
from jaxtyping import Array, Float

from ..config import FD_STEP


def _shifted(x: Float[Array, "4"], h: float) -> tuple[Array, Array]:
    steps = h * jnp.eye(4, dtype=jnp.float64)
    return x[None, :] + steps, x[None, :] - steps


def dmetric(
    field: Callable[[Float[Array, "4"]], Float[Array, "4 4"]],
    x: Float[Array, "4"],
    axis: int,
    h: float = FD_STEP,
) -> Float[Array, "4 4"]:
    """d_a g_{mu nu}(x) along a single coordinate axis."""
    x = jnp.asarray(x, dtype=jnp.float64)
    e = jnp.zeros(4, dtype=jnp.float64).at[axis].set(h)
    return (field(x + e) - field(x - e)) * (0.5 / h)


def dmetric4(
    field: Callable[[Float[Array, "4"]], Float[Array, "4 4"]],
    x: Float[Array, "4"],
    h: float = FD_STEP,
) -> Float[Array, "4 4 4"]:
    """All first partials of the metric.

    Returns
    -------
    Float[Array, "4 4 4"]
        ``dg[a, mu, nu] = d_a g_{mu nu}`` (derivative index FIRST).
    """
    x = jnp.asarray(x, dtype=jnp.float64)
    xp, xm = _shifted(x, h)
    return (jax.vmap(field)(xp) - jax.vmap(field)(xm)) * (0.5 / h)


def grad_potential(
    potential: Callable[[Float[Array, "4"]], Float[Array, ""]],
    x: Float[Array, "4"],
    h: float = FD_STEP,
) -> Float[Array, "4"]:
    """(d_0 V, d_1 V, d_2 V, d_3 V) at x."""
    x = jnp.asarray(x, dtype=jnp.float64)
    xp, xm = _shifted(x, h)
    return (jax.vmap(potential)(xp) - jax.vmap(potential)(xm)) * (0.5 / h)
