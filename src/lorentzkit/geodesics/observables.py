"""Norm conservation along integrated worldlines."""
from __future__ import annotations

from typing import Callable

import jax
import jax.numpy as jnp
from jaxtyping import Array, Float


def velocity_norm(
    field: Callable[[Float[Array, "4"]], Float[Array, "4 4"]],
    x: Float[Array, "4"],
    u: Float[Array, "4"],
) -> Float[Array, ""]:
    """g_ab(x) u^a u^b; -1 on the timelike unit shell."""
    return jnp.einsum("ab,a,b->", field(x), u, u)


def monitor_conservation(
    field: Callable[[Float[Array, "4"]], Float[Array, "4 4"]],
    sol: object,
) -> Float[Array, "N"]:
    """:func:`velocity_norm` at every saved point of a trajectory.

    Parameters
    ----------
    field : MetricField
        Metric callable.
    sol : Worldline or GeodesicResult
        Anything with ``.positions`` (N, 4) and ``.velocities`` (N, 4).

    Returns
    -------
    Float[Array, "N"]
        Norms; their distance from -1 is the accumulated drift.
    """
    return jax.vmap(lambda x, u: velocity_norm(field, x, u))(
        sol.positions, sol.velocities
    )
