"""Frame-invariant time-dilation factor from (g, u).

No Minkowski coordinates are assumed.  A canonical timelike direction t is
taken from the most negative eigenvalue of g, scaled so that g(t, t) = -1
and oriented future-directed (t^0 >= 0).  Then

    gamma = -g(u, t),    w = u - gamma t,    v^2 = g(w, w) / gamma^2.

For a normalised velocity (g(u, u) = -1) this satisfies
gamma = 1 / sqrt(1 - v^2).
"""

from __future__ import annotations

from typing import NamedTuple

import jax.numpy as jnp
from jaxtyping import Array, Float

from ..algebra.eigen import jacobi_eigh
from ..geometry.quadform import quadratic_form


class TimeDilation(NamedTuple):
    gamma: Float[Array, ""]
    v_norm: Float[Array, ""]  # |v| in [0, 1) for timelike u
    q_u: Float[Array, ""]  # g(u, u); -1 when u is normalised


def timelike_unit(g: Float[Array, "4 4"]) -> Float[Array, "4"]:
    """Future-directed unit timelike vector along g's most negative axis."""
    eig = jacobi_eigh(g)
    k = jnp.argmin(eig.eigenvalues)
    e = eig.eigenvectors[:, k]
    lam = eig.eigenvalues[k]
    t = e / jnp.sqrt(jnp.maximum(1e-30, -lam))
    return jnp.where(t[0] < 0.0, -t, t)


def time_dilation(g: Float[Array, "4 4"], u: Float[Array, "4"]) -> TimeDilation:
    """Lorentz factor and speed of ``u`` relative to g's canonical time axis."""
    g = jnp.asarray(g, dtype=jnp.float64)
    u = jnp.asarray(u, dtype=jnp.float64)
    t = timelike_unit(g)

    gamma = -jnp.einsum("a,ab,b->", u, g, t)
    w = u - gamma * t
    v2 = quadratic_form(g, w) / jnp.maximum(1e-30, gamma * gamma)
    return TimeDilation(
        gamma=gamma,
        v_norm=jnp.sqrt(jnp.maximum(0.0, v2)),
        q_u=quadratic_form(g, u),
    )
