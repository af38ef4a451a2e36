"""Positive-definite proxy metric and a Cholesky PD check.

The proxy is ``g~ = g^T g``, which for symmetric g is ``g^2``: symmetric
and positive definite whenever g is non-singular.  It is a cheap inner
product for distance weights where the Lorentzian g is indefinite.  (The
tetrad-based ``E E^T`` in :mod:`lorentzkit.geometry.tetrad` is the
frame-aware alternative.)
"""

from __future__ import annotations

from typing import NamedTuple

import jax.numpy as jnp
from jaxtyping import Array, Bool, Float


class PDReport(NamedTuple):
    """Outcome of :func:`check_pd`; diagonal extrema are 0 when not PD."""

    ok: Bool[Array, ""]
    min_diag: Float[Array, ""]
    max_diag: Float[Array, ""]


def pd_proxy_square(g: Float[Array, "4 4"]) -> Float[Array, "4 4"]:
    """g~ = g g (symmetric, positive semi-definite, definite if g is regular)."""
    g = jnp.asarray(g, dtype=jnp.float64)
    return g @ g


def cholesky4(
    m: Float[Array, "4 4"],
    eps: float = 0.0,
) -> tuple[Float[Array, "4 4"], Bool[Array, ""]]:
    """Cholesky factorisation m = L L^T of a 4x4 matrix.

    Returns ``(L, ok)``.  ``ok`` is false as soon as a diagonal pivot is
    ``<= eps``; L is then not a valid factor.  Never raises.
    """
    m = jnp.asarray(m, dtype=jnp.float64)
    L = jnp.zeros((4, 4), dtype=jnp.float64)
    ok = jnp.asarray(True)
    for i in range(4):
        for j in range(i + 1):
            s = m[i, j] - jnp.dot(L[i, :j], L[j, :j])
            if i == j:
                good = s > eps
                ok = ok & good
                L = L.at[i, i].set(jnp.sqrt(jnp.where(good, s, 1.0)))
            else:
                L = L.at[i, j].set(s / L[j, j])
    return L, ok


def check_pd(m: Float[Array, "4 4"]) -> PDReport:
    """Cholesky-based PD predicate with the range of the factor's diagonal."""
    L, ok = cholesky4(m)
    d = jnp.diagonal(L)
    return PDReport(
        ok=ok,
        min_diag=jnp.where(ok, jnp.min(d), 0.0),
        max_diag=jnp.where(ok, jnp.max(d), 0.0),
    )
