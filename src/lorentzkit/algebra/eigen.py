"""Symmetric 4x4 eigen-decomposition by the Jacobi method.

Decomposes ``A = Q diag(lam) Q^T`` with orthonormal eigenvector columns in
``Q``.  Each iteration zeroes the largest remaining off-diagonal element
(classical, largest-pivot Jacobi) with the rotation of smaller angle, and
accumulates the rotation into ``Q``.

The iteration budget is bounded, so the routine always returns; the
``converged`` and ``iterations`` fields say whether the tolerance was met
or the budget ran out.
"""
from __future__ import annotations

from typing import NamedTuple

import jax
import jax.numpy as jnp
from jaxtyping import Array, Bool, Float, Int


class EigenResult(NamedTuple):
    """Jacobi eigen-decomposition of a symmetric 4x4 matrix.

    ``eigenvalues[i]`` belongs to column ``eigenvectors[:, i]``.  Eigenvalues
    are not sorted.
    """

    eigenvalues: Float[Array, "4"]
    eigenvectors: Float[Array, "4 4"]
    off_diagonal: Float[Array, ""]  # largest |A_pq| left after the last rotation
    iterations: Int[Array, ""]
    converged: Bool[Array, ""]


def max_offdiag_abs(a: Float[Array, "4 4"]) -> tuple[Array, Array, Array]:
    """Location ``(p, q)`` with ``p < q`` and magnitude of the largest |a_pq|.

    Ties resolve to the first entry in row-major order.
    """
    upper = jnp.triu(jnp.abs(a), k=1).ravel()
    idx = jnp.argmax(upper)
    return idx // 4, idx % 4, upper[idx]


def jacobi_rotate(
    a: Float[Array, "4 4"],
    q: Float[Array, "4 4"],
    p_idx: Array,
    q_idx: Array,
) -> tuple[Float[Array, "4 4"], Float[Array, "4 4"]]:
    """Apply the rotation that zeroes ``a[p, q]``; returns ``(a', q')``.

    With ``theta = (a_qq - a_pp) / (2 a_pq)`` the tangent is the root of
    ``t^2 + 2 theta t - 1 = 0`` of smaller magnitude.  A rotation about an
    already-zero element is the identity.
    """
    app = a[p_idx, p_idx]
    aqq = a[q_idx, q_idx]
    apq = a[p_idx, q_idx]
    zero = apq == 0.0

    theta = (aqq - app) / (2.0 * jnp.where(zero, 1.0, apq))
    root = jnp.sqrt(1.0 + theta * theta)
    t = jnp.where(theta >= 0.0, 1.0 / (theta + root), 1.0 / (theta - root))
    t = jnp.where(zero, 0.0, t)
    c = 1.0 / jnp.sqrt(1.0 + t * t)
    s = t * c

    rot = (
        jnp.eye(4, dtype=a.dtype)
        .at[p_idx, p_idx].set(c)
        .at[q_idx, q_idx].set(c)
        .at[p_idx, q_idx].set(s)
        .at[q_idx, p_idx].set(-s)
    )

    a_new = rot.T @ a @ rot
    # Closed-form diagonal and exact zero at the pivot.
    a_new = (
        a_new.at[p_idx, p_idx].set(app - t * apq)
        .at[q_idx, q_idx].set(aqq + t * apq)
        .at[p_idx, q_idx].set(0.0)
        .at[q_idx, p_idx].set(0.0)
    )
    return a_new, q @ rot


def jacobi_eigh(
    a: Float[Array, "4 4"],
    max_sweeps: int = 32,
    tol: float = 1e-12,
) -> EigenResult:
    """Jacobi eigen-decomposition of a symmetric 4x4 matrix.

    Parameters
    ----------
    a : Float[Array, "4 4"]
        Symmetric input (only symmetry is assumed, not checked).
    max_sweeps : int
        Rotation budget (one rotation per iteration).
    tol : float
        Stop once the largest off-diagonal magnitude is below ``tol``.

    Returns
    -------
    EigenResult
        Best decomposition reached.  ``converged`` is false when the budget
        ran out first; the result is then a partially diagonalised estimate.
    """
    a = jnp.asarray(a, dtype=jnp.float64)
    _, _, off0 = max_offdiag_abs(a)

    def cond_fn(state):
        _, _, it, off = state
        return (off >= tol) & (it < max_sweeps)

    def body_fn(state):
        a_k, q_k, it, _ = state
        p_idx, q_idx, _ = max_offdiag_abs(a_k)
        a_k, q_k = jacobi_rotate(a_k, q_k, p_idx, q_idx)
        _, _, off = max_offdiag_abs(a_k)
        return a_k, q_k, it + 1, off

    a_fin, q_fin, iters, off = jax.lax.while_loop(
        cond_fn,
        body_fn,
        (a, jnp.eye(4, dtype=jnp.float64), jnp.asarray(0), off0),
    )
    return EigenResult(
        eigenvalues=jnp.diagonal(a_fin),
        eigenvectors=q_fin,
        off_diagonal=off,
        iterations=iters,
        converged=off < tol,
    )
