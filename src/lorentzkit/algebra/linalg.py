"""Fixed-size 4x4 linear algebra for spacetime tensors.

Vectors are ``(4,)`` and matrices ``(4, 4)`` float64 JAX arrays, row-major
(``m[r, c]``).  Determinant and inverse are written out as partial-pivoted
elimination rather than delegated to ``jnp.linalg`` so that failure is
reported through an explicit flag (with a determinant and condition-number
estimate) instead of silently producing ``inf``/``nan``.

Every function here is JIT-compatible: loops are ``jax.lax`` loops and
pivot decisions are ``jnp.where`` selections.
"""
from __future__ import annotations

from typing import NamedTuple

import jax
import jax.numpy as jnp
from jaxtyping import Array, Bool, Float

from ..config import INV_EPS

_ROWS = jnp.arange(4)


class InverseResult(NamedTuple):
    """Outcome of :func:`inverse`.

    ``inverse`` is only meaningful when ``ok`` is true; on failure it is the
    zero matrix and ``cond`` is ``inf``.
    """

    inverse: Float[Array, "4 4"]
    det: Float[Array, ""]
    cond: Float[Array, ""]
    ok: Bool[Array, ""]


# ---------------------------------------------------------------------------
# Constructors
# ---------------------------------------------------------------------------


def identity() -> Float[Array, "4 4"]:
    return jnp.eye(4, dtype=jnp.float64)


def diag(a0: float, a1: float, a2: float, a3: float) -> Float[Array, "4 4"]:
    return jnp.diag(jnp.array([a0, a1, a2, a3], dtype=jnp.float64))


def minkowski_eta() -> Float[Array, "4 4"]:
    """Minkowski metric with signature (-, +, +, +)."""
    return diag(-1.0, 1.0, 1.0, 1.0)


def symmetrize(m: Float[Array, "4 4"]) -> Float[Array, "4 4"]:
    """0.5 (m + m^T); the result equals its transpose exactly."""
    m = jnp.asarray(m, dtype=jnp.float64)
    return 0.5 * (m + m.T)


# ---------------------------------------------------------------------------
# Products and norms
# ---------------------------------------------------------------------------


def transpose(m: Float[Array, "4 4"]) -> Float[Array, "4 4"]:
    return jnp.swapaxes(m, -1, -2)


def matmul(a: Float[Array, "4 4"], b: Float[Array, "4 4"]) -> Float[Array, "4 4"]:
    return jnp.einsum("rk,kc->rc", a, b)


def matvec(a: Float[Array, "4 4"], v: Float[Array, "4"]) -> Float[Array, "4"]:
    return jnp.einsum("rk,k->r", a, v)


def norm_inf(m: Float[Array, "4 4"]) -> Float[Array, ""]:
    """Infinity norm: largest absolute row sum."""
    return jnp.max(jnp.sum(jnp.abs(m), axis=1))


def frobenius(m: Float[Array, "..."]) -> Float[Array, ""]:
    """Plain componentwise Frobenius norm (no metric weighting)."""
    return jnp.sqrt(jnp.sum(jnp.square(m)))


# ---------------------------------------------------------------------------
# Elimination helpers
# ---------------------------------------------------------------------------


def _pivot(m: Float[Array, "4 n"], k: Array) -> tuple[Array, Array]:
    """Row index and magnitude of the largest |m[r, k]| for r >= k."""
    col = jnp.where(_ROWS >= k, jnp.abs(m[:, k]), -1.0)
    piv = jnp.argmax(col)
    return piv, col[piv]


def _swap_rows(m: Float[Array, "4 n"], i: Array, j: Array) -> Float[Array, "4 n"]:
    row_i = m[i]
    row_j = m[j]
    return m.at[i].set(row_j).at[j].set(row_i)


# ---------------------------------------------------------------------------
# Determinant
# ---------------------------------------------------------------------------


def det(m: Float[Array, "4 4"]) -> Float[Array, ""]:
    """Determinant by partial-pivoted Gaussian elimination.

    The permutation sign is tracked through the row swaps.  Returns exactly
    0 when a pivot column is exactly zero.
    """
    m = jnp.asarray(m, dtype=jnp.float64)

    def body(k, carry):
        a, d, singular = carry
        piv, amax = _pivot(a, k)
        singular = singular | (amax == 0.0)
        a = _swap_rows(a, k, piv)
        d = jnp.where(piv != k, -d, d)
        akk = a[k, k]
        d = d * akk
        f = jnp.where(_ROWS > k, a[:, k] / jnp.where(akk == 0.0, 1.0, akk), 0.0)
        a = a - f[:, None] * a[k][None, :]
        return a, d, singular

    _, d, singular = jax.lax.fori_loop(
        0, 4, body, (m, jnp.asarray(1.0), jnp.asarray(False))
    )
    return jnp.where(singular, 0.0, d)


# ---------------------------------------------------------------------------
# Inverse
# ---------------------------------------------------------------------------


def inverse(m: Float[Array, "4 4"], eps: float = INV_EPS) -> InverseResult:
    """Gauss-Jordan inverse on the augmented 4x8 system ``[m | I]``.

    Parameters
    ----------
    m : Float[Array, "4 4"]
        Matrix to invert.
    eps : float
        Smallest acceptable pivot magnitude.  If the best available pivot
        of any column falls below it, inversion is reported as failed.

    Returns
    -------
    InverseResult
        ``(inverse, det, cond, ok)`` where ``cond`` is the infinity-norm
        condition number ``||m|| ||m^-1||``.
    """
    m = jnp.asarray(m, dtype=jnp.float64)
    aug = jnp.concatenate([m, jnp.eye(4, dtype=jnp.float64)], axis=1)

    def forward(k, carry):
        a, d, ok = carry
        piv, amax = _pivot(a, k)
        ok = ok & (amax >= eps)
        a = _swap_rows(a, k, piv)
        d = jnp.where(piv != k, -d, d)
        akk = a[k, k]
        d = d * akk
        # Keep the arithmetic finite after a failed pivot; ok is already false.
        a = a.at[k].set(a[k] / jnp.where(jnp.abs(akk) < eps, 1.0, akk))
        f = jnp.where(_ROWS > k, a[:, k], 0.0)
        a = a - f[:, None] * a[k][None, :]
        return a, d, ok

    def backward(i, a):
        k = 3 - i
        f = jnp.where(_ROWS < k, a[:, k], 0.0)
        return a - f[:, None] * a[k][None, :]

    aug, d, ok = jax.lax.fori_loop(
        0, 4, forward, (aug, jnp.asarray(1.0), jnp.asarray(True))
    )
    aug = jax.lax.fori_loop(0, 4, backward, aug)

    inv = jnp.where(ok, aug[:, 4:], 0.0)
    cond = jnp.where(ok, norm_inf(m) * norm_inf(inv), jnp.inf)
    return InverseResult(inverse=inv, det=d, cond=cond, ok=ok)


def condition_number(m: Float[Array, "4 4"], eps: float = INV_EPS) -> Float[Array, ""]:
    """Infinity-norm condition estimate; ``inf`` when inversion fails."""
    return inverse(m, eps).cond
