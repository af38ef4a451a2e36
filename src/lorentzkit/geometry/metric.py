"""Lorentzian metrics: construction, signature checks, signature repair,
and the SymPy bridge used for symbolic cross-validation.

Signature convention: (-, +, +, +).  A metric is *valid* when its
eigenvalue inertia is (1 negative, 3 positive, 0 zero).
"""

from __future__ import annotations

from functools import cached_property
from typing import Callable, NamedTuple

import jax.numpy as jnp
import sympy as sp
from jaxtyping import Array, Bool, Float, Int
from sympy import lambdify

from ..algebra.eigen import jacobi_eigh
from ..algebra.linalg import frobenius, minkowski_eta, symmetrize
from ..telemetry import Level, Sink, emit


class DegenerateMetricError(ValueError):
    """Signature repair could not produce a usable Lorentzian metric."""


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


class Inertia(NamedTuple):
    """Eigenvalue sign counts of a symmetric matrix."""

    negative: Int[Array, ""]
    positive: Int[Array, ""]
    zero: Int[Array, ""]

    @property
    def is_lorentzian(self) -> Bool[Array, ""]:
        return (self.negative == 1) & (self.positive == 3) & (self.zero == 0)


class SignatureProjection(NamedTuple):
    """Result of :func:`project_signature`."""

    metric: Float[Array, "4 4"]
    inertia: Inertia  # inertia of the repaired metric
    repair_magnitude: Float[Array, ""]  # ||g_out - g_in||_F
    degenerate: Bool[Array, ""]


# ---------------------------------------------------------------------------
# Construction and validation
# ---------------------------------------------------------------------------


def from_frame(a: Float[Array, "4 4"]) -> Float[Array, "4 4"]:
    """g = A^T eta A.

    Congruence preserves inertia, so the result is Lorentzian whenever A is
    invertible.
    """
    a = jnp.asarray(a, dtype=jnp.float64)
    return symmetrize(a.T @ minkowski_eta() @ a)


def validate_signature(g: Float[Array, "4 4"], eps: float = 1e-10) -> Inertia:
    """Count eigenvalues below ``-eps``, above ``eps`` and in ``[-eps, eps]``."""
    lam = jacobi_eigh(g, max_sweeps=64, tol=1e-14).eigenvalues
    return Inertia(
        negative=jnp.sum(lam < -eps),
        positive=jnp.sum(lam > eps),
        zero=jnp.sum(jnp.abs(lam) <= eps),
    )


def project_signature(
    g: Float[Array, "4 4"],
    eps: float = 1e-9,
    *,
    sink: Sink | None = None,
    strict: bool = False,
) -> SignatureProjection:
    """Repair a symmetric matrix to Lorentzian inertia (1, 3, 0).

    Eigen-decompose ``g = Q diag(lam) Q^T`` and choose the single timelike
    axis: with no negative eigenvalue, the smallest-magnitude one is flipped
    negative; with several, the largest-magnitude negative one is kept and
    the others are flipped positive.  All magnitudes are floored at ``eps``
    and ``Q diag(L) Q^T`` is rebuilt.

    Parameters
    ----------
    g : Float[Array, "4 4"]
        Symmetric input matrix.
    eps : float
        Magnitude floor for the rebuilt eigenvalues.
    sink : callable or None
        Diagnostic sink; receives a WARN event (scope ``metric``) when the
        repair is degenerate.
    strict : bool
        Raise :class:`DegenerateMetricError` on a degenerate repair.  Needs
        concrete arrays, so it cannot be used under ``jax.jit``.

    Returns
    -------
    SignatureProjection
        ``degenerate`` is true when the result still lacks (1, 3, 0) inertia
        or every eigenvalue of ``g`` was within ``eps`` of zero, i.e. there
        was no meaningful axis to make timelike.
    """
    g = jnp.asarray(g, dtype=jnp.float64)
    eig = jacobi_eigh(g, max_sweeps=64, tol=1e-14)
    lam = eig.eigenvalues
    q = eig.eigenvectors
    absv = jnp.abs(lam)

    negative = lam < 0.0
    largest_negative = jnp.argmax(jnp.where(negative, absv, -1.0))
    smallest = jnp.argmin(absv)
    neg_idx = jnp.where(jnp.any(negative), largest_negative, smallest)

    signs = jnp.where(jnp.arange(4) == neg_idx, -1.0, 1.0)
    new_lam = signs * jnp.maximum(absv, eps)
    out = symmetrize(q @ jnp.diag(new_lam) @ q.T)

    inertia = validate_signature(out)
    degenerate = (~inertia.is_lorentzian) | jnp.all(absv <= eps)

    emit(sink, Level.WARN, "metric", "project_signature_degenerate",
         jnp.stack([inertia.negative, inertia.positive, inertia.zero]),
         when=degenerate)

    if strict and bool(degenerate):
        raise DegenerateMetricError(
            f"Signature repair failed: inertia after repair "
            f"({int(inertia.negative)}, {int(inertia.positive)}, {int(inertia.zero)}), "
            f"eigenvalues {lam.tolist()}"
        )

    return SignatureProjection(
        metric=out,
        inertia=inertia,
        repair_magnitude=frobenius(out - g),
        degenerate=degenerate,
    )


# ---------------------------------------------------------------------------
# SymbolicMetric
# ---------------------------------------------------------------------------


class SymbolicMetric:
    """Symbolic metric specification using SymPy.

    Holds a coordinate symbol list and a 4x4 SymPy Matrix representing
    the metric tensor *g_{ab}*.  The inverse is computed lazily and cached.

    Parameters
    ----------
    coords : list[sp.Symbol]
        Four coordinate symbols, e.g. ``[t, x, y, z]``.
    g_matrix : sp.Matrix
        Symmetric (4, 4) metric tensor expressed in *coords*.

    Raises
    ------
    ValueError
        If *coords* does not have length 4 or *g_matrix* is not (4, 4).
    """

    def __init__(self, coords: list[sp.Symbol], g_matrix: sp.Matrix) -> None:
        if len(coords) != 4:
            raise ValueError(
                f"Expected 4 coordinate symbols, got {len(coords)}"
            )
        if g_matrix.shape != (4, 4):
            raise ValueError(
                f"Expected (4, 4) metric matrix, got {g_matrix.shape}"
            )
        self.coords = list(coords)
        self.g = g_matrix

    @cached_property
    def g_inv(self) -> sp.Matrix:
        """Inverse metric tensor *g^{ab}* (computed once, then cached)."""
        return self.g.inv()

    def christoffel(self) -> sp.Array:
        """Exact Christoffel symbols ``Gamma^l_{mn}`` (index layout [l, m, n])."""
        g, g_inv, x = self.g, self.g_inv, self.coords
        out = sp.MutableDenseNDimArray.zeros(4, 4, 4)
        for lam in range(4):
            for mu in range(4):
                for nu in range(4):
                    val = sp.Integer(0)
                    for sig in range(4):
                        val += sp.Rational(1, 2) * g_inv[lam, sig] * (
                            sp.diff(g[sig, nu], x[mu])
                            + sp.diff(g[sig, mu], x[nu])
                            - sp.diff(g[mu, nu], x[sig])
                        )
                    out[lam, mu, nu] = val
        return sp.Array(out)


# ---------------------------------------------------------------------------
# SymPy-to-JAX bridge
# ---------------------------------------------------------------------------


def sympy_metric_to_jax(
    symbolic_metric: SymbolicMetric,
) -> Callable[[Float[Array, "4"]], Float[Array, "4 4"]]:
    """Convert a SymPy metric to a JAX function matching the pointwise signature.

    Uses ``sympy.lambdify`` with ``modules='jax'`` to produce a callable
    that maps ``coords (4,) -> g_ab (4, 4)`` using ``jax.numpy`` operations.
    """
    f_raw = lambdify(symbolic_metric.coords, symbolic_metric.g, modules="jax")

    def f_wrapped(coords: Float[Array, "4"]) -> Float[Array, "4 4"]:
        return jnp.asarray(f_raw(*coords), dtype=jnp.float64)

    return f_wrapped
