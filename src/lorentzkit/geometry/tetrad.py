"""Orthonormal frames (tetrads) and the positive-definite frame proxy.

A tetrad E has the frame vectors e_a as columns and satisfies

    E^T g E = eta,    eta = diag(-1, 1, 1, 1),

with the timelike leg in column 0.  ``E E^T`` is a sum of outer products of
a basis and therefore positive definite; it serves as a Riemannian stand-in
for g wherever an inner product must be positive.
"""
from __future__ import annotations

from typing import NamedTuple

import jax.numpy as jnp
from jaxtyping import Array, Bool, Float

from ..algebra.eigen import jacobi_eigh
from ..algebra.linalg import frobenius, minkowski_eta
from ..config import G_EPS
from ..telemetry import Level, Sink, emit
from .metric import SignatureProjection, project_signature


class TetradResult(NamedTuple):
    """Output of :func:`build_tetrad`."""

    frame: Float[Array, "4 4"]  # columns e_0 (timelike), e_1, e_2, e_3
    pd_proxy: Float[Array, "4 4"]  # E E^T
    residual: Float[Array, ""]  # ||E^T g E - eta||_F
    projection: SignatureProjection


def build_tetrad(
    g: Float[Array, "4 4"],
    eps: float = G_EPS,
    *,
    sink: Sink | None = None,
) -> TetradResult:
    """Build a tetrad diagonalising g to eta.

    The signature is repaired first, then ``g = Q diag(lam) Q^T`` gives
    ``E = Q diag(1 / sqrt(|lam|))`` with the negative-eigenvalue column
    swapped into position 0.

    Parameters
    ----------
    g : Float[Array, "4 4"]
        Symmetric metric at a point.
    eps : float
        Floor for eigenvalue magnitudes (also the repair floor, at least
        1e-12).
    sink : callable or None
        Receives the residual as an INFO event (scope ``tetrad``).

    Returns
    -------
    TetradResult
        The residual is measured against the repaired metric.
    """
    projection = project_signature(g, max(G_EPS, eps), sink=sink)
    g_rep = projection.metric

    eig = jacobi_eigh(g_rep, max_sweeps=64, tol=1e-14)
    lam = eig.eigenvalues

    # First negative axis (project_signature guarantees one exists).
    neg_idx = jnp.argmax(lam < 0.0)

    d_inv = jnp.diag(1.0 / jnp.sqrt(jnp.maximum(jnp.abs(lam), eps)))
    e0 = eig.eigenvectors @ d_inv

    perm = jnp.arange(4).at[0].set(neg_idx).at[neg_idx].set(0)
    frame = e0[:, perm]

    residual = frobenius(frame.T @ g_rep @ frame - minkowski_eta())
    emit(sink, Level.INFO, "tetrad", "tetrad_fro_error", residual)

    return TetradResult(
        frame=frame,
        pd_proxy=frame @ frame.T,
        residual=residual,
        projection=projection,
    )


def is_pd(m: Float[Array, "4 4"], eps: float = G_EPS) -> Bool[Array, ""]:
    """True when every Jacobi eigenvalue of m is strictly above ``eps``."""
    lam = jacobi_eigh(m, max_sweeps=64, tol=1e-14).eigenvalues
    return jnp.all(lam > eps)
