"""Pointwise curvature invariants via einsum contractions.

Computes gauge-invariant curvature scalars at a single spacetime point:
    - Kretschmann scalar: K = R_{abcd} R^{abcd}
    - Ricci-squared: R_{ab} R^{ab}
    - Weyl-squared: C_{abcd} C^{abcd} = K - 2 R_{ab} R^{ab} + (1/3) R^2

Unlike the raw components, these do not depend on the coordinate chart, so
they separate physical curvature from coordinate artefacts and give the
finite-difference pipeline an analytic target (Schwarzschild:
K = 48 M^2 / r^6).
"""
from __future__ import annotations

import jax.numpy as jnp
from jaxtyping import Array, Float

from .curvature import CurvatureResult


def kretschmann_scalar(
    riemann: Float[Array, "4 4 4 4"],
    metric: Float[Array, "4 4"],
    metric_inv: Float[Array, "4 4"],
) -> Float[Array, ""]:
    """Kretschmann scalar K = R_{abcd} R^{abcd} at a single point.

    Parameters
    ----------
    riemann : Float[Array, "4 4 4 4"]
        Riemann tensor R^a_{bcd} (upper first index).
    metric : Float[Array, "4 4"]
        Metric tensor g_{ab}.
    metric_inv : Float[Array, "4 4"]
        Inverse metric g^{ab}.
    """
    # Lower first index: R_{abcd} = g_{ae} R^e_{bcd}
    R_down = jnp.einsum("ae,ebcd->abcd", metric, riemann)
    R_up_all = jnp.einsum(
        "ae,bf,cg,dh,efgh->abcd",
        metric_inv, metric_inv, metric_inv, metric_inv, R_down,
    )
    return jnp.einsum("abcd,abcd->", R_down, R_up_all)


def ricci_squared(
    ric: Float[Array, "4 4"],
    metric_inv: Float[Array, "4 4"],
) -> Float[Array, ""]:
    """Ricci-squared R_{ab} R^{ab} at a single point."""
    R_up = jnp.einsum("ac,bd,cd->ab", metric_inv, metric_inv, ric)
    return jnp.einsum("ab,ab->", ric, R_up)


def weyl_squared(
    kretschmann: Float[Array, ""],
    ricci_sq: Float[Array, ""],
    scalar: Float[Array, ""],
) -> Float[Array, ""]:
    """Weyl-squared from the 4D identity C^2 = K - 2 R_{ab} R^{ab} + R^2 / 3."""
    return kretschmann - 2.0 * ricci_sq + (1.0 / 3.0) * scalar ** 2


def compute_invariants(
    result: CurvatureResult,
) -> tuple[Float[Array, ""], Float[Array, ""], Float[Array, ""]]:
    """(Kretschmann, Ricci-squared, Weyl-squared) from a CurvatureResult."""
    K = kretschmann_scalar(result.riemann, result.metric, result.metric_inv)
    R2 = ricci_squared(result.ricci, result.metric_inv)
    W2 = weyl_squared(K, R2, result.ricci_scalar)
    return (K, R2, W2)
