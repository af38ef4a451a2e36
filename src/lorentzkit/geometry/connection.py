"""Levi-Civita connection from finite-difference metric derivatives.

Index convention (matching the rest of the package):
    Christoffel: Gamma^mu_{a b} as (4,4,4) array [upper, lower, lower]
"""
from __future__ import annotations

from typing import Callable, NamedTuple

import jax.numpy as jnp
from jaxtyping import Array, Bool, Float

from ..algebra.linalg import inverse
from ..config import FD_STEP, INV_EPS
from .deriv import dmetric4


class MetricPack(NamedTuple):
    """Metric, inverse and first partials at one point.

    Built once per point and shared by every higher-order quantity there.
    ``metric_inv`` is only valid when ``inv_ok`` is true.
    """

    metric: Float[Array, "4 4"]
    metric_inv: Float[Array, "4 4"]
    dmetric: Float[Array, "4 4 4"]  # dmetric[a] = d_a g
    inv_ok: Bool[Array, ""]
    det: Float[Array, ""]
    cond: Float[Array, ""]


def prepare_metric(
    field: Callable[[Float[Array, "4"]], Float[Array, "4 4"]],
    x: Float[Array, "4"],
    h: float = FD_STEP,
    inv_eps: float = INV_EPS,
) -> MetricPack:
    """Evaluate g(x), invert it and take its four partial derivatives.

    Parameters
    ----------
    field : MetricField
        Callable mapping coords (4,) -> g_ab (4,4).
    x : Float[Array, "4"]
        Spacetime coordinates (t, x, y, z).
    h : float
        Finite-difference step.
    inv_eps : float
        Pivot tolerance of the inversion.

    Returns
    -------
    MetricPack
        With ``inv_ok`` false when g is numerically singular.
    """
    x = jnp.asarray(x, dtype=jnp.float64)
    g = field(x)
    inv = inverse(g, inv_eps)
    return MetricPack(
        metric=g,
        metric_inv=inv.inverse,
        dmetric=dmetric4(field, x, h),
        inv_ok=inv.ok,
        det=inv.det,
        cond=inv.cond,
    )


def christoffel(pack: MetricPack) -> Float[Array, "4 4 4"]:
    """Christoffel symbols of the second kind.

    Gamma^mu_{ab} = 1/2 g^{mu nu} (d_a g_{nu b} + d_b g_{nu a} - d_nu g_{ab})

    Symmetric in (a, b) by construction.  Not checked against
    ``pack.inv_ok``: with a failed inverse the result is meaningless.
    """
    g_inv = pack.metric_inv
    dg = pack.dmetric  # dg[a, n, b] = d_a g_{nb}

    term1 = jnp.einsum("mn,anb->mab", g_inv, dg)  # g^{mn} d_a g_{nb}
    term2 = jnp.einsum("mn,bna->mab", g_inv, dg)  # g^{mn} d_b g_{na}
    term3 = jnp.einsum("mn,nab->mab", g_inv, dg)  # g^{mn} d_n g_{ab}

    return 0.5 * (term1 + term2 - term3)


def christoffel_at(
    field: Callable[[Float[Array, "4"]], Float[Array, "4 4"]],
    x: Float[Array, "4"],
    h: float = FD_STEP,
    inv_eps: float = INV_EPS,
) -> Float[Array, "4 4 4"]:
    """Shorthand for ``christoffel(prepare_metric(field, x, h, inv_eps))``."""
    return christoffel(prepare_metric(field, x, h, inv_eps))
