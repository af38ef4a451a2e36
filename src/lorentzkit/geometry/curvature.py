"""Riemann, Ricci and scalar curvature by nested finite differences.

The Christoffel symbols are themselves differentiated numerically: for each
axis the whole metric -> inverse -> Christoffel pipeline is rebuilt at
``x + h e_a`` and ``x - h e_a``.  That 8-point stencil of full rebuilds
dominates the cost of every curvature query.

Index conventions:
    - Christoffel: Gamma^mu_{a b} as (4,4,4) array [upper, lower, lower]
    - Riemann: R^mu_{nu a b} as (4,4,4,4) array [upper, lower, lower, lower]
    - Ricci: R_{a b} as (4,4) array [lower, lower]
    - Einstein: G_{a b} as (4,4) array [lower, lower]
"""
from __future__ import annotations

from typing import Callable, NamedTuple

import jax
import jax.numpy as jnp
from jaxtyping import Array, Bool, Float

from ..algebra.linalg import symmetrize
from ..config import FD_STEP, INV_EPS
from .connection import christoffel, prepare_metric


class CurvatureResult(NamedTuple):
    """All tensors from the curvature computation chain at a single point."""
    metric: Float[Array, "4 4"]
    metric_inv: Float[Array, "4 4"]
    inv_ok: Bool[Array, ""]
    christoffel: Float[Array, "4 4 4"]
    riemann: Float[Array, "4 4 4 4"]
    ricci: Float[Array, "4 4"]
    ricci_scalar: Float[Array, ""]
    einstein: Float[Array, "4 4"]


def dchristoffel(
    field: Callable[[Float[Array, "4"]], Float[Array, "4 4"]],
    x: Float[Array, "4"],
    h: float = FD_STEP,
    inv_eps: float = INV_EPS,
) -> Float[Array, "4 4 4 4"]:
    """Partial derivatives of the Christoffel symbols.

    Returns
    -------
    Float[Array, "4 4 4 4"]
        ``dgamma[a, mu, nu, b] = d_a Gamma^mu_{nu b}`` (derivative index
        FIRST), from central differences of Gamma rebuilt at x +/- h e_a.
    """
    x = jnp.asarray(x, dtype=jnp.float64)
    steps = h * jnp.eye(4, dtype=jnp.float64)

    def gamma_at(p):
        return christoffel(prepare_metric(field, p, h, inv_eps))

    gp = jax.vmap(gamma_at)(x[None, :] + steps)
    gm = jax.vmap(gamma_at)(x[None, :] - steps)
    return (gp - gm) * (0.5 / h)


def riemann_from_christoffel(
    gamma: Float[Array, "4 4 4"],
    dgamma: Float[Array, "4 4 4 4"],
) -> Float[Array, "4 4 4 4"]:
    """Assemble R^mu_{nu a b} from Gamma and its partials.

    R^mu_{nu a b} = d_a Gamma^mu_{nu b} - d_b Gamma^mu_{nu a}
                    + Gamma^mu_{s a} Gamma^s_{nu b}
                    - Gamma^mu_{s b} Gamma^s_{nu a}

    Antisymmetric in (a, b) exactly, term by term.
    """
    deriv_term = (
        jnp.einsum("amnb->mnab", dgamma)
        - jnp.einsum("bmna->mnab", dgamma)
    )
    quad_pos = jnp.einsum("msa,snb->mnab", gamma, gamma)
    quad_neg = jnp.einsum("msb,sna->mnab", gamma, gamma)
    return deriv_term + quad_pos - quad_neg


def riemann_at(
    field: Callable[[Float[Array, "4"]], Float[Array, "4 4"]],
    x: Float[Array, "4"],
    h: float = FD_STEP,
    inv_eps: float = INV_EPS,
) -> Float[Array, "4 4 4 4"]:
    """Riemann curvature tensor R^mu_{nu a b} at a single spacetime point."""
    gamma = christoffel(prepare_metric(field, x, h, inv_eps))
    return riemann_from_christoffel(gamma, dchristoffel(field, x, h, inv_eps))


def ricci(riemann: Float[Array, "4 4 4 4"]) -> Float[Array, "4 4"]:
    """Ricci tensor R_{ab} = R^mu_{a mu b}."""
    return jnp.einsum("mamb->ab", riemann)


def ricci_scalar(
    g_inv: Float[Array, "4 4"],
    ric: Float[Array, "4 4"],
) -> Float[Array, ""]:
    """Ricci scalar R = g^{ab} R_{ab}."""
    return jnp.einsum("ab,ab->", g_inv, ric)


def einstein_tensor(
    ric: Float[Array, "4 4"],
    scalar: Float[Array, ""],
    g: Float[Array, "4 4"],
) -> Float[Array, "4 4"]:
    """G_{a b} = R_{a b} - 1/2 R g_{a b}, symmetrised."""
    return symmetrize(ric - 0.5 * scalar * g)


def frob_riemann(riemann: Float[Array, "4 4 4 4"]) -> Float[Array, ""]:
    """Frobenius norm over all 256 components.

    The components are rescaled by their largest magnitude before squaring,
    so neither tiny nor huge curvature under/overflows the accumulation.
    """
    scale = jnp.max(jnp.abs(riemann))
    safe = jnp.where(scale > 0.0, scale, 1.0)
    return safe * jnp.sqrt(jnp.sum(jnp.square(riemann / safe)))


def compute_curvature_chain(
    field: Callable[[Float[Array, "4"]], Float[Array, "4 4"]],
    x: Float[Array, "4"],
    h: float = FD_STEP,
    inv_eps: float = INV_EPS,
) -> CurvatureResult:
    """Compute the full curvature chain at a single spacetime point.

    Evaluates: metric -> inverse metric -> Christoffel -> Riemann -> Ricci
    -> Ricci scalar -> Einstein, reusing one MetricPack at x.

    Args:
        field: Callable mapping coords (4,) -> metric tensor (4,4).
        x: Spacetime coordinates as shape (4,) array.
        h: Finite-difference step for both derivative levels.
        inv_eps: Pivot tolerance of every metric inversion.

    Returns:
        CurvatureResult NamedTuple.  Check ``inv_ok`` before trusting it.
    """
    pack = prepare_metric(field, x, h, inv_eps)
    gamma = christoffel(pack)
    R_tensor = riemann_from_christoffel(gamma, dchristoffel(field, x, h, inv_eps))
    Ric = ricci(R_tensor)
    R_scalar = ricci_scalar(pack.metric_inv, Ric)
    G = einstein_tensor(Ric, R_scalar, pack.metric)

    return CurvatureResult(
        metric=pack.metric,
        metric_inv=pack.metric_inv,
        inv_ok=pack.inv_ok,
        christoffel=gamma,
        riemann=R_tensor,
        ricci=Ric,
        ricci_scalar=R_scalar,
        einstein=G,
    )
