"""Quadratic forms and index raising/lowering for 4-vectors.

When the matrix is a metric, the (-, +, +, +) convention is assumed:
``quadratic_form(g, u) < 0`` means *u* is timelike.
"""
from __future__ import annotations

import jax.numpy as jnp
from jaxtyping import Array, Float


def quadratic_form(g: Float[Array, "4 4"], v: Float[Array, "4"]) -> Float[Array, ""]:
    """v^T g v."""
    return jnp.einsum("a,ab,b->", v, g, v)


def lower_index(g: Float[Array, "4 4"], v_contra: Float[Array, "4"]) -> Float[Array, "4"]:
    """v_mu = g_{mu nu} v^nu."""
    return jnp.einsum("mn,n->m", g, v_contra)


def raise_index(g_inv: Float[Array, "4 4"], v_cov: Float[Array, "4"]) -> Float[Array, "4"]:
    """v^mu = g^{mu nu} v_nu (requires the inverse metric)."""
    return jnp.einsum("mn,n->m", g_inv, v_cov)
