"""Einstein tensor from finite-difference curvature and the diagnostic
residual ``||G - kappa T||_F``.

The residual only measures how far the geometry is from being sourced by the
event proxy; nothing is fitted or minimised here.
"""

from __future__ import annotations

from typing import Callable, Sequence

from jaxtyping import Array, Float

from ..algebra.linalg import frobenius
from ..config import FD_STEP, INV_EPS, StressEnergyParams
from ..geometry.curvature import compute_curvature_chain
from .stress_energy import Event, EventBatch, stress_energy_at


def einstein_at(
    field: Callable[[Float[Array, "4"]], Float[Array, "4 4"]],
    x: Float[Array, "4"],
    h: float = FD_STEP,
    inv_eps: float = INV_EPS,
) -> Float[Array, "4 4"]:
    """Einstein tensor at x, taken from :func:`compute_curvature_chain`."""
    return compute_curvature_chain(field, x, h, inv_eps).einstein


def residual_norm(
    field: Callable[[Float[Array, "4"]], Float[Array, "4 4"]],
    events: Sequence[Event] | EventBatch,
    x: Float[Array, "4"],
    params: StressEnergyParams = StressEnergyParams(),
    h: float = FD_STEP,
    inv_eps: float = INV_EPS,
) -> Float[Array, ""]:
    """||G - kappa T||_F at x (plain componentwise Frobenius norm)."""
    G = einstein_at(field, x, h, inv_eps)
    T = stress_energy_at(field, events, x, params)
    return frobenius(G - params.kappa * T)
