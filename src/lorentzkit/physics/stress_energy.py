"""Semantic stress-energy proxy assembled from discrete events.

    T_{mu nu}(x) = sum_i phi_sigma(d2_i) [ E_i u_{i mu} u_{i nu} + eta m_i c^2 g_{mu nu}(x) ]

where
    - phi_sigma(r2) = exp(-r2 / (2 sigma^2)) is a Gaussian smoothing kernel,
    - d2_i = (x - x_i)^T g~(x) (x - x_i) uses the positive-definite proxy
      g~ = g(x)^2, sidestepping the Lorentzian signature for "how close",
    - u_{i mu} = g_{mu a}(x) u_i^a is lowered with the *local* metric at the
      query point, not at the event.

This is a diagnostic source term, not a matter model.
"""

from __future__ import annotations

from typing import Callable, NamedTuple, Sequence

import jax
import jax.numpy as jnp
from jaxtyping import Array, Float

from ..audits.pd_proxy import pd_proxy_square
from ..config import StressEnergyParams
from ..geometry.quadform import lower_index


class Event(NamedTuple):
    """Point source of stress-energy.

    Physical plausibility (timelike u, E >= 0, m > 0) is the caller's
    responsibility.
    """

    position: Float[Array, "4"]
    velocity: Float[Array, "4"]  # 4-velocity, need not be normalised
    energy: float = 1.0
    mass: float = 1.0


class EventBatch(NamedTuple):
    """Events stacked along a leading axis."""

    positions: Float[Array, "N 4"]
    velocities: Float[Array, "N 4"]
    energies: Float[Array, "N"]
    masses: Float[Array, "N"]


def stack_events(events: Sequence[Event]) -> EventBatch:
    """Stack a sequence of events into arrays.

    Raises
    ------
    ValueError
        If any position or velocity is not a 4-vector.
    """
    for e in events:
        if jnp.shape(e.position) != (4,) or jnp.shape(e.velocity) != (4,):
            raise ValueError(
                f"Event position and velocity must have shape (4,), got "
                f"{jnp.shape(e.position)} and {jnp.shape(e.velocity)}"
            )
    if not events:
        return EventBatch(
            positions=jnp.zeros((0, 4), dtype=jnp.float64),
            velocities=jnp.zeros((0, 4), dtype=jnp.float64),
            energies=jnp.zeros((0,), dtype=jnp.float64),
            masses=jnp.zeros((0,), dtype=jnp.float64),
        )
    return EventBatch(
        positions=jnp.stack([jnp.asarray(e.position, dtype=jnp.float64) for e in events]),
        velocities=jnp.stack([jnp.asarray(e.velocity, dtype=jnp.float64) for e in events]),
        energies=jnp.asarray([e.energy for e in events], dtype=jnp.float64),
        masses=jnp.asarray([e.mass for e in events], dtype=jnp.float64),
    )


def kernel_exp(r2: Float[Array, "..."], sigma: float) -> Float[Array, "..."]:
    """phi_sigma(r2) = exp(-r2 / (2 sigma^2)); ``r2`` is already squared."""
    return jnp.exp(-r2 * (0.5 / (sigma * sigma)))


def stress_energy_from_metric(
    g: Float[Array, "4 4"],
    batch: EventBatch,
    x: Float[Array, "4"],
    params: StressEnergyParams = StressEnergyParams(),
) -> Float[Array, "4 4"]:
    """T_{mu nu}(x) given the metric already evaluated at x."""
    g = jnp.asarray(g, dtype=jnp.float64)
    x = jnp.asarray(x, dtype=jnp.float64)
    if batch.positions.shape[0] == 0:
        return jnp.zeros((4, 4), dtype=jnp.float64)
    g_tilde = pd_proxy_square(g)

    def one(position, velocity, energy, mass):
        d = x - position
        w = kernel_exp(jnp.einsum("a,ab,b->", d, g_tilde, d), params.sigma)
        u_low = lower_index(g, velocity)
        term = energy * jnp.outer(u_low, u_low) + params.eta * mass * params.c2 * g
        return w * term

    terms = jax.vmap(one)(
        batch.positions, batch.velocities, batch.energies, batch.masses
    )
    return jnp.sum(terms, axis=0)


def stress_energy_at(
    field: Callable[[Float[Array, "4"]], Float[Array, "4 4"]],
    events: Sequence[Event] | EventBatch,
    x: Float[Array, "4"],
    params: StressEnergyParams = StressEnergyParams(),
) -> Float[Array, "4 4"]:
    """Compute T_{mu nu}(x) from events using the local metric g(x).

    An empty event list gives the zero tensor.
    """
    batch = events if isinstance(events, EventBatch) else stack_events(events)
    x = jnp.asarray(x, dtype=jnp.float64)
    return stress_energy_from_metric(field(x), batch, x, params)
