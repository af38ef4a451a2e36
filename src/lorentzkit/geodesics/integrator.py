"""Worldline integration: a velocity-Verlet stepper and a Diffrax reference.

The stepper advances a state (x^mu, u^mu) under

    du^mu / dtau = -Gamma^mu_{a b} u^a u^b - g^{mu nu} d_nu V

with the connection rebuilt by finite differences at both ends of the step,
and pulls u back onto the timelike unit shell g(u, u) = -1 afterwards.
``integrate_geodesic`` solves the same ODE with an adaptive Tsit5 scheme and
is meant for cross-checking the stepper, not for production runs.
"""
from __future__ import annotations

from typing import Callable, NamedTuple

import diffrax
import jax
import jax.numpy as jnp
from jaxtyping import Array, Bool, Float

from ..config import FD_STEP, INV_EPS
from ..geometry.connection import MetricPack, christoffel, prepare_metric
from ..geometry.deriv import grad_potential
from ..geometry.quadform import quadratic_form
from ..telemetry import Level, Sink, emit

MetricFn = Callable[[Float[Array, "4"]], Float[Array, "4 4"]]
PotentialFn = Callable[[Float[Array, "4"]], Float[Array, ""]]


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


class StepResult(NamedTuple):
    """State after one :func:`geodesic_step`.

    ``norm`` is g(u, u) at the new point *before* renormalization.
    ``timelike`` is false when that norm was >= 0; the velocity is then
    returned unscaled and the worldline has left the physical region.
    """

    position: Float[Array, "4"]
    velocity: Float[Array, "4"]
    norm: Float[Array, ""]
    timelike: Bool[Array, ""]


class Worldline(NamedTuple):
    """Fixed-step worldline from :func:`integrate_worldline`.

    Attributes
    ----------
    positions : Float[Array, "N+1 4"]
        Positions including the initial point.
    velocities : Float[Array, "N+1 4"]
        4-velocities including the initial one.
    norms : Float[Array, "N"]
        Pre-renormalization g(u, u) of every step.
    timelike : Bool[Array, "N"]
        Per-step renormalization flag.
    """

    positions: Float[Array, "N 4"]
    velocities: Float[Array, "N 4"]
    norms: Float[Array, "M"]
    timelike: Bool[Array, "M"]


class GeodesicResult(NamedTuple):
    """Diffrax solution unpacked into positions and velocities.

    Attributes
    ----------
    ts : Float[Array, "N"]
        Saved affine parameter values.
    positions : Float[Array, "N 4"]
        Coordinate positions x^mu at each saved point.
    velocities : Float[Array, "N 4"]
        4-velocities u^mu at each saved point.
    result : diffrax.RESULTS
        Solver status; ``diffrax.RESULTS.successful`` on success.
    """

    ts: Float[Array, "N"]
    positions: Float[Array, "N 4"]
    velocities: Float[Array, "N 4"]
    result: object


# ---------------------------------------------------------------------------
# Step primitives
# ---------------------------------------------------------------------------


def acceleration(
    pack: MetricPack,
    gamma: Float[Array, "4 4 4"],
    u: Float[Array, "4"],
    x: Float[Array, "4"],
    potential: PotentialFn | None = None,
    h: float = FD_STEP,
) -> Float[Array, "4"]:
    """a^mu = -Gamma^mu_{a b} u^a u^b - g^{mu nu} d_nu V.

    The forcing term is dropped entirely when ``potential`` is None.
    """
    a = -jnp.einsum("mab,a,b->m", gamma, u, u)
    if potential is not None:
        a = a - pack.metric_inv @ grad_potential(potential, x, h)
    return a


def renormalize_timelike(
    g: Float[Array, "4 4"],
    u: Float[Array, "4"],
) -> tuple[Float[Array, "4"], Bool[Array, ""]]:
    """Rescale u so that g(u, u) = -1.

    Only applied when g(u, u) < 0; otherwise u is returned unchanged and the
    flag is false.
    """
    s = quadratic_form(g, u)
    timelike = s < 0.0
    k = jnp.where(timelike, 1.0 / jnp.sqrt(jnp.where(timelike, -s, 1.0)), 1.0)
    return u * k, timelike


def geodesic_step(
    field: MetricFn,
    x: Float[Array, "4"],
    u: Float[Array, "4"],
    dtau: float,
    potential: PotentialFn | None = None,
    h: float = FD_STEP,
    inv_eps: float = INV_EPS,
    *,
    sink: Sink | None = None,
) -> StepResult:
    """Advance (x, u) by one velocity-Verlet step of size ``dtau``.

    Half-kick with the acceleration at x, drift with the half-step velocity,
    rebuild the connection at the new point, half-kick again and renormalize
    onto the unit shell.  A WARN event ``integrator/non_timelike`` is sent to
    ``sink`` when the renormalization had to be skipped.
    """
    x = jnp.asarray(x, dtype=jnp.float64)
    u = jnp.asarray(u, dtype=jnp.float64)

    pack0 = prepare_metric(field, x, h, inv_eps)
    a0 = acceleration(pack0, christoffel(pack0), u, x, potential, h)
    u_half = u + 0.5 * dtau * a0

    x_new = x + dtau * u_half

    pack1 = prepare_metric(field, x_new, h, inv_eps)
    a1 = acceleration(pack1, christoffel(pack1), u_half, x_new, potential, h)
    u_new = u_half + 0.5 * dtau * a1

    norm = quadratic_form(pack1.metric, u_new)
    u_new, timelike = renormalize_timelike(pack1.metric, u_new)
    emit(sink, Level.WARN, "integrator", "non_timelike", norm, when=~timelike)

    return StepResult(position=x_new, velocity=u_new, norm=norm, timelike=timelike)


def integrate_worldline(
    field: MetricFn,
    x0: Float[Array, "4"],
    u0: Float[Array, "4"],
    n_steps: int,
    dtau: float,
    potential: PotentialFn | None = None,
    h: float = FD_STEP,
    inv_eps: float = INV_EPS,
    *,
    sink: Sink | None = None,
) -> Worldline:
    """Repeat :func:`geodesic_step` ``n_steps`` times under ``lax.scan``.

    Steps keep going after a non-timelike step; inspect
    ``Worldline.timelike`` to find where the worldline went bad.
    """
    x0 = jnp.asarray(x0, dtype=jnp.float64)
    u0 = jnp.asarray(u0, dtype=jnp.float64)

    def body(carry, _):
        x, u = carry
        step = geodesic_step(field, x, u, dtau, potential, h, inv_eps, sink=sink)
        return (step.position, step.velocity), step

    _, steps = jax.lax.scan(body, (x0, u0), None, length=n_steps)

    return Worldline(
        positions=jnp.concatenate([x0[None, :], steps.position], axis=0),
        velocities=jnp.concatenate([u0[None, :], steps.velocity], axis=0),
        norms=steps.norm,
        timelike=steps.timelike,
    )


# ---------------------------------------------------------------------------
# Diffrax reference solution
# ---------------------------------------------------------------------------


def geodesic_vector_field(
    tau: Float[Array, ""],
    y: Float[Array, "8"],
    args: tuple,
) -> Float[Array, "8"]:
    """Right-hand side dy/dtau for the state y = [x^mu (4,), u^mu (4,)].

    ``args`` is ``(field, potential, h, inv_eps)``; ``potential`` may be None.
    """
    field, potential, h, inv_eps = args
    x = y[:4]
    u = y[4:]
    pack = prepare_metric(field, x, h, inv_eps)
    a = acceleration(pack, christoffel(pack), u, x, potential, h)
    return jnp.concatenate([u, a])


def integrate_geodesic(
    field: MetricFn,
    x0: Float[Array, "4"],
    u0: Float[Array, "4"],
    tau_span: tuple[float, float],
    potential: PotentialFn | None = None,
    h: float = FD_STEP,
    inv_eps: float = INV_EPS,
    *,
    num_points: int = 100,
    dt0: float = 0.01,
    rtol: float = 1e-10,
    atol: float = 1e-10,
    max_steps: int = 16384,
) -> GeodesicResult:
    """Integrate the same ODE with Diffrax Tsit5 and PID step control.

    No renormalization is applied, so ``monitor_conservation`` on the result
    measures the genuine drift of the adaptive scheme.

    Parameters
    ----------
    field : MetricField
        Metric callable coords (4,) -> g_ab (4,4).
    x0, u0 : Float[Array, "4"]
        Initial position and 4-velocity.
    tau_span : tuple[float, float]
        (tau_start, tau_end).
    potential : Potential or None
        Optional scalar potential for the forcing term.
    h : float
        Finite-difference step for the connection.
    inv_eps : float
        Pivot tolerance of the metric inverse.
    num_points : int
        Number of equally spaced save points, endpoints included.

    Returns
    -------
    GeodesicResult
    """
    y0 = jnp.concatenate([
        jnp.asarray(x0, dtype=jnp.float64),
        jnp.asarray(u0, dtype=jnp.float64),
    ])

    term = diffrax.ODETerm(geodesic_vector_field)
    solver = diffrax.Tsit5()
    controller = diffrax.PIDController(rtol=rtol, atol=atol)
    saveat = diffrax.SaveAt(ts=jnp.linspace(tau_span[0], tau_span[1], num_points))

    sol = diffrax.diffeqsolve(
        term,
        solver,
        t0=tau_span[0],
        t1=tau_span[1],
        dt0=dt0,
        y0=y0,
        args=(field, potential, h, inv_eps),
        saveat=saveat,
        stepsize_controller=controller,
        max_steps=max_steps,
        throw=False,
    )

    return GeodesicResult(
        ts=sol.ts,
        positions=sol.ys[:, :4],
        velocities=sol.ys[:, 4:],
        result=sol.result,
    )
