"""Numerical and physical parameters, passed explicitly.

There is no global configuration: every function that needs a step size,
a coupling constant or a tolerance takes it as an argument, and these
``equinox.Module`` structs simply bundle the usual defaults.  Being pytrees,
they can be closed over or passed straight into ``jax.jit``-compiled code;
use ``equinox.tree_at`` (or a new instance) to change a value.

The module-level constants are the defaults of both the structs and the
keyword arguments of the numeric functions.
"""
from __future__ import annotations

import equinox as eqx

from .telemetry import Level, Sink, emit

FD_STEP = 1e-4
DTAU = 1e-2
G_EPS = 1e-12
INV_EPS = 1e-14


class GeometryConfig(eqx.Module):
    """Finite-difference and integration parameters.

    Parameters
    ----------
    fd_h : float
        Central-difference step for metric and potential derivatives.
        Truncation error scales as h^2, round-off as eps/h.
    dtau : float
        Proper-time step of the geodesic integrator.
    g_eps : float
        Eigenvalue floor of tetrad construction.
    inv_eps : float
        Smallest acceptable pivot magnitude when inverting the metric
        (``prepare_metric`` and everything built on it).
    """

    fd_h: float = FD_STEP
    dtau: float = DTAU
    g_eps: float = G_EPS
    inv_eps: float = INV_EPS

    def __check_init__(self) -> None:
        if not self.fd_h > 0:
            raise ValueError(f"fd_h must be positive, got {self.fd_h}")

    def snapshot(self) -> dict[str, float]:
        """Plain-dict copy of the parameters."""
        return {
            "fd_h": self.fd_h,
            "dtau": self.dtau,
            "g_eps": self.g_eps,
            "inv_eps": self.inv_eps,
        }


class StressEnergyParams(eqx.Module):
    """Parameters of the semantic stress-energy proxy.

    Parameters
    ----------
    sigma : float
        Width of the Gaussian smoothing kernel.
    eta : float
        Stabiliser weighting the ``m c^2 g`` term.
    kappa : float
        Coupling in the residual ``G - kappa T``.
    c2 : float
        Squared speed of light.
    """

    sigma: float = 1.0
    eta: float = 1e-2
    kappa: float = 0.1
    c2: float = 1.0

    def __check_init__(self) -> None:
        if not self.sigma > 0:
            raise ValueError(f"sigma must be positive, got {self.sigma}")

    def snapshot(self) -> dict[str, float]:
        """Plain-dict copy of the parameters."""
        return {
            "sigma": self.sigma,
            "eta": self.eta,
            "kappa": self.kappa,
            "c2": self.c2,
        }


def log_config(
    config: GeometryConfig | StressEnergyParams,
    sink: Sink | None,
) -> None:
    """Emit every parameter of ``config`` at INFO level (scope ``config``)."""
    for key, value in config.snapshot().items():
        emit(sink, Level.INFO, "config", key, value)
