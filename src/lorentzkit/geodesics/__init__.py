"""Worldline integration under the finite-difference connection."""

from .initial_conditions import timelike_ic
from .integrator import (
    GeodesicResult,
    StepResult,
    Worldline,
    acceleration,
    geodesic_step,
    geodesic_vector_field,
    integrate_geodesic,
    integrate_worldline,
    renormalize_timelike,
)
from .observables import monitor_conservation, velocity_norm

__all__ = [
    "GeodesicResult",
    "StepResult",
    "Worldline",
    "acceleration",
    "geodesic_step",
    "geodesic_vector_field",
    "integrate_geodesic",
    "integrate_worldline",
    "monitor_conservation",
    "renormalize_timelike",
    "timelike_ic",
    "velocity_norm",
]
