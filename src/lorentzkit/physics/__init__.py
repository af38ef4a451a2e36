"""Physics assembly: Einstein tensor, event stress-energy proxy, residual."""

from ..geometry.curvature import einstein_tensor
from .einstein import einstein_at, residual_norm
from .stress_energy import (
    Event,
    EventBatch,
    kernel_exp,
    stack_events,
    stress_energy_at,
    stress_energy_from_metric,
)

__all__ = [
    "Event",
    "EventBatch",
    "einstein_at",
    "einstein_tensor",
    "kernel_exp",
    "residual_norm",
    "stack_events",
    "stress_energy_at",
    "stress_energy_from_metric",
]
