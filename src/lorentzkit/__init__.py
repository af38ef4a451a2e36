"""Pointwise differential geometry for Lorentzian spacetimes.

Units: geometric (G = c = 1) unless a parameter struct says otherwise.
"""

# Float64 enforcement - must happen before any JAX imports that might
# create arrays with default float32 precision.
import jax
jax.config.update("jax_enable_x64", True)

from .config import GeometryConfig, StressEnergyParams, log_config
from .telemetry import (
    DiagnosticEvent,
    Level,
    LoggingSink,
    RecordingSink,
    ThrottledSink,
    emit,
)

__version__ = "0.1.0"

__all__ = [
    "DiagnosticEvent",
    "GeometryConfig",
    "Level",
    "LoggingSink",
    "RecordingSink",
    "StressEnergyParams",
    "ThrottledSink",
    "emit",
    "log_config",
]
