"""Metric fields and scalar potentials consumed by the geometry pipeline."""

from .base import MetricField, Potential
from .callable import CallableField
from .gaussian_bump import GaussianBumpField
from .minkowski import MinkowskiField
from .potentials import RadialPotential, ZeroPotential
from .registry import FieldRegistry, GroundTruth, create_default_registry
from .schwarzschild import SchwarzschildField, kretschmann_isotropic

__all__ = [
    "CallableField",
    "FieldRegistry",
    "GaussianBumpField",
    "GroundTruth",
    "MetricField",
    "MinkowskiField",
    "Potential",
    "RadialPotential",
    "SchwarzschildField",
    "ZeroPotential",
    "create_default_registry",
    "kretschmann_isotropic",
]
