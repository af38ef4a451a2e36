"""Differential geometry on Lorentzian manifolds by finite differences."""

from .connection import MetricPack, christoffel, christoffel_at, prepare_metric
from .curvature import (
    CurvatureResult,
    compute_curvature_chain,
    dchristoffel,
    einstein_tensor,
    frob_riemann,
    ricci,
    ricci_scalar,
    riemann_at,
    riemann_from_christoffel,
)
from .deriv import FD_STEP, dmetric, dmetric4, grad_potential
from .invariants import (
    compute_invariants,
    kretschmann_scalar,
    ricci_squared,
    weyl_squared,
)
from .metric import (
    DegenerateMetricError,
    Inertia,
    SignatureProjection,
    SymbolicMetric,
    from_frame,
    project_signature,
    sympy_metric_to_jax,
    validate_signature,
)
from .quadform import lower_index, quadratic_form, raise_index
from .tetrad import TetradResult, build_tetrad, is_pd

__all__ = [
    "CurvatureResult",
    "DegenerateMetricError",
    "FD_STEP",
    "Inertia",
    "MetricPack",
    "SignatureProjection",
    "SymbolicMetric",
    "TetradResult",
    "build_tetrad",
    "christoffel",
    "christoffel_at",
    "compute_curvature_chain",
    "compute_invariants",
    "dchristoffel",
    "dmetric",
    "dmetric4",
    "einstein_tensor",
    "frob_riemann",
    "from_frame",
    "grad_potential",
    "is_pd",
    "kretschmann_scalar",
    "lower_index",
    "prepare_metric",
    "project_signature",
    "quadratic_form",
    "raise_index",
    "ricci",
    "ricci_scalar",
    "ricci_squared",
    "riemann_at",
    "riemann_from_christoffel",
    "sympy_metric_to_jax",
    "validate_signature",
    "weyl_squared",
]
