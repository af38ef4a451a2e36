"""Abstract field capabilities: metric fields and scalar potentials.

Both are ``equinox.Module`` subclasses, hence JAX pytrees: numeric
parameters stored as regular fields are dynamic leaves, so compiled code is
reused when only their values change, and the finite-difference stencils
can ``jax.vmap`` a field over shifted points.
"""

from __future__ import annotations

from abc import abstractmethod

import equinox as eqx
from jaxtyping import Array, Float

from ..geometry.metric import SymbolicMetric


class MetricField(eqx.Module):
    """Abstract base for spacetime metric fields.

    Subclasses define a pointwise, deterministic mapping from a spacetime
    coordinate ``(t, x, y, z)`` to the symmetric 4x4 metric *g_{ab}*.  The
    mapping must be defined in a neighbourhood of every query point since
    derivatives probe ``x +/- h e_a``.
    """

    @abstractmethod
    def __call__(self, coords: Float[Array, "4"]) -> Float[Array, "4 4"]:
        """Evaluate *g_{ab}* at a single spacetime point."""
        ...

    @abstractmethod
    def symbolic(self) -> SymbolicMetric:
        """Return the SymPy symbolic form for inspection and cross-validation."""
        ...

    @abstractmethod
    def name(self) -> str:
        """Human-readable field name."""
        ...


class Potential(eqx.Module):
    """Abstract base for scalar potentials V(x) driving a forcing term."""

    @abstractmethod
    def __call__(self, coords: Float[Array, "4"]) -> Float[Array, ""]:
        """Evaluate V at a single spacetime point."""
        ...
