"""Bundled test spacetimes keyed by name, each with its known curvature.

A ``GroundTruth`` records what the finite-difference pipeline should find
for a field: whether it is a vacuum solution (Ricci = 0) and, where an
analytic formula exists, the Kretschmann scalar at a point.  The test suite
walks :func:`create_default_registry` and checks every entry against
:func:`~lorentzkit.geometry.compute_curvature_chain`.
"""

from __future__ import annotations

from typing import Callable, Iterator, NamedTuple

import jax.numpy as jnp
from jaxtyping import Array, Float

from .base import MetricField
from .gaussian_bump import GaussianBumpField
from .minkowski import MinkowskiField
from .schwarzschild import SchwarzschildField, kretschmann_isotropic

KretschmannFn = Callable[[MetricField, Float[Array, "4"]], Float[Array, ""]]


class GroundTruth(NamedTuple):
    """Analytic facts about a field.

    Attributes
    ----------
    vacuum : bool
        True when R_ab vanishes everywhere off singularities.
    asymptotically_flat : bool
        True when g tends to eta far from the origin.
    kretschmann : callable or None
        ``(field, x) -> K`` in closed form, or None if no formula is known.
    """

    vacuum: bool
    asymptotically_flat: bool = True
    kretschmann: KretschmannFn | None = None


def _flat_kretschmann(field: MetricField, x: Float[Array, "4"]) -> Float[Array, ""]:
    return jnp.zeros((), dtype=jnp.float64)


def _schwarzschild_kretschmann(
    field: SchwarzschildField, x: Float[Array, "4"]
) -> Float[Array, ""]:
    return kretschmann_isotropic(x[1], x[2], x[3], field.M)


class FieldRegistry:
    """Name -> (field, ground truth) lookup.

    Usage::

        registry = create_default_registry()
        field, truth = registry.get("Schwarzschild")
        K = truth.kretschmann(field, x)
    """

    def __init__(self) -> None:
        self._entries: dict[str, tuple[MetricField, GroundTruth]] = {}

    def register(self, metric_field: MetricField, truth: GroundTruth) -> None:
        """Add a field under ``metric_field.name()``; names must be unique."""
        name = metric_field.name()
        if name in self._entries:
            raise ValueError(f"Field '{name}' is already registered")
        self._entries[name] = (metric_field, truth)

    def get(self, name: str) -> tuple[MetricField, GroundTruth]:
        """Field and ground truth for ``name``.

        Raises
        ------
        KeyError
            If *name* is not registered.
        """
        try:
            return self._entries[name]
        except KeyError:
            raise KeyError(
                f"Field '{name}' not registered. Available: {self.names()}"
            ) from None

    def names(self) -> list[str]:
        return sorted(self._entries)

    def __iter__(self) -> Iterator[tuple[str, MetricField, GroundTruth]]:
        for name in self.names():
            metric_field, truth = self._entries[name]
            yield name, metric_field, truth

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: str) -> bool:
        return name in self._entries


def create_default_registry() -> FieldRegistry:
    """Registry holding Minkowski, the Gaussian bump and Schwarzschild (M = 1)."""
    registry = FieldRegistry()
    registry.register(
        MinkowskiField(), GroundTruth(vacuum=True, kretschmann=_flat_kretschmann)
    )
    registry.register(GaussianBumpField(), GroundTruth(vacuum=False))
    registry.register(
        SchwarzschildField(),
        GroundTruth(vacuum=True, kretschmann=_schwarzschild_kretschmann),
    )
    return registry
