"""User-defined metric fields wrapping a plain function."""

from __future__ import annotations

from typing import Callable

import equinox as eqx
import jax.numpy as jnp
from jaxtyping import Array, Float

from ..geometry.metric import SymbolicMetric, sympy_metric_to_jax
from .base import MetricField


class CallableField(MetricField):
    """Metric field backed by an arbitrary ``coords (4,) -> g (4, 4)`` function.

    The function is stored as static pytree metadata, so it should be pure
    and written with ``jax.numpy``.  The output is cast to float64 and
    shape-checked at trace time.

    Parameters
    ----------
    fn : callable
        The metric function.
    label : str
        Name reported by :meth:`name`.
    symbolic_form : SymbolicMetric or None
        Optional exact form used for cross-validation.
    """

    fn: Callable[[Float[Array, "4"]], Float[Array, "4 4"]] = eqx.field(static=True)
    label: str = eqx.field(static=True, default="Custom")
    symbolic_form: SymbolicMetric | None = eqx.field(static=True, default=None)

    def __call__(self, coords: Float[Array, "4"]) -> Float[Array, "4 4"]:
        g = jnp.asarray(self.fn(coords), dtype=jnp.float64)
        if g.shape != (4, 4):
            raise ValueError(
                f"Metric function for '{self.label}' returned shape {g.shape}, "
                f"expected (4, 4)"
            )
        return g

    def symbolic(self) -> SymbolicMetric:
        if self.symbolic_form is None:
            raise NotImplementedError(
                f"Field '{self.label}' was built without a symbolic form"
            )
        return self.symbolic_form

    def name(self) -> str:
        return self.label

    @classmethod
    def from_symbolic(
        cls, symbolic_metric: SymbolicMetric, label: str = "Symbolic"
    ) -> "CallableField":
        """Lambdify a fully numeric SymbolicMetric into a field.

        Every free symbol other than the four coordinates must already be
        substituted.
        """
        extra = symbolic_metric.g.free_symbols - set(symbolic_metric.coords)
        if extra:
            raise ValueError(
                f"Symbolic metric has unsubstituted parameters: "
                f"{sorted(str(s) for s in extra)}"
            )
        return cls(
            fn=sympy_metric_to_jax(symbolic_metric),
            label=label,
            symbolic_form=symbolic_metric,
        )
