"""Structured diagnostic events and the sinks that receive them.

The numeric core never formats strings and never branches on a sink.  It
hands ``(level, scope, key, value)`` tuples to an optional callable through
:func:`emit`, which routes the call through ``jax.debug.callback`` so the
same code works eagerly, under ``jax.jit`` and under ``jax.vmap``.

Throttling and formatting live here, in the sinks, not in the core.
"""
from __future__ import annotations

import enum
import logging
from typing import Any, Callable, NamedTuple

import jax
import jax.numpy as jnp
import numpy as np

logger = logging.getLogger(__name__)


class Level(enum.IntEnum):
    """Diagnostic severity, aligned with the stdlib ``logging`` levels."""

    TRACE = 5
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARN = logging.WARNING
    ERROR = logging.ERROR


class DiagnosticEvent(NamedTuple):
    """A single structured diagnostic emitted by the numeric core."""

    level: Level
    scope: str
    key: str
    value: Any


Sink = Callable[[Level, str, str, Any], None]


def _to_python(value: Any) -> Any:
    arr = np.asarray(value)
    if arr.ndim == 0:
        return arr.item()
    return arr


def emit(
    sink: Sink | None,
    level: Level,
    scope: str,
    key: str,
    value: Any,
    when: Any = None,
) -> None:
    """Send ``value`` to ``sink`` as a structured event.

    Parameters
    ----------
    sink : callable or None
        Receiver with signature ``sink(level, scope, key, value)``.  When
        ``None`` nothing happens (no callback is even staged).
    level : Level
        Severity of the event.
    scope : str
        Subsystem name, e.g. ``"metric"`` or ``"tetrad"``.
    key : str
        Quantity name within the scope.
    value : array-like
        Payload.  Arrays arrive in the sink as Python scalars (0-d) or
        NumPy arrays.
    when : bool array or None
        Optional predicate; the sink is only called when it is true.
    """
    if sink is None:
        return

    def _deliver(payload, flag):
        if flag is not None and not bool(np.asarray(flag)):
            return
        sink(level, scope, key, _to_python(payload))

    flag = None if when is None else jnp.asarray(when)
    jax.debug.callback(_deliver, jnp.asarray(value), flag)


class LoggingSink:
    """Forward diagnostics to the stdlib ``logging`` tree.

    Events land on the logger ``<prefix>.<scope>`` so that applications can
    tune verbosity per subsystem with ordinary logging configuration.
    """

    def __init__(self, prefix: str = "lorentzkit") -> None:
        self.prefix = prefix

    def __call__(self, level: Level, scope: str, key: str, value: Any) -> None:
        logging.getLogger(f"{self.prefix}.{scope}").log(
            int(level), "%s=%s", key, value
        )


class RecordingSink:
    """Keep every event in memory (handy in tests and notebooks)."""

    def __init__(self) -> None:
        self.events: list[DiagnosticEvent] = []

    def __call__(self, level: Level, scope: str, key: str, value: Any) -> None:
        self.events.append(DiagnosticEvent(Level(level), scope, key, value))

    def find(self, scope: str, key: str | None = None) -> list[DiagnosticEvent]:
        """Events matching ``scope`` (and ``key`` when given)."""
        return [
            e for e in self.events
            if e.scope == scope and (key is None or e.key == key)
        ]

    def clear(self) -> None:
        self.events.clear()


class ThrottledSink:
    """Pass through the first ``first`` events per ``(scope, key)``, then
    one every ``stride`` events.

    Hot loops (finite-difference stencils, integrator steps) can emit the
    same key thousands of times; this keeps the log readable without the
    core having to count anything.
    """

    def __init__(self, inner: Sink, first: int = 4, stride: int = 1000) -> None:
        if first < 0 or stride < 0:
            raise ValueError(
                f"first and stride must be non-negative, got {first}, {stride}"
            )
        self.inner = inner
        self.first = first
        self.stride = stride
        self._counts: dict[tuple[str, str], int] = {}

    def __call__(self, level: Level, scope: str, key: str, value: Any) -> None:
        n = self._counts.get((scope, key), 0) + 1
        self._counts[(scope, key)] = n
        if n <= self.first or (self.stride and n % self.stride == 0):
            self.inner(level, scope, key, value)
        elif n == self.first + 1:
            logger.debug("throttling diagnostics for %s.%s", scope, key)
