"""Shared test fixtures for the lorentzkit test suite.

Float64 enforcement is verified at import time.  Finite-difference
tolerances throughout the suite assume double precision.
"""

import jax.numpy as jnp
import pytest

import lorentzkit  # noqa: F401  (enables x64)
from lorentzkit.fields import (
    GaussianBumpField,
    MinkowskiField,
    SchwarzschildField,
)
from lorentzkit.telemetry import RecordingSink

# ---------------------------------------------------------------------------
# Float64 enforcement check fails LOUD if x64 is not enabled
# ---------------------------------------------------------------------------
_probe = jnp.array(1.0)
assert _probe.dtype == jnp.float64, (
    f"JAX float64 not enabled!  Got dtype={_probe.dtype}.  "
    "Importing lorentzkit should run jax.config.update('jax_enable_x64', True)."
)


# ---------------------------------------------------------------------------
# Coordinate fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_coords() -> jnp.ndarray:
    """Standard test coordinate 4-tuple (t, x, y, z)."""
    return jnp.array([0.1, 0.3, -0.2, 0.25])


@pytest.fixture
def origin_coords() -> jnp.ndarray:
    return jnp.array([0.0, 0.0, 0.0, 0.0])


@pytest.fixture
def eta() -> jnp.ndarray:
    return jnp.diag(jnp.array([-1.0, 1.0, 1.0, 1.0]))


@pytest.fixture
def perturbed_metric() -> jnp.ndarray:
    """Generic invertible symmetric perturbation of eta (still Lorentzian)."""
    p = jnp.array([
        [0.00, 0.05, -0.02, 0.01],
        [0.05, 0.10, 0.03, -0.04],
        [-0.02, 0.03, -0.05, 0.02],
        [0.01, -0.04, 0.02, 0.07],
    ])
    return jnp.diag(jnp.array([-1.0, 1.0, 1.0, 1.0])) + p


# ---------------------------------------------------------------------------
# Field fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def minkowski() -> MinkowskiField:
    return MinkowskiField()


@pytest.fixture
def bump() -> GaussianBumpField:
    return GaussianBumpField(amplitude=1e-2)


@pytest.fixture
def schwarzschild() -> SchwarzschildField:
    return SchwarzschildField(M=1.0)


@pytest.fixture
def all_fields() -> list:
    """All bundled fields for parameterized smoke tests."""
    return [MinkowskiField(), GaussianBumpField(), SchwarzschildField()]


@pytest.fixture
def recorder() -> RecordingSink:
    return RecordingSink()
