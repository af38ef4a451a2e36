"""Bundled metric fields, potentials, CallableField and the registry."""

import equinox as eqx
import jax
import jax.numpy as jnp
import numpy as np
import pytest
import sympy as sp

from lorentzkit.fields import (
    CallableField,
    FieldRegistry,
    GaussianBumpField,
    GroundTruth,
    MetricField,
    MinkowskiField,
    RadialPotential,
    SchwarzschildField,
    ZeroPotential,
    create_default_registry,
)
from lorentzkit.geometry import SymbolicMetric, sympy_metric_to_jax, validate_signature

TEST_POINTS = [
    jnp.array([0.0, 1.0, 2.0, 3.0]),
    jnp.array([0.3, 0.1, -0.2, 0.05]),
    jnp.array([0.0, 5.0, 0.0, 0.0]),
]


class TestBundledFields:
    def test_shapes_dtypes_and_symmetry(self, all_fields):
        for field in all_fields:
            for coords in TEST_POINTS:
                g = field(coords)
                assert g.shape == (4, 4)
                assert g.dtype == jnp.float64
                np.testing.assert_array_equal(g, g.T)

    def test_all_lorentzian(self, all_fields):
        for field in all_fields:
            inertia = validate_signature(field(TEST_POINTS[1]))
            assert bool(inertia.is_lorentzian), field.name()

    def test_bump_decays_to_minkowski(self):
        g = GaussianBumpField(amplitude=0.5)(jnp.array([0.0, 10.0, 0.0, 0.0]))
        np.testing.assert_allclose(g, np.diag([-1.0, 1.0, 1.0, 1.0]), atol=1e-15)

    def test_bump_at_origin(self, origin_coords):
        g = GaussianBumpField(amplitude=0.2)(origin_coords)
        np.testing.assert_allclose(jnp.diag(g), [-1.2, 1.2, 1.2, 1.2], atol=1e-14)

    def test_oversized_bump_stays_lorentzian(self, origin_coords):
        g = GaussianBumpField(amplitude=-3.0)(origin_coords)
        assert bool(validate_signature(g).is_lorentzian)

    def test_jaxtyping_rejects_wrong_shape(self):
        with pytest.raises(Exception):
            MinkowskiField()(jnp.zeros(3))

    def test_amplitude_is_dynamic_leaf(self):
        leaves = jax.tree_util.tree_leaves(GaussianBumpField(amplitude=0.3))
        assert leaves == [0.3]

    def test_vmap_over_points(self, bump):
        gs = jax.vmap(bump)(jnp.stack(TEST_POINTS))
        assert gs.shape == (3, 4, 4)

    def test_names(self):
        assert MinkowskiField().name() == "Minkowski"
        assert GaussianBumpField().name() == "GaussianBump"
        assert SchwarzschildField().name() == "Schwarzschild"

    def test_abstract_base_cannot_be_instantiated(self):
        with pytest.raises(TypeError):
            MetricField()


class TestSympyBridge:
    @pytest.mark.parametrize(
        "field, subs",
        [
            (MinkowskiField(), {}),
            (GaussianBumpField(amplitude=1e-2), {sp.Symbol("a", real=True): 1e-2}),
            (SchwarzschildField(M=1.0), {sp.Symbol("M", positive=True): 1.0}),
        ],
    )
    def test_symbolic_matches_numeric(self, field, subs):
        sm = field.symbolic()
        fn = CallableField.from_symbolic(
            SymbolicMetric(sm.coords, sm.g.subs(subs))
        )
        for coords in TEST_POINTS:
            np.testing.assert_allclose(fn(coords), field(coords), rtol=1e-12, atol=1e-14)

    def test_bridge_returns_float64(self):
        g = sympy_metric_to_jax(MinkowskiField().symbolic())(TEST_POINTS[0])
        assert g.dtype == jnp.float64


class TestCallableField:
    def test_wraps_function(self, eta):
        field = CallableField(fn=lambda x: jnp.diag(jnp.array([-1.0, 1.0, 1.0, 1.0])), label="Flat")
        np.testing.assert_array_equal(field(TEST_POINTS[0]), eta)
        assert field.name() == "Flat"

    def test_wrong_shape_raises(self):
        field = CallableField(fn=lambda x: jnp.eye(3))
        with pytest.raises(ValueError, match=r"\(4, 4\)"):
            field(TEST_POINTS[0])

    def test_symbolic_missing_raises(self):
        with pytest.raises(NotImplementedError):
            CallableField(fn=lambda x: jnp.eye(4)).symbolic()

    def test_from_symbolic_rejects_free_parameters(self):
        with pytest.raises(ValueError, match="unsubstituted"):
            CallableField.from_symbolic(GaussianBumpField().symbolic())

    def test_function_is_static(self):
        field = CallableField(fn=lambda x: jnp.eye(4))
        assert jax.tree_util.tree_leaves(field) == []

    def test_usable_under_jit(self):
        field = CallableField(fn=lambda x: jnp.diag(jnp.array([-1.0, 1.0, 1.0, 1.0]) * (1.0 + x[1] ** 2)))
        g = eqx.filter_jit(lambda f, p: f(p))(field, TEST_POINTS[0])
        np.testing.assert_allclose(jnp.diag(g), [-2.0, 2.0, 2.0, 2.0])


class TestPotentials:
    def test_zero(self):
        assert float(ZeroPotential()(TEST_POINTS[0])) == 0.0

    def test_radial_ignores_time(self):
        V = RadialPotential(k=2.0)
        assert float(V(jnp.array([7.0, 1.0, 2.0, 3.0]))) == pytest.approx(14.0)
        assert float(V(jnp.array([0.0, 1.0, 2.0, 3.0]))) == pytest.approx(14.0)


class TestRegistry:
    def test_default_registry(self):
        reg = create_default_registry()
        assert len(reg) == 3
        assert reg.names() == ["GaussianBump", "Minkowski", "Schwarzschild"]
        field, truth = reg.get("Schwarzschild")
        assert isinstance(field, SchwarzschildField)
        assert truth.vacuum
        assert truth.kretschmann is not None
        assert "Minkowski" in reg

    def test_bump_has_no_closed_form(self):
        _, truth = create_default_registry().get("GaussianBump")
        assert not truth.vacuum
        assert truth.kretschmann is None

    def test_unknown_name(self):
        with pytest.raises(KeyError, match="not registered"):
            FieldRegistry().get("Kerr")

    def test_duplicate_name_rejected(self):
        reg = FieldRegistry()
        reg.register(MinkowskiField(), GroundTruth(vacuum=True))
        with pytest.raises(ValueError, match="already registered"):
            reg.register(MinkowskiField(), GroundTruth(vacuum=True))

    def test_register_custom(self):
        reg = FieldRegistry()
        euclid = CallableField(fn=lambda x: jnp.eye(4), label="Euclid")
        reg.register(euclid, GroundTruth(vacuum=True, asymptotically_flat=False))
        field, truth = reg.get("Euclid")
        assert field is euclid
        assert not truth.asymptotically_flat
        assert list(reg) == [("Euclid", euclid, truth)]
