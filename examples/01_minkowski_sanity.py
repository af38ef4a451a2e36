"""Minkowski spacetime sanity check.

Demonstrates lorentzkit basics: metric evaluation, the finite-difference
curvature chain, the tetrad and the stress-energy residual on flat
spacetime, where every curvature tensor must vanish.

Verifies:
- Christoffel, Riemann, Ricci and Einstein are zero
- The tetrad reproduces eta and its E E^T proxy is positive definite
- A boosted observer has gamma = 1.25 at v = 0.6
"""

import jax.numpy as jnp

from lorentzkit import GeometryConfig, LoggingSink
from lorentzkit.audits import time_dilation
from lorentzkit.fields import MinkowskiField
from lorentzkit.geometry import build_tetrad, compute_curvature_chain, is_pd
from lorentzkit.physics import Event, residual_norm

cfg = GeometryConfig()
field = MinkowskiField()
coords = jnp.array([0.0, 1.0, 1.0, 0.0])  # (t, x, y, z)

result = compute_curvature_chain(field, coords, cfg.fd_h, cfg.inv_eps)

print("Minkowski Spacetime Sanity Check")
print("=" * 40)
print(f"Metric tensor:\n{result.metric}")
print(f"Inverse ok: {bool(result.inv_ok)}")
print(f"Max |Christoffel|: {jnp.max(jnp.abs(result.christoffel)):.2e}")
print(f"Max |Riemann|: {jnp.max(jnp.abs(result.riemann)):.2e}")
print(f"Ricci scalar: {result.ricci_scalar:.2e}")
print(f"Max |Einstein|: {jnp.max(jnp.abs(result.einstein)):.2e}")

tetrad = build_tetrad(result.metric, cfg.g_eps, sink=LoggingSink())
print(f"Tetrad residual: {tetrad.residual:.2e}")

td = time_dilation(result.metric, jnp.array([1.25, 0.75, 0.0, 0.0]))
print(f"Boosted observer: gamma={td.gamma:.6f}, v={td.v_norm:.6f}")

events = [Event(position=coords, velocity=jnp.array([1.0, 0.0, 0.0, 0.0]))]
residual = residual_norm(field, events, coords, h=cfg.fd_h, inv_eps=cfg.inv_eps)
print(f"||G - kappa T||_F with one event: {residual:.4e}")

assert jnp.max(jnp.abs(result.riemann)) < 1e-6, "Riemann should be zero!"
assert tetrad.residual < 1e-12, "Tetrad should reproduce eta!"
assert is_pd(tetrad.pd_proxy), "E E^T should be positive definite!"
assert abs(td.gamma - 1.25) < 1e-6, "gamma should be 1.25!"

print("\nAll sanity checks passed!")
