"""
Checks on pseudo-targets: the masked density carries mass norm_const over the
truncated support, and the quantile function inverts the distribution function.
"""

import numpy as np
from scipy.integrate import quad


def integrate_density(pdf, lo, hi, n_grid=20001):
    """
    Trapezoid integral of a density on [lo, hi]; should be close to 1.0 for a
    normalized density when [lo, hi] covers the support.
    """
    x_grid = np.linspace(lo, hi, n_grid)
    vals = np.maximum(pdf(x_grid), 0.0)
    return float(np.trapezoid(vals, x_grid))


def validate_pseudo_target(pseudo, n_u=199, verbose=False):
    """
    Validate a PseudoTarget.

    Returns:
        dict: 'integral' (quad of the density over its support, which should
        match 'norm_const'), 'grid_integral' (trapezoid check between the 0.1%
        and 99.9% quantiles, renormalized and plus the tail mass outside them,
        so close to 1.0), and 'max_roundtrip_error' of distribution(quantile(u)).
    """
    # split at the location so quad sees the peak
    mid = float(np.clip(pseudo.loc, pseudo.lb, pseudo.ub))
    left, _ = quad(lambda x: float(pseudo.density(x)), pseudo.lb, mid, limit=200)
    right, _ = quad(lambda x: float(pseudo.density(x)), mid, pseudo.ub, limit=200)
    integral = left + right

    q_lo, q_hi = pseudo.quantile(np.array([1e-3, 1.0 - 1e-3]))
    grid_integral = integrate_density(pseudo.density, q_lo, q_hi) / pseudo.norm_const + 2e-3

    u = np.linspace(0.0, 1.0, n_u + 2)[1:-1]
    roundtrip = pseudo.distribution(pseudo.quantile(u))
    max_err = float(np.max(np.abs(roundtrip - u)))

    out = {
        "integral": integral,
        "norm_const": pseudo.norm_const,
        "grid_integral": grid_integral,
        "max_roundtrip_error": max_err,
    }
    if verbose:
        print(f"{pseudo.label}: integral = {integral:.6f} (norm_const = {pseudo.norm_const:.6f}), "
              f"grid = {grid_integral:.6f}, round-trip error = {max_err:.2e}")
    return out
