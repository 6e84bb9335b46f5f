"""
Inverse-gamma target (shape a, scale b), support (0, inf). Sampling is done
as b / Gamma(a, 1) with jax.random.
"""

import numpy as np
import scipy.stats as stats
import jax
jax.config.update("jax_enable_x64", True)
from jax import random

from .target import Target


def _default_params():
    return {"shape": 2.0, "scale": 1.0, "n": 5000}


def truth(params=None):
    """Target with the inverse-gamma density and log density."""
    p = _default_params()
    if params:
        p.update(params)
    a, b = p["shape"], p["scale"]

    def log_density(x):
        x = np.asarray(x, dtype=float)
        with np.errstate(divide="ignore", invalid="ignore"):
            out = stats.invgamma.logpdf(x, a, scale=b)
        return np.where(x > 0.0, out, -np.inf)

    def density(x):
        return np.exp(log_density(x))

    return Target(density=density, log_density=log_density, lb=0.0, ub=np.inf,
                  label=f"invgamma(shape = {a:g}, scale = {b:g})")


def sample_data(key, params=None):
    """Draw params['n'] values from the inverse gamma."""
    p = _default_params()
    if params:
        p.update(params)
    g = random.gamma(key, p["shape"], shape=(int(p["n"]),))
    return np.asarray(p["scale"] / g)


def mean(params=None):
    p = _default_params()
    if params:
        p.update(params)
    return p["scale"] / (p["shape"] - 1.0) if p["shape"] > 1.0 else np.inf
