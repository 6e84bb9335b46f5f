"""Normal target, mostly used to check the samplers and the pseudo-target fits."""

import numpy as np
import scipy.stats as stats
import jax
jax.config.update("jax_enable_x64", True)
from jax import random

from .target import Target


def _default_params():
    return {"loc": 0.0, "scale": 1.0, "n": 5000}


def truth(params=None):
    p = _default_params()
    if params:
        p.update(params)
    loc, scale = p["loc"], p["scale"]

    def log_density(x):
        return stats.norm.logpdf(x, loc=loc, scale=scale)

    def density(x):
        return stats.norm.pdf(x, loc=loc, scale=scale)

    return Target(density=density, log_density=log_density,
                  label=f"normal(loc = {loc:g}, scale = {scale:g})")


def sample_data(key, params=None):
    p = _default_params()
    if params:
        p.update(params)
    z = random.normal(key, shape=(int(p["n"]),))
    return np.asarray(p["loc"] + p["scale"] * z)
