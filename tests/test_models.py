import numpy as np
import pytest
import scipy.stats as stats
from jax import random
from scipy.integrate import quad

from models import invgamma, normal


def test_invgamma_truth():
    target = invgamma.truth({"shape": 3.0, "scale": 2.0})
    total, _ = quad(lambda x: float(target.density(x)), 0.0, np.inf)
    assert total == pytest.approx(1.0, abs=1e-6)
    assert np.isneginf(target.log_density(-1.0))
    assert np.isneginf(target.log_density(0.0))
    assert target.lb == 0.0
    assert target.label == "invgamma(shape = 3, scale = 2)"


def test_invgamma_samples():
    draws = invgamma.sample_data(random.PRNGKey(0), {"n": 20000})
    assert draws.shape == (20000,)
    assert np.all(draws > 0.0)
    assert np.median(draws) == pytest.approx(stats.invgamma.median(2.0), rel=0.05)


def test_invgamma_mean():
    assert invgamma.mean() == pytest.approx(1.0)
    assert invgamma.mean({"shape": 3.0, "scale": 4.0}) == pytest.approx(2.0)
    assert np.isinf(invgamma.mean({"shape": 1.0}))


def test_normal():
    target = normal.truth({"loc": 1.0, "scale": 2.0})
    assert target.density(1.0) == pytest.approx(stats.norm.pdf(0.0) / 2.0)
    draws = normal.sample_data(random.PRNGKey(1), {"loc": 1.0, "scale": 2.0, "n": 20000})
    assert draws.mean() == pytest.approx(1.0, abs=0.1)
    assert draws.std() == pytest.approx(2.0, rel=0.05)
