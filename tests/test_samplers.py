import numpy as np
import pytest
import scipy.stats as stats

import samplers as sp
from models import invgamma
from pseudo_target import pseudo_t

PARAMS = {
    "stepping_out": {"w": 2.0},
    "gess": {"mu": 0.0, "sigma": 1.5, "df": 5.0},
    "latent": {"s": 3.0, "rate": 0.5},
    "rand_walk": {"c": 2.5},
    "transform": {"pseudo": pseudo_t(0.0, 1.5, 5.0)},
}


@pytest.mark.parametrize("name", list(sp.SAMPLERS))
def test_normal_moments(name):
    rng = np.random.default_rng(11)
    res = sp.run_sampler(name, stats.norm.logpdf, 0.5, 5000, PARAMS[name], rng=rng)
    draws = res["draws"]
    assert res["sampler"] == name
    assert draws.shape == (5000,)
    assert abs(draws.mean()) < 0.2
    assert draws.var() == pytest.approx(1.0, abs=0.25)
    assert res["n_evals"] >= 5000
    assert res["time"] >= 0.0


def test_stepping_out_limited_steps():
    rng = np.random.default_rng(3)
    res = sp.run_sampler("stepping_out", stats.norm.logpdf, 0.0, 2000, {"w": 0.5, "max_steps": 4}, rng=rng)
    assert np.all(np.isfinite(res["draws"]))


def test_rand_walk_counts_two_evals_per_step():
    res = sp.run_sampler("rand_walk", stats.norm.logpdf, 0.0, 100, {"c": 1.0}, rng=np.random.default_rng(0))
    assert res["n_evals"] == 200


def test_latent_width_refreshes():
    rng = np.random.default_rng(5)
    x, s, n = sp.latent(0.0, 3.0, stats.norm.logpdf, 0.5, rng)
    assert s != 3.0 and s > 0.0
    assert n >= 2


def test_transform_respects_support():
    target = invgamma.truth()
    pseudo = pseudo_t(0.4, 0.4, 1.0, lb=0.0)
    res = sp.run_sampler("transform", target.log_density, 1.0, 3000, {"pseudo": pseudo},
                         rng=np.random.default_rng(9))
    assert np.all(res["draws"] > 0.0)
    assert np.median(res["draws"]) == pytest.approx(stats.invgamma.median(2.0), rel=0.15)


def test_unknown_sampler():
    with pytest.raises(ValueError):
        sp.run_sampler("hmc", stats.norm.logpdf, 0.0, 10, {})
