import os

import numpy as np
import pandas as pd

import cache as _cache
import trials
from pseudo_target import pseudo_t


def test_cache_path():
    path = _cache.cache_path("trials", "gess", "invgamma", 7, cache_dir="c",
                             target_params={"shape": 2.5, "scale": 1.0})
    assert path == os.path.join("c", "trials_gess_invgamma_scale1p0_shape2p5_seed7.pkl")
    path = _cache.cache_path("chain", "latent", "invgamma", 0, row=3, ext="npz")
    assert path == os.path.join("cache", "chain_latent_invgamma_row3_seed0.npz")


def test_trials_round_trip(tmp_path):
    pseudos = [pseudo_t(0.4, 0.4, 1, lb=0, name="Man")]
    table = trials.transform_trials(pseudos, {"n_draws": 10, "n_reps": 3})
    path = str(tmp_path / "sub" / "trials.pkl")
    assert not _cache.is_cached(path)
    _cache.save_trials(path, table)
    assert _cache.is_cached(path)
    loaded = _cache.load_trials(path)
    pd.testing.assert_frame_equal(loaded.drop(columns="pseudo"), table.drop(columns="pseudo"))
    assert loaded["pseudo"].iloc[0].norm_const == pseudos[0].norm_const


def test_chain_round_trip(tmp_path):
    path = str(tmp_path / "chain.npz")
    draws = np.linspace(0.0, 1.0, 50)
    _cache.save_chain(path, draws, 123, 0.25, x0=1.0)
    out = _cache.load_chain(path)
    np.testing.assert_array_equal(out["draws"], draws)
    assert out["n_evals"] == 123
    assert out["time"] == 0.25
    assert out["x0"] == 1.0
