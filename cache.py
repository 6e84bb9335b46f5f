"""
Cache layer: save/load trial tables and sampler chains. Keys include sampler, target and seed.
"""

import os
import numpy as np
import pandas as pd


def _param_suffix(params):
    """Filesystem-safe suffix for target parameters (e.g. _shape2_scale1)."""
    if not params:
        return ""
    parts = []
    for key in sorted(params):
        v = str(params[key]).replace(".", "p").replace("-", "m")
        parts.append(f"{key}{v}")
    return "_" + "_".join(parts)


def cache_path(prefix, sampler, target, seed, cache_dir="cache", target_params=None, row=None, ext="pkl"):
    """
    prefix: 'trials' for trial tables, 'chain' for sampler output.
    target: model name, e.g. 'invgamma'.
    target_params: included in the file name so tables for different targets never collide.
    row: trial row index, for chains only.
    """
    row_part = f"_row{row}" if row is not None else ""
    fname = f"{prefix}_{sampler}_{target}{_param_suffix(target_params)}{row_part}_seed{seed}.{ext}"
    return os.path.join(cache_dir, fname)


def is_cached(path):
    return os.path.isfile(path)


def save_trials(path, trials):
    # pickle keeps the PseudoTarget objects of the transform table intact
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    trials.to_pickle(path)


def load_trials(path):
    return pd.read_pickle(path)


def save_chain(path, draws, n_evals, elapsed, x0=None):
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    kwargs = {
        "draws": np.asarray(draws),
        "n_evals": np.int64(n_evals),
        "time": np.float64(elapsed),
    }
    if x0 is not None:
        kwargs["x0"] = np.float64(x0)
    np.savez(path, **kwargs)


def load_chain(path):
    d = np.load(path)
    out = {
        "draws": d["draws"],
        "n_evals": int(d["n_evals"]),
        "time": float(d["time"]),
    }
    if "x0" in d:
        out["x0"] = float(d["x0"])
    return out
