"""
Trial tables for the inverse-gamma slice-sampler comparison. Every function is
pure: it returns a shuffled DataFrame with one row per (replicate, start,
tuning parameters) combination. Persisting the tables is left to cache.py.
"""

from itertools import product

import numpy as np
import pandas as pd

from pseudo_target import fit_trunc_cauchy, lapproxt, opt_t, pseudo_t


def _default_trial_params():
    return {
        "n_draws": 10_000,
        "n_reps": 10,
        "x0": (1.0,),
        # stepping out
        "w": tuple(float(w) for w in np.arange(0.5, 10.01, 0.5)),
        # gess
        "mu": (0.5, 1.0, 2.0),
        "sigma": (0.25, 0.5, 1.0, 2.0, 3.0, 4.0, 5.0),
        "df": (1.0, 5.0, 20.0),
        # latent
        "s": (3.0,),
        "rate": (0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 2.0),
        # random walk
        "c": (0.25,) + tuple(float(c) for c in np.arange(0.5, 7.51, 0.5)),
    }


def _build_params(params=None):
    base = _default_trial_params()
    if params:
        base.update(params)
    return base


def _expand(columns, seed):
    """All combinations of the given columns, in shuffled row order."""
    names = list(columns)
    rows = list(product(*(columns[name] for name in names)))
    df = pd.DataFrame(rows, columns=names)
    return df.sample(frac=1.0, random_state=seed).reset_index(drop=True)


def _samples_column(p):
    return [int(p["n_draws"])] * int(p["n_reps"])


def stepping_out_trials(params=None, seed=0):
    p = _build_params(params)
    return _expand({"samples": _samples_column(p), "x": p["x0"], "w": p["w"]}, seed)


def gess_trials(params=None, seed=0):
    p = _build_params(params)
    return _expand({
        "samples": _samples_column(p), "x": p["x0"],
        "mu": p["mu"], "sigma": p["sigma"], "df": p["df"],
    }, seed)


def latent_trials(params=None, seed=0):
    p = _build_params(params)
    return _expand({"samples": _samples_column(p), "x": p["x0"], "s": p["s"], "rate": p["rate"]}, seed)


def rand_walk_trials(params=None, seed=0):
    p = _build_params(params)
    return _expand({"samples": _samples_column(p), "x": p["x0"], "c": p["c"]}, seed)


def transform_trials(pseudo_targets, params=None, seed=0):
    """One row per replicate, start and pseudo-target; the label goes in column 't'."""
    p = _build_params(params)
    df = _expand({
        "samples": _samples_column(p), "x": p["x0"],
        "pseudo_index": tuple(range(len(pseudo_targets))),
    }, seed)
    df["pseudo"] = [pseudo_targets[i] for i in df["pseudo_index"]]
    df["t"] = [pseudo_targets[i].label for i in df["pseudo_index"]]
    return df.drop(columns="pseudo_index")


def invgamma_pseudo_targets(burnin_samples, target, coeffs=(0.0, 0.5, 1.0, 2.0), verbose=False):
    """
    Pseudo-targets for the transform trials on a target supported on (0, inf):
    three hand-picked half-Cauchy fits, the truncated-Cauchy MLE on burn-in
    draws, a Laplace approximation, and opt_t() fits for each penalty weight,
    from samples ('OS') and from the target function ('O'), with the mean
    slice width or the AUC ('AUC' suffix) as base utility.
    """
    pseudos = [
        pseudo_t(loc=0.41, sc=0.38, degf=1, lb=0, name="Man"),
        pseudo_t(loc=0.37, sc=0.44, degf=1, lb=0, name="Man"),
        pseudo_t(loc=0.33, sc=0.47, degf=1, lb=0, name="Man"),
    ]

    fit = fit_trunc_cauchy(burnin_samples, lb=0)
    pseudos.append(pseudo_t(loc=fit["loc"], sc=fit["sc"], degf=1, lb=0, name="Auto"))
    pseudos.append(lapproxt(target.log_density, init=1.0, lb=0, degf=1))

    settings = [
        ("samples", True, "OS"),
        ("samples", False, "OSAUC"),
        ("function", True, "O"),
        ("function", False, "OAUC"),
    ]
    for type, use_msw, tag in settings:
        for c2 in coeffs:
            if verbose:
                print(f"Fitting pseudo-target: type={type}, c2={c2}, mean slice width={use_msw}")
            res = opt_t(
                target=target, samples=burnin_samples if type == "samples" else None,
                type=type, nbins=30, coeffs=(1.0, c2), lb=0, degf=(1,),
                use_mean_slice_width=use_msw,
            )
            pseudos.append(pseudo_t(
                loc=res.pseudo.loc, sc=res.pseudo.sc, degf=res.pseudo.degf, lb=0,
                name=f"c2:{c2:g} {tag}",
            ))
    return pseudos


TRIAL_BUILDERS = {
    "stepping_out": stepping_out_trials,
    "gess": gess_trials,
    "latent": latent_trials,
    "rand_walk": rand_walk_trials,
}
