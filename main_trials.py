# main_trials.py
# Builds the trial tables of the inverse-gamma slice-sampler comparison and
# saves them to the cache directory, one file per sampler.

import argparse

import jax
jax.config.update("jax_enable_x64", True)
from jax import random

import cache as _cache
import trials
from models import invgamma

_ALL_SAMPLERS = list(trials.TRIAL_BUILDERS) + ["transform"]


def build_trials(sampler, target_params, trial_params, seed=0, n_burnin=5000, verbose=True):
    """
    Returns the trial table of one sampler. The transform table needs
    pseudo-targets, which are fitted to burn-in draws from the target.
    """
    if sampler == "transform":
        key = random.PRNGKey(seed)
        burnin = invgamma.sample_data(key, {**target_params, "n": n_burnin})
        target = invgamma.truth(target_params)
        pseudos = trials.invgamma_pseudo_targets(burnin, target, verbose=verbose)
        if verbose:
            for pseu in pseudos:
                print(f"  {pseu.label}")
        return trials.transform_trials(pseudos, trial_params, seed=seed)
    if sampler not in trials.TRIAL_BUILDERS:
        raise ValueError(f"Unknown sampler: {sampler}. Use one of {_ALL_SAMPLERS}")
    return trials.TRIAL_BUILDERS[sampler](trial_params, seed=seed)


def main(args):
    target_params = {"shape": args.shape, "scale": args.scale}
    trial_params = {"n_draws": args.n_draws, "n_reps": args.n_reps}
    samplers = _ALL_SAMPLERS if args.sampler == "all" else [args.sampler]

    for sampler in samplers:
        print(f"\n--- Building trials for {sampler} ---")
        table = build_trials(sampler, target_params, trial_params, seed=args.seed, n_burnin=args.n_burnin)
        path = _cache.cache_path("trials", sampler, "invgamma", args.seed,
                                 cache_dir=args.cache_dir, target_params=target_params)
        _cache.save_trials(path, table)
        print(f"{len(table)} trials saved to: {path}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create the trial tables for the inverse-gamma target.")
    parser.add_argument('--sampler', default="all", choices=_ALL_SAMPLERS + ["all"],
                        help="Sampler to build trials for.")
    parser.add_argument('--shape', type=float, default=2.0, help="Inverse-gamma shape.")
    parser.add_argument('--scale', type=float, default=1.0, help="Inverse-gamma scale.")
    parser.add_argument('--n-draws', type=int, default=10_000, help="Draws per chain.")
    parser.add_argument('--n-reps', type=int, default=10, help="Replicates of each setting.")
    parser.add_argument('--n-burnin', type=int, default=5000,
                        help="Target draws used to fit the transform pseudo-targets.")
    parser.add_argument('--seed', type=int, default=0)
    parser.add_argument('--cache-dir', default="cache")

    args = parser.parse_args()
    main(args)
