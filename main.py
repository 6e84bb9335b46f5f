# main.py
# Runs the trials of one sampler on the inverse-gamma target and appends a
# summary row per trial to a master CSV.

import argparse
import os

import numpy as np
import pandas as pd
from tqdm import tqdm

import analysis as an
import cache as _cache
import samplers as sp
from models import invgamma

_NON_TUNING = ("samples", "x")


def _trial_params(row):
    return {k: v for k, v in row.items() if k not in _NON_TUNING}


def run_trial(sampler, row, target, rng, burnin=0, true_mean=None):
    """
    Runs one row of a trial table.

    Returns:
        (dict, dict): the sampler output and its summary row.
    """
    params = _trial_params(row)
    result = sp.run_sampler(sampler, target.log_density, row["x"], int(row["samples"]), params, rng=rng)
    summary = an.summarize_chain(result, burnin=burnin, true_mean=true_mean)
    summary["sampler"] = sampler
    summary.update({k: v for k, v in row.items() if k != "pseudo"})
    return result, summary


def main(args):
    target_params = {"shape": args.shape, "scale": args.scale}
    target = invgamma.truth(target_params)
    true_mean = invgamma.mean(target_params)

    trials_path = _cache.cache_path("trials", args.sampler, "invgamma", args.seed,
                                    cache_dir=args.cache_dir, target_params=target_params)
    if not _cache.is_cached(trials_path):
        print(f"Error: no trial table at {trials_path}. Run main_trials.py first.")
        exit(1)
    table = _cache.load_trials(trials_path)

    stop = len(table) if args.stop is None else min(args.stop, len(table))
    print(f"--- Running {args.sampler} trials {args.start}..{stop - 1} of {len(table)} ---")

    summaries = []
    for i in tqdm(range(args.start, stop), desc=f"Trials ({args.sampler})"):
        row = table.iloc[i].to_dict()
        rng = np.random.default_rng([args.seed, i])
        result, summary = run_trial(args.sampler, row, target, rng, burnin=args.burnin, true_mean=true_mean)
        summary["row"] = i
        summaries.append(summary)

        if args.save_chains:
            chain_path = _cache.cache_path("chain", args.sampler, "invgamma", args.seed,
                                           cache_dir=args.cache_dir, target_params=target_params,
                                           row=i, ext="npz")
            _cache.save_chain(chain_path, result["draws"], result["n_evals"], result["time"], x0=row["x"])
        if args.plot_dir:
            os.makedirs(args.plot_dir, exist_ok=True)
            an.plot_chain_diagnostics(
                result["draws"], target=target, burnin=args.burnin,
                title=f"{args.sampler}: {row.get('t', _trial_params(row))}",
                save_path=os.path.join(args.plot_dir, f"{args.sampler}_row{i}.png"),
            )

    # Append results to the master CSV, writing the header only once
    df_summary = pd.DataFrame(summaries)
    os.makedirs(os.path.dirname(args.results) or ".", exist_ok=True)
    if not os.path.exists(args.results):
        df_summary.to_csv(args.results, index=False, mode='w', header=True)
    else:
        df_summary.to_csv(args.results, index=False, mode='a', header=False)
    print(f"\nResults for {len(df_summary)} trials appended to {args.results}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run slice-sampler trials on the inverse-gamma target.")
    parser.add_argument('--sampler', required=True, choices=list(sp.SAMPLERS),
                        help="Sampler whose trial table to run.")
    parser.add_argument('--start', type=int, default=0, help="First trial row.")
    parser.add_argument('--stop', type=int, default=None, help="One past the last trial row.")
    parser.add_argument('--burnin', type=int, default=0, help="Draws dropped before summarizing.")
    parser.add_argument('--shape', type=float, default=2.0, help="Inverse-gamma shape.")
    parser.add_argument('--scale', type=float, default=1.0, help="Inverse-gamma scale.")
    parser.add_argument('--seed', type=int, default=0)
    parser.add_argument('--cache-dir', default="cache")
    parser.add_argument('--results', default=None, help="Master CSV (default results/<sampler>_results.csv).")
    parser.add_argument('--save-chains', action='store_true', help="Keep every chain in the cache.")
    parser.add_argument('--plot-dir', default=None, help="Save a diagnostic plot per trial here.")

    args = parser.parse_args()
    if args.results is None:
        args.results = os.path.join("results", f"{args.sampler}_results.csv")
    main(args)
