import arviz as az
import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
import seaborn as sns

# ==============================================================================
# --- Chain Summaries
# ==============================================================================

def effective_sample_size(x):
    """Bulk effective sample size of a single chain, from arviz."""
    x = np.asarray(x, dtype=float)
    if x.size < 4 or np.var(x) == 0.0:
        return np.nan
    return float(az.ess(x[None, :]))


def summarize_chain(result, burnin=0, true_mean=None):
    """
    Summarizes the output of samplers.run_sampler().

    Args:
        result (dict): Needs 'draws', 'n_evals' and 'time'.
        burnin (int): number of leading draws to drop.
        true_mean (float, optional): adds the bias of the chain mean.

    Returns:
        dict: one row of the trial results table.
    """
    draws = np.asarray(result["draws"])
    if not 0 <= burnin < draws.size:
        raise ValueError(f"burnin must lie in [0, {draws.size}), got {burnin}")
    draws = draws[burnin:]
    ess = effective_sample_size(draws)
    elapsed = result["time"]
    n_evals = result["n_evals"]
    summary = {
        "n_draws": draws.size,
        "mean": float(draws.mean()),
        "var": float(draws.var(ddof=1)),
        "ess": ess,
        "time": elapsed,
        "n_evals": n_evals,
        "evals_per_draw": n_evals / len(result["draws"]),
        "ess_per_sec": ess / elapsed if elapsed > 0 else np.nan,
        "ess_per_eval": ess / n_evals if n_evals > 0 else np.nan,
    }
    if true_mean is not None:
        summary["bias"] = summary["mean"] - true_mean
    return summary

# ==============================================================================
# --- Plots
# ==============================================================================

def plot_chain_diagnostics(draws, target=None, title=None, save_path=None, burnin=0):
    """
    Trace plot and histogram of a chain, with the target density overlaid.

    Args:
        draws (np.array): The chain.
        target (models.Target, optional): normalized target to overlay.
        title (str, optional): Figure title, e.g. the trial description.
        save_path (str, optional): Path to save the plot. If None, displays the plot.
        burnin (int): draws before this index are marked and left out of the histogram.
    """
    draws = np.asarray(draws)
    kept = draws[burnin:]

    fig, axes = plt.subplots(1, 2, figsize=(16, 6))
    fig.suptitle(title or "Sampler Diagnostics", fontsize=16)

    axes[0].plot(draws, color='royalblue', lw=0.6)
    if burnin > 0:
        axes[0].axvline(burnin, color='red', linestyle='--', label=f'Burn-in ({burnin} steps)')
        axes[0].legend()
    axes[0].set_title("Trace Plot")
    axes[0].set_xlabel("Iteration")
    axes[0].set_ylabel("x")
    axes[0].grid(True, alpha=0.5)

    lo, hi = np.percentile(kept, [0.5, 99.5])
    axes[1].hist(kept, bins=60, range=(lo, hi), density=True, color='red', alpha=0.3, label="Sampler Histogram")
    if target is not None:
        grid = np.linspace(lo, hi, 500)
        axes[1].plot(grid, target.density(grid), color='green', linestyle='--', lw=2.5, label=target.label or "Target")
    axes[1].set_title("Draws vs. Target")
    axes[1].set_xlabel("x")
    axes[1].set_ylabel("Density")
    axes[1].legend()
    axes[1].grid(True, alpha=0.3)

    plt.tight_layout(rect=[0, 0.03, 1, 0.95])

    if save_path:
        plt.savefig(save_path, dpi=300, bbox_inches='tight')
        print(f"Diagnostic plot saved to {save_path}")
        plt.close(fig)
    else:
        plt.show()


def plot_trial_summary(results, x, y="ess_per_sec", hue=None, save_path=None):
    """
    Efficiency of a sampler across its tuning parameter, averaged over replicates.

    Args:
        results (pd.DataFrame or str): trial results, or the path of the master CSV.
        x (str): tuning column, e.g. 'w' or 'rate'.
        y (str): efficiency column.
        hue (str, optional): second tuning column.
        save_path (str, optional): Path to save the plot. If None, displays the plot.
    """
    if isinstance(results, str):
        results = pd.read_csv(results)

    plt.figure(figsize=(10, 6))
    sns.lineplot(data=results, x=x, y=y, hue=hue, marker='o', errorbar=('ci', 95))
    plt.title(f"{y} by {x}", fontsize=14)
    plt.grid(alpha=0.3)

    if save_path is None:
        plt.show()
    else:
        plt.savefig(save_path, dpi=300, bbox_inches='tight')
        plt.close()
        print(f"Trial summary plot saved to: {save_path}")
