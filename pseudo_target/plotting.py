import numpy as np
import matplotlib.pyplot as plt
import seaborn as sns


def plot_transformed_target(step, util, title=None, save_path=None):
    """
    Draws the transformed target on (0, 1) as a step density, with the water
    level (multimodality penalty) shaded above it.

    Args:
        step (StepDensity): output of a source's transform().
        util (UtilityBreakdown): utility of the same pseudo-target.
        title (str, optional): usually the pseudo-target label.
        save_path (str, optional): Path to save the figure. If None, shows the plot.
    """
    heights = np.asarray(step.heights, dtype=float)
    widths = np.asarray(step.widths, dtype=float)
    edges = np.concatenate(([0.0], np.cumsum(widths)))
    left = np.maximum.accumulate(heights)
    right = np.maximum.accumulate(heights[::-1])[::-1]
    level = np.minimum(left, right)

    sns.set_style("whitegrid")
    fig, ax = plt.subplots(figsize=(9, 5))
    ax.stairs(level, edges, baseline=heights, fill=True, color='lightblue', alpha=0.6, label="Water")
    ax.stairs(heights, edges, color='royalblue', lw=1.5, label="Transformed target")
    ax.axhline(1.0, color='black', linestyle='--', lw=1, label="Uniform")
    ax.set_xlim(0, 1)
    ax.set_xlabel("ψ")
    ax.set_ylabel("Density")
    ax.set_title(title or "Transformed target")
    ax.text(
        0.02, 0.95,
        f"util = {util.util:.4f}\nAUC = {util.auc:.4f}\nslice width = {util.mean_slice_width:.4f}\nwater = {util.water:.4f}",
        transform=ax.transAxes, va='top', fontsize=9,
    )
    ax.legend(loc='upper right')

    if save_path is None:
        plt.show()
    else:
        plt.savefig(save_path, dpi=300, bbox_inches='tight')
        plt.close(fig)
        print(f"Transformed target plot saved to: {save_path}")
