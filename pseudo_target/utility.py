"""
Utility of a pseudo-target: how close the transformed target is to uniform on
(0, 1), minus a penalty for multimodality.
"""

from dataclasses import dataclass, field

import numpy as np

from .plotting import plot_transformed_target


@dataclass(frozen=True, eq=False)
class UtilityBreakdown:
    util: float
    base: float = np.nan
    auc: float = np.nan
    mean_slice_width: float = np.nan
    water: float = np.nan
    coeffs: tuple = (1.0, 0.0)
    heights: np.ndarray = field(default=None, repr=False)
    widths: np.ndarray = field(default=None, repr=False)


def auc(heights, widths):
    """Area under a normalized step density relative to its bounding box, 1/max(h)."""
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.sum(heights * widths) / np.max(heights))


def mean_slice_width(heights, widths):
    """
    Expected slice width under the joint (psi, level) slice distribution.

    For a normalized density h on (0, 1) with slice width W(v) = |{h >= v}|,
    E[W] = int_0^max(h) W(v)^2 dv, which is 1 only for the uniform density.
    """
    heights = np.asarray(heights, dtype=float)
    widths = np.asarray(widths, dtype=float)
    if not np.all(np.isfinite(heights)):
        return np.nan
    order = np.argsort(heights, kind="stable")
    hs = heights[order]
    suffix = np.cumsum(widths[order][::-1])[::-1]
    levels, first = np.unique(hs, return_index=True)
    slice_widths = suffix[first]
    dlevel = np.diff(np.concatenate(([0.0], levels)))
    return float(np.sum(dlevel * slice_widths ** 2))


def water_area(heights, widths):
    """Area of water the step curve could hold, relative to its bounding box."""
    heights = np.asarray(heights, dtype=float)
    if not np.all(np.isfinite(heights)):
        return np.nan
    left = np.maximum.accumulate(heights)
    right = np.maximum.accumulate(heights[::-1])[::-1]
    level = np.minimum(left, right)
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.sum(widths * (level - heights)) / np.max(heights))


def utility_shrinkslice(heights, widths, coeffs=(1.0, 0.0), use_mean_slice_width=False, peak=None):
    """
    Combine the base utility (AUC or mean slice width) with the water penalty:
    util = coeffs[0] * base - coeffs[1] * water.
    """
    heights = np.asarray(heights, dtype=float)
    widths = np.asarray(widths, dtype=float)
    if peak is None:
        a = auc(heights, widths)
    else:
        with np.errstate(divide="ignore", invalid="ignore"):
            a = float(np.float64(1.0) / peak)
    msw = mean_slice_width(heights, widths)
    water = water_area(heights, widths)
    base = msw if use_mean_slice_width else a
    util = coeffs[0] * base - coeffs[1] * water
    return UtilityBreakdown(
        util=float(util), base=base, auc=a, mean_slice_width=msw, water=water,
        coeffs=tuple(coeffs), heights=heights, widths=widths,
    )


def util_pseu(pseudo, source, coeffs=(1.0, 0.0), use_mean_slice_width=False,
              tol_int=1.0e-3, plot=False, save_path=None):
    """
    Utility of one pseudo-target against a target given by `source`
    (a SamplesSource, GridSource, FunctionSource or KdeSource).
    """
    step = source.transform(pseudo, tol_int=tol_int)
    out = utility_shrinkslice(
        step.heights, step.widths, coeffs=coeffs,
        use_mean_slice_width=use_mean_slice_width, peak=step.peak,
    )
    if plot:
        plot_transformed_target(step, out, title=pseudo.label, save_path=save_path)
    return out
