"""
Input modes for pseudo-target tuning. Each source maps a pseudo-target to a
step-function picture of the transformed target on (0, 1):

    h(psi) = target(q(psi)) / pseudo.density(q(psi)),

where q is the pseudo-target quantile function. The step heights are
normalized to integrate to one.
"""

from dataclasses import dataclass, field
from typing import Callable, ClassVar

import numpy as np
import scipy.stats as stats
from scipy.integrate import quad
from scipy.optimize import minimize_scalar

GRID_EPS = 1.0e-6
N_DENSE = 1000
QUAD_REL_TOL = 1.22e-4  # eps^0.25, the relative tolerance of R's integrate()


@dataclass(frozen=True, eq=False)
class StepDensity:
    heights: np.ndarray
    widths: np.ndarray
    peak: float


def make_grid(nbins):
    """Evaluation grid spanning (eps, 1 - eps) and bin edges padded with exact 0 and 1."""
    x = np.linspace(GRID_EPS, 1.0 - GRID_EPS, nbins)
    bins = np.concatenate(([0.0], x[1:-1], [1.0]))
    return x, bins


def _log_h(log_density, pseudo, psi):
    x = pseudo.quantile(psi)
    with np.errstate(invalid="ignore"):
        lh = np.asarray(log_density(x), dtype=float) - pseudo.log_density(x)
    return np.where(np.isnan(lh), -np.inf, lh)


def _normalize(step, widths):
    with np.errstate(divide="ignore", invalid="ignore"):
        heights = step / np.sum(step * widths)
    return StepDensity(heights=heights, widths=widths, peak=float(np.max(heights)))


@dataclass(frozen=True, eq=False)
class SamplesSource:
    """Histogram of pseudo-CDF transformed samples."""
    samples: np.ndarray
    grid: np.ndarray
    bins: np.ndarray
    type: ClassVar[str] = "samples"

    def transform(self, pseudo, tol_int=None):
        u = pseudo.distribution(self.samples)
        u = u[np.isfinite(u)]
        counts, _ = np.histogram(u, bins=self.bins)
        widths = np.diff(self.bins)
        return _normalize(counts.astype(float), widths)


@dataclass(frozen=True, eq=False)
class GridSource:
    """Transformed log target evaluated at fixed points of the unit interval."""
    log_density: Callable
    grid: np.ndarray
    bins: np.ndarray
    type: ClassVar[str] = "grid"

    def transform(self, pseudo, tol_int=None):
        lh = _log_h(self.log_density, pseudo, self.grid)
        with np.errstate(invalid="ignore"):
            h = np.exp(lh - np.max(lh))
        # one step per bin from the two grid points bracketing it
        step = 0.5 * (h[:-1] + h[1:])
        return _normalize(step, np.diff(self.bins))


@dataclass(frozen=True, eq=False)
class FunctionSource:
    """
    Transformed log target integrated directly. The normalizing constant comes
    from quad(); the peak, slice widths and water are read off a dense
    midpoint grid, with the peak refined by a bounded scalar search.
    """
    log_density: Callable
    n_dense: int = N_DENSE
    type: ClassVar[str] = "function"

    def transform(self, pseudo, tol_int=1.0e-3):
        n = self.n_dense
        mids = (np.arange(n) + 0.5) / n
        lh = _log_h(self.log_density, pseudo, mids)
        c = np.max(lh)
        if not np.isfinite(c):
            nans = np.full(n, np.nan)
            return StepDensity(heights=nans, widths=np.full(n, 1.0 / n), peak=np.nan)

        def h(psi):
            return float(np.exp(_log_h(self.log_density, pseudo, psi) - c))

        area, _ = quad(h, 0.0, 1.0, epsabs=tol_int, epsrel=QUAD_REL_TOL, limit=100)
        heights = np.exp(lh - c) / area

        i = int(np.argmax(lh))
        res = minimize_scalar(
            lambda psi: -h(psi),
            bounds=(mids[max(i - 1, 0)], mids[min(i + 1, n - 1)]),
            method="bounded",
        )
        peak = max(float(np.max(heights)), -res.fun / area)
        return StepDensity(heights=heights, widths=np.full(n, 1.0 / n), peak=peak)


@dataclass(frozen=True, eq=False)
class KdeSource(FunctionSource):
    """Samples smoothed by a Gaussian KDE, then treated as a target function."""
    samples: np.ndarray = field(default=None)
    type: ClassVar[str] = "samples_kde"

    @classmethod
    def from_samples(cls, samples, bw_method="scott"):
        samples = np.asarray(samples, dtype=float)
        kde = stats.gaussian_kde(samples, bw_method=bw_method)

        def log_density(x):
            x = np.asarray(x, dtype=float)
            out = kde.logpdf(np.atleast_1d(x).ravel())
            return out.reshape(x.shape) if x.ndim else out[0]

        return cls(log_density=log_density, samples=samples)
