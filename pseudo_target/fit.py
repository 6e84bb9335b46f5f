"""
Quick pseudo-target fits: truncated-Cauchy maximum likelihood and a Laplace
style approximation around the target mode.
"""

import numpy as np
import scipy.stats as stats
from scipy.optimize import minimize

from .student_t import pseudo_t


def _trunc_cauchy_nll(theta, x, lb, ub):
    loc, eta = theta
    sc = np.exp(eta)
    normc = stats.cauchy.cdf(ub, loc=loc, scale=sc) - stats.cauchy.cdf(lb, loc=loc, scale=sc)
    if normc <= 0.0:
        return np.inf
    return -(np.sum(stats.cauchy.logpdf(x, loc=loc, scale=sc)) - x.size * np.log(normc))


def fit_trunc_cauchy(samples, lb=0.0, ub=np.inf):
    """
    Maximum likelihood (loc, sc) of a Cauchy truncated to (lb, ub).

    Returns:
        dict: 'loc', 'sc' and the scipy OptimizeResult under 'opt'.
    """
    x = np.asarray(samples, dtype=float)
    x = x[(x > lb) & (x < ub)]
    mu0 = np.median(x)
    mad = np.median(np.abs(x - mu0))
    x0 = np.array([mu0, np.log(mad if mad > 0 else 1.0)])
    res = minimize(_trunc_cauchy_nll, x0, args=(x, lb, ub), method="Nelder-Mead",
                   options={"xatol": 1e-8, "fatol": 1e-8, "maxiter": 2000})
    if not res.success:
        raise RuntimeError(f"Truncated Cauchy fit did not converge: {res.message}")
    loc_hat, eta_hat = res.x
    return {"loc": float(loc_hat), "sc": float(np.exp(eta_hat)), "opt": res}


def _second_derivative(f, x, h):
    return (f(x + h) - 2.0 * f(x) + f(x - h)) / (h * h)


def lapproxt(log_density, init, lb=-np.inf, ub=np.inf, degf=1.0, name="Laplace"):
    """
    Student-t pseudo-target centered at the mode of the target, with scale
    1/sqrt(-d^2/dx^2 log f) at the mode, truncated to (lb, ub).
    """
    def f(x):
        return float(np.asarray(log_density(x), dtype=float))

    # log density may be -inf on the support boundary
    res = minimize(lambda z: -f(z[0]), x0=np.array([float(init)]), method="Nelder-Mead",
                   bounds=[(lb, ub)], options={"xatol": 1e-10, "fatol": 1e-12, "maxiter": 2000})
    if not res.success:
        raise RuntimeError(f"Mode search did not converge: {res.message}")
    mode = float(res.x[0])

    h = 1e-4 * max(1.0, abs(mode))
    if np.isfinite(lb):
        h = min(h, 0.5 * (mode - lb))
    if np.isfinite(ub):
        h = min(h, 0.5 * (ub - mode))
    if not h > 0.0:
        raise RuntimeError(f"Mode {mode:.6g} lies on the boundary of ({lb}, {ub})")
    curv = -_second_derivative(f, mode, h)
    if not curv > 0.0:
        raise RuntimeError(f"Log density is not concave at the mode {mode:.6g}")

    return pseudo_t(loc=mode, sc=1.0 / np.sqrt(curv), degf=degf, lb=lb, ub=ub, name=name)
