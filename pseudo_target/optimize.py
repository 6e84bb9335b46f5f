"""
Find the optimal pseudo-target in the Student-t family for a given
(unnormalized) target, from its log density, from samples, or on a grid.
"""

from dataclasses import dataclass, field

import numpy as np
from scipy.optimize import minimize
from tqdm import tqdm

from .sources import FunctionSource, GridSource, KdeSource, SamplesSource, make_grid
from .student_t import pseudo_t
from .utility import util_pseu

SENTINEL_UTIL = -1.0
MAX_ITER = 500
DEFAULT_INITS = (0.5, 2.0)
_TYPES = ("samples", "grid", "function", "samples_kde")


@dataclass(frozen=True, eq=False)
class OptimizationRequest:
    source: object
    degf: tuple = (1.0, 5.0, 20.0)
    lb: float = -np.inf
    ub: float = np.inf
    nbins: int = None
    coeffs: tuple = (1.0, 0.0)
    tol_opt: float = 1.0e-6
    tol_int: float = 1.0e-3
    use_mean_slice_width: bool = False
    inits: tuple = DEFAULT_INITS


@dataclass(frozen=True, eq=False)
class OptimizerTrace:
    """Nelder-Mead output for one degrees-of-freedom candidate."""
    par: np.ndarray
    value: float
    nfev: int
    nit: int
    converged: bool
    message: str
    history: np.ndarray = field(repr=False)  # rows of (loc, sc, util)


@dataclass(frozen=True, eq=False)
class OptimizationResult:
    pseudo: object
    util: object
    opt: OptimizerTrace
    nbins: int
    coeffs: tuple
    tol_int: float
    tol_opt: float
    request: OptimizationRequest = field(repr=False)


def _target_log_density(target):
    if target is None:
        return None
    if hasattr(target, "log_density"):
        return target.log_density
    if callable(target):
        return target
    raise ValueError("target must be a log-density callable or expose .log_density")


def make_request(target=None, samples=None, type="samples", degf=(1, 5, 20),
                 lb=-np.inf, ub=np.inf, nbins=100, coeffs=(1.0, 0.0),
                 tol_opt=1.0e-6, tol_int=1.0e-3, use_mean_slice_width=False):
    """
    Resolve the input mode once into a source carrying only what that mode needs.

    type: "samples" (requires samples), "grid" (requires target),
          "function" (requires target), "samples_kde" (requires samples).
    """
    if type not in _TYPES:
        raise ValueError(f"Unknown type: {type}. Use one of {list(_TYPES)}")
    log_density = _target_log_density(target)
    if samples is not None:
        samples = np.asarray(samples, dtype=float)

    if type in ("function", "grid") and log_density is None:
        raise ValueError(f"type='{type}' requires a target")
    if type in ("samples", "samples_kde") and samples is None:
        raise ValueError(f"type='{type}' requires samples")

    if type == "function":
        source = FunctionSource(log_density=log_density)
        nbins = None
    elif type == "samples_kde":
        source = KdeSource.from_samples(samples)
        nbins = None
    else:
        nbins = int(nbins)
        grid, bins = make_grid(nbins)
        if type == "grid":
            source = GridSource(log_density=log_density, grid=grid, bins=bins)
        else:
            source = SamplesSource(samples=samples, grid=grid, bins=bins)

    if samples is None:
        inits = DEFAULT_INITS
    else:
        inits = (float(np.mean(samples)), float(np.std(samples, ddof=1)))

    return OptimizationRequest(
        source=source,
        degf=tuple(float(d) for d in np.atleast_1d(degf)),
        lb=float(lb), ub=float(ub), nbins=nbins,
        coeffs=tuple(float(c) for c in coeffs),
        tol_opt=float(tol_opt), tol_int=float(tol_int),
        use_mean_slice_width=bool(use_mean_slice_width),
        inits=inits,
    )


def evaluate_candidate(pars, degf, request, utility=util_pseu, verbose=False, history=None):
    """
    Utility of the pseudo-target t(loc, sc, degf) truncated to the request bounds.

    Returns -1.0 for sc <= 0, and for utilities above 1 (or not finite), which
    can only come from a numerical failure.
    """
    loc, sc = float(pars[0]), float(pars[1])

    if sc <= 0.0:
        out = SENTINEL_UTIL
    else:
        pseu = pseudo_t(loc=loc, sc=sc, degf=degf, lb=request.lb, ub=request.ub)
        if verbose:
            print("trying", pseu.label)
        res = utility(
            pseu, request.source,
            coeffs=request.coeffs,
            use_mean_slice_width=request.use_mean_slice_width,
            tol_int=request.tol_int,
        )
        if verbose:
            print(res)
        out = float(res.util)
        if not out <= 1.0:
            out = SENTINEL_UTIL

    if history is not None:
        history.append((loc, sc, out))
    return out


def _initial_simplex(x0):
    # same construction as R's optim(): step of 10% of the largest coordinate
    x0 = np.asarray(x0, dtype=float)
    step = 0.1 * np.max(np.abs(x0))
    if step == 0.0:
        step = 0.1
    return np.vstack([x0, x0 + step * np.eye(x0.size)])


def _fatol(f0, tol_opt):
    # R optim() reltol: stop when the simplex spread is below tol * (|f| + tol)
    return tol_opt * (abs(f0) + tol_opt)


def _maximize(degf, request, utility, verbose):
    history = []
    f0 = evaluate_candidate(request.inits, degf, request, utility=utility,
                            verbose=verbose, history=history)
    res = minimize(
        lambda pars: -evaluate_candidate(pars, degf, request, utility=utility,
                                         verbose=verbose, history=history),
        x0=np.asarray(request.inits, dtype=float),
        method="Nelder-Mead",
        options={
            "initial_simplex": _initial_simplex(request.inits),
            "fatol": _fatol(f0, request.tol_opt),
            "xatol": np.inf,
            "maxiter": MAX_ITER,
        },
    )
    return OptimizerTrace(
        par=np.asarray(res.x, dtype=float),
        value=-float(res.fun),
        nfev=int(res.nfev),
        nit=int(res.nit),
        converged=bool(res.success),
        message=str(res.message),
        history=np.asarray(history, dtype=float).reshape(-1, 3),
    )


def optimize_request(request, utility=util_pseu, plot=False, save_path=None, verbose=False):
    """Run the search for a prepared OptimizationRequest. See opt_t()."""
    candidates = request.degf
    if verbose:
        candidates = tqdm(candidates, desc="Optimizing over degf")
    runs = [_maximize(d, request, utility, verbose) for d in candidates]

    # np.argmax keeps the first of tied candidates
    use_indx = int(np.argmax([run.value for run in runs]))
    best = runs[use_indx]

    pseu = pseudo_t(
        loc=best.par[0], sc=best.par[1], degf=request.degf[use_indx],
        lb=request.lb, ub=request.ub,
    )
    util = utility(
        pseu, request.source,
        coeffs=request.coeffs,
        use_mean_slice_width=request.use_mean_slice_width,
        tol_int=request.tol_int,
        plot=plot, save_path=save_path,
    )
    if verbose:
        print(f"Selected {pseu.label} with utility {util.util:.6f}")

    return OptimizationResult(
        pseudo=pseu, util=util, opt=best,
        nbins=request.nbins, coeffs=request.coeffs,
        tol_int=request.tol_int, tol_opt=request.tol_opt,
        request=request,
    )


def opt_t(target=None, samples=None, type="samples", degf=(1, 5, 20),
          lb=-np.inf, ub=np.inf, nbins=100, coeffs=(1.0, 0.0),
          tol_opt=1.0e-6, tol_int=1.0e-3, plot=False, verbose=False,
          use_mean_slice_width=False, utility=util_pseu, save_path=None):
    """
    Find the optimal pseudo-target in the Student-t family for a target.

    For each value in degf, Nelder-Mead searches (loc, sc) for the largest
    utility; the best candidate across degf is returned.

    Args:
        target: log-density callable, or an object with a log_density method.
            Required for type "function" and "grid".
        samples (array-like, optional): draws from the target. Required for
            "samples" and "samples_kde"; when given, their mean and standard
            deviation start the search, otherwise (0.5, 2.0).
        type (str): "samples", "grid", "function" or "samples_kde".
        degf (sequence): degrees of freedom candidates.
        lb, ub (float): truncation of the pseudo-target.
        nbins (int): grid size for "samples" and "grid".
        coeffs (pair): weights of the base utility and of the water penalty.
        tol_opt (float): relative function tolerance of Nelder-Mead, scaled
            by the utility at the starting point.
        tol_int (float): absolute tolerance of quad() in "function" modes.
        plot (bool): plot the transformed target of the winner.
        verbose (bool): print each candidate tried.
        use_mean_slice_width (bool): base utility is the expected slice width
            (True) or the AUC (False).
        utility (callable): utility evaluator, util_pseu by default.
        save_path (str, optional): where to save the plot.

    Returns:
        OptimizationResult

    Example:
        >>> res = opt_t(samples=np.random.normal(size=1000), nbins=30)
        >>> res.pseudo.label
    """
    request = make_request(
        target=target, samples=samples, type=type, degf=degf, lb=lb, ub=ub,
        nbins=nbins, coeffs=coeffs, tol_opt=tol_opt, tol_int=tol_int,
        use_mean_slice_width=use_mean_slice_width,
    )
    return optimize_request(request, utility=utility, plot=plot, save_path=save_path, verbose=verbose)
