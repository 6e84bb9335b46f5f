"""
Univariate samplers compared in the Monte Carlo trials. Each step function
returns the new state and the number of target evaluations it used.
"""

import time

import numpy as np
import scipy.stats as stats
from tqdm import tqdm

ITER_LIMIT = 100_000
LOOP_ERR_MSG = "max sampler iters %d exceeded"


def _lf(log_target, x):
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.asarray(log_target(x), dtype=float))


def stepping_out(x, log_target, w, rng, max_steps=np.inf):
    """
    Slice sampling with stepping out and shrinkage (Neal, 2003).

    Args:
        x (float): current state.
        log_target (callable): unnormalized log density.
        w (float): step width.
        rng (np.random.Generator): random number generator.
        max_steps (float): cap on the total number of steps out.

    Returns:
        (float, int): new state and number of target evaluations.
    """
    log_y = _lf(log_target, x) - rng.standard_exponential()
    n_evals = 1

    L = x - w * rng.uniform()
    R = L + w
    if np.isfinite(max_steps):
        J = np.floor(max_steps * rng.uniform())
        K = (max_steps - 1) - J
    else:
        J = K = np.inf

    cnt = 0
    while J > 0:
        n_evals += 1
        if log_y >= _lf(log_target, L):
            break
        L -= w
        J -= 1
        cnt += 1
        if cnt > ITER_LIMIT:
            raise RuntimeError(LOOP_ERR_MSG % ITER_LIMIT)
    while K > 0:
        n_evals += 1
        if log_y >= _lf(log_target, R):
            break
        R += w
        K -= 1
        cnt += 1
        if cnt > ITER_LIMIT:
            raise RuntimeError(LOOP_ERR_MSG % ITER_LIMIT)

    for _ in range(ITER_LIMIT):
        x_new = rng.uniform(L, R)
        n_evals += 1
        if _lf(log_target, x_new) > log_y:
            return x_new, n_evals
        if x_new < x:
            L = x_new
        else:
            R = x_new
    raise RuntimeError(LOOP_ERR_MSG % ITER_LIMIT)


def gess(x, log_target, mu, sigma, df, rng):
    """
    Generalized elliptical slice sampling (Nishihara, Murray & Adams, 2014)
    with a Student-t(mu, sigma, df) approximation to the target.
    """
    def log_like(z):
        return _lf(log_target, z) - stats.t.logpdf(z, df, loc=mu, scale=sigma)

    # scale mixture: s | x ~ InvGamma((df + 1)/2, (df + ((x - mu)/sigma)^2)/2)
    a = 0.5 * (df + 1.0)
    b = 0.5 * (df + ((x - mu) / sigma) ** 2)
    s = 1.0 / rng.gamma(a, 1.0 / b)
    nu = rng.normal(0.0, sigma * np.sqrt(s))

    log_y = log_like(x) - rng.standard_exponential()
    n_evals = 1

    theta = rng.uniform(0.0, 2.0 * np.pi)
    lo, hi = theta - 2.0 * np.pi, theta
    for _ in range(ITER_LIMIT):
        x_new = (x - mu) * np.cos(theta) + nu * np.sin(theta) + mu
        n_evals += 1
        if log_like(x_new) > log_y:
            return x_new, n_evals
        if theta < 0.0:
            lo = theta
        else:
            hi = theta
        theta = rng.uniform(lo, hi)
    raise RuntimeError(LOOP_ERR_MSG % ITER_LIMIT)


def latent(x, s, log_target, rate, rng):
    """
    Latent slice sampling (Li & Walker, 2023). The slice width s is itself a
    latent variable refreshed with an exponential(rate) increment.

    Returns:
        (float, float, int): new state, new width and number of evaluations.
    """
    log_y = _lf(log_target, x) - rng.standard_exponential()
    n_evals = 1

    l = rng.uniform(x - 0.5 * s, x + 0.5 * s)
    s = 2.0 * abs(l - x) + rng.exponential(1.0 / rate)
    lo, hi = l - 0.5 * s, l + 0.5 * s

    for _ in range(ITER_LIMIT):
        x_new = rng.uniform(lo, hi)
        n_evals += 1
        if _lf(log_target, x_new) > log_y:
            return x_new, s, n_evals
        if x_new < x:
            lo = x_new
        else:
            hi = x_new
    raise RuntimeError(LOOP_ERR_MSG % ITER_LIMIT)


def rand_walk(x, log_target, c, rng):
    """One random-walk Metropolis step with a normal(0, c^2) proposal."""
    x_cand = rng.normal(loc=x, scale=c)
    log_acceptance_ratio = _lf(log_target, x_cand) - _lf(log_target, x)
    if np.log(rng.uniform()) < log_acceptance_ratio:
        return x_cand, 2
    return x, 2


def transform(x, log_target, pseudo, rng):
    """
    Quantile slice sampling: slice sample the transformed target
    h(psi) = f(q(psi)) / pseudo.density(q(psi)) on (0, 1), shrinking from the
    whole unit interval.
    """
    def log_h_at(z):
        return _lf(log_target, z) - float(pseudo.log_density(z))

    psi0 = float(pseudo.distribution(x))
    log_y = log_h_at(x) - rng.standard_exponential()
    n_evals = 1

    lo, hi = 0.0, 1.0
    for _ in range(ITER_LIMIT):
        psi = rng.uniform(lo, hi)
        x_new = float(pseudo.quantile(psi))
        n_evals += 1
        if log_h_at(x_new) > log_y:
            return x_new, n_evals
        if psi < psi0:
            lo = psi
        else:
            hi = psi
    raise RuntimeError(LOOP_ERR_MSG % ITER_LIMIT)


# --- chain drivers: state is a dict so the latent width can ride along ---

def _step_stepping_out(state, log_target, params, rng):
    state["x"], n = stepping_out(state["x"], log_target, params["w"], rng,
                                 max_steps=params.get("max_steps", np.inf))
    return n


def _step_gess(state, log_target, params, rng):
    state["x"], n = gess(state["x"], log_target, params["mu"], params["sigma"], params["df"], rng)
    return n


def _step_latent(state, log_target, params, rng):
    if "s" not in state:
        state["s"] = params["s"]
    state["x"], state["s"], n = latent(state["x"], state["s"], log_target, params["rate"], rng)
    return n


def _step_rand_walk(state, log_target, params, rng):
    state["x"], n = rand_walk(state["x"], log_target, params["c"], rng)
    return n


def _step_transform(state, log_target, params, rng):
    state["x"], n = transform(state["x"], log_target, params["pseudo"], rng)
    return n


SAMPLERS = {
    "stepping_out": _step_stepping_out,
    "gess": _step_gess,
    "latent": _step_latent,
    "rand_walk": _step_rand_walk,
    "transform": _step_transform,
}


def run_sampler(name, log_target, x0, n_samples, params, rng=None, verbose=False):
    """
    Runs one chain of a sampler.

    Args:
        name (str): one of SAMPLERS.
        log_target (callable): unnormalized log density.
        x0 (float): starting value.
        n_samples (int): number of draws.
        params (dict): tuning parameters of the sampler ('w'; 'mu', 'sigma',
            'df'; 's', 'rate'; 'c'; or 'pseudo').
        rng (np.random.Generator, optional): defaults to a fresh generator.
        verbose (bool): show a progress bar.

    Returns:
        dict: 'draws', 'n_evals' (total target evaluations) and 'time' (seconds).
    """
    if name not in SAMPLERS:
        raise ValueError(f"Unknown sampler: {name}. Use one of {list(SAMPLERS)}")
    step = SAMPLERS[name]
    rng = np.random.default_rng() if rng is None else rng

    draws = np.zeros(int(n_samples))
    state = {"x": float(x0)}
    n_evals = 0

    iters = range(int(n_samples))
    if verbose:
        iters = tqdm(iters, desc=f"Sampling ({name})")
    t0 = time.time()
    for i in iters:
        n_evals += step(state, log_target, params, rng)
        draws[i] = state["x"]
    elapsed = time.time() - t0

    return {"sampler": name, "draws": draws, "n_evals": n_evals, "time": elapsed}
