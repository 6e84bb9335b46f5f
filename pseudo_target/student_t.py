"""
Student-t pseudo-targets, optionally truncated to (lb, ub). The distribution and
quantile functions are renormalized to the truncated support; the density and
log density are only masked, so a truncated density integrates to norm_const.
"""

from dataclasses import dataclass, field

import numpy as np
import scipy.stats as stats


def _fmt_bound(b):
    if np.isposinf(b):
        return "Inf"
    if np.isneginf(b):
        return "-Inf"
    return f"{b:g}"


def _label(loc, sc, degf, lb, ub, name=None):
    """Text description, e.g. 't(loc = 0.41, sc = 0.38, degf = 1), Man I(0 < x < Inf)'."""
    t = f"t(loc = {round(float(loc), 2)}, sc = {round(float(sc), 2)}, degf = {round(float(degf))})"
    if name is not None:
        t = f"{t}, {name}"
    if lb > -np.inf or ub < np.inf:
        t = f"{t} I({_fmt_bound(lb)} < x < {_fmt_bound(ub)})"
    return t


@dataclass(frozen=True)
class PseudoTarget:
    """
    Location-scale Student-t truncated to (lb, ub).

    norm_const and lower_tail_prob are fixed at construction. No check is made
    on sc or on the bounds: a degenerate parameterization gives nan/inf fields
    instead of an error.
    """
    loc: float
    sc: float
    degf: float
    lb: float = -np.inf
    ub: float = np.inf
    label: str = ""
    lower_tail_prob: float = field(init=False, default=np.nan)
    norm_const: float = field(init=False, default=np.nan)
    log_sc: float = field(init=False, default=np.nan, repr=False)

    def __post_init__(self):
        with np.errstate(divide="ignore", invalid="ignore"):
            sc = np.float64(self.sc)
            plb = stats.t.cdf((np.float64(self.lb) - self.loc) / sc, df=self.degf)
            pub = stats.t.cdf((np.float64(self.ub) - self.loc) / sc, df=self.degf)
            log_sc = np.log(sc)
        object.__setattr__(self, "lower_tail_prob", float(plb))
        object.__setattr__(self, "norm_const", float(pub - plb))
        object.__setattr__(self, "log_sc", float(log_sc))

    def _z(self, x):
        return (np.asarray(x, dtype=float) - self.loc) / np.float64(self.sc)

    def density(self, x):
        with np.errstate(divide="ignore", invalid="ignore"):
            x = np.asarray(x, dtype=float)
            return stats.t.pdf(self._z(x), df=self.degf) / self.sc * ((x > self.lb) & (x < self.ub))

    def log_density(self, x):
        # log(indicator) turns out-of-bounds points into -inf without branching
        with np.errstate(divide="ignore", invalid="ignore"):
            x = np.asarray(x, dtype=float)
            return (stats.t.logpdf(self._z(x), df=self.degf) - self.log_sc
                    + np.log((x > self.lb) & (x < self.ub)))

    def quantile(self, u, log_p=False):
        u = np.asarray(u, dtype=float)
        if log_p:
            u = np.exp(u)
        with np.errstate(invalid="ignore"):
            return stats.t.ppf(self.lower_tail_prob + u * self.norm_const, df=self.degf) * self.sc + self.loc

    def distribution(self, x):
        # Only the lower bound is masked; above ub the untruncated CDF saturates at 1.
        with np.errstate(divide="ignore", invalid="ignore"):
            x = np.asarray(x, dtype=float)
            return (stats.t.cdf(self._z(x), df=self.degf) - self.lower_tail_prob) / self.norm_const * (x > self.lb)


def pseudo_t(loc, sc, degf, lb=-np.inf, ub=np.inf, name=None):
    """
    Specify a pseudo-target in the Student-t class.

    Args:
        loc (float): location parameter.
        sc (float): scale parameter, should be positive.
        degf (float): degrees of freedom, should be positive.
        lb, ub (float): truncation bounds. Defaults to the real line.
        name (str, optional): suffix appended to the text description.

    Returns:
        PseudoTarget

    Example:
        >>> pseu = pseudo_t(loc=0.0, sc=1.0, degf=1.0, lb=0.0)  # half Cauchy
        >>> pseu.label
        't(loc = 0.0, sc = 1.0, degf = 1) I(0 < x < Inf)'
    """
    lb = float(lb)
    ub = float(ub)
    label = _label(loc, sc, degf, lb, ub, name=name)
    return PseudoTarget(loc=float(loc), sc=float(sc), degf=float(degf), lb=lb, ub=ub, label=label)
