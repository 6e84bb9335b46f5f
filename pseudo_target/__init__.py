# Student-t pseudo-targets: construction, utility of the transformed target, and tuning.

from .student_t import PseudoTarget, pseudo_t
from .sources import FunctionSource, GridSource, KdeSource, SamplesSource, make_grid
from .utility import UtilityBreakdown, util_pseu, utility_shrinkslice
from .optimize import (
    OptimizationRequest,
    OptimizationResult,
    evaluate_candidate,
    make_request,
    opt_t,
    optimize_request,
)
from .fit import fit_trunc_cauchy, lapproxt

__all__ = [
    "PseudoTarget",
    "pseudo_t",
    "FunctionSource",
    "GridSource",
    "KdeSource",
    "SamplesSource",
    "make_grid",
    "UtilityBreakdown",
    "util_pseu",
    "utility_shrinkslice",
    "OptimizationRequest",
    "OptimizationResult",
    "evaluate_candidate",
    "make_request",
    "opt_t",
    "optimize_request",
    "fit_trunc_cauchy",
    "lapproxt",
]
