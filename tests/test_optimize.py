import numpy as np
import pytest
import scipy.stats as stats

from models import normal
from pseudo_target import (
    FunctionSource, SamplesSource, UtilityBreakdown, evaluate_candidate,
    make_request, opt_t,
)
from pseudo_target.optimize import SENTINEL_UTIL, _fatol


def constant_utility(value):
    def utility(pseu, source, **kwargs):
        return UtilityBreakdown(util=value)
    return utility


def failing_utility(pseu, source, **kwargs):
    raise AssertionError("utility should not be called")


@pytest.fixture
def function_request():
    return make_request(target=stats.norm.logpdf, type="function")


class TestEvaluateCandidate:
    @pytest.mark.parametrize("sc", [0.0, -0.5])
    def test_nonpositive_scale(self, function_request, sc):
        out = evaluate_candidate((0.0, sc), 1.0, function_request, utility=failing_utility)
        assert out == SENTINEL_UTIL

    @pytest.mark.parametrize("value", [1.5, np.nan, np.inf])
    def test_impossible_utility(self, function_request, value):
        out = evaluate_candidate((0.0, 1.0), 1.0, function_request, utility=constant_utility(value))
        assert out == SENTINEL_UTIL

    def test_passes_through(self, function_request):
        out = evaluate_candidate((0.0, 1.0), 1.0, function_request, utility=constant_utility(0.7))
        assert out == pytest.approx(0.7)

    def test_real_utility_bounded(self, function_request):
        out = evaluate_candidate((0.2, 1.1), 5.0, function_request)
        assert 0.0 < out <= 1.0

    def test_history(self, function_request):
        history = []
        evaluate_candidate((0.0, -1.0), 1.0, function_request, history=history)
        evaluate_candidate((0.1, 1.0), 1.0, function_request, utility=constant_utility(0.3), history=history)
        assert history == [(0.0, -1.0, SENTINEL_UTIL), (0.1, 1.0, 0.3)]

    def test_bounds_reach_pseudo(self):
        request = make_request(target=stats.norm.logpdf, type="function", lb=0.0)
        seen = []

        def utility(pseu, source, **kwargs):
            seen.append(pseu)
            return UtilityBreakdown(util=0.5)

        evaluate_candidate((0.0, 1.0), 5.0, request, utility=utility)
        assert seen[0].lb == 0.0 and seen[0].degf == 5.0


class TestMakeRequest:
    def test_unknown_type(self):
        with pytest.raises(ValueError):
            make_request(target=stats.norm.logpdf, type="histogram")

    @pytest.mark.parametrize("type", ["function", "grid"])
    def test_missing_target(self, type):
        with pytest.raises(ValueError):
            make_request(samples=np.ones(10), type=type)

    @pytest.mark.parametrize("type", ["samples", "samples_kde"])
    def test_missing_samples(self, type):
        with pytest.raises(ValueError):
            make_request(target=stats.norm.logpdf, type=type)

    def test_function_mode_has_no_bins(self):
        request = make_request(target=normal.truth(), type="function", nbins=30)
        assert request.nbins is None
        assert isinstance(request.source, FunctionSource)
        assert request.inits == (0.5, 2.0)

    def test_samples_mode_inits(self, rng):
        samples = rng.normal(3.0, 2.0, size=500)
        request = make_request(samples=samples, type="samples", nbins=25, degf=5)
        assert isinstance(request.source, SamplesSource)
        assert request.nbins == 25
        assert request.degf == (5.0,)
        assert request.inits == pytest.approx((np.mean(samples), np.std(samples, ddof=1)))


class TestOptT:
    def test_tie_keeps_first_degf(self):
        res = opt_t(target=stats.norm.logpdf, type="function", degf=(1, 5, 20),
                    utility=constant_utility(0.5))
        assert res.pseudo.degf == 1.0
        assert res.util.util == 0.5

    def test_best_degf_wins(self):
        def utility(pseu, source, **kwargs):
            return UtilityBreakdown(util=0.9 if pseu.degf == 5.0 else 0.5)

        res = opt_t(target=stats.norm.logpdf, type="function", degf=(1, 5, 20), utility=utility)
        assert res.pseudo.degf == 5.0
        assert res.opt.value == pytest.approx(0.9)

    def test_samples_mode(self, rng):
        samples = rng.normal(size=20000)
        res = opt_t(samples=samples, type="samples", nbins=30, degf=(20,))
        assert abs(res.pseudo.loc) < 0.2
        assert abs(res.pseudo.sc - 1.0) < 0.3
        assert res.nbins == 30
        assert 0.0 < res.util.util <= 1.0

    def test_function_mode(self):
        res = opt_t(target=stats.norm.logpdf, type="function", degf=(20,), tol_opt=1e-3)
        assert abs(res.pseudo.loc) < 0.1
        assert abs(res.pseudo.sc - 1.0) < 0.2
        assert res.nbins is None
        assert res.util.auc > 0.95

    def test_grid_mode(self):
        res = opt_t(target=normal.truth(), type="grid", nbins=50, degf=(20,), tol_opt=1e-4)
        assert abs(res.pseudo.loc) < 0.2
        assert abs(res.pseudo.sc - 1.0) < 0.3

    def test_kde_mode(self, rng):
        samples = rng.normal(size=2000)
        res = opt_t(samples=samples, type="samples_kde", degf=(20,), tol_opt=1e-3)
        assert abs(res.pseudo.loc) < 0.3
        assert abs(res.pseudo.sc - 1.0) < 0.4

    def test_trace_of_winner(self):
        res = opt_t(target=stats.norm.logpdf, type="function", degf=(5,), tol_opt=1e-3, lb=-5.0)
        assert res.opt.history.shape[1] == 3
        assert res.opt.history.shape[0] > 0
        np.testing.assert_allclose(res.opt.par, (res.pseudo.loc, res.pseudo.sc))
        assert res.pseudo.lb == -5.0
        assert "I(-5 < x < Inf)" in res.pseudo.label

    def test_samples_mode_default_degf(self, rng):
        samples = rng.normal(size=20000)
        res = opt_t(samples=samples, type="samples", nbins=30, coeffs=(1, 0))
        assert res.pseudo.degf == 20.0
        assert abs(res.pseudo.loc) < 0.2
        assert abs(res.pseudo.sc - 1.0) < 0.3

    def test_function_mode_default_degf(self):
        res = opt_t(target=stats.norm.logpdf, type="function", coeffs=(1, 0))
        assert res.request.inits == (0.5, 2.0)
        assert res.pseudo.degf == 20.0
        assert abs(res.pseudo.loc) < 0.1
        assert abs(res.pseudo.sc - 1.0) < 0.2


class TestStoppingTolerance:
    def test_relative_to_starting_utility(self):
        assert _fatol(-50.0, 1e-3) == pytest.approx(1e-3 * (50.0 + 1e-3))
        assert _fatol(0.0, 1e-6) == pytest.approx(1e-12)

    def test_starting_point_scored_first(self):
        history = []

        def utility(pseu, source, **kwargs):
            history.append((pseu.loc, pseu.sc))
            return UtilityBreakdown(util=-50.0)

        opt_t(target=stats.norm.logpdf, type="function", degf=(5,), utility=utility)
        assert history[0] == (0.5, 2.0)
