import numpy as np
import pytest
import scipy.stats as stats

from pseudo_target import pseudo_t
from validation import integrate_density, validate_pseudo_target


def test_integrate_density():
    assert integrate_density(stats.norm.pdf, -8.0, 8.0) == pytest.approx(1.0, abs=1e-6)


@pytest.mark.parametrize("pseudo", [
    pseudo_t(0.0, 1.0, 1.0, lb=0.0),
    pseudo_t(0.5, 0.8, 5.0, lb=-1.0, ub=2.0),
    pseudo_t(-3.0, 1.0, 20.0, lb=0.0),
    pseudo_t(1.0, 2.0, 3.0),
])
def test_pseudo_targets_are_valid(pseudo):
    out = validate_pseudo_target(pseudo)
    assert out["integral"] == pytest.approx(out["norm_const"], rel=1e-5)
    assert out["grid_integral"] == pytest.approx(1.0, abs=1e-2)
    assert out["max_roundtrip_error"] < 1e-8


def test_untruncated_mass_is_one():
    out = validate_pseudo_target(pseudo_t(0.0, 1.0, 5.0))
    assert out["integral"] == pytest.approx(1.0, abs=1e-6)
