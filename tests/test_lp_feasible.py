import numpy as np
import pytest

from laminopt.lp_feasible import LpFeasible
from laminopt.miki import SubLaminateType, make_miki

COMBINATIONS = [(True, True), (False, True), (True, False), (False, False)]


def _initialised(balanced, symmetric, count=5, dual_scale=1.0):
    feasible = LpFeasible(balanced, symmetric, count)
    feasible.initialise(dual_scale)
    return feasible


@pytest.mark.parametrize("balanced, symmetric", COMBINATIONS)
def test_duality_gap_is_sum_over_sublaminates(balanced, symmetric):
    feasible = _initialised(balanced, symmetric, count=5, dual_scale=2.0)
    single = make_miki(SubLaminateType.SINGLE_MATERIAL, balanced, 2.0)
    assert feasible.duality_gap() == pytest.approx(5 * single.duality_gap())


@pytest.mark.parametrize("balanced, symmetric", COMBINATIONS)
def test_eval_at_start_adds_nothing(balanced, symmetric):
    feasible = _initialised(balanced, symmetric)
    var = np.linspace(-0.5, 0.5, feasible.size)
    assert np.allclose(feasible.eval(var), var)


def test_step_size_without_increments_keeps_steps():
    feasible = _initialised(True, True)
    assert feasible.step_size(1.0, 1.0) == pytest.approx((1.0, 1.0))
    assert feasible.step_size(0.5, 0.25) == pytest.approx((0.5, 0.25))


@pytest.mark.parametrize("balanced, symmetric", COMBINATIONS)
def test_hessian_is_symmetric_positive_definite_and_additive(balanced, symmetric):
    feasible = _initialised(balanced, symmetric)
    base = feasible.hessian_eval(np.zeros((feasible.size, feasible.size)))
    assert np.allclose(base, base.T)
    assert np.all(np.linalg.eigvalsh(base) > 0)
    shifted = feasible.hessian_eval(np.eye(feasible.size))
    assert np.allclose(shifted - base, np.eye(feasible.size))


@pytest.mark.parametrize("balanced, symmetric", COMBINATIONS)
def test_residual_vanishes_at_centred_start(balanced, symmetric):
    feasible = _initialised(balanced, symmetric)
    feasible.hessian_eval(np.zeros((feasible.size, feasible.size)))
    residual = feasible.calculate_residuals(np.zeros(feasible.size), np.zeros(feasible.size), 0.5)
    assert residual.shape == (feasible.size,)
    assert np.allclose(residual, 0.0)


@pytest.mark.parametrize("balanced, symmetric", COMBINATIONS)
def test_predictor_step_closes_the_gap(balanced, symmetric):
    feasible = _initialised(balanced, symmetric)
    assert feasible.duality_gap() > 0
    feasible.hessian_eval(np.zeros((feasible.size, feasible.size)))
    feasible.calculate_residuals(np.zeros(feasible.size), np.zeros(feasible.size), 0.0)
    feasible.update_increments(np.zeros(feasible.size))
    assert feasible.duality_gap() == pytest.approx(0.0, abs=1e-12)


def test_residuals_require_hessian_first():
    feasible = _initialised(True, True)
    with pytest.raises(RuntimeError):
        feasible.calculate_residuals(np.zeros(feasible.size), np.zeros(feasible.size), 1.0)


def test_non_positive_sublaminate_count_is_rejected():
    with pytest.raises(ValueError):
        LpFeasible(True, True, 0)