import numpy as np
import pytest
from scipy.linalg import cho_factor, cho_solve

from laminopt.laminate_section import LaminateSection
from laminopt.sdp_parameter import corrector_duality_reduction, predictor_duality_reduction

COMBINATIONS = [(True, True), (False, True), (True, False), (False, False)]


def _project(section, target, lower, upper, tolerance=1.0e-8, max_iterations=30):
    current = np.array(target, dtype=float)
    section.set_thickness_bounds(lower, upper)
    section.initialise(1.0, current)
    gaps = []
    for _ in range(max_iterations):
        gap = section.duality_gap()
        gaps.append(gap)
        penalty = gap / section.size
        hessian = section.hessian_eval(np.eye(section.size))
        residual = section.calculate_residuals(
            current, -(current - target), predictor_duality_reduction() * penalty
        )
        factor = cho_factor(hessian)
        increment = cho_solve(factor, residual)
        section.update_increments(increment)

        corrector = corrector_duality_reduction(gap, section.duality_gap())
        residual = section.calculate_residuals(current, -(current - target), corrector * penalty)
        increment = cho_solve(factor, residual)
        section.update_increments(increment)

        primal_step, dual_step = section.step_size(1.0, 1.0)
        section.update_variables(primal_step, dual_step)
        current = current + primal_step * increment
        if gap <= tolerance:
            break
    return current, gaps


def _centred_target(section):
    target = np.zeros(section.size)
    target[-1] = 2.0
    return target


@pytest.mark.parametrize("balanced, symmetric", COMBINATIONS)
def test_projection_of_centred_point_converges_in_place(balanced, symmetric):
    section = LaminateSection(balanced, symmetric, 5)
    target = _centred_target(section)
    current, gaps = _project(section, target, 1.0, 3.0)
    assert gaps[-1] <= 1.0e-8
    assert len(gaps) < 30
    assert all(later < earlier for earlier, later in zip(gaps, gaps[1:]))
    assert np.allclose(current, target, atol=1.0e-10)


@pytest.mark.parametrize("balanced, symmetric", COMBINATIONS)
def test_hessian_keeps_thickness_decoupled(balanced, symmetric):
    section = LaminateSection(balanced, symmetric, 5)
    section.set_thickness_bounds(1.0, 3.0)
    section.initialise(1.0, _centred_target(section))
    hessian = section.hessian_eval(np.eye(section.size))
    assert hessian.shape == (section.size, section.size)
    assert np.allclose(hessian, hessian.T)
    assert np.allclose(hessian[-1, :-1], 0.0)
    assert np.all(np.linalg.eigvalsh(hessian) > 0)
    assert np.array_equal(section.last_hessian, hessian)


def test_residual_pushes_thickness_away_from_nearer_bound():
    section = LaminateSection(True, True, 5)
    start = np.zeros(section.size)
    start[-1] = 2.5
    section.set_thickness_bounds(1.0, 3.0)
    section.initialise(1.0, start)
    section.hessian_eval(np.eye(section.size))
    residual = section.calculate_residuals(start, np.zeros(section.size), 1.0)
    assert residual[-1] < 0
    assert np.allclose(residual[:-1], 0.0)
    assert np.array_equal(section.last_residual, residual)


def test_initial_gap_counts_every_constraint():
    section = LaminateSection(True, True, 5)
    section.set_thickness_bounds(1.0, 3.0)
    section.initialise(1.0, _centred_target(section))
    expected = (
        section.lp_feasible.duality_gap()
        + section.upper_thickness.duality_gap()
        + section.lower_thickness.duality_gap()
    )
    assert section.duality_gap() == pytest.approx(expected)
    assert section.upper_thickness.duality_gap() == pytest.approx(1.0)


def test_size_includes_thickness():
    section = LaminateSection(False, False, 5)
    assert section.size == section.lp_feasible.size + 1


def test_wrong_variable_count_is_rejected():
    section = LaminateSection(True, True, 5)
    with pytest.raises(ValueError):
        section.initialise(1.0, np.zeros(section.size + 1))