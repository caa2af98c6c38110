import numpy as np
import pytest

from laminopt.approx_function import ConLinApproximation

DESIGN = np.array([0.5, 2.0, 1.5])
RESPONSES = np.array([3.0, -0.2])
GRADIENTS = np.array([
    [1.0, -2.0],
    [-0.5, 0.3],
    [0.25, -1.0],
])
MASK = np.array([1.0, 0.0])


def _conlin():
    approx = ConLinApproximation(2, 3)
    approx.configure_conlin_model(DESIGN, RESPONSES, GRADIENTS, MASK, 1)
    return approx


def _finite_difference_gradients(approx, design, step=1.0e-6):
    columns = []
    for index in range(len(design)):
        offset = np.zeros_like(design)
        offset[index] = step
        columns.append((approx.evaluate(design + offset) - approx.evaluate(design - offset)) / (2 * step))
    return np.array(columns)


def test_linear_model_reproduces_reference():
    approx = ConLinApproximation(2, 3)
    approx.configure_linear_model(DESIGN, RESPONSES, GRADIENTS, MASK, 1)
    np.testing.assert_allclose(approx.evaluate(DESIGN), RESPONSES)
    responses, gradients, hessian = approx.evaluate_with_derivatives(DESIGN, np.ones(2))
    np.testing.assert_allclose(responses, RESPONSES)
    np.testing.assert_allclose(gradients, GRADIENTS)
    assert not hessian.any()


def test_conlin_model_matches_value_and_gradient_at_reference():
    approx = _conlin()
    responses, gradients, _ = approx.evaluate_with_derivatives(DESIGN, np.ones(2))
    np.testing.assert_allclose(responses, RESPONSES)
    np.testing.assert_allclose(gradients, GRADIENTS)


def test_conlin_splits_terms_by_sign_of_scaled_gradient():
    approx = _conlin()
    negative = GRADIENTS * DESIGN[:, None] < 0
    assert np.all(approx.linear_gradients[negative] == 0.0)
    assert np.all(approx.reciprocal_gradients[~negative] == 0.0)
    assert np.all(approx.reciprocal_gradients[negative] > 0.0)
    np.testing.assert_allclose(approx.linear_gradients[~negative], GRADIENTS[~negative])


def test_gradients_match_finite_differences_away_from_reference():
    approx = _conlin()
    point = np.array([0.8, 1.2, 2.5])
    _, gradients, _ = approx.evaluate_with_derivatives(point, np.ones(2))
    np.testing.assert_allclose(gradients, _finite_difference_gradients(approx, point), rtol=1e-6, atol=1e-8)


def test_hessian_is_dual_weighted_second_derivative():
    approx = _conlin()
    point = np.array([0.8, 1.2, 2.5])
    duals = np.array([0.7, 1.9])
    step = 1.0e-5
    _, hessian, = approx.evaluate_with_derivatives(point, duals)[2:]
    assert np.allclose(hessian, np.diag(np.diag(hessian)))
    for index in range(3):
        offset = np.zeros(3)
        offset[index] = step
        plus = approx.evaluate_with_derivatives(point + offset, duals)[1]
        minus = approx.evaluate_with_derivatives(point - offset, duals)[1]
        expected = (plus[index] - minus[index]) / (2 * step) @ duals
        assert hessian[index, index] == pytest.approx(expected, rel=1e-5)


def test_conlin_hessian_is_positive_semidefinite_for_nonnegative_duals():
    approx = _conlin()
    _, _, hessian = approx.evaluate_with_derivatives(np.array([1.0, 1.0, 1.0]), np.array([1.0, 2.0]))
    assert np.all(np.diag(hessian) >= 0.0)


def test_configure_model_direct_coefficients():
    approx = ConLinApproximation(1, 1)
    approx.configure_model([0.0], [[0.0]], [[2.0]], [1.0], 1)
    assert approx.evaluate([4.0])[0] == pytest.approx(0.5)


def test_evaluate_agrees_with_evaluate_with_derivatives():
    approx = _conlin()
    point = np.array([1.1, 0.9, 3.0])
    np.testing.assert_allclose(approx.evaluate(point), approx.evaluate_with_derivatives(point, np.ones(2))[0])


def test_boolean_vector_returns_mask_and_count():
    approx = _conlin()
    mask, count = approx.boolean_vector()
    np.testing.assert_array_equal(mask, MASK)
    assert count == 1


def test_fresh_model_is_zero():
    approx = ConLinApproximation(2, 3)
    np.testing.assert_array_equal(approx.evaluate(DESIGN), np.zeros(2))
    mask, count = approx.boolean_vector()
    assert count == 0 and not mask.any()


def test_shape_mismatch_raises():
    approx = ConLinApproximation(2, 3)
    with pytest.raises(ValueError):
        approx.configure_linear_model(DESIGN[:2], RESPONSES, GRADIENTS, MASK, 1)
    with pytest.raises(ValueError):
        approx.configure_conlin_model(DESIGN, RESPONSES, GRADIENTS.T, MASK, 1)
    with pytest.raises(ValueError):
        approx.evaluate([1.0])