"""Separable linear or diagonal-quadratic approximation of design responses."""

import numpy as np


class QuadraticApproximation:
    """Approximation of several responses of a design vector.

    Each response ``r`` is modelled as::

        free[r] + sum_i linear[i, r] * x[i] + 0.5 * sum_i curvature[i, r] * x[i] ** 2

    Gradient and curvature arrays have shape ``(variable_count, response_count)``,
    one column per response. The objective mask marks the responses that form
    the objective set of a min-max problem. Configuring a model resizes the
    approximation to the dimensions of the reference data.
    """

    def __init__(self, response_count: int = 0, variable_count: int = 0) -> None:
        self._resize(response_count, variable_count)

    def _resize(self, response_count: int, variable_count: int) -> None:
        if response_count < 0 or variable_count < 0:
            raise ValueError("Response and variable counts must not be negative.")
        self.response_count = int(response_count)
        self.variable_count = int(variable_count)
        self.free_terms = np.zeros(self.response_count)
        self.linear_gradients = np.zeros((self.variable_count, self.response_count))
        self.curvature = np.zeros((self.variable_count, self.response_count))
        self.objective_mask = np.zeros(self.response_count)
        self.objective_count = 0

    def _vector(self, values, length: int, name: str) -> np.ndarray:
        array = np.array(values, dtype=float)
        if array.shape != (length,):
            raise ValueError(f"{name} must have shape ({length},), got {array.shape}.")
        return array

    def _matrix(self, values, name: str) -> np.ndarray:
        array = np.array(values, dtype=float)
        expected = (self.variable_count, self.response_count)
        if array.shape != expected:
            raise ValueError(f"{name} must have shape {expected}, got {array.shape}.")
        return array

    def _prepare(self, reference_design, reference_responses) -> tuple[np.ndarray, np.ndarray]:
        design = np.array(reference_design, dtype=float)
        responses = np.array(reference_responses, dtype=float)
        if design.ndim != 1 or responses.ndim != 1:
            raise ValueError("Reference design and responses must be one-dimensional.")
        self._resize(responses.shape[0], design.shape[0])
        return design, responses

    def _set_objectives(self, objective_mask, objective_count: int) -> None:
        self.objective_mask = self._vector(objective_mask, self.response_count, "Objective mask")
        self.objective_count = int(objective_count)

    def boolean_vector(self) -> tuple[np.ndarray, int]:
        """Return the objective mask and the number of objective responses."""
        return self.objective_mask.copy(), self.objective_count

    def configure_linear_model(self, reference_design, reference_responses, gradients,
                               objective_mask, objective_count) -> None:
        """Linear model through the reference responses with the given gradients."""
        design, responses = self._prepare(reference_design, reference_responses)
        gradients = self._matrix(gradients, "Gradients")
        self.linear_gradients = gradients
        self.curvature = np.zeros_like(gradients)
        self.free_terms = responses - gradients.T @ design
        self._set_objectives(objective_mask, objective_count)

    def configure_quadratic_model(self, reference_design, reference_responses, gradients,
                                  curvature, objective_mask, objective_count) -> None:
        """Diagonal quadratic model matching the reference responses and gradients.

        ``curvature[i, r]`` is the second derivative of response ``r`` with
        respect to variable ``i``.
        """
        design, responses = self._prepare(reference_design, reference_responses)
        gradients = self._matrix(gradients, "Gradients")
        curvature = self._matrix(curvature, "Curvature")
        column = design[:, None]
        self.curvature = curvature
        self.linear_gradients = gradients - curvature * column
        self.free_terms = (
            responses
            - (gradients * column).sum(axis=0)
            + 0.5 * (curvature * column * column).sum(axis=0)
        )
        self._set_objectives(objective_mask, objective_count)

    def _has_curvature(self) -> bool:
        return bool(np.any(self.curvature != 0.0))

    def evaluate(self, design) -> np.ndarray:
        """Approximate responses at ``design``."""
        x = self._vector(design, self.variable_count, "Design")
        responses = self.free_terms + self.linear_gradients.T @ x
        if self._has_curvature():
            responses = responses + 0.5 * self.curvature.T @ (x * x)
        return responses

    def evaluate_with_derivatives(self, design, duals) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Responses, their gradients and the dual-weighted Hessian at ``design``.

        The Hessian is diagonal: the sum over responses of ``duals[r]`` times
        the curvature of response ``r``.
        """
        x = self._vector(design, self.variable_count, "Design")
        weights = self._vector(duals, self.response_count, "Duals")
        responses = self.free_terms + self.linear_gradients.T @ x
        gradients = self.linear_gradients.copy()
        hessian = np.zeros((self.variable_count, self.variable_count))
        if self._has_curvature():
            responses = responses + 0.5 * self.curvature.T @ (x * x)
            gradients = gradients + self.curvature * x[:, None]
            hessian[np.diag_indices(self.variable_count)] += self.curvature @ weights
        return responses, gradients, hessian