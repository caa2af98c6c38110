"""Convex linearisation (ConLin) approximation of design responses."""

import numpy as np


class ConLinApproximation:
    """Separable approximation of several responses of a design vector.

    Each response ``r`` is modelled as::

        free[r] + sum_i linear[i, r] * x[i] + sum_i reciprocal[i, r] / x[i]

    Gradient arrays have shape ``(variable_count, response_count)``, one
    column per response. The objective mask marks the responses that form
    the objective set of a min-max problem.
    """

    def __init__(self, response_count: int, variable_count: int) -> None:
        if response_count <= 0 or variable_count <= 0:
            raise ValueError("Response and variable counts must be positive.")
        self.response_count = response_count
        self.variable_count = variable_count
        self.free_terms = np.zeros(response_count)
        self.linear_gradients = np.zeros((variable_count, response_count))
        self.reciprocal_gradients = np.zeros((variable_count, response_count))
        self.objective_mask = np.zeros(response_count)
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

    def _set_objectives(self, objective_mask, objective_count: int) -> None:
        self.objective_mask = self._vector(objective_mask, self.response_count, "Objective mask")
        self.objective_count = int(objective_count)

    def boolean_vector(self) -> tuple[np.ndarray, int]:
        """Return the objective mask and the number of objective responses."""
        return self.objective_mask.copy(), self.objective_count

    def configure_linear_model(self, reference_design, reference_responses, gradients,
                               objective_mask, objective_count) -> None:
        """Linear model through the reference responses with the given gradients."""
        design = self._vector(reference_design, self.variable_count, "Reference design")
        responses = self._vector(reference_responses, self.response_count, "Reference responses")
        gradients = self._matrix(gradients, "Gradients")
        self.linear_gradients = gradients
        self.reciprocal_gradients = np.zeros_like(gradients)
        self.free_terms = responses - gradients.T @ design
        self._set_objectives(objective_mask, objective_count)

    def configure_conlin_model(self, reference_design, reference_responses, gradients,
                               objective_mask, objective_count) -> None:
        """ConLin model: terms with a negative ``gradient * x`` become reciprocal.

        The model matches the reference responses and gradients at the
        reference design.
        """
        design = self._vector(reference_design, self.variable_count, "Reference design")
        responses = self._vector(reference_responses, self.response_count, "Reference responses")
        gradients = self._matrix(gradients, "Gradients")

        scaled = gradients * design[:, None]
        reciprocal = scaled < 0
        self.linear_gradients = np.where(reciprocal, 0.0, gradients)
        self.reciprocal_gradients = np.where(reciprocal, -design[:, None] * scaled, 0.0)
        self.free_terms = (
            responses
            + np.where(reciprocal, scaled, 0.0).sum(axis=0)
            - np.where(reciprocal, 0.0, scaled).sum(axis=0)
        )
        self._set_objectives(objective_mask, objective_count)

    def configure_model(self, free_terms, linear_gradients, reciprocal_gradients,
                        objective_mask, objective_count) -> None:
        """Set every coefficient of the model directly."""
        self.free_terms = self._vector(free_terms, self.response_count, "Free terms")
        self.linear_gradients = self._matrix(linear_gradients, "Linear gradients")
        self.reciprocal_gradients = self._matrix(reciprocal_gradients, "Reciprocal gradients")
        self._set_objectives(objective_mask, objective_count)

    def _active_reciprocal(self) -> np.ndarray:
        return np.any(self.reciprocal_gradients != 0.0, axis=0)

    def evaluate(self, design) -> np.ndarray:
        """Approximate responses at ``design``."""
        x = self._vector(design, self.variable_count, "Design")
        responses = self.free_terms + self.linear_gradients.T @ x
        active = self._active_reciprocal()
        if active.any():
            inverse = 1.0 / x
            responses[active] += self.reciprocal_gradients[:, active].T @ inverse
        return responses

    def evaluate_with_derivatives(self, design, duals) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Responses, their gradients and the dual-weighted Hessian at ``design``.

        The Hessian is diagonal: the sum over responses of ``duals[r]`` times
        the second derivative of response ``r``.
        """
        x = self._vector(design, self.variable_count, "Design")
        weights = self._vector(duals, self.response_count, "Duals")
        responses = self.free_terms + self.linear_gradients.T @ x
        gradients = self.linear_gradients.copy()
        hessian = np.zeros((self.variable_count, self.variable_count))
        active = self._active_reciprocal()
        if active.any():
            inverse = 1.0 / x
            reciprocal = self.reciprocal_gradients[:, active]
            responses[active] += reciprocal.T @ inverse
            gradients[:, active] -= reciprocal * (inverse * inverse)[:, None]
            curvature = 2.0 * reciprocal * (inverse ** 3)[:, None]
            hessian[np.diag_indices(self.variable_count)] += curvature @ weights[active]
        return responses, gradients, hessian