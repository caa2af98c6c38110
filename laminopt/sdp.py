"""Matrix (semidefinite cone) interior-point constraints."""

from abc import ABC, abstractmethod

import numpy as np
from scipy.linalg import cho_factor, cho_solve, eigh

from .sdp_parameter import step_size_control


def _spd_inverse(matrix: np.ndarray) -> np.ndarray:
    factor = cho_factor(matrix, lower=True)
    return cho_solve(factor, np.eye(matrix.shape[0]))


def _find_step(value: np.ndarray, direction: np.ndarray) -> float:
    return float(eigh(direction, value, eigvals_only=True).min())


def _product_diagonal_sum(left: np.ndarray, right: np.ndarray) -> float:
    """Sum of the diagonal of ``left @ right`` without forming the product."""
    return float((left * right.T).sum())


class MatrixConstraint(ABC):
    """Primal-dual state of a linear matrix inequality ``A(var) >= 0``.

    Subclasses set ``dim`` (matrix dimension) and ``size`` (number of
    variables) and implement ``init_value``, ``eval``, ``ad_eval`` and
    ``hessian_eval``. Residuals and Hessians are returned as new arrays.
    """

    dim: int
    size: int

    def __init__(self) -> None:
        zeros = np.zeros((self.dim, self.dim))
        self.primal = zeros.copy()
        self.dprimal = zeros.copy()
        self.dual = zeros.copy()
        self.ddual = zeros.copy()
        self.inv_primal = zeros.copy()
        self.duality_residual = zeros.copy()

    @abstractmethod
    def init_value(self, var: np.ndarray) -> np.ndarray:
        """Primal matrix at the starting point ``var``."""

    @abstractmethod
    def eval(self, var: np.ndarray) -> np.ndarray:
        """Linear part of the primal matrix for the variables ``var``."""

    @abstractmethod
    def ad_eval(self, dual: np.ndarray, residual: np.ndarray) -> np.ndarray:
        """Residual with the adjoint of the linear map applied to ``dual`` added."""

    @abstractmethod
    def hessian_eval(self, primal: np.ndarray, dual: np.ndarray, hessian: np.ndarray) -> np.ndarray:
        """Hessian with the barrier contribution added."""

    def initialise(self, dual_scale: float, var=None) -> None:
        """Start from ``var`` (zero by default) with the dual a multiple of the inverse primal."""
        if var is None:
            var = np.zeros(self.size)
        self.primal = np.asarray(self.init_value(np.asarray(var, dtype=float)), dtype=float)
        self.inv_primal = _spd_inverse(self.primal)
        self.dual = dual_scale * self.inv_primal
        self.dprimal = np.zeros((self.dim, self.dim))
        self.ddual = np.zeros((self.dim, self.dim))

    def calculate_residuals(self, residual, penalty: float) -> np.ndarray:
        """Return ``residual`` with this constraint's dual and centring terms added."""
        residual = self.ad_eval(self.dual, np.array(residual, dtype=float))
        self.duality_residual = (
            penalty * np.eye(self.dim) - self.primal @ self.dual - self.dprimal @ self.ddual
        )
        ddual = self.inv_primal @ self.duality_residual
        self.ddual = (ddual + ddual.T) / 2.0
        return self.ad_eval(self.ddual, residual)

    def hessian(self, hessian) -> np.ndarray:
        """Return ``hessian`` with this constraint's contribution added."""
        return self.hessian_eval(self.inv_primal, self.dual, hessian)

    def duality_gap(self) -> float:
        """Complementarity gap at the current point plus pending increments."""
        return _product_diagonal_sum(self.primal + self.dprimal, self.dual + self.ddual)

    def update_increments(self, dvar) -> None:
        """Derive primal and dual increments from the variable increment ``dvar``."""
        self.dprimal = np.asarray(self.eval(np.asarray(dvar, dtype=float)), dtype=float)
        self.duality_residual = self.duality_residual - self.dprimal @ self.dual
        ddual = self.inv_primal @ self.duality_residual
        self.ddual = (ddual + ddual.T) / 2.0

    def step_size(self, primal_step: float, dual_step: float) -> tuple[float, float]:
        """Return the given step lengths, reduced to stay inside the cone."""
        step = step_size_control(_find_step(self.primal, self.dprimal))
        primal_step = min(primal_step, step)
        step = step_size_control(_find_step(self.dual, self.ddual))
        dual_step = min(dual_step, step)
        return primal_step, dual_step

    def update_variables(self, primal_step: float, dual_step: float) -> None:
        """Apply the increments with the given step lengths and clear them."""
        self.primal = self.primal + primal_step * self.dprimal
        self.dual = self.dual + dual_step * self.ddual
        self.inv_primal = _spd_inverse(self.primal)
        self.dprimal = np.zeros((self.dim, self.dim))
        self.ddual = np.zeros((self.dim, self.dim))