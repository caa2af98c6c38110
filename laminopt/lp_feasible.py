"""Feasible region of laminate lamination parameters built from Miki-feasible sublaminates."""

import numpy as np
from scipy.linalg import cho_factor, cho_solve

from .laminate_layout import clt_weights, variable_layout
from .miki import SubLaminateType, make_miki


class LpFeasible:
    """Interior-point constraint: lamination parameters are a weighted sum of
    sublaminate parameters, each of which lies in its Miki cone.

    The sublaminate variables are eliminated, so the constraint acts on the
    laminate lamination-parameter vector only. ``hessian_eval`` must be
    called before ``calculate_residuals`` in every iteration.
    """

    def __init__(self, balanced: bool, symmetric: bool = True, sublaminate_count: int = 5) -> None:
        if sublaminate_count <= 0:
            raise ValueError("Laminate must have a positive sublaminate count.")
        self.layout = variable_layout(balanced, symmetric)
        self.size = self.layout.size
        self.weights = clt_weights(symmetric, sublaminate_count)
        self.sublaminates = [
            make_miki(SubLaminateType.SINGLE_MATERIAL, balanced) for _ in range(sublaminate_count)
        ]
        nvar = self.layout.nvar
        self._sub_var = [np.zeros(nvar) for _ in self.sublaminates]
        self._sub_dvar = [np.zeros(nvar) for _ in self.sublaminates]
        self._sub_factors = [None] * sublaminate_count
        self._dual_factor = None
        self._duality_residual = np.zeros(self.size)

    def _blocks(self, vector: np.ndarray) -> np.ndarray:
        return vector.reshape(self.layout.nvartype, self.layout.nvar)

    def _columns(self):
        return zip(self.sublaminates, self.weights.T)

    def initialise(self, dual_scale: float) -> None:
        """Start every sublaminate at zero with the given dual scale."""
        nvar = self.layout.nvar
        self._sub_var = [np.zeros(nvar) for _ in self.sublaminates]
        self._sub_dvar = [np.zeros(nvar) for _ in self.sublaminates]
        for miki, sub_var in zip(self.sublaminates, self._sub_var):
            miki.initialise(dual_scale, sub_var)

    def eval(self, var) -> np.ndarray:
        """Return ``var`` plus the lamination parameters assembled from the sublaminates."""
        result = np.array(var, dtype=float)
        blocks = self._blocks(result)
        for weight, sub_var in zip(self.weights.T, self._sub_var):
            blocks += np.outer(weight, sub_var)
        return result

    def duality_gap(self) -> float:
        """Sum of the sublaminate duality gaps."""
        return sum(miki.duality_gap() for miki in self.sublaminates)

    def step_size(self, primal_step: float, dual_step: float) -> tuple[float, float]:
        """Return the step lengths reduced so that every sublaminate stays feasible."""
        for miki in self.sublaminates:
            primal_step, dual_step = miki.step_size(primal_step, dual_step)
        return primal_step, dual_step

    def hessian_eval(self, hessian) -> np.ndarray:
        """Return ``hessian`` plus the reduced barrier Hessian of this constraint."""
        nvar = self.layout.nvar
        hessian_dual = np.zeros((self.size, self.size))
        for index, (miki, weight) in enumerate(self._columns()):
            sub_hessian = miki.hessian(np.zeros((nvar, nvar)))
            factor = cho_factor(sub_hessian, lower=True)
            self._sub_factors[index] = factor
            sub_inverse = cho_solve(factor, np.eye(nvar))
            hessian_dual += np.kron(np.outer(weight, weight), sub_inverse)
        self._dual_factor = cho_factor(hessian_dual, lower=True)
        return np.array(hessian, dtype=float) + cho_solve(self._dual_factor, np.eye(self.size))

    def _require_factors(self) -> None:
        if self._dual_factor is None:
            raise RuntimeError("hessian_eval must be called before residuals or increments.")

    def calculate_residuals(self, var, residual, penalty: float) -> np.ndarray:
        """Return ``residual`` plus this constraint's reduced residual at ``var``."""
        self._require_factors()
        duality_residual = -np.array(var, dtype=float)
        blocks = self._blocks(duality_residual)
        nvar = self.layout.nvar
        for index, (miki, weight) in enumerate(self._columns()):
            sub_residual = miki.calculate_residuals(np.zeros(nvar), penalty)
            self._sub_dvar[index] = sub_residual
            correction = cho_solve(self._sub_factors[index], sub_residual)
            blocks += np.outer(weight, self._sub_var[index] + correction)
        self._duality_residual = duality_residual
        return np.array(residual, dtype=float) + cho_solve(self._dual_factor, duality_residual)

    def update_increments(self, dvar) -> None:
        """Recover the sublaminate increments from the laminate increment ``dvar``."""
        self._require_factors()
        rhs = -self._duality_residual + np.asarray(dvar, dtype=float)
        self._duality_residual = cho_solve(self._dual_factor, rhs)
        blocks = self._blocks(self._duality_residual)
        for index, (miki, weight) in enumerate(self._columns()):
            sub_dvar = self._sub_dvar[index] + weight @ blocks
            sub_dvar = cho_solve(self._sub_factors[index], sub_dvar)
            self._sub_dvar[index] = sub_dvar
            miki.update_increments(sub_dvar)

    def update_variables(self, primal_step: float, dual_step: float) -> None:
        """Apply the sublaminate increments with the given step lengths."""
        for index, miki in enumerate(self.sublaminates):
            self._sub_var[index] = self._sub_var[index] + primal_step * self._sub_dvar[index]
            miki.update_variables(primal_step, dual_step)