"""Laminate design section: lamination parameters plus a bounded thickness."""

import numpy as np

from .lp_feasible import LpFeasible
from .scalar_sdp import LowerBound, UpperBound


class LaminateSection:
    """Interior-point constraints on one laminate block of the design vector.

    The block holds the lamination parameters followed by the thickness. The
    parameters must be feasible; the thickness must lie between its bounds.
    """

    def __init__(self, balanced: bool, symmetric: bool = True, sublaminate_count: int = 5) -> None:
        self.lp_feasible = LpFeasible(balanced, symmetric, sublaminate_count)
        self.size = self.lp_feasible.size + 1
        self.upper_thickness = UpperBound()
        self.lower_thickness = LowerBound()
        self.last_hessian = np.zeros((self.size, self.size))
        self.last_residual = np.zeros(self.size)

    @property
    def _thickness_index(self) -> int:
        return self.size - 1

    def set_thickness_bounds(self, lower: float, upper: float) -> None:
        """Set the thickness bounds; call before ``initialise``."""
        self.lower_thickness.bound = lower
        self.upper_thickness.bound = upper

    def initialise(self, dual_scale: float, var) -> None:
        """Start the interior-point state at the design block ``var``."""
        var = np.asarray(var, dtype=float)
        if var.shape != (self.size,):
            raise ValueError(f"Laminate section expects {self.size} variables, got {var.shape}.")
        thickness = float(var[self._thickness_index])
        self.lp_feasible.initialise(dual_scale)
        self.upper_thickness.initialise(dual_scale, thickness)
        self.lower_thickness.initialise(dual_scale, thickness)

    def step_size(self, primal_step: float, dual_step: float) -> tuple[float, float]:
        """Return the step lengths reduced to keep every constraint interior."""
        primal_step, dual_step = self.lp_feasible.step_size(primal_step, dual_step)
        primal_step, dual_step = self.upper_thickness.step_size(primal_step, dual_step)
        return self.lower_thickness.step_size(primal_step, dual_step)

    def duality_gap(self) -> float:
        """Total complementarity gap of the section."""
        return (
            self.lp_feasible.duality_gap()
            + self.upper_thickness.duality_gap()
            + self.lower_thickness.duality_gap()
        )

    def hessian_eval(self, hessian) -> np.ndarray:
        """Return ``hessian`` plus the barrier Hessian of the section."""
        t = self._thickness_index
        result = np.array(hessian, dtype=float)
        result[:t, :t] = self.lp_feasible.hessian_eval(result[:t, :t])
        result[t, t] = self.upper_thickness.hessian(result[t, t])
        result[t, t] = self.lower_thickness.hessian(result[t, t])
        self.last_hessian = result.copy()
        return result

    def calculate_residuals(self, var, residual, penalty: float) -> np.ndarray:
        """Return ``residual`` plus the section's residual at ``var``."""
        t = self._thickness_index
        var = np.asarray(var, dtype=float)
        result = np.array(residual, dtype=float)
        result[:t] = self.lp_feasible.calculate_residuals(var[:t], result[:t], penalty)
        result[t] = self.upper_thickness.calculate_residuals(result[t], penalty)
        result[t] = self.lower_thickness.calculate_residuals(result[t], penalty)
        self.last_residual = result.copy()
        return result

    def update_increments(self, dvar) -> None:
        """Propagate the design increment ``dvar`` to every constraint."""
        t = self._thickness_index
        dvar = np.asarray(dvar, dtype=float)
        self.lp_feasible.update_increments(dvar[:t])
        self.upper_thickness.update_increments(float(dvar[t]))
        self.lower_thickness.update_increments(float(dvar[t]))

    def update_variables(self, primal_step: float, dual_step: float) -> None:
        """Apply the pending increments with the given step lengths."""
        self.lp_feasible.update_variables(primal_step, dual_step)
        self.upper_thickness.update_variables(primal_step, dual_step)
        self.lower_thickness.update_variables(primal_step, dual_step)