"""Scalar (one-dimensional cone) interior-point constraints and variable bounds."""

from abc import ABC, abstractmethod

from .sdp_parameter import step_size_control


class ScalarConstraint(ABC):
    """Primal-dual state of a constraint whose slack is a single scalar.

    Subclasses describe the constraint through ``init_value``, ``eval``,
    ``ad_eval`` and ``hessian_eval``.
    """

    def __init__(self) -> None:
        self.slack = 0.0
        self.dslack = 0.0
        self.dual = 0.0
        self.ddual = 0.0
        self.inv_slack = 0.0
        self.duality_residual = 0.0

    @abstractmethod
    def init_value(self, var: float) -> float:
        """Slack at the starting point ``var``."""

    @abstractmethod
    def eval(self, var: float) -> float:
        """Linear part of the slack for the variable ``var``."""

    @abstractmethod
    def ad_eval(self, dual: float, residual: float) -> float:
        """Residual with the adjoint contribution of ``dual`` added."""

    @abstractmethod
    def hessian_eval(self, slack: float, dual: float, hessian: float) -> float:
        """Hessian with the barrier contribution added."""

    def initialise(self, dual_scale: float, var: float = 0.0) -> None:
        """Start from ``var`` with the dual set to ``dual_scale`` times the inverse slack."""
        self.slack = self.init_value(var)
        self.inv_slack = 1.0 / self.slack
        self.dual = dual_scale * self.inv_slack
        self.dslack = 0.0
        self.ddual = 0.0

    def calculate_residuals(self, residual: float, penalty: float) -> float:
        """Return ``residual`` with this constraint's dual and centring terms added."""
        residual = self.ad_eval(self.dual, residual)
        self.duality_residual = penalty - self.slack * self.dual - self.dslack * self.ddual
        self.ddual = self.inv_slack * self.duality_residual
        return self.ad_eval(self.ddual, residual)

    def hessian(self, hessian: float) -> float:
        """Return ``hessian`` with this constraint's contribution added."""
        return self.hessian_eval(self.inv_slack, self.dual, hessian)

    def duality_gap(self) -> float:
        """Complementarity gap at the current point plus pending increments."""
        return (self.slack + self.dslack) * (self.dual + self.ddual)

    def update_increments(self, dvar: float) -> None:
        """Derive slack and dual increments from the variable increment ``dvar``."""
        self.dslack = self.eval(dvar)
        self.duality_residual -= self.dslack * self.dual
        self.ddual = self.inv_slack * self.duality_residual

    def step_size(self, primal_step: float, dual_step: float) -> tuple[float, float]:
        """Return the given step lengths, reduced to keep slack and dual positive."""
        step = step_size_control(self.dslack / self.slack)
        primal_step = primal_step if primal_step < step else step
        step = step_size_control(self.ddual / self.dual)
        dual_step = dual_step if dual_step < step else step
        return primal_step, dual_step

    def update_variables(self, primal_step: float, dual_step: float) -> None:
        """Apply the increments with the given step lengths and clear them."""
        self.slack += primal_step * self.dslack
        self.dual += dual_step * self.ddual
        self.inv_slack = 1.0 / self.slack
        self.dslack = 0.0
        self.ddual = 0.0


class UpperBound(ScalarConstraint):
    """The constraint ``var <= bound``."""

    def __init__(self, bound: float = 0.0) -> None:
        super().__init__()
        self.bound = bound

    def init_value(self, var: float) -> float:
        return self.eval(var) + self.bound

    def eval(self, var: float) -> float:
        return -var

    def ad_eval(self, dual: float, residual: float) -> float:
        return residual - dual

    def hessian_eval(self, slack: float, dual: float, hessian: float) -> float:
        return hessian + slack * dual


class LowerBound(ScalarConstraint):
    """The constraint ``var >= bound``."""

    def __init__(self, bound: float = 0.0) -> None:
        super().__init__()
        self.bound = bound

    def init_value(self, var: float) -> float:
        return self.eval(var) - self.bound

    def eval(self, var: float) -> float:
        return var

    def ad_eval(self, dual: float, residual: float) -> float:
        return residual + dual

    def hessian_eval(self, slack: float, dual: float, hessian: float) -> float:
        return hessian + slack * dual