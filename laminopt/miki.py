"""Miki feasibility cones for the lamination parameters of one sublaminate."""

import enum

import numpy as np

from .sdp import MatrixConstraint


class SubLaminateType(enum.Enum):
    SINGLE_MATERIAL = "single_material"
    MULTI_MATERIAL = "multi_material"


class MikiUnbalanced(MatrixConstraint):
    """Miki cone over four lamination parameters (unbalanced, single material)."""

    dim = 3
    size = 4

    def __init__(self, dual_scale=None) -> None:
        super().__init__()
        if dual_scale is not None:
            self.initialise(dual_scale, np.zeros(self.size))

    def init_value(self, var) -> np.ndarray:
        return self.eval(var) + np.eye(self.dim)

    def eval(self, var) -> np.ndarray:
        v0, v1, v2, v3 = var
        return np.array([
            [0.0, v0, v2],
            [v0, v1, v3],
            [v2, v3, -v1],
        ])

    def ad_eval(self, dual, residual) -> np.ndarray:
        d = dual
        return np.array(residual, dtype=float) + np.array([
            d[1, 0] + d[0, 1],
            d[1, 1] - d[2, 2],
            d[2, 0] + d[0, 2],
            d[2, 1] + d[1, 2],
        ])

    def hessian_eval(self, primal, dual, hessian) -> np.ndarray:
        p, d = primal, dual
        h = np.array(hessian, dtype=float)
        h[0, 0] += d[0, 0] * p[1, 1] + d[1, 1] * p[0, 0] + d[0, 1] * p[0, 1] + d[1, 0] * p[1, 0]
        h[1, 0] += d[0, 1] * p[1, 1] + d[1, 1] * p[0, 1] - d[0, 2] * p[1, 2] - d[1, 2] * p[0, 2]
        h[0, 1] = h[1, 0]
        h[2, 0] += d[0, 0] * p[1, 2] + d[1, 2] * p[0, 0] + d[0, 1] * p[0, 2] + d[0, 2] * p[0, 1]
        h[0, 2] = h[2, 0]
        h[3, 0] += d[0, 2] * p[1, 1] + d[1, 1] * p[0, 2] + d[0, 1] * p[1, 2] + d[1, 2] * p[0, 1]
        h[0, 3] = h[3, 0]
        h[1, 1] += d[1, 1] * p[1, 1] + d[2, 2] * p[2, 2] - d[1, 2] * p[1, 2] - d[2, 1] * p[2, 1]
        h[2, 1] += d[0, 1] * p[1, 2] + p[1, 0] * d[2, 1] - d[0, 2] * p[2, 2] - p[2, 0] * d[2, 2]
        h[1, 2] = h[2, 1]
        h[3, 1] += p[1, 1] * d[2, 1] + d[1, 1] * p[1, 2] - d[1, 2] * p[2, 2] - p[2, 1] * d[2, 2]
        h[1, 3] = h[3, 1]
        h[2, 2] += d[0, 0] * p[2, 2] + p[0, 0] * d[2, 2] + d[2, 0] * p[2, 0] + d[0, 2] * p[0, 2]
        h[3, 2] += d[1, 0] * p[2, 2] + p[0, 1] * d[2, 2] + d[2, 0] * p[2, 1] + p[0, 2] * d[1, 2]
        h[2, 3] = h[3, 2]
        h[3, 3] += d[1, 1] * p[2, 2] + p[1, 1] * d[2, 2] + d[2, 1] * p[2, 1] + d[1, 2] * p[1, 2]
        return h


class MikiBalanced(MatrixConstraint):
    """Miki cone over two lamination parameters (balanced, single material)."""

    dim = 3
    size = 2

    def __init__(self, dual_scale=None) -> None:
        super().__init__()
        if dual_scale is not None:
            self.initialise(dual_scale, np.zeros(self.size))

    def init_value(self, var) -> np.ndarray:
        return self.eval(var) + np.eye(self.dim)

    def eval(self, var) -> np.ndarray:
        v0, v1 = var
        return np.array([
            [0.0, v0, 0.0],
            [v0, v1, 0.0],
            [0.0, 0.0, -v1],
        ])

    def ad_eval(self, dual, residual) -> np.ndarray:
        d = dual
        return np.array(residual, dtype=float) + np.array([
            d[1, 0] + d[0, 1],
            d[1, 1] - d[2, 2],
        ])

    def hessian_eval(self, primal, dual, hessian) -> np.ndarray:
        p, d = primal, dual
        h = np.array(hessian, dtype=float)
        h[0, 0] += d[0, 0] * p[1, 1] + d[1, 1] * p[0, 0] + d[0, 1] * p[0, 1] + d[1, 0] * p[1, 0]
        h[1, 0] += d[0, 1] * p[1, 1] + d[1, 1] * p[0, 1]
        h[0, 1] = h[1, 0]
        h[1, 1] += d[1, 1] * p[1, 1] + d[2, 2] * p[2, 2]
        return h


def make_miki(kind: SubLaminateType, balanced: bool, dual_scale=None) -> MatrixConstraint:
    """Build the Miki cone for a sublaminate type and balance condition."""
    if kind is not SubLaminateType.SINGLE_MATERIAL:
        raise ValueError(f"Unsupported sublaminate type: {kind}")
    return MikiBalanced(dual_scale) if balanced else MikiUnbalanced(dual_scale)