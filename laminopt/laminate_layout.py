"""Sizes of the lamination-parameter vector and through-thickness integration weights."""

from dataclasses import dataclass
from itertools import accumulate

import numpy as np


@dataclass(frozen=True)
class VariableLayout:
    """How lamination parameters are laid out in a design vector.

    ``nvar`` parameters per stiffness type (in-plane, bending and, for
    unsymmetric laminates, coupling), ``nvartype`` such types.
    """

    nvar: int
    nvartype: int

    @property
    def size(self) -> int:
        """Total number of lamination parameters."""
        return self.nvar * self.nvartype


def variable_layout(balanced: bool, symmetric: bool) -> VariableLayout:
    """Layout for a laminate with the given balance and symmetry conditions."""
    nvar = 2 if balanced else 4
    nvartype = 2 if symmetric else 3
    return VariableLayout(nvar=nvar, nvartype=nvartype)


def clt_weights(symmetric: bool, sublaminate_count: int) -> np.ndarray:
    """Integration weights of each sublaminate for each stiffness type.

    Returns an array of shape ``(nvartype, sublaminate_count)``. Rows are the
    in-plane, bending and (unsymmetric laminates only) coupling weights of
    sublaminates of equal thickness stacked from the bottom surface.
    """
    if sublaminate_count <= 0:
        raise ValueError("Sublaminate count must be positive.")

    if symmetric:
        step = 1.0 / sublaminate_count
        start = 0.0
    else:
        step = 2.0 / sublaminate_count
        start = -1.0

    z = np.array(list(accumulate([step] * sublaminate_count, initial=start)))
    lower, upper = z[:-1], z[1:]
    cubes = upper * upper * upper - lower * lower * lower

    if symmetric:
        return np.vstack([np.full(sublaminate_count, step), cubes])

    squares = upper * upper - lower * lower
    return np.vstack([
        np.full(sublaminate_count, 0.5 * step),
        0.5 * cubes,
        0.5 * squares,
    ])