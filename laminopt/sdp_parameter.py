"""Step-length and centring rules shared by the interior-point constraints."""

STEP_FRACTION = 0.95
MINIMUM_CORRECTOR_REDUCTION = 0.1


def step_size_control(eigenvalue: float) -> float:
    """Largest admissible step along a direction, given its generalised eigenvalue.

    A non-negative eigenvalue allows the full step; a negative one limits
    the step to a fixed fraction of the distance to the cone boundary.
    """
    step = -eigenvalue / STEP_FRACTION
    step = step if step > 1 else 1.0
    return 1.0 / step


def predictor_duality_reduction() -> float:
    """Centring factor used in the predictor (affine-scaling) step."""
    return 0.0


def corrector_duality_reduction(old_gap: float, new_gap: float) -> float:
    """Centring factor for the corrector step, from the predicted gap reduction."""
    step = new_gap / old_gap if new_gap < old_gap else 1.0
    step *= step
    return step if step > MINIMUM_CORRECTOR_REDUCTION else MINIMUM_CORRECTOR_REDUCTION