"""Response schema for the plate buckling benchmark solved with CalculiX."""

from dataclasses import dataclass, field
from pathlib import Path

from .calculix_extraction import MatchSelection, NamedTextScalarRule, TextScalarRule
from .response_schema import DerivedResponseRule, ResponseTransform


@dataclass(frozen=True)
class PlateBucklingSchemaOptions:
    """Where to find the benchmark quantities and the limits they must meet."""

    source_filename: Path = field(default_factory=lambda: Path("{job_name}.dat"))
    required_buckling_factor: float = 1.0
    tip_displacement_limit: float = 1.0
    displacement_scale: float = 1.0
    mass_pattern: str = r"TOTAL MASS\s*=\s*([-+0-9.Ee]+)"
    buckling_pattern: str = r"BUCKLING FACTOR(?:\s+1)?\s*=\s*([-+0-9.Ee]+)"
    tip_displacement_pattern: str = r"TIP DISPLACEMENT(?:\s+U3)?\s*=\s*([-+0-9.Ee]+)"
    match_selection: MatchSelection = MatchSelection.LAST


@dataclass(frozen=True)
class ResponseSchema:
    """Raw extractions and the objective and constraint responses derived from them."""

    raw_scalar_extractions: tuple[NamedTextScalarRule, ...] = ()
    objective_responses: tuple[DerivedResponseRule, ...] = ()
    constraint_responses: tuple[DerivedResponseRule, ...] = ()


def plate_buckling_schema(options: PlateBucklingSchemaOptions | None = None) -> ResponseSchema:
    """Mass objective with buckling-factor and tip-displacement margin constraints."""
    if options is None:
        options = PlateBucklingSchemaOptions()

    def extraction(pattern: str, scale: float, label: str) -> NamedTextScalarRule:
        return NamedTextScalarRule(
            label,
            TextScalarRule(options.source_filename, pattern, 1,
                           options.match_selection, scale, 0.0, label),
        )

    raw = (
        extraction(options.mass_pattern, 1.0, "mass"),
        extraction(options.buckling_pattern, 1.0, "buckling_lambda_1"),
        extraction(options.tip_displacement_pattern, options.displacement_scale, "tip_u3"),
    )
    objectives = (
        DerivedResponseRule("mass", ResponseTransform.IDENTITY, 1.0, 0.0, "objective_mass"),
    )
    constraints = (
        DerivedResponseRule("buckling_lambda_1", ResponseTransform.INVERSE_AFFINE,
                            options.required_buckling_factor, -1.0, "buckling_margin"),
        DerivedResponseRule("tip_u3", ResponseTransform.ABSOLUTE_AFFINE,
                            1.0 / options.tip_displacement_limit, -1.0,
                            "tip_displacement_margin"),
    )
    return ResponseSchema(raw, objectives, constraints)