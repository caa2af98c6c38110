from pathlib import Path

import pytest

from laminopt.benchmark_schema import PlateBucklingSchemaOptions, plate_buckling_schema
from laminopt.calculix_extraction import (
    MatchSelection,
    RunPaths,
    assemble_derived_values,
    extract_named_values,
)
from laminopt.response_schema import ResponseTransform

BUCKLING_DAT = (
    "TOTAL MASS = 12.75\n"
    "BUCKLING FACTOR 1 = 1.8\n"
    "TIP DISPLACEMENT U3 = -3.1E-03\n"
)


def test_default_schema_layout():
    schema = plate_buckling_schema()
    assert [rule.id for rule in schema.raw_scalar_extractions] == [
        "mass", "buckling_lambda_1", "tip_u3"
    ]
    first = schema.raw_scalar_extractions[0].extraction
    assert first.source_filename == Path("{job_name}.dat")
    assert first.match_selection is MatchSelection.LAST
    assert [r.label for r in schema.objective_responses] == ["objective_mass"]
    assert [r.label for r in schema.constraint_responses] == [
        "buckling_margin", "tip_displacement_margin"
    ]
    assert schema.constraint_responses[0].transform is ResponseTransform.INVERSE_AFFINE
    assert schema.constraint_responses[1].transform is ResponseTransform.ABSOLUTE_AFFINE


def test_options_set_scales_and_limits():
    schema = plate_buckling_schema(
        PlateBucklingSchemaOptions(required_buckling_factor=2.0, tip_displacement_limit=4.0,
                                   displacement_scale=1000.0)
    )
    assert schema.raw_scalar_extractions[2].extraction.scale == 1000.0
    assert schema.constraint_responses[0].scale == 2.0
    assert schema.constraint_responses[1].scale == 0.25
    assert schema.constraint_responses[1].offset == -1.0


def test_schema_builds_buckling_responses_from_output(tmp_path):
    (tmp_path / "job.dat").write_text(BUCKLING_DAT)
    paths = RunPaths(tmp_path, tmp_path / "job.inp", tmp_path / "analysis_results.txt")
    schema = plate_buckling_schema(
        PlateBucklingSchemaOptions(tip_displacement_limit=3.5, displacement_scale=1000.0)
    )
    raw = extract_named_values(schema.raw_scalar_extractions, paths)
    objectives = assemble_derived_values(schema.objective_responses, raw)
    constraints = assemble_derived_values(schema.constraint_responses, raw)
    assert len(objectives) == 1
    assert len(constraints) == 2
    assert objectives[0] == pytest.approx(12.75, abs=1e-12)
    assert constraints[0] == pytest.approx(1.0 / 1.8 - 1.0, abs=1e-12)
    assert constraints[1] == pytest.approx(3.1 / 3.5 - 1.0, abs=1e-12)


def test_patterns_accept_unnumbered_labels(tmp_path):
    (tmp_path / "job.dat").write_text("TOTAL MASS = 2.0\nBUCKLING FACTOR = 4.0\nTIP DISPLACEMENT = 0.5\n")
    paths = RunPaths(tmp_path, tmp_path / "job.inp", tmp_path / "analysis_results.txt")
    raw = extract_named_values(plate_buckling_schema().raw_scalar_extractions, paths)
    assert raw == {"mass": 2.0, "buckling_lambda_1": 4.0, "tip_u3": 0.5}