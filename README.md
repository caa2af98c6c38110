# laminopt

Building blocks for designing composite laminates with lamination parameters:

- primal-dual interior-point constraints (scalar bounds, semidefinite Miki
  cones, whole laminate sections);
- separable response approximations for min-max subproblems;
- extraction of scalar responses from CalculiX text output and derived
  objective and constraint values.

## Installation

```
pip install .
```

The package needs NumPy and SciPy.

## Interior-point constraints

Every constraint keeps its own primal-dual state and is driven by the same
sequence of calls in each iteration: `duality_gap`, `hessian`/`hessian_eval`,
`calculate_residuals`, `update_increments`, `step_size` and
`update_variables`. Residuals and Hessians are passed in and the updated values
are returned. `step_size(primal_step, dual_step)` returns the two step lengths
reduced so that the iterate stays inside the cone.

- `laminopt.sdp_parameter`: step-length and centring rules, namely
  `step_size_control(eigenvalue)`, `predictor_duality_reduction()` (always
  `0.0`) and `corrector_duality_reduction(old_gap, new_gap)` (never below
  `0.1`).
- `laminopt.scalar_sdp`: `ScalarConstraint` is the abstract constraint with a
  scalar slack. `UpperBound(bound)` is `var <= bound` and `LowerBound(bound)`
  is `var >= bound`.
- `laminopt.sdp`: `MatrixConstraint` is the abstract linear matrix inequality
  `A(var) >= 0`. Subclasses set `dim` and `size`.
- `laminopt.miki`: Miki cones for one single-material sublaminate.
  - `MikiUnbalanced` has four lamination parameters.
  - `MikiBalanced` has two lamination parameters.
  - `make_miki(kind, balanced, dual_scale)` takes a `SubLaminateType`. It raises
    `ValueError` for any kind other than `SubLaminateType.SINGLE_MATERIAL`.

  Passing a `dual_scale` to a constructor initialises the cone at zero.

### Laminate sections

- `laminopt.laminate_layout`
  - `variable_layout(balanced, symmetric)` returns a `VariableLayout`. Its
    fields are `nvar`, the parameters per stiffness type, and `nvartype`, the
    number of types. Its `size` property gives the total.
  - `clt_weights(symmetric, sublaminate_count)` returns the through-thickness
    integration weights as an array of shape `(nvartype, sublaminate_count)`.
- `laminopt.lp_feasible`: `LpFeasible(balanced, symmetric=True,
  sublaminate_count=5)` requires the lamination-parameter vector to be a
  weighted sum of Miki-feasible sublaminates.
  - The sublaminate variables are eliminated, so the constraint acts on the
    laminate vector only.
  - `hessian_eval` must be called before `calculate_residuals` or
    `update_increments`. Otherwise a `RuntimeError` is raised.
- `laminopt.laminate_section`: `LaminateSection` holds the lamination
  parameters followed by a thickness.
  - It is built with the same arguments as `LpFeasible`.
  - Call `set_thickness_bounds(lower, upper)` before `initialise(dual_scale,
    var)`.
  - The last Hessian and residual it produced are kept in `last_hessian` and
    `last_residual`.

## Approximations

Gradient and curvature arrays have shape `(variable_count, response_count)`,
with one column per response. Both classes provide the following:

- `evaluate(design)`.
- `evaluate_with_derivatives(design, duals)`, which returns the responses, their
  gradients and the diagonal dual-weighted Hessian.
- `boolean_vector()`, which returns the objective mask and objective count.

The two classes are:

- `laminopt.approx_function`: `ConLinApproximation(response_count,
  variable_count)`. Its models are set with `configure_linear_model`,
  `configure_conlin_model` or `configure_model`. In the ConLin model, each term
  with a negative `gradient * x` becomes a reciprocal term.
- `laminopt.quadratic_approx`: `QuadraticApproximation`. Its models are set
  with `configure_linear_model` or `configure_quadratic_model`, which adds
  diagonal curvature. Configuring either model resizes the approximation to the
  size of the reference data.

## Response extraction

- `laminopt.response_schema`: a `DerivedResponseRule` maps a named raw value
  through a `ResponseTransform`. The transforms are `IDENTITY`, `AFFINE`,
  `ABSOLUTE_AFFINE` and `INVERSE_AFFINE`.
  - `evaluate_rule` and `evaluate_rule_derivative` apply a rule.
  - Both raise `ResponseSchemaError` when the source id is missing, or when an
    inverse transform meets a zero value.
  - `describe_rule` gives the rule's label, or its source id if it has no
    label.
- `laminopt.calculix_extraction`: reading values from solver output.
  - `TextScalarRule` reads one number from a text file with a regular
    expression. It takes the first or last match (`MatchSelection`), then
    applies `scale * x + offset`.
  - Source file names may contain `{job_name}`, `{run_dir}`, `{input_file}`
    and `{result_file}`. These are resolved against a `RunPaths` by
    `resolve_source_path`.
  - `extract_scalar`, `extract_values` and `extract_named_values` apply the
    rules. The last of these takes `NamedTextScalarRule`s and rejects empty or
    duplicated ids. Failures raise `ExtractionError`.
  - `assemble_derived_values` evaluates derived rules in order.
  - `resolve_calculix_executable` picks the explicit path first. It then tries
    `$LAMOPT_CCX_EXECUTABLE`, then `$CCX`, and finally falls back to `ccx`.
  - `shell_quote` single-quotes a path for a POSIX shell.
  - `read_tail`, `sanitize_snippet` and `existence_label` help with writing
    run summaries.
- `laminopt.benchmark_schema`: `plate_buckling_schema(options)` returns a
  `ResponseSchema` for a plate benchmark. It has a mass objective and two
  constraints:
  - a buckling margin, `required / lambda - 1`;
  - a tip-displacement margin, `|u| / limit - 1`.

  It is configured with `PlateBucklingSchemaOptions`.

### Example

```python
from pathlib import Path

from laminopt.benchmark_schema import PlateBucklingSchemaOptions, plate_buckling_schema
from laminopt.calculix_extraction import RunPaths, assemble_derived_values, extract_named_values

run = Path("runs/job_001")
paths = RunPaths(run, run / "job.inp", run / "analysis_results.txt")
schema = plate_buckling_schema(PlateBucklingSchemaOptions(tip_displacement_limit=3.5))

raw = extract_named_values(schema.raw_scalar_extractions, paths)  # reads runs/job_001/job.dat
objectives = assemble_derived_values(schema.objective_responses, raw)
constraints = assemble_derived_values(schema.constraint_responses, raw)
```

## What this package does not do

- It does not launch CalculiX or any other solver, and it does not render
  input decks. The extraction helpers read files that a run has already
  written.
- There is no optimisation driver, and no ready-made subproblem solver that
  combines the approximations with the constraints. The pieces are provided,
  and the iteration loop is left to the caller.
- There is no command-line program.

## Running the tests

```
pip install .[test]
pytest
```