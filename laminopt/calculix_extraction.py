"""Scalar extraction from CalculiX text output and helpers for CalculiX job runs."""

import enum
import os
import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from .response_schema import DerivedResponseRule, evaluate_rule

_LEADING_FLOAT = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


class ExtractionError(RuntimeError):
    """A scalar could not be extracted from a solver output file."""


class MatchSelection(enum.Enum):
    FIRST = "first"
    LAST = "last"


@dataclass(frozen=True)
class TextScalarRule:
    """Extract one number from a text file with a regular expression.

    ``source_filename`` may contain the tokens ``{job_name}``, ``{run_dir}``,
    ``{input_file}`` and ``{result_file}``; relative names are resolved in
    the run directory. The captured number is mapped to ``scale * x + offset``.
    """

    source_filename: Path
    pattern: str
    capture_group: int = 1
    match_selection: MatchSelection = MatchSelection.LAST
    scale: float = 1.0
    offset: float = 0.0
    label: str = ""


@dataclass(frozen=True)
class NamedTextScalarRule:
    """An extraction rule whose value is stored under ``id``."""

    id: str
    extraction: TextScalarRule


@dataclass(frozen=True)
class RunPaths:
    """Locations of the files belonging to one solver run."""

    run_directory: Path
    rendered_input_path: Path
    result_path: Path


def resolve_calculix_executable(explicit_executable=None) -> Path:
    """The solver executable: explicit, then $LAMOPT_CCX_EXECUTABLE, then $CCX, then ``ccx``."""
    if explicit_executable is not None:
        return Path(explicit_executable)
    for variable in ("LAMOPT_CCX_EXECUTABLE", "CCX"):
        value = os.environ.get(variable)
        if value:
            return Path(value)
    return Path("ccx")


def shell_quote(path) -> str:
    """Quote ``path`` in single quotes for a POSIX shell command line."""
    return "'" + str(path).replace("'", "'\\''") + "'"


def resolve_source_path(source_filename, paths: RunPaths) -> Path:
    """Absolute location of an extraction source file for the given run."""
    source = Path(source_filename)
    if source.is_absolute():
        return source
    resolved = str(source_filename)
    replacements = (
        ("{job_name}", Path(paths.rendered_input_path).stem),
        ("{run_dir}", str(paths.run_directory)),
        ("{input_file}", str(paths.rendered_input_path)),
        ("{result_file}", str(paths.result_path)),
    )
    for token, value in replacements:
        resolved = resolved.replace(token, value)
    return Path(paths.run_directory) / resolved


def _describe(rule: TextScalarRule, source_path: Path) -> str:
    if rule.label:
        return f"{rule.label} in {source_path}"
    return str(source_path)


def _parse_number(text: str, description: str) -> float:
    match = _LEADING_FLOAT.match(text.lstrip())
    if match is None:
        raise ExtractionError(f"CalculiX extraction value is not a number for {description}.")
    return float(match.group(0))


def extract_scalar(rule: TextScalarRule, paths: RunPaths) -> float:
    """Extract, scale and offset the number that ``rule`` selects."""
    source_path = resolve_source_path(rule.source_filename, paths)
    try:
        content = source_path.read_text(errors="replace")
    except OSError:
        raise ExtractionError(
            f"CalculiX extraction source file not found: {source_path}"
        ) from None

    description = _describe(rule, source_path)
    try:
        expression = re.compile(rule.pattern)
    except re.error as error:
        raise ExtractionError(
            f"CalculiX extraction pattern is invalid for {description}: {error}"
        ) from None

    matches = list(expression.finditer(content))
    if not matches:
        raise ExtractionError(f"CalculiX extraction pattern did not match for {description}.")
    match = matches[-1] if rule.match_selection is MatchSelection.LAST else matches[0]

    if rule.capture_group < 0 or rule.capture_group > expression.groups:
        raise ExtractionError(
            f"CalculiX extraction capture group is out of range for {description}."
        )
    captured = match.group(rule.capture_group) or ""
    return rule.scale * _parse_number(captured, description) + rule.offset


def extract_values(rules: Sequence[TextScalarRule], paths: RunPaths) -> np.ndarray:
    """Extract every rule in order."""
    return np.array([extract_scalar(rule, paths) for rule in rules], dtype=float)


def extract_named_values(rules: Iterable[NamedTextScalarRule], paths: RunPaths) -> dict[str, float]:
    """Extract every named rule into a mapping from id to value."""
    values: dict[str, float] = {}
    for rule in rules:
        if not rule.id:
            raise ExtractionError("CalculiX response schema extraction id must not be empty.")
        if rule.id in values:
            raise ExtractionError(
                f"CalculiX response schema extraction id is duplicated: {rule.id}"
            )
        values[rule.id] = extract_scalar(rule.extraction, paths)
    return values


def assemble_derived_values(rules: Sequence[DerivedResponseRule],
                            raw_values: Mapping[str, float]) -> np.ndarray:
    """Evaluate every derived response rule in order."""
    return np.array([evaluate_rule(rule, raw_values) for rule in rules], dtype=float)


def read_tail(path, max_lines: int = 5) -> str:
    """The last ``max_lines`` lines of a file joined with `` | ``."""
    try:
        with open(path, newline="", errors="replace") as stream:
            content = stream.read()
    except OSError:
        return "unavailable"
    lines = content.split("\n")
    if lines[-1] == "":
        lines.pop()
    if not lines:
        return "empty"
    return " | ".join(lines[-max_lines:])


def sanitize_snippet(value: str) -> str:
    """``value`` on a single line; ``empty`` when it has no text."""
    sanitized = value.translate(str.maketrans("\n\r\t", "   "))
    return sanitized or "empty"


def existence_label(path) -> str:
    """``present(name)`` or ``missing(name)`` for the file at ``path``."""
    path = Path(path)
    state = "present" if path.exists() else "missing"
    return f"{state}({path.name})"