"""Derived scalar responses computed from named raw extracted values."""

import enum
from collections.abc import Mapping
from dataclasses import dataclass

ZERO_TOLERANCE = 1.0e-16


class ResponseSchemaError(RuntimeError):
    """A derived response could not be evaluated."""


class ResponseTransform(enum.Enum):
    IDENTITY = "identity"
    AFFINE = "affine"
    ABSOLUTE_AFFINE = "absolute_affine"
    INVERSE_AFFINE = "inverse_affine"


@dataclass(frozen=True)
class DerivedResponseRule:
    """A response derived from the raw value named ``source_id``."""

    source_id: str
    transform: ResponseTransform = ResponseTransform.IDENTITY
    scale: float = 1.0
    offset: float = 0.0
    label: str = ""


def describe_rule(rule: DerivedResponseRule) -> str:
    """The rule's label, or its source id when it has none."""
    return rule.label or rule.source_id


def _source_value(rule: DerivedResponseRule, raw_values: Mapping[str, float]) -> float:
    try:
        return float(raw_values[rule.source_id])
    except KeyError:
        raise ResponseSchemaError(
            f"Response schema source id was not extracted: {rule.source_id}"
        ) from None


def evaluate_rule(rule: DerivedResponseRule, raw_values: Mapping[str, float]) -> float:
    """Value of the derived response for the given raw values."""
    value = _source_value(rule, raw_values)
    transform = rule.transform
    if transform is ResponseTransform.IDENTITY:
        return value
    if transform is ResponseTransform.AFFINE:
        return rule.scale * value + rule.offset
    if transform is ResponseTransform.ABSOLUTE_AFFINE:
        return rule.scale * abs(value) + rule.offset
    if transform is ResponseTransform.INVERSE_AFFINE:
        if abs(value) <= ZERO_TOLERANCE:
            raise ResponseSchemaError(
                "Response schema inverse transform encountered a zero source value for "
                f"{describe_rule(rule)}."
            )
        return rule.scale / value + rule.offset
    raise ResponseSchemaError(f"Unsupported response schema transform for {describe_rule(rule)}.")


def evaluate_rule_derivative(rule: DerivedResponseRule, raw_values: Mapping[str, float]) -> float:
    """Derivative of the derived response with respect to its raw source value."""
    value = _source_value(rule, raw_values)
    transform = rule.transform
    if transform is ResponseTransform.IDENTITY:
        return 1.0
    if transform is ResponseTransform.AFFINE:
        return rule.scale
    if transform is ResponseTransform.ABSOLUTE_AFFINE:
        if value > 0.0:
            return rule.scale
        if value < 0.0:
            return -rule.scale
        return 0.0
    if transform is ResponseTransform.INVERSE_AFFINE:
        if abs(value) <= ZERO_TOLERANCE:
            raise ResponseSchemaError(
                "Response schema inverse derivative encountered a zero source value for "
                f"{describe_rule(rule)}."
            )
        return -rule.scale / (value * value)
    raise ResponseSchemaError(
        f"Unsupported response schema transform derivative for {describe_rule(rule)}."
    )