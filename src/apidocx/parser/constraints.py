"""Human-readable descriptions for validation markers."""

import dataclasses
import logging
from collections.abc import Iterable
from typing import Any

from apidocx.markers import (
    DecimalMax,
    DecimalMin,
    Digits,
    Email,
    Future,
    FutureOrPresent,
    Max,
    Min,
    Negative,
    NegativeOrZero,
    NotBlank,
    NotEmpty,
    NotNull,
    Past,
    PastOrPresent,
    Pattern,
    Positive,
    PositiveOrZero,
    Size,
)
from apidocx.model.base import ValidationConstraint

logger = logging.getLogger(__name__)

CONSTRAINT_DESCRIPTIONS: dict[type, str] = {
    NotNull: "Must not be null",
    NotBlank: "Must not be null or blank",
    NotEmpty: "Must not be null or empty",
    Size: "Size must be within specified bounds",
    Min: "Must be greater than or equal to minimum value",
    Max: "Must be less than or equal to maximum value",
    Pattern: "Must match the specified pattern",
    Email: "Must be a valid email address",
    Positive: "Must be a positive number",
    PositiveOrZero: "Must be a positive number or zero",
    Negative: "Must be a negative number",
    NegativeOrZero: "Must be a negative number or zero",
    DecimalMin: "Must be greater than or equal to specified decimal value",
    DecimalMax: "Must be less than or equal to specified decimal value",
    Digits: "Must have specified number of integer and fraction digits",
    Future: "Must be a future date",
    FutureOrPresent: "Must be a future date or present",
    Past: "Must be a past date",
    PastOrPresent: "Must be a past date or present",
}


def is_validation_marker(marker: Any) -> bool:
    return type(marker) in CONSTRAINT_DESCRIPTIONS


def describe_constraint(marker: Any) -> ValidationConstraint | None:
    """Describe one validation marker, or return None if it is not one."""
    kind = type(marker)
    base_description = CONSTRAINT_DESCRIPTIONS.get(kind)
    if base_description is None:
        return None

    attributes = constraint_attributes(marker)
    return ValidationConstraint(
        name=kind.__name__,
        description=_customize_description(kind, base_description, attributes),
        attributes=attributes,
    )


def describe_constraints(markers: Iterable[Any]) -> list[ValidationConstraint]:
    """Describe every validation marker in ``markers``, skipping anything else."""
    constraints = []
    for marker in markers:
        constraint = describe_constraint(marker)
        if constraint is not None:
            constraints.append(constraint)
    return constraints


def constraint_attributes(marker: Any) -> dict[str, Any]:
    """Read the marker's declared attributes verbatim.

    Best effort: a marker that cannot be introspected yields an empty dict.
    """
    try:
        return {f.name: getattr(marker, f.name) for f in dataclasses.fields(marker)}
    except (TypeError, AttributeError):
        logger.debug("Could not read attributes of %r", marker, exc_info=True)
        return {}


def _customize_description(kind: type, base_description: str, attributes: dict[str, Any]) -> str:
    try:
        if kind is Size:
            return f"Size must be between {attributes['min']} and {attributes['max']}"
        if kind is Min:
            return f"Must be greater than or equal to {attributes['value']}"
        if kind is Max:
            return f"Must be less than or equal to {attributes['value']}"
        if kind is Pattern:
            return f"Must match pattern: {attributes['regexp']}"
        if kind is DecimalMin:
            operator = "greater than or equal to" if attributes["inclusive"] else "greater than"
            return f"Must be {operator} {attributes['value']}"
        if kind is DecimalMax:
            operator = "less than or equal to" if attributes["inclusive"] else "less than"
            return f"Must be {operator} {attributes['value']}"
        if kind is Digits:
            return (
                f"Must have at most {attributes['integer']} integer digits "
                f"and {attributes['fraction']} fraction digits"
            )
    except KeyError:
        return base_description
    return base_description
