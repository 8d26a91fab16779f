"""Pure validation of props against a Schema."""

import math
from collections.abc import Mapping
from typing import Any

from ai_prompt_core.elements import thaw

from .schema import Field, Schema, ValidationIssue, ValidationResult

CHILDREN_PROP = "children"

_TRUE_STRINGS = frozenset({"true", "yes", "1", "on"})
_FALSE_STRINGS = frozenset({"false", "no", "0", "off"})


def _coerce(spec: Field, value: Any) -> Any:
    """Convert a string to the field's scalar type; raise ValueError when impossible."""
    text = value.strip()
    if spec.type == "integer":
        return int(text)
    if spec.type == "number":
        try:
            return int(text)
        except ValueError:
            number = float(text)
            if not math.isfinite(number):
                raise ValueError(f"{value!r} is not a finite number")
            return number
    if spec.type == "boolean":
        lowered = text.lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
        raise ValueError(f"{value!r} is not a boolean")
    return value


def _matches_type(spec: Field, value: Any) -> bool:
    match spec.type:
        case "string":
            return isinstance(value, str)
        case "number":
            return isinstance(value, int | float) and not isinstance(value, bool)
        case "integer":
            return isinstance(value, int) and not isinstance(value, bool)
        case "boolean":
            return isinstance(value, bool)
        case "array":
            return isinstance(value, list | tuple)
        case "object":
            return isinstance(value, Mapping)
        case _:
            return True


def _check_value(path: str, spec: Field, value: Any, errors: list[ValidationIssue]) -> Any:
    """Validate one value, appending issues; return the (possibly coerced) value."""
    if spec.coerce and isinstance(value, str) and spec.type in ("number", "integer", "boolean"):
        try:
            value = _coerce(spec, value)
        except ValueError:
            errors.append(ValidationIssue(field=path, message=f"Expected {spec.type}, received {value!r}", code="invalid_type"))
            return value

    if not _matches_type(spec, value):
        errors.append(ValidationIssue(field=path, message=f"Expected {spec.type}, received {type(value).__name__}", code="invalid_type"))
        return value

    if spec.enum is not None and value not in spec.enum:
        allowed = ", ".join(repr(option) for option in spec.enum)
        errors.append(ValidationIssue(field=path, message=f"Invalid value {value!r}; expected one of {allowed}", code="invalid_enum"))

    if spec.type in ("number", "integer"):
        if spec.minimum is not None and value < spec.minimum:
            errors.append(ValidationIssue(field=path, message=f"Must be >= {spec.minimum}", code="too_small"))
        if spec.maximum is not None and value > spec.maximum:
            errors.append(ValidationIssue(field=path, message=f"Must be <= {spec.maximum}", code="too_big"))

    if spec.type == "array" and spec.items is not None:
        value = [_check_value(f"{path}[{index}]", spec.items, item, errors) for index, item in enumerate(value)]
    elif spec.type == "object" and spec.fields is not None:
        value = _check_mapping(path, spec.fields, value, errors, strict=False)
    return value


def _check_mapping(
    prefix: str,
    fields: Mapping[str, Field],
    values: Mapping[str, Any],
    errors: list[ValidationIssue],
    *,
    strict: bool,
) -> dict[str, Any]:
    result: dict[str, Any] = dict(values)
    for name, spec in fields.items():
        if name == CHILDREN_PROP:
            continue
        path = f"{prefix}.{name}" if prefix else name
        if name not in values or values[name] is None:
            if spec.default is not None:
                result[name] = spec.default
            elif spec.required:
                errors.append(ValidationIssue(field=path, message="Required", code="required"))
            continue
        result[name] = _check_value(path, spec, values[name], errors)

    if strict:
        for name in values:
            if name != CHILDREN_PROP and name not in fields:
                path = f"{prefix}.{name}" if prefix else name
                errors.append(ValidationIssue(field=path, message=f"Unrecognized property '{name}'", code="unrecognized_key"))
    return result


def _run(schema: Schema, props: Mapping[str, Any]) -> tuple[dict[str, Any], list[ValidationIssue]]:
    errors: list[ValidationIssue] = []
    coerced = _check_mapping("", schema.fields, thaw(props), errors, strict=schema.mode == "strict")
    return coerced, errors


def validate(schema: Schema, props: Mapping[str, Any]) -> ValidationResult:
    """Validate props against a schema without mutating them."""
    _, errors = _run(schema, props)
    return ValidationResult.from_issues(errors)


def apply_schema(schema: Schema | None, props: Mapping[str, Any]) -> dict[str, Any]:
    """Return props with opt-in coercion applied and defaults filled in.

    Callers validate first; values that fail validation are passed through unchanged.
    """
    if schema is None:
        return thaw(props)
    coerced, _ = _run(schema, props)
    return coerced


__all__ = ["CHILDREN_PROP", "apply_schema", "validate"]
