"""Type-specific validation of submitted input values.

Every check appends a ``ValidationIssue`` with one of these codes:
``INVALID_TYPE``, ``BELOW_MIN``, ``EXCEEDS_MAX``, ``INVALID_OPTION``,
``NOT_INTEGER``, ``INVALID_DATE``, ``DATE_TOO_EARLY``, ``DATE_TOO_LATE``,
``INVALID_EXTENSION``, ``FILE_NOT_FOUND``, ``PATH_NOT_FOUND``,
``NOT_A_DIRECTORY``, ``REQUIRED``.
"""

import math
from datetime import date, datetime
from pathlib import Path
from typing import Any

from ai_prompt_core.schema import ValidationIssue, ValidationResult

from .requirement import InputRequirement


def _type_name(value: Any) -> str:
    return type(value).__name__


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def _number_type_issue(req: InputRequirement, value: Any) -> ValidationIssue | None:
    if not _is_number(value):
        return ValidationIssue(field=req.name, message=f"Expected a number, got {_type_name(value)}", code="INVALID_TYPE")
    if not math.isfinite(value):
        return ValidationIssue(field=req.name, message=f"Expected a finite number, got {value}", code="INVALID_TYPE")
    return None


def _parse_date(value: str) -> date | None:
    try:
        return datetime.fromisoformat(value).date()
    except ValueError:
        return None


def _bound_date(bound: str, today: date) -> date | None:
    return today if bound == "today" else _parse_date(bound)


def _normalize_extension(extension: str) -> str:
    return extension.lower().lstrip(".")


def _resolve(req: InputRequirement, raw: str) -> Path:
    path = Path(raw).expanduser()
    if not path.is_absolute() and req.base_dir:
        path = Path(req.base_dir) / path
    return path


def _check_number(req: InputRequirement, value: Any, errors: list[ValidationIssue], *, label: str) -> None:
    if req.minimum is not None and value < req.minimum:
        errors.append(ValidationIssue(field=req.name, message=f"{label} {value} is below minimum {req.minimum:g}", code="BELOW_MIN"))
    if req.maximum is not None and value > req.maximum:
        errors.append(ValidationIssue(field=req.name, message=f"{label} {value} exceeds maximum {req.maximum:g}", code="EXCEEDS_MAX"))


def _check_date(req: InputRequirement, value: Any, errors: list[ValidationIssue], today: date) -> None:
    if not isinstance(value, str):
        errors.append(ValidationIssue(field=req.name, message=f"Expected a date string, got {_type_name(value)}", code="INVALID_TYPE"))
        return
    parsed = _parse_date(value)
    if parsed is None:
        errors.append(ValidationIssue(field=req.name, message=f'Invalid date format: "{value}"', code="INVALID_DATE"))
        return
    if req.min_date and (lower := _bound_date(req.min_date, today)) and parsed < lower:
        errors.append(ValidationIssue(field=req.name, message=f"Date must be on or after {req.min_date}", code="DATE_TOO_EARLY"))
    if req.max_date and (upper := _bound_date(req.max_date, today)) and parsed > upper:
        errors.append(ValidationIssue(field=req.name, message=f"Date must be on or before {req.max_date}", code="DATE_TOO_LATE"))


def _check_files(req: InputRequirement, value: Any, errors: list[ValidationIssue]) -> None:
    if req.multiple:
        if not isinstance(value, list | tuple) or not all(isinstance(item, str) for item in value):
            errors.append(ValidationIssue(field=req.name, message=f"Expected a list of file paths, got {_type_name(value)}", code="INVALID_TYPE"))
            return
        paths = list(value)
    elif isinstance(value, str):
        paths = [value]
    else:
        errors.append(ValidationIssue(field=req.name, message=f"Expected a file path string, got {_type_name(value)}", code="INVALID_TYPE"))
        return

    allowed = [_normalize_extension(ext) for ext in req.extensions]
    for raw in paths:
        if allowed:
            extension = _normalize_extension(Path(raw).suffix)
            if extension not in allowed:
                errors.append(
                    ValidationIssue(
                        field=req.name,
                        message=f'File "{raw}" has invalid extension ".{extension}". Allowed: {", ".join(req.extensions)}',
                        code="INVALID_EXTENSION",
                    )
                )
        if req.must_exist and not _resolve(req, raw).is_file():
            errors.append(ValidationIssue(field=req.name, message=f'File does not exist: "{raw}"', code="FILE_NOT_FOUND"))


def _check_path(req: InputRequirement, value: Any, errors: list[ValidationIssue]) -> None:
    if not isinstance(value, str):
        errors.append(ValidationIssue(field=req.name, message=f"Expected a path string, got {_type_name(value)}", code="INVALID_TYPE"))
        return
    path = _resolve(req, value)
    if req.must_exist and not path.exists():
        errors.append(ValidationIssue(field=req.name, message=f'Path does not exist: "{value}"', code="PATH_NOT_FOUND"))
        return
    # A missing path is acceptable when only mustBeDirectory is set.
    if req.must_be_directory and path.exists() and not path.is_dir():
        errors.append(ValidationIssue(field=req.name, message=f'Path is not a directory: "{value}"', code="NOT_A_DIRECTORY"))


def validate_input_value(req: InputRequirement, value: Any, *, today: date | None = None) -> ValidationResult:
    """Validate a candidate value against a requirement's type and constraints.

    Args:
        req: The requirement being answered.
        value: Candidate value as submitted by a UI or taken from a value mapping.
        today: Reference date for ``"today"`` date bounds; defaults to the current date.

    Returns:
        ValidationResult whose errors name ``req.name`` as the field.
    """
    errors: list[ValidationIssue] = []

    if value is None or value == "" or (req.type == "multiselect" and value == []):
        if req.required:
            errors.append(ValidationIssue(field=req.name, message=f"{req.name} is required", code="REQUIRED"))
        return ValidationResult.from_issues(errors)

    match req.type:
        case "number":
            if issue := _number_type_issue(req, value):
                errors.append(issue)
            else:
                _check_number(req, value, errors, label="Value")
        case "string" | "secret" | "editor":
            if not isinstance(value, str):
                errors.append(ValidationIssue(field=req.name, message=f"Expected a string, got {_type_name(value)}", code="INVALID_TYPE"))
        case "confirm":
            if not isinstance(value, bool):
                errors.append(ValidationIssue(field=req.name, message=f"Expected a boolean, got {_type_name(value)}", code="INVALID_TYPE"))
        case "select":
            valid_values = req.option_values()
            if valid_values and value not in valid_values:
                errors.append(
                    ValidationIssue(
                        field=req.name,
                        message=f'Invalid option "{value}". Valid options: {", ".join(valid_values)}',
                        code="INVALID_OPTION",
                    )
                )
        case "multiselect":
            if not isinstance(value, list | tuple):
                errors.append(ValidationIssue(field=req.name, message=f"Expected a list for multiselect, got {_type_name(value)}", code="INVALID_TYPE"))
            else:
                valid_values = req.option_values()
                for item in value:
                    if valid_values and item not in valid_values:
                        errors.append(
                            ValidationIssue(
                                field=req.name,
                                message=f'Invalid option "{item}". Valid options: {", ".join(valid_values)}',
                                code="INVALID_OPTION",
                            )
                        )
        case "rating":
            if issue := _number_type_issue(req, value):
                errors.append(issue)
            elif value != int(value):
                errors.append(ValidationIssue(field=req.name, message=f"Rating must be a whole number, got {value}", code="NOT_INTEGER"))
            else:
                _check_number(req, value, errors, label="Rating")
        case "date":
            _check_date(req, value, errors, today or date.today())
        case "file":
            _check_files(req, value, errors)
        case "path":
            _check_path(req, value, errors)

    return ValidationResult.from_issues(errors)


__all__ = ["validate_input_value"]
