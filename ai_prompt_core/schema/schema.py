"""Declarative prop schemas and structured validation results."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Literal, Self

from pydantic import BaseModel, ConfigDict, model_validator

FieldType = Literal["string", "number", "integer", "boolean", "array", "object", "any"]
SchemaMode = Literal["passthrough", "strict"]


@dataclass(frozen=True, slots=True)
class Field:
    """Constraint on a single prop.

    String-to-number and string-to-boolean conversion only happens when
    ``coerce`` is set. Enum membership is an exact, case-sensitive match.
    A ``default`` of None means the prop has no default.
    """

    type: FieldType = "any"
    required: bool = False
    enum: tuple[Any, ...] | None = None
    items: "Field | None" = None
    fields: Mapping[str, "Field"] | None = None
    minimum: float | None = None
    maximum: float | None = None
    coerce: bool = False
    default: Any = None
    description: str = ""

    def __post_init__(self) -> None:
        if self.enum is not None:
            object.__setattr__(self, "enum", tuple(self.enum))
        if self.fields is not None:
            object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))
        if self.items is not None and self.type != "array":
            raise ValueError("Field.items is only valid for type='array'")
        if self.fields is not None and self.type != "object":
            raise ValueError("Field.fields is only valid for type='object'")


@dataclass(frozen=True, slots=True)
class Schema:
    """Shape of a component's props.

    ``passthrough`` schemas accept props they do not declare; ``strict``
    schemas reject them. The ``children`` prop is never validated.
    """

    fields: Mapping[str, Field] = field(default_factory=dict)
    mode: SchemaMode = "passthrough"

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def extend(self, fields: Mapping[str, Field] | None = None, *, mode: SchemaMode | None = None) -> "Schema":
        """Return a new schema with extra fields and, optionally, a different mode."""
        return Schema(fields={**self.fields, **(fields or {})}, mode=mode or self.mode)


class ValidationIssue(BaseModel):
    """One validation error or warning."""

    model_config = ConfigDict(frozen=True)

    field: str
    message: str
    code: str


class ValidationResult(BaseModel):
    """Outcome of validating props or an input value.

    ``valid`` is true exactly when ``errors`` is empty.
    """

    model_config = ConfigDict(frozen=True)

    valid: bool
    errors: tuple[ValidationIssue, ...] = ()
    warnings: tuple[ValidationIssue, ...] = ()

    @model_validator(mode="after")
    def _check_consistency(self) -> Self:
        if self.valid == bool(self.errors):
            raise ValueError("ValidationResult.valid must be true exactly when there are no errors")
        return self

    @classmethod
    def success(cls, warnings: tuple[ValidationIssue, ...] | list[ValidationIssue] = ()) -> "ValidationResult":
        return cls(valid=True, warnings=tuple(warnings))

    @classmethod
    def from_issues(
        cls,
        errors: tuple[ValidationIssue, ...] | list[ValidationIssue],
        warnings: tuple[ValidationIssue, ...] | list[ValidationIssue] = (),
    ) -> "ValidationResult":
        return cls(valid=not errors, errors=tuple(errors), warnings=tuple(warnings))

    @property
    def messages(self) -> list[str]:
        return [issue.message for issue in self.errors]


__all__ = [
    "Field",
    "FieldType",
    "Schema",
    "SchemaMode",
    "ValidationIssue",
    "ValidationResult",
]
