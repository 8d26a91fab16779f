"""Schema validation DSL for component props.

@public

Example:
    >>> from ai_prompt_core.schema import Field, Schema, validate
    >>> schema = Schema({"action": Field(type="string", enum=("ask", "assume"))})
    >>> validate(schema, {"action": "ask"}).valid
    True
"""

from .schema import Field, FieldType, Schema, SchemaMode, ValidationIssue, ValidationResult
from .validator import CHILDREN_PROP, apply_schema, validate

__all__ = [
    "CHILDREN_PROP",
    "Field",
    "FieldType",
    "Schema",
    "SchemaMode",
    "ValidationIssue",
    "ValidationResult",
    "apply_schema",
    "validate",
]
