"""Exception hierarchy for AI Prompt Core.

All exceptions inherit from PromptCoreError. Every class carries a
machine-checkable ``code`` so CLI and UI collaborators can format failures
consistently without parsing messages.
"""

from collections.abc import Sequence
from typing import Any, ClassVar


class PromptCoreError(Exception):
    """Base exception for all AI Prompt Core errors."""

    code: ClassVar[str] = "prompt_core_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly description of the error."""
        return {"code": self.code, "message": self.message}


class PromptSyntaxError(PromptCoreError):
    """Raised when template source text is malformed."""

    code = "syntax_error"

    def __init__(self, message: str, *, filename: str, line: int, column: int) -> None:
        super().__init__(f"{filename}:{line}:{column}: {message}")
        self.reason = message
        self.filename = filename
        self.line = line
        self.column = column


class UnknownComponentError(PromptCoreError):
    """Raised when a tag cannot be resolved to a component implementation."""

    code = "unknown_component"

    def __init__(self, tag: str, attempted_sources: Sequence[str]) -> None:
        tried = ", ".join(attempted_sources) or "none"
        super().__init__(f"Unknown component <{tag}> (tried: {tried})")
        self.tag = tag
        self.attempted_sources = tuple(attempted_sources)


class PropValidationError(PromptCoreError):
    """Raised when a component's props fail schema validation."""

    code = "validation_error"

    def __init__(self, component: str, issues: Sequence[Any], path: Sequence[str] = ()) -> None:
        details = "; ".join(f"{issue.field}: {issue.message}" for issue in issues)
        super().__init__(f"Invalid props for <{component}>: {details}")
        self.component = component
        self.issues = tuple(issues)
        self.path = tuple(path)


class ComponentRenderError(PromptCoreError):
    """Raised when a component's own render logic fails."""

    code = "render_error"

    def __init__(self, component: str, path: Sequence[str], cause: BaseException) -> None:
        location = " > ".join(path) or component
        super().__init__(f"Error rendering <{component}> at {location}: {cause}")
        self.component = component
        self.path = tuple(path)
        self.cause = cause


class ValidationFailureError(PromptCoreError):
    """Raised when non-interactive input collection cannot satisfy a requirement."""

    code = "validation_failure"

    def __init__(self, field: str, messages: Sequence[str]) -> None:
        joined = "; ".join(messages) or "invalid value"
        super().__init__(f"Validation failed for '{field}': {joined}")
        self.field = field
        self.messages = tuple(messages)


class InputIteratorStateError(PromptCoreError):
    """Raised when the input iterator protocol is used out of order."""

    code = "iterator_state"


class ModuleCacheError(PromptCoreError):
    """Base exception for module cache resolution failures."""

    code = "module_cache_error"


class PackageNotFoundError(ModuleCacheError):
    """Raised when a package name is not installed in the host environment."""

    code = "package_not_found"

    def __init__(self, name: str) -> None:
        super().__init__(f"Package '{name}' is not installed")
        self.name = name


class FetchError(ModuleCacheError):
    """Raised when a remote source cannot be fetched or unpacked."""

    code = "fetch_error"

    def __init__(self, source_ref: str, reason: str) -> None:
        super().__init__(f"Failed to fetch '{source_ref}': {reason}")
        self.source_ref = source_ref
        self.reason = reason


__all__ = [
    "ComponentRenderError",
    "FetchError",
    "InputIteratorStateError",
    "ModuleCacheError",
    "PackageNotFoundError",
    "PromptCoreError",
    "PromptSyntaxError",
    "PropValidationError",
    "UnknownComponentError",
    "ValidationFailureError",
]
