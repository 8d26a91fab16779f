"""Render outcome models."""

from typing import Self

from pydantic import BaseModel, ConfigDict, model_validator

from ai_prompt_core.exceptions import ComponentRenderError, PromptCoreError, PropValidationError, UnknownComponentError
from ai_prompt_core.schema import ValidationIssue


class RenderIssue(BaseModel):
    """Structured description of a render failure or warning."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    component: str | None = None
    path: tuple[str, ...] = ()
    issues: tuple[ValidationIssue, ...] = ()

    @classmethod
    def from_error(cls, error: PromptCoreError) -> "RenderIssue":
        component: str | None = None
        path: tuple[str, ...] = ()
        issues: tuple[ValidationIssue, ...] = ()
        if isinstance(error, PropValidationError):
            component, path, issues = error.component, error.path, tuple(error.issues)
        elif isinstance(error, ComponentRenderError):
            component, path = error.component, error.path
        elif isinstance(error, UnknownComponentError):
            component = error.tag
        return cls(code=error.code, message=error.message, component=component, path=path, issues=issues)


class RenderResult(BaseModel):
    """Final text of a successful render, or the error that stopped it.

    ``ok`` is true exactly when ``error`` is None. Warnings never affect ``ok``.
    """

    model_config = ConfigDict(frozen=True)

    ok: bool
    text: str = ""
    error: RenderIssue | None = None
    warnings: tuple[RenderIssue, ...] = ()

    @model_validator(mode="after")
    def _check_consistency(self) -> Self:
        if self.ok == (self.error is not None):
            raise ValueError("RenderResult.ok must be true exactly when error is None")
        return self

    @classmethod
    def failure(cls, error: RenderIssue, warnings: tuple[RenderIssue, ...] = ()) -> "RenderResult":
        return cls(ok=False, error=error, warnings=warnings)


__all__ = ["RenderIssue", "RenderResult"]
