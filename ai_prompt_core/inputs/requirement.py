"""Descriptors for runtime values a template asks for."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

from ai_prompt_core.schema import ValidationResult

InputType = Literal[
    "string",
    "number",
    "confirm",
    "select",
    "multiselect",
    "date",
    "secret",
    "file",
    "path",
    "rating",
    "editor",
]


class SelectOption(BaseModel):
    """One choice of a select or multiselect input."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    value: str
    label: str
    text: str | None = None

    @property
    def rendered_text(self) -> str:
        """Text placed into the prompt when this option is chosen."""
        return self.text if self.text is not None else self.value


class InputRequirement(BaseModel):
    """A value a template needs before it can finish rendering.

    ``name`` is unique within one render. Constraint fields that do not
    apply to ``type`` are left at their defaults.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    label: str
    type: InputType = "string"
    description: str = ""
    required: bool = True
    default: Any = None
    placeholder: str | None = None
    component: str = ""

    minimum: float | None = None
    maximum: float | None = None
    options: tuple[SelectOption, ...] = ()
    extensions: tuple[str, ...] = ()
    multiple: bool = False
    must_exist: bool = False
    must_be_directory: bool = False
    min_date: str | None = None
    max_date: str | None = None
    base_dir: str | None = None

    def option_values(self) -> list[str]:
        return [option.value for option in self.options]


InputValidator = Callable[[InputRequirement, Any], ValidationResult | Awaitable[ValidationResult]]
"""Validates a candidate value for a requirement; may be sync or async."""


@dataclass(frozen=True, slots=True)
class PendingInput:
    """A render that halted at the first missing input in document order.

    Carries the requirement and the owning component's validator so the
    input iterator can check submissions without re-rendering.
    """

    requirement: InputRequirement
    validator: InputValidator
    path: tuple[str, ...] = ()


__all__ = ["InputRequirement", "InputType", "InputValidator", "PendingInput", "SelectOption"]
