"""AI Prompt Core - component-based prompt templates compiled to text.

@public

Templates are written in a small tag language, parsed into immutable
element trees and rendered by components resolved through a registry.
Components may declare inputs; a render stops at the first missing input
and the input iterator collects values one at a time, interactively or
from a supplied mapping. Namespaced components (``<acme.Greeting/>``) are
loaded on demand from installed packages or remote sources kept in a local
module cache.

Quick Start:
    >>> from ai_prompt_core import create_from_source, run_prompt
    >>>
    >>> element = create_from_source('''
    ... <Prompt>
    ...   <Task>Review the change in <Ask.File name="diff" extensions={["patch"]} /></Task>
    ... </Prompt>
    ... ''')
    >>> result = await run_prompt(element, {"diff": "fix.patch"})
    >>> print(result.text)

Environment Variables:
    - AI_PROMPT_CACHE_DIR: Module cache directory
    - AI_PROMPT_DEFAULT_DELIMITER: Default section delimiter style
    - AI_PROMPT_LOG_LEVEL: Library log level
"""

from .api import (
    collect_inputs,
    create_from_file,
    create_from_source,
    create_input_iterator,
    render,
    render_source,
    run_prompt,
)
from .components import Component, ComponentRegistry, InputComponent, create_default_registry, default_registry
from .elements import Element, SourcePosition, create_element
from .exceptions import (
    ComponentRenderError,
    FetchError,
    InputIteratorStateError,
    ModuleCacheError,
    PackageNotFoundError,
    PromptCoreError,
    PromptSyntaxError,
    PropValidationError,
    UnknownComponentError,
    ValidationFailureError,
)
from .inputs import InputIterator, InputRequirement
from .logging import get_logger, setup_logging
from .module_cache import ModuleCache, PackagePromptSource
from .parser import parse
from .render import EnvironmentInfo, PendingInput, RenderContext, RenderEngine, RenderResult
from .schema import Field, Schema, ValidationResult, validate
from .settings import settings

__version__ = "0.1.0"

__all__ = [
    "Component",
    "ComponentRegistry",
    "ComponentRenderError",
    "Element",
    "EnvironmentInfo",
    "FetchError",
    "Field",
    "InputComponent",
    "InputIterator",
    "InputIteratorStateError",
    "InputRequirement",
    "ModuleCache",
    "ModuleCacheError",
    "PackageNotFoundError",
    "PackagePromptSource",
    "PendingInput",
    "PromptCoreError",
    "PromptSyntaxError",
    "PropValidationError",
    "RenderContext",
    "RenderEngine",
    "RenderResult",
    "Schema",
    "SourcePosition",
    "UnknownComponentError",
    "ValidationFailureError",
    "ValidationResult",
    "collect_inputs",
    "create_default_registry",
    "create_element",
    "create_from_file",
    "create_from_source",
    "create_input_iterator",
    "default_registry",
    "get_logger",
    "parse",
    "render",
    "render_source",
    "run_prompt",
    "settings",
    "setup_logging",
    "validate",
]
