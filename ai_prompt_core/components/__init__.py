"""Template components and the registry that resolves tags to them.

@public
"""

from .base import ASK_BASE_SCHEMA, DELIMITER_FIELD, DELIMITER_STYLES, Component, InputComponent
from .builtin import BUILTIN_COMPONENTS
from .delimiters import wrap_with_delimiter
from .loader import ComponentLoadError, load_components
from .presets import ROLE_PRESETS, RolePreset
from .registry import ComponentRegistry, create_default_registry, default_registry

__all__ = [
    "ASK_BASE_SCHEMA",
    "BUILTIN_COMPONENTS",
    "DELIMITER_FIELD",
    "DELIMITER_STYLES",
    "ROLE_PRESETS",
    "Component",
    "ComponentLoadError",
    "ComponentRegistry",
    "InputComponent",
    "RolePreset",
    "create_default_registry",
    "default_registry",
    "load_components",
    "wrap_with_delimiter",
]
