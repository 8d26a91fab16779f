"""Built-in component library, registered on every default registry."""

from ..base import Component
from .ask import ASK_COMPONENTS
from .control import CONTROL_COMPONENTS
from .data import DATA_COMPONENTS
from .examples import EXAMPLE_COMPONENTS
from .reasoning import REASONING_COMPONENTS
from .structural import STRUCTURAL_COMPONENTS
from .utility import UTILITY_COMPONENTS

BUILTIN_COMPONENTS: tuple[type[Component], ...] = (
    *STRUCTURAL_COMPONENTS,
    *EXAMPLE_COMPONENTS,
    *REASONING_COMPONENTS,
    *UTILITY_COMPONENTS,
    *DATA_COMPONENTS,
    *CONTROL_COMPONENTS,
    *ASK_COMPONENTS,
)

__all__ = ["BUILTIN_COMPONENTS"]
