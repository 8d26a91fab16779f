"""Input requirements and the protocol for collecting their values.

@public

Templates declare the runtime values they need through input components.
A render halts at the first missing value; ``InputIterator`` turns that into
a one-at-a-time protocol and ``collect_inputs`` drives it to completion.
"""

from .collector import InputPrompter, collect_inputs
from .console import ConsolePrompter, convert_answer
from .iterator import InputIterator, IteratorState, RenderStep
from .requirement import InputRequirement, InputType, InputValidator, PendingInput, SelectOption
from .validation import validate_input_value

__all__ = [
    "ConsolePrompter",
    "InputIterator",
    "InputPrompter",
    "InputRequirement",
    "InputType",
    "InputValidator",
    "IteratorState",
    "PendingInput",
    "RenderStep",
    "SelectOption",
    "collect_inputs",
    "convert_answer",
    "validate_input_value",
]
