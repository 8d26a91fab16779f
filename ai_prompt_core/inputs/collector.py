"""Drive an InputIterator to completion, interactively or from a value mapping."""

from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from ai_prompt_core.exceptions import InputIteratorStateError, ValidationFailureError
from ai_prompt_core.logging import get_logger
from ai_prompt_core.schema import ValidationIssue

from .console import convert_answer
from .iterator import InputIterator
from .requirement import InputRequirement

logger = get_logger(__name__)

_NOTHING = object()


def _supplied_value(requirement: InputRequirement, supplied: Mapping[str, Any], text_values: bool) -> Any:
    value = supplied[requirement.name]
    if text_values and isinstance(value, str):
        return convert_answer(requirement, value)
    return value


class InputPrompter(Protocol):
    """UI collaborator that asks the user for one value.

    ``errors`` holds the issues from the previous attempt for the same
    requirement, empty on the first attempt.
    """

    async def ask(self, requirement: InputRequirement, errors: Sequence[ValidationIssue]) -> Any: ...


async def _collect_one_interactive(
    iterator: InputIterator,
    requirement: InputRequirement,
    prompter: InputPrompter,
    supplied: Mapping[str, Any],
    text_values: bool,
) -> None:
    errors: Sequence[ValidationIssue] = ()
    rejected: Any = _NOTHING

    if requirement.name in supplied:
        candidate = _supplied_value(requirement, supplied, text_values)
        result = await iterator.submit(candidate)
        if result.valid:
            return
        rejected, errors = candidate, result.errors

    while True:
        candidate = await prompter.ask(requirement, errors)
        if rejected is not _NOTHING and candidate == rejected:
            messages = [issue.message for issue in errors]
            raise ValidationFailureError(requirement.name, [*messages, "the same rejected value was entered again"])
        result = await iterator.submit(candidate)
        if result.valid:
            return
        logger.info("Input '%s' rejected, asking again: %s", requirement.name, "; ".join(result.messages))
        rejected, errors = candidate, result.errors


async def collect_inputs(
    iterator: InputIterator,
    non_interactive: bool,
    *,
    prompter: InputPrompter | None = None,
    values: Mapping[str, Any] | None = None,
    text_values: bool = False,
) -> dict[str, Any]:
    """Answer every requirement of ``iterator`` and return the collected values.

    Non-interactive mode takes each value from ``values`` or, when absent,
    from the requirement's default, and fails on the first invalid value
    after a single submission. Interactive mode asks ``prompter`` and asks
    again after each rejection; a retry must bring a different value.

    Args:
        iterator: Iterator to drive; started here if it was not started yet.
        non_interactive: Whether to run without a prompter.
        prompter: UI collaborator, required in interactive mode.
        values: Pre-supplied answers keyed by input name.
        text_values: Treat string values in ``values`` as raw text and convert
            them to each requirement's type, as typed answers are.

    Raises:
        ValidationFailureError: When a value cannot be accepted.
        InputIteratorStateError: If the iterator reports no current requirement
            before it is done.
        ValueError: When interactive mode is requested without a prompter.
    """
    if not non_interactive and prompter is None:
        raise ValueError("Interactive input collection requires a prompter")

    supplied = dict(values or {})
    await iterator.start()

    while not iterator.is_done():
        requirement = iterator.current()
        if requirement is None:
            raise InputIteratorStateError("Input iterator has no current requirement but is not done")

        if non_interactive or prompter is None:
            if requirement.name in supplied:
                candidate = _supplied_value(requirement, supplied, text_values)
            else:
                candidate = requirement.default
            result = await iterator.submit(candidate)
            if not result.valid:
                raise ValidationFailureError(requirement.name, result.messages)
        else:
            await _collect_one_interactive(iterator, requirement, prompter, supplied, text_values)

        await iterator.advance()

    return iterator.get_values()


__all__ = ["InputPrompter", "collect_inputs"]
