"""Pull-based protocol for answering a template's input requirements one at a time."""

import inspect
from collections.abc import Awaitable, Callable, Mapping
from enum import StrEnum
from typing import Any

from ai_prompt_core.exceptions import InputIteratorStateError
from ai_prompt_core.logging import get_logger
from ai_prompt_core.schema import ValidationResult

from .requirement import InputRequirement, PendingInput

logger = get_logger(__name__)

RenderStep = Callable[[Mapping[str, Any]], Awaitable[Any]]
"""Re-renders the template with the given input values; returns a PendingInput or a final result."""

_NO_VALUE = object()


class IteratorState(StrEnum):
    """Lifecycle of an InputIterator."""

    IDLE = "idle"
    PRESENTING = "presenting"
    SUBMITTED = "submitted"
    ADVANCING = "advancing"
    DONE = "done"


class InputIterator:
    """Cooperative state machine over the inputs a template requires.

    Each step re-renders the template with the values committed so far; the
    render halts at the first missing input in document order, and that input
    becomes ``current()``. Submissions are validated by the component that
    declared the requirement and staged; nothing is committed until ``advance()``.

    States: IDLE -> PRESENTING -> SUBMITTED -> ADVANCING -> PRESENTING | DONE.

    Example:
        >>> iterator = InputIterator(step)
        >>> await iterator.start()
        >>> while not iterator.is_done():
        ...     result = await iterator.submit(answer_for(iterator.current()))
        ...     if result.valid:
        ...         await iterator.advance()
    """

    def __init__(self, render_step: RenderStep, *, values: Mapping[str, Any] | None = None) -> None:
        self._render_step = render_step
        self._values: dict[str, Any] = dict(values or {})
        self._state = IteratorState.IDLE
        self._pending: PendingInput | None = None
        self._staged: Any = _NO_VALUE
        self._result: Any = None

    @property
    def state(self) -> IteratorState:
        return self._state

    @property
    def result(self) -> Any:
        """Final render outcome once the iterator is done, else None."""
        return self._result

    async def start(self) -> None:
        """Find the first requirement. Calling start again has no effect."""
        if self._state is not IteratorState.IDLE:
            return
        await self._step()

    def current(self) -> InputRequirement | None:
        if self._pending is None or self._state is IteratorState.DONE:
            return None
        return self._pending.requirement

    async def submit(self, value: Any) -> ValidationResult:
        """Validate a value for the current requirement and stage it when valid.

        Repeated submissions replace the staged value; an invalid submission
        clears it. Nothing is committed until ``advance()``.

        Raises:
            InputIteratorStateError: If the iterator was not started or is done.
        """
        if self._state not in (IteratorState.PRESENTING, IteratorState.SUBMITTED) or self._pending is None:
            raise InputIteratorStateError(f"Cannot submit while iterator is {self._state}")

        result = self._pending.validator(self._pending.requirement, value)
        if inspect.isawaitable(result):
            result = await result

        if result.valid:
            self._staged = value
            self._state = IteratorState.SUBMITTED
        else:
            self._staged = _NO_VALUE
            self._state = IteratorState.PRESENTING
        return result

    async def advance(self) -> None:
        """Commit the staged value and move to the next requirement or finish.

        Raises:
            InputIteratorStateError: If no valid value has been submitted.
        """
        if self._state is not IteratorState.SUBMITTED or self._pending is None or self._staged is _NO_VALUE:
            raise InputIteratorStateError("Cannot advance without a valid submitted value")

        name = self._pending.requirement.name
        self._state = IteratorState.ADVANCING
        self._values[name] = self._staged
        self._staged = _NO_VALUE
        logger.debug("Committed input '%s'", name)
        await self._step()

    def is_done(self) -> bool:
        return self._state is IteratorState.DONE

    def get_values(self) -> dict[str, Any]:
        """Copy of the committed input values."""
        return dict(self._values)

    async def _step(self) -> None:
        outcome = await self._render_step(dict(self._values))
        if isinstance(outcome, PendingInput):
            name = outcome.requirement.name
            if name in self._values:
                raise InputIteratorStateError(f"Input '{name}' was supplied but is still requested by the template")
            self._pending = outcome
            self._state = IteratorState.PRESENTING
            logger.debug("Presenting input '%s'", name)
            return
        self._pending = None
        self._result = outcome
        self._state = IteratorState.DONE


__all__ = ["InputIterator", "IteratorState", "RenderStep"]
