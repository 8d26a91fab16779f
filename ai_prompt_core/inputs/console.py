"""Plain terminal prompter used by the CLI."""

import asyncio
import getpass
import sys
from collections.abc import Callable, Sequence
from typing import Any, TextIO

from ai_prompt_core.schema import ValidationIssue

from .requirement import InputRequirement

_TRUE_ANSWERS = frozenset({"y", "yes", "true", "1"})
_FALSE_ANSWERS = frozenset({"n", "no", "false", "0"})


def _parse_number(text: str) -> Any:
    try:
        return int(text)
    except ValueError:
        try:
            return float(text)
        except ValueError:
            return text


def _pick_option(requirement: InputRequirement, answer: str) -> str:
    """Accept an option value or its 1-based index."""
    values = requirement.option_values()
    if answer.isdigit() and 1 <= int(answer) <= len(values):
        return values[int(answer) - 1]
    return answer


def convert_answer(requirement: InputRequirement, answer: str) -> Any:
    """Turn raw terminal text into a value of the requirement's type.

    Empty text selects the requirement's default. Text that cannot be
    converted is returned unchanged so validation can report it.
    """
    text = answer.strip()
    if not text:
        return requirement.default
    match requirement.type:
        case "number" | "rating":
            return _parse_number(text)
        case "confirm":
            lowered = text.lower()
            if lowered in _TRUE_ANSWERS:
                return True
            if lowered in _FALSE_ANSWERS:
                return False
            return text
        case "select":
            return _pick_option(requirement, text)
        case "multiselect":
            return [_pick_option(requirement, part.strip()) for part in text.split(",") if part.strip()]
        case "file" if requirement.multiple:
            return [part.strip() for part in text.split(",") if part.strip()]
        case _:
            return answer if requirement.type in ("editor", "secret") else text


class ConsolePrompter:
    """Ask for values on stdin, one line per answer.

    Blocking reads run in a worker thread so the event loop stays free.
    """

    def __init__(
        self,
        *,
        read_line: Callable[[str], str] = input,
        read_secret: Callable[[str], str] = getpass.getpass,
        out: TextIO | None = None,
    ) -> None:
        self._read_line = read_line
        self._read_secret = read_secret
        self._out = out or sys.stderr

    def _describe(self, requirement: InputRequirement) -> str:
        prompt = requirement.label
        if requirement.options:
            choices = ", ".join(f"{index}) {option.label}" for index, option in enumerate(requirement.options, 1))
            prompt += f" [{choices}]"
        elif requirement.type == "confirm":
            prompt += " [y/n]"
        if requirement.default is not None and requirement.type != "secret":
            prompt += f" (default: {requirement.default})"
        return prompt + ": "

    async def ask(self, requirement: InputRequirement, errors: Sequence[ValidationIssue]) -> Any:
        for issue in errors:
            print(f"  ! {issue.message}", file=self._out)
        if requirement.description:
            print(requirement.description, file=self._out)
        reader = self._read_secret if requirement.type == "secret" else self._read_line
        answer = await asyncio.to_thread(reader, self._describe(requirement))
        return convert_answer(requirement, answer)


__all__ = ["ConsolePrompter", "convert_answer"]
