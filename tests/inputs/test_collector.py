"""Tests for collect_inputs in interactive and non-interactive modes."""

from collections.abc import Mapping, Sequence
from typing import Any

import pytest

from ai_prompt_core.exceptions import InputIteratorStateError, ValidationFailureError
from ai_prompt_core.inputs import InputIterator, InputRequirement, PendingInput, collect_inputs, validate_input_value
from ai_prompt_core.schema import ValidationIssue, ValidationResult


class CountingTemplate:
    """Fake render halting at each missing requirement; counts validator calls."""

    def __init__(self, *requirements: InputRequirement) -> None:
        self.requirements = requirements
        self.validations: list[tuple[str, Any]] = []

    def validate(self, requirement: InputRequirement, value: Any) -> ValidationResult:
        self.validations.append((requirement.name, value))
        return validate_input_value(requirement, value)

    async def step(self, values: Mapping[str, Any]) -> Any:
        for requirement in self.requirements:
            if requirement.name not in values:
                return PendingInput(requirement, self.validate)
        return "rendered"


class ScriptedPrompter:
    def __init__(self, *answers: Any) -> None:
        self.answers = list(answers)
        self.asked: list[tuple[str, list[str]]] = []

    async def ask(self, requirement: InputRequirement, errors: Sequence[ValidationIssue]) -> Any:
        self.asked.append((requirement.name, [issue.code for issue in errors]))
        return self.answers.pop(0)


def _req(name: str, type_: str = "string", **kwargs) -> InputRequirement:
    return InputRequirement(name=name, label=name, type=type_, **kwargs)


class TestNonInteractive:
    @pytest.mark.asyncio
    async def test_uses_supplied_values_then_defaults(self):
        template = CountingTemplate(_req("topic"), _req("count", "number", default=3))
        iterator = InputIterator(template.step)

        values = await collect_inputs(iterator, True, values={"topic": "caching"})

        assert values == {"topic": "caching", "count": 3}
        assert iterator.is_done()
        assert iterator.result == "rendered"

    @pytest.mark.asyncio
    async def test_text_values_are_converted_per_type(self):
        template = CountingTemplate(_req("version"), _req("count", "number"), _req("ok", "confirm"))
        iterator = InputIterator(template.step)

        values = await collect_inputs(iterator, True, values={"version": "1.0", "count": "3", "ok": "no"}, text_values=True)

        assert values == {"version": "1.0", "count": 3, "ok": False}

    @pytest.mark.asyncio
    async def test_values_are_taken_as_given_by_default(self):
        template = CountingTemplate(_req("count", "number"))
        with pytest.raises(ValidationFailureError, match="Expected a number"):
            await collect_inputs(InputIterator(template.step), True, values={"count": "3"})

    @pytest.mark.asyncio
    async def test_invalid_default_fails_after_one_attempt(self):
        template = CountingTemplate(_req("source", "file", extensions=("ts",), default="src/cli.py"))
        iterator = InputIterator(template.step)

        with pytest.raises(ValidationFailureError) as exc_info:
            await collect_inputs(iterator, True)

        assert exc_info.value.field == "source"
        assert "source" in str(exc_info.value)
        assert 'invalid extension ".py"' in str(exc_info.value)
        assert template.validations == [("source", "src/cli.py")]

    @pytest.mark.asyncio
    async def test_missing_required_value_fails(self):
        template = CountingTemplate(_req("topic"))
        with pytest.raises(ValidationFailureError, match="topic"):
            await collect_inputs(InputIterator(template.step), True)
        assert len(template.validations) == 1

    @pytest.mark.asyncio
    async def test_missing_optional_value_commits_none(self):
        template = CountingTemplate(_req("note", required=False))
        assert await collect_inputs(InputIterator(template.step), True) == {"note": None}


class TestInteractive:
    @pytest.mark.asyncio
    async def test_requires_prompter(self):
        with pytest.raises(ValueError, match="prompter"):
            await collect_inputs(InputIterator(CountingTemplate(_req("a")).step), False)

    @pytest.mark.asyncio
    async def test_reprompts_with_errors_until_valid(self):
        template = CountingTemplate(_req("n", "number", maximum=10))
        prompter = ScriptedPrompter(50, 20, 7)

        values = await collect_inputs(InputIterator(template.step), False, prompter=prompter)

        assert values == {"n": 7}
        assert prompter.asked == [("n", []), ("n", ["EXCEEDS_MAX"]), ("n", ["EXCEEDS_MAX"])]
        assert len(template.validations) == 3

    @pytest.mark.asyncio
    async def test_identical_retry_is_rejected(self):
        template = CountingTemplate(_req("n", "number", maximum=10))
        prompter = ScriptedPrompter(50, 50)

        with pytest.raises(ValidationFailureError, match="same rejected value"):
            await collect_inputs(InputIterator(template.step), False, prompter=prompter)
        assert len(template.validations) == 1

    @pytest.mark.asyncio
    async def test_supplied_value_skips_prompt(self):
        template = CountingTemplate(_req("a"), _req("b"))
        prompter = ScriptedPrompter("from-user")

        values = await collect_inputs(InputIterator(template.step), False, prompter=prompter, values={"a": "given"})

        assert values == {"a": "given", "b": "from-user"}
        assert prompter.asked == [("b", [])]

    @pytest.mark.asyncio
    async def test_invalid_supplied_value_falls_back_to_prompt(self):
        template = CountingTemplate(_req("n", "number", maximum=10))
        prompter = ScriptedPrompter(4)

        values = await collect_inputs(InputIterator(template.step), False, prompter=prompter, values={"n": 99})

        assert values == {"n": 4}
        assert prompter.asked == [("n", ["EXCEEDS_MAX"])]


class StalledIterator:
    """Iterator that claims to be unfinished but presents nothing."""

    async def start(self) -> None:
        pass

    def is_done(self) -> bool:
        return False

    def current(self) -> None:
        return None


@pytest.mark.asyncio
async def test_iterator_without_current_requirement_raises():
    with pytest.raises(InputIteratorStateError, match="no current requirement"):
        await collect_inputs(StalledIterator(), True)
