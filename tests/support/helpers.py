"""Shared helpers for prompt rendering tests."""

from datetime import UTC, datetime

from ai_prompt_core.render import RenderResult

FIXED_NOW = datetime(2024, 1, 15, 10, 30, 0, tzinfo=UTC)


def text_of(outcome: object) -> str:
    """Text of a successful render, failing the test otherwise."""
    assert isinstance(outcome, RenderResult), f"render halted: {outcome!r}"
    assert outcome.ok, outcome.error
    return outcome.text
