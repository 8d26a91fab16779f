"""Render engine, render context and render outcomes.

@public
"""

from ai_prompt_core.inputs import PendingInput

from .context import EnvironmentInfo, RenderContext
from .engine import RenderEngine
from .result import RenderIssue, RenderResult

__all__ = [
    "EnvironmentInfo",
    "PendingInput",
    "RenderContext",
    "RenderEngine",
    "RenderIssue",
    "RenderResult",
]
