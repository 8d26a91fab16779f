"""Template source parser.

@public

Example:
    >>> from ai_prompt_core.parser import parse
    >>> root = parse('<Prompt bare><Task>Summarize the report.</Task></Prompt>')
    >>> root.children[0].tag
    'Task'
"""

from ._text import normalize_text
from .parser import parse

__all__ = ["normalize_text", "parse"]
