"""Environment snapshot and per-render context."""

import getpass
import os
import platform
import socket
import sys
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, Self

from pydantic import BaseModel, ConfigDict

from ai_prompt_core.elements import Node
from ai_prompt_core.settings import DelimiterStyle, settings

from .result import RenderIssue

if TYPE_CHECKING:
    from ai_prompt_core.inputs import InputIterator


def _current_user() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "unknown"


class EnvironmentInfo(BaseModel):
    """Host facts made available to components.

    Built once per top-level render so every component in that render sees
    the same values. Components never read process state directly.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    runtime: str = "python"
    runtime_version: str = ""
    platform: str = ""
    hostname: str = ""
    username: str = ""
    cwd: str = ""
    now: datetime
    delimiter: DelimiterStyle = "xml"
    role: str = "assistant"

    @property
    def timestamp(self) -> int:
        return int(self.now.timestamp())

    @property
    def date(self) -> str:
        return self.now.date().isoformat()

    @property
    def time(self) -> str:
        return self.now.strftime("%H:%M:%S")

    @classmethod
    def from_host(cls, **overrides: Any) -> Self:
        """Snapshot the current process environment; ``overrides`` replace individual fields."""
        values: dict[str, Any] = {
            "runtime": platform.python_implementation().lower(),
            "runtime_version": platform.python_version(),
            "platform": sys.platform,
            "hostname": socket.gethostname(),
            "username": _current_user(),
            "cwd": os.getcwd(),
            "now": datetime.now().astimezone(),
            "delimiter": settings.default_delimiter,
            "role": settings.default_role,
        }
        values.update(overrides)
        return cls(**values)


@dataclass
class RenderContext:
    """State shared by every component of one top-level render.

    Read-mostly: components read ``env`` and ``inputs`` and may append
    ``warnings``. Only input collection changes ``inputs``, and only between
    renders. A context may be reused; each render result carries only the
    warnings appended during that render.
    """

    env: EnvironmentInfo = field(default_factory=EnvironmentInfo.from_host)
    inputs: dict[str, Any] = field(default_factory=dict)
    warnings: list[RenderIssue] = field(default_factory=list)
    iterator: "InputIterator | None" = None
    metadata: dict[str, Any] = field(default_factory=dict)
    session: Any = field(default=None, repr=False, compare=False)

    def warn(self, code: str, message: str, *, component: str | None = None) -> None:
        """Record a non-fatal issue. Codes start with ``warn_``."""
        path = self.session.current_path if self.session is not None else ()
        self.warnings.append(RenderIssue(code=code, message=message, component=component, path=path))

    async def render_text(self, node: Node) -> str:
        """Render a node to text inside the active render.

        Missing inputs and component errors propagate exactly as they would
        for the node returned from ``render``.
        """
        if self.session is None:
            raise RuntimeError("render_text() is only available while a render is in progress")
        return await self.session.render_node(node)

    def fork(self, inputs: dict[str, Any]) -> "RenderContext":
        """Fresh context for a re-render with the same environment and new inputs."""
        return RenderContext(env=self.env, inputs=dict(inputs), iterator=self.iterator, metadata=dict(self.metadata))


__all__ = ["EnvironmentInfo", "RenderContext"]
