"""Discovery of ``.prompt`` templates shipped inside a cached source."""

import asyncio
from dataclasses import dataclass
from pathlib import Path

from ai_prompt_core.logging import get_logger

from .cache import ModuleCache

logger = get_logger(__name__)

PROMPTS_DIR = "prompts"
PROMPT_SUFFIX = ".prompt"


@dataclass(frozen=True, slots=True)
class DiscoveredPrompt:
    """One template file found in a package's ``prompts/`` directory."""

    filename: str
    content: str


def _read_prompts(root: Path) -> list[DiscoveredPrompt]:
    directory = root / PROMPTS_DIR
    if not directory.is_dir():
        return []
    files = sorted(path for path in directory.iterdir() if path.is_file() and path.suffix == PROMPT_SUFFIX)
    return [DiscoveredPrompt(filename=path.name, content=path.read_text(encoding="utf-8")) for path in files]


class PackagePromptSource:
    """Lists the prompt templates of a package or remote source.

    The source is resolved through the module cache, so it is fetched at
    most once. A source without a ``prompts/`` directory has no prompts.
    """

    def __init__(self, cache: ModuleCache, ref: str) -> None:
        self._cache = cache
        self._ref = ref

    @property
    def ref(self) -> str:
        return self._ref

    async def get_prompts(self) -> list[DiscoveredPrompt]:
        """Resolve the source and return its prompts sorted by filename.

        Raises:
            PackageNotFoundError: If the package is not installed.
            FetchError: If a remote source cannot be fetched.
        """
        root = await self._cache.resolve(self._ref)
        prompts = await asyncio.to_thread(_read_prompts, root)
        logger.debug("Found %d prompt(s) in %s", len(prompts), self._ref)
        return prompts


__all__ = ["PROMPTS_DIR", "PROMPT_SUFFIX", "DiscoveredPrompt", "PackagePromptSource"]
