"""Core configuration settings for prompt rendering and module caching.

@public

Settings are loaded from environment variables with .env file support via
pydantic-settings. Every variable uses the ``AI_PROMPT_`` prefix.

Environment variables:
    AI_PROMPT_CACHE_DIR: Default directory for the module cache
    AI_PROMPT_FETCH_TIMEOUT: HTTP timeout (seconds) for remote fetches
    AI_PROMPT_MAX_DOWNLOAD_BYTES: Size ceiling for a single remote fetch
    AI_PROMPT_DEFAULT_DELIMITER: Wrapping style for section components (xml, markdown, none)
    AI_PROMPT_DEFAULT_ROLE: Role preset used by the default <Prompt> role section
    AI_PROMPT_GIT_EXECUTABLE: git binary used for git source refs

Configuration precedence:
    1. Environment variables (highest priority)
    2. .env file in current directory
    3. Default values

Example:
    >>> from ai_prompt_core.settings import settings
    >>> print(settings.cache_dir)

Note:
    Settings are loaded once at module import and frozen. The module cache
    never reads ``cache_dir`` itself; callers pass the directory explicitly
    and only fall back to this setting at the outer edge (CLI, api helpers).
"""

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

DelimiterStyle = Literal["xml", "markdown", "none"]


class Settings(BaseSettings):
    """Configuration for rendering defaults and remote module resolution.

    @public

    Attributes:
        cache_dir: Directory holding cached component packages.
        fetch_timeout: Timeout in seconds for HTTP fetches.
        max_download_bytes: Largest accepted remote payload.
        default_delimiter: Delimiter style used when a component sets none.
        default_role: Role preset for the implicit <Prompt> role section.
        git_executable: Executable used to clone git source refs.
    """

    model_config = SettingsConfigDict(
        env_prefix="AI_PROMPT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    cache_dir: Path = Path.home() / ".cache" / "ai-prompt-core"
    fetch_timeout: float = 60.0
    max_download_bytes: int = 50 * 1024 * 1024

    default_delimiter: DelimiterStyle = "xml"
    default_role: str = "assistant"

    git_executable: str = "git"


settings = Settings()
"""Global settings instance.

@public
"""

__all__ = ["DelimiterStyle", "Settings", "settings"]
