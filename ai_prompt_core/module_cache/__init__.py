"""Local cache for externally sourced component packages.

@public

Resolves an installed package name or a remote URL to a local directory,
fetching each source at most once until it is explicitly cleared.
"""

from .cache import ModuleCache
from .fetchers import PackageResolver, find_package_path
from .models import CacheStats, ModuleCacheEntry
from .prompts import DiscoveredPrompt, PackagePromptSource
from .refs import SourceKind, SourceRef, cache_key, normalize_ref, parse_source_ref

__all__ = [
    "CacheStats",
    "DiscoveredPrompt",
    "ModuleCache",
    "ModuleCacheEntry",
    "PackagePromptSource",
    "PackageResolver",
    "SourceKind",
    "SourceRef",
    "cache_key",
    "find_package_path",
    "normalize_ref",
    "parse_source_ref",
]
