"""Content-addressed local cache of externally sourced component packages.

Layout:
    {cache_dir}/index.json                       <- key -> ModuleCacheEntry
    {cache_dir}/modules/{key}/                   <- published source, verbatim
    {cache_dir}/modules/.tmp-{key}-{nonce}/      <- in-progress fetch (never served)

``key`` is the sha256 of the normalised source reference. A fetch writes
into a temporary directory and is published with a single rename, so an
abandoned fetch never leaves a directory that looks like a cache hit. An
index entry whose directory is missing counts as a miss.
"""

import asyncio
import fnmatch
import json
import os
import shutil
import uuid
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import httpx

from ai_prompt_core.logging import get_logger
from ai_prompt_core.settings import settings

from .fetchers import PackageResolver, download_file, download_tarball, find_package_path, git_clone, snapshot_package
from .models import CacheStats, ModuleCacheEntry
from .refs import SourceKind, SourceRef, cache_key, parse_source_ref

logger = get_logger(__name__)

INDEX_FILE = "index.json"
MODULES_DIR = "modules"
TMP_PREFIX = ".tmp-"
INDEX_VERSION = 1

_WILDCARD_CHARS = frozenset("*?[")


def _directory_size(path: Path) -> int:
    return sum(f.stat().st_size for f in path.rglob("*") if f.is_file() and not f.is_symlink())


class ModuleCache:
    """Resolves source references to local directories, fetching each at most once.

    Concurrent ``resolve`` calls for the same uncached reference share one
    fetch; the later callers await the first caller's result. Distinct
    references fetch independently.

    Args:
        cache_dir: Root directory of the cache.
        package_resolver: Maps package names to installed locations. Defaults
            to the import system.
        http_client_factory: Creates the httpx client used for one fetch.
        max_download_bytes: Size ceiling for a single download.
        git_executable: git binary used for git references.

    Example:
        >>> cache = ModuleCache(tmp_path)
        >>> path = await cache.resolve("acme_prompts")
        >>> (await cache.stats()).entry_count
        1
    """

    def __init__(
        self,
        cache_dir: Path | str,
        *,
        package_resolver: PackageResolver | None = None,
        http_client_factory: Callable[[], httpx.AsyncClient] | None = None,
        max_download_bytes: int | None = None,
        git_executable: str | None = None,
    ) -> None:
        self._cache_dir = Path(cache_dir)
        self._package_resolver = package_resolver or find_package_path
        self._http_client_factory = http_client_factory or self._default_http_client
        self._max_download_bytes = max_download_bytes or settings.max_download_bytes
        self._git_executable = git_executable or settings.git_executable
        self._in_flight: dict[str, asyncio.Future[Path]] = {}
        self._index_lock = asyncio.Lock()

    @staticmethod
    def _default_http_client() -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=settings.fetch_timeout, follow_redirects=True)

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    @property
    def _modules_dir(self) -> Path:
        return self._cache_dir / MODULES_DIR

    @property
    def _index_path(self) -> Path:
        return self._cache_dir / INDEX_FILE

    # -- resolution -----------------------------------------------------------

    async def resolve(self, ref: str) -> Path:
        """Return the local directory holding ``ref``, fetching it on first use.

        Raises:
            PackageNotFoundError: If a package name is not installed.
            FetchError: If a remote source cannot be fetched or unpacked, or
                the reference is malformed.
        """
        source = parse_source_ref(ref)
        key = source.key

        if (pending := self._in_flight.get(key)) is not None:
            logger.debug("Waiting for in-flight fetch of %s", source.normalized)
            return await asyncio.shield(pending)

        future: asyncio.Future[Path] = asyncio.get_running_loop().create_future()
        self._in_flight[key] = future
        try:
            path = await self._lookup_or_fetch(source)
        except Exception as exc:
            future.set_exception(exc)
            future.exception()  # waiters re-raise it; mark as retrieved
            raise
        except BaseException:
            future.cancel()
            raise
        else:
            future.set_result(path)
            return path
        finally:
            self._in_flight.pop(key, None)

    async def _lookup_or_fetch(self, source: SourceRef) -> Path:
        existing = await asyncio.to_thread(self._lookup_sync, source.key)
        if existing is not None:
            logger.debug("Cache hit for %s", source.normalized)
            return existing.local_path
        logger.debug("Cache miss for %s", source.normalized)
        entry = await self._fetch_and_publish(source)
        return entry.local_path

    async def _fetch_and_publish(self, source: SourceRef) -> ModuleCacheEntry:
        key = source.key
        staging = self._modules_dir / f"{TMP_PREFIX}{key}-{uuid.uuid4().hex}"
        final = self._modules_dir / key
        await asyncio.to_thread(staging.mkdir, parents=True)
        try:
            await self._fetch_into(source, staging)
            size = await asyncio.to_thread(_directory_size, staging)
            await asyncio.to_thread(self._publish_sync, staging, final)
        except BaseException:
            shutil.rmtree(staging, ignore_errors=True)
            raise

        entry = ModuleCacheEntry(
            key=key,
            source_ref=source.normalized,
            kind=source.kind.value,
            local_path=final,
            fetched_at=datetime.now(UTC),
            size_bytes=size,
        )
        async with self._index_lock:
            await asyncio.to_thread(self._write_entry_sync, entry)
        logger.info("Cached %s (%s, %d bytes)", source.normalized, source.kind.value, size)
        return entry

    async def _fetch_into(self, source: SourceRef, staging: Path) -> None:
        logger.info("Fetching %s", source.raw)
        match source.kind:
            case SourceKind.PACKAGE:
                await snapshot_package(source.location, staging, self._package_resolver)
            case SourceKind.GIT:
                await git_clone(source.location, staging, ref=source.git_ref, git_executable=self._git_executable)
            case SourceKind.TARBALL:
                async with self._http_client_factory() as client:
                    await download_tarball(source.location, staging, client, self._max_download_bytes)
            case SourceKind.FILE:
                async with self._http_client_factory() as client:
                    await download_file(source.location, staging, client, self._max_download_bytes)

    @staticmethod
    def _publish_sync(staging: Path, final: Path) -> None:
        # A directory without an index entry is a leftover; replace it.
        if final.exists():
            shutil.rmtree(final)
        os.replace(staging, final)

    # -- index ----------------------------------------------------------------

    def _read_index_sync(self) -> dict[str, ModuleCacheEntry]:
        try:
            raw = json.loads(self._index_path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable cache index %s: %s", self._index_path, exc)
            return {}
        entries: dict[str, ModuleCacheEntry] = {}
        for key, data in raw.get("entries", {}).items():
            entries[key] = ModuleCacheEntry.model_validate(data)
        return entries

    def _write_index_sync(self, entries: dict[str, ModuleCacheEntry]) -> None:
        self._cache_dir.mkdir(parents=True, exist_ok=True)
        payload: dict[str, Any] = {
            "version": INDEX_VERSION,
            "entries": {key: entry.model_dump(mode="json") for key, entry in sorted(entries.items())},
        }
        tmp = self._index_path.with_name(f"{INDEX_FILE}.{uuid.uuid4().hex}.tmp")
        tmp.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        os.replace(tmp, self._index_path)

    def _write_entry_sync(self, entry: ModuleCacheEntry) -> None:
        entries = self._read_index_sync()
        entries[entry.key] = entry
        self._write_index_sync(entries)

    def _lookup_sync(self, key: str) -> ModuleCacheEntry | None:
        entry = self._read_index_sync().get(key)
        if entry is None or not entry.local_path.is_dir():
            return None
        return entry

    def entries(self) -> list[ModuleCacheEntry]:
        """Published entries whose directories still exist, sorted by source reference."""
        valid = [entry for entry in self._read_index_sync().values() if entry.local_path.is_dir()]
        return sorted(valid, key=lambda entry: entry.source_ref)

    # -- invalidation and stats -----------------------------------------------

    async def clear(self, ref: str | None = None) -> int:
        """Remove cached entries and return how many were removed.

        ``clear()`` empties the whole cache, including abandoned temporary
        directories. ``clear(ref)`` removes exactly the entry for ``ref``; a
        reference containing ``*``, ``?`` or ``[`` is matched as a wildcard
        against the normalised references of all entries.
        """
        async with self._index_lock:
            removed = await asyncio.to_thread(self._clear_sync, ref)
        logger.info("Cleared %d cache entr%s%s", removed, "y" if removed == 1 else "ies", f" matching {ref}" if ref else "")
        return removed

    def _clear_sync(self, ref: str | None) -> int:
        entries = self._read_index_sync()

        if ref is None:
            removed = sum(1 for entry in entries.values() if entry.local_path.is_dir())
            if self._modules_dir.exists():
                shutil.rmtree(self._modules_dir)
            self._index_path.unlink(missing_ok=True)
            return removed

        if _WILDCARD_CHARS & set(ref):
            keys = [key for key, entry in entries.items() if fnmatch.fnmatchcase(entry.source_ref, ref)]
        else:
            keys = [cache_key(parse_source_ref(ref).normalized)]

        removed = 0
        for key in keys:
            entry = entries.pop(key, None)
            directory = entry.local_path if entry else self._modules_dir / key
            if directory.is_dir():
                shutil.rmtree(directory)
                if entry is not None:
                    removed += 1
        self._write_index_sync(entries)
        return removed

    async def stats(self) -> CacheStats:
        entries = await asyncio.to_thread(self.entries)
        return CacheStats(entry_count=len(entries), total_size_bytes=sum(entry.size_bytes for entry in entries))


__all__ = ["INDEX_FILE", "MODULES_DIR", "ModuleCache"]
