"""Adapters that materialise one source into a staging directory.

Each fetcher writes only inside the directory it is given; publishing the
result into the cache is the caller's job.
"""

import asyncio
import contextlib
import importlib.util
import io
import shutil
import tarfile
import uuid
from collections.abc import Callable
from pathlib import Path, PurePosixPath
from urllib.parse import urlsplit

import httpx

from ai_prompt_core.exceptions import FetchError, PackageNotFoundError
from ai_prompt_core.logging import get_logger

logger = get_logger(__name__)

PackageResolver = Callable[[str], Path | None]
"""Maps an installed package name to its directory (or module file), None when absent."""

_IGNORED = shutil.ignore_patterns("__pycache__", "*.pyc", "*.pyo")


def find_package_path(name: str) -> Path | None:
    """Locate an installed package through the import system without importing it."""
    try:
        spec = importlib.util.find_spec(name)
    except (ImportError, ValueError):
        return None
    if spec is None:
        return None
    if spec.submodule_search_locations:
        return Path(next(iter(spec.submodule_search_locations)))
    if spec.origin and spec.has_location:
        return Path(spec.origin)
    return None


def _copy_into(source: Path, dest: Path) -> None:
    if source.is_dir():
        shutil.copytree(source, dest, ignore=_IGNORED, dirs_exist_ok=True)
    else:
        shutil.copy2(source, dest / source.name)


async def snapshot_package(name: str, dest: Path, resolver: PackageResolver) -> None:
    """Copy an installed package's files into ``dest``.

    Raises:
        PackageNotFoundError: If the resolver cannot find the package.
    """
    location = await asyncio.to_thread(resolver, name)
    if location is None or not location.exists():
        raise PackageNotFoundError(name)
    await asyncio.to_thread(_copy_into, location, dest)


async def _download(url: str, client: httpx.AsyncClient, max_bytes: int) -> bytes:
    """GET with streaming and size enforcement."""
    logger.debug("Downloading %s", url)
    try:
        async with client.stream("GET", url) as response:
            response.raise_for_status()
            chunks: list[bytes] = []
            total = 0
            async for chunk in response.aiter_bytes(chunk_size=65536):
                total += len(chunk)
                if total > max_bytes:
                    raise FetchError(url, f"download exceeds {max_bytes} bytes")
                chunks.append(chunk)
            return b"".join(chunks)
    except httpx.HTTPStatusError as exc:
        raise FetchError(url, f"HTTP {exc.response.status_code}") from exc
    except httpx.HTTPError as exc:
        raise FetchError(url, str(exc) or type(exc).__name__) from exc


def _filename_from_url(url: str) -> str:
    name = PurePosixPath(urlsplit(url).path).name
    return name or "index"


async def download_file(url: str, dest: Path, client: httpx.AsyncClient, max_bytes: int) -> None:
    """Download a single file into ``dest`` under its URL basename."""
    content = await _download(url, client, max_bytes)
    await asyncio.to_thread((dest / _filename_from_url(url)).write_bytes, content)


def _extract_tarball(content: bytes, dest: Path, url: str) -> None:
    try:
        with tarfile.open(fileobj=io.BytesIO(content), mode="r:*") as archive:
            archive.extractall(dest, filter="data")
    except (tarfile.TarError, OSError) as exc:
        raise FetchError(url, f"cannot extract archive: {exc}") from exc

    # npm and GitHub archives wrap everything in one top-level directory.
    children = list(dest.iterdir())
    if len(children) == 1 and children[0].is_dir():
        try:
            # Moved aside first: the wrapper may hold an entry with its own name.
            wrapper = children[0].rename(dest / f".unwrap-{uuid.uuid4().hex}")
            for item in wrapper.iterdir():
                item.rename(dest / item.name)
            wrapper.rmdir()
        except OSError as exc:
            raise FetchError(url, f"cannot unpack archive: {exc}") from exc


async def download_tarball(url: str, dest: Path, client: httpx.AsyncClient, max_bytes: int) -> None:
    """Download and safely extract a .tar.gz archive into ``dest``."""
    content = await _download(url, client, max_bytes)
    await asyncio.to_thread(_extract_tarball, content, dest, url)


async def git_clone(url: str, dest: Path, *, ref: str | None = None, git_executable: str = "git") -> None:
    """Shallow-clone a repository into ``dest``."""
    args = [git_executable, "clone", "--depth", "1", "--quiet"]
    if ref:
        args += ["--branch", ref]
    args += [url, str(dest)]
    try:
        process = await asyncio.create_subprocess_exec(*args, stdout=asyncio.subprocess.PIPE, stderr=asyncio.subprocess.PIPE)
    except FileNotFoundError as exc:
        raise FetchError(url, f"git executable not found: {git_executable}") from exc
    try:
        _, stderr = await process.communicate()
    except BaseException:
        # Abandoned fetch: stop git before the caller removes its directory.
        if process.returncode is None:
            with contextlib.suppress(ProcessLookupError):
                process.kill()
            await process.wait()
        raise
    if process.returncode != 0:
        raise FetchError(url, f"git clone failed: {stderr.decode(errors='replace').strip()}")


__all__ = [
    "PackageResolver",
    "download_file",
    "download_tarball",
    "find_package_path",
    "git_clone",
    "snapshot_package",
]
