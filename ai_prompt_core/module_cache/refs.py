"""Source reference parsing and normalisation.

Accepted forms:
    acme_prompts                               installed package name
    github:user/repo[@ref]/path/to/file.py     single raw file from GitHub
    github:user/repo[@ref]                     GitHub repository archive
    https://host/pkg-1.0.tar.gz (or .tgz)      tarball, extracted
    git+https://host/repo.git[#ref], *.git     shallow git clone
    https://host/any/file.py                   single file
"""

import hashlib
import re
from dataclasses import dataclass
from enum import StrEnum
from urllib.parse import urlsplit, urlunsplit

from ai_prompt_core.exceptions import FetchError

_PACKAGE_RE = re.compile(r"^[A-Za-z_][\w]*(?:\.[A-Za-z_][\w]*)*$")
_GITHUB_RE = re.compile(r"^github:(?P<user>[\w.\-]+)/(?P<repo>[\w.\-]+?)(?:@(?P<ref>[\w.\-/]+?))?(?:/(?P<path>.+))?$")
_TARBALL_SUFFIXES = (".tar.gz", ".tgz")

DEFAULT_GITHUB_REF = "main"


class SourceKind(StrEnum):
    PACKAGE = "package"
    FILE = "file"
    TARBALL = "tarball"
    GIT = "git"


@dataclass(frozen=True, slots=True)
class SourceRef:
    """A parsed source reference.

    ``normalized`` is the identity used for cache keys; ``location`` is the
    package name or the URL to fetch.
    """

    raw: str
    normalized: str
    kind: SourceKind
    location: str
    git_ref: str | None = None

    @property
    def key(self) -> str:
        return cache_key(self.normalized)


def cache_key(normalized: str) -> str:
    """Stable directory name for a normalised source reference."""
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()


def _normalize_url(url: str) -> str:
    parts = urlsplit(url)
    path = parts.path.rstrip("/") or ""
    return urlunsplit((parts.scheme.lower(), parts.netloc.lower(), path, parts.query, parts.fragment))


def _parse_github(raw: str) -> SourceRef:
    match = _GITHUB_RE.match(raw)
    if not match:
        raise FetchError(raw, "expected github:user/repo[@ref][/path]")
    user, repo, path = match["user"], match["repo"], match["path"]
    ref = match["ref"] or DEFAULT_GITHUB_REF
    normalized = f"github:{user.lower()}/{repo.lower()}@{ref}" + (f"/{path}" if path else "")
    if path:
        url = f"https://raw.githubusercontent.com/{user}/{repo}/{ref}/{path}"
        return SourceRef(raw=raw, normalized=normalized, kind=SourceKind.FILE, location=url)
    url = f"https://github.com/{user}/{repo}/archive/{ref}.tar.gz"
    return SourceRef(raw=raw, normalized=normalized, kind=SourceKind.TARBALL, location=url)


def parse_source_ref(ref: str) -> SourceRef:
    """Classify and normalise a source reference.

    Raises:
        FetchError: If the reference matches none of the supported forms.
    """
    raw = ref.strip()
    if not raw:
        raise FetchError(ref, "empty source reference")

    if raw.startswith("github:"):
        return _parse_github(raw)

    if raw.startswith("git+"):
        url, _, fragment = raw.removeprefix("git+").partition("#")
        normalized = "git+" + _normalize_url(url) + (f"#{fragment}" if fragment else "")
        return SourceRef(raw=raw, normalized=normalized, kind=SourceKind.GIT, location=url, git_ref=fragment or None)

    scheme = urlsplit(raw).scheme.lower()
    if scheme in ("http", "https"):
        url, _, fragment = raw.partition("#")
        path = urlsplit(url).path.lower()
        if path.endswith(".git"):
            normalized = "git+" + _normalize_url(url) + (f"#{fragment}" if fragment else "")
            return SourceRef(raw=raw, normalized=normalized, kind=SourceKind.GIT, location=url, git_ref=fragment or None)
        kind = SourceKind.TARBALL if path.endswith(_TARBALL_SUFFIXES) else SourceKind.FILE
        return SourceRef(raw=raw, normalized=_normalize_url(raw), kind=kind, location=raw)

    if _PACKAGE_RE.match(raw):
        return SourceRef(raw=raw, normalized=raw, kind=SourceKind.PACKAGE, location=raw)

    raise FetchError(raw, "not a package name, github: reference or http(s) URL")


def normalize_ref(ref: str) -> str:
    return parse_source_ref(ref).normalized


__all__ = ["DEFAULT_GITHUB_REF", "SourceKind", "SourceRef", "cache_key", "normalize_ref", "parse_source_ref"]
