"""Tests for source reference parsing."""

import pytest

from ai_prompt_core.exceptions import FetchError
from ai_prompt_core.module_cache import SourceKind, cache_key, normalize_ref, parse_source_ref


@pytest.mark.parametrize(
    ("ref", "kind", "normalized", "location"),
    [
        ("acme_prompts", SourceKind.PACKAGE, "acme_prompts", "acme_prompts"),
        (
            "github:Acme/Prompts",
            SourceKind.TARBALL,
            "github:acme/prompts@main",
            "https://github.com/Acme/Prompts/archive/main.tar.gz",
        ),
        (
            "github:acme/prompts@v2/src/components.py",
            SourceKind.FILE,
            "github:acme/prompts@v2/src/components.py",
            "https://raw.githubusercontent.com/acme/prompts/v2/src/components.py",
        ),
        ("https://Example.com/pkg-1.0.tgz", SourceKind.TARBALL, "https://example.com/pkg-1.0.tgz", "https://Example.com/pkg-1.0.tgz"),
        ("https://example.com/c/greeting.py", SourceKind.FILE, "https://example.com/c/greeting.py", "https://example.com/c/greeting.py"),
        ("https://example.com/repo.git", SourceKind.GIT, "git+https://example.com/repo.git", "https://example.com/repo.git"),
    ],
)
def test_parse_source_ref(ref, kind, normalized, location):
    source = parse_source_ref(ref)
    assert source.kind is kind
    assert source.normalized == normalized
    assert source.location == location
    assert source.key == cache_key(normalized)


def test_git_ref_fragment():
    source = parse_source_ref("git+https://example.com/repo.git#v1.2")
    assert source.kind is SourceKind.GIT
    assert source.git_ref == "v1.2"
    assert source.location == "https://example.com/repo.git"


def test_equivalent_refs_share_a_key():
    assert normalize_ref("https://EXAMPLE.com/a.py") == normalize_ref("https://example.com/a.py")
    assert parse_source_ref(" acme ").key == parse_source_ref("acme").key


@pytest.mark.parametrize("ref", ["", "   ", "not a ref", "ftp://example.com/x", "github:nouser"])
def test_invalid_refs(ref):
    with pytest.raises(FetchError):
        parse_source_ref(ref)
