"""Tests for importing components from a source directory."""

from pathlib import Path

import pytest

from ai_prompt_core.components import ComponentLoadError, load_components
from ai_prompt_core.components.loader import find_entry_point

MODULE = """
from ai_prompt_core.components import Component
from ai_prompt_core.components.builtin.structural import Task


class Badge(Component):
    def render(self, props, value, context):
        return "badge"


class Special(Component):
    tag = "{namespace}.Special"
"""


def _write(path: Path, text: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


class TestFindEntryPoint:
    def test_components_module_wins(self, tmp_path: Path):
        _write(tmp_path / "__init__.py")
        entry = _write(tmp_path / "components.py")
        assert find_entry_point(tmp_path, "acme") == entry

    def test_package_init(self, tmp_path: Path):
        entry = _write(tmp_path / "__init__.py")
        _write(tmp_path / "helpers.py")
        assert find_entry_point(tmp_path, "acme") == entry

    def test_repository_layout(self, tmp_path: Path):
        entry = _write(tmp_path / "acme" / "__init__.py")
        _write(tmp_path / "setup_helpers.py")
        _write(tmp_path / "other.py")
        assert find_entry_point(tmp_path, "acme") == entry

    def test_lone_module(self, tmp_path: Path):
        entry = _write(tmp_path / "greeting.py")
        assert find_entry_point(tmp_path, "acme") == entry

    def test_ambiguous_or_empty_directory(self, tmp_path: Path):
        with pytest.raises(ComponentLoadError):
            find_entry_point(tmp_path, "acme")
        _write(tmp_path / "a.py")
        _write(tmp_path / "b.py")
        with pytest.raises(ComponentLoadError, match="No component module"):
            find_entry_point(tmp_path, "acme")


class TestLoadComponents:
    def test_collects_own_components_with_namespace(self, tmp_path: Path):
        _write(tmp_path / "components.py", MODULE.format(namespace="widgets"))
        loaded = load_components(tmp_path, "widgets")
        assert sorted(loaded) == ["widgets.Badge", "widgets.Special"]
        assert loaded["widgets.Badge"].__name__ == "Badge"

    def test_import_error_propagates(self, tmp_path: Path):
        _write(tmp_path / "components.py", "raise RuntimeError('broken module')\n")
        with pytest.raises(RuntimeError, match="broken module"):
            load_components(tmp_path, "broken")
