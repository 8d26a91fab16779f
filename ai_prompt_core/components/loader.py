"""Loading component classes from a resolved source directory."""

import hashlib
import importlib.util
import sys
from pathlib import Path
from types import ModuleType

from ai_prompt_core.logging import get_logger

from .base import Component, InputComponent

logger = get_logger(__name__)

_BASE_CLASSES: frozenset[type[Component]] = frozenset({Component, InputComponent})
_ENTRY_FILES = ("components.py", "__init__.py")


class ComponentLoadError(ImportError):
    """Raised when a source directory holds no importable component module."""


def find_entry_point(directory: Path, namespace: str) -> Path:
    """Pick the module that defines a source's components.

    Checked in order: ``components.py``, ``__init__.py``,
    ``{namespace}/__init__.py`` (repository layout) and a lone ``.py`` file.
    """
    for name in _ENTRY_FILES:
        candidate = directory / name
        if candidate.is_file():
            return candidate
    nested = directory / namespace / "__init__.py"
    if nested.is_file():
        return nested
    modules = [path for path in directory.glob("*.py") if path.is_file()]
    if len(modules) == 1:
        return modules[0]
    raise ComponentLoadError(f"No component module found in {directory}")


def _import_file(path: Path, namespace: str) -> ModuleType:
    digest = hashlib.sha256(str(path.resolve()).encode("utf-8")).hexdigest()[:12]
    module_name = f"_ai_prompt_components_{namespace.replace('.', '_')}_{digest}"
    if (existing := sys.modules.get(module_name)) is not None:
        return existing

    search = [str(path.parent)] if path.name == "__init__.py" else None
    spec = importlib.util.spec_from_file_location(module_name, path, submodule_search_locations=search)
    if spec is None or spec.loader is None:
        raise ComponentLoadError(f"Cannot import {path}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(module_name, None)
        raise
    return module


def _is_own_component(obj: object, module: ModuleType) -> bool:
    return (
        isinstance(obj, type)
        and issubclass(obj, Component)
        and obj not in _BASE_CLASSES
        and obj.__module__.startswith(module.__name__)
    )


def load_components(directory: Path, namespace: str) -> dict[str, type[Component]]:
    """Import a source directory and return its components keyed by namespaced tag.

    A component whose tag is ``Greeting`` in namespace ``acme`` is returned
    as ``acme.Greeting``; a tag that already carries the namespace is kept.
    Components the module merely imports are ignored.

    Raises:
        ComponentLoadError: If the directory has no component module.
    """
    entry = find_entry_point(directory, namespace)
    module = _import_file(entry, namespace)

    found: dict[str, type[Component]] = {}
    for obj in vars(module).values():
        if not _is_own_component(obj, module):
            continue
        tag = obj.tag if obj.tag.startswith(f"{namespace}.") else f"{namespace}.{obj.tag}"
        found[tag] = obj
    logger.debug("Loaded %d component(s) from %s", len(found), entry)
    return found


__all__ = ["ComponentLoadError", "find_entry_point", "load_components"]
