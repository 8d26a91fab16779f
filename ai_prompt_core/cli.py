"""Command-line interface: render templates and manage the module cache."""

import argparse
import asyncio
import sys
from pathlib import Path

from .api import create_from_file, run_prompt
from .components import create_default_registry
from .exceptions import PromptCoreError
from .inputs import ConsolePrompter
from .logging import setup_logging
from .module_cache import ModuleCache, PackagePromptSource
from .render import RenderResult
from .settings import settings


def _parse_input(raw: str) -> tuple[str, str]:
    """Split ``name=value``; the value stays text until its input type is known."""
    name, sep, text = raw.partition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got {raw!r}")
    return name, text


def _format_size(size: int) -> str:
    value = float(size)
    for unit in ("B", "KiB", "MiB"):
        if value < 1024:
            return f"{value:.0f} {unit}" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} GiB"


def _print_failure(result: RenderResult) -> None:
    assert result.error is not None
    print(f"Error [{result.error.code}]: {result.error.message}", file=sys.stderr)
    for issue in result.error.issues:
        print(f"  {issue.field}: {issue.message}", file=sys.stderr)


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------


def _cmd_render(args: argparse.Namespace) -> int:
    """Render a template file, collecting its inputs."""
    try:
        element = create_from_file(args.file)
    except OSError as e:
        print(f"Error: cannot read {args.file}: {e}", file=sys.stderr)
        return 1

    registry = create_default_registry(module_cache=ModuleCache(args.cache_dir))
    prompter = None if args.no_interactive else ConsolePrompter()
    inputs = dict(args.input or [])
    result = asyncio.run(run_prompt(element, inputs, non_interactive=args.no_interactive, prompter=prompter, text_values=True, registry=registry))

    for warning in result.warnings:
        print(f"Warning [{warning.code}]: {warning.message}", file=sys.stderr)
    if not result.ok:
        _print_failure(result)
        return 1
    print(result.text)
    return 0


def _cmd_cache_stats(args: argparse.Namespace) -> int:
    """Show how many sources are cached and their total size."""
    cache = ModuleCache(args.cache_dir)
    stats = asyncio.run(cache.stats())
    print(f"Cache directory: {cache.cache_dir}")
    print(f"Entries: {stats.entry_count}")
    print(f"Total size: {_format_size(stats.total_size_bytes)}")
    if args.verbose:
        for entry in cache.entries():
            print(f"  {entry.source_ref}  ({entry.kind}, {_format_size(entry.size_bytes)}, {entry.fetched_at:%Y-%m-%d %H:%M})")
    return 0


def _cmd_cache_clear(args: argparse.Namespace) -> int:
    """Clear the whole cache or the entries matching REF."""
    removed = asyncio.run(ModuleCache(args.cache_dir).clear(args.ref))
    print(f"Removed {removed} entr{'y' if removed == 1 else 'ies'}")
    return 0


def _cmd_prompts(args: argparse.Namespace) -> int:
    """List the prompt templates shipped with a package or remote source."""
    source = PackagePromptSource(ModuleCache(args.cache_dir), args.ref)
    prompts = asyncio.run(source.get_prompts())
    if not prompts:
        print(f"No prompts found in {args.ref}")
        return 0
    print(f"{len(prompts)} prompt(s) in {args.ref}:\n")
    for prompt in prompts:
        print(f"  {prompt.filename}")
    return 0


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for ai-prompt."""
    parser = argparse.ArgumentParser(prog="ai-prompt", description="Render prompt templates and manage cached component sources")
    parser.add_argument("--cache-dir", type=Path, default=settings.cache_dir, help="Module cache directory")
    parser.add_argument("--log-level", default=None, help="Override the log level (DEBUG, INFO, ...)")
    subparsers = parser.add_subparsers(dest="command")

    # render
    render_parser = subparsers.add_parser("render", help="Render a .prompt file")
    render_parser.add_argument("file", type=Path, help="Template file")
    render_parser.add_argument("--input", "-i", action="append", type=_parse_input, metavar="NAME=VALUE", help="Supply an input value")
    render_parser.add_argument("--no-interactive", action="store_true", help="Fail instead of asking for missing or invalid inputs")

    # cache
    cache_parser = subparsers.add_parser("cache", help="Inspect or clear the module cache")
    cache_sub = cache_parser.add_subparsers(dest="cache_command")
    stats_parser = cache_sub.add_parser("stats", help="Show cache statistics")
    stats_parser.add_argument("--verbose", "-v", action="store_true", help="List every entry")
    clear_parser = cache_sub.add_parser("clear", help="Clear all entries, or those matching REF (wildcards allowed)")
    clear_parser.add_argument("ref", nargs="?", default=None, help="Source reference or wildcard pattern")

    # prompts
    prompts_parser = subparsers.add_parser("prompts", help="List prompts shipped with a source")
    prompts_parser.add_argument("ref", help="Package name or source URL")

    args = parser.parse_args(argv)
    setup_logging(level=args.log_level)

    handlers = {
        ("render", None): _cmd_render,
        ("cache", "stats"): _cmd_cache_stats,
        ("cache", "clear"): _cmd_cache_clear,
        ("prompts", None): _cmd_prompts,
    }
    handler = handlers.get((args.command, getattr(args, "cache_command", None)))
    if handler is None:
        parser.print_help()
        return 1

    try:
        return handler(args)
    except PromptCoreError as e:
        print(f"Error [{e.code}]: {e.message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())


__all__ = ["main"]
