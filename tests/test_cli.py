"""Tests for the ai-prompt command line."""

from pathlib import Path

import pytest

from ai_prompt_core.cli import _parse_input, main


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    return tmp_path / "cache"


def _template(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "greet.prompt"
    path.write_text(text, encoding="utf-8")
    return path


class TestParseInput:
    def test_values_stay_text(self):
        assert _parse_input("count=3") == ("count", "3")
        assert _parse_input("ok=true") == ("ok", "true")
        assert _parse_input("name=Ada Lovelace") == ("name", "Ada Lovelace")
        assert _parse_input("expr=a=b") == ("expr", "a=b")

    def test_malformed(self):
        import argparse

        with pytest.raises(argparse.ArgumentTypeError):
            _parse_input("novalue")


class TestRender:
    def test_renders_with_inputs(self, tmp_path: Path, cache_dir: Path, capsys):
        template = _template(tmp_path, '<Prompt bare><Task>Greet <Ask.Text name="who"/></Task></Prompt>')
        code = main(["--cache-dir", str(cache_dir), "render", str(template), "-i", "who=Ada", "--no-interactive"])
        assert code == 0
        assert capsys.readouterr().out == "<task>\nGreet Ada\n</task>\n"

    def test_numeric_looking_text_input(self, tmp_path: Path, cache_dir: Path, capsys):
        template = _template(tmp_path, '<Prompt bare>Release <Ask.Text name="version"/> for ticket <Ask.Text name="ticket"/></Prompt>')
        code = main(["--cache-dir", str(cache_dir), "render", str(template), "-i", "version=1.0", "-i", "ticket=123", "--no-interactive"])
        assert code == 0
        assert capsys.readouterr().out == "Release 1.0 for ticket 123\n"

    def test_typed_inputs_are_converted(self, tmp_path: Path, cache_dir: Path, capsys):
        template = _template(tmp_path, '<Prompt bare>Retry <Ask.Number name="n" max={5}/> times: <Ask.Confirm name="ok"/></Prompt>')
        code = main(["--cache-dir", str(cache_dir), "render", str(template), "-i", "n=3", "-i", "ok=yes", "--no-interactive"])
        assert code == 0
        assert capsys.readouterr().out == "Retry 3 times: yes\n"

    def test_missing_input_non_interactive(self, tmp_path: Path, cache_dir: Path, capsys):
        template = _template(tmp_path, '<Prompt bare><Ask.Text name="who" required/></Prompt>')
        code = main(["--cache-dir", str(cache_dir), "render", str(template), "--no-interactive"])
        assert code == 1
        assert "Error [validation_failure]" in capsys.readouterr().err

    def test_warnings_go_to_stderr(self, tmp_path: Path, cache_dir: Path, capsys):
        template = _template(tmp_path, "<Prompt><Context>Background</Context></Prompt>")
        assert main(["--cache-dir", str(cache_dir), "render", str(template), "--no-interactive"]) == 0
        captured = capsys.readouterr()
        assert "Warning [warn_missing_task]" in captured.err
        assert "<context>\nBackground\n</context>" in captured.out

    def test_render_failure(self, tmp_path: Path, cache_dir: Path, capsys):
        template = _template(tmp_path, '<Prompt bare><Task delimiter="html">x</Task></Prompt>')
        assert main(["--cache-dir", str(cache_dir), "render", str(template), "--no-interactive"]) == 1
        err = capsys.readouterr().err
        assert "Error [validation_error]" in err
        assert "  delimiter:" in err

    def test_syntax_error(self, tmp_path: Path, cache_dir: Path, capsys):
        template = _template(tmp_path, "<Prompt><Task>oops</Prompt>")
        assert main(["--cache-dir", str(cache_dir), "render", str(template), "--no-interactive"]) == 1
        assert "Error [syntax_error]" in capsys.readouterr().err

    def test_unreadable_file(self, tmp_path: Path, cache_dir: Path, capsys):
        assert main(["--cache-dir", str(cache_dir), "render", str(tmp_path / "absent.prompt")]) == 1
        assert "Error: cannot read" in capsys.readouterr().err


class TestCache:
    def test_stats_on_empty_cache(self, cache_dir: Path, capsys):
        assert main(["--cache-dir", str(cache_dir), "cache", "stats"]) == 0
        out = capsys.readouterr().out
        assert f"Cache directory: {cache_dir}" in out
        assert "Entries: 0" in out
        assert "Total size: 0 B" in out

    def test_clear_empty_cache(self, cache_dir: Path, capsys):
        assert main(["--cache-dir", str(cache_dir), "cache", "clear"]) == 0
        assert capsys.readouterr().out.strip() == "Removed 0 entries"

    def test_prompts_and_stats_after_fetch(self, cache_dir: Path, capsys):
        assert main(["--cache-dir", str(cache_dir), "prompts", "json"]) == 0
        assert capsys.readouterr().out.strip() == "No prompts found in json"

        assert main(["--cache-dir", str(cache_dir), "cache", "stats", "-v"]) == 0
        out = capsys.readouterr().out
        assert "Entries: 1" in out
        assert "  json  (package," in out

        assert main(["--cache-dir", str(cache_dir), "cache", "clear", "json"]) == 0
        assert capsys.readouterr().out.strip() == "Removed 1 entry"

    def test_prompts_for_missing_package(self, cache_dir: Path, capsys):
        assert main(["--cache-dir", str(cache_dir), "prompts", "no_such_package_xyz"]) == 1
        assert "Error [package_not_found]" in capsys.readouterr().err


def test_no_command_prints_help(capsys):
    assert main([]) == 1
    assert "usage: ai-prompt" in capsys.readouterr().out


def test_cache_without_subcommand(capsys):
    assert main(["cache"]) == 1
