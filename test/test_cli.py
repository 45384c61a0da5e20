#!/usr/bin/env python3
"""Tests for the includeCheckUnresolved.py and includeCheckSearchDirs.py command line tools."""

import json
import sys
from pathlib import Path
from typing import Callable, Dict
from unittest.mock import patch

import pytest

import includeCheckSearchDirs
import includeCheckUnresolved
from includelib.constants import (
    EXIT_INVALID_ARGS,
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_UNRESOLVED_FOUND,
    ArgumentError,
    CompileDatabaseError,
    ValidationError,
)

QUIET = ["--no-progress", "--no-color"]


@pytest.fixture
def project(make_tree: Callable[[Dict[str, str]], Path]) -> Path:
    """A project whose sources need include/ and vendor/ as search directories.

    Layout:
        proj/src/main.cpp       #include "core/api.h", #include <missing.h>
        proj/src/util.cpp       #include "core/api.h"
        proj/include/core/api.h #include "impl.h"
        proj/vendor/impl.h
    """
    root = make_tree(
        {
            "proj/src/main.cpp": '#include "core/api.h"\n#include <missing.h>\n',
            "proj/src/util.cpp": '#include "core/api.h"\n',
            "proj/include/core/api.h": '#pragma once\n#include "impl.h"\n',
            "proj/vendor/impl.h": "",
        }
    )
    return root / "proj"


class TestUnresolvedCli:
    """Tests for includeCheckUnresolved.main()."""

    def test_reports_unresolved(self, project: Path, capsys: pytest.CaptureFixture[str]) -> None:
        exit_code = includeCheckUnresolved.main([str(project / "src"), "-I", str(project / "include"), "--indexed-path", str(project)] + QUIET)

        out = capsys.readouterr().out
        assert exit_code == EXIT_UNRESOLVED_FOUND
        assert "Unresolved include directives (2)" in out
        assert "#include <missing.h>" in out
        assert '#include "impl.h"' in out

    def test_all_resolved(self, project: Path, capsys: pytest.CaptureFixture[str]) -> None:
        (project / "src" / "main.cpp").write_text('#include "core/api.h"\n')

        exit_code = includeCheckUnresolved.main(
            [str(project / "src"), "-I", str(project / "include"), "-I", str(project / "vendor"), "--indexed-path", str(project)] + QUIET
        )

        assert exit_code == EXIT_SUCCESS
        assert "All include directives could be resolved" in capsys.readouterr().out

    def test_default_indexed_path_is_project_root(self, project: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test headers outside the sources' common directory are not followed by default."""
        exit_code = includeCheckUnresolved.main([str(project / "src" / "main.cpp"), "-I", str(project / "include")] + QUIET)

        out = capsys.readouterr().out
        assert exit_code == EXIT_UNRESOLVED_FOUND
        assert "Unresolved include directives (1)" in out
        assert "impl.h" not in out

    def test_compile_commands(self, project: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test sources and -I directories are taken from a compilation database."""
        build = project / "build"
        build.mkdir()
        entries = [
            {"directory": str(build), "file": "../src/main.cpp", "command": "c++ -I../include -isystem ../vendor -c ../src/main.cpp"},
            {"directory": str(build), "file": "../src/util.cpp", "command": "c++ -I../include -isystem ../vendor -c ../src/util.cpp"},
        ]
        (build / "compile_commands.json").write_text(json.dumps(entries))

        exit_code = includeCheckUnresolved.main(["-p", str(build / "compile_commands.json"), "--indexed-path", str(project)] + QUIET)

        out = capsys.readouterr().out
        assert exit_code == EXIT_UNRESOLVED_FOUND
        assert "Unresolved include directives (1)" in out
        assert "missing.h" in out

    def test_json_export(self, project: Path, temp_dir: Path) -> None:
        output_file = temp_dir / "unresolved.json"

        includeCheckUnresolved.main([str(project / "src"), "--json", str(output_file)] + QUIET)

        with open(output_file, "r") as f:
            data = json.load(f)
        assert data["unresolved_count"] == 2
        assert [entry["included_file"] for entry in data["unresolved_includes"]] == ["core/api.h", "missing.h"]

    def test_json_export_failure(self, project: Path, temp_dir: Path) -> None:
        exit_code = includeCheckUnresolved.main([str(project / "src"), "--json", str(temp_dir / "no" / "out.json")] + QUIET)
        assert exit_code == EXIT_RUNTIME_ERROR

    def test_exclude(self, project: Path, capsys: pytest.CaptureFixture[str]) -> None:
        exit_code = includeCheckUnresolved.main(
            [str(project / "src"), "-I", str(project / "include"), "-I", str(project / "vendor"), "--exclude", "main.cpp"] + QUIET
        )

        assert exit_code == EXIT_SUCCESS
        capsys.readouterr()

    def test_compile_commands_build_directory(self, project: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test -p accepts the build directory holding compile_commands.json."""
        build = project / "build"
        build.mkdir()
        entries = [{"directory": str(build), "file": "../src/util.cpp", "arguments": ["c++", "-I../include", "-c", "../src/util.cpp"]}]
        (build / "compile_commands.json").write_text(json.dumps(entries))

        exit_code = includeCheckUnresolved.main(["-p", str(build)] + QUIET)

        assert exit_code == EXIT_SUCCESS
        capsys.readouterr()

    def test_list_output(self, project: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test --list prints one file:line diagnostic per unresolved include."""
        includeCheckUnresolved.main([str(project / "src"), "--list"] + QUIET)

        lines = [line for line in capsys.readouterr().out.splitlines() if "cannot resolve include" in line]
        assert lines == [
            'main.cpp:1: cannot resolve include "core/api.h"',
            "main.cpp:2: cannot resolve include <missing.h>",
        ]

    def test_include_headers(self, project: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test headers in scanned directories are only used as inputs with --include-headers."""
        includeCheckUnresolved.main([str(project / "include"), "--include-headers", "--list"] + QUIET)

        assert 'api.h:2: cannot resolve include "impl.h"' in capsys.readouterr().out

    def test_headers_ignored_by_default(self, project: Path) -> None:
        with pytest.raises(ValidationError):
            includeCheckUnresolved.main([str(project / "include")] + QUIET)

    def test_max_display(self, project: Path, capsys: pytest.CaptureFixture[str]) -> None:
        includeCheckUnresolved.main([str(project / "src"), "--max-display", "1"] + QUIET)
        assert "... and 1 more" in capsys.readouterr().out

    def test_no_inputs(self) -> None:
        with pytest.raises(ArgumentError):
            includeCheckUnresolved.main(QUIET)

    def test_everything_excluded(self, project: Path) -> None:
        with pytest.raises(ValidationError, match="No source files found"):
            includeCheckUnresolved.main([str(project / "src"), "--exclude", "*.cpp"] + QUIET)

    def test_invalid_compile_commands(self, temp_dir: Path) -> None:
        path = temp_dir / "compile_commands.json"
        path.write_text("not json")
        with pytest.raises(CompileDatabaseError):
            includeCheckUnresolved.main(["-p", str(path)] + QUIET)

    def test_quantiles_must_be_positive(self, project: Path) -> None:
        with pytest.raises(SystemExit) as exc_info:
            includeCheckUnresolved.main([str(project / "src"), "--quantiles", "0"] + QUIET)
        assert exc_info.value.code == 2

    def test_progress_written_to_stderr(self, project: Path, capsys: pytest.CaptureFixture[str]) -> None:
        includeCheckUnresolved.main([str(project / "src"), "--no-color"])
        assert "100%" in capsys.readouterr().err


class TestRunEntryPoint:
    """Tests for the console script wrappers."""

    def test_run_maps_validation_error(self) -> None:
        with patch.object(sys, "argv", ["include-check-unresolved", "--no-color"]):
            with pytest.raises(SystemExit) as exc_info:
                includeCheckUnresolved.run()
        assert exc_info.value.code == EXIT_INVALID_ARGS

    def test_run_maps_compile_database_error(self, temp_dir: Path) -> None:
        with patch.object(sys, "argv", ["include-check-search-dirs", "-p", str(temp_dir / "missing.json"), "--no-color"]):
            with pytest.raises(SystemExit) as exc_info:
                includeCheckSearchDirs.run()
        assert exc_info.value.code == EXIT_RUNTIME_ERROR

    def test_run_maps_keyboard_interrupt(self) -> None:
        with patch.object(includeCheckUnresolved, "main", side_effect=KeyboardInterrupt):
            with pytest.raises(SystemExit) as exc_info:
                includeCheckUnresolved.run()
        assert exc_info.value.code == 130

    def test_run_passes_exit_code(self, project: Path) -> None:
        with patch.object(sys, "argv", ["include-check-unresolved", str(project / "src")] + QUIET):
            with pytest.raises(SystemExit) as exc_info:
                includeCheckUnresolved.run()
        assert exc_info.value.code == EXIT_UNRESOLVED_FOUND


class TestSearchDirsCli:
    """Tests for includeCheckSearchDirs.main()."""

    def test_infers_directories(self, project: Path, capsys: pytest.CaptureFixture[str]) -> None:
        exit_code = includeCheckSearchDirs.main([str(project / "src"), "--search-root", str(project)] + QUIET)

        out = capsys.readouterr().out
        assert exit_code == EXIT_SUCCESS
        assert "Inferred header search directories (2)" in out
        assert f"-I{project / 'include'}" in out
        assert f"-I{project / 'vendor'}" in out

    def test_isystem_flag(self, project: Path, capsys: pytest.CaptureFixture[str]) -> None:
        includeCheckSearchDirs.main([str(project / "src"), "--search-root", str(project), "--flag=-isystem"] + QUIET)
        assert f"-isystem{project / 'include'}" in capsys.readouterr().out

    def test_known_directories_not_reported(self, project: Path, capsys: pytest.CaptureFixture[str]) -> None:
        includeCheckSearchDirs.main([str(project / "src"), "--search-root", str(project), "-I", str(project / "include")] + QUIET)

        out = capsys.readouterr().out
        assert "Inferred header search directories (1)" in out
        assert f"-I{project / 'vendor'}" in out

    def test_nothing_found(self, project: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test the default search root (the sources' directory) finds nothing here."""
        exit_code = includeCheckSearchDirs.main([str(project / "src")] + QUIET)

        assert exit_code == EXIT_SUCCESS
        assert "No additional header search directories found" in capsys.readouterr().out

    def test_json_export(self, project: Path, temp_dir: Path) -> None:
        output_file = temp_dir / "dirs.json"

        includeCheckSearchDirs.main([str(project / "src"), "--search-root", str(project), "--json", str(output_file)] + QUIET)

        with open(output_file, "r") as f:
            data = json.load(f)
        assert data["header_search_directories"] == [str(project / "include"), str(project / "vendor")]
        assert data["compiler_flags"] == [f"-I{project / 'include'}", f"-I{project / 'vendor'}"]

    def test_flag_help_shows_equals_form(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the help for --flag tells how to pass a value starting with a dash."""
        monkeypatch.setenv("COLUMNS", "250")
        assert "--flag=-isystem" in includeCheckSearchDirs.create_parser().format_help()

    def test_invalid_flag(self, project: Path) -> None:
        with pytest.raises(SystemExit):
            includeCheckSearchDirs.main([str(project / "src"), "--flag=-L"] + QUIET)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
