#!/usr/bin/env python3
"""Tests for includelib/report_utils.py"""

import json
from pathlib import Path

import pytest

from includelib.file_path import FilePath
from includelib.include_directive import IncludeDirective
from includelib.report_utils import (
    export_search_directories_to_json,
    export_unresolved_to_json,
    format_search_directory_flags,
    format_unresolved_directive,
    get_display_path,
    group_by_including_file,
    print_unresolved_report,
)


def make_directive(included: str, including: str, line: int, angle: bool = False) -> IncludeDirective:
    return IncludeDirective(FilePath(included), FilePath(including), line, angle)


class TestFormatting:
    """Tests for the text formatting helpers."""

    def test_display_path_relative_to_root(self) -> None:
        assert get_display_path(FilePath("/proj/src/a.cpp"), "/proj") == "src/a.cpp"

    def test_display_path_outside_root(self) -> None:
        assert get_display_path(FilePath("/other/a.cpp"), "/proj") == "/other/a.cpp"

    def test_display_path_without_root(self) -> None:
        assert get_display_path(FilePath("/proj/a.cpp")) == "/proj/a.cpp"

    def test_format_quoted(self) -> None:
        directive = make_directive("b.h", "/proj/inc/a.h", 3)
        assert format_unresolved_directive(directive) == '/proj/inc/a.h:3: cannot resolve include "b.h"'

    def test_format_angled_relative(self) -> None:
        directive = make_directive("vector", "/proj/src/main.cpp", 1, angle=True)
        assert format_unresolved_directive(directive, "/proj") == "src/main.cpp:1: cannot resolve include <vector>"

    def test_group_by_including_file(self) -> None:
        """Test groups are ordered by file and lines within a group."""
        directives = [
            make_directive("z.h", "/p/b.cpp", 9),
            make_directive("y.h", "/p/a.cpp", 7),
            make_directive("x.h", "/p/b.cpp", 2),
        ]

        groups = group_by_including_file(directives)

        assert list(groups) == [FilePath("/p/a.cpp"), FilePath("/p/b.cpp")]
        assert [d.line_number for d in groups[FilePath("/p/b.cpp")]] == [2, 9]


class TestSearchDirectoryFlags:
    """Tests for format_search_directory_flags function."""

    def test_default_flag_sorted(self) -> None:
        directories = {FilePath("/proj/z"), FilePath("/proj/a")}
        assert format_search_directory_flags(directories) == ["-I/proj/a", "-I/proj/z"]

    @pytest.mark.parametrize("flag", ["-isystem", "-iquote"])
    def test_other_flags(self, flag: str) -> None:
        assert format_search_directory_flags([FilePath("/sdk")], flag) == [f"{flag}/sdk"]

    def test_unsupported_flag(self) -> None:
        with pytest.raises(ValueError, match="Unsupported include flag"):
            format_search_directory_flags([FilePath("/sdk")], "-L")

    def test_empty(self) -> None:
        assert format_search_directory_flags([]) == []


class TestPrintUnresolvedReport:
    """Tests for print_unresolved_report function."""

    def test_grouped_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        directives = [make_directive("b.h", "/proj/inc/a.h", 2), make_directive("c.h", "/proj/inc/sub/b.h", 1, angle=True)]

        print_unresolved_report(directives, "/proj")

        out = capsys.readouterr().out
        assert "inc/a.h" in out
        assert '#include "b.h"' in out
        assert "#include <c.h>" in out
        assert "more" not in out

    def test_truncated(self, capsys: pytest.CaptureFixture[str]) -> None:
        directives = [make_directive(f"h{i}.h", "/proj/a.cpp", i + 1) for i in range(5)]

        print_unresolved_report(directives, "/proj", max_display=2)

        out = capsys.readouterr().out
        assert "h0.h" in out
        assert "h1.h" in out
        assert "h2.h" not in out
        assert "... and 3 more" in out


class TestJsonExport:
    """Tests for the JSON exporters."""

    def test_export_unresolved(self, temp_dir: Path) -> None:
        output_file = temp_dir / "unresolved.json"
        directives = [make_directive("b.h", "/proj/inc/a.h", 2)]

        assert export_unresolved_to_json(str(output_file), directives) is True

        with open(output_file, "r") as f:
            data = json.load(f)
        assert data == {
            "unresolved_count": 1,
            "unresolved_includes": [
                {"included_file": "b.h", "including_file": "/proj/inc/a.h", "line_number": 2, "uses_angle_brackets": False},
            ],
        }

    def test_export_search_directories(self, temp_dir: Path) -> None:
        output_file = temp_dir / "dirs.json"

        assert export_search_directories_to_json(str(output_file), {FilePath("/b"), FilePath("/a")}, "-isystem") is True

        with open(output_file, "r") as f:
            data = json.load(f)
        assert data["header_search_directories"] == ["/a", "/b"]
        assert data["compiler_flags"] == ["-isystem/a", "-isystem/b"]

    def test_export_failure(self, temp_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test an unwritable target reports the error and returns False."""
        output_file = temp_dir / "missing_dir" / "out.json"

        assert export_unresolved_to_json(str(output_file), []) is False
        assert "Failed to export" in capsys.readouterr().err


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
