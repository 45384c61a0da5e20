#!/usr/bin/env python3
"""Pytest configuration and shared fixtures for includeCheck tests.

Fixtures build small C/C++ trees on disk below pytest's tmp_path so the
include processing functions can be exercised against a real file system.
"""

import os
import sys
from pathlib import Path
from typing import Callable, Dict, Generator

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Resolved temporary directory (no symlinks in the path, e.g. /tmp on macOS).

    Scope: function (default)
    Use for: File I/O operations that need isolation
    """
    return Path(os.path.realpath(tmp_path))


@pytest.fixture
def make_tree(temp_dir: Path) -> Callable[[Dict[str, str]], Path]:
    """Return a helper that writes {relative path: content} below temp_dir.

    Example:
        root = make_tree({"inc/a.h": '#include "b.h"\\n'})
    """

    def _make_tree(files: Dict[str, str]) -> Path:
        for rel_path, content in files.items():
            path = temp_dir / rel_path
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return temp_dir

    return _make_tree


@pytest.fixture
def proj_tree(make_tree: Callable[[Dict[str, str]], Path]) -> Path:
    """The a.h / sub/b.h project used by several scenarios.

    Layout:
        proj/inc/a.h      #include "b.h"   (line 2)
        proj/inc/sub/b.h  #include <c.h>   (line 1)
        proj/other/c.h
    """
    root = make_tree(
        {
            "proj/inc/a.h": '#pragma once\n#include "b.h"\n',
            "proj/inc/sub/b.h": "#include <c.h>\nint b();\n",
            "proj/other/c.h": "int c();\n",
        }
    )
    return root / "proj"


@pytest.fixture(autouse=True)
def restore_colors() -> Generator[None, None, None]:
    """Undo Colors.disable() calls made by command line tests."""
    from includelib.color_utils import Colors

    saved = {name: value for name, value in vars(Colors).items() if not name.startswith("_") and isinstance(value, str)}
    yield
    for name, value in saved.items():
        setattr(Colors, name, value)
