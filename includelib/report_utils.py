#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# ****************************************************************************************************************************************************
# * BSD 3-Clause License
# *
# * Copyright (c) 2025, Mana Battery
# * All rights reserved.
# *
# * Redistribution and use in source and binary forms, with or without modification, are permitted provided that the following conditions are met:
# *
# * 1. Redistributions of source code must retain the above copyright notice, this list of conditions and the following disclaimer.
# * 2. Redistributions in binary form must reproduce the above copyright notice, this list of conditions and the following disclaimer in the
# *    documentation and/or other materials provided with the distribution.
# * 3. Neither the name of the copyright holder nor the names of its contributors may be used to endorse or promote products derived from this
# *    software without specific prior written permission.
# *
# * THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO,
# * THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR
# * CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO,
# * PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF
# * LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE,
# * EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
# ****************************************************************************************************************************************************
"""Formatting and export of include analysis results."""

import os
import json
import logging
from collections import defaultdict
from typing import Any, DefaultDict, Dict, Iterable, List, Optional

from includelib.color_utils import Colors, print_error, print_success
from includelib.constants import DEFAULT_INCLUDE_FLAG, INCLUDE_DIR_FLAGS
from includelib.file_path import FilePath
from includelib.include_directive import IncludeDirective

logger = logging.getLogger(__name__)


def get_display_path(path: FilePath, project_root: Optional[str] = None) -> str:
    """Path relative to project_root when it lies below it, otherwise unchanged."""
    if project_root and FilePath(project_root).contains(path):
        return os.path.relpath(path.path, project_root)
    return path.path


def format_unresolved_directive(directive: IncludeDirective, project_root: Optional[str] = None) -> str:
    """Format an unresolved directive as a compiler style diagnostic.

    Example:
        >>> format_unresolved_directive(directive)
        '/proj/inc/a.h:3: cannot resolve include "b.h"'
    """
    included = f"<{directive.included_file}>" if directive.uses_angle_brackets else f'"{directive.included_file}"'
    return f"{get_display_path(directive.including_file, project_root)}:{directive.line_number}: cannot resolve include {included}"


def group_by_including_file(directives: Iterable[IncludeDirective]) -> Dict[FilePath, List[IncludeDirective]]:
    """Group directives by the file that contains them, each group ordered by line."""
    groups: DefaultDict[FilePath, List[IncludeDirective]] = defaultdict(list)
    for directive in directives:
        groups[directive.including_file].append(directive)
    return {path: sorted(groups[path], key=lambda d: d.line_number) for path in sorted(groups)}


def format_search_directory_flags(directories: Iterable[FilePath], flag: str = DEFAULT_INCLUDE_FLAG) -> List[str]:
    """Render search directories as compiler arguments.

    Args:
        directories: Header search directories
        flag: One of -I, -isystem or -iquote

    Returns:
        Sorted list of joined arguments, e.g. ["-I/proj/include"]

    Raises:
        ValueError: If flag is not a supported include flag
    """
    if flag not in INCLUDE_DIR_FLAGS:
        raise ValueError(f"Unsupported include flag '{flag}', expected one of {', '.join(INCLUDE_DIR_FLAGS)}")
    return [f"{flag}{directory}" for directory in sorted(directories)]


def print_unresolved_report(directives: List[IncludeDirective], project_root: Optional[str] = None, max_display: Optional[int] = None) -> None:
    """Print unresolved directives grouped by including file."""
    groups = group_by_including_file(directives)
    shown = 0

    for including_file, group in groups.items():
        if max_display is not None and shown >= max_display:
            break
        print(f"\n  {Colors.BRIGHT}{get_display_path(including_file, project_root)}{Colors.RESET}")
        for directive in group:
            if max_display is not None and shown >= max_display:
                break
            print(f"    {Colors.DIM}line {directive.line_number}:{Colors.RESET} {Colors.RED}{directive.get_directive()}{Colors.RESET}")
            shown += 1

    if max_display is not None and len(directives) > shown:
        print(f"\n  {Colors.DIM}... and {len(directives) - shown} more{Colors.RESET}")


def _directive_to_dict(directive: IncludeDirective) -> Dict[str, Any]:
    return {
        "included_file": directive.included_file.path,
        "including_file": directive.including_file.path,
        "line_number": directive.line_number,
        "uses_angle_brackets": directive.uses_angle_brackets,
    }


def _write_json(filename: str, data: Dict[str, Any], what: str) -> bool:
    try:
        with open(filename, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
    except (IOError, OSError) as e:
        logger.error("Failed to export %s: %s", what, e)
        print_error(f"Failed to export {what}: {e}")
        return False

    logger.info("Exported %s to %s", what, filename)
    print_success(f"Exported {what} to {filename}")
    return True


def export_unresolved_to_json(filename: str, directives: List[IncludeDirective]) -> bool:
    """Export unresolved directives to a JSON file.

    Args:
        filename: Output JSON filename
        directives: Unresolved directives

    Returns:
        True on success, False if the file could not be written
    """
    data = {"unresolved_count": len(directives), "unresolved_includes": [_directive_to_dict(d) for d in directives]}
    return _write_json(filename, data, "unresolved includes")


def export_search_directories_to_json(filename: str, directories: Iterable[FilePath], flag: str = DEFAULT_INCLUDE_FLAG) -> bool:
    """Export inferred header search directories and their compiler flags to a JSON file."""
    directory_list = sorted(directories)
    data = {
        "header_search_directories": [d.path for d in directory_list],
        "compiler_flags": format_search_directory_flags(directory_list, flag),
    }
    return _write_json(filename, data, "header search directories")
