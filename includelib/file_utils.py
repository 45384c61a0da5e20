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
"""File discovery and filtering for include analysis."""

import os
import fnmatch
import logging
from typing import Iterable, List, Set, Tuple

from includelib.constants import VALID_HEADER_EXTENSIONS, VALID_SOURCE_EXTENSIONS

logger = logging.getLogger(__name__)


def is_valid_source_file(filepath: str) -> bool:
    """Check if a file is a valid C/C++ source file.

    Args:
        filepath: Path to the file

    Returns:
        True if the file is a valid C/C++ source file
    """
    return filepath.lower().endswith(VALID_SOURCE_EXTENSIONS)


def is_valid_header_file(filepath: str) -> bool:
    """Check if a file is a valid C/C++ header file.

    Args:
        filepath: Path to the file

    Returns:
        True if the file is a valid C/C++ header file
    """
    return filepath.lower().endswith(VALID_HEADER_EXTENSIONS)


def collect_source_files(paths: Iterable[str], include_headers: bool = False) -> List[str]:
    """Expand files and directories into a sorted list of absolute source files.

    Files given explicitly are kept whatever their extension. Directories are
    walked recursively and contribute files with a source extension (and a
    header extension when include_headers is set).

    Args:
        paths: Files and/or directories
        include_headers: Also collect header files from directories

    Returns:
        Sorted list of unique absolute file paths
    """
    path_list = list(paths)
    collected: Set[str] = set()

    for path in path_list:
        abs_path = os.path.abspath(path)
        if os.path.isfile(abs_path):
            collected.add(abs_path)
            continue

        if not os.path.isdir(abs_path):
            logger.warning("Ignoring %s: not a file or directory", path)
            continue

        for root, _dirs, files in os.walk(abs_path):
            for name in files:
                if is_valid_source_file(name) or (include_headers and is_valid_header_file(name)):
                    collected.add(os.path.join(root, name))

    logger.debug("Collected %d files from %d input path(s)", len(collected), len(path_list))
    return sorted(collected)


def exclude_files_by_patterns(files: Iterable[str], exclude_patterns: List[str], project_root: str) -> Tuple[List[str], int, List[str]]:
    """Exclude files matching any of the provided glob patterns.

    Patterns are matched against the path relative to project_root when the
    file lies below it, otherwise against the full path.

    Args:
        files: File paths
        exclude_patterns: Glob patterns to exclude (e.g., ["*/ThirdParty/*", "*/test/*"])
        project_root: Root directory of the project

    Returns:
        Tuple of (kept_files, excluded_count, patterns_with_no_matches)
    """
    file_list = list(files)
    if not exclude_patterns:
        return file_list, 0, []

    kept: List[str] = []
    pattern_match_counts = {pattern: 0 for pattern in exclude_patterns}
    root_prefix = project_root.rstrip(os.sep) + os.sep

    for path in file_list:
        rel_path = os.path.relpath(path, project_root) if path.startswith(root_prefix) else path

        excluded = False
        for pattern in exclude_patterns:
            if fnmatch.fnmatch(rel_path, pattern):
                excluded = True
                pattern_match_counts[pattern] += 1
                break

        if not excluded:
            kept.append(path)

    excluded_count = len(file_list) - len(kept)
    patterns_with_no_matches = [pattern for pattern, count in pattern_match_counts.items() if count == 0]

    logger.info("Excluded %s files using %s patterns", excluded_count, len(exclude_patterns))
    for pattern, count in pattern_match_counts.items():
        logger.debug("Pattern '%s' matched %s files", pattern, count)

    return kept, excluded_count, patterns_with_no_matches


def find_project_root_from_sources(source_files: List[str]) -> str:
    """Find project root as the common directory of all source files.

    Args:
        source_files: Source file paths

    Returns:
        Common project root directory path ("/" for an empty list)
    """
    if not source_files:
        return os.sep

    abs_paths = [os.path.realpath(f) for f in source_files]

    if len(abs_paths) == 1:
        return os.path.dirname(abs_paths[0])

    common_prefix = os.path.commonpath(abs_paths)

    # Ensure it's a directory
    if os.path.isfile(common_prefix):
        common_prefix = os.path.dirname(common_prefix)

    return common_prefix
