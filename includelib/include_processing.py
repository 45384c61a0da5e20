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
"""Discovery of unresolved #include directives and of missing header search directories.

The functions in this module perform a purely lexical scan of C/C++ files:
lines whose first token is '#include' are collected, no macros are expanded and
conditional compilation is ignored. Each directive is resolved with a strict
three tier policy:

1. An absolute included path that exists is used as is
2. Otherwise the path relative to the including file's directory
3. Otherwise the first header search directory (in sorted order) that contains it

Two worklist traversals are built on top of that:

- get_unresolved_include_directives() walks the transitive include closure of
  the source files (restricted to indexed paths) and reports every directive
  that resolves to nothing.
- get_header_search_directories() performs the same walk but, when a directive
  cannot be resolved, probes directory trees for a root under which the
  written relative path exists and reports those roots.

Both split the input into quantiles purely to report progress between batches.
All batches share one visited set, so the quantile count never changes results
and no file is scanned twice within one call.
"""

import time
import logging
from typing import Callable, Dict, Iterable, List, Optional, Set, Tuple, Union

from includelib.constants import ANGLE_DELIMITERS, DIRECTIVE_HASH, DIRECTIVE_INCLUDE, QUOTE_DELIMITERS
from includelib.file_path import FilePath
from includelib.file_tree import FileTree
from includelib.include_directive import IncludeDirective
from includelib.text_access import TextAccess

logger = logging.getLogger(__name__)

__all__ = [
    "get_include_directives",
    "get_include_directives_from_text",
    "resolve_include_directive",
    "split_to_quantiles",
    "get_unresolved_include_directives",
    "get_header_search_directories",
]

ProgressCallback = Callable[[float], None]
PathInput = Union[FilePath, str]


def _no_progress(_fraction: float) -> None:
    return


def _to_sorted_paths(paths: Iterable[PathInput]) -> List[FilePath]:
    return sorted({FilePath.of(p) for p in paths})


def _canonical(path: FilePath) -> FilePath:
    return path.make_absolute().make_canonical()


def _unprocessed(file_paths: Iterable[FilePath], processed_file_paths: Set[str]) -> Set[FilePath]:
    """Keep one spelling (the first in sorted order) per canonical path not yet processed."""
    level: Dict[str, FilePath] = {}
    for path in sorted(file_paths):
        key = _canonical(path).path
        if key not in processed_file_paths and key not in level:
            level[key] = path
    return set(level.values())


def _directive_order_key(include_directive: IncludeDirective) -> Tuple[str, int]:
    # Picks the reported directive among those sharing an included path, independent of scan order
    return (include_directive.including_file.path, include_directive.line_number)


def _substr_between(text: str, opening: str, closing: str) -> str:
    """Return the text between the first opening delimiter and the next closing one after it."""
    start = text.find(opening)
    if start < 0:
        return ""
    end = text.find(closing, start + 1)
    if end < 0:
        return ""
    return text[start + 1 : end]


# =============================================================================
# Scanner
# =============================================================================


def get_include_directives_from_text(text_access: TextAccess) -> List[IncludeDirective]:
    """Extract include directives from already loaded text.

    Args:
        text_access: Lines of the file plus the file's own path

    Returns:
        Directives in line order. Lines with an empty or unmatched delimiter
        pair (e.g. '#include MACRO') are skipped silently.
    """
    directives: List[IncludeDirective] = []
    including_file = text_access.get_file_path()

    for index, line in enumerate(text_access.get_all_lines()):
        trimmed = line.strip()
        if not trimmed.startswith(DIRECTIVE_HASH):
            continue

        trimmed = trimmed[len(DIRECTIVE_HASH) :].strip()
        if not trimmed.startswith(DIRECTIVE_INCLUDE):
            continue

        included = _substr_between(trimmed, *ANGLE_DELIMITERS)
        uses_angle_brackets = True
        if not included:
            included = _substr_between(trimmed, *QUOTE_DELIMITERS)
            uses_angle_brackets = False

        if included:
            # lines are 1 based
            directives.append(IncludeDirective(FilePath(included), including_file, index + 1, uses_angle_brackets))

    return directives


def get_include_directives(file_path: PathInput) -> List[IncludeDirective]:
    """Extract include directives from a file on disk.

    A missing or unreadable file yields no directives. A relative path is
    anchored at the current directory, so including_file is always absolute.
    """
    path = FilePath.of(file_path).make_absolute()
    if not path.exists():
        logger.debug("Skipping missing file %s", path)
        return []
    return get_include_directives_from_text(TextAccess.create_from_file(path))


# =============================================================================
# Resolver
# =============================================================================


def _resolve_in_sorted_directories(include_directive: IncludeDirective, header_search_directories: List[FilePath]) -> Optional[FilePath]:
    """Resolve with search directories already sorted, tried in the given order."""
    included_file = include_directive.included_file

    # absolute include path
    if included_file.is_absolute() and included_file.exists():
        return included_file

    # relative to the including file
    resolved = include_directive.including_file.get_parent_directory().get_concatenated(included_file)
    if resolved.exists():
        return resolved

    # relative to the header search directories
    for header_search_directory in header_search_directories:
        resolved = header_search_directory.get_concatenated(included_file)
        if resolved.exists():
            return resolved

    return None


def resolve_include_directive(include_directive: IncludeDirective, header_search_directories: Iterable[PathInput]) -> Optional[FilePath]:
    """Resolve a directive to an existing file.

    Tiers are tried strictly in order and the first hit is returned:
    absolute path, then relative to the including file, then each header
    search directory in sorted order.

    Args:
        include_directive: Directive to resolve
        header_search_directories: Directories to try after the first two tiers

    Returns:
        The existing path (not canonicalized), or None if no tier matched
    """
    return _resolve_in_sorted_directories(include_directive, _to_sorted_paths(header_search_directories))


# =============================================================================
# Quantile partitioner
# =============================================================================


def split_to_quantiles(file_paths: Iterable[PathInput], desired_quantile_count: int) -> List[List[FilePath]]:
    """Split files round-robin into at most desired_quantile_count batches.

    The i-th file in sorted order goes to batch i % count where
    count = max(1, min(desired_quantile_count, number of files)). An empty
    input gives a single empty batch.

    Args:
        file_paths: Files to split (duplicates are collapsed)
        desired_quantile_count: Upper bound on the number of batches

    Returns:
        List of batches, each a list of FilePath in sorted order
    """
    paths = _to_sorted_paths(file_paths)
    quantile_count = max(1, min(desired_quantile_count, len(paths)))

    quantiles: List[List[FilePath]] = [[] for _ in range(quantile_count)]
    for i, path in enumerate(paths):
        quantiles[i % quantile_count].append(path)

    return quantiles


# =============================================================================
# Unresolved include collector
# =============================================================================


def _collect_unresolved_include_directives(
    file_paths_to_process: Set[FilePath],
    processed_file_paths: Set[str],
    indexed_paths: List[FilePath],
    header_search_directories: List[FilePath],
) -> List[IncludeDirective]:
    """Walk the include closure of one batch, sharing processed_file_paths with other batches."""
    unresolved: List[IncludeDirective] = []

    while file_paths_to_process:
        # Mark the whole level first so includes within the level are not queued again
        processed_file_paths.update(_canonical(p).path for p in file_paths_to_process)

        next_iteration: Set[FilePath] = set()
        for file_path in sorted(file_paths_to_process):
            for include_directive in get_include_directives(file_path):
                resolved = _resolve_in_sorted_directories(include_directive, header_search_directories)
                if resolved is None:
                    unresolved.append(include_directive)
                    continue

                resolved = _canonical(resolved)
                if resolved.path in processed_file_paths:
                    continue

                if any(indexed_path.contains(resolved) for indexed_path in indexed_paths):
                    next_iteration.add(resolved)

        file_paths_to_process = next_iteration

    return unresolved


def get_unresolved_include_directives(
    source_file_paths: Iterable[PathInput],
    indexed_paths: Iterable[PathInput],
    header_search_directories: Iterable[PathInput],
    desired_quantile_count: int,
    progress: Optional[ProgressCallback] = None,
) -> List[IncludeDirective]:
    """Find include directives that cannot be resolved, following includes transitively.

    Included files are only followed when they lie below one of indexed_paths,
    which keeps the walk out of system and third party trees.

    Args:
        source_file_paths: Files to start from
        indexed_paths: Roots whose files are followed into
        header_search_directories: Directories for the third resolution tier
        desired_quantile_count: Number of batches used for progress reporting
        progress: Called with i/n before batch i and with 1.0 at the end

    Returns:
        Unresolved directives, one per distinct included path (the occurrence
        with the smallest including file and line), sorted by included path
    """
    report = progress if progress is not None else _no_progress
    start_time = time.time()

    indexed = sorted({_canonical(p) for p in _to_sorted_paths(indexed_paths)})
    search_directories = _to_sorted_paths(header_search_directories)

    processed_file_paths: Set[str] = set()
    unresolved_by_included_file: Dict[FilePath, IncludeDirective] = {}

    quantiles = split_to_quantiles(source_file_paths, desired_quantile_count)
    for i, quantile in enumerate(quantiles):
        report(i / len(quantiles))

        directives = _collect_unresolved_include_directives(_unprocessed(quantile, processed_file_paths), processed_file_paths, indexed, search_directories)
        for directive in directives:
            known = unresolved_by_included_file.get(directive.included_file)
            if known is None or _directive_order_key(directive) < _directive_order_key(known):
                unresolved_by_included_file[directive.included_file] = directive

        logger.debug("Quantile %d/%d: %d files processed so far", i + 1, len(quantiles), len(processed_file_paths))

    report(1.0)

    logger.info(
        "Scanned %d files, found %d unresolved include(s) in %.2fs",
        len(processed_file_paths),
        len(unresolved_by_included_file),
        time.time() - start_time,
    )

    return [unresolved_by_included_file[key] for key in sorted(unresolved_by_included_file)]


# =============================================================================
# Header search directory inferencer
# =============================================================================


def _find_in_file_trees(include_directive: IncludeDirective, file_trees: List[FileTree]) -> Optional[FilePath]:
    """Return the first tree root under which the included path exists."""
    for file_tree in file_trees:
        # TODO: report includes that can be found below more than one root
        root_path = file_tree.get_absolute_root_path_for_relative_file_path(include_directive.included_file)
        if root_path is not None and root_path.get_concatenated(include_directive.included_file).exists():
            return root_path
    return None


def get_header_search_directories(
    source_file_paths: Iterable[PathInput],
    searched_paths: Iterable[PathInput],
    current_header_search_directories: Iterable[PathInput],
    desired_quantile_count: int,
    progress: Optional[ProgressCallback] = None,
) -> Set[FilePath]:
    """Infer header search directories that would resolve currently unresolved includes.

    Every searched path is indexed as a FileTree. When a directive resolves to
    nothing with the current search directories, the trees are probed in
    sorted order and the first root under which the written path exists is
    recorded. Found files are followed transitively wherever they live.

    Args:
        source_file_paths: Files to start from
        searched_paths: Roots of the directory trees to probe
        current_header_search_directories: Directories already configured
        desired_quantile_count: Number of batches used for progress reporting
        progress: Called with i/n before batch i and with 1.0 at the end

    Returns:
        Set of inferred search directories (absolute)
    """
    report = progress if progress is not None else _no_progress
    start_time = time.time()

    file_trees = [FileTree(path) for path in _to_sorted_paths(searched_paths)]
    current_directories = _to_sorted_paths(current_header_search_directories)

    header_search_directories: Set[FilePath] = set()
    processed_file_paths: Set[str] = set()

    quantiles = split_to_quantiles(source_file_paths, desired_quantile_count)
    for i, quantile in enumerate(quantiles):
        report(i / len(quantiles))

        file_paths_to_process = _unprocessed(quantile, processed_file_paths)
        while file_paths_to_process:
            processed_file_paths.update(_canonical(p).path for p in file_paths_to_process)

            next_iteration: Set[FilePath] = set()
            for file_path in sorted(file_paths_to_process):
                for include_directive in get_include_directives(file_path):
                    found = _resolve_in_sorted_directories(include_directive, current_directories)
                    if found is None:
                        root_path = _find_in_file_trees(include_directive, file_trees)
                        if root_path is None:
                            continue
                        if root_path not in header_search_directories:
                            logger.debug("Inferred search directory %s from %s", root_path, include_directive)
                        header_search_directories.add(root_path)
                        found = root_path.get_concatenated(include_directive.included_file)

                    found = _canonical(found)
                    if found.path not in processed_file_paths:
                        next_iteration.add(found)

            file_paths_to_process = next_iteration

    report(1.0)

    logger.info(
        "Scanned %d files, inferred %d header search director%s in %.2fs",
        len(processed_file_paths),
        len(header_search_directories),
        "y" if len(header_search_directories) == 1 else "ies",
        time.time() - start_time,
    )

    return header_search_directories
