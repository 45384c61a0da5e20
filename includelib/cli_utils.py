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
"""Argument handling shared by the includeCheck command line tools."""

import os
import sys
import argparse
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Set, TextIO

from includelib.color_utils import Colors, print_warning, progress_bar, should_use_color
from includelib.compile_db_utils import extract_include_paths, extract_source_files_from_compile_commands, load_compile_commands
from includelib.constants import COMPILE_COMMANDS_JSON, DEFAULT_QUANTILE_COUNT, ArgumentError, ValidationError
from includelib.file_utils import collect_source_files, exclude_files_by_patterns, find_project_root_from_sources

logger = logging.getLogger(__name__)


@dataclass
class AnalysisInputs:
    """Resolved inputs for one analysis run.

    Attributes:
        source_files: Absolute source files to start the traversal from
        include_dirs: Header search directories already known
        project_root: Common root of the source files, used for defaults and display
    """

    source_files: List[str]
    include_dirs: Set[str] = field(default_factory=set)
    project_root: str = os.sep


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format="%(levelname)s: %(message)s")
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


def positive_int(value: str) -> int:
    """argparse type for integers >= 1."""
    try:
        number = int(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"'{value}' is not an integer") from e
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the input and output options shared by all includeCheck tools."""
    parser.add_argument("paths", nargs="*", metavar="PATH", help="Source files or directories to scan (directories are searched recursively)")
    parser.add_argument(
        "-p",
        "--compile-commands",
        metavar="PATH",
        help=f"{COMPILE_COMMANDS_JSON} (or the build directory containing it) providing source files and -I/-isystem/-iquote directories",
    )
    parser.add_argument("--include-headers", action="store_true", help="Also scan header files found in the given directories")
    parser.add_argument(
        "-I", "--include-dir", action="append", default=[], metavar="DIR", help="Header search directory already configured (can be used multiple times)"
    )
    parser.add_argument(
        "--quantiles",
        type=positive_int,
        default=DEFAULT_QUANTILE_COUNT,
        help=f"Number of batches used for progress reporting (default: {DEFAULT_QUANTILE_COUNT})",
    )
    parser.add_argument(
        "--exclude",
        type=str,
        action="append",
        default=[],
        metavar="PATTERN",
        help='Exclude source files matching glob pattern (can be used multiple times), e.g. "*/ThirdParty/*"',
    )
    parser.add_argument("--json", metavar="FILE", help="Also write the results to a JSON file")
    parser.add_argument("--no-progress", action="store_true", help="Do not show a progress bar")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")


def apply_color_setting(args: argparse.Namespace) -> None:
    if not should_use_color(no_color=args.no_color):
        Colors.disable()


def gather_analysis_inputs(args: argparse.Namespace) -> AnalysisInputs:
    """Collect source files and include directories from paths and the compilation database.

    Raises:
        ArgumentError: If neither paths nor a compilation database were given
        ValidationError: If no source files remain after exclusions
        CompileDatabaseError: If the compilation database cannot be read
    """
    if not args.paths and not args.compile_commands:
        raise ArgumentError("Specify source files/directories and/or --compile-commands")

    source_files: List[str] = collect_source_files(args.paths, include_headers=args.include_headers) if args.paths else []
    include_dirs: Set[str] = {os.path.abspath(d) for d in args.include_dir}

    if args.compile_commands:
        compile_commands_path = args.compile_commands
        if os.path.isdir(compile_commands_path):
            compile_commands_path = os.path.join(compile_commands_path, COMPILE_COMMANDS_JSON)
        compile_commands = load_compile_commands(compile_commands_path)
        source_files.extend(extract_source_files_from_compile_commands(compile_commands))
        include_dirs.update(extract_include_paths(compile_commands))

    source_files = sorted(set(source_files))
    project_root = find_project_root_from_sources(source_files)

    if args.exclude:
        source_files, excluded_count, no_match_patterns = exclude_files_by_patterns(source_files, args.exclude, project_root)
        if excluded_count:
            logger.info("Excluded %d source file(s) matching %d pattern(s)", excluded_count, len(args.exclude))
        for pattern in no_match_patterns:
            print_warning(f"Exclude pattern '{pattern}' matched no files")

    if not source_files:
        raise ValidationError("No source files found")

    for include_dir in sorted(include_dirs):
        if not os.path.isdir(include_dir):
            logger.debug("Header search directory does not exist: %s", include_dir)

    logger.info("Analyzing %d source file(s) with %d header search director%s", len(source_files), len(include_dirs), "y" if len(include_dirs) == 1 else "ies")
    return AnalysisInputs(source_files=source_files, include_dirs=include_dirs, project_root=project_root)


def make_progress_callback(enabled: bool, stream: Optional[TextIO] = None) -> Optional[Callable[[float], None]]:
    """Create a progress callback that redraws a progress bar in place.

    Returns:
        Callback accepting a fraction in [0, 1], or None when disabled
    """
    if not enabled:
        return None

    out = stream if stream is not None else sys.stderr

    def report(fraction: float) -> None:
        print(f"\r{Colors.DIM}  Progress:{Colors.RESET} {progress_bar(fraction)}", end="", file=out, flush=True)
        if fraction >= 1.0:
            print(file=out)  # New line after progress

    return report
