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
"""Reading source files and header search directories from compile_commands.json."""

import os
import json
import shlex
import logging
from typing import Any, Dict, List, Set

from includelib.constants import INCLUDE_DIR_FLAGS, CompileDatabaseError
from includelib.file_utils import is_valid_source_file

logger = logging.getLogger(__name__)

CompileCommand = Dict[str, Any]


def load_compile_commands(compile_commands_path: str) -> List[CompileCommand]:
    """Load a compilation database.

    Args:
        compile_commands_path: Path to compile_commands.json

    Returns:
        List of compile command entries

    Raises:
        CompileDatabaseError: If the file is missing, unreadable, not JSON or not a list
    """
    try:
        with open(compile_commands_path, "r", encoding="utf-8") as f:
            compile_commands = json.load(f)
    except (IOError, OSError) as e:
        raise CompileDatabaseError(f"Failed to read {compile_commands_path}: {e}") from e
    except json.JSONDecodeError as e:
        raise CompileDatabaseError(f"Invalid JSON in {compile_commands_path}: {e}") from e

    if not isinstance(compile_commands, list):
        raise CompileDatabaseError(f"{compile_commands_path} must contain a JSON list of compile commands")

    logger.debug("Loaded %d compile commands from %s", len(compile_commands), compile_commands_path)
    return compile_commands


def _get_arguments(entry: CompileCommand) -> List[str]:
    """Return the argument list of an entry, from 'arguments' or a shell-split 'command'."""
    arguments = entry.get("arguments")
    if isinstance(arguments, list):
        return [str(arg) for arg in arguments]

    command = entry.get("command", "")
    try:
        return shlex.split(command)
    except ValueError as e:
        logger.debug("Failed to parse command: %s", e)
        return []


def extract_source_files_from_compile_commands(compile_commands: List[CompileCommand]) -> List[str]:
    """Extract absolute source file paths from compile command entries.

    Args:
        compile_commands: Entries of a compilation database

    Returns:
        Source file paths (.cpp, .c, .cc, ...) in database order without duplicates
    """
    source_files: List[str] = []
    seen: Set[str] = set()

    for entry in compile_commands:
        file_path = entry.get("file", "")
        directory = entry.get("directory", "")

        # Only include actual source files, not utility targets
        if not file_path or not is_valid_source_file(file_path):
            continue

        # Resolve relative paths using the directory field
        if not os.path.isabs(file_path) and directory:
            file_path = os.path.join(directory, file_path)
        file_path = os.path.normpath(file_path)

        if file_path not in seen:
            seen.add(file_path)
            source_files.append(file_path)

    return source_files


def extract_include_paths(compile_commands: List[CompileCommand]) -> Set[str]:
    """Extract header search directories from compile command entries.

    Handles -I, -isystem and -iquote in both joined (-I/path) and separate
    (-I /path) form. Relative directories are anchored at the entry's
    'directory' field.

    Args:
        compile_commands: Entries of a compilation database

    Returns:
        Set of normalized include directories
    """
    include_dirs: Set[str] = set()

    for entry in compile_commands:
        directory = entry.get("directory", "")
        parts = _get_arguments(entry)

        for i, part in enumerate(parts):
            include_path = ""
            # Handle -I /path format
            if part in INCLUDE_DIR_FLAGS:
                if i + 1 < len(parts):
                    include_path = parts[i + 1]
            # Handle -I/path format
            else:
                for prefix in INCLUDE_DIR_FLAGS:
                    if part.startswith(prefix):
                        include_path = part[len(prefix) :]
                        break

            if not include_path:
                continue
            if not os.path.isabs(include_path) and directory:
                include_path = os.path.join(directory, include_path)
            include_dirs.add(os.path.normpath(include_path))

    logger.debug("Found %s include directories in compile commands", len(include_dirs))
    return include_dirs
