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
"""Directory tree index used to guess header search directories.

A FileTree walks one root directory once and remembers every file by name.
Given the relative path written in an #include directive it can then answer
"below which directory of this tree does that relative path exist?".
"""

import os
import logging
from collections import defaultdict
from typing import DefaultDict, List, Optional, Union

from includelib.file_path import FilePath

logger = logging.getLogger(__name__)


class FileTree:
    """Index of all files below a root directory, keyed by file name.

    Symlinked directories are not followed, so a tree with link cycles is
    still indexed in finite time.
    """

    def __init__(self, root_path: Union[FilePath, str]):
        self._root = FilePath.of(root_path).make_absolute()
        self._root_dir = os.path.normpath(self._root.path)
        # Map: file name -> sorted list of directories containing a file with that name
        self._directories_by_name: DefaultDict[str, List[str]] = defaultdict(list)
        self._file_count = 0

        if not self._root.is_directory():
            logger.debug("File tree root %s is not a directory, index is empty", self._root)
            return

        for dirpath, _dirs, files in os.walk(self._root_dir):
            for name in files:
                self._directories_by_name[name].append(os.path.normpath(dirpath))
                self._file_count += 1

        for directories in self._directories_by_name.values():
            directories.sort()

        logger.debug("Indexed %d files below %s", self._file_count, self._root)

    def get_root_path(self) -> FilePath:
        return self._root

    def get_file_count(self) -> int:
        return self._file_count

    def get_absolute_root_path_for_relative_file_path(self, relative_file_path: Union[FilePath, str]) -> Optional[FilePath]:
        """Find the directory of this tree under which a relative path exists.

        Candidates sharing the file name are checked in sorted order and the
        first whose trailing path components match wins. Ambiguous matches are
        not reported.

        Args:
            relative_file_path: Path as written in an include directive (e.g. "sub/b.h")

        Returns:
            Absolute directory D such that D/relative_file_path is a file of this
            tree, or None if the path is absolute, escapes upwards or is unknown

        Example:
            >>> tree = FileTree("/proj")  # contains /proj/sub/b.h
            >>> tree.get_absolute_root_path_for_relative_file_path("sub/b.h")
            FilePath(path='/proj')
        """
        relative = str(relative_file_path)
        if not relative or os.path.isabs(relative):
            return None

        normalized = os.path.normpath(relative)
        if normalized == os.curdir or normalized == os.pardir or normalized.startswith(os.pardir + os.sep):
            return None

        parts = normalized.split(os.sep)
        directories = self._directories_by_name.get(parts[-1])
        if not directories:
            return None

        # Components between the root we are looking for and the file itself
        leading = parts[:-1]
        for directory in directories:
            root = directory
            matched = True
            for component in reversed(leading):
                if os.path.basename(root) != component:
                    matched = False
                    break
                root = os.path.dirname(root)
            if not matched:
                continue
            if root != self._root_dir and not root.startswith(self._root_dir.rstrip(os.sep) + os.sep):
                continue
            return FilePath(root)

        return None

    def __repr__(self) -> str:
        return f"FileTree(root={self._root}, files={self._file_count})"
