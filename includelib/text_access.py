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
"""Line oriented access to the text of a source file."""

import logging
from typing import List, Optional, Union

from includelib.file_path import FilePath

logger = logging.getLogger(__name__)


class TextAccess:
    """Holds the lines of one file (or of an in-memory text) together with its path.

    A file that cannot be read produces a TextAccess with zero lines. Callers
    treat that exactly like an empty file.
    """

    def __init__(self, lines: List[str], file_path: Optional[FilePath] = None):
        self._lines = lines
        self._file_path = file_path if file_path is not None else FilePath()

    @classmethod
    def create_from_file(cls, file_path: Union[FilePath, str]) -> "TextAccess":
        """Read a file as UTF-8, ignoring undecodable bytes.

        Args:
            file_path: File to read

        Returns:
            TextAccess with the file's lines, empty if the file could not be read
        """
        path = FilePath.of(file_path)
        try:
            with open(path.path, "r", encoding="utf-8", errors="ignore") as f:
                lines = f.read().splitlines()
        except (IOError, OSError) as e:
            logger.debug("Could not read %s: %s", path, e)
            lines = []
        return cls(lines, path)

    @classmethod
    def create_from_string(cls, text: str, file_path: Union[FilePath, str, None] = None) -> "TextAccess":
        return cls(text.splitlines(), FilePath.of(file_path) if file_path is not None else None)

    def get_file_path(self) -> FilePath:
        return self._file_path

    def get_all_lines(self) -> List[str]:
        return list(self._lines)

    def get_line_count(self) -> int:
        return len(self._lines)

    def __repr__(self) -> str:
        return f"TextAccess(file={self._file_path}, lines={len(self._lines)})"
