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
"""Immutable path value used throughout include processing.

FilePath wraps a single path string. Equality, hashing and ordering are all
defined by that string, which gives every set of paths a stable total order:
round-robin batching and first-match resolution both iterate paths in sorted
order, so results do not depend on hash seeds or insertion order.
"""

import os
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True, order=True)
class FilePath:
    """A file system path with the operations needed for include resolution.

    Attributes:
        path: Path string as given (absolute or relative, may be empty)
    """

    path: str = ""

    @classmethod
    def of(cls, value: Union["FilePath", str, "os.PathLike[str]"]) -> "FilePath":
        """Coerce a string, os.PathLike or FilePath into a FilePath."""
        if isinstance(value, FilePath):
            return value
        return cls(os.fspath(value))

    def __str__(self) -> str:
        return self.path

    def __fspath__(self) -> str:
        return self.path

    def empty(self) -> bool:
        return not self.path

    def is_absolute(self) -> bool:
        return os.path.isabs(self.path)

    def exists(self) -> bool:
        return bool(self.path) and os.path.exists(self.path)

    def is_directory(self) -> bool:
        return bool(self.path) and os.path.isdir(self.path)

    def get_parent_directory(self) -> "FilePath":
        """Return the lexical parent directory (empty for a bare file name)."""
        return FilePath(os.path.dirname(self.path))

    def get_concatenated(self, other: Union["FilePath", str]) -> "FilePath":
        """Return other appended below this path.

        Unlike os.path.join an absolute other does not replace this path, its
        leading separators are dropped so the result always nests below self.
        """
        tail = str(other).lstrip(os.sep)
        if not self.path:
            return FilePath(tail)
        if not tail:
            return self
        return FilePath(os.path.join(self.path, tail))

    def make_absolute(self) -> "FilePath":
        if not self.path or self.is_absolute():
            return self
        return FilePath(os.path.abspath(self.path))

    def make_canonical(self) -> "FilePath":
        """Resolve symlinks and dot segments for an existing path.

        A path that does not exist is returned unchanged, an empty path stays empty.
        """
        if not self.exists():
            return self
        return FilePath(os.path.realpath(self.path))

    def contains(self, other: Union["FilePath", str]) -> bool:
        """Check whether other lies at or below this directory.

        Both sides are made absolute and lexically normalized before the
        comparison, symlinks are not resolved here.
        """
        other_path = FilePath.of(other)
        if self.empty() or other_path.empty():
            return False

        root = os.path.normpath(self.make_absolute().path)
        candidate = os.path.normpath(other_path.make_absolute().path)
        if candidate == root:
            return True
        prefix = root if root.endswith(os.sep) else root + os.sep
        return candidate.startswith(prefix)
