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
"""Shared constants for includeCheck tools.

This module provides centralized constants used across the includeCheck tools
and the include processing library so defaults and exit codes stay consistent.
"""

# =============================================================================
# Exit Codes
# =============================================================================

EXIT_SUCCESS = 0
EXIT_INVALID_ARGS = 1
EXIT_RUNTIME_ERROR = 2
EXIT_UNRESOLVED_FOUND = 3  # Analysis succeeded but unresolved includes were reported
EXIT_KEYBOARD_INTERRUPT = 130

# =============================================================================
# Include Processing Constants
# =============================================================================

# Number of batches the source file set is split into for progress reporting.
# The batch count never changes the result of a traversal.
DEFAULT_QUANTILE_COUNT = 20

# Include directive lexing
DIRECTIVE_HASH = "#"
DIRECTIVE_INCLUDE = "include"
ANGLE_DELIMITERS = ("<", ">")
QUOTE_DELIMITERS = ('"', '"')

# =============================================================================
# File Classification Constants
# =============================================================================

VALID_SOURCE_EXTENSIONS = (".cpp", ".c", ".cc", ".cxx", ".c++", ".m", ".mm")
VALID_HEADER_EXTENSIONS = (".h", ".hpp", ".hxx", ".hh", ".h++", ".inl", ".ipp")

# =============================================================================
# Compiler Flag Constants
# =============================================================================

COMPILE_COMMANDS_JSON = "compile_commands.json"  # Standard compilation database filename

# Flags that introduce a header search directory, either joined (-Ipath) or separate (-I path)
INCLUDE_DIR_FLAGS = ("-isystem", "-iquote", "-I")
DEFAULT_INCLUDE_FLAG = "-I"

# =============================================================================
# Display Limits
# =============================================================================

MAX_UNRESOLVED_DISPLAY = 200  # Maximum unresolved includes to print before truncating
PROGRESS_BAR_WIDTH = 40

# =============================================================================
# Exception Classes
# =============================================================================


class IncludeCheckError(Exception):
    """Base exception for all includeCheck errors.

    All includeCheck exceptions carry an exit_code attribute that indicates
    what exit code the program should use when this error is caught at the
    main entry point.
    """

    def __init__(self, message: str, exit_code: int = EXIT_RUNTIME_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


# Validation errors (EXIT_INVALID_ARGS)
class ValidationError(IncludeCheckError):
    """Raised when input validation fails (arguments, paths, etc)."""

    def __init__(self, message: str):
        super().__init__(message, EXIT_INVALID_ARGS)


class ArgumentError(ValidationError):
    """Raised when command-line arguments are invalid."""


# Input processing errors (EXIT_RUNTIME_ERROR)
class CompileDatabaseError(IncludeCheckError):
    """Raised when compile_commands.json is missing or cannot be parsed."""
