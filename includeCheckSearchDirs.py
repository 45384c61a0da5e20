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
"""Infer header search directories that would resolve currently unresolved #include directives.

PURPOSE:
    Discovers the -I directories a project needs when no (or an incomplete)
    compilation database is available, so a subsequent parse sees every header.

WHAT IT DOES:
    - Indexes every file below the search roots once
    - Scans source files for #include lines and resolves them with the known directories
    - For an include that does not resolve, finds a directory below a search root
      under which the written relative path exists ("sub/b.h" -> /proj for /proj/sub/b.h)
    - Follows every found header transitively and repeats

OUTPUT:
    One compiler argument per inferred directory (-I, -isystem or -iquote),
    ready to be appended to a compiler command line. Optionally exported to JSON.

LIMITATIONS:
    When a relative path exists below more than one directory the first one in
    sorted order is used, ambiguities are not reported.

EXAMPLES:
    # Infer directories for a source tree, searching the whole repository
    ./includeCheckSearchDirs.py src/ --search-root .

    # Start from a compilation database and print -isystem flags
    ./includeCheckSearchDirs.py -p build/compile_commands.json --search-root /opt/sdk --flag=-isystem
"""
import os
import sys
import argparse
import logging
from typing import List, Optional

from includelib.cli_utils import add_common_arguments, apply_color_setting, configure_logging, gather_analysis_inputs, make_progress_callback
from includelib.color_utils import Colors, print_info
from includelib.constants import (
    DEFAULT_INCLUDE_FLAG,
    EXIT_KEYBOARD_INTERRUPT,
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    INCLUDE_DIR_FLAGS,
    IncludeCheckError,
)
from includelib.include_processing import get_header_search_directories
from includelib.package_verification import require_package
from includelib.report_utils import export_search_directories_to_json, format_search_directory_flags

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Infer header search directories for unresolved #include directives.",
        epilog="""
Already configured directories (-I / compile_commands.json) are used first.
Only directives that still do not resolve cause a search root to be probed.

Use includeCheckUnresolved.py afterwards to check what remains unresolved.
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    add_common_arguments(parser)
    parser.add_argument(
        "--search-root",
        action="append",
        default=[],
        metavar="DIR",
        help="Directory tree to probe for missing headers (can be used multiple times, default: project root of the sources)",
    )
    parser.add_argument(
        "--flag",
        choices=INCLUDE_DIR_FLAGS,
        default=DEFAULT_INCLUDE_FLAG,
        help=f"Compiler flag used to print the directories, written as --flag=-isystem since the values start with a dash (default: {DEFAULT_INCLUDE_FLAG})",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    args = create_parser().parse_args(argv)
    require_package("colorama", "colored output")
    configure_logging(args.verbose)
    apply_color_setting(args)

    inputs = gather_analysis_inputs(args)
    search_roots = [os.path.abspath(p) for p in args.search_root] or [inputs.project_root]
    logger.info("Probing %d search root(s): %s", len(search_roots), ", ".join(search_roots))

    directories = get_header_search_directories(
        inputs.source_files,
        search_roots,
        inputs.include_dirs,
        args.quantiles,
        make_progress_callback(not args.no_progress),
    )

    if args.json and not export_search_directories_to_json(args.json, directories, args.flag):
        return EXIT_RUNTIME_ERROR

    if not directories:
        print_info("No additional header search directories found")
        return EXIT_SUCCESS

    print(f"\n{Colors.BRIGHT}Inferred header search directories ({len(directories)}):{Colors.RESET}")
    for flag in format_search_directory_flags(directories, args.flag):
        print(f"  {Colors.GREEN}{flag}{Colors.RESET}")
    return EXIT_SUCCESS


def run() -> None:
    """Console script entry point, maps exceptions to exit codes."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        logger.warning("\nInterrupted by user")
        sys.exit(EXIT_KEYBOARD_INTERRUPT)
    except IncludeCheckError as e:
        logger.error(str(e))
        sys.exit(e.exit_code)
    except Exception as e:
        logger.error("Unexpected error: %s", e)
        if logging.getLogger().level == logging.DEBUG:
            import traceback

            traceback.print_exc()
        sys.exit(EXIT_RUNTIME_ERROR)


if __name__ == "__main__":
    run()
