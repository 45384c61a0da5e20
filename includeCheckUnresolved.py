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
"""Report #include directives that cannot be resolved with the configured header search directories.

PURPOSE:
    Finds include directives that would leave an indexer or compiler frontend
    with an incomplete view of the code, before a full parse is attempted.

WHAT IT DOES:
    - Lexically scans source files for #include lines (no macro expansion)
    - Resolves each include: absolute path, then relative to the including file,
      then each header search directory
    - Follows resolved includes transitively as long as they stay below an indexed path
    - Reports every include that resolves to nothing, once per included path

METHOD:
    Worklist traversal over the transitive include closure. A shared visited set
    guarantees every file is scanned at most once, even with cyclic includes.

OUTPUT:
    Unresolved includes grouped by including file, optionally exported to JSON.
    Exit code 3 when unresolved includes were found, 0 when everything resolved.

EXAMPLES:
    # Scan a source tree with two include directories
    ./includeCheckUnresolved.py src/ -I include -I third_party/include

    # Use the sources and -I flags of a compilation database
    ./includeCheckUnresolved.py -p build/compile_commands.json

    # Only follow includes into the project itself, export results
    ./includeCheckUnresolved.py -p build/compile_commands.json --indexed-path . --json unresolved.json

    # Compiler style file:line output for editors, reading build/compile_commands.json
    ./includeCheckUnresolved.py -p build --list
"""
import os
import sys
import argparse
import logging
from typing import List, Optional

from includelib.cli_utils import add_common_arguments, apply_color_setting, configure_logging, gather_analysis_inputs, make_progress_callback
from includelib.color_utils import Colors, print_success
from includelib.constants import (
    EXIT_KEYBOARD_INTERRUPT,
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_UNRESOLVED_FOUND,
    MAX_UNRESOLVED_DISPLAY,
    IncludeCheckError,
)
from includelib.include_processing import get_unresolved_include_directives
from includelib.package_verification import require_package
from includelib.report_utils import export_unresolved_to_json, format_unresolved_directive, print_unresolved_report

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Report #include directives that cannot be resolved.",
        epilog="""
Includes are resolved in this order:
  1. absolute path
  2. relative to the directory of the including file
  3. each header search directory (-I / compile_commands.json)

Use includeCheckSearchDirs.py to infer search directories that would resolve them.
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    add_common_arguments(parser)
    parser.add_argument(
        "--indexed-path",
        action="append",
        default=[],
        metavar="DIR",
        help="Only follow includes into files below this directory (can be used multiple times, default: project root of the sources)",
    )
    parser.add_argument(
        "--max-display",
        type=int,
        default=MAX_UNRESOLVED_DISPLAY,
        help=f"Maximum unresolved includes to print (default: {MAX_UNRESOLVED_DISPLAY})",
    )
    parser.add_argument("--list", action="store_true", help="Print one file:line diagnostic per unresolved include instead of grouping by file")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point.

    Returns:
        Exit code (0 if all includes resolved, 3 if unresolved includes were found)
    """
    args = create_parser().parse_args(argv)
    require_package("colorama", "colored output")
    configure_logging(args.verbose)
    apply_color_setting(args)

    inputs = gather_analysis_inputs(args)
    indexed_paths = [os.path.abspath(p) for p in args.indexed_path] or [inputs.project_root]
    logger.debug("Indexed paths: %s", ", ".join(indexed_paths))

    unresolved = get_unresolved_include_directives(
        inputs.source_files,
        indexed_paths,
        inputs.include_dirs,
        args.quantiles,
        make_progress_callback(not args.no_progress),
    )

    if args.json and not export_unresolved_to_json(args.json, unresolved):
        return EXIT_RUNTIME_ERROR

    if not unresolved:
        print_success("All include directives could be resolved")
        return EXIT_SUCCESS

    print(f"\n{Colors.BRIGHT}Unresolved include directives ({len(unresolved)}):{Colors.RESET}")
    if args.list:
        for directive in unresolved[: args.max_display]:
            print(format_unresolved_directive(directive, inputs.project_root))
    else:
        print_unresolved_report(unresolved, inputs.project_root, max_display=args.max_display)
    return EXIT_UNRESOLVED_FOUND


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
