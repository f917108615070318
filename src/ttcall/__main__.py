"""CLI entry point: run `ttcall parse_path 'Vec<u8>'` or `python -m ttcall ...`."""

import sys
from pathlib import Path
from typing import List, Optional


def main(argv: Optional[List[str]] = None) -> int:
    import argparse
    import logging
    from .compiler.driver import ExpansionDriver
    from .shared.errors import ProtocolError, RecursionLimitError
    from .utils.config import DEFAULT_SOURCE_FILE, RECURSION_LIMIT_ENV, STEP_LIMIT_ENV
    from .utils.io_utils import read_source_file

    parser = argparse.ArgumentParser(prog="ttcall", description="Expand a callee on a token stream and print its outputs.")
    parser.add_argument("callee", help="Entry callee, e.g. parse_path or parse_type")
    parser.add_argument("source", nargs="?", help="Input tokens (omit to use --file)")
    parser.add_argument("--file", type=Path, help="Read input tokens from a file")
    parser.add_argument("--verbose", action="store_true", help="Log every rewrite step")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if args.file is not None:
        path = args.file.resolve()
        if not path.is_file():
            sys.stderr.write(f"ttcall: error: file not found: {path}\n")
            return 1
        try:
            source = read_source_file(path)
        except OSError as e:
            sys.stderr.write(f"ttcall: error: could not read file: {e}\n")
            return 1
        source_file = str(path)
    elif args.source is not None:
        source = args.source
        source_file = DEFAULT_SOURCE_FILE
    else:
        sys.stderr.write("ttcall: error: no input given\n")
        return 1

    driver = ExpansionDriver()
    try:
        result = driver.expand(args.callee, source, source_file, returns_to="tt_debug")
    except RecursionLimitError as e:
        sys.stderr.write(f"ttcall: error: {e}; set {RECURSION_LIMIT_ENV} or {STEP_LIMIT_ENV} to raise it\n")
        return 1
    except ProtocolError as e:
        sys.stderr.write(f"ttcall: internal error: {e}\n")
        return 1

    if not result.success:
        result.reporter.print_errors()
        return 1

    print(result.value)
    return 0


if __name__ == "__main__":
    sys.exit(main())
