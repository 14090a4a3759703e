"""rcc CLI — compile one C source file to assembly.

  rcc main.c                      — writes main.s next to the source
  rcc main.c -o out.s --target aarch64 --platform macos
  rcc main.c --link               — also runs cc to produce ./main
  rcc main.c -p                   — print tokens, AST (JSON) and assembly
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import Optional, Sequence

from rcc import __version__
from rcc.ast_nodes import ast_to_dict
from rcc.codegen import TARGETS
from rcc.config import ERROR_FORMATS, load_config
from rcc.driver import compile_file
from rcc.errors import CompileError, ConfigError, Diagnostic, ToolchainError
from rcc.lexer import tokenize
from rcc.targets import PLATFORMS
from rcc.toolchain import assemble_and_link


def c_file(value: str) -> str:
    if os.path.splitext(value)[1] != ".c":
        raise argparse.ArgumentTypeError("input file must have a .c extension")
    return value


def _report(diagnostics: list[Diagnostic], fmt: str) -> None:
    if not diagnostics:
        return
    if fmt == "json":
        print(json.dumps([d.to_dict() for d in diagnostics], indent=2), file=sys.stderr)
    else:
        for d in diagnostics:
            print(d, file=sys.stderr)


def _print_output(result) -> None:
    for tok in tokenize(result.source, result.program.filename):
        print(f"{tok.location}: {tok.describe()}")
    print()
    print(f"Program: {json.dumps(ast_to_dict(result.program), indent=2)}")
    print()
    print(result.assembly, end="")


def cmd_compile(args: argparse.Namespace) -> int:
    """Compile a C source file to assembly (and optionally an executable)."""
    source_path = args.file
    if not os.path.exists(source_path):
        print(f"rcc: error: file not found: {source_path}", file=sys.stderr)
        return 1

    try:
        config = load_config(args.config, start_dir=os.path.dirname(os.path.abspath(source_path)))
    except ConfigError as e:
        print(f"rcc: error: {e}", file=sys.stderr)
        return 1
    config = config.merged(
        target=args.target,
        platform=args.platform,
        werror=args.werror,
        error_format=args.error_format,
    )

    try:
        result = compile_file(source_path, args.output, config)
    except CompileError as e:
        _report(e.errors, config.error_format)
        return 1
    except OSError as e:
        print(f"rcc: error: {source_path}: {e.strerror}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"rcc: error: {e}", file=sys.stderr)
        return 1

    _report(result.warnings, config.error_format)

    if args.print_output:
        _print_output(result)

    if args.link:
        try:
            assemble_and_link(result.output_path, os.path.splitext(source_path)[0], cc=config.cc)
        except ToolchainError as e:
            print(f"rcc: error: {e}", file=sys.stderr)
            return 1

    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rcc",
        description="Compile a tiny subset of C to assembly",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("file", metavar="FILE.c", type=c_file, help="C source file")
    parser.add_argument("-o", "--output", help="Output assembly path (default: FILE.s)")
    parser.add_argument("--target", choices=TARGETS, default=None,
                        help="Code generator backend (default: host architecture)")
    parser.add_argument("--platform", choices=PLATFORMS, default=None,
                        help="Object format conventions (default: host platform)")
    parser.add_argument("--werror", action="store_true", default=None, help="Treat warnings as errors")
    parser.add_argument("--link", action="store_true", help="Assemble and link with cc into an executable")
    parser.add_argument("-p", "--print-output", action="store_true", dest="print_output",
                        help="Print the output of each stage of the compiler")
    parser.add_argument("--error-format", choices=ERROR_FORMATS, dest="error_format", default=None,
                        help="Diagnostic format (default: text)")
    parser.add_argument("--config", default=None, help="Path to a .rccrc.yml/.json file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    parser.set_defaults(func=cmd_compile)
    return parser


def run(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s: %(message)s",
        stream=sys.stderr,
    )
    return args.func(args)


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
