"""Compilation driver: source text in, assembly text out.

Each call is independent; nothing is cached between compilations.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from typing import Optional

from rcc.analyzer import analyze
from rcc.ast_nodes import Program
from rcc.codegen import generate
from rcc.config import CompilerConfig
from rcc.errors import CompileError, Diagnostic, ErrorKind, LexError, Severity, SourceLocation
from rcc.parser import parse
from rcc.lexer import tokenize

logger = logging.getLogger(__name__)


@dataclass
class CompilationResult:
    program: Program
    assembly: str
    warnings: list[Diagnostic] = field(default_factory=list)
    output_path: Optional[str] = None
    source: str = ""


def compile_source(
    source: str,
    filename: str = "<stdin>",
    config: Optional[CompilerConfig] = None,
) -> CompilationResult:
    """Run lexer, parser, analyzer and code generator over ``source``.

    Raises CompileError (LexError, ParseError, UnsupportedConstruct) on the
    first failure. With ``config.werror`` set, warnings are raised as errors.
    """
    config = config or CompilerConfig()

    program = parse(tokenize(source, filename), filename)
    warnings = analyze(program)
    if warnings and config.werror:
        raise CompileError([
            replace(w, kind=ErrorKind.SEMANTIC_ERROR, severity=Severity.ERROR)
            for w in warnings
        ])

    assembly = generate(program, target=config.target, platform=config.platform)
    return CompilationResult(program=program, assembly=assembly, warnings=warnings, source=source)


def default_output_path(source_path: str) -> str:
    return os.path.splitext(source_path)[0] + ".s"


def read_source(source_path: str) -> str:
    """Read a C file as UTF-8; undecodable bytes are a LexError at their position."""
    with open(source_path, "rb") as f:
        data = f.read()
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        valid = data[:e.start].decode("utf-8")
        line = valid.count("\n") + 1
        column = len(valid) - valid.rfind("\n")
        raise LexError(
            f"invalid UTF-8 byte 0x{data[e.start]:02x} in source",
            SourceLocation(line, column, source_path),
        ) from e


def compile_file(
    source_path: str,
    output_path: Optional[str] = None,
    config: Optional[CompilerConfig] = None,
) -> CompilationResult:
    """Compile a C file and write the assembly next to it (or to output_path).

    The output file is only written once compilation has fully succeeded.
    """
    output_path = output_path or default_output_path(source_path)
    if os.path.realpath(output_path) == os.path.realpath(source_path):
        raise ValueError(f"output file '{output_path}' would overwrite the source file")

    source = read_source(source_path)
    result = compile_source(source, filename=source_path, config=config)

    with open(output_path, "w", encoding="utf-8") as f:
        f.write(result.assembly)
    logger.debug("wrote %s", output_path)

    result.output_path = output_path
    return result
