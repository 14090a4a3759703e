"""Backend base classes.

``AssemblyGenerator`` walks the AST and leaves the instruction spelling to
per-architecture subclasses. Walking is linear: the generator only branches on
node kind, never on data.
"""

from __future__ import annotations

import logging
from typing import Optional

from rcc.ast_nodes import (
    CompoundStatement, Expression, Function, IntLiteral, Program, ReturnStmt,
)
from rcc.errors import UnsupportedConstruct

logger = logging.getLogger(__name__)

PLATFORMS = ("linux", "macos")


class Backend:
    """Anything that turns a Program into assembly text."""

    name = ""

    def __init__(self, platform: str = "linux"):
        if platform not in PLATFORMS:
            raise ValueError(f"unknown platform '{platform}' (expected one of {', '.join(PLATFORMS)})")
        self.platform = platform

    def generate(self, program: Program) -> str:
        raise NotImplementedError()


class AssemblyGenerator(Backend):
    """Line-oriented emitter shared by the native text backends."""

    comment = "#"

    def __init__(self, platform: str = "linux"):
        super().__init__(platform)
        self.lines: list[str] = []

    def emit(self, line: str = "") -> None:
        self.lines.append(line)

    def instr(self, text: str) -> None:
        self.emit(f"    {text}")

    def directive(self, text: str) -> None:
        self.emit(f"    .{text}")

    def symbol(self, name: str) -> str:
        """Assembler-level name for a C function."""
        return f"_{name}" if self.platform == "macos" else name

    def generate(self, program: Program) -> str:
        self.lines = []
        self.emit(f"{self.comment} {program.filename}")
        self.directive("text")
        for function in program.functions:
            if not isinstance(function, Function):
                raise UnsupportedConstruct(function)
            self.gen_function(function)
        self.emit_footer()
        return "\n".join(self.lines) + "\n"

    def gen_function(self, function: Function) -> None:
        sym = self.symbol(function.name)
        logger.debug("%s: emitting function '%s' as '%s'", self.name, function.name, sym)
        self.emit()
        self.emit_function_header(sym)
        self.emit(f"{sym}:")
        self.emit_prologue()
        body = function.body
        if not isinstance(body, CompoundStatement):
            raise UnsupportedConstruct(body)
        self.gen_compound(body)
        if not body.statements or not isinstance(body.statements[-1], ReturnStmt):
            self.gen_return(None)

    def gen_compound(self, block: CompoundStatement) -> None:
        for stmt in block.statements:
            self.gen_statement(stmt)

    def gen_statement(self, stmt: object) -> None:
        if isinstance(stmt, ReturnStmt):
            self.gen_return(stmt.value)
        else:
            raise UnsupportedConstruct(stmt)

    def gen_return(self, value: Optional[Expression]) -> None:
        if value is None:
            self.emit_load_zero()
        elif isinstance(value, IntLiteral):
            self.emit_load_int(value.value)
        else:
            raise UnsupportedConstruct(value)
        self.emit_epilogue()

    # -------------------------------------------------------------------
    # Per-architecture hooks
    # -------------------------------------------------------------------

    def emit_function_header(self, sym: str) -> None:
        raise NotImplementedError()

    def emit_prologue(self) -> None:
        raise NotImplementedError()

    def emit_epilogue(self) -> None:
        raise NotImplementedError()

    def emit_load_int(self, value: int) -> None:
        raise NotImplementedError()

    def emit_load_zero(self) -> None:
        self.emit_load_int(0)

    def emit_footer(self) -> None:
        if self.platform == "linux":
            self.emit()
            self.emit('    .section .note.GNU-stack,"",@progbits')
