"""LLVM backend.

AST → LLVM IR via llvmlite, then the host LLVM target machine prints native
assembly. Register allocation, calling convention and directives all come
from LLVM's backend for the host architecture and the requested platform.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from llvmlite import binding as llvm_binding
from llvmlite import ir as llvm_ir

from rcc.ast_nodes import (
    CompoundStatement, Expression, Function, IntLiteral, Program, ReturnStmt, TypeName,
)
from rcc.errors import UnsupportedConstruct
from rcc.targets.base import Backend

logger = logging.getLogger(__name__)


def _get_llvm_type(type_name: TypeName) -> Any:
    """Map a C type to its llvmlite IR type."""
    mapping = {
        TypeName.INT: llvm_ir.IntType(32),
    }
    return mapping[type_name]


def target_triple(platform: str) -> str:
    """Host architecture combined with the requested object format."""
    arch = llvm_binding.get_default_triple().split("-")[0]
    if platform == "macos":
        return f"{arch}-apple-darwin"
    return f"{arch}-unknown-linux-gnu"


def _truncate(value: int, width: int) -> int:
    """Wrap a Python int to a signed integer of ``width`` bits."""
    value &= (1 << width) - 1
    if value >= 1 << (width - 1):
        value -= 1 << width
    return value


class LLVMGenerator(Backend):
    """Emits LLVM IR for a Program and lowers it to native assembly."""

    name = "llvm"

    def __init__(self, platform: str = "linux"):
        super().__init__(platform)
        self.module: Optional[Any] = None
        self._builder: Optional[Any] = None
        self._func: Optional[Any] = None

    def emit_module(self, program: Program) -> str:
        """Build the LLVM module. Returns LLVM IR text."""
        self.module = llvm_ir.Module(name=program.filename)
        self.module.triple = target_triple(self.platform)

        for function in program.functions:
            if not isinstance(function, Function):
                raise UnsupportedConstruct(function)
            self._emit_function(function)

        return str(self.module)

    def generate(self, program: Program) -> str:
        return compile_to_assembly(self.emit_module(program))

    def _emit_function(self, function: Function) -> None:
        ret_type = _get_llvm_type(function.return_type)
        fn_type = llvm_ir.FunctionType(ret_type, [])
        self._func = llvm_ir.Function(self.module, fn_type, name=function.name)

        block = self._func.append_basic_block(name="entry")
        self._builder = llvm_ir.IRBuilder(block)

        body = function.body
        if not isinstance(body, CompoundStatement):
            raise UnsupportedConstruct(body)

        for stmt in body.statements:
            if self._builder.block.is_terminated:
                # Code after a return still gets emitted, into a block nothing jumps to.
                dead = self._func.append_basic_block(name="dead")
                self._builder.position_at_end(dead)
            self._emit_statement(stmt, ret_type)

        # Add implicit return if needed
        if not self._builder.block.is_terminated:
            self._builder.ret(llvm_ir.Constant(ret_type, 0))

    def _emit_statement(self, stmt: object, ret_type: Any) -> None:
        if isinstance(stmt, ReturnStmt):
            self._builder.ret(self._emit_expression(stmt.value, ret_type))
        else:
            raise UnsupportedConstruct(stmt)

    def _emit_expression(self, expr: Optional[Expression], ret_type: Any) -> Any:
        if expr is None:
            return llvm_ir.Constant(ret_type, 0)
        if isinstance(expr, IntLiteral):
            return llvm_ir.Constant(ret_type, _truncate(expr.value, ret_type.width))
        raise UnsupportedConstruct(expr)


# ---------------------------------------------------------------------------
# Lowering to native assembly
# ---------------------------------------------------------------------------

def _initialize_llvm() -> None:
    """Initialize LLVM target machinery."""
    llvm_binding.initialize_native_target()
    llvm_binding.initialize_native_asmprinter()


def compile_to_assembly(llvm_ir_str: str) -> str:
    """Compile LLVM IR string to native assembly."""
    _initialize_llvm()
    mod = llvm_binding.parse_assembly(llvm_ir_str)
    mod.verify()

    if mod.triple:
        target = llvm_binding.Target.from_triple(mod.triple)
    else:
        target = llvm_binding.Target.from_default_triple()
    target_machine = target.create_target_machine(opt=0)
    # Symbol mangling (the Mach-O "_" prefix) follows the data layout.
    mod.data_layout = str(target_machine.target_data)
    logger.debug("lowering module for %s", target.triple)
    return target_machine.emit_assembly(mod)
