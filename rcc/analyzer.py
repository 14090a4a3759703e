"""Semantic checks run between parsing and code generation.

The grammar already guarantees a well-formed tree, so nothing here is fatal.
The analyzer only reports warnings; the driver decides whether warnings fail
the build.
"""

from __future__ import annotations

import logging

from rcc.ast_nodes import Function, IntLiteral, Program, ReturnStmt
from rcc.errors import Diagnostic, warning

logger = logging.getLogger(__name__)

INT32_MAX = 2**31 - 1


class Analyzer:
    """Collects warnings for a parsed program."""

    def __init__(self) -> None:
        self.warnings: list[Diagnostic] = []

    def analyze(self, program: Program) -> list[Diagnostic]:
        for function in program.functions:
            self._analyze_function(function)
        return self.warnings

    def _analyze_function(self, function: Function) -> None:
        returned = False
        reported_unreachable = False
        for stmt in function.body.statements:
            if returned and not reported_unreachable:
                # first dead statement only
                self.warnings.append(warning(
                    "unreachable-code",
                    f"code after return in function '{function.name}' will never be executed",
                    stmt.location,
                ))
                reported_unreachable = True
            if isinstance(stmt, ReturnStmt):
                self._check_return(stmt, function)
                returned = True

    def _check_return(self, stmt: ReturnStmt, function: Function) -> None:
        if stmt.value is None:
            self.warnings.append(warning(
                "return-type",
                f"non-void function '{function.name}' should return a value",
                stmt.location,
            ))
        elif isinstance(stmt.value, IntLiteral) and stmt.value.value > INT32_MAX:
            self.warnings.append(warning(
                "constant-conversion",
                f"implicit truncation of {stmt.value.value} to int",
                stmt.value.location,
            ))


def analyze(program: Program) -> list[Diagnostic]:
    """Run semantic checks; returns warnings in source order."""
    warnings = Analyzer().analyze(program)
    logger.debug("analysis produced %d warning(s)", len(warnings))
    return warnings
