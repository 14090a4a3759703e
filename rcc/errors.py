"""Structured diagnostics for the rcc compiler.

Every failure carries a kind, a message and, where one exists, the source
location it refers to. Diagnostics render either as the familiar
``file:line:col: error: message`` line or as JSON.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class ErrorKind(Enum):
    LEX_ERROR = "lex_error"
    PARSE_ERROR = "parse_error"
    SEMANTIC_ERROR = "semantic_error"
    UNSUPPORTED_CONSTRUCT = "unsupported_construct"
    WARNING = "warning"


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class SourceLocation:
    line: int
    column: int
    file: str = "<stdin>"

    def __str__(self) -> str:
        return f"{self.file}:{self.line}:{self.column}"


@dataclass
class Diagnostic:
    kind: ErrorKind
    message: str
    location: Optional[SourceLocation] = None
    severity: Severity = Severity.ERROR
    code: str = ""
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "kind": self.kind.value,
            "severity": self.severity.value,
            "message": self.message,
        }
        if self.code:
            d["code"] = self.code
        if self.location:
            d["location"] = {
                "file": self.location.file,
                "line": self.location.line,
                "column": self.location.column,
            }
        if self.details:
            d["details"] = self.details
        return d

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def __str__(self) -> str:
        prefix = f"{self.location}: " if self.location else ""
        suffix = f" [-W{self.code}]" if self.code and self.severity == Severity.WARNING else ""
        return f"{prefix}{self.severity.value}: {self.message}{suffix}"


def warning(code: str, message: str, location: Optional[SourceLocation] = None) -> Diagnostic:
    return Diagnostic(
        kind=ErrorKind.WARNING,
        message=message,
        location=location,
        severity=Severity.WARNING,
        code=code,
    )


class CompileError(Exception):
    """Exception wrapping one or more error diagnostics."""

    def __init__(self, errors: list[Diagnostic] | Diagnostic):
        if isinstance(errors, Diagnostic):
            errors = [errors]
        self.errors = errors
        super().__init__(self._format())

    def _format(self) -> str:
        return "\n".join(str(e) for e in self.errors)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps([e.to_dict() for e in self.errors], indent=indent)


class LexError(CompileError):
    """Unrecognized character or malformed literal."""

    def __init__(self, reason: str, position: SourceLocation):
        self.reason = reason
        self.position = position
        super().__init__(Diagnostic(
            kind=ErrorKind.LEX_ERROR,
            message=reason,
            location=position,
        ))


class ParseError(CompileError):
    """Token sequence does not match the grammar."""

    def __init__(self, expected: str, found: str, position: SourceLocation):
        self.expected = expected
        self.found = found
        self.position = position
        super().__init__(Diagnostic(
            kind=ErrorKind.PARSE_ERROR,
            message=f"expected {expected}, found {found}",
            location=position,
            details={"expected": expected, "found": found},
        ))


class UnsupportedConstruct(CompileError):
    """An AST node the code generator has no lowering for."""

    def __init__(self, node: Any):
        self.node = node
        location = getattr(node, "location", None)
        super().__init__(Diagnostic(
            kind=ErrorKind.UNSUPPORTED_CONSTRUCT,
            message=f"unsupported construct: {type(node).__name__}",
            location=location,
            details={"node": type(node).__name__},
        ))


class ConfigError(Exception):
    """A configuration file exists but cannot be used."""


class ToolchainError(Exception):
    """The external assembler/linker failed or is missing."""
