"""rcc AST node definitions.

A program is a strict tree: Program -> Function -> CompoundStatement ->
Statement -> Expression. Statement and Expression are closed unions; adding a
construct means adding a variant here and a branch in every stage.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, is_dataclass
from enum import Enum
from typing import Any, Optional, Union

from rcc.errors import SourceLocation


class TypeName(Enum):
    INT = "int"


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------

@dataclass
class IntLiteral:
    value: int = 0
    location: Optional[SourceLocation] = None


Expression = Union[IntLiteral]


# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------

@dataclass
class ReturnStmt:
    value: Optional[Expression] = None
    location: Optional[SourceLocation] = None


Statement = Union[ReturnStmt]


@dataclass
class CompoundStatement:
    statements: list[Statement] = field(default_factory=list)
    location: Optional[SourceLocation] = None


# ---------------------------------------------------------------------------
# Top level
# ---------------------------------------------------------------------------

@dataclass
class Function:
    name: str = ""
    return_type: TypeName = TypeName.INT
    body: CompoundStatement = field(default_factory=CompoundStatement)
    location: Optional[SourceLocation] = None


@dataclass
class Program:
    functions: list[Function] = field(default_factory=list)
    filename: str = "<stdin>"


def ast_to_dict(node: Any) -> Any:
    """Serialize an AST (or any part of one) to JSON-compatible values."""
    if node is None or isinstance(node, (int, str, bool)):
        return node
    if isinstance(node, Enum):
        return node.value
    if isinstance(node, SourceLocation):
        return str(node)
    if isinstance(node, list):
        return [ast_to_dict(n) for n in node]
    if is_dataclass(node):
        d: dict[str, Any] = {"node": type(node).__name__}
        for f in fields(node):
            d[f.name] = ast_to_dict(getattr(node, f.name))
        return d
    raise TypeError(f"cannot serialize {type(node).__name__}")
