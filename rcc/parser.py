"""rcc Parser — LL(1) recursive-descent parser.

Grammar:

    Program      := Function EOF
    Function     := "int" Identifier "(" ")" CompoundStmt
    CompoundStmt := "{" Statement* "}"
    Statement    := "return" Expression? ";"
    Expression   := IntegerLiteral

Tokens are pulled lazily with a single token of lookahead. The first
mismatch raises ParseError; no partial tree is ever returned.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, Optional

from rcc.ast_nodes import (
    CompoundStatement, Expression, Function, IntLiteral, Program,
    ReturnStmt, Statement, TypeName,
)
from rcc.errors import ParseError, SourceLocation
from rcc.lexer import Token, TokenType, tokenize

logger = logging.getLogger(__name__)


class Parser:
    """Recursive-descent parser for the C subset."""

    def __init__(self, tokens: Iterable[Token], filename: str = "<stdin>"):
        self._tokens: Iterator[Token] = iter(tokens)
        self.filename = filename
        self._tok: Token = self._pull(None)

    def _current(self) -> Token:
        return self._tok

    def _peek(self) -> TokenType:
        return self._current().type

    def _loc(self) -> SourceLocation:
        return self._current().location

    def _pull(self, prev: Optional[Token]) -> Token:
        try:
            return next(self._tokens)
        except StopIteration:
            # Token sources must end with EOF; synthesize one if they do not.
            loc = prev.location if prev is not None else SourceLocation(1, 1, self.filename)
            return Token(TokenType.EOF, "", loc)

    def _advance(self) -> Token:
        tok = self._tok
        if tok.type != TokenType.EOF:
            self._tok = self._pull(tok)
        return tok

    def _error(self, expected: str) -> ParseError:
        tok = self._current()
        return ParseError(expected, tok.describe(), tok.location)

    def _expect(self, tt: TokenType, expected: str) -> Token:
        tok = self._current()
        if tok.type != tt:
            raise self._error(expected)
        self._advance()
        return tok

    # -------------------------------------------------------------------
    # Top-level
    # -------------------------------------------------------------------

    def parse(self) -> Program:
        function = self._parse_function()
        self._expect(TokenType.EOF, "end of file")
        logger.debug("parsed function '%s' with %d statement(s)",
                     function.name, len(function.body.statements))
        return Program(functions=[function], filename=self.filename)

    def _parse_function(self) -> Function:
        loc = self._loc()
        self._expect(TokenType.INT, "'int'")
        name = self._expect(TokenType.IDENT, "identifier").value
        self._expect(TokenType.LPAREN, "'('")
        self._expect(TokenType.RPAREN, "')'")
        body = self._parse_compound_statement()
        return Function(name=name, return_type=TypeName.INT, body=body, location=loc)

    # -------------------------------------------------------------------
    # Statements
    # -------------------------------------------------------------------

    def _parse_compound_statement(self) -> CompoundStatement:
        loc = self._loc()
        self._expect(TokenType.LBRACE, "'{'")
        stmts: list[Statement] = []
        while self._peek() != TokenType.RBRACE:
            stmts.append(self._parse_statement())
        self._expect(TokenType.RBRACE, "'}'")
        return CompoundStatement(statements=stmts, location=loc)

    def _parse_statement(self) -> Statement:
        if self._peek() == TokenType.RETURN:
            return self._parse_return()
        raise self._error("statement or '}'")

    def _parse_return(self) -> ReturnStmt:
        loc = self._loc()
        self._expect(TokenType.RETURN, "'return'")
        value: Optional[Expression] = None
        if self._peek() != TokenType.SEMICOLON:
            value = self._parse_expression()
        self._expect(TokenType.SEMICOLON, "';'")
        return ReturnStmt(value=value, location=loc)

    # -------------------------------------------------------------------
    # Expressions
    # -------------------------------------------------------------------

    def _parse_expression(self) -> Expression:
        tok = self._current()
        if tok.type == TokenType.INT_LIT:
            self._advance()
            return IntLiteral(value=tok.int_value, location=tok.location)
        raise self._error("expression or ';'")


def parse(tokens: Iterable[Token], filename: str = "<stdin>") -> Program:
    """Parse a token stream into a Program."""
    return Parser(tokens, filename).parse()


def parse_source(source: str, filename: str = "<stdin>") -> Program:
    """Convenience: tokenize and parse C source text."""
    return parse(tokenize(source, filename), filename)
