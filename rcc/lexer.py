"""rcc Lexer — lazy tokenizer with line/column tracking.

Iterating a ``Lexer`` yields tokens left to right and finishes with a single
EOF token. Every new iteration starts over from the beginning of the source.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional

from rcc.errors import LexError, SourceLocation

logger = logging.getLogger(__name__)

INT64_MAX = 2**63 - 1


class TokenType(Enum):
    # Keywords
    INT = auto()
    RETURN = auto()

    # Literals
    INT_LIT = auto()

    # Identifier
    IDENT = auto()

    # Delimiters
    LBRACE = auto()
    RBRACE = auto()
    LPAREN = auto()
    RPAREN = auto()
    SEMICOLON = auto()

    # Special
    EOF = auto()


KEYWORDS: dict[str, TokenType] = {
    "int": TokenType.INT,
    "return": TokenType.RETURN,
}

PUNCTUATION: dict[str, TokenType] = {
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    ";": TokenType.SEMICOLON,
}

# How each token kind is named in diagnostics.
TOKEN_NAMES: dict[TokenType, str] = {
    TokenType.INT: "keyword",
    TokenType.RETURN: "keyword",
    TokenType.INT_LIT: "integer literal",
    TokenType.IDENT: "identifier",
    TokenType.LBRACE: "'{'",
    TokenType.RBRACE: "'}'",
    TokenType.LPAREN: "'('",
    TokenType.RPAREN: "')'",
    TokenType.SEMICOLON: "';'",
    TokenType.EOF: "end of file",
}


def _is_ident_start(ch: str) -> bool:
    return ch.isascii() and (ch.isalpha() or ch == "_")


def _is_ident_char(ch: str) -> bool:
    return ch.isascii() and (ch.isalnum() or ch == "_")


def _is_digit(ch: str) -> bool:
    return ch.isascii() and ch.isdigit()


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: str
    location: SourceLocation

    @property
    def int_value(self) -> int:
        if self.type != TokenType.INT_LIT:
            raise TypeError(f"{self.type.name} token has no integer value")
        return int(self.value)

    def describe(self) -> str:
        """Human readable form used in parse errors."""
        if self.type == TokenType.EOF:
            return "end of file"
        if self.type in PUNCTUATION.values():
            return TOKEN_NAMES[self.type]
        return f"{TOKEN_NAMES[self.type]} '{self.value}'"

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.location})"


class Lexer:
    """Tokenizer for the C subset."""

    def __init__(self, source: str, filename: str = "<stdin>"):
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.column = 1

    def __iter__(self) -> Iterator[Token]:
        self.pos = 0
        self.line = 1
        self.column = 1
        return self._tokens()

    def _loc(self) -> SourceLocation:
        return SourceLocation(self.line, self.column, self.filename)

    def _peek(self) -> Optional[str]:
        if self.pos < len(self.source):
            return self.source[self.pos]
        return None

    def _peek_ahead(self, offset: int = 1) -> Optional[str]:
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return None

    def _advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        if ch == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return ch

    def _skip_whitespace_and_comments(self) -> None:
        while self.pos < len(self.source):
            ch = self.source[self.pos]
            if ch.isspace():
                self._advance()
            elif ch == "/" and self._peek_ahead() == "/":
                while self.pos < len(self.source) and self.source[self.pos] != "\n":
                    self._advance()
            elif ch == "/" and self._peek_ahead() == "*":
                start = self._loc()
                self._advance()
                self._advance()
                while True:
                    if self.pos >= len(self.source):
                        raise LexError("unterminated comment", start)
                    if self.source[self.pos] == "*" and self._peek_ahead() == "/":
                        self._advance()
                        self._advance()
                        break
                    self._advance()
            else:
                break

    def _read_number(self) -> Token:
        loc = self._loc()
        value = ""
        while self.pos < len(self.source) and _is_digit(self.source[self.pos]):
            value += self._advance()
        nxt = self._peek()
        if nxt is not None and _is_ident_char(nxt):
            raise LexError(f"invalid suffix '{nxt}' on integer literal", self._loc())
        if int(value) > INT64_MAX:
            raise LexError(f"integer literal '{value}' out of range", loc)
        return Token(TokenType.INT_LIT, value, loc)

    def _read_identifier(self) -> Token:
        loc = self._loc()
        value = ""
        while self.pos < len(self.source) and _is_ident_char(self.source[self.pos]):
            value += self._advance()
        token_type = KEYWORDS.get(value, TokenType.IDENT)
        return Token(token_type, value, loc)

    def _tokens(self) -> Iterator[Token]:
        count = 0
        while True:
            self._skip_whitespace_and_comments()
            ch = self._peek()
            if ch is None:
                break

            if _is_digit(ch):
                yield self._read_number()
            elif _is_ident_start(ch):
                yield self._read_identifier()
            elif ch in PUNCTUATION:
                loc = self._loc()
                self._advance()
                yield Token(PUNCTUATION[ch], ch, loc)
            else:
                raise LexError(f"unexpected character {ch!r}", self._loc())
            count += 1

        logger.debug("%s: %d tokens", self.filename, count)
        yield Token(TokenType.EOF, "", self._loc())


def tokenize(source: str, filename: str = "<stdin>") -> Iterator[Token]:
    """Lazily tokenize C source text."""
    return iter(Lexer(source, filename))
