"""Lexer tests: token kinds, positions, laziness and lexical errors."""

import dataclasses

import pytest

from rcc.errors import LexError
from rcc.lexer import Lexer, Token, TokenType, tokenize


def types(source):
    return [t.type for t in tokenize(source)]


class TestTokens:
    """Token kinds for the whole subset."""

    def test_minimal_program(self):
        assert types("int main(){return 42;}") == [
            TokenType.INT, TokenType.IDENT, TokenType.LPAREN, TokenType.RPAREN,
            TokenType.LBRACE, TokenType.RETURN, TokenType.INT_LIT, TokenType.SEMICOLON,
            TokenType.RBRACE, TokenType.EOF,
        ]

    def test_keyword_wins_only_on_exact_match(self):
        toks = list(tokenize("integer returnx int return _int"))
        assert [t.type for t in toks] == [
            TokenType.IDENT, TokenType.IDENT, TokenType.INT, TokenType.RETURN,
            TokenType.IDENT, TokenType.EOF,
        ]
        assert toks[0].value == "integer"
        assert toks[4].value == "_int"

    def test_identifier_longest_match(self):
        toks = list(tokenize("main_2x("))
        assert toks[0].type == TokenType.IDENT
        assert toks[0].value == "main_2x"
        assert toks[1].type == TokenType.LPAREN

    def test_integer_value(self):
        tok = next(tokenize("007"))
        assert tok.type == TokenType.INT_LIT
        assert tok.int_value == 7

    def test_int_value_on_other_token(self):
        tok = next(tokenize("main"))
        with pytest.raises(TypeError):
            tok.int_value

    def test_largest_int64_literal(self):
        tok = next(tokenize("9223372036854775807"))
        assert tok.int_value == 2**63 - 1

    def test_single_eof_at_end(self):
        toks = list(tokenize("int"))
        assert [t.type for t in toks].count(TokenType.EOF) == 1
        assert toks[-1].type == TokenType.EOF

    def test_empty_source(self):
        assert types("") == [TokenType.EOF]

    def test_tokens_are_immutable(self):
        tok = next(tokenize("int"))
        with pytest.raises(dataclasses.FrozenInstanceError):
            tok.value = "return"


class TestWhitespaceAndComments:

    def test_whitespace_is_skipped(self):
        assert types(" \t\r\n int\n\n") == [TokenType.INT, TokenType.EOF]

    def test_line_comment(self):
        assert types("int // return 1;\nmain") == [TokenType.INT, TokenType.IDENT, TokenType.EOF]

    def test_block_comment(self):
        assert types("int /* return\n 1; */ main") == [TokenType.INT, TokenType.IDENT, TokenType.EOF]

    def test_unterminated_block_comment(self):
        with pytest.raises(LexError) as exc:
            list(tokenize("int /* never closed"))
        assert exc.value.position.line == 1
        assert exc.value.position.column == 5
        assert "unterminated" in exc.value.reason


class TestLocations:

    def test_line_and_column(self):
        toks = list(tokenize("int main() {\n  return 7;\n}", filename="a.c"))
        ret = toks[5]
        assert ret.type == TokenType.RETURN
        assert (ret.location.line, ret.location.column) == (2, 3)
        lit = toks[6]
        assert (lit.location.line, lit.location.column) == (2, 10)
        assert str(lit.location) == "a.c:2:10"

    def test_eof_location_is_end_of_input(self):
        toks = list(tokenize("int\n"))
        assert (toks[-1].location.line, toks[-1].location.column) == (2, 1)


class TestLexErrors:
    """Unrecognized characters and malformed literals."""

    def test_stray_character(self):
        with pytest.raises(LexError) as exc:
            list(tokenize("int main() { return @; }", filename="bad.c"))
        err = exc.value
        assert (err.position.line, err.position.column) == (1, 21)
        assert "'@'" in err.reason
        assert err.errors[0].to_dict()["kind"] == "lex_error"
        assert str(err) == "bad.c:1:21: error: unexpected character '@'"

    def test_non_ascii_identifier_rejected(self):
        with pytest.raises(LexError):
            list(tokenize("int mäin(){}"))

    def test_literal_overflow(self):
        with pytest.raises(LexError) as exc:
            list(tokenize("return 9223372036854775808;"))
        assert exc.value.position.column == 8
        assert "out of range" in exc.value.reason

    def test_invalid_suffix(self):
        with pytest.raises(LexError) as exc:
            list(tokenize("return 12abc;"))
        assert exc.value.position.column == 10


class TestLaziness:
    """The token sequence is pulled on demand and restartable."""

    def test_tokens_before_error_are_produced(self):
        it = tokenize("int main @")
        assert next(it).type == TokenType.INT
        assert next(it).type == TokenType.IDENT
        with pytest.raises(LexError):
            next(it)

    def test_sequence_ends_after_eof(self):
        it = tokenize("")
        assert next(it).type == TokenType.EOF
        with pytest.raises(StopIteration):
            next(it)

    def test_restart_from_scratch(self):
        lexer = Lexer("int main(){return 1;}")
        first = list(lexer)
        second = list(lexer)
        assert first == second
        assert all(isinstance(t, Token) for t in first)
