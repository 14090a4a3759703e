"""Parser tests: AST shape for valid programs, first-error ParseErrors."""

import json

import pytest

from rcc.ast_nodes import (
    CompoundStatement, Function, IntLiteral, Program, ReturnStmt, TypeName, ast_to_dict,
)
from rcc.errors import LexError, ParseError
from rcc.lexer import TokenType, tokenize
from rcc.parser import parse, parse_source


class TestValidPrograms:

    def test_return_literal(self):
        program = parse_source("int main(){return 42;}")
        assert isinstance(program, Program)
        assert len(program.functions) == 1
        fn = program.functions[0]
        assert isinstance(fn, Function)
        assert fn.name == "main"
        assert fn.return_type == TypeName.INT
        assert isinstance(fn.body, CompoundStatement)
        assert len(fn.body.statements) == 1
        stmt = fn.body.statements[0]
        assert isinstance(stmt, ReturnStmt)
        assert isinstance(stmt.value, IntLiteral)
        assert stmt.value.value == 42

    def test_return_without_expression(self):
        program = parse_source("int f(){ return; }")
        stmt = program.functions[0].body.statements[0]
        assert isinstance(stmt, ReturnStmt)
        assert stmt.value is None

    def test_empty_body(self):
        program = parse_source("int f(){}")
        assert program.functions[0].name == "f"
        assert program.functions[0].body.statements == []

    def test_statements_after_return_are_kept(self):
        program = parse_source("int f() { return 1; return; return 2; }")
        stmts = program.functions[0].body.statements
        assert len(stmts) == 3
        assert stmts[0].value.value == 1
        assert stmts[1].value is None
        assert stmts[2].value.value == 2

    def test_function_name_matches_source(self):
        for name in ("main", "_start2", "x"):
            program = parse_source(f"int {name}() {{ return 0; }}")
            assert program.functions[0].name == name

    def test_parse_accepts_materialized_tokens(self):
        tokens = list(tokenize("int main(){return 3;}"))
        program = parse(tokens)
        assert program.functions[0].body.statements[0].value.value == 3

    def test_token_stream_without_eof(self):
        tokens = [t for t in tokenize("int main(){return 3;}") if t.type != TokenType.EOF]
        program = parse(tokens)
        assert program.functions[0].name == "main"

    def test_empty_token_stream(self):
        with pytest.raises(ParseError) as exc:
            parse([], filename="e.c")
        assert exc.value.found == "end of file"
        assert str(exc.value.position) == "e.c:1:1"

    def test_locations_recorded(self):
        program = parse_source("int main() {\n  return 5;\n}", filename="m.c")
        fn = program.functions[0]
        assert str(fn.location) == "m.c:1:1"
        assert str(fn.body.statements[0].location) == "m.c:2:3"
        assert str(fn.body.statements[0].value.location) == "m.c:2:10"
        assert program.filename == "m.c"


class TestParseErrors:
    """First mismatching token wins; the error names it and its position."""

    def _error(self, source):
        with pytest.raises(ParseError) as exc:
            parse_source(source)
        return exc.value

    def test_return_missing_semicolon(self):
        err = self._error("int f() { return }")
        assert err.expected == "expression or ';'"
        assert err.found == "'}'"
        assert (err.position.line, err.position.column) == (1, 18)

    def test_literal_missing_semicolon(self):
        err = self._error("int f() { return 1 }")
        assert err.expected == "';'"
        assert err.found == "'}'"
        assert (err.position.line, err.position.column) == (1, 20)

    def test_missing_function_name(self):
        err = self._error("int (){}")
        assert err.expected == "identifier"
        assert err.found == "'('"

    def test_wrong_return_type(self):
        err = self._error("void f(){}")
        assert err.expected == "'int'"
        assert err.found == "identifier 'void'"

    def test_parameters_rejected(self):
        err = self._error("int f(int){}")
        assert err.expected == "')'"
        assert err.found == "keyword 'int'"

    def test_second_function_rejected(self):
        err = self._error("int f(){} int g(){}")
        assert err.expected == "end of file"
        assert err.found == "keyword 'int'"

    def test_unclosed_body(self):
        err = self._error("int f(){ return 1;")
        assert err.expected == "statement or '}'"
        assert err.found == "end of file"

    def test_identifier_after_return(self):
        err = self._error("int f(){ return x; }")
        assert err.expected == "expression or ';'"
        assert err.found == "identifier 'x'"

    def test_expression_statement_rejected(self):
        err = self._error("int f(){ 42; }")
        assert err.expected == "statement or '}'"
        assert err.found == "integer literal '42'"

    def test_empty_source(self):
        err = self._error("")
        assert err.expected == "'int'"
        assert err.found == "end of file"

    def test_error_is_structured(self):
        err = self._error("int f() { return 1 }")
        d = err.errors[0].to_dict()
        assert d["kind"] == "parse_error"
        assert d["details"] == {"expected": "';'", "found": "'}'"}
        assert d["location"]["column"] == 20
        assert json.loads(err.to_json())[0]["kind"] == "parse_error"

    def test_lex_error_surfaces_through_parser(self):
        with pytest.raises(LexError):
            parse_source("int f(){ return @; }")


class TestAstSerialization:

    def test_ast_to_dict(self):
        program = parse_source("int main(){return 42;}", filename="t.c")
        d = ast_to_dict(program)
        assert d["node"] == "Program"
        fn = d["functions"][0]
        assert fn["name"] == "main"
        assert fn["return_type"] == "int"
        ret = fn["body"]["statements"][0]
        assert ret["node"] == "ReturnStmt"
        assert ret["value"] == {"node": "IntLiteral", "value": 42, "location": "t.c:1:19"}
        json.dumps(d)
