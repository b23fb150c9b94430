"""Tests for the Roadrunner parser."""

from __future__ import annotations

import pytest

from roadrunner.ast_nodes import (
    BooleanLit,
    CallExpr,
    ExprStmt,
    FunctionLit,
    IdentifierExpr,
    IfExpr,
    InfixExpr,
    IntegerLit,
    LetStmt,
    PrefixExpr,
    ReturnStmt,
)
from roadrunner.formatter import Formatter
from roadrunner.lexer import Lexer
from roadrunner.parser import Parser, parse


def parse_ok(source: str):
    """Helper: lex and parse source, asserting there are no syntax errors."""
    tokens = Lexer(source, "test.rr").lex()
    program, diagnostics = parse(tokens)
    assert not diagnostics, [d.message for d in diagnostics]
    return program


def parse_errors(source: str):
    """Helper: parse source and return (program, diagnostic messages)."""
    tokens = Lexer(source, "test.rr").lex()
    parser = Parser(tokens)
    program = parser.parse()
    return program, [d.message for d in parser.diagnostics]


def parse_expr(source: str):
    """Helper: parse a single expression statement and return its expression."""
    program = parse_ok(source)
    assert len(program.statements) == 1
    stmt = program.statements[0]
    assert isinstance(stmt, ExprStmt)
    return stmt.expr


def canonical(source: str) -> str:
    return Formatter().format(parse_ok(source))


class TestParserStatements:
    def test_let_statements(self):
        program = parse_ok("let x = 5; let y = true; let foobar = y;")
        assert len(program.statements) == 3
        names = [s.name.name for s in program.statements]
        assert names == ["x", "y", "foobar"]
        x, y, foobar = (s.value for s in program.statements)
        assert isinstance(x, IntegerLit) and x.value == 5
        assert isinstance(y, BooleanLit) and y.value is True
        assert isinstance(foobar, IdentifierExpr) and foobar.name == "y"

    def test_return_statements(self):
        program = parse_ok("return 5; return 10; return add(15);")
        assert len(program.statements) == 3
        assert all(isinstance(s, ReturnStmt) for s in program.statements)
        assert isinstance(program.statements[2].value, CallExpr)

    def test_bare_return(self):
        program = parse_ok("return;")
        stmt = program.statements[0]
        assert isinstance(stmt, ReturnStmt)
        assert stmt.value is None

    def test_bare_return_before_brace(self):
        fn = parse_expr("fn() { return }")
        stmt = fn.body.statements[0]
        assert isinstance(stmt, ReturnStmt)
        assert stmt.value is None

    def test_semicolons_optional(self):
        program = parse_ok("let a = 1\nlet b = 2\na + b")
        assert [type(s) for s in program.statements] == [LetStmt, LetStmt, ExprStmt]

    def test_empty_program(self):
        assert parse_ok("").statements == []

    def test_statement_order_preserved(self):
        program = parse_ok("1; 2; 3;")
        assert [s.expr.value for s in program.statements] == [1, 2, 3]


class TestParserExpressions:
    def test_identifier(self):
        expr = parse_expr("foobar;")
        assert isinstance(expr, IdentifierExpr)
        assert expr.name == "foobar"

    def test_integer_literal(self):
        expr = parse_expr("5;")
        assert isinstance(expr, IntegerLit)
        assert expr.value == 5

    def test_largest_integer_literal(self):
        assert parse_expr("9223372036854775807").value == 2**63 - 1

    def test_boolean_literals(self):
        assert parse_expr("true").value is True
        assert parse_expr("false").value is False

    def test_prefix_expressions(self):
        for source, op, value in [("!5;", "!", 5), ("-15;", "-", 15)]:
            expr = parse_expr(source)
            assert isinstance(expr, PrefixExpr)
            assert expr.op == op
            assert expr.operand.value == value

    def test_infix_expressions(self):
        for op in ["+", "-", "*", "/", ">", "<", "==", "!="]:
            expr = parse_expr(f"5 {op} 6;")
            assert isinstance(expr, InfixExpr)
            assert expr.op == op
            assert expr.left.value == 5
            assert expr.right.value == 6

    def test_if_expression(self):
        expr = parse_expr("if (x < y) { x }")
        assert isinstance(expr, IfExpr)
        assert isinstance(expr.condition, InfixExpr)
        assert len(expr.consequence.statements) == 1
        assert expr.alternative is None

    def test_if_else_expression(self):
        expr = parse_expr("if (x < y) { x } else { y }")
        assert isinstance(expr, IfExpr)
        assert expr.alternative is not None
        assert expr.alternative.statements[0].expr.name == "y"

    def test_function_literal(self):
        expr = parse_expr("fn(x, y) { x + y; }")
        assert isinstance(expr, FunctionLit)
        assert [p.name for p in expr.params] == ["x", "y"]
        body = expr.body.statements
        assert len(body) == 1
        assert isinstance(body[0].expr, InfixExpr)

    def test_function_parameter_counts(self):
        for source, params in [
            ("fn() {};", []),
            ("fn(x) {};", ["x"]),
            ("fn(x, y, z) {};", ["x", "y", "z"]),
        ]:
            assert [p.name for p in parse_expr(source).params] == params

    def test_call_expression(self):
        expr = parse_expr("add(1, 2 * 3, 4 + 5);")
        assert isinstance(expr, CallExpr)
        assert expr.func.name == "add"
        assert len(expr.args) == 3
        assert isinstance(expr.args[1], InfixExpr)

    def test_call_without_arguments(self):
        expr = parse_expr("f()")
        assert isinstance(expr, CallExpr)
        assert expr.args == []

    def test_immediately_invoked_function(self):
        expr = parse_expr("fn(x) { x }(5)")
        assert isinstance(expr, CallExpr)
        assert isinstance(expr.func, FunctionLit)

    def test_chained_call(self):
        expr = parse_expr("newAdder(2)(3)")
        assert isinstance(expr, CallExpr)
        assert isinstance(expr.func, CallExpr)
        assert expr.args[0].value == 3

    def test_spans(self):
        expr = parse_expr("1 + 22")
        assert (expr.span.start_col, expr.span.end_col) == (1, 6)


class TestParserPrecedence:
    @pytest.mark.parametrize("source, expected", [
        ("1 + 2 * 3", "(1 + (2 * 3));"),
        ("(1 + 2) * 3", "((1 + 2) * 3);"),
        ("-1 + 2", "((-1) + 2);"),
        ("-a * b", "((-a) * b);"),
        ("!-a", "(!(-a));"),
        ("a + b + c", "((a + b) + c);"),
        ("a + b - c", "((a + b) - c);"),
        ("a * b * c", "((a * b) * c);"),
        ("a * b / c", "((a * b) / c);"),
        ("a - b - c", "((a - b) - c);"),
        ("a + b / c", "(a + (b / c));"),
        ("a + b * c + d / e - f", "(((a + (b * c)) + (d / e)) - f);"),
        ("3 + 4; -5 * 5", "(3 + 4);\n((-5) * 5);"),
        ("5 > 4 == 3 < 4", "((5 > 4) == (3 < 4));"),
        ("5 < 4 != 3 > 4", "((5 < 4) != (3 > 4));"),
        ("3 + 4 * 5 == 3 * 1 + 4 * 5", "((3 + (4 * 5)) == ((3 * 1) + (4 * 5)));"),
        ("3 > 5 == false", "((3 > 5) == false);"),
        ("1 + (2 + 3) + 4", "((1 + (2 + 3)) + 4);"),
        ("-(5 + 5)", "(-(5 + 5));"),
        ("!(true == true)", "(!(true == true));"),
        ("a + add(b * c) + d", "((a + add((b * c))) + d);"),
        ("add(a, b, 1, 2 * 3, 4 + 5, add(6, 7 * 8))",
         "add(a, b, 1, (2 * 3), (4 + 5), add(6, (7 * 8)));"),
        ("add(a + b + c * d / f + g)", "add((((a + b) + ((c * d) / f)) + g));"),
        ("-f(x)", "(-f(x));"),
        ("f(1)(2)", "f(1)(2);"),
    ])
    def test_precedence(self, source, expected):
        assert canonical(source) == expected


class TestParserErrors:
    def test_missing_identifier(self):
        _, errors = parse_errors("let = 5;")
        assert errors == ["expected identifier, got ASSIGN ('=')"]

    def test_missing_assign(self):
        _, errors = parse_errors("let x 5;")
        assert errors == ["expected '=', got INTEGER_LIT ('5')"]

    def test_missing_expression(self):
        _, errors = parse_errors("let x = ;")
        assert errors == ["expected an expression, got SEMICOLON (';')"]

    def test_missing_closing_paren(self):
        _, errors = parse_errors("(1 + 2")
        assert errors == ["expected ')', got end of input"]

    def test_error_carries_position(self):
        tokens = Lexer("let x = 1;\nlet = 2;", "test.rr").lex()
        parser = Parser(tokens)
        parser.parse()
        span = parser.diagnostics[0].labels[0].span
        assert (span.start_line, span.start_col) == (2, 5)
        assert parser.diagnostics[0].code == "E200"

    def test_recovers_at_next_statement(self):
        program, errors = parse_errors("let = 1; let y = 2;")
        assert len(errors) == 1
        assert len(program.statements) == 1
        assert program.statements[0].name.name == "y"

    def test_collects_every_error(self):
        program, errors = parse_errors("let = 1; let x 2; let y = 3;")
        assert len(errors) == 2
        assert [s.name.name for s in program.statements] == ["y"]

    def test_recovers_inside_block(self):
        program, errors = parse_errors("let f = fn(x) { x + ; }; f")
        assert len(errors) == 1
        assert len(program.statements) == 2
        assert isinstance(program.statements[0].value, FunctionLit)

    def test_unterminated_block(self):
        program, errors = parse_errors("if (x) { 1")
        assert len(errors) == 1
        assert errors[0].startswith("unterminated block")
        assert isinstance(program.statements[0].expr, IfExpr)

    def test_stray_closing_brace(self):
        program, errors = parse_errors("} 5")
        assert errors == ["expected an expression, got RBRACE ('}')"]
        assert program.statements[0].expr.value == 5

    def test_integer_literal_too_large(self):
        _, errors = parse_errors("9223372036854775808")
        assert len(errors) == 1
        assert "does not fit in 64 bits" in errors[0]

    def test_if_requires_parentheses(self):
        _, errors = parse_errors("if x { 1 }")
        assert errors[0] == "expected '(', got IDENTIFIER ('x')"

    def test_deeply_nested_expression(self):
        depth = 20000
        _, errors = parse_errors("(" * depth + "1" + ")" * depth)
        assert errors == ["expression nested too deeply"]

    def test_deep_function_nest_reports_once(self):
        depth = 3000
        source = "fn() {" * depth + "1" + "}" * depth + "; let ok = 1;"
        program, errors = parse_errors(source)
        assert errors == ["expression nested too deeply"]
        assert [s.name.name for s in program.statements] == ["ok"]

    def test_deep_nest_skips_inner_semicolons(self):
        depth = 3000
        source = "fn() { 1;" * depth + "}" * depth + "; 7"
        program, errors = parse_errors(source)
        assert errors == ["expression nested too deeply"]
        assert program.statements[0].expr.value == 7


class TestParserNotes:
    def _diagnostic(self, source: str):
        tokens = Lexer(source, "test.rr").lex()
        parser = Parser(tokens)
        parser.parse()
        assert len(parser.diagnostics) == 1
        return parser.diagnostics[0]

    def test_unterminated_block_points_at_opening_brace(self):
        diag = self._diagnostic("let f = fn(x) {\n  x + 1\n")
        assert diag.notes == ["the block opened at test.rr:1:15 is never closed"]
        assert diag.suggestions[0].replacement == "}"

    def test_unterminated_block_labels_end_of_input(self):
        diag = self._diagnostic("if (x) { 1")
        assert diag.labels[0].span.start_line == 1
        assert diag.labels[0].span.start_col > 8

    def test_integer_literal_note(self):
        diag = self._diagnostic("99999999999999999999")
        assert diag.notes == ["the largest integer literal is 9223372036854775807"]

    def test_plain_errors_have_no_notes(self):
        assert self._diagnostic("let = 1;").notes == []
