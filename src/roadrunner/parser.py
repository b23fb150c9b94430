"""Parser for the Roadrunner language.

Transforms a token stream into an AST using a Pratt expression parser for
expressions and recursive descent for statements. Syntax errors are
collected as diagnostics; the parser recovers at statement boundaries and
always returns a Program for the whole input.
"""

from __future__ import annotations

from roadrunner.ast_nodes import (
    BlockStmt,
    BooleanLit,
    CallExpr,
    Expr,
    ExprStmt,
    FunctionLit,
    IdentifierExpr,
    IfExpr,
    InfixExpr,
    IntegerLit,
    LetStmt,
    PrefixExpr,
    Program,
    ReturnStmt,
    Stmt,
)
from roadrunner.errors import Diagnostic, DiagnosticLabel, Suggestion
from roadrunner.source import Span
from roadrunner.tokens import KEYWORDS, OPERATORS, Token, TokenKind

# ── Binding powers for Pratt parser ─────────────────────────────

# (left_bp, right_bp) for infix operators; right = left + 1 makes them
# left-associative.
_INFIX_BP: dict[TokenKind, tuple[int, int]] = {
    TokenKind.EQUAL: (1, 2),
    TokenKind.NOT_EQUAL: (1, 2),
    TokenKind.LESS: (3, 4),
    TokenKind.GREATER: (3, 4),
    TokenKind.PLUS: (5, 6),
    TokenKind.MINUS: (5, 6),
    TokenKind.STAR: (7, 8),
    TokenKind.SLASH: (7, 8),
}

_PREFIX_BP = 9  # right bp for unary ! and -
_CALL_BP = 11  # left bp for f(...)

_PREFIX_OPS = frozenset({TokenKind.BANG, TokenKind.MINUS})

_I64_MAX = 2**63 - 1

# Bracket depth change per token, for skipping over nested statements.
_NESTING: dict[TokenKind, int] = {
    TokenKind.LBRACE: 1,
    TokenKind.LPAREN: 1,
    TokenKind.RBRACE: -1,
    TokenKind.RPAREN: -1,
}

_KIND_TEXT: dict[TokenKind, str] = {
    **{kind: f"'{text}'" for text, kind in OPERATORS.items()},
    **{kind: f"'{text}'" for text, kind in KEYWORDS.items()},
    TokenKind.IDENTIFIER: "identifier",
    TokenKind.INTEGER_LIT: "integer literal",
    TokenKind.EOF: "end of input",
}


def _describe(tok: Token) -> str:
    if tok.kind == TokenKind.EOF:
        return "end of input"
    return f"{tok.kind.name} ({tok.value!r})"


class Parser:
    """Parses a list of tokens into a Roadrunner AST."""

    def __init__(self, tokens: list[Token]) -> None:
        self.tokens = tokens
        self.pos = 0
        self.diagnostics: list[Diagnostic] = []
        self._block_depth = 0

    # ── Token access ─────────────────────────────────────────────

    def _current(self) -> Token:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return self.tokens[-1]  # EOF

    def _at(self, kind: TokenKind) -> bool:
        return self._current().kind == kind

    def _advance(self) -> Token:
        tok = self._current()
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return tok

    def _expect(self, kind: TokenKind) -> Token:
        if self._current().kind == kind:
            return self._advance()
        tok = self._current()
        self._error(f"expected {_KIND_TEXT[kind]}, got {_describe(tok)}", tok.span)
        raise _ParseError

    def _skip_semicolon(self) -> None:
        if self._at(TokenKind.SEMICOLON):
            self._advance()

    def _error(
        self,
        message: str,
        span: Span,
        suggestions: list[Suggestion] | None = None,
        notes: list[str] | None = None,
    ) -> None:
        self.diagnostics.append(
            Diagnostic(
                code="E200",
                message=message,
                labels=[DiagnosticLabel(span)],
                suggestions=suggestions or [],
                notes=notes or [],
            )
        )

    def _synchronize(self) -> None:
        """Skip tokens until the end of the broken statement.

        Stops after a ';' at the current nesting level, or before the '}'
        that closes the enclosing block. A stray '}' at the top level is
        consumed.
        """
        depth = 0
        while not self._at(TokenKind.EOF):
            kind = self._current().kind
            if kind == TokenKind.LBRACE:
                depth += 1
            elif kind == TokenKind.RBRACE:
                if depth == 0:
                    if self._block_depth == 0:
                        self._advance()
                    return
                depth -= 1
            elif kind == TokenKind.SEMICOLON and depth == 0:
                self._advance()
                return
            self._advance()

    def _skip_statement(self, start: int) -> None:
        """Skip past the next ';' outside every bracket opened since *start*,
        or to EOF.

        Used after a nesting overflow, where the parse unwound from deep
        inside the statement and left the position mid-nest.
        """
        depth = 0
        for tok in self.tokens[start:self.pos]:
            depth += _NESTING.get(tok.kind, 0)
        while not self._at(TokenKind.EOF):
            kind = self._advance().kind
            depth += _NESTING.get(kind, 0)
            if kind == TokenKind.SEMICOLON and depth <= 0:
                return

    # ── Top-level parsing ────────────────────────────────────────

    def parse(self) -> Program:
        """Parse the entire token stream into a Program.

        Syntax errors end up in ``self.diagnostics``; a Program is returned
        either way.
        """
        statements: list[Stmt] = []
        start = self._current().span

        while not self._at(TokenKind.EOF):
            stmt_pos = self.pos
            try:
                statements.append(self._parse_statement())
            except _ParseError:
                self._synchronize()
            except RecursionError:
                self._error("expression nested too deeply", self.tokens[stmt_pos].span)
                self._skip_statement(stmt_pos)

        return Program(statements, start.to(self._current().span))

    # ── Statements ───────────────────────────────────────────────

    def _parse_statement(self) -> Stmt:
        """Parse a statement: let, return, or expression."""
        if self._at(TokenKind.LET):
            return self._parse_let()
        if self._at(TokenKind.RETURN):
            return self._parse_return()
        return self._parse_expr_stmt()

    def _parse_let(self) -> LetStmt:
        start = self._advance().span  # 'let'
        name_tok = self._expect(TokenKind.IDENTIFIER)
        name = IdentifierExpr(name_tok.value, name_tok.span)
        self._expect(TokenKind.ASSIGN)
        value = self._parse_expression(0)
        end = value.span
        self._skip_semicolon()
        return LetStmt(name, value, start.to(end))

    def _parse_return(self) -> ReturnStmt:
        start = self._advance().span  # 'return'
        value: Expr | None = None
        end = start
        if not (self._at(TokenKind.SEMICOLON) or self._at(TokenKind.RBRACE)
                or self._at(TokenKind.EOF)):
            value = self._parse_expression(0)
            end = value.span
        self._skip_semicolon()
        return ReturnStmt(value, start.to(end))

    def _parse_expr_stmt(self) -> ExprStmt:
        expr = self._parse_expression(0)
        self._skip_semicolon()
        return ExprStmt(expr, expr.span)

    def _parse_block(self) -> BlockStmt:
        """Parse a brace-delimited block of statements."""
        start = self._expect(TokenKind.LBRACE).span
        statements: list[Stmt] = []

        self._block_depth += 1
        try:
            while not self._at(TokenKind.RBRACE) and not self._at(TokenKind.EOF):
                try:
                    statements.append(self._parse_statement())
                except _ParseError:
                    self._synchronize()
        finally:
            self._block_depth -= 1

        end_tok = self._current()
        if end_tok.kind == TokenKind.EOF:
            self._error(
                "unterminated block: expected '}', got end of input",
                end_tok.span,
                [Suggestion("close the block", "}")],
                [f"the block opened at {start} is never closed"],
            )
        else:
            self._advance()  # '}'
        return BlockStmt(statements, start.to(end_tok.span))

    # ── Pratt expression parser ──────────────────────────────────

    def _parse_expression(self, min_bp: int) -> Expr:
        """Parse an expression using Pratt parsing with binding powers."""
        left = self._parse_prefix()

        while True:
            tok = self._current()

            if tok.kind == TokenKind.LPAREN:
                if _CALL_BP < min_bp:
                    break
                left = self._parse_call_expr(left)
                continue

            if tok.kind in _INFIX_BP:
                left_bp, right_bp = _INFIX_BP[tok.kind]
                if left_bp < min_bp:
                    break
                op_tok = self._advance()
                right = self._parse_expression(right_bp)
                left = InfixExpr(
                    left, op_tok.value, right,
                    left.span.to(right.span),
                )
                continue

            break

        return left

    def _parse_prefix(self) -> Expr:
        """Parse a prefix expression (atom or unary operator)."""
        tok = self._current()

        if tok.kind in _PREFIX_OPS:
            self._advance()
            operand = self._parse_expression(_PREFIX_BP)
            return PrefixExpr(tok.value, operand, tok.span.to(operand.span))

        if tok.kind == TokenKind.INTEGER_LIT:
            self._advance()
            value = int(tok.value)
            if value > _I64_MAX:
                self._error(
                    f"integer literal {tok.value} does not fit in 64 bits",
                    tok.span,
                    notes=[f"the largest integer literal is {_I64_MAX}"],
                )
                raise _ParseError
            return IntegerLit(value, tok.span)

        if tok.kind in (TokenKind.TRUE, TokenKind.FALSE):
            self._advance()
            return BooleanLit(tok.kind == TokenKind.TRUE, tok.span)

        if tok.kind == TokenKind.IDENTIFIER:
            self._advance()
            return IdentifierExpr(tok.value, tok.span)

        # Parenthesized expression
        if tok.kind == TokenKind.LPAREN:
            self._advance()
            expr = self._parse_expression(0)
            self._expect(TokenKind.RPAREN)
            return expr

        if tok.kind == TokenKind.IF:
            return self._parse_if_expr()

        if tok.kind == TokenKind.FN:
            return self._parse_function_lit()

        self._error(f"expected an expression, got {_describe(tok)}", tok.span)
        raise _ParseError

    def _parse_call_expr(self, func: Expr) -> CallExpr:
        """Parse a function call: func(args)."""
        self._advance()  # (
        args: list[Expr] = []
        while not self._at(TokenKind.RPAREN) and not self._at(TokenKind.EOF):
            if args:
                self._expect(TokenKind.COMMA)
            args.append(self._parse_expression(0))
        end_tok = self._expect(TokenKind.RPAREN)
        return CallExpr(func, args, func.span.to(end_tok.span))

    def _parse_if_expr(self) -> IfExpr:
        start = self._advance().span  # 'if'
        self._expect(TokenKind.LPAREN)
        condition = self._parse_expression(0)
        self._expect(TokenKind.RPAREN)
        consequence = self._parse_block()

        alternative = None
        if self._at(TokenKind.ELSE):
            self._advance()
            alternative = self._parse_block()

        end = (alternative or consequence).span
        return IfExpr(condition, consequence, alternative, start.to(end))

    def _parse_function_lit(self) -> FunctionLit:
        start = self._advance().span  # 'fn'
        self._expect(TokenKind.LPAREN)
        params: list[IdentifierExpr] = []
        while not self._at(TokenKind.RPAREN) and not self._at(TokenKind.EOF):
            if params:
                self._expect(TokenKind.COMMA)
            name_tok = self._expect(TokenKind.IDENTIFIER)
            params.append(IdentifierExpr(name_tok.value, name_tok.span))
        self._expect(TokenKind.RPAREN)
        body = self._parse_block()
        return FunctionLit(params, body, start.to(body.span))


def parse(tokens: list[Token]) -> tuple[Program, list[Diagnostic]]:
    """Parse *tokens* and return the Program with its syntax diagnostics."""
    parser = Parser(tokens)
    program = parser.parse()
    return program, parser.diagnostics


class _ParseError(Exception):
    """Internal exception for parser error recovery."""
