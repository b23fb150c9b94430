"""AST-walking printer for Roadrunner source code.

Produces the canonical text form of a program: every prefix and infix
expression is fully parenthesised, every statement ends in ``;`` and blocks
are indented by four spaces. The output parses back to the same tree, which
makes it handy for checking operator precedence.
"""

from __future__ import annotations

from roadrunner.ast_nodes import (
    BlockStmt,
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
    Program,
    ReturnStmt,
)


class Formatter:
    """Format parsed Roadrunner nodes back to canonical source text."""

    # ── Public API ─────────────────────────────────────────────

    def format(self, node: object) -> str:
        """Format a Program, statement or expression."""
        if isinstance(node, Program):
            return "\n".join(self._format_stmt(s) for s in node.statements)
        if isinstance(node, (LetStmt, ReturnStmt, ExprStmt, BlockStmt)):
            return self._format_stmt(node)
        return self._format_expr(node)

    def format_block_body(self, block: BlockStmt) -> str:
        """Format the statements of a block without the braces."""
        return "\n".join(self._format_stmt(s) for s in block.statements)

    # ── Statements ─────────────────────────────────────────────

    def _format_stmt(self, stmt: object) -> str:
        if isinstance(stmt, LetStmt):
            return f"let {stmt.name.name} = {self._format_expr(stmt.value)};"
        if isinstance(stmt, ReturnStmt):
            if stmt.value is None:
                return "return;"
            return f"return {self._format_expr(stmt.value)};"
        if isinstance(stmt, ExprStmt):
            return f"{self._format_expr(stmt.expr)};"
        if isinstance(stmt, BlockStmt):
            return self._format_block(stmt)
        raise TypeError(f"cannot format statement {type(stmt).__name__}")

    def _format_block(self, block: BlockStmt) -> str:
        if not block.statements:
            return "{ }"
        return "{\n" + self._indent(self.format_block_body(block), 1) + "\n}"

    # ── Expressions ────────────────────────────────────────────

    def _format_expr(self, expr: object) -> str:
        if isinstance(expr, IdentifierExpr):
            return expr.name
        if isinstance(expr, IntegerLit):
            return str(expr.value)
        if isinstance(expr, BooleanLit):
            return "true" if expr.value else "false"
        if isinstance(expr, PrefixExpr):
            return f"({expr.op}{self._format_expr(expr.operand)})"
        if isinstance(expr, InfixExpr):
            return (
                f"({self._format_expr(expr.left)} {expr.op} "
                f"{self._format_expr(expr.right)})"
            )
        if isinstance(expr, IfExpr):
            return self._format_if(expr)
        if isinstance(expr, FunctionLit):
            params = ", ".join(p.name for p in expr.params)
            return f"fn({params}) {self._format_block(expr.body)}"
        if isinstance(expr, CallExpr):
            args = ", ".join(self._format_expr(a) for a in expr.args)
            return f"{self._format_expr(expr.func)}({args})"
        raise TypeError(f"cannot format expression {type(expr).__name__}")

    def _format_if(self, expr: IfExpr) -> str:
        cond = self._format_expr(expr.condition)
        if not isinstance(expr.condition, (PrefixExpr, InfixExpr)):
            cond = f"({cond})"
        text = f"if {cond} {self._format_block(expr.consequence)}"
        if expr.alternative is not None:
            text += f" else {self._format_block(expr.alternative)}"
        return text

    # ── Helpers ────────────────────────────────────────────────

    @staticmethod
    def _indent(text: str, levels: int) -> str:
        prefix = "    " * levels
        return "\n".join(prefix + line if line else line for line in text.splitlines())
