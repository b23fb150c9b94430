"""AST node definitions for the Roadrunner language."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from roadrunner.source import Span

# ── Expressions ──────────────────────────────────────────────────


@dataclass(frozen=True)
class IdentifierExpr:
    name: str
    span: Span


@dataclass(frozen=True)
class IntegerLit:
    value: int
    span: Span


@dataclass(frozen=True)
class BooleanLit:
    value: bool
    span: Span


@dataclass(frozen=True)
class PrefixExpr:
    op: str
    operand: Expr
    span: Span


@dataclass(frozen=True)
class InfixExpr:
    left: Expr
    op: str
    right: Expr
    span: Span


@dataclass(frozen=True)
class IfExpr:
    condition: Expr
    consequence: BlockStmt
    alternative: BlockStmt | None
    span: Span


@dataclass(frozen=True)
class FunctionLit:
    params: list[IdentifierExpr]
    body: BlockStmt
    span: Span


@dataclass(frozen=True)
class CallExpr:
    func: Expr
    args: list[Expr]
    span: Span


Expr = Union[
    IdentifierExpr, IntegerLit, BooleanLit, PrefixExpr, InfixExpr,
    IfExpr, FunctionLit, CallExpr,
]


# ── Statements ───────────────────────────────────────────────────


@dataclass(frozen=True)
class LetStmt:
    name: IdentifierExpr
    value: Expr
    span: Span


@dataclass(frozen=True)
class ReturnStmt:
    value: Expr | None  # None for a bare `return;`
    span: Span


@dataclass(frozen=True)
class ExprStmt:
    expr: Expr
    span: Span


@dataclass(frozen=True)
class BlockStmt:
    statements: list[Stmt]
    span: Span


Stmt = Union[LetStmt, ReturnStmt, ExprStmt, BlockStmt]


# ── Program ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class Program:
    statements: list[Stmt]
    span: Span


Node = Union[Program, Stmt, Expr]
