"""Tree-walking evaluator for Roadrunner programs.

Language-level errors and ``return`` are ordinary values (``Error`` and
``ReturnValue``) that every step checks and passes upward; no Python
exception is used for either. The one resource limit is stack depth: active
function calls are counted against ``max_depth``, and Python's recursion
limit is raised for the duration of an evaluation so that many calls fit.
"""

from __future__ import annotations

import logging
import operator
import sys
from collections.abc import Iterator
from contextlib import contextmanager

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
)
from roadrunner.environment import Environment
from roadrunner.objects import (
    Boolean,
    Error,
    Function,
    Integer,
    Null,
    Object,
    ReturnValue,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 1000

# Python frames used by one language-level call, with room for nested
# argument expressions.
_FRAMES_PER_CALL = 20
_FRAME_MARGIN = 1000

_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1

_ARITHMETIC = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
}

_COMPARISON = {
    "<": operator.lt,
    ">": operator.gt,
    "==": operator.eq,
    "!=": operator.ne,
}


def is_truthy(obj: Object) -> bool:
    """`false` and `null` are falsy; every other value is truthy."""
    if isinstance(obj, Null):
        return False
    if isinstance(obj, Boolean):
        return obj.value
    return True


def _is_signal(obj: Object) -> bool:
    return isinstance(obj, (Error, ReturnValue))


def _truncating_div(left: int, right: int) -> int:
    quotient = abs(left) // abs(right)
    return -quotient if (left < 0) != (right < 0) else quotient


class Evaluator:
    """Evaluates AST nodes against an Environment."""

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self.max_depth = max_depth
        self._depth = 0
        self._active = False

    # ── Public API ─────────────────────────────────────────────

    def eval(self, node: object, env: Environment) -> Object:
        """Evaluate *node* in *env* and return the resulting value.

        A stack overflow that slips past the call-depth check (for example
        from a very deeply nested expression) comes back as an Error.
        """
        if self._active:
            return self._eval(node, env)

        self._active = True
        try:
            with self._recursion_headroom():
                return self._eval(node, env)
        except RecursionError:
            logger.debug("host recursion limit hit during evaluation")
            return Error("maximum recursion depth exceeded")
        finally:
            self._active = False
            self._depth = 0

    @contextmanager
    def _recursion_headroom(self) -> Iterator[None]:
        previous = sys.getrecursionlimit()
        needed = self.max_depth * _FRAMES_PER_CALL + _FRAME_MARGIN
        if needed > previous:
            logger.debug("raising recursion limit from %d to %d", previous, needed)
            sys.setrecursionlimit(needed)
        try:
            yield
        finally:
            if needed > previous:
                sys.setrecursionlimit(previous)

    # ── Dispatch ───────────────────────────────────────────────

    def _eval(self, node: object, env: Environment) -> Object:
        if isinstance(node, Program):
            return self._eval_program(node, env)

        # Statements
        if isinstance(node, ExprStmt):
            return self._eval(node.expr, env)
        if isinstance(node, LetStmt):
            return self._eval_let(node, env)
        if isinstance(node, ReturnStmt):
            return self._eval_return(node, env)
        if isinstance(node, BlockStmt):
            return self._eval_block(node, Environment.new_enclosed(env))

        # Expressions
        if isinstance(node, IntegerLit):
            return Integer(node.value)
        if isinstance(node, BooleanLit):
            return Boolean(node.value)
        if isinstance(node, IdentifierExpr):
            return self._eval_identifier(node, env)
        if isinstance(node, PrefixExpr):
            operand = self._eval(node.operand, env)
            if _is_signal(operand):
                return operand
            return self._eval_prefix(node.op, operand)
        if isinstance(node, InfixExpr):
            left = self._eval(node.left, env)
            if _is_signal(left):
                return left
            right = self._eval(node.right, env)
            if _is_signal(right):
                return right
            return self._eval_infix(node.op, left, right)
        if isinstance(node, IfExpr):
            return self._eval_if(node, env)
        if isinstance(node, FunctionLit):
            return Function(node.params, node.body, env)
        if isinstance(node, CallExpr):
            return self._eval_call(node, env)

        raise TypeError(f"cannot evaluate {type(node).__name__}")

    # ── Statements ─────────────────────────────────────────────

    def _eval_program(self, program: Program, env: Environment) -> Object:
        result: Object = Null()
        for stmt in program.statements:
            result = self._eval(stmt, env)
            if isinstance(result, ReturnValue):
                return result.value
            if isinstance(result, Error):
                return result
        return result

    def _eval_block(self, block: BlockStmt, env: Environment) -> Object:
        result: Object = Null()
        for stmt in block.statements:
            result = self._eval(stmt, env)
            if _is_signal(result):
                return result
        return result

    def _eval_let(self, stmt: LetStmt, env: Environment) -> Object:
        value = self._eval(stmt.value, env)
        if _is_signal(value):
            return value
        env.set(stmt.name.name, value)
        return Null()

    def _eval_return(self, stmt: ReturnStmt, env: Environment) -> Object:
        if stmt.value is None:
            return ReturnValue(Null())
        value = self._eval(stmt.value, env)
        if _is_signal(value):
            return value
        return ReturnValue(value)

    # ── Expressions ────────────────────────────────────────────

    def _eval_identifier(self, expr: IdentifierExpr, env: Environment) -> Object:
        value = env.get(expr.name)
        if value is None:
            return Error(f"identifier not found: {expr.name}")
        return value

    def _eval_prefix(self, op: str, operand: Object) -> Object:
        if op == "!":
            return Boolean(not is_truthy(operand))
        if op == "-":
            if not isinstance(operand, Integer):
                return Error(f"unknown operator: -{operand.type_name()}")
            if -operand.value > _I64_MAX:
                return Error(f"integer overflow: -({operand.value})")
            return Integer(-operand.value)
        return Error(f"unknown operator: {op}{operand.type_name()}")

    def _eval_infix(self, op: str, left: Object, right: Object) -> Object:
        if isinstance(left, Integer) and isinstance(right, Integer):
            return self._eval_integer_infix(op, left.value, right.value)
        if type(left) is not type(right):
            return Error(
                f"type mismatch: {left.type_name()} {op} {right.type_name()}"
            )
        # Same non-integer kind: booleans and nulls compare by value,
        # functions by identity.
        if op == "==":
            return Boolean(left == right)
        if op == "!=":
            return Boolean(left != right)
        return Error(
            f"unknown operator: {left.type_name()} {op} {right.type_name()}"
        )

    def _eval_integer_infix(self, op: str, left: int, right: int) -> Object:
        if op in _COMPARISON:
            return Boolean(_COMPARISON[op](left, right))

        if op == "/":
            if right == 0:
                return Error("division by zero")
            result = _truncating_div(left, right)
        elif op in _ARITHMETIC:
            result = _ARITHMETIC[op](left, right)
        else:
            return Error(f"unknown operator: INTEGER {op} INTEGER")

        if not _I64_MIN <= result <= _I64_MAX:
            return Error(f"integer overflow: {left} {op} {right}")
        return Integer(result)

    def _eval_if(self, expr: IfExpr, env: Environment) -> Object:
        condition = self._eval(expr.condition, env)
        if _is_signal(condition):
            return condition
        if is_truthy(condition):
            return self._eval_block(expr.consequence, Environment.new_enclosed(env))
        if expr.alternative is not None:
            return self._eval_block(expr.alternative, Environment.new_enclosed(env))
        return Null()

    def _eval_call(self, expr: CallExpr, env: Environment) -> Object:
        func = self._eval(expr.func, env)
        if _is_signal(func):
            return func
        if not isinstance(func, Function):
            return Error(f"not a function: {func.type_name()}")

        args: list[Object] = []
        for arg_expr in expr.args:
            arg = self._eval(arg_expr, env)
            if _is_signal(arg):
                return arg
            args.append(arg)

        return self.apply_function(func, args)

    def apply_function(self, func: Function, args: list[Object]) -> Object:
        """Call *func* with already-evaluated *args*."""
        if len(args) != len(func.params):
            return Error(
                f"wrong number of arguments: expected {len(func.params)}, "
                f"got {len(args)}"
            )
        if self._depth >= self.max_depth:
            logger.debug("call depth %d reached the limit", self._depth)
            return Error(f"maximum call depth exceeded: {self.max_depth}")

        call_env = Environment.new_enclosed(func.env)
        for param, arg in zip(func.params, args):
            call_env.set(param.name, arg)

        self._depth += 1
        try:
            result = self._eval_block(func.body, call_env)
        finally:
            self._depth -= 1

        if isinstance(result, ReturnValue):
            return result.value
        return result


def evaluate(node: Program | Expr, env: Environment | None = None) -> Object:
    """Evaluate *node* with a fresh Evaluator, in *env* or a new environment."""
    return Evaluator().eval(node, env if env is not None else Environment())
