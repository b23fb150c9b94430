"""Runtime values produced by the Roadrunner evaluator."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Union

from roadrunner.formatter import Formatter

if TYPE_CHECKING:
    from roadrunner.ast_nodes import BlockStmt, IdentifierExpr
    from roadrunner.environment import Environment

INTEGER = "INTEGER"
BOOLEAN = "BOOLEAN"
NULL = "NULL"
RETURN_VALUE = "RETURN_VALUE"
ERROR = "ERROR"
FUNCTION = "FUNCTION"


@dataclass(frozen=True)
class Integer:
    value: int

    def type_name(self) -> str:
        return INTEGER

    def inspect(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Boolean:
    value: bool

    def type_name(self) -> str:
        return BOOLEAN

    def inspect(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class Null:
    def type_name(self) -> str:
        return NULL

    def inspect(self) -> str:
        return "null"


@dataclass(frozen=True)
class ReturnValue:
    """Carries a `return` value up through enclosing blocks.

    Never escapes the function call (or program) that produced it.
    """

    value: Object

    def type_name(self) -> str:
        return RETURN_VALUE

    def inspect(self) -> str:
        return self.value.inspect()


@dataclass(frozen=True)
class Error:
    """A runtime error. Propagates through evaluation as an ordinary value."""

    message: str

    def type_name(self) -> str:
        return ERROR

    def inspect(self) -> str:
        return f"ERROR: {self.message}"


@dataclass(eq=False)
class Function:
    """A closure: parameters and body plus the environment it was defined in.

    Compared by identity. The captured environment is left out of repr and
    inspect because it may contain this very function.
    """

    params: list[IdentifierExpr]
    body: BlockStmt
    env: Environment = field(repr=False)

    def type_name(self) -> str:
        return FUNCTION

    def inspect(self) -> str:
        params = ", ".join(p.name for p in self.params)
        body = Formatter().format_block_body(self.body)
        return f"fn({params}) {{\n{body}\n}}"


Object = Union[Integer, Boolean, Null, ReturnValue, Error, Function]
