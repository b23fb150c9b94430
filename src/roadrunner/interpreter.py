"""Lex, parse and evaluate source text against one persistent environment."""

from __future__ import annotations

import logging

from roadrunner.ast_nodes import Program
from roadrunner.environment import Environment
from roadrunner.errors import CompileError
from roadrunner.evaluator import DEFAULT_MAX_DEPTH, Evaluator
from roadrunner.lexer import Lexer
from roadrunner.objects import Object
from roadrunner.parser import parse

logger = logging.getLogger(__name__)


class Interpreter:
    """Runs successive inputs in a shared top-level environment.

    ``let`` bindings made by one call to :meth:`run` are visible to the next,
    which is what a REPL session needs.
    """

    def __init__(self, *, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self.env = Environment()
        self.evaluator = Evaluator(max_depth=max_depth)

    def parse(self, source: str, filename: str = "<stdin>") -> Program:
        """Lex and parse *source*. Raises CompileError on any syntax error."""
        tokens = Lexer(source, filename).lex()
        program, diagnostics = parse(tokens)
        if diagnostics:
            raise CompileError(diagnostics)
        return program

    def run(self, source: str, filename: str = "<stdin>") -> Object:
        """Parse and evaluate *source*, returning the program's value."""
        program = self.parse(source, filename)
        logger.debug("evaluating %d statement(s) from %s", len(program.statements), filename)
        return self.evaluate(program)

    def evaluate(self, program: Program) -> Object:
        """Evaluate an already parsed program in the shared environment."""
        return self.evaluator.eval(program, self.env)
