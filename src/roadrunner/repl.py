"""Interactive read-eval-print loop."""

from __future__ import annotations

import click

from roadrunner.ast_nodes import LetStmt
from roadrunner.errors import CompileError, DiagnosticRenderer
from roadrunner.interpreter import Interpreter
from roadrunner.objects import Null

BANNER = (
    "Hello! This is the Roadrunner programming language!\n"
    "Feel free to type in commands"
)


class Repl:
    """Reads lines, evaluates them in one session and echoes the results."""

    def __init__(
        self,
        interpreter: Interpreter | None = None,
        *,
        prompt: str = ">> ",
        color: bool = True,
    ) -> None:
        self.interpreter = interpreter or Interpreter()
        self.prompt = prompt
        self.renderer = DiagnosticRenderer(color=color)
        self._line_no = 0

    def eval_line(self, line: str) -> str | None:
        """Evaluate one input line; return the text to show, if any."""
        if not line.strip():
            return None

        self._line_no += 1
        filename = f"<repl:{self._line_no}>"
        self.renderer.register_source(filename, line)

        try:
            program = self.interpreter.parse(line, filename)
        except CompileError as e:
            return "\n".join(self.renderer.render(d) for d in e.diagnostics)

        result = self.interpreter.evaluate(program)
        if (isinstance(result, Null) and program.statements
                and isinstance(program.statements[-1], LetStmt)):
            return None
        return result.inspect()

    def run(self) -> None:
        """Loop until end of input or Ctrl-C."""
        click.echo(BANNER)
        while True:
            try:
                line = input(self.prompt)
            except (EOFError, KeyboardInterrupt):
                click.echo()
                click.echo("Bye!")
                return
            output = self.eval_line(line)
            if output is not None:
                click.echo(output)
