"""Roadrunner interpreter CLI."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from roadrunner import __version__
from roadrunner.ast_nodes import Program
from roadrunner.config import discover_config
from roadrunner.errors import CompileError, DiagnosticRenderer
from roadrunner.formatter import Formatter
from roadrunner.interpreter import Interpreter
from roadrunner.objects import Error

logger = logging.getLogger(__name__)


def _report(error: CompileError, renderer: DiagnosticRenderer) -> None:
    for diag in error.diagnostics:
        click.echo(renderer.render(diag), err=True)


def _parse_or_exit(source: str, filename: str, color: bool) -> Program:
    renderer = DiagnosticRenderer(color=color)
    renderer.register_source(filename, source)
    try:
        return Interpreter().parse(source, filename)
    except CompileError as e:
        _report(e, renderer)
        raise SystemExit(1)


@click.group()
@click.version_option(__version__, prog_name="roadrunner")
@click.option("-v", "--verbose", is_flag=True, help="Log interpreter internals to stderr.")
@click.option("--color/--no-color", default=True, help="Colorize diagnostics.")
@click.pass_context
def main(ctx: click.Context, verbose: bool, color: bool) -> None:
    """The Roadrunner programming language interpreter."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )
    ctx.obj = {"color": color}


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--max-depth", type=click.IntRange(min=1), default=None,
              help="Maximum function call depth.")
@click.pass_context
def run(ctx: click.Context, file: str, max_depth: int | None) -> None:
    """Evaluate a Roadrunner source file and print its value."""
    config = discover_config(Path(file))
    depth = max_depth or config.interpreter.max_depth
    logger.debug("running %s with max depth %d", file, depth)

    source = Path(file).read_text()
    renderer = DiagnosticRenderer(color=ctx.obj["color"])
    renderer.register_source(file, source)

    interpreter = Interpreter(max_depth=depth)
    try:
        result = interpreter.run(source, file)
    except CompileError as e:
        _report(e, renderer)
        raise SystemExit(1)

    if isinstance(result, Error):
        click.echo(result.inspect(), err=True)
        raise SystemExit(1)
    click.echo(result.inspect())


@main.command()
@click.option("--max-depth", type=click.IntRange(min=1), default=None,
              help="Maximum function call depth.")
@click.option("--prompt", default=None, help="Input prompt.")
@click.pass_context
def repl(ctx: click.Context, max_depth: int | None, prompt: str | None) -> None:
    """Start an interactive session."""
    from roadrunner.repl import Repl

    config = discover_config()
    session = Repl(
        Interpreter(max_depth=max_depth or config.interpreter.max_depth),
        prompt=prompt if prompt is not None else config.repl.prompt,
        color=ctx.obj["color"] and config.repl.color,
    )
    session.run()


@main.command(name="format")
@click.argument("path", required=False, type=click.Path(exists=True, dir_okay=False))
@click.option("--stdin", "use_stdin", is_flag=True, help="Read from stdin.")
@click.option("--highlight/--no-highlight", default=False,
              help="Syntax-highlight the output.")
@click.pass_context
def format_cmd(ctx: click.Context, path: str | None, use_stdin: bool, highlight: bool) -> None:
    """Print the canonical, fully parenthesised form of a program."""
    if use_stdin:
        source, filename = sys.stdin.read(), "<stdin>"
    elif path is not None:
        source, filename = Path(path).read_text(), path
    else:
        raise click.UsageError("give a PATH or --stdin")

    program = _parse_or_exit(source, filename, ctx.obj["color"])
    formatted = Formatter().format(program)

    if highlight:
        from roadrunner.highlight import highlight as colorize

        click.echo(colorize(formatted), nl=False)
    else:
        click.echo(formatted)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def view(ctx: click.Context, file: str) -> None:
    """View the AST of a Roadrunner source file."""
    source = Path(file).read_text()
    program = _parse_or_exit(source, str(file), ctx.obj["color"])
    _dump_ast(program, 0)


def _dump_ast(node: object, depth: int) -> None:
    """Print a readable AST dump."""
    indent = "  " * depth
    name = type(node).__name__

    if hasattr(node, "__dataclass_fields__"):
        fields = node.__dataclass_fields__  # type: ignore[union-attr]
        click.echo(f"{indent}{name}")
        for field_name in fields:
            if field_name == "span":
                continue
            value = getattr(node, field_name)
            if isinstance(value, list):
                if value:
                    click.echo(f"{indent}  {field_name}:")
                    for item in value:
                        _dump_ast(item, depth + 2)
                else:
                    click.echo(f"{indent}  {field_name}: []")
            elif hasattr(value, "__dataclass_fields__"):
                click.echo(f"{indent}  {field_name}:")
                _dump_ast(value, depth + 2)
            elif value is not None:
                click.echo(f"{indent}  {field_name}: {value!r}")
    else:
        click.echo(f"{indent}{name}: {node!r}")
