"""Pygments lexer for the Roadrunner language."""

from pygments import highlight as _pygments_highlight
from pygments.formatters import TerminalFormatter
from pygments.lexer import RegexLexer, bygroups, words
from pygments.token import (
    Keyword,
    Name,
    Number,
    Operator,
    Punctuation,
    Text,
)


class RoadrunnerLexer(RegexLexer):
    """Pygments lexer for the Roadrunner language."""

    name = "Roadrunner"
    aliases = ["roadrunner", "rr"]
    filenames = ["*.rr"]
    mimetypes = ["text/x-roadrunner"]

    tokens = {
        "root": [
            # Whitespace
            (r"\s+", Text),
            # Numbers
            (r"[0-9]+", Number.Integer),
            # Bindings: let name
            (
                r"(let)(\s+)([A-Za-z_]\w*)",
                bygroups(Keyword.Declaration, Text, Name.Variable),
            ),
            # Function literals
            (r"\bfn\b", Keyword.Declaration),
            # Core keywords
            (
                words(
                    ("if", "else", "return"),
                    prefix=r"\b",
                    suffix=r"\b",
                ),
                Keyword,
            ),
            # Boolean constants
            (r"\b(true|false)\b", Keyword.Constant),
            # Operators (multi-char before single-char)
            (r"==|!=", Operator),
            (r"[+\-*/<>!=]", Operator),
            # Calls
            (r"[A-Za-z_]\w*(?=\s*\()", Name.Function),
            # Identifiers
            (r"[A-Za-z_]\w*", Name),
            # Punctuation
            (r"[(),;{}]", Punctuation),
        ],
    }


def highlight(source: str) -> str:
    """Return *source* with ANSI terminal colors."""
    return _pygments_highlight(source, RoadrunnerLexer(), TerminalFormatter())
