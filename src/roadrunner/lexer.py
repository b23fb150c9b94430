"""Lexer for the Roadrunner language.

Produces a flat token list from source text. The lexer makes no parsing
decisions: it only classifies characters into tokens and records where each
token came from.
"""

from __future__ import annotations

from roadrunner.errors import CompileError, Diagnostic, DiagnosticLabel
from roadrunner.source import Span
from roadrunner.tokens import KEYWORDS, OPERATORS, Token, TokenKind


class Lexer:
    """Tokenizes Roadrunner source code."""

    def __init__(self, source: str, filename: str = "<stdin>") -> None:
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.col = 1
        self.tokens: list[Token] = []
        self.diagnostics: list[Diagnostic] = []

    def lex(self) -> list[Token]:
        """Tokenize the entire source and return the token list."""
        while self.pos < len(self.source):
            ch = self.source[self.pos]
            if ch.isspace():
                self._advance()
            elif ch.isascii() and ch.isdigit():
                self._lex_number()
            elif ch.isalpha() or ch == '_':
                self._lex_identifier()
            else:
                self._lex_operator_or_punct()

        self._emit(TokenKind.EOF, "", self.line, self.col)

        if self.diagnostics:
            raise CompileError(self.diagnostics)
        return self.tokens

    # ── Helpers ───────────────────────────────────────────────────

    def _advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        if ch == '\n':
            self.line += 1
            self.col = 1
        else:
            self.col += 1
        return ch

    def _is_ident_char(self) -> bool:
        ch = self.source[self.pos]
        return ch.isalnum() or ch == '_'

    def _emit(self, kind: TokenKind, value: str, start_line: int, start_col: int) -> Token:
        end_col = self.col - 1 if self.col > start_col else start_col
        span = Span(self.filename, start_line, start_col, self.line, end_col)
        tok = Token(kind, value, span)
        self.tokens.append(tok)
        return tok

    def _error(self, message: str, line: int, col: int) -> None:
        span = Span(self.filename, line, col, line, col)
        self.diagnostics.append(
            Diagnostic(code="E100", message=message, labels=[DiagnosticLabel(span)])
        )

    # ── Numbers ──────────────────────────────────────────────────

    def _lex_number(self) -> None:
        start_line = self.line
        start_col = self.col
        text = []
        while (self.pos < len(self.source)
               and self.source[self.pos].isascii()
               and self.source[self.pos].isdigit()):
            text.append(self._advance())
        self._emit(TokenKind.INTEGER_LIT, ''.join(text), start_line, start_col)

    # ── Identifiers and Keywords ─────────────────────────────────

    def _lex_identifier(self) -> None:
        start_line = self.line
        start_col = self.col
        text = []
        while self.pos < len(self.source) and self._is_ident_char():
            text.append(self._advance())
        word = ''.join(text)
        kind = KEYWORDS.get(word, TokenKind.IDENTIFIER)
        self._emit(kind, word, start_line, start_col)

    # ── Operators and Punctuation ────────────────────────────────

    def _lex_operator_or_punct(self) -> None:
        start_line = self.line
        start_col = self.col

        two = self.source[self.pos:self.pos + 2]
        if len(two) == 2 and two in OPERATORS:
            self._advance()
            self._advance()
            self._emit(OPERATORS[two], two, start_line, start_col)
            return

        ch = self._advance()
        if ch in OPERATORS:
            self._emit(OPERATORS[ch], ch, start_line, start_col)
            return

        self._error(f"unexpected character {ch!r}", start_line, start_col)
