"""Lexer for the Go subset accepted by gotoc.

Produces a stream of tokens from source text. Literal tokens keep their
exact source spelling (quotes and escapes included) because the emitter
passes literals through verbatim. Newlines become SEMICOLON tokens
following Go's automatic semicolon insertion rule.
"""

from __future__ import annotations

from gotoc.errors import CompileError, Diagnostic, DiagnosticLabel, Severity
from gotoc.source import Span
from gotoc.tokens import (
    KEYWORDS,
    SEMICOLON_INSERTED_AFTER,
    Token,
    TokenKind,
)

# Longest first so that "<<=" wins over "<<" and "<".
_OPERATORS: list[tuple[str, TokenKind]] = [
    ("<<=", TokenKind.OP_ASSIGN),
    (">>=", TokenKind.OP_ASSIGN),
    ("&^=", TokenKind.OP_ASSIGN),
    ("&^", TokenKind.AND_NOT),
    ("<<", TokenKind.SHL),
    (">>", TokenKind.SHR),
    ("&&", TokenKind.AND),
    ("||", TokenKind.OR),
    ("==", TokenKind.EQUAL),
    ("!=", TokenKind.NOT_EQUAL),
    ("<=", TokenKind.LESS_EQUAL),
    (">=", TokenKind.GREATER_EQUAL),
    (":=", TokenKind.DEFINE),
    ("++", TokenKind.INC),
    ("--", TokenKind.DEC),
    ("+=", TokenKind.OP_ASSIGN),
    ("-=", TokenKind.OP_ASSIGN),
    ("*=", TokenKind.OP_ASSIGN),
    ("/=", TokenKind.OP_ASSIGN),
    ("%=", TokenKind.OP_ASSIGN),
    ("&=", TokenKind.OP_ASSIGN),
    ("|=", TokenKind.OP_ASSIGN),
    ("^=", TokenKind.OP_ASSIGN),
    ("+", TokenKind.PLUS),
    ("-", TokenKind.MINUS),
    ("*", TokenKind.STAR),
    ("/", TokenKind.SLASH),
    ("%", TokenKind.PERCENT),
    ("&", TokenKind.AMP),
    ("|", TokenKind.PIPE),
    ("^", TokenKind.CARET),
    ("!", TokenKind.BANG),
    ("<", TokenKind.LESS),
    (">", TokenKind.GREATER),
    ("=", TokenKind.ASSIGN),
    ("(", TokenKind.LPAREN),
    (")", TokenKind.RPAREN),
    ("[", TokenKind.LBRACKET),
    ("]", TokenKind.RBRACKET),
    ("{", TokenKind.LBRACE),
    ("}", TokenKind.RBRACE),
    (",", TokenKind.COMMA),
    (";", TokenKind.SEMICOLON),
    (".", TokenKind.DOT),
    (":", TokenKind.COLON),
]


class Lexer:
    """Tokenizes Go-subset source code."""

    def __init__(self, source: str, filename: str = "<stdin>") -> None:
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.col = 1
        self.prev_token: Token | None = None
        self.tokens: list[Token] = []
        self.diagnostics: list[Diagnostic] = []

    def lex(self) -> list[Token]:
        """Tokenize the entire source and return the token list."""
        while self.pos < len(self.source):
            ch = self.source[self.pos]
            if ch in (' ', '\t', '\r'):
                self._advance()
            elif ch == '\n':
                self._handle_newline()
            elif ch == '/' and self._peek(1) == '/':
                self._skip_line_comment()
            elif ch == '/' and self._peek(1) == '*':
                self._skip_block_comment()
            elif ch == '"':
                self._lex_string()
            elif ch == '`':
                self._lex_raw_string()
            elif ch == "'":
                self._lex_char()
            elif ch.isdigit() or (ch == '.' and self._peek(1).isdigit()):
                self._lex_number()
            elif ch.isalpha() or ch == '_':
                self._lex_identifier()
            else:
                self._lex_operator_or_punct()

        # A final line without a newline still ends its statement
        self._maybe_insert_semicolon(self.line, self.col)
        self._emit(TokenKind.EOF, "", self.line, self.col)

        if self.diagnostics:
            raise CompileError(self.diagnostics)
        return self.tokens

    # ── Helpers ───────────────────────────────────────────────────

    def _peek(self, offset: int = 0) -> str:
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def _advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        if ch == '\n':
            self.line += 1
            self.col = 1
        else:
            self.col += 1
        return ch

    def _emit(self, kind: TokenKind, value: str, start_line: int, start_col: int) -> Token:
        end_col = self.col - 1 if self.col > 1 else 1
        span = Span(self.filename, start_line, start_col, self.line, end_col)
        tok = Token(kind, value, span)
        self.tokens.append(tok)
        self.prev_token = tok
        return tok

    def _error(self, message: str, line: int, col: int, code: str = "E100") -> None:
        span = Span(self.filename, line, col, line, col)
        self.diagnostics.append(
            Diagnostic(
                severity=Severity.ERROR,
                code=code,
                message=message,
                labels=[DiagnosticLabel(span=span, message="")],
            )
        )

    # ── Newlines and semicolons ──────────────────────────────────

    def _maybe_insert_semicolon(self, line: int, col: int) -> None:
        if self.prev_token is not None and self.prev_token.kind in SEMICOLON_INSERTED_AFTER:
            self._emit(TokenKind.SEMICOLON, "\n", line, col)

    def _handle_newline(self) -> None:
        start_line = self.line
        start_col = self.col
        self._advance()
        self._maybe_insert_semicolon(start_line, start_col)

    # ── Comments ─────────────────────────────────────────────────

    def _skip_line_comment(self) -> None:
        while self.pos < len(self.source) and self.source[self.pos] != '\n':
            self._advance()

    def _skip_block_comment(self) -> None:
        start_line = self.line
        start_col = self.col
        self._advance()  # /
        self._advance()  # *
        saw_newline = False
        while self.pos < len(self.source):
            if self.source[self.pos] == '*' and self._peek(1) == '/':
                self._advance()
                self._advance()
                # A comment spanning lines acts like a newline
                if saw_newline:
                    self._maybe_insert_semicolon(start_line, start_col)
                return
            if self._advance() == '\n':
                saw_newline = True
        self._error("unterminated block comment", start_line, start_col, "E102")

    # ── Strings and runes ────────────────────────────────────────

    def _lex_quoted(self, quote: str, kind: TokenKind, what: str) -> None:
        start_line = self.line
        start_col = self.col
        text = [self._advance()]  # opening quote
        while self.pos < len(self.source):
            ch = self.source[self.pos]
            if ch == '\n':
                break
            if ch == '\\':
                text.append(self._advance())
                if self.pos < len(self.source) and self.source[self.pos] != '\n':
                    text.append(self._advance())
                continue
            text.append(self._advance())
            if ch == quote:
                self._emit(kind, ''.join(text), start_line, start_col)
                return
        self._error(f"unterminated {what} literal", start_line, start_col, "E101")

    def _lex_string(self) -> None:
        self._lex_quoted('"', TokenKind.STRING_LIT, "string")

    def _lex_char(self) -> None:
        self._lex_quoted("'", TokenKind.CHAR_LIT, "rune")

    def _lex_raw_string(self) -> None:
        start_line = self.line
        start_col = self.col
        text = [self._advance()]  # opening backtick
        while self.pos < len(self.source):
            ch = self._advance()
            text.append(ch)
            if ch == '`':
                self._emit(TokenKind.STRING_LIT, ''.join(text), start_line, start_col)
                return
        self._error("unterminated raw string literal", start_line, start_col, "E101")

    # ── Numbers ──────────────────────────────────────────────────

    def _lex_number(self) -> None:
        start_line = self.line
        start_col = self.col
        text = []

        # 0x, 0b, 0o prefixes
        if self.source[self.pos] == '0' and self._peek(1) in 'xXbBoO':
            text.append(self._advance())  # 0
            text.append(self._advance())  # x / b / o
            while self.pos < len(self.source) and (
                self.source[self.pos].isalnum() or self.source[self.pos] == '_'
            ):
                text.append(self._advance())
            self._emit(TokenKind.INT_LIT, ''.join(text), start_line, start_col)
            return

        kind = TokenKind.INT_LIT
        while self.pos < len(self.source) and (
            self.source[self.pos].isdigit() or self.source[self.pos] == '_'
        ):
            text.append(self._advance())

        if self.pos < len(self.source) and self.source[self.pos] == '.':
            kind = TokenKind.FLOAT_LIT
            text.append(self._advance())
            while self.pos < len(self.source) and (
                self.source[self.pos].isdigit() or self.source[self.pos] == '_'
            ):
                text.append(self._advance())

        if self.pos < len(self.source) and self.source[self.pos] in 'eE':
            kind = TokenKind.FLOAT_LIT
            text.append(self._advance())
            if self.pos < len(self.source) and self.source[self.pos] in '+-':
                text.append(self._advance())
            while self.pos < len(self.source) and self.source[self.pos].isdigit():
                text.append(self._advance())

        self._emit(kind, ''.join(text), start_line, start_col)

    # ── Identifiers and Keywords ─────────────────────────────────

    def _lex_identifier(self) -> None:
        start_line = self.line
        start_col = self.col
        text = []
        while self.pos < len(self.source) and (
            self.source[self.pos].isalnum() or self.source[self.pos] == '_'
        ):
            text.append(self._advance())
        word = ''.join(text)
        self._emit(KEYWORDS.get(word, TokenKind.IDENTIFIER), word, start_line, start_col)

    # ── Operators and Punctuation ────────────────────────────────

    def _lex_operator_or_punct(self) -> None:
        start_line = self.line
        start_col = self.col
        for text, kind in _OPERATORS:
            if self.source.startswith(text, self.pos):
                for _ in text:
                    self._advance()
                self._emit(kind, text, start_line, start_col)
                return
        ch = self._advance()
        self._error(f"unexpected character: {ch!r}", start_line, start_col)
