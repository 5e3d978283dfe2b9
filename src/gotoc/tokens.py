"""Token kinds and token representation for the Go-subset lexer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gotoc.source import Span


class TokenKind(Enum):
    # Keywords
    PACKAGE = auto()
    IMPORT = auto()
    FUNC = auto()
    VAR = auto()
    TYPE = auto()
    STRUCT = auto()
    IF = auto()
    ELSE = auto()
    FOR = auto()
    RETURN = auto()

    # Keywords of the full language the subset rejects
    UNSUPPORTED_KEYWORD = auto()

    # Literals
    INT_LIT = auto()
    FLOAT_LIT = auto()
    STRING_LIT = auto()
    CHAR_LIT = auto()

    # Arithmetic and bitwise operators
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    PERCENT = auto()
    AMP = auto()
    PIPE = auto()
    CARET = auto()
    SHL = auto()
    SHR = auto()
    AND_NOT = auto()

    # Logical and comparison operators
    AND = auto()
    OR = auto()
    BANG = auto()
    EQUAL = auto()
    NOT_EQUAL = auto()
    LESS = auto()
    GREATER = auto()
    LESS_EQUAL = auto()
    GREATER_EQUAL = auto()

    # Assignment family
    ASSIGN = auto()
    DEFINE = auto()
    OP_ASSIGN = auto()  # += -= *= ... (value holds the operator text)
    INC = auto()
    DEC = auto()

    # Punctuation
    LPAREN = auto()
    RPAREN = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    LBRACE = auto()
    RBRACE = auto()
    COMMA = auto()
    SEMICOLON = auto()
    DOT = auto()
    COLON = auto()

    # Identifiers
    IDENTIFIER = auto()

    # Special
    EOF = auto()


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: str
    span: Span


KEYWORDS: dict[str, TokenKind] = {
    "package": TokenKind.PACKAGE,
    "import": TokenKind.IMPORT,
    "func": TokenKind.FUNC,
    "var": TokenKind.VAR,
    "type": TokenKind.TYPE,
    "struct": TokenKind.STRUCT,
    "if": TokenKind.IF,
    "else": TokenKind.ELSE,
    "for": TokenKind.FOR,
    "return": TokenKind.RETURN,
    "break": TokenKind.UNSUPPORTED_KEYWORD,
    "case": TokenKind.UNSUPPORTED_KEYWORD,
    "chan": TokenKind.UNSUPPORTED_KEYWORD,
    "const": TokenKind.UNSUPPORTED_KEYWORD,
    "continue": TokenKind.UNSUPPORTED_KEYWORD,
    "default": TokenKind.UNSUPPORTED_KEYWORD,
    "defer": TokenKind.UNSUPPORTED_KEYWORD,
    "fallthrough": TokenKind.UNSUPPORTED_KEYWORD,
    "go": TokenKind.UNSUPPORTED_KEYWORD,
    "goto": TokenKind.UNSUPPORTED_KEYWORD,
    "interface": TokenKind.UNSUPPORTED_KEYWORD,
    "map": TokenKind.UNSUPPORTED_KEYWORD,
    "range": TokenKind.UNSUPPORTED_KEYWORD,
    "select": TokenKind.UNSUPPORTED_KEYWORD,
    "switch": TokenKind.UNSUPPORTED_KEYWORD,
}

# A newline directly after one of these ends the statement.
SEMICOLON_INSERTED_AFTER: frozenset[TokenKind] = frozenset({
    TokenKind.IDENTIFIER,
    TokenKind.INT_LIT,
    TokenKind.FLOAT_LIT,
    TokenKind.STRING_LIT,
    TokenKind.CHAR_LIT,
    TokenKind.RETURN,
    TokenKind.INC,
    TokenKind.DEC,
    TokenKind.RPAREN,
    TokenKind.RBRACKET,
    TokenKind.RBRACE,
})
