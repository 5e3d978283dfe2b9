"""Tests for the Go-subset lexer."""

from __future__ import annotations

import pytest

from gotoc.errors import CompileError
from gotoc.lexer import Lexer
from gotoc.tokens import TokenKind


def lex(source: str) -> list[tuple[TokenKind, str]]:
    """Helper: lex source and return (kind, value) pairs, excluding EOF."""
    tokens = Lexer(source).lex()
    return [(t.kind, t.value) for t in tokens if t.kind != TokenKind.EOF]


def kinds(source: str) -> list[TokenKind]:
    """Helper: lex source and return just the token kinds, excluding EOF."""
    tokens = Lexer(source).lex()
    return [t.kind for t in tokens if t.kind != TokenKind.EOF]


SEMI = (TokenKind.SEMICOLON, "\n")


class TestLexerBasic:
    def test_empty_source(self):
        tokens = Lexer("").lex()
        assert len(tokens) == 1
        assert tokens[0].kind == TokenKind.EOF

    def test_identifier_ends_statement_at_eof(self):
        assert lex("hello") == [(TokenKind.IDENTIFIER, "hello"), SEMI]

    def test_keywords(self):
        for kw, kind in [("package", TokenKind.PACKAGE), ("import", TokenKind.IMPORT),
                         ("func", TokenKind.FUNC), ("var", TokenKind.VAR),
                         ("type", TokenKind.TYPE), ("struct", TokenKind.STRUCT),
                         ("if", TokenKind.IF), ("else", TokenKind.ELSE),
                         ("for", TokenKind.FOR)]:
            assert kinds(kw) == [kind], kw

    def test_unsupported_keywords(self):
        for kw in ["switch", "go", "defer", "const", "break", "range"]:
            assert kinds(kw)[0] == TokenKind.UNSUPPORTED_KEYWORD, kw

    def test_bool_and_nil_are_identifiers(self):
        assert kinds("true false nil") == [
            TokenKind.IDENTIFIER, TokenKind.IDENTIFIER, TokenKind.IDENTIFIER,
            TokenKind.SEMICOLON,
        ]

    def test_span_positions(self):
        tokens = Lexer("a\n  bc", "x.go").lex()
        bc = [t for t in tokens if t.value == "bc"][0]
        assert bc.span.file == "x.go"
        assert (bc.span.start_line, bc.span.start_col) == (2, 3)
        assert bc.span.end_col == 4


class TestLiterals:
    def test_integer(self):
        assert lex("42")[0] == (TokenKind.INT_LIT, "42")

    def test_hex_kept_verbatim(self):
        assert lex("0xFF")[0] == (TokenKind.INT_LIT, "0xFF")

    def test_float(self):
        assert lex("3.14")[0] == (TokenKind.FLOAT_LIT, "3.14")

    def test_exponent(self):
        assert lex("1e9")[0] == (TokenKind.FLOAT_LIT, "1e9")

    def test_string_keeps_quotes_and_escapes(self):
        assert lex(r'"a\n\"b"')[0] == (TokenKind.STRING_LIT, r'"a\n\"b"')

    def test_raw_string(self):
        assert lex("`a\\b`")[0] == (TokenKind.STRING_LIT, "`a\\b`")

    def test_rune(self):
        assert lex("'a'")[0] == (TokenKind.CHAR_LIT, "'a'")

    def test_unterminated_string(self):
        with pytest.raises(CompileError) as exc_info:
            Lexer('"abc\n').lex()
        assert exc_info.value.diagnostics[0].code == "E101"

    def test_unterminated_raw_string(self):
        with pytest.raises(CompileError) as exc_info:
            Lexer("`abc").lex()
        assert exc_info.value.diagnostics[0].code == "E101"


class TestOperators:
    def test_assignment_family(self):
        assert kinds("x := y")[:3] == [
            TokenKind.IDENTIFIER, TokenKind.DEFINE, TokenKind.IDENTIFIER,
        ]
        assert lex("x <<= 1")[1] == (TokenKind.OP_ASSIGN, "<<=")
        assert lex("x += 1")[1] == (TokenKind.OP_ASSIGN, "+=")

    def test_longest_match(self):
        assert [v for _, v in lex("a&^b<<c<=d")][:7] == ["a", "&^", "b", "<<", "c", "<=", "d"]

    def test_inc_dec(self):
        assert lex("i++") == [(TokenKind.IDENTIFIER, "i"), (TokenKind.INC, "++"), SEMI]
        assert lex("i--")[1] == (TokenKind.DEC, "--")

    def test_logical(self):
        assert kinds("a && !b || c")[:6] == [
            TokenKind.IDENTIFIER, TokenKind.AND, TokenKind.BANG,
            TokenKind.IDENTIFIER, TokenKind.OR, TokenKind.IDENTIFIER,
        ]

    def test_unexpected_character(self):
        with pytest.raises(CompileError) as exc_info:
            Lexer("a @ b").lex()
        diag = exc_info.value.diagnostics[0]
        assert diag.code == "E100"
        assert "'@'" in diag.message

    def test_errors_are_collected(self):
        with pytest.raises(CompileError) as exc_info:
            Lexer("@\n#\n").lex()
        assert len(exc_info.value.diagnostics) == 2


class TestSemicolonInsertion:
    def test_after_identifier(self):
        assert lex("a\nb") == [
            (TokenKind.IDENTIFIER, "a"), SEMI, (TokenKind.IDENTIFIER, "b"), SEMI,
        ]

    def test_not_after_operator(self):
        assert kinds("a +\nb") == [
            TokenKind.IDENTIFIER, TokenKind.PLUS, TokenKind.IDENTIFIER,
            TokenKind.SEMICOLON,
        ]

    def test_not_after_open_brace(self):
        assert kinds("{\n}") == [TokenKind.LBRACE, TokenKind.RBRACE, TokenKind.SEMICOLON]

    def test_after_return_and_closers(self):
        assert kinds("return\n")[-1] == TokenKind.SEMICOLON
        assert kinds("f()\n")[-1] == TokenKind.SEMICOLON
        assert kinds("a[0]\n")[-1] == TokenKind.SEMICOLON

    def test_blank_lines_do_not_repeat(self):
        assert kinds("a\n\n\nb").count(TokenKind.SEMICOLON) == 2

    def test_explicit_semicolon(self):
        assert lex("a; b")[1] == (TokenKind.SEMICOLON, ";")


class TestComments:
    def test_line_comment_skipped(self):
        assert lex("a // note\nb") == [
            (TokenKind.IDENTIFIER, "a"), SEMI, (TokenKind.IDENTIFIER, "b"), SEMI,
        ]

    def test_inline_block_comment(self):
        assert kinds("a /* x */ b") == [
            TokenKind.IDENTIFIER, TokenKind.IDENTIFIER, TokenKind.SEMICOLON,
        ]

    def test_multiline_block_comment_acts_as_newline(self):
        assert kinds("a /* x\ny */ b") == [
            TokenKind.IDENTIFIER, TokenKind.SEMICOLON,
            TokenKind.IDENTIFIER, TokenKind.SEMICOLON,
        ]

    def test_unterminated_block_comment(self):
        with pytest.raises(CompileError) as exc_info:
            Lexer("/* never closed").lex()
        assert exc_info.value.diagnostics[0].code == "E102"
