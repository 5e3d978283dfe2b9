"""Translation pipeline: Go-subset source -> tokens -> File -> C text."""

from __future__ import annotations

from gotoc.ast_nodes import File
from gotoc.c_emitter import CEmitter
from gotoc.lexer import Lexer
from gotoc.parser import Parser


def parse_source(source: str, filename: str = "<stdin>") -> File:
    """Lex and parse *source*. Raises CompileError with every diagnostic found."""
    tokens = Lexer(source, filename).lex()
    return Parser(tokens, filename).parse()


def translate(source: str, filename: str = "<stdin>", *, indent_width: int = 4) -> str:
    """Translate Go-subset source text to C source text.

    Raises CompileError for lexer and parser problems and EmitError (a
    CompileError) for constructs the emitter does not support.
    """
    file = parse_source(source, filename)
    return CEmitter(file, indent_width=indent_width).emit()
