"""Shared test helpers for the gotoc test suite."""

from __future__ import annotations

import pytest

from gotoc.ast_nodes import File
from gotoc.c_emitter import CEmitter
from gotoc.driver import parse_source
from gotoc.errors import EmitError


def parse(source: str) -> File:
    """Lex and parse a Go-subset source string."""
    return parse_source(source, "test.go")


def emit(source: str) -> str:
    """Parse source and emit C for it."""
    return CEmitter(parse(source)).emit()


def emit_fails(source: str, error_code: str) -> EmitError:
    """Parse source, asserting that emission aborts with the given code."""
    file = parse(source)
    with pytest.raises(EmitError) as exc_info:
        CEmitter(file).emit()
    assert exc_info.value.code == error_code, str(exc_info.value)
    return exc_info.value


def func(body: str, signature: str = "func f()") -> str:
    """Wrap statement lines in a package clause and a function."""
    return f"package main\n\n{signature} {{\n{body}}}\n"


def emit_tree_fails(file: File, error_code: str) -> EmitError:
    """Like emit_fails, for trees built without the parser."""
    with pytest.raises(EmitError) as exc_info:
        CEmitter(file).emit()
    assert exc_info.value.code == error_code, str(exc_info.value)
    return exc_info.value
