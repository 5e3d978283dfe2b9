"""AST node definitions for the Go subset.

Every node carries a span for diagnostics. Trees built by hand (tests,
other front ends) may leave it at ``NO_SPAN``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from gotoc.source import NO_SPAN, Span

# ── Expressions ──────────────────────────────────────────────────


@dataclass(frozen=True)
class BasicLit:
    value: str  # raw source spelling, quotes included
    span: Span = NO_SPAN


@dataclass(frozen=True)
class Ident:
    name: str
    span: Span = NO_SPAN


@dataclass(frozen=True)
class SelectorExpr:
    x: Expr
    sel: str
    span: Span = NO_SPAN


@dataclass(frozen=True)
class BinaryExpr:
    left: Expr
    op: str
    right: Expr
    span: Span = NO_SPAN


@dataclass(frozen=True)
class UnaryExpr:
    op: str
    operand: Expr
    span: Span = NO_SPAN


@dataclass(frozen=True)
class StarExpr:
    """Pointer dereference ``*operand``."""

    operand: Expr
    span: Span = NO_SPAN


@dataclass(frozen=True)
class IndexExpr:
    x: Expr
    index: Expr
    span: Span = NO_SPAN


@dataclass(frozen=True)
class CallExpr:
    func: Expr
    args: list[Expr] = field(default_factory=list)
    span: Span = NO_SPAN


Expr = Union[
    BasicLit, Ident, SelectorExpr, BinaryExpr, UnaryExpr,
    StarExpr, IndexExpr, CallExpr,
]


# ── Type expressions ─────────────────────────────────────────────


@dataclass(frozen=True)
class PointerType:
    pointee: TypeExpr
    span: Span = NO_SPAN


@dataclass(frozen=True)
class ArrayType:
    elem: TypeExpr
    length: Expr
    span: Span = NO_SPAN


@dataclass(frozen=True)
class Field:
    """A parameter, result or struct field: ``name1, name2 Type``."""

    names: list[str]
    type: TypeExpr
    span: Span = NO_SPAN


@dataclass(frozen=True)
class StructType:
    fields: list[Field] = field(default_factory=list)
    span: Span = NO_SPAN


TypeExpr = Union[Ident, SelectorExpr, PointerType, ArrayType, StructType]


# ── Statements ───────────────────────────────────────────────────


@dataclass(frozen=True)
class ExprStmt:
    expr: Expr
    span: Span = NO_SPAN


@dataclass(frozen=True)
class AssignStmt:
    lhs: list[Expr]
    op: str  # = := += -= ...
    rhs: list[Expr]
    span: Span = NO_SPAN


@dataclass(frozen=True)
class DeclStmt:
    decl: Decl
    span: Span = NO_SPAN


@dataclass(frozen=True)
class ReturnStmt:
    results: list[Expr] = field(default_factory=list)
    span: Span = NO_SPAN


@dataclass(frozen=True)
class IncDecStmt:
    x: Expr
    op: str  # ++ or --
    span: Span = NO_SPAN


@dataclass(frozen=True)
class BlockStmt:
    stmts: list[Stmt] = field(default_factory=list)
    span: Span = NO_SPAN


@dataclass(frozen=True)
class IfStmt:
    cond: Expr
    body: BlockStmt
    else_: IfStmt | BlockStmt | None = None
    span: Span = NO_SPAN


@dataclass(frozen=True)
class ForStmt:
    init: Stmt | None
    cond: Expr | None
    post: Stmt | None
    body: BlockStmt
    span: Span = NO_SPAN


Stmt = Union[
    ExprStmt, AssignStmt, DeclStmt, ReturnStmt, IncDecStmt,
    IfStmt, ForStmt,
]


# ── Declarations ─────────────────────────────────────────────────


@dataclass(frozen=True)
class FuncDecl:
    name: str
    params: list[Field]
    results: list[Field]
    body: BlockStmt
    span: Span = NO_SPAN


@dataclass(frozen=True)
class VarDecl:
    names: list[str]
    type: TypeExpr
    span: Span = NO_SPAN


@dataclass(frozen=True)
class ImportDecl:
    path: str  # quoted, as written in the source
    span: Span = NO_SPAN


@dataclass(frozen=True)
class TypeDecl:
    name: str
    type: TypeExpr
    span: Span = NO_SPAN


Decl = Union[FuncDecl, VarDecl, ImportDecl, TypeDecl]


@dataclass(frozen=True)
class File:
    package: str
    decls: list[Decl]
    span: Span = NO_SPAN
