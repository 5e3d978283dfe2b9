"""Generate C source text from a parsed Go-subset File."""

from __future__ import annotations

from typing import TextIO

from gotoc.ast_nodes import (
    ArrayType,
    AssignStmt,
    BasicLit,
    BinaryExpr,
    BlockStmt,
    CallExpr,
    Decl,
    DeclStmt,
    Expr,
    ExprStmt,
    Field,
    File,
    ForStmt,
    FuncDecl,
    Ident,
    IfStmt,
    ImportDecl,
    IncDecStmt,
    IndexExpr,
    PointerType,
    ReturnStmt,
    SelectorExpr,
    StarExpr,
    Stmt,
    StructType,
    TypeDecl,
    TypeExpr,
    UnaryExpr,
    VarDecl,
)
from gotoc.errors import EmitError
from gotoc.printer import Printer
from gotoc.source import NO_SPAN, Span


class CEmitter:
    """Emit C source from a Go-subset File.

    Every emission pass gets a fresh Printer, so one emitter can be
    reused and separate emitters never share state. Unsupported node
    shapes raise EmitError; nothing is returned for a partial pass.
    """

    def __init__(self, file: File, *, indent_width: int = 4) -> None:
        self._file = file
        self._indent_width = indent_width

    # ── Public API ─────────────────────────────────────────────

    def emit(self) -> str:
        """Generate the complete C source for the file."""
        p = Printer(self._indent_width)
        for decl in self._file.decls:
            self.emit_decl(decl, p)
        return p.getvalue()

    def emit_to(self, sink: TextIO) -> None:
        """Render the whole file, then write it to *sink* in one call."""
        text = self.emit()
        sink.write(text)

    # ── Declarations ───────────────────────────────────────────

    def emit_decl(self, decl: Decl, p: Printer) -> None:
        if isinstance(decl, FuncDecl):
            self._emit_func(decl, p)
        elif isinstance(decl, VarDecl):
            name = self._single_name(decl.names, "variable declaration", decl.span)
            p.write_line(f"{self._declarator(decl.type, name)};")
        elif isinstance(decl, ImportDecl):
            p.write_line(f"#include <{_unquote(decl.path, decl.span)}.h>")
        elif isinstance(decl, TypeDecl):
            self._emit_type_decl(decl, p)
        else:
            raise EmitError(
                f"unsupported declaration: {type(decl).__name__}",
                _span(decl), code="E302",
            )

    def _emit_func(self, fd: FuncDecl, p: Printer) -> None:
        if len(fd.results) > 1:
            raise EmitError(
                f"function '{fd.name}' declares {len(fd.results)} results",
                fd.span, code="E303",
                notes=["C functions return at most one value"],
            )
        ret = self._type(fd.results[0].type) if fd.results else "void"
        params = ", ".join(self._field(f, "parameter") for f in fd.params)
        p.write(f"{p.margin}{ret} {fd.name}({params}) ")
        self.emit_block(fd.body, p)

    def _emit_type_decl(self, td: TypeDecl, p: Printer) -> None:
        if isinstance(td.type, StructType):
            p.write_line(f"struct {td.name} {{")
            p.indent()
            for f in td.type.fields:
                p.write_line(f"{self._field(f, 'struct field')};")
            p.unindent()
            p.write_line("};")
        else:
            p.write_line(f"typedef {self._declarator(td.type, td.name)};")

    # ── Types and declarators ──────────────────────────────────

    def _type(self, te: TypeExpr) -> str:
        """Render a type in C spelling; pointers nest as ``T**``."""
        if isinstance(te, Ident):
            return te.name
        if isinstance(te, SelectorExpr):
            return self.emit_expr(te)
        if isinstance(te, PointerType):
            return f"{self._type(te.pointee)}*"
        if isinstance(te, ArrayType):
            raise EmitError(
                "array types are only supported directly in a declaration",
                te.span, code="E306",
            )
        if isinstance(te, StructType):
            raise EmitError(
                "anonymous struct types are not supported", te.span, code="E306",
            )
        raise EmitError(
            f"unsupported type expression: {type(te).__name__}",
            _span(te), code="E306",
        )

    def _declarator(self, te: TypeExpr, name: str) -> str:
        """``T name``, ``T* name`` or ``T name[N]...`` for arrays."""
        dims: list[str] = []
        while isinstance(te, ArrayType):
            dims.append(f"[{self.emit_expr(te.length)}]")
            te = te.elem
        return f"{self._type(te)} {name}{''.join(dims)}"

    def _field(self, f: Field, what: str) -> str:
        return self._declarator(f.type, self._single_name(f.names, what, f.span))

    @staticmethod
    def _single_name(names: list[str], what: str, span: Span) -> str:
        if len(names) != 1:
            shown = ", ".join(names) if names else "no name"
            raise EmitError(
                f"{what} must declare exactly one name (got {shown})",
                span, code="E305",
            )
        return names[0]

    # ── Blocks and statements ──────────────────────────────────

    def emit_block(self, block: BlockStmt, p: Printer) -> None:
        """Write ``{``, the indented statements and a closing ``}`` line.

        The opening brace continues the line the caller started.
        """
        p.write("{\n")
        p.indent()
        for stmt in block.stmts:
            self.emit_stmt(stmt, p)
        p.unindent()
        p.write_line("}")

    def emit_stmt(self, stmt: Stmt, p: Printer) -> None:
        if isinstance(stmt, (ExprStmt, AssignStmt, IncDecStmt)):
            p.write_line(f"{self.stmt_fragment(stmt)};")
        elif isinstance(stmt, ReturnStmt):
            if len(stmt.results) != 1:
                raise EmitError(
                    f"return must have exactly one value (got {len(stmt.results)})",
                    stmt.span, code="E304",
                )
            p.write_line(f"return {self.emit_expr(stmt.results[0])};")
        elif isinstance(stmt, DeclStmt):
            if not isinstance(stmt.decl, (VarDecl, TypeDecl)):
                raise EmitError(
                    f"{type(stmt.decl).__name__} cannot be declared inside a function",
                    stmt.span, code="E302",
                )
            self.emit_decl(stmt.decl, p)
        elif isinstance(stmt, IfStmt):
            self._emit_if(stmt, p, "if (")
        elif isinstance(stmt, ForStmt):
            self._emit_for(stmt, p)
        else:
            raise EmitError(
                f"unsupported statement: {type(stmt).__name__}",
                _span(stmt), code="E301",
            )

    def _emit_if(self, stmt: IfStmt, p: Printer, head: str) -> None:
        p.write(f"{p.margin}{head}{self.emit_expr(stmt.cond)}) ")
        self.emit_block(stmt.body, p)
        if isinstance(stmt.else_, IfStmt):
            self._emit_if(stmt.else_, p, "else if(")
        elif isinstance(stmt.else_, BlockStmt):
            p.write(f"{p.margin}else ")
            self.emit_block(stmt.else_, p)
        elif stmt.else_ is not None:
            raise EmitError(
                f"unsupported else branch: {type(stmt.else_).__name__}",
                stmt.span, code="E301",
            )

    def _emit_for(self, stmt: ForStmt, p: Printer) -> None:
        if stmt.init is None and stmt.post is None:
            cond = self.emit_expr(stmt.cond) if stmt.cond is not None else "1"
            p.write(f"{p.margin}while ({cond}) ")
        elif stmt.init is not None and stmt.cond is not None and stmt.post is not None:
            init = self.stmt_fragment(stmt.init)
            post = self.stmt_fragment(stmt.post)
            p.write(f"{p.margin}for ({init}; {self.emit_expr(stmt.cond)}; {post}) ")
        else:
            raise EmitError(
                "for loop needs init, condition and post clauses, or a condition alone",
                stmt.span, code="E307",
            )
        self.emit_block(stmt.body, p)

    def stmt_fragment(self, stmt: Stmt) -> str:
        """Render a simple statement without indentation or terminator.

        Used for ordinary statement lines and for the init and post
        clauses of a for header.
        """
        if isinstance(stmt, ExprStmt):
            return self.emit_expr(stmt.expr)
        if isinstance(stmt, AssignStmt):
            if len(stmt.lhs) != 1 or len(stmt.rhs) != 1:
                raise EmitError(
                    f"assignment must have exactly one target and one value "
                    f"(got {len(stmt.lhs)} and {len(stmt.rhs)})",
                    stmt.span, code="E304",
                )
            return f"{self.emit_expr(stmt.lhs[0])} {stmt.op} {self.emit_expr(stmt.rhs[0])}"
        if isinstance(stmt, IncDecStmt):
            return f"{self.emit_expr(stmt.x)}{stmt.op}"
        raise EmitError(
            f"{type(stmt).__name__} cannot be used as a simple statement",
            _span(stmt), code="E301",
        )

    # ── Expressions ────────────────────────────────────────────

    def emit_expr(self, expr: Expr) -> str:
        """Render an expression as a single-line fragment.

        Binary expressions are always parenthesized, so no precedence
        table is needed.
        """
        if isinstance(expr, BasicLit):
            return expr.value
        if isinstance(expr, Ident):
            return expr.name
        if isinstance(expr, SelectorExpr):
            # Pointer bases keep '.', the tree carries no type information
            return f"{self.emit_expr(expr.x)}.{expr.sel}"
        if isinstance(expr, BinaryExpr):
            return f"({self.emit_expr(expr.left)}{expr.op}{self.emit_expr(expr.right)})"
        if isinstance(expr, UnaryExpr):
            return f"{expr.op}{self.emit_expr(expr.operand)}"
        if isinstance(expr, StarExpr):
            return f"*{self.emit_expr(expr.operand)}"
        if isinstance(expr, IndexExpr):
            return f"{self.emit_expr(expr.x)}[{self.emit_expr(expr.index)}]"
        if isinstance(expr, CallExpr):
            args = ", ".join(self.emit_expr(a) for a in expr.args)
            return f"{self.emit_expr(expr.func)}({args})"
        raise EmitError(
            f"unsupported expression: {type(expr).__name__}",
            _span(expr), code="E300",
        )


def _unquote(path: str, span: Span) -> str:
    if len(path) >= 2 and path[0] == path[-1] and path[0] in ('"', '`'):
        return path[1:-1]
    raise EmitError(f"malformed import path: {path}", span, code="E302")


def _span(node: object) -> Span:
    """Span of an arbitrary object, for nodes outside the supported set."""
    span = getattr(node, "span", None)
    return span if isinstance(span, Span) else NO_SPAN
