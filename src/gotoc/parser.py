"""Parser for the Go subset accepted by gotoc.

Transforms a token stream into an AST using a Pratt expression parser
for expressions and recursive descent for declarations and statements.
"""

from __future__ import annotations

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
from gotoc.errors import CompileError, Diagnostic, DiagnosticLabel, Severity
from gotoc.source import Span
from gotoc.tokens import Token, TokenKind

# ── Binding powers for Pratt parser ─────────────────────────────

# (left_bp, right_bp) for infix operators, following Go's five levels
_INFIX_BP: dict[TokenKind, tuple[int, int]] = {
    TokenKind.OR: (1, 2),
    TokenKind.AND: (3, 4),
    TokenKind.EQUAL: (5, 6),
    TokenKind.NOT_EQUAL: (5, 6),
    TokenKind.LESS: (5, 6),
    TokenKind.GREATER: (5, 6),
    TokenKind.LESS_EQUAL: (5, 6),
    TokenKind.GREATER_EQUAL: (5, 6),
    TokenKind.PLUS: (7, 8),
    TokenKind.MINUS: (7, 8),
    TokenKind.PIPE: (7, 8),
    TokenKind.CARET: (7, 8),
    TokenKind.STAR: (9, 10),
    TokenKind.SLASH: (9, 10),
    TokenKind.PERCENT: (9, 10),
    TokenKind.SHL: (9, 10),
    TokenKind.SHR: (9, 10),
    TokenKind.AMP: (9, 10),
    TokenKind.AND_NOT: (9, 10),
}

_PREFIX_BP = 11  # right bp for unary operators
_POSTFIX_BP = 13  # left bp for ., (), []

_UNARY_OPS = frozenset({
    TokenKind.MINUS, TokenKind.PLUS, TokenKind.BANG,
    TokenKind.CARET, TokenKind.AMP,
})

_LITERALS = frozenset({
    TokenKind.INT_LIT, TokenKind.FLOAT_LIT,
    TokenKind.STRING_LIT, TokenKind.CHAR_LIT,
})

_ASSIGN_OPS = frozenset({
    TokenKind.ASSIGN, TokenKind.DEFINE, TokenKind.OP_ASSIGN,
})

_TYPE_START = frozenset({
    TokenKind.IDENTIFIER, TokenKind.STAR, TokenKind.LBRACKET,
    TokenKind.STRUCT, TokenKind.LPAREN,
})


class _ParseError(Exception):
    """Internal signal to abandon the current construct and resynchronize."""


class Parser:
    """Parses a list of tokens into a File AST."""

    def __init__(self, tokens: list[Token], filename: str = "<stdin>") -> None:
        self.tokens = tokens
        self.pos = 0
        self.filename = filename
        self.diagnostics: list[Diagnostic] = []

    # ── Token access ─────────────────────────────────────────────

    def _current(self) -> Token:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return self.tokens[-1]  # EOF

    def _peek(self, offset: int = 0) -> Token:
        idx = self.pos + offset
        if idx < len(self.tokens):
            return self.tokens[idx]
        return self.tokens[-1]

    def _at(self, kind: TokenKind) -> bool:
        return self._current().kind == kind

    def _at_any(self, *kinds: TokenKind) -> bool:
        return self._current().kind in kinds

    def _advance(self) -> Token:
        tok = self._current()
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return tok

    def _expect(self, kind: TokenKind) -> Token:
        if self._current().kind == kind:
            return self._advance()
        tok = self._current()
        self._error(f"expected {kind.name}, got {_describe(tok)}", tok.span)
        raise _ParseError

    def _skip_semicolons(self) -> None:
        while self._at(TokenKind.SEMICOLON):
            self._advance()

    def _error(self, message: str, span: Span) -> None:
        self.diagnostics.append(
            Diagnostic(
                severity=Severity.ERROR,
                code="E200",
                message=message,
                labels=[DiagnosticLabel(span=span, message="")],
            )
        )

    def _fail(self, message: str, span: Span) -> _ParseError:
        self._error(message, span)
        return _ParseError()

    def _span(self, start: Span, end: Span) -> Span:
        """Build a Span from a start span to an end span."""
        return Span(
            self.filename,
            start.start_line, start.start_col,
            end.end_line, end.end_col,
        )

    def _prev_span(self) -> Span:
        return self.tokens[max(0, self.pos - 1)].span

    def _synchronize_decl(self) -> None:
        """Skip ahead to the next top-level declaration keyword."""
        depth = 0
        while not self._at(TokenKind.EOF):
            tok = self._current()
            if tok.kind == TokenKind.LBRACE:
                depth += 1
            elif tok.kind == TokenKind.RBRACE:
                depth = max(0, depth - 1)
            elif (depth == 0 and tok.kind == TokenKind.SEMICOLON
                    and self._peek(1).kind in (
                        TokenKind.FUNC, TokenKind.VAR, TokenKind.TYPE,
                        TokenKind.IMPORT, TokenKind.EOF,
                    )):
                self._advance()
                return
            self._advance()

    def _synchronize_stmt(self) -> None:
        """Skip to the end of the current statement inside a block."""
        depth = 0
        while not self._at(TokenKind.EOF):
            tok = self._current()
            if tok.kind == TokenKind.LBRACE:
                depth += 1
            elif tok.kind == TokenKind.RBRACE:
                if depth == 0:
                    return
                depth -= 1
            elif tok.kind == TokenKind.SEMICOLON and depth == 0:
                self._advance()
                return
            self._advance()

    # ── Top-level parsing ────────────────────────────────────────

    def parse(self) -> File:
        """Parse the entire token stream into a File."""
        package = ""
        self._skip_semicolons()
        try:
            self._expect(TokenKind.PACKAGE)
            package = self._expect(TokenKind.IDENTIFIER).value
            self._end_of_decl()
        except _ParseError:
            self._synchronize_decl()

        decls: list[Decl] = []
        self._skip_semicolons()
        while not self._at(TokenKind.EOF):
            try:
                decls.extend(self._parse_top_level())
                self._end_of_decl()
            except _ParseError:
                self._synchronize_decl()
            self._skip_semicolons()

        end = self._current().span
        span = Span(self.filename, 1, 1, end.end_line, end.end_col)
        if self.diagnostics:
            raise CompileError(self.diagnostics)
        return File(package=package, decls=decls, span=span)

    def _end_of_decl(self) -> None:
        if self._at(TokenKind.EOF):
            return
        self._expect(TokenKind.SEMICOLON)

    def _parse_top_level(self) -> list[Decl]:
        """Parse one top-level declaration; groups yield several."""
        tok = self._current()
        if tok.kind == TokenKind.FUNC:
            return [self._parse_func_decl()]
        if tok.kind == TokenKind.IMPORT:
            return self._parse_group(self._parse_import_spec)
        if tok.kind == TokenKind.VAR:
            return self._parse_group(self._parse_var_spec)
        if tok.kind == TokenKind.TYPE:
            return self._parse_group(self._parse_type_spec)
        if tok.kind == TokenKind.UNSUPPORTED_KEYWORD:
            raise self._fail(f"'{tok.value}' declarations are not supported", tok.span)
        raise self._fail(f"unexpected token at top level: {_describe(tok)}", tok.span)

    def _parse_group(self, parse_spec) -> list:
        """Parse ``kw spec`` or ``kw ( spec; spec; ... )``."""
        self._advance()  # import / var / type
        if not self._at(TokenKind.LPAREN):
            return [parse_spec()]
        self._advance()  # (
        specs = []
        self._skip_semicolons()
        while not self._at_any(TokenKind.RPAREN, TokenKind.EOF):
            specs.append(parse_spec())
            if not self._at(TokenKind.RPAREN):
                self._expect(TokenKind.SEMICOLON)
            self._skip_semicolons()
        self._expect(TokenKind.RPAREN)
        return specs

    # ── Declarations ─────────────────────────────────────────────

    def _parse_import_spec(self) -> ImportDecl:
        tok = self._current()
        if tok.kind in (TokenKind.IDENTIFIER, TokenKind.DOT):
            raise self._fail("import aliases are not supported", tok.span)
        path_tok = self._expect(TokenKind.STRING_LIT)
        return ImportDecl(path_tok.value, path_tok.span)

    def _parse_var_spec(self) -> VarDecl:
        start = self._current().span
        names = self._parse_name_list()
        self._reject_initializer()
        type_expr = self._parse_type()
        self._reject_initializer()
        return VarDecl(names, type_expr, self._span(start, self._prev_span()))

    def _reject_initializer(self) -> None:
        if self._at(TokenKind.ASSIGN):
            raise self._fail(
                "initialized var declarations are not supported",
                self._current().span,
            )

    def _parse_type_spec(self) -> TypeDecl:
        name_tok = self._expect(TokenKind.IDENTIFIER)
        if self._at(TokenKind.ASSIGN):
            self._advance()  # alias form: type A = B
        type_expr = self._parse_type()
        return TypeDecl(
            name_tok.value, type_expr,
            self._span(name_tok.span, self._prev_span()),
        )

    def _parse_name_list(self) -> list[str]:
        names = [self._expect(TokenKind.IDENTIFIER).value]
        while self._at(TokenKind.COMMA):
            self._advance()
            names.append(self._expect(TokenKind.IDENTIFIER).value)
        return names

    def _parse_func_decl(self) -> FuncDecl:
        start = self._advance().span  # func
        if self._at(TokenKind.LPAREN):
            raise self._fail("methods are not supported", self._current().span)
        name_tok = self._expect(TokenKind.IDENTIFIER)
        params = self._parse_parameters()

        results: list[Field] = []
        if self._at(TokenKind.LPAREN):
            results = self._parse_parameters()
        elif self._at_any(*_TYPE_START):
            type_expr = self._parse_type()
            results = [Field([], type_expr, type_expr.span)]

        if not self._at(TokenKind.LBRACE):
            raise self._fail(
                f"function '{name_tok.value}' has no body",
                self._current().span,
            )
        body = self._parse_block()
        return FuncDecl(
            name_tok.value, params, results, body,
            self._span(start, body.span),
        )

    def _parse_parameters(self) -> list[Field]:
        """Parse ``(a int, b, c *T)`` or ``(int, string)``.

        Names without a type attach to the next typed entry, as in
        ``a, b int``.
        """
        self._expect(TokenKind.LPAREN)
        entries: list[tuple[Token | None, TypeExpr | None, Span]] = []
        while not self._at_any(TokenKind.RPAREN, TokenKind.EOF):
            if entries:
                self._expect(TokenKind.COMMA)
                if self._at(TokenKind.RPAREN):
                    break  # trailing comma
            tok = self._current()
            if (tok.kind == TokenKind.IDENTIFIER
                    and self._peek(1).kind in _TYPE_START):
                self._advance()
                type_expr = self._parse_type()
                entries.append((tok, type_expr, self._span(tok.span, self._prev_span())))
            elif (tok.kind == TokenKind.IDENTIFIER
                    and self._peek(1).kind in (TokenKind.COMMA, TokenKind.RPAREN)):
                self._advance()
                entries.append((tok, None, tok.span))
            else:
                type_expr = self._parse_type()
                entries.append((None, type_expr, self._span(tok.span, self._prev_span())))
        self._expect(TokenKind.RPAREN)

        named = any(name is not None and te is not None for name, te, _ in entries)
        if not named:
            # Every entry is a bare type, e.g. results (int, error)
            fields: list[Field] = []
            for name, te, span in entries:
                if te is None:
                    assert name is not None
                    te = Ident(name.value, name.span)
                fields.append(Field([], te, span))
            return fields

        fields = []
        pending: list[Token] = []
        for name, te, span in entries:
            if te is None:
                assert name is not None
                pending.append(name)
                continue
            if name is None:
                raise self._fail("mixed named and unnamed parameters", span)
            start = pending[0].span if pending else span
            fields.append(Field([t.value for t in pending] + [name.value], te,
                                self._span(start, span)))
            pending = []
        if pending:
            raise self._fail("mixed named and unnamed parameters", pending[-1].span)
        return fields

    # ── Types ────────────────────────────────────────────────────

    def _parse_type(self) -> TypeExpr:
        tok = self._current()
        if tok.kind == TokenKind.IDENTIFIER:
            self._advance()
            if self._at(TokenKind.DOT):
                self._advance()
                sel = self._expect(TokenKind.IDENTIFIER)
                return SelectorExpr(Ident(tok.value, tok.span), sel.value,
                                    self._span(tok.span, sel.span))
            return Ident(tok.value, tok.span)
        if tok.kind == TokenKind.STAR:
            self._advance()
            pointee = self._parse_type()
            return PointerType(pointee, self._span(tok.span, self._prev_span()))
        if tok.kind == TokenKind.LBRACKET:
            self._advance()
            if self._at(TokenKind.RBRACKET):
                raise self._fail("slices are not supported", tok.span)
            length = self._parse_expression(0)
            self._expect(TokenKind.RBRACKET)
            elem = self._parse_type()
            return ArrayType(elem, length, self._span(tok.span, self._prev_span()))
        if tok.kind == TokenKind.STRUCT:
            return self._parse_struct_type()
        if tok.kind == TokenKind.LPAREN:
            self._advance()
            inner = self._parse_type()
            self._expect(TokenKind.RPAREN)
            return inner
        if tok.kind == TokenKind.FUNC:
            raise self._fail("function types are not supported", tok.span)
        if tok.kind == TokenKind.UNSUPPORTED_KEYWORD:
            raise self._fail(f"'{tok.value}' types are not supported", tok.span)
        raise self._fail(f"expected a type, got {_describe(tok)}", tok.span)

    def _parse_struct_type(self) -> StructType:
        start = self._advance().span  # struct
        self._expect(TokenKind.LBRACE)
        fields: list[Field] = []
        self._skip_semicolons()
        while not self._at_any(TokenKind.RBRACE, TokenKind.EOF):
            field_start = self._current().span
            if self._peek(1).kind in (TokenKind.SEMICOLON, TokenKind.RBRACE, TokenKind.DOT):
                raise self._fail("embedded fields are not supported", field_start)
            names = self._parse_name_list()
            type_expr = self._parse_type()
            fields.append(Field(names, type_expr, self._span(field_start, self._prev_span())))
            if not self._at(TokenKind.RBRACE):
                self._expect(TokenKind.SEMICOLON)
            self._skip_semicolons()
        end = self._expect(TokenKind.RBRACE)
        return StructType(fields, self._span(start, end.span))

    # ── Blocks and statements ────────────────────────────────────

    def _parse_block(self) -> BlockStmt:
        start = self._expect(TokenKind.LBRACE).span
        stmts: list[Stmt] = []
        self._skip_semicolons()
        while not self._at_any(TokenKind.RBRACE, TokenKind.EOF):
            try:
                stmts.extend(self._parse_statement())
                if not self._at(TokenKind.RBRACE):
                    self._expect(TokenKind.SEMICOLON)
            except _ParseError:
                self._synchronize_stmt()
            self._skip_semicolons()
        end = self._expect(TokenKind.RBRACE)
        return BlockStmt(stmts, self._span(start, end.span))

    def _parse_statement(self) -> list[Stmt]:
        """Parse one statement; a grouped local declaration yields several."""
        tok = self._current()
        if tok.kind == TokenKind.VAR:
            return [DeclStmt(d, d.span) for d in self._parse_group(self._parse_var_spec)]
        if tok.kind == TokenKind.TYPE:
            return [DeclStmt(d, d.span) for d in self._parse_group(self._parse_type_spec)]
        if tok.kind == TokenKind.RETURN:
            return [self._parse_return()]
        if tok.kind == TokenKind.IF:
            return [self._parse_if()]
        if tok.kind == TokenKind.FOR:
            return [self._parse_for()]
        if tok.kind == TokenKind.LBRACE:
            raise self._fail("nested blocks are not supported", tok.span)
        if tok.kind == TokenKind.UNSUPPORTED_KEYWORD:
            raise self._fail(f"'{tok.value}' statements are not supported", tok.span)
        return [self._parse_simple_stmt()]

    def _parse_simple_stmt(self) -> Stmt:
        """Expression, assignment, short variable declaration or inc/dec."""
        start = self._current().span
        lhs = self._parse_expression_list()

        if self._at_any(*_ASSIGN_OPS):
            op_tok = self._advance()
            rhs = self._parse_expression_list()
            return AssignStmt(lhs, op_tok.value, rhs, self._span(start, rhs[-1].span))

        if self._at_any(TokenKind.INC, TokenKind.DEC):
            op_tok = self._advance()
            if len(lhs) != 1:
                raise self._fail(f"'{op_tok.value}' applies to a single operand", op_tok.span)
            return IncDecStmt(lhs[0], op_tok.value, self._span(start, op_tok.span))

        if len(lhs) != 1:
            raise self._fail("expected assignment after expression list", self._current().span)
        return ExprStmt(lhs[0], lhs[0].span)

    def _parse_return(self) -> ReturnStmt:
        start = self._advance().span  # return
        if self._at_any(TokenKind.SEMICOLON, TokenKind.RBRACE):
            return ReturnStmt([], start)
        results = self._parse_expression_list()
        return ReturnStmt(results, self._span(start, results[-1].span))

    def _parse_if(self) -> IfStmt:
        start = self._advance().span  # if
        header = self._parse_simple_stmt()
        if self._at(TokenKind.SEMICOLON):
            raise self._fail(
                "if statements with an init clause are not supported",
                self._current().span,
            )
        if not isinstance(header, ExprStmt):
            raise self._fail("if condition must be an expression", header.span)
        body = self._parse_block()

        else_: IfStmt | BlockStmt | None = None
        if self._at(TokenKind.ELSE):
            self._advance()
            if self._at(TokenKind.IF):
                else_ = self._parse_if()
            elif self._at(TokenKind.LBRACE):
                else_ = self._parse_block()
            else:
                tok = self._current()
                raise self._fail(f"expected 'if' or block after else, got {_describe(tok)}",
                                 tok.span)
        end = else_.span if else_ is not None else body.span
        return IfStmt(header.expr, body, else_, self._span(start, end))

    def _parse_for(self) -> ForStmt:
        start = self._advance().span  # for

        # for { ... }
        if self._at(TokenKind.LBRACE):
            body = self._parse_block()
            return ForStmt(None, None, None, body, self._span(start, body.span))

        init: Stmt | None = None
        if not self._at(TokenKind.SEMICOLON):
            init = self._parse_simple_stmt()

            # for cond { ... }
            if self._at(TokenKind.LBRACE):
                if not isinstance(init, ExprStmt):
                    raise self._fail("for condition must be an expression", init.span)
                body = self._parse_block()
                return ForStmt(None, init.expr, None, body, self._span(start, body.span))

        self._expect(TokenKind.SEMICOLON)
        cond: Expr | None = None
        if not self._at(TokenKind.SEMICOLON):
            cond = self._parse_expression(0)
        self._expect(TokenKind.SEMICOLON)
        post: Stmt | None = None
        if not self._at(TokenKind.LBRACE):
            post = self._parse_simple_stmt()
        body = self._parse_block()
        return ForStmt(init, cond, post, body, self._span(start, body.span))

    # ── Pratt expression parser ──────────────────────────────────

    def _parse_expression_list(self) -> list[Expr]:
        exprs = [self._parse_expression(0)]
        while self._at(TokenKind.COMMA):
            self._advance()
            exprs.append(self._parse_expression(0))
        return exprs

    def _parse_expression(self, min_bp: int) -> Expr:
        """Parse an expression using Pratt parsing with binding powers."""
        left = self._parse_prefix()

        while True:
            tok = self._current()

            if tok.kind == TokenKind.DOT:
                if _POSTFIX_BP < min_bp:
                    break
                self._advance()
                if self._at(TokenKind.LPAREN):
                    raise self._fail("type assertions are not supported", tok.span)
                sel = self._expect(TokenKind.IDENTIFIER)
                left = SelectorExpr(left, sel.value, self._span(left.span, sel.span))
                continue

            if tok.kind == TokenKind.LPAREN:
                if _POSTFIX_BP < min_bp:
                    break
                left = self._parse_call_expr(left)
                continue

            if tok.kind == TokenKind.LBRACKET:
                if _POSTFIX_BP < min_bp:
                    break
                self._advance()
                index = self._parse_expression(0)
                if self._at(TokenKind.COLON):
                    raise self._fail("slice expressions are not supported",
                                     self._current().span)
                end = self._expect(TokenKind.RBRACKET)
                left = IndexExpr(left, index, self._span(left.span, end.span))
                continue

            if tok.kind in _INFIX_BP:
                left_bp, right_bp = _INFIX_BP[tok.kind]
                if left_bp < min_bp:
                    break
                op_tok = self._advance()
                right = self._parse_expression(right_bp)
                left = BinaryExpr(left, op_tok.value, right,
                                  self._span(left.span, right.span))
                continue

            break

        return left

    def _parse_prefix(self) -> Expr:
        """Parse a prefix expression (atom or unary operator)."""
        tok = self._current()

        if tok.kind in _UNARY_OPS:
            self._advance()
            operand = self._parse_expression(_PREFIX_BP)
            return UnaryExpr(tok.value, operand, self._span(tok.span, operand.span))

        if tok.kind == TokenKind.STAR:
            self._advance()
            operand = self._parse_expression(_PREFIX_BP)
            return StarExpr(operand, self._span(tok.span, operand.span))

        if tok.kind in _LITERALS:
            self._advance()
            return BasicLit(tok.value, tok.span)

        if tok.kind == TokenKind.IDENTIFIER:
            self._advance()
            return Ident(tok.value, tok.span)

        # Parenthesized expression; binary nodes are re-parenthesized on output
        if tok.kind == TokenKind.LPAREN:
            self._advance()
            expr = self._parse_expression(0)
            self._expect(TokenKind.RPAREN)
            return expr

        if tok.kind == TokenKind.FUNC:
            raise self._fail("function literals are not supported", tok.span)
        if tok.kind == TokenKind.UNSUPPORTED_KEYWORD:
            raise self._fail(f"'{tok.value}' is not supported", tok.span)

        raise self._fail(f"unexpected token in expression: {_describe(tok)}", tok.span)

    def _parse_call_expr(self, func: Expr) -> CallExpr:
        """Parse a function call: func(args)."""
        self._advance()  # (
        args: list[Expr] = []
        while not self._at_any(TokenKind.RPAREN, TokenKind.EOF):
            if args:
                self._expect(TokenKind.COMMA)
                if self._at(TokenKind.RPAREN):
                    break  # trailing comma
            args.append(self._parse_expression(0))
        end_tok = self._expect(TokenKind.RPAREN)
        return CallExpr(func, args, self._span(func.span, end_tok.span))


def _describe(tok: Token) -> str:
    if tok.kind == TokenKind.SEMICOLON and tok.value == "\n":
        return "newline"
    if tok.kind == TokenKind.EOF:
        return "end of file"
    return f"{tok.kind.name} ({tok.value!r})"
