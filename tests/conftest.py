# tests/conftest.py
"""
Shared fixtures: a small builder that creates syntax nodes whose spans
are located by searching the source text, and records their types and
object bindings in a ``TypeBinding`` as it goes.
"""

from typing import Optional

import pytest

from errcmp_shims.analysis import CompilationUnit
from errcmp_shims.render import SourceBuffer
from errcmp_shims.syntax import (
    BasicLit, BinaryExpr, CallExpr, File, Ident, Op, ParenExpr,
    SelectorExpr, Span, Stmt, UnaryExpr,
)
from errcmp_shims.typeinfo import (
    ERROR_TYPE, NIL_TYPE, Method, Object, ObjectKind, Package,
    TypeBinding, TypeDescriptor,
)


IO_PKG = Package(path="io", name="io")
ERRORS_PKG = Package(path="errors", name="errors")
STRING = TypeDescriptor.basic("string")
INT = TypeDescriptor.basic("int")
BOOL = TypeDescriptor.basic("bool")


class UnitBuilder:
    """Builds nodes over a fixed source text."""

    def __init__(self, text: str, filename: str = "main.go") -> None:
        self.text = text
        self.source = SourceBuffer(text, filename)
        self.info = TypeBinding()

    def span(self, fragment: str, nth: int = 0) -> Span:
        """Byte span of the ``nth`` occurrence of ``fragment``."""
        start = -1
        for _ in range(nth + 1):
            start = self.text.index(fragment, start + 1)
        offset = len(self.text[:start].encode("utf-8"))
        return Span(offset, offset + len(fragment.encode("utf-8")))

    def _typed(self, node, typ: Optional[TypeDescriptor]):
        if typ is not None:
            self.info.record_type(node, typ)
        return node

    # ── leaves ───────────────────────────────────────────────────────

    def ident(self, name: str, typ: Optional[TypeDescriptor] = None,
              obj: Optional[Object] = None, nth: int = 0) -> Ident:
        node = Ident(span=self.span(name, nth), name=name)
        if obj is not None:
            self.info.record_use(node, obj)
        return self._typed(node, typ)

    def var(self, name: str, typ: Optional[TypeDescriptor], nth: int = 0) -> Ident:
        """Identifier bound to a variable object (type via the object)."""
        return self.ident(name, obj=Object.var(name, typ), nth=nth)

    def err(self, name: str, nth: int = 0) -> Ident:
        return self.var(name, ERROR_TYPE, nth=nth)

    def nil(self, nth: int = 0) -> Ident:
        return self.ident(
            "nil", typ=NIL_TYPE,
            obj=Object(kind=ObjectKind.NIL, name="nil", type=NIL_TYPE), nth=nth,
        )

    def pkg(self, local: str, imported: Package, nth: int = 0) -> Ident:
        return self.ident(local, obj=Object.pkgname(local, imported), nth=nth)

    def lit(self, value: str, kind: str = "STRING", typ=STRING, nth: int = 0) -> BasicLit:
        node = BasicLit(span=self.span(value, nth), kind=kind, value=value)
        return self._typed(node, typ)

    # ── composites ───────────────────────────────────────────────────

    def selector(self, text: str, x, sel_name: str,
                 typ: Optional[TypeDescriptor] = None, nth: int = 0) -> SelectorExpr:
        span = self.span(text, nth)
        sel_start = span.end - len(sel_name)
        sel = Ident(span=Span(sel_start, span.end), name=sel_name)
        return self._typed(SelectorExpr(span=span, x=x, sel=sel), typ)

    def eof(self, local: str = "io", imported: Package = IO_PKG, nth: int = 0) -> SelectorExpr:
        text = f"{local}.EOF"
        x = Ident(span=Span(self.span(text, nth).start,
                            self.span(text, nth).start + len(local)), name=local)
        self.info.record_use(x, Object.pkgname(local, imported))
        return self.selector(text, x, "EOF", typ=ERROR_TYPE, nth=nth)

    def binary(self, text: str, op: Op, x, y, nth: int = 0) -> BinaryExpr:
        return self._typed(
            BinaryExpr(span=self.span(text, nth), op=op, x=x, y=y), BOOL
        )

    def unary(self, text: str, op: Op, x, nth: int = 0) -> UnaryExpr:
        return UnaryExpr(span=self.span(text, nth), op=op, x=x)

    def paren(self, text: str, x, nth: int = 0) -> ParenExpr:
        return ParenExpr(span=self.span(text, nth), x=x)

    def call(self, text: str, fun, args, typ=None, nth: int = 0) -> CallExpr:
        return self._typed(
            CallExpr(span=self.span(text, nth), fun=fun, args=list(args)), typ
        )

    def stmt(self, text: str, kind: str, *body, nth: int = 0) -> Stmt:
        return Stmt(span=self.span(text, nth), kind=kind, body=list(body))

    def file(self, *decls) -> File:
        return File(span=Span(0, len(self.source)), name=self.source.filename,
                    decls=list(decls))

    def unit(self, *decls) -> CompilationUnit:
        return CompilationUnit(root=self.file(*decls), info=self.info,
                               source=self.source)


@pytest.fixture
def builder():
    """Factory: ``builder(text)`` returns a fresh ``UnitBuilder``."""
    return UnitBuilder


@pytest.fixture
def custom_error_iface():
    """``type MyError interface { error }``: a named interface embedding error."""
    return TypeDescriptor.named("MyError", ERROR_TYPE)


@pytest.fixture
def stringer_iface():
    """``interface { String() string }``."""
    return TypeDescriptor.interface(
        (Method("String", results=("string",), origin="fmt.Stringer"),),
        name="fmt.Stringer",
    )
