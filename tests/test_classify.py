# tests/test_classify.py
"""
Tests for operand classification: nil typing, the io.EOF sentinel and
the error capability predicate.
"""

import pytest

from errcmp_shims.classify import (
    has_error_capability,
    imported_name,
    is_nil_typed,
    is_sentinel,
)
from errcmp_shims.syntax import Ident, SelectorExpr, Span
from errcmp_shims.typeinfo import (
    ERROR_TYPE,
    NIL_TYPE,
    Method,
    Object,
    ObjectKind,
    Package,
    TypeBinding,
    TypeDescriptor,
)

from conftest import IO_PKG, STRING


class TestNilTyped:

    def test_nil_identifier(self, builder):
        b = builder("nil")
        assert is_nil_typed(b.nil(), b.info)

    def test_error_variable_is_not_nil(self, builder):
        b = builder("err")
        assert not is_nil_typed(b.err("err"), b.info)

    def test_unknown_type(self, builder):
        b = builder("x")
        assert not is_nil_typed(b.ident("x"), b.info)
        assert not is_nil_typed(None, b.info)


class TestSentinel:

    def test_io_eof(self, builder):
        b = builder("io.EOF")
        assert is_sentinel(b.eof(), b.info)

    def test_other_member_of_io(self, builder):
        b = builder("io.ErrUnexpectedEOF")
        x = b.pkg("io", IO_PKG)
        sel = b.selector("io.ErrUnexpectedEOF", x, "ErrUnexpectedEOF", typ=ERROR_TYPE)
        assert not is_sentinel(sel, b.info)

    def test_local_variable_named_like_a_package(self, builder):
        # ``io`` here is a struct variable shadowing the import
        b = builder("io.EOF")
        x = b.var("io", TypeDescriptor.struct("reader"))
        sel = b.selector("io.EOF", x, "EOF", typ=ERROR_TYPE)
        assert not is_sentinel(sel, b.info)

    def test_unresolved_qualifier(self, builder):
        b = builder("io.EOF")
        sel = b.selector("io.EOF", b.ident("io"), "EOF", typ=ERROR_TYPE)
        assert not is_sentinel(sel, b.info)

    def test_pkgname_without_import_data(self):
        info = TypeBinding()
        x = Ident(span=Span(0, 2), name="io")
        info.record_use(x, Object(kind=ObjectKind.PKGNAME, name="io"))
        sel = SelectorExpr(span=Span(0, 6), x=x, sel=Ident(span=Span(3, 6), name="EOF"))
        assert imported_name(x, info) is None
        assert not is_sentinel(sel, info)

    def test_plain_identifier_is_never_the_sentinel(self, builder):
        b = builder("EOF")
        assert not is_sentinel(b.err("EOF"), b.info)

    def test_imported_name_uses_declared_package_name(self, builder):
        b = builder("stdio")
        x = b.pkg("stdio", IO_PKG)
        assert imported_name(x, b.info) == "io"


class TestErrorCapability:

    def test_predeclared_error(self, builder):
        b = builder("err")
        assert has_error_capability(b.err("err"), b.info)

    def test_type_recorded_on_expression(self, builder):
        b = builder("f()")
        call = b.call("f()", b.ident("f"), [], typ=ERROR_TYPE)
        assert has_error_capability(call, b.info)

    def test_named_chain(self, builder, custom_error_iface):
        b = builder("e")
        outer = TypeDescriptor.named("Outer", custom_error_iface)
        assert has_error_capability(b.var("e", outer), b.info)

    @pytest.mark.parametrize("typ", [
        STRING,
        NIL_TYPE,
        TypeDescriptor.interface(),
        TypeDescriptor.struct(
            "MyErr", (Method("Error", results=("string",), origin="MyErr"),)
        ),
        TypeDescriptor.pointer(TypeDescriptor.struct(
            "MyErr", (Method("Error", results=("string",), origin="*MyErr"),)
        )),
        TypeDescriptor.interface((
            Method("Error", results=("string",), origin="error"),
            Method("Temporary", results=("bool",), origin="net.Error"),
        )),
        TypeDescriptor.interface(
            (Method("Error", results=("string",), origin="pkg.Failure"),)
        ),
        TypeDescriptor.interface(
            (Method("Error", params=("int",), results=("string",), origin="error"),)
        ),
        TypeDescriptor.interface(
            (Method("Error", results=("string", "bool"), origin="error"),)
        ),
    ], ids=[
        "string", "nil", "empty-interface", "struct", "pointer",
        "two-methods", "own-error-method", "takes-param", "two-results",
    ])
    def test_not_error_capable(self, builder, typ):
        b = builder("v")
        assert not has_error_capability(b.var("v", typ), b.info)

    def test_unknown_type_fails_open(self, builder):
        b = builder("v")
        assert not has_error_capability(b.ident("v"), b.info)
        assert not has_error_capability(b.var("v", None), b.info)
        assert not has_error_capability(None, b.info)

    def test_method_full_name(self):
        assert ERROR_TYPE.methods[0].full_name == "(error).Error"
        assert Method("Close").full_name == "Close"


class TestTypeBinding:

    def test_expression_type_wins_over_object_type(self, builder):
        b = builder("x")
        x = b.ident("x", typ=ERROR_TYPE, obj=Object.var("x", STRING))
        assert b.info.type_of(x) is ERROR_TYPE

    def test_paren_falls_back_to_inner(self, builder):
        b = builder("(err)")
        p = b.paren("(err)", b.err("err"))
        assert b.info.type_of(p) is ERROR_TYPE

    def test_object_of_unknown(self, builder):
        b = builder("x")
        assert b.info.object_of(b.ident("x")) is None
        assert b.info.object_of(None) is None

    def test_underlying_follows_named_chains(self):
        t = TypeDescriptor.named("T", TypeDescriptor.named("U", ERROR_TYPE))
        assert t.underlying() is ERROR_TYPE

    def test_type_strings(self):
        assert str(ERROR_TYPE) == "error"
        assert str(TypeDescriptor.pointer(TypeDescriptor.struct("T"))) == "*T"
        assert str(TypeDescriptor.interface()) == "interface{}"
