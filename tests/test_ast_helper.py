# tests/test_ast_helper.py
"""Tests for tree traversal and node queries."""

from errcmp_shims.ast_helper import is_equality_comparison, iter_preorder
from errcmp_shims.syntax import BinaryExpr, Ident, Op, Span

from conftest import INT


def _tree(builder):
    text = "if a == b && c < d {}"
    b = builder(text)
    eq = b.binary("a == b", Op.EQL, b.var("a", INT), b.var("b", INT))
    lt = b.binary("c < d", Op.LSS, b.var("c", INT), b.var("d", INT))
    land = b.binary("a == b && c < d", Op.LAND, eq, lt)
    return b.file(b.stmt(text, "if", land)), eq, lt, land


class TestTraversal:

    def test_preorder(self, builder):
        root, eq, lt, land = _tree(builder)
        names = [getattr(n, "name", type(n).__name__) for n in iter_preorder(root)]
        assert names == ["main.go", "Stmt", "BinaryExpr", "BinaryExpr",
                         "a", "b", "BinaryExpr", "c", "d"]
        binaries = [n for n in iter_preorder(root) if isinstance(n, BinaryExpr)]
        assert binaries == [land, eq, lt]

    def test_none_root(self):
        assert list(iter_preorder(None)) == []

    def test_deep_chains_do_not_recurse(self):
        node = Ident(span=Span(0, 1), name="x")
        for _ in range(5000):
            node = BinaryExpr(span=Span(0, 1), op=Op.LOR, x=node, y=None)
        nodes = list(iter_preorder(node))
        assert len(nodes) == 5001
        assert isinstance(nodes[-1], Ident)


class TestQueries:

    def test_equality_predicate(self, builder):
        _, eq, lt, land = _tree(builder)
        assert is_equality_comparison(eq)
        assert not is_equality_comparison(lt)
        assert not is_equality_comparison(land)
        assert not is_equality_comparison(None)

    def test_not_equal_counts(self, builder):
        b = builder("a != b")
        ne = b.binary("a != b", Op.NEQ, b.var("a", INT), b.var("b", INT))
        assert is_equality_comparison(ne)
