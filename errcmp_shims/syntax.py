"""
errcmp_shims/syntax.py
══════════════════════

Syntax-tree node model for a dumped Go compilation unit.

Nodes are produced by the host (normally via ``errcmp_shims.dump``) and
are read-only to every analysis in this package.  Only the shapes the
comparison rule needs are modelled in detail; everything else is carried
as a generic ``Stmt`` container so that traversal still reaches nested
expressions.

    ┌─────────────────────────────────────────────────────────────────┐
    │  File                                                           │
    │   └─ Stmt(kind="if" | "return" | "assign" | "expr" | ...)       │
    │        └─ Expr                                                  │
    │             Ident │ SelectorExpr │ BinaryExpr │ UnaryExpr       │
    │             ParenExpr │ CallExpr │ BasicLit                     │
    └─────────────────────────────────────────────────────────────────┘

Every node carries a half-open byte ``Span`` into the unit's source
buffer.  Nodes hash by identity so they can key the ``TypeBinding``
tables in ``errcmp_shims.typeinfo``.

License: MIT
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Tuple


# ═══════════════════════════════════════════════════════════════════════════
#  OPERATORS
# ═══════════════════════════════════════════════════════════════════════════

class Op(Enum):
    """Go operator tokens that may appear in ``BinaryExpr`` / ``UnaryExpr``."""
    EQL = "=="
    NEQ = "!="
    LSS = "<"
    GTR = ">"
    LEQ = "<="
    GEQ = ">="
    LAND = "&&"
    LOR = "||"
    ADD = "+"
    SUB = "-"
    MUL = "*"
    QUO = "/"
    REM = "%"
    AND = "&"
    OR = "|"
    XOR = "^"
    SHL = "<<"
    SHR = ">>"
    AND_NOT = "&^"
    NOT = "!"
    ARROW = "<-"

    @classmethod
    def from_token(cls, text: str) -> Op:
        """Look up an operator by its source spelling (``"=="`` etc)."""
        return cls(text)

    def __str__(self) -> str:
        return self.value


EQUALITY_OPS = frozenset({Op.EQL, Op.NEQ})


# ═══════════════════════════════════════════════════════════════════════════
#  SPANS
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Span:
    """Half-open byte range ``[start, end)`` into a source buffer."""
    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"invalid span [{self.start}, {self.end})")


# ═══════════════════════════════════════════════════════════════════════════
#  NODES
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(eq=False)
class Node:
    """Base class for all syntax nodes."""
    span: Span

    @property
    def pos(self) -> int:
        return self.span.start

    @property
    def end(self) -> int:
        return self.span.end

    def children(self) -> Iterator[Node]:
        return iter(())

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} [{self.span.start}:{self.span.end}]>"


@dataclass(eq=False)
class Expr(Node):
    """Marker base for expression nodes."""


@dataclass(eq=False)
class Ident(Expr):
    name: str = ""

    def __repr__(self) -> str:
        return f"<Ident {self.name!r} [{self.span.start}:{self.span.end}]>"


@dataclass(eq=False)
class BasicLit(Expr):
    """Literal: ``kind`` is one of INT, FLOAT, IMAG, CHAR, STRING."""
    kind: str = "INT"
    value: str = ""


@dataclass(eq=False)
class SelectorExpr(Expr):
    """``x.sel``; a qualified identifier when ``x`` names a package."""
    x: Optional[Expr] = None
    sel: Optional[Ident] = None

    def children(self) -> Iterator[Node]:
        if self.x is not None:
            yield self.x
        if self.sel is not None:
            yield self.sel


@dataclass(eq=False)
class BinaryExpr(Expr):
    op: Op = Op.EQL
    x: Optional[Expr] = None
    y: Optional[Expr] = None

    def children(self) -> Iterator[Node]:
        if self.x is not None:
            yield self.x
        if self.y is not None:
            yield self.y


@dataclass(eq=False)
class UnaryExpr(Expr):
    op: Op = Op.NOT
    x: Optional[Expr] = None

    def children(self) -> Iterator[Node]:
        if self.x is not None:
            yield self.x


@dataclass(eq=False)
class ParenExpr(Expr):
    x: Optional[Expr] = None

    def children(self) -> Iterator[Node]:
        if self.x is not None:
            yield self.x


@dataclass(eq=False)
class CallExpr(Expr):
    fun: Optional[Expr] = None
    args: List[Expr] = field(default_factory=list)

    def children(self) -> Iterator[Node]:
        if self.fun is not None:
            yield self.fun
        yield from self.args


@dataclass(eq=False)
class Stmt(Node):
    """
    Generic statement container.

    ``kind`` mirrors the go/ast statement name in lower case ("if",
    "return", "assign", "expr", "block", "func", ...).  ``body`` holds the
    statement's sub-nodes in source order, expressions and nested
    statements alike.
    """
    kind: str = "block"
    body: List[Node] = field(default_factory=list)

    def children(self) -> Iterator[Node]:
        yield from self.body


@dataclass(eq=False)
class File(Node):
    """Root of one compilation unit."""
    name: str = ""
    decls: List[Node] = field(default_factory=list)

    def children(self) -> Iterator[Node]:
        yield from self.decls


def node_kinds() -> Tuple[str, ...]:
    """Names of the concrete node classes understood by the dump loader."""
    return tuple(cls.__name__ for cls in NODE_CLASSES)


NODE_CLASSES = (
    File, Stmt, Ident, BasicLit, SelectorExpr,
    BinaryExpr, UnaryExpr, ParenExpr, CallExpr,
)


__all__ = [
    "Op", "EQUALITY_OPS",
    "Span",
    "Node", "Expr", "Ident", "BasicLit", "SelectorExpr", "BinaryExpr",
    "UnaryExpr", "ParenExpr", "CallExpr", "Stmt", "File",
    "NODE_CLASSES", "node_kinds",
]
