"""
errcmp_shims/typeinfo.py
════════════════════════

Static type descriptors and the expression → type binding table.

This is the Python-side image of what the Go type checker knows about
one compilation unit: for every expression, its static type; for every
identifier, the object it refers to (variable, constant, package name,
...).  It is precomputed by the host and handed to analyses read-only.

Type term algebra
─────────────────

    BASIC      string, int, bool, ...            name
    NIL        the type of the untyped ``nil``
    INTERFACE  interface { m1(); m2() }          methods
    NAMED      type T <underlying>               name, elem = underlying
    POINTER    *T                                elem = pointee
    STRUCT     struct { ... }                    methods (of the value set)
    SIGNATURE  func(...) ...

Only ``underlying()`` and the interface method set matter to the error
comparison rule; the other kinds exist so that dumps can describe real
programs without losing information.

License: MIT
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, Optional, Tuple

from errcmp_shims.syntax import Expr, Ident, Node, ParenExpr


# ═════════════════════════════════════════════════════════════════════════
#  PART 1: TYPE DESCRIPTORS
# ═════════════════════════════════════════════════════════════════════════

class TypeKind(Enum):
    """Discriminant for the type term algebra."""
    BASIC = auto()
    NIL = auto()
    INTERFACE = auto()
    NAMED = auto()
    POINTER = auto()
    STRUCT = auto()
    SIGNATURE = auto()


@dataclass(frozen=True)
class Method:
    """
    One entry of a method set.

    ``params`` and ``results`` are type names as spelled in the dump.
    ``origin`` names the interface (or type) that declares the method, so
    that ``full_name`` matches go/types' ``Func.FullName()`` for interface
    methods, e.g. ``"(error).Error"``.
    """
    name: str
    params: Tuple[str, ...] = ()
    results: Tuple[str, ...] = ()
    origin: str = ""

    @property
    def full_name(self) -> str:
        if self.origin:
            return f"({self.origin}).{self.name}"
        return self.name


@dataclass(frozen=True)
class TypeDescriptor:
    """
    A node in the type term algebra.

    For compound kinds ``elem`` encodes structure:
      - NAMED:   elem = underlying type
      - POINTER: elem = pointee type
    """
    kind: TypeKind
    name: str = ""
    methods: Tuple[Method, ...] = ()
    elem: Optional[TypeDescriptor] = None

    # ── Factory methods ──────────────────────────────────────────────

    @classmethod
    def basic(cls, name: str) -> TypeDescriptor:
        return cls(kind=TypeKind.BASIC, name=name)

    @classmethod
    def nil(cls) -> TypeDescriptor:
        return cls(kind=TypeKind.NIL, name="untyped nil")

    @classmethod
    def interface(
        cls, methods: Tuple[Method, ...] = (), name: str = ""
    ) -> TypeDescriptor:
        return cls(kind=TypeKind.INTERFACE, name=name, methods=tuple(methods))

    @classmethod
    def named(cls, name: str, underlying: TypeDescriptor) -> TypeDescriptor:
        return cls(kind=TypeKind.NAMED, name=name, elem=underlying)

    @classmethod
    def pointer(cls, pointee: TypeDescriptor) -> TypeDescriptor:
        return cls(kind=TypeKind.POINTER, elem=pointee)

    @classmethod
    def struct(
        cls, name: str = "", methods: Tuple[Method, ...] = ()
    ) -> TypeDescriptor:
        return cls(kind=TypeKind.STRUCT, name=name, methods=tuple(methods))

    # ── Queries ──────────────────────────────────────────────────────

    @property
    def is_nil(self) -> bool:
        return self.kind is TypeKind.NIL

    def underlying(self) -> TypeDescriptor:
        """Follow NAMED links down to the underlying type."""
        t = self
        while t.kind is TypeKind.NAMED and t.elem is not None:
            t = t.elem
        return t

    def __str__(self) -> str:
        if self.kind is TypeKind.POINTER and self.elem is not None:
            return f"*{self.elem}"
        if self.name:
            return self.name
        if self.kind is TypeKind.INTERFACE:
            inner = "; ".join(f"{m.name}()" for m in self.methods)
            return f"interface{{{inner}}}" if inner else "interface{}"
        return self.kind.name.lower()


#: The predeclared ``error`` interface: ``interface { Error() string }``.
ERROR_TYPE = TypeDescriptor.interface(
    (Method("Error", params=(), results=("string",), origin="error"),),
    name="error",
)

#: The type of the predeclared ``nil`` identifier.
NIL_TYPE = TypeDescriptor.nil()


# ═════════════════════════════════════════════════════════════════════════
#  PART 2: OBJECTS
# ═════════════════════════════════════════════════════════════════════════

class ObjectKind(Enum):
    VAR = auto()
    CONST = auto()
    PKGNAME = auto()
    FUNC = auto()
    TYPENAME = auto()
    NIL = auto()


@dataclass(frozen=True)
class Package:
    """An imported package: import path and declared package name."""
    path: str
    name: str


@dataclass(frozen=True)
class Object:
    """
    A named language entity an identifier can resolve to.

    For ``PKGNAME`` objects ``imported`` is the package the import
    declaration refers to; the object's own ``name`` is the local name,
    which differs from ``imported.name`` for renamed imports.
    """
    kind: ObjectKind
    name: str
    type: Optional[TypeDescriptor] = None
    imported: Optional[Package] = None

    @classmethod
    def var(cls, name: str, typ: Optional[TypeDescriptor]) -> Object:
        return cls(kind=ObjectKind.VAR, name=name, type=typ)

    @classmethod
    def pkgname(cls, name: str, imported: Package) -> Object:
        return cls(kind=ObjectKind.PKGNAME, name=name, imported=imported)


# ═════════════════════════════════════════════════════════════════════════
#  PART 3: TYPE BINDING TABLE
# ═════════════════════════════════════════════════════════════════════════

@dataclass
class TypeBinding:
    """
    Maps expressions to static types and identifiers to objects.

    Attributes
    ----------
    types : expression node → TypeDescriptor
    uses  : identifier node → Object it refers to
    """
    types: Dict[Node, TypeDescriptor] = field(default_factory=dict)
    uses: Dict[Ident, Object] = field(default_factory=dict)

    def record_type(self, expr: Node, typ: TypeDescriptor) -> None:
        self.types[expr] = typ

    def record_use(self, ident: Ident, obj: Object) -> None:
        self.uses[ident] = obj

    def object_of(self, ident: Optional[Ident]) -> Optional[Object]:
        """The object ``ident`` denotes, or None if unresolved."""
        if ident is None:
            return None
        return self.uses.get(ident)

    def type_of(self, expr: Optional[Expr]) -> Optional[TypeDescriptor]:
        """
        Static type of ``expr``, or None if unknown.

        Falls back to the referenced object's type for identifiers and to
        the inner expression for parenthesized ones, the same way
        go/types' ``Info.TypeOf`` does.
        """
        if expr is None:
            return None
        typ = self.types.get(expr)
        if typ is not None:
            return typ
        if isinstance(expr, Ident):
            obj = self.uses.get(expr)
            if obj is not None:
                return obj.type
            return None
        if isinstance(expr, ParenExpr):
            return self.type_of(expr.x)
        return None

    def __len__(self) -> int:
        return len(self.types)


__all__ = [
    "TypeKind", "Method", "TypeDescriptor",
    "ERROR_TYPE", "NIL_TYPE",
    "ObjectKind", "Package", "Object",
    "TypeBinding",
]
