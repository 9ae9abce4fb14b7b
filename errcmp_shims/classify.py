"""
errcmp_shims/classify.py
════════════════════════

Operand classification for the error-comparison rule.

Three questions are asked of each operand of a comparison:

  is_nil_typed          is its static type the type of ``nil``?
  is_sentinel           is it literally ``io.EOF`` (package-qualified)?
  has_error_capability  is its type the ``error`` interface?

Every predicate is a pure, total function of the ``TypeBinding``.  When
the type checker left an operand unresolved, the answer is False: the
rule would rather miss a finding than report one it cannot justify.

License: MIT
"""

from __future__ import annotations

from typing import Optional

from errcmp_shims.syntax import Expr, Ident, SelectorExpr
from errcmp_shims.typeinfo import ObjectKind, TypeBinding, TypeKind


# ═════════════════════════════════════════════════════════════════════════
#  CONSTANTS
# ═════════════════════════════════════════════════════════════════════════

#: Package name that defines the end-of-stream sentinel.
SENTINEL_PACKAGE = "io"

#: Name of the end-of-stream sentinel inside ``SENTINEL_PACKAGE``.
SENTINEL_NAME = "EOF"

#: The single method of the ``error`` interface and its signature.
ERROR_METHOD = "Error"
ERROR_METHOD_ORIGIN = "error"
ERROR_RESULT = "string"


# ═════════════════════════════════════════════════════════════════════════
#  PREDICATES
# ═════════════════════════════════════════════════════════════════════════

def is_nil_typed(expr: Optional[Expr], info: TypeBinding) -> bool:
    """True iff the static type of ``expr`` is the untyped nil type."""
    typ = info.type_of(expr)
    return typ is not None and typ.is_nil


def imported_name(expr: Optional[Expr], info: TypeBinding) -> Optional[str]:
    """
    Name of the package ``expr`` refers to, if it is a package identifier.

    The declared package name is returned, not the local import name, so
    ``import stdio "io"`` still yields ``"io"`` for ``stdio``.
    """
    if not isinstance(expr, Ident):
        return None
    obj = info.object_of(expr)
    if obj is None or obj.kind is not ObjectKind.PKGNAME:
        return None
    if obj.imported is None:
        return None
    return obj.imported.name


def is_sentinel(expr: Optional[Expr], info: TypeBinding) -> bool:
    """
    True iff ``expr`` is the qualified identifier ``io.EOF``.

    Purely syntactic plus one binding lookup: a local variable that holds
    the same value is not recognised.
    """
    if not isinstance(expr, SelectorExpr):
        return False
    if expr.sel is None or expr.sel.name != SENTINEL_NAME:
        return False
    return imported_name(expr.x, info) == SENTINEL_PACKAGE


def has_error_capability(expr: Optional[Expr], info: TypeBinding) -> bool:
    """
    True iff the static type of ``expr`` is an interface whose method set
    is exactly ``Error() string`` declared by ``error``.

    Named interfaces that embed ``error`` and nothing else qualify;
    concrete types that merely implement ``Error()`` do not.
    """
    typ = info.type_of(expr)
    if typ is None:
        return False
    under = typ.underlying()
    if under.kind is not TypeKind.INTERFACE:
        return False
    if len(under.methods) != 1:
        return False
    method = under.methods[0]
    return (
        method.name == ERROR_METHOD
        and method.origin == ERROR_METHOD_ORIGIN
        and len(method.params) == 0
        and tuple(method.results) == (ERROR_RESULT,)
    )


__all__ = [
    "SENTINEL_PACKAGE", "SENTINEL_NAME",
    "ERROR_METHOD", "ERROR_METHOD_ORIGIN", "ERROR_RESULT",
    "is_nil_typed", "imported_name", "is_sentinel", "has_error_capability",
]
