"""
errcmp_shims/dump.py
════════════════════

Loader for JSON dumps of a parsed and type-checked Go source file.

A Go-side driver (go/parser + go/types) serializes one file into the
format below; ``parsedump`` turns it back into a ``CompilationUnit``
ready for ``run_analyzer``.

Format
──────
::

    {
      "file":    "main.go",
      "source":  "<full file text>",
      "types":   { "<id>": {"kind": "interface", "name": "error",
                            "methods": [{"name": "Error", "params": [],
                                         "results": ["string"],
                                         "origin": "error"}]},
                   "<id>": {"kind": "named", "name": "MyErr", "elem": "<id>"},
                   ... },
      "objects": { "<id>": {"kind": "pkgname", "name": "io",
                            "imported": {"path": "io", "name": "io"}},
                   "<id>": {"kind": "var", "name": "err", "type": "<id>"},
                   ... },
      "root":    {"kind": "File", "start": 0, "end": 120, "decls": [...]}
    }

Every node has ``kind``, ``start`` and ``end``; expression nodes may carry
``type`` (a key of ``types``) and identifiers may carry ``obj`` (a key of
``objects``).  The type ids ``"error"`` and ``"nil"`` are predeclared.

Problems in the dump raise ``DumpFormatError`` naming the JSON path of
the offending value.

License: MIT
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import IO, Any, Callable, Dict, List, Optional, Union

from errcmp_shims.analysis import CompilationUnit
from errcmp_shims.render import SourceBuffer
from errcmp_shims.syntax import (
    BasicLit,
    BinaryExpr,
    CallExpr,
    Expr,
    File,
    Ident,
    Node,
    Op,
    ParenExpr,
    SelectorExpr,
    Span,
    Stmt,
    UnaryExpr,
    node_kinds,
)
from errcmp_shims.typeinfo import (
    ERROR_TYPE,
    NIL_TYPE,
    Method,
    Object,
    ObjectKind,
    Package,
    TypeBinding,
    TypeDescriptor,
    TypeKind,
)

logger = logging.getLogger(__name__)


class DumpFormatError(ValueError):
    """The dump is not valid JSON or does not follow the dump format."""

    def __init__(self, message: str, path: str = "$") -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


PREDECLARED_TYPES: Dict[str, TypeDescriptor] = {
    "error": ERROR_TYPE,
    "nil": NIL_TYPE,
}

_TYPE_KINDS = {k.name.lower(): k for k in TypeKind}
_OBJECT_KINDS = {k.name.lower(): k for k in ObjectKind}


# ═════════════════════════════════════════════════════════════════════════
#  PART 1: FIELD ACCESS
# ═════════════════════════════════════════════════════════════════════════

def _field(obj: Dict[str, Any], key: str, path: str, kind: type = str) -> Any:
    if key not in obj:
        raise DumpFormatError(f"missing field '{key}'", path)
    value = obj[key]
    if kind is int and isinstance(value, bool):
        raise DumpFormatError(f"field '{key}' must be int", f"{path}.{key}")
    if not isinstance(value, kind):
        raise DumpFormatError(
            f"field '{key}' must be {kind.__name__}, got {type(value).__name__}",
            f"{path}.{key}",
        )
    return value


def _opt_list(obj: Dict[str, Any], key: str, path: str) -> List[Any]:
    value = obj.get(key, [])
    if not isinstance(value, list):
        raise DumpFormatError(f"field '{key}' must be a list", f"{path}.{key}")
    return value


# ═════════════════════════════════════════════════════════════════════════
#  PART 2: TYPES AND OBJECTS
# ═════════════════════════════════════════════════════════════════════════

class _TypeTable:
    """Resolves type ids lazily so that entries may reference each other."""

    def __init__(self, raw: Dict[str, Any]) -> None:
        self._raw = raw
        self._done: Dict[str, TypeDescriptor] = dict(PREDECLARED_TYPES)
        self._active: List[str] = []

    def get(self, type_id: str, path: str) -> TypeDescriptor:
        if type_id in self._done:
            return self._done[type_id]
        if type_id not in self._raw:
            raise DumpFormatError(f"unknown type id '{type_id}'", path)
        if type_id in self._active:
            raise DumpFormatError(f"cyclic type id '{type_id}'", path)
        self._active.append(type_id)
        try:
            typ = self._build(self._raw[type_id], f"$.types.{type_id}")
        finally:
            self._active.pop()
        self._done[type_id] = typ
        return typ

    def _build(self, raw: Any, path: str) -> TypeDescriptor:
        if not isinstance(raw, dict):
            raise DumpFormatError("type entry must be an object", path)
        kind_name = _field(raw, "kind", path)
        kind = _TYPE_KINDS.get(kind_name)
        if kind is None:
            raise DumpFormatError(f"unknown type kind '{kind_name}'", path)
        name = raw.get("name", "")
        methods = tuple(
            _method(m, f"{path}.methods[{i}]", default_origin=name)
            for i, m in enumerate(_opt_list(raw, "methods", path))
        )
        elem = None
        if "elem" in raw:
            elem = self.get(_field(raw, "elem", path), f"{path}.elem")
        return TypeDescriptor(kind=kind, name=name, methods=methods, elem=elem)


def _method(raw: Any, path: str, default_origin: str = "") -> Method:
    if not isinstance(raw, dict):
        raise DumpFormatError("method entry must be an object", path)
    return Method(
        name=_field(raw, "name", path),
        params=tuple(str(p) for p in _opt_list(raw, "params", path)),
        results=tuple(str(r) for r in _opt_list(raw, "results", path)),
        origin=raw.get("origin", default_origin),
    )


def _object(raw: Any, path: str, types: _TypeTable) -> Object:
    if not isinstance(raw, dict):
        raise DumpFormatError("object entry must be an object", path)
    kind_name = _field(raw, "kind", path)
    kind = _OBJECT_KINDS.get(kind_name)
    if kind is None:
        raise DumpFormatError(f"unknown object kind '{kind_name}'", path)
    typ = None
    if "type" in raw:
        typ = types.get(_field(raw, "type", path), f"{path}.type")
    imported = None
    if kind is ObjectKind.PKGNAME:
        imp = _field(raw, "imported", path, dict)
        imported = Package(
            path=_field(imp, "path", f"{path}.imported"),
            name=_field(imp, "name", f"{path}.imported"),
        )
    return Object(kind=kind, name=_field(raw, "name", path), type=typ,
                  imported=imported)


# ═════════════════════════════════════════════════════════════════════════
#  PART 3: NODES
# ═════════════════════════════════════════════════════════════════════════

class _NodeBuilder:
    """Builds syntax nodes and records their bindings as it goes."""

    def __init__(
        self,
        types: _TypeTable,
        objects: Dict[str, Object],
        info: TypeBinding,
        filename: str,
    ) -> None:
        self.types = types
        self.objects = objects
        self.info = info
        self.filename = filename
        self.count = 0
        self._builders: Dict[str, Callable[[Dict[str, Any], Span, str], Node]] = {
            "File": self._file,
            "Stmt": self._stmt,
            "Ident": self._ident,
            "BasicLit": self._basic_lit,
            "SelectorExpr": self._selector,
            "BinaryExpr": self._binary,
            "UnaryExpr": self._unary,
            "ParenExpr": self._paren,
            "CallExpr": self._call,
        }

    def build(self, raw: Any, path: str) -> Node:
        if not isinstance(raw, dict):
            raise DumpFormatError("node must be an object", path)
        kind = _field(raw, "kind", path)
        builder = self._builders.get(kind)
        if builder is None:
            raise DumpFormatError(
                f"unknown node kind '{kind}' (expected one of "
                f"{', '.join(node_kinds())})",
                path,
            )
        start = _field(raw, "start", path, int)
        end = _field(raw, "end", path, int)
        try:
            span = Span(start, end)
        except ValueError as exc:
            raise DumpFormatError(str(exc), path) from exc
        node = builder(raw, span, path)
        self.count += 1
        if "type" in raw:
            self.info.record_type(
                node, self.types.get(_field(raw, "type", path), f"{path}.type")
            )
        return node

    def _expr(self, raw: Dict[str, Any], key: str, path: str) -> Expr:
        node = self.build(_field(raw, key, path, dict), f"{path}.{key}")
        if not isinstance(node, Expr):
            raise DumpFormatError("expected an expression", f"{path}.{key}")
        return node

    def _children(self, raw: Dict[str, Any], key: str, path: str) -> List[Node]:
        return [
            self.build(child, f"{path}.{key}[{i}]")
            for i, child in enumerate(_opt_list(raw, key, path))
        ]

    def _op(self, raw: Dict[str, Any], path: str) -> Op:
        text = _field(raw, "op", path)
        try:
            return Op.from_token(text)
        except ValueError as exc:
            raise DumpFormatError(f"unknown operator '{text}'", f"{path}.op") from exc

    # ── per-kind builders ────────────────────────────────────────────

    def _file(self, raw: Dict[str, Any], span: Span, path: str) -> Node:
        return File(span=span, name=raw.get("name", self.filename),
                    decls=self._children(raw, "decls", path))

    def _stmt(self, raw: Dict[str, Any], span: Span, path: str) -> Node:
        return Stmt(span=span, kind=raw.get("stmt", "block"),
                    body=self._children(raw, "body", path))

    def _ident(self, raw: Dict[str, Any], span: Span, path: str) -> Node:
        ident = Ident(span=span, name=_field(raw, "name", path))
        obj_id = raw.get("obj")
        if obj_id is not None:
            obj = self.objects.get(obj_id)
            if obj is None:
                raise DumpFormatError(f"unknown object id '{obj_id}'", f"{path}.obj")
            self.info.record_use(ident, obj)
        return ident

    def _basic_lit(self, raw: Dict[str, Any], span: Span, path: str) -> Node:
        return BasicLit(span=span, kind=raw.get("lit", "INT"),
                        value=_field(raw, "value", path))

    def _selector(self, raw: Dict[str, Any], span: Span, path: str) -> Node:
        sel = self._expr(raw, "sel", path)
        if not isinstance(sel, Ident):
            raise DumpFormatError("selector must be an Ident", f"{path}.sel")
        return SelectorExpr(span=span, x=self._expr(raw, "x", path), sel=sel)

    def _binary(self, raw: Dict[str, Any], span: Span, path: str) -> Node:
        return BinaryExpr(span=span, op=self._op(raw, path),
                          x=self._expr(raw, "x", path),
                          y=self._expr(raw, "y", path))

    def _unary(self, raw: Dict[str, Any], span: Span, path: str) -> Node:
        return UnaryExpr(span=span, op=self._op(raw, path),
                         x=self._expr(raw, "x", path))

    def _paren(self, raw: Dict[str, Any], span: Span, path: str) -> Node:
        return ParenExpr(span=span, x=self._expr(raw, "x", path))

    def _call(self, raw: Dict[str, Any], span: Span, path: str) -> Node:
        args = self._children(raw, "args", path)
        for i, arg in enumerate(args):
            if not isinstance(arg, Expr):
                raise DumpFormatError("expected an expression", f"{path}.args[{i}]")
        return CallExpr(span=span, fun=self._expr(raw, "fun", path), args=args)


# ═════════════════════════════════════════════════════════════════════════
#  PART 4: ENTRY POINTS
# ═════════════════════════════════════════════════════════════════════════

def load(data: Dict[str, Any]) -> CompilationUnit:
    """Build a ``CompilationUnit`` from an already-decoded dump object."""
    if not isinstance(data, dict):
        raise DumpFormatError("dump must be a JSON object")
    filename = data.get("file", "")
    source = SourceBuffer(_field(data, "source", "$"), filename)

    raw_types = data.get("types", {})
    if not isinstance(raw_types, dict):
        raise DumpFormatError("field 'types' must be an object", "$.types")
    types = _TypeTable(raw_types)
    for type_id in raw_types:
        types.get(type_id, f"$.types.{type_id}")

    raw_objects = data.get("objects", {})
    if not isinstance(raw_objects, dict):
        raise DumpFormatError("field 'objects' must be an object", "$.objects")
    objects = {
        obj_id: _object(raw, f"$.objects.{obj_id}", types)
        for obj_id, raw in raw_objects.items()
    }

    info = TypeBinding()
    builder = _NodeBuilder(types, objects, info, filename)
    root = builder.build(_field(data, "root", "$", dict), "$.root")
    if not isinstance(root, File):
        raise DumpFormatError("root node must be a File", "$.root")
    if root.span.end > len(source):
        raise DumpFormatError(
            f"root span ends at {root.span.end} but source has "
            f"{len(source)} bytes",
            "$.root",
        )

    logger.debug(
        "loaded %s: %d nodes, %d typed expressions, %d identifier uses",
        filename or "<dump>", builder.count, len(info.types), len(info.uses),
    )
    return CompilationUnit(root=root, info=info, source=source)


def loads(text: Union[str, bytes]) -> CompilationUnit:
    """Parse a dump from a JSON string."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DumpFormatError(f"invalid JSON: {exc}") from exc
    return load(data)


def parsedump(
    source: Union[str, Path, IO[str]],
    encoding: Optional[str] = "utf-8",
) -> CompilationUnit:
    """
    Read a dump from a path or an open text stream.

    Usage
    -----
    >>> unit = parsedump("main.go.json")
    >>> diags = run_analyzer(ANALYZER, unit)
    """
    if isinstance(source, (str, Path)):
        text = Path(source).read_text(encoding=encoding)
    else:
        text = source.read()
    return loads(text)


__all__ = ["DumpFormatError", "PREDECLARED_TYPES", "load", "loads", "parsedump"]
