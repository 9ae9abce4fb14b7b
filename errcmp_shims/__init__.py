"""
errcmp_shims: error-comparison rule for dumped Go compilation units
====================================================================

Reports ``==`` / ``!=`` comparisons between ``error`` values and
suggests rewriting them to ``errors.Is``.  Input is a JSON dump of one
parsed and type-checked Go file; output is a list of diagnostics, each
with one machine-applicable text edit.

Core modules
------------
syntax
    Syntax-tree node model (``File``, ``Stmt``, ``BinaryExpr``, ...).
typeinfo
    Type descriptors, objects and the ``TypeBinding`` table.
render
    ``SourceBuffer``: verbatim span slicing and line/column mapping.
ast_helper
    Pre-order / post-order traversal and node queries.
classify
    Operand predicates: nil-typed, ``io.EOF`` sentinel, error-typed.
comparison
    The rule itself and its ``ANALYZER`` descriptor.
diagnostics
    ``Diagnostic`` / ``SuggestedFix`` / ``TextEdit`` and fix application.
analysis
    ``Analyzer``, ``Pass``, ``CompilationUnit`` and ``run_analyzer``.
dump
    ``parsedump``: JSON dump → ``CompilationUnit``.

Quick start
-----------
>>> from errcmp_shims import ANALYZER, parsedump, run_analyzer
>>> unit = parsedump("main.go.json")
>>> for diag in run_analyzer(ANALYZER, unit):
...     print(diag.to_gcc_format())
"""

from __future__ import annotations

from typing import List

from errcmp_shims.analysis import Analyzer, CompilationUnit, Pass, run_analyzer
from errcmp_shims.comparison import ANALYZER, walk_comparisons
from errcmp_shims.diagnostics import (
    ConflictingEditsError,
    Diagnostic,
    SuggestedFix,
    TextEdit,
    apply_fixes,
)
from errcmp_shims.dump import DumpFormatError, load, loads, parsedump
from errcmp_shims.render import SourceBuffer, SourceLocation, SpanError

# ---------------------------------------------------------------------------
# Package metadata
# ---------------------------------------------------------------------------

__version__ = "0.1.0"
__license__ = "MIT"

__all__: List[str] = [
    "__version__",
    "ANALYZER",
    "Analyzer",
    "CompilationUnit",
    "Pass",
    "run_analyzer",
    "walk_comparisons",
    "Diagnostic",
    "SuggestedFix",
    "TextEdit",
    "apply_fixes",
    "ConflictingEditsError",
    "DumpFormatError",
    "load",
    "loads",
    "parsedump",
    "SourceBuffer",
    "SourceLocation",
    "SpanError",
]
