"""
errcmp_shims/analysis.py
════════════════════════

Minimal analysis-pass framework: the contract between a host driver and
a rule.

  ┌──────────────────────────────────────────────────────────────┐
  │  host                                                        │
  │    unit = parsedump("main.go.json")                          │
  │    diags = run_analyzer(ANALYZER, unit)                      │
  │                     │                                        │
  │  ┌──────────────────▼───────────────────────┐                │
  │  │  Pass(analyzer, unit)                    │                │
  │  │    .unit.root / .unit.info / .unit.source│                │
  │  │    .report(diag)  ──► .diagnostics       │                │
  │  └──────────────────┬───────────────────────┘                │
  │                     │                                        │
  │  Analyzer.run(pass) ┘   (frozen descriptor, built once)      │
  └──────────────────────────────────────────────────────────────┘

An ``Analyzer`` is an immutable value (name, documentation, entry
point).  There is no package-level registry: hosts keep whatever table
of analyzers they like and hand one ``CompilationUnit`` at a time to
``run_analyzer``.  A ``Pass`` is created per (analyzer, unit) pair and is
the only mutable object involved.

License: MIT
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Sequence

from errcmp_shims.diagnostics import Diagnostic
from errcmp_shims.render import SourceBuffer
from errcmp_shims.syntax import File
from errcmp_shims.typeinfo import TypeBinding

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Analyzer:
    """
    Immutable rule descriptor.

    Attributes
    ----------
    name : Short identifier, also used as the diagnostics' category
    doc  : Documentation; the first line is the summary
    run  : Entry point, called once per ``Pass``
    """
    name: str
    doc: str
    run: Callable[[Pass], Sequence[Diagnostic]]

    @property
    def summary(self) -> str:
        return self.doc.strip().splitlines()[0] if self.doc.strip() else ""

    def __repr__(self) -> str:
        return f"<Analyzer '{self.name}'>"


@dataclass(frozen=True)
class CompilationUnit:
    """One parsed and type-checked source file."""
    root: File
    info: TypeBinding
    source: SourceBuffer

    @property
    def filename(self) -> str:
        return self.source.filename


@dataclass
class Pass:
    """
    Per-unit execution context handed to ``Analyzer.run``.

    Collects whatever the analyzer reports; the host reads
    ``diagnostics`` afterwards.
    """
    analyzer: Analyzer
    unit: CompilationUnit
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def root(self) -> File:
        return self.unit.root

    @property
    def info(self) -> TypeBinding:
        return self.unit.info

    @property
    def source(self) -> SourceBuffer:
        return self.unit.source

    def report(self, diag: Diagnostic) -> None:
        self.diagnostics.append(diag)


def run_analyzer(analyzer: Analyzer, unit: CompilationUnit) -> List[Diagnostic]:
    """
    Run ``analyzer`` over ``unit`` and return its diagnostics in report
    order.

    Exceptions raised by the analyzer propagate to the caller.
    """
    pass_ = Pass(analyzer=analyzer, unit=unit)
    t0 = time.monotonic()
    analyzer.run(pass_)
    elapsed_ms = (time.monotonic() - t0) * 1000.0
    logger.info(
        "%s: %d findings in %s (%.1fms)",
        analyzer.name, len(pass_.diagnostics),
        unit.filename or "<unit>", elapsed_ms,
    )
    return list(pass_.diagnostics)


__all__ = ["Analyzer", "CompilationUnit", "Pass", "run_analyzer"]
