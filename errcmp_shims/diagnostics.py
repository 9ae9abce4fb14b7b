"""
errcmp_shims/diagnostics.py
═══════════════════════════

Diagnostic records with machine-applicable suggested fixes.

    Diagnostic
     ├─ pos / location / message / category
     └─ suggested_fixes: (SuggestedFix, ...)
                          ├─ message
                          └─ text_edits: (TextEdit(pos, end, new_text), ...)

All records are frozen: a diagnostic is built once per finding and is
handed to the host's reporting sink unchanged.

Besides serialization (JSON lines for addon protocols, GCC-style text
for humans) this module can apply the suggested edits back onto the
source, which is how fixes are previewed and how idempotence of a rule
is verified.

License: MIT
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Tuple

from errcmp_shims.render import SourceLocation
from errcmp_shims.syntax import Span


class DiagnosticSeverity(Enum):
    """Addon-compatible severity levels."""
    ERROR = "error"
    WARNING = "warning"
    STYLE = "style"
    INFORMATION = "information"


class ConflictingEditsError(ValueError):
    """Two text edits touch overlapping source ranges."""


@dataclass(frozen=True)
class TextEdit:
    """Replace source ``[pos, end)`` with ``new_text``."""
    pos: int
    end: int
    new_text: str

    @property
    def span(self) -> Span:
        return Span(self.pos, self.end)

    def to_json(self) -> Dict[str, Any]:
        return {"pos": self.pos, "end": self.end, "newText": self.new_text}


@dataclass(frozen=True)
class SuggestedFix:
    message: str
    text_edits: Tuple[TextEdit, ...] = ()

    def to_json(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "edits": [e.to_json() for e in self.text_edits],
        }


@dataclass(frozen=True)
class Diagnostic:
    """
    A single finding.

    Attributes
    ----------
    pos             : Byte offset of the finding in the unit's source
    location        : Human-facing file:line:column of ``pos``
    message         : Human-readable description
    category        : Name of the analyzer that produced it
    severity        : DiagnosticSeverity
    suggested_fixes : Zero or more machine-applicable fixes
    """
    pos: int
    message: str
    location: SourceLocation = SourceLocation()
    category: str = ""
    severity: DiagnosticSeverity = DiagnosticSeverity.STYLE
    suggested_fixes: Tuple[SuggestedFix, ...] = ()

    @property
    def edits(self) -> Tuple[TextEdit, ...]:
        """All edits of all suggested fixes, in order."""
        return tuple(e for fix in self.suggested_fixes for e in fix.text_edits)

    def to_json(self) -> Dict[str, Any]:
        """Serialize to the addon JSON output format."""
        result: Dict[str, Any] = {
            "file": self.location.file,
            "linenr": self.location.line,
            "column": self.location.column,
            "pos": self.pos,
            "severity": self.severity.value,
            "message": self.message,
            "errorId": self.category,
        }
        if self.suggested_fixes:
            result["fixes"] = [f.to_json() for f in self.suggested_fixes]
        return result

    def to_json_str(self) -> str:
        """Single-line JSON string for addon stdout."""
        return json.dumps(self.to_json())

    def to_gcc_format(self) -> str:
        """GCC-style diagnostic string: file:line:col: severity: message."""
        sev = self.severity.value
        return f"{self.location}: {sev}: {self.message} [{self.category}]"


# ═════════════════════════════════════════════════════════════════════════
#  FIX APPLICATION
# ═════════════════════════════════════════════════════════════════════════

def collect_edits(diagnostics: Iterable[Diagnostic]) -> List[TextEdit]:
    """
    Gather every edit, sorted by position, rejecting overlaps.

    Identical duplicate edits are merged; any other overlap raises
    ``ConflictingEditsError``.
    """
    edits = sorted(
        {e for d in diagnostics for e in d.edits},
        key=lambda e: (e.pos, e.end),
    )
    for prev, cur in zip(edits, edits[1:]):
        if cur.pos < prev.end:
            raise ConflictingEditsError(
                f"edit [{cur.pos}, {cur.end}) overlaps "
                f"edit [{prev.pos}, {prev.end})"
            )
    return edits


def apply_edits(source: str, edits: Iterable[TextEdit]) -> str:
    """
    Apply non-overlapping ``edits`` to ``source``.

    Edit offsets count UTF-8 bytes of ``source``.
    """
    data = source.encode("utf-8")
    ordered = sorted(edits, key=lambda e: (e.pos, e.end))
    out: List[bytes] = []
    cursor = 0
    for edit in ordered:
        if edit.pos < cursor:
            raise ConflictingEditsError(
                f"edit [{edit.pos}, {edit.end}) overlaps a previous edit"
            )
        if edit.end > len(data):
            raise ConflictingEditsError(
                f"edit [{edit.pos}, {edit.end}) exceeds source length "
                f"{len(data)}"
            )
        out.append(data[cursor:edit.pos])
        out.append(edit.new_text.encode("utf-8"))
        cursor = edit.end
    out.append(data[cursor:])
    return b"".join(out).decode("utf-8")


def apply_fixes(source: str, diagnostics: Iterable[Diagnostic]) -> str:
    """Return ``source`` with every suggested fix of ``diagnostics`` applied."""
    return apply_edits(source, collect_edits(diagnostics))


__all__ = [
    "DiagnosticSeverity",
    "TextEdit", "SuggestedFix", "Diagnostic",
    "ConflictingEditsError",
    "collect_edits", "apply_edits", "apply_fixes",
]
