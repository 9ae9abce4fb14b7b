"""
errcmp_shims/render.py
══════════════════════

Source buffer for one compilation unit: verbatim span slicing and
offset → (line, column) mapping.  Offsets count UTF-8 bytes.

Rendering a node is nothing more than returning the original text of its
span; no pretty-printing is attempted, so the output is byte-for-byte
what the author wrote (comments and odd spacing included).

License: MIT
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from typing import List, Optional

from errcmp_shims.syntax import Node, Span


class SpanError(ValueError):
    """A span does not lie inside the source buffer."""


@dataclass(frozen=True)
class SourceLocation:
    """A specific point in source code."""
    file: str = ""
    line: int = 0
    column: int = 0

    def __str__(self) -> str:
        if self.column:
            return f"{self.file}:{self.line}:{self.column}"
        return f"{self.file}:{self.line}"


class SourceBuffer:
    """
    Immutable view of a unit's source text.

    Spans and offsets count UTF-8 bytes, as go/token positions do; the
    buffer keeps the encoded form and decodes each slice on the way out.

    Usage
    -----
    >>> buf = SourceBuffer("if err == io.EOF {}", "main.go")
    >>> buf.slice(Span(3, 16))
    'err == io.EOF'
    >>> str(buf.location(3))
    'main.go:1:4'
    """

    def __init__(self, text: str, filename: str = "") -> None:
        self._text = text
        self._data = text.encode("utf-8")
        self.filename = filename
        # byte offsets at which each line starts
        self._line_starts: List[int] = [0]
        pos = self._data.find(b"\n")
        while pos != -1:
            self._line_starts.append(pos + 1)
            pos = self._data.find(b"\n", pos + 1)

    @property
    def text(self) -> str:
        return self._text

    @property
    def data(self) -> bytes:
        """UTF-8 encoding of the source; spans index into this."""
        return self._data

    def __len__(self) -> int:
        return len(self._data)

    def _check(self, span: Span) -> None:
        if span.end > len(self._data):
            raise SpanError(
                f"span [{span.start}, {span.end}) exceeds source of "
                f"{len(self._data)} bytes in {self.filename or '<source>'}"
            )

    def slice(self, span: Span) -> str:
        """Verbatim text of ``span``."""
        self._check(span)
        try:
            return self._data[span.start:span.end].decode("utf-8")
        except UnicodeDecodeError as exc:
            raise SpanError(
                f"span [{span.start}, {span.end}) splits a UTF-8 sequence "
                f"in {self.filename or '<source>'}"
            ) from exc

    def render(self, node: Optional[Node]) -> str:
        """Verbatim text of ``node``; empty for a missing node."""
        if node is None:
            return ""
        return self.slice(node.span)

    def location(self, offset: int) -> SourceLocation:
        """1-based line and byte column for a source offset."""
        if offset < 0 or offset > len(self._data):
            raise SpanError(
                f"offset {offset} outside source of {len(self._data)} bytes"
            )
        line_idx = bisect_right(self._line_starts, offset) - 1
        column = offset - self._line_starts[line_idx] + 1
        return SourceLocation(
            file=self.filename, line=line_idx + 1, column=column
        )

    def __repr__(self) -> str:
        return f"<SourceBuffer {self.filename!r} ({len(self._data)} bytes)>"


__all__ = ["SourceBuffer", "SourceLocation", "SpanError"]
