"""
errcmp_shims/comparison.py
══════════════════════════

Rule: do not compare ``error`` values with ``==`` / ``!=``.

Wrapped errors (``fmt.Errorf("...: %w", err)``) break identity
comparison, so ``err == ErrNotFound`` silently stops matching once any
layer adds context.  ``errors.Is`` unwraps the chain; this rule reports
every raw comparison and offers the rewrite.

Pipeline per node
─────────────────

    iter_preorder(root)
        │  BinaryExpr with op ∈ {==, !=}
        ▼
    should_inspect      nil operand?        → skip
        │               io.EOF operand?     → skip
        │               no error operand?   → skip
        ▼
    synthesize_fix      [!]errors.Is(L, R)
        ▼
    emit_diagnostic     message + one SuggestedFix with one TextEdit

Matches never prune traversal: ``(a == b) == c`` is checked at both
levels independently.

Exclusions
──────────
* ``err == nil`` / ``err != nil``: the idiomatic "no error" test.
* ``err == io.EOF``: Reader implementations return io.EOF unwrapped.

Only one operand needs to be an ``error``.  A comparison between an
error and some unrelated value (a string, a differently-typed
sentinel) is reported as well.

License: MIT
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from errcmp_shims.analysis import Analyzer, Pass
from errcmp_shims.ast_helper import is_equality_comparison, iter_preorder
from errcmp_shims.classify import has_error_capability, is_nil_typed, is_sentinel
from errcmp_shims.diagnostics import Diagnostic, SuggestedFix, TextEdit
from errcmp_shims.render import SourceBuffer
from errcmp_shims.syntax import BinaryExpr, Node, Op
from errcmp_shims.typeinfo import TypeBinding

logger = logging.getLogger(__name__)


#: Package whose ``Is`` function performs the semantic comparison.
EQUIVALENCE_PACKAGE = "errors"

ANALYZER_NAME = "err113cmp"

MESSAGE_TEMPLATE = "do not compare errors directly, use errors.Is() instead: {orig}"
FIX_TEMPLATE = "should replace {orig} with {new}"

_GO_ESCAPES = {
    "\a": "\\a", "\b": "\\b", "\f": "\\f", "\n": "\\n",
    "\r": "\\r", "\t": "\\t", "\v": "\\v",
    "\\": "\\\\", '"': '\\"',
}


def quote_go(text: str) -> str:
    """
    Double-quote ``text`` the way Go's ``%q`` verb does.

    Printable characters pass through unchanged; the usual backslash
    escapes are used where Go has them, ``\\xNN`` for other control bytes
    and ``\\uNNNN`` / ``\\UNNNNNNNN`` for other non-printable runes.
    """
    out = ['"']
    for ch in text:
        if ch in _GO_ESCAPES:
            out.append(_GO_ESCAPES[ch])
        elif ch.isprintable():
            out.append(ch)
        else:
            cp = ord(ch)
            if cp < 0x80:
                out.append(f"\\x{cp:02x}")
            elif cp <= 0xFFFF:
                out.append(f"\\u{cp:04x}")
            else:
                out.append(f"\\U{cp:08x}")
    out.append('"')
    return "".join(out)


# ═════════════════════════════════════════════════════════════════════════
#  FILTER
# ═════════════════════════════════════════════════════════════════════════

def should_inspect(node: Optional[Node], info: TypeBinding) -> bool:
    """
    Decide whether ``node`` is an error comparison worth reporting.

    Checks run in a fixed order: operator, nil operands, ``io.EOF``
    operands, then error capability of at least one operand.
    """
    if not is_equality_comparison(node):
        return False
    x, y = node.x, node.y

    if is_nil_typed(x, info) or is_nil_typed(y, info):
        logger.debug("skip %r: nil operand", node)
        return False

    if is_sentinel(x, info) or is_sentinel(y, info):
        logger.debug("skip %r: io.EOF operand", node)
        return False

    if not has_error_capability(x, info) and not has_error_capability(y, info):
        logger.debug("skip %r: no error operand", node)
        return False

    return True


# ═════════════════════════════════════════════════════════════════════════
#  FIX + DIAGNOSTIC
# ═════════════════════════════════════════════════════════════════════════

def synthesize_fix(node: BinaryExpr, source: SourceBuffer) -> str:
    """Replacement text: ``errors.Is(L, R)``, negated for ``!=``."""
    left = source.render(node.x)
    right = source.render(node.y)
    negate = "!" if node.op is Op.NEQ else ""
    return f"{negate}{EQUIVALENCE_PACKAGE}.Is({left}, {right})"


def emit_diagnostic(
    node: BinaryExpr,
    replacement: str,
    source: SourceBuffer,
    category: str = ANALYZER_NAME,
) -> Diagnostic:
    """Package ``node`` and its rewrite into a reportable Diagnostic."""
    orig = source.render(node)
    quoted = quote_go(orig)
    fix = SuggestedFix(
        message=FIX_TEMPLATE.format(orig=quoted, new=quote_go(replacement)),
        text_edits=(TextEdit(node.pos, node.end, replacement),),
    )
    return Diagnostic(
        pos=node.pos,
        location=source.location(node.pos),
        message=MESSAGE_TEMPLATE.format(orig=quoted),
        category=category,
        suggested_fixes=(fix,),
    )


def inspect_comparison(
    node: Node,
    info: TypeBinding,
    source: SourceBuffer,
    category: str = ANALYZER_NAME,
) -> Optional[Diagnostic]:
    """Filter → synthesize → emit for one node; None when it does not match."""
    if not should_inspect(node, info):
        return None
    replacement = synthesize_fix(node, source)
    return emit_diagnostic(node, replacement, source, category)


# ═════════════════════════════════════════════════════════════════════════
#  WALKER + ANALYZER
# ═════════════════════════════════════════════════════════════════════════

def walk_comparisons(
    root: Optional[Node],
    info: TypeBinding,
    source: SourceBuffer,
    category: str = ANALYZER_NAME,
) -> List[Diagnostic]:
    """Pre-order walk of ``root``; one diagnostic per matching comparison."""
    found: List[Diagnostic] = []
    for node in iter_preorder(root):
        if not isinstance(node, BinaryExpr):
            continue
        diag = inspect_comparison(node, info, source, category)
        if diag is not None:
            found.append(diag)
    return found


def run(pass_: Pass) -> Sequence[Diagnostic]:
    diags = walk_comparisons(
        pass_.root, pass_.info, pass_.source, pass_.analyzer.name
    )
    for diag in diags:
        pass_.report(diag)
    return diags


ANALYZER = Analyzer(
    name=ANALYZER_NAME,
    doc=(
        "checks that errors are compared with errors.Is instead of == or !=\n"
        "\n"
        "Comparisons against nil and io.EOF are allowed. A suggested fix\n"
        "rewrites a == b to errors.Is(a, b) and a != b to !errors.Is(a, b)."
    ),
    run=run,
)


__all__ = [
    "EQUIVALENCE_PACKAGE", "ANALYZER_NAME", "ANALYZER",
    "quote_go",
    "should_inspect", "synthesize_fix", "emit_diagnostic",
    "inspect_comparison", "walk_comparisons", "run",
]
