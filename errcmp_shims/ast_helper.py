#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
errcmp_shims/ast_helper.py
══════════════════════════

Traversal and query utilities over ``errcmp_shims.syntax`` trees.

    ┌─────────────────────────────────────────────────────────────────┐
    │  Traversal                                                      │
    │    • Pre-order iteration                                        │
    ├─────────────────────────────────────────────────────────────────┤
    │  Querying                                                       │
    │    • Equality-comparison predicate                              │
    └─────────────────────────────────────────────────────────────────┘

Design Principles
─────────────────
1. **Non-invasive**: nodes are never modified.

2. **Defensive**: every function accepts ``None`` and returns an empty
   iterator / False instead of raising.

3. **Iterative**: traversal uses an explicit stack, so deeply nested
   expressions (long ``a == b || c == d || ...`` chains) cannot hit the
   recursion limit.

License: MIT
"""

from __future__ import annotations

from typing import Iterator, List, Optional

from errcmp_shims.syntax import EQUALITY_OPS, BinaryExpr, Node


# ═══════════════════════════════════════════════════════════════════════════
#  PART 1: TRAVERSAL
# ═══════════════════════════════════════════════════════════════════════════

def iter_preorder(root: Optional[Node]) -> Iterator[Node]:
    """
    Iterate over nodes in pre-order (node, then children left to right).

    Args:
        root: Root of the subtree (may be None)

    Yields:
        Nodes in pre-order sequence

    Example:
        >>> for node in iter_preorder(unit.root):
        ...     print(type(node).__name__)
    """
    if root is None:
        return
    stack: List[Node] = [root]
    while stack:
        node = stack.pop()
        yield node
        # Push children reversed so the leftmost is processed first (LIFO)
        stack.extend(reversed(list(node.children())))


# ═══════════════════════════════════════════════════════════════════════════
#  PART 2: QUERYING
# ═══════════════════════════════════════════════════════════════════════════

def is_equality_comparison(node: Optional[Node]) -> bool:
    """True for ``BinaryExpr`` nodes whose operator is ``==`` or ``!=``."""
    return isinstance(node, BinaryExpr) and node.op in EQUALITY_OPS


__all__ = ["iter_preorder", "is_equality_comparison"]
