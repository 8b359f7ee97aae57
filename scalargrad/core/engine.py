# scalargrad/core/engine.py
from __future__ import annotations
from typing import Iterable, List

from .node import ScalarNode


def topological_order(root: ScalarNode) -> List[ScalarNode]:
    """
    Depth-first post-order over the operand graph of `root`.

    Each distinct node appears once (visited by identity, never by value) and
    only after all of its operands, so the reversed list is a valid order for
    replaying local gradient rules.

    An explicit stack replaces recursion: long chains (e.g. a running sum over
    thousands of terms) would otherwise exceed the interpreter recursion limit.
    """
    order: List[ScalarNode] = []
    visited = set()
    # (node, operands_pushed)
    stack = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        if expanded:
            order.append(node)
            continue
        if id(node) in visited:
            continue
        visited.add(id(node))
        stack.append((node, True))
        # reversed so operands are finished left to right
        for operand in reversed(node.operands):
            if id(operand) not in visited:
                stack.append((operand, False))
    return order


def backward(root: ScalarNode) -> None:
    """
    Run a single reverse pass from `root`.

    Notes:
        - Seeds root.gradient = 1.0 (overwriting, d(root)/d(root) = 1).
        - Every other gradient is accumulated with +=, so a node consumed twice
          receives both contributions.
        - Gradients are NOT zeroed first. Calling backward twice on overlapping
          graphs adds up; zeroing between steps is the caller's job
          (see zero_gradients / zero_graph).
    """
    order = topological_order(root)
    root.gradient = 1.0
    for node in reversed(order):
        node.local_backward()


def zero_gradients(nodes: Iterable[ScalarNode]) -> None:
    """Set gradient = 0.0 on each node (duplicates are harmless)."""
    for node in nodes:
        node.gradient = 0.0


def zero_graph(root: ScalarNode) -> None:
    """Zero the gradient of every node reachable from `root`."""
    zero_gradients(topological_order(root))
