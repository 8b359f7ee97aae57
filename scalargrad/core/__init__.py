# scalargrad/core/__init__.py

"""
Core public API for the graph engine.

Exports:
    ScalarNode     : The differentiable scalar; one vertex of the DAG.
    backward       : Seed a root with 1.0 and replay local rules in reverse order.
    topological_order : Post-order list of every node reachable from a root.
    zero_gradients : Reset the gradients of the given nodes.
    zero_graph     : Reset the gradients of every node under a root.
"""

from .node import ScalarNode
from .engine import backward, topological_order, zero_gradients, zero_graph

__all__ = [
    "ScalarNode",
    "backward", "topological_order",
    "zero_gradients", "zero_graph",
]
