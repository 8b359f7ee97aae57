# scalargrad/ops/reduction.py
import math
from typing import Sequence

import numpy as np

from ..core.node import ScalarNode
from .arithmetic import _as_node


def total(xs: Sequence) -> ScalarNode:
    """
    n-ary sum as a single node: out.value = Σ x_i, ∂out/∂x_i = 1.

    One node instead of a chain of n-1 "+" nodes keeps the graph shallow.
    """
    xs = [_as_node(x) for x in xs]
    return ScalarNode(math.fsum(x.value for x in xs), xs, "sum")


def dot(lhs: Sequence, rhs: Sequence) -> ScalarNode:
    """
    Inner product as a single node with operands lhs + rhs:
      out.value    = Σ lhs_k * rhs_k
      ∂out/∂lhs_k  = rhs_k
      ∂out/∂rhs_k  = lhs_k
    """
    if len(lhs) != len(rhs):
        raise ValueError(f"dot needs equal lengths, got {len(lhs)} and {len(rhs)}")
    lhs = [_as_node(x) for x in lhs]
    rhs = [_as_node(x) for x in rhs]
    a = np.fromiter((x.value for x in lhs), dtype=np.float64, count=len(lhs))
    b = np.fromiter((x.value for x in rhs), dtype=np.float64, count=len(rhs))
    return ScalarNode(float(np.dot(a, b)), lhs + rhs, "dot")
