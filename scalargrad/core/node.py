# scalargrad/core/node.py
from __future__ import annotations
import math
import numbers
from typing import Optional, Sequence, Tuple

from ..errors import warn


class ScalarNode:
    """
    One vertex of the computation graph.

    Attributes
    ----------
    value : float
        Forward (primal) value.
    gradient : float
        Accumulated d(root)/d(this), filled by a backward pass rooted at `root`.
        Starts at 0.0 and is never reset by the engine.
    operands : tuple[ScalarNode, ...]
        Inputs this node was computed from. Empty for leaves.
    op_tag : str
        Operator tag ("" for leaves, "+", "*", "**", "tanh", "sum", "dot").
        Selects the local gradient rule in `local_backward`.
    exponent : float | None
        Constant exponent, only set on "**" nodes.
    label : str
        Optional debug name.
    """

    def __init__(self, value, operands: Sequence[ScalarNode] = (), op_tag: str = "",
                 *, exponent: Optional[float] = None, label: str = ""):
        # numpy scalars register as numbers.Real
        if not isinstance(value, numbers.Real):
            raise TypeError(f"ScalarNode only accepts real numbers, but got {type(value)}")
        self.value = float(value)
        self.gradient = 0.0
        self.operands: Tuple[ScalarNode, ...] = tuple(operands)
        self.op_tag = op_tag
        self.exponent = exponent
        self.label = label

    @property
    def is_leaf(self) -> bool:
        return not self.operands

    def __repr__(self):
        name = f"{self.label} " if self.label else ""
        return f"ScalarNode({name}value={self.value:.4f}, gradient={self.gradient:.4f})"

    # ------------------------------------------------------------------ #
    def local_backward(self) -> None:
        """Push self.gradient one level down to the operands."""
        _RULES[self.op_tag](self)

    def backward(self) -> None:
        from .engine import backward
        backward(self)

    # Operator overloading for arithmetic operations
    def __add__(self, other):
        from ..ops.arithmetic import add
        return add(self, other)

    def __radd__(self, other):
        from ..ops.arithmetic import add
        return add(other, self)

    def __sub__(self, other):
        from ..ops.arithmetic import sub
        return sub(self, other)

    def __rsub__(self, other):
        from ..ops.arithmetic import sub
        return sub(other, self)

    def __mul__(self, other):
        from ..ops.arithmetic import mul
        return mul(self, other)

    def __rmul__(self, other):
        from ..ops.arithmetic import mul
        return mul(other, self)

    def __truediv__(self, other):
        from ..ops.arithmetic import div
        return div(self, other)

    def __rtruediv__(self, other):
        from ..ops.arithmetic import div
        return div(other, self)

    def __neg__(self):
        from ..ops.arithmetic import neg
        return neg(self)

    def __pow__(self, exponent):
        from ..ops.arithmetic import pow
        return pow(self, exponent)

    def tanh(self):
        from ..ops.transcendental import tanh
        return tanh(self)


def real_pow(base: float, exponent: float) -> float:
    """base ** exponent over the reals; undefined results become NaN with a warning."""
    try:
        return math.pow(base, exponent)
    except ValueError:
        warn(f"{base!r} ** {exponent!r} is undefined over the reals; result is NaN")
        return math.nan
    except OverflowError:
        # only a negative base with an odd integer exponent keeps its sign
        if base < 0 and float(exponent).is_integer() and int(exponent) % 2:
            return -math.inf
        return math.inf


# ---------------- local gradient rules, keyed by op_tag ---------------- #
def _leaf_rule(out: ScalarNode) -> None:
    pass


def _add_rule(out: ScalarNode) -> None:
    a, b = out.operands
    a.gradient += out.gradient
    b.gradient += out.gradient


def _mul_rule(out: ScalarNode) -> None:
    a, b = out.operands
    a.gradient += b.value * out.gradient
    b.gradient += a.value * out.gradient


def _pow_rule(out: ScalarNode) -> None:
    (a,) = out.operands
    p = out.exponent
    if p == 0.0:
        return
    a.gradient += p * real_pow(a.value, p - 1.0) * out.gradient


def _tanh_rule(out: ScalarNode) -> None:
    (a,) = out.operands
    a.gradient += (1.0 - out.value ** 2) * out.gradient


def _sum_rule(out: ScalarNode) -> None:
    for a in out.operands:
        a.gradient += out.gradient


def _dot_rule(out: ScalarNode) -> None:
    # operands = lhs[0..n) + rhs[0..n)
    n = len(out.operands) // 2
    lhs, rhs = out.operands[:n], out.operands[n:]
    for a, b in zip(lhs, rhs):
        a.gradient += b.value * out.gradient
        b.gradient += a.value * out.gradient


_RULES = {
    "": _leaf_rule,
    "+": _add_rule,
    "*": _mul_rule,
    "**": _pow_rule,
    "tanh": _tanh_rule,
    "sum": _sum_rule,
    "dot": _dot_rule,
}
