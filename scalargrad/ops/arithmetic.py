# scalargrad/ops/arithmetic.py
import math
import numbers

from ..core.node import ScalarNode, real_pow
from ..errors import warn


def _as_node(x):
    """Ensure x is a ScalarNode; otherwise box it as a leaf."""
    return x if isinstance(x, ScalarNode) else ScalarNode(x)


def _binary(x, y, f, tag):
    """
    Generic binary primitive:
      - boxes literal operands as leaves
      - computes out.value = f(x.value, y.value)
      - records (x, y) as operands; the rule for `tag` lives in core.node
    """
    x = _as_node(x)
    y = _as_node(y)
    return ScalarNode(f(x.value, y.value), (x, y), tag)


def add(x, y): return _binary(x, y, lambda a, b: a + b, "+")
def mul(x, y): return _binary(x, y, lambda a, b: a * b, "*")


def pow(x, exponent):
    """
    Power with a constant exponent:
      out.value = x.value ** exponent
      ∂out/∂x   = exponent * x^(exponent-1)

    Undefined real powers (0 ** -1, (-8) ** 0.5) give a NaN node and a warning.
    """
    if isinstance(exponent, ScalarNode) or not isinstance(exponent, numbers.Real):
        raise TypeError(f"pow only supports constant real exponents, got {type(exponent)}")
    x = _as_node(x)
    exponent = float(exponent)
    return ScalarNode(real_pow(x.value, exponent), (x,), "**", exponent=exponent)


def neg(x):
    return mul(x, -1.0)


def sub(x, y):
    return add(x, neg(y))


def div(x, y):
    """
    x / y, built as x * y**-1.

    A zero divisor does not raise: the reciprocal becomes NaN (still linked to
    y in the graph) and a GradientWarning is emitted.
    """
    x = _as_node(x)
    y = _as_node(y)
    if y.value == 0.0:
        warn(f"division by zero-valued node {y!r}; result is NaN")
        recip = ScalarNode(math.nan, (y,), "**", exponent=-1.0)
        return mul(x, recip)
    return mul(x, pow(y, -1.0))
