# scalargrad/ops/transcendental.py
import math

from ..core.node import ScalarNode
from .arithmetic import _as_node


def tanh(x):
    """
    tanh(x) = (e^{2x} - 1) / (e^{2x} + 1), with local partial 1 - tanh(x)^2.

    e^{2x} overflows for x > ~355; tanh is exactly 1.0 in float64 long before.
    """
    x = _as_node(x)
    try:
        e = math.exp(2.0 * x.value)
        val = (e - 1.0) / (e + 1.0)
    except OverflowError:
        val = 1.0
    if math.isnan(val) and not math.isnan(x.value):
        # x = +inf gives inf / inf
        val = 1.0
    return ScalarNode(val, (x,), "tanh")
