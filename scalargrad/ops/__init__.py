# scalargrad/ops/__init__.py

from .arithmetic import add, sub, mul, div, neg, pow
from .transcendental import tanh
from .reduction import total, dot

__all__ = [
    "add", "sub", "mul", "div", "neg", "pow",
    "tanh",
    "total", "dot",
]
