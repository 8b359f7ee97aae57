# scalargrad/errors.py
"""
Error and warning types.

Programmer errors (shape mismatch, bad index, bad operand type) raise.
Recoverable conditions (division by zero, incompatible view/matmul, backward
on a non-scalar tensor) emit a GradientWarning and degrade to NaN / False /
None / no-op.
"""

import warnings


class ScalarGradError(Exception):
    """Base class for errors raised by scalargrad."""


class ShapeError(ScalarGradError, ValueError):
    """Element-wise operation on tensors whose shapes differ."""


class GradientWarning(RuntimeWarning):
    """Recoverable numerical or shape condition; computation continues."""


def warn(message: str) -> None:
    # stacklevel=3 points at the caller of the public op, not the helper
    warnings.warn(message, GradientWarning, stacklevel=3)
