"""Tensor: a shape-tagged, row-major collection of ScalarNodes."""

from __future__ import annotations
import math
import operator
from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np

from .core.node import ScalarNode
from .errors import ShapeError, warn
from .ops import arithmetic, reduction, transcendental


def _check_shape(shape) -> Tuple[int, ...]:
    shape = tuple(int(d) for d in shape)
    if not shape or any(d <= 0 for d in shape):
        raise ValueError(f"shape must be a non-empty sequence of positive ints, got {shape}")
    return shape


def _flatten_shape_args(shape) -> tuple:
    # t.view(3, 2) and t.view((3, 2)) are both accepted
    if len(shape) == 1 and isinstance(shape[0], (tuple, list)):
        return tuple(shape[0])
    return shape


class Tensor:
    """
    Dense tensor whose cells are ScalarNodes.

    Differentiation is entirely delegated to the nodes: element-wise ops build
    one new node per cell, `sum` and `matmul` build n-ary "sum" / "dot" nodes.
    Inputs are never mutated; only `view` and item assignment change a tensor.

    Tensor(nodes)  -> 1-D tensor, shape (len(nodes),)
    Tensor(node)   -> shape (1,)
    Tensor.full(fill, *shape), Tensor.from_array(nested) for the rest.
    """

    def __init__(self, data):
        if isinstance(data, (ScalarNode, int, float, np.floating, np.integer)):
            storage = [arithmetic._as_node(data)]
        else:
            storage = [arithmetic._as_node(x) for x in data]
        if not storage:
            raise ValueError("Tensor needs at least one element")
        self._storage: List[ScalarNode] = storage
        self._shape: Tuple[int, ...] = (len(storage),)

    @classmethod
    def _from_storage(cls, storage: List[ScalarNode], shape: Sequence[int]) -> Tensor:
        t = cls.__new__(cls)
        t._storage = storage
        t._shape = tuple(shape)
        if len(storage) != math.prod(t._shape):
            raise ValueError(f"{len(storage)} cells do not fill shape {t._shape}")
        return t

    @classmethod
    def full(cls, fill, *shape) -> Tensor:
        """Every cell gets its own leaf carrying fill's value (no shared gradients)."""
        shape = _check_shape(_flatten_shape_args(shape))
        value = fill.value if isinstance(fill, ScalarNode) else fill
        return cls._from_storage([ScalarNode(value) for _ in range(math.prod(shape))], shape)

    @classmethod
    def zeros(cls, *shape) -> Tensor:
        return cls.full(0.0, *shape)

    @classmethod
    def from_array(cls, data) -> Tensor:
        """Leaves from a (nested) list or ndarray; shape follows numpy."""
        arr = np.asarray(data, dtype=np.float64)
        if arr.ndim == 0:
            arr = arr.reshape(1)
        shape = _check_shape(arr.shape)
        return cls._from_storage([ScalarNode(v) for v in arr.ravel().tolist()], shape)

    # ------------------------------------------------------------------ #
    @property
    def shape(self) -> Tuple[int, ...]:
        return self._shape

    @property
    def storage(self) -> List[ScalarNode]:
        return self._storage

    @property
    def ndim(self) -> int:
        return len(self._shape)

    @property
    def size(self) -> int:
        return len(self._storage)

    def __len__(self):
        return self._shape[0]

    def __iter__(self) -> Iterator[ScalarNode]:
        return iter(self._storage)

    @property
    def values(self) -> np.ndarray:
        return np.array([n.value for n in self._storage], dtype=np.float64).reshape(self._shape)

    @property
    def grad(self) -> np.ndarray:
        return np.array([n.gradient for n in self._storage], dtype=np.float64).reshape(self._shape)

    def item(self) -> float:
        if self.size != 1:
            raise ValueError(f"item() needs a single-element tensor, shape is {self._shape}")
        return self._storage[0].value

    # ------------------------------------------------------------------ #
    def view(self, *shape) -> bool:
        """
        Reinterpret the storage with a new shape, in place.

        Returns False (tensor untouched, GradientWarning) when the element
        count would change.
        """
        shape = tuple(int(d) for d in _flatten_shape_args(shape))
        if not shape or any(d <= 0 for d in shape) or math.prod(shape) != self.size:
            warn(f"cannot view tensor of shape {self._shape} as {shape}: incompatible dimensions")
            return False
        self._shape = shape
        return True

    def _linear_index(self, position) -> int:
        if not isinstance(position, tuple):
            position = (position,)
        if len(position) != len(self._shape):
            raise IndexError(
                f"expected {len(self._shape)} indices for shape {self._shape}, got {len(position)}"
            )
        idx = 0
        for dim, i in zip(self._shape, position):
            try:
                i = operator.index(i)
            except TypeError:
                raise IndexError(f"tensor indices must be integers, got {position}") from None
            if not 0 <= i < dim:
                raise IndexError(f"index {position} out of bounds for shape {self._shape}")
            idx = idx * dim + i
        return idx

    def __getitem__(self, position) -> ScalarNode:
        return self._storage[self._linear_index(position)]

    def __setitem__(self, position, node) -> None:
        self._storage[self._linear_index(position)] = arithmetic._as_node(node)

    # ------------------------------------------------------------------ #
    def _elementwise(self, other: Tensor, op, name: str) -> Tensor:
        if not isinstance(other, Tensor):
            raise TypeError(f"{name} needs two tensors, got {type(other)}")
        if self._shape != other._shape:
            raise ShapeError(f"shapes {self._shape} and {other._shape} do not match for {name}")
        out = [op(a, b) for a, b in zip(self._storage, other._storage)]
        return Tensor._from_storage(out, self._shape)

    def add(self, other: Tensor) -> Tensor:
        return self._elementwise(other, arithmetic.add, "addition")

    def mul(self, other: Tensor) -> Tensor:
        return self._elementwise(other, arithmetic.mul, "multiplication")

    def __add__(self, other):
        if not isinstance(other, Tensor):
            return NotImplemented
        return self.add(other)

    def __mul__(self, other):
        if not isinstance(other, Tensor):
            return NotImplemented
        return self.mul(other)

    def sum(self) -> Tensor:
        """Single-cell tensor holding one "sum" node over every cell."""
        return Tensor._from_storage([reduction.total(self._storage)], (1,))

    def tanh(self) -> Tensor:
        return Tensor._from_storage([transcendental.tanh(n) for n in self._storage], self._shape)

    def matmul(self, other: Tensor) -> Optional[Tensor]:
        """
        2-D matrix product; cell (i, j) is a "dot" node over row i and column j.
        Incompatible shapes give a GradientWarning and None.
        """
        if not isinstance(other, Tensor):
            raise TypeError(f"matmul needs two tensors, got {type(other)}")
        if self.ndim != 2 or other.ndim != 2 or self._shape[1] != other._shape[0]:
            warn(f"incompatible matrix dimensions for multiplication: {self._shape} @ {other._shape}")
            return None
        rows, inner = self._shape
        cols = other._shape[1]
        lhs, rhs = self._storage, other._storage
        out = []
        for i in range(rows):
            row = lhs[i * inner:(i + 1) * inner]
            for j in range(cols):
                out.append(reduction.dot(row, rhs[j::cols]))
        return Tensor._from_storage(out, (rows, cols))

    def __matmul__(self, other):
        if not isinstance(other, Tensor):
            return NotImplemented
        return self.matmul(other)

    def backward(self) -> None:
        """Backward from the single cell; multi-element tensors warn and do nothing."""
        if self.size != 1:
            warn(f"backward can only be applied to a scalar tensor, shape is {self._shape}")
            return
        self._storage[0].backward()

    # ------------------------------------------------------------------ #
    def _render(self, offset: int, depth: int) -> str:
        if depth == len(self._shape) - 1:
            cells = self._storage[offset:offset + self._shape[depth]]
            return "[" + ", ".join(repr(n.value) for n in cells) + "]"
        stride = math.prod(self._shape[depth + 1:])
        parts = [self._render(offset + k * stride, depth + 1) for k in range(self._shape[depth])]
        return "[" + ", ".join(parts) + "]"

    def __str__(self):
        return self._render(0, 0)

    def __repr__(self):
        return f"Tensor({self}, shape={self._shape})"
