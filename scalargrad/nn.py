"""nn: Neuron / Layer / MLP built from ScalarNode operations."""

from typing import List, Optional, Sequence

import numpy as np

from .core.engine import zero_gradients
from .core.node import ScalarNode
from .ops.reduction import dot
from .ops.transcendental import tanh


class Module:

    def parameters(self) -> List[ScalarNode]:
        return []

    def zero_grad(self) -> None:
        zero_gradients(self.parameters())


class Neuron(Module):
    """tanh(b + Σ w_i x_i), weights and bias drawn uniformly from [-1, 1]."""

    def __init__(self, nin: int, rng: np.random.Generator):
        # one draw per leaf: every weight is an independent node
        self.w = [ScalarNode(v) for v in rng.uniform(-1.0, 1.0, size=nin).tolist()]
        self.b = ScalarNode(float(rng.uniform(-1.0, 1.0)))

    def __call__(self, x: Sequence) -> ScalarNode:
        if len(x) != len(self.w):
            raise ValueError(f"Neuron expects {len(self.w)} inputs, got {len(x)}")
        act = self.b + dot(self.w, x)
        return tanh(act)

    def parameters(self) -> List[ScalarNode]:
        return self.w + [self.b]

    def __repr__(self):
        return f"Neuron({len(self.w)})"


class Layer(Module):

    def __init__(self, nin: int, nout: int, rng: np.random.Generator):
        self.neurons = [Neuron(nin, rng) for _ in range(nout)]

    def __call__(self, x: Sequence) -> List[ScalarNode]:
        return [n(x) for n in self.neurons]

    def parameters(self) -> List[ScalarNode]:
        return [p for n in self.neurons for p in n.parameters()]

    def __repr__(self):
        return f"Layer of [{', '.join(str(n) for n in self.neurons)}]"


class MLP(Module):
    """
    Multi-layer perceptron: MLP(3, [4, 4, 1]) is 3 inputs -> 4 -> 4 -> 1.

    Parameters are initialized from `rng`, or from a fresh
    numpy.random.default_rng(seed) when no generator is given, so runs with
    the same seed are identical.
    """

    def __init__(self, nin: int, nouts: Sequence[int],
                 rng: Optional[np.random.Generator] = None, seed: Optional[int] = None):
        if rng is None:
            rng = np.random.default_rng(seed)
        sizes = [nin] + list(nouts)
        self.layers = [Layer(sizes[i], sizes[i + 1], rng) for i in range(len(nouts))]

    def __call__(self, x: Sequence) -> List[ScalarNode]:
        for layer in self.layers:
            x = layer(x)
        return x

    def parameters(self) -> List[ScalarNode]:
        return [p for layer in self.layers for p in layer.parameters()]

    def __repr__(self):
        return f"MLP of [{', '.join(str(layer) for layer in self.layers)}]"
