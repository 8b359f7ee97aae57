# scalargrad/__init__.py
# Reverse-mode automatic differentiation over scalar graph nodes

from .core.node import ScalarNode
from .core.engine import backward, topological_order, zero_gradients, zero_graph
from .errors import ScalarGradError, ShapeError, GradientWarning
from .tensor import Tensor

# Network composition and training
from .nn import Neuron, Layer, MLP
from .train import TrainConfig, TrainResult, squared_error_loss, train

__all__ = [
    # Core
    'ScalarNode',
    'backward',
    'topological_order',
    'zero_gradients',
    'zero_graph',
    # Errors
    'ScalarGradError',
    'ShapeError',
    'GradientWarning',
    # Tensor
    'Tensor',
    # nn / training
    'Neuron',
    'Layer',
    'MLP',
    'TrainConfig',
    'TrainResult',
    'squared_error_loss',
    'train',
]
