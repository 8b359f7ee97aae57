"""
Gradient-descent training loop for MLP models.

Each step rebuilds the graph from the current parameter values:

    loss = Σ (y - ŷ)²     (or the mean, reduction="mean")
    zero all parameter gradients
    backward(loss)
    p.value -= lr · p.gradient

The engine never zeroes gradients itself, so the zeroing in step 2 is what
keeps consecutive steps independent.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .core.engine import backward, zero_gradients
from .core.node import ScalarNode
from .nn import MLP
from .ops.arithmetic import mul, pow, sub
from .ops.reduction import total


# four-sample toy dataset: 3 features, targets ±1
DEFAULT_XS = [
    [2.0, 3.0, -1.0],
    [3.0, -1.0, 0.5],
    [0.5, 1.0, 1.0],
    [1.0, 1.0, -1.0],
]
DEFAULT_YS = [1.0, -1.0, -1.0, 1.0]


@dataclass
class TrainConfig:
    """Configuration for MLP training."""
    steps: int = 400
    learning_rate: float = 0.1
    # seed and hidden describe the model built by build_model(); train() itself
    # works on whatever model it is given
    seed: int = 0
    hidden: Tuple[int, ...] = (4, 4)
    reduction: str = 'sum'  # 'sum' or 'mean'
    log_every: int = 0  # print progress every k steps when verbose; 0 = first/last only
    verbose: bool = False

    def __post_init__(self):
        if self.steps < 1:
            raise ValueError(f"steps must be >= 1, got {self.steps}")
        if self.learning_rate <= 0:
            raise ValueError(f"learning_rate must be > 0, got {self.learning_rate}")
        if self.reduction not in ('sum', 'mean'):
            raise ValueError(f"reduction must be 'sum' or 'mean', got {self.reduction!r}")
        if self.log_every < 0:
            raise ValueError(f"log_every must be >= 0, got {self.log_every}")
        self.hidden = tuple(int(h) for h in self.hidden)
        if any(h < 1 for h in self.hidden):
            raise ValueError(f"hidden layer sizes must be positive, got {self.hidden}")

    def build_model(self, nin: int) -> MLP:
        """MLP(nin, hidden + [1]) initialized from `seed`."""
        return MLP(nin, list(self.hidden) + [1], seed=self.seed)


@dataclass
class TrainResult:
    """Loss history (one entry per step, measured before that step's update)."""
    losses: List[float] = field(default_factory=list)
    final_loss: float = float('nan')
    n_parameters: int = 0


def squared_error_loss(targets: Sequence[float], predictions: Sequence[ScalarNode],
                       reduction: str = 'sum') -> ScalarNode:
    """Σ (y - ŷ)², or its mean; differentiable w.r.t. the predictions."""
    if len(targets) != len(predictions):
        raise ValueError(f"{len(targets)} targets for {len(predictions)} predictions")
    loss = total([pow(sub(y, y_hat), 2) for y, y_hat in zip(targets, predictions)])
    if reduction == 'mean':
        loss = mul(loss, 1.0 / len(targets))
    return loss


def train(model: MLP, xs: Sequence[Sequence[float]], ys: Sequence[float],
          config: Optional[TrainConfig] = None) -> TrainResult:
    """
    Plain SGD on the full batch.

    Args:
        model: network whose last layer has a single output
        xs: input rows
        ys: one target per row
        config: TrainConfig (defaults if None)

    Returns:
        TrainResult with the per-step losses
    """
    config = config or TrainConfig()
    params = model.parameters()
    result = TrainResult(n_parameters=len(params))

    for step in range(config.steps):
        predictions = [model(x)[0] for x in xs]
        loss = squared_error_loss(ys, predictions, config.reduction)

        zero_gradients(params)
        backward(loss)

        for p in params:
            p.value -= config.learning_rate * p.gradient

        result.losses.append(loss.value)

        if config.verbose:
            last = step == config.steps - 1
            if step == 0 or last or (config.log_every and step % config.log_every == 0):
                print(f"step {step:4d}  loss {loss.value:.6f}")

    result.final_loss = result.losses[-1]
    return result
