"""
Train the demo network: 3 inputs -> 4 -> 4 -> 1 on the four-sample dataset.

    python -m scalargrad --steps 400 --lr 0.1 --history losses.csv --plot loss.png
"""

import argparse
import time

from .core.graph_utils import print_graph_summary
from .train import DEFAULT_XS, DEFAULT_YS, TrainConfig, squared_error_loss, train


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog='scalargrad',
        description='Train a small tanh MLP with the scalar autodiff engine',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument('--steps', type=int, default=400,
                        help='Number of gradient descent steps')
    parser.add_argument('--lr', type=float, default=0.1,
                        help='Learning rate')
    parser.add_argument('--seed', type=int, default=0,
                        help='Seed for parameter initialization')
    parser.add_argument('--hidden', type=str, default='4,4',
                        help='Comma-separated hidden layer sizes (e.g. "4,4")')
    parser.add_argument('--reduction', choices=['sum', 'mean'], default='sum',
                        help='Loss reduction over samples')
    parser.add_argument('--log-every', type=int, default=50,
                        help='Print the loss every k steps (0: first and last only)')
    parser.add_argument('--history', type=str, default=None,
                        help='Write the per-step loss history to this CSV file')
    parser.add_argument('--plot', type=str, default=None,
                        help='Save a loss curve to this image file')
    parser.add_argument('--graph-summary', action='store_true',
                        help='Print statistics of the final loss graph')
    parser.add_argument('--quiet', action='store_true',
                        help='Only print the final summary')
    return parser.parse_args(argv)


def parse_hidden(hidden_str):
    """Parse '4,4' into (4, 4)."""
    return tuple(int(h) for h in hidden_str.split(',') if h.strip())


def save_history(losses, path):
    import pandas as pd
    df = pd.DataFrame({'step': range(len(losses)), 'loss': losses})
    df.to_csv(path, index=False)
    print(f"History saved to: {path}")


def plot_losses(losses, save_path):
    import matplotlib
    matplotlib.use('Agg')  # Non-interactive backend
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(figsize=(8, 5))
    ax.plot(range(len(losses)), losses, linewidth=1.5)
    ax.set_yscale('log')
    ax.set_xlabel('Step')
    ax.set_ylabel('Loss')
    ax.set_title('Training loss')
    ax.grid(True, alpha=0.3)
    plt.tight_layout()
    plt.savefig(save_path, dpi=150, bbox_inches='tight')
    print(f"Figure saved to: {save_path}")
    plt.close(fig)


def main(argv=None):
    args = parse_args(argv)
    config = TrainConfig(
        steps=args.steps,
        learning_rate=args.lr,
        seed=args.seed,
        hidden=parse_hidden(args.hidden),
        reduction=args.reduction,
        log_every=args.log_every,
        verbose=not args.quiet,
    )
    model = config.build_model(len(DEFAULT_XS[0]))

    if not args.quiet:
        print("="*70)
        print(f"MLP {len(DEFAULT_XS[0])} -> {' -> '.join(map(str, config.hidden))} -> 1")
        print(f"steps={config.steps}  lr={config.learning_rate}  seed={config.seed}")
        print("="*70)

    t0 = time.time()
    result = train(model, DEFAULT_XS, DEFAULT_YS, config)
    elapsed = time.time() - t0

    predictions = [model(x)[0] for x in DEFAULT_XS]
    print(f"\nFinal loss:  {result.final_loss:.6f}  (initial {result.losses[0]:.6f})")
    print(f"Parameters:  {result.n_parameters}")
    print(f"Predictions: {[round(p.value, 4) for p in predictions]}")
    print(f"Time:        {elapsed:.2f}s")

    if args.graph_summary:
        print_graph_summary(squared_error_loss(DEFAULT_YS, predictions, config.reduction))
    if args.history:
        save_history(result.losses, args.history)
    if args.plot:
        plot_losses(result.losses, args.plot)
    return result


if __name__ == "__main__":
    main()
