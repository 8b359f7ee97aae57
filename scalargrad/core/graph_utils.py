"""
Statistics of the DAG reachable from a root ScalarNode, used by
`python -m scalargrad --graph-summary`.
"""

import numpy as np
from typing import Dict
from collections import Counter

from .engine import topological_order
from .node import ScalarNode


def get_graph_stats(root: ScalarNode) -> Dict:
    """
    Collect statistics of the graph under `root` (no printing).

    Returns:
        dict with nodes, edges, fan-in / fan-out (max and mean) and the
        operator breakdown (leaves are counted as "leaf")
    """
    nodes = topological_order(root)
    n_nodes = len(nodes)
    fan_ins = [len(node.operands) for node in nodes]

    # fan-out: how many consumers use each node as an operand
    position = {id(node): i for i, node in enumerate(nodes)}
    fan_outs = [0] * n_nodes
    for node in nodes:
        for operand in node.operands:
            fan_outs[position[id(operand)]] += 1

    return {
        'nodes': n_nodes,
        'edges': sum(fan_ins),
        'max_fan_in': max(fan_ins),
        'avg_fan_in': float(np.mean(fan_ins)),
        'max_fan_out': max(fan_outs),
        'avg_fan_out': float(np.mean(fan_outs)),
        'operations': dict(Counter(node.op_tag or "leaf" for node in nodes))
    }


def print_graph_summary(root: ScalarNode) -> Dict:
    """Print get_graph_stats(root) as a table and return the dict."""
    stats = get_graph_stats(root)
    n_nodes = stats['nodes']

    print("\n" + "="*70)
    print("COMPUTATION GRAPH SUMMARY")
    print("="*70)
    print(f"Nodes / edges:      {n_nodes:,} / {stats['edges']:,}")
    print(f"Fan-in  max / avg:  {stats['max_fan_in']} / {stats['avg_fan_in']:.2f}")
    print(f"Fan-out max / avg:  {stats['max_fan_out']} / {stats['avg_fan_out']:.2f}")
    print()
    print("Operation breakdown:")
    for op_tag, count in Counter(stats['operations']).most_common():
        print(f"  {op_tag:6s}: {count:6,} ({100.0 * count / n_nodes:5.1f}%)")
    print("="*70 + "\n")
    return stats
