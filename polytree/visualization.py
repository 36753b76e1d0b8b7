"""
Visualization utilities for grown polygon trees.
"""

from pathlib import Path
from typing import Optional, Tuple

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.collections import PolyCollection

from .tree import PolygonTree


def visualize_tree(
    tree: PolygonTree,
    show_field: bool = False,
    edge_width: float = 0.3,
    figsize: Tuple[int, int] = (12, 12),
    save_path: Optional[str] = None,
    show: bool = True
):
    """Draw every accepted node in its own colour, optionally over the occupancy field."""
    fig, ax = plt.subplots(figsize=figsize)
    r = tree.variant.tunables.max_radius

    if show_field:
        # field rows grow with y, so origin='lower' keeps the model orientation
        ax.imshow(tree.field.cells, cmap='gray', alpha=0.3, origin='lower',
                  extent=(-r, r, -r, r))

    polygons = [tree.world_polygon(n) for n in tree.nodes]
    if polygons:
        line = tree.variant.draw_settings
        pc = PolyCollection(
            polygons,
            facecolors=[n.color for n in tree.nodes],
            edgecolors=[line.line_color],
            linewidths=edge_width
        )
        ax.add_collection(pc)

    ax.add_patch(plt.Circle((0, 0), r, fill=False, linestyle='--', linewidth=0.5, color='gray'))
    ax.set_xlim(-r, r)
    ax.set_ylim(-r, r)
    ax.set_aspect('equal')
    ax.axis('off')

    plt.tight_layout()

    if save_path:
        Path(save_path).parent.mkdir(parents=True, exist_ok=True)
        plt.savefig(save_path, dpi=150, bbox_inches='tight',
                    facecolor='white', edgecolor='none')
        print(f"Saved visualization to {save_path}")

    if show:
        plt.show()
    return fig, ax


def plot_growth_statistics(tree: PolygonTree, save_path: Optional[str] = None, show: bool = True):
    """Plot statistics about the grown tree."""
    fig, axes = plt.subplots(1, 2, figsize=(12, 5))

    counts = tree.generation_counts()
    axes[0].bar(range(len(counts)), counts, color='steelblue', edgecolor='black')
    axes[0].set_xlabel('Generation')
    axes[0].set_ylabel('Node Count')
    axes[0].set_title('Nodes per Generation')

    begin_times = np.array([n.begin_time for n in tree.nodes])
    axes[1].hist(begin_times, bins=30, color='darkorange', edgecolor='black')
    axes[1].set_xlabel('Begin Time')
    axes[1].set_ylabel('Count')
    axes[1].set_title('Acceptance Times')

    plt.tight_layout()

    if save_path:
        Path(save_path).parent.mkdir(parents=True, exist_ok=True)
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        print(f"Saved statistics to {save_path}")

    if show:
        plt.show()
    return fig, axes
