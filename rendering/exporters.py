"""
Data exporters to convert grown trees into renderer-friendly format.
Keeps rendering module decoupled from growth code.
"""

import json
from pathlib import Path
from typing import Any, Dict

from polytree.color import to_hex


def export_tree_data(tree, output_path: str) -> Dict[str, Any]:
    """
    Export the accepted nodes of a grown tree to JSON format for rendering.

    Format:
    {
        "variant": str,
        "max_radius": float,
        "bounds": [min_x, min_y, max_x, max_y],
        "draw_settings": {"line_color": "#RRGGBB", "line_thickness": int},
        "nodes": [
            {
                "id": int,
                "parent_id": int,
                "generation": int,
                "begin_time": float,
                "transform": 3x3 global transform,
                "polygon": [[x, y], ...],   # world coordinates
                "color": [r, g, b, a]
            }
        ]
    }

    Nodes are listed in acceptance order.
    """
    draw = tree.variant.draw_settings
    nodes_data = []
    for node in tree.nodes:
        node_data = node.to_dict()
        node_data["polygon"] = tree.world_polygon(node).tolist()
        nodes_data.append(node_data)

    data = {
        "variant": tree.variant.kind,
        "max_radius": tree.variant.tunables.max_radius,
        "bounds": tree.bounds().tolist(),
        "draw_settings": {
            "line_color": to_hex(draw.line_color),
            "line_thickness": draw.line_thickness
        },
        "nodes": nodes_data
    }

    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w') as f:
        json.dump(data, f, indent=2)

    return data


def load_tree_data(path: str) -> Dict[str, Any]:
    with open(path, 'r') as f:
        return json.load(f)


def export_field_mask(field, output_path: str):
    """Save the committed occupancy field as a grayscale PNG."""
    field.save(output_path)
    print(f"Exported occupancy field ({field.size}x{field.size}) to {output_path}")
