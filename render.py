"""
Rendering Script

Renders grown polygon trees with Cairo at any output size.

Configuration is loaded from config/pipeline.json.
All paths are derived from the variant name and random seed; run grow.py
first to produce the render data.

Modes:
    frame     - Render the final tree as a single image
    animation - Render the growth animation, revealing nodes in acceptance order
"""

import argparse
import os
from pathlib import Path

from config import PolygonRenderConfig, load_config
from rendering import PolygonRenderer, load_tree_data


def remove_if_exists(path: str):
    """Remove file if it exists to ensure fresh write."""
    p = Path(path)
    if p.exists():
        os.remove(p)
        print(f"Removed existing file: {path}")


def load_render_data(pipeline):
    if not pipeline.render_data_path.exists():
        raise FileNotFoundError(
            f"Render data not found at {pipeline.render_data_path}. "
            f"Please run grow.py first to generate it."
        )

    print(f"Loading render data from {pipeline.render_data_path}...")
    data = load_tree_data(str(pipeline.render_data_path))
    print(f"  {len(data['nodes'])} nodes")
    return data


def make_renderer(pipeline) -> PolygonRenderer:
    print(f"Rendering at {pipeline.render_size}x{pipeline.render_size} with Cairo...")
    return PolygonRenderer(PolygonRenderConfig(
        output_width=pipeline.render_size,
        output_height=pipeline.render_size
    ))


def render_frame(pipeline):
    data = load_render_data(pipeline)
    renderer = make_renderer(pipeline)

    output_path = str(pipeline.render_image_path)
    remove_if_exists(output_path)
    renderer.save_frame(data, output_path)
    return output_path


def render_animation(pipeline):
    data = load_render_data(pipeline)
    renderer = make_renderer(pipeline)

    output_path = str(pipeline.animation_path)
    remove_if_exists(output_path)
    renderer.render_animation(data, output_path, fps=pipeline.render_fps,
                              frame_skip=pipeline.frame_skip)

    print(f"Saved animation to {output_path}")
    return output_path


def main():
    parser = argparse.ArgumentParser(description="Render grown polygon trees.")
    parser.add_argument(
        '--mode',
        type=str,
        choices=['frame', 'animation'],
        default='frame',
        help='Rendering mode: frame or animation (default: frame)'
    )
    parser.add_argument(
        '--config',
        type=str,
        default='config/pipeline.json',
        help='Pipeline config file (default: config/pipeline.json)'
    )
    args = parser.parse_args()

    pipeline = load_config(args.config)
    pipeline.create_output_dirs()

    print(f"Rendering for: {pipeline.tree_name}")
    print(f"Output: {pipeline.render_output_dir}")
    print(f"Mode: {args.mode}")
    print()

    if args.mode == 'frame':
        render_frame(pipeline)
    elif args.mode == 'animation':
        render_animation(pipeline)


if __name__ == '__main__':
    main()
