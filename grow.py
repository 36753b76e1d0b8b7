"""
Polygon Growth Script

Grows a self-limiting polygon tree and saves everything needed to render it.

Configuration is loaded from config/pipeline.json.
All output paths are derived from the variant name and random seed.

Outputs:
- Tree config (.json) to regrow the same tree later
- Render data (.json) for high-resolution rendering
- Variant artifacts (e.g. the occupancy field mask)
- Final tree visualization (.png)
- Growth statistics (.png)
- Metadata (.json)
"""

import json

from config import load_config
from polytree import PolygonTree, create_variant, load_variant, save_variant
from polytree.profiling import profile_block, profiler
from polytree.visualization import plot_growth_statistics, visualize_tree
from rendering.exporters import export_tree_data


def main():
    pipeline = load_config()
    pipeline.create_output_dirs()

    if pipeline.profile:
        profiler.enable()

    if pipeline.tree_config_path is not None:
        print(f"Loading tree config from {pipeline.tree_config_path}")
        variant = load_variant(pipeline.tree_config_path)
    else:
        variant = create_variant(pipeline.variant, pipeline.random_seed)

    tunables = variant.tunables
    print(f"Growing {variant.kind} (seed {variant.random_seed})")
    print(f"  Template vertices: {len(variant.polygon)}")
    print(f"  Transforms: {len(variant.transforms)}")
    print(f"  Max radius: {tunables.max_radius:.2f}, field resolution: {tunables.field_resolution}")
    print(f"  Max steps: {pipeline.max_steps if pipeline.max_steps is not None else 'unbounded'}")
    print()

    tree = PolygonTree(variant, log_interval=pipeline.log_interval)
    with profile_block('grow'):
        tree.grow(max_steps=pipeline.max_steps)

    save_variant(variant, pipeline.tree_config_out_path)

    export_tree_data(tree, str(pipeline.render_data_path))
    print(f"Exported render data to: {pipeline.render_data_path}")

    visualize_tree(tree, save_path=str(pipeline.tree_image_path), show=False)
    tree.export_artifact(str(pipeline.tree_image_path))

    plot_growth_statistics(tree, save_path=str(pipeline.statistics_path), show=False)

    metadata = {
        'variant': variant.kind,
        'random_seed': variant.random_seed,
        'max_radius': tunables.max_radius,
        'field_resolution': tunables.field_resolution,
        'num_transforms': len(variant.transforms),
        'num_nodes': len(tree.nodes),
        'num_discarded': tree.discarded_count,
        'steps': tree.iteration,
        'pending': tree.pending_count,
        'occupied_cells': tree.field.cell_count,
        'max_generation': max((n.generation for n in tree.nodes), default=0),
        'tree_config_path': str(pipeline.tree_config_out_path),
        'render_data_path': str(pipeline.render_data_path)
    }
    with open(pipeline.metadata_path, 'w') as f:
        json.dump(metadata, f, indent=2)
    print(f"Saved metadata to {pipeline.metadata_path}")

    print("\nGrowth complete!")
    print(f"  Tree: {pipeline.tree_image_path}")
    print(f"  Config: {pipeline.tree_config_out_path}")
    print(f"  Metadata: {pipeline.metadata_path}")
    print(f"\nTo regrow this tree, set in config/pipeline.json:")
    print(f'  "tree_config_path": "{pipeline.tree_config_out_path}"')


if __name__ == '__main__':
    main()
