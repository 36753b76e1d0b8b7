"""
Unified configuration for the polygon growth pipeline.

All output paths are derived from the variant name and random seed.
This is the single source of truth for grow.py and render.py.
"""

from dataclasses import asdict, dataclass, fields
from typing import Optional
from pathlib import Path
import json


@dataclass
class PipelineConfig:
    """
    Unified configuration for the growth pipeline.
    All output paths are derived from variant and random_seed.
    """

    # ==================== MAIN SETTING ====================
    variant: str = 'SelfLimitingPolygonTree'
    random_seed: int = 0

    # Saved tree config to grow instead of building the variant from its seed
    tree_config_path: Optional[str] = None

    # ==================== OUTPUT SETTINGS ====================
    output_base: str = 'outputs'

    # ==================== GROWTH SETTINGS ====================
    max_steps: Optional[int] = None   # None = grow until the queue drains
    log_interval: int = 100

    # ==================== RENDERING SETTINGS ====================
    render_size: int = 512
    render_fps: int = 20
    frame_skip: int = 10              # nodes revealed per animation frame

    # ==================== MISC ====================
    profile: bool = False

    # ==================== DERIVED PATHS ====================
    @property
    def tree_name(self) -> str:
        if self.tree_config_path is not None:
            return Path(self.tree_config_path).stem
        return f'{self.variant}_{self.random_seed}'

    @property
    def output_dir(self) -> Path:
        return Path(self.output_base) / 'polytree'

    @property
    def render_output_dir(self) -> Path:
        return Path(self.output_base) / 'rendering'

    @property
    def tree_config_out_path(self) -> Path:
        return self.output_dir / f'{self.tree_name}_config.json'

    @property
    def render_data_path(self) -> Path:
        return self.output_dir / f'{self.tree_name}_render_data.json'

    @property
    def tree_image_path(self) -> Path:
        return self.output_dir / f'{self.tree_name}_tree.png'

    @property
    def statistics_path(self) -> Path:
        return self.output_dir / f'{self.tree_name}_stats.png'

    @property
    def metadata_path(self) -> Path:
        return self.output_dir / f'{self.tree_name}_metadata.json'

    @property
    def animation_path(self) -> Path:
        return self.render_output_dir / f'{self.tree_name}_growth.gif'

    @property
    def render_image_path(self) -> Path:
        return self.render_output_dir / f'{self.tree_name}.png'

    # ==================== DIRECTORY CREATION ====================
    def create_output_dirs(self):
        """Create all output directories."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.render_output_dir.mkdir(parents=True, exist_ok=True)


def load_config(path: str = 'config/pipeline.json') -> PipelineConfig:
    """Load config from JSON file, with defaults for missing fields."""
    config_path = Path(path)
    if not config_path.exists():
        return PipelineConfig()

    with open(config_path, 'r') as f:
        data = json.load(f)

    known = {f.name for f in fields(PipelineConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        print(f"Warning: ignoring unknown config keys: {', '.join(unknown)}")

    return PipelineConfig(**{k: v for k, v in data.items() if k in known})


def save_config(config: PipelineConfig, path: str = 'config/pipeline.json'):
    """Save config to JSON file."""
    config_path = Path(path)
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, 'w') as f:
        json.dump(asdict(config), f, indent=2)

    print(f"Saved config to {config_path}")
