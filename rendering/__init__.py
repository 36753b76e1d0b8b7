"""
Rendering module for high-resolution drawing of grown polygon trees.
Uses Cairo for resolution-independent vector graphics.
"""

from config.render_config import PolygonRenderConfig
from .polygon_renderer import PolygonRenderer
from .exporters import (
    export_tree_data,
    load_tree_data,
    export_field_mask
)
from .utils import center_and_fit

__all__ = [
    'PolygonRenderConfig',
    'PolygonRenderer',
    'export_tree_data',
    'load_tree_data',
    'export_field_mask',
    'center_and_fit'
]
