"""
Configuration module.
"""

from .pipeline import PipelineConfig, load_config, save_config
from .render_config import PolygonRenderConfig

__all__ = [
    'PipelineConfig',
    'load_config',
    'save_config',
    'PolygonRenderConfig'
]
