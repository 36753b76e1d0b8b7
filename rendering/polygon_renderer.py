"""
Polygon tree renderer using Cairo.
Draws exported node polygons at any output size.
"""

import multiprocessing
from pathlib import Path
from typing import Any, Dict, List, Optional

import cairo
import imageio
import numpy as np
from tqdm import tqdm

from config.render_config import PolygonRenderConfig
from polytree.color import from_hex
from polytree.geometry import transform_points
from .base import Renderer
from .utils import center_and_fit


def render_polygon_frame_wrapper(args):
    config, data, max_nodes = args
    renderer = PolygonRenderer(config)
    return renderer.render_frame(data, max_nodes=max_nodes)


class PolygonRenderer(Renderer):
    def __init__(self, config: PolygonRenderConfig = None):
        super().__init__(config or PolygonRenderConfig())

    def _view(self, data: Dict[str, Any]) -> np.ndarray:
        return center_and_fit(data['bounds'], self.config.output_width,
                              self.config.output_height, self.config.fit_buffer)

    def _outline(self, data: Dict[str, Any]):
        settings = data.get('draw_settings', {})
        color = self.config.outline_color
        if color is None:
            color = from_hex(settings.get('line_color', '#000000'))
        width = self.config.outline_width
        if width is None:
            width = settings.get('line_thickness', 1)
        return color, width

    def _draw_nodes(self, ctx: cairo.Context, nodes: List[Dict], view: np.ndarray,
                    outline, width: float):
        ctx.set_line_join(cairo.LINE_JOIN_ROUND)
        ctx.set_line_width(width)

        for node in nodes:
            pts = transform_points(np.asarray(node['polygon']), view)
            ctx.move_to(*pts[0])
            for x, y in pts[1:]:
                ctx.line_to(x, y)
            ctx.close_path()

            ctx.set_source_rgba(*node['color'])
            if width > 0:
                ctx.fill_preserve()
                ctx.set_source_rgba(*outline)
                ctx.stroke()
            else:
                ctx.fill()

    def render_frame(self, data: Dict[str, Any], max_nodes: Optional[int] = None) -> np.ndarray:
        """Render the first `max_nodes` accepted nodes (all when None)."""
        surface, ctx = self._create_surface()

        nodes = data['nodes'] if max_nodes is None else data['nodes'][:max_nodes]
        outline, width = self._outline(data)
        self._draw_nodes(ctx, nodes, self._view(data), outline, width)

        return self._surface_to_numpy(surface)

    def save_frame(self, data: Dict[str, Any], output_path: str):
        frame = self.render_frame(data)
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        imageio.imwrite(output_path, frame)
        print(f"  Saved frame: {output_path}")

    def render_animation(self, data: Dict[str, Any], output_path: str,
                         fps: int = 20, frame_skip: int = 10):
        """
        Render growth animation by revealing nodes in acceptance order,
        `frame_skip` nodes per frame.
        """
        total = len(data['nodes'])
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)

        step = max(1, frame_skip)
        tasks = [(self.config, data, count) for count in range(0, total, step)]
        tasks.append((self.config, data, None))

        num_cores = max(1, multiprocessing.cpu_count() - 1)
        print(f"Rendering {len(tasks)} frames with {num_cores} cores...")

        with multiprocessing.Pool(processes=num_cores) as pool:
            frames = list(tqdm(pool.imap(render_polygon_frame_wrapper, tasks),
                               total=len(tasks), desc="Rendering growth frames"))

        if Path(output_path).suffix.lower() == '.gif':
            imageio.mimsave(output_path, frames, duration=1000.0 / fps, loop=0)
        else:
            imageio.mimsave(output_path, frames, fps=fps)
        print(f"  Saved animation: {output_path}")
        return len(frames)
