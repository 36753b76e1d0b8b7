"""
Persisted tree configuration.

A record captures the generative rule set of a tree (template, transforms,
tunables, seed) and never the grown nodes. Records are plain dicts written as
JSON; `_class` selects the variant from VARIANT_REGISTRY.
"""

import json
from pathlib import Path
from typing import Union

import numpy as np

from .color import from_hex, to_hex
from .config import DrawSettings
from .errors import GeometryError, MalformedConfigError, require
from .geometry import as_polygon
from .transform import Transform
from .variants import GrowthVariant, variant_class


def transform_to_dict(transform: Transform) -> dict:
    return {
        'gestation': transform.gestation,
        'color': transform.color_adjust.tolist(),
        'transform': transform.matrix.tolist()
    }


def transform_from_dict(record: dict) -> Transform:
    try:
        return Transform(
            matrix=np.array(require(record, 'transform'), dtype=float),
            color_adjust=np.array(require(record, 'color'), dtype=float),
            gestation=float(require(record, 'gestation'))
        )
    except (TypeError, ValueError) as exc:
        if isinstance(exc, MalformedConfigError):
            raise
        raise MalformedConfigError(f"Bad transform record: {exc}") from exc


def variant_to_dict(variant: GrowthVariant) -> dict:
    tunables = variant.tunables
    record = {
        '_class': variant.kind,
        'randomSeed': variant.random_seed,
        'maxRadius': tunables.max_radius,
        'fieldResolution': tunables.field_resolution,
        'minimumScale': tunables.minimum_scale,
        'gestationRandomness': tunables.gestation_randomness,
        'polygon': variant.polygon.ravel().tolist(),
        'transforms': [transform_to_dict(t) for t in variant.transforms],
        'drawSettings': {
            'lineColor': to_hex(variant.draw_settings.line_color),
            'lineThickness': variant.draw_settings.line_thickness
        },
        'rootNode': {
            'color': to_hex(tunables.root_color)
        }
    }
    record.update(variant.dump_fields())
    return record


def _number(value, key: str, cast=float):
    try:
        return cast(value)
    except (TypeError, ValueError) as exc:
        raise MalformedConfigError(f"{key} must be a number, got {value!r}") from exc


def _positive(record: dict, key: str, cast=float):
    value = _number(require(record, key), key, cast)
    if not value > 0:
        raise MalformedConfigError(f"{key} must be positive, got {value}")
    return value


def _color(text, key: str):
    try:
        return from_hex(text)
    except (AttributeError, ValueError) as exc:
        raise MalformedConfigError(f"Bad colour for {key}: {text!r}") from exc


def variant_from_dict(record: dict) -> GrowthVariant:
    """
    Rebuild a variant from a persisted record.

    The registered default instance is created first and the record is then
    applied over it, so optional keys keep the variant's defaults.
    """
    cls = variant_class(require(record, '_class'))
    variant = cls()

    try:
        variant.reseed(int(require(record, 'randomSeed')))
    except (TypeError, ValueError) as exc:
        if isinstance(exc, MalformedConfigError):
            raise
        raise MalformedConfigError(f"Bad randomSeed: {exc}") from exc

    tunables = variant.tunables
    tunables.max_radius = _positive(record, 'maxRadius')
    tunables.field_resolution = _positive(record, 'fieldResolution', int)
    if 'minimumScale' in record:
        tunables.minimum_scale = _positive(record, 'minimumScale')
    tunables.gestation_randomness = _number(record.get('gestationRandomness', 0.0),
                                            'gestationRandomness')
    if 'rootNode' in record:
        tunables.root_color = _color(require(record['rootNode'], 'color'), 'rootNode.color')

    try:
        flat = np.asarray(require(record, 'polygon'), dtype=float)
    except (TypeError, ValueError) as exc:
        if isinstance(exc, MalformedConfigError):
            raise
        raise MalformedConfigError(f"Bad polygon: {exc}") from exc
    if flat.ndim != 1 or flat.size % 2:
        raise MalformedConfigError(f"polygon must be a flat list of x, y pairs, got {flat.size} values")
    try:
        variant.polygon = as_polygon(flat.reshape(-1, 2))
    except GeometryError as exc:
        raise MalformedConfigError(f"Bad polygon: {exc}") from exc

    transforms = require(record, 'transforms')
    if not isinstance(transforms, list):
        raise MalformedConfigError("transforms must be a list")
    variant.transforms = [transform_from_dict(t) for t in transforms]

    draw = require(record, 'drawSettings')
    variant.draw_settings = DrawSettings(
        line_color=_color(require(draw, 'lineColor'), 'drawSettings.lineColor'),
        line_thickness=_number(require(draw, 'lineThickness'), 'drawSettings.lineThickness', int)
    )

    variant.load_fields(record)
    return variant


def save_variant(variant: GrowthVariant, path: Union[str, Path]):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        json.dump(variant_to_dict(variant), f, indent=2)
    print(f"Saved tree config to {path}")


def load_variant(path: Union[str, Path]) -> GrowthVariant:
    with open(path, 'r') as f:
        try:
            record = json.load(f)
        except json.JSONDecodeError as exc:
            raise MalformedConfigError(f"{path} is not valid JSON: {exc}") from exc
    return variant_from_dict(record)
