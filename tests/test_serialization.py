import json

import numpy as np
import pytest

from polytree import (ScaledPolygonGrowth, VARIANT_REGISTRY, create_variant, load_variant,
                      save_variant, variant_from_dict, variant_to_dict)
from polytree.errors import MalformedConfigError, UnknownVariantError


@pytest.mark.parametrize("kind", sorted(VARIANT_REGISTRY))
def test_round_trip(kind) -> None:
    record = variant_to_dict(create_variant(kind, 4))
    reloaded = variant_to_dict(variant_from_dict(record))
    assert reloaded == record
    # compare the written text too: 40 and 40.0 are equal as dict values
    assert json.dumps(reloaded) == json.dumps(record)
    assert isinstance(reloaded['fieldResolution'], int)


@pytest.mark.parametrize("kind", sorted(VARIANT_REGISTRY))
def test_file_round_trip(kind, tmp_path) -> None:
    variant = create_variant(kind, 6)
    path = tmp_path / 'configs' / f'{kind}.json'
    save_variant(variant, path)

    loaded = load_variant(path)
    assert type(loaded) is type(variant)
    assert loaded.random_seed == 6
    assert variant_to_dict(loaded) == variant_to_dict(variant)
    np.testing.assert_array_equal(loaded.polygon, variant.polygon)
    for a, b in zip(loaded.transforms, variant.transforms):
        np.testing.assert_array_equal(a.matrix, b.matrix)
        np.testing.assert_array_equal(a.color_adjust, b.color_adjust)
        assert a.gestation == b.gestation


def test_record_layout() -> None:
    variant = ScaledPolygonGrowth(1)
    record = variant_to_dict(variant)

    assert record['_class'] == 'ScaledPolygonTree'
    assert record['randomSeed'] == 1
    assert record['polygon'] == variant.polygon.ravel().tolist()
    assert len(record['transforms']) == len(variant.transforms)
    assert set(record['transforms'][0]) == {'gestation', 'color', 'transform'}
    assert record['drawSettings'] == {'lineColor': '#000000', 'lineThickness': 1}
    assert record['rootNode'] == {'color': '#FF0000'}
    assert record['ratio'] == variant.ratio
    assert record['ambidextrous'] == variant.ambidextrous
    json.dumps(record)


def test_unknown_class() -> None:
    record = variant_to_dict(create_variant('ThornTree'))
    record['_class'] = 'PenroseTree'
    with pytest.raises(UnknownVariantError):
        variant_from_dict(record)


@pytest.mark.parametrize("key", ['_class', 'randomSeed', 'maxRadius', 'fieldResolution',
                                 'polygon', 'transforms', 'drawSettings'])
def test_missing_required_key(key) -> None:
    record = variant_to_dict(create_variant('SelfLimitingPolygonTree', 2))
    del record[key]
    with pytest.raises(MalformedConfigError):
        variant_from_dict(record)


@pytest.mark.parametrize("key", ['ratio', 'ambidextrous'])
def test_missing_variant_key(key) -> None:
    record = variant_to_dict(ScaledPolygonGrowth(2))
    del record[key]
    with pytest.raises(MalformedConfigError):
        variant_from_dict(record)


def test_optional_keys_fall_back_to_defaults() -> None:
    record = variant_to_dict(create_variant('SelfLimitingPolygonTree', 3))
    for key in ('gestationRandomness', 'minimumScale', 'polygonSides', 'starAngle', 'rootNode'):
        del record[key]

    variant = variant_from_dict(record)
    assert variant.tunables.gestation_randomness == 0.0
    assert variant.tunables.minimum_scale == 0.01
    assert variant.polygon_sides == 5
    assert variant.star_angle == 0.0
    assert variant.tunables.root_color == (1.0, 0.0, 0.0, 1.0)


@pytest.mark.parametrize("change", [
    lambda r: r.update(polygon=[0.0, 1.0, 2.0]),
    lambda r: r.update(polygon=[0.0, 1.0]),
    lambda r: r.update(maxRadius=-4.0),
    lambda r: r.update(maxRadius='far'),
    lambda r: r.update(transforms={'gestation': 1.0}),
    lambda r: r['transforms'][0].update(transform=[[1.0, 0.0], [0.0, 1.0]]),
    lambda r: r['transforms'][0].pop('gestation'),
    lambda r: r['drawSettings'].update(lineColor='black'),
    lambda r: r.update(rootNode={}),
    lambda r: r.update(fieldResolution=0.5),
    lambda r: r.update(gestationRandomness='lots'),
    lambda r: r.update(polygon=['a', 'b', 'c', 'd', 'e', 'f']),
    lambda r: r['drawSettings'].update(lineThickness='thick'),
])
def test_malformed_values(change) -> None:
    record = variant_to_dict(create_variant('SelfLimitingPolygonTree', 1))
    change(record)
    with pytest.raises(MalformedConfigError):
        variant_from_dict(record)


def test_invalid_json_file(tmp_path) -> None:
    path = tmp_path / 'broken.json'
    path.write_text('{"_class": "ThornTree", ')
    with pytest.raises(MalformedConfigError):
        load_variant(path)
