import numpy as np
import pytest
from PIL import Image

from polytree.errors import ConfigurationError
from polytree.field import MAX_FIELD_SIDE, OccupancyField
from polytree.geometry import scale_translate
from polytree.node import Node


def square_at(x: float, y: float, scale: float = 1.0) -> Node:
    return Node(global_transform=scale_translate(scale, x, y))


def test_field_size(square) -> None:
    field = OccupancyField(square, 10.0, 40)
    assert field.size == 800
    assert field.cells.shape == (800, 800)
    assert field.cell_count == 0


def test_unusable_fields_raise(square) -> None:
    with pytest.raises(ConfigurationError):
        OccupancyField(square, 1000.0, 40)
    with pytest.raises(ConfigurationError):
        OccupancyField(square, 0.0, 40)
    with pytest.raises(ConfigurationError):
        OccupancyField(square, 10.0, -1)
    with pytest.raises(ConfigurationError):
        OccupancyField(square, MAX_FIELD_SIDE / 2.0 + 1.0, 1)


def test_draw_is_pure(square) -> None:
    field = OccupancyField(square, 4.0, 10)
    footprint = field.draw(square_at(0.0, 0.0))

    assert footprint is not None
    assert footprint.bbox == (35, 35, 11, 11)
    # filled 11x11 square minus its one-cell outline
    assert footprint.cell_count == 81
    assert not footprint.mask[0].any() and not footprint.mask[-1].any()
    assert not footprint.mask[:, 0].any() and not footprint.mask[:, -1].any()
    assert field.cell_count == 0


def test_draw_rejects_out_of_radius(square) -> None:
    field = OccupancyField(square, 4.0, 10)
    assert field.draw(square_at(3.8, 0.0)) is None
    assert field.draw(square_at(np.nan, 0.0)) is None
    assert not field.in_radius(square_at(0.0, 10.0))


def test_commit_and_overlaps(square) -> None:
    field = OccupancyField(square, 4.0, 10)
    first = field.draw(square_at(0.0, 0.0))
    field.commit(first)
    assert field.cell_count == first.cell_count

    # sharing an edge is not an overlap
    neighbour = field.draw(square_at(1.0, 0.0))
    assert not field.overlaps(neighbour)

    shifted = field.draw(square_at(0.5, 0.0))
    assert field.overlaps(shifted)

    assert field.overlaps(field.draw(square_at(0.0, 0.0)))


def test_commit_grows_monotonically(square) -> None:
    field = OccupancyField(square, 4.0, 10)
    counts = [field.cell_count]
    for x in (-2.0, -1.0, 0.0, 1.0, 2.0):
        field.commit(field.draw(square_at(x, 0.0)))
        counts.append(field.cell_count)
    assert counts == sorted(counts)
    assert counts[-1] == 5 * 81


def test_retract_clears_footprint(square) -> None:
    field = OccupancyField(square, 4.0, 10)
    a = field.draw(square_at(0.0, 0.0))
    b = field.draw(square_at(0.0, 1.0))
    field.commit(a)
    field.commit(b)

    field.retract(a)
    assert field.cell_count == b.cell_count
    assert not field.overlaps(a)
    assert field.overlaps(b)

    field.clear()
    assert field.cell_count == 0


def test_cells_view_is_read_only(square) -> None:
    field = OccupancyField(square, 4.0, 10)
    with pytest.raises(ValueError):
        field.cells[0, 0] = 1


def test_save_writes_png(square, tmp_path) -> None:
    field = OccupancyField(square, 2.0, 10)
    field.commit(field.draw(square_at(0.0, 0.0)))

    path = tmp_path / 'masks' / 'tree.mask.png'
    field.save(str(path))

    image = np.array(Image.open(path))
    assert image.shape == (40, 40)
    assert np.count_nonzero(image) == 81
