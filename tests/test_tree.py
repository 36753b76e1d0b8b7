import numpy as np
import pytest

from polytree import (PolygonTree, RegularPolygonGrowth, StepOutcome, ThornGrowth,
                      TrapezoidGrowth, variant_to_dict)
from polytree.geometry import scale_translate
from polytree.node import Node


def grown(variant, **kwargs) -> PolygonTree:
    tree = PolygonTree(variant, log_interval=0)
    tree.grow(**kwargs)
    return tree


def test_initial_state() -> None:
    tree = PolygonTree(RegularPolygonGrowth(0))
    assert tree.pending_count == 1
    assert tree.nodes == []
    assert tree.field.cell_count == 0

    root = tree.peek()
    assert root.id == 0 and root.parent_id == 0
    assert root.generation == 0 and root.begin_time == 0.0
    assert root.color == (1.0, 0.0, 0.0, 1.0)
    np.testing.assert_allclose(root.global_transform, np.eye(3), atol=1e-12)


def test_pentagon_first_steps_with_equal_gestations() -> None:
    # with one shared gestation the whole first ring is accepted before any grandchild
    variant = RegularPolygonGrowth(0)
    variant.transforms = [t.with_gestation(1.0) for t in variant.transforms]
    tree = PolygonTree(variant, log_interval=0)

    assert tree.process() is StepOutcome.ACCEPTED
    assert [n.id for n in tree.nodes] == [0]
    assert tree.pending_count == 5

    for _ in range(5):
        assert tree.peek().generation == 1
        assert tree.process() is StepOutcome.ACCEPTED

    assert len(tree.nodes) == 6
    assert [n.generation for n in tree.nodes] == [0, 1, 1, 1, 1, 1]

    following = tree.peek()
    parent = tree.find_node(following.parent_id)
    assert following.generation == 2
    assert following.begin_time == pytest.approx(parent.begin_time + 1.0)


def test_pentagon_first_steps_with_seed_gestations() -> None:
    tree = PolygonTree(RegularPolygonGrowth(0), log_interval=0)
    gestations = [t.gestation for t in tree.transforms]
    assert len(set(gestations)) == 5

    assert tree.process() is StepOutcome.ACCEPTED
    root = tree.nodes[0]
    assert root.id == 0 and root.generation == 0
    assert tree.pending_count == 5

    processed = []
    while sum(n.generation == 1 for n in processed) < 5:
        processed.append(tree.peek())
        tree.process()

    times = [n.begin_time for n in processed]
    assert times == sorted(times)

    for node in processed:
        parent = tree.find_node(node.parent_id)
        offsets = [parent.begin_time + g for g in gestations]
        if node.generation == 1:
            assert node.begin_time == pytest.approx(gestations[node.id - 1])
        assert min(abs(node.begin_time - t) for t in offsets) == pytest.approx(0.0, abs=1e-9)


def test_forced_overlap_keeps_earlier_candidate(overlap_variant) -> None:
    tree = PolygonTree(overlap_variant, log_interval=0)

    outcomes = [tree.process() for _ in range(3)]
    assert outcomes == [StepOutcome.ACCEPTED, StepOutcome.ACCEPTED, StepOutcome.DISCARDED]
    assert [n.id for n in tree.nodes] == [0, 1]
    assert tree.nodes[1].begin_time == pytest.approx(1.0)
    assert tree.discarded_count == 1
    np.testing.assert_allclose(tree.world_polygon(tree.nodes[1]).mean(axis=0), [1.0, 0.0], atol=1e-9)


def test_growth_terminates(small_pentagon_variant) -> None:
    tree = grown(small_pentagon_variant)
    assert tree.pending_count == 0
    assert tree.step() is False
    assert tree.process() is StepOutcome.EMPTY
    assert tree.iteration == tree.accepted_count + tree.discarded_count
    assert len(tree.nodes) > 1


def test_max_steps_and_callback(small_pentagon_variant) -> None:
    seen = []
    tree = PolygonTree(small_pentagon_variant, log_interval=0)
    steps = tree.grow(max_steps=4, callback=lambda t, outcome: seen.append(outcome))
    assert steps == 4
    assert len(seen) == 4
    assert tree.iteration == 4


def test_footprints_never_overlap() -> None:
    variant = RegularPolygonGrowth(3)
    variant.tunables.max_radius = 4.0
    tree = grown(variant, max_steps=400)

    footprints = [tree.footprint(n) for n in tree.nodes]
    assert all(fp is not None for fp in footprints)
    # disjoint footprints: the union is exactly as large as the sum
    assert sum(fp.cell_count for fp in footprints) == tree.field.cell_count


def test_field_grows_monotonically(small_pentagon_variant) -> None:
    counts = []
    grown(small_pentagon_variant, callback=lambda t, outcome: counts.append(t.field.cell_count))
    assert counts == sorted(counts)


def test_same_seed_same_tree() -> None:
    first = grown(RegularPolygonGrowth(3), max_steps=200)
    second = grown(RegularPolygonGrowth(3), max_steps=200)

    assert [n.id for n in first.nodes] == [n.id for n in second.nodes]
    assert [n.begin_time for n in first.nodes] == [n.begin_time for n in second.nodes]
    np.testing.assert_array_equal(first.field.cells, second.field.cells)


def test_rebuilt_from_config_grows_the_same() -> None:
    variant = RegularPolygonGrowth(5)
    variant.tunables.max_radius = 4.0
    first = grown(variant, max_steps=150)
    second = PolygonTree.from_config(variant_to_dict(variant), log_interval=0)
    second.grow(max_steps=150)

    assert [n.id for n in first.nodes] == [n.id for n in second.nodes]
    np.testing.assert_array_equal(first.field.cells, second.field.cells)


def test_degenerate_nodes_are_rejected(small_pentagon_variant) -> None:
    tree = PolygonTree(small_pentagon_variant)
    tiny = Node(global_transform=scale_translate(0.005, 0.0, 0.0))
    assert tree.footprint(tiny) is None
    assert not tree.is_viable(tiny)

    tree.create()
    tree.enqueue(Node(id=99, begin_time=-1.0, global_transform=scale_translate(1e-4, 0.0, 0.0)))
    assert tree.process() is StepOutcome.DISCARDED
    assert tree.process() is StepOutcome.ACCEPTED


def test_jitter_never_precedes_parent() -> None:
    variant = TrapezoidGrowth(1)
    variant.tunables.max_radius = 3.0
    tree = grown(variant, max_steps=300)

    for node in tree.nodes[1:]:
        parent = tree.find_node(node.parent_id)
        assert parent is not None
        assert node.begin_time >= parent.begin_time


def test_regrow_all_adds_nothing_new(small_pentagon_variant) -> None:
    tree = grown(small_pentagon_variant)
    accepted = len(tree.nodes)

    added = tree.regrow_all()
    assert added == accepted * len(tree.transforms)
    assert tree.pending_count == added

    tree.grow()
    assert len(tree.nodes) == accepted


def test_remove_node(small_pentagon_variant) -> None:
    tree = grown(small_pentagon_variant)
    total = len(tree.nodes)
    root_cells = tree.footprint(tree.nodes[0]).cell_count

    assert tree.remove_node() == 1
    assert tree.find_node(0) is None
    assert len(tree.nodes) == total - 1
    assert tree.field.cell_count == sum(tree.footprint(n).cell_count for n in tree.nodes)
    assert tree.field.cell_count > 0 and root_cells > 0

    last = tree.nodes[-1]
    assert tree.remove_node(last.id) == 1
    assert tree.find_node(last.id) is None
    assert tree.remove_node(last.id) == 0

    # descendants of removed nodes stay in place
    assert any(n.parent_id == 0 for n in tree.nodes)


def test_remove_from_empty_tree() -> None:
    tree = PolygonTree(RegularPolygonGrowth(0))
    assert tree.remove_node() == 0


def test_create_resets(small_pentagon_variant) -> None:
    tree = grown(small_pentagon_variant, max_steps=10)
    tree.create()
    assert tree.nodes == []
    assert tree.pending_count == 1
    assert tree.field.cell_count == 0
    assert tree.iteration == 0


def test_export_artifact_writes_field_mask(tmp_path) -> None:
    tree = grown(ThornGrowth(0), max_steps=5)
    tree.export_artifact(str(tmp_path / 'thorn.png'))
    assert (tmp_path / 'thorn.mask.png').exists()


def test_export_artifact_is_noop_for_plain_variants(tmp_path) -> None:
    tree = PolygonTree(RegularPolygonGrowth(0))
    tree.export_artifact(str(tmp_path / 'tree.png'))
    assert list(tmp_path.iterdir()) == []
