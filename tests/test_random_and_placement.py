# tests/test_random_and_placement.py
"""
Seeded randomness and node placement.

WHAT WE CHECK
-------------
1. seeded_random is a pure function of (seed, i, j) and stays in [0, 1)
2. RandomStream walks the hash in order, one stream per key
3. Clustered placement keeps every node inside its spherical shell
4. Uniform placement never accepts two nodes closer than 0.8 × separation
"""

import math

import numpy as np
import pytest

from neurogen import (
    RandomStream,
    grid_cell,
    place_clustered,
    place_uniform,
    seeded_random,
)


def test_seeded_random_matches_sine_hash():
    """The value is the fractional part of the scaled sine."""
    for seed, i, j in [(1, 0, 0), (3, 7, 2), (0.5, 11, 40), (12, 3, 9)]:
        x = math.sin(seed * 12.9898 + i * 78.233 + j * 43.758) * 43758.5453
        assert seeded_random(seed, i, j) == pytest.approx(x - math.floor(x), abs=1e-12)


def test_seeded_random_zero_arguments():
    """sin(0) = 0, so the all-zero key gives exactly 0."""
    assert seeded_random(0, 0, 0) == 0.0


def test_seeded_random_range_and_purity():
    """Every value lies in [0, 1) and repeated calls agree."""
    values = [seeded_random(s, i, j) for s in (0, 1, 2.5, -3)
              for i in range(20) for j in range(10)]
    assert all(0.0 <= v < 1.0 for v in values)
    again = [seeded_random(s, i, j) for s in (0, 1, 2.5, -3)
             for i in range(20) for j in range(10)]
    assert values == again


def test_random_stream_follows_hash():
    """Draw k of stream (seed, key) is seeded_random(seed, key, k)."""
    stream = RandomStream(4, 9)
    drawn = [stream.random() for _ in range(5)]
    expected = [seeded_random(4, 9, k) for k in range(5)]
    assert drawn == expected


def test_random_stream_uniform_bounds():
    stream = RandomStream(2, 0)
    for _ in range(50):
        v = stream.uniform(0.2, 0.8)
        assert 0.2 <= v < 0.8


def test_incremented_seed_gives_new_stream():
    """Seed n and seed n + 1 do not share draws."""
    s0 = RandomStream(0, 3)
    s1 = RandomStream(1, 3)
    v0 = [s0.random() for _ in range(10)]
    v1 = [s1.random() for _ in range(10)]
    assert v0 != v1
    assert not set(v0) & set(v1)


def test_clustered_scenario_five_nodes():
    """seed=0, count=5, spread=10 → 5 nodes, all at radius in [3, 10)."""
    nodes = place_clustered(5, spread=10.0, base_scale=1.0, seed=0)
    assert len(nodes) == 5
    for k, node in enumerate(nodes):
        assert node.index == k
        r = float(np.linalg.norm(node.position))
        assert 3.0 - 1e-9 <= r < 10.0 + 1e-9


def test_clustered_rotation_and_scale_ranges():
    nodes = place_clustered(30, spread=8.0, base_scale=2.0, seed=5)
    for node in nodes:
        assert node.rotation.shape == (3,)
        assert np.all(node.rotation >= 0.0)
        assert np.all(node.rotation < 2.0 * math.pi)
        assert 1.6 - 1e-12 <= node.scale <= 2.4 + 1e-12


def test_clustered_positions_are_read_only():
    """Nodes are immutable once created."""
    node = place_clustered(1, spread=5.0, base_scale=1.0, seed=1)[0]
    with pytest.raises(ValueError):
        node.position[0] = 99.0


def test_grid_cell_is_centred():
    """A 2 × 2 × 2 grid has its cells at ±0.5 on every axis."""
    np.testing.assert_allclose(grid_cell(0, 2), [-0.5, -0.5, -0.5])
    np.testing.assert_allclose(grid_cell(1, 2), [0.5, -0.5, -0.5])
    np.testing.assert_allclose(grid_cell(2, 2), [-0.5, 0.5, -0.5])
    np.testing.assert_allclose(grid_cell(7, 2), [0.5, 0.5, 0.5])


@pytest.mark.parametrize("seed", [0, 1, 7, 2.5])
def test_uniform_separation_invariant(seed):
    """Every accepted pair is at least 0.8 × separation apart."""
    separation = 2.0
    nodes = place_uniform(27, separation, base_scale=1.0, seed=seed)
    assert 0 < len(nodes) <= 27
    positions = np.array([n.position for n in nodes])
    for a in range(len(positions)):
        for b in range(a + 1, len(positions)):
            d = np.linalg.norm(positions[a] - positions[b])
            assert d >= 0.8 * separation - 1e-9


def test_uniform_indices_are_consecutive():
    nodes = place_uniform(20, 3.2, base_scale=0.2, seed=3)
    assert [n.index for n in nodes] == list(range(len(nodes)))


def test_uniform_nodes_stay_near_their_grid_slot():
    """Jitter is at most 0.15 × separation per axis."""
    separation = 2.0
    nodes = place_uniform(8, separation, base_scale=1.0, seed=4)
    assert 0 < len(nodes) <= 8
    for node in nodes:
        offsets = [np.abs(node.position - grid_cell(i, 2) * separation).max()
                   for i in range(8)]
        assert min(offsets) <= 0.15 * separation + 1e-9


def test_uniform_exhausted_slots_are_omitted():
    """With no attempts allowed every slot is dropped, silently."""
    assert place_uniform(5, 2.0, base_scale=1.0, seed=0, max_attempts=0) == ()


def test_uniform_zero_count():
    assert place_uniform(0, 2.0, base_scale=1.0, seed=0) == ()
