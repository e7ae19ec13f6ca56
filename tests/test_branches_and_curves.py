# tests/test_branches_and_curves.py
"""
Branch growth, radius shaping and curve sampling.

WHAT WE CHECK
-------------
1. A branch walk has segments + 1 points at fixed step length
2. Curvature bounds the turn per step
3. Normalisation puts the tip exactly on the target radius
4. Clipping cuts the walk at the first point outside max_radius
5. The fitted curve passes through its control points and samples carry
   a progress value that rises from 0 to 1
"""

import math

import numpy as np
import pytest

from neurogen import (
    CatmullRomCurve,
    RandomStream,
    clip_to_radius,
    grow_branch,
    normalize_to_radius,
    perpendicular_axis,
    random_direction,
    sample_curve,
    shape_branch,
    sub_branch_direction,
)


# ---------------------------------------------------------------------------
# Growth
# ---------------------------------------------------------------------------

def test_random_direction_is_unit():
    stream = RandomStream(3, 1)
    for _ in range(20):
        assert np.linalg.norm(random_direction(stream)) == pytest.approx(1.0)


def test_grow_branch_point_count_and_step():
    """segments steps → segments + 1 points, each step_length apart."""
    origin = np.array([1.0, 2.0, 3.0])
    points = grow_branch(origin, [0, 0, 1], segments=7, curvature=0.8,
                         step_length=0.5, stream=RandomStream(0, 0))
    assert points.shape == (8, 3)
    np.testing.assert_allclose(points[0], origin)
    steps = np.linalg.norm(np.diff(points, axis=0), axis=1)
    np.testing.assert_allclose(steps, 0.5, rtol=1e-9)


def test_grow_branch_zero_curvature_is_straight():
    points = grow_branch(np.zeros(3), [2.0, 0.0, 0.0], segments=4, curvature=0.0,
                         step_length=1.0, stream=RandomStream(1, 0))
    expected = np.array([[k, 0.0, 0.0] for k in range(5)], dtype=float)
    np.testing.assert_allclose(points, expected, atol=1e-12)


def test_grow_branch_turn_is_bounded_by_curvature():
    """Each step turns by at most curvature / 2."""
    curvature = 0.6
    points = grow_branch(np.zeros(3), [0, 1, 0], segments=30, curvature=curvature,
                         step_length=1.0, stream=RandomStream(5, 2))
    headings = np.diff(points, axis=0)
    for a, b in zip(headings[:-1], headings[1:]):
        cos = np.dot(a, b) / (np.linalg.norm(a) * np.linalg.norm(b))
        angle = math.acos(min(1.0, max(-1.0, cos)))
        assert angle <= curvature / 2 + 1e-9


def test_grow_branch_zero_segments_is_origin_only():
    points = grow_branch(np.zeros(3), [1, 0, 0], segments=0, curvature=0.5,
                         step_length=1.0, stream=RandomStream(0, 0))
    assert points.shape == (1, 3)


def test_perpendicular_axis_falls_back_when_parallel():
    """Sample parallel to the heading, and x̂ too: the ŷ fallback is used."""
    direction = np.array([1.0, 0.0, 0.0])
    axis = perpendicular_axis(direction, np.array([1.0, 0.0, 0.0]))
    assert np.linalg.norm(axis) == pytest.approx(1.0)
    assert np.dot(axis, direction) == pytest.approx(0.0, abs=1e-12)


def test_perpendicular_axis_general_case():
    direction = np.array([0.0, 0.0, 1.0])
    axis = perpendicular_axis(direction, np.array([1.0, 0.0, 0.0]))
    np.testing.assert_allclose(axis, [0.0, 1.0, 0.0], atol=1e-12)


# ---------------------------------------------------------------------------
# Shaping
# ---------------------------------------------------------------------------

def test_normalize_to_radius_hits_target():
    points = grow_branch(np.zeros(3), [1, 1, 0], segments=8, curvature=1.0,
                         step_length=0.3, stream=RandomStream(2, 4))
    shaped = normalize_to_radius(points, np.zeros(3), 3.0)
    assert np.linalg.norm(shaped[-1]) == pytest.approx(3.0, rel=1e-12)
    np.testing.assert_allclose(shaped[0], 0.0, atol=1e-12)


def test_normalize_to_radius_scales_about_origin():
    origin = np.array([1.0, 0.0, 0.0])
    points = np.array([[1.0, 0.0, 0.0], [2.0, 0.0, 0.0], [3.0, 0.0, 0.0]])
    shaped = normalize_to_radius(points, origin, 4.0)
    np.testing.assert_allclose(shaped, [[1, 0, 0], [3, 0, 0], [5, 0, 0]])


def test_normalize_to_radius_leaves_degenerate_branch():
    """Endpoint within 1e-3 of the origin: no scaling."""
    points = np.array([[0.0, 0.0, 0.0], [0.5, 0.0, 0.0], [0.0, 0.0, 0.0005]])
    shaped = normalize_to_radius(points, np.zeros(3), 10.0)
    np.testing.assert_allclose(shaped, points)


def test_clip_to_radius_truncates_at_first_outside_point():
    points = np.array([[0, 0, 0], [1, 0, 0], [2, 0, 0], [3, 0, 0], [1, 0, 0]], float)
    clipped = clip_to_radius(points, 2.5)
    np.testing.assert_allclose(clipped, points[:3])


def test_clip_to_radius_keeps_everything_inside():
    points = np.array([[0, 0, 0], [0, 1, 0]], float)
    np.testing.assert_allclose(clip_to_radius(points, 1.0), points)


def test_shape_branch_drops_short_results():
    """Fewer than 2 points after shaping → None."""
    single = np.zeros((1, 3))
    assert shape_branch(single, np.zeros(3), target_radius=3.0) is None

    outside = np.array([[5.0, 0.0, 0.0], [6.0, 0.0, 0.0]])
    assert shape_branch(outside, outside[0], max_radius=4.0) is None

    kept = shape_branch(np.array([[0, 0, 0], [1, 0, 0]], float), np.zeros(3),
                        target_radius=2.0, max_radius=4.0)
    np.testing.assert_allclose(kept[-1], [2.0, 0.0, 0.0])


# ---------------------------------------------------------------------------
# Curves
# ---------------------------------------------------------------------------

def _zigzag():
    return np.array([
        [0.0, 0.0, 0.0],
        [1.0, 0.5, 0.0],
        [2.0, -0.3, 0.4],
        [3.5, 0.2, 0.1],
        [4.0, 1.0, -0.5],
    ])


def test_curve_needs_two_points():
    with pytest.raises(ValueError):
        CatmullRomCurve([[0.0, 0.0, 0.0]])


def test_curve_interpolates_control_points():
    pts = _zigzag()
    curve = CatmullRomCurve(pts)
    ts = np.arange(len(pts)) / (len(pts) - 1)
    np.testing.assert_allclose(curve.point(ts), pts, atol=1e-9)


def test_straight_curve_length_and_tangent():
    curve = CatmullRomCurve([[0, 0, 0], [3, 0, 0]])
    assert curve.length == pytest.approx(3.0, rel=1e-6)
    np.testing.assert_allclose(curve.tangent_at(0.5), [1.0, 0.0, 0.0], atol=1e-9)
    np.testing.assert_allclose(curve.point_at(0.5), [1.5, 0.0, 0.0], atol=1e-6)


def test_arclength_sampling_is_even_on_a_line():
    curve = CatmullRomCurve([[0, 0, 0], [1, 0, 0], [2, 0, 0], [4, 0, 0]])
    positions, _ = sample_curve(curve, 9, spacing="arclength")
    gaps = np.linalg.norm(np.diff(positions, axis=0), axis=1)
    np.testing.assert_allclose(gaps, 0.5, atol=1e-3)


@pytest.mark.parametrize("spacing", ["parameter", "arclength"])
def test_sample_progress_is_monotone(spacing):
    curve = CatmullRomCurve(_zigzag())
    positions, progress = sample_curve(curve, 25, spacing=spacing)
    assert positions.shape == (25, 3)
    assert progress[0] == 0.0
    assert progress[-1] == 1.0
    assert np.all(np.diff(progress) > 0)
    np.testing.assert_allclose(progress, np.arange(25) / 24)
    np.testing.assert_allclose(positions[0], _zigzag()[0], atol=1e-9)
    np.testing.assert_allclose(positions[-1], _zigzag()[-1], atol=1e-9)


def test_sample_curve_rejects_tiny_resolution():
    curve = CatmullRomCurve(_zigzag())
    with pytest.raises(ValueError):
        sample_curve(curve, 1)


def test_sample_curve_radial_remap():
    """|p| → |p| ** 0.5, direction unchanged, origin untouched."""
    curve = CatmullRomCurve([[0, 0, 0], [4, 0, 0], [9, 0, 0]])
    plain, _ = sample_curve(curve, 11)
    remapped, _ = sample_curve(curve, 11, radial_remap=0.5)
    np.testing.assert_allclose(remapped[0], [0.0, 0.0, 0.0])
    np.testing.assert_allclose(np.linalg.norm(remapped[1:], axis=1),
                               np.sqrt(np.linalg.norm(plain[1:], axis=1)))


def test_sub_branch_direction_blend():
    """offset 0 follows the parent tangent; offset 1 is perpendicular to it."""
    curve = CatmullRomCurve(_zigzag())
    tangent = curve.tangent_at(0.4)

    along = sub_branch_direction(curve, 0.4, offset=0.0, angle=1.3)
    np.testing.assert_allclose(along, tangent, atol=1e-12)

    across = sub_branch_direction(curve, 0.4, offset=1.0, angle=1.3)
    assert np.linalg.norm(across) == pytest.approx(1.0)
    assert np.dot(across, tangent) == pytest.approx(0.0, abs=1e-9)


def test_sub_branch_direction_vertical_tangent():
    """A tangent along +Y switches the reference axis to +X."""
    curve = CatmullRomCurve([[0, 0, 0], [0, 2, 0]])
    d = sub_branch_direction(curve, 0.5, offset=1.0, angle=0.0)
    assert np.linalg.norm(d) == pytest.approx(1.0)
    assert d[1] == pytest.approx(0.0, abs=1e-9)


def test_arclength_lookup_tracks_true_distance():
    """point_at(u) lies u · length along an unevenly spaced straight curve."""
    curve = CatmullRomCurve([[0, 0, 0], [0.5, 0, 0], [1, 0, 0], [4, 0, 0]])
    u = np.linspace(0.0, 1.0, 41)
    np.testing.assert_allclose(curve.point_at(u)[:, 0], 4.0 * u, atol=2e-4)
