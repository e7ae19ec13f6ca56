"""
neurogen.py
===========
Core procedural generator for 3-D node / branch graphs.

Builds deterministic graphs from a handful of numeric parameters and a seed.
Three variants share the same machinery:

  • neuron – point "neurons" placed in a sphere (clustered) or on a jittered
             grid with minimum separation (uniform), joined by every pair
             closer than a distance threshold.
  • cube   – clusters of 8 corner nodes (rotated, scaled cubes) with their
             12 cube edges, joined cube-to-cube by the single closest corner
             pair within the threshold.
  • brain  – curved branches grown as constrained random walks from a common
             origin, with secondary branches spawned along each primary one.

Every curved path (branch or connection) is fitted with a centripetal
Catmull-Rom spline and resampled into a point sequence carrying a normalised
``progress`` value (0 at the start, 1 at the end).

Randomness
----------
All random values come from a stateless sine hash keyed by
``(seed, i, j)`` – see :func:`seeded_random`.  No global RNG state is read or
written, so the same seed and parameters always reproduce the same graph.

Usage (importable)
------------------
    from neurogen import BrainGraphConfig, generate_brain_graph
    graph = generate_brain_graph(BrainGraphConfig(seed=3))
    frames = graph.to_frames()

    from neurogen import NeuronGraphConfig, GraphGenerator
    gen = GraphGenerator(NeuronGraphConfig(distribution="uniform", seed=7))
    graph = gen.run()            # also writes CSV / GEXF into cfg.out_dir

Usage (script, uses all BrainGraphConfig defaults)
--------------------------------------------------
    python neurogen.py
"""

from __future__ import annotations

import dataclasses
import math
import os
import time
from types import MappingProxyType
from typing import ClassVar, Dict, List, Mapping, NamedTuple, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd
from scipy.spatial import cKDTree
from scipy.spatial.distance import cdist
from scipy.spatial.transform import Rotation


Seed = Union[int, float]

DISTRIBUTIONS = ("clustered", "uniform")
SPACINGS = ("parameter", "arclength")

# Rejection sampling cap for uniform placement
MAX_PLACEMENT_ATTEMPTS = 100

# Endpoint closer than this to the origin is left unscaled by normalisation
NORMALIZE_EPS = 1e-3

# Largest |seed| the sine hash still resolves from its neighbours
MAX_SEED_MAGNITUDE = 2 ** 31

# Cross products shorter than this count as parallel
PARALLEL_EPS = 1e-6


class InvalidConfigurationError(ValueError):
    """Raised before generation when a parameter is non-finite or out of range."""


# ---------------------------------------------------------------------------
# Configuration dataclasses
# ---------------------------------------------------------------------------

@dataclasses.dataclass
class NeuronGraphConfig:
    """Parameters for the neuron-cluster variant.

    Placement
    ---------
    ``distribution="clustered"`` scatters neurons in a spherical shell of
    radius ``spread * [0.3, 1.0)``.  ``distribution="uniform"`` places them on
    a jittered cubic grid with cell size ``separation`` and rejects any
    candidate closer than ``0.8 * separation`` to an accepted neuron.  A
    neuron that cannot be placed within 100 attempts is silently dropped.
    """

    variant: ClassVar[str] = "neuron"

    # ---- placement ----
    neuron_count: int = 20
    distribution: str = "clustered"
    spread: float = 8.0         # clustered: outer radius of the shell
    separation: float = 2.0     # uniform: grid cell size
    scale: float = 1.0          # base neuron scale (±20 % variation)

    # ---- connections ----
    show_connections: bool = True
    max_connection_distance: float = 5.0
    connection_resolution: int = 30   # samples per connection curve
    connection_jitter: float = 0.5    # full width of the mid-point wobble
    connection_spacing: str = "parameter"

    # ---- reproducibility ----
    seed: Seed = 0

    # ---- output ----
    out_dir: str = "output"
    write_gexf: bool = True

    def validate(self) -> None:
        _validate_fields(
            self,
            counts=("neuron_count",),
            lengths=("spread", "separation", "scale",
                     "max_connection_distance", "connection_jitter"),
            resolutions=("connection_resolution",),
        )
        _validate_choice(self, "distribution", DISTRIBUTIONS)
        _validate_choice(self, "connection_spacing", SPACINGS)


@dataclasses.dataclass
class CubeGraphConfig:
    """Parameters for the cube-cluster variant.

    Each cube is placed like a clustered neuron (centre, rotation, scale);
    its 8 corners form one node group.  Cubes are linked by at most one
    connection per cube pair: the closest corner pair within
    ``max_connection_distance``.
    """

    variant: ClassVar[str] = "cube"

    # ---- cubes ----
    cube_count: int = 46
    cube_size: float = 0.2      # half edge length before the ±20 % variation
    spread: float = 12.5

    # ---- connections ----
    show_connections: bool = True
    max_connection_distance: float = 5.0
    connection_resolution: int = 30
    connection_jitter: float = 0.5
    connection_spacing: str = "parameter"

    # ---- reproducibility ----
    seed: Seed = 0

    # ---- output ----
    out_dir: str = "output"
    write_gexf: bool = True

    def validate(self) -> None:
        _validate_fields(
            self,
            counts=("cube_count",),
            lengths=("cube_size", "spread", "max_connection_distance",
                     "connection_jitter"),
            resolutions=("connection_resolution",),
        )
        _validate_choice(self, "connection_spacing", SPACINGS)


@dataclasses.dataclass
class BrainGraphConfig:
    """Parameters for the branching "brain" variant.

    Main branches
    -------------
    ``main_branch_count`` walks of ``segments`` steps start at the origin and
    are rescaled so their endpoint sits exactly ``main_radius`` away.

    Sub branches
    ------------
    ``sub_branch_count`` walks per main branch start at a random point in the
    middle 60 % of the parent.  Their heading blends the parent tangent with
    a random perpendicular (``sub_branch_offset``: 0 = follow the parent,
    1 = fully perpendicular) and they are cut at ``max_radius``.
    """

    variant: ClassVar[str] = "brain"

    # ---- main branches ----
    main_branch_count: int = 12
    main_radius: float = 3.0
    segments: int = 8
    curvature: float = 0.5      # max turn per step is curvature / 2 radians

    # ---- sub branches ----
    sub_branch_count: int = 3
    max_radius: float = 4.0
    sub_branch_offset: float = 0.7
    sub_branch_segments: int = 6
    sub_branch_curvature: float = 0.6

    # ---- sampling ----
    resolution: int = 50
    sample_spacing: str = "parameter"
    radial_remap: float = 1.0   # sampled |p| becomes |p| ** radial_remap

    # ---- reproducibility ----
    seed: Seed = 0

    # ---- output ----
    out_dir: str = "output"
    write_gexf: bool = True

    def validate(self) -> None:
        _validate_fields(
            self,
            counts=("main_branch_count", "segments",
                    "sub_branch_count", "sub_branch_segments"),
            lengths=("main_radius", "curvature", "max_radius",
                     "sub_branch_offset", "sub_branch_curvature",
                     "radial_remap"),
            resolutions=("resolution",),
        )
        if self.sub_branch_offset > 1.0:
            raise InvalidConfigurationError(
                f"sub_branch_offset must lie in [0, 1] (got {self.sub_branch_offset})."
            )
        _validate_choice(self, "sample_spacing", SPACINGS)


GraphConfig = Union[NeuronGraphConfig, CubeGraphConfig, BrainGraphConfig]


def _validate_fields(
    cfg,
    counts: Sequence[str] = (),
    lengths: Sequence[str] = (),
    resolutions: Sequence[str] = (),
) -> None:
    """Shared finite / non-negative / integral checks for config objects."""
    seed = cfg.seed
    if isinstance(seed, bool) or not isinstance(seed, (int, float, np.integer, np.floating)):
        raise InvalidConfigurationError(f"seed must be a number (got {seed!r}).")
    if not math.isfinite(seed):
        raise InvalidConfigurationError(f"seed must be finite (got {seed}).")
    if abs(seed) > MAX_SEED_MAGNITUDE:
        raise InvalidConfigurationError(
            f"seed magnitude must be <= {MAX_SEED_MAGNITUDE} (got {seed})."
        )

    for name in (*counts, *lengths, *resolutions):
        value = getattr(cfg, name)
        if isinstance(value, bool) or not isinstance(
            value, (int, float, np.integer, np.floating)
        ):
            raise InvalidConfigurationError(f"{name} must be a number (got {value!r}).")
        if not math.isfinite(value):
            raise InvalidConfigurationError(f"{name} must be finite (got {value}).")
        if value < 0:
            raise InvalidConfigurationError(f"{name} must be >= 0 (got {value}).")

    for name in (*counts, *resolutions):
        value = getattr(cfg, name)
        if int(value) != value:
            raise InvalidConfigurationError(f"{name} must be an integer (got {value}).")

    for name in resolutions:
        if getattr(cfg, name) < 2:
            raise InvalidConfigurationError(
                f"{name} must be >= 2 so a curve has a start and an end "
                f"(got {getattr(cfg, name)})."
            )


def _validate_choice(cfg, name: str, choices: Sequence[str]) -> None:
    value = getattr(cfg, name)
    if value not in choices:
        raise InvalidConfigurationError(
            f"{name} must be one of {', '.join(choices)} (got {value!r})."
        )


# ---------------------------------------------------------------------------
# Seeded randomness
# ---------------------------------------------------------------------------

_ONE_BELOW = math.nextafter(1.0, 0.0)


def seeded_random(seed: Seed, i: float, j: float) -> float:
    """Deterministic pseudo-random value in [0, 1) keyed by (seed, i, j).

    Fractional part of a scaled sine::

        x = sin(seed·12.9898 + i·78.233 + j·43.758) · 43758.5453
        u = x − floor(x)

    Pure and stateless; callers must pass finite numbers.
    """
    x = math.sin(seed * 12.9898 + i * 78.233 + j * 43.758) * 43758.5453
    # Rounding can push the fraction of a tiny negative x up to exactly 1.0
    return min(x - math.floor(x), _ONE_BELOW)


class RandomStream:
    """Sequential draws from :func:`seeded_random` for one ``(seed, key)``.

    Draw ``k`` of the stream is ``seeded_random(seed, key, k)``.  Different
    keys give disjoint streams, so every branch owns its own sequence and
    its values do not depend on how many draws other branches made.
    """

    def __init__(self, seed: Seed, key: int) -> None:
        self.seed = seed
        self.key = key
        self._draws = 0

    def random(self) -> float:
        u = seeded_random(self.seed, self.key, self._draws)
        self._draws += 1
        return u

    def uniform(self, low: float, high: float) -> float:
        return low + (high - low) * self.random()


# ---------------------------------------------------------------------------
# Vector helpers
# ---------------------------------------------------------------------------

_X_AXIS = np.array([1.0, 0.0, 0.0])
_Y_AXIS = np.array([0.0, 1.0, 0.0])
_Z_AXIS = np.array([0.0, 0.0, 1.0])


def _frozen(values) -> np.ndarray:
    """Float64 copy of *values* with the writeable flag cleared."""
    arr = np.array(values, dtype=np.float64)
    arr.flags.writeable = False
    return arr


def _normalize(v: np.ndarray, fallback: Optional[np.ndarray] = None) -> np.ndarray:
    """Unit vector along *v*; *fallback* (or zeros) when *v* has ~zero length."""
    n = float(np.linalg.norm(v))
    if n < PARALLEL_EPS:
        return np.zeros(3) if fallback is None else np.array(fallback, dtype=np.float64)
    return v / n


def spherical_to_cartesian(radius: float, theta: float, phi: float) -> np.ndarray:
    """(r, θ azimuth, φ polar) → (x, y, z)."""
    return np.array([
        radius * math.sin(phi) * math.cos(theta),
        radius * math.sin(phi) * math.sin(theta),
        radius * math.cos(phi),
    ])


def random_direction(stream: RandomStream) -> np.ndarray:
    """Unit vector uniformly distributed on the sphere (two draws)."""
    theta = stream.random() * 2.0 * math.pi
    phi = math.acos(2.0 * stream.random() - 1.0)
    return spherical_to_cartesian(1.0, theta, phi)


def perpendicular_axis(direction: np.ndarray, sample: np.ndarray) -> np.ndarray:
    """Unit axis perpendicular to *direction*, preferring ``direction × sample``.

    Falls back to ``x̂ × direction`` and then ``ŷ × direction`` when the
    candidate is degenerate, so a valid axis is always returned for a unit
    *direction*.
    """
    for candidate in (
        np.cross(direction, sample),
        np.cross(_X_AXIS, direction),
        np.cross(_Y_AXIS, direction),
    ):
        if np.linalg.norm(candidate) >= PARALLEL_EPS:
            return _normalize(candidate)
    return _normalize(np.cross(_Z_AXIS, direction), fallback=_X_AXIS)


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

NodeId = Tuple[int, int]   # (group, index)


@dataclasses.dataclass(frozen=True, eq=False)
class Node:
    """One placed node.  ``index`` is positional within its ``group``."""

    group: int
    index: int
    position: np.ndarray
    rotation: Optional[np.ndarray] = None   # XYZ Euler angles, radians
    scale: Optional[float] = None

    @property
    def id(self) -> NodeId:
        return (self.group, self.index)


class Sample(NamedTuple):
    position: np.ndarray
    progress: float


@dataclasses.dataclass(frozen=True, eq=False)
class Branch:
    """A shaped control polyline, its fitted curve and the resampled path."""

    index: int
    kind: str                  # "main" or "sub"
    points: np.ndarray         # (n, 3) control points, n >= 2
    curve: "CatmullRomCurve"
    positions: np.ndarray      # (m, 3) resampled points
    progress: np.ndarray       # (m,) strictly increasing, 0 … 1
    parent: int = -1           # index of the main branch a sub branch grew from

    @property
    def samples(self) -> Tuple[Sample, ...]:
        return tuple(Sample(p, float(t)) for p, t in zip(self.positions, self.progress))


@dataclasses.dataclass(frozen=True, eq=False)
class Connection:
    """Proximity link between two nodes, with its wobbly display curve."""

    index: int
    start: np.ndarray
    end: np.ndarray
    start_id: NodeId
    end_id: NodeId
    distance: float
    curve: "CatmullRomCurve"
    positions: np.ndarray
    progress: np.ndarray


@dataclasses.dataclass(frozen=True)
class Edge:
    """Fixed structural edge inside one node group (cube edges)."""

    group: int
    source: int
    target: int
    length: float


@dataclasses.dataclass(frozen=True, eq=False)
class Graph:
    """Complete output of one generation run.  Never mutated after creation."""

    variant: str
    seed: Seed
    nodes: Tuple[Node, ...] = ()
    branches: Tuple[Branch, ...] = ()
    connections: Tuple[Connection, ...] = ()
    edges: Tuple[Edge, ...] = ()
    node_connections: Mapping[NodeId, int] = dataclasses.field(
        default_factory=lambda: MappingProxyType({})
    )
    requested_nodes: int = 0
    requested_branches: int = 0

    @property
    def main_branches(self) -> Tuple[Branch, ...]:
        return tuple(b for b in self.branches if b.kind == "main")

    @property
    def sub_branches(self) -> Tuple[Branch, ...]:
        return tuple(b for b in self.branches if b.kind == "sub")

    def group_positions(self) -> List[np.ndarray]:
        """Node positions split by group, each array ordered by node index."""
        groups: Dict[int, List[np.ndarray]] = {}
        for node in self.nodes:
            groups.setdefault(node.group, []).append(node.position)
        return [np.array(groups[g]).reshape(-1, 3) for g in sorted(groups)]

    def to_frames(self) -> Dict[str, pd.DataFrame]:
        """Tabular view of the graph.

        Returns
        -------
        dict with DataFrames
            nodes       : group, index, x, y, z, rot_x, rot_y, rot_z, scale,
                          connected, connection
            samples     : owner, owner_index, kind, parent, sample, x, y, z,
                          progress   (branch and connection curve samples)
            connections : connection, start_group, start_index, end_group,
                          end_index, x0, y0, z0, x1, y1, z1, length
            edges       : group, source, target, length
        """
        node_rows = []
        for node in self.nodes:
            rot = node.rotation if node.rotation is not None else (np.nan,) * 3
            conn = self.node_connections.get(node.id, -1)
            node_rows.append({
                "group":      node.group,
                "index":      node.index,
                "x":          node.position[0],
                "y":          node.position[1],
                "z":          node.position[2],
                "rot_x":      rot[0],
                "rot_y":      rot[1],
                "rot_z":      rot[2],
                "scale":      np.nan if node.scale is None else node.scale,
                "connected":  conn >= 0,
                "connection": conn,
            })
        nodes = pd.DataFrame(node_rows, columns=[
            "group", "index", "x", "y", "z", "rot_x", "rot_y", "rot_z",
            "scale", "connected", "connection",
        ])

        sample_frames = []
        for branch in self.branches:
            sample_frames.append(_sample_frame(
                "branch", branch.index, branch.kind, branch.parent,
                branch.positions, branch.progress,
            ))
        for conn in self.connections:
            sample_frames.append(_sample_frame(
                "connection", conn.index, "connection", -1,
                conn.positions, conn.progress,
            ))
        sample_cols = ["owner", "owner_index", "kind", "parent", "sample",
                       "x", "y", "z", "progress"]
        samples = (pd.concat(sample_frames, ignore_index=True)
                   if sample_frames else pd.DataFrame(columns=sample_cols))

        connections = pd.DataFrame([
            {
                "connection":  c.index,
                "start_group": c.start_id[0],
                "start_index": c.start_id[1],
                "end_group":   c.end_id[0],
                "end_index":   c.end_id[1],
                "x0": c.start[0], "y0": c.start[1], "z0": c.start[2],
                "x1": c.end[0],   "y1": c.end[1],   "z1": c.end[2],
                "length":      c.distance,
            }
            for c in self.connections
        ], columns=["connection", "start_group", "start_index", "end_group",
                    "end_index", "x0", "y0", "z0", "x1", "y1", "z1", "length"])

        edges = pd.DataFrame(
            [dataclasses.asdict(e) for e in self.edges],
            columns=["group", "source", "target", "length"],
        )

        return {"nodes": nodes, "samples": samples,
                "connections": connections, "edges": edges}


def _sample_frame(
    owner: str,
    owner_index: int,
    kind: str,
    parent: int,
    positions: np.ndarray,
    progress: np.ndarray,
) -> pd.DataFrame:
    n = len(positions)
    return pd.DataFrame({
        "owner":       [owner] * n,
        "owner_index": np.full(n, owner_index, dtype=np.int64),
        "kind":        [kind] * n,
        "parent":      np.full(n, parent, dtype=np.int64),
        "sample":      np.arange(n, dtype=np.int64),
        "x":           positions[:, 0],
        "y":           positions[:, 1],
        "z":           positions[:, 2],
        "progress":    progress,
    })


# ---------------------------------------------------------------------------
# Node placement
# ---------------------------------------------------------------------------

# Sub-index channels of seeded_random used per placed item
_CH_THETA, _CH_PHI, _CH_RADIUS = 0, 1, 2
_CH_ROT = (3, 4, 5)
_CH_SCALE = 6
_CH_JITTER = 7          # + 3 * attempt + axis
_CH_CONNECTION = _CH_JITTER + 3 * MAX_PLACEMENT_ATTEMPTS   # + 0 … 5, connection wobble


def _random_rotation(seed: Seed, i: int) -> np.ndarray:
    return np.array([seeded_random(seed, i, ch) * 2.0 * math.pi for ch in _CH_ROT])


def _random_scale(seed: Seed, i: int, base_scale: float) -> float:
    return base_scale * (0.8 + 0.4 * seeded_random(seed, i, _CH_SCALE))


def place_clustered(
    count: int,
    spread: float,
    base_scale: float,
    seed: Seed,
    group: int = 0,
) -> Tuple[Node, ...]:
    """Scatter *count* nodes in a spherical shell around the origin.

    Direction is uniform on the sphere (θ uniform over 2π, φ = acos(2u − 1));
    radius is ``spread * (0.3 + 0.7 u)``.  Each node gets an independent
    random XYZ rotation and a scale of ``base_scale * (0.8 + 0.4 u)``.
    No separation guarantee.
    """
    nodes = []
    for i in range(int(count)):
        theta = seeded_random(seed, i, _CH_THETA) * 2.0 * math.pi
        phi = math.acos(2.0 * seeded_random(seed, i, _CH_PHI) - 1.0)
        radius = spread * (0.3 + 0.7 * seeded_random(seed, i, _CH_RADIUS))
        nodes.append(Node(
            group=group,
            index=i,
            position=_frozen(spherical_to_cartesian(radius, theta, phi)),
            rotation=_frozen(_random_rotation(seed, i)),
            scale=_random_scale(seed, i, base_scale),
        ))
    return tuple(nodes)


def grid_cell(i: int, grid_size: int) -> np.ndarray:
    """Centred integer grid coordinates of slot *i* in a ``grid_size``³ grid."""
    half = (grid_size - 1) * 0.5
    return np.array([
        (i % grid_size) - half,
        ((i // grid_size) % grid_size) - half,
        (i // (grid_size * grid_size)) - half,
    ], dtype=np.float64)


def place_uniform(
    count: int,
    separation: float,
    base_scale: float,
    seed: Seed,
    group: int = 0,
    max_attempts: int = MAX_PLACEMENT_ATTEMPTS,
) -> Tuple[Node, ...]:
    """Jittered-grid placement with minimum-separation rejection.

    Slot *i* sits at ``grid_cell(i) * separation`` on a grid of
    ``ceil(cbrt(count))`` cells per axis, offset per axis by
    ``(u − 0.5) · 0.3 · separation``.  A candidate closer than
    ``0.8 * separation`` to an already accepted node is redrawn with fresh
    jitter, up to *max_attempts* times; a slot that never succeeds is left
    out, so the result may hold fewer than *count* nodes.  Accepted nodes are
    indexed consecutively.
    """
    count = int(count)
    if count <= 0:
        return ()
    grid_size = int(math.ceil(round(count ** (1.0 / 3.0), 9)))
    min_dist = 0.8 * separation

    accepted = np.empty((0, 3))
    nodes = []
    for i in range(count):
        base = grid_cell(i, grid_size) * separation
        position = None
        for attempt in range(max_attempts):
            jitter_ch = _CH_JITTER + 3 * attempt
            jitter = np.array([
                seeded_random(seed, i, jitter_ch + axis) - 0.5 for axis in range(3)
            ]) * separation * 0.3
            candidate = base + jitter
            if len(accepted) == 0 or np.min(
                np.linalg.norm(accepted - candidate, axis=1)
            ) >= min_dist:
                position = candidate
                break

        if position is None:
            continue   # placement exhausted: omit this slot

        accepted = np.vstack([accepted, position])
        nodes.append(Node(
            group=group,
            index=len(nodes),
            position=_frozen(position),
            rotation=_frozen(_random_rotation(seed, i)),
            scale=_random_scale(seed, i, base_scale),
        ))
    return tuple(nodes)


# ---------------------------------------------------------------------------
# Branch growth and shaping
# ---------------------------------------------------------------------------

def grow_branch(
    origin: np.ndarray,
    direction: np.ndarray,
    segments: int,
    curvature: float,
    step_length: float,
    stream: RandomStream,
) -> np.ndarray:
    """Constrained 3-D random walk of ``segments`` fixed-length steps.

    Each step turns the heading by a random angle in
    ``[-curvature/2, curvature/2]`` around an axis perpendicular to it, then
    advances ``step_length``.

    Returns
    -------
    ndarray of shape ``(segments + 1, 3)`` – the origin followed by one point
    per step.
    """
    points = [np.array(origin, dtype=np.float64)]
    heading = _normalize(np.asarray(direction, dtype=np.float64), fallback=_Z_AXIS)

    for _ in range(int(segments)):
        axis = perpendicular_axis(heading, random_direction(stream))
        angle = (stream.random() - 0.5) * curvature
        heading = _normalize(Rotation.from_rotvec(axis * angle).apply(heading),
                             fallback=heading)
        points.append(points[-1] + heading * step_length)

    return np.array(points)


def normalize_to_radius(
    points: np.ndarray,
    origin: np.ndarray,
    target_radius: float,
) -> np.ndarray:
    """Scale *points* about *origin* so the last one is ``target_radius`` away.

    Fewer than 2 points, or an endpoint within 1e-3 of *origin*, are returned
    unscaled.
    """
    points = np.asarray(points, dtype=np.float64)
    if len(points) < 2:
        return points
    origin = np.asarray(origin, dtype=np.float64)
    current = float(np.linalg.norm(points[-1] - origin))
    if current < NORMALIZE_EPS:
        return points
    return origin + (points - origin) * (target_radius / current)


def clip_to_radius(points: np.ndarray, max_radius: float) -> np.ndarray:
    """Truncate *points* before the first one farther than *max_radius* from
    the world origin."""
    points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    outside = np.linalg.norm(points, axis=1) > max_radius
    if not outside.any():
        return points
    return points[: int(np.argmax(outside))]


def shape_branch(
    points: np.ndarray,
    origin: np.ndarray,
    target_radius: Optional[float] = None,
    max_radius: Optional[float] = None,
) -> Optional[np.ndarray]:
    """Apply normalisation and/or clipping; ``None`` if < 2 points survive."""
    if target_radius is not None:
        points = normalize_to_radius(points, origin, target_radius)
    if max_radius is not None:
        points = clip_to_radius(points, max_radius)
    if len(points) < 2:
        return None
    return np.asarray(points, dtype=np.float64)


def sub_branch_direction(
    curve: "CatmullRomCurve",
    u: float,
    offset: float,
    angle: float,
) -> np.ndarray:
    """Heading for a branch spawned at arclength fraction *u* of *curve*.

    The parent tangent is blended with the perpendicular at *angle* around
    it: ``tangent·(1 − offset) + perp·offset``, normalised.
    """
    tangent = curve.tangent_at(u)
    up = _Y_AXIS if abs(float(np.dot(tangent, _Y_AXIS))) <= 0.99 else _X_AXIS
    normal = _normalize(np.cross(tangent, up), fallback=_X_AXIS)
    binormal = _normalize(np.cross(tangent, normal), fallback=_Z_AXIS)
    perp = normal * math.cos(angle) + binormal * math.sin(angle)
    return _normalize(tangent * (1.0 - offset) + perp * offset, fallback=perp)


# ---------------------------------------------------------------------------
# Curve fitting and sampling
# ---------------------------------------------------------------------------

class CatmullRomCurve:
    """Open centripetal Catmull-Rom spline through 2 or more control points.

    The curve parameter ``t ∈ [0, 1]`` is split evenly between the spans
    between control points.  The ``*_at`` methods take an arclength fraction
    ``u`` instead, mapped to ``t`` through a table of ``arc_divisions``
    chord lengths.  End spans use mirrored phantom points.

    Parameters
    ----------
    points        : array-like, shape ``(n, 3)``, n >= 2
    arc_divisions : resolution of the arclength lookup table
    """

    def __init__(self, points, arc_divisions: int = 1000) -> None:
        pts = np.array(points, dtype=np.float64).reshape(-1, 3)
        if len(pts) < 2:
            raise ValueError(
                f"A curve needs at least 2 control points (got {len(pts)})."
            )
        pts.flags.writeable = False
        self.points = pts
        self._coeffs = self._span_coefficients(pts)

        ts = np.linspace(0.0, 1.0, arc_divisions + 1)
        chords = np.linalg.norm(np.diff(self.point(ts), axis=0), axis=1)
        self._arc_t = ts
        self._arc_len = np.concatenate([[0.0], np.cumsum(chords)])

    @staticmethod
    def _span_coefficients(pts: np.ndarray) -> np.ndarray:
        """Cubic coefficients ``(c0, c1, c2, c3)`` per span, shape ``(n−1, 4, 3)``."""
        ext = np.vstack([2.0 * pts[0] - pts[1], pts, 2.0 * pts[-1] - pts[-2]])
        p0, p1, p2, p3 = ext[:-3], ext[1:-2], ext[2:-1], ext[3:]

        # Centripetal knot spacing: |Δp| ** 0.5
        dt0 = np.sum((p1 - p0) ** 2, axis=1) ** 0.25
        dt1 = np.sum((p2 - p1) ** 2, axis=1) ** 0.25
        dt2 = np.sum((p3 - p2) ** 2, axis=1) ** 0.25
        dt1 = np.where(dt1 < 1e-4, 1.0, dt1)
        dt0 = np.where(dt0 < 1e-4, dt1, dt0)
        dt2 = np.where(dt2 < 1e-4, dt1, dt2)
        dt0, dt1, dt2 = dt0[:, None], dt1[:, None], dt2[:, None]

        m1 = ((p1 - p0) / dt0 - (p2 - p0) / (dt0 + dt1) + (p2 - p1) / dt1) * dt1
        m2 = ((p2 - p1) / dt1 - (p3 - p1) / (dt1 + dt2) + (p3 - p2) / dt2) * dt1

        c0 = p1
        c1 = m1
        c2 = -3.0 * p1 + 3.0 * p2 - 2.0 * m1 - m2
        c3 = 2.0 * p1 - 2.0 * p2 + m1 + m2
        return np.stack([c0, c1, c2, c3], axis=1)

    def _locate(self, t) -> Tuple[np.ndarray, np.ndarray]:
        n_spans = len(self._coeffs)
        p = np.clip(np.asarray(t, dtype=np.float64), 0.0, 1.0) * n_spans
        span = np.clip(np.floor(p).astype(np.int64), 0, n_spans - 1)
        return span, p - span

    def point(self, t) -> np.ndarray:
        """Curve point(s) at parameter *t* (scalar → ``(3,)``, array → ``(k, 3)``)."""
        span, w = self._locate(t)
        c = self._coeffs[span]
        w = w[..., None]
        return c[..., 0, :] + w * (c[..., 1, :] + w * (c[..., 2, :] + w * c[..., 3, :]))

    def derivative(self, t) -> np.ndarray:
        """d(point)/dt at parameter *t*."""
        span, w = self._locate(t)
        c = self._coeffs[span]
        w = w[..., None]
        dw = c[..., 1, :] + w * (2.0 * c[..., 2, :] + 3.0 * w * c[..., 3, :])
        return dw * len(self._coeffs)

    def tangent(self, t) -> np.ndarray:
        """Unit tangent at parameter *t* (scalar *t* only)."""
        chord = self.points[-1] - self.points[0]
        return _normalize(self.derivative(float(t)),
                          fallback=_normalize(chord, fallback=_Z_AXIS))

    @property
    def length(self) -> float:
        return float(self._arc_len[-1])

    def u_to_t(self, u):
        """Map arclength fraction *u* to curve parameter *t*."""
        u = np.clip(np.asarray(u, dtype=np.float64), 0.0, 1.0)
        if self.length < 1e-12:
            return u
        return np.interp(u * self.length, self._arc_len, self._arc_t)

    def point_at(self, u) -> np.ndarray:
        return self.point(self.u_to_t(u))

    def tangent_at(self, u: float) -> np.ndarray:
        return self.tangent(float(self.u_to_t(u)))


def sample_curve(
    curve: CatmullRomCurve,
    resolution: int,
    spacing: str = "parameter",
    radial_remap: float = 1.0,
) -> Tuple[np.ndarray, np.ndarray]:
    """Resample *curve* into ``resolution`` points with progress ``i/(n−1)``.

    Parameters
    ----------
    spacing      : "parameter" – evenly spaced in curve parameter ``t``;
                   "arclength" – evenly spaced along the curve's length.
    radial_remap : exponent ``k``; each sample ``p`` (|p| >= 1e-4) becomes
                   ``p/|p| · |p|**k``.  1.0 leaves samples untouched.

    Returns
    -------
    positions : (resolution, 3)
    progress  : (resolution,)  strictly increasing, first 0, last 1
    """
    resolution = int(resolution)
    if resolution < 2:
        raise ValueError(f"resolution must be >= 2 (got {resolution}).")
    if spacing not in SPACINGS:
        raise ValueError(f"Unknown spacing: {spacing!r}")

    progress = np.linspace(0.0, 1.0, resolution)
    if spacing == "arclength":
        positions = curve.point_at(progress)
    else:
        positions = curve.point(progress)

    if radial_remap != 1.0:
        radii = np.linalg.norm(positions, axis=1)
        far = radii >= 1e-4
        factor = np.ones_like(radii)
        factor[far] = radii[far] ** radial_remap / radii[far]
        positions = positions * factor[:, None]

    return _frozen(positions), _frozen(progress)


# ---------------------------------------------------------------------------
# Connection discovery
# ---------------------------------------------------------------------------

def find_pairs_within(
    positions: np.ndarray,
    max_distance: float,
) -> Tuple[np.ndarray, np.ndarray]:
    """All unordered pairs ``i < j`` with ``|p_i − p_j| <= max_distance``.

    Uses ``cKDTree.query_pairs`` and re-checks each candidate with the exact
    Euclidean distance.

    Returns
    -------
    pairs     : (k, 2) int64, sorted lexicographically
    distances : (k,)
    """
    positions = np.asarray(positions, dtype=np.float64).reshape(-1, 3)
    empty = (np.empty((0, 2), dtype=np.int64), np.empty(0))
    if len(positions) < 2:
        return empty

    tree = cKDTree(positions)
    # Slightly widened radius; the exact filter below enforces the threshold
    pairs = tree.query_pairs(max_distance * (1.0 + 1e-9) + 1e-12, output_type="ndarray")
    if len(pairs) == 0:
        return empty

    pairs = np.sort(pairs.astype(np.int64), axis=1)
    pairs = pairs[np.lexsort((pairs[:, 1], pairs[:, 0]))]
    distances = np.linalg.norm(positions[pairs[:, 0]] - positions[pairs[:, 1]], axis=1)
    keep = distances <= max_distance
    return pairs[keep], distances[keep]


class GroupLink(NamedTuple):
    group_a: int
    index_a: int
    group_b: int
    index_b: int
    distance: float


def find_closest_group_pairs(
    groups: Sequence[np.ndarray],
    max_distance: float,
) -> Tuple[List[GroupLink], Dict[NodeId, int]]:
    """Closest node pair within *max_distance* for every pair of groups.

    Groups are visited in order ``(a, b)`` with ``a < b``.  For each pair at
    most one link is kept: the minimum-distance pair (first in row-major
    order on ties).  Pairs of groups with nothing in range get no link.

    Returns
    -------
    links  : list of GroupLink, in group-pair order
    lookup : (group, node index) → link index.  A node that ends up in
             several links maps to the last of them.
    """
    links: List[GroupLink] = []
    lookup: Dict[NodeId, int] = {}
    arrays = [np.asarray(g, dtype=np.float64).reshape(-1, 3) for g in groups]

    for a in range(len(arrays)):
        if len(arrays[a]) == 0:
            continue
        for b in range(a + 1, len(arrays)):
            if len(arrays[b]) == 0:
                continue
            d = cdist(arrays[a], arrays[b])
            d = np.where(d <= max_distance, d, np.inf)
            flat = int(np.argmin(d))
            best = float(d.flat[flat])
            if not math.isfinite(best):
                continue
            ia, ib = divmod(flat, d.shape[1])
            lookup[(a, ia)] = len(links)
            lookup[(b, ib)] = len(links)
            links.append(GroupLink(a, ia, b, ib, best))

    return links, lookup


def connection_curve(
    start: np.ndarray,
    end: np.ndarray,
    seed: Seed,
    connection_index: int,
    jitter: float,
) -> CatmullRomCurve:
    """Four-point curve from *start* to *end* with wobbled interior points.

    The interior points sit at 33 % and 67 % of the segment, each displaced
    by ``(u − 0.5) · jitter`` per axis.  The six draws use their own channels
    above every placement channel, so a connection's shape never repeats the
    draws of the node sharing its index.
    """
    start = np.asarray(start, dtype=np.float64)
    end = np.asarray(end, dtype=np.float64)
    wobble = np.array([
        seeded_random(seed, connection_index, _CH_CONNECTION + k) - 0.5 for k in range(6)
    ]).reshape(2, 3) * jitter
    return CatmullRomCurve([
        start,
        start + (end - start) * 0.33 + wobble[0],
        start + (end - start) * 0.67 + wobble[1],
        end,
    ])


def _build_connections(
    endpoints: Sequence[Tuple[np.ndarray, np.ndarray, NodeId, NodeId, float]],
    seed: Seed,
    jitter: float,
    resolution: int,
    spacing: str,
) -> Tuple[Connection, ...]:
    connections = []
    for ci, (start, end, start_id, end_id, distance) in enumerate(endpoints):
        curve = connection_curve(start, end, seed, ci, jitter)
        positions, progress = sample_curve(curve, resolution, spacing)
        connections.append(Connection(
            index=ci,
            start=_frozen(start),
            end=_frozen(end),
            start_id=start_id,
            end_id=end_id,
            distance=float(distance),
            curve=curve,
            positions=positions,
            progress=progress,
        ))
    return tuple(connections)


# ---------------------------------------------------------------------------
# Graph assembly
# ---------------------------------------------------------------------------

def generate_neuron_graph(cfg: NeuronGraphConfig) -> Graph:
    """Neurons (clustered or uniform) plus all pairs within the threshold."""
    cfg.validate()
    if cfg.distribution == "clustered":
        nodes = place_clustered(cfg.neuron_count, cfg.spread, cfg.scale, cfg.seed)
    else:
        nodes = place_uniform(cfg.neuron_count, cfg.separation, cfg.scale, cfg.seed)

    connections: Tuple[Connection, ...] = ()
    lookup: Dict[NodeId, int] = {}
    if cfg.show_connections and len(nodes) > 1:
        positions = np.array([n.position for n in nodes])
        pairs, distances = find_pairs_within(positions, cfg.max_connection_distance)
        endpoints = [
            (positions[i], positions[j], nodes[i].id, nodes[j].id, d)
            for (i, j), d in zip(pairs, distances)
        ]
        connections = _build_connections(
            endpoints, cfg.seed, cfg.connection_jitter,
            cfg.connection_resolution, cfg.connection_spacing,
        )
        for conn in connections:
            lookup[conn.start_id] = conn.index
            lookup[conn.end_id] = conn.index

    return Graph(
        variant=cfg.variant,
        seed=cfg.seed,
        nodes=nodes,
        connections=connections,
        node_connections=MappingProxyType(lookup),
        requested_nodes=int(cfg.neuron_count),
    )


# Unit cube corners and the 12 edges joining them
CUBE_CORNERS = np.array([
    [-1, -1, -1], [1, -1, -1], [1, 1, -1], [-1, 1, -1],
    [-1, -1, 1],  [1, -1, 1],  [1, 1, 1],  [-1, 1, 1],
], dtype=np.float64)

CUBE_EDGES = (
    (0, 1), (1, 2), (2, 3), (3, 0),   # bottom face
    (4, 5), (5, 6), (6, 7), (7, 4),   # top face
    (0, 4), (1, 5), (2, 6), (3, 7),   # verticals
)


def cube_corners(center: np.ndarray, rotation: np.ndarray, scale: float) -> np.ndarray:
    """Corners of a cube of half-size *scale*, XYZ-Euler rotated, then moved
    to *center*."""
    rotated = Rotation.from_euler("XYZ", rotation).apply(CUBE_CORNERS * scale)
    return rotated + np.asarray(center)


def generate_cube_graph(cfg: CubeGraphConfig) -> Graph:
    """Cube clusters with their edges plus one closest link per cube pair."""
    cfg.validate()
    cubes = place_clustered(cfg.cube_count, cfg.spread, cfg.cube_size, cfg.seed)

    nodes: List[Node] = []
    edges: List[Edge] = []
    groups: List[np.ndarray] = []
    for cube in cubes:
        corners = cube_corners(cube.position, cube.rotation, cube.scale)
        groups.append(corners)
        for k, corner in enumerate(corners):
            nodes.append(Node(group=cube.index, index=k, position=_frozen(corner)))
        for a, b in CUBE_EDGES:
            edges.append(Edge(cube.index, a, b,
                              float(np.linalg.norm(corners[a] - corners[b]))))

    connections: Tuple[Connection, ...] = ()
    lookup: Dict[NodeId, int] = {}
    if cfg.show_connections:
        links, lookup = find_closest_group_pairs(groups, cfg.max_connection_distance)
        endpoints = [
            (groups[l.group_a][l.index_a], groups[l.group_b][l.index_b],
             (l.group_a, l.index_a), (l.group_b, l.index_b), l.distance)
            for l in links
        ]
        connections = _build_connections(
            endpoints, cfg.seed, cfg.connection_jitter,
            cfg.connection_resolution, cfg.connection_spacing,
        )

    return Graph(
        variant=cfg.variant,
        seed=cfg.seed,
        nodes=tuple(nodes),
        connections=connections,
        edges=tuple(edges),
        node_connections=MappingProxyType(lookup),
        requested_nodes=int(cfg.cube_count) * len(CUBE_CORNERS),
    )


def generate_brain_graph(cfg: BrainGraphConfig) -> Graph:
    """Main branches from the origin plus sub branches along each of them.

    Main branch *i* draws from stream key ``i``; sub branch *j* of main
    branch *i* from key ``main_branch_count + i * sub_branch_count + j``.
    A main branch that degenerates takes its sub branches with it.
    """
    cfg.validate()
    origin = np.zeros(3)
    main_count = int(cfg.main_branch_count)
    sub_count = int(cfg.sub_branch_count)

    step = cfg.main_radius / cfg.segments if cfg.segments > 0 else 0.0
    sub_step = ((cfg.max_radius - cfg.main_radius * 0.5) / cfg.sub_branch_segments
                if cfg.sub_branch_segments > 0 else 0.0)

    branches: List[Branch] = []

    def _add(points, kind, parent) -> Branch:
        curve = CatmullRomCurve(points)
        positions, progress = sample_curve(
            curve, cfg.resolution, cfg.sample_spacing, cfg.radial_remap
        )
        branch = Branch(
            index=len(branches),
            kind=kind,
            points=_frozen(points),
            curve=curve,
            positions=positions,
            progress=progress,
            parent=parent,
        )
        branches.append(branch)
        return branch

    for i in range(main_count):
        stream = RandomStream(cfg.seed, i)
        direction = random_direction(stream)
        raw = grow_branch(origin, direction, cfg.segments, cfg.curvature, step, stream)
        points = shape_branch(raw, origin, target_radius=cfg.main_radius)
        if points is None:
            continue
        main = _add(points, "main", -1)

        for j in range(sub_count):
            sub_stream = RandomStream(cfg.seed, main_count + i * sub_count + j)
            u = 0.2 + sub_stream.random() * 0.6
            spawn = main.curve.point_at(u)
            heading = sub_branch_direction(
                main.curve, u, cfg.sub_branch_offset,
                sub_stream.random() * 2.0 * math.pi,
            )
            raw = grow_branch(spawn, heading, cfg.sub_branch_segments,
                              cfg.sub_branch_curvature, sub_step, sub_stream)
            points = shape_branch(raw, spawn, max_radius=cfg.max_radius)
            if points is None:
                continue
            _add(points, "sub", main.index)

    return Graph(
        variant=cfg.variant,
        seed=cfg.seed,
        branches=tuple(branches),
        requested_branches=main_count * (1 + sub_count),
    )


GENERATORS = {
    "neuron": generate_neuron_graph,
    "cube":   generate_cube_graph,
    "brain":  generate_brain_graph,
}


def generate(cfg: GraphConfig) -> Graph:
    """Dispatch to the generator matching ``cfg.variant``."""
    return GENERATORS[cfg.variant](cfg)


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------

def write_frames(graph: Graph, out_dir: str) -> List[str]:
    """Write nodes / samples / connections / edges CSVs; return their paths."""
    os.makedirs(out_dir, exist_ok=True)
    paths = []
    for name, frame in graph.to_frames().items():
        path = os.path.join(out_dir, f"{name}.csv")
        frame.to_csv(path, index=False)
        paths.append(path)
    return paths


# ---------------------------------------------------------------------------
# Main generator class
# ---------------------------------------------------------------------------

class GraphGenerator:
    """Runs one variant end to end: generate, check, write outputs.

    Parameters
    ----------
    cfg : NeuronGraphConfig | CubeGraphConfig | BrainGraphConfig
    """

    def __init__(self, cfg: GraphConfig) -> None:
        self.cfg = cfg

    def generate(self) -> Graph:
        return generate(self.cfg)

    # ------------------------------------------------------------------
    # Acceptance tests
    # ------------------------------------------------------------------

    def _run_checks(self, graph: Graph) -> None:
        """Print acceptance test results to stdout."""
        cfg = self.cfg
        sep = "─" * 52

        print(f"\n{sep}")
        print("  ACCEPTANCE TESTS")
        print(sep)

        if graph.variant in ("neuron", "cube"):
            ok = len(graph.nodes) == graph.requested_nodes
            print(f"  Node count : {len(graph.nodes):>6,}  "
                  f"(target {graph.requested_nodes:,})  "
                  f"{'✓' if ok else '✗ SHORT (placement exhausted)'}")

        if graph.variant == "neuron" and cfg.distribution == "uniform" and len(graph.nodes) > 1:
            positions = np.array([n.position for n in graph.nodes])
            min_sep = float(cKDTree(positions).query(positions, k=2)[0][:, 1].min())
            ok = min_sep >= 0.8 * cfg.separation - 1e-9
            print(f"  Min sep    : {min_sep:>9.4f}  >= {0.8 * cfg.separation:.4f}  "
                  f"{'✓' if ok else '✗ FAIL'}")

        if graph.connections:
            longest = max(c.distance for c in graph.connections)
            ok = longest <= cfg.max_connection_distance + 1e-9
            print(f"  Max length : {longest:>9.4f}  <= {cfg.max_connection_distance}  "
                  f"{'✓' if ok else '✗ FAIL'}")
            if graph.variant == "cube":
                pairs = [(c.start_id[0], c.end_id[0]) for c in graph.connections]
                ok = len(set(pairs)) == len(pairs)
                print(f"  Links/pair : {len(pairs):>6,} links, "
                      f"{len(set(pairs)):,} cube pairs  {'✓' if ok else '✗ FAIL'}")
        elif graph.variant != "brain":
            print("  (no connections to check)")

        curves = [(b.progress, b.kind) for b in graph.branches]
        curves += [(c.progress, "connection") for c in graph.connections]
        if curves:
            ok = all(p[0] == 0.0 and p[-1] == 1.0 and np.all(np.diff(p) > 0)
                     for p, _ in curves)
            print(f"  Progress   : {len(curves):>6,} curves monotone 0 → 1  "
                  f"{'✓' if ok else '✗ FAIL'}")

        if graph.variant == "brain":
            mains, subs = graph.main_branches, graph.sub_branches
            print(f"  Branches   : {len(mains):,} main + {len(subs):,} sub  "
                  f"(requested {graph.requested_branches:,})")
            if mains:
                end_r = np.array([np.linalg.norm(b.points[-1]) for b in mains])
                ok = np.allclose(end_r, cfg.main_radius, atol=1e-6)
                print(f"  Main radius: {end_r.min():.4f} … {end_r.max():.4f}  "
                      f"== {cfg.main_radius}  {'✓' if ok else '✗ FAIL'}")
            if subs:
                far = max(float(np.linalg.norm(b.points, axis=1).max()) for b in subs)
                ok = far <= cfg.max_radius + 1e-9
                print(f"  Sub radius : {far:>9.4f}  <= {cfg.max_radius}  "
                      f"{'✓' if ok else '✗ FAIL'}")

        print(sep + "\n")

    # ------------------------------------------------------------------
    # GEXF export
    # ------------------------------------------------------------------

    def _write_gexf(self, graph: Graph) -> None:
        """Export nodes, cube edges and connections as GEXF (requires networkx)."""
        try:
            import networkx as nx
        except ImportError:
            print("  networkx not found – skipping GEXF export.  "
                  "Install with: pip install networkx")
            return

        if not graph.nodes:
            print("  No nodes – skipping GEXF export.")
            return

        G = nx.Graph()
        for node in graph.nodes:
            G.add_node(
                f"{node.group}:{node.index}",
                group=int(node.group),
                index=int(node.index),
                x=float(node.position[0]),
                y=float(node.position[1]),
                z=float(node.position[2]),
                connected=node.id in graph.node_connections,
            )
        for edge in graph.edges:
            G.add_edge(f"{edge.group}:{edge.source}", f"{edge.group}:{edge.target}",
                       kind="edge", length=float(edge.length))
        for conn in graph.connections:
            G.add_edge(f"{conn.start_id[0]}:{conn.start_id[1]}",
                       f"{conn.end_id[0]}:{conn.end_id[1]}",
                       kind="connection", length=float(conn.distance))

        gexf_path = os.path.join(self.cfg.out_dir, "graph.gexf")
        nx.write_gexf(G, gexf_path)
        print(f"  Wrote {gexf_path}")

    # ------------------------------------------------------------------
    # Main entry point
    # ------------------------------------------------------------------

    def run(self) -> Graph:
        """Generate the graph, print checks, write outputs and return it.

        Outputs in ``cfg.out_dir``: nodes.csv, samples.csv, connections.csv,
        edges.csv and (when ``write_gexf``) graph.gexf.
        """
        cfg = self.cfg
        t_start = time.perf_counter()

        print(f"Generating {cfg.variant} graph (seed={cfg.seed}) …")
        t0 = time.perf_counter()
        graph = self.generate()
        print(f"  {len(graph.nodes):,} nodes, {len(graph.branches):,} branches, "
              f"{len(graph.connections):,} connections in "
              f"{time.perf_counter() - t0:.2f}s")

        self._run_checks(graph)

        for path in write_frames(graph, cfg.out_dir):
            print(f"Wrote {path}")

        if cfg.write_gexf:
            self._write_gexf(graph)

        elapsed = time.perf_counter() - t_start
        print(f"\nTotal time: {elapsed:.2f}s")

        return graph


# ---------------------------------------------------------------------------
# Script entry point (uses all BrainGraphConfig defaults)
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    GraphGenerator(BrainGraphConfig()).run()
