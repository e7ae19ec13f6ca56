"""
run_generate.py
===============
CLI entrypoint for the neurograph procedural graph generator.

One sub-command per variant; all parameters are optional and fall back to the
defaults defined in ``NeuronGraphConfig``, ``CubeGraphConfig`` and
``BrainGraphConfig``.

Quick start
-----------
    python run_generate.py brain

With custom parameters::

    python run_generate.py neuron \\
        --neuron_count 40 \\
        --distribution uniform \\
        --separation 3.2 \\
        --max_connection_distance 4 \\
        --seed 7 \\
        --out_dir output

    python run_generate.py cube --cube_count 46 --spread 12.5 --seed 2

Then visualise the result::

    python plot_debug.py
"""

import argparse
import dataclasses
import json
import math
import os

from neurogen import (
    DISTRIBUTIONS,
    SPACINGS,
    BrainGraphConfig,
    CubeGraphConfig,
    GraphGenerator,
    InvalidConfigurationError,
    NeuronGraphConfig,
)

CONFIGS = {
    "neuron": NeuronGraphConfig,
    "cube":   CubeGraphConfig,
    "brain":  BrainGraphConfig,
}


def seed_value(text: str):
    """Parse a seed as int when possible, otherwise as a finite float."""
    try:
        return int(text)
    except ValueError:
        pass
    try:
        value = float(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid seed: {text!r}")
    if not math.isfinite(value):
        raise argparse.ArgumentTypeError(f"seed must be finite: {text!r}")
    return value


def _add_common(p: argparse.ArgumentParser) -> None:
    # ── Reproducibility ───────────────────────────────────────────────────
    p.add_argument(
        "--seed", type=seed_value, default=0,
        metavar="S",
        help="Random seed (integer or float) for reproducible output.",
    )

    # ── Output ───────────────────────────────────────────────────────────
    p.add_argument(
        "--out_dir", type=str, default="output",
        metavar="DIR",
        help="Directory to write output files (created if absent).",
    )
    p.add_argument(
        "--no_gexf", action="store_true",
        help="Skip GEXF export.",
    )


def _add_connections(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--no_connections", action="store_true",
        help="Skip proximity connection discovery.",
    )
    p.add_argument(
        "--max_connection_distance", type=float, default=5.0,
        metavar="D",
        help="Maximum distance between two connected nodes.",
    )
    p.add_argument(
        "--connection_resolution", type=int, default=30,
        metavar="N",
        help="Number of samples along each connection curve.",
    )
    p.add_argument(
        "--connection_jitter", type=float, default=0.5,
        metavar="J",
        help="Full width of the random wobble applied to connection mid-points.",
    )
    p.add_argument(
        "--connection_spacing", choices=SPACINGS, default="parameter",
        help="Space connection samples evenly in curve parameter or arclength.",
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="run_generate.py",
        description=(
            "Procedural 3-D node / branch graph generator.\n"
            "Produces nodes.csv, samples.csv, connections.csv, edges.csv, "
            "params.json and (optionally) graph.gexf in OUT_DIR."
        ),
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    sub = p.add_subparsers(dest="variant", required=True, metavar="VARIANT")

    # ── Neuron clusters ───────────────────────────────────────────────────
    neuron = sub.add_parser(
        "neuron",
        help="Neurons in a sphere or on a jittered grid, linked by proximity.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    neuron.add_argument(
        "--neuron_count", type=int, default=20,
        metavar="N",
        help="Number of neurons to place (uniform placement may yield fewer).",
    )
    neuron.add_argument(
        "--distribution", choices=DISTRIBUTIONS, default="clustered",
        help="Placement strategy.",
    )
    neuron.add_argument(
        "--spread", type=float, default=8.0,
        metavar="R",
        help="Clustered placement: outer radius of the spherical shell.",
    )
    neuron.add_argument(
        "--separation", type=float, default=2.0,
        metavar="S",
        help="Uniform placement: grid cell size (minimum gap is 0.8 × S).",
    )
    neuron.add_argument(
        "--scale", type=float, default=1.0,
        metavar="K",
        help="Base neuron scale (each neuron varies by ±20%%).",
    )
    _add_connections(neuron)
    _add_common(neuron)

    # ── Cube clusters ─────────────────────────────────────────────────────
    cube = sub.add_parser(
        "cube",
        help="Rotated cubes of 8 nodes, one closest link per cube pair.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    cube.add_argument(
        "--cube_count", type=int, default=46,
        metavar="N",
        help="Number of cubes.",
    )
    cube.add_argument(
        "--cube_size", type=float, default=0.2,
        metavar="K",
        help="Cube half edge length before the ±20%% variation.",
    )
    cube.add_argument(
        "--spread", type=float, default=12.5,
        metavar="R",
        help="Outer radius of the shell cube centres are placed in.",
    )
    _add_connections(cube)
    _add_common(cube)

    # ── Branching brain ───────────────────────────────────────────────────
    brain = sub.add_parser(
        "brain",
        help="Curved main branches from the origin with spawned sub branches.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    brain.add_argument("--main_branch_count", type=int, default=12, metavar="N",
                       help="Number of main branches.")
    brain.add_argument("--main_radius", type=float, default=3.0, metavar="R",
                       help="Distance from the origin to every main branch tip.")
    brain.add_argument("--segments", type=int, default=8, metavar="N",
                       help="Steps per main branch.")
    brain.add_argument("--curvature", type=float, default=0.5, metavar="C",
                       help="Maximum main-branch turn per step (radians, full width).")
    brain.add_argument("--sub_branch_count", type=int, default=3, metavar="N",
                       help="Sub branches spawned per main branch.")
    brain.add_argument("--max_radius", type=float, default=4.0, metavar="R",
                       help="Sub branches are cut where they leave this radius.")
    brain.add_argument("--sub_branch_offset", type=float, default=0.7, metavar="F",
                       help="0 = follow parent tangent, 1 = fully perpendicular.")
    brain.add_argument("--sub_branch_segments", type=int, default=6, metavar="N",
                       help="Steps per sub branch.")
    brain.add_argument("--sub_branch_curvature", type=float, default=0.6, metavar="C",
                       help="Maximum sub-branch turn per step (radians, full width).")
    brain.add_argument("--resolution", type=int, default=50, metavar="N",
                       help="Samples per branch curve.")
    brain.add_argument("--sample_spacing", choices=SPACINGS, default="parameter",
                       help="Space branch samples evenly in curve parameter or arclength.")
    brain.add_argument("--radial_remap", type=float, default=1.0, metavar="K",
                       help="Remap sampled radii |p| to |p|**K (0.5 gives the "
                            "compressed look).")
    _add_common(brain)

    return p


def config_from_args(args: argparse.Namespace):
    """Build the variant's config dataclass from parsed arguments."""
    cls = CONFIGS[args.variant]
    values = {}
    for field in dataclasses.fields(cls):
        if hasattr(args, field.name):
            values[field.name] = getattr(args, field.name)
    values["write_gexf"] = not args.no_gexf
    if hasattr(args, "no_connections"):
        values["show_connections"] = not args.no_connections
    return cls(**values)


def main(argv=None) -> None:
    parser = build_parser()
    args   = parser.parse_args(argv)

    cfg = config_from_args(args)
    try:
        cfg.validate()
    except InvalidConfigurationError as exc:
        parser.error(str(exc))

    # Print config so the user can confirm parameters before waiting
    print("Configuration")
    print("─" * 40)
    print(f"  {'variant':<24} = {cfg.variant}")
    for field in dataclasses.fields(cfg):
        print(f"  {field.name:<24} = {getattr(cfg, field.name)}")
    print()

    gen = GraphGenerator(cfg)
    gen.run()

    # Persist generation parameters so plot_debug.py can read them automatically
    params_path = os.path.join(cfg.out_dir, "params.json")
    params = {"variant": cfg.variant, **dataclasses.asdict(cfg)}
    with open(params_path, "w") as f:
        json.dump(params, f, indent=2)
    print(f"Wrote {params_path}")

    print(
        f"\nNext steps:\n"
        f"  • Debug plot : python plot_debug.py --out_dir {cfg.out_dir}\n"
        f"  • Gephi      : import {cfg.out_dir}/graph.gexf"
    )


if __name__ == "__main__":
    main()
