"""
plot_debug.py
=============
Matplotlib sanity-check plot for the neurograph generator.

Shows, in a rotatable 3-D axes:
  • Nodes coloured by group, connection state, or a uniform colour
  • Cube edges (cube variant)
  • Branch curves, main branches drawn heavier than sub branches
  • Connection curves
  • Branch and connection samples coloured by progress (optional)

Usage
-----
    # Default: use ./output/
    python plot_debug.py

    # Skip connections and colour curve samples by progress
    python plot_debug.py --no_connections --color_by progress

    # Save to PNG instead of opening an interactive window
    python plot_debug.py --save graph.png

    # Save as SVG; with no filename defaults to graph.svg
    python plot_debug.py --svg

    # Point at a different output directory
    python plot_debug.py --out_dir my_run
"""

from __future__ import annotations

import argparse
import json
import os

import matplotlib.pyplot as plt
import matplotlib.patches as mpatches
import numpy as np
import pandas as pd
from mpl_toolkits.mplot3d.art3d import Line3DCollection


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="plot_debug.py",
        description="Debug visualisation for the neurograph generator.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    # Output location
    p.add_argument("--out_dir",  default="output",
                   help="Directory containing the generated CSV files.")
    p.add_argument("--save",     default=None, metavar="FILE",
                   help="Save figure to FILE (png/pdf/svg) instead of displaying.")
    p.add_argument("--svg",      nargs="?", const="graph.svg", default=None,
                   metavar="FILE",
                   help="Save figure as SVG.  FILE defaults to 'graph.svg' "
                        "when omitted.  Overrides --save when both are given.")

    # Cosmetic toggles
    p.add_argument("--no_connections", action="store_true",
                   help="Skip drawing connection curves.")
    p.add_argument("--no_branches", action="store_true",
                   help="Skip drawing branch curves.")
    p.add_argument("--color_by",
                   choices=["group", "connected", "progress", "none"],
                   default="group",
                   help="Colouring scheme (progress colours curve samples).")

    # Appearance
    p.add_argument("--node_size",  type=float, default=12.0,
                   help="Scatter marker size.")
    p.add_argument("--node_color", default="#aaccff",
                   help="Uniform node colour used when --color_by none.")
    p.add_argument("--branch_color", default="#e8e0d0",
                   help="Branch line colour.")
    p.add_argument("--edge_color", default="#667799",
                   help="Cube edge colour.")
    p.add_argument("--connection_color", default="#2266cc",
                   help="Connection curve colour.")
    p.add_argument("--line_alpha", type=float, default=0.6,
                   help="Line alpha (0=invisible, 1=solid).")

    return p


# ---------------------------------------------------------------------------
# Plot
# ---------------------------------------------------------------------------

def _curve_segments(samples: pd.DataFrame) -> list:
    """One polyline (k, 3) per curve owner, in sample order."""
    lines = []
    for _, curve in samples.groupby(["owner_index"], sort=True):
        curve = curve.sort_values("sample")
        lines.append(curve[["x", "y", "z"]].values)
    return lines


def _read_csv(path: str) -> pd.DataFrame:
    if not os.path.exists(path) or os.path.getsize(path) == 0:
        return pd.DataFrame()
    return pd.read_csv(path)


def draw_graph(args: argparse.Namespace) -> plt.Figure:
    """Load CSV files from ``args.out_dir`` and draw the graph.

    Returns
    -------
    matplotlib Figure
    """
    params_path = os.path.join(args.out_dir, "params.json")
    params = {}
    if os.path.exists(params_path):
        with open(params_path) as _f:
            params = json.load(_f)

    nodes_path = os.path.join(args.out_dir, "nodes.csv")
    if not os.path.exists(nodes_path):
        raise FileNotFoundError(
            f"nodes.csv not found in '{args.out_dir}'.  "
            "Run run_generate.py first."
        )

    nodes       = _read_csv(nodes_path)
    samples     = _read_csv(os.path.join(args.out_dir, "samples.csv"))
    connections = _read_csv(os.path.join(args.out_dir, "connections.csv"))
    edges       = _read_csv(os.path.join(args.out_dir, "edges.csv"))

    # ── Figure setup ─────────────────────────────────────────────────────
    fig = plt.figure(figsize=(10, 10))
    ax = fig.add_subplot(projection="3d")

    BG = "#09090f"
    ax.set_facecolor(BG)
    fig.patch.set_facecolor(BG)

    color_by = getattr(args, "color_by", "group")
    legend_patches = []

    # ── Cube edges ────────────────────────────────────────────────────────
    if len(edges) > 0 and len(nodes) > 0:
        pos = {
            (int(g), int(i)): (x, y, z)
            for g, i, x, y, z in nodes[["group", "index", "x", "y", "z"]].itertuples(
                index=False
            )
        }
        segs = [
            [pos[(int(g), int(s))], pos[(int(g), int(t))]]
            for g, s, t in edges[["group", "source", "target"]].itertuples(index=False)
        ]
        ax.add_collection3d(Line3DCollection(
            segs, colors=args.edge_color, linewidths=0.8, alpha=args.line_alpha,
        ))
        legend_patches.append(mpatches.Patch(facecolor=args.edge_color,
                                             label="Cube edges"))

    # ── Branches ──────────────────────────────────────────────────────────
    if len(samples) > 0 and not getattr(args, "no_branches", False):
        branch_samples = samples[samples["owner"] == "branch"]
        for kind, width in (("main", 1.4), ("sub", 0.7)):
            subset = branch_samples[branch_samples["kind"] == kind]
            if len(subset) == 0:
                continue
            ax.add_collection3d(Line3DCollection(
                _curve_segments(subset),
                colors=args.branch_color, linewidths=width, alpha=args.line_alpha,
            ))
            legend_patches.append(mpatches.Patch(
                facecolor=args.branch_color, label=f"{kind.capitalize()} branches",
            ))

    # ── Connections ───────────────────────────────────────────────────────
    if len(samples) > 0 and not getattr(args, "no_connections", False):
        conn_samples = samples[samples["owner"] == "connection"]
        if len(conn_samples) > 0:
            ax.add_collection3d(Line3DCollection(
                _curve_segments(conn_samples),
                colors=args.connection_color, linewidths=0.8, alpha=args.line_alpha,
            ))
            legend_patches.append(mpatches.Patch(
                facecolor=args.connection_color, label="Connections",
            ))

    # ── Progress-coloured samples ─────────────────────────────────────────
    if color_by == "progress" and len(samples) > 0:
        sc = ax.scatter(
            samples["x"].values, samples["y"].values, samples["z"].values,
            c=samples["progress"].values, cmap="viridis", vmin=0.0, vmax=1.0,
            s=2.0, linewidths=0,
        )
        cbar = plt.colorbar(sc, ax=ax, pad=0.01, fraction=0.03, shrink=0.7)
        cbar.set_label("Progress", color="white", fontsize=9)
        cbar.ax.yaxis.set_tick_params(color="white", labelsize=7)
        plt.setp(plt.getp(cbar.ax.axes, "yticklabels"), color="white")

    # ── Nodes ─────────────────────────────────────────────────────────────
    if len(nodes) > 0:
        if color_by == "group":
            c, cmap = nodes["group"].values, "tab20"
        elif color_by == "connected":
            c = np.where(nodes["connected"].values.astype(bool), "#ffcc33", "#445566")
            cmap = None
        else:
            c, cmap = args.node_color, None
        ax.scatter(
            nodes["x"].values, nodes["y"].values, nodes["z"].values,
            c=c, cmap=cmap, s=args.node_size, alpha=0.85, linewidths=0,
        )

    # ── Limits: equal cube around everything drawn ────────────────────────
    clouds = [df[["x", "y", "z"]].values for df in (nodes, samples) if len(df) > 0]
    if clouds:
        pts = np.vstack(clouds)
        center = (pts.max(axis=0) + pts.min(axis=0)) * 0.5
        half = max(float((pts.max(axis=0) - pts.min(axis=0)).max()) * 0.55, 1e-3)
        ax.set_xlim(center[0] - half, center[0] + half)
        ax.set_ylim(center[1] - half, center[1] + half)
        ax.set_zlim(center[2] - half, center[2] + half)

    # ── Decorations ───────────────────────────────────────────────────────
    variant = params.get("variant", "graph")
    n_branches = (samples[samples["owner"] == "branch"]["owner_index"].nunique()
                  if len(samples) > 0 else 0)
    title = (
        f"{variant.capitalize()} graph  —  "
        f"{len(nodes):,} nodes  |  {n_branches:,} branches  |  "
        f"{len(connections):,} connections"
    )
    if "seed" in params:
        title += f"  (seed {params['seed']})"
    ax.set_title(title, color="white", fontsize=11, pad=10)
    ax.tick_params(colors="#555566", labelsize=7)

    if legend_patches:
        ax.legend(
            handles=legend_patches,
            loc="upper right",
            fontsize=8,
            facecolor="#111122",
            edgecolor="#333355",
            labelcolor="white",
        )

    return fig


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main(argv=None) -> None:
    parser = build_parser()
    args   = parser.parse_args(argv)

    fig = draw_graph(args)

    if args.svg:
        fig.savefig(args.svg, format="svg", bbox_inches="tight",
                    facecolor=fig.get_facecolor())
        print(f"Saved figure to {args.svg}")
    elif args.save:
        fig.savefig(args.save, dpi=150, bbox_inches="tight",
                    facecolor=fig.get_facecolor())
        print(f"Saved figure to {args.save}")
    else:
        plt.show()


if __name__ == "__main__":
    main()
