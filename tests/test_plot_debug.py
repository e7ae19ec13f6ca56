# tests/test_plot_debug.py
"""
Smoke tests for the debug plot, rendered off-screen.
"""

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import pytest  # noqa: E402

import plot_debug  # noqa: E402
import run_generate  # noqa: E402


@pytest.fixture(autouse=True)
def _close_figures():
    yield
    plt.close("all")


@pytest.fixture
def cube_run(tmp_path):
    run_generate.main(["cube", "--cube_count", "6", "--spread", "3",
                       "--out_dir", str(tmp_path), "--no_gexf"])
    return tmp_path


@pytest.fixture
def brain_run(tmp_path):
    run_generate.main(["brain", "--main_branch_count", "3", "--resolution", "15",
                       "--out_dir", str(tmp_path), "--no_gexf"])
    return tmp_path


@pytest.mark.parametrize("color_by", ["group", "connected", "none"])
def test_draw_cube_graph(cube_run, color_by):
    args = plot_debug.build_parser().parse_args(
        ["--out_dir", str(cube_run), "--color_by", color_by]
    )
    fig = plot_debug.draw_graph(args)
    assert isinstance(fig, plt.Figure)
    assert "Cube graph" in fig.axes[0].get_title()


def test_draw_brain_graph_with_progress(brain_run):
    args = plot_debug.build_parser().parse_args(
        ["--out_dir", str(brain_run), "--color_by", "progress"]
    )
    fig = plot_debug.draw_graph(args)
    title = fig.axes[0].get_title()
    assert title.startswith("Brain graph")
    assert "0 nodes" in title


def test_main_saves_figure(brain_run):
    target = brain_run / "graph.png"
    plot_debug.main(["--out_dir", str(brain_run), "--save", str(target), "--no_branches"])
    assert target.exists()


def test_missing_output_raises(tmp_path):
    args = plot_debug.build_parser().parse_args(["--out_dir", str(tmp_path)])
    with pytest.raises(FileNotFoundError):
        plot_debug.draw_graph(args)
