import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import pandas as pd  # noqa: E402
import pytest  # noqa: E402

from tsp_bench.analysis.plots import boxplot_distances, plot_initial_vs_final, plot_pareto  # noqa: E402


@pytest.fixture
def runs():
    return pd.DataFrame({
        "instance": ["a", "a", "a"],
        "algorithm": ["greedy", "greedy", "tabu_search"],
        "distance": [10.0, 12.0, 11.0],
        "initial_distance": [15.0, 14.0, None],
    })


def test_plots_return_figures(runs):
    stats = pd.DataFrame({
        "instance": ["a", "a"],
        "algorithm": ["greedy", "tabu_search"],
        "gap_mean": [0.1, 0.05],
        "time_mean": [1.0, 4.0],
        "pareto": [True, True],
    })
    for fig in (boxplot_distances(runs), plot_pareto(stats), plot_initial_vs_final(runs, "a")):
        assert isinstance(fig, plt.Figure)
        plt.close(fig)


def test_initial_vs_final_requires_initial_distances(runs):
    with pytest.raises(ValueError):
        plot_initial_vs_final(runs, "missing")


def test_pareto_plot_has_one_panel_per_instance():
    stats = pd.DataFrame({
        "instance": ["a", "a", "b", "b"],
        "algorithm": ["greedy", "tabu_search", "greedy", "tabu_search"],
        "gap_mean": [0.1, 0.0, 0.0, 0.25],
        "time_mean": [1.0, 5.0, 2.0, 8.0],
        "pareto": [True, True, True, False],
    })
    fig = plot_pareto(stats)
    titles = sorted(ax.get_title() for ax in fig.axes if ax.get_title())
    assert titles == ["Front de Pareto : a", "Front de Pareto : b"]
    plt.close(fig)
