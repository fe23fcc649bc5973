import polars as pl
import pytest

from tsp_bench.loaders.loader import euclidean_distance_matrix
from tsp_bench.main import main


SQUARE = """NODE_COORD_SECTION
1 0 0
2 0 1
3 1 1
4 1 0
EOF
"""

TRIANGLE = """NODE_COORD_SECTION
1 0 0
2 0 1
3 1 1
EOF
"""


@pytest.fixture
def env(tmp_path, monkeypatch):
    data = tmp_path / "data"
    data.mkdir()
    (data / "square.txt").write_text(SQUARE)
    (data / "triangle.txt").write_text(TRIANGLE)
    grid = euclidean_distance_matrix([(0, 0), (0, 2), (2, 2), (2, 0)])
    pl.DataFrame({str(k): grid[:, k] for k in range(4)}).write_parquet(data / "grid.parquet")
    monkeypatch.setenv("TSP_DATA_DIR", str(data))
    monkeypatch.setenv("TSP_RESULTS_DIR", str(tmp_path / "results"))
    monkeypatch.setenv("TSP_RUNS", "2")
    monkeypatch.setenv("TSP_ALGORITHMS", "greedy,tabu_search")
    monkeypatch.setenv("TSP_SEED", "0")
    return tmp_path


def test_main_runs_benchmark_and_skips_invalid_instance(env):
    assert main(["--env-file", str(env / "missing.env"), "--plots"]) == 0

    results = env / "results"
    assert (results / "runs.csv").exists()
    assert (results / "init_final" / "square" / "final_greedy.json").exists()
    assert (results / "init_final" / "grid" / "final_greedy.json").exists()
    assert not (results / "init_final" / "triangle").exists()
    assert (results / "pareto.png").exists()
    assert (results / "initial_vs_final_square.png").exists()

    import matplotlib.pyplot as plt
    assert plt.get_fignums() == []


def test_main_without_instances(tmp_path, monkeypatch):
    monkeypatch.setenv("TSP_DATA_DIR", str(tmp_path / "empty"))
    assert main(["--env-file", str(tmp_path / "missing.env")]) == 1


def test_main_reports_invalid_log_level(env, monkeypatch, caplog):
    monkeypatch.setenv("TSP_LOG_LEVEL", "verbose")
    assert main(["--env-file", str(env / "missing.env")]) == 2
    assert "TSP_LOG_LEVEL" in caplog.text
    assert not (env / "results").exists()
