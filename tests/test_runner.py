import pytest

from tsp_bench.benchmark.persistence import load_solution
from tsp_bench.benchmark.runner import ALGORITHMS, BenchmarkRunner


def test_unknown_algorithm_rejected():
    with pytest.raises(ValueError):
        BenchmarkRunner(algorithms=["greedy", "genetic"])


def test_invalid_runs_rejected():
    with pytest.raises(ValueError):
        BenchmarkRunner(runs=0)


def test_all_algorithms_registered():
    assert set(ALGORITHMS) == {
        "greedy", "steepest", "random_search", "random_walk",
        "heuristic", "simulated_annealing", "tabu_search",
    }


def test_run_on_instance_collects_and_persists(random_matrix, tmp_path):
    algorithms = ["greedy", "heuristic", "simulated_annealing", "tabu_search", "random_walk"]
    runner = BenchmarkRunner(algorithms=algorithms, runs=2, seed=1, results_dir=tmp_path)
    results = runner.run_on_instance("rand10", random_matrix)

    assert len(results) == 2 * len(algorithms)
    assert [r.run for r in results[:2]] == [1, 2]

    base = tmp_path / "init_final" / "rand10"
    for algorithm in algorithms:
        assert (base / f"final_{algorithm}.json").exists()
    assert (base / "init_greedy.json").exists()
    assert not (base / "init_simulated_annealing.json").exists()

    greedy = [r for r in results if r.algorithm == "greedy"]
    record = load_solution(base / "final_greedy.json")
    assert record.best_distance == min(r.distance for r in greedy)
    assert record.steps == [r.steps for r in greedy]

    df = runner.to_dataframe()
    assert len(df) == len(results)
    assert {"instance", "algorithm", "run", "distance", "time_ms", "steps", "evaluated"} <= set(df.columns)


def test_random_search_first_gets_no_budget(random_matrix):
    runner = BenchmarkRunner(algorithms=["random_search"], runs=1, seed=0)
    (result,) = runner.run_on_instance("rand10", random_matrix)
    assert result.evaluated == 0


def test_seeded_runners_are_reproducible(random_matrix):
    def distances(seed):
        runner = BenchmarkRunner(algorithms=["greedy", "tabu_search"], runs=3, seed=seed)
        return [(r.distance, r.route) for r in runner.run_on_instance("rand10", random_matrix)]

    assert distances(7) == distances(7)


def test_run_on_multiple_instances(random_matrix, square_matrix):
    runner = BenchmarkRunner(algorithms=["steepest"], runs=1, seed=0)
    results = runner.run_on_multiple_instances({"a": random_matrix, "b": square_matrix})
    assert [r.instance for r in results] == ["a", "b"]
    assert results[1].distance == pytest.approx(4.0)
