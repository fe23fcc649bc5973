import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Union

import numpy as np
import pandas as pd

from ..tsp.base import SolverResult
from ..tsp.local_search import LocalSearch
from ..tsp.random_search import RandomSearch
from ..tsp.sa import SimulatedAnnealing
from ..tsp.tabu import TabuSearch
from .persistence import save_solution


logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    instance: str
    algorithm: str
    run: int
    distance: float
    initial_distance: Optional[float]
    time_ms: float
    steps: int
    evaluated: int
    route: List[int]
    initial_route: Optional[List[int]] = None


@dataclass
class InstanceSolvers:
    """Solveurs construits une fois par instance."""
    local: LocalSearch
    random: RandomSearch
    annealing: SimulatedAnnealing
    tabu: TabuSearch
    time_budget_ms: float = 0.0


AlgorithmFn = Callable[[InstanceSolvers], SolverResult]

ALGORITHMS: Dict[str, AlgorithmFn] = {
    "greedy": lambda s: s.local.greedy(),
    "steepest": lambda s: s.local.steepest(),
    "random_search": lambda s: s.random.search(s.time_budget_ms),
    "random_walk": lambda s: s.random.walk(s.time_budget_ms),
    "heuristic": lambda s: s.local.heuristic(),
    "simulated_annealing": lambda s: s.annealing.run(),
    "tabu_search": lambda s: s.tabu.run(),
}


@dataclass
class _Series:
    solutions: List[List[int]] = field(default_factory=list)
    distances: List[float] = field(default_factory=list)
    initial_solutions: List[List[int]] = field(default_factory=list)
    initial_distances: List[float] = field(default_factory=list)
    runtimes: List[float] = field(default_factory=list)
    steps: List[int] = field(default_factory=list)
    evaluated: List[int] = field(default_factory=list)


class BenchmarkRunner:
    def __init__(
        self,
        algorithms: Sequence[str] = ("greedy", "steepest"),
        runs: int = 100,
        seed: Optional[int] = None,
        results_dir: Union[None, str, Path] = None,
    ):
        unknown = [a for a in algorithms if a not in ALGORITHMS]
        if unknown:
            raise ValueError(f"Algorithme(s) inconnu(s) : {', '.join(unknown)}")
        if runs < 1:
            raise ValueError("runs doit être >= 1.")

        self.algorithms = list(algorithms)
        self.runs = runs
        self.seed_sequence = np.random.SeedSequence(seed)
        self.results_dir = Path(results_dir) if results_dir is not None else None
        self.results: List[RunResult] = []

    def build_solvers(self, D: np.ndarray) -> InstanceSolvers:
        seeds = [np.random.default_rng(s) for s in self.seed_sequence.spawn(4)]
        solvers = InstanceSolvers(
            local=LocalSearch(D, seed=seeds[0]),
            random=RandomSearch(D, seed=seeds[1]),
            annealing=SimulatedAnnealing(D, seed=seeds[2]),
            tabu=TabuSearch(D, seed=seeds[3]),
        )
        solvers.annealing.calibrate_initial_temperature()
        return solvers

    def run_on_instance(self, instance: str, D: np.ndarray) -> List[RunResult]:
        logger.info("Instance %s (%d villes)", instance, D.shape[0])
        solvers = self.build_solvers(D)
        instance_results = []

        for algorithm in self.algorithms:
            solve = ALGORITHMS[algorithm]
            series = _Series()

            for r in range(1, self.runs + 1):
                solvers.random.reset()

                t0 = time.perf_counter()
                res = solve(solvers)
                elapsed_ms = (time.perf_counter() - t0) * 1000.0

                series.solutions.append(res.best_tour)
                series.distances.append(res.best_distance)
                series.runtimes.append(elapsed_ms)
                series.steps.append(res.steps)
                series.evaluated.append(res.evaluated)
                if res.initial_tour is not None:
                    series.initial_solutions.append(res.initial_tour)
                    series.initial_distances.append(res.initial_distance)

                instance_results.append(
                    RunResult(
                        instance=instance,
                        algorithm=algorithm,
                        run=r,
                        distance=res.best_distance,
                        initial_distance=res.initial_distance,
                        time_ms=elapsed_ms,
                        steps=res.steps,
                        evaluated=res.evaluated,
                        route=res.best_tour,
                        initial_route=res.initial_tour,
                    )
                )

            if self.results_dir is not None:
                self._save(instance, algorithm, series)

            # budget des recherches aléatoires suivantes = temps moyen de cet algorithme
            solvers.time_budget_ms = float(np.mean(series.runtimes))
            logger.info(
                "\t%s: %.3f ms (moyenne sur %d runs), meilleure distance %.4f",
                algorithm, solvers.time_budget_ms, self.runs, min(series.distances),
            )

        self.results.extend(instance_results)
        return instance_results

    def run_on_multiple_instances(self, instances: Dict[str, np.ndarray]) -> List[RunResult]:
        for name, D in instances.items():
            self.run_on_instance(name, D)
        return self.results

    def _save(self, instance: str, algorithm: str, series: _Series):
        if series.initial_distances:
            save_solution(
                self.results_dir, instance, algorithm,
                solutions=series.initial_solutions,
                distances=series.initial_distances,
                runtimes=series.runtimes,
                steps=series.steps,
                evaluated=series.evaluated,
                phase="init",
            )
        save_solution(
            self.results_dir, instance, algorithm,
            solutions=series.solutions,
            distances=series.distances,
            runtimes=series.runtimes,
            steps=series.steps,
            evaluated=series.evaluated,
            phase="final",
        )

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame([r.__dict__ for r in self.results])
