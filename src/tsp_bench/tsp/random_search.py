import time
from typing import List

from .base import SolverResult, TSPSolverBase
from .moves import apply_two_opt_swap, random_pair, random_permutation, swap_delta


class RandomSearch(TSPSolverBase):
    """
    Référence aléatoire :
    - search : tirage de permutations indépendantes
    - walk   : marche aléatoire 2-opt, seuls les mouvements améliorants sont appliqués

    Les deux méthodes s'arrêtent sur un budget de temps (ms).
    """

    def __init__(self, distance_matrix, seed=None, name: str = "RandomSearch"):
        super().__init__(distance_matrix, seed, name=name)
        self.reset()

    def reset(self):
        """
        Nouvelle tournée aléatoire pour la solution courante et la meilleure.
        """
        tour = random_permutation(self.n, self.rng)
        self.best_tour: List[int] = tour
        self.best_distance = self.route_cost(tour)
        self.current_tour: List[int] = tour
        self.current_distance = self.best_distance

    # ---------------------------------------------------------
    # Échantillonnage pur
    # ---------------------------------------------------------
    def search(self, time_limit_ms: float) -> SolverResult:
        start = time.perf_counter()
        evaluated = 0

        while (time.perf_counter() - start) * 1000.0 < time_limit_ms:
            self.current_tour = random_permutation(self.n, self.rng)
            self.current_distance = self.route_cost(self.current_tour)
            evaluated += 1

            if self.current_distance < self.best_distance:
                self.best_tour = self.current_tour
                self.best_distance = self.current_distance

        # pas de mouvement incrémental : steps = 0
        result = SolverResult(list(self.best_tour), self.best_distance, 0, evaluated)
        self._log_result("search", result)
        return result

    # ---------------------------------------------------------
    # Marche aléatoire 2-opt
    # ---------------------------------------------------------
    def walk(self, time_limit_ms: float) -> SolverResult:
        start = time.perf_counter()
        evaluated = 0
        n = self.n
        tour = self.best_tour

        while (time.perf_counter() - start) * 1000.0 < time_limit_ms:
            i, j = random_pair(n, self.rng)
            if i > j:
                i, j = j, i
            next_i = (i + 1) % n
            next_j = (j + 1) % n
            if next_j == i:
                continue

            delta = swap_delta(self.rows, tour[i], tour[next_i], tour[j], tour[next_j])
            evaluated += 1

            if delta < 0.0:
                tour = apply_two_opt_swap(tour, next_i, j)
                self.best_distance += delta

        self.best_tour = tour
        self.current_tour = tour
        self.current_distance = self.best_distance

        result = SolverResult(list(tour), self.best_distance, 0, evaluated)
        self._log_result("walk", result)
        return result

    def solve(self) -> SolverResult:
        return self.search(time_limit_ms=100.0)
