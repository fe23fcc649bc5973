import math
from typing import List

from .base import SolverResult, TSPSolverBase
from .moves import apply_two_opt_swap, neighborhood, position_delta, random_permutation


class LocalSearch(TSPSolverBase):
    """
    Solveur TSP : recherches locales 2-opt + heuristique du plus proche voisin.
    - greedy   : premier mouvement améliorant (first-improvement)
    - steepest : meilleur mouvement du voisinage (best-improvement)
    - heuristic: construction Nearest Neighbor, sans amélioration
    """

    def __init__(self, distance_matrix, seed=None, name: str = "LocalSearch"):
        super().__init__(distance_matrix, seed, name=name)

    # ---------------------------------------------------------
    # 2-opt first-improvement
    # ---------------------------------------------------------
    def greedy(self) -> SolverResult:
        tour = random_permutation(self.n, self.rng)
        initial_tour = list(tour)
        initial_distance = self.route_cost(initial_tour)

        evaluated = 0
        steps = 0

        improved = True
        while improved:
            improved = False
            for i, j in neighborhood(self.n):
                delta = position_delta(self.rows, tour, i, j)
                evaluated += 1

                if delta < 0.0:
                    tour = apply_two_opt_swap(tour, i + 1, j)
                    steps += 1
                    improved = True
                    # on repart du début du voisinage
                    break

        result = SolverResult(
            best_tour=tour,
            best_distance=self.route_cost(tour),
            steps=steps,
            evaluated=evaluated,
            initial_tour=initial_tour,
            initial_distance=initial_distance,
        )
        self._log_result("greedy", result)
        return result

    # ---------------------------------------------------------
    # 2-opt best-improvement
    # ---------------------------------------------------------
    def steepest(self) -> SolverResult:
        tour = random_permutation(self.n, self.rng)
        initial_tour = list(tour)
        initial_distance = self.route_cost(initial_tour)

        evaluated = 0
        steps = 0

        while True:
            best_delta = 0.0
            best_move = None
            for i, j in neighborhood(self.n):
                delta = position_delta(self.rows, tour, i, j)
                evaluated += 1
                if delta < best_delta:
                    best_delta = delta
                    best_move = (i, j)

            if best_move is None:
                break

            i, j = best_move
            tour = apply_two_opt_swap(tour, i + 1, j)
            steps += 1

        result = SolverResult(
            best_tour=tour,
            best_distance=self.route_cost(tour),
            steps=steps,
            evaluated=evaluated,
            initial_tour=initial_tour,
            initial_distance=initial_distance,
        )
        self._log_result("steepest", result)
        return result

    # ---------------------------------------------------------
    # Nearest Neighbor
    # ---------------------------------------------------------
    def nearest_neighbor(self, start: int) -> List[int]:
        """
        Ordre de visite en partant de `start`, toujours vers la ville
        non visitée la plus proche.
        """
        visited = [False] * self.n
        route = [start]
        visited[start] = True
        current = start

        for _ in range(self.n - 1):
            best = None
            best_cost = math.inf
            row = self.rows[current]
            for city in range(self.n):
                if not visited[city] and row[city] < best_cost:
                    best = city
                    best_cost = row[city]

            route.append(best)
            visited[best] = True
            current = best

        return route

    def heuristic(self) -> SolverResult:
        start = int(self.rng.integers(self.n))
        tour = self.nearest_neighbor(start)
        distance = self.route_cost(tour)

        result = SolverResult(
            best_tour=tour,
            best_distance=distance,
            steps=0,
            evaluated=0,
            initial_tour=list(tour),
            initial_distance=distance,
        )
        self._log_result("heuristic", result)
        return result

    def solve(self) -> SolverResult:
        return self.steepest()
