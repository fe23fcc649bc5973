import heapq
from typing import Callable, Iterable, Iterator, List, Optional, Tuple

import numpy as np

from .base import InvalidInstanceError, SolverResult, TSPSolverBase
from .moves import apply_two_opt_swap, position_delta, random_permutation


Move = Tuple[int, int, float]


class EliteMoveCache:
    """
    Liste bornée de mouvements (i, j, delta) triés par delta croissant.
    """

    def __init__(self, max_moves: int):
        self.max_moves = max_moves
        self.moves: List[Move] = []

    def __len__(self) -> int:
        return len(self.moves)

    def __iter__(self) -> Iterator[Move]:
        return iter(self.moves)

    def __getitem__(self, index: int) -> Move:
        return self.moves[index]

    def rebuild(self, moves: Iterable[Move]):
        # même résultat que sorted(...)[:k], égalités comprises
        self.moves = heapq.nsmallest(self.max_moves, moves, key=lambda m: m[2])

    def rescore(self, delta_fn: Callable[[int, int], float]):
        self.moves = sorted(
            ((i, j, delta_fn(i, j)) for i, j, _ in self.moves),
            key=lambda m: m[2],
        )

    def best_delta(self) -> Optional[float]:
        return self.moves[0][2] if self.moves else None

    def pop(self, index: int) -> Move:
        return self.moves.pop(index)

    def clear(self):
        self.moves = []


class TabuSearch(TSPSolverBase):
    """
    Recherche tabou 2-opt avec cache de mouvements élites et critère d'aspiration.

    Hyperparamètres :
    - tenure        : nombre d'itérations pendant lesquelles un mouvement reste tabou (n // 4)
    - max_iter      : itérations sans amélioration avant arrêt
    - max_moves     : taille du cache élite (n // 10, au moins 1)
    - discard_ratio : le cache est vidé si best_delta / distance > discard_ratio
    """

    def __init__(
        self,
        distance_matrix,
        tenure: Optional[int] = None,
        max_iter: int = 100,
        max_moves: Optional[int] = None,
        discard_ratio: float = -0.005,
        seed=None,
        name: str = "TabuSearch",
    ):
        super().__init__(distance_matrix, seed, name=name)

        self.tenure = self.n // 4 if tenure is None else tenure
        self.max_iter = max_iter
        self.max_moves = max(1, self.n // 10) if max_moves is None else max_moves
        self.discard_ratio = discard_ratio

        if self.tenure < 0:
            raise InvalidInstanceError("tenure doit être positive.")
        if self.max_iter < 1:
            raise InvalidInstanceError("max_iter doit être >= 1.")
        if self.max_moves < 1:
            raise InvalidInstanceError("max_moves doit être >= 1.")

        self.tabu = np.zeros((self.n, self.n), dtype=int)
        self.elite = EliteMoveCache(self.max_moves)

        self.tour: List[int] = []
        self.current_distance = 0.0
        self.best_tour: List[int] = []
        self.best_distance = 0.0
        self.initial_tour: List[int] = []
        self.initial_distance = 0.0
        self.best_iter = 0
        self.iterations = 0
        self.evaluated = 0

    # ---------------------------------------------------------
    # Scan complet du voisinage
    # ---------------------------------------------------------
    def _scan(self, tour: List[int]) -> Iterator[Move]:
        n = self.n
        tabu = self.tabu
        for i in range(n):
            for j in range(i + 1, n):
                if (j + 1) % n == i:
                    continue
                if tabu[i, j] > 0:
                    tabu[i, j] -= 1
                yield i, j, position_delta(self.rows, tour, i, j)

    # ---------------------------------------------------------
    # Itérations
    # ---------------------------------------------------------
    def start(self, tour: Optional[List[int]] = None):
        """
        Remet à zéro les tenures et le cache, puis part de `tour`
        (tournée aléatoire si None).
        """
        self.tabu[:] = 0
        self.elite.clear()

        self.tour = random_permutation(self.n, self.rng) if tour is None else list(tour)
        self.current_distance = self.route_cost(self.tour)
        self.best_tour = list(self.tour)
        self.best_distance = self.current_distance
        self.initial_tour = list(self.tour)
        self.initial_distance = self.current_distance

        self.best_iter = 0
        self.iterations = 0
        self.evaluated = 0

    def step(self) -> Optional[Move]:
        """
        Une itération tabou. Retourne le mouvement appliqué, ou None
        (cache vidé ou tous les mouvements tabous).
        """
        self.iterations += 1

        if len(self.elite) == 0:
            moves = list(self._scan(self.tour))
            self.evaluated += len(moves)
            self.elite.rebuild(moves)
        else:
            tour = self.tour
            self.elite.rescore(lambda i, j: position_delta(self.rows, tour, i, j))
            self.evaluated += len(self.elite)

            np.subtract(self.tabu, 1, out=self.tabu, where=self.tabu > 0)

            best_delta = self.elite.best_delta()
            if self.current_distance <= 0 or best_delta / self.current_distance > self.discard_ratio:
                self.elite.clear()
                return None

        applied = None
        for k, (i, j, delta) in enumerate(self.elite):
            # aspiration : un mouvement tabou est permis s'il bat le meilleur global
            if self.tabu[i, j] == 0 or self.current_distance + delta < self.best_distance:
                self.tour = apply_two_opt_swap(self.tour, i + 1, j)
                self.current_distance += delta
                self.tabu[i, j] = self.tenure
                applied = self.elite.pop(k)
                break

        if self.current_distance < self.best_distance:
            self.best_tour = list(self.tour)
            self.best_distance = self.current_distance
            self.best_iter = self.iterations

        return applied

    def run(self) -> SolverResult:
        self.start()
        while self.iterations - self.best_iter < self.max_iter:
            self.step()

        result = SolverResult(
            best_tour=self.best_tour,
            best_distance=self.best_distance,
            steps=self.best_iter,
            evaluated=self.evaluated,
            initial_tour=self.initial_tour,
            initial_distance=self.initial_distance,
        )
        self._log_result("run", result)
        return result

    def solve(self) -> SolverResult:
        return self.run()
