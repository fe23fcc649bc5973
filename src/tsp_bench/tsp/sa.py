import logging
import math
from typing import Optional

from .base import InvalidInstanceError, SolverResult, TSPSolverBase
from .moves import apply_two_opt_swap, neighborhood, random_permutation, swap_delta


logger = logging.getLogger(__name__)


class SimulatedAnnealing(TSPSolverBase):
    """
    Recuit simulé sur le voisinage 2-opt.

    Hyperparamètres :
    - alpha               : décroissance T <- T / (1 + alpha * T)
    - initial_temperature : None => calibrée au premier run()
    - min_temperature     : seuil d'arrêt
    - target_acceptance   : probabilité visée d'accepter un mauvais mouvement moyen

    La tournée retournée est la tournée finale, pas la meilleure rencontrée.
    """

    def __init__(
        self,
        distance_matrix,
        alpha: float = 0.99,
        initial_temperature: Optional[float] = None,
        min_temperature: float = 0.001,
        target_acceptance: float = 0.99,
        seed=None,
        name: str = "SimulatedAnnealing",
    ):
        super().__init__(distance_matrix, seed, name=name)

        if alpha <= 0:
            raise InvalidInstanceError("alpha doit être strictement positif.")
        if min_temperature <= 0:
            raise InvalidInstanceError("min_temperature doit être strictement positive.")
        if not 0.0 < target_acceptance < 1.0:
            raise InvalidInstanceError("target_acceptance doit être dans ]0, 1[.")

        self.alpha = alpha
        self.temperature = initial_temperature
        self.min_temperature = min_temperature
        self.target_acceptance = target_acceptance

    # ---------------------------------------------------------
    # Température initiale
    # ---------------------------------------------------------
    def calibrate_initial_temperature(self) -> float:
        """
        Moyenne des deltas positifs sur un sous-ensemble du voisinage
        d'une tournée aléatoire, puis T0 = -delta_moyen / ln(p).
        """
        n = self.n
        tour = random_permutation(n, self.rng)
        sample_n = int(self.rng.integers(n // 2))

        n_samples = 0
        total = 0.0
        for i in range(sample_n):
            next_i = i + 1
            for j in range(i + 2, n):
                next_j = (j + 1) % n
                if next_j == i:
                    continue
                delta = swap_delta(self.rows, tour[i], tour[next_i], tour[j], tour[next_j])
                if delta > 0.0:
                    total += delta
                    n_samples += 1

        if n_samples > 0:
            self.temperature = -(total / n_samples) / math.log(self.target_acceptance)
        else:
            self.temperature = 1.0

        logger.debug("%s: T0=%.6f (%d deltas positifs)", self.name, self.temperature, n_samples)
        return self.temperature

    # ---------------------------------------------------------
    # Recuit
    # ---------------------------------------------------------
    def accept(self, delta: float, temperature: float) -> bool:
        """
        Critère de Metropolis : un mouvement améliorant est toujours accepté,
        un mouvement dégradant avec la probabilité exp(-delta / T).
        """
        return delta < 0.0 or self.rng.random() < math.exp(-delta / temperature)

    def run(self) -> SolverResult:
        if self.temperature is None:
            self.calibrate_initial_temperature()

        n = self.n
        temperature = self.temperature
        tour = random_permutation(n, self.rng)

        evaluated = 0
        steps = 0

        while temperature > self.min_temperature:
            for i, j in neighborhood(n):
                delta = swap_delta(
                    self.rows, tour[i], tour[i + 1], tour[j], tour[(j + 1) % n]
                )
                evaluated += 1

                if self.accept(delta, temperature):
                    tour = apply_two_opt_swap(tour, i + 1, j)
                    steps += 1
                    break

            temperature /= 1.0 + self.alpha * temperature

        result = SolverResult(
            best_tour=tour,
            best_distance=self.route_cost(tour),
            steps=steps,
            evaluated=evaluated,
        )
        self._log_result("run", result)
        return result

    def solve(self) -> SolverResult:
        return self.run()
