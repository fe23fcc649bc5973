import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Union

import numpy as np

from .moves import make_rng, tour_cost


logger = logging.getLogger(__name__)

MIN_CITIES = 4


class InvalidInstanceError(ValueError):
    """
    Instance ou paramètre de solveur inutilisable.
    """


@dataclass
class SolverResult:
    best_tour: List[int]
    best_distance: float
    steps: int
    evaluated: int
    initial_tour: Optional[List[int]] = None
    initial_distance: Optional[float] = None


class TSPSolverBase(ABC):
    """
    Classe de base pour tous les solveurs TSP symétriques (tournée fermée).

    La matrice est partagée en lecture seule ; chaque solveur possède son
    propre générateur aléatoire (seed optionnelle).
    """

    def __init__(
        self,
        distance_matrix,
        seed: Union[None, int, np.random.Generator] = None,
        name: str = "BaseSolver",
    ):
        self.D = np.asarray(distance_matrix, dtype=float)
        self.name = name
        self.validate()
        self.n = self.D.shape[0]
        # accès scalaire rapide pour les boucles de voisinage
        self.rows = self.D.tolist()
        self.rng = make_rng(seed)

    # ---------------------------------------------------------
    # Validation
    # ---------------------------------------------------------
    def validate(self):
        D = self.D
        if D.ndim != 2 or D.shape[0] != D.shape[1]:
            raise InvalidInstanceError(f"La matrice doit être carrée : {D.shape}")
        if D.shape[0] < MIN_CITIES:
            raise InvalidInstanceError(
                f"Au moins {MIN_CITIES} villes sont nécessaires pour un 2-opt (n={D.shape[0]})."
            )
        if not np.all(np.isfinite(D)):
            raise InvalidInstanceError("La matrice contient des NaN ou des infinis.")
        if np.any(D < 0):
            raise InvalidInstanceError("La matrice contient des distances négatives.")
        if not np.allclose(D, D.T):
            raise InvalidInstanceError("La matrice doit être symétrique.")
        if not np.allclose(np.diag(D), 0):
            raise InvalidInstanceError("La diagonale de la matrice doit être nulle.")

    # ---------------------------------------------------------
    # Coût d'une tournée
    # ---------------------------------------------------------
    def route_cost(self, route: List[int]) -> float:
        return tour_cost(route, self.rows)

    # ---------------------------------------------------------
    # Interface solveur
    # ---------------------------------------------------------
    @abstractmethod
    def solve(self) -> SolverResult:
        """
        Chaque solveur doit implémenter cette méthode.
        """

    def _log_result(self, method: str, result: SolverResult):
        logger.debug(
            "%s.%s: distance=%.4f steps=%d evaluated=%d",
            self.name, method, result.best_distance, result.steps, result.evaluated,
        )
