from typing import Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np


Matrix = Union[np.ndarray, Sequence[Sequence[float]]]


# ---------------------------------------------------------
# Générateur aléatoire
# ---------------------------------------------------------
def make_rng(seed: Union[None, int, np.random.Generator] = None) -> np.random.Generator:
    """
    Retourne un générateur numpy propre au solveur.
    Un Generator déjà construit est renvoyé tel quel.
    """
    if isinstance(seed, np.random.Generator):
        return seed
    return np.random.default_rng(seed)


def random_permutation(n: int, rng: np.random.Generator) -> List[int]:
    """
    Permutation uniforme de [0..n-1].
    """
    return rng.permutation(n).tolist()


def random_pair(n: int, rng: np.random.Generator) -> Tuple[int, int]:
    """
    Deux indices distincts de [0..n-1], tirés uniformément.
    """
    x1 = int(rng.integers(n))
    x2 = (int(rng.integers(n - 1)) + 1 + x1) % n
    return x1, x2


# ---------------------------------------------------------
# Coûts
# ---------------------------------------------------------
def tour_cost(tour: Sequence[int], matrix: Matrix) -> float:
    """
    Coût d'une tournée cyclique (retour au premier nœud inclus).
    """
    n = len(tour)
    return float(sum(matrix[tour[i]][tour[(i + 1) % n]] for i in range(n)))


def swap_delta(matrix: Matrix, i: int, next_i: int, j: int, next_j: int) -> float:
    """
    Variation de coût d'un 2-opt : les arêtes (i, next_i) et (j, next_j)
    sont remplacées par (i, j) et (next_i, next_j).

    Les arguments sont des villes (pas des positions). Les deux arêtes
    ne doivent pas être adjacentes.
    """
    current = matrix[i][next_i] + matrix[j][next_j]
    swapped = matrix[i][j] + matrix[next_i][next_j]
    return swapped - current


def position_delta(matrix: Matrix, tour: Sequence[int], i: int, j: int) -> float:
    """
    swap_delta pour le mouvement aux positions (i, j) de la tournée.
    """
    n = len(tour)
    return swap_delta(matrix, tour[i], tour[(i + 1) % n], tour[j], tour[(j + 1) % n])


# ---------------------------------------------------------
# Mouvement 2-opt
# ---------------------------------------------------------
def apply_two_opt_swap(tour: List[int], next_i: int, j: int) -> List[int]:
    """
    Inverse le segment [next_i..j] sur place et retourne le même buffer.
    L'appelant ne doit pas garder de copie de l'état précédent.
    """
    tour[next_i:j + 1] = tour[next_i:j + 1][::-1]
    return tour


def neighborhood(n: int) -> Iterator[Tuple[int, int]]:
    """
    Parcourt les paires (i, j) du voisinage 2-opt dans l'ordre fixe
    utilisé par les recherches locales.
    """
    for i in range(n):
        for j in range(i + 2, n):
            if (j + 1) % n == i:
                continue
            yield i, j


def is_permutation(tour: Sequence[int], n: Optional[int] = None) -> bool:
    n = len(tour) if n is None else n
    return len(tour) == n and sorted(tour) == list(range(n))
