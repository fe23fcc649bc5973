import numpy as np
import pytest

from tsp_bench.loaders.loader import euclidean_distance_matrix


@pytest.fixture
def square_matrix():
    return euclidean_distance_matrix([(0, 0), (0, 1), (1, 1), (1, 0)])


@pytest.fixture
def random_matrix():
    rng = np.random.default_rng(7)
    return euclidean_distance_matrix(rng.uniform(0, 100, size=(10, 2)))


@pytest.fixture
def larger_matrix():
    rng = np.random.default_rng(11)
    return euclidean_distance_matrix(rng.uniform(0, 100, size=(25, 2)))
