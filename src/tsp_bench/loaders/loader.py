import logging
from pathlib import Path
from typing import Dict, Iterable, List, Sequence, Tuple, Union

import numpy as np
import polars as pl

from ..tsp.base import InvalidInstanceError


logger = logging.getLogger(__name__)

COORD_SECTION = "NODE_COORD_SECTION"
END_OF_FILE = "EOF"


def parse_coordinates(lines: Iterable[str]) -> List[Tuple[float, float]]:
    """
    Lit les lignes `id x y` entre NODE_COORD_SECTION et EOF.
    Les lignes incomplètes ou non numériques sont ignorées.
    """
    coords = []
    in_section = False

    for line in lines:
        line = line.strip()
        if line == COORD_SECTION:
            in_section = True
            continue
        if line == END_OF_FILE:
            break
        if not in_section or not line:
            continue

        parts = line.split()
        if len(parts) < 3:
            logger.debug("Ligne ignorée (champs manquants) : %r", line)
            continue
        try:
            x, y = float(parts[1]), float(parts[2])
        except ValueError:
            logger.debug("Ligne ignorée (coordonnées illisibles) : %r", line)
            continue
        coords.append((x, y))

    return coords


def euclidean_distance_matrix(coords: Sequence[Tuple[float, float]]) -> np.ndarray:
    """Matrice des distances euclidiennes, symétrique, diagonale nulle, en lecture seule."""
    pts = np.asarray(coords, dtype=float).reshape(-1, 2)
    diff = pts[:, None, :] - pts[None, :, :]
    D = np.sqrt((diff ** 2).sum(axis=-1))
    D.setflags(write=False)
    return D


def read_instance(path: Union[str, Path]) -> np.ndarray:
    """Charge une instance à coordonnées (NODE_COORD_SECTION ... EOF)."""
    with open(path, "r") as f:
        coords = parse_coordinates(f)
    logger.debug("%s : %d villes lues", path, len(coords))
    return euclidean_distance_matrix(coords)


def load_matrix_parquet(path: Union[str, Path]) -> np.ndarray:
    """Charge une matrice de distances Parquet et retire la colonne d'index éventuelle."""
    df = pl.read_parquet(path)

    for col in ["index", "city", "Unnamed: 0"]:
        if col in df.columns:
            df = df.drop(col)

    mat = df.to_numpy().astype(float)

    if mat.ndim != 2 or mat.shape[0] != mat.shape[1]:
        raise InvalidInstanceError(f"Matrice non carrée dans {path} : {mat.shape}")

    mat.setflags(write=False)
    return mat


def load_instances(
    data_dir: Union[str, Path],
    patterns: Sequence[str] = ("*.txt", "*.tsp", "*.parquet"),
) -> Dict[str, np.ndarray]:
    """
    Charge toutes les instances d'un répertoire, indexées par nom de fichier :
    coordonnées (.txt, .tsp) ou matrice de distances précalculée (.parquet).
    """
    data_dir = Path(data_dir)
    paths = sorted({p for pattern in patterns for p in data_dir.glob(pattern)})

    instances = {}
    for path in paths:
        if path.suffix == ".parquet":
            instances[path.stem] = load_matrix_parquet(path)
        else:
            instances[path.stem] = read_instance(path)

    return dict(sorted(instances.items()))
