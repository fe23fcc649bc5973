import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from dotenv import load_dotenv


DEFAULT_ALGORITHMS = ["greedy", "steepest"]


def _get_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} doit être un entier (reçu {raw!r})") from None


def _get_log_level(name: str, default: str) -> str:
    level = os.getenv(name, default).strip().upper() or default
    # getLevelName renvoie un entier pour les niveaux connus
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"{name} doit être un niveau de log (DEBUG, INFO, ...), reçu {level!r}")
    return level


@dataclass
class BenchmarkConfig:
    data_dir: Path = Path("data")
    results_dir: Path = Path("results")
    runs: int = 100
    algorithms: List[str] = field(default_factory=lambda: list(DEFAULT_ALGORITHMS))
    seed: Optional[int] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env_file: Union[None, str, Path] = None) -> "BenchmarkConfig":
        """
        Lit la configuration depuis les variables d'environnement
        (éventuellement chargées depuis un fichier .env).
        """
        if env_file is not None:
            load_dotenv(env_file)

        algorithms = os.getenv("TSP_ALGORITHMS")
        if algorithms:
            algorithms = [a.strip() for a in algorithms.split(",") if a.strip()]
        else:
            algorithms = list(DEFAULT_ALGORITHMS)

        return cls(
            data_dir=Path(os.getenv("TSP_DATA_DIR", "data")),
            results_dir=Path(os.getenv("TSP_RESULTS_DIR", "results")),
            runs=_get_int("TSP_RUNS", 100),
            algorithms=algorithms,
            seed=_get_int("TSP_SEED", None),
            log_level=_get_log_level("TSP_LOG_LEVEL", "INFO"),
        )
