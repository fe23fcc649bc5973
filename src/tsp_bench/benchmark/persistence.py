from pathlib import Path
from typing import List, Optional, Sequence, Union

from pydantic import BaseModel


class SolutionRecord(BaseModel):
    best_distance: float
    best_solution: List[int]
    distances: List[float]
    runtimes: List[float]
    steps: List[int]
    evaluated: List[int]


def build_record(
    solutions: Sequence[Sequence[int]],
    distances: Sequence[float],
    runtimes: Sequence[float],
    steps: Sequence[int],
    evaluated: Sequence[int],
) -> SolutionRecord:
    """
    Construit l'enregistrement d'une série de runs ; la meilleure solution
    est celle de distance minimale (la première en cas d'égalité).
    """
    if len(distances) == 0:
        raise ValueError("La liste des distances est vide.")
    if len(solutions) != len(distances):
        raise ValueError(
            f"{len(solutions)} solutions pour {len(distances)} distances."
        )
    for label, values in (("runtimes", runtimes), ("steps", steps), ("evaluated", evaluated)):
        if len(values) != len(distances):
            raise ValueError(f"{label} : {len(values)} valeurs pour {len(distances)} runs.")

    best = min(range(len(distances)), key=lambda k: distances[k])

    return SolutionRecord(
        best_distance=float(distances[best]),
        best_solution=[int(c) for c in solutions[best]],
        distances=[float(d) for d in distances],
        runtimes=[float(t) for t in runtimes],
        steps=[int(s) for s in steps],
        evaluated=[int(e) for e in evaluated],
    )


def record_path(
    results_dir: Union[str, Path],
    instance: str,
    algorithm: str,
    phase: Optional[str] = None,
) -> Path:
    results_dir = Path(results_dir)
    if phase is None:
        return results_dir / instance / f"{algorithm}.json"
    return results_dir / "init_final" / instance / f"{phase}_{algorithm}.json"


def save_solution(
    results_dir: Union[str, Path],
    instance: str,
    algorithm: str,
    solutions: Sequence[Sequence[int]],
    distances: Sequence[float],
    runtimes: Sequence[float],
    steps: Sequence[int],
    evaluated: Sequence[int],
    phase: Optional[str] = None,
) -> Path:
    """
    Écrit le JSON de la série de runs :
      - <results>/<instance>/<algorithm>.json
      - <results>/init_final/<instance>/<phase>_<algorithm>.json si phase ("init" / "final")
    """
    record = build_record(solutions, distances, runtimes, steps, evaluated)

    out_file = record_path(results_dir, instance, algorithm, phase)
    out_file.parent.mkdir(parents=True, exist_ok=True)
    out_file.write_text(record.model_dump_json(indent=2))
    return out_file


def load_solution(path: Union[str, Path]) -> SolutionRecord:
    return SolutionRecord.model_validate_json(Path(path).read_text())
