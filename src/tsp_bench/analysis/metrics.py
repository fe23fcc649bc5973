from __future__ import annotations

import pandas as pd


def compute_best_per_instance(df: pd.DataFrame) -> pd.Series:
    """
    Meilleure distance (tous algorithmes confondus) par instance.
    """
    return df.groupby("instance")["distance"].min()


def add_gap_column(df: pd.DataFrame, best_per_instance: pd.Series) -> pd.DataFrame:
    """
    Ajoute une colonne 'gap' = (distance - best_instance) / best_instance
    """
    df = df.copy()
    df = df.join(best_per_instance.rename("best_instance"), on="instance")
    df["gap"] = (df["distance"] - df["best_instance"]) / df["best_instance"]
    return df


def stability_stats(df: pd.DataFrame) -> pd.DataFrame:
    """
    Stabilité : moyenne, médiane, min, max, écart-type de la distance et du gap par algorithme,
    plus l'effort de recherche (steps, évaluations) et le temps.
    """
    agg = df.groupby("algorithm").agg(
        distance_mean=("distance", "mean"),
        distance_median=("distance", "median"),
        distance_min=("distance", "min"),
        distance_max=("distance", "max"),
        distance_std=("distance", "std"),
        gap_mean=("gap", "mean"),
        gap_median=("gap", "median"),
        gap_std=("gap", "std"),
        steps_mean=("steps", "mean"),
        evaluated_mean=("evaluated", "mean"),
        time_mean=("time_ms", "mean"),
        time_std=("time_ms", "std"),
    )
    return agg.reset_index()


def pareto_front(df: pd.DataFrame) -> pd.DataFrame:
    """
    Front de Pareto qualité / temps, calculé instance par instance :
    une distance n'est comparable qu'à celles de la même instance.

    Pour chaque (instance, algorithme) : distance moyenne, gap moyen et
    temps moyen (ms). Un algorithme est sur le front de son instance si
    aucun autre ne fait au moins aussi bien sur la distance et le temps,
    et strictement mieux sur l'un des deux.
    """
    stats = df.groupby(["instance", "algorithm"]).agg(
        distance_mean=("distance", "mean"),
        gap_mean=("gap", "mean"),
        time_mean=("time_ms", "mean"),
    ).reset_index()

    stats["pareto"] = True
    for idx in stats.groupby("instance").groups.values():
        points = stats.loc[idx, ["distance_mean", "time_mean"]].to_numpy()
        # [a, b] : b fait au moins aussi bien que a partout / mieux quelque part
        no_worse = (points[None, :, :] <= points[:, None, :]).all(axis=2)
        better = (points[None, :, :] < points[:, None, :]).any(axis=2)
        stats.loc[idx, "pareto"] = ~(no_worse & better).any(axis=1)

    return stats


def improvement_stats(df: pd.DataFrame) -> pd.DataFrame:
    """
    Amélioration relative initiale -> finale, pour les algorithmes qui
    rapportent une tournée initiale. Inclut la corrélation initiale/finale.
    """
    subset = df.dropna(subset=["initial_distance"]).copy()
    subset["improvement"] = (
        (subset["initial_distance"] - subset["distance"]) / subset["initial_distance"]
    )

    rows = []
    for (instance, algorithm), group in subset.groupby(["instance", "algorithm"]):
        corr = group["initial_distance"].corr(group["distance"]) if len(group) > 1 else float("nan")
        rows.append({
            "instance": instance,
            "algorithm": algorithm,
            "improvement_mean": group["improvement"].mean(),
            "improvement_max": group["improvement"].max(),
            "initial_final_corr": corr,
        })
    return pd.DataFrame(
        rows,
        columns=["instance", "algorithm", "improvement_mean", "improvement_max", "initial_final_corr"],
    )
