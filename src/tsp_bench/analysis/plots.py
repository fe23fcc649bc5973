import pandas as pd
import seaborn as sns
import matplotlib.pyplot as plt

# ============================================================
# 1. Boxplot des distances
# ============================================================

def boxplot_distances(df: pd.DataFrame, by: str = "algorithm", figsize=(8, 5)):
    """
    Boxplot des distances par algorithme ou par instance.
    """
    fig = plt.figure(figsize=figsize)
    sns.boxplot(data=df, x=by, y="distance")
    plt.title(f"Distribution des distances par {by}")
    plt.xticks(rotation=30)
    plt.tight_layout()
    return fig


# ============================================================
# 2. Front de Pareto (qualité vs temps)
# ============================================================

def plot_pareto(stats_pareto: pd.DataFrame, col_wrap: int = 3, height: float = 4):
    """
    Scatter qualité/temps, un panneau par instance, front de Pareto surligné.
    stats_pareto (sortie de pareto_front) doit contenir:
      - instance
      - algorithm
      - gap_mean
      - time_mean
      - pareto (bool)
    """
    n_instances = stats_pareto["instance"].nunique()
    grid = sns.relplot(
        data=stats_pareto,
        x="time_mean",
        y="gap_mean",
        hue="pareto",
        style="pareto",
        col="instance",
        col_wrap=min(col_wrap, n_instances),
        height=height,
        s=120,
        palette={True: "red", False: "gray"},
        facet_kws={"sharex": False, "sharey": False},
    )

    for instance, ax in grid.axes_dict.items():
        subset = stats_pareto[stats_pareto["instance"] == instance]
        for _, row in subset.iterrows():
            ax.text(row["time_mean"], row["gap_mean"], row["algorithm"], fontsize=9)

    grid.set_axis_labels("Temps moyen (ms)", "Gap moyen")
    grid.set_titles("Front de Pareto : {col_name}")
    grid.tight_layout()
    return grid.figure


# ============================================================
# 3. Distance initiale vs finale
# ============================================================

def plot_initial_vs_final(df: pd.DataFrame, instance: str, figsize=(7, 5)):
    """
    Scatter distance initiale / distance finale pour une instance.
    """
    subset = df[(df["instance"] == instance) & df["initial_distance"].notna()]
    if subset.empty:
        raise ValueError(f"Aucune distance initiale pour l'instance {instance}.")

    fig = plt.figure(figsize=figsize)
    sns.scatterplot(data=subset, x="initial_distance", y="distance", hue="algorithm")
    plt.xlabel("Distance initiale")
    plt.ylabel("Distance finale")
    plt.title(f"Initiale vs finale — {instance}")
    plt.tight_layout()
    return fig
