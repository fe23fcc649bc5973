import argparse
import logging

from .analysis.metrics import (
    add_gap_column,
    compute_best_per_instance,
    improvement_stats,
    pareto_front,
    stability_stats,
)
from .benchmark.runner import BenchmarkRunner
from .config import BenchmarkConfig
from .loaders.loader import load_instances
from .tsp.base import InvalidInstanceError


logger = logging.getLogger("tsp_bench")

LOG_FORMAT = "%(asctime)s: %(message)s"
LOG_DATEFMT = "%H:%M:%S"


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Benchmark de métaheuristiques TSP (2-opt).")
    parser.add_argument("--env-file", default=".env", help="fichier .env de configuration")
    parser.add_argument("--plots", action="store_true", help="enregistre les graphiques dans le dossier résultats")
    return parser.parse_args(argv)


def save_plots(df, pareto, results_dir):
    """Enregistre les graphiques en PNG, chaque figure étant fermée après écriture."""
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt
    from .analysis.plots import boxplot_distances, plot_initial_vs_final, plot_pareto

    figures = [
        (boxplot_distances(df), "distances.png"),
        (plot_pareto(pareto), "pareto.png"),
    ]
    for fig, filename in figures:
        fig.savefig(results_dir / filename)
        plt.close(fig)

    for name in df.loc[df["initial_distance"].notna(), "instance"].unique():
        fig = plot_initial_vs_final(df, name)
        fig.savefig(results_dir / f"initial_vs_final_{name}.png")
        plt.close(fig)


def main(argv=None):
    args = parse_args(argv)
    try:
        config = BenchmarkConfig.from_env(args.env_file)
    except ValueError as e:
        logging.basicConfig(format=LOG_FORMAT, datefmt=LOG_DATEFMT)
        logger.error("Configuration invalide : %s", e)
        return 2

    logging.basicConfig(level=config.log_level, format=LOG_FORMAT, datefmt=LOG_DATEFMT)

    # 1. Charger les instances
    instances = load_instances(config.data_dir)
    if not instances:
        logger.error("Aucune instance trouvée dans %s", config.data_dir)
        return 1

    # 2. Lancer le benchmark
    runner = BenchmarkRunner(
        algorithms=config.algorithms,
        runs=config.runs,
        seed=config.seed,
        results_dir=config.results_dir,
    )
    for name, D in instances.items():
        try:
            runner.run_on_instance(name, D)
        except InvalidInstanceError as e:
            logger.error("Instance %s ignorée : %s", name, e)

    if not runner.results:
        return 1

    df = runner.to_dataframe()
    config.results_dir.mkdir(parents=True, exist_ok=True)
    df.to_csv(config.results_dir / "runs.csv", index=False)

    # 3. Calcul du gap
    df = add_gap_column(df, compute_best_per_instance(df))

    # 4. Statistiques globales
    logger.info("=== Stabilité globale ===\n%s", stability_stats(df).to_string(index=False))
    pareto = pareto_front(df)
    logger.info("=== Front de Pareto ===\n%s", pareto.to_string(index=False))
    improvements = improvement_stats(df)
    if not improvements.empty:
        logger.info("=== Amélioration initiale -> finale ===\n%s", improvements.to_string(index=False))

    # 5. Visualisations
    if args.plots:
        save_plots(df, pareto, config.results_dir)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
