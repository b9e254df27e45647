import argparse
import json
import logging
import os
import random
import sys
from datetime import datetime
from typing import Any, Dict

from jobshop_ga.config import ga_config_from_dict, load_config
from jobshop_ga.errors import JobShopError
from jobshop_ga.experiments.runner import ExperimentRunner, generate_plan_for_files
from jobshop_ga.generator import generate_taillard_instance
from jobshop_ga.genetic import genetic_algorithm
from jobshop_ga.parser import build_template, load_instance
from jobshop_ga.visualization import plot_gantt, render_timeline, save_convergence_plot

logger = logging.getLogger("jssp.main")


def run_experiments(cfg: Dict[str, Any]) -> None:
    exp_cfg = cfg.get("experiment", {})
    instance_files = exp_cfg.get("instance_files") or []
    if not instance_files:
        raise ValueError("experiment.instance_files list must be set and non-empty")
    plan = generate_plan_for_files(
        instance_files=instance_files,
        repeats=int(exp_cfg.get("repeats", 1)),
        ga=ga_config_from_dict(cfg.get("ga")),
    )
    logger.info("Experiment batch mode: %d runs", len(plan))
    runner = ExperimentRunner(exp_cfg.get("results_dir", "results/experiments"))
    runner.run(plan)
    logger.info("Experiment batch completed: %s", runner.timestamp_dir)


def run_single(cfg: Dict[str, Any]) -> None:
    gen_cfg = cfg.get("generator", {}) or {}
    if gen_cfg.get("enabled"):
        n = gen_cfg.get("n")
        m = gen_cfg.get("m")
        if n is None or m is None:
            raise ValueError("Generator enabled but 'n' or 'm' not provided in config.generator")
        instance = generate_taillard_instance(int(n), int(m), int(gen_cfg.get("seed", 0)))
        data_name = f"generated_n{n}_m{m}_seed{gen_cfg.get('seed', 0)}"
    else:
        instance_path = cfg.get("instance")
        if not instance_path:
            raise ValueError("Missing 'instance' key in config")
        instance = load_instance(instance_path)
        data_name = os.path.basename(instance_path)

    ga_config = ga_config_from_dict(cfg.get("ga"))
    template = build_template(instance, max_passes=ga_config.max_repair_passes)
    logger.info(
        "Instance: %s jobs=%d machines=%d ops=%d",
        data_name,
        instance.jobs_number,
        instance.machines_number,
        len(template),
    )
    seed = cfg.get("seed")
    rng = random.Random(seed) if seed is not None else random.Random()
    result = genetic_algorithm(template, ga_config, rng)

    template.fill_start_times(result.best_chromosome)
    logger.debug("Best schedule:\n%s", render_timeline(template))

    charts_cfg = cfg.get("charts", {}) or {}
    charts_dir = charts_cfg.get("dir", "charts")
    os.makedirs(charts_dir, exist_ok=True)
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    gantt_path = plot_gantt(
        template.to_schedule(),
        save_path=os.path.join(charts_dir, f"gantt_ga_c{result.best_runtime}_{data_name}_{ts}.png"),
    )
    logger.info("Saved Gantt chart to %s", gantt_path)
    conv_path = save_convergence_plot(
        result.fitness_history,
        result.runtime_history,
        os.path.join(charts_dir, f"convergence_{data_name}_{ts}.png"),
        lowest_bound=template.absolute_lowest_bound(),
    )
    logger.info("Saved convergence plot to %s", conv_path)
    result_path = os.path.join(charts_dir, f"result_{data_name}_{ts}.json")
    with open(result_path, "w", encoding="utf-8") as f:
        json.dump(
            {
                "instance": data_name,
                "seed": seed,
                "best_runtime": result.best_runtime,
                "best_fitness": result.best_fitness,
                "horizon": template.horizon(),
                "lowest_bound": template.absolute_lowest_bound(),
                "elapsed_s": result.elapsed_s,
                "best_chromosome": result.best_chromosome,
            },
            f,
            indent=2,
        )
    logger.info("Saved result to %s", result_path)
    print(f"Best runtime: {result.best_runtime} (fitness {result.best_fitness:.4f})")


def main(config_path: str) -> int:
    cfg = load_config(config_path)
    log_level = cfg.get("log_level", "INFO")
    logging.basicConfig(
        level=getattr(logging, str(log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        if (cfg.get("experiment") or {}).get("enabled"):
            run_experiments(cfg)
        else:
            run_single(cfg)
    except (JobShopError, ValueError, OSError) as e:
        logger.error("Run failed: %s", e)
        return 1
    return 0


def cli() -> None:
    parser = argparse.ArgumentParser(description="Genetic job shop scheduler (config only)")
    parser.add_argument(
        "--config",
        required=True,
        help="Path to the YAML/JSON configuration file",
    )
    args = parser.parse_args()
    sys.exit(main(args.config))


if __name__ == "__main__":
    cli()
