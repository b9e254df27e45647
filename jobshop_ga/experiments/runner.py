from __future__ import annotations

import json
import logging
import random
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Sequence

from jobshop_ga.genetic import GAConfig, genetic_algorithm
from jobshop_ga.parser import build_template, load_instance

logger = logging.getLogger("jssp.experiment")


@dataclass(frozen=True)
class RunConfig:
    """Configuration of a single GA run on one instance file."""

    instance_file: str
    seed: int
    ga: GAConfig


@dataclass
class RunResult:
    config: RunConfig
    best_runtime: int
    best_fitness: float
    total_time_ms: int
    runtime_history: List[int]
    fitness_history: List[float]
    best_chromosome: List[int]
    instance_jobs: int
    instance_machines: int
    horizon: int
    lower_bound: int

    def gap_percent(self) -> float | None:
        try:
            return (self.best_runtime - self.lower_bound) / self.lower_bound * 100.0
        except ZeroDivisionError:
            return None

    def to_dict(self):
        d = asdict(self)
        d["gap_percent"] = self.gap_percent()
        d["config"]["ga"]["crossover"] = self.config.ga.crossover.value
        return d


class ExperimentRunner:
    def __init__(self, base_results_dir: str = "results/experiments"):
        """Each batch gets its own timestamped directory, older ones are kept."""
        self.base_dir = Path(base_results_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self.timestamp_dir = self.base_dir / datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
        self.timestamp_dir.mkdir(parents=True, exist_ok=True)

    def run(self, configs: Sequence[RunConfig]) -> List[RunResult]:
        results: List[RunResult] = []
        for idx, cfg in enumerate(configs, start=1):
            logger.info(
                "(%d/%d) Running %s seed=%d", idx, len(configs), cfg.instance_file, cfg.seed
            )
            result = self._run_single(cfg)
            results.append(result)
            self._persist_result(result)
        return results

    def _run_single(self, cfg: RunConfig) -> RunResult:
        instance = load_instance(cfg.instance_file)
        template = build_template(instance)
        ga_result = genetic_algorithm(template, cfg.ga, random.Random(cfg.seed))
        return RunResult(
            config=cfg,
            best_runtime=ga_result.best_runtime,
            best_fitness=ga_result.best_fitness,
            total_time_ms=int(ga_result.elapsed_s * 1000),
            runtime_history=ga_result.runtime_history,
            fitness_history=ga_result.fitness_history,
            best_chromosome=ga_result.best_chromosome,
            instance_jobs=instance.jobs_number,
            instance_machines=instance.machines_number,
            horizon=template.horizon(),
            lower_bound=template.absolute_lowest_bound(),
        )

    def _persist_result(self, result: RunResult) -> Path:
        cfg = result.config
        filename = (
            f"file={Path(cfg.instance_file).stem}_n{result.instance_jobs}"
            f"_m{result.instance_machines}_xo={cfg.ga.crossover.value}_seed={cfg.seed}.json"
        )
        path = self.timestamp_dir / filename
        with open(path, "w", encoding="utf-8") as f:
            json.dump(result.to_dict(), f, indent=2)
        logger.info("Saved %s", path)
        return path


def generate_plan_for_files(
    instance_files: Iterable[str],
    repeats: int,
    ga: GAConfig,
) -> List[RunConfig]:
    """One run per (file, seed) with seeds ``0..repeats-1``."""
    return [
        RunConfig(instance_file=instance_file, seed=seed, ga=ga)
        for instance_file in instance_files
        for seed in range(repeats)
    ]
