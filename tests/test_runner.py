import json
from pathlib import Path

from jobshop_ga.experiments.runner import ExperimentRunner, generate_plan_for_files
from jobshop_ga.genetic import GAConfig


def test_plan_enumerates_files_and_seeds() -> None:
    ga = GAConfig(population_size=4, generations=1)
    plan = generate_plan_for_files(["a", "b"], repeats=3, ga=ga)
    assert [(cfg.instance_file, cfg.seed) for cfg in plan] == [
        ("a", 0), ("a", 1), ("a", 2), ("b", 0), ("b", 1), ("b", 2),
    ]
    assert all(cfg.ga is ga for cfg in plan)


def test_runner_persists_results(tmp_path: Path, ft06_path: str) -> None:
    ga = GAConfig(population_size=4, generations=2)
    runner = ExperimentRunner(str(tmp_path / "exp"))
    results = runner.run(generate_plan_for_files([ft06_path], repeats=1, ga=ga))
    assert len(results) == 1
    result = results[0]
    assert result.lower_bound == 43
    assert result.horizon == 197
    assert result.gap_percent() >= 0.0

    files = list(runner.timestamp_dir.glob("*.json"))
    assert len(files) == 1
    data = json.loads(files[0].read_text())
    assert data["config"]["ga"]["crossover"] == "2-point"
    assert data["best_runtime"] == result.best_runtime
    assert len(data["runtime_history"]) == 2
