"""Configuration loading (YAML or JSON) and mapping onto :class:`GAConfig`."""

from __future__ import annotations

import json
import os
from typing import Any, Dict

import yaml

from .genetic import GAConfig
from .operators import CrossoverType


def load_config(config_file: str = "config.yaml") -> Dict[str, Any]:
    """Load configuration from a YAML (``.yml``/``.yaml``) or JSON file."""
    if not os.path.isfile(config_file):
        raise FileNotFoundError(f"Config file not found: {config_file}")
    with open(config_file, "r", encoding="utf-8") as f:
        text = f.read()
    if config_file.endswith((".yml", ".yaml")):
        config = yaml.safe_load(text) or {}
    else:
        config = json.loads(text)
    if not isinstance(config, dict):
        raise ValueError(f"Config root must be a mapping: {config_file}")
    return config


def ga_config_from_dict(section: Dict[str, Any] | None) -> GAConfig:
    """Build GAConfig from the ``ga`` config section; missing keys use defaults."""
    section = section or {}
    defaults = GAConfig()
    return GAConfig(
        population_size=int(section.get("population_size", defaults.population_size)),
        generations=int(section.get("generations", defaults.generations)),
        crossover=CrossoverType(section.get("crossover", defaults.crossover.value)),
        mutation_probability=int(
            section.get("mutation_probability", defaults.mutation_probability)
        ),
        min_delta=int(section.get("min_delta", defaults.min_delta)),
        max_delta=int(section.get("max_delta", defaults.max_delta)),
        elitist_swap=section.get("elitist_swap", defaults.elitist_swap),
        max_repair_passes=int(section.get("max_repair_passes", defaults.max_repair_passes)),
        log_every=int(section.get("log_every", defaults.log_every)),
    )
