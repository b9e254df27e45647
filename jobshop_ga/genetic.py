"""Generation driver for the genetic search.

One generation evaluates the specimens created in it, sorts the population by
fitness, optionally applies the middle/last swap, breeds the first half into
the mirrored slots of the second half and finally mutates at random. All
fitness values come from the shared :class:`ScheduleTemplate`.
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass, field
from typing import Optional

from .models import Chromosome, Specimen
from .operators import CrossoverType, crossover, mutate, random_chromosome
from .template import ScheduleTemplate

logger = logging.getLogger("jssp.ga")


@dataclass(slots=True)
class GAConfig:
    """Hyper-parameters of the genetic search.

    ``mutation_probability`` is a per-specimen percentage (0-100).
    ``elitist_swap`` toggles the exchange of the last parent slot (the middle
    of the population, rounded down to a whole pair) with the last slot of
    the sorted population before breeding, so the weakest specimen is bred.
    """
    population_size: int = 50
    generations: int = 200
    crossover: CrossoverType = CrossoverType.TWO_POINT
    mutation_probability: int = 30
    min_delta: int = -5
    max_delta: int = 5
    elitist_swap: bool = True
    max_repair_passes: int = 10_000
    log_every: int = 10

    def __post_init__(self) -> None:
        self.crossover = CrossoverType(self.crossover)
        if not isinstance(self.elitist_swap, bool):
            raise ValueError(f"elitist_swap must be a boolean, got {self.elitist_swap!r}")
        if self.population_size < 4:
            raise ValueError("population_size must be at least 4")
        if self.generations < 1:
            raise ValueError("generations must be at least 1")
        if not 0 <= self.mutation_probability <= 100:
            raise ValueError("mutation_probability must be a percentage in [0, 100]")
        if self.min_delta > self.max_delta:
            raise ValueError("min_delta must not exceed max_delta")
        if self.max_repair_passes < 1:
            raise ValueError("max_repair_passes must be positive")


@dataclass
class GAResult:
    best_chromosome: Chromosome
    best_fitness: float
    best_runtime: int
    fitness_history: list[float] = field(default_factory=list)
    runtime_history: list[int] = field(default_factory=list)
    elapsed_s: float = 0.0


def evaluate_specimen(
    template: ScheduleTemplate, specimen: Specimen, config: GAConfig
) -> float:
    chromosome, fitness, _ = template.evaluate(specimen.chromosome, config.max_repair_passes)
    specimen.chromosome = chromosome
    specimen.fitness = fitness
    return fitness


def initial_population(
    template: ScheduleTemplate, config: GAConfig, rng: random.Random
) -> list[Specimen]:
    """Random chromosomes repaired by the template, stamped generation 0."""
    population = []
    for _ in range(config.population_size):
        template.fill_start_times(random_chromosome(template, rng))
        template.resolve_conflicts(config.max_repair_passes)
        population.append(Specimen(chromosome=template.get_chromosome(), generation=0))
    return population


def run_generation(
    template: ScheduleTemplate,
    population: list[Specimen],
    generation: int,
    config: GAConfig,
    rng: random.Random,
) -> list[Specimen]:
    """Advance ``population`` by one generation in place and return it.

    Only specimens stamped with ``generation`` (or never scored) are
    evaluated; children receive the stamp ``generation + 1`` and are scored
    in the next call. Mutated specimens are re-scored immediately.
    """
    for specimen in population:
        if specimen.generation == generation or specimen.fitness is None:
            evaluate_specimen(template, specimen, config)

    population.sort(key=lambda s: s.fitness, reverse=True)

    n = len(population)
    half = n // 2
    # parents are the pairs (i, i + 1) with i + 1 < half
    last_parent = 2 * (half // 2) - 1
    if config.elitist_swap:
        population[last_parent], population[-1] = population[-1], population[last_parent]

    for i in range(0, last_parent, 2):
        child_a, child_b = crossover(
            config.crossover,
            template,
            population[i].chromosome,
            population[i + 1].chromosome,
            rng,
            config.max_repair_passes,
        )
        population[n - 1 - i] = Specimen(chromosome=child_a, generation=generation + 1)
        population[n - 2 - i] = Specimen(chromosome=child_b, generation=generation + 1)

    for specimen in population:
        if rng.randrange(100) < config.mutation_probability:
            specimen.chromosome = mutate(
                template,
                specimen.chromosome,
                rng,
                config.min_delta,
                config.max_delta,
                config.max_repair_passes,
            )
            evaluate_specimen(template, specimen, config)
    return population


def genetic_algorithm(
    template: ScheduleTemplate,
    config: GAConfig,
    rng: Optional[random.Random] = None,
) -> GAResult:
    """Run the full generation loop and return the best specimen found.

    Args:
        template: Fully built template (all jobs added).
        config: Search hyper-parameters.
        rng: Random generator; a fresh unseeded one when omitted.

    Returns:
        GAResult with the best repaired chromosome, its fitness and runtime
        plus the best-so-far history per generation.
    """
    if rng is None:
        rng = random.Random()
    t0 = time.perf_counter()
    logger.info(
        "GA start: ops=%d horizon=%d lowest_bound=%d population=%d generations=%d crossover=%s",
        len(template),
        template.horizon(),
        template.absolute_lowest_bound(),
        config.population_size,
        config.generations,
        config.crossover.value,
    )
    population = initial_population(template, config, rng)
    best: Optional[Specimen] = None
    best_runtime = 0
    fitness_history: list[float] = []
    runtime_history: list[int] = []

    def _track_best() -> None:
        nonlocal best, best_runtime
        leader = max(
            (s for s in population if s.fitness is not None), key=lambda s: s.fitness
        )
        if best is None or leader.fitness > best.fitness:
            best = Specimen(list(leader.chromosome), leader.fitness, leader.generation)
            template.fill_start_times(best.chromosome)
            best_runtime = template.total_runtime()

    for generation in range(config.generations):
        run_generation(template, population, generation, config, rng)
        _track_best()
        fitness_history.append(best.fitness)
        runtime_history.append(best_runtime)
        if (generation + 1) % max(1, config.log_every) == 0:
            logger.info(
                "Generation %d/%d: best fitness=%.4f runtime=%d",
                generation + 1,
                config.generations,
                best.fitness,
                best_runtime,
            )

    # children of the last generation have not been scored yet
    for specimen in population:
        if specimen.fitness is None:
            evaluate_specimen(template, specimen, config)
    _track_best()

    elapsed = time.perf_counter() - t0
    logger.info(
        "GA done in %.2fs: best fitness=%.4f runtime=%d", elapsed, best.fitness, best_runtime
    )
    return GAResult(
        best_chromosome=best.chromosome,
        best_fitness=best.fitness,
        best_runtime=best_runtime,
        fitness_history=fitness_history,
        runtime_history=runtime_history,
        elapsed_s=elapsed,
    )
