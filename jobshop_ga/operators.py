"""Genetic operators on start-time chromosomes.

Every operator perturbs raw genes and then hands the result to the schedule
template for repair, so callers always get feasible chromosomes back.
"""

from __future__ import annotations

import random
from enum import Enum
from typing import Optional, Sequence

from .errors import InvalidLength
from .models import Chromosome
from .template import ScheduleTemplate


class CrossoverType(str, Enum):
    ONE_POINT = "1-point"
    TWO_POINT = "2-point"


def _repair(
    template: ScheduleTemplate, chromosome: Sequence[int], max_passes: Optional[int]
) -> Chromosome:
    template.fill_start_times(chromosome)
    template.resolve_conflicts(max_passes)
    return template.get_chromosome()


def _check_parents(a: Sequence[int], b: Sequence[int]) -> int:
    if len(a) < 3 or len(b) < 3:
        raise InvalidLength(
            f"Crossover needs chromosomes of at least 3 genes (got {len(a)} and {len(b)})"
        )
    if len(a) != len(b):
        raise InvalidLength(f"Parent lengths differ: {len(a)} != {len(b)}")
    return len(a)


def random_chromosome(template: ScheduleTemplate, rng: random.Random) -> Chromosome:
    """Unrepaired chromosome with genes drawn uniformly from ``[0, horizon]``."""
    horizon = template.horizon()
    return [rng.randint(0, horizon) for _ in range(len(template))]


def crossover_one_point(
    template: ScheduleTemplate,
    a: Sequence[int],
    b: Sequence[int],
    rng: random.Random,
    max_passes: Optional[int] = None,
) -> tuple[Chromosome, Chromosome]:
    """Swap the prefix ``[0, cut)`` of both parents, ``cut`` in ``[1, n-2]``.

    Raises:
        InvalidLength: If a parent is shorter than 3 genes or lengths differ.
    """
    n = _check_parents(a, b)
    cut = rng.randint(1, n - 2)
    child_a = list(b[:cut]) + list(a[cut:])
    child_b = list(a[:cut]) + list(b[cut:])
    return _repair(template, child_a, max_passes), _repair(template, child_b, max_passes)


def crossover_two_point(
    template: ScheduleTemplate,
    a: Sequence[int],
    b: Sequence[int],
    rng: random.Random,
    max_passes: Optional[int] = None,
) -> tuple[Chromosome, Chromosome]:
    """Swap the genes strictly between two cut points drawn from ``[1, n-2]``.

    Equal cuts are separated by incrementing the second one. Gene 0 is never
    exchanged.

    Raises:
        InvalidLength: If a parent is shorter than 3 genes or lengths differ.
    """
    n = _check_parents(a, b)
    first = rng.randint(1, n - 2)
    second = rng.randint(1, n - 2)
    if first == second:
        second += 1
    low, high = min(first, second), max(first, second)
    child_a = list(a)
    child_b = list(b)
    child_a[low + 1:high] = b[low + 1:high]
    child_b[low + 1:high] = a[low + 1:high]
    return _repair(template, child_a, max_passes), _repair(template, child_b, max_passes)


def crossover(
    kind: CrossoverType,
    template: ScheduleTemplate,
    a: Sequence[int],
    b: Sequence[int],
    rng: random.Random,
    max_passes: Optional[int] = None,
) -> tuple[Chromosome, Chromosome]:
    if kind is CrossoverType.ONE_POINT:
        return crossover_one_point(template, a, b, rng, max_passes)
    if kind is CrossoverType.TWO_POINT:
        return crossover_two_point(template, a, b, rng, max_passes)
    raise ValueError(f"Unknown crossover type: {kind}")  # pragma: no cover


def perturb(
    chromosome: Sequence[int], rng: random.Random, min_delta: int, max_delta: int
) -> Chromosome:
    """Shift one random gene by ``delta`` in ``[min_delta, max_delta]``.

    A negative result is reflected (``gene - delta``) instead of clamped, so
    the magnitude of the move is kept and genes stay non-negative.
    """
    mutated = list(chromosome)
    position = rng.randrange(len(mutated))
    delta = rng.randint(min_delta, max_delta)
    mutated[position] += delta
    if mutated[position] < 0:
        mutated[position] += -2 * delta
    return mutated


def mutate(
    template: ScheduleTemplate,
    chromosome: Sequence[int],
    rng: random.Random,
    min_delta: int,
    max_delta: int,
    max_passes: Optional[int] = None,
) -> Chromosome:
    """Perturb one gene (see :func:`perturb`) and return the repaired chromosome."""
    return _repair(template, perturb(chromosome, rng, min_delta, max_delta), max_passes)
