import random

import pytest
from conftest import ScriptedRandom

from jobshop_ga.errors import InvalidLength
from jobshop_ga.operators import (
    CrossoverType,
    crossover,
    crossover_one_point,
    crossover_two_point,
    mutate,
    perturb,
    random_chromosome,
)
from jobshop_ga.parser import build_template, load_instance

A = [0, 1, 2, 3, 4]
B = [10, 11, 12, 13, 14]


def test_one_point_swaps_prefix(unconstrained) -> None:
    child_a, child_b = crossover_one_point(unconstrained, A, B, ScriptedRandom([2]))
    assert child_a == [10, 11, 2, 3, 4]
    assert child_b == [0, 1, 12, 13, 14]


def test_two_point_swaps_between_cuts(unconstrained) -> None:
    child_a, child_b = crossover_two_point(unconstrained, A, B, ScriptedRandom([3, 1]))
    assert child_a == [0, 1, 12, 3, 4]
    assert child_b == [10, 11, 2, 13, 14]


def test_two_point_equal_cuts_are_separated(unconstrained) -> None:
    # cuts 2 and 2 become 2 and 3: nothing lies strictly between them
    child_a, child_b = crossover_two_point(unconstrained, A, B, ScriptedRandom([2, 2]))
    assert child_a == A
    assert child_b == B


def test_two_point_never_swaps_first_gene(unconstrained) -> None:
    rng = random.Random(0)
    for _ in range(50):
        child_a, child_b = crossover_two_point(unconstrained, A, B, rng)
        assert child_a[0] == A[0]
        assert child_b[0] == B[0]


@pytest.mark.parametrize("kind", list(CrossoverType))
def test_crossover_rejects_short_or_mismatched(unconstrained, kind) -> None:
    rng = random.Random(0)
    with pytest.raises(InvalidLength):
        crossover(kind, unconstrained, [0, 1], [2, 3], rng)
    with pytest.raises(InvalidLength):
        crossover(kind, unconstrained, A, A[:4], rng)


def test_crossover_type_from_string() -> None:
    assert CrossoverType("1-point") is CrossoverType.ONE_POINT
    assert CrossoverType("2-point") is CrossoverType.TWO_POINT
    with pytest.raises(ValueError):
        CrossoverType("uniform")


@pytest.mark.parametrize("kind", list(CrossoverType))
def test_crossover_children_are_feasible(ft06_path: str, kind) -> None:
    template = build_template(load_instance(ft06_path))
    rng = random.Random(11)
    parents = []
    for _ in range(2):
        template.fill_start_times(random_chromosome(template, rng))
        template.resolve_conflicts(10_000)
        parents.append(template.get_chromosome())
    for _ in range(5):
        children = crossover(kind, template, parents[0], parents[1], rng, 10_000)
        for child in children:
            assert len(child) == len(parents[0])
            template.fill_start_times(child)
            assert template.is_feasible()


def test_perturb_reflects_negative_values() -> None:
    mutated = perturb([0, 3, 5], ScriptedRandom([-7], [1]), -10, 10)
    assert mutated == [0, 10, 5]


def test_perturb_keeps_positive_values() -> None:
    mutated = perturb([0, 3, 5], ScriptedRandom([-2], [2]), -10, 10)
    assert mutated == [0, 3, 3]


def test_perturb_never_negative() -> None:
    rng = random.Random(5)
    for _ in range(200):
        chromosome = [rng.randint(0, 6) for _ in range(6)]
        mutated = perturb(chromosome, rng, -5, 5)
        assert all(gene >= 0 for gene in mutated)
        assert sum(a != b for a, b in zip(chromosome, mutated)) <= 1


def test_mutate_returns_repaired(ft06_path: str) -> None:
    template = build_template(load_instance(ft06_path))
    rng = random.Random(3)
    template.fill_start_times([0] * len(template))
    template.resolve_conflicts(10_000)
    chromosome = template.get_chromosome()
    for _ in range(20):
        chromosome = mutate(template, chromosome, rng, -5, 5, 10_000)
        assert len(chromosome) == len(template)
        template.fill_start_times(chromosome)
        assert template.is_feasible()


def test_random_chromosome_within_horizon(two_by_two) -> None:
    rng = random.Random(1)
    chromosome = random_chromosome(two_by_two, rng)
    assert len(chromosome) == 4
    assert all(0 <= gene <= two_by_two.horizon() for gene in chromosome)
