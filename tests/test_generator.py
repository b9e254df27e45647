from jobshop_ga.generator import generate_taillard_instance
from jobshop_ga.parser import build_template


def test_every_job_visits_every_machine_once() -> None:
    inst = generate_taillard_instance(4, 3, seed=1)
    assert inst.jobs_number == 4
    assert inst.machines_number == 3
    for job in inst.jobs:
        assert sorted(m for (m, _) in job) == [0, 1, 2]
        assert all(1 <= p <= 99 for (_, p) in job)


def test_generator_is_seeded() -> None:
    assert generate_taillard_instance(3, 3, seed=5) == generate_taillard_instance(3, 3, seed=5)


def test_generated_instance_builds_template() -> None:
    template = build_template(generate_taillard_instance(5, 4, seed=0))
    assert len(template) == 20
    assert template.absolute_lowest_bound() <= template.horizon()
