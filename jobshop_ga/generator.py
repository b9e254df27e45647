import random

from .models import DataInstance


def generate_taillard_instance(n: int, m: int, seed: int = 0) -> DataInstance:
    """Generate a Taillard benchmark-like job shop instance.

    Every job visits each machine exactly once in a random order with
    processing times drawn from 1..99.
    """
    rng = random.Random(seed)
    jobs = []
    for _ in range(n):  # n jobs
        machines = list(range(m))  # m machines
        rng.shuffle(machines)
        jobs.append([(machine, rng.randint(1, 99)) for machine in machines])
    return DataInstance(jobs=jobs, jobs_number=n, machines_number=m)
