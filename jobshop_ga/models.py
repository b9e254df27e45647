"""Core data structures for the genetic Job Shop scheduler.

This module defines:
    Step         -- alias describing a single job step (machine, length).
    Chromosome   -- alias for a start-time vector, one gene per operation.
    Operation    -- one entry of the task table (mutable start time).
    DataInstance -- immutable container with all jobs for one instance.
    Specimen     -- chromosome with its fitness and creation generation.
    ScheduleOperationRow -- read-only snapshot of one scheduled operation.
    Schedule     -- snapshot rows of a whole schedule plus its makespan.
"""

from dataclasses import FrozenInstanceError, dataclass
from typing import ClassVar, Optional

Step = tuple[int, int]  # (machine, length)
Chromosome = list[int]


@dataclass
class Operation:
    """Single operation of a job bound to a fixed machine.

    Only ``start_time`` may change after construction; assigning any other
    field raises ``FrozenInstanceError``.

    Attributes:
        job_id: Job the operation belongs to.
        machine_id: Machine the operation must run on.
        sequence_number: Position inside the job (0-based).
        length: Processing time (positive).
        start_time: Current start time, overwritten by every chromosome fill.
    """

    _FIXED: ClassVar[frozenset] = frozenset({"job_id", "machine_id", "sequence_number", "length"})

    job_id: int
    machine_id: int
    sequence_number: int
    length: int
    start_time: int = 0

    def __setattr__(self, name, value):
        if name in self._FIXED and name in self.__dict__:
            raise FrozenInstanceError(f"cannot assign to field {name!r}")
        object.__setattr__(self, name, value)

    @property
    def end_time(self) -> int:
        return self.start_time + self.length


@dataclass(frozen=True)
class DataInstance:
    """Immutable representation of a JSSP instance.

    Attributes:
        jobs: Nested list: jobs[j][k] -> (machine, length).
        jobs_number: Number of jobs (J).
        machines_number: Number of machines (M).
    """

    jobs: list[list[Step]]
    jobs_number: int
    machines_number: int

    @property
    def operations_number(self) -> int:
        return sum(len(job) for job in self.jobs)


@dataclass
class Specimen:
    """Member of the population.

    ``fitness`` is trusted unless ``generation`` equals the generation being
    evaluated; freshly bred children are stamped with the next generation.
    """

    chromosome: Chromosome
    fitness: Optional[float] = None
    generation: int = 0


@dataclass(frozen=True)
class ScheduleOperationRow:
    """Single scheduled operation with timing and identification data.

    Fields:
        start: Start time of the operation.
        end: Completion time (start + processing_time).
        job: Job identifier.
        operation_index: Index of the operation inside its job (0-based).
        machine: Machine on which the operation is processed.
        processing_time: Duration of the operation.
    """
    start: int
    end: int
    job: int
    operation_index: int
    machine: int
    processing_time: int


@dataclass(frozen=True)
class Schedule:
    """Full schedule plus objective value (cmax).

    Fields:
        operations: Flat list of all scheduled operations in task table order.
        cmax: Makespan (maximum completion time across all operations).
    """
    operations: list[ScheduleOperationRow]
    cmax: int
