"""Schedule template: the feasibility-repair engine behind the genetic search.

Concepts
--------
Task table
    Flat list of :class:`Operation` records. The index of an operation in
    this list is its only handle; chromosomes are aligned with it
    (``chromosome[i]`` is the start time of operation ``i``).
Job track
    Indices of one job's operations in sequence-number order. Built once by
    :meth:`ScheduleTemplate.add_job` and never reordered, it encodes the
    precedence constraint.
Machine track
    Indices of the operations bound to one machine. Membership is fixed, the
    order is re-sorted by start time whenever time order matters (filling a
    chromosome, every repair pass).

The template is a single mutable engine: every fill/repair overwrites the
start times in place, so one instance must not be shared between concurrently
evaluated chromosomes. Use :meth:`ScheduleTemplate.copy` to give each worker
its own engine.
"""

from __future__ import annotations

import copy
import logging
from typing import Iterable, Optional, Sequence

from .errors import LengthMismatch, NonConvergence, TemplateSealed, UninitializedBounds
from .models import Chromosome, Operation, Schedule, ScheduleOperationRow, Step

logger = logging.getLogger("jssp.template")


class ScheduleTemplate:
    def __init__(self, max_passes: Optional[int] = None):
        self.operations: list[Operation] = []
        self.machine_tracks: dict[int, list[int]] = {}
        self.job_tracks: dict[int, list[int]] = {}
        self.max_passes = max_passes
        self._cached_horizon: Optional[int] = None
        self._cached_lowest_bound: Optional[int] = None
        self._sealed = False

    def __len__(self) -> int:
        return len(self.operations)

    # ------------------------------------------------------------------
    # construction
    # ------------------------------------------------------------------
    def add_job(self, job_id: int, steps: Iterable[Step]) -> None:
        """Append one job to the task table.

        Args:
            job_id: Identifier of the job (must not be registered yet).
            steps: Ordered ``(machine_id, length)`` pairs; the position in
                this sequence becomes the operation's sequence number.

        Raises:
            TemplateSealed: If a chromosome was already filled in.
            ValueError: On a duplicate job id, negative machine id or a
                non-positive length.
        """
        if self._sealed:
            raise TemplateSealed("All jobs must be added before any chromosome is filled")
        if job_id in self.job_tracks:
            raise ValueError(f"Job {job_id} already registered")

        track: list[int] = []
        for sequence_number, (machine_id, length) in enumerate(steps):
            if machine_id < 0:
                raise ValueError(f"Machine id must be non-negative, got {machine_id}")
            if length <= 0:
                raise ValueError(
                    f"Operation length must be positive (job {job_id}, step {sequence_number})"
                )
            index = len(self.operations)
            self.operations.append(
                Operation(
                    job_id=job_id,
                    machine_id=machine_id,
                    sequence_number=sequence_number,
                    length=length,
                )
            )
            track.append(index)
            self.machine_tracks.setdefault(machine_id, []).append(index)
        self.job_tracks[job_id] = track

        self._cached_horizon = None
        self._cached_lowest_bound = None

    def copy(self) -> "ScheduleTemplate":
        """Deep copy with the same topology and current start times."""
        return copy.deepcopy(self)

    # ------------------------------------------------------------------
    # chromosome I/O
    # ------------------------------------------------------------------
    def fill_start_times(self, chromosome: Sequence[int]) -> None:
        """Overwrite start times positionally and re-sort machine tracks.

        Raises:
            LengthMismatch: When ``len(chromosome)`` differs from the number
                of operations.
        """
        if len(chromosome) != len(self.operations):
            raise LengthMismatch(len(self.operations), len(chromosome))
        self._sealed = True
        for operation, start in zip(self.operations, chromosome):
            operation.start_time = start
        # track order must reflect time order even without a repair
        self._sort_machine_tracks()

    def get_chromosome(self) -> Chromosome:
        return [operation.start_time for operation in self.operations]

    def _sort_machine_tracks(self) -> None:
        ops = self.operations
        for track in self.machine_tracks.values():
            track.sort(key=lambda index: ops[index].start_time)

    # ------------------------------------------------------------------
    # conflict repair
    # ------------------------------------------------------------------
    def _sweep(self, track: list[int]) -> int:
        """Push overlapping operations of one ordered track forward.

        For every consecutive pair the overlap ``diff`` is computed; when it
        is positive the right operation and every operation after it on the
        same track move by ``diff``. Returns the number of pushes.
        """
        ops = self.operations
        pushes = 0
        for i in range(len(track) - 1):
            left = ops[track[i]]
            diff = left.start_time + left.length - ops[track[i + 1]].start_time
            if diff > 0:
                pushes += 1
                for index in track[i + 1:]:
                    ops[index].start_time += diff
        return pushes

    def resolve_conflicts(self, max_passes: Optional[int] = None) -> int:
        """Shift operations forward until no machine or job overlap is left.

        Each pass first sweeps every job track (sequence violations move the
        rest of the job), then re-sorts the machine tracks by the updated
        start times and sweeps every machine track. Passes repeat until one
        completes with zero pushes in both sweeps. Termination is not proven,
        hence the optional pass limit.

        Args:
            max_passes: Upper bound on the number of pushing passes; falls
                back to the limit given at construction, ``None`` means
                unbounded. A schedule fixed during the last allowed pass is
                confirmed by a read-only check instead of another pass.

        Returns:
            Number of passes executed (1 for an already feasible schedule).

        Raises:
            NonConvergence: When overlaps remain after the last allowed pass.
        """
        limit = max_passes if max_passes is not None else self.max_passes
        passes = 0
        while True:
            if limit is not None and passes >= limit:
                # the last allowed pass may have removed every overlap
                if self.is_feasible():
                    break
                logger.warning("Conflict resolution stopped after %d passes", passes)
                raise NonConvergence(passes)
            passes += 1
            job_pushes = sum(self._sweep(track) for track in self.job_tracks.values())
            self._sort_machine_tracks()
            machine_pushes = sum(self._sweep(track) for track in self.machine_tracks.values())
            if job_pushes == 0 and machine_pushes == 0:
                break
        logger.debug("Conflicts resolved in %d passes", passes)
        return passes

    def collisions(self) -> tuple[int, int]:
        """Count overlapping neighbours without touching start times.

        Returns:
            ``(machine_collisions, job_collisions)`` where machine tracks are
            examined in time order and job tracks in sequence order.
        """
        ops = self.operations

        def _count(track: list[int]) -> int:
            return sum(
                1
                for a, b in zip(track, track[1:])
                if ops[a].start_time + ops[a].length > ops[b].start_time
            )

        machine_collisions = 0
        for track in self.machine_tracks.values():
            ordered = sorted(track, key=lambda index: ops[index].start_time)
            machine_collisions += _count(ordered)
        job_collisions = sum(_count(track) for track in self.job_tracks.values())
        return machine_collisions, job_collisions

    def is_feasible(self) -> bool:
        return self.collisions() == (0, 0)

    # ------------------------------------------------------------------
    # bounds & fitness
    # ------------------------------------------------------------------
    def horizon(self) -> int:
        """Runtime of the fully sequential schedule (sum of all lengths)."""
        if self._cached_horizon is None:
            self._cached_horizon = sum(operation.length for operation in self.operations)
        return self._cached_horizon

    def absolute_lowest_bound(self) -> int:
        """Load of the busiest machine, ignoring precedence across machines."""
        if self._cached_lowest_bound is None:
            ops = self.operations
            self._cached_lowest_bound = max(
                (sum(ops[index].length for index in track) for track in self.machine_tracks.values()),
                default=0,
            )
        return self._cached_lowest_bound

    def total_runtime(self) -> int:
        """End time of the latest last-in-track operation.

        Machine tracks must be sorted by start time (call
        :meth:`fill_start_times` or :meth:`resolve_conflicts` first).
        """
        ops = self.operations
        return max(
            (ops[track[-1]].end_time for track in self.machine_tracks.values() if track),
            default=0,
        )

    def fitness(self) -> float:
        """Normalised position of the runtime between lowest bound and horizon.

        Returns ``1.0`` when the runtime reaches the lowest bound, ``0.0``
        when it reaches the horizon, linear in between; higher is better.

        Raises:
            UninitializedBounds: If the template holds no operations.
        """
        if not self.operations:
            raise UninitializedBounds("Template has no operations; bounds are undefined")
        runtime = self.total_runtime()
        lowest = self.absolute_lowest_bound()
        horizon = self.horizon()
        if runtime <= lowest:
            return 1.0
        if runtime >= horizon:
            return 0.0
        return 1.0 - (runtime - lowest) / (horizon - lowest)

    def evaluate(
        self, chromosome: Sequence[int], max_passes: Optional[int] = None
    ) -> tuple[Chromosome, float, int]:
        """Fill, repair and score one chromosome.

        Returns:
            ``(repaired_chromosome, fitness, total_runtime)``.
        """
        self.fill_start_times(chromosome)
        self.resolve_conflicts(max_passes)
        return self.get_chromosome(), self.fitness(), self.total_runtime()

    def to_schedule(self) -> Schedule:
        """Snapshot of the current start times as a :class:`Schedule`."""
        rows = [
            ScheduleOperationRow(
                start=operation.start_time,
                end=operation.end_time,
                job=operation.job_id,
                operation_index=operation.sequence_number,
                machine=operation.machine_id,
                processing_time=operation.length,
            )
            for operation in self.operations
        ]
        return Schedule(operations=rows, cmax=max((row.end for row in rows), default=0))
