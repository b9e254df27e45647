"""Loader for JSPLIB / Taillard style JSSP instance files.

Format::

    # optional comment lines
    <jobs> <machines>
    <machine> <length> <machine> <length> ...   (one line per job)

Machine ids may be zero- or one-based; one-based files are normalised.
"""

from __future__ import annotations

from typing import Optional

from .errors import InstanceFormatError
from .models import DataInstance, Step
from .template import ScheduleTemplate


def load_instance(file_path: str) -> DataInstance:
    with open(file_path, "r", encoding="utf-8") as f:
        lines = [line.strip() for line in f]
    lines = [line for line in lines if line and not line.startswith("#")]
    if not lines:
        raise InstanceFormatError(f"Empty instance file: {file_path}")

    header = lines[0].split()
    if len(header) != 2:
        raise InstanceFormatError(f"Invalid header (expected '<jobs> <machines>'): {lines[0]!r}")
    try:
        jobs_number, machines_number = map(int, header)
    except ValueError as e:
        raise InstanceFormatError(f"Invalid header: {lines[0]!r}") from e
    if jobs_number <= 0 or machines_number <= 0:
        raise InstanceFormatError("Numbers of jobs and machines must be positive")

    body = lines[1:]
    if len(body) < jobs_number:
        raise InstanceFormatError(
            f"Expected {jobs_number} job lines, found {len(body)}"
        )

    raw_jobs: list[list[Step]] = []
    for job_id, line in enumerate(body[:jobs_number]):
        tokens = line.split()
        if len(tokens) != 2 * machines_number:
            raise InstanceFormatError(
                f"Job {job_id}: expected {2 * machines_number} tokens, got {len(tokens)}"
            )
        try:
            values = list(map(int, tokens))
        except ValueError as e:
            raise InstanceFormatError(f"Job {job_id}: non-integer token") from e
        steps = list(zip(values[0::2], values[1::2]))
        for machine, length in steps:
            if length <= 0:
                raise InstanceFormatError(f"Job {job_id}: non-positive processing time {length}")
            if machine < 0:
                raise InstanceFormatError(f"Job {job_id}: negative machine index {machine}")
        raw_jobs.append(steps)

    machines = {m for job in raw_jobs for (m, _) in job}
    one_based = 0 not in machines and max(machines) <= machines_number
    if one_based:
        raw_jobs = [[(m - 1, p) for (m, p) in job] for job in raw_jobs]
    elif max(machines) >= machines_number:
        raise InstanceFormatError(
            f"Machine index {max(machines)} out of range for {machines_number} machines"
        )

    return DataInstance(jobs=raw_jobs, jobs_number=jobs_number, machines_number=machines_number)


def build_template(
    instance: DataInstance, max_passes: Optional[int] = None
) -> ScheduleTemplate:
    """Create a schedule template by adding every job in increasing id order."""
    template = ScheduleTemplate(max_passes=max_passes)
    for job_id, steps in enumerate(instance.jobs):
        template.add_job(job_id, steps)
    return template
