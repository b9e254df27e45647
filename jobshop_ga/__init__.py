"""Genetic search for Job Shop schedules built on a feasibility-repair template.

Exports base data structures, the schedule template and parsing utilities.
"""

from jobshop_ga.models import DataInstance, Operation, Specimen  # noqa: F401
from jobshop_ga.parser import build_template, load_instance  # noqa: F401
from jobshop_ga.template import ScheduleTemplate  # noqa: F401

__all__ = [
    "DataInstance",
    "Operation",
    "ScheduleTemplate",
    "Specimen",
    "build_template",
    "load_instance",
]
