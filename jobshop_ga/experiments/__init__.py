"""Batch experiments: multi-seed GA runs persisted as JSON."""

from .runner import ExperimentRunner, RunConfig, RunResult, generate_plan_for_files  # noqa: F401
