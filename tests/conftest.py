"""Pytest configuration, shared fixtures & custom summary hook.

Also ensures the project root is on sys.path so 'import jobshop_ga.*' works
without installing the package.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

_root = Path(__file__).resolve().parents[1]
if str(_root) not in sys.path:
    sys.path.insert(0, str(_root))

from jobshop_ga.template import ScheduleTemplate  # noqa: E402

FIXTURES = Path(__file__).resolve().parent / "fixtures"


class ScriptedRandom:
    """Replays fixed values for ``randint`` / ``randrange`` calls."""

    def __init__(self, randint_values=(), randrange_values=()):
        self._randint = list(randint_values)
        self._randrange = list(randrange_values)

    def randint(self, a: int, b: int) -> int:
        value = self._randint.pop(0)
        assert a <= value <= b, f"scripted value {value} outside [{a}, {b}]"
        return value

    def randrange(self, stop: int) -> int:
        value = self._randrange.pop(0)
        assert 0 <= value < stop
        return value


@pytest.fixture
def two_by_two() -> ScheduleTemplate:
    """2 jobs x 2 machines example: horizon 10, lowest bound 6."""
    template = ScheduleTemplate()
    template.add_job(0, [(0, 3), (1, 2)])
    template.add_job(1, [(1, 4), (0, 1)])
    return template


@pytest.fixture
def unconstrained() -> ScheduleTemplate:
    """Five single-step jobs on five machines: every chromosome is feasible."""
    template = ScheduleTemplate()
    for job_id in range(5):
        template.add_job(job_id, [(job_id, 2)])
    return template


@pytest.fixture
def ft06_path() -> str:
    return str(FIXTURES / "ft06")


def pytest_terminal_summary(
    terminalreporter: pytest.TerminalReporter,
    exitstatus: int,
    config: pytest.Config,
) -> None:  # noqa: D401
    """Append a compact custom summary at the end of test session."""
    stats = terminalreporter.stats
    collected = terminalreporter._numcollected  # type: ignore[attr-defined]
    passed = len(stats.get("passed", []))
    failed = len(stats.get("failed", []))
    errors = len(stats.get("error", []))
    skipped = len(stats.get("skipped", []))

    terminalreporter.section("Custom summary", sep="=")
    terminalreporter.write_line(
        "Collected: "
        f"{collected} | Passed: {passed} | Failed: {failed} | "
        f"Errors: {errors} | Skipped: {skipped}"
    )
    if failed:
        terminalreporter.write_line("Failed tests:")
        for rep in stats["failed"]:
            terminalreporter.write_line(f"  - {rep.nodeid}")
