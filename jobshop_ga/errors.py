"""Exceptions raised by the schedule template, operators and instance loader."""


class JobShopError(Exception):
    """Base class for all package errors."""


class LengthMismatch(JobShopError, ValueError):
    """Chromosome length differs from the number of operations."""

    def __init__(self, expected: int, got: int):
        super().__init__(
            "Number of start times in the chromosome must equal the number of "
            f"operations in the template (expected {expected}, got {got})"
        )
        self.expected = expected
        self.got = got


class InvalidLength(JobShopError, ValueError):
    """Chromosome too short for crossover, or parents of different lengths."""


class UninitializedBounds(JobShopError, RuntimeError):
    """Fitness requested while horizon / lowest bound are undefined."""


class NonConvergence(JobShopError, RuntimeError):
    """Conflict repair did not reach a fixed point within its pass limit."""

    def __init__(self, passes: int):
        super().__init__(f"Conflict resolution did not converge after {passes} passes")
        self.passes = passes


class TemplateSealed(JobShopError, RuntimeError):
    """Jobs cannot be added once chromosomes have been filled in."""


class InstanceFormatError(JobShopError, ValueError):
    """Malformed instance file."""
