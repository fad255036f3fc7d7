"""Errors raised by the auto-scheduling stages.

Every stage raises a subclass of ``AutoScheduleError``. ``run_auto_schedule``
catches them and turns them into messages on the run result, so callers of
the orchestrator never see these exceptions.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.scheduling.assignment import BatchProgress


class AutoScheduleError(Exception):
    """Base class for auto-scheduling failures."""


class ConfigurationError(AutoScheduleError):
    """The group type or scheduler identity could not be resolved."""


class AssignmentBatchError(AutoScheduleError):
    """Assigning or committing a chunk failed.

    ``progress`` holds the counters as of the last committed chunk.
    """

    def __init__(self, message: str, progress: "BatchProgress"):
        super().__init__(message)
        self.progress = progress


class ConfirmationError(AutoScheduleError):
    """The attendance confirmation sweep failed."""
