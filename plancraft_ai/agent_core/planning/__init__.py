"""Plan lifecycle helpers.

- ``transitions``: the single place where plan status and cursor change.
- ``recurrence``: restarting recurring objectives on their schedule.
"""

from . import transitions
from .recurrence import RecurrenceScheduler, next_run_after

__all__ = [
    "RecurrenceScheduler",
    "next_run_after",
    "transitions",
]
