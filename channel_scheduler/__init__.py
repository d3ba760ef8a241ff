"""Channel Scheduler.

Conflict-checked channel scheduling with recurrence templates.
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
