"""TaskFlow.

A small, local-first task tracker for the terminal:
- tasks persisted as JSON in a per-user config directory
- optional mirroring of new tasks into GitHub issues
- a status board grouped by column
"""

__version__ = "0.1.0"

from taskflow.settings import TaskflowSettings

__all__ = ["__version__", "TaskflowSettings"]
