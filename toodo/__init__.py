"""toodo - task/todo management with dependency tracking and work-time accounting."""

__version__ = "0.1.0"
