"""Todo domain - the todo aggregate and its pure operations.

Everything exported here is pure (no I/O, no side effects).

Key Types:
    Todo - Immutable todo entity with its work-state machine
    TodoStatus - pending / in_progress / completed
    WorkState - idle / active / paused / completed
    PriorityLevel - low / medium / high
    DependencyNode - Read-only dependency tree node
    SubtaskNode - Todo with nested subtasks
    WorkTime - Work-time summary

Graph Functions:
    would_create_cycle - Reachability check before inserting an edge
    build_dependency_tree - Bounded-depth dependency expansion

Work Time:
    current_work_time - Accrued time including a running interval
    format_duration - Compact duration string
"""

from .dependency import (
    DEFAULT_MAX_DEPTH,
    build_dependency_tree,
    count_nodes,
    would_create_cycle,
)
from .models import (
    DependencyNode,
    PriorityLevel,
    SubtaskNode,
    Todo,
    TodoStatus,
    WorkState,
    WorkTime,
    as_utc,
    elapsed_seconds,
    utcnow,
)
from .worktime import current_work_time, format_duration

__all__ = [
    # Models
    "Todo",
    "TodoStatus",
    "WorkState",
    "PriorityLevel",
    "DependencyNode",
    "SubtaskNode",
    "WorkTime",
    "utcnow",
    "as_utc",
    "elapsed_seconds",
    # Graph
    "DEFAULT_MAX_DEPTH",
    "would_create_cycle",
    "build_dependency_tree",
    "count_nodes",
    # Work time
    "current_work_time",
    "format_duration",
]
