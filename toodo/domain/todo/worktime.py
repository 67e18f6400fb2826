"""Work-time calculation and formatting."""

from datetime import datetime

from .models import Todo, WorkState, elapsed_seconds, utcnow


def current_work_time(todo: Todo, now: datetime | None = None) -> int:
    """Accumulated work time plus the running interval if the todo is active.

    The running interval is added on the fly and never persisted.
    """
    if todo.work_state != WorkState.ACTIVE:
        return todo.total_work_time
    return todo.total_work_time + elapsed_seconds(todo.last_state_change_at, now or utcnow())


def format_duration(seconds: int) -> str:
    """Render seconds as a compact string such as "1h 1m" or "1m 30s".

    Hours are always paired with minutes, even zero minutes. Minutes are
    otherwise shown only when nonzero. Seconds are shown when nonzero or
    when nothing else would be, so zero renders as "0s".

    Examples:
        >>> format_duration(3660)
        '1h 1m'
        >>> format_duration(90)
        '1m 30s'
        >>> format_duration(0)
        '0s'
    """
    hours, remainder = divmod(max(seconds, 0), 3600)
    minutes, secs = divmod(remainder, 60)

    parts: list[str] = []
    if hours:
        parts.append(f"{hours}h")
        parts.append(f"{minutes}m")
    elif minutes:
        parts.append(f"{minutes}m")

    if secs or not parts:
        parts.append(f"{secs}s")

    return " ".join(parts)
