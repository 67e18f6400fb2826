"""Work period CLI commands."""

from datetime import datetime

import typer
from rich.markup import escape
from rich.table import Table

from toodo.domain.todo import format_duration
from toodo.interfaces.cli.common import (
    format_date,
    get_console,
    print_info,
    print_success,
    service_scope,
)

app = typer.Typer(help="Work period commands")


@app.command("add")
def add(
    name: str,
    start: datetime = typer.Argument(..., help="Start time (UTC), e.g. 2025-05-01T09:00:00"),
    end: datetime = typer.Argument(..., help="End time (UTC)"),
    date: datetime | None = typer.Option(None, "--date", help="Day to file the period under"),
) -> None:
    """Create a work period.

    Example:
        toodo period add "Morning" 2025-05-01T09:00:00 2025-05-01T12:00:00
    """
    with service_scope() as services:
        work_period = services.work_periods.create(name, start, end, date=date)
    print_success(f"Created work period {work_period.id}")


@app.command("list")
def list_periods(
    start_date: datetime | None = typer.Option(None, "--from"),
    end_date: datetime | None = typer.Option(None, "--to"),
) -> None:
    with service_scope() as services:
        work_periods = services.work_periods.list_all(start_date, end_date)
    if not work_periods:
        print_info("No work periods yet.")
        return
    table = Table(title="Work periods")
    table.add_column("ID", no_wrap=True)
    table.add_column("Name")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Length", justify="right")
    for work_period in work_periods:
        table.add_row(
            work_period.id,
            escape(work_period.name),
            format_date(work_period.start_time),
            format_date(work_period.end_time),
            format_duration(work_period.duration_seconds),
        )
    get_console().print(table)


@app.command("rename")
def rename(work_period_id: str, name: str) -> None:
    with service_scope() as services:
        services.work_periods.update(work_period_id, name=name)
    print_success(f"Renamed work period {work_period_id}")


@app.command("delete")
def delete(work_period_id: str) -> None:
    """Delete a work period. Its activities are kept."""
    with service_scope() as services:
        services.work_periods.delete(work_period_id)
    print_success(f"Deleted work period {work_period_id}")


@app.command("assign")
def assign(work_period_id: str, activity_id: str) -> None:
    """Attribute a recorded activity to a work period."""
    with service_scope() as services:
        services.work_periods.assign_activity(work_period_id, activity_id)
    print_success(f"Assigned activity {activity_id}")


@app.command("unassign")
def unassign(work_period_id: str, activity_id: str) -> None:
    with service_scope() as services:
        services.work_periods.unassign_activity(work_period_id, activity_id)
    print_success(f"Unassigned activity {activity_id}")


@app.command("stats")
def stats(
    start_date: datetime | None = typer.Option(None, "--from"),
    end_date: datetime | None = typer.Option(None, "--to"),
) -> None:
    """Show period time, activity time and utilization."""
    with service_scope() as services:
        statistics = services.work_periods.statistics(start_date, end_date)
    console = get_console()
    console.print(f"Work periods:   {statistics.work_period_count}")
    console.print(f"Period time:    {format_duration(statistics.total_work_period_time)}")
    console.print(f"Activity time:  {format_duration(statistics.total_activity_time)}")
    console.print(f"Utilization:    {statistics.utilization_rate:.0%}")
