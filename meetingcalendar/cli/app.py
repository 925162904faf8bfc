"""
Main CLI application using Typer.
"""

import logging
from pathlib import Path
from typing import List, Optional, Annotated

import pendulum
import typer
from pendulum import DateTime
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .. import __version__
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import MeetingCalendarError
from ..domain.slot_calculator import SlotCalculator

app = typer.Typer(
    name="meetingcalendar",
    help="Find common free time for meetings across personal calendars",
    add_completion=False
)

console = Console()

logger = logging.getLogger(__name__)

DATE_FORMATS = ("YYYY-MM-DD HH:mm", "YYYY-MM-DD")


def configure_logging(verbose: bool = False) -> None:
    """Route log records through Rich; DEBUG when verbose, else WARNING."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True
    )


def _parse_date_option(value: str, tz: str, *, is_end: bool) -> DateTime:
    """
    Parse a --start/--end value.

    A bare date means the start of that day for --start and the start of the
    following day for --end, so the whole day is searched.
    """
    value = value.strip()
    for fmt in DATE_FORMATS:
        try:
            parsed = pendulum.from_format(value, fmt, tz=tz)
        except ValueError:
            continue
        if fmt == "YYYY-MM-DD" and is_end:
            return parsed.start_of("day").add(days=1)
        return parsed

    raise typer.BadParameter(
        f"Cannot parse '{value}', expected YYYY-MM-DD or 'YYYY-MM-DD HH:mm'"
    )


def _determine_time_range(
    *,
    tz: str,
    search_days: int,
    this_week: bool,
    next_week: bool,
    start_option: Optional[str],
    end_option: Optional[str]
):
    """
    Resolve the desired time window based on shortcut flags or explicit dates.
    Returns (start_date, end_date).
    """
    if this_week and next_week:
        raise typer.BadParameter("--this-week and --next-week cannot be used together.")

    now = pendulum.now(tz)

    if this_week:
        return now, now.end_of("week").add(microseconds=1)

    if next_week:
        next_monday = now.next(pendulum.MONDAY).start_of("day")
        return next_monday, next_monday.add(days=7)

    if start_option:
        start_date = _parse_date_option(start_option, tz, is_end=False)
    else:
        start_date = now

    if end_option:
        end_date = _parse_date_option(end_option, tz, is_end=True)
    else:
        end_date = start_date.start_of("day").add(days=search_days)

    return start_date, end_date


@app.command()
def find(
    people: Annotated[Optional[List[str]], typer.Argument(help="People to invite (e.g. 'adam eve'). Defaults to everybody.")] = None,
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")] = None,
    start: Annotated[Optional[str], typer.Option("--start", help="Start (YYYY-MM-DD or 'YYYY-MM-DD HH:mm')")] = None,
    end: Annotated[Optional[str], typer.Option("--end", help="End, exclusive (YYYY-MM-DD or 'YYYY-MM-DD HH:mm')")] = None,
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Minimum meeting duration in minutes (0: any)")] = None,
    max_results: Annotated[Optional[int], typer.Option("--max-results", "-n", help="Maximum number of slots to show")] = None,
    workers: Annotated[Optional[int], typer.Option("--workers", help="Number of worker threads")] = None,
    timeout: Annotated[Optional[float], typer.Option("--timeout", help="Give up after this many seconds")] = None,
    this_week: Annotated[bool, typer.Option("--this-week", help="Search from now until the end of this week.")] = False,
    next_week: Annotated[bool, typer.Option("--next-week", help="Search next week (Monday to Sunday).")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")] = False,
):
    """
    Find free slots that all selected people can attend.

    Examples:

        meetingcalendar find

        meetingcalendar find adam eve --duration 60

        meetingcalendar find adam eve --next-week -n 3

        meetingcalendar find adam --start "2024-01-15 09:00" --end 2024-01-19
    """
    configure_logging(verbose)

    try:
        config_path = config_file or get_default_config_path()
        config = AppConfig.load_from_yaml(config_path)
        tz = config.timezone

        time_start, time_end = _determine_time_range(
            tz=tz,
            search_days=config.defaults.search_days,
            this_week=this_week,
            next_week=next_week,
            start_option=start,
            end_option=end
        )

        calendars = config.build_calendars(people or [])
        query = config.build_query(
            time_start,
            time_end,
            duration_minutes=duration,
            max_results=max_results
        )

        console.print("[bold cyan]Summary:[/bold cyan]")
        console.print(f"   People: {', '.join(c.name for c in calendars) or '-'}")
        console.print(f"   Window: {query.window}")
        console.print(f"   Minimum duration: {int(query.min_duration.total_seconds() // 60)} minutes")
        console.print()

        calculator = SlotCalculator(
            max_workers=workers if workers is not None else config.defaults.max_workers
        )
        deadline = pendulum.now(tz).add(seconds=timeout) if timeout is not None else None

        slots = calculator.find_time_for_meeting(query, calendars, deadline=deadline)

    except typer.BadParameter as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)

    except FileNotFoundError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)

    except (MeetingCalendarError, ValueError) as e:
        logger.debug("Search failed", exc_info=True)
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)

    if not slots:
        console.print(
            "[yellow]No free slots found.[/yellow]\n"
            "Try a longer period or a shorter minimum duration."
        )
        return

    table = Table(
        title=f"{len(slots)} free slot(s)",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("#", justify="right", style="dim")
    table.add_column("Slot", style="bold")

    for idx, slot in enumerate(slots, 1):
        table.add_row(str(idx), slot.format_display())

    console.print(table)


@app.command()
def list_people(
    config_file: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Path to config file"
    )
):
    """
    List all configured people.
    """
    try:
        config_path = config_file or get_default_config_path()
        config = AppConfig.load_from_yaml(config_path)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)

    if not config.people:
        console.print("[yellow]No people defined in the config file.[/yellow]")
        return

    table = Table(
        title="Configured people",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Name", style="bold yellow")
    table.add_column("Working hours")
    table.add_column("Bookings", justify="right", style="dim")

    for person in config.people:
        table.add_row(
            person.name,
            str(person.working.to_working_hours()),
            str(len(person.busy))
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    console.print(f"\n[bold cyan]meetingcalendar[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
